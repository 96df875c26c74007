"""Reverse URL generation — fill a route's placeholders back in."""

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote, urlencode

from roost.errors import MissingParameterError, UnknownRouteError
from roost.routing.parser import iter_placeholders
from roost.routing.route import Route


def build_url(route: Route, params: Mapping[str, Any]) -> str:
    """Substitute *params* into *route*'s placeholders.

    Values are percent-encoded as single path segments. Params that name no
    placeholder are appended as a query string::

        build_url(Route("GET", "/users/{id:\\d+}", ...), {"id": 7, "tab": "posts"})
        # "/users/7?tab=posts"

    Raises ``MissingParameterError`` when a placeholder has no value.
    """
    parts: list[str] = []
    used: set[str] = set()
    cursor = 0
    for placeholder in iter_placeholders(route.pattern):
        if placeholder.name not in params:
            raise MissingParameterError(placeholder.name, route.name)
        parts.append(route.pattern[cursor : placeholder.start])
        parts.append(quote(str(params[placeholder.name]), safe=""))
        used.add(placeholder.name)
        cursor = placeholder.end
    parts.append(route.pattern[cursor:])

    url = "".join(parts)
    extra = {key: value for key, value in params.items() if key not in used}
    if extra:
        url = f"{url}?{urlencode(extra, doseq=True)}"
    return url


def url_for(routes: Sequence[Route], name: str, params: Mapping[str, Any]) -> str:
    """Build a URL from the best route registered under *name*.

    Routes sharing a name usually come from optional segments. The one with
    the most placeholders that *params* fully covers wins.
    """
    if not routes:
        msg = f"No route named {name!r}"
        raise UnknownRouteError(msg)

    candidates = sorted(routes, key=lambda route: len(route.params), reverse=True)
    for route in candidates:
        if all(param in params for param in route.params):
            return build_url(route, params)
    # Nothing fully covered: report against the shortest variant
    return build_url(candidates[-1], params)
