"""RouteGroup — bulk edits over the routes one registration produced.

Routes are frozen, so every edit builds a new Route and swaps it into the
store with ``RouteCollection.replace``. The group tracks the swapped-in
routes, so chained edits keep working::

    router.get("/users[/{page:int}]", list_users).set_prefix("/api").set_name("users")
"""

import dataclasses
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, Self

from roost.routing.parser import iter_placeholders
from roost.routing.route import Route

if TYPE_CHECKING:
    from roost.routing.collection import RouteCollection


class RouteGroup:
    """An ordered set of routes bound to the store that holds them."""

    __slots__ = ("_collection", "_routes")

    def __init__(self, collection: "RouteCollection", routes: Iterable[Route] = ()) -> None:
        self._collection = collection
        self._routes: list[Route] = list(routes)

    # -- Sequence protocol -------------------------------------------------

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __getitem__(self, index: int) -> Route:
        return self._routes[index]

    def __repr__(self) -> str:
        inner = ", ".join(f"{r.method} {r.pattern}" for r in self._routes)
        return f"RouteGroup([{inner}])"

    def all(self) -> list[Route]:
        return list(self._routes)

    def nth(self, number: int) -> Route:
        return self._routes[number]

    def extend(self, other: "RouteGroup | Iterable[Route]") -> Self:
        self._routes.extend(other)
        return self

    # -- Store operations --------------------------------------------------

    def forget(self) -> Self:
        for route in self._routes:
            self._collection.remove(route.method, route.pattern)
        return self

    def _update(self, change: Callable[[Route], Route]) -> Self:
        # Track each swap as it lands so a rejected edit leaves the group
        # pointing at what the store actually holds.
        for index, route in enumerate(self._routes):
            self._routes[index] = self._collection.replace(route, change(route))
        return self

    def set_method(self, method: str) -> Self:
        method = self._collection.valid_method(method)
        return self._update(lambda route: dataclasses.replace(route, method=method))

    def set_action(self, action: Any) -> Self:
        return self._update(lambda route: dataclasses.replace(route, action=action))

    def set_strategy(self, strategy: Any) -> Self:
        return self._update(lambda route: dataclasses.replace(route, strategy=strategy))

    def set_name(self, name: str | None) -> Self:
        return self._update(lambda route: dataclasses.replace(route, name=name))

    def set_prefix(self, prefix: str) -> Self:
        """Prepend *prefix* to every pattern (``"api"`` -> ``"/api/..."``).

        An empty or ``"/"`` prefix leaves the patterns alone.
        """
        prefix = prefix.strip("/")

        def prefixed(route: Route) -> Route:
            if not prefix:
                return route
            pattern = f"/{prefix}{route.pattern}".rstrip("/")
            return dataclasses.replace(route, pattern=pattern)

        return self._update(prefixed)

    def set_defaults(self, defaults: Mapping[str, Any]) -> Self:
        return self._update(lambda route: dataclasses.replace(route, defaults=dict(defaults)))

    def set_default(self, key: str, value: Any) -> Self:
        return self._update(
            lambda route: dataclasses.replace(route, defaults={**route.defaults, key: value})
        )

    def set_metadata(self, key: str, value: Any) -> Self:
        return self._update(
            lambda route: dataclasses.replace(route, metadata={**route.metadata, key: value})
        )

    def set_metadata_dict(self, metadata: Mapping[str, Any]) -> Self:
        return self._update(lambda route: dataclasses.replace(route, metadata=dict(metadata)))

    def set_constraint(self, param: str, regex: str) -> Self:
        """Constrain placeholder *param* to *regex* (wildcard names allowed).

        Routes without that placeholder are left as they are.
        """
        regex = self._collection.parser.wildcards.expand(regex)

        def constrained(route: Route) -> Route:
            for placeholder in iter_placeholders(route.pattern):
                if placeholder.name == param:
                    pattern = (
                        route.pattern[: placeholder.start]
                        + f"{{{param}:{regex}}}"
                        + route.pattern[placeholder.end :]
                    )
                    return dataclasses.replace(route, pattern=pattern)
            return route

        return self._update(constrained)
