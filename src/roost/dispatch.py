"""Dispatch — turn a RouteMatch into a call.

The router treats actions as opaque. This module is the collaborator that
knows their shapes:

- any callable: called with the merged params as keyword arguments
- ``(target, "attr")``: *target* is a class, an instance, or an import string
- ``"module:Class.method"`` / ``"module:function"`` import strings

Import strings and attribute names may hold ``{placeholder}`` templates
filled from the matched params, so ``"app.controllers:{kind}Controller.show"``
with ``kind="blog-post"`` resolves ``BlogPostController.show``.

Handlers and strategies can be ``def`` or ``async def``; ``invoke`` awaits
whatever comes back awaitable.
"""

import importlib
import inspect
import logging
import re
from collections.abc import Callable, Mapping
from typing import Any, Protocol, cast, runtime_checkable

import anyio

from roost.errors import BadRouteError, BadRouteKind, BadStrategyError
from roost.routing.route import RouteMatch
from roost.routing.router import Router

logger = logging.getLogger("roost.dispatch")

Container = Callable[[type], Any]

_TEMPLATE = re.compile(r"\{(\w+)\}")


@runtime_checkable
class Strategy(Protocol):
    """Knows how to call one action shape.

    ``call`` receives the match and the already-resolved callable, and
    returns whatever the caller expects back (a response, a value, ...).
    """

    def call(self, match: RouteMatch, action: Callable[..., Any]) -> Any: ...


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def _camel(value: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_\s]+", value) if part)


def fill_template(fragment: str, params: Mapping[str, Any], *, camel: bool = False) -> str:
    """Replace ``{name}`` in *fragment* with the matching param.

    ``camel=True`` produces class-style names (``blog-post`` -> ``BlogPost``);
    otherwise dashes become underscores (``blog-post`` -> ``blog_post``).
    Unknown placeholders are left in place.
    """

    def substitute(found: re.Match[str]) -> str:
        key = found.group(1)
        if key not in params:
            return found.group(0)
        value = str(params[key])
        return _camel(value) if camel else value.replace("-", "_")

    return _TEMPLATE.sub(substitute, fragment)


def load_object(module_path: str, attr_path: str) -> Any:
    """Import *module_path* and walk the dotted *attr_path* on it.

    ``ImportError`` and ``AttributeError`` propagate unchanged.
    """
    obj: Any = importlib.import_module(module_path)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)
    return obj


def import_string(import_string: str) -> Any:
    """Resolve ``"module:attr.path"`` to the object it names.

    Raises ``BadRouteError`` when the module or attribute cannot be found.
    """
    module_path, _, attr_path = import_string.partition(":")
    if not module_path or not attr_path:
        raise BadRouteError(
            BadRouteKind.INVALID_ACTION,
            f"{import_string!r} must look like 'module:attribute'.",
        )
    try:
        return load_object(module_path, attr_path)
    except (ImportError, AttributeError) as exc:
        raise BadRouteError(BadRouteKind.INVALID_ACTION, f"{import_string!r}: {exc}") from exc


def _instantiate(cls: type, container: Container | None) -> Any:
    return container(cls) if container is not None else cls()


def resolve_action(
    action: Any,
    params: Mapping[str, Any],
    container: Container | None = None,
) -> Callable[..., Any]:
    """Resolve a route action to a callable.

    Classes named by an action are instantiated through *container* when
    given, else called with no arguments.
    """
    if isinstance(action, str):
        module_path, sep, attr_path = action.partition(":")
        owner_path, dot, method = attr_path.rpartition(".")
        if sep and dot:
            target: Any = f"{module_path}:{owner_path}"
            action = (target, method)
        else:
            resolved = import_string(fill_template(action, params, camel=True))
            if isinstance(resolved, type):
                resolved = _instantiate(resolved, container)
            if not callable(resolved):
                raise BadRouteError(BadRouteKind.INVALID_ACTION, f"{action!r} is not callable.")
            return resolved

    if isinstance(action, tuple | list) and len(action) == 2:
        target, method = action
        if isinstance(target, str):
            target = import_string(fill_template(target, params, camel=True))
        if isinstance(target, type):
            target = _instantiate(target, container)
        method = fill_template(str(method), params)
        handler = getattr(target, method, None)
        if handler is None or not callable(handler):
            raise BadRouteError(
                BadRouteKind.INVALID_ACTION,
                f"{type(target).__qualname__} has no callable {method!r}.",
            )
        return handler

    if callable(action):
        return action

    raise BadRouteError(BadRouteKind.INVALID_ACTION, repr(action))


def resolve_strategy(strategy: Any, container: Container | None = None) -> Strategy:
    """Instantiate a strategy given as class or import string, then check it.

    Raises ``BadStrategyError`` if the result has no ``call`` method.
    """
    if isinstance(strategy, str):
        strategy = import_string(strategy)
    if isinstance(strategy, type):
        strategy = _instantiate(strategy, container)
    if not isinstance(strategy, Strategy):
        raise BadStrategyError(strategy)
    return strategy


class Dispatcher:
    """Matches a request and calls the route's action.

    Usage::

        dispatcher = Dispatcher(router)
        result = await dispatcher.dispatch("GET", "/users/42")

        # from synchronous code
        result = dispatcher.dispatch_sync("GET", "/users/42")
    """

    __slots__ = ("container", "router")

    def __init__(self, router: Router, container: Container | None = None) -> None:
        self.router = router
        self.container = container

    async def dispatch(self, method: str, path: str) -> Any:
        """Match *method* and *path*, then call the action.

        ``NotFound`` and ``MethodNotAllowed`` propagate to the caller.
        """
        # Without quiet=True a miss raises instead of returning None.
        match = cast(RouteMatch, self.router.match(method, path))
        return await self.call(match)

    async def call(self, match: RouteMatch) -> Any:
        action = resolve_action(match.action, match.params, self.container)
        if match.strategy is None:
            return await invoke(action, **match.merged_params)
        strategy = resolve_strategy(match.strategy, self.container)
        logger.debug(
            "Dispatching %s %s through %s",
            match.route.method,
            match.route.pattern,
            type(strategy).__qualname__,
        )
        return await invoke(strategy.call, match, action)

    def dispatch_sync(self, method: str, path: str) -> Any:
        """Blocking ``dispatch`` for callers without an event loop."""
        return anyio.run(self.dispatch, method, path)
