"""Roost — URL routing with grouped-regex matching.

Resolves an HTTP method and path to a registered action plus the path
parameters captured on the way. A library, not a server.

Basic usage::

    from roost import Router

    router = Router()
    router.get("/users/{id:int}[/{tab}]", show_user, name="user")

    match = router.match("GET", "/users/42")
    match.action, match.params   # show_user, {"id": "42"}

Calling the action, sync or async::

    from roost import Dispatcher
    result = Dispatcher(router).dispatch_sync("GET", "/users/42")
"""

import importlib

__version__ = "0.1.0"
__all__ = [
    "BadRouteError",
    "BadRouteKind",
    "BadStrategyError",
    "ConfigurationError",
    "Dispatcher",
    "HTTPError",
    "MalformedURLError",
    "MethodNotAllowed",
    "MethodNotSupported",
    "MissingParameterError",
    "NotFound",
    "RoostError",
    "Route",
    "RouteGroup",
    "RouteMatch",
    "Router",
    "RouterConfig",
    "Strategy",
    "UnknownRouteError",
]

# Public name -> defining module. Imported on first attribute access.
_LAZY_IMPORTS: dict[str, str] = {
    "Router": "roost.routing.router",
    "RouterConfig": "roost.config",
    "Route": "roost.routing.route",
    "RouteMatch": "roost.routing.route",
    "RouteGroup": "roost.routing.group",
    "Dispatcher": "roost.dispatch",
    "Strategy": "roost.dispatch",
    "BadRouteError": "roost.errors",
    "BadRouteKind": "roost.errors",
    "BadStrategyError": "roost.errors",
    "ConfigurationError": "roost.errors",
    "HTTPError": "roost.errors",
    "MalformedURLError": "roost.errors",
    "MethodNotAllowed": "roost.errors",
    "MethodNotSupported": "roost.errors",
    "MissingParameterError": "roost.errors",
    "NotFound": "roost.errors",
    "RoostError": "roost.errors",
    "UnknownRouteError": "roost.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(importlib.import_module(module_path), name)
