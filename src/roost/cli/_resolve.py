"""Locate the Router a CLI command should inspect."""

from roost.dispatch import load_object
from roost.routing.router import Router

DEFAULT_ROUTER_ATTR = "router"


def resolve_router(target: str) -> Router:
    """Load the Router named by *target*.

    ``"myapp.urls"`` means ``myapp.urls:router``; ``"myapp.urls:api.routes"``
    walks dotted attributes. A callable that is not itself a Router is a
    factory and gets called once with no arguments. Errors from the import,
    the attribute walk, and the factory propagate as raised.
    """
    module_path, _, attr_path = target.partition(":")
    if not module_path:
        msg = f"{target!r} names no module"
        raise ValueError(msg)

    obj = load_object(module_path, attr_path or DEFAULT_ROUTER_ATTR)
    if callable(obj) and not isinstance(obj, Router):
        obj = obj()
    if not isinstance(obj, Router):
        msg = f"{target!r} gave {type(obj).__name__}, expected a roost Router"
        raise TypeError(msg)
    return obj
