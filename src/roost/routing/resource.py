"""REST resources — seven conventional routes for one controller.

``router.resource(PhotoController)`` registers::

    GET     /photo               index
    GET     /photo/make          make
    POST    /photo               create
    GET     /photo/{id:int}      show
    GET     /photo/{id:int}/edit edit
    PUT     /photo/{id:int}      update
    DELETE  /photo/{id:int}      delete

Each action is the pair ``(controller, action_name)`` and each route is
named ``"{resource}.{action}"``. Resolving the pair to a call is the
dispatcher's job.
"""

from collections.abc import Collection, Mapping
from typing import TYPE_CHECKING, Any

from roost.routing.group import RouteGroup

if TYPE_CHECKING:
    from roost.routing.collection import RouteCollection

RESOURCE_ACTIONS: dict[str, tuple[str, str]] = {
    "index": ("GET", "/{name}"),
    "make": ("GET", "/{name}/make"),
    "create": ("POST", "/{name}"),
    "show": ("GET", "/{name}/{id:int}"),
    "edit": ("GET", "/{name}/{id:int}/edit"),
    "update": ("PUT", "/{name}/{id:int}"),
    "delete": ("DELETE", "/{name}/{id:int}"),
}

_TRANSLATABLE = ("make", "edit")


def resource_name(controller: Any) -> str:
    """``PhotoController`` / ``"PhotoController"`` -> ``"photo"``."""
    if isinstance(controller, str):
        raw = controller.rpartition(":")[2].rpartition(".")[2]
    elif isinstance(controller, type):
        raw = controller.__name__
    else:
        raw = type(controller).__name__
    return raw.lower().removesuffix("controller")


def resource_actions(
    only: Collection[str] | None = None,
    exclude: Collection[str] | None = None,
) -> dict[str, tuple[str, str]]:
    if only is not None:
        return {action: spec for action, spec in RESOURCE_ACTIONS.items() if action in only}
    if exclude is not None:
        return {action: spec for action, spec in RESOURCE_ACTIONS.items() if action not in exclude}
    return dict(RESOURCE_ACTIONS)


def resource_path(
    action: str,
    path: str,
    name: str,
    translate: Mapping[str, str] | None = None,
) -> str:
    if translate and action in _TRANSLATABLE and action in translate:
        path = path.replace(action, translate[action])
    return path.replace("{name}", name)


def register_resource(
    collection: "RouteCollection",
    controller: Any,
    *,
    only: Collection[str] | None = None,
    exclude: Collection[str] | None = None,
    name: str | None = None,
    prefix: str = "",
    translate: Mapping[str, str] | None = None,
) -> RouteGroup:
    """Register the resource routes for *controller* on *collection*."""
    base = prefix.strip("/") + "/" if prefix.strip("/") else ""
    full_name = base + (name or resource_name(controller))
    group = RouteGroup(collection)
    for action, (method, path) in resource_actions(only, exclude).items():
        group.extend(
            collection.insert(
                method,
                resource_path(action, path, full_name, translate),
                (controller, action),
                name=f"{full_name}.{action}",
            )
        )
    return group
