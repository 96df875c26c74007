"""Router — registration, removal, and matching behind one object.

Usage::

    router = Router()
    router.get("/users", list_users)
    router.get("/users/{id:int}[/{tab}]", show_user, name="users.show")
    router.map(["PUT", "PATCH"], "/users/{id:int}", update_user)

    match = router.match("GET", "/users/42/posts")
    match.action, match.params   # show_user, {"id": "42", "tab": "posts"}

    router.url_for("users.show", id=42)   # "/users/42"
"""

from collections.abc import Callable, Collection, Iterable, Mapping
from typing import Any

from roost.config import RouterConfig
from roost.routing.collection import RouteCollection
from roost.routing.group import RouteGroup
from roost.routing.matcher import Matcher
from roost.routing.parser import Parser
from roost.routing.resource import register_resource
from roost.routing.route import Route, RouteMatch
from roost.routing.urls import url_for
from roost.routing.wildcards import WildcardRegistry


class Router:
    """URL router with static lookup and grouped-regex dynamic matching.

    Each Router owns its configuration, wildcard registry, store, and
    matcher; nothing is shared between instances.
    """

    __slots__ = ("collection", "config", "matcher", "parser")

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config = config or RouterConfig()
        self.parser = Parser(WildcardRegistry(self.config.wildcards))
        self.collection = RouteCollection(self.config, self.parser)
        self.matcher = Matcher(self.collection)

    # -- Registration ------------------------------------------------------

    def set(
        self,
        method: str,
        pattern: str,
        action: Any,
        strategy: Any = None,
        *,
        name: str | None = None,
        defaults: Mapping[str, Any] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> RouteGroup:
        """Register *action* for *method* and *pattern*.

        Returns a RouteGroup because optional segments can expand one
        pattern into several routes.
        """
        routes = self.collection.insert(
            method,
            pattern,
            action,
            strategy,
            name=name,
            defaults=defaults,
            metadata=metadata,
        )
        return RouteGroup(self.collection, routes)

    def get(self, pattern: str, action: Any, strategy: Any = None, **options: Any) -> RouteGroup:
        return self.set("GET", pattern, action, strategy, **options)

    def post(self, pattern: str, action: Any, strategy: Any = None, **options: Any) -> RouteGroup:
        return self.set("POST", pattern, action, strategy, **options)

    def put(self, pattern: str, action: Any, strategy: Any = None, **options: Any) -> RouteGroup:
        return self.set("PUT", pattern, action, strategy, **options)

    def patch(self, pattern: str, action: Any, strategy: Any = None, **options: Any) -> RouteGroup:
        return self.set("PATCH", pattern, action, strategy, **options)

    def delete(self, pattern: str, action: Any, strategy: Any = None, **options: Any) -> RouteGroup:
        return self.set("DELETE", pattern, action, strategy, **options)

    def map(
        self,
        methods: Iterable[str],
        pattern: str,
        action: Any,
        strategy: Any = None,
        **options: Any,
    ) -> RouteGroup:
        """Register the same pattern and action under several methods."""
        group = RouteGroup(self.collection)
        for method in methods:
            group.extend(self.set(method, pattern, action, strategy, **options))
        return group

    def any(self, pattern: str, action: Any, strategy: Any = None, **options: Any) -> RouteGroup:
        """Register under every configured method."""
        return self.map(self.config.methods, pattern, action, strategy, **options)

    def except_(
        self,
        methods: str | Collection[str],
        pattern: str,
        action: Any,
        strategy: Any = None,
        **options: Any,
    ) -> RouteGroup:
        """Register under every configured method but *methods*."""
        if isinstance(methods, str):
            methods = [methods]
        excluded = {method.upper() for method in methods}
        return self.map(
            [method for method in self.config.methods if method not in excluded],
            pattern,
            action,
            strategy,
            **options,
        )

    def route(
        self,
        pattern: str,
        methods: Iterable[str] = ("GET",),
        **options: Any,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of ``map``. Returns the function unchanged.

        ::

            @router.route("/users/{id:int}", methods=["GET", "HEAD"], name="user")
            def show_user(id): ...
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.map(methods, pattern, func, **options)
            return func

        return decorator

    def group(self, routes: Iterable[Route] | Iterable[RouteGroup]) -> RouteGroup:
        """Bundle existing routes (or groups) for bulk edits."""
        group = RouteGroup(self.collection)
        for item in routes:
            if isinstance(item, RouteGroup):
                group.extend(item)
            else:
                group.extend([item])
        return group

    def resource(self, controller: Any, **options: Any) -> RouteGroup:
        """Register the REST resource routes for *controller*."""
        return register_resource(self.collection, controller, **options)

    def resources(self, controllers: Iterable[Any]) -> RouteGroup:
        group = RouteGroup(self.collection)
        for controller in controllers:
            group.extend(self.resource(controller))
        return group

    # -- Removal / edits ---------------------------------------------------

    def forget(self, method: str, pattern: str) -> None:
        """Remove the routes for *method* and *pattern*. No-op if absent."""
        self.collection.remove(method, pattern)

    def replace(self, old: Route, new: Route) -> Route:
        return self.collection.replace(old, new)

    # -- Query -------------------------------------------------------------

    def match(self, method: str, path: str, *, quiet: bool = False) -> RouteMatch | None:
        """Resolve *method* and *path*. See ``Matcher.match``."""
        return self.matcher.match(method, path, quiet=quiet)

    def allowed_methods(self, path: str) -> frozenset[str]:
        return self.matcher.allowed_methods(path)

    def url_for(self, name: str, /, **params: Any) -> str:
        """Build the path for the route registered as *name*."""
        path = url_for(self.collection.find_named(name), name, params)
        return self.config.base_path + path if self.config.base_path else path

    @property
    def routes(self) -> list[Route]:
        return self.collection.routes

    def __len__(self) -> int:
        return len(self.collection)

    # -- Wildcards ---------------------------------------------------------

    @property
    def wildcards(self) -> dict[str, str]:
        return dict(self.parser.wildcards)

    def get_wildcard(self, name: str) -> str | None:
        return self.parser.wildcards.get(name)

    def set_wildcard(self, name: str, regex: str) -> "Router":
        """Define or override a wildcard. Affects routes registered afterwards."""
        self.parser.wildcards.set(name, regex)
        return self
