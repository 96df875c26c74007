"""Route store — static routes by exact path, dynamic routes by bucket.

Static routes live in ``statics[method][path]`` and are found with one dict
lookup. Dynamic routes are grouped by ``(method, segment_count)`` so only
routes with the same structural shape are ever compiled into one regex.
"""

import itertools
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from roost.config import RouterConfig
from roost.errors import BadRouteError, BadRouteKind, MethodNotSupported
from roost.routing.parser import Parser, is_dynamic, segment_count
from roost.routing.route import Route
from roost.routing.wildcards import WildcardRegistry

logger = logging.getLogger("roost.routing")

BucketKey = tuple[str, int]


@dataclass(slots=True)
class Bucket:
    """Dynamic routes sharing one ``(method, segment_count)`` key.

    ``version`` changes on every mutation; compiled groups cached for an
    older version are stale.
    """

    key: BucketKey
    routes: dict[str, Route] = field(default_factory=dict)
    version: int = 0

    def __len__(self) -> int:
        return len(self.routes)


class RouteCollection:
    """Holds, classifies, and finds routes.

    Usage::

        store = RouteCollection()
        store.insert("GET", "/users/{id:int}", show_user)
        store.find_static("GET", "/users")           # None
        store.find_dynamic_bucket("GET", 2)          # Bucket with one route
    """

    __slots__ = ("_dynamics", "_named", "_statics", "_versions", "config", "parser")

    def __init__(
        self,
        config: RouterConfig | None = None,
        parser: Parser | None = None,
    ) -> None:
        self.config = config or RouterConfig()
        self.parser = parser or Parser(WildcardRegistry(self.config.wildcards))
        self._statics: dict[str, dict[str, Route]] = {}
        self._dynamics: dict[BucketKey, Bucket] = {}
        self._named: dict[str, list[Route]] = {}
        self._versions = itertools.count(1)

    # -- Registration ------------------------------------------------------

    def valid_method(self, method: str) -> str:
        """Return *method* upper-cased, or raise ``MethodNotSupported``."""
        normalized = method.upper()
        if normalized not in self.config.methods:
            raise MethodNotSupported(method, self.config.methods)
        return normalized

    def insert(
        self,
        method: str,
        pattern: str,
        action: Any,
        strategy: Any = None,
        *,
        name: str | None = None,
        defaults: Mapping[str, Any] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> list[Route]:
        """Parse *pattern* and store one route per concrete pattern.

        Optional segments yield several routes; all share the action,
        strategy, name, defaults, and metadata.
        """
        method = self.valid_method(method)
        routes = [
            Route(
                method=method,
                pattern=concrete,
                action=action,
                strategy=strategy,
                name=name,
                defaults=dict(defaults or {}),
                metadata=dict(metadata or {}),
            )
            for concrete in self.parser.parse_pattern(pattern)
        ]
        for route in routes:
            self.add(route)
        return routes

    def add(self, route: Route) -> Route:
        """Store a prebuilt route, overwriting one with the same method + pattern."""
        self.valid_method(route.method)
        if len(route.params) + 1 > self.config.max_group_count:
            raise BadRouteError(
                BadRouteKind.TOO_MANY_PLACEHOLDERS,
                f"{route.pattern!r} has {len(route.params)} placeholders; "
                f"the limit is {self.config.max_group_count - 1}.",
            )

        previous = self._lookup(route.method, route.pattern)
        if previous is not None:
            logger.debug("Overwriting route %s %s", route.method, route.pattern)
            self._unname(previous)

        if route.is_static:
            self._statics.setdefault(route.method, {})[route.pattern] = route
        else:
            bucket = self._bucket(route.method, route.segment_count, create=True)
            bucket.routes[route.pattern] = route
            bucket.version = next(self._versions)

        if route.name is not None:
            self._named.setdefault(route.name, []).append(route)
        logger.debug("Registered route %s %s", route.method, route.pattern)
        return route

    def remove(self, method: str, pattern: str) -> list[Route]:
        """Remove every route registered for *method* and *pattern*.

        *pattern* may be the raw registered pattern (optional segments and
        wildcards are expanded) or a concrete one. Removing something that
        is not there is a no-op.
        """
        method = method.upper()
        removed: list[Route] = []
        for concrete in self._concrete_patterns(pattern):
            try:
                route = self._pop(method, concrete)
            except BadRouteError:
                continue
            if route is not None:
                removed.append(route)
                logger.debug("Forgot route %s %s", method, concrete)
        return removed

    def replace(self, old: Route, new: Route) -> Route:
        """Swap *old* for *new* as one store operation.

        Validation of *new* happens before *old* is removed, so a rejected
        replacement leaves the store untouched.
        """
        self.valid_method(new.method)
        current = self._lookup(old.method, old.pattern)
        if current is not None and current is not old:
            msg = f"{old.method} {old.pattern} is not the route being replaced"
            raise LookupError(msg)
        if current is not None:
            self._pop(old.method, old.pattern)
        try:
            return self.add(new)
        except BadRouteError:
            if current is not None:
                self.add(old)
            raise

    # -- Lookup ------------------------------------------------------------

    def find_static(self, method: str, path: str) -> Route | None:
        table = self._statics.get(method)
        if table is None:
            return None
        return table.get(path)

    def find_dynamic_bucket(self, method: str, count: int) -> Bucket | None:
        bucket = self._dynamics.get((method, count))
        if bucket is None or not bucket.routes:
            return None
        return bucket

    def find_named(self, name: str) -> list[Route]:
        return list(self._named.get(name, ()))

    @property
    def routes(self) -> list[Route]:
        """All routes: statics first, then dynamics in registration order."""
        result: list[Route] = []
        for table in self._statics.values():
            result.extend(table.values())
        for bucket in self._dynamics.values():
            result.extend(bucket.routes.values())
        return result

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    def __len__(self) -> int:
        statics = sum(len(table) for table in self._statics.values())
        return statics + sum(len(bucket) for bucket in self._dynamics.values())

    def __contains__(self, route: object) -> bool:
        if not isinstance(route, Route):
            return False
        return self._lookup(route.method, route.pattern) is route

    # -- Internals ---------------------------------------------------------

    def _concrete_patterns(self, pattern: str) -> Iterable[str]:
        try:
            return self.parser.parse_pattern(pattern)
        except BadRouteError:
            return (pattern,)

    def _bucket(self, method: str, count: int, *, create: bool = False) -> Bucket | None:
        key = (method, count)
        bucket = self._dynamics.get(key)
        if bucket is None and create:
            bucket = self._dynamics[key] = Bucket(key)
        return bucket

    def _lookup(self, method: str, pattern: str) -> Route | None:
        if not is_dynamic(pattern):
            return self.find_static(method, pattern)
        bucket = self._bucket(method, segment_count(pattern))
        return bucket.routes.get(pattern) if bucket is not None else None

    def _pop(self, method: str, pattern: str) -> Route | None:
        if not is_dynamic(pattern):
            route = self._statics.get(method, {}).pop(pattern, None)
        else:
            bucket = self._bucket(method, segment_count(pattern))
            route = bucket.routes.pop(pattern, None) if bucket is not None else None
            if route is not None:
                bucket.version = next(self._versions)
        if route is not None:
            self._unname(route)
        return route

    def _unname(self, route: Route) -> None:
        if route.name is None:
            return
        named = self._named.get(route.name)
        if named is None:
            return
        named[:] = [r for r in named if r is not route]
        if not named:
            del self._named[route.name]
