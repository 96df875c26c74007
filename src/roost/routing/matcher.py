"""Matcher — resolves ``(method, path)`` to a RouteMatch.

Lookup order:

1. Static routes (one dict lookup).
2. Dynamic routes in the ``(method, segment_count)`` bucket, via the
   bucket's compiled groups.
3. On a miss, every other configured method is tried the same way to tell
   ``MethodNotAllowed`` apart from ``NotFound``.
"""

import logging
import re
from urllib.parse import urlsplit

from roost.errors import MalformedURLError, MethodNotAllowed, NotFound
from roost.routing.collection import Bucket, BucketKey, RouteCollection
from roost.routing.compiler import CompiledGroup, compile_groups
from roost.routing.route import RouteMatch

logger = logging.getLogger("roost.routing")

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


class Matcher:
    """Matches request paths against a RouteCollection.

    Compiled groups are cached per bucket and reused for as long as the
    bucket's version is unchanged. Registration is expected to be finished
    before matching starts; concurrent ``match`` calls only ever read the
    store and swap whole cache entries.
    """

    __slots__ = ("_cache", "collection")

    def __init__(self, collection: RouteCollection) -> None:
        self.collection = collection
        self._cache: dict[BucketKey, tuple[int, tuple[CompiledGroup, ...]]] = {}

    @property
    def base_path(self) -> str:
        return self.collection.config.base_path

    def match(self, method: str, path: str, *, quiet: bool = False) -> RouteMatch | None:
        """Match *method* and *path* to a route.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no method serves the path, or
        ``MethodNotAllowed`` if only other methods do. With ``quiet=True``
        both cases return ``None`` instead.
        Raises ``MethodNotSupported`` for unknown methods and
        ``MalformedURLError`` for unparseable paths, regardless of *quiet*.
        """
        method = self.collection.valid_method(method)
        normalized = self.normalize(path)

        if normalized is not None:
            found = self._match_method(method, normalized)
            if found is not None:
                return found
            allowed = self._allowed(normalized, exclude=method)
        else:
            allowed = frozenset()

        logger.debug("No %s route for %r", method, path)
        if quiet:
            return None
        if allowed:
            raise MethodNotAllowed(allowed, method=method, path=path)
        raise NotFound(f"No route matches {method} {path!r}")

    def allowed_methods(self, path: str) -> frozenset[str]:
        """Every configured method with a route matching *path*."""
        normalized = self.normalize(path)
        if normalized is None:
            return frozenset()
        return self._allowed(normalized)

    def normalize(self, path: str) -> str | None:
        """Strip the query string, fragment, and base path from *path*.

        Absolute URLs are reduced to their path component. Returns ``None``
        when *path* lies outside the base path.
        """
        if "://" in path:
            try:
                path = urlsplit(path).path
            except ValueError as exc:
                msg = f"Seriously malformed URL passed to route matcher: {path!r}"
                raise MalformedURLError(msg) from exc
        else:
            path = path.partition("?")[0].partition("#")[0]
        if _CONTROL_CHARS.search(path):
            msg = f"Control characters in path passed to route matcher: {path!r}"
            raise MalformedURLError(msg)

        base = self.base_path
        if base:
            if path != base and not path.startswith(base + "/"):
                return None
            path = path[len(base) :]
        return path or "/"

    def clear_cache(self) -> None:
        self._cache.clear()

    def compiled_groups(self, bucket: Bucket) -> tuple[CompiledGroup, ...]:
        """Compiled groups for *bucket*, rebuilt when its version moved."""
        config = self.collection.config
        if config.cache_groups:
            cached = self._cache.get(bucket.key)
            if cached is not None and cached[0] == bucket.version:
                return cached[1]

        groups = compile_groups(
            list(bucket.routes.values()),
            chunk_limit=config.chunk_limit,
            max_group_count=config.max_group_count,
        )
        if config.cache_groups:
            self._cache[bucket.key] = (bucket.version, groups)
        return groups

    def _match_method(self, method: str, path: str) -> RouteMatch | None:
        route = self.collection.find_static(method, path)
        if route is not None:
            return RouteMatch(route=route)
        return self._match_dynamic(method, path)

    def _match_dynamic(self, method: str, path: str) -> RouteMatch | None:
        # Request paths carry no placeholders; every "/" is a separator.
        bucket = self.collection.find_dynamic_bucket(method, path.count("/"))
        if bucket is None:
            return None
        for group in self.compiled_groups(bucket):
            found = group.match(path)
            if found is not None:
                return found
        return None

    def _allowed(self, path: str, exclude: str | None = None) -> frozenset[str]:
        return frozenset(
            method
            for method in self.collection.config.methods
            if method != exclude and self._match_method(method, path) is not None
        )
