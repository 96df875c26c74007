"""Roost exception hierarchy.

Shared across the parser, store, matcher, and dispatcher so every module
raises and catches the same types.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when router configuration or a wildcard definition is invalid."""


class BadRouteKind(Enum):
    """Why a route was rejected."""

    OPTIONAL_SEGMENTS_IN_MIDDLE = "Optional segments can only occur at the end of a route."
    UNCLOSED_OPTIONAL_SEGMENTS = "Number of opening [ and closing ] does not match."
    EMPTY_OPTIONAL_PART = "Empty optional part."
    INVALID_PLACEHOLDER = "Malformed placeholder."
    INVALID_CONSTRAINT = "Placeholder constraint is not a valid regular expression."
    CAPTURING_CONSTRAINT = "Placeholder constraints must not contain capturing groups."
    TOO_MANY_PLACEHOLDERS = "Route has more placeholders than a combined regex can hold."
    INVALID_ACTION = "Route action cannot be resolved to a callable."
    BAD_STRATEGY = "Dispatch strategy does not implement the Strategy protocol."


class BadRouteError(RoostError):
    """A route pattern, action, or strategy is unusable.

    Raised at registration time for pattern problems, and at call time for
    actions and strategies (which may be resolved lazily).
    """

    def __init__(self, kind: BadRouteKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        message = kind.value if not detail else f"{kind.value} {detail}"
        super().__init__(message)


class BadStrategyError(BadRouteError):
    """The configured strategy object cannot dispatch a route."""

    def __init__(self, strategy: object) -> None:
        self.strategy = strategy
        name = getattr(strategy, "__qualname__", type(strategy).__qualname__)
        super().__init__(
            BadRouteKind.BAD_STRATEGY,
            f"`{name}` must define call(match, action).",
        )


class MethodNotSupported(RoostError):  # noqa: N818 — mirrors the HTTP error names
    """The HTTP method is not in the router's configured method set."""

    def __init__(self, method: str, supported: Iterable[str] = ()) -> None:
        self.method = method
        self.supported = tuple(supported)
        message = f"HTTP method {method!r} is not supported"
        if self.supported:
            message = f"{message} (expected one of: {', '.join(self.supported)})"
        super().__init__(message)


class MalformedURLError(RoostError):
    """The path handed to the matcher cannot be parsed."""


class UnknownRouteError(RoostError, LookupError):
    """No route was registered under the requested name."""


class MissingParameterError(RoostError):
    """A placeholder has no value while building a URL."""

    def __init__(self, param: str, route_name: str | None = None) -> None:
        self.param = param
        self.route_name = route_name
        where = f" for {route_name!r} route" if route_name else ""
        super().__init__(f"Missing argument {param!r} on creation of link{where}.")


@dataclass(frozen=True, slots=True)
class HTTPError(RoostError):
    """A match failure that maps directly to an HTTP status code.

    Callers (servers, dispatchers) turn these into responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matches the path under any method."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — the path matches, but only under other methods.

    Carries the allowed methods (also as an ``Allow`` header) so the caller
    can answer without re-probing the router.
    """

    def __init__(
        self,
        allowed: Iterable[str],
        method: str = "",
        path: str = "",
        detail: str = "",
    ) -> None:
        allowed = frozenset(allowed)
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
        object.__setattr__(self, "allowed", allowed)
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "path", path)

    @property
    def allow(self) -> str:
        """Value for the ``Allow`` response header."""
        return ", ".join(sorted(self.allowed))

    def can(self, method: str) -> bool:
        return method.upper() in self.allowed
