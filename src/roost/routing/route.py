"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from roost.routing.parser import compile_pattern, is_dynamic, segment_count


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen method + pattern + action binding.

    ``params`` and ``regex`` are derived from ``pattern`` on construction,
    so the regex always has exactly one capturing group per param, also
    for copies made with ``dataclasses.replace``.

    Static:  ``Route("GET", "/users", action)``           (regex == "")
    Dynamic: ``Route("GET", "/users/{id:\\d+}", action)``  (params == ("id",))
    """

    method: str
    pattern: str
    action: Any
    strategy: Any = None
    name: str | None = None
    defaults: Mapping[str, Any] = field(default_factory=dict)
    metadata: Mapping[str, Any] = field(default_factory=dict)
    params: tuple[str, ...] = field(init=False, default=())
    regex: str = field(init=False, default="")

    def __post_init__(self) -> None:
        if is_dynamic(self.pattern):
            regex, params = compile_pattern(self.pattern)
            object.__setattr__(self, "regex", regex)
            object.__setattr__(self, "params", params)

    @property
    def is_static(self) -> bool:
        return not self.params

    @property
    def segment_count(self) -> int:
        return segment_count(self.pattern)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: dict[str, str] = field(default_factory=dict)

    @property
    def action(self) -> Any:
        return self.route.action

    @property
    def strategy(self) -> Any:
        return self.route.strategy

    @property
    def merged_params(self) -> dict[str, Any]:
        """Route defaults overlaid with the captured params."""
        return {**self.route.defaults, **self.params}
