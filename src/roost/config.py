"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, scoped to a
single Router, never shared process-wide.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from roost.errors import ConfigurationError

# Hard ceiling on capturing groups in one combined regex. Python's ``re``
# accepts more, but large alternations degrade badly well before that.
MAX_REGEX_GROUPS = 100

DEFAULT_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE")


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(base_path="/api", methods=(*DEFAULT_METHODS, "HEAD"))
    """

    # HTTP methods accepted at registration and match time
    methods: tuple[str, ...] = DEFAULT_METHODS

    # Prefix stripped from every path before matching
    base_path: str = ""

    # Extra wildcards layered over the defaults (name -> regex fragment)
    wildcards: Mapping[str, str] = field(default_factory=dict)

    # Dynamic group compilation
    chunk_limit: int = 10  # Upper bound on routes per combined regex
    max_group_count: int = MAX_REGEX_GROUPS
    cache_groups: bool = True

    def __post_init__(self) -> None:
        methods = tuple(dict.fromkeys(m.strip().upper() for m in self.methods if m.strip()))
        if not methods:
            msg = "RouterConfig.methods must name at least one HTTP method."
            raise ConfigurationError(msg)
        object.__setattr__(self, "methods", methods)

        base_path = self.base_path.strip()
        if base_path:
            base_path = "/" + base_path.strip("/")
            if base_path == "/":
                base_path = ""
        object.__setattr__(self, "base_path", base_path)

        if self.chunk_limit < 1:
            msg = f"RouterConfig.chunk_limit must be positive, got {self.chunk_limit}."
            raise ConfigurationError(msg)
        if self.max_group_count < 2:
            msg = (
                "RouterConfig.max_group_count must leave room for at least one "
                f"placeholder and its marker group, got {self.max_group_count}."
            )
            raise ConfigurationError(msg)
