"""Wildcards — named, reusable regex fragments for placeholder constraints.

``{id:int}`` is shorthand for ``{id:\\d+}``. Each router owns its own
registry, seeded from ``DEFAULT_WILDCARDS``.
"""

import re
from collections.abc import Iterator, Mapping

from roost.errors import ConfigurationError

# name -> regex fragment (non-capturing; substituted into a capture group)
DEFAULT_WILDCARDS: dict[str, str] = {
    "uid": r"uid-[a-zA-Z0-9]+",
    "slug": r"[a-z0-9-]+",
    "string": r"\w+",
    "int": r"\d+",
    "integer": r"\d+",
    "float": r"[-+]?\d*?[.]?\d+",
    "double": r"[-+]?\d*?[.]?\d+",
    "hex": r"0[xX][0-9a-fA-F]+",
    "octal": r"0[1-7][0-7]*",
    "bool": r"(?:1|0|true|false|yes|no)",
    "boolean": r"(?:1|0|true|false|yes|no)",
}

_NAME = re.compile(r"[A-Za-z_]\w*")


def validate_wildcard(name: str, regex: str) -> None:
    """Raise ``ConfigurationError`` unless *regex* is usable as a wildcard.

    Wildcards end up inside a route's capture group, so they must compile
    and must not add capturing groups of their own.
    """
    if not _NAME.fullmatch(name):
        msg = f"Wildcard name {name!r} must be an identifier."
        raise ConfigurationError(msg)
    try:
        compiled = re.compile(regex)
    except re.error as exc:
        msg = f"Wildcard {name!r} is not a valid regular expression: {exc}"
        raise ConfigurationError(msg) from exc
    if compiled.groups:
        msg = (
            f"Wildcard {name!r} contains capturing groups; "
            "use (?:...) for grouping instead."
        )
        raise ConfigurationError(msg)


class WildcardRegistry(Mapping[str, str]):
    """Per-router wildcard table.

    Usage::

        registry = WildcardRegistry({"lang": "en|pt"})
        registry.set("year", r"\\d{4}")
        registry.get("int")  # "\\d+"
    """

    __slots__ = ("_wildcards",)

    def __init__(self, extra: Mapping[str, str] | None = None) -> None:
        self._wildcards: dict[str, str] = dict(DEFAULT_WILDCARDS)
        for name, regex in (extra or {}).items():
            self.set(name, regex)

    def set(self, name: str, regex: str) -> None:
        validate_wildcard(name, regex)
        self._wildcards[name] = regex

    def expand(self, constraint: str) -> str:
        """Replace a leading wildcard name in *constraint* with its regex.

        ``"int"`` -> ``"\\d+"``; ``"int?"`` -> ``"\\d+?"``; unknown names and
        plain regexes pass through untouched.
        """
        match = _NAME.match(constraint)
        if match is None:
            return constraint
        regex = self._wildcards.get(match.group())
        if regex is None:
            return constraint
        return regex + constraint[match.end() :]

    def __getitem__(self, name: str) -> str:
        return self._wildcards[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._wildcards)

    def __len__(self) -> int:
        return len(self._wildcards)
