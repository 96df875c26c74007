"""Route pattern parsing.

A pattern is literal path text with ``{name}`` / ``{name:regex}``
placeholders and optional trailing ``[...]`` blocks::

    "/user/{id:int}[/{tab}]"  ->  ["/user/{id:\\d+}", "/user/{id:\\d+}/{tab}"]

Parsing happens in two steps. ``Parser.parse_pattern`` expands optional
segments and wildcards into concrete patterns; ``compile_pattern`` turns one
concrete pattern into a regex fragment plus its ordered placeholder names.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

from roost.errors import BadRouteError, BadRouteKind
from roost.routing.wildcards import WildcardRegistry

DEFAULT_PLACEHOLDER_REGEX = r"[^/]+"

_PARAM_NAME = re.compile(r"\w+")


@dataclass(frozen=True, slots=True)
class Placeholder:
    """A ``{...}`` span inside a pattern.

    ``start``/``end`` index the braces themselves, so
    ``pattern[start:end]`` is the full ``{name:regex}`` text.
    """

    start: int
    end: int
    name: str
    constraint: str | None = None


def iter_placeholders(pattern: str) -> Iterator[Placeholder]:
    """Yield every placeholder in *pattern*, left to right.

    Braces nest (``{id:\\d{2}}``) and backslash escapes are honoured inside
    a placeholder. Raises ``BadRouteError`` on unbalanced braces.
    """
    depth = 0
    start = 0
    i = 0
    length = len(pattern)
    while i < length:
        char = pattern[i]
        if depth and char == "\\":
            i += 2
            continue
        if char == "{":
            if depth == 0:
                start = i
            depth += 1
        elif char == "}":
            if depth == 0:
                raise BadRouteError(
                    BadRouteKind.INVALID_PLACEHOLDER,
                    f"Unmatched '}}' at position {i} in {pattern!r}.",
                )
            depth -= 1
            if depth == 0:
                yield _read_placeholder(pattern, start, i + 1)
        i += 1
    if depth:
        raise BadRouteError(
            BadRouteKind.INVALID_PLACEHOLDER,
            f"Unclosed '{{' at position {start} in {pattern!r}.",
        )


def _read_placeholder(pattern: str, start: int, end: int) -> Placeholder:
    inner = pattern[start + 1 : end - 1]
    name, sep, constraint = inner.partition(":")
    name = name.strip()
    if not _PARAM_NAME.fullmatch(name):
        raise BadRouteError(
            BadRouteKind.INVALID_PLACEHOLDER,
            f"Placeholder {pattern[start:end]!r} needs a name made of word characters.",
        )
    constraint = constraint.strip()
    return Placeholder(start, end, name, constraint if sep and constraint else None)


def split_outside_placeholders(pattern: str, delimiter: str) -> list[str]:
    """Split *pattern* on *delimiter*, ignoring occurrences inside ``{...}``."""
    parts: list[str] = []
    last = 0
    for index in _outside_positions(pattern, delimiter):
        parts.append(pattern[last:index])
        last = index + 1
    parts.append(pattern[last:])
    return parts


def _outside_positions(pattern: str, char: str) -> Iterator[int]:
    cursor = 0
    for placeholder in iter_placeholders(pattern):
        index = pattern.find(char, cursor, placeholder.start)
        while index != -1:
            yield index
            index = pattern.find(char, index + 1, placeholder.start)
        cursor = placeholder.end
    index = pattern.find(char, cursor)
    while index != -1:
        yield index
        index = pattern.find(char, index + 1)


def segment_count(pattern: str) -> int:
    """Count path separators outside placeholders.

    Used as the structural shape of a pattern (or of a request path, which
    has no placeholders) when bucketing dynamic routes.
    """
    return sum(1 for _ in _outside_positions(pattern, "/"))


def is_dynamic(pattern: str) -> bool:
    return next(iter_placeholders(pattern), None) is not None


def compile_pattern(pattern: str) -> tuple[str, tuple[str, ...]]:
    """Compile a concrete pattern into a regex fragment and placeholder names.

    ``{name}`` becomes ``([^/]+)`` and ``{name:regex}`` becomes ``(regex)``.
    Literal text is escaped. The fragment has exactly one capturing group
    per returned name.

    Raises ``BadRouteError`` for duplicate names, constraints that do not
    compile, and constraints with capturing groups of their own.
    """
    parts: list[str] = []
    params: list[str] = []
    cursor = 0
    for placeholder in iter_placeholders(pattern):
        if placeholder.name in params:
            raise BadRouteError(
                BadRouteKind.INVALID_PLACEHOLDER,
                f"Placeholder {placeholder.name!r} appears twice in {pattern!r}.",
            )
        regex = placeholder.constraint or DEFAULT_PLACEHOLDER_REGEX
        _check_constraint(regex, placeholder.name, pattern)
        parts.append(re.escape(pattern[cursor : placeholder.start]))
        parts.append(f"({regex})")
        params.append(placeholder.name)
        cursor = placeholder.end
    parts.append(re.escape(pattern[cursor:]))
    return "".join(parts), tuple(params)


def _check_constraint(regex: str, name: str, pattern: str) -> None:
    # Compiled alone (balanced parentheses) and as an embedded fragment
    # (no global inline flags), since routes share one combined regex.
    try:
        groups = re.compile(regex).groups
        re.compile(f"^(?:x|(?:{regex}))$")
    except re.error as exc:
        raise BadRouteError(
            BadRouteKind.INVALID_CONSTRAINT,
            f"{{{name}:{regex}}} in {pattern!r}: {exc}",
        ) from exc
    if groups:
        raise BadRouteError(
            BadRouteKind.CAPTURING_CONSTRAINT,
            f"{{{name}:{regex}}} in {pattern!r}; use (?:...) instead.",
        )


class Parser:
    """Expands raw route patterns into concrete ones.

    Holds the router's wildcard registry so wildcard names inside
    constraints can be substituted during expansion.
    """

    __slots__ = ("wildcards",)

    def __init__(self, wildcards: WildcardRegistry | None = None) -> None:
        self.wildcards = wildcards if wildcards is not None else WildcardRegistry()

    def parse_pattern(self, pattern: str) -> list[str]:
        """Separate a pattern with optional parts into concrete patterns.

        ``"/a[/b[/c]]"`` -> ``["/a", "/a/b", "/a/b/c"]``

        Raises ``BadRouteError`` when optional blocks are not a suffix, when
        brackets are unbalanced, or when an optional block is empty.
        """
        without_closing = pattern.rstrip("]")
        closing = len(pattern) - len(without_closing)

        segments = split_outside_placeholders(without_closing, "[")
        if closing != len(segments) - 1:
            if next(_outside_positions(without_closing, "]"), None) is not None:
                raise BadRouteError(BadRouteKind.OPTIONAL_SEGMENTS_IN_MIDDLE, repr(pattern))
            raise BadRouteError(BadRouteKind.UNCLOSED_OPTIONAL_SEGMENTS, repr(pattern))

        patterns: list[str] = []
        current = ""
        for n, segment in enumerate(segments):
            if n and not segment:
                raise BadRouteError(BadRouteKind.EMPTY_OPTIONAL_PART, repr(pattern))
            current += self.expand_wildcards(segment)
            patterns.append(current)
        return patterns

    def expand_wildcards(self, pattern: str) -> str:
        """Substitute wildcard names opening each placeholder constraint."""
        parts: list[str] = []
        cursor = 0
        for placeholder in iter_placeholders(pattern):
            parts.append(pattern[cursor : placeholder.start])
            if placeholder.constraint is None:
                parts.append(pattern[placeholder.start : placeholder.end])
            else:
                regex = self.wildcards.expand(placeholder.constraint)
                parts.append(f"{{{placeholder.name}:{regex}}}")
            cursor = placeholder.end
        parts.append(pattern[cursor:])
        return "".join(parts)
