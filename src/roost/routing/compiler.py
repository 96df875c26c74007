"""Group compiler — many dynamic routes, one regex per chunk.

A bucket's routes are split into chunks and each chunk becomes a single
alternation::

    ^(?:/user/([^/]+)()|/user/([^/]+)/([^/]+)()|/user/(\\d+)())$

Python's ``re`` has no branch-reset groups, so every branch keeps its own
group numbers and ends with one empty marker group. Group counts grow
monotonically across branches; the marker's index (the total group count
reached after padding that branch) identifies the branch, and on a match
``Match.lastindex`` is exactly that index.
"""

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass

from roost.config import MAX_REGEX_GROUPS
from roost.routing.route import Route, RouteMatch

logger = logging.getLogger("roost.routing")

MARKER_GROUPS = 1


def capture_padding(count: int) -> str:
    """Return *count* empty capturing groups.

    Appended to a branch so the group count after it is unique to it.
    """
    if count < 0:
        msg = f"capture padding must be non-negative, got {count}"
        raise ValueError(msg)
    return "()" * count


def chunk_size(count: int, limit: int) -> int:
    """Routes per chunk for a bucket of *count* routes.

    Grows logarithmically with the bucket (Sturges' rule) and never exceeds
    *limit*.
    """
    if count <= 1:
        return 1
    return max(1, min(limit, round(1 + 3.3 * math.log(count))))


def chunk_routes(
    routes: Sequence[Route],
    limit: int,
    max_group_count: int = MAX_REGEX_GROUPS,
) -> list[list[Route]]:
    """Split *routes* into chunks, keeping registration order.

    A chunk closes when it reaches ``chunk_size`` routes or when one more
    branch would push its group total past *max_group_count*.
    """
    size = chunk_size(len(routes), limit)
    chunks: list[list[Route]] = []
    current: list[Route] = []
    groups = 0
    for route in routes:
        needed = len(route.params) + MARKER_GROUPS
        if current and (len(current) >= size or groups + needed > max_group_count):
            chunks.append(current)
            current = []
            groups = 0
        current.append(route)
        groups += needed
    if current:
        chunks.append(current)
    return chunks


@dataclass(frozen=True, slots=True)
class Branch:
    """One alternative of a compiled group."""

    route: Route
    first_group: int


@dataclass(frozen=True, slots=True)
class CompiledGroup:
    """Alternation regex plus the marker-index -> branch map."""

    regex: re.Pattern[str]
    branches: dict[int, Branch]

    def match(self, path: str) -> RouteMatch | None:
        """Match *path* against every branch at once.

        Only the winning branch's own groups are paired with its params;
        groups belonging to other branches (all ``None``) and the marker
        never reach the result.
        """
        found = self.regex.match(path)
        if found is None:
            return None
        branch = self.branches[found.lastindex]
        route = branch.route
        values = found.groups()[branch.first_group - 1 : branch.first_group - 1 + len(route.params)]
        return RouteMatch(route=route, params=dict(zip(route.params, values, strict=True)))


def compile_group(routes: Sequence[Route]) -> CompiledGroup:
    """Build one alternation regex for *routes*. Pure; no caching."""
    branches: dict[int, Branch] = {}
    alternatives: list[str] = []
    group_count = 0
    for route in routes:
        first_group = group_count + 1
        group_count += len(route.params) + MARKER_GROUPS
        alternatives.append(route.regex + capture_padding(MARKER_GROUPS))
        branches[group_count] = Branch(route=route, first_group=first_group)
    regex = re.compile("^(?:" + "|".join(alternatives) + ")$")
    return CompiledGroup(regex=regex, branches=branches)


def compile_groups(
    routes: Sequence[Route],
    *,
    chunk_limit: int = 10,
    max_group_count: int = MAX_REGEX_GROUPS,
) -> tuple[CompiledGroup, ...]:
    """Compile a bucket's routes into chunked groups, in registration order."""
    chunks = chunk_routes(routes, chunk_limit, max_group_count)
    groups = tuple(compile_group(chunk) for chunk in chunks)
    logger.debug("Compiled %d dynamic routes into %d groups", len(routes), len(groups))
    return groups
