"""``roost routes`` — list registered routes."""

import argparse
import sys
from typing import Any

from roost.cli._resolve import resolve_router


def describe_action(action: Any) -> str:
    """Short human label for an opaque route action."""
    if isinstance(action, tuple | list) and len(action) == 2:
        target, method = action
        owner = target if isinstance(target, str) else getattr(target, "__name__", type(target).__name__)
        return f"{owner}.{method}"
    return getattr(action, "__qualname__", None) or str(action)


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATTERN, and ACTION for every route."""
    try:
        router = resolve_router(args.router)
    except (ImportError, AttributeError, TypeError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = router.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = []
    for route in routes:
        label = describe_action(route.action)
        if route.name:
            label = f"{label} ({route.name})"
        rows.append((route.method, route.pattern, label))

    max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_pattern = max(max(len(r[1]) for r in rows), 7)  # "PATTERN" header

    fmt = f"{{:<{max_method}}}  {{:<{max_pattern}}}  {{}}"
    print(fmt.format("METHOD", "PATTERN", "ACTION"))
    sep_len = max_method + max_pattern + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, pattern, label in rows:
        print(fmt.format(method, pattern, label))
