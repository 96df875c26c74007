"""``roost match`` — show which route a request would hit."""

import argparse
import sys
from typing import cast

from roost.cli._resolve import resolve_router
from roost.cli._routes import describe_action
from roost.errors import HTTPError, MalformedURLError, MethodNotAllowed, MethodNotSupported
from roost.routing.route import RouteMatch


def run_match(args: argparse.Namespace) -> None:
    """Resolve ``args.method`` + ``args.path`` and print the outcome.

    Exits with status 1 when nothing matches.
    """
    try:
        router = resolve_router(args.router)
    except (ImportError, AttributeError, TypeError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        match = router.match(args.method, args.path)
    except MethodNotAllowed as exc:
        print(f"405 Method Not Allowed (Allow: {exc.allow})", file=sys.stderr)
        raise SystemExit(1) from exc
    except HTTPError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc
    except (MethodNotSupported, MalformedURLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    route = cast(RouteMatch, match).route
    print(f"{route.method} {route.pattern}")
    print(f"  action: {describe_action(route.action)}")
    if route.name:
        print(f"  name:   {route.name}")
    for key, value in match.merged_params.items():
        print(f"  {key} = {value!r}")
