"""``switchboard routes`` — print the frozen route table."""

import argparse
import sys

from switchboard.cli._resolve import resolve_app


def _name(handler: object) -> str:
    return getattr(handler, "__name__", None) or type(handler).__name__


def run_routes(args: argparse.Namespace) -> None:
    """List exact routes, then the prefix matchers and the not-found handler."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    table = app.table

    rows: list[tuple[str, str]] = []
    for route in table.routes:
        handler_name = _name(route.handler)
        if route.name:
            handler_name = f"{handler_name} ({route.name})"
        rows.append((route.path or "(root)", handler_name))
    rows.extend((f"*{m.marker}*", _name(m.handler)) for m in table.matchers)
    rows.append(("(not found)", _name(table.not_found)))

    width = max(4, *(len(path) for path, _ in rows))
    fmt = f"{{:<{width}}}  {{}}"
    print(fmt.format("PATH", "HANDLER"))
    print("-" * min(width + 2 + max(len(h) for _, h in rows), 80))
    for path, handler_name in rows:
        print(fmt.format(path, handler_name))
