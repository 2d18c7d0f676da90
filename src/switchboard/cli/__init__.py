"""Switchboard CLI — serve an app and inspect its route table.

Entry point registered as ``switchboard`` in ``pyproject.toml``::

    [project.scripts]
    switchboard = "switchboard.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``switchboard`` command."""
    parser = argparse.ArgumentParser(
        prog="switchboard",
        description="Switchboard — a minimal HTTP/HTTPS request dispatcher.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- switchboard run --------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the HTTP and HTTPS servers")
    run_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    run_parser.add_argument(
        "--env",
        default=None,
        help="Environment profile (staging or production); overrides SWITCHBOARD_ENV",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--http-port", type=int, default=None, help="Plain HTTP port")
    run_parser.add_argument("--https-port", type=int, default=None, help="TLS port")
    run_parser.add_argument(
        "--production",
        action="store_true",
        help="Production mode: TLS is terminated upstream, HTTPS endpoint disabled",
    )

    # -- switchboard routes -----------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the route table")
    routes_parser.add_argument("app", help="Import string (e.g. myapp:app)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from switchboard.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from switchboard.cli._routes import run_routes

        run_routes(args)
