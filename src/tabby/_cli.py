"""Tabby CLI — tabby build / tabby dev.

Entry point for the ``tabby`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the tabby CLI."""
    parser = argparse.ArgumentParser(
        prog="tabby",
        description="Build and preview multi-page campaign sites.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # tabby build
    build_parser = subparsers.add_parser(
        "build",
        help="Render every campaign into the output directory",
    )
    build_parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    build_parser.add_argument("--output", default=None, help="Output directory (default: _site)")
    build_parser.add_argument(
        "--clean", action="store_true", default=None,
        help="Empty the output directory first",
    )

    # tabby dev
    dev_parser = subparsers.add_parser(
        "dev",
        help="Build, serve, and rebuild on change with live reload",
    )
    dev_parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    dev_parser.add_argument("--campaign", default=None, help="Only build this campaign slug")
    dev_parser.add_argument("--host", default=None, help="Bind address (default: 127.0.0.1)")
    dev_parser.add_argument("--port", type=int, default=None, help="Bind port (default: 3000)")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from tabby import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Exits 1 on configuration errors or failed pages."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from tabby import log
    from tabby._errors import TabbyError
    from tabby.app import build, dev

    try:
        if args.command == "build":
            result = build(root=args.root, output=args.output, clean=args.clean)
            if result.errors > 0:
                sys.exit(1)
        elif args.command == "dev":
            dev(root=args.root, campaign=args.campaign, host=args.host, port=args.port)
    except TabbyError as exc:
        log.error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
