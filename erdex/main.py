"""CLI entry point for erdex.

Supports running via ``python -m erdex.main`` or the ``erdex`` script.
"""

import argparse
import sys
from typing import List, Optional

from .export import run_export
from .fetch import load_config, run_fetch
from .transform import run_transform

CONFIG_PATH = "config/config.json"


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the top-level CLI argument parser."""
    parser = argparse.ArgumentParser(prog="erdex")
    parser.add_argument("--config", default=CONFIG_PATH)
    sub = parser.add_subparsers(dest="command")

    fetch = sub.add_parser("fetch")
    fetch.add_argument("--force", action="store_true")

    transform = sub.add_parser("transform")
    transform.add_argument("--force", action="store_true")

    sub.add_parser("export")

    build = sub.add_parser("build")
    build.add_argument("--force", action="store_true")

    return parser


def _dispatch(args: argparse.Namespace) -> Optional[int]:
    if args.command == "fetch":
        return run_fetch(bool(args.force), args.config)

    if args.command == "transform":
        return run_transform(args.config, force=bool(args.force))

    if args.command == "export":
        return run_export(args.config)

    if args.command == "build":
        rc = run_transform(args.config, force=bool(args.force))
        return rc or run_export(args.config)

    return None


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 2

    try:
        # Fail early on a missing config, before any network access.
        load_config(args.config)
        rc = _dispatch(args)
    except RuntimeError as exc:
        print(f"{args.command}: {exc}", file=sys.stderr)
        return 1

    if rc is None:
        parser.print_help()
        return 2
    return rc


if __name__ == "__main__":
    sys.exit(main())
