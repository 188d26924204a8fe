"""Command-line entry point for unvenv's update commands."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from unvenv import __version__
from unvenv.constants import EXIT_FAILURE, EXIT_SUCCESS, EXIT_UP_TO_DATE
from unvenv.logging import get_logger, setup_logging
from unvenv.updater import UpdateManager
from unvenv.updater.errors import UpdateError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unvenv",
        description="Python virtual environment detector CLI",
    )
    parser.add_argument("--version", action="version", version=f"unvenv {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug diagnostics")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("version", help="Show version information")

    check = sub.add_parser("check", help="Check whether a newer release is published")
    check.add_argument("--version", dest="target_version", help="Compare against this version")

    update = sub.add_parser("update", help="Install the latest or a specific release")
    update.add_argument("--version", dest="target_version", help="Install this version")
    update.add_argument(
        "--force", action="store_true", help="Skip the prompt and reinstall if current"
    )
    update.add_argument("--install-dir", type=Path, help="Install into this directory")
    return parser


def _check(target_version: str | None) -> int:
    manager = UpdateManager()
    try:
        decision = manager.check(target_version)
    except UpdateError as exc:
        print(exc.message, file=sys.stderr)
        return EXIT_FAILURE

    if decision.update_available:
        print(f"Update available: v{decision.target} (current: v{decision.current})")
        return EXIT_SUCCESS
    print(f"Already running latest version (v{decision.current})")
    return EXIT_UP_TO_DATE


def main(argv: Sequence[str] | None = None) -> int:
    """Parse *argv* and run the selected command; returns the exit code."""
    args = build_parser().parse_args(argv)

    setup_logging("DEBUG" if args.verbose else None)
    log = get_logger("unvenv.cli")
    log.debug("cli_command", command=args.command)

    if args.command == "check":
        return _check(args.target_version)

    if args.command == "update":
        result = UpdateManager().run(
            version=args.target_version,
            force=args.force,
            install_dir=args.install_dir,
        )
        return int(result.exit_code)

    print(f"unvenv {__version__}")
    return EXIT_SUCCESS


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
