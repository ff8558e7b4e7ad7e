"""nestlint CLI entry point."""

import sys

from nestlint.args import Args, bind_and_run
from nestlint.cli import run as run_checks
from nestlint.log import init_logging
from nestlint.version import show_version


def run(args: Args) -> None:
    """Configure logging and check the requested Nestfiles."""
    if args.version:
        show_version()
    init_logging(args)
    sys.exit(run_checks(args))


def main() -> None:
    """Entry point for the CLI."""
    bind_and_run(run)


if __name__ == "__main__":
    main()
