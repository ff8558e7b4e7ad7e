"""Parse and organize app args."""

from collections.abc import Callable
from pathlib import Path

import typed_argparse as tap


class Args(tap.TypedArgs):
    """App args."""

    paths: list[str] = tap.arg(
        positional=True,
        nargs="*",
        help="Nestfiles or directories to check (default: current directory)",
        default=[],
    )
    json: bool = tap.arg(help="Print diagnostics as JSON", default=False)
    strict: bool = tap.arg(help="Treat warnings as errors", default=False)
    dump_ast: bool = tap.arg(
        "--dump-ast",
        help="Print the command tree of each file as JSON",
        default=False,
    )
    verbose: bool = tap.arg(
        "-v",
        "--verbose",
        help="Enables verbose (DEBUG) logging",
        default=False,
    )
    version: bool = tap.arg(help="Show version and exit", default=False)

    @property
    def working_dir(self) -> Path:
        """Get working directory."""
        return Path.cwd().resolve()

    @property
    def targets(self) -> list[Path]:
        """Get the paths to check, defaulting to the working directory."""
        if self.paths:
            return [Path(p) for p in self.paths]
        return [self.working_dir]


def bind_and_run(
    app_main: Callable[[Args], None],
    argv: list[str] | None = None,
) -> None:
    """Parse args and run the app passing the parsed args."""
    parser = tap.Parser(Args).bind(app_main)
    if argv is None:
        parser.run()
    else:
        parser.run(argv)
