"""Command-line checks for Nestfiles.

Validate single files or whole directory trees and print diagnostics as
rustc-style text or JSON.
"""

import json
import sys
from fnmatch import fnmatch
from pathlib import Path

from nestlint.args import Args, bind_and_run
from nestlint.config_loader import LintConfig, load_config
from nestlint.document import AnalysisResult, analyze_document
from nestlint.errors.reporter import DiagnosticReporter, format_success_message
from nestlint.log import get_logger

logger = get_logger(__name__)

EXIT_SUCCESS = 0
"""All files are valid."""

EXIT_VALIDATION_ERRORS = 1
"""At least one file has errors (or warnings in strict mode)."""

EXIT_FILE_ERROR = 2
"""A file or directory could not be read."""


def _print_error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)  # noqa: T201


def is_nestfile(path: Path, config: LintConfig | None = None) -> bool:
    """Check whether a file name looks like a Nestfile."""
    config = config or LintConfig()
    if path.name in config.file_names:
        return True
    return any(fnmatch(path.name, pattern) for pattern in config.file_patterns)


def discover_files(directory: Path, config: LintConfig | None = None) -> list[Path]:
    """Find Nestfiles under a directory, recursively.

    Args:
        directory: Directory to search.
        config: Lint configuration naming the recognized files.

    Returns:
        Matching files in sorted order.

    """
    return sorted(
        path
        for path in directory.rglob("*")
        if path.is_file() and is_nestfile(path, config)
    )


def _read_document(path: Path) -> str | None:
    if not path.exists():
        _print_error(f"file not found: {path}")
        return None
    if not path.is_file():
        _print_error(f"not a file: {path}")
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Failed to read %s: %s", path, e)
        _print_error(f"cannot read {path}: {e}")
        return None


def _count_commands(result: AnalysisResult) -> int:
    return sum(len(command.walk()) for command in result.commands)


def check_file(
    path: Path,
    *,
    json_output: bool = False,
    verbose: bool = False,
    strict: bool = False,
) -> int:
    """Check one Nestfile and print its diagnostics.

    Args:
        path: File to check.
        json_output: Print a JSON report instead of text.
        verbose: Also report files without problems.
        strict: Treat warnings as errors.

    Returns:
        Exit code for this file.

    """
    text = _read_document(path)
    if text is None:
        return EXIT_FILE_ERROR

    result = analyze_document(text, path)
    failed = bool(result.errors) or (strict and bool(result.warnings))
    file_name = str(path)

    reporter = DiagnosticReporter(file_name, text)

    if json_output:
        stats = {
            "commands": _count_commands(result),
            "imports": len(result.imports),
        }
        report = reporter.format_json(result.diagnostics, stats=stats)
        print(report)  # noqa: T201
    elif result.diagnostics:
        print(reporter.format_report(result.diagnostics))  # noqa: T201
    elif verbose:
        message = format_success_message(
            commands=_count_commands(result),
            imports=len(result.imports),
        )
        print(f"{file_name}: {message}")  # noqa: T201

    return EXIT_VALIDATION_ERRORS if failed else EXIT_SUCCESS


def _is_directory(path: Path) -> bool:
    if not path.exists():
        _print_error(f"directory not found: {path}")
        return False
    if not path.is_dir():
        _print_error(f"not a directory: {path}")
        return False
    return True


def check_directory(
    path: Path,
    *,
    json_output: bool = False,
    verbose: bool = False,
    strict: bool = False,
    config: LintConfig | None = None,
) -> int:
    """Check every Nestfile under a directory.

    Args:
        path: Directory to search recursively.
        json_output: Print JSON reports instead of text.
        verbose: Also report files without problems.
        strict: Treat warnings as errors.
        config: Lint configuration naming the recognized files.

    Returns:
        The most severe exit code among the checked files.

    """
    if not _is_directory(path):
        return EXIT_FILE_ERROR

    files = discover_files(path, config)
    logger.debug("Found %d Nestfiles under %s", len(files), path)

    exit_code = EXIT_SUCCESS
    for file in files:
        code = check_file(file, json_output=json_output, verbose=verbose, strict=strict)
        exit_code = max(exit_code, code)
    return exit_code


def _load_tree(path: Path) -> list[dict[str, object]] | None:
    text = _read_document(path)
    if text is None:
        return None
    result = analyze_document(text, path)
    return [command.to_dict() for command in result.commands]


def dump_ast(path: Path) -> int:
    """Print the command tree of a Nestfile as JSON.

    Args:
        path: File to parse.

    Returns:
        Exit code.

    """
    tree = _load_tree(path)
    if tree is None:
        return EXIT_FILE_ERROR
    print(json.dumps(tree, indent=2))  # noqa: T201
    return EXIT_SUCCESS


def dump_directory(path: Path, config: LintConfig | None = None) -> int:
    """Print the command trees of every Nestfile under a directory.

    The output is one JSON object mapping each file path to its tree.

    Args:
        path: Directory to search recursively.
        config: Lint configuration naming the recognized files.

    Returns:
        Exit code; a file error when any file could not be read.

    """
    if not _is_directory(path):
        return EXIT_FILE_ERROR

    exit_code = EXIT_SUCCESS
    trees: dict[str, list[dict[str, object]]] = {}
    for file in discover_files(path, config):
        tree = _load_tree(file)
        if tree is None:
            exit_code = EXIT_FILE_ERROR
            continue
        trees[str(file)] = tree
    print(json.dumps(trees, indent=2))  # noqa: T201
    return exit_code


def run(args: Args, config: LintConfig | None = None) -> int:
    """Check every target named on the command line.

    Args:
        args: Parsed command line arguments.
        config: Lint configuration; loaded from the working directory when
            omitted.

    Returns:
        The most severe exit code among the targets.

    """
    if config is None:
        config = load_config(args.working_dir)

    strict = args.strict or config.strict
    json_output = args.json or config.output_format == "json"

    exit_code = EXIT_SUCCESS
    for target in args.targets:
        if args.dump_ast and target.is_dir():
            code = dump_directory(target, config)
        elif args.dump_ast:
            code = dump_ast(target)
        elif target.is_dir():
            code = check_directory(
                target,
                json_output=json_output,
                verbose=args.verbose,
                strict=strict,
                config=config,
            )
        else:
            code = check_file(
                target,
                json_output=json_output,
                verbose=args.verbose,
                strict=strict,
            )
        exit_code = max(exit_code, code)
    return exit_code


def run_check(argv: list[str]) -> int:
    """Parse command line arguments and run the checks.

    Args:
        argv: Command line arguments, without the program name.

    Returns:
        Exit code.

    """
    exit_codes: list[int] = []

    def _run(args: Args) -> None:
        exit_codes.append(run(args))

    bind_and_run(_run, argv)
    return exit_codes[0] if exit_codes else EXIT_SUCCESS
