"""Semantic analyzer for Nestfile command trees.

Validate the finished command tree: scripts on leaves and groups, sibling
names, reserved names, repeated directives, and conditional chains.
"""

from nestlint.ast.nodes import Command, Directive
from nestlint.errors.codes import ErrorCode
from nestlint.errors.diagnostics import Diagnostic
from nestlint.log import get_logger
from nestlint.structure.directives import SCRIPT_DIRECTIVES

logger = get_logger(__name__)

RESERVED_COMMAND_NAMES = frozenset({"nest", "default"})
"""Names that cannot be used by top-level commands."""


def _name_range(command: Command) -> tuple[int, int]:
    if command.meta is None:
        return 0, len(command.name)
    column = command.meta.column
    return column, command.meta.end_column or column + len(command.name)


def _directive_range(directive: Directive) -> tuple[int, int]:
    if directive.meta is None:
        return 0, len(directive.name)
    column = directive.meta.column
    return column, directive.meta.end_column or column + len(directive.name)


class SemanticAnalyzer:
    """Check command-tree invariants of one document."""

    def __init__(self) -> None:
        """Initialize the analyzer."""
        self._diagnostics: list[Diagnostic] = []

    def analyze(self, commands: list[Command]) -> list[Diagnostic]:
        """Analyze a command tree.

        Args:
            commands: Top-level commands in document order.

        Returns:
            Diagnostics in tree pre-order.

        """
        self._diagnostics = []
        self._check_reserved_names(commands)
        self._check_siblings(commands)
        for command in commands:
            self._visit(command)
        logger.debug("Tree checks produced %d diagnostics", len(self._diagnostics))
        return self._diagnostics

    def _visit(self, command: Command) -> None:
        self._check_scripts(command)
        self._check_cwd(command)
        self._check_conditionals(command)
        self._check_siblings(command.children)
        for child in command.children:
            self._visit(child)

    def _check_reserved_names(self, commands: list[Command]) -> None:
        for command in commands:
            if command.name in RESERVED_COMMAND_NAMES:
                start, end = _name_range(command)
                self._diagnostics.append(
                    Diagnostic.error(
                        ErrorCode.E0402,
                        command.line,
                        start,
                        end,
                        name=command.name,
                    ).with_help("rename the command; this name is used by the runner"),
                )

    def _check_siblings(self, siblings: list[Command]) -> None:
        seen: dict[str, Command] = {}
        for command in siblings:
            first = seen.get(command.name)
            if first is None:
                seen[command.name] = command
                continue
            start, end = _name_range(command)
            self._diagnostics.append(
                Diagnostic.error(
                    ErrorCode.E0401,
                    command.line,
                    start,
                    end,
                    name=command.name,
                ).with_help(f"first defined at line {first.line}"),
            )

    def _check_scripts(self, command: Command) -> None:
        start, end = _name_range(command)
        if not command.children:
            if not command.directives_named(*SCRIPT_DIRECTIVES):
                self._diagnostics.append(
                    Diagnostic.warning(
                        ErrorCode.W0005,
                        command.line,
                        start,
                        end,
                        name=command.name,
                    ),
                )
        elif command.directives_named("script"):
            self._diagnostics.append(
                Diagnostic.information(
                    ErrorCode.I0001,
                    command.line,
                    start,
                    end,
                    name=command.name,
                ),
            )

    def _check_cwd(self, command: Command) -> None:
        for directive in command.directives_named("cwd")[1:]:
            start, end = _directive_range(directive)
            self._diagnostics.append(
                Diagnostic.warning(
                    ErrorCode.W0007,
                    directive.line,
                    start,
                    end,
                    name=command.name,
                ),
            )

    def _check_conditionals(self, command: Command) -> None:
        chain_open = False
        for directive in command.directives_named("if", "elif", "else"):
            if directive.base == "if":
                chain_open = True
                continue
            if not chain_open:
                start, end = _directive_range(directive)
                self._diagnostics.append(
                    Diagnostic.error(
                        ErrorCode.E0207,
                        directive.line,
                        start,
                        end,
                        name=directive.base,
                    ),
                )
            if directive.base == "else":
                chain_open = False
