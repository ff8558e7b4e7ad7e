"""Symbol collection for Nestfile template references.

Provide a flat, document-wide symbol table and the check that flags
``{{ name }}`` references to names that are never defined.
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto

from nestlint.ast.nodes import Command, DeclarationKind, Directive
from nestlint.errors.codes import ErrorCode
from nestlint.errors.diagnostics import Diagnostic
from nestlint.log import get_logger
from nestlint.structure.builder import BuildResult
from nestlint.structure.directives import env_assignment_key

logger = get_logger(__name__)

BUILTIN_VARIABLES = frozenset({
    "now",
    "user",
    "env",
    "cwd",
    "SYSTEM_ERROR_MESSAGE",
})
"""Names available in every template."""

_TEMPLATE_RE = re.compile(
    r"\{\{\s*(?P<star>\*)?(?P<name>[A-Za-z_][A-Za-z0-9_]*)?"
    r"(?P<dotted>(?:\.[A-Za-z0-9_]+)*)"
    r"\s*(?:\|[^}]*)?\}\}",
)


class SymbolKind(Enum):
    """Kind of symbol in the symbol table."""

    BUILTIN = auto()
    VARIABLE = auto()
    CONSTANT = auto()
    ENVIRONMENT = auto()
    PARAMETER = auto()


@dataclass
class Symbol:
    """Symbol entry in the symbol table."""

    name: str
    """Name of the symbol; wildcard parameters keep their ``*``."""

    kind: SymbolKind
    line: int | None = None
    """Line where the symbol was defined; None for builtins."""


@dataclass
class SymbolTable:
    """Flat symbol table of one document.

    Every name is visible everywhere in the document, regardless of which
    command defined it.
    """

    _symbols: dict[str, Symbol] = field(default_factory=dict)

    def define(self, name: str, kind: SymbolKind, *, line: int | None = None) -> Symbol:
        """Define a symbol, keeping the first definition of a name.

        Args:
            name: Name of the symbol.
            kind: Kind of symbol.
            line: Optional line of the definition.

        Returns:
            The Symbol registered under ``name``.

        """
        if name in self._symbols:
            return self._symbols[name]
        symbol = Symbol(name=name, kind=kind, line=line)
        self._symbols[name] = symbol
        logger.debug("Defined symbol %s of kind %s", name, kind.name)
        return symbol

    def lookup(self, name: str) -> Symbol | None:
        """Look up a symbol by name.

        A wildcard parameter matches with or without its ``*`` prefix.

        Args:
            name: Name of the symbol to look up.

        Returns:
            The Symbol if found, None otherwise.

        """
        bare = name.lstrip("*")
        for candidate in (name, bare, f"*{bare}"):
            if candidate in self._symbols:
                return self._symbols[candidate]
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __len__(self) -> int:
        return len(self._symbols)

    @property
    def names(self) -> frozenset[str]:
        """All defined names."""
        return frozenset(self._symbols)


def _define_env(table: SymbolTable, directives: list[Directive]) -> None:
    for directive in directives:
        if directive.base != "env":
            continue
        key = env_assignment_key(directive.value)
        if key is not None:
            table.define(key, SymbolKind.ENVIRONMENT, line=directive.line)


def collect_symbols(build: BuildResult) -> SymbolTable:
    """Collect the flat symbol table of a built document.

    Args:
        build: Result of the structural pass.

    Returns:
        Table holding builtins, declared variables and constants, env keys,
        and every command and function parameter name.

    """
    table = SymbolTable()
    for name in sorted(BUILTIN_VARIABLES):
        table.define(name, SymbolKind.BUILTIN)

    for declaration in build.declarations:
        if declaration.kind == DeclarationKind.VARIABLE:
            table.define(declaration.name, SymbolKind.VARIABLE, line=declaration.line)
        elif declaration.kind == DeclarationKind.CONSTANT:
            table.define(declaration.name, SymbolKind.CONSTANT, line=declaration.line)
        for param in declaration.parameters:
            table.define(param.clean_name, SymbolKind.PARAMETER, line=param.line)

    _define_env(table, build.orphans)

    commands: list[Command] = []
    for command in build.commands:
        commands.extend(command.walk())
    for command in commands:
        for param in command.parameters:
            table.define(param.clean_name, SymbolKind.PARAMETER, line=param.line)
        _define_env(table, command.directives)

    logger.debug("Collected %d symbols", len(table))
    return table


def check_template_references(lines: list[str], table: SymbolTable) -> list[Diagnostic]:
    """Flag template references to undefined names.

    Args:
        lines: Document lines.
        table: Symbol table of the document.

    Returns:
        One diagnostic per undefined reference, spanning the name only.

    """
    diagnostics: list[Diagnostic] = []
    for number, text in enumerate(lines, start=1):
        if text.strip().startswith("#") or "{{" not in text:
            continue
        for match in _TEMPLATE_RE.finditer(text):
            name = match.group("name")
            if match.group("star") is None:
                if name is None:
                    continue
                reference = name
            elif name is None:
                # Bare ``{{*}}`` refers to the anonymous wildcard.
                reference = name = "*"
            else:
                reference = f"*{name}"
            if reference in table:
                continue
            span = "star" if reference == "*" else "name"
            diagnostics.append(
                Diagnostic.error(
                    ErrorCode.E0301,
                    number,
                    match.start(span),
                    match.end(span),
                    name=name,
                ),
            )
    return diagnostics
