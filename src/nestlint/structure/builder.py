"""Indentation tree builder for Nestfile documents.

Walk the document once, classify each line, and assemble the command tree
with an explicit stack of open ancestors. Parameter and directive checks run
inline, so each line is visited a single time.
"""

import re
from dataclasses import dataclass, field

from nestlint.ast.nodes import (
    Command,
    Declaration,
    DeclarationKind,
    Directive,
    Import,
    ImportSymbol,
    SourcePosition,
)
from nestlint.errors.codes import ErrorCode
from nestlint.errors.diagnostics import Diagnostic
from nestlint.log import get_logger
from nestlint.structure.classifier import ClassifiedLine, LineKind, classify_line
from nestlint.structure.directives import (
    SCRIPT_DIRECTIVES,
    DirectiveValidator,
    find_block_end,
    make_directive,
)
from nestlint.structure.parameters import (
    parse_parameter_list,
    split_top_level,
    validate_parameters,
)

logger = get_logger(__name__)

_ASSIGNMENT_RE = re.compile(r"^(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*=\s*(?P<value>.*)$")
_FUNCTION_RE = re.compile(
    r"^(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*(?:\((?P<params>.*)\))?\s*:$",
)
_IMPORT_FROM_RE = re.compile(r"^(?P<symbols>.+?)\s+from\s+(?P<path>\S.*)$")
_INCLUDE_RE = re.compile(
    r"^(?P<path>\S+)(?:\s+into\s+(?P<into>\S+))?(?:\s+from\s+(?P<symbols>\S.*))?$",
)

DECLARATION_HELP = {
    "var": "expected format: var NAME = value",
    "const": "expected format: const NAME = value",
    "function": "expected format: function name(param: type, ...):",
    "import": "expected format: import PATH or import NAME, ... from PATH",
    "include": "expected format: include PATH [into GROUP] [from NAME, ...]",
}


@dataclass
class BuildResult:
    """Result of the structural pass."""

    commands: list[Command] = field(default_factory=list)
    """Top-level commands in document order."""

    declarations: list[Declaration] = field(default_factory=list)
    imports: list[Import] = field(default_factory=list)
    orphans: list[Directive] = field(default_factory=list)
    """Directives found outside any command, kept for symbol collection."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)
    """Document lines without line breaks."""


class TreeBuilder:
    """Build the command tree of one document.

    A builder is single-use: create one per analysis run.
    """

    def __init__(self, text: str) -> None:
        """Initialize the builder.

        Args:
            text: Full document text.

        """
        self._lines = re.split(r"\r?\n", text)
        self._validator = DirectiveValidator(self._lines)
        self._stack: list[tuple[int, Command]] = []
        self._result = BuildResult(lines=self._lines)

    def build(self) -> BuildResult:
        """Run the structural pass.

        Returns:
            The command tree, global declarations, and structural diagnostics.

        """
        index = 0
        while index < len(self._lines):
            line = classify_line(self._lines[index], index + 1)
            if line.kind != LineKind.SKIP and "\t" in line.text[: line.column]:
                self._result.diagnostics.append(
                    Diagnostic.warning(
                        ErrorCode.W0009,
                        line.number,
                        0,
                        line.column,
                    ).with_help("indent with 4 spaces per level"),
                )
            index = self._handle(line, index)

        logger.debug(
            "Built %d top-level commands, %d declarations, %d imports",
            len(self._result.commands),
            len(self._result.declarations),
            len(self._result.imports),
        )
        return self._result

    def _handle(self, line: ClassifiedLine, index: int) -> int:
        """Process one classified line and return the next line index."""
        if line.kind == LineKind.COMMAND:
            self._add_command(line)
        elif line.kind == LineKind.DIRECTIVE:
            return self._add_directive(line, index)
        elif line.kind == LineKind.DECLARATION:
            return self._add_declaration(line, index)
        elif line.kind == LineKind.PLAIN:
            logger.debug("Ignoring plain line %d", line.number)
            self._result.diagnostics.append(
                Diagnostic.information(
                    ErrorCode.I0002,
                    line.number,
                    line.column,
                    line.end,
                ),
            )
        return index + 1

    # =========================================================================
    # Commands and directives
    # =========================================================================

    def _parent_of(self, indent: int) -> Command | None:
        for entry_indent, command in reversed(self._stack):
            if entry_indent < indent:
                return command
        return None

    def _add_command(self, line: ClassifiedLine) -> None:
        name = line.name or ""
        if line.malformed:
            self._result.diagnostics.append(
                Diagnostic.error(
                    ErrorCode.E0101,
                    line.number,
                    line.column,
                    line.end,
                    text=line.text.strip(),
                ).with_help("expected format: name(param: type, ...):"),
            )
            # Still opens a scope so its body does not attach elsewhere.
            self._open_scope(
                line.indent,
                Command(name=name, line=line.number, indent=line.indent),
            )
            return

        command = Command(
            name=name,
            line=line.number,
            indent=line.indent,
            meta=SourcePosition(
                line=line.number,
                column=line.name_column,
                end_line=line.number,
                end_column=line.name_column + len(name),
            ),
        )

        if line.params is not None:
            parameters, diagnostics = parse_parameter_list(
                line.params,
                line.number,
                line.params_column,
            )
            command.parameters = parameters
            self._result.diagnostics.extend(diagnostics)
            self._result.diagnostics.extend(validate_parameters(command))

        parent = self._parent_of(line.indent)
        if parent is None:
            self._result.commands.append(command)
        else:
            parent.children.append(command)
        self._open_scope(line.indent, command)

    def _open_scope(self, indent: int, command: Command) -> None:
        while self._stack and self._stack[-1][0] >= indent:
            self._stack.pop()
        self._stack.append((indent, command))

    def _add_directive(self, line: ClassifiedLine, index: int) -> int:
        directive = make_directive(line)
        self._result.diagnostics.extend(self._validator.validate(line, directive))

        owner = self._parent_of(line.indent)
        if owner is None:
            self._result.orphans.append(directive)
            self._result.diagnostics.append(
                Diagnostic.warning(ErrorCode.W0001, line.number, line.column, line.end),
            )
        else:
            owner.directives.append(directive)

        if directive.base in SCRIPT_DIRECTIVES and line.has_separator:
            next_index, diagnostics = self._validator.check_script(line, index)
            self._result.diagnostics.extend(diagnostics)
            return next_index
        return index + 1

    # =========================================================================
    # Declarations
    # =========================================================================

    def _declaration_error(self, line: ClassifiedLine) -> None:
        keyword = line.name or ""
        self._result.diagnostics.append(
            Diagnostic.error(
                ErrorCode.E0104,
                line.number,
                line.column,
                line.end,
                kind=keyword,
            ).with_help(DECLARATION_HELP[keyword]),
        )

    def _add_declaration(self, line: ClassifiedLine, index: int) -> int:
        keyword = line.name or ""
        if keyword in ("var", "const"):
            self._add_assignment(line)
        elif keyword == "function":
            return self._add_function(line, index)
        else:
            self._add_import(line)
        return index + 1

    def _add_assignment(self, line: ClassifiedLine) -> None:
        match = _ASSIGNMENT_RE.match(line.value or "")
        if match is None:
            self._declaration_error(line)
            return
        self._result.declarations.append(
            Declaration(
                kind=DeclarationKind(line.name),
                name=match.group("name"),
                line=line.number,
                value=match.group("value").strip(),
                meta=SourcePosition(
                    line=line.number,
                    column=line.value_column,
                    end_line=line.number,
                    end_column=line.value_column + len(match.group("name")),
                ),
            ),
        )

    def _add_function(self, line: ClassifiedLine, index: int) -> int:
        value = line.value or ""
        match = _FUNCTION_RE.match(value)
        if match is None or value.count("(") != value.count(")"):
            self._declaration_error(line)
        else:
            declaration = Declaration(
                kind=DeclarationKind.FUNCTION,
                name=match.group("name"),
                line=line.number,
                meta=SourcePosition(line=line.number, column=line.value_column),
            )
            params = match.group("params")
            if params is not None:
                parameters, diagnostics = parse_parameter_list(
                    params,
                    line.number,
                    line.value_column + match.start("params"),
                )
                declaration.parameters = parameters
                self._result.diagnostics.extend(diagnostics)
            self._result.declarations.append(declaration)

        end, _ = find_block_end(self._lines, index, line.offset)
        for body_index in range(index + 1, end):
            body_line = classify_line(self._lines[body_index], body_index + 1)
            nested = body_line.kind == LineKind.DECLARATION
            if nested and body_line.name in ("var", "const"):
                self._add_assignment(body_line)
        return end

    def _add_import(self, line: ClassifiedLine) -> None:
        keyword = line.name or "import"
        value = line.value or ""
        if not value:
            self._declaration_error(line)
            return

        if keyword == "include":
            match = _INCLUDE_RE.match(value)
            if match is None:
                self._declaration_error(line)
                return
            path, into = match.group("path"), match.group("into")
            path_column = line.value_column + match.start("path")
            symbols_text = match.group("symbols")
            symbols_column = (
                line.value_column + match.start("symbols") if symbols_text else 0
            )
        else:
            into = None
            match = _IMPORT_FROM_RE.match(value)
            if match is None:
                path, symbols_text, symbols_column = value, None, 0
                path_column = line.value_column
            else:
                path = match.group("path").strip()
                path_column = line.value_column + match.start("path")
                symbols_text = match.group("symbols")
                symbols_column = line.value_column + match.start("symbols")

        symbols = [
            ImportSymbol(
                name=part.strip(),
                column=symbols_column + offset + _indent_of(part),
            )
            for part, offset in split_top_level(symbols_text or "")
            if part.strip()
        ]

        self._result.imports.append(
            Import(
                path=path,
                line=line.number,
                path_column=path_column,
                keyword=keyword,
                symbols=symbols,
                into=into,
            ),
        )


def _indent_of(text: str) -> int:
    return len(text) - len(text.lstrip())


def build_tree(text: str) -> BuildResult:
    """Build the command tree of a document.

    Args:
        text: Full document text.

    Returns:
        The structural pass result.

    """
    return TreeBuilder(text).build()
