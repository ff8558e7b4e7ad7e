"""Directive validator for Nestfile documents.

Check the shape of each directive as it is classified: known keywords,
modifiers, env/logs/validate syntax, multiline script blocks, and command
substitutions.
"""

import re

from lark.exceptions import LarkError

from nestlint.ast.nodes import Directive, SourcePosition
from nestlint.errors.codes import ErrorCode
from nestlint.errors.diagnostics import Diagnostic
from nestlint.grammar.parser import parse_dependencies
from nestlint.log import get_logger
from nestlint.structure.classifier import (
    DIRECTIVE_KEYWORDS,
    ClassifiedLine,
    LineKind,
    classify_line,
    directive_base,
    leading_spaces,
)

logger = get_logger(__name__)

Diagnostics = list[Diagnostic]
"""Diagnostics produced by one check."""

SCRIPT_DIRECTIVES = frozenset({"script", "before", "after", "fallback", "finally"})
"""Directives whose value is a shell script."""

MULTILINE_MARKER = "|"
"""Directive value that opens a multiline block."""

BRACKET_MODIFIER_DIRECTIVES = SCRIPT_DIRECTIVES | {"depends"}
"""Directives accepting a bracket modifier (``script[hide]``, ``depends[parallel]``)."""

DOTTED_MODIFIER_DIRECTIVES = frozenset({"logs", "validate"})
"""Directives accepting a dotted modifier (``logs.json``, ``validate.version``)."""

STANDALONE_DIRECTIVES = frozenset({"else", "privileged"})
"""Directives that may be written without a ``:`` separator."""

LOG_SINKS = frozenset({"json", "txt"})
"""Supported logs sinks: structured (json) and plain (txt)."""

PRIVILEGED_VALUES = frozenset({"", "true", "false", "yes", "no", "1", "0"})
"""Accepted values of the privileged directive."""

_ENV_ASSIGNMENT_RE = re.compile(r"^(?P<key>[A-Za-z_][A-Za-z0-9_]*)=(?P<value>.*)$")
_ENV_FILE_RE = re.compile(r"^(\.env|\./.*\.env|.*/\.env|.*\.env)$")
_ENV_SUBSTITUTION_RE = re.compile(r"\$\{[A-Za-z_][A-Za-z0-9_]*(?::-[^}]*)?\}")
_VALIDATE_RE = re.compile(
    r"^(?P<target>[A-Za-z_][A-Za-z0-9_]*)\s+(?:matches\s+\S.*|in\s+\S.*)$",
)
_NAME_PARTS_RE = re.compile(
    r"^(?P<base>[^.\[]*)(?:\.(?P<dotted>[^\[]*))?(?:\[(?P<modifier>[^\]]*)\])?$",
)

ENV_HELP = 'expected format: "env: KEY=VALUE" or "env: .env" or "env: path/to/file.env"'
LOGS_HELP = 'expected "logs.json: <path>" or "logs.txt: <path>"'
VALIDATE_HELP = (
    'expected "validate: PARAM matches <pattern>", "validate: PARAM in <set>" '
    'or "validate.PARAM: <pattern>"'
)


def env_assignment_key(value: str) -> str | None:
    """Return the key assigned by an env directive value, if any."""
    match = _ENV_ASSIGNMENT_RE.match(value.strip())
    return match.group("key") if match else None


def has_balanced_substitutions(value: str) -> bool:
    """Check that every ``$(`` has a matching ``)``.

    Args:
        value: Directive value.

    Returns:
        True if command substitutions are balanced.

    """
    depth = 0
    i = 0
    while i < len(value):
        if value.startswith("$(", i):
            depth += 1
            i += 2
            continue
        if value[i] == ")" and depth > 0:
            depth -= 1
        i += 1
    return depth == 0


def make_directive(line: ClassifiedLine) -> Directive:
    """Build a Directive node from a classified directive line."""
    name = line.name or ""
    parts = _NAME_PARTS_RE.match(name)
    dotted = parts.group("dotted") if parts else None
    modifier = parts.group("modifier") if parts else None
    return Directive(
        name=name,
        value=line.value or "",
        line=line.number,
        base=directive_base(name),
        dotted=dotted,
        modifier=modifier,
        marker=line.marker,
        meta=SourcePosition(
            line=line.number,
            column=line.name_column,
            end_line=line.number,
            end_column=line.name_column + len(name),
        ),
        value_column=line.value_column,
    )


def find_block_end(lines: list[str], index: int, offset: int) -> tuple[int, bool]:
    """Find where a multiline block opened at ``lines[index]`` ends.

    The block holds blank lines and lines indented deeper than the opening
    directive; it closes at the first non-blank line at or below it.

    Args:
        lines: All document lines.
        index: Index (0-based) of the directive line opening the block.
        offset: Leading spaces of the directive line.

    Returns:
        ``(end, has_content)`` where ``end`` is the index of the first line
        after the block and ``has_content`` tells whether any non-blank line
        belongs to it.

    """
    end = index + 1
    has_content = False
    while end < len(lines):
        line = lines[end]
        if line.strip():
            if leading_spaces(line) <= offset:
                break
            has_content = True
        end += 1
    return end, has_content


class DirectiveValidator:
    """Validate directive lines of one document.

    Hold the document lines so script directives can look ahead for their
    multiline block or a forgotten block marker.
    """

    def __init__(self, lines: list[str]) -> None:
        """Initialize the validator.

        Args:
            lines: All document lines (without line breaks).

        """
        self._lines = lines

    def validate(self, line: ClassifiedLine, directive: Directive) -> Diagnostics:
        """Validate one directive.

        Args:
            line: The classified directive line.
            directive: The directive built from it.

        Returns:
            Diagnostics for the directive, in column order of discovery.

        """
        base = directive.base
        if base not in DIRECTIVE_KEYWORDS:
            meta = directive.meta or SourcePosition(line=line.number, column=0)
            return [
                Diagnostic.error(
                    ErrorCode.E0103,
                    line.number,
                    meta.column,
                    meta.end_column or line.end,
                    name=directive.name,
                ),
            ]

        diagnostics: Diagnostics = []
        diagnostics.extend(self._check_modifiers(line, directive))

        if not line.has_separator and base not in STANDALONE_DIRECTIVES:
            diagnostics.append(
                self._value_error(line, directive, "expected ':' after the name"),
            )
            return diagnostics

        checker = getattr(self, f"_check_{base}", None)
        if checker is not None:
            diagnostics.extend(checker(line, directive))

        if "$(" in directive.value and not has_balanced_substitutions(directive.value):
            diagnostics.append(
                Diagnostic.warning(
                    ErrorCode.W0004,
                    line.number,
                    line.value_column,
                    line.end,
                ),
            )

        return diagnostics

    def check_script(
        self,
        line: ClassifiedLine,
        index: int,
    ) -> tuple[int, Diagnostics]:
        """Check a script-family directive and skip its multiline block.

        Args:
            line: The classified directive line.
            index: Index (0-based) of the line in the document.

        Returns:
            The index of the next line to classify and any diagnostics.

        """
        if line.value == MULTILINE_MARKER:
            end, has_content = find_block_end(self._lines, index, line.offset)
            if not has_content:
                return end, [
                    Diagnostic.error(
                        ErrorCode.E0204,
                        line.number,
                        line.value_column,
                        line.value_column + 1,
                    ).with_help("add indented script lines below the directive"),
                ]
            logger.debug(
                "Multiline block at line %d spans %d lines",
                line.number,
                end - index - 1,
            )
            return end, []

        if index + 1 < len(self._lines):
            following = classify_line(self._lines[index + 1], line.number + 1)
            if following.kind == LineKind.PLAIN and following.offset > line.offset:
                # The deeper lines were meant as the block; skip them.
                end, _ = find_block_end(self._lines, index, line.offset)
                return end, [
                    Diagnostic.error(
                        ErrorCode.E0205,
                        line.number,
                        line.value_column,
                        line.end,
                    ).with_help(f"use '{line.name}: |' and indent the lines below"),
                ]

        return index + 1, []

    def _check_modifiers(
        self,
        line: ClassifiedLine,
        directive: Directive,
    ) -> Diagnostics:
        diagnostics: Diagnostics = []
        meta = directive.meta or SourcePosition(line=line.number, column=0)
        end = meta.end_column or line.end
        base = directive.base
        if directive.modifier is not None and base not in BRACKET_MODIFIER_DIRECTIVES:
            diagnostics.append(
                Diagnostic.warning(
                    ErrorCode.W0008,
                    line.number,
                    meta.column,
                    end,
                    name=directive.base,
                    modifier=f"[{directive.modifier}]",
                ),
            )
        if directive.dotted is not None and base not in DOTTED_MODIFIER_DIRECTIVES:
            diagnostics.append(
                Diagnostic.warning(
                    ErrorCode.W0008,
                    line.number,
                    meta.column,
                    end,
                    name=directive.base,
                    modifier=f".{directive.dotted}",
                ),
            )
        return diagnostics

    def _value_error(
        self,
        line: ClassifiedLine,
        directive: Directive,
        reason: str,
    ) -> Diagnostic:
        start = line.value_column if directive.value else line.name_column
        return Diagnostic.error(
            ErrorCode.E0206,
            line.number,
            start,
            line.end,
            name=directive.base,
            reason=reason,
        )

    def _check_env(self, line: ClassifiedLine, directive: Directive) -> Diagnostics:
        value = directive.value
        valid = False
        assignment = _ENV_ASSIGNMENT_RE.match(value)
        if assignment:
            remainder = _ENV_SUBSTITUTION_RE.sub("", assignment.group("value"))
            valid = "${" not in remainder
        elif value:
            valid = bool(_ENV_FILE_RE.match(value))

        if valid:
            return []

        start = line.value_column if value else line.name_column
        return [
            Diagnostic.error(ErrorCode.E0201, line.number, start, line.end).with_help(
                ENV_HELP,
            ),
        ]

    def _check_logs(self, line: ClassifiedLine, directive: Directive) -> Diagnostics:
        if directive.dotted is not None:
            sink, path = directive.dotted, directive.value
        else:
            sink, _, path = directive.value.partition(" ")
        if sink.lower() in LOG_SINKS and path.strip():
            return []
        meta = directive.meta or SourcePosition(line=line.number, column=0)
        return [
            Diagnostic.error(
                ErrorCode.E0202,
                line.number,
                meta.column,
                line.end,
            ).with_help(LOGS_HELP),
        ]

    def _check_validate(
        self,
        line: ClassifiedLine,
        directive: Directive,
    ) -> Diagnostics:
        if directive.dotted is not None:
            valid = bool(directive.dotted) and bool(directive.value)
        else:
            valid = bool(_VALIDATE_RE.match(directive.value))
        if valid:
            return []
        start = line.value_column if directive.value else line.name_column
        return [
            Diagnostic.error(ErrorCode.E0203, line.number, start, line.end).with_help(
                VALIDATE_HELP,
            ),
        ]

    def _check_depends(self, line: ClassifiedLine, directive: Directive) -> Diagnostics:
        if not directive.value:
            return [self._value_error(line, directive, "expected at least one command")]
        try:
            dependencies = parse_dependencies(directive.value)
        except LarkError as e:
            logger.debug("Invalid depends value at line %d: %s", line.number, e)
            return [
                self._value_error(line, directive, "expected 'a, group:b(arg=value)'"),
            ]
        logger.debug("Line %d depends on %d commands", line.number, len(dependencies))
        return []

    def _check_privileged(
        self,
        line: ClassifiedLine,
        directive: Directive,
    ) -> Diagnostics:
        if directive.value.lower() in PRIVILEGED_VALUES:
            return []
        return [self._value_error(line, directive, "expected true or false")]

    def _check_if(self, line: ClassifiedLine, directive: Directive) -> Diagnostics:
        if directive.value:
            return []
        return [self._value_error(line, directive, "a condition is required")]

    _check_elif = _check_if

    def _check_else(self, line: ClassifiedLine, directive: Directive) -> Diagnostics:
        if not directive.value:
            return []
        return [self._value_error(line, directive, "else does not take a condition")]

    def _check_cwd(self, line: ClassifiedLine, directive: Directive) -> Diagnostics:
        if directive.value:
            return []
        return [self._value_error(line, directive, "a directory path is required")]

    def _check_watch(self, line: ClassifiedLine, directive: Directive) -> Diagnostics:
        if directive.value:
            return []
        return [self._value_error(line, directive, "a glob pattern is required")]
