"""Line classifier for Nestfile documents.

Decide, one raw line at a time, whether a line is a command definition,
a directive, a global declaration, plain content, or something to skip.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from nestlint.log import get_logger

logger = get_logger(__name__)

INDENT_SIZE = 4
"""Number of spaces per indentation level."""

DIRECTIVE_MARKER = ">"
"""Optional leading marker of directive lines."""

DIRECTIVE_KEYWORDS = frozenset({
    "desc",
    "cwd",
    "env",
    "script",
    "before",
    "after",
    "fallback",
    "finally",
    "depends",
    "validate",
    "logs",
    "privileged",
    "require_confirm",
    "if",
    "elif",
    "else",
    "watch",
})
"""Directive vocabulary."""

DECLARATION_KEYWORDS = frozenset({"var", "const", "function", "import", "include"})
"""Keywords of global declarations."""

_COMMAND_RE = re.compile(
    r"^(?P<name>[A-Za-z0-9_]+)\s*(?:\((?P<params>.*)\))?\s*:\s*$",
)
_COMMAND_ATTEMPT_RE = re.compile(r"^[A-Za-z0-9_]+\s*\(")
_COMMAND_SHAPE_RE = re.compile(r"^[^\s:(#>]+(?:\s+[^\s:(#>]+)*\s*(?:\(.*\))?\s*:\s*$")
_DIRECTIVE_RE = re.compile(
    r"^(?P<name>[A-Za-z_][A-Za-z0-9_]*"
    r"(?:\.[A-Za-z0-9_]*)*"
    r"(?:\[[^\]]*\])?)"
    r"\s*(?P<sep>:(?P<value>.*))?$",
)
_DECLARATION_RE = re.compile(
    r"^(?P<at>@)?(?P<keyword>var|const|function|import|include)(?:\s+(?P<rest>.*))?$",
)


class LineKind(Enum):
    """Kind of a classified line."""

    SKIP = auto()
    COMMAND = auto()
    DIRECTIVE = auto()
    DECLARATION = auto()
    PLAIN = auto()


@dataclass(frozen=True)
class ClassifiedLine:
    """Classification of one raw line with the offsets needed for ranges."""

    kind: LineKind
    text: str
    """Raw line without the trailing line break."""

    number: int
    """Line number (1-indexed)."""

    offset: int = 0
    """Number of leading spaces."""

    column: int = 0
    """Column of the first non-blank character."""

    name: str | None = None
    """Command name, full directive name, or declaration keyword."""

    name_column: int = 0
    params: str | None = None
    """Text between the parentheses of a command signature."""

    params_column: int = 0
    value: str | None = None
    """Directive value or declaration body, stripped."""

    value_column: int = 0
    has_separator: bool = False
    """Whether a directive was written with a ``:`` separator."""

    marker: bool = False
    malformed: bool = False
    """Whether a command-like line failed to match the signature pattern."""

    @property
    def indent(self) -> int:
        """Indentation level of the line."""
        return self.offset // INDENT_SIZE

    @property
    def end(self) -> int:
        """Column just past the last non-blank character."""
        return len(self.text.rstrip())


def leading_spaces(line: str) -> int:
    """Count the spaces that start a line."""
    return len(line) - len(line.lstrip(" "))


def indent_level(line: str) -> int:
    """Compute the indentation level of a line."""
    return leading_spaces(line) // INDENT_SIZE


def directive_base(name: str) -> str:
    """Return the directive keyword without dotted or bracket modifiers."""
    return re.split(r"[.\[]", name, maxsplit=1)[0].strip()


def _stripped_value(raw: str, start: int) -> tuple[str, int]:
    """Strip a value slice and return it with its starting column."""
    value = raw.strip()
    if not value:
        return "", start
    return value, start + (len(raw) - len(raw.lstrip()))


def classify_line(text: str, number: int) -> ClassifiedLine:
    """Classify one raw line.

    Lines are matched without their leading whitespace, but only spaces
    count toward the indentation level.

    Args:
        text: Raw line without the trailing line break.
        number: Line number (1-indexed).

    Returns:
        The classified line.

    """
    text = text.rstrip("\r")
    stripped = text.strip()
    offset = leading_spaces(text)
    column = len(text) - len(text.lstrip())

    if not stripped or stripped.startswith("#"):
        return ClassifiedLine(
            kind=LineKind.SKIP,
            text=text,
            number=number,
            offset=offset,
            column=column,
        )

    body = stripped

    if body.startswith(DIRECTIVE_MARKER):
        return _classify_directive(text, number, offset, column, marker=True)

    declaration = _DECLARATION_RE.match(body)
    if declaration:
        rest = declaration.group("rest") or ""
        has_rest = declaration.group("rest") is not None
        rest_start = declaration.start("rest") if has_rest else len(body)
        value, value_column = _stripped_value(rest, column + rest_start)
        return ClassifiedLine(
            kind=LineKind.DECLARATION,
            text=text,
            number=number,
            offset=offset,
            column=column,
            name=declaration.group("keyword"),
            name_column=column,
            value=value,
            value_column=value_column,
        )

    command = _COMMAND_RE.match(body)
    if command:
        name = command.group("name")
        params = command.group("params")
        if params is not None or name not in DIRECTIVE_KEYWORDS:
            return ClassifiedLine(
                kind=LineKind.COMMAND,
                text=text,
                number=number,
                offset=offset,
                column=column,
                name=name,
                name_column=column,
                params=params,
                params_column=(
                    column + command.start("params") if params is not None else 0
                ),
            )

    attempt = _COMMAND_ATTEMPT_RE.match(body)
    if attempt and directive_base(body) not in DIRECTIVE_KEYWORDS:
        return ClassifiedLine(
            kind=LineKind.COMMAND,
            text=text,
            number=number,
            offset=offset,
            column=column,
            name=re.split(r"[\s(]", body, maxsplit=1)[0],
            name_column=column,
            malformed=True,
        )

    directive = _DIRECTIVE_RE.match(body)
    if directive and directive.group("sep") is not None:
        return _classify_directive(text, number, offset, column, marker=False)

    # A known keyword is a directive even when its separator is missing.
    keyword = re.split(r"\s", body, maxsplit=1)[0]
    if directive_base(keyword) in DIRECTIVE_KEYWORDS:
        return _classify_directive(text, number, offset, column, marker=False)

    # Shaped like a signature, but the name is not a valid identifier.
    if _COMMAND_SHAPE_RE.match(body):
        return ClassifiedLine(
            kind=LineKind.COMMAND,
            text=text,
            number=number,
            offset=offset,
            column=column,
            name=re.split(r"[\s(:]", body, maxsplit=1)[0],
            name_column=column,
            malformed=True,
        )

    return ClassifiedLine(
        kind=LineKind.PLAIN,
        text=text,
        number=number,
        offset=offset,
        column=column,
    )


def _classify_directive(
    text: str,
    number: int,
    offset: int,
    column: int,
    *,
    marker: bool,
) -> ClassifiedLine:
    """Split a directive line into name and value.

    Without a ``:`` right after the name, the name is the first word and
    the rest of the line is the value.
    """
    start = column
    content = text.rstrip()
    if marker:
        start += 1
        while start < len(content) and content[start] in " \t":
            start += 1

    rest = content[start:]
    colon = rest.find(":")
    if colon != -1 and re.search(r"\s", rest[:colon].strip()):
        colon = -1
    if colon == -1:
        name = re.split(r"\s", rest, maxsplit=1)[0]
        value, value_column = _stripped_value(rest[len(name) :], start + len(name))
        if not value:
            value_column = len(content)
    else:
        name = rest[:colon].strip()
        value, value_column = _stripped_value(rest[colon + 1 :], start + colon + 1)

    return ClassifiedLine(
        kind=LineKind.DIRECTIVE,
        text=text,
        number=number,
        offset=offset,
        column=column,
        name=name,
        name_column=start,
        value=value,
        value_column=value_column,
        has_separator=colon != -1,
        marker=marker,
    )
