"""Parameter list parser for Nestfile command signatures.

Parse the text between a command's parentheses into Parameter nodes and
validate names, types, aliases, and default values.
"""

import re

from lark.exceptions import LarkError

from nestlint.ast.nodes import Command, Parameter, SourcePosition
from nestlint.errors.codes import ErrorCode
from nestlint.errors.diagnostics import Diagnostic
from nestlint.grammar.parser import parse_literal
from nestlint.log import get_logger

logger = get_logger(__name__)

VALID_PARAM_TYPES = frozenset({"str", "bool", "num", "arr"})
"""Recognized parameter types."""

RESERVED_SHORT_OPTIONS = frozenset({"h", "V", "v", "n", "c"})
"""Short flags reserved by the command-line runner."""

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")
_WILDCARD_RE = re.compile(
    r"^\*(?P<name>[A-Za-z_][A-Za-z0-9_]*)?(?:\[(?P<count>[^\]]*)\])?$",
)

_OPENING = "(["
_CLOSING = ")]"


def split_top_level(text: str, separator: str = ",") -> list[tuple[str, int]]:
    """Split text on separators outside brackets and quotes.

    Args:
        text: Text to split.
        separator: Single separator character.

    Returns:
        List of ``(part, offset)`` pairs; ``offset`` is the position of the
        part's first character in ``text``. Blank trailing parts are dropped.

    """
    parts: list[tuple[str, int]] = []
    depth = 0
    quote: str | None = None
    start = 0

    for i, ch in enumerate(text):
        if quote is not None:
            if ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch in _OPENING:
            depth += 1
        elif ch in _CLOSING:
            depth = max(0, depth - 1)
        elif ch == separator and depth == 0:
            parts.append((text[start:i], start))
            start = i + 1

    tail = text[start:]
    if tail.strip():
        parts.append((tail, start))

    return parts


def _span(line: int, column: int, text: str) -> SourcePosition:
    end = column + len(text)
    return SourcePosition(line=line, column=column, end_line=line, end_column=end)


def _trimmed(text: str, column: int) -> tuple[str, int]:
    """Strip text and shift its column past leading whitespace."""
    return text.strip(), column + (len(text) - len(text.lstrip()))


def parse_parameter(
    text: str,
    line: int,
    column: int,
) -> tuple[Parameter | None, list[Diagnostic]]:
    """Parse one parameter declaration.

    Grammar: ``["*"|"!"] name ["|" alias] [":" type] ["=" default]``.

    Args:
        text: Parameter text (may carry surrounding whitespace).
        line: Line number of the signature.
        column: Column of ``text``'s first character.

    Returns:
        The parameter, or None when the text is not a parameter, together
        with the diagnostics raised while parsing it.

    """
    text, column = _trimmed(text, column)
    end = column + len(text)

    if text.startswith("*"):
        return _parse_wildcard(text, line, column)

    invalid = [
        Diagnostic.error(ErrorCode.E0102, line, column, end, text=text).with_help(
            "expected format: [!]name[|alias]: type [= default]",
        ),
    ]

    type_sep = text.find(":")
    if type_sep == -1:
        return None, invalid

    name_part, name_column = _trimmed(text[:type_sep], column)
    named = name_part.startswith("!")
    if named:
        name_part, name_column = _trimmed(name_part[1:], name_column + 1)

    alias: str | None = None
    alias_meta: SourcePosition | None = None
    if "|" in name_part:
        bar = name_part.index("|")
        alias, alias_column = _trimmed(name_part[bar + 1 :], name_column + bar + 1)
        alias_meta = _span(line, alias_column, alias)
        name_part = name_part[:bar].strip()

    if not _NAME_RE.match(name_part):
        return None, invalid

    type_and_default = text[type_sep + 1 :]
    type_text, type_column = _trimmed(type_and_default, column + type_sep + 1)
    default: str | None = None
    default_meta: SourcePosition | None = None
    eq = type_text.find("=")
    if eq != -1:
        default, default_column = _trimmed(type_text[eq + 1 :], type_column + eq + 1)
        default_meta = _span(line, default_column, default)
        type_text = type_text[:eq].strip()

    parameter = Parameter(
        name=f"!{name_part}" if named else name_part,
        type=type_text,
        line=line,
        alias=alias,
        default=default,
        meta=_span(line, column, text),
        type_meta=_span(line, type_column, type_text),
        alias_meta=alias_meta,
        default_meta=default_meta,
    )
    return parameter, []


def _parse_wildcard(
    text: str,
    line: int,
    column: int,
) -> tuple[Parameter | None, list[Diagnostic]]:
    """Parse a wildcard parameter (``*``, ``*files``, ``*files[2]``)."""
    end = column + len(text)

    if ":" in text or "=" in text:
        return None, [
            Diagnostic.error(
                ErrorCode.E0107,
                line,
                column,
                end,
                text=text,
                reason="a wildcard cannot have a type annotation or default value",
            ),
        ]

    match = _WILDCARD_RE.match(text)
    if match is None:
        return None, [
            Diagnostic.error(
                ErrorCode.E0107,
                line,
                column,
                end,
                text=text,
                reason="expected *name or *name[N]",
            ),
        ]

    count: int | None = None
    count_text = match.group("count")
    if count_text is not None:
        if not count_text.strip().isdigit() or int(count_text) < 1:
            return None, [
                Diagnostic.error(
                    ErrorCode.E0107,
                    line,
                    column,
                    end,
                    text=text,
                    reason="the capture count must be a positive integer",
                ),
            ]
        count = int(count_text)

    name = f"*{match.group('name') or ''}"
    return Parameter(
        name=name,
        type="arr",
        line=line,
        count=count,
        meta=_span(line, column, text),
    ), []


def parse_parameter_list(
    text: str,
    line: int,
    column: int,
) -> tuple[list[Parameter], list[Diagnostic]]:
    """Parse the parameter list of a command signature.

    Args:
        text: Text between the signature's parentheses.
        line: Line number of the signature.
        column: Column of ``text``'s first character.

    Returns:
        Parsed parameters and the diagnostics for invalid parts.

    """
    parameters: list[Parameter] = []
    diagnostics: list[Diagnostic] = []

    if not text.strip():
        return parameters, diagnostics

    for part, offset in split_top_level(text):
        parameter, part_diagnostics = parse_parameter(part, line, column + offset)
        diagnostics.extend(part_diagnostics)
        if parameter is not None:
            parameters.append(parameter)

    return parameters, diagnostics


def _literal_type(value: object) -> str:
    """Map a parsed literal to its parameter type."""
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, float):
        return "num"
    if isinstance(value, list):
        return "arr"
    return "str"


def default_value_type(default: str) -> str:
    """Infer the parameter type of a default value.

    Quoted text is ``str``, ``true``/``false`` is ``bool``, numbers are
    ``num``, ``[...]`` is ``arr``; any other bare text is ``str``.

    Args:
        default: Raw default text.

    Returns:
        One of the recognized parameter types.

    """
    try:
        return _literal_type(parse_literal(default))
    except LarkError:
        logger.debug("Default %r is not a literal, treating it as str", default)
        return "str"


def validate_parameters(command: Command) -> list[Diagnostic]:
    """Validate the parameters of one command.

    Check duplicate names, types, aliases, and default values.

    Args:
        command: Command whose signature was just parsed.

    Returns:
        Diagnostics in parameter order.

    """
    diagnostics: list[Diagnostic] = []
    seen_names: set[str] = set()
    seen_aliases: dict[str, str] = {}

    for param in command.parameters:
        meta = param.meta or SourcePosition(line=param.line, column=0)
        start = meta.column
        end = meta.end_column if meta.end_column is not None else start
        clean_name = param.clean_name

        if clean_name in seen_names:
            diagnostics.append(
                Diagnostic.error(
                    ErrorCode.E0106,
                    param.line,
                    start,
                    end,
                    name=clean_name,
                    command=command.name,
                ),
            )
        else:
            seen_names.add(clean_name)

        type_ok = param.type in VALID_PARAM_TYPES
        if not type_ok:
            type_meta = param.type_meta or meta
            diagnostics.append(
                Diagnostic.error(
                    ErrorCode.E0105,
                    param.line,
                    type_meta.column,
                    type_meta.end_column or end,
                    type=param.type,
                    name=clean_name,
                ),
            )

        if param.alias is not None:
            diagnostics.extend(_validate_alias(param, seen_aliases, start, end))

        if type_ok and param.default is not None and not param.is_wildcard:
            actual = default_value_type(param.default)
            if actual != param.type:
                default_meta = param.default_meta or meta
                diagnostics.append(
                    Diagnostic.error(
                        ErrorCode.E0403,
                        param.line,
                        default_meta.column,
                        default_meta.end_column or end,
                        value=param.default,
                        name=clean_name,
                        type=param.type,
                    ).with_help(f"expected a {param.type} value, got a {actual} value"),
                )

    return diagnostics


def _validate_alias(
    param: Parameter,
    seen_aliases: dict[str, str],
    start: int,
    end: int,
) -> list[Diagnostic]:
    """Validate the alias of one parameter."""
    alias = param.alias or ""
    name = param.clean_name
    if param.alias_meta is not None and alias:
        start = param.alias_meta.column
        end = param.alias_meta.end_column or end

    if len(alias) != 1:
        diagnostic = Diagnostic.warning(
            ErrorCode.W0002,
            param.line,
            start,
            end,
            alias=alias,
            name=name,
        )
        if not alias:
            diagnostic.message = f"empty alias for parameter '{name}'"
        return [diagnostic.with_help("use a single character, e.g. 'f' for 'force'")]

    diagnostics: list[Diagnostic] = []
    if alias in RESERVED_SHORT_OPTIONS:
        reserved = ", ".join(sorted(RESERVED_SHORT_OPTIONS))
        diagnostics.append(
            Diagnostic.warning(
                ErrorCode.W0003,
                param.line,
                start,
                end,
                alias=alias,
                name=name,
            ).with_help(f"reserved short options are: {reserved}"),
        )

    if alias in seen_aliases:
        diagnostics.append(
            Diagnostic.warning(
                ErrorCode.W0006,
                param.line,
                start,
                end,
                alias=alias,
                other=seen_aliases[alias],
            ),
        )
    else:
        seen_aliases[alias] = name

    return diagnostics
