"""Error code definitions for the Nestfile analyzer.

Provide standardized diagnostic codes for categorizing and identifying
specific problems found in Nestfile documents.
"""

from enum import Enum

from nestlint.log import get_logger

logger = get_logger(__name__)

_CATEGORY_BY_PREFIX: dict[str, str] = {
    "E01": "syntax",
    "E02": "shape",
    "E03": "reference",
    "E04": "semantic",
    "W00": "consistency",
    "I00": "style",
}
"""Category names keyed by the first three characters of a code."""


class ErrorCode(str, Enum):
    """Nestfile diagnostic codes.

    The prefix indicates the category:
    - E01xx: Syntax errors (malformed signatures, parameters, declarations)
    - E02xx: Shape errors (malformed directive values)
    - E03xx: Reference errors (undefined variables, missing imports)
    - E04xx: Semantic errors (command tree consistency)
    - W00xx: Consistency warnings
    - I00xx: Stylistic notes
    """

    # Syntax errors (E01xx)
    E0101 = "E0101"
    """Malformed command definition."""

    E0102 = "E0102"
    """Invalid parameter syntax."""

    E0103 = "E0103"
    """Unknown directive keyword."""

    E0104 = "E0104"
    """Malformed global declaration."""

    E0105 = "E0105"
    """Invalid parameter type."""

    E0106 = "E0106"
    """Duplicate parameter name."""

    E0107 = "E0107"
    """Invalid wildcard parameter."""

    # Shape errors (E02xx)
    E0201 = "E0201"
    """Invalid env directive."""

    E0202 = "E0202"
    """Invalid logs directive."""

    E0203 = "E0203"
    """Invalid validate directive."""

    E0204 = "E0204"
    """Empty multiline script block."""

    E0205 = "E0205"
    """Indented script continuation without the multiline marker."""

    E0206 = "E0206"
    """Invalid directive value."""

    E0207 = "E0207"
    """Conditional directive without a preceding if."""

    # Reference errors (E03xx)
    E0301 = "E0301"
    """Undefined template variable."""

    E0302 = "E0302"
    """Import file not found."""

    E0303 = "E0303"
    """Imported command not found in target file."""

    # Semantic errors (E04xx)
    E0401 = "E0401"
    """Duplicate command name at the same level."""

    E0402 = "E0402"
    """Reserved top-level command name."""

    E0403 = "E0403"
    """Default value does not match the parameter type."""

    # Warning codes (W00xx)
    W0001 = "W0001"
    """Directive is not inside a command."""

    W0002 = "W0002"
    """Alias is empty or longer than one character."""

    W0003 = "W0003"
    """Alias conflicts with a reserved short option."""

    W0004 = "W0004"
    """Unclosed command substitution."""

    W0005 = "W0005"
    """Command has no script directive."""

    W0006 = "W0006"
    """Alias used by two parameters of one command."""

    W0007 = "W0007"
    """Multiple cwd directives in one command."""

    W0008 = "W0008"
    """Modifier on a directive that does not support it."""

    W0009 = "W0009"
    """Indentation contains a tab."""

    # Information codes (I00xx)
    I0001 = "I0001"
    """Group command has a script directive."""

    I0002 = "I0002"
    """Line outside any block is not a command, directive, or declaration."""

    @property
    def category(self) -> str:
        """Get the category for this code.

        Returns:
            Human-readable category name.

        """
        return _CATEGORY_BY_PREFIX.get(self.value[:3], "semantic")


# Message templates for each code
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.E0101: "invalid command definition '{text}'",
    ErrorCode.E0102: 'invalid parameter syntax "{text}"',
    ErrorCode.E0103: 'unknown directive "{name}"',
    ErrorCode.E0104: "invalid {kind} declaration",
    ErrorCode.E0105: (
        'invalid parameter type "{type}" for parameter "{name}", '
        "expected one of: str, bool, num, arr"
    ),
    ErrorCode.E0106: 'duplicate parameter name "{name}" in command "{command}"',
    ErrorCode.E0107: "invalid wildcard parameter '{text}': {reason}",
    ErrorCode.E0201: "invalid env directive",
    ErrorCode.E0202: "invalid logs directive",
    ErrorCode.E0203: "invalid validate directive",
    ErrorCode.E0204: "multiline script block is empty",
    ErrorCode.E0205: "multiline script is missing the '|' marker",
    ErrorCode.E0206: "invalid {name} directive: {reason}",
    ErrorCode.E0207: "'{name}' directive without a preceding 'if'",
    ErrorCode.E0301: "undefined variable '{name}'",
    ErrorCode.E0302: "import file not found: {path}",
    ErrorCode.E0303: "command '{name}' not found in {path}",
    ErrorCode.E0401: "duplicate command name '{name}' at the same level",
    ErrorCode.E0402: "command name '{name}' is reserved at the top level",
    ErrorCode.E0403: (
        "default value {value} for parameter '{name}' does not match type '{type}'"
    ),
    ErrorCode.W0001: "directive is not inside a command",
    ErrorCode.W0002: (
        "alias '{alias}' for parameter '{name}' must be a single character"
    ),
    ErrorCode.W0003: (
        "alias '{alias}' for parameter '{name}' conflicts with a reserved short option"
    ),
    ErrorCode.W0004: "unclosed command substitution \"$(...)\" in directive value",
    ErrorCode.W0005: "command '{name}' has no script directive",
    ErrorCode.W0006: "alias '{alias}' is already used by parameter '{other}'",
    ErrorCode.W0007: "multiple 'cwd' directives in command '{name}'",
    ErrorCode.W0008: "directive '{name}' does not support the '{modifier}' modifier",
    ErrorCode.W0009: "indentation contains a tab; only spaces count toward nesting",
    ErrorCode.I0001: "group command '{name}' has a script; typically unnecessary",
    ErrorCode.I0002: "line is not a command, directive, or declaration; ignored",
}


def format_error_message(code: ErrorCode, **kwargs: str) -> str:
    """Format an error message with the given parameters.

    Args:
        code: The error code.
        **kwargs: Parameters to substitute in the message template.

    Returns:
        Formatted error message string.

    """
    template = ERROR_MESSAGES.get(code, "unknown error")
    try:
        return template.format(**kwargs)
    except KeyError as e:
        logger.warning("Missing parameter for error message: %s", e)
        return template
