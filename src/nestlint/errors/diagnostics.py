"""Diagnostic message building for the Nestfile analyzer.

Provide diagnostic dataclasses for representing errors, warnings, and
informational notes with their source range.
"""

from dataclasses import dataclass
from enum import Enum

from nestlint.errors.codes import ErrorCode, format_error_message
from nestlint.log import get_logger

logger = get_logger(__name__)

DIAGNOSTIC_SOURCE = "nestfile"
"""Source tag attached to every diagnostic."""


class Severity(str, Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    """A syntax, shape, or reference problem."""

    WARNING = "warning"
    """A consistency problem that does not make the document unusable."""

    INFORMATION = "information"
    """A stylistic note."""


@dataclass
class Diagnostic:
    """A diagnostic message with its source range.

    The range covers one line, from ``column`` (inclusive) to
    ``end_column`` (exclusive).
    """

    severity: Severity
    """The severity level of this diagnostic."""

    message: str
    """The diagnostic message (no leading capital, no trailing period)."""

    line: int
    """Line number where the diagnostic occurs (1-indexed)."""

    column: int
    """Column number where the range starts (0-indexed)."""

    end_column: int
    """Column number where the range ends (exclusive)."""

    code: ErrorCode | None = None
    """Optional code for categorization."""

    help_text: str | None = None
    """Optional help text with the expected format."""

    source: str = DIAGNOSTIC_SOURCE
    """Tag naming the producer of this diagnostic."""

    def __post_init__(self) -> None:
        """Keep the range well formed."""
        self.end_column = max(self.column, self.end_column)

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        severity: Severity,
        code: ErrorCode,
        line: int,
        column: int,
        end_column: int,
        *,
        help_text: str | None = None,
        **kwargs: str,
    ) -> "Diagnostic":
        """Create a diagnostic whose message comes from the code's template.

        Args:
            severity: Severity of the diagnostic.
            code: Diagnostic code; its template is formatted with ``kwargs``.
            line: Line number (1-indexed).
            column: Start column (0-indexed).
            end_column: End column (exclusive).
            help_text: Optional help text.
            **kwargs: Parameters for the message template.

        Returns:
            A new Diagnostic.

        """
        return cls(
            severity=severity,
            message=format_error_message(code, **kwargs),
            line=line,
            column=column,
            end_column=end_column,
            code=code,
            help_text=help_text,
        )

    @classmethod
    def error(  # noqa: PLR0913
        cls,
        code: ErrorCode,
        line: int,
        column: int,
        end_column: int,
        *,
        help_text: str | None = None,
        **kwargs: str,
    ) -> "Diagnostic":
        """Create an error diagnostic."""
        return cls.create(
            Severity.ERROR,
            code,
            line,
            column,
            end_column,
            help_text=help_text,
            **kwargs,
        )

    @classmethod
    def warning(  # noqa: PLR0913
        cls,
        code: ErrorCode,
        line: int,
        column: int,
        end_column: int,
        *,
        help_text: str | None = None,
        **kwargs: str,
    ) -> "Diagnostic":
        """Create a warning diagnostic."""
        return cls.create(
            Severity.WARNING,
            code,
            line,
            column,
            end_column,
            help_text=help_text,
            **kwargs,
        )

    @classmethod
    def information(  # noqa: PLR0913
        cls,
        code: ErrorCode,
        line: int,
        column: int,
        end_column: int,
        *,
        help_text: str | None = None,
        **kwargs: str,
    ) -> "Diagnostic":
        """Create an informational diagnostic."""
        return cls.create(
            Severity.INFORMATION,
            code,
            line,
            column,
            end_column,
            help_text=help_text,
            **kwargs,
        )

    def with_help(self, help_text: str) -> "Diagnostic":
        """Add help text to this diagnostic.

        Args:
            help_text: The help text to add.

        Returns:
            Self for chaining.

        """
        self.help_text = help_text
        return self

    @property
    def span_length(self) -> int:
        """Length of the diagnostic range, at least 1."""
        return max(1, self.end_column - self.column)

    def to_dict(self) -> dict[str, object]:
        """Convert this diagnostic to a dictionary for JSON serialization.

        Returns:
            Dictionary representation suitable for JSON output.

        """
        result: dict[str, object] = {
            "range": {
                "line": self.line,
                "start": self.column,
                "end": self.end_column,
            },
            "message": self.message,
            "severity": self.severity.value,
            "source": self.source,
        }

        if self.code is not None:
            result["code"] = self.code.value

        if self.help_text is not None:
            result["help"] = self.help_text

        return result
