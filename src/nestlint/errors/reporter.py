"""Diagnostic reporter for the Nestfile analyzer.

Render the diagnostics of one Nestfile rustc-style, with the offending
line, its neighbours, and carets under the range, or as a JSON report.
"""

import json
from collections import Counter
from collections.abc import Mapping, Sequence
from io import StringIO

from nestlint.errors.diagnostics import Diagnostic, Severity
from nestlint.log import get_logger

logger = get_logger(__name__)

GUTTER_WIDTH = 5
"""Width of the line number gutter."""

CONTEXT_LINES = 1
"""Lines of the document shown around the diagnostic line."""

REPORT_VERSION = "1.0"

_LABELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFORMATION: "note",
}
"""Header label per severity; information is shown as a note."""


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


class DiagnosticReporter:
    """Format the diagnostics of a single Nestfile.

    The reporter is bound to one document. Without the document text it
    still prints headers and locations, but no source context.
    """

    def __init__(self, file: str, source: str | None = None) -> None:
        """Initialize the reporter.

        Args:
            file: Path of the document, as shown in locations.
            source: Text of the document.

        """
        self.file = file
        self._lines = source.splitlines() if source is not None else []

    def format_diagnostic(self, diagnostic: Diagnostic) -> str:
        """Format one diagnostic.

        Example output:
            error[E0105]: invalid parameter type "string" for parameter "x", ...
              --> nestfile:3:10
               |
             3 | build(x: string):
               |          ^^^^^^
               |

        """
        output = StringIO()
        label = _LABELS[diagnostic.severity]
        if diagnostic.code:
            output.write(f"{label}[{diagnostic.code.value}]: {diagnostic.message}\n")
        else:
            output.write(f"{label}: {diagnostic.message}\n")

        # Columns are displayed 1-indexed
        output.write(f"  --> {self.file}:{diagnostic.line}:{diagnostic.column + 1}\n")

        blank_gutter = f"{' ' * GUTTER_WIDTH}|\n"
        output.write(blank_gutter)
        if 0 < diagnostic.line <= len(self._lines):
            self._write_context(output, diagnostic)
            output.write(blank_gutter)

        if diagnostic.help_text:
            output.write(f"{' ' * GUTTER_WIDTH}= help: {diagnostic.help_text}\n")
        return output.getvalue()

    def _write_context(self, output: StringIO, diagnostic: Diagnostic) -> None:
        index = diagnostic.line - 1
        first = max(0, index - CONTEXT_LINES)
        last = min(len(self._lines), index + CONTEXT_LINES + 1)
        for number, text in enumerate(self._lines[first:last], start=first + 1):
            output.write(f"{number:>{GUTTER_WIDTH - 1}} | {text}\n")
            if number == diagnostic.line:
                # Tabs are kept so the carets line up under tab-indented text.
                prefix = text[: diagnostic.column]
                spacing = "".join("\t" if c == "\t" else " " for c in prefix)
                carets = "^" * diagnostic.span_length
                output.write(f"{' ' * GUTTER_WIDTH}| {spacing}{carets}\n")

    def format_report(
        self,
        diagnostics: Sequence[Diagnostic],
        *,
        include_summary: bool = True,
    ) -> str:
        """Format every diagnostic of the document, separated by blank lines.

        Returns:
            The report, or an empty string when there is nothing to report.

        """
        if not diagnostics:
            return ""

        report = "\n".join(self.format_diagnostic(d) for d in diagnostics)
        if include_summary:
            report += f"\n{self.summary(diagnostics)}\n"
        return report

    def summary(self, diagnostics: Sequence[Diagnostic]) -> str:
        """Summarize diagnostic counts, e.g. ``Found 1 error and 2 notes in x``."""
        counts = Counter(d.severity for d in diagnostics)
        parts = [
            _plural(counts[severity], _LABELS[severity])
            for severity in Severity
            if counts[severity]
        ]
        if not parts:
            return f"No problems found in {self.file}"
        listed = parts[-1]
        if len(parts) > 1:
            listed = f"{', '.join(parts[:-1])} and {listed}"
        return f"Found {listed} in {self.file}"

    def format_json(
        self,
        diagnostics: Sequence[Diagnostic],
        *,
        stats: Mapping[str, int | str] | None = None,
    ) -> str:
        """Format the diagnostics as a JSON report.

        The document is valid when no diagnostic is an error.

        Args:
            diagnostics: Diagnostics of the document.
            stats: Optional counts describing the document.

        Returns:
            JSON string representation.

        """
        counts = Counter(d.severity for d in diagnostics)
        result: dict[str, object] = {
            "version": REPORT_VERSION,
            "file": self.file,
            "valid": counts[Severity.ERROR] == 0,
            "counts": {severity.value: counts[severity] for severity in Severity},
            "diagnostics": [d.to_dict() for d in diagnostics],
        }
        if stats:
            result["stats"] = dict(stats)
        return json.dumps(result, indent=2)


def format_success_message(*, commands: int = 0, imports: int = 0) -> str:
    """Format the message for a Nestfile without diagnostics.

    Args:
        commands: Number of command definitions, nested ones included.
        imports: Number of import declarations.

    Returns:
        ``valid`` followed by the non-zero counts, if any.

    """
    parts = []
    if commands:
        parts.append(_plural(commands, "command"))
    if imports:
        parts.append(_plural(imports, "import"))
    return f"valid ({', '.join(parts)})" if parts else "valid"
