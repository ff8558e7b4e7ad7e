"""Error handling and diagnostics for the Nestfile analyzer.

Provide diagnostic codes, diagnostic messages, and rustc-style formatting
for reporting problems with source context.
"""

from nestlint.errors.codes import ErrorCode
from nestlint.errors.diagnostics import Diagnostic, Severity
from nestlint.errors.reporter import DiagnosticReporter

__all__ = [
    "Diagnostic",
    "DiagnosticReporter",
    "ErrorCode",
    "Severity",
]
