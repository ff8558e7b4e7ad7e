"""Static analyzer for Nestfile task-runner documents."""

from nestlint.document import (
    AnalysisResult,
    analyze_document,
    parse_document,
    validate_document,
)

__all__ = ["AnalysisResult", "analyze_document", "parse_document", "validate_document"]
