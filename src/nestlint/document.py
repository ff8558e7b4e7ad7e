"""Entry points for analyzing Nestfile documents.

Run the structural pass and the whole-document semantic pass over one
document text and expose the command tree, the diagnostics, or both.
"""

from dataclasses import dataclass, field
from pathlib import Path

from nestlint.ast.nodes import Command, Declaration, Import
from nestlint.errors.diagnostics import Diagnostic, Severity
from nestlint.log import get_logger
from nestlint.semantic.analyzer import SemanticAnalyzer
from nestlint.semantic.imports import ImportResolver
from nestlint.semantic.symbols import (
    SymbolTable,
    check_template_references,
    collect_symbols,
)
from nestlint.structure.builder import build_tree

logger = get_logger(__name__)


@dataclass
class AnalysisResult:
    """Result of analyzing one document."""

    commands: list[Command] = field(default_factory=list)
    """Top-level commands in document order."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    """Diagnostics in pass order."""

    declarations: list[Declaration] = field(default_factory=list)
    imports: list[Import] = field(default_factory=list)
    symbols: SymbolTable = field(default_factory=SymbolTable)

    @property
    def errors(self) -> list[Diagnostic]:
        """Diagnostics with error severity."""
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        """Diagnostics with warning severity."""
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        """Whether the document has no errors."""
        return not self.errors


def analyze_document(
    text: str,
    document_path: Path | str | None = None,
) -> AnalysisResult:
    """Analyze a document.

    Args:
        text: Full document text.
        document_path: Optional path of the document, used to resolve
            relative imports. Import checks are skipped without it.

    Returns:
        The command tree together with all diagnostics.

    """
    build = build_tree(text)
    diagnostics = list(build.diagnostics)

    diagnostics.extend(SemanticAnalyzer().analyze(build.commands))

    symbols = collect_symbols(build)
    diagnostics.extend(check_template_references(build.lines, symbols))

    if document_path is not None and build.imports:
        resolver = ImportResolver(Path(document_path))
        diagnostics.extend(resolver.resolve(build.imports))
    elif build.imports:
        logger.debug("No document path, skipping %d imports", len(build.imports))

    logger.debug("Analysis found %d diagnostics", len(diagnostics))
    return AnalysisResult(
        commands=build.commands,
        diagnostics=diagnostics,
        declarations=build.declarations,
        imports=build.imports,
        symbols=symbols,
    )


def parse_document(text: str, document_path: Path | str | None = None) -> list[Command]:
    """Parse a document into its command tree."""
    return analyze_document(text, document_path).commands


def validate_document(
    text: str,
    document_path: Path | str | None = None,
) -> list[Diagnostic]:
    """Validate a document and return its diagnostics."""
    return analyze_document(text, document_path).diagnostics
