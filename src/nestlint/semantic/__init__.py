"""Semantic analysis package for Nestfile documents.

Check command-tree invariants, template references, and imports.
"""

from nestlint.semantic.analyzer import SemanticAnalyzer
from nestlint.semantic.imports import ImportResolver
from nestlint.semantic.symbols import (
    Symbol,
    SymbolKind,
    SymbolTable,
    check_template_references,
    collect_symbols,
)

__all__ = [
    "ImportResolver",
    "SemanticAnalyzer",
    "Symbol",
    "SymbolKind",
    "SymbolTable",
    "check_template_references",
    "collect_symbols",
]
