"""AST package for Nestfile documents.

Provide the command tree and declaration node types returned by the analyzer.
"""

from nestlint.ast.nodes import (
    Command,
    Declaration,
    DeclarationKind,
    Dependency,
    Directive,
    Import,
    ImportSymbol,
    Parameter,
    SourcePosition,
)

__all__ = [
    "Command",
    "Declaration",
    "DeclarationKind",
    "Dependency",
    "Directive",
    "Import",
    "ImportSymbol",
    "Parameter",
    "SourcePosition",
]
