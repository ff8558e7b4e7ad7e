"""Structural pass over Nestfile documents.

Classify lines, parse command signatures, validate directives, and build
the indentation-based command tree.
"""

from nestlint.structure.builder import BuildResult, TreeBuilder, build_tree
from nestlint.structure.classifier import ClassifiedLine, LineKind, classify_line
from nestlint.structure.directives import DirectiveValidator
from nestlint.structure.parameters import parse_parameter_list, validate_parameters

__all__ = [
    "BuildResult",
    "ClassifiedLine",
    "DirectiveValidator",
    "LineKind",
    "TreeBuilder",
    "build_tree",
    "classify_line",
    "parse_parameter_list",
    "validate_parameters",
]
