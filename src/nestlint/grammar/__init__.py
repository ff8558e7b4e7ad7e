"""Grammar package for Nestfile values.

Provide the Lark value grammar, its transformer, and the parser factory
used to check parameter defaults and dependency lists.
"""

from nestlint.grammar.parser import ParserFactory, parse_dependencies, parse_literal
from nestlint.grammar.transformer import ValueTransformer

__all__ = ["ParserFactory", "ValueTransformer", "parse_dependencies", "parse_literal"]
