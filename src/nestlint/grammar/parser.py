"""Parser factory for Nestfile value grammar.

Create the configured Lark parser used for parameter default literals and
dependency lists, and expose small helpers that return Python values.
"""

from pathlib import Path

from lark import Lark

from nestlint.ast.nodes import Dependency
from nestlint.grammar.transformer import ValueTransformer
from nestlint.log import get_logger

logger = get_logger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "values.lark"
"""Path to the value grammar file."""

START_RULES = ["literal", "dependencies"]
"""Entry rules of the value grammar."""


class ParserFactory:
    """Factory for the Nestfile value parser.

    The compiled parser is cached because grammar analysis is the
    expensive part of parser construction. It holds no document state.
    """

    _grammar_cache: str | None = None
    """Cached grammar content to avoid repeated file reads."""

    _parser_cache: Lark | None = None
    """Cached parser instance."""

    @classmethod
    def _load_grammar(cls) -> str:
        """Load the grammar file contents.

        Returns:
            The grammar string.

        """
        if cls._grammar_cache is None:
            logger.debug("Loading grammar from %s", GRAMMAR_PATH)
            cls._grammar_cache = GRAMMAR_PATH.read_text()
        return cls._grammar_cache

    @classmethod
    def create(cls) -> Lark:
        """Create (or reuse) the value parser.

        Returns:
            Configured Lark parser instance.

        """
        if cls._parser_cache is not None:
            return cls._parser_cache

        logger.debug("Creating lalr value parser")
        cls._parser_cache = Lark(
            cls._load_grammar(),
            parser="lalr",
            lexer="contextual",
            start=START_RULES,
            maybe_placeholders=True,
        )
        return cls._parser_cache

    @classmethod
    def clear_cache(cls) -> None:
        """Clear all cached parser state.

        Use for testing or when grammar may have changed.
        """
        cls._grammar_cache = None
        cls._parser_cache = None


def parse_literal(text: str) -> object:
    """Parse a parameter default literal.

    Args:
        text: Raw literal text (``"x86_64"``, ``false``, ``[a, b]``).

    Returns:
        The Python value: ``str``, ``bool``, ``float`` or ``list``.

    Raises:
        lark.exceptions.LarkError: If the text is not a literal.

    """
    tree = ParserFactory.create().parse(text, start="literal")
    return ValueTransformer().transform(tree)


def parse_dependencies(text: str) -> list[Dependency]:
    """Parse the value of a ``depends`` directive.

    Args:
        text: Raw directive value.

    Returns:
        Parsed dependencies in declaration order.

    Raises:
        lark.exceptions.LarkError: If the value is not a dependency list.

    """
    tree = ParserFactory.create().parse(text, start="dependencies")
    dependencies: list[Dependency] = ValueTransformer().transform(tree)
    return dependencies
