"""Value transformer for the Nestfile value grammar.

Transform Lark parse trees of literals and dependency lists into Python
values and Dependency nodes.
"""

# mypy: disable-error-code="type-arg"
# Note: Lark transformers receive heterogeneous children, making strict typing
# impractical.

from typing import Any

from lark import Token, Transformer

from nestlint.ast.nodes import Dependency
from nestlint.log import get_logger

logger = get_logger(__name__)

TransformerItems = list[Any]
"""Children passed to transformer callbacks."""


def _extract_string(value: str | Token) -> str:
    """Extract string value, removing quotes if present."""
    s = str(value)
    if (s.startswith('"') and s.endswith('"')) or (
        s.startswith("'") and s.endswith("'")
    ):
        return s[1:-1]
    return s


class ValueTransformer(Transformer):
    """Transform value parse trees into Python values."""

    def string(self, items: TransformerItems) -> str:
        """Transform a quoted string."""
        return _extract_string(items[0])

    def number(self, items: TransformerItems) -> float:
        """Transform a numeric literal."""
        return float(items[0])

    def true(self, _items: TransformerItems) -> bool:
        """Transform ``true``."""
        return True

    def false(self, _items: TransformerItems) -> bool:
        """Transform ``false``."""
        return False

    def bare(self, items: TransformerItems) -> str:
        """Transform an unquoted word sequence."""
        return " ".join(str(token) for token in items)

    def array(self, items: TransformerItems) -> list[object]:
        """Transform an array literal, dropping the empty placeholder."""
        return [item for item in items if item is not None]

    def dependencies(self, items: TransformerItems) -> list[Dependency]:
        """Transform a dependency list."""
        return list(items)

    def dependency(self, items: TransformerItems) -> Dependency:
        """Transform one dependency with optional arguments."""
        path, args = items
        return Dependency(command_path=path, args=args or {})

    def dependency_path(self, items: TransformerItems) -> str:
        """Join path segments with ``:``."""
        return ":".join(str(segment) for segment in items)

    def dependency_args(self, items: TransformerItems) -> dict[str, object]:
        """Collect ``name=value`` arguments."""
        return dict(item for item in items if item is not None)

    def dependency_arg(self, items: TransformerItems) -> tuple[str, object]:
        """Transform a single ``name=value`` argument."""
        return str(items[0]), items[1]
