"""Import resolution for Nestfile documents.

Check that imported files exist and that selectively imported commands
are defined at the top level of their target file.
"""

import glob
import re
from pathlib import Path

from nestlint.ast.nodes import Import
from nestlint.errors.codes import ErrorCode
from nestlint.errors.diagnostics import Diagnostic
from nestlint.log import get_logger

logger = get_logger(__name__)

_TOP_LEVEL_COMMAND_RE = re.compile(r"^(?P<name>[A-Za-z0-9_]+)\s*(?:\(.*\))?\s*:\s*$")
_GLOB_CHARS = frozenset("*?[")


def top_level_commands(text: str) -> frozenset[str]:
    """Return the names of commands defined without indentation."""
    names = set()
    for line in re.split(r"\r?\n", text):
        match = _TOP_LEVEL_COMMAND_RE.match(line.rstrip())
        if match:
            names.add(match.group("name"))
    return frozenset(names)


class ImportResolver:
    """Resolve the imports of one document.

    Target files are read at most once per resolver; create one per
    analysis run.
    """

    def __init__(self, document_path: Path) -> None:
        """Initialize the resolver.

        Args:
            document_path: Path of the document holding the imports.

        """
        self._base_dir = document_path.parent
        self._commands: dict[Path, frozenset[str] | None] = {}

    def resolve(self, imports: list[Import]) -> list[Diagnostic]:
        """Check every import of the document.

        Args:
            imports: Imports in document order.

        Returns:
            Diagnostics for missing files and missing commands.

        """
        diagnostics: list[Diagnostic] = []
        for node in imports:
            diagnostics.extend(self._resolve_one(node))
        return diagnostics

    def _targets(self, node: Import) -> list[Path]:
        target = self._base_dir / node.path
        if any(ch in node.path for ch in _GLOB_CHARS):
            return sorted(Path(p) for p in glob.glob(str(target)))
        if target.exists():
            return [target]
        return []

    def _resolve_one(self, node: Import) -> list[Diagnostic]:
        targets = self._targets(node)
        if not targets:
            logger.debug("Import %s at line %d not found", node.path, node.line)
            return [
                Diagnostic.error(
                    ErrorCode.E0302,
                    node.line,
                    node.path_column,
                    node.path_column + len(node.path),
                    path=node.path,
                ),
            ]

        if not node.is_selective:
            return []

        defined: set[str] = set()
        for target in targets:
            commands = self._read_commands(target)
            if commands is None:
                return []
            defined |= commands

        return [
            Diagnostic.error(
                ErrorCode.E0303,
                node.line,
                symbol.column,
                symbol.column + len(symbol.name),
                name=symbol.name,
                path=node.path,
            )
            for symbol in node.symbols
            if symbol.name not in defined
        ]

    def _read_commands(self, target: Path) -> frozenset[str] | None:
        """Read the top-level commands of a file; None when unreadable."""
        if target in self._commands:
            return self._commands[target]

        commands: frozenset[str] | None
        if target.is_dir():
            commands = None
        else:
            try:
                commands = top_level_commands(target.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Failed to read import %s: %s", target, e)
                commands = None
        self._commands[target] = commands
        return commands
