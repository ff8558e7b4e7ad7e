"""AST node dataclasses for Nestfile documents.

Define the command tree produced by the structural pass together with the
global declarations collected along the way. Lines are 1-indexed and
columns 0-indexed, matching the diagnostics that point at them.
"""

from dataclasses import dataclass, field
from enum import Enum

from nestlint.log import get_logger

logger = get_logger(__name__)


# =============================================================================
# Base Types
# =============================================================================


@dataclass
class SourcePosition:
    """Source position information for error reporting."""

    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None


# =============================================================================
# Command Tree Nodes
# =============================================================================


@dataclass
class Parameter:
    """Parameter of a command signature (e.g., ``!force|f: bool = false``)."""

    name: str
    """Raw name, keeping the ``!`` (named) or ``*`` (wildcard) prefix."""

    type: str
    """Declared type; ``arr`` for wildcards. Invalid types are kept verbatim."""

    line: int
    alias: str | None = None
    default: str | None = None
    """Raw default value text, if any."""

    count: int | None = None
    """Capture count of a wildcard (``*files[2]``)."""

    meta: SourcePosition | None = None
    type_meta: SourcePosition | None = None
    alias_meta: SourcePosition | None = None
    default_meta: SourcePosition | None = None

    @property
    def is_named(self) -> bool:
        """Whether the parameter binds to ``--name``/``-alias`` flags."""
        return self.name.startswith("!")

    @property
    def is_wildcard(self) -> bool:
        """Whether the parameter captures the remaining arguments."""
        return self.name.startswith("*")

    @property
    def clean_name(self) -> str:
        """Name with the named-parameter prefix stripped."""
        return self.name[1:] if self.is_named else self.name

    def to_dict(self) -> dict[str, object]:
        """Convert this parameter to a dictionary for JSON serialization."""
        result: dict[str, object] = {
            "name": self.name,
            "type": self.type,
            "line": self.line,
        }
        if self.alias is not None:
            result["alias"] = self.alias
        if self.default is not None:
            result["default"] = self.default
        if self.count is not None:
            result["count"] = self.count
        return result


@dataclass
class Directive:
    """Directive line owned by a command (e.g., ``script[hide]: make``)."""

    name: str
    """Full directive name including modifiers (``logs.json``, ``script[hide]``)."""

    value: str
    """Raw text after the ``:`` separator."""

    line: int
    base: str = ""
    """Directive keyword without modifiers."""

    dotted: str | None = None
    """Dotted modifier (``json`` in ``logs.json``)."""

    modifier: str | None = None
    """Bracket modifier (``hide`` in ``script[hide]``)."""

    marker: bool = False
    """Whether the directive was written with the leading ``>`` marker."""

    meta: SourcePosition | None = None
    value_column: int | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert this directive to a dictionary for JSON serialization."""
        return {"name": self.name, "value": self.value, "line": self.line}


@dataclass
class Command:
    """Command or group definition node of the command tree."""

    name: str
    line: int
    parameters: list[Parameter] = field(default_factory=list)
    directives: list[Directive] = field(default_factory=list)
    children: list["Command"] = field(default_factory=list)
    indent: int = 0
    meta: SourcePosition | None = None

    @property
    def is_group(self) -> bool:
        """Whether the command holds sub-commands."""
        return bool(self.children)

    def directives_named(self, *bases: str) -> list[Directive]:
        """Return directives whose keyword is one of ``bases``, in order."""
        return [d for d in self.directives if d.base in bases]

    def walk(self) -> list["Command"]:
        """Return this command and all descendants in pre-order."""
        nodes = [self]
        for child in self.children:
            nodes.extend(child.walk())
        return nodes

    def to_dict(self) -> dict[str, object]:
        """Convert this command subtree to a dictionary for JSON serialization."""
        return {
            "name": self.name,
            "line": self.line,
            "parameters": [p.to_dict() for p in self.parameters],
            "directives": [d.to_dict() for d in self.directives],
            "children": [c.to_dict() for c in self.children],
        }


@dataclass
class Dependency:
    """Entry of a ``depends`` list (e.g., ``dev:build(target="x86_64")``)."""

    command_path: str
    """Command path with segments joined by ``:``."""

    args: dict[str, object] = field(default_factory=dict)


# =============================================================================
# Global Declarations
# =============================================================================


class DeclarationKind(str, Enum):
    """Kind of global declaration."""

    VARIABLE = "var"
    CONSTANT = "const"
    FUNCTION = "function"


@dataclass
class Declaration:
    """Global ``var``/``const``/``function`` declaration."""

    kind: DeclarationKind
    name: str
    line: int
    value: str | None = None
    parameters: list[Parameter] = field(default_factory=list)
    meta: SourcePosition | None = None


@dataclass
class ImportSymbol:
    """Command name selected by a selective import."""

    name: str
    column: int


@dataclass
class Import:
    """``import`` or ``include`` declaration referencing another document."""

    path: str
    line: int
    path_column: int
    keyword: str = "import"
    symbols: list[ImportSymbol] = field(default_factory=list)
    into: str | None = None
    """Group the included commands are nested under (``include X into G``)."""

    @property
    def is_selective(self) -> bool:
        """Whether specific commands are selected (``*`` selects everything)."""
        return bool(self.symbols) and not any(s.name == "*" for s in self.symbols)
