"""Core data structures for contextcrumb."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


class TagKind(enum.Enum):
    """Whether a tag is a definition or a reference."""

    DEFINITION = "def"
    REFERENCE = "ref"


class SymbolKind(enum.Enum):
    """The syntactic kind of a symbol."""

    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE = "type"
    CONST = "const"
    METHOD = "method"


@dataclass(frozen=True)
class Tag:
    """A single symbol occurrence extracted from source code."""

    name: str
    kind: TagKind
    symbol_kind: SymbolKind
    line: int
    exported: bool = False


@dataclass
class SymbolGraph:
    """Per-file tags plus symbol-name indices for one ranking request.

    ``definitions`` and ``references`` map a symbol name to the paths that
    define or reference it, each path listed at most once per symbol.
    """

    file_to_tags: dict[str, list[Tag]] = field(default_factory=dict)
    definitions: dict[str, list[str]] = field(default_factory=dict)
    references: dict[str, list[str]] = field(default_factory=dict)
    files_scanned: int = 0

    def ensure_file(self, path: str) -> None:
        """Register a path as a zero-tag node if it is not known yet."""
        self.file_to_tags.setdefault(path, [])


@dataclass
class RankedFile:
    """A file with its PageRank score and definition/reference counts."""

    path: str
    rank: float
    def_count: int = 0
    ref_count: int = 0


@dataclass
class Signature:
    """An exported definition selected for display."""

    file: str
    line: int
    text: str
    type: SymbolKind
    name: str
    exported: bool = True
    refs: int = 0


@dataclass
class FitResult(Generic[T]):
    """The largest rendered prefix of items that fits a token budget."""

    items: list[T] = field(default_factory=list)
    output: str = ""
    tokens_used: int = 0
    items_included: int = 0
