"""Symbol graph construction from extracted tags."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from contextcrumb.discovery import discover_files
from contextcrumb.models import SymbolGraph, Tag, TagKind
from contextcrumb.parallel import (
    DEFAULT_MAX_FILE_SIZE,
    parse_files_parallel,
    parse_files_sequential,
)


def index_tags(file_tags: Iterable[tuple[str, list[Tag]]]) -> SymbolGraph:
    """Build a SymbolGraph from (path, tags) pairs.

    Each path is listed once per symbol in ``definitions`` and
    ``references``, in the order the files were supplied.

    Args:
        file_tags: Pairs of repository-relative path and that file's tags.

    Returns:
        The graph; ``files_scanned`` counts the supplied files.
    """
    graph = SymbolGraph()
    for path, tags in file_tags:
        graph.file_to_tags[path] = list(tags)
        graph.files_scanned += 1
        for tag in tags:
            index = (
                graph.definitions
                if tag.kind == TagKind.DEFINITION
                else graph.references
            )
            paths = index.setdefault(tag.name, [])
            if path not in paths:
                paths.append(path)
    return graph


def build_symbol_graph(
    root: Path,
    *,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
    fast: bool = False,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
) -> SymbolGraph:
    """Discover and parse the source files under root into a SymbolGraph.

    Unreadable or oversized files are reported as warnings on stderr and
    left out of the graph.

    Args:
        root: Repository root directory.
        include: Subdirectories to scan; None scans the whole root.
        exclude: Extra directory names to skip.
        fast: Parse files in worker processes.
        max_file_size: Skip files larger than this many bytes.

    Returns:
        The symbol graph for the discovered files.
    """
    files = discover_files(root, include=include, exclude=exclude)
    if fast:
        parsed = parse_files_parallel(root, files, max_size_bytes=max_file_size)
    else:
        parsed = parse_files_sequential(root, files, max_size_bytes=max_file_size)
    return index_tags((rel_path.as_posix(), tags) for rel_path, tags in parsed)
