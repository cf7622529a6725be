"""Per-file tag extraction, one by one or in a process pool for ``--fast``."""

from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

import typer

from contextcrumb.languages import LANGUAGES
from contextcrumb.models import Tag
from contextcrumb.parsing import extract_tags

DEFAULT_MAX_FILE_SIZE = 1_000_000  # 1 MB


def parse_file(
    root: Path,
    rel_path: Path,
    lang_name: str,
    max_size_bytes: int,
) -> tuple[Path, list[Tag] | None, str | None]:
    """Parse one file, returning its tags or the reason it was skipped.

    Module-level so ProcessPoolExecutor can pickle it. Only read and decode
    failures are turned into a reason; anything else propagates.

    Returns:
        Tuple of (rel_path, tags_or_None, reason_or_None).
    """
    abs_path = root / rel_path
    try:
        if abs_path.stat().st_size > max_size_bytes:
            return (rel_path, None, f"skipped (>{max_size_bytes} bytes)")
        tags = extract_tags(abs_path, LANGUAGES[lang_name])
    except (OSError, UnicodeDecodeError) as exc:
        return (rel_path, None, f"failed to parse: {exc}")
    return (rel_path, tags, None)


def _collect(
    results: list[tuple[Path, list[Tag] | None, str | None]],
) -> list[tuple[Path, list[Tag]]]:
    """Warn on stderr about skipped files and sort the rest by path."""
    parsed: list[tuple[Path, list[Tag]]] = []
    for rel_path, tags, reason in results:
        if tags is None:
            typer.echo(f"Warning: {rel_path}: {reason}", err=True)
            continue
        parsed.append((rel_path, tags))
    parsed.sort(key=lambda item: item[0])
    return parsed


def parse_files_sequential(
    root: Path,
    files: list[tuple[Path, str]],
    *,
    max_size_bytes: int = DEFAULT_MAX_FILE_SIZE,
) -> list[tuple[Path, list[Tag]]]:
    """Extract tags from files in this process."""
    return _collect(
        [
            parse_file(root, rel_path, lang_name, max_size_bytes)
            for rel_path, lang_name in files
        ]
    )


def parse_files_parallel(
    root: Path,
    files: list[tuple[Path, str]],
    *,
    max_size_bytes: int = DEFAULT_MAX_FILE_SIZE,
    max_workers: int | None = None,
) -> list[tuple[Path, list[Tag]]]:
    """Extract tags from files in worker processes.

    Files that are too large or fail to read are reported on stderr and
    left out of the result, exactly as in ``parse_files_sequential``.

    Args:
        root: Repository root directory.
        files: (rel_path, lang_name) tuples from discovery.
        max_size_bytes: Skip files larger than this.
        max_workers: Maximum number of worker processes.

    Returns:
        (rel_path, tags) pairs sorted by path.
    """
    if not files:
        return []
    if max_workers is None:
        max_workers = min(os.cpu_count() or 1, len(files))

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(parse_file, root, rel_path, lang_name, max_size_bytes)
            for rel_path, lang_name in files
        ]
        results = [future.result() for future in as_completed(futures)]
    return _collect(results)
