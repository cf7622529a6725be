"""Source file discovery honoring gitignore and include/exclude directories."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterable
from pathlib import Path

import pathspec

from contextcrumb.languages import language_for_extension

SKIP_DIRS: frozenset[str] = frozenset(
    {
        "__pycache__",
        "node_modules",
        ".git",
        ".hg",
        ".svn",
        "venv",
        ".venv",
        "env",
        ".env",
        "build",
        "dist",
        ".tox",
        ".nox",
        ".mypy_cache",
        ".ruff_cache",
        ".pytest_cache",
        "egg-info",
        "site-packages",
    }
)

TEST_FILE_PATTERNS: tuple[str, ...] = ("test_*.py", "*_test.py", "conftest.py")


def _git_ls_files(root: Path) -> set[str] | None:
    """Return git-tracked plus untracked-but-not-ignored files under root.

    Returns:
        Set of repo-relative POSIX paths, or None when git is unavailable
        or root is not a git work tree.
    """
    if not (root / ".git").exists():
        return None
    try:
        result = subprocess.run(
            ["git", "ls-files", "--cached", "--others", "--exclude-standard"],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=10,
            check=False,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return set(result.stdout.splitlines())


def discover_files(
    root: Path,
    *,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
    extra_ignores: list[str] | None = None,
    language_filter: str | None = None,
    include_tests: bool = False,
) -> list[tuple[Path, str]]:
    """Walk root and return (relative_path, language_name) for parseable files.

    Args:
        root: Repository root directory.
        include: Subdirectories of root to scan. None scans root itself;
            listed directories that do not exist are skipped.
        exclude: Directory names pruned anywhere in the tree, on top of
            SKIP_DIRS.
        extra_ignores: Additional gitignore-style patterns to exclude.
        language_filter: If set, only return files of this language.
        include_tests: Keep test modules (``test_*.py``, ``conftest.py``...).

    Returns:
        List of (relative_path, language_name) tuples, sorted by path.
    """
    git_files = _git_ls_files(root)
    gitignore = _load_gitignore(root) if git_files is None else None
    skip_dirs = SKIP_DIRS | frozenset(exclude or ())

    extra_spec = None
    if extra_ignores:
        extra_spec = pathspec.PathSpec.from_lines("gitignore", extra_ignores)
    test_spec = None
    if not include_tests:
        test_spec = pathspec.PathSpec.from_lines("gitignore", TEST_FILE_PATTERNS)

    start_dirs = [root] if include is None else [root / d for d in include]

    results: set[tuple[Path, str]] = set()
    for start in start_dirs:
        if not start.is_dir():
            continue
        for dirpath, dirnames, filenames in os.walk(start, followlinks=False):
            # Prune skipped and hidden dirs in place to stop descent
            dirnames[:] = sorted(
                d for d in dirnames if d not in skip_dirs and not d.startswith(".")
            )
            rel_dir = Path(dirpath).relative_to(root)

            for fname in sorted(filenames):
                if fname.startswith(".") or (Path(dirpath) / fname).is_symlink():
                    continue
                rel = rel_dir / fname
                rel_posix = rel.as_posix()

                if git_files is not None:
                    if rel_posix not in git_files:
                        continue
                elif gitignore and gitignore.match_file(rel_posix):
                    continue
                if extra_spec and extra_spec.match_file(rel_posix):
                    continue
                if test_spec and test_spec.match_file(rel_posix):
                    continue

                lang = language_for_extension(Path(fname).suffix)
                if lang is None:
                    continue
                if language_filter and lang.name != language_filter:
                    continue
                results.add((rel, lang.name))

    return sorted(results)


def _load_gitignore(root: Path) -> pathspec.PathSpec:
    """Load .gitignore from root, returning a PathSpec matcher."""
    gitignore_path = root / ".gitignore"
    lines: list[str] = []
    if gitignore_path.is_file():
        lines = gitignore_path.read_text(encoding="utf-8").splitlines()
    return pathspec.PathSpec.from_lines("gitignore", lines)
