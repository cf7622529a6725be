"""Smart context: a ranked, token-bounded repository map for a feature."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from contextcrumb.models import RankedFile
from contextcrumb.parallel import DEFAULT_MAX_FILE_SIZE
from contextcrumb.ranking import rank_files
from contextcrumb.signatures import extract_signatures_for_ranked_files
from contextcrumb.symbols import build_symbol_graph
from contextcrumb.tokens import count_tokens, fit_to_budget
from contextcrumb.toon import encode

DEFAULT_BUDGET = 4000

# Signature cap per file once the map has to be cut down to the budget
BUDGET_SIGNATURES_PER_FILE = 5

EXCLUDE_DIRS: tuple[str, ...] = (
    "coverage",
    "htmlcov",
    "generated",
    "__generated__",
    "migrations",
    "tests",
)


class ContextMode(str, enum.Enum):
    """How much of the ranked repository to show."""

    QUICK = "quick"
    DEEP = "deep"
    FULL = "full"


@dataclass(frozen=True)
class ModeLimits:
    max_files: int
    max_signatures_per_file: int


MODE_LIMITS: dict[ContextMode, ModeLimits] = {
    ContextMode.QUICK: ModeLimits(max_files=30, max_signatures_per_file=5),
    ContextMode.DEEP: ModeLimits(max_files=40, max_signatures_per_file=8),
    ContextMode.FULL: ModeLimits(max_files=50, max_signatures_per_file=10),
}


def build_smart_context(
    root: Path,
    domains: Sequence[str] = (),
    *,
    budget: int = DEFAULT_BUDGET,
    feature: str | None = None,
    mode: ContextMode = ContextMode.FULL,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
    show_scores: bool = False,
    fast: bool = False,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
) -> str:
    """Build the repository map for a feature within a token budget.

    Ranks the files under root, keeps the mode's top files with their
    exported signatures and renders them as TOON. When the rendering is
    over budget, the longest prefix of the ranked files that fits is
    rendered instead, with fewer signatures per file.

    Args:
        root: Project root directory.
        domains: Domains related to the task (e.g. ["booking", "crm"]).
        budget: Token budget for the output.
        feature: Feature the context is built for.
        mode: Output size preset.
        include: Subdirectories to scan; None scans the whole root.
        exclude: Directory names to skip, replacing EXCLUDE_DIRS.
        show_scores: Include PageRank scores in the output.
        fast: Parse files in worker processes.
        max_file_size: Skip source files larger than this many bytes.

    Returns:
        The rendered map, or an empty string when no files were found.

    Raises:
        ValueError: If budget is negative.
    """
    if budget < 0:
        raise ValueError(f"budget must be >= 0, got {budget}")

    graph = build_symbol_graph(
        root,
        include=include,
        exclude=EXCLUDE_DIRS if exclude is None else exclude,
        fast=fast,
        max_file_size=max_file_size,
    )
    if graph.files_scanned == 0:
        return ""

    limits = MODE_LIMITS[mode]
    ranked = rank_files(graph, feature=feature, domains=list(domains))
    top_files = ranked[: limits.max_files]
    signatures = extract_signatures_for_ranked_files(top_files, graph)

    output = encode(
        top_files,
        signatures,
        max_signatures_per_file=limits.max_signatures_per_file,
        show_scores=show_scores,
    )
    if count_tokens(output) <= budget:
        return output

    fitted_limit = min(limits.max_signatures_per_file, BUDGET_SIGNATURES_PER_FILE)

    def render(subset: list[RankedFile]) -> str:
        return encode(
            subset,
            signatures,
            max_signatures_per_file=fitted_limit,
            show_scores=show_scores,
        )

    return fit_to_budget(top_files, render, budget).output
