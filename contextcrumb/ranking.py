"""File ranking and personalization on top of the PageRank engine."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from contextcrumb.graph import build_adjacency_graph
from contextcrumb.models import RankedFile, SymbolGraph, Tag, TagKind
from contextcrumb.pagerank import (
    DEFAULT_DAMPING,
    DEFAULT_MAX_ITERATIONS,
    PageRankOptions,
    pagerank,
)
from contextcrumb.weights import matches_any_domain, matches_feature

DEFAULT_BOOST_FACTOR = 10.0

FEATURE_PATH_BOOST = 5.0
DOMAIN_PATH_BOOST = 2.0
FEATURE_TAG_BOOST = 2.0
DOMAIN_TAG_BOOST = 1.5


def get_ranked_files(
    graph: SymbolGraph,
    options: PageRankOptions | None = None,
    *,
    feature_boost: str | None = None,
    domains: Sequence[str] | None = None,
) -> list[RankedFile]:
    """Rank every file of a symbol graph by PageRank.

    Args:
        graph: The symbol graph. Paths only seen in its indices are
            registered as zero-tag files.
        options: PageRank options, including an optional personalization.
        feature_boost: Feature hint boosting edges of matching symbols.
        domains: Domain hints boosting edges of matching symbols.

    Returns:
        Ranked files sorted by rank, highest first. Ties keep graph order.
    """
    adjacency = build_adjacency_graph(graph, feature=feature_boost, domains=domains)
    scores = pagerank(adjacency, options)

    ranked = [
        RankedFile(
            path=path,
            rank=rank,
            def_count=_definition_count(graph.file_to_tags.get(path, [])),
            ref_count=_inbound_reference_count(graph, path),
        )
        for path, rank in scores.items()
    ]
    ranked.sort(key=lambda rf: rf.rank, reverse=True)
    return ranked


def get_top_files(
    graph: SymbolGraph,
    n: int,
    options: PageRankOptions | None = None,
    *,
    feature_boost: str | None = None,
    domains: Sequence[str] | None = None,
) -> list[RankedFile]:
    """Return the n highest ranked files."""
    ranked = get_ranked_files(
        graph, options, feature_boost=feature_boost, domains=domains
    )
    return ranked[:n]


def rank_files(
    graph: SymbolGraph,
    *,
    feature: str | None = None,
    domains: Sequence[str] | None = None,
    damping: float = DEFAULT_DAMPING,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> list[RankedFile]:
    """Rank files for a feature and/or set of domains.

    Feature and domains both weight the reference edges and personalize
    teleportation towards files whose path or symbols mention them.

    Args:
        graph: The symbol graph.
        feature: Feature the context is built for (e.g. "booking").
        domains: Related domains (e.g. ["calendar", "billing"]).
        damping: PageRank damping factor.
        max_iterations: PageRank iteration cap.

    Returns:
        Ranked files sorted by rank, highest first.
    """
    personalization = build_personalization(graph, feature, domains)
    options = PageRankOptions(
        damping=damping,
        max_iterations=max_iterations,
        personalization=personalization or None,
    )
    return get_ranked_files(graph, options, feature_boost=feature, domains=domains)


def build_personalization(
    graph: SymbolGraph,
    feature: str | None = None,
    domains: Sequence[str] | None = None,
) -> dict[str, float]:
    """Derive a teleport bias from feature and domain mentions.

    A file's boost is its path boost (feature in path: x5, any domain in
    path: x2) times its tag boost (a tag matching the feature: x2, each
    tag matching a domain before that: x1.5).

    Returns:
        Empty when no file is boosted, otherwise a weight for every file
        with 1.0 as the unboosted baseline.
    """
    if not feature and not domains:
        return {}

    personalization = {
        path: _path_boost(path, feature, domains) * _tags_boost(tags, feature, domains)
        for path, tags in graph.file_to_tags.items()
    }
    if all(boost <= 1.0 for boost in personalization.values()):
        return {}
    return personalization


def create_personalization(
    files: Iterable[str],
    patterns: Iterable[str | re.Pattern[str]],
    boost_factor: float = DEFAULT_BOOST_FACTOR,
) -> dict[str, float]:
    """Build a personalization map boosting files that match any pattern.

    String patterns match as case-insensitive substrings of the path,
    compiled regular expressions with ``search``.

    Args:
        files: All file paths.
        patterns: Patterns selecting the files to boost.
        boost_factor: Weight of matching files; the rest get 1.

    Returns:
        Path -> weight for every file.
    """
    pattern_list = list(patterns)
    personalization: dict[str, float] = {}
    for path in files:
        boosted = any(
            pattern.lower() in path.lower()
            if isinstance(pattern, str)
            else pattern.search(path) is not None
            for pattern in pattern_list
        )
        personalization[path] = boost_factor if boosted else 1.0
    return personalization


def _definition_count(tags: list[Tag]) -> int:
    return sum(1 for tag in tags if tag.kind == TagKind.DEFINITION)


def _inbound_reference_count(graph: SymbolGraph, path: str) -> int:
    """Count references from other files to symbols this file defines."""
    count = 0
    for tag in graph.file_to_tags.get(path, []):
        if tag.kind != TagKind.DEFINITION:
            continue
        count += sum(
            1 for ref_file in graph.references.get(tag.name, []) if ref_file != path
        )
    return count


def _path_boost(
    path: str, feature: str | None, domains: Sequence[str] | None
) -> float:
    boost = 1.0
    lower_path = path.lower()
    if feature and feature.lower() in lower_path:
        boost *= FEATURE_PATH_BOOST
    if any(domain and domain.lower() in lower_path for domain in domains or ()):
        boost *= DOMAIN_PATH_BOOST
    return boost


def _tags_boost(
    tags: list[Tag], feature: str | None, domains: Sequence[str] | None
) -> float:
    boost = 1.0
    for tag in tags:
        if feature and matches_feature(tag.name, feature):
            boost *= FEATURE_TAG_BOOST
            break
        if matches_any_domain(tag.name, domains):
            boost *= DOMAIN_TAG_BOOST
    return boost
