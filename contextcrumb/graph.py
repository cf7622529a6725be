"""Weighted file-to-file graph construction from a symbol graph."""

from __future__ import annotations

from collections.abc import Sequence

import networkx as nx

from contextcrumb.models import SymbolGraph
from contextcrumb.weights import (
    MENTIONED_IDENTIFIER_MULTIPLIER,
    is_mentioned_identifier,
    matches_any_domain,
    matches_feature,
    symbol_weight,
)


def edge_weight_for(
    symbol_name: str,
    definition_count: int,
    *,
    feature: str | None = None,
    domains: Sequence[str] | None = None,
) -> float:
    """Weight contributed by one reference to a symbol.

    Args:
        symbol_name: The referenced symbol.
        definition_count: Number of files defining the symbol.
        feature: Feature hint; matching symbols are boosted.
        domains: Domain hints; matching symbols are boosted less.

    Returns:
        The symbol weight, times the mentioned-identifier boost when the
        symbol is named after the feature or a domain.
    """
    weight = symbol_weight(
        symbol_name,
        definition_count,
        matches_feature(symbol_name, feature) if feature else False,
        matches_any_domain(symbol_name, domains),
    )
    if is_mentioned_identifier(symbol_name, feature, domains):
        weight *= MENTIONED_IDENTIFIER_MULTIPLIER
    return weight


def build_adjacency_graph(
    graph: SymbolGraph,
    *,
    feature: str | None = None,
    domains: Sequence[str] | None = None,
) -> nx.DiGraph:
    """Build the directed, weighted reference graph between files.

    Nodes are file paths, in ``graph.file_to_tags`` order. An edge from
    file A to file B exists when A references a symbol defined in B; its
    ``weight`` attribute is the sum of the weights of all such symbols.
    Paths seen only in the symbol indices are registered on ``graph`` as
    zero-tag files. A file never gets an edge to itself.

    Args:
        graph: The symbol graph.
        feature: Optional feature hint used for symbol weighting.
        domains: Optional domain hints used for symbol weighting.

    Returns:
        A networkx DiGraph.
    """
    adjacency = nx.DiGraph()
    adjacency.add_nodes_from(graph.file_to_tags)

    for symbol_name, def_files in graph.definitions.items():
        ref_files = graph.references.get(symbol_name)
        if not def_files or not ref_files:
            continue

        weight = edge_weight_for(
            symbol_name, len(def_files), feature=feature, domains=domains
        )
        for ref_file in ref_files:
            for def_file in def_files:
                if ref_file == def_file:
                    continue
                for path in (ref_file, def_file):
                    if path not in adjacency:
                        graph.ensure_file(path)
                        adjacency.add_node(path)
                if adjacency.has_edge(ref_file, def_file):
                    adjacency[ref_file][def_file]["weight"] += weight
                else:
                    adjacency.add_edge(ref_file, def_file, weight=weight)

    return adjacency
