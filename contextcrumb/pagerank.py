"""Weighted, personalizable PageRank over the file reference graph.

Power iteration with dangling-node redistribution along the teleport
vector. Scores are not renormalized after the last iteration; the ranking
only depends on their relative order.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass

import networkx as nx

DEFAULT_DAMPING = 0.85
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_EPSILON = 1e-6


@dataclass(frozen=True)
class PageRankOptions:
    """Tuning knobs for ``pagerank``.

    Attributes:
        damping: Probability of following an edge rather than teleporting.
        max_iterations: Upper bound on power iterations.
        epsilon: Stop once the L1 change between iterations drops below this.
        personalization: Optional node -> non-negative weight map biasing
            both the start vector and teleportation. Nodes missing from the
            map start at zero but still teleport with a 1/n share.
    """

    damping: float = DEFAULT_DAMPING
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    epsilon: float = DEFAULT_EPSILON
    personalization: Mapping[Hashable, float] | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.damping <= 1.0:
            raise ValueError(f"damping must be within [0, 1], got {self.damping}")
        if self.max_iterations < 0:
            raise ValueError(
                f"max_iterations must be >= 0, got {self.max_iterations}"
            )
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be > 0, got {self.epsilon}")
        if self.personalization and any(
            value < 0 for value in self.personalization.values()
        ):
            raise ValueError("personalization weights must be non-negative")


@dataclass(frozen=True)
class PageRankStats:
    """How a PageRank run went."""

    node_count: int
    edge_count: int
    iterations: int
    converged: bool
    final_delta: float


def pagerank(
    graph: nx.DiGraph, options: PageRankOptions | None = None
) -> dict[Hashable, float]:
    """Compute PageRank scores for every node of a weighted digraph.

    Args:
        graph: Directed graph; the ``weight`` edge attribute (default 1.0)
            sets the transition share along each outgoing edge.
        options: Algorithm options; defaults when None.

    Returns:
        Node -> score, in node iteration order. Empty for an empty graph.
    """
    scores, _stats = pagerank_with_stats(graph, options)
    return scores


def pagerank_with_stats(
    graph: nx.DiGraph, options: PageRankOptions | None = None
) -> tuple[dict[Hashable, float], PageRankStats]:
    """Like ``pagerank``, also reporting iteration count and convergence."""
    opts = options or PageRankOptions()
    nodes = list(graph.nodes)
    n = len(nodes)
    if n == 0:
        return {}, PageRankStats(0, 0, 0, True, 0.0)

    scores = _start_vector(nodes, opts.personalization)
    teleport = _teleport_vector(nodes, opts.personalization)

    # Zero out-weight nodes divide by 1 so they never produce NaN
    out_weight = {
        node: sum(w for _, _, w in graph.out_edges(node, data="weight", default=1.0))
        or 1.0
        for node in nodes
    }
    inbound = {
        node: [
            (source, w / out_weight[source])
            for source, _, w in graph.in_edges(node, data="weight", default=1.0)
        ]
        for node in nodes
    }
    dangling = [node for node in nodes if graph.out_degree(node) == 0]
    damping = opts.damping

    iterations = 0
    delta = 0.0
    converged = False
    for _ in range(opts.max_iterations):
        iterations += 1
        dangling_sum = sum(scores[node] for node in dangling)
        new_scores: dict[Hashable, float] = {}
        delta = 0.0
        for node in nodes:
            rank = (1.0 - damping) * teleport[node]
            rank += damping * dangling_sum * teleport[node]
            rank += damping * sum(
                scores[source] * share for source, share in inbound[node]
            )
            new_scores[node] = rank
            delta += abs(rank - scores[node])
        scores = new_scores
        if delta < opts.epsilon:
            converged = True
            break

    stats = PageRankStats(
        node_count=n,
        edge_count=graph.number_of_edges(),
        iterations=iterations,
        converged=converged,
        final_delta=delta,
    )
    return scores, stats


def _start_vector(
    nodes: list[Hashable], personalization: Mapping[Hashable, float] | None
) -> dict[Hashable, float]:
    """Normalize personalization over the graph's nodes, missing nodes at 0."""
    if personalization:
        total = sum(personalization.get(node, 0.0) for node in nodes)
        if total > 0:
            return {node: personalization.get(node, 0.0) / total for node in nodes}
    uniform = 1.0 / len(nodes)
    return {node: uniform for node in nodes}


def _teleport_vector(
    nodes: list[Hashable], personalization: Mapping[Hashable, float] | None
) -> dict[Hashable, float]:
    """Like ``_start_vector``, but nodes without personalized mass get 1/n."""
    uniform = 1.0 / len(nodes)
    start = _start_vector(nodes, personalization)
    return {node: start[node] or uniform for node in nodes}
