"""
Community detection on clause conflict graphs using label propagation.

Algorithm:
1. Initialize each vertex with a unique label (its own index)
2. Visit vertices in a random order and move each one to the label with
   the largest vote among its neighbours (unit votes, or summed edge
   weights for the weighted variant); ties go to the smallest label
3. Stop after a pass without changes or after max_iterations passes
4. Renumber the surviving labels to 1..k

Only the visiting order is random, so a fixed seed gives identical results.
"""

from collections import defaultdict
from typing import Callable, Dict, List, Optional, Sequence

import networkx as nx
import numpy as np

from conflict_graph import edge_weight


def relabel_consecutive(labels: Sequence[int]) -> List[int]:
    """Map label values to 1..k, ordered by the original label value."""
    mapping = {old: new for new, old in enumerate(sorted(set(labels)), 1)}
    return [mapping[label] for label in labels]


def _propagate(graph: nx.Graph, vote: Callable[[int, int], float],
               max_iterations: int, rng: np.random.Generator) -> List[int]:
    vertices = sorted(graph.nodes())
    n = len(vertices)

    if n == 0:
        return []
    if n == 1:
        return [1]

    labels = {v: v for v in vertices}
    changed = True
    iteration = 0

    while changed and iteration < max_iterations:
        changed = False
        iteration += 1

        for idx in rng.permutation(n):
            v = vertices[idx]
            tally: Dict[int, float] = defaultdict(float)
            for u in graph.neighbors(v):
                tally[labels[u]] += vote(v, u)

            # Isolated vertices keep their label
            if not tally:
                continue

            best = max(tally.values())
            new_label = min(label for label, score in tally.items() if score == best)

            if new_label != labels[v]:
                labels[v] = new_label
                changed = True

    return relabel_consecutive([labels[v] for v in vertices])


def _make_rng(seed: int, rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng(seed)


def detect_communities(graph: nx.Graph, max_iterations: int = 100, seed: int = 42,
                       rng: Optional[np.random.Generator] = None) -> List[int]:
    """
    Detect communities with unweighted label propagation.

    Args:
        graph: Conflict graph (edge weights, if any, are ignored)
        max_iterations: Upper bound on full passes over the vertices
        seed: Seed for the visiting order
        rng: Explicit generator; takes precedence over ``seed``

    Returns:
        List where communities[i] is the community of the i-th vertex in
        ascending vertex order (clause i + 1 for conflict graphs).
    """
    return _propagate(graph, lambda v, u: 1.0, max_iterations, _make_rng(seed, rng))


def weighted_detect_communities(graph: nx.Graph, max_iterations: int = 100, seed: int = 42,
                                rng: Optional[np.random.Generator] = None) -> List[int]:
    """
    Detect communities with weighted label propagation.

    Each neighbour votes for its label with the weight of the connecting
    edge. Edges without a weight count as 1.0, so unweighted graphs are
    accepted too.
    """
    return _propagate(graph, lambda v, u: edge_weight(graph, v, u), max_iterations,
                      _make_rng(seed, rng))


def community_sizes(labels: Sequence[int]) -> Dict[int, int]:
    """Community id -> number of clauses, in order of first appearance."""
    sizes: Dict[int, int] = {}
    for label in labels:
        sizes[label] = sizes.get(label, 0) + 1
    return sizes


def community_members(labels: Sequence[int]) -> Dict[int, List[int]]:
    """Community id -> 1-based clause indices, in order of first appearance."""
    members: Dict[int, List[int]] = {}
    for idx, label in enumerate(labels, 1):
        members.setdefault(label, []).append(idx)
    return members
