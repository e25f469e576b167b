"""
Clause conflict graph construction.

Vertices are clause indices 1..N. Two clauses are linked when enough
literals of one appear negated in the other. The graph is a
``networkx.Graph`` tagged with ``graph.graph['weighted']``; weighted graphs
store a positive finite ``'weight'`` on every edge.
"""

import math
from collections import Counter
from typing import Callable, Dict, List, Sequence

import networkx as nx


WeightFunction = Callable[[int], float]


class UnknownWeightFunctionError(KeyError):
    """Raised when a weight transform is requested by an unknown name."""


WEIGHT_FUNCTIONS: Dict[str, WeightFunction] = {
    'linear': lambda x: x,
    'quadratic': lambda x: x ** 2,
    'exponential': lambda x: 2.0 ** x,
    'cubic': lambda x: x ** 3,
    'log': lambda x: math.log(x + 1),
}


def get_weight_function(name: str) -> WeightFunction:
    """Look up one of the named conflict-count transforms."""
    try:
        return WEIGHT_FUNCTIONS[name]
    except KeyError:
        raise UnknownWeightFunctionError(
            f"unknown weight function {name!r}, expected one of {sorted(WEIGHT_FUNCTIONS)}"
        ) from None


def count_conflicts(clause1: Sequence[int], clause2: Sequence[int]) -> int:
    """Number of literals in clause1 whose negation appears in clause2."""
    other = set(clause2)
    return sum(1 for lit in clause1 if -lit in other)


def is_weighted(graph: nx.Graph) -> bool:
    return bool(graph.graph.get('weighted', False))


def edge_weight(graph: nx.Graph, u: int, v: int) -> float:
    """Weight of edge (u, v); unweighted edges count as 1.0."""
    return float(graph[u][v].get('weight', 1.0))


def _safe_weight(weight_fn: WeightFunction, conflicts: int) -> float:
    # Unusable transform output falls back to the raw conflict count,
    # or to 1.0 when min_conflicts=0 lets a conflict-free pair through
    fallback = float(conflicts) if conflicts > 0 else 1.0
    try:
        weight = float(weight_fn(conflicts))
    except Exception:
        return fallback
    if not math.isfinite(weight) or weight <= 0:
        return fallback
    return weight


def _empty_graph(num_clauses: int, weighted: bool) -> nx.Graph:
    graph = nx.Graph(weighted=weighted)
    graph.add_nodes_from(range(1, num_clauses + 1))
    return graph


def _print_summary(graph: nx.Graph, min_conflicts: int):
    print(f"🔗 Conflict graph: {graph.number_of_nodes()} vertices, "
          f"{graph.number_of_edges()} edges (min_conflicts={min_conflicts})")
    if is_weighted(graph) and graph.number_of_edges() > 0:
        weights = [w for _, _, w in graph.edges(data='weight')]
        print(f"   Weight range: {min(weights):.2f} - {max(weights):.2f}")


def build_weighted_conflict_graph(clauses: Sequence[Sequence[int]], num_vars: int,
                                  min_conflicts: int = 1,
                                  weight_fn: WeightFunction = WEIGHT_FUNCTIONS['linear'],
                                  verbose: bool = False) -> nx.Graph:
    """
    Build a weighted clause conflict graph.

    Args:
        clauses: List of clauses (each clause is a sequence of literals)
        num_vars: Number of variables (kept for API symmetry, unused)
        min_conflicts: Minimum conflict count required to create an edge
        weight_fn: Transform from conflict count to edge weight, e.g.
                   ``lambda x: x ** 2``. Non-finite or non-positive results,
                   and transforms that raise, fall back to the conflict count.
        verbose: Print a construction summary

    Returns:
        networkx.Graph with ``graph.graph['weighted'] == True``
    """
    graph = _empty_graph(len(clauses), weighted=True)

    for i in range(len(clauses)):
        for j in range(i + 1, len(clauses)):
            conflicts = count_conflicts(clauses[i], clauses[j])
            if conflicts >= min_conflicts:
                graph.add_edge(i + 1, j + 1, weight=_safe_weight(weight_fn, conflicts))

    if verbose:
        _print_summary(graph, min_conflicts)
    return graph


def build_conflict_graph(clauses: Sequence[Sequence[int]], num_vars: int,
                         weighted: bool = False, min_conflicts: int = 2,
                         weight_fn: WeightFunction = WEIGHT_FUNCTIONS['linear'],
                         verbose: bool = False) -> nx.Graph:
    """
    Build the clause conflict graph of a formula.

    An edge (i, j) exists iff ``count_conflicts(clauses[i-1], clauses[j-1])``
    is at least ``min_conflicts``. With ``weighted=True`` each edge carries
    ``weight_fn(conflicts)`` as its weight; otherwise no weight is stored.
    """
    if weighted:
        return build_weighted_conflict_graph(clauses, num_vars, min_conflicts=min_conflicts,
                                             weight_fn=weight_fn, verbose=verbose)

    graph = _empty_graph(len(clauses), weighted=False)

    for i in range(len(clauses)):
        for j in range(i + 1, len(clauses)):
            if count_conflicts(clauses[i], clauses[j]) >= min_conflicts:
                graph.add_edge(i + 1, j + 1)

    if verbose:
        _print_summary(graph, min_conflicts)
    return graph


def weight_statistics(graph: nx.Graph) -> dict:
    """
    Summarize the edge weights of a conflict graph.

    Unweighted graphs are treated as all-1.0. The distribution buckets
    weights by their integer part; ``edges_at_threshold[t]`` counts edges
    with weight >= t for t in 1..5.
    """
    weights: List[float] = [edge_weight(graph, u, v) for u, v in graph.edges()]

    if not weights:
        return {
            'edge_count': 0,
            'min_weight': None,
            'max_weight': None,
            'mean_weight': None,
            'distribution': {},
            'edges_at_threshold': {t: 0 for t in range(1, 6)},
        }

    distribution = Counter(int(w) for w in weights)
    return {
        'edge_count': len(weights),
        'min_weight': min(weights),
        'max_weight': max(weights),
        'mean_weight': sum(weights) / len(weights),
        'distribution': dict(sorted(distribution.items())),
        'edges_at_threshold': {t: sum(1 for w in weights if w >= t) for t in range(1, 6)},
    }
