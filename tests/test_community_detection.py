import hypothesis.strategies as st
import networkx as nx
import numpy as np
import pytest
from hypothesis import given, settings

from community_detection import (community_members, community_sizes, detect_communities,
                                 relabel_consecutive, weighted_detect_communities)
from conflict_graph import build_conflict_graph


DETECTORS = [detect_communities, weighted_detect_communities]


def two_triangles():
    graph = nx.Graph(weighted=False)
    graph.add_nodes_from(range(1, 7))
    graph.add_edges_from([(1, 2), (1, 3), (2, 3), (4, 5), (4, 6), (5, 6)])
    return graph


random_graphs = st.integers(min_value=0, max_value=25).flatmap(
    lambda n: st.tuples(
        st.just(n),
        st.lists(st.tuples(st.integers(1, max(n, 1)), st.integers(1, max(n, 1))), max_size=60),
    )
)


def make_graph(data):
    n, edges = data
    graph = nx.Graph(weighted=False)
    graph.add_nodes_from(range(1, n + 1))
    graph.add_edges_from((u, v) for u, v in edges if u != v and u <= n and v <= n)
    return graph


@pytest.mark.parametrize("detect", DETECTORS)
def test_disconnected_components(detect):
    for seed in range(10):
        labels = detect(two_triangles(), seed=seed)
        assert labels[0] == labels[1] == labels[2]
        assert labels[3] == labels[4] == labels[5]
        assert labels[0] != labels[3]
        assert sorted(set(labels)) == [1, 2]


@pytest.mark.parametrize("detect", DETECTORS)
def test_trivial_graphs(detect):
    assert detect(nx.Graph()) == []
    single = nx.Graph()
    single.add_node(1)
    assert detect(single) == [1]


@pytest.mark.parametrize("detect", DETECTORS)
def test_isolated_vertices_keep_own_community(detect):
    graph = nx.Graph()
    graph.add_nodes_from(range(1, 5))
    assert detect(graph, seed=3) == [1, 2, 3, 4]


@pytest.mark.parametrize("detect", DETECTORS)
@given(data=random_graphs, seed=st.integers(min_value=0, max_value=2**32 - 1))
@settings(max_examples=40)
def test_deterministic_for_seed(detect, data, seed):
    graph = make_graph(data)
    assert detect(graph, seed=seed) == detect(graph, seed=seed)


@pytest.mark.parametrize("detect", DETECTORS)
@given(data=random_graphs, seed=st.integers(min_value=0, max_value=1000))
@settings(max_examples=40)
def test_labels_are_dense(detect, data, seed):
    graph = make_graph(data)
    labels = detect(graph, seed=seed)
    assert len(labels) == graph.number_of_nodes()
    if labels:
        assert sorted(set(labels)) == list(range(1, max(labels) + 1))


def test_explicit_rng_matches_seed():
    graph = two_triangles()
    graph.add_edge(3, 4)
    by_seed = detect_communities(graph, seed=11)
    by_rng = detect_communities(graph, seed=0, rng=np.random.default_rng(11))
    assert by_seed == by_rng


def test_weighted_votes_follow_heavier_edges():
    # Vertex 3 has two light edges into {1, 2} and one heavy edge to 4
    graph = nx.Graph(weighted=True)
    graph.add_nodes_from(range(1, 5))
    graph.add_edge(1, 2, weight=5.0)
    graph.add_edge(1, 3, weight=1.0)
    graph.add_edge(2, 3, weight=1.0)
    graph.add_edge(3, 4, weight=10.0)
    for seed in range(10):
        labels = weighted_detect_communities(graph, seed=seed)
        assert labels[2] == labels[3]
        assert labels[0] == labels[1]


def test_weighted_on_unweighted_graph_matches_plain():
    # With unit weights the two variants tally identical votes
    graph = two_triangles()
    graph.add_edges_from([(3, 4), (2, 5)])
    for seed in range(5):
        assert weighted_detect_communities(graph, seed=seed) == detect_communities(graph, seed=seed)


def test_iteration_cap_returns_partial_result():
    graph = nx.path_graph(range(1, 30))
    labels = detect_communities(graph, max_iterations=1, seed=0)
    assert len(labels) == 29
    assert sorted(set(labels)) == list(range(1, max(labels) + 1))


def test_conflict_graph_pipeline(small_instance):
    num_vars, clauses = small_instance
    graph = build_conflict_graph(clauses, num_vars)
    labels = detect_communities(graph, seed=42)
    assert len(labels) == len(clauses)
    assert labels == detect_communities(graph, seed=42)


def test_relabel_consecutive():
    assert relabel_consecutive([7, 3, 7, 9]) == [2, 1, 2, 3]
    assert relabel_consecutive([]) == []


def test_community_summaries():
    labels = [2, 1, 2, 3, 1]
    assert community_sizes(labels) == {2: 2, 1: 2, 3: 1}
    assert list(community_sizes(labels)) == [2, 1, 3]
    assert community_members(labels) == {2: [1, 3], 1: [2, 5], 3: [4]}
