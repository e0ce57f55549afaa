import math
import random

import igraph
import networkx as nx
import pytest

from epi_networks import communities

BARBELL_SPLIT = {**{v: 0 for v in range(5)}, **{v: 1 for v in range(5, 10)}}


def test_membership_from_sets():
    graph = nx.path_graph(4)

    assert communities.membership_from_sets(graph, [{2, 3}, {0, 1}]) == {0: 0, 1: 0, 2: 1, 3: 1}


def test_sizes():
    found = communities.Communities("test", {"a": 0, "b": 1, "c": 1}, 0.0)

    assert found.sizes == [1, 2]


def test_sizes_empty():
    assert communities.Communities("test", {}, math.nan).sizes == []


def test_modularity(two_triangles):
    membership = {"a": 0, "b": 0, "c": 0, "x": 1, "y": 1, "z": 1}

    assert communities.modularity(two_triangles, membership) == pytest.approx(0.5)


def test_modularity_single_community(barbell):
    assert communities.modularity(barbell, {v: 0 for v in barbell}) == pytest.approx(0.0)


def test_modularity_without_edges():
    assert math.isnan(communities.modularity(nx.empty_graph(3), {0: 0, 1: 1, 2: 2}))


@pytest.mark.parametrize("algorithm", ["fast_greedy", "edge_betweenness", "infomap"])
def test_barbell_splits_in_two(barbell, algorithm):
    found = communities.detect(barbell, algorithm)

    assert found.algorithm == algorithm
    assert found.membership == BARBELL_SPLIT
    assert found.sizes == [5, 5]
    assert found.modularity == pytest.approx(communities.modularity(barbell, BARBELL_SPLIT))


@pytest.mark.parametrize("algorithm", ["fast_greedy", "edge_betweenness", "infomap"])
def test_two_triangles(two_triangles, algorithm):
    found = communities.detect(two_triangles, algorithm)

    assert found.membership == {"a": 0, "b": 0, "c": 0, "x": 1, "y": 1, "z": 1}
    assert found.modularity == pytest.approx(0.5)


@pytest.mark.parametrize("algorithm", ["fast_greedy", "edge_betweenness", "infomap"])
def test_without_edges(algorithm):
    found = communities.detect(nx.empty_graph(3), algorithm)

    assert len(found.sizes) == 3
    assert math.isnan(found.modularity)


def test_fast_greedy_directed():
    with pytest.raises(ValueError):
        communities.fast_greedy(nx.DiGraph([(0, 1)]))


def test_edge_betweenness_directed():
    graph = nx.DiGraph(nx.barbell_graph(5, 0))

    found = communities.edge_betweenness(graph)

    assert found.membership == BARBELL_SPLIT


def test_edge_betweenness_does_not_modify_the_graph(barbell):
    communities.edge_betweenness(barbell)

    assert barbell.number_of_edges() == 21


def test_infomap_seeded():
    graph = nx.watts_strogatz_graph(30, 4, 0.1, seed=1)

    one = communities.infomap(graph, seed=5)
    two = communities.infomap(graph, seed=5)

    assert one == two


def test_infomap_restores_the_random_state(barbell):
    random.seed(42)
    state = random.getstate()

    communities.infomap(barbell, seed=1)

    assert random.getstate() == state


def test_infomap_keeps_an_installed_generator(barbell):
    generator = random.Random(99)
    igraph.set_random_number_generator(generator)
    try:
        communities.infomap(barbell, seed=1)
        before = generator.getstate()
        igraph.Graph.Erdos_Renyi(20, 0.3)
        after = generator.getstate()
    finally:
        igraph.set_random_number_generator(random)

    assert before != after


def test_infomap_weighted(two_triangles):
    graph = two_triangles.copy()
    nx.set_edge_attributes(graph, 2.0, "weight")

    found = communities.infomap(graph, seed=1)

    assert len(found.sizes) == 2


def test_infomap_string_vertices_keep_their_names(two_triangles):
    found = communities.infomap(two_triangles, seed=1)

    assert set(found.membership) == set(two_triangles.nodes)


def test_detect_unknown(barbell):
    with pytest.raises(ValueError):
        communities.detect(barbell, "louvain")
