import networkx as nx
import numpy as np
import pandas as pd
import pytest

from epi_networks import graphs


def test_empty_graph():
    graph = graphs.empty_graph(5)

    assert list(graph.nodes) == [0, 1, 2, 3, 4]
    assert graph.number_of_edges() == 0
    assert not graph.is_directed()


def test_empty_graph_directed():
    assert graphs.empty_graph(3, directed=True).is_directed()


def test_empty_graph_negative():
    with pytest.raises(ValueError):
        graphs.empty_graph(-1)


def test_full_graph():
    graph = graphs.full_graph(5)

    assert graph.number_of_edges() == 10
    assert nx.number_of_selfloops(graph) == 0


def test_full_graph_directed_with_loops():
    graph = graphs.full_graph(4, directed=True, loops=True)

    assert graph.number_of_edges() == 4 * 3 + 4
    assert nx.number_of_selfloops(graph) == 4


def test_adjacency_directed():
    graph = graphs.graph_from_adjacency([[0, 1, 0], [0, 0, 1], [1, 0, 0]])

    assert graph.is_directed()
    assert sorted(graph.edges) == [(0, 1), (1, 2), (2, 0)]
    assert all("weight" not in data for _, _, data in graph.edges(data=True))


def test_adjacency_undirected():
    graph = graphs.graph_from_adjacency([[0, 1, 1], [1, 0, 0], [1, 0, 0]], mode="undirected")

    assert not graph.is_directed()
    assert graph.number_of_edges() == 2


def test_adjacency_undirected_must_be_symmetric():
    with pytest.raises(ValueError, match="symmetric"):
        graphs.graph_from_adjacency([[0, 1], [0, 0]], mode="undirected")


@pytest.mark.parametrize("matrix", [[[0, 1, 0], [1, 0, 1]], [0, 1, 1], [[[0]]]])
def test_adjacency_must_be_square(matrix):
    with pytest.raises(ValueError, match="square"):
        graphs.graph_from_adjacency(matrix)


def test_adjacency_unknown_mode():
    with pytest.raises(ValueError):
        graphs.graph_from_adjacency([[0]], mode="sideways")


def test_adjacency_negative_unweighted():
    with pytest.raises(ValueError):
        graphs.graph_from_adjacency([[0, -1], [-1, 0]], mode="undirected")


def test_adjacency_diagonal_loops():
    matrix = [[1, 1], [1, 0]]

    assert nx.number_of_selfloops(graphs.graph_from_adjacency(matrix, mode="undirected")) == 1
    assert nx.number_of_selfloops(graphs.graph_from_adjacency(matrix, mode="undirected", diag=False)) == 0


def test_adjacency_weighted():
    graph = graphs.graph_from_adjacency([[0, 2.5], [2.5, 0]], mode="undirected", weighted=True)

    assert graph[0][1]["weight"] == 2.5


def test_adjacency_unweighted_collapses_values():
    graph = graphs.graph_from_adjacency([[0, 3], [3, 0]], mode="undirected")

    assert graph.number_of_edges() == 1
    assert "weight" not in graph[0][1]


@pytest.mark.parametrize(
    "mode,edges",
    [
        ("max", [(0, 1), (0, 2)]),
        ("min", []),
        ("upper", [(0, 1)]),
        ("lower", [(0, 2)]),
        ("plus", [(0, 1), (0, 2)]),
    ],
)
def test_adjacency_symmetrising_modes(mode, edges):
    matrix = np.array([[0, 1, 0], [0, 0, 0], [1, 0, 0]])

    graph = graphs.graph_from_adjacency(matrix, mode=mode)

    assert not graph.is_directed()
    assert sorted(tuple(sorted(edge)) for edge in graph.edges) == edges


def test_adjacency_plus_adds_weights():
    matrix = [[1, 2], [3, 0]]

    graph = graphs.graph_from_adjacency(matrix, mode="plus", weighted=True)

    assert graph[0][1]["weight"] == 5
    assert graph[0][0]["weight"] == 1


def test_adjacency_dataframe_labels():
    matrix = pd.DataFrame([[0, 1], [1, 0]], index=["ann", "bob"], columns=["ann", "bob"])

    graph = graphs.graph_from_adjacency(matrix, mode="undirected")

    assert list(graph.nodes) == ["ann", "bob"]
    assert graph.has_edge("ann", "bob")


def test_adjacency_dataframe_labels_mismatch():
    matrix = pd.DataFrame([[0, 1], [1, 0]], index=["ann", "bob"], columns=["bob", "ann"])

    with pytest.raises(ValueError):
        graphs.graph_from_adjacency(matrix)


def test_edgelist_pairs():
    graph = graphs.graph_from_edgelist([(1, 2), (2, 3)])

    assert graph.is_directed()
    assert list(graph.edges) == [(1, 2), (2, 3)]


def test_edgelist_undirected_with_isolated_vertices():
    graph = graphs.graph_from_edgelist([(0, 1)], directed=False, n=4)

    assert sorted(graph.nodes) == [0, 1, 2, 3]
    assert graph.has_edge(1, 0)


def test_edgelist_dataframe_attributes():
    df = pd.DataFrame([{"source": "a", "target": "b", "weight": 0.5, "days": 3}])

    graph = graphs.graph_from_edgelist(df)

    assert graph["a"]["b"] == {"weight": 0.5, "days": 3}


def test_edgelist_not_pairs():
    with pytest.raises(ValueError):
        graphs.graph_from_edgelist([(1, 2, 3)])


def test_edgelist_missing_columns():
    with pytest.raises(ValueError):
        graphs.graph_from_edgelist(pd.DataFrame([{"from": 1, "to": 2}]))


def test_read_edgelist(tmp_path):
    path = tmp_path / "edges.csv"
    path.write_text("source,target,weight\na,b,1.0\nb,c,2.0\n")

    graph = graphs.read_edgelist(path, directed=False)

    assert graph.number_of_edges() == 2
    assert graph["c"]["b"]["weight"] == 2.0


def test_erdos_renyi_gnp():
    graph = graphs.erdos_renyi(30, p=1.0)

    assert graph.number_of_edges() == 30 * 29 / 2


def test_erdos_renyi_gnm():
    graph = graphs.erdos_renyi(30, m=17, seed=1)

    assert graph.number_of_nodes() == 30
    assert graph.number_of_edges() == 17


def test_erdos_renyi_seeded():
    one = graphs.erdos_renyi(30, p=0.1, seed=3)
    two = graphs.erdos_renyi(30, p=0.1, seed=3)

    assert sorted(one.edges) == sorted(two.edges)


@pytest.mark.parametrize("kwargs", [{}, {"p": 0.1, "m": 3}, {"p": 1.5}, {"p": -0.1}])
def test_erdos_renyi_invalid(kwargs):
    with pytest.raises(ValueError):
        graphs.erdos_renyi(10, **kwargs)


def test_barabasi_albert():
    graph = graphs.barabasi_albert(20, m=1, seed=1)

    assert graph.number_of_nodes() == 20
    assert nx.is_tree(graph)


@pytest.mark.parametrize("m", [0, 5])
def test_barabasi_albert_invalid(m):
    with pytest.raises(ValueError):
        graphs.barabasi_albert(5, m=m)


def test_watts_strogatz_without_rewiring_is_a_ring_lattice():
    graph = graphs.watts_strogatz(10, nei=2, p=0.0)

    assert all(deg == 4 for _, deg in graph.degree)
    assert graph.has_edge(0, 9)
    assert graph.has_edge(0, 8)
    assert not graph.has_edge(0, 7)


@pytest.mark.parametrize("nei,p", [(5, 0.1), (-1, 0.1), (2, 2.0)])
def test_watts_strogatz_invalid(nei, p):
    with pytest.raises(ValueError):
        graphs.watts_strogatz(10, nei=nei, p=p)


def test_build_example_graphs(small_config):
    examples = graphs.build_example_graphs(small_config["graphs"], seed=1)

    assert list(examples) == list(small_config["graphs"])
    assert examples["empty"].number_of_edges() == 0
    assert examples["full"].number_of_edges() == 6
    assert examples["edgelist"].is_directed()
    assert not examples["adjacency"].is_directed()
    assert examples["random"].number_of_nodes() == 15


def test_build_example_graphs_reproducible(small_config):
    one = graphs.build_example_graphs(small_config["graphs"], seed=1)
    two = graphs.build_example_graphs(small_config["graphs"], seed=1)

    for name in one:
        assert sorted(one[name].edges) == sorted(two[name].edges)


def test_build_example_graphs_seeds_do_not_depend_on_other_graphs(small_config):
    everything = graphs.build_example_graphs(small_config["graphs"], seed=1)
    alone = graphs.build_example_graphs({"small_world": small_config["graphs"]["small_world"]}, seed=1)

    assert sorted(alone["small_world"].edges) == sorted(everything["small_world"].edges)


def test_build_example_graphs_unknown():
    with pytest.raises(ValueError):
        graphs.build_example_graphs({"lattice": {"n": 3}}, seed=1)
