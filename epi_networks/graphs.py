"""
This module builds the graphs used throughout the primer. Every function here is a thin wrapper around a networkx
constructor or generator; the wrappers only check their inputs and give all the examples a common vocabulary.

Graphs are returned as `networkx.Graph` or `networkx.DiGraph` objects. Weighted graphs carry a ``weight`` edge
attribute.
"""
# pylint: disable=import-error
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

import networkx as nx  # type: ignore
import numpy as np  # type: ignore
import pandas as pd  # type: ignore

from epi_networks.common import Lazy

logger = logging.getLogger(__name__)

ADJACENCY_MODES = ("directed", "undirected", "max", "min", "upper", "lower", "plus")

Matrix = Union[Sequence[Sequence[float]], np.ndarray, pd.DataFrame]
Edge = Tuple[Any, Any]


def _graph_type(directed: bool):
    return nx.DiGraph if directed else nx.Graph


def empty_graph(n: int, directed: bool = False) -> nx.Graph:
    """A graph with n vertices and no edges. Vertices are numbered from 0.

    :param n: number of vertices
    :param directed: whether the graph is directed
    :return: graph without edges
    """
    if n < 0:
        raise ValueError(f"number of vertices must be >= 0, got {n}")
    return nx.empty_graph(n, create_using=_graph_type(directed))


def full_graph(n: int, directed: bool = False, loops: bool = False) -> nx.Graph:
    """A graph in which every vertex is connected to every other vertex.

    :param n: number of vertices
    :param directed: if True, both directions are added for every pair of vertices
    :param loops: if True, every vertex is also connected to itself
    :return: the complete graph
    """
    if n < 0:
        raise ValueError(f"number of vertices must be >= 0, got {n}")
    graph = nx.complete_graph(n, create_using=_graph_type(directed))
    if loops:
        graph.add_edges_from((v, v) for v in graph.nodes)
    return graph


def _symmetrise(values: np.ndarray, mode: str) -> np.ndarray:
    """Turns a square matrix into the matrix of an undirected graph according to mode.

    >>> _symmetrise(np.array([[0, 2], [1, 0]]), "max")
    array([[0, 2],
           [2, 0]])
    >>> _symmetrise(np.array([[0, 2], [1, 0]]), "lower")
    array([[0, 1],
           [1, 0]])
    """
    if mode == "undirected":
        if not np.array_equal(values, values.T):
            raise ValueError("adjacency matrix must be symmetric for an undirected graph")
        return values
    if mode == "max":
        return np.maximum(values, values.T)
    if mode == "min":
        return np.minimum(values, values.T)
    if mode == "upper":
        upper = np.triu(values)
        return upper + np.triu(values, 1).T
    if mode == "lower":
        lower = np.tril(values)
        return lower + np.tril(values, -1).T
    # plus: entries in both triangles add up, the diagonal is kept as is
    summed = values + values.T
    np.fill_diagonal(summed, np.diag(values))
    return summed


def graph_from_adjacency(
        matrix: Matrix,
        mode: str = "directed",
        weighted: bool = False,
        diag: bool = True,
) -> nx.Graph:
    """Build a graph from an adjacency matrix.

    Entry (i, j) of the matrix is the edge going from vertex i to vertex j. Entries on the diagonal are self-loops.

    :param matrix: a square matrix. If it is a pandas DataFrame, its index and columns must match and are used as
                   vertex names; otherwise vertices are numbered from 0
    :param mode: how to read the matrix. ``directed`` uses it as is. ``undirected`` requires a symmetric matrix.
                 ``max``, ``min``, ``upper``, ``lower`` and ``plus`` build an undirected graph from, respectively, the
                 largest of (i, j) and (j, i), the smallest, the upper triangle, the lower triangle or their sum
    :param weighted: if True, matrix entries are stored as the ``weight`` edge attribute. Otherwise every non-zero
                     entry becomes a single edge
    :param diag: if False, the diagonal is ignored and the graph will have no self-loops
    :return: the graph described by the matrix
    """
    if mode not in ADJACENCY_MODES:
        raise ValueError(f"mode must be one of {ADJACENCY_MODES}, got {mode!r}")

    labels = None
    if isinstance(matrix, pd.DataFrame):
        if list(matrix.index) != list(matrix.columns):
            raise ValueError("adjacency matrix rows and columns must have the same labels")
        labels = list(matrix.columns)
        matrix = matrix.to_numpy()

    values = np.array(matrix, dtype=float)
    if values.ndim != 2 or values.shape[0] != values.shape[1]:
        raise ValueError(f"adjacency matrix must be square, got shape {values.shape}")
    if not weighted and (values < 0).any():
        raise ValueError("an unweighted adjacency matrix cannot have negative entries")
    if not diag:
        values = values.copy()
        np.fill_diagonal(values, 0.0)
    if mode != "directed":
        values = _symmetrise(values, mode)
    if not weighted:
        values = (values != 0).astype(int)

    graph = nx.from_numpy_array(values, create_using=_graph_type(mode == "directed"))
    if not weighted:
        for _, _, data in graph.edges(data=True):
            data.pop("weight", None)
    if labels is not None:
        graph = nx.relabel_nodes(graph, dict(enumerate(labels)))
    logger.debug("Adjacency matrix (%s) gave edges %s", mode, Lazy(lambda: list(graph.edges)))
    return graph


def graph_from_edgelist(
        edges: Union[Iterable[Edge], pd.DataFrame],
        directed: bool = True,
        n: Optional[int] = None,
) -> nx.Graph:
    """Build a graph from an explicit list of edges.

    :param edges: either pairs of vertices, or a pandas DataFrame with ``source`` and ``target`` columns. Any other
                  column of the DataFrame (``weight``, for instance) becomes an edge attribute
    :param directed: whether the edges are directed (from the first vertex to the second)
    :param n: if set, vertices 0 to n - 1 are added to the graph even if no edge touches them
    :return: the graph with the edges given
    """
    if isinstance(edges, pd.DataFrame):
        df = edges
    else:
        pairs = [tuple(edge) for edge in edges]
        for edge in pairs:
            if len(edge) != 2:
                raise ValueError(f"edges must be pairs of vertices, got {edge!r}")
        df = pd.DataFrame(pairs, columns=["source", "target"])
    missing = {"source", "target"} - set(df.columns)
    if missing:
        raise ValueError(f"edge list is missing columns {sorted(missing)}")

    extra = [col for col in df.columns if col not in ("source", "target")]
    graph = nx.from_pandas_edgelist(
        df,
        source="source",
        target="target",
        edge_attr=extra or None,
        create_using=_graph_type(directed),
    )
    if n is not None:
        graph.add_nodes_from(range(n))
    return graph


def read_edgelist(path: Union[str, Path], directed: bool = True) -> nx.Graph:
    """Read a CSV file with a ``source`` and a ``target`` column (and, optionally, other edge attributes).

    :param path: CSV file location
    :param directed: whether the edges are directed
    :return: the graph in the file
    """
    df = pd.read_csv(path)
    logger.info("Read %s edges from %s", len(df), path)
    return graph_from_edgelist(df, directed=directed)


def erdos_renyi(
        n: int,
        p: Optional[float] = None,
        m: Optional[int] = None,
        directed: bool = False,
        seed: Optional[int] = None,
) -> nx.Graph:
    """Random graph in which every edge is equally likely.

    Use ``p`` for the G(n, p) model (each possible edge is present independently with probability p) or ``m`` for the
    G(n, m) model (m edges chosen uniformly at random).

    :param n: number of vertices
    :param p: probability of each edge
    :param m: number of edges
    :param directed: whether the graph is directed
    :param seed: random seed
    :return: the random graph
    """
    if (p is None) == (m is None):
        raise ValueError("exactly one of p and m must be given")
    if p is not None:
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"p must be a probability, got {p}")
        return nx.gnp_random_graph(n, p, seed=seed, directed=directed)
    return nx.gnm_random_graph(n, m, seed=seed, directed=directed)


def barabasi_albert(n: int, m: int = 1, seed: Optional[int] = None) -> nx.Graph:
    """Preferential attachment graph: vertices are added one at a time and attach to m existing vertices, which are
    chosen with probability proportional to their degree.

    :param n: number of vertices
    :param m: number of edges added with each new vertex
    :param seed: random seed
    :return: the random graph
    """
    if not 1 <= m < n:
        raise ValueError(f"m must be in [1, n), got m={m} and n={n}")
    return nx.barabasi_albert_graph(n, m, seed=seed)


def watts_strogatz(size: int, nei: int, p: float, seed: Optional[int] = None) -> nx.Graph:
    """Small world graph: a ring lattice in which each vertex is connected to its ``nei`` closest neighbours on each
    side, whose edges are then rewired with probability p.

    :param size: number of vertices in the ring
    :param nei: number of neighbours on each side of a vertex
    :param p: rewiring probability
    :param seed: random seed
    :return: the random graph
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be a probability, got {p}")
    if nei < 0 or 2 * nei >= size:
        raise ValueError(f"nei must be in [0, size / 2), got nei={nei} and size={size}")
    return nx.watts_strogatz_graph(size, 2 * nei, p, seed=seed)


def build_example_graphs(graphs: Dict[str, Dict[str, Any]], seed: int) -> Dict[str, nx.Graph]:
    """Build every example graph named in the configuration.

    Each random graph gets its own seed, spawned from a `numpy.random.SeedSequence`, so a single seed reproduces all
    of them and adding a graph does not change the others.

    :param graphs: the ``graphs`` block of the configuration
    :param seed: seed from which the generators' seeds are derived
    :return: dict from example name to graph, in the order of the configuration
    """
    builders = {
        "adjacency": lambda params, _: graph_from_adjacency(**params),
        "edgelist": lambda params, _: graph_from_edgelist(**params),
        "empty": lambda params, _: empty_graph(**params),
        "full": lambda params, _: full_graph(**params),
        "random": lambda params, s: erdos_renyi(seed=s, **params),
        "preferential": lambda params, s: barabasi_albert(seed=s, **params),
        "small_world": lambda params, s: watts_strogatz(seed=s, **params),
    }
    seeds = np.random.SeedSequence(seed).spawn(len(builders))
    examples = {}
    for name, params in graphs.items():
        if name not in builders:
            raise ValueError(f"Unknown example graph: {name}")
        child = seeds[list(builders).index(name)]
        graph = builders[name](params, int(child.generate_state(1)[0]))
        logger.info(
            "Built %s graph with %s vertices and %s edges", name, graph.number_of_nodes(), graph.number_of_edges()
        )
        examples[name] = graph
    return examples
