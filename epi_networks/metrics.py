"""
Per-vertex centrality metrics and whole-graph descriptive statistics.

Each metric returns a dict from vertex to value and never modifies the graph it is given. Values are computed by
networkx; the functions here only pick the conventions used in the primer:

* degree counts a self-loop twice, like most textbooks do;
* betweenness is not normalised by default, so it reads as "number of shortest paths through this vertex";
* closeness only takes reachable vertices into account, so disconnected graphs still get a value per vertex;
* eigenvector centrality is scaled so the most central vertex gets 1.
"""
# pylint: disable=import-error
import logging
import math
from typing import Any, Callable, Dict, Hashable, Iterable, Optional, Union

import networkx as nx  # type: ignore
import numpy as np  # type: ignore
import pandas as pd  # type: ignore
import scipy.stats as stats  # type: ignore

from epi_networks.common import Lazy

logger = logging.getLogger(__name__)

Vertex = Hashable
VertexMetric = Dict[Vertex, float]

DEGREE_MODES = ("all", "in", "out")


def _check_mode(mode: str):
    if mode not in DEGREE_MODES:
        raise ValueError(f"mode must be one of {DEGREE_MODES}, got {mode!r}")


def degree(graph: nx.Graph, mode: str = "all", loops: bool = True) -> VertexMetric:
    """Number of edges touching each vertex.

    :param graph: the graph
    :param mode: for directed graphs, ``in`` counts incoming edges, ``out`` outgoing edges and ``all`` both. Ignored
                 for undirected graphs
    :param loops: whether self-loops are counted (twice, as they touch the vertex at both ends)
    :return: degree of every vertex
    """
    _check_mode(mode)
    if graph.is_directed() and mode == "in":
        degrees = dict(graph.in_degree())
    elif graph.is_directed() and mode == "out":
        degrees = dict(graph.out_degree())
    else:
        degrees = dict(graph.degree())
    if not loops:
        for vertex, _ in nx.selfloop_edges(graph):
            degrees[vertex] -= 1 if graph.is_directed() and mode != "all" else 2
    return {vertex: float(value) for vertex, value in degrees.items()}


def betweenness(graph: nx.Graph, normalized: bool = False, weight: Optional[str] = None) -> VertexMetric:
    """Number of shortest paths between other pairs of vertices that go through each vertex. When more than one
    shortest path connects a pair, each of them counts fractionally.

    :param graph: the graph
    :param normalized: divide by the number of pairs of other vertices
    :param weight: edge attribute used as the length of an edge, if any
    :return: betweenness of every vertex
    """
    return nx.betweenness_centrality(graph, normalized=normalized, weight=weight)


def closeness(graph: nx.Graph, mode: str = "out", weight: Optional[str] = None) -> VertexMetric:
    """Inverse of the average distance from each vertex to the vertices it can reach, scaled by the fraction of the
    graph it can reach. A vertex that reaches nothing has closeness 0.

    :param graph: the graph
    :param mode: for directed graphs, ``out`` follows edges forward, ``in`` backwards and ``all`` ignores directions
    :param weight: edge attribute used as the length of an edge, if any
    :return: closeness of every vertex
    """
    _check_mode(mode)
    if graph.is_directed():
        if mode == "out":
            # networkx measures incoming distances on directed graphs
            graph = graph.reverse(copy=False)
        elif mode == "all":
            graph = graph.to_undirected(as_view=True)
    return nx.closeness_centrality(graph, distance=weight)


def eigenvector(graph: nx.Graph, scale: bool = True, weight: Optional[str] = None) -> VertexMetric:
    """Eigenvector centrality: a vertex is central if its neighbours are central. On directed graphs, a vertex is
    central if it is pointed at by central vertices.

    :param graph: the graph
    :param scale: if True, values are divided by the maximum, so the most central vertex gets 1
    :param weight: edge attribute used as the strength of an edge, if any
    :return: eigenvector centrality of every vertex
    """
    if graph.number_of_nodes() == 0:
        return {}
    if graph.number_of_edges() == 0:
        return {vertex: 0.0 for vertex in graph.nodes}
    values = nx.eigenvector_centrality(graph, max_iter=1000, weight=weight)
    if scale:
        largest = max(values.values())
        if largest > 0:
            values = {vertex: value / largest for vertex, value in values.items()}
    return values


METRICS: Dict[str, Callable[..., VertexMetric]] = {
    "degree": degree,
    "betweenness": betweenness,
    "closeness": closeness,
    "eigenvector": eigenvector,
}


def compute(graph: nx.Graph, name: str, **kwargs: Any) -> VertexMetric:
    """Compute a metric by name.

    :param graph: the graph
    :param name: one of the keys of `METRICS`
    :param kwargs: passed on to the metric function
    :return: value of the metric for every vertex
    """
    if name not in METRICS:
        raise ValueError(f"Unknown metric {name!r}, expected one of {sorted(METRICS)}")
    values = METRICS[name](graph, **kwargs)
    logger.debug("%s: %s", name, Lazy(lambda: values))
    return values


def vertex_metrics(graph: nx.Graph, names: Iterable[str] = tuple(METRICS)) -> pd.DataFrame:
    """Table with one row per vertex and one column per metric.

    >>> vertex_metrics(nx.path_graph(3), ["degree", "betweenness"])
       vertex  degree  betweenness
    0       0     1.0          0.0
    1       1     2.0          1.0
    2       2     1.0          0.0

    :param graph: the graph
    :param names: metrics to compute
    :return: pandas DataFrame with a vertex column and a column per metric, rows in the graph's vertex order
    """
    df = pd.DataFrame({"vertex": list(graph.nodes)})
    for name in names:
        values = compute(graph, name)
        df[name] = [values[vertex] for vertex in graph.nodes]
    return df


def degree_distribution(graph: nx.Graph, mode: str = "all") -> pd.DataFrame:
    """How many vertices have each degree, from 0 up to the largest degree in the graph.

    :param graph: the graph
    :param mode: see `degree`
    :return: pandas DataFrame with degree, count and proportion columns
    """
    degrees = np.array(list(degree(graph, mode=mode).values()), dtype=int)
    counts = np.bincount(degrees) if degrees.size else np.array([], dtype=int)
    total = counts.sum()
    return pd.DataFrame({
        "degree": np.arange(len(counts)),
        "count": counts,
        "proportion": counts / total if total else counts.astype(float),
    })


def expected_degree_distribution(n: int, p: float, degrees: Iterable[int]) -> pd.DataFrame:
    """Degree distribution expected in an Erdos-Renyi G(n, p) graph. Each vertex can connect to the n - 1 others, each
    with probability p, so degrees follow a Binomial(n - 1, p) distribution.

    :param n: number of vertices
    :param p: probability of each edge
    :param degrees: degrees at which to evaluate the distribution
    :return: pandas DataFrame with degree and proportion columns
    """
    degrees = np.asarray(list(degrees), dtype=int)
    return pd.DataFrame({"degree": degrees, "proportion": stats.binom.pmf(degrees, n - 1, p)})


def _distances(graph: nx.Graph) -> np.ndarray:
    """Lengths of the shortest paths between every pair of distinct vertices connected by a path."""
    lengths = []
    for source, targets in nx.shortest_path_length(graph):
        lengths.extend(length for target, length in targets.items() if target != source)
    return np.array(lengths, dtype=float)


def graph_summary(graph: nx.Graph) -> Dict[str, Union[int, float, bool]]:
    """Descriptive statistics for the whole graph.

    Mean distance and diameter only consider pairs of vertices connected by a path, so they are defined for
    disconnected graphs too. They are NaN for graphs in which no two vertices are connected.

    :param graph: the graph
    :return: dict with vertices, edges, directed, density, mean_degree, transitivity, components, mean_distance and
             diameter
    """
    n = graph.number_of_nodes()
    distances = _distances(graph)
    if graph.is_directed():
        components = nx.number_weakly_connected_components(graph)
    else:
        components = nx.number_connected_components(graph)
    return {
        "vertices": n,
        "edges": graph.number_of_edges(),
        "directed": graph.is_directed(),
        "density": nx.density(graph) if n > 1 else math.nan,
        "mean_degree": float(np.mean(list(degree(graph).values()))) if n else math.nan,
        "transitivity": nx.transitivity(nx.Graph(graph)),
        "components": components,
        "mean_distance": float(distances.mean()) if distances.size else math.nan,
        "diameter": float(distances.max()) if distances.size else math.nan,
    }
