"""
Community detection: splitting a graph into groups of vertices that are densely connected among themselves and
loosely connected to the rest. In a contact network these groups are households, classrooms or workplaces, which is
where outbreaks tend to stay before they jump elsewhere.

Three algorithms are available, all provided by external libraries:

* fast greedy (networkx): agglomerative modularity optimisation;
* edge betweenness (networkx): Girvan-Newman divisive clustering, cut at the level with the highest modularity;
* infomap (igraph): compresses the description of a random walk on the graph.
"""
# pylint: disable=import-error
import logging
import math
import random
from typing import Any, Callable, Dict, Hashable, Iterable, List, NamedTuple, Optional, Set

import igraph  # type: ignore
import networkx as nx  # type: ignore

logger = logging.getLogger(__name__)

Vertex = Hashable
Membership = Dict[Vertex, int]


class Communities(NamedTuple):
    """
    The result of a community detection algorithm
    """
    algorithm: str
    membership: Membership
    modularity: float

    @property
    def sizes(self) -> List[int]:
        """Number of vertices in each community, indexed by community id"""
        sizes = [0] * (max(self.membership.values()) + 1 if self.membership else 0)
        for community in self.membership.values():
            sizes[community] += 1
        return sizes


def membership_from_sets(graph: nx.Graph, communities: Iterable[Set[Vertex]]) -> Membership:
    """Converts a list of vertex sets into a membership dict. Community ids are numbered from 0 in the order in which
    their first vertex appears in the graph.

    >>> membership_from_sets(nx.path_graph(4), [{2, 3}, {0, 1}])
    {0: 0, 1: 0, 2: 1, 3: 1}
    """
    community_of = {}
    for i, members in enumerate(communities):
        for vertex in members:
            community_of[vertex] = i
    return _renumber(graph, community_of)


def _renumber(graph: nx.Graph, labels: Dict[Vertex, Any]) -> Membership:
    ids: Dict[Any, int] = {}
    membership = {}
    for vertex in graph.nodes:
        membership[vertex] = ids.setdefault(labels[vertex], len(ids))
    return membership


def modularity(graph: nx.Graph, membership: Membership) -> float:
    """Modularity of a partition of the graph: the fraction of edges inside communities minus the fraction expected
    if edges were placed at random, keeping degrees.

    :param graph: the graph
    :param membership: community of each vertex
    :return: the modularity, or NaN if the graph has no edges
    """
    if graph.number_of_edges() == 0:
        return math.nan
    groups: Dict[int, Set[Vertex]] = {}
    for vertex, community in membership.items():
        groups.setdefault(community, set()).add(vertex)
    return nx.community.modularity(graph, groups.values())


def fast_greedy(graph: nx.Graph) -> Communities:
    """Greedy modularity optimisation (Clauset, Newman and Moore). Starts with every vertex in its own community and
    repeatedly merges the pair of communities that increases modularity the most.

    :param graph: an undirected graph
    :return: the communities found
    """
    if graph.is_directed():
        raise ValueError("fast greedy community detection works on undirected graphs only")
    if graph.number_of_edges() == 0:
        sets = [{vertex} for vertex in graph.nodes]
    else:
        sets = nx.community.greedy_modularity_communities(graph)
    membership = membership_from_sets(graph, sets)
    return Communities("fast_greedy", membership, modularity(graph, membership))


def edge_betweenness(graph: nx.Graph) -> Communities:
    """Girvan-Newman clustering. The edge with the highest betweenness is removed repeatedly, splitting the graph into
    more and more pieces. The split with the highest modularity is kept; the earliest one wins a tie.

    :param graph: the graph
    :return: the communities found
    """
    if graph.number_of_nodes() == 0:
        return Communities("edge_betweenness", {}, math.nan)
    if graph.number_of_edges() == 0:
        membership = membership_from_sets(graph, [{vertex} for vertex in graph.nodes])
        return Communities("edge_betweenness", membership, math.nan)

    components = nx.weakly_connected_components if graph.is_directed() else nx.connected_components
    best = membership_from_sets(graph, components(graph))
    best_modularity = modularity(graph, best)
    for level, sets in enumerate(nx.community.girvan_newman(graph), start=1):
        membership = membership_from_sets(graph, sets)
        value = modularity(graph, membership)
        logger.debug("Girvan-Newman level %s: %s communities, modularity %.4f", level, len(sets), value)
        if value > best_modularity:
            best, best_modularity = membership, value
    return Communities("edge_betweenness", best, best_modularity)


def infomap(graph: nx.Graph, trials: int = 10, seed: Optional[int] = None) -> Communities:
    """Infomap (Rosvall and Bergstrom): finds the partition that minimises the expected description length of a random
    walk on the graph. Runs on igraph; edge weights are used if every edge has one.

    :param graph: the graph
    :param trials: number of attempts to partition the graph, the best one is kept
    :param seed: seed for the `random` module, which igraph draws from unless another generator was installed with
                 `igraph.set_random_number_generator`. The state of `random` is restored afterwards
    :return: the communities found
    """
    if graph.number_of_nodes() == 0:
        return Communities("infomap", {}, math.nan)
    if graph.number_of_edges() == 0:
        membership = membership_from_sets(graph, [{vertex} for vertex in graph.nodes])
        return Communities("infomap", membership, math.nan)

    converted = igraph.Graph.from_networkx(graph)
    weighted = all("weight" in data for _, _, data in graph.edges(data=True))
    state = random.getstate()
    random.seed(seed)
    try:
        clusters = converted.community_infomap(edge_weights="weight" if weighted else None, trials=trials)
    finally:
        random.setstate(state)
    labels = dict(zip(graph.nodes, clusters.membership))
    membership = _renumber(graph, labels)
    return Communities("infomap", membership, modularity(graph, membership))


ALGORITHMS: Dict[str, Callable[..., Communities]] = {
    "fast_greedy": fast_greedy,
    "edge_betweenness": edge_betweenness,
    "infomap": infomap,
}


def detect(graph: nx.Graph, algorithm: str, **kwargs: Any) -> Communities:
    """Run a community detection algorithm by name.

    :param graph: the graph
    :param algorithm: one of the keys of `ALGORITHMS`
    :param kwargs: passed on to the algorithm
    :return: the communities found
    """
    if algorithm not in ALGORITHMS:
        raise ValueError(f"Unknown clustering algorithm {algorithm!r}, expected one of {sorted(ALGORITHMS)}")
    communities = ALGORITHMS[algorithm](graph, **kwargs)
    logger.info(
        "%s found %s communities (modularity %.3f)", algorithm, len(communities.sizes), communities.modularity
    )
    return communities
