"""
The chapters of the primer, in the order they are usually read. Each chapter takes the example graphs and returns one
or more sections of the document; they never modify the graphs.

Chapters are looked up by name in `CHAPTERS`, so the configuration can reorder or drop them.
"""
# pylint: disable=import-error
import logging
from typing import Callable, Dict, List

import networkx as nx  # type: ignore
import pandas as pd  # type: ignore
from matplotlib import pyplot as plt  # type: ignore

from epi_networks import colours as col
from epi_networks import communities, metrics, visualisation
from epi_networks.common import Issue, IssueSeverity, log_issue
from epi_networks.config import Config
from epi_networks.report import Section

logger = logging.getLogger(__name__)

Examples = Dict[str, nx.Graph]
Chapter = Callable[[Examples, Config, List[Issue]], List[Section]]

# the generated graphs, which are big enough for metrics and communities to be interesting
MODEL_GRAPHS = ("random", "preferential", "small_world")

CONSTRUCTION = """
A network (or graph) is a set of vertices joined by edges. In infectious disease epidemiology the vertices are usually
people, or households, farms or towns, and an edge means that an infection can pass between the two ends: they live
together, they met, or animals were moved from one farm to the other.

The most direct way of writing a network down is its adjacency matrix. Row i and column j hold a non-zero value when
there is an edge from vertex i to vertex j. When contacts go both ways the matrix is symmetric and the network is
undirected. Values on the diagonal are self-loops, and values other than 1 can be used as weights, such as the
number of hours two people spent together.

Large networks are mostly empty matrices, so they are usually stored as edge lists instead. An edge list is a table
with one row per edge, giving its source and its target. Contact tracing data naturally comes in this form: each row
says who infected whom. Those edges have a direction, from the infector to the infectee.
"""

MODELS = """
Real contact data is scarce, so much of what we know about epidemics on networks comes from network models. They are
simple rules for building random graphs with a chosen structure. Comparing them shows which features of a network
matter for spread:

* the empty graph has no contacts at all, and nothing can spread;
* the full graph connects everyone with everyone. This is the "well mixed" population assumed by compartmental
  models such as SIR;
* the Erdos-Renyi random graph adds each possible edge independently with the same probability. Most people have a
  similar number of contacts;
* the Barabasi-Albert preferential attachment graph grows by adding people who prefer to connect to those who
  already have many contacts. A few hubs end up with most of the edges, which is the structure of sexual contact
  networks;
* the Watts-Strogatz small-world graph starts from a ring where everyone knows their neighbours and rewires a few
  edges at random. Those shortcuts bring everyone within a few steps of each other while contacts stay clustered.

The table summarises each graph. Density is the fraction of possible edges that are present. Transitivity is the
probability that two contacts of someone are also in contact. Mean distance is the average number of steps along
the shortest path between two people who are connected at all.
"""

DEGREE = """
The degree of a vertex is its number of contacts, and the degree distribution shows how contacts are shared out in
the population. It matters because the chance of infecting someone, and of being infected, grows with the number of
contacts. A disease spreads much faster when contacts are concentrated in a few people than when they are spread
evenly, even if the average is the same.

In the random graph degrees follow a binomial distribution around the mean, drawn as a line. The preferential
attachment graph has a long tail of highly connected hubs. The small-world graph keeps almost everyone at the degree
of the original ring.
"""

CENTRALITY = {
    "degree": """
Degree centrality is simply the number of contacts of each person. People with many contacts are the most likely to
be infected early and to pass the infection on. They are natural targets for vaccination or for monitoring.
""",
    "betweenness": """
Betweenness centrality counts how many shortest paths between other people go through each person. People with a high
betweenness are bridges between parts of the network that would otherwise be far apart. Removing them, for instance
by isolating them, can cut off the routes an infection would take from one community to another.
""",
    "closeness": """
Closeness centrality is the inverse of the average number of steps from a person to everyone they can reach. An
infection starting at a person with high closeness reaches the rest of the network quickly. In disconnected networks
only the reachable part is counted, and the value is scaled by the fraction of the network that can be reached.
""",
    "eigenvector": """
Eigenvector centrality scores people by the centrality of their contacts: being connected to well-connected people
counts for more than being connected to people with few contacts. Values are scaled so the most central person has a
score of 1. In networks made of several disconnected pieces the scores concentrate in the piece with the most
connected core.
""",
}

COMMUNITIES = {
    "fast_greedy": """
Communities are groups of people with many contacts among themselves and few with the rest of the network.
Outbreaks tend to stay inside a community for a while before crossing to the next, so communities suggest where to
target interventions. The fast greedy algorithm starts with everyone in their own community. At each step it merges
the two communities whose merger most improves the modularity, which measures how much denser the connections
inside communities are than they would be by chance.
""",
    "edge_betweenness": """
The edge betweenness (Girvan-Newman) algorithm works the other way round. It repeatedly removes the edge with the
highest betweenness, the bridge most shortest paths go through, until the network falls apart into communities. The
split with the highest modularity is kept. It is slow on large networks but easy to interpret: the removed edges are
exactly the contacts that link communities.
""",
    "infomap": """
Infomap follows an infection, or any random walker, as it moves along the edges. A good partition is one in which
the walker stays inside a community for a long time before leaving it. The partition is found by compressing the
description of the walk, and it is the most natural of the three algorithms for spreading processes.
""",
}


def _figure_kwargs(config: Config) -> Dict:
    return {
        "layout_name": config["layout"],
        "seed": config["seed"],
        "panel_size": (config["figure"]["width"], config["figure"]["height"]),
    }


def _pick(examples: Examples, names) -> Examples:
    return {name: examples[name] for name in names if name in examples}


def construction(examples: Examples, config: Config, issues: List[Issue]) -> List[Section]:
    """Graphs built from an adjacency matrix and from an edge list"""
    figures = []
    tables = []
    if "adjacency" in examples:
        graph = examples["adjacency"]
        matrix = nx.to_pandas_adjacency(graph, dtype=float if nx.is_weighted(graph) else int)
        tables.append(("Adjacency matrix of the household", matrix.reset_index().rename(columns={"index": "vertex"})))
    if "edgelist" in examples:
        edges = nx.to_pandas_edgelist(examples["edgelist"])
        tables.append(("Edge list of the transmission tree", edges))
    built = _pick(examples, ("adjacency", "edgelist"))
    if built:
        figures.append(("Graphs from an adjacency matrix and an edge list", visualisation.plot_graph_grid(
            built, ncol=2, **_figure_kwargs(config)
        )))
    else:
        log_issue(logger, "No adjacency or edge list example configured", IssueSeverity.LOW, issues)
    return [Section("Building networks", CONSTRUCTION, figures, tables)]


def models(examples: Examples, config: Config, issues: List[Issue]) -> List[Section]:
    """Empty, full and random graph models side by side"""
    built = _pick(examples, ("empty", "full") + MODEL_GRAPHS)
    if not built:
        log_issue(logger, "No network model example configured", IssueSeverity.LOW, issues)
        return [Section("Network models", MODELS)]
    summary = pd.DataFrame([{"graph": name, **metrics.graph_summary(graph)} for name, graph in built.items()])
    figure = visualisation.plot_graph_grid(built, ncol=3, with_labels=False, node_size=60, **_figure_kwargs(config))
    return [Section("Network models", MODELS, [("Network models", figure)], [("Graph summaries", summary)])]


def degree(examples: Examples, config: Config, issues: List[Issue]) -> List[Section]:
    """Degree distributions of the generated graphs"""
    built = _pick(examples, MODEL_GRAPHS)
    if not built:
        log_issue(logger, "No generated graph to show degree distributions for", IssueSeverity.LOW, issues)
        return [Section("Degree distributions", DEGREE)]

    width, height = config["figure"]["width"], config["figure"]["height"]
    fig, axes = plt.subplots(1, len(built), squeeze=False, constrained_layout=True,
                             figsize=(width * len(built), height * 0.75))
    tables = []
    for ax, (name, graph) in zip(axes[0], built.items()):
        distribution = metrics.degree_distribution(graph)
        expected = None
        params = config["graphs"].get(name, {})
        if name == "random" and params.get("p") is not None and not graph.is_directed():
            expected = metrics.expected_degree_distribution(params["n"], params["p"], distribution["degree"])
        visualisation.plot_degree_distribution(distribution, expected, ax=ax, title=name)
        tables.append((f"Degree distribution of the {name} graph", distribution))
    return [Section("Degree distributions", DEGREE, [("Degree distributions", fig)], tables)]


def _centrality_caveats(name: str, graph_name: str, graph: nx.Graph, issues: List[Issue]):
    if graph.number_of_nodes() == 0:
        return
    connected = nx.is_weakly_connected(graph) if graph.is_directed() else nx.is_connected(graph)
    if connected:
        return
    if name == "closeness":
        log_issue(
            logger,
            f"The {graph_name} graph is disconnected: closeness only counts the vertices each vertex can reach",
            IssueSeverity.LOW,
            issues,
        )
    elif name == "eigenvector":
        log_issue(
            logger,
            f"The {graph_name} graph is disconnected: eigenvector centrality is only meaningful in its largest piece",
            IssueSeverity.MEDIUM,
            issues,
        )


def centrality(examples: Examples, config: Config, issues: List[Issue]) -> List[Section]:
    """One section per centrality metric, with the generated graphs coloured by their values"""
    built = _pick(examples, MODEL_GRAPHS)
    sections = []
    for name in config["metrics"]:
        colours = {}
        top = []
        for graph_name, graph in built.items():
            _centrality_caveats(name, graph_name, graph, issues)
            table = col.metric_colours(
                metrics.compute(graph, name), name=config["palette"], reverse=config["reverse_palette"]
            )
            colours[graph_name] = col.colour_lookup(table)
            ranked = table.sort_values("value", ascending=False, kind="stable").head(int(config["top"]))
            top.append(ranked[["vertex", "value"]].assign(graph=graph_name))
        title = f"{name.capitalize()} centrality"
        shade = "lighter" if config["reverse_palette"] else "darker"
        if not built:
            sections.append(Section(title, CENTRALITY[name]))
            continue
        figure = visualisation.plot_graph_grid(built, colours, ncol=3, node_size=120, **_figure_kwargs(config))
        table = pd.concat(top, ignore_index=True)[["graph", "vertex", "value"]].rename(columns={"value": name})
        sections.append(Section(
            title,
            CENTRALITY[name],
            [(f"Vertices coloured by {name} ({shade} is more central)", figure)],
            [(f"Most central vertices by {name}", table)],
        ))
    return sections


def clustering(examples: Examples, config: Config, issues: List[Issue]) -> List[Section]:
    """One section per community detection algorithm"""
    built = _pick(examples, MODEL_GRAPHS)
    sections = []
    for algorithm in config["clustering"]:
        colours = {}
        rows = []
        for graph_name, graph in built.items():
            if algorithm == "fast_greedy" and graph.is_directed():
                log_issue(
                    logger,
                    f"Fast greedy needs an undirected graph, skipped the {graph_name} graph",
                    IssueSeverity.MEDIUM,
                    issues,
                )
                continue
            kwargs = {"seed": config["seed"]} if algorithm == "infomap" else {}
            found = communities.detect(graph, algorithm, **kwargs)
            colours[graph_name] = col.membership_colours(found.membership)
            rows.append({
                "graph": graph_name,
                "communities": len(found.sizes),
                "largest": max(found.sizes, default=0),
                "modularity": found.modularity,
            })
        title = f"Communities: {algorithm.replace('_', ' ')}"
        if not rows:
            sections.append(Section(title, COMMUNITIES[algorithm]))
            continue
        drawn = {name: graph for name, graph in built.items() if name in colours}
        figure = visualisation.plot_graph_grid(drawn, colours, ncol=3, node_size=120, **_figure_kwargs(config))
        sections.append(Section(
            title,
            COMMUNITIES[algorithm],
            [(f"Communities found by {algorithm.replace('_', ' ')}", figure)],
            [("Communities found", pd.DataFrame(rows))],
        ))
    return sections


CHAPTERS: Dict[str, Chapter] = {
    "construction": construction,
    "models": models,
    "degree": degree,
    "centrality": centrality,
    "communities": clustering,
}


def check_chapters(names: List[str]) -> List[Chapter]:
    """Resolve chapter names, failing on the first unknown one before anything is rendered."""
    unknown = [name for name in names if name not in CHAPTERS]
    if unknown:
        raise ValueError(f"Unknown chapters {unknown}, expected some of {list(CHAPTERS)}")
    return [CHAPTERS[name] for name in names]
