"""
Plotting tools for the primer. It can also be used on its own to look at a contact network stored as an edge list::

    python -m epi_networks.visualisation contacts.csv --metric betweenness --undirected
"""
# pylint: disable=import-error
import argparse
import logging
import math
import sys
from typing import Dict, Hashable, Mapping, Optional, Tuple

import networkx as nx  # type: ignore
import numpy as np  # type: ignore
import pandas as pd  # type: ignore
from matplotlib import pyplot as plt  # type: ignore
from more_itertools import chunked  # type: ignore

from epi_networks import colours as col
from epi_networks import communities, graphs, metrics

# Default logger, used if module not called as __main__
logger = logging.getLogger(__name__)

LAYOUTS = ("spring", "circular", "kamada_kawai", "shell", "random")

Position = Dict[Hashable, np.ndarray]


def layout(graph: nx.Graph, name: str = "spring", seed: Optional[int] = None) -> Position:
    """Position of each vertex on the plane.

    :param graph: the graph to be drawn
    :param name: one of `LAYOUTS`
    :param seed: random seed for the layouts that need one (spring and random)
    :return: dict from vertex to (x, y) coordinates
    """
    if name == "spring":
        return nx.spring_layout(graph, seed=seed)
    if name == "circular":
        return nx.circular_layout(graph)
    if name == "kamada_kawai":
        return nx.kamada_kawai_layout(graph)
    if name == "shell":
        return nx.shell_layout(graph)
    if name == "random":
        return nx.random_layout(graph, seed=seed)
    raise ValueError(f"layout must be one of {LAYOUTS}, got {name!r}")


def plot_graph(
        graph: nx.Graph,
        colours: Optional[Mapping[Hashable, str]] = None,
        pos: Optional[Position] = None,
        ax=None,
        title: Optional[str] = None,
        node_size: int = 200,
        with_labels: bool = True,
        figsize: Tuple[float, float] = (6, 6),
):
    """
    Draws a graph, with its vertices coloured as given

    :param graph: the graph to be drawn
    :param colours: colour of each vertex. Vertices without a colour are drawn in grey
    :param pos: position of each vertex, a spring layout is used if not given
    :param ax: matplotlib axes to draw on; a new figure is created if None
    :param title: title of the plot
    :param node_size: size of the vertices
    :param with_labels: draw the name of each vertex on it
    :param figsize: size of the new figure, if one is created
    :return: the matplotlib figure the graph was drawn on
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    else:
        fig = ax.figure
    if pos is None:
        pos = layout(graph)

    nx.draw_networkx_edges(graph, pos, ax=ax, alpha=0.5, arrows=graph.is_directed(), node_size=node_size)
    nx.draw_networkx_nodes(
        graph,
        pos,
        ax=ax,
        node_color=col.as_colour_list(graph, colours),
        node_size=node_size,
        edgecolors="#333333",
        linewidths=0.5,
    )
    if with_labels:
        nx.draw_networkx_labels(graph, pos, ax=ax, font_size=7)
    if title is not None:
        ax.set_title(title)
    ax.set_axis_off()
    return fig


def plot_graph_grid(
        graphs: Mapping[str, nx.Graph],  # pylint: disable=redefined-outer-name
        colours: Optional[Mapping[str, Mapping[Hashable, str]]] = None,
        ncol: int = 3,
        layout_name: str = "spring",
        seed: Optional[int] = None,
        panel_size: Tuple[float, float] = (5, 5),
        **kwargs,
):
    """
    Plots a grid of graphs, one graph per panel, titled with its name. Unused panels are left blank

    :param graphs: the graphs to draw, by name
    :param colours: for each graph name, the colour of each of its vertices
    :param ncol: number of columns (the number of rows will be calculated to fit all graphs)
    :param layout_name: layout used for every graph, see `layout`
    :param seed: seed for the layout
    :param panel_size: size of each individual panel
    :param kwargs: passed on to `plot_graph`
    :return: returns a matplotlib figure
    """
    if not graphs:
        raise ValueError("graphs cannot be empty")
    colours = colours or {}
    ncol = min(ncol, len(graphs))
    nrow = math.ceil(len(graphs) / ncol)
    fig, axes = plt.subplots(
        nrow,
        ncol,
        squeeze=False,
        constrained_layout=True,
        figsize=(panel_size[0] * ncol, panel_size[1] * nrow),
    )
    for i, row in enumerate(chunked(graphs.items(), ncol)):
        for j, (name, graph) in enumerate(row):
            plot_graph(
                graph,
                colours.get(name),
                pos=layout(graph, layout_name, seed=seed),
                ax=axes[i, j],
                title=name,
                **kwargs,
            )
    for ax in axes.flat[len(graphs):]:
        ax.set_axis_off()
    return fig


def plot_degree_distribution(
        distribution: pd.DataFrame,
        expected: Optional[pd.DataFrame] = None,
        ax=None,
        title: Optional[str] = None,
):
    """
    Bar plot of the proportion of vertices with each degree

    :param distribution: pandas DataFrame with degree and proportion columns, see `metrics.degree_distribution`
    :param expected: optional reference distribution (degree and proportion columns) drawn as a line
    :param ax: matplotlib axes to draw on; a new figure is created if None
    :param title: title of the plot
    :return: the matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 4), constrained_layout=True)
    else:
        fig = ax.figure
    ax.bar(distribution["degree"], distribution["proportion"], color="#0072B2", alpha=0.8, label="observed")
    if expected is not None:
        ax.plot(expected["degree"], expected["proportion"], color="#D55E00", marker="o", label="expected")
        ax.legend(loc="upper right")
    ax.set_xlabel("Degree")
    ax.set_ylabel("Proportion of vertices")
    if title is not None:
        ax.set_title(title)
    return fig


def build_args(argv):
    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Plots a network stored as a CSV edge list (source and target columns)",
    )
    colouring = parser.add_mutually_exclusive_group()
    colouring.add_argument(
        "--metric",
        default=None,
        choices=sorted(metrics.METRICS),
        help="Colour the vertices by this centrality metric",
    )
    colouring.add_argument(
        "--clustering",
        default=None,
        choices=sorted(communities.ALGORITHMS),
        help="Colour the vertices by the community they belong to",
    )
    parser.add_argument("--undirected", action="store_true", help="Read the edges as undirected")
    parser.add_argument("--layout", default="spring", choices=LAYOUTS, help="How to place the vertices")
    parser.add_argument("--palette", default="YlOrRd", help="Matplotlib colormap used for metrics")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the layout and clustering")
    parser.add_argument("--output", default=None, help="Save the plot to this file instead of showing it")

    parser.add_argument("edgelist", type=str, help="Path to a CSV edge list")

    return parser.parse_args(argv)


def main(argv):
    """
    This is the main function of the visualisation tool. The tool plots an edge list, optionally coloured
    """
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.INFO,
        format="[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s",
    )
    args = build_args(argv)
    graph = graphs.read_edgelist(args.edgelist, directed=not args.undirected)

    colours = None
    title = None
    if args.metric:
        colours = col.colour_lookup(col.metric_colours(metrics.compute(graph, args.metric), name=args.palette))
        title = args.metric
    elif args.clustering:
        kwargs = {"seed": args.seed} if args.clustering == "infomap" else {}
        found = communities.detect(graph, args.clustering, **kwargs)
        colours = col.membership_colours(found.membership)
        title = f"{args.clustering} (modularity {found.modularity:.3f})"

    fig = plot_graph(graph, colours, pos=layout(graph, args.layout, seed=args.seed), title=title)
    if args.output:
        fig.savefig(args.output)
        logger.info("Saved plot to %s", args.output)
    else:
        plt.show()


if __name__ == "__main__":
    # The logger name inherits from the package, if called as __main__
    logger = logging.getLogger(f"{__package__}.{__name__}")
    main(sys.argv[1:])
