"""
Colouring vertices by the value of a metric or by the community they belong to.

Metric colours come from a palette join: the distinct values of the metric are sorted and each one gets the next
colour of a sequential palette; every vertex then takes the colour of its value. Vertices with the same value always
share a colour and, with the default palette, the larger the value the darker the colour.
"""
# pylint: disable=import-error
import logging
from typing import Dict, Hashable, List, Mapping, Optional

import matplotlib  # type: ignore
import networkx as nx  # type: ignore
import numpy as np  # type: ignore
import pandas as pd  # type: ignore
from matplotlib.colors import ListedColormap, to_hex  # type: ignore

logger = logging.getLogger(__name__)

Vertex = Hashable

# colour-blind friendly, used for categories such as communities
QUALITATIVE = ListedColormap(["#56B4E9", "#009E73", "#F0E442", "#0072B2", "#D55E00", "#CC79A7", "#999999", "#E69F00"])
DEFAULT_COLOUR = "#BBBBBB"


def palette(n: int, name: str = "YlOrRd", reverse: bool = False) -> List[str]:
    """n colours sampled evenly along a matplotlib colormap, from its first to its last colour.

    :param n: number of colours
    :param name: name of a matplotlib colormap
    :param reverse: if True, the colours are returned last to first
    :return: list of hex colours
    """
    if n < 1:
        raise ValueError(f"a palette needs at least one colour, got {n}")
    try:
        cmap = matplotlib.colormaps[name]
    except KeyError:
        raise ValueError(f"Unknown palette {name!r}") from None
    colours = [to_hex(cmap(x)) for x in np.linspace(0.0, 1.0, n)]
    return colours[::-1] if reverse else colours


def metric_colours(
        values: Mapping[Vertex, float],
        name: str = "YlOrRd",
        reverse: bool = False,
        decimals: int = 6,
) -> pd.DataFrame:
    """Join the metric value of each vertex against a palette lookup keyed on the sorted distinct values.

    Values are rounded before the join so that floating point noise (e.g. 0.1 + 0.2 against 0.3) does not split a
    group of vertices that should look the same.

    >>> metric_colours({"a": 2.0, "b": 1.0, "c": 2.0}, name="Greys")
      vertex  value   colour
    0      a    2.0  #000000
    1      b    1.0  #ffffff
    2      c    2.0  #000000

    :param values: value of the metric for each vertex
    :param name: name of a matplotlib colormap
    :param reverse: reverse the palette
    :param decimals: number of decimals kept before grouping values
    :return: pandas DataFrame with vertex, value and colour columns, in the order of values
    """
    vertices = pd.DataFrame({"vertex": list(values.keys()), "value": list(values.values())})
    vertices["value"] = vertices["value"].astype(float).round(decimals)
    if vertices.empty:
        return vertices.assign(colour=pd.Series(dtype=str))

    distinct = np.sort(vertices["value"].unique())
    lookup = pd.DataFrame({"value": distinct, "colour": palette(len(distinct), name=name, reverse=reverse)})
    logger.debug("Palette lookup with %s distinct values", len(lookup))
    return vertices.merge(lookup, on="value", how="left", validate="many_to_one")


def membership_colours(membership: Mapping[Vertex, int]) -> Dict[Vertex, str]:
    """One colour per community, cycling through the qualitative palette when there are more communities than colours.

    :param membership: community id of each vertex
    :return: colour of each vertex
    """
    colours = QUALITATIVE.colors
    return {vertex: colours[community % len(colours)] for vertex, community in membership.items()}


def as_colour_list(
        graph: nx.Graph,
        colours: Optional[Mapping[Vertex, str]] = None,
        default: str = DEFAULT_COLOUR
) -> List[str]:
    """Colours in the graph's vertex order, which is what networkx's drawing functions expect.

    :param graph: the graph to be drawn
    :param colours: colour of each vertex, as returned by `membership_colours` or the vertex/colour columns of
                    `metric_colours`. Vertices missing from it get the default colour
    :param default: colour for vertices without one
    :return: list of colours
    """
    colours = colours or {}
    return [colours.get(vertex, default) for vertex in graph.nodes]


def colour_lookup(table: pd.DataFrame) -> Dict[Vertex, str]:
    """Turn the output of `metric_colours` into a dict from vertex to colour."""
    return dict(zip(table["vertex"], table["colour"]))
