# pylint: disable=redefined-outer-name
import copy

import matplotlib
import networkx as nx
import pytest

from epi_networks import config

# Figures are never shown during tests
matplotlib.use("Agg")


@pytest.fixture
def star():
    """A centre (0) with four leaves"""
    yield nx.star_graph(4)


@pytest.fixture
def barbell():
    """Two complete graphs of five vertices (0-4 and 5-9) joined by the edge 4-5"""
    yield nx.barbell_graph(5, 0)


@pytest.fixture
def two_triangles():
    """Two triangles with no edge between them"""
    graph = nx.Graph()
    graph.add_edges_from([("a", "b"), ("b", "c"), ("c", "a"), ("x", "y"), ("y", "z"), ("z", "x")])
    yield graph


@pytest.fixture
def small_config():
    """The default configuration, with graphs small enough for quick renders"""
    conf = copy.deepcopy(config.DEFAULT_CONFIG)
    conf["graphs"]["empty"]["n"] = 4
    conf["graphs"]["full"]["n"] = 4
    conf["graphs"]["random"] = {"n": 15, "p": 0.2}
    conf["graphs"]["preferential"] = {"n": 15, "m": 1}
    conf["graphs"]["small_world"] = {"size": 15, "nei": 2, "p": 0.1}
    conf["figure"] = {"width": 3.0, "height": 3.0, "dpi": 40}
    yield config.check_config(conf)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    import matplotlib.pyplot as plt  # pylint: disable=import-outside-toplevel
    plt.close("all")
