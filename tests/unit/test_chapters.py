# pylint: disable=redefined-outer-name
import pytest

from epi_networks import chapters, graphs
from epi_networks.common import IssueSeverity


@pytest.fixture
def examples(small_config):
    yield graphs.build_example_graphs(small_config["graphs"], small_config["seed"])


def test_check_chapters():
    assert chapters.check_chapters(["models", "construction"]) == [chapters.models, chapters.construction]


def test_check_chapters_unknown():
    with pytest.raises(ValueError, match="clustering"):
        chapters.check_chapters(["models", "clustering"])


def test_construction(examples, small_config):
    issues = []

    [section] = chapters.construction(examples, small_config, issues)

    assert section.title == "Building networks"
    assert len(section.figures) == 1
    matrix = section.tables[0][1]
    assert list(matrix.columns) == ["vertex", 0, 1, 2, 3]
    assert matrix[2].tolist() == [1, 1, 0, 1]
    edges = section.tables[1][1]
    assert edges[["source", "target"]].values.tolist() == [[1, 2], [1, 3], [2, 4], [2, 5], [3, 6], [6, 7]]
    assert issues == []


def test_construction_without_examples(small_config):
    issues = []

    [section] = chapters.construction({}, small_config, issues)

    assert section.figures == [] and section.tables == []
    assert issues[0].severity == IssueSeverity.LOW.value


def test_models(examples, small_config):
    [section] = chapters.models(examples, small_config, [])

    summary = section.tables[0][1]
    assert summary["graph"].tolist() == ["empty", "full", "random", "preferential", "small_world"]
    assert summary.set_index("graph").loc["full", "edges"] == 6
    assert summary.set_index("graph").loc["preferential", "components"] == 1


def test_degree(examples, small_config):
    [section] = chapters.degree(examples, small_config, [])

    assert len(section.figures) == 1
    assert [caption for caption, _ in section.tables] == [
        "Degree distribution of the random graph",
        "Degree distribution of the preferential graph",
        "Degree distribution of the small_world graph",
    ]
    for _, table in section.tables:
        assert table["proportion"].sum() == pytest.approx(1.0)


def test_centrality(examples, small_config):
    sections = chapters.centrality(examples, small_config, [])

    assert [section.title for section in sections] == [
        "Degree centrality", "Betweenness centrality", "Closeness centrality", "Eigenvector centrality"
    ]
    table = sections[0].tables[0][1]
    assert list(table.columns) == ["graph", "vertex", "degree"]
    assert len(table) == 3 * small_config["top"]
    for _, ranked in table.groupby("graph"):
        assert ranked["degree"].is_monotonic_decreasing


def test_centrality_caption_follows_palette(examples, small_config):
    small_config["reverse_palette"] = True
    small_config["metrics"] = ["degree"]

    [section] = chapters.centrality(examples, small_config, [])

    assert "lighter is more central" in section.figures[0][0]


def test_centrality_disconnected_caveats(two_triangles, small_config):
    small_config["metrics"] = ["degree", "closeness", "eigenvector"]
    issues = []

    chapters.centrality({"random": two_triangles}, small_config, issues)

    assert sorted(issue.severity for issue in issues) == [IssueSeverity.LOW.value, IssueSeverity.MEDIUM.value]


def test_clustering(examples, small_config):
    sections = chapters.clustering(examples, small_config, [])

    assert [section.title for section in sections] == [
        "Communities: fast greedy", "Communities: edge betweenness", "Communities: infomap"
    ]
    for section in sections:
        table = section.tables[0][1]
        assert table["graph"].tolist() == ["random", "preferential", "small_world"]
        assert (table["communities"] >= 1).all()
        assert (table["largest"] <= 15).all()


def test_clustering_skips_directed_graphs_for_fast_greedy(small_config):
    small_config["graphs"]["random"]["directed"] = True
    small_config["clustering"] = ["fast_greedy", "edge_betweenness"]
    examples = graphs.build_example_graphs(small_config["graphs"], small_config["seed"])
    issues = []

    fast_greedy, edge_betweenness = chapters.clustering(examples, small_config, issues)

    assert fast_greedy.tables[0][1]["graph"].tolist() == ["preferential", "small_world"]
    assert edge_betweenness.tables[0][1]["graph"].tolist() == ["random", "preferential", "small_world"]
    assert [issue.severity for issue in issues] == [IssueSeverity.MEDIUM.value]


def test_chapters_do_not_modify_graphs(examples, small_config):
    before = {name: sorted(graph.edges) for name, graph in examples.items()}

    for chapter in chapters.CHAPTERS.values():
        chapter(examples, small_config, [])

    assert {name: sorted(graph.edges) for name, graph in examples.items()} == before
