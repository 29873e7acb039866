# tests/test_graphs.py

from gnr.graphs import (
    build_combined_graph,
    build_interaction_graph,
    export_graphml,
    to_cytoscape_json,
)
from gnr.data_models import Interaction, InteractionNetwork
from gnr.pipeline import SearchResult, run_toy_pipeline

from conftest import make_node


def test_interaction_graph_has_one_edge_per_network(toy_dir):
    result = run_toy_pipeline(toy_dir, ["TP53", "ATM"])

    G = build_interaction_graph(result)

    assert G.number_of_edges() == 5
    assert G.number_of_edges(101, 102) == 2
    assert G[101][102][(1001, 0)]["weight"] == 0.8
    assert G[101][102][(1002, 0)]["group"] == "pi"
    assert G.nodes[101]["label"] == "TP53"
    assert G.nodes[104]["query"] is True
    assert G.nodes[105]["query"] is False


def test_interaction_graph_keeps_both_directions_of_a_pair(human):
    a = make_node(1, [(1, "A", 1)])
    b = make_node(2, [(2, "B", 1)])
    network = InteractionNetwork(
        id=10,
        name="n",
        interactions=(Interaction(a, b, 0.7), Interaction(b, a, 0.2)),
    )
    result = SearchResult(
        organism=human,
        search_query={},
        combining_method="automatic",
        gene_search_limit=20,
        attribute_search_limit=10,
        networks={10: network},
    )

    G = build_interaction_graph(result)

    assert G.number_of_edges() == 2
    assert sorted(d["weight"] for d in G[1][2].values()) == [0.2, 0.7]
    assert G.nodes[1]["label"] == "A"


def test_combined_graph_dedupes_pairs(toy_dir):
    result = run_toy_pipeline(toy_dir, ["TP53"])

    G = build_combined_graph(result)

    assert G.number_of_edges() == 4
    assert G[102][101]["weight"] == 0.8
    assert G.has_edge(103, 105)


def test_cytoscape_json_and_graphml(toy_dir, tmp_path):
    result = run_toy_pipeline(toy_dir, ["TP53"])
    G = build_combined_graph(result)

    data = to_cytoscape_json(G)
    assert len(data["elements"]["nodes"]) == G.number_of_nodes()
    assert len(data["elements"]["edges"]) == 4

    out = export_graphml(G, tmp_path / "out" / "result.graphml")
    assert out.exists()
    assert "graphml" in out.read_text()
