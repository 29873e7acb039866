# tests/test_pipeline.py

import pytest

from gnr.formatting import build_description_report
from gnr.io_handlers import load_toy_data
from gnr.pipeline import (
    create_search_result,
    gene_scores_frame,
    network_weights_frame,
    run_toy_pipeline,
)


def _weights_by_id(result):
    return {network.id: weight for network, weight in result.network_weights.items()}


def test_toy_pipeline_gene_scores(toy_dir):
    result = run_toy_pipeline(toy_dir, ["TP53", "ATM", "UNKNOWN"])

    scores = {gene.symbol: score for gene, score in result.gene_scores.items()}
    assert scores == {
        "TP53": 0.95,
        "MDM2": 0.75,
        "CDKN1A": 0.55,
        "BRCA1": 0.3,
        # Query gene with no score gets the best score
        "ATM": 0.95,
    }
    assert set(result.search_query) == {101, 104}


def test_toy_pipeline_network_weights(toy_dir):
    result = run_toy_pipeline(toy_dir, ["TP53", "ATM"])

    weights = _weights_by_id(result)
    # Normalized to 0.5/0.25/0.25/0, then scaled by 1 - 0.2 attribute weight
    assert weights[1001] == pytest.approx(0.4)
    assert weights[1002] == pytest.approx(0.2)
    assert weights[1003] == pytest.approx(0.2)
    assert weights[9999] == pytest.approx(0.0)
    assert sum(result.attribute_weights.values()) == pytest.approx(0.2)
    assert sum(weights.values()) + sum(result.attribute_weights.values()) == pytest.approx(1.0)


def test_toy_pipeline_without_normalization(toy_dir):
    result = run_toy_pipeline(toy_dir, ["TP53"], normalize=False)

    assert _weights_by_id(result)[1001] == pytest.approx(2.0 * 0.8)


def test_toy_pipeline_interactions(toy_dir):
    result = run_toy_pipeline(toy_dir, ["TP53"])

    assert set(result.groups) == {1001, 1002, 1003}
    assert result.groups[1001] is result.groups[1002]
    assert [len(result.networks[i].interactions) for i in (1001, 1002, 1003)] == [2, 2, 1]
    # Groups point at the networks carrying interactions
    group_networks = {n.id: n for n in result.groups[1001].interaction_networks}
    assert group_networks[1002] is result.networks[1002]

    combined = [
        (i.from_node.id, i.to_node.id, i.weight) for i in result.combined_interactions()
    ]
    assert combined == [
        (101, 102, pytest.approx(0.8)),
        (101, 103, pytest.approx(0.6)),
        (104, 101, pytest.approx(0.4)),
        (103, 105, pytest.approx(0.3)),
    ]


def test_toy_pipeline_attributes_and_enrichment(toy_dir):
    result = run_toy_pipeline(toy_dir, ["TP53"])

    assert {k: [a.id for a in v] for k, v in result.attributes_by_node.items()} == {
        101: [201],
        102: [201],
        104: [202],
    }
    assert result.groups_by_attribute[201].name == "Pathways"

    assert set(result.enrichment) == {101, 103}
    assert [e.category.name for e in result.enrichment[101]] == ["GO:0006977", "GO:0006974"]
    assert result.enrichment[103][0] is result.enrichment[101][1]


def test_create_search_result_without_enrichment(toy_dir):
    data, request, response, _ = load_toy_data(toy_dir)
    organism = data.get_organism(request.organism_id)

    result = create_search_result(organism, request, response, None, data, ["MDM2"])

    assert result.enrichment == {}
    assert result.combining_method == "automatic"
    assert result.gene_search_limit == 20


def test_create_search_result_requires_arguments(toy_dir):
    data, request, response, enrichment = load_toy_data(toy_dir)

    with pytest.raises(ValueError):
        create_search_result(None, request, response, enrichment, data, ["TP53"])


def test_result_frames(toy_dir):
    result = run_toy_pipeline(toy_dir, ["P53", "ATM"])

    genes_df = gene_scores_frame(result)
    assert list(genes_df["symbol"][:2]) == ["P53", "ATM"]
    assert genes_df.loc[genes_df["symbol"] == "P53", "label"].item() == "TP53 (P53)"
    assert genes_df["query"].sum() == 2

    networks_df = network_weights_frame(result)
    assert networks_df.iloc[0]["network_id"] == 1001
    assert networks_df.iloc[0]["group_name"] == "Physical Interactions"
    assert networks_df.loc[networks_df["network_id"] == 9999, "group_name"].item() == ""


def test_toy_network_report(toy_dir):
    result = run_toy_pipeline(toy_dir, ["TP53"])

    assert build_description_report(result.networks[1002]) == (
        "Direct interaction|Curated from literature|Authors: Stark C,Breitkreutz BJ,Reguly T"
        "|PubMed:16381927|5 interactions|BioGRID|Tags: Protein,DNA Repair"
    )
    assert build_description_report(result.networks[1003]) == (
        "Expression profiling of tumour samples"
    )
