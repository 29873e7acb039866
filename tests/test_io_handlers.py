# tests/test_io_handlers.py

from pathlib import Path

import pytest

from gnr.config import CsvFilesConfig
from gnr.io_handlers import load_data_set, load_response, load_toy_data
from gnr.messages import DEFAULT_MESSAGES, load_messages
from gnr.store import CategoryNotFoundError


def test_config_from_directory_uses_standard_names():
    cfg = CsvFilesConfig.from_directory(Path("data/toy"))

    assert cfg.genes_csv == Path("data/toy/genes.csv")
    assert cfg.response_node_attributes_csv == Path("data/toy/response_node_attributes.csv")
    assert cfg.messages_csv is None
    assert cfg.resolve_paths().genes_csv.is_absolute()


def test_load_data_set(toy_dir):
    data = load_data_set(CsvFilesConfig.from_directory(toy_dir))

    organism = data.get_organism(4)
    assert organism.name == "Homo sapiens"

    node = data.mediator_provider.node_mediator.get_node(101, 4)
    assert [g.symbol for g in node.genes] == ["TP53", "P53"]
    assert data.mediator_provider.node_mediator.get_node(101, 5) is None

    provider = data.get_completion_provider(organism)
    assert provider.get_gene("p53").id == 2
    assert provider.get_gene("XYZ") is None

    group = data.get_network_group(1002)
    assert group.code == "pi"
    assert data.get_network_group(9999) is None
    assert data.get_color("coexp") == "#e78ac3"
    assert data.get_color("missing") == "#000000"

    networks = {n.id: n for n in group.interaction_networks}
    assert networks[1001].metadata.title is None
    assert networks[1001].metadata.interaction_count == 120
    assert [t.name for t in networks[1002].tags] == ["Protein", "DNA Repair"]
    assert data.get_network_group(1003).interaction_networks[0].metadata is None

    with pytest.raises(CategoryNotFoundError):
        data.mediator_provider.ontology_mediator.get_category(303)


def test_load_toy_response(toy_dir):
    _, request, response, enrichment = load_toy_data(toy_dir)

    assert request.organism_id == 4
    assert [n.id for n in response.networks] == [1001, 1002, 1003, 9999]
    assert len(response.networks[2].interactions) == 2
    assert len(response.nodes) == 6
    assert [a.id for a in response.node_to_attributes[104]] == [202]
    assert set(enrichment.annotations) == {101, 103, 104}


def test_missing_optional_tables(toy_dir, tmp_path):
    cfg = CsvFilesConfig.from_directory(toy_dir)
    cfg.response_attributes_csv = tmp_path / "absent.csv"
    cfg.enrichment_csv = None

    _, response, enrichment = load_response(cfg)
    assert response.attributes is None
    assert response.node_to_attributes is None
    assert enrichment is None


def test_duplicate_response_attribute_ids_are_rejected(toy_dir, tmp_path):
    path = tmp_path / "response_attributes.csv"
    path.write_text(
        "attribute_id,group_id,weight\n201,20,0.1\n202,20,0.1\n201,20,0.3\n",
        encoding="utf-8",
    )
    cfg = CsvFilesConfig.from_directory(toy_dir)
    cfg.response_attributes_csv = path

    with pytest.raises(ValueError, match=r"duplicate attribute ids: \[201\]"):
        load_response(cfg)


def test_load_messages_overrides_defaults(tmp_path):
    path = tmp_path / "messages.csv"
    path.write_text("key,template\nreport_tags,Etiquetas: \n", encoding="utf-8")

    catalog = load_messages(path)

    assert catalog.get("report_tags") == "Etiquetas: "
    assert catalog.get("report_pubmed") == DEFAULT_MESSAGES["report_pubmed"]
    with pytest.raises(KeyError):
        catalog.get("no_such_key")
