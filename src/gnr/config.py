# src/gnr/config.py

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional


@dataclass
class CsvFilesConfig:
    """
    Locations of the CSV tables making up a data set and a query response.

    The idea:
        - You provide a directory, or individual file paths
        - We assume the standard file names and column names below

    Data set tables:
        - organisms_csv:          [organism_id, name, short_name]
        - naming_sources_csv:     [naming_source_id, name, rank]
        - nodes_csv:              [node_id, organism_id, description]
        - genes_csv:              [gene_id, node_id, organism_id, symbol, naming_source_id]
        - network_groups_csv:     [group_id, organism_id, name, code, description]
        - networks_csv:           [network_id, group_id, name, description, + metadata columns]
        - network_tags_csv:       [network_id, tag]
        - colors_csv:             [code, color]
        - attribute_groups_csv:   [group_id, organism_id, name, code, description,
                                   publication_name, publication_url, linkout_label, linkout_url]
        - attributes_csv:         [attribute_id, group_id, name, description]
        - ontology_categories_csv:[category_id, ontology_id, name, description]

    Response tables:
        - request_csv:            [organism_id, combining_method, limit_results, attributes_limit]
        - response_networks_csv:  [network_id, weight]
        - response_interactions_csv: [network_id, node1_id, node2_id, weight]
        - response_nodes_csv:     [node_id, score]
        - response_attributes_csv:[attribute_id, group_id, weight]  (optional)
        - response_node_attributes_csv: [node_id, attribute_id]     (optional)
        - enrichment_csv:         [node_id, category_id, p_value, q_value,
                                   sample_annotated, sample_size,
                                   total_annotated, total_size]       (optional)
    """

    # Data set
    organisms_csv: Path
    naming_sources_csv: Path
    nodes_csv: Path
    genes_csv: Path
    network_groups_csv: Path
    networks_csv: Path
    network_tags_csv: Optional[Path] = None
    colors_csv: Optional[Path] = None
    attribute_groups_csv: Optional[Path] = None
    attributes_csv: Optional[Path] = None
    ontology_categories_csv: Optional[Path] = None

    # Response
    request_csv: Optional[Path] = None
    response_networks_csv: Optional[Path] = None
    response_interactions_csv: Optional[Path] = None
    response_nodes_csv: Optional[Path] = None
    response_attributes_csv: Optional[Path] = None
    response_node_attributes_csv: Optional[Path] = None
    enrichment_csv: Optional[Path] = None

    # Message templates
    messages_csv: Optional[Path] = None

    @classmethod
    def from_directory(cls, base_dir: Path) -> "CsvFilesConfig":
        """
        Build a config using the standard file names inside base_dir.

        Every field ``<name>_csv`` maps to ``base_dir / '<name>.csv'``,
        except messages_csv which is left unset.
        """
        base_dir = Path(base_dir)
        paths = {
            f.name: base_dir / (f.name[: -len("_csv")] + ".csv")
            for f in fields(cls)
            if f.name != "messages_csv"
        }
        return cls(**paths)

    def resolve_paths(self, base_dir: Path | None = None) -> "CsvFilesConfig":
        """
        Return a copy of this config with all paths resolved (absolute).
        If base_dir is provided, relative paths are interpreted relative to it.
        """
        base_dir = Path(base_dir) if base_dir is not None else Path(".")
        resolved = {
            f.name: (base_dir / getattr(self, f.name)).resolve()
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
        return replace(self, **resolved)
