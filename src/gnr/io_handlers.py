# src/gnr/io_handlers.py

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .config import CsvFilesConfig
from .data_models import (
    Attribute,
    AttributeGroup,
    AttributeRecord,
    EnrichmentResponse,
    Gene,
    GeneData,
    InteractionNetwork,
    InteractionNetworkGroup,
    InteractionRecord,
    NamingSource,
    NetworkMetadata,
    NetworkRecord,
    Node,
    NodeScore,
    OntologyCategory,
    OntologyCategoryRecord,
    Organism,
    RelatedGenesRequest,
    RelatedGenesResponse,
    Tag,
)
from .store import (
    AttributeMediator,
    DataSet,
    GeneMediator,
    MediatorProvider,
    NodeMediator,
    OntologyMediator,
)

logger = logging.getLogger(__name__)

METADATA_COLS = [
    "title",
    "url",
    "authors",
    "year_published",
    "publication_name",
    "other",
    "comment",
    "processing_description",
    "interaction_count",
    "source",
    "source_url",
    "pubmed_id",
]


def _read_csv(path: Optional[Path]) -> Optional[pd.DataFrame]:
    """Read a CSV as strings (empty cells -> ''), or None if it does not exist."""
    if path is None or not Path(path).exists():
        logger.debug("Optional table not found, skipping: %s", path)
        return None
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    logger.debug("Read %s (%d rows)", Path(path).name, len(df))
    return df


def _read_required_csv(path: Path, cols: set[str]) -> pd.DataFrame:
    df = _read_csv(path)
    if df is None:
        raise FileNotFoundError(f"Required table does not exist: {path}")
    missing = cols - set(df.columns)
    if missing:
        raise ValueError(f"{Path(path).name} is missing columns: {sorted(missing)}")
    return df


def _opt(value: str) -> Optional[str]:
    value = value.strip()
    return value if value else None


def _build_metadata(row: pd.Series) -> Optional[NetworkMetadata]:
    """Metadata is present when at least one metadata column is filled in."""
    values = {col: _opt(row[col]) if col in row else None for col in METADATA_COLS}
    if all(v is None for v in values.values()):
        return None
    count = values.pop("interaction_count")
    return NetworkMetadata(interaction_count=int(float(count)) if count else 0, **values)


def load_data_set(cfg: CsvFilesConfig) -> DataSet:
    """
    Load a data set from CSV files according to the given configuration.

    Parameters
    ----------
    cfg : CsvFilesConfig
        File locations; see CsvFilesConfig for the expected columns.

    Returns
    -------
    DataSet
        In-memory data store with all mediators wired.
    """
    cfg = cfg.resolve_paths()

    # Organisms and naming sources
    organisms_df = _read_required_csv(cfg.organisms_csv, {"organism_id", "name"})
    organisms = {
        int(row["organism_id"]): Organism(
            id=int(row["organism_id"]),
            name=row["name"],
            short_name=row.get("short_name", ""),
        )
        for _, row in organisms_df.iterrows()
    }

    sources_df = _read_required_csv(cfg.naming_sources_csv, {"naming_source_id", "name", "rank"})
    naming_sources = {
        int(row["naming_source_id"]): NamingSource(
            id=int(row["naming_source_id"]),
            name=row["name"],
            rank=int(row["rank"]),
        )
        for _, row in sources_df.iterrows()
    }

    # Nodes and genes
    nodes_df = _read_required_csv(cfg.nodes_csv, {"node_id", "organism_id"})
    nodes: Dict[int, Node] = {}
    node_organisms: Dict[int, int] = {}
    for _, row in nodes_df.iterrows():
        node_id = int(row["node_id"])
        nodes[node_id] = Node(id=node_id, gene_data=GeneData(row.get("description", "")))
        node_organisms[node_id] = int(row["organism_id"])

    genes_df = _read_required_csv(
        cfg.genes_csv,
        {"gene_id", "node_id", "organism_id", "symbol", "naming_source_id"},
    )
    genes: List[Gene] = []
    for _, row in genes_df.iterrows():
        node = nodes[int(row["node_id"])]
        gene = Gene(
            id=int(row["gene_id"]),
            symbol=row["symbol"],
            naming_source=naming_sources[int(row["naming_source_id"])],
            node=node,
            organism=organisms[int(row["organism_id"])],
        )
        node.genes.append(gene)
        genes.append(gene)

    # Networks
    tags: Dict[int, List[Tag]] = defaultdict(list)
    tags_df = _read_csv(cfg.network_tags_csv)
    if tags_df is not None:
        for _, row in tags_df.iterrows():
            tags[int(row["network_id"])].append(Tag(row["tag"]))

    networks_df = _read_required_csv(cfg.networks_csv, {"network_id", "group_id", "name"})
    networks_by_group: Dict[int, List[InteractionNetwork]] = defaultdict(list)
    for _, row in networks_df.iterrows():
        network_id = int(row["network_id"])
        networks_by_group[int(row["group_id"])].append(
            InteractionNetwork(
                id=network_id,
                name=row["name"],
                description=row.get("description", ""),
                metadata=_build_metadata(row),
                tags=tuple(tags.get(network_id, [])),
            )
        )

    groups_df = _read_required_csv(cfg.network_groups_csv, {"group_id", "name", "code"})
    network_groups = {
        int(row["group_id"]): InteractionNetworkGroup(
            id=int(row["group_id"]),
            name=row["name"],
            code=row["code"],
            description=row.get("description", ""),
            interaction_networks=tuple(networks_by_group.get(int(row["group_id"]), [])),
        )
        for _, row in groups_df.iterrows()
    }

    colors_df = _read_csv(cfg.colors_csv)
    colors = {} if colors_df is None else dict(zip(colors_df["code"], colors_df["color"]))

    # Attributes
    attribute_groups: Dict[int, AttributeGroup] = {}
    group_organisms: Dict[int, int] = {}
    attribute_groups_df = _read_csv(cfg.attribute_groups_csv)
    if attribute_groups_df is not None:
        for _, row in attribute_groups_df.iterrows():
            group_id = int(row["group_id"])
            attribute_groups[group_id] = AttributeGroup(
                id=group_id,
                name=row["name"],
                code=row.get("code", ""),
                description=row.get("description", ""),
                publication_name=_opt(row.get("publication_name", "")),
                publication_url=_opt(row.get("publication_url", "")),
                linkout_label=_opt(row.get("linkout_label", "")),
                linkout_url=_opt(row.get("linkout_url", "")),
            )
            group_organisms[group_id] = int(row["organism_id"])

    attributes: Dict[int, Attribute] = {}
    attributes_df = _read_csv(cfg.attributes_csv)
    if attributes_df is not None:
        for _, row in attributes_df.iterrows():
            attributes[int(row["attribute_id"])] = Attribute(
                id=int(row["attribute_id"]),
                group_id=int(row["group_id"]),
                name=row["name"],
                description=row.get("description", ""),
            )

    # Ontology
    categories: Dict[int, OntologyCategory] = {}
    categories_df = _read_csv(cfg.ontology_categories_csv)
    if categories_df is not None:
        for _, row in categories_df.iterrows():
            categories[int(row["category_id"])] = OntologyCategory(
                id=int(row["category_id"]),
                ontology_id=int(row["ontology_id"]),
                name=row["name"],
                description=row.get("description", ""),
            )

    provider = MediatorProvider(
        node_mediator=NodeMediator(nodes, node_organisms),
        gene_mediator=GeneMediator(genes),
        attribute_mediator=AttributeMediator(attributes, attribute_groups, group_organisms),
        ontology_mediator=OntologyMediator(categories),
    )
    logger.info(
        "Loaded data set: %d organisms, %d nodes, %d genes, %d network groups",
        len(organisms), len(nodes), len(genes), len(network_groups),
    )
    return DataSet(
        organisms=organisms,
        genes=genes,
        network_groups=network_groups,
        colors=colors,
        mediator_provider=provider,
    )


def load_response(
    cfg: CsvFilesConfig,
) -> Tuple[RelatedGenesRequest, RelatedGenesResponse, Optional[EnrichmentResponse]]:
    """
    Load a query request, its related-genes response and enrichment results.

    Returns
    -------
    request : RelatedGenesRequest
    response : RelatedGenesResponse
    enrichment : EnrichmentResponse or None
        None when no enrichment table exists.
    """
    cfg = cfg.resolve_paths()

    request_df = _read_required_csv(cfg.request_csv, {"organism_id"})
    row = request_df.iloc[0]
    request = RelatedGenesRequest(
        organism_id=int(row["organism_id"]),
        combining_method=row.get("combining_method", "") or "automatic",
        limit_results=int(row.get("limit_results", "") or 20),
        attributes_limit=int(row.get("attributes_limit", "") or 10),
    )

    # Interactions grouped per network, in file order
    interactions: Dict[int, List[InteractionRecord]] = defaultdict(list)
    interactions_df = _read_csv(cfg.response_interactions_csv)
    if interactions_df is not None:
        for _, r in interactions_df.iterrows():
            interactions[int(r["network_id"])].append(
                InteractionRecord(
                    node1_id=int(r["node1_id"]),
                    node2_id=int(r["node2_id"]),
                    weight=float(r["weight"]),
                )
            )

    networks_df = _read_required_csv(cfg.response_networks_csv, {"network_id", "weight"})
    networks = tuple(
        NetworkRecord(
            id=int(r["network_id"]),
            weight=float(r["weight"]),
            interactions=tuple(interactions.get(int(r["network_id"]), [])),
        )
        for _, r in networks_df.iterrows()
    )

    nodes_df = _read_required_csv(cfg.response_nodes_csv, {"node_id", "score"})
    nodes = tuple(
        NodeScore(id=int(r["node_id"]), score=float(r["score"]))
        for _, r in nodes_df.iterrows()
    )

    attributes = None
    node_to_attributes = None
    attributes_df = _read_csv(cfg.response_attributes_csv)
    if attributes_df is not None:
        duplicated = attributes_df.loc[attributes_df["attribute_id"].duplicated(), "attribute_id"]
        if not duplicated.empty:
            raise ValueError(
                f"{Path(cfg.response_attributes_csv).name} has duplicate attribute ids: "
                f"{sorted({int(v) for v in duplicated})}"
            )
        records = {
            int(r["attribute_id"]): AttributeRecord(
                id=int(r["attribute_id"]),
                group_id=int(r["group_id"]),
                weight=float(r["weight"]),
            )
            for _, r in attributes_df.iterrows()
        }
        attributes = tuple(records.values())

        by_node: Dict[int, List[AttributeRecord]] = defaultdict(list)
        node_attributes_df = _read_csv(cfg.response_node_attributes_csv)
        if node_attributes_df is not None:
            for _, r in node_attributes_df.iterrows():
                record = records.get(int(r["attribute_id"]))
                if record is not None:
                    by_node[int(r["node_id"])].append(record)
        node_to_attributes = {k: tuple(v) for k, v in by_node.items()}

    response = RelatedGenesResponse(
        networks=networks,
        nodes=nodes,
        attributes=attributes,
        node_to_attributes=node_to_attributes,
    )

    enrichment = None
    enrichment_df = _read_csv(cfg.enrichment_csv)
    if enrichment_df is not None:
        annotations: Dict[int, List[OntologyCategoryRecord]] = defaultdict(list)
        for _, r in enrichment_df.iterrows():
            annotations[int(r["node_id"])].append(
                OntologyCategoryRecord(
                    id=int(r["category_id"]),
                    p_value=float(r["p_value"]),
                    q_value=float(r["q_value"]),
                    sample_annotated=int(r.get("sample_annotated", "") or 0),
                    sample_size=int(r.get("sample_size", "") or 0),
                    total_annotated=int(r.get("total_annotated", "") or 0),
                    total_size=int(r.get("total_size", "") or 0),
                )
            )
        enrichment = EnrichmentResponse(annotations={k: tuple(v) for k, v in annotations.items()})

    return request, response, enrichment


def load_toy_data(
    base_path: Path,
) -> Tuple[DataSet, RelatedGenesRequest, RelatedGenesResponse, Optional[EnrichmentResponse]]:
    """
    Load the toy data set and response from CSV files in the given directory.

    Parameters
    ----------
    base_path : Path
        Directory that contains the toy CSV files (standard file names, see
        CsvFilesConfig).

    Returns
    -------
    data : DataSet
    request : RelatedGenesRequest
    response : RelatedGenesResponse
    enrichment : EnrichmentResponse or None
    """
    cfg = CsvFilesConfig.from_directory(Path(base_path))
    data = load_data_set(cfg)
    request, response, enrichment = load_response(cfg)
    return data, request, response, enrichment
