# src/gnr/pipeline.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd

from .canonical import (
    compute_canonical_networks,
    compute_groups_by_network,
    compute_query_genes,
)
from .data_models import (
    AnnotationEntry,
    Attribute,
    AttributeGroup,
    EnrichmentResponse,
    Gene,
    Interaction,
    InteractionNetwork,
    InteractionNetworkGroup,
    Organism,
    RelatedGenesRequest,
    RelatedGenesResponse,
)
from .formatting import get_gene_label
from .interactions import compute_combined_interactions, compute_source_interactions
from .io_handlers import load_toy_data
from .scoring import (
    compute_attributes,
    compute_gene_scores,
    compute_network_weights,
    create_sorted_list,
    normalize_network_weights,
    process_annotations,
)
from .store import DataSet

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """
    Display-ready result of a related-genes query.

    Attributes
    ----------
    organism : Organism
    search_query : dict[int, Gene]
        Node id -> query gene.
    combining_method : str
    gene_search_limit : int
    attribute_search_limit : int
    groups : dict[int, InteractionNetworkGroup]
        Network id -> canonical group (whose networks carry interactions).
    networks : dict[int, InteractionNetwork]
        Network id -> canonical network with the query's interactions.
    gene_scores : dict[Gene, float]
    network_weights : dict[InteractionNetwork, float]
    attributes_by_node : dict[int, list[Attribute]]
    attribute_weights : dict[Attribute, float]
    groups_by_attribute : dict[int, AttributeGroup]
    enrichment : dict[int, list[AnnotationEntry]]
    """
    organism: Organism
    search_query: Dict[int, Gene]
    combining_method: str
    gene_search_limit: int
    attribute_search_limit: int
    groups: Dict[int, InteractionNetworkGroup] = field(default_factory=dict)
    networks: Dict[int, InteractionNetwork] = field(default_factory=dict)
    gene_scores: Dict[Gene, float] = field(default_factory=dict)
    network_weights: Dict[InteractionNetwork, float] = field(default_factory=dict)
    attributes_by_node: Dict[int, List[Attribute]] = field(default_factory=dict)
    attribute_weights: Dict[Attribute, float] = field(default_factory=dict)
    groups_by_attribute: Dict[int, AttributeGroup] = field(default_factory=dict)
    enrichment: Dict[int, List[AnnotationEntry]] = field(default_factory=dict)

    def is_query_node(self, node_id: int) -> bool:
        return node_id in self.search_query

    def source_interactions(self) -> Dict[InteractionNetwork, List[Interaction]]:
        return {n: list(n.interactions) for n in self.networks.values()}

    def combined_interactions(self) -> List[Interaction]:
        return compute_combined_interactions(self.source_interactions())


def _attach_networks(
    groups_by_network: Mapping[int, InteractionNetworkGroup],
    networks: Mapping[int, InteractionNetwork],
) -> Dict[int, InteractionNetworkGroup]:
    """
    Point every group at the rebuilt networks, keeping one instance per group id.
    """
    rebuilt: Dict[int, InteractionNetworkGroup] = {}
    result: Dict[int, InteractionNetworkGroup] = {}
    for network_id, group in groups_by_network.items():
        if group.id not in rebuilt:
            rebuilt[group.id] = replace(
                group,
                interaction_networks=tuple(
                    networks.get(n.id, n) for n in group.interaction_networks
                ),
            )
        result[network_id] = rebuilt[group.id]
    return result


def create_search_result(
    organism: Organism,
    request: RelatedGenesRequest,
    response: RelatedGenesResponse,
    enrichment: Optional[EnrichmentResponse],
    data: DataSet,
    genes: Sequence[str],
) -> SearchResult:
    """
    Assemble a SearchResult from a raw related-genes response.

    Steps:
        1) Resolve the query genes
        2) Resolve the canonical group of every network
        3) Score genes
        4) Rebuild each canonical network's interactions
        5) Resolve attributes and their weights
        6) Scale network weights around the attribute weights
        7) Attach enrichment annotations (if any)

    Parameters
    ----------
    organism : Organism
        Organism of the query.
    request : RelatedGenesRequest
        The request the response answers.
    response : RelatedGenesResponse
        Raw engine response.
    enrichment : EnrichmentResponse, optional
        Ontology enrichment results.
    data : DataSet
        Data store.
    genes : sequence of str
        Gene symbols the user searched for.

    Returns
    -------
    SearchResult
    """
    if organism is None or request is None or response is None or data is None:
        raise ValueError("organism, request, response and data are required")

    # 1. Query genes
    provider = data.get_completion_provider(organism)
    query_genes = compute_query_genes(genes, provider)

    # 2. Groups
    groups_by_network = compute_groups_by_network(response, data)

    # 3. Gene scores
    mediators = data.mediator_provider
    gene_scores = compute_gene_scores(
        response.nodes, query_genes, organism, mediators.node_mediator
    )

    # 4. Interactions
    canonical_networks = compute_canonical_networks(groups_by_network)
    canonical_networks.update(
        compute_source_interactions(response.networks, canonical_networks, organism, data)
    )
    groups_by_network = _attach_networks(groups_by_network, canonical_networks)

    # 5. Attributes
    attributes = compute_attributes(
        organism,
        response.attributes,
        response.node_to_attributes,
        mediators.attribute_mediator,
    )

    # 6. Network weights
    network_weights = compute_network_weights(
        response.networks, canonical_networks, attributes.weights
    )

    result = SearchResult(
        organism=organism,
        search_query=query_genes,
        combining_method=request.combining_method,
        gene_search_limit=request.limit_results,
        attribute_search_limit=request.attributes_limit,
        groups=groups_by_network,
        networks=canonical_networks,
        gene_scores=gene_scores,
        network_weights=network_weights,
        attributes_by_node=attributes.attributes_by_node,
        attribute_weights=attributes.weights,
        groups_by_attribute=attributes.groups_by_attribute,
    )

    # 7. Enrichment
    if enrichment is not None:
        result.enrichment = process_annotations(enrichment.annotations, data)

    logger.info(
        "Assembled result: %d query genes, %d scored genes, %d networks, %d attributes",
        len(query_genes), len(gene_scores), len(network_weights), len(attributes.weights),
    )
    return result


def run_toy_pipeline(
    data_dir: Path,
    genes: Sequence[str],
    normalize: bool = True,
) -> SearchResult:
    """
    Run the full assembly on the toy dataset.

    Parameters
    ----------
    data_dir : Path
        Directory containing the toy CSV files (e.g., 'data/toy').
    genes : sequence of str
        Gene symbols the user searched for.
    normalize : bool
        Rescale network weights to sum to 1 before assembly.

    Returns
    -------
    SearchResult
    """
    data, request, response, enrichment = load_toy_data(Path(data_dir))

    organism = data.get_organism(request.organism_id)
    if organism is None:
        raise ValueError(f"Unknown organism id in request: {request.organism_id}")

    if normalize:
        response = normalize_network_weights(response)

    return create_search_result(organism, request, response, enrichment, data, genes)


def gene_scores_frame(result: SearchResult) -> pd.DataFrame:
    """
    Tabulate gene scores, best first.

    Columns: node_id, symbol, label, score, query.
    """
    rows = [
        {
            "node_id": gene.node.id,
            "symbol": gene.symbol,
            "label": get_gene_label(gene),
            "score": result.gene_scores[gene],
            "query": result.is_query_node(gene.node.id),
        }
        for gene in create_sorted_list(result.gene_scores)
    ]
    return pd.DataFrame(rows, columns=["node_id", "symbol", "label", "score", "query"])


def network_weights_frame(result: SearchResult) -> pd.DataFrame:
    """
    Tabulate network weights, heaviest first.

    Columns: network_id, network_name, group_name, weight, n_interactions.
    """
    rows = []
    for network in create_sorted_list(result.network_weights):
        group = result.groups.get(network.id)
        rebuilt = result.networks.get(network.id, network)
        rows.append(
            {
                "network_id": network.id,
                "network_name": network.name,
                "group_name": group.name if group is not None else "",
                "weight": result.network_weights[network],
                "n_interactions": len(rebuilt.interactions),
            }
        )
    return pd.DataFrame(
        rows,
        columns=["network_id", "network_name", "group_name", "weight", "n_interactions"],
    )
