# src/gnr/scoring.py

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, TypeVar

import numpy as np

from .data_models import (
    AnnotationEntry,
    Attribute,
    AttributeGroup,
    AttributeRecord,
    AttributeResult,
    Gene,
    InteractionNetwork,
    Node,
    NodeScore,
    NetworkRecord,
    OntologyCategoryRecord,
    Organism,
    RelatedGenesResponse,
)
from .store import AttributeMediator, DataSet, DataStoreError, NodeMediator

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_preferred_gene(node: Optional[Node]) -> Optional[Gene]:
    """
    Return the gene with the highest naming-source rank of a node.

    Ties keep the first gene encountered. Returns None when the node is
    missing or has no genes.
    """
    if node is None:
        return None
    best = None
    for gene in node.genes:
        if best is None or gene.naming_source.rank > best.naming_source.rank:
            best = gene
    return best


def compute_gene_scores(
    nodes: Iterable[NodeScore],
    query_genes: Mapping[int, Gene],
    organism: Organism,
    node_mediator: NodeMediator,
) -> Dict[Gene, float]:
    """
    Compute the score of every gene in a response.

    Parameters
    ----------
    nodes : iterable of NodeScore
        Raw node scores; when a node id repeats, the last record wins.
    query_genes : dict
        Mapping node_id -> Gene for the genes the user searched for.
    organism : Organism
        Organism the response belongs to.
    node_mediator : NodeMediator
        Used to resolve nodes that are not query genes.

    Returns
    -------
    dict
        Mapping Gene -> score. Nodes that cannot be resolved to a gene are
        dropped. Query genes missing from the input receive the maximum
        score observed (at least 0), so a search term never ranks below
        the best result.
    """
    if organism is None or node_mediator is None:
        raise ValueError("organism and node_mediator are required")

    unique_nodes: Dict[int, NodeScore] = {}
    for record in nodes:
        unique_nodes[record.id] = record

    max_score = 0.0
    scores: Dict[Gene, float] = {}
    for node_id, record in unique_nodes.items():
        gene = query_genes.get(node_id)
        if gene is None:
            gene = get_preferred_gene(node_mediator.get_node(node_id, organism.id))
        if gene is None:
            logger.debug("No gene for node %d, skipping", node_id)
            continue
        max_score = max(max_score, record.score)
        scores[gene] = record.score

    for gene in query_genes.values():
        if gene not in scores:
            scores[gene] = max_score
    return scores


def compute_network_weights(
    networks: Iterable[NetworkRecord],
    canonical_networks: Mapping[int, InteractionNetwork],
    attribute_weights: Optional[Mapping[Attribute, float]],
) -> Dict[InteractionNetwork, float]:
    """
    Scale raw network weights so that networks and attributes share unit mass.

    Every weight becomes ``raw * (1 - sum(attribute_weights))``. Networks
    without a canonical entry are represented by a placeholder carrying
    only their id.
    """
    total_attribute_weight = 0.0
    if attribute_weights is not None:
        total_attribute_weight = sum(attribute_weights.values())
    scale_factor = 1 - total_attribute_weight

    weights: Dict[InteractionNetwork, float] = {}
    for record in networks:
        network = canonical_networks.get(record.id)
        if network is None:
            network = InteractionNetwork(id=record.id)
        weights[network] = record.weight * scale_factor
    return weights


def compute_attributes(
    organism: Organism,
    source: Optional[Iterable[AttributeRecord]],
    node_to_attributes: Optional[Mapping[int, Iterable[AttributeRecord]]],
    mediator: AttributeMediator,
) -> AttributeResult:
    """
    Resolve attribute records into attributes, their groups and weights.

    Returns an empty result when either input is missing. Attribute
    groups are fetched once per group id.
    """
    result = AttributeResult()
    if source is None or node_to_attributes is None:
        return result

    groups: Dict[int, Optional[AttributeGroup]] = {}
    for item in source:
        attribute = mediator.find_attribute(organism.id, item.id)
        if attribute is None:
            logger.debug("Unknown attribute %d, skipping", item.id)
            continue
        result.attributes[attribute.id] = attribute

        if item.group_id not in groups:
            groups[item.group_id] = mediator.find_attribute_group(organism.id, item.group_id)
        group = groups[item.group_id]
        if group is not None:
            result.groups_by_attribute[item.id] = group
        result.weights[attribute] = item.weight

    for node_id, items in node_to_attributes.items():
        result.attributes_by_node[node_id] = [
            result.attributes[item.id] for item in items
            if item.id in result.attributes
        ]
    return result


def normalize_network_weights(response: RelatedGenesResponse) -> RelatedGenesResponse:
    """
    Return a copy of the response whose network weights sum to 1.

    A zero total leaves the weights untouched and returns the response
    as is.
    """
    total = sum(network.weight for network in response.networks)
    if total == 0:
        return response

    correction = 1 / total
    networks = tuple(
        replace(network, weight=network.weight * correction)
        for network in response.networks
    )
    return replace(response, networks=networks)


def process_annotations(
    annotations: Mapping[int, Iterable[OntologyCategoryRecord]],
    data: DataSet,
) -> Dict[int, List[AnnotationEntry]]:
    """
    Attach ontology categories to enrichment records, per node.

    Parameters
    ----------
    annotations : dict
        Mapping node_id -> enrichment records.
    data : DataSet
        Provides the ontology mediator.

    Returns
    -------
    dict
        Mapping node_id -> distinct AnnotationEntry objects. Each category
        id is resolved once; failures are logged and skipped. Nodes left
        without entries are omitted.
    """
    mediator = data.mediator_provider.ontology_mediator
    result: Dict[int, List[AnnotationEntry]] = {}
    cache: Dict[int, AnnotationEntry] = {}

    for node_id, records in annotations.items():
        entries: List[AnnotationEntry] = []
        for record in records:
            annotation = cache.get(record.id)
            if annotation is None:
                try:
                    category = mediator.get_category(record.id)
                except DataStoreError:
                    logger.error("Can't find category: %d", record.id, exc_info=True)
                    continue
                annotation = AnnotationEntry(
                    category=category,
                    p_value=record.p_value,
                    q_value=record.q_value,
                    sample_annotated=record.sample_annotated,
                    sample_size=record.sample_size,
                    total_annotated=record.total_annotated,
                    total_size=record.total_size,
                )
                cache[record.id] = annotation
            if annotation not in entries:
                entries.append(annotation)
        if entries:
            result[node_id] = entries
    return result


def sort_scores(scores: Mapping[object, float]) -> np.ndarray:
    """Return the score values in ascending order."""
    return np.sort(np.fromiter(scores.values(), dtype=float, count=len(scores)))


def create_sorted_list(scored_map: Mapping[T, float]) -> List[T]:
    """Return the keys ordered by descending score (stable for ties)."""
    return sorted(scored_map, key=lambda k: scored_map[k], reverse=True)
