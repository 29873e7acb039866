# src/gnr/canonical.py

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping

from .data_models import (
    Gene,
    Interaction,
    InteractionNetwork,
    InteractionNetworkGroup,
    Organism,
    RelatedGenesResponse,
)
from .store import DataSet, DataStoreError, GeneCompletionProvider, GeneMediator

logger = logging.getLogger(__name__)


def compute_groups_by_network(
    response: RelatedGenesResponse,
    data: DataSet,
) -> Dict[int, InteractionNetworkGroup]:
    """
    Map every network of a response to its canonical network group.

    Networks whose group cannot be resolved are left out. When several
    networks belong to the same group id, they all map to the first group
    instance seen for that id.

    Parameters
    ----------
    response : RelatedGenesResponse
        Raw engine response.
    data : DataSet
        Data store used to resolve the groups.

    Returns
    -------
    dict
        Mapping: network_id -> InteractionNetworkGroup.
    """
    if response is None or data is None:
        raise ValueError("response and data are required")

    groups: Dict[int, InteractionNetworkGroup] = {}
    groups_by_network: Dict[int, InteractionNetworkGroup] = {}
    for network in response.networks:
        group = data.get_network_group(network.id)
        if group is None:
            logger.debug("No group for network %d, skipping", network.id)
            continue
        canonical = groups.setdefault(group.id, group)
        groups_by_network[network.id] = canonical
    return groups_by_network


def compute_canonical_networks(
    groups_by_network: Mapping[int, InteractionNetworkGroup],
) -> Dict[int, InteractionNetwork]:
    """
    Flatten the groups into a mapping network_id -> InteractionNetwork.
    """
    canonical: Dict[int, InteractionNetwork] = {}
    for group in groups_by_network.values():
        for network in group.interaction_networks:
            canonical[network.id] = network
    return canonical


def compute_query_genes(
    symbols: Iterable[str],
    provider: GeneCompletionProvider,
) -> Dict[int, Gene]:
    """
    Resolve the requested symbols to genes, keyed by owning node id.

    Unknown symbols are skipped. If two symbols resolve to the same node,
    the later one replaces the earlier one.
    """
    if provider is None:
        raise ValueError("a gene completion provider is required")

    genes_by_node: Dict[int, Gene] = {}
    for symbol in symbols:
        gene = provider.get_gene(symbol)
        if gene is None:
            logger.debug("Unrecognised gene symbol %r", symbol)
            continue
        genes_by_node[gene.node.id] = gene
    return genes_by_node


def create_query_nodes(
    gene_mediator: GeneMediator,
    gene_names: List[str],
    organism: Organism,
) -> Dict[int, Gene]:
    """
    Look the given symbols up through the gene mediator, keyed by node id.

    A store failure yields an empty mapping instead of an exception.
    """
    try:
        genes = gene_mediator.get_genes(gene_names, organism.id)
    except DataStoreError:
        logger.warning("Gene lookup failed for organism %d", organism.id, exc_info=True)
        return {}
    return {gene.node.id: gene for gene in genes}


def create_interaction_map(
    source_interactions: Mapping[InteractionNetwork, Iterable[Interaction]],
) -> Dict[int, List[Interaction]]:
    """
    Re-key per-network interactions by network id.
    """
    return {
        network.id: list(interactions)
        for network, interactions in source_interactions.items()
    }
