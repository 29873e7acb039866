# src/gnr/interactions.py

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Set, Tuple

from .data_models import (
    Interaction,
    InteractionNetwork,
    NetworkRecord,
    Organism,
)
from .store import DataSet

logger = logging.getLogger(__name__)


def compute_source_interactions(
    networks: Iterable[NetworkRecord],
    canonical_networks: Mapping[int, InteractionNetwork],
    organism: Organism,
    data: DataSet,
) -> Dict[int, InteractionNetwork]:
    """
    Rebuild the interactions of every canonical network from raw records.

    Parameters
    ----------
    networks : iterable of NetworkRecord
        Networks of the engine response.
    canonical_networks : dict
        Mapping network_id -> canonical InteractionNetwork.
    organism : Organism
        Organism used to resolve node ids.
    data : DataSet
        Provides the node mediator.

    Returns
    -------
    dict
        Mapping network_id -> copy of the canonical network whose
        interactions are exactly those of the response. Records without a
        canonical network are skipped, as are interactions whose nodes
        cannot be resolved. The canonical networks are not modified.
    """
    if organism is None or data is None:
        raise ValueError("organism and data are required")

    node_mediator = data.mediator_provider.node_mediator

    rebuilt: Dict[int, InteractionNetwork] = {}
    for record in networks:
        network = canonical_networks.get(record.id)
        if network is None:
            continue

        interactions: List[Interaction] = []
        for item in record.interactions:
            from_node = node_mediator.get_node(item.node1_id, organism.id)
            to_node = node_mediator.get_node(item.node2_id, organism.id)
            if from_node is None or to_node is None:
                logger.debug(
                    "Network %d: unresolved interaction %d-%d, skipping",
                    record.id, item.node1_id, item.node2_id,
                )
                continue
            interactions.append(Interaction(from_node, to_node, float(item.weight)))
        rebuilt[record.id] = replace(network, interactions=tuple(interactions))
    return rebuilt


def compute_combined_interactions(
    source: Mapping[object, Iterable[Interaction]],
) -> List[Interaction]:
    """
    Merge interactions of several networks, one per unordered node pair.

    Networks are visited in mapping order. The first interaction seen for a
    pair is kept (with its weight); later ones for the same pair are
    dropped, even when their weights differ. Output keeps first-seen order.
    """
    seen: Set[Tuple[int, int]] = set()
    combined: List[Interaction] = []
    for interactions in source.values():
        for interaction in interactions:
            from_id = interaction.from_node.id
            to_id = interaction.to_node.id
            key = (from_id, to_id) if from_id <= to_id else (to_id, from_id)
            if key in seen:
                continue
            seen.add(key)
            combined.append(interaction)
    return combined
