# src/gnr/graphs.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import networkx as nx

from .formatting import get_gene_label
from .pipeline import SearchResult
from .scoring import get_preferred_gene

logger = logging.getLogger(__name__)


def _add_result_nodes(G: nx.Graph, result: SearchResult) -> None:
    """Add one node per scored gene, keyed by node id."""
    for gene, score in result.gene_scores.items():
        G.add_node(
            gene.node.id,
            label=get_gene_label(gene),
            symbol=gene.symbol,
            score=float(score),
            query=result.is_query_node(gene.node.id),
        )


def _ensure_node(G: nx.Graph, node) -> None:
    if node.id in G:
        return
    preferred = get_preferred_gene(node)
    symbol = preferred.symbol if preferred is not None else str(node.id)
    G.add_node(node.id, label=symbol, symbol=symbol, score=0.0, query=False)


def build_interaction_graph(result: SearchResult) -> nx.MultiGraph:
    """
    Build a multigraph with one edge per (network, interaction).

    Nodes
    -----
    node_id with attributes 'label', 'symbol', 'score', 'query'.

    Edges
    -----
    keyed by (network id, position in that network), with attributes
    'weight', 'network', 'network_id' and 'group' (group code, '' if unknown).

    Parameters
    ----------
    result : SearchResult
        Assembled search result.

    Returns
    -------
    networkx.MultiGraph
    """
    G = nx.MultiGraph()
    _add_result_nodes(G, result)

    for network_id, network in result.networks.items():
        group = result.groups.get(network_id)
        for index, inter in enumerate(network.interactions):
            _ensure_node(G, inter.from_node)
            _ensure_node(G, inter.to_node)
            G.add_edge(
                inter.from_node.id,
                inter.to_node.id,
                key=(network_id, index),
                weight=float(inter.weight),
                network=network.name,
                network_id=network_id,
                group=group.code if group is not None else "",
            )
    return G


def build_combined_graph(result: SearchResult) -> nx.Graph:
    """
    Build a simple graph from the combined (de-duplicated) interactions.

    Each unordered node pair appears once, carrying the weight of the first
    network that reported it.
    """
    G = nx.Graph()
    _add_result_nodes(G, result)
    for inter in result.combined_interactions():
        _ensure_node(G, inter.from_node)
        _ensure_node(G, inter.to_node)
        G.add_edge(inter.from_node.id, inter.to_node.id, weight=float(inter.weight))
    return G


def to_cytoscape_json(G: nx.Graph) -> Dict[str, Any]:
    """Convert a graph to Cytoscape.js compatible JSON."""
    return nx.cytoscape_data(G)


def export_graphml(G: nx.Graph, path: Path) -> Path:
    """
    Export a graph as GraphML (loadable by Cytoscape / Gephi).

    Returns
    -------
    Path
        Output file path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # GraphML has no bool type
    G_copy = G.copy()
    for _, d in G_copy.nodes(data=True):
        for k, v in list(d.items()):
            if isinstance(v, bool):
                d[k] = str(v)

    nx.write_graphml(G_copy, str(path))
    logger.info("GraphML written: %s (%d nodes, %d edges)",
                path, G.number_of_nodes(), G.number_of_edges())
    return path
