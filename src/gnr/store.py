# src/gnr/store.py

"""
In-memory data store used by the result assembler.

The assembler only talks to the mediator interfaces below; the classes in
this module keep every entity in plain dictionaries and are populated by
:mod:`gnr.io_handlers`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .data_models import (
    Attribute,
    AttributeGroup,
    Gene,
    InteractionNetworkGroup,
    Node,
    OntologyCategory,
    Organism,
)

logger = logging.getLogger(__name__)


class DataStoreError(Exception):
    """The underlying repository could not answer a request."""


class CategoryNotFoundError(DataStoreError):
    """No ontology category exists for the requested id."""

    def __init__(self, category_id: int):
        self.category_id = category_id
        super().__init__(f"Unknown ontology category: {category_id}")


class NodeMediator:
    def __init__(self, nodes: Dict[int, Node], node_organisms: Dict[int, int]):
        self._nodes = nodes
        self._node_organisms = node_organisms

    def get_node(self, node_id: int, organism_id: int) -> Optional[Node]:
        """Return the node with the given id, or None if the organism has no such node."""
        if self._node_organisms.get(node_id) != organism_id:
            return None
        return self._nodes.get(node_id)


class GeneMediator:
    def __init__(self, genes: Iterable[Gene], available: bool = True):
        self._genes = list(genes)
        self.available = available

    def get_genes(self, symbols: List[str], organism_id: int) -> List[Gene]:
        """
        Return the genes matching the given symbols (case-insensitive).

        Raises
        ------
        DataStoreError
            If the store has been marked unavailable.
        """
        if not self.available:
            raise DataStoreError("Gene store is unavailable")
        wanted = {s.upper() for s in symbols}
        return [
            g for g in self._genes
            if g.symbol.upper() in wanted
            and g.organism is not None
            and g.organism.id == organism_id
        ]


class AttributeMediator:
    def __init__(
        self,
        attributes: Dict[int, Attribute],
        groups: Dict[int, AttributeGroup],
        group_organisms: Dict[int, int],
    ):
        self._attributes = attributes
        self._groups = groups
        self._group_organisms = group_organisms

    def find_attribute(self, organism_id: int, attribute_id: int) -> Optional[Attribute]:
        attribute = self._attributes.get(attribute_id)
        if attribute is None:
            return None
        if self._group_organisms.get(attribute.group_id) != organism_id:
            return None
        return attribute

    def find_attribute_group(self, organism_id: int, group_id: int) -> Optional[AttributeGroup]:
        if self._group_organisms.get(group_id) != organism_id:
            return None
        return self._groups.get(group_id)


class OntologyMediator:
    def __init__(self, categories: Dict[int, OntologyCategory]):
        self._categories = categories

    def get_category(self, category_id: int) -> OntologyCategory:
        try:
            return self._categories[category_id]
        except KeyError:
            raise CategoryNotFoundError(category_id) from None


class GeneCompletionProvider:
    """
    Resolves user-typed symbols to genes of a single organism.

    Matching ignores case. When two genes share a symbol, the first one
    registered wins.
    """

    def __init__(self, genes: Iterable[Gene]):
        self._by_symbol: Dict[str, Gene] = {}
        for gene in genes:
            self._by_symbol.setdefault(gene.symbol.upper(), gene)

    def get_gene(self, symbol: str) -> Optional[Gene]:
        return self._by_symbol.get(symbol.strip().upper())


@dataclass
class MediatorProvider:
    node_mediator: NodeMediator
    gene_mediator: GeneMediator
    attribute_mediator: AttributeMediator
    ontology_mediator: OntologyMediator


@dataclass
class DataSet:
    """
    Facade over the in-memory store.

    Attributes
    ----------
    organisms : dict[int, Organism]
    genes : list[Gene]
    network_groups : dict[int, InteractionNetworkGroup]
    colors : dict[str, str]
        Group code -> colour as '#rrggbb'.
    mediator_provider : MediatorProvider
    """
    organisms: Dict[int, Organism]
    genes: List[Gene]
    network_groups: Dict[int, InteractionNetworkGroup]
    colors: Dict[str, str]
    mediator_provider: MediatorProvider
    _group_by_network: Dict[int, InteractionNetworkGroup] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        for group in self.network_groups.values():
            for network in group.interaction_networks:
                self._group_by_network[network.id] = group

    def get_organism(self, organism_id: int) -> Optional[Organism]:
        return self.organisms.get(organism_id)

    def get_network_group(self, network_id: int) -> Optional[InteractionNetworkGroup]:
        return self._group_by_network.get(network_id)

    def get_color(self, code: str) -> str:
        """Return the colour registered for a group code ('#000000' if none)."""
        color = self.colors.get(code)
        if color is None:
            logger.debug("No colour for group code %r", code)
            return "#000000"
        return color

    def get_completion_provider(self, organism: Organism) -> GeneCompletionProvider:
        return GeneCompletionProvider(
            g for g in self.genes
            if g.organism is not None and g.organism.id == organism.id
        )
