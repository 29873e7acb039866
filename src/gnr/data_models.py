# src/gnr/data_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


# --------------------------------------------------------------------
# 1. Domain entities (owned by the data store)
# --------------------------------------------------------------------

@dataclass(frozen=True)
class Organism:
    """
    Representation of an organism.

    Attributes
    ----------
    id : int
        Stable organism identifier.
    name : str
        Scientific name (e.g. 'Homo sapiens').
    short_name : str
        Abbreviated name (e.g. 'H. sapiens').
    """
    id: int
    name: str
    short_name: str = ""


@dataclass(frozen=True)
class NamingSource:
    """
    Source of a gene symbol (e.g. 'Entrez Gene Name', 'Synonym').

    Attributes
    ----------
    id : int
        Naming source identifier.
    name : str
        Human-readable name of the source.
    rank : int
        Byte-valued priority; the highest ranked symbol of a node is the
        one shown to users.
    """
    id: int
    name: str
    rank: int


@dataclass(frozen=True)
class GeneData:
    description: str = ""


@dataclass(eq=False)
class Node:
    """
    A biological entity (one gene product) owning one or more symbols.

    Nodes and genes reference each other, so both compare by identity.

    Attributes
    ----------
    id : int
        Node identifier, as used in engine responses.
    genes : list[Gene]
        All symbols known for this node.
    gene_data : GeneData, optional
        Descriptive data for the node.
    """
    id: int
    genes: List["Gene"] = field(default_factory=list)
    gene_data: Optional[GeneData] = None

    def __repr__(self) -> str:
        return f"Node(id={self.id}, genes={[g.symbol for g in self.genes]})"


@dataclass(eq=False)
class Gene:
    """
    A gene symbol belonging to exactly one node.

    Attributes
    ----------
    id : int
        Gene identifier.
    symbol : str
        The symbol text (e.g. 'TP53').
    naming_source : NamingSource
        Where the symbol comes from; carries the display rank.
    node : Node, optional
        Owning node.
    organism : Organism, optional
        Organism the gene belongs to.
    """
    id: int
    symbol: str
    naming_source: NamingSource
    node: Optional[Node] = None
    organism: Optional[Organism] = None

    def __repr__(self) -> str:
        node_id = self.node.id if self.node is not None else None
        return f"Gene(id={self.id}, symbol={self.symbol!r}, node={node_id})"


@dataclass(frozen=True)
class Tag:
    name: str


@dataclass(frozen=True)
class NetworkMetadata:
    """
    Publication and processing details of an interaction network.

    Every field is optional; empty strings and None are both treated as
    absent by the formatters.
    """
    title: Optional[str] = None
    url: Optional[str] = None
    authors: Optional[str] = None
    year_published: Optional[str] = None
    publication_name: Optional[str] = None
    other: Optional[str] = None
    comment: Optional[str] = None
    processing_description: Optional[str] = None
    interaction_count: int = 0
    source: Optional[str] = None
    source_url: Optional[str] = None
    pubmed_id: Optional[str] = None


@dataclass(frozen=True)
class Interaction:
    """
    Edge between two nodes of a network.

    Direction is kept as given but ignored when interactions from several
    networks are merged.
    """
    from_node: Node
    to_node: Node
    weight: float


@dataclass(frozen=True)
class InteractionNetwork:
    """
    A single source network (one publication or dataset).

    Attributes
    ----------
    id : int
        Network identifier.
    name : str
        Display name.
    description : str
        Plain description, used when no metadata is available.
    metadata : NetworkMetadata, optional
        Publication and processing details.
    tags : tuple[Tag, ...]
        Free-form tags.
    interactions : tuple[Interaction, ...]
        Interactions returned for the current query. Not part of equality.
    """
    id: int
    name: str = ""
    description: str = ""
    metadata: Optional[NetworkMetadata] = field(default=None, compare=False)
    tags: Tuple[Tag, ...] = field(default=(), compare=False)
    interactions: Tuple[Interaction, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class InteractionNetworkGroup:
    """
    A group of networks of the same evidence type (e.g. 'Co-expression').
    """
    id: int
    name: str
    code: str
    description: str = ""
    interaction_networks: Tuple[InteractionNetwork, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class AttributeGroup:
    """
    A group of attributes (e.g. pathway or protein domain annotations).
    """
    id: int
    name: str
    code: str = ""
    description: str = ""
    publication_name: Optional[str] = None
    publication_url: Optional[str] = None
    linkout_label: Optional[str] = None
    linkout_url: Optional[str] = None


@dataclass(frozen=True)
class Attribute:
    id: int
    group_id: int
    name: str
    description: str = ""


@dataclass(frozen=True)
class OntologyCategory:
    id: int
    ontology_id: int
    name: str
    description: str = ""


@dataclass(frozen=True)
class AnnotationEntry:
    """
    An ontology category paired with its enrichment statistics.
    """
    category: OntologyCategory
    p_value: float
    q_value: float
    sample_annotated: int = 0
    sample_size: int = 0
    total_annotated: int = 0
    total_size: int = 0


# --------------------------------------------------------------------
# 2. Engine records (raw query response)
# --------------------------------------------------------------------

@dataclass(frozen=True)
class NodeScore:
    id: int
    score: float


@dataclass(frozen=True)
class InteractionRecord:
    node1_id: int
    node2_id: int
    weight: float


@dataclass(frozen=True)
class NetworkRecord:
    """
    A network as returned by the engine: id, weight and raw interactions.
    """
    id: int
    weight: float
    interactions: Tuple[InteractionRecord, ...] = ()


@dataclass(frozen=True)
class AttributeRecord:
    id: int
    group_id: int
    weight: float


@dataclass(frozen=True)
class OntologyCategoryRecord:
    id: int
    p_value: float
    q_value: float
    sample_annotated: int = 0
    sample_size: int = 0
    total_annotated: int = 0
    total_size: int = 0


@dataclass(frozen=True)
class RelatedGenesRequest:
    organism_id: int
    combining_method: str = "automatic"
    limit_results: int = 20
    attributes_limit: int = 10


@dataclass(frozen=True)
class RelatedGenesResponse:
    """
    Raw related-genes response.

    Attributes
    ----------
    networks : tuple[NetworkRecord, ...]
        Networks with weights and interactions.
    nodes : tuple[NodeScore, ...]
        Per-node scores (may contain duplicates).
    attributes : tuple[AttributeRecord, ...], optional
        Attribute weights; None if attributes were not requested.
    node_to_attributes : dict[int, tuple[AttributeRecord, ...]], optional
        Attributes attached to each node.
    """
    networks: Tuple[NetworkRecord, ...] = ()
    nodes: Tuple[NodeScore, ...] = ()
    attributes: Optional[Tuple[AttributeRecord, ...]] = None
    node_to_attributes: Optional[Dict[int, Tuple[AttributeRecord, ...]]] = None


@dataclass(frozen=True)
class EnrichmentResponse:
    annotations: Dict[int, Tuple[OntologyCategoryRecord, ...]] = field(default_factory=dict)


# --------------------------------------------------------------------
# 3. Assembly products
# --------------------------------------------------------------------

@dataclass
class AttributeResult:
    """
    Attribute maps built from the raw attribute records of a response.

    Attributes
    ----------
    attributes : dict[int, Attribute]
        Attribute id -> attribute.
    groups_by_attribute : dict[int, AttributeGroup]
        Attribute id -> owning group.
    attributes_by_node : dict[int, list[Attribute]]
        Node id -> attributes attached to that node.
    weights : dict[Attribute, float]
        Attribute -> relevance weight.
    """
    attributes: Dict[int, Attribute] = field(default_factory=dict)
    groups_by_attribute: Dict[int, AttributeGroup] = field(default_factory=dict)
    attributes_by_node: Dict[int, List[Attribute]] = field(default_factory=dict)
    weights: Dict[Attribute, float] = field(default_factory=dict)
