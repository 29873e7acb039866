# src/gnr/formatting.py

"""
Text and HTML descriptions of networks, attributes and genes.

The HTML produced here is consumed by the host application's detail
panels, so its structure (one ``<div>`` per block) and its limited
escaping are kept stable.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, TypeVar, Union

from .data_models import (
    Attribute,
    AttributeGroup,
    Gene,
    InteractionNetwork,
    InteractionNetworkGroup,
)
from .messages import DEFAULT_CATALOG, MessageCatalog
from .scoring import get_preferred_gene
from .store import DataSet

G = TypeVar("G")

DescribedEntry = Union[InteractionNetwork, AttributeGroup, Attribute]


def _is_empty(text: Optional[str]) -> bool:
    return text is None or len(text) == 0


def html_escape(text: Optional[str]) -> str:
    """Escape '&' and '<' only; '>' and quotes are left as is."""
    if text is None:
        return ""
    return text.replace("&", "&amp;").replace("<", "&lt;")


def format_link(title: Optional[str], url: Optional[str]) -> str:
    if _is_empty(url):
        return html_escape(title)
    return f'<a href="{url}">{html_escape(title)}</a>'


def format_authors(authors: str) -> str:
    """Keep the first author only, adding ', et al' when there are more."""
    parts = authors.split(",")
    if len(parts) == 1:
        return parts[0]
    return parts[0] + ", et al"


# --------------------------------------------------------------------
# 1. HTML descriptions
# --------------------------------------------------------------------

def build_description_html(
    entry: DescribedEntry,
    group: Optional[object] = None,
    messages: MessageCatalog = DEFAULT_CATALOG,
) -> str:
    """
    Build the HTML description of a network-like entry.

    Parameters
    ----------
    entry : InteractionNetwork, AttributeGroup or Attribute
        The entry to describe.
    group : AttributeGroup, optional
        Required to describe an Attribute.
    messages : MessageCatalog
        Label templates.

    Returns
    -------
    str
        HTML fragment, or an empty string for unsupported entries.
    """
    match entry:
        case InteractionNetwork():
            return build_network_description_html(entry, messages)
        case AttributeGroup():
            return _attribute_group_html(entry, messages)
        case Attribute() if isinstance(group, AttributeGroup):
            return _attribute_html(entry, group, messages)
    return ""


def _attribute_group_description(group: AttributeGroup, messages: MessageCatalog) -> str:
    return messages.format(
        "network_detail_attribute_description",
        group.description,
        format_link(group.publication_name, group.publication_url),
    )


def _attribute_html(attribute: Attribute, group: AttributeGroup, messages: MessageCatalog) -> str:
    parts = [
        f"<div>{attribute.description}</div>",
        f"<div><strong>{messages.get('network_detail_source_label')}</strong> ",
        _attribute_group_description(group, messages),
        "</div>",
        f"<div><strong>{messages.get('network_detail_more_at_label')}</strong> ",
        format_link(group.linkout_label, group.linkout_url),
        "</div>",
    ]
    return "".join(parts)


def _attribute_group_html(group: AttributeGroup, messages: MessageCatalog) -> str:
    return f"<div>{_attribute_group_description(group, messages)}</div>"


def build_network_description_html(
    network: InteractionNetwork,
    messages: MessageCatalog = DEFAULT_CATALOG,
) -> str:
    """
    HTML description of an interaction network.

    Falls back to the plain description when the network has no metadata.
    """
    data = network.metadata
    if data is None:
        return network.description

    parts: List[str] = []

    if not _is_empty(data.title):
        parts.append("<div>")
        parts.append(format_link(data.title, data.url))
        parts.append(". ")
        if not _is_empty(data.authors):
            parts.append(html_escape(format_authors(data.authors)))
            parts.append(". ")
        if not _is_empty(data.year_published):
            parts.append(f"({html_escape(data.year_published)}). ")
        if not _is_empty(data.publication_name):
            parts.append(html_escape(data.publication_name))
            parts.append(".")
        parts.append("</div>")

    if not _is_empty(data.other):
        parts.append(f"<div>{html_escape(data.other)}</div>")

    if not _is_empty(data.comment):
        parts.append(f"<div><strong>{messages.get('network_detail_comment_label')}</strong> ")
        parts.append(html_escape(data.comment))
        parts.append("</div>")

    has_source = (
        not _is_empty(data.source)
        or not _is_empty(data.processing_description)
        or data.interaction_count > 0
    )
    if has_source:
        parts.append(f"<div><strong>{messages.get('network_detail_source_label')}</strong> ")
        parts.append(messages.format(
            "network_detail_source_description",
            data.processing_description or "",
            data.interaction_count,
            format_link(data.source, data.source_url),
        ))
        parts.append("</div>")

    if network.tags:
        parts.append(f"<div><strong>{messages.get('network_detail_tags_label')}</strong> ")
        parts.append(", ".join(tag.name.lower() for tag in network.tags))
        parts.append("</div>")

    return "".join(parts)


# --------------------------------------------------------------------
# 2. Plain-text report
# --------------------------------------------------------------------

def build_description_report(
    network: InteractionNetwork,
    messages: MessageCatalog = DEFAULT_CATALOG,
) -> str:
    """
    One-line, '|' separated description of a network for text reports.

    Field order: method, comment, authors, PubMed id, interaction count,
    source, tags. Empty fields are skipped. Falls back to the plain
    description when the network has no metadata.
    """
    data = network.metadata
    if data is None:
        return network.description

    parts = [messages.format("report_method", data.processing_description or "")]
    if not _is_empty(data.comment):
        parts.append(data.comment)
    if not _is_empty(data.authors):
        parts.append(messages.format("report_authors", data.authors))
    if not _is_empty(data.pubmed_id):
        parts.append(messages.format("report_pubmed", data.pubmed_id))
    parts.append(messages.format("report_interactions", data.interaction_count))
    if not _is_empty(data.source):
        parts.append(messages.format("report_source", data.source))
    if network.tags:
        parts.append(messages.get("report_tags") + ",".join(tag.name for tag in network.tags))

    return "|".join(p for p in parts if p)


# --------------------------------------------------------------------
# 3. Genes
# --------------------------------------------------------------------

def get_gene_label(gene: Gene) -> str:
    """
    Display label of a gene.

    The preferred symbol of a node is shown alone; any other symbol is
    shown as 'PREFERRED (SYMBOL)'.
    """
    preferred = get_preferred_gene(gene.node)
    if preferred is None or preferred.id == gene.id:
        return gene.symbol
    return f"{preferred.symbol} ({gene.symbol})"


def build_gene_description(
    gene: Gene,
    linkouts: Optional[Mapping[str, str]] = None,
    messages: MessageCatalog = DEFAULT_CATALOG,
) -> str:
    """
    HTML description of a gene: node description plus external links.

    Parameters
    ----------
    gene : Gene
        The gene to describe.
    linkouts : dict, optional
        Mapping link label -> URL, in display order.
    messages : MessageCatalog
        Label templates.
    """
    data = gene.node.gene_data if gene.node is not None else None
    description = html_escape(data.description if data is not None else "")

    links = ", ".join(
        f'<a href="{html_escape(url)}">{label}</a>'
        for label, url in (linkouts or {}).items()
    )
    if not links:
        return messages.format("gene_detail_description", description, links)
    return messages.format("gene_detail_description_with_links", description, links)


# --------------------------------------------------------------------
# 4. Ordering and colours
# --------------------------------------------------------------------

def sort_groups_by_name(groups: Iterable[G]) -> List[G]:
    """Sort groups by name, ignoring case."""
    return sorted(groups, key=lambda g: g.name.lower())


def sort_networks_by_name(networks: Iterable[G]) -> List[G]:
    """Sort networks (or attributes) by name, ignoring case."""
    return sorted(networks, key=lambda n: n.name.lower())


def get_network_color(data: DataSet, group: Union[InteractionNetworkGroup, AttributeGroup]) -> str:
    return data.get_color(group.code)
