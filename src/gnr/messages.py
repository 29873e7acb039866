# src/gnr/messages.py

"""
User-visible label templates.

Templates use ``str.format`` positional placeholders (``{0}``, ``{1}``...).
The defaults below are the English labels; a translated catalog can be
loaded from a two-column CSV (``key,template``) and overrides them key by key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import pandas as pd


DEFAULT_MESSAGES: Dict[str, str] = {
    # Network detail panel (HTML)
    "network_detail_comment_label": "Comment:",
    "network_detail_source_label": "Source:",
    "network_detail_source_description": "{0}. {1} interactions from {2}.",
    "network_detail_tags_label": "Tags:",
    "network_detail_more_at_label": "More at:",
    "network_detail_attribute_description": "{0} from {1}.",
    # Gene detail panel (HTML)
    "gene_detail_description": "{0}",
    "gene_detail_description_with_links": "{0}<br>Links: {1}",
    # Plain-text report
    "report_method": "{0}",
    "report_authors": "Authors: {0}",
    "report_pubmed": "PubMed:{0}",
    "report_interactions": "{0} interactions",
    "report_source": "{0}",
    "report_tags": "Tags: ",
}


@dataclass
class MessageCatalog:
    """
    Lookup of label templates by key.

    Attributes
    ----------
    messages : dict[str, str]
        Key -> template.
    """
    messages: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MESSAGES))

    def get(self, key: str) -> str:
        try:
            return self.messages[key]
        except KeyError:
            raise KeyError(f"Unknown message key: {key!r}") from None

    def format(self, key: str, *args: object) -> str:
        return self.get(key).format(*args)


def load_messages(path: Path, key_col: str = "key", template_col: str = "template") -> MessageCatalog:
    """
    Load a message catalog from CSV, on top of the default English labels.

    Parameters
    ----------
    path : Path
        CSV file with one row per message.
    key_col, template_col : str
        Column names for keys and templates.

    Returns
    -------
    MessageCatalog
    """
    df = pd.read_csv(Path(path), dtype=str, keep_default_na=False)
    missing = {key_col, template_col} - set(df.columns)
    if missing:
        raise ValueError(f"Message catalog {path} is missing columns: {sorted(missing)}")

    messages = dict(DEFAULT_MESSAGES)
    for _, row in df.iterrows():
        messages[row[key_col]] = row[template_col]
    return MessageCatalog(messages=messages)


DEFAULT_CATALOG = MessageCatalog()
