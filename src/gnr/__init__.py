# src/gnr/__init__.py

"""
GNR - Gene Network Result assembler.

This package provides tools to:
- Resolve a related-genes query response against a gene/network data store
- Score genes and weight networks and attributes
- Merge per-network interactions into one de-duplicated set
- Describe networks and genes as text or HTML
- Export the assembled result as a graph
"""
__all__ = []
