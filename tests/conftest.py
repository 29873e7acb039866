# tests/conftest.py

from pathlib import Path

import pytest

from gnr.data_models import Gene, NamingSource, Node, Organism

TOY_DIR = Path(__file__).resolve().parent.parent / "data" / "toy"

HUMAN = Organism(id=4, name="Homo sapiens", short_name="H. sapiens")


def make_node(node_id, symbols):
    """
    Build a node with genes from (gene_id, symbol, rank) tuples.
    """
    node = Node(id=node_id)
    for gene_id, symbol, rank in symbols:
        node.genes.append(
            Gene(
                id=gene_id,
                symbol=symbol,
                naming_source=NamingSource(id=rank, name=f"source-{rank}", rank=rank),
                node=node,
                organism=HUMAN,
            )
        )
    return node


@pytest.fixture
def toy_dir():
    return TOY_DIR


@pytest.fixture
def human():
    return HUMAN
