# tests/test_interactions.py

import pytest

from gnr.data_models import (
    Interaction,
    InteractionNetwork,
    InteractionRecord,
    NetworkRecord,
)
from gnr.interactions import compute_combined_interactions, compute_source_interactions
from gnr.store import NodeMediator

from conftest import make_node


class _Mediators:
    def __init__(self, node_mediator):
        self.node_mediator = node_mediator


class _Data:
    def __init__(self, *nodes):
        self.mediator_provider = _Mediators(
            NodeMediator({n.id: n for n in nodes}, {n.id: 4 for n in nodes})
        )


def test_source_interactions_replace_and_skip_unresolved(human):
    a = make_node(1, [(1, "A", 1)])
    b = make_node(2, [(2, "B", 1)])
    stale = Interaction(b, b, 0.1)
    network = InteractionNetwork(id=10, name="n", interactions=(stale,))
    records = [
        NetworkRecord(10, 0.5, (InteractionRecord(1, 2, 0.7), InteractionRecord(1, 99, 0.2))),
        NetworkRecord(11, 0.5, (InteractionRecord(1, 2, 0.3),)),
    ]

    rebuilt = compute_source_interactions(records, {10: network}, human, _Data(a, b))

    assert set(rebuilt) == {10}
    interactions = rebuilt[10].interactions
    assert len(interactions) == 1
    assert interactions[0].from_node is a
    assert interactions[0].to_node is b
    assert interactions[0].weight == 0.7
    # The canonical network itself is unchanged
    assert network.interactions == (stale,)


def test_source_interactions_require_organism_and_data(human):
    with pytest.raises(ValueError):
        compute_source_interactions([], {}, None, _Data())
    with pytest.raises(ValueError):
        compute_source_interactions([], {}, human, None)


def test_combined_interactions_first_seen_pair_wins():
    n1, n2, n3 = (make_node(i, [(i, f"G{i}", 1)]) for i in (1, 2, 3))
    first = Interaction(n1, n2, 0.8)
    reversed_dup = Interaction(n2, n1, 0.9)
    other = Interaction(n3, n1, 0.4)
    same_dup = Interaction(n1, n2, 0.1)

    combined = compute_combined_interactions({
        "net-a": [first, other],
        "net-b": [reversed_dup, same_dup, Interaction(n2, n3, 0.2)],
    })

    assert [(i.from_node.id, i.to_node.id, i.weight) for i in combined] == [
        (1, 2, 0.8),
        (3, 1, 0.4),
        (2, 3, 0.2),
    ]


def test_combined_interactions_empty():
    assert compute_combined_interactions({}) == []
