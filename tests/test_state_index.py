from __future__ import annotations

import jax.numpy as jnp
import pytest

from infoslam.core.errors import DoubleInitializationError, NotInitializedError
from infoslam.core.information import InformationStore
from infoslam.core.state_index import StateIndex
from infoslam.core.types import IndexBlock, NodeId


def test_anchor_takes_first_block_and_seeds_store():
    store = InformationStore()
    index = StateIndex(dimension=3, store=store)

    blk = index.register_anchor(NodeId(7), jnp.array([1.0, 2.0, 3.0]))

    assert blk == IndexBlock(start=0, dim=3)
    assert index.is_initialized
    assert store.omega.shape == (3, 3)
    assert jnp.allclose(store.omega, jnp.eye(3))
    assert jnp.allclose(store.xi, jnp.array([1.0, 2.0, 3.0]))


def test_second_anchor_is_rejected_and_state_kept():
    store = InformationStore()
    index = StateIndex(dimension=1, store=store)
    index.register_anchor(NodeId(0), jnp.array([4.0]))

    with pytest.raises(DoubleInitializationError):
        index.register_anchor(NodeId(1), jnp.array([9.0]))

    assert index.node_ids == [0]
    assert float(store.xi[0]) == pytest.approx(4.0)


def test_resolve_before_anchor_fails():
    index = StateIndex(dimension=2, store=InformationStore())

    with pytest.raises(NotInitializedError):
        index.resolve(NodeId(0))

    assert len(index) == 0


def test_resolve_allocates_in_first_seen_order():
    """
    New ids get consecutive blocks; known ids return their existing block
    without growing the store.
    """
    store = InformationStore()
    index = StateIndex(dimension=2, store=store)
    index.register_anchor(NodeId(10), jnp.zeros(2))

    b5 = index.resolve(NodeId(5))
    b99 = index.resolve(NodeId(99))
    again = index.resolve(NodeId(5))

    assert b5 == IndexBlock(start=2, dim=2)
    assert b99 == IndexBlock(start=4, dim=2)
    assert again == b5
    assert store.size == 6
    assert index.node_ids == [10, 5, 99]


def test_block_lookup_of_unknown_id_raises_keyerror():
    index = StateIndex(dimension=1, store=InformationStore())
    index.register_anchor(NodeId(0), jnp.zeros(1))

    with pytest.raises(KeyError):
        index.block(NodeId(1))


def test_unanchored_nodes_follow_links():
    """
    Links merge components; only nodes joined (possibly indirectly) to the
    anchor count as anchored.
    """
    index = StateIndex(dimension=1, store=InformationStore())
    assert index.unanchored_nodes() == []

    index.register_anchor(NodeId(0), jnp.zeros(1))
    for nid in (1, 2, 3, 4):
        index.resolve(NodeId(nid))
    assert index.unanchored_nodes() == [1, 2, 3, 4]

    index.link(NodeId(3), NodeId(4))
    index.link(NodeId(0), NodeId(1))
    assert index.unanchored_nodes() == [2, 3, 4]

    index.link(NodeId(4), NodeId(1))
    assert index.unanchored_nodes() == [2]

    index.link(NodeId(2), NodeId(2))
    assert index.unanchored_nodes() == [2]

    index.link(NodeId(2), NodeId(3))
    assert index.unanchored_nodes() == []
    assert NodeId(3) in index
