from __future__ import annotations

import jax.numpy as jnp
import pytest

from infoslam.core.errors import DimensionMismatchError, NotInitializedError
from infoslam.core.information import InformationStore
from infoslam.core.state_index import StateIndex
from infoslam.core.types import NodeId
from infoslam.slam.constraints import ConstraintAccumulator
from infoslam.slam.measurements import (
    as_vector,
    relative_offset_information,
    relative_offset_residual,
)


def _accumulator(dim: int, anchor=None) -> ConstraintAccumulator:
    index = StateIndex(dimension=dim, store=InformationStore())
    if anchor is not None:
        index.register_anchor(NodeId(0), jnp.asarray(anchor))
    return ConstraintAccumulator(index)


def test_as_vector_accepts_scalar_for_dim_one():
    v = as_vector(2.5, 1)
    assert v.shape == (1,)
    assert float(v[0]) == pytest.approx(2.5)


@pytest.mark.parametrize("value", [[1.0, 2.0, 3.0], [[1.0, 2.0]], 4.0])
def test_as_vector_rejects_wrong_shapes(value):
    with pytest.raises(DimensionMismatchError):
        as_vector(value, 2)


def test_relative_offset_information_signs():
    contrib = relative_offset_information(jnp.array([2.0, -3.0]))
    assert jnp.allclose(contrib.diag, 1.0)
    assert jnp.allclose(contrib.cross, -1.0)
    assert jnp.allclose(contrib.xi_first, jnp.array([-2.0, 3.0]))
    assert jnp.allclose(contrib.xi_second, jnp.array([2.0, -3.0]))


def test_relative_offset_residual_zero_at_consistent_state():
    x = jnp.array([1.0, 1.0, 3.0, 4.0])
    r = relative_offset_residual(x, {"offset": jnp.array([2.0, 3.0])})
    assert jnp.allclose(r, 0.0)


def test_transition_scalar_update():
    """
    Anchor 0 at 0, then 0 -> 1 by +5:

        Ω = [[1+1, -1], [-1, 1]],  ξ = [0 - 5, +5]
    """
    acc = _accumulator(1, anchor=[0.0])
    acc.add_transition(NodeId(0), NodeId(1), 5.0)

    store = acc.index.store
    assert jnp.allclose(store.omega, jnp.array([[2.0, -1.0], [-1.0, 1.0]]))
    assert jnp.allclose(store.xi, jnp.array([-5.0, 5.0]))


def test_transition_splits_vector_contribution_between_both_nodes():
    """
    In k dimensions the negative part of ξ goes to id1's block and the
    positive part to id2's block, coordinate by coordinate.
    """
    acc = _accumulator(2, anchor=[0.0, 0.0])
    acc.add_landmark_observation(NodeId(0), NodeId(50), jnp.array([2.0, 3.0]))

    store = acc.index.store
    assert jnp.allclose(store.xi, jnp.array([-2.0, -3.0, 2.0, 3.0]))
    assert jnp.allclose(store.omega, store.omega.T)
    # Coordinates of different dimensions never couple.
    assert float(store.omega[0, 3]) == 0.0
    assert float(store.omega[1, 2]) == 0.0


def test_repeated_transitions_accumulate():
    acc = _accumulator(1, anchor=[0.0])
    acc.add_transition(NodeId(0), NodeId(1), 1.0)
    acc.add_transition(NodeId(0), NodeId(1), 1.0)

    store = acc.index.store
    assert jnp.allclose(store.omega, jnp.array([[3.0, -2.0], [-2.0, 2.0]]))
    assert jnp.allclose(store.xi, jnp.array([-2.0, 2.0]))


def test_transition_without_anchor_fails():
    acc = _accumulator(1)
    with pytest.raises(NotInitializedError):
        acc.add_transition(NodeId(1), NodeId(2), 1.0)
    assert acc.index.store.is_empty


def test_dimension_mismatch_allocates_nothing():
    acc = _accumulator(2, anchor=[0.0, 0.0])
    with pytest.raises(DimensionMismatchError):
        acc.add_transition(NodeId(0), NodeId(1), jnp.array([1.0, 2.0, 3.0]))

    assert acc.index.node_ids == [0]
    assert acc.index.store.size == 2


def test_self_transition_leaves_store_values_unchanged():
    acc = _accumulator(1, anchor=[3.0])
    acc.add_transition(NodeId(0), NodeId(0), 2.0)

    store = acc.index.store
    assert jnp.allclose(store.omega, jnp.eye(1))
    assert jnp.allclose(store.xi, jnp.array([3.0]))
