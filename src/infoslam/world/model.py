# Copyright (c) 2025.
# This file is part of infoslam, released under the MIT License.
"""
Session-level GraphSLAM API.

This module defines `GraphSLAM`, the object callers interact with. It is a
thin layer that wires together:

    • `core.information.InformationStore`  (Ω, ξ and their growth)
    • `core.state_index.StateIndex`        (NodeId -> coordinate block)
    • `slam.constraints.ConstraintAccumulator` (observation -> Ω/ξ update)
    • `optimization.solvers.solve_information` (Ω μ = ξ)

and enforces the session lifecycle:

    Uninitialized --register_anchor--> Ready
    Ready --add_transition / add_landmark_observation--> Ready (grows)
    Ready --estimate--> Ready (read-only)

Typical usage
-------------
    slam = GraphSLAM(dimension=2)
    slam.register_anchor(0, [0.0, 0.0])
    slam.add_transition(0, 1, [1.0, 0.0])
    slam.add_landmark_observation(1, 100, [0.5, 2.0])
    values = slam.estimate()      # {0: [0, 0], 1: [1, 0], 100: [1.5, 2]}

The scalar form is simply ``dimension=1`` (see `GraphSLAM.scalar`), in which
case plain floats are accepted wherever a vector is expected.

Design goals
------------
- **Owned state**: every session owns its own store and index; there is no
  module-level state. Mutation is single-writer; callers that share a
  session across threads must serialize access themselves.
- **Explicit lifecycle**: every operation checks the lifecycle state first
  and raises `NotInitializedError` / `DoubleInitializationError` rather than
  failing on an unset matrix.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional

import jax.numpy as jnp

from infoslam.core.errors import (
    DoubleInitializationError,
    NotInitializedError,
    SingularSystemError,
)
from infoslam.core.information import InformationStore
from infoslam.core.state_index import StateIndex
from infoslam.core.types import IndexBlock, NodeId
from infoslam.optimization.solvers import SolveConfig, solve_information
from infoslam.slam.constraints import ConstraintAccumulator
from infoslam.slam.measurements import as_vector

logger = logging.getLogger(__name__)


class GraphSLAM:
    """Incremental GraphSLAM in information form over k-dimensional nodes."""

    def __init__(self, dimension: int = 1, solve_config: Optional[SolveConfig] = None) -> None:
        if isinstance(dimension, bool) or not isinstance(dimension, int) or dimension < 1:
            raise ValueError(f"dimension must be a positive integer, got {dimension!r}")

        self.solve_config = solve_config if solve_config is not None else SolveConfig()
        self.store = InformationStore()
        self.index = StateIndex(dimension, self.store)
        self.constraints = ConstraintAccumulator(self.index)

    @classmethod
    def scalar(cls, solve_config: Optional[SolveConfig] = None) -> "GraphSLAM":
        """Session over 1-dimensional nodes."""
        return cls(dimension=1, solve_config=solve_config)

    @classmethod
    def from_anchor(
        cls,
        node_id: NodeId,
        value,
        dimension: Optional[int] = None,
        solve_config: Optional[SolveConfig] = None,
    ) -> "GraphSLAM":
        """Create a session and register ``node_id`` as its anchor.

        :param node_id: Identifier of the anchor node.
        :param value: Anchor position; a float is accepted for scalar sessions.
        :param dimension: Node dimension. Inferred from ``value`` if omitted.
        :param solve_config: Optional solver configuration.
        :returns: A session in the Ready state.
        """
        if dimension is None:
            dimension = max(1, int(jnp.size(jnp.asarray(value))))
        slam = cls(dimension=dimension, solve_config=solve_config)
        slam.register_anchor(node_id, value)
        return slam

    # --- Introspection ---

    @property
    def dimension(self) -> int:
        return self.index.dimension

    @property
    def is_initialized(self) -> bool:
        return self.index.is_initialized

    @property
    def num_nodes(self) -> int:
        return len(self.index)

    @property
    def state_dim(self) -> int:
        """Current size of Ω / ξ, i.e. ``num_nodes * dimension``."""
        return self.store.size

    @property
    def node_ids(self) -> List[NodeId]:
        """Registered node ids in first-seen order."""
        return self.index.node_ids

    @property
    def information_matrix(self) -> jnp.ndarray:
        return self.store.omega

    @property
    def information_vector(self) -> jnp.ndarray:
        return self.store.xi

    def __contains__(self, node_id) -> bool:
        return node_id in self.index

    def index_block(self, node_id: NodeId) -> IndexBlock:
        """Coordinate block of a registered node; ``KeyError`` if unknown."""
        return self.index.block(node_id)

    # --- Mutation ---

    def register_anchor(self, node_id: NodeId, value) -> None:
        """
        Fix the reference frame by anchoring ``node_id`` at ``value`` with
        identity information. Allowed exactly once per session.
        """
        if self.is_initialized:
            raise DoubleInitializationError(
                "state already anchored; the reference frame cannot be re-fixed"
            )
        value = as_vector(value, self.dimension)
        self.index.register_anchor(node_id, value)
        logger.debug("registered anchor %s", node_id)

    def add_transition(self, id1: NodeId, id2: NodeId, offset) -> None:
        """Record the observation ``x(id2) = x(id1) + offset``."""
        self.constraints.add_transition(id1, id2, offset)

    def add_landmark_observation(self, point_id: NodeId, landmark_id: NodeId, distance) -> None:
        """Record that ``landmark_id`` lies at ``distance`` from ``point_id``."""
        self.constraints.add_landmark_observation(point_id, landmark_id, distance)

    # --- Estimation ---

    def estimate_state(self) -> jnp.ndarray:
        """
        Solve the current system and return the flat state vector μ.

        Block ``index_block(nid)`` of the result holds node ``nid``. Raises
        `SingularSystemError` if any node has no chain of constraints back to
        the anchor, since Ω is then not invertible.
        """
        if not self.is_initialized:
            raise NotInitializedError("no anchor registered; nothing to estimate")
        detached = self.index.unanchored_nodes()
        if detached:
            raise SingularSystemError(
                f"{len(detached)} node(s) not connected to the anchor, e.g. {detached[:5]}"
            )
        return solve_information(self.store.omega, self.store.xi, self.solve_config)

    def estimate(self) -> Dict[NodeId, jnp.ndarray]:
        """
        Solve the current system and return the value of every node.

        Read-only: Ω and ξ are left untouched, so this may be called any
        number of times between (and interleaved with) further observations.
        """
        mu = self.estimate_state()
        return {nid: mu[blk.as_slice()] for nid, blk in self.index.items()}

    def snapshot_state(self) -> Dict[int, List[float]]:
        """Current estimate as plain ``{int: [float, ...]}`` for serialization."""
        return {
            int(nid): [float(v) for v in value]
            for nid, value in self.estimate().items()
        }
