# Copyright (c) 2025.
# This file is part of infoslam, released under the MIT License.
"""
Constraint accumulation into the information form.

`ConstraintAccumulator` turns "x(id2) = x(id1) + offset" observations into
additive updates on an `InformationStore`, resolving (and, for unseen ids,
allocating) coordinates through a `StateIndex`.

Constraints are consumed immediately: nothing about an observation is kept
besides its contribution to Ω and ξ. Repeated observations between the same
pair therefore simply add up, which raises the information on that
relation without moving the maximum-likelihood point when the data agree.

Landmarks are not special. An observation of landmark ``l`` from pose ``p``
at ``distance`` is the transition ``p -> l`` by ``distance``.
"""

from __future__ import annotations

from infoslam.core.errors import NotInitializedError
from infoslam.core.state_index import StateIndex
from infoslam.core.types import NodeId
from .measurements import as_vector, relative_offset_information


class ConstraintAccumulator:
    """Apply relative-offset constraints to the store behind ``index``."""

    def __init__(self, index: StateIndex) -> None:
        self.index = index

    @property
    def dimension(self) -> int:
        return self.index.dimension

    def add_transition(self, id1: NodeId, id2: NodeId, offset) -> None:
        """
        Add the constraint ``x(id2) = x(id1) + offset``.

        Both checks run before any id is resolved, so a rejected call
        allocates nothing.
        """
        if not self.index.is_initialized:
            raise NotInitializedError(
                "no anchor registered; register one before adding constraints"
            )
        offset = as_vector(offset, self.dimension)

        b1 = self.index.resolve(id1)
        b2 = self.index.resolve(id2)
        self.index.link(id1, id2)

        contrib = relative_offset_information(offset)
        self.index.store.accumulate(
            b1.indices(),
            b2.indices(),
            contrib.diag,
            contrib.cross,
            contrib.xi_first,
            contrib.xi_second,
        )

    def add_landmark_observation(self, point_id: NodeId, landmark_id: NodeId, distance) -> None:
        self.add_transition(point_id, landmark_id, distance)
