# Copyright (c) 2025.
# This file is part of infoslam, released under the MIT License.
"""
Core typed data structures for infoslam.

This module defines the lightweight value types shared by the state index,
the information store and the session API. They carry only structural
information; all numerical work is done on JAX arrays held by
`core.information.InformationStore`.

Types
-----
NodeId
    Caller-chosen integer naming a pose or a landmark. Poses and landmarks
    share one identifier space and are indistinguishable to the core.

IndexBlock
    The contiguous range of state coordinates owned by one node:
    - start: first coordinate in Ω / ξ
    - dim:   number of coordinates (the session dimension k)

Notes
-----
Blocks are assigned in first-seen order and are never reused, compacted or
shrunk, so an `IndexBlock` handed out once stays valid for the lifetime of
the session.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import NewType

import jax.numpy as jnp

NodeId = NewType("NodeId", int)


@dataclass(frozen=True)
class IndexBlock:
    """Contiguous block of ``dim`` state coordinates starting at ``start``."""
    start: int
    dim: int

    @property
    def stop(self) -> int:
        return self.start + self.dim

    def as_slice(self) -> slice:
        return slice(self.start, self.stop)

    def indices(self) -> jnp.ndarray:
        """Integer coordinates of the block, usable as a JAX gather/scatter index."""
        return jnp.arange(self.start, self.stop)
