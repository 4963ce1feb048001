# Copyright (c) 2025.
# This file is part of infoslam, released under the MIT License.
"""
Information-form storage for GraphSLAM.

This module owns the two arrays that make up the canonical (precision)
parameterization of the Gaussian belief over every node value:

    Ω  (omega) : (n, n) symmetric information matrix
    ξ  (xi)    : (n,)   information vector

Contributions from independent constraints combine by plain addition,
so the store only ever needs three primitives:

seed(value)
    Start the store from the anchor prior: Ω = I(k), ξ = value.

expand(by)
    Grow Ω to (n+by, n+by) and ξ to (n+by,), copying every existing entry
    and zero-filling the new rows, columns and entries.

accumulate(i, j, diag, cross, xi_i, xi_j)
    Add the symmetric pattern

        Ω[i,i] += diag   Ω[i,j] += cross
        Ω[j,i] += cross  Ω[j,j] += diag
        ξ[i]   += xi_i   ξ[j]   += xi_j

    where ``i`` and ``j`` may be equally sized integer index arrays, in
    which case the pattern is applied element-wise (one scalar relation per
    coordinate pair).

Notes
-----
JAX arrays are immutable, so "in place" here means the store rebinds its
``omega`` / ``xi`` attributes to the updated arrays. Anything that captured
an older array (e.g. a previous `estimate`) is never affected.

No bounds checking is done: indices are produced by `core.state_index`.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

import jax.numpy as jnp

logger = logging.getLogger(__name__)


@dataclass
class InformationStore:
    """Square information matrix and its paired vector, grown on demand."""
    omega: jnp.ndarray = field(default_factory=lambda: jnp.zeros((0, 0)))
    xi: jnp.ndarray = field(default_factory=lambda: jnp.zeros((0,)))

    @property
    def size(self) -> int:
        return int(self.xi.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    def seed(self, value: jnp.ndarray) -> None:
        """Initialize from an anchor prior with identity information."""
        value = jnp.asarray(value, dtype=jnp.result_type(float))
        k = value.shape[0]
        self.omega = jnp.eye(k, dtype=value.dtype)
        self.xi = value
        logger.debug("seeded information store with %d-dimensional anchor", k)

    def expand(self, by: int) -> None:
        n = self.size
        new_n = n + by

        omega = jnp.zeros((new_n, new_n), dtype=self.omega.dtype)
        xi = jnp.zeros((new_n,), dtype=self.xi.dtype)

        self.omega = omega.at[:n, :n].set(self.omega)
        self.xi = xi.at[:n].set(self.xi)
        logger.debug("expanded information store %d -> %d", n, new_n)

    def accumulate(
        self,
        i: jnp.ndarray,
        j: jnp.ndarray,
        diag,
        cross,
        xi_i,
        xi_j,
    ) -> None:
        # Scatter-adds accumulate duplicates, so i == j is handled correctly.
        omega = self.omega
        omega = omega.at[i, i].add(diag)
        omega = omega.at[i, j].add(cross)
        omega = omega.at[j, i].add(cross)
        omega = omega.at[j, j].add(diag)

        xi = self.xi
        xi = xi.at[i].add(xi_i)
        xi = xi.at[j].add(xi_j)

        self.omega = omega
        self.xi = xi
