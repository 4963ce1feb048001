# Copyright (c) 2025.
# This file is part of infoslam, released under the MIT License.
"""
Linear relative-offset measurement model.

Every observation infoslam understands has the same form:

    x2 = x1 + offset          (x1, x2, offset ∈ ℝᵏ)

whether it relates two consecutive poses (a transition) or a pose and a
landmark (a landmark observation). With unit information per coordinate,
the Gaussian factor

    ½ ‖(x2 − x1) − offset‖²

contributes, for each coordinate m independently,

    Ω[1,1] += 1    Ω[1,2] −= 1
    Ω[2,1] −= 1    Ω[2,2] += 1
    ξ[1]   −= offset_m
    ξ[2]   += offset_m

to the information form. This module holds that contribution, the matching
residual, and the vector validation shared by every public entry point.
"""

from __future__ import annotations
from typing import Dict, NamedTuple

import jax.numpy as jnp

from infoslam.core.errors import DimensionMismatchError


class InformationContribution(NamedTuple):
    """Additive update for one relation, in `InformationStore.accumulate` order."""
    diag: jnp.ndarray
    cross: jnp.ndarray
    xi_first: jnp.ndarray
    xi_second: jnp.ndarray


def as_vector(value, dim: int) -> jnp.ndarray:
    """
    Coerce ``value`` to a float vector of length ``dim``.

    Scalars are accepted when ``dim == 1``. Anything else whose shape is not
    ``(dim,)`` raises `DimensionMismatchError`.
    """
    v = jnp.asarray(value, dtype=jnp.result_type(float))
    if v.ndim == 0:
        v = jnp.reshape(v, (1,))
    if v.shape != (dim,):
        raise DimensionMismatchError(dim, tuple(v.shape))
    return v


def relative_offset_information(offset: jnp.ndarray) -> InformationContribution:
    """Unit-weight information contribution of ``x2 − x1 = offset``."""
    ones = jnp.ones_like(offset)
    return InformationContribution(
        diag=ones,
        cross=-ones,
        xi_first=-offset,
        xi_second=offset,
    )


def relative_offset_residual(x: jnp.ndarray, params: Dict[str, jnp.ndarray]) -> jnp.ndarray:
    """
    Residual of the relation on a stacked state:

        x = [x1, x2]
        residual = (x2 - x1) - offset
    """
    dim = x.shape[0] // 2
    x1 = x[:dim]
    x2 = x[dim:]
    return (x2 - x1) - params["offset"]
