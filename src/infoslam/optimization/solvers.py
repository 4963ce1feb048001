# Copyright (c) 2025.
# This file is part of infoslam, released under the MIT License.
"""
Linear solvers for the information form.

Recovering the maximum-likelihood state from an information matrix Ω and
vector ξ is a single linear solve:

    Ω μ = ξ

Because every infoslam constraint is linear, no iteration over
linearization points is needed; the solve is exact up to floating
round-off.

Key Concepts
------------
SolveConfig
    Dataclass holding solver configuration:
    - method: "lu" | "cholesky" | "cg"
    - rcond: relative singular-value tolerance for the singularity check
    - check_singular: whether to run that check before solving (off by
      default; the session decides singularity from graph connectivity)
    - cg_tol / cg_atol / cg_max_iters: conjugate-gradient stopping rule

solve_information(omega, xi, cfg)
    Optionally checks conditioning, solves with the configured method, and
    returns μ. Raises `SingularSystemError` if the check fails or the solve
    produced non-finite values, and `SolverConvergenceError` if "cg" stops
    short of its tolerance.

Methods
-------
"lu"
    Dense `jnp.linalg.solve`. The default.

"cholesky"
    `jax.scipy.linalg.cho_factor` / `cho_solve`. Valid because an anchored
    Ω is symmetric positive definite; roughly half the cost of LU.

"cg"
    `jax.scipy.sparse.linalg.cg`, an iterative alternative for large
    sessions. JAX reports no convergence flag, so the true residual
    ‖Ω μ − ξ‖ is checked afterwards against
    ``max(cg_tol · (‖Ω‖ ‖μ‖ + ‖ξ‖), cg_atol)``.

Notes
-----
The optional singularity test compares the smallest singular value against
``rcond * σ_max``. With ``rcond=None`` the tolerance is ``n * eps`` of the
array dtype, the same default numpy uses for `matrix_rank`. Anchored chains
become ill-conditioned quadratically in their length, so in float32 this
test rejects long but perfectly well-posed graphs; it is off by default.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

import jax.numpy as jnp
import jax.scipy.linalg as jsl
from jax.scipy.sparse.linalg import cg

from infoslam.core.errors import SingularSystemError, SolverConvergenceError

logger = logging.getLogger(__name__)

SOLVE_METHODS = ("lu", "cholesky", "cg")


@dataclass
class SolveConfig:
    method: str = "lu"
    rcond: Optional[float] = None
    check_singular: bool = False
    cg_tol: float = 1e-5
    cg_atol: float = 0.0
    cg_max_iters: Optional[int] = None

    def __post_init__(self) -> None:
        if self.method not in SOLVE_METHODS:
            raise ValueError(
                f"Unknown solve method '{self.method}', expected one of {SOLVE_METHODS}"
            )


def singular_tolerance(omega: jnp.ndarray, rcond: Optional[float] = None) -> float:
    """Relative tolerance below which a singular value counts as zero."""
    if rcond is not None:
        return float(rcond)
    n = omega.shape[0]
    return float(n * jnp.finfo(omega.dtype).eps)


def is_singular(omega: jnp.ndarray, rcond: Optional[float] = None) -> bool:
    """
    True if Ω is numerically singular.

    Singular values come back sorted in descending order, so s[0] is σ_max
    and s[-1] is σ_min.
    """
    if omega.shape[0] == 0:
        return True
    s = jnp.linalg.svd(omega, compute_uv=False)
    s_max = float(s[0])
    if s_max == 0.0:
        return True
    return float(s[-1]) <= singular_tolerance(omega, rcond) * s_max


def _check_converged(omega, xi, mu, cfg: SolveConfig) -> None:
    residual = float(jnp.linalg.norm(omega @ mu - xi))
    # Normwise backward error; float rounding alone leaves ~eps·‖Ω‖‖μ‖.
    scale = float(jnp.linalg.norm(omega)) * float(jnp.linalg.norm(mu)) + float(jnp.linalg.norm(xi))
    bound = max(cfg.cg_tol * scale, cfg.cg_atol)
    if not residual <= bound:
        raise SolverConvergenceError(
            f"cg stopped with residual {residual:.3e} above tolerance {bound:.3e}"
        )


def solve_information(
    omega: jnp.ndarray,
    xi: jnp.ndarray,
    cfg: Optional[SolveConfig] = None,
) -> jnp.ndarray:
    """
    Solve Ω μ = ξ for μ.

    omega: (n, n) symmetric information matrix
    xi:    (n,)   information vector

    Returns μ with shape (n,). Neither input is modified.
    """
    if cfg is None:
        cfg = SolveConfig()

    if cfg.check_singular and is_singular(omega, cfg.rcond):
        raise SingularSystemError(
            "information matrix is singular; some component of the "
            "constraint graph has no anchor"
        )

    if cfg.method == "lu":
        mu = jnp.linalg.solve(omega, xi)
    elif cfg.method == "cholesky":
        c_and_lower = jsl.cho_factor(omega)
        mu = jsl.cho_solve(c_and_lower, xi)
    else:
        # cg stops on its recursive residual, which drifts from the true one;
        # aim a decade below the tolerance the result is checked against.
        mu, _ = cg(
            omega, xi, tol=0.1 * cfg.cg_tol, atol=0.1 * cfg.cg_atol, maxiter=cfg.cg_max_iters
        )
        _check_converged(omega, xi, mu, cfg)

    if not bool(jnp.all(jnp.isfinite(mu))):
        raise SingularSystemError("solve produced non-finite values")

    logger.debug("solved %dx%d information system with %s", omega.shape[0], omega.shape[0], cfg.method)
    return mu
