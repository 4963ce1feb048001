# Copyright (c) 2025.
# This file is part of infoslam, released under the MIT License.
"""
infoslam: incremental GraphSLAM in information form.

Poses and landmarks are k-dimensional nodes linked by relative-offset
observations ``x2 = x1 + offset``. Observations are folded into an
information matrix / vector as they arrive; `GraphSLAM.estimate` solves the
accumulated linear system on demand.
"""

from infoslam.core.errors import (
    DimensionMismatchError,
    DoubleInitializationError,
    GraphSLAMError,
    NotInitializedError,
    SingularSystemError,
    SolverConvergenceError,
)
from infoslam.core.types import IndexBlock, NodeId
from infoslam.optimization.solvers import SolveConfig
from infoslam.world.model import GraphSLAM

__all__ = [
    "GraphSLAM",
    "SolveConfig",
    "NodeId",
    "IndexBlock",
    "GraphSLAMError",
    "DoubleInitializationError",
    "NotInitializedError",
    "DimensionMismatchError",
    "SingularSystemError",
    "SolverConvergenceError",
]

__version__ = "0.1.0"
