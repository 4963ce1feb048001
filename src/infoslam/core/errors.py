# Copyright (c) 2025.
# This file is part of infoslam, released under the MIT License.
"""
Exceptions raised by infoslam.

All errors are usage / consistency errors raised synchronously at the
offending call. Every check runs before any mutation, so a rejected call
leaves the session unchanged. Each class also derives from the nearest
builtin exception so callers may catch either.
"""

from __future__ import annotations


class GraphSLAMError(Exception):
    """Base class for all infoslam errors."""


class DoubleInitializationError(GraphSLAMError, RuntimeError):
    """An anchor was registered on a session that is already anchored."""


class NotInitializedError(GraphSLAMError, RuntimeError):
    """An operation that needs a reference frame was called before any anchor."""


class DimensionMismatchError(GraphSLAMError, ValueError):
    """A value or offset vector does not have the session dimension k."""

    def __init__(self, expected: int, got) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"expected a vector of length {expected}, got shape {got}")


class SingularSystemError(GraphSLAMError, ArithmeticError):
    """The information matrix is not invertible within tolerance.

    Typically some connected component of the constraint graph has no anchor.
    """


class SolverConvergenceError(SingularSystemError):
    """An iterative solve stopped before its residual met the tolerance.

    Subclasses `SingularSystemError` so callers handling a failed estimate
    need only one except clause.
    """
