from __future__ import annotations


class MBProjError(Exception):
    """Base class for all mbproj errors."""


class BasisMismatchError(MBProjError, ValueError):
    """
    Operand bases are incompatible.

    Raised when dimensions disagree or when two bases that must be identical
    (e.g. the right basis of A and the left basis of B in A @ B) are not.
    """


class ConfigurationError(MBProjError, ValueError):
    """
    Invalid setup: particle numbers, statistics, empty or linearly dependent
    subspaces, out-of-range model parameters.
    """


class NumericalWarning(UserWarning):
    """Non-fatal numerical correction (e.g. symmetrizing a non-Hermitian operator)."""
