from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LiftOptions:
    """
    Controls the many-body lift.

    - sparse: return a CSR operator (True) or a dense ndarray-backed one.
    - atol: one-/two-body matrix elements with |A_st| <= atol are skipped.
    """

    sparse: bool = True
    atol: float = 0.0


@dataclass(frozen=True)
class EigenOptions:
    hermitian_atol: float = 1e-10
    # replace A by (A + A^dagger)/2 when it is not Hermitian within tolerance
    symmetrize: bool = True


@dataclass(frozen=True)
class AuditOptions:
    top_entries: int = 6
    check_hermitian: bool = True
    hermitian_atol: float = 1e-10
