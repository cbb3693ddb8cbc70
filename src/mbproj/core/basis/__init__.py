from mbproj.core.basis.protocols import BasisProto
from mbproj.core.basis.types import (
    Basis,
    CompositeBasis,
    FockBasis,
    GenericBasis,
    ManyBodyBasis,
    PositionBasis,
    SpinBasis,
    Statistics,
    SubspaceBasis,
    as_statistics,
    check_samebases,
    factors,
    samebases,
)

__all__ = [
    "BasisProto",
    "Basis",
    "CompositeBasis",
    "FockBasis",
    "GenericBasis",
    "ManyBodyBasis",
    "PositionBasis",
    "SpinBasis",
    "Statistics",
    "SubspaceBasis",
    "as_statistics",
    "check_samebases",
    "factors",
    "samebases",
]
