from mbproj.core import (
    AuditOptions,
    BasisMismatchError,
    ConfigurationError,
    EigenOptions,
    LiftOptions,
    MBProjError,
    NumericalWarning,
)
from mbproj.core.basis import (
    CompositeBasis,
    FockBasis,
    GenericBasis,
    ManyBodyBasis,
    PositionBasis,
    SpinBasis,
    Statistics,
    SubspaceBasis,
)
from mbproj.core.manybody import (
    bosonstates,
    fermionstates,
    manybody_basis,
    manybodyoperator,
)
from mbproj.core.ops import Ket, Operator
from mbproj.core.subspace import (
    embed_operator,
    embed_state,
    orthonormalize,
    project_operator,
    project_state,
    projector,
)

__version__ = "0.1.0"

__all__ = [
    "AuditOptions",
    "BasisMismatchError",
    "ConfigurationError",
    "EigenOptions",
    "LiftOptions",
    "MBProjError",
    "NumericalWarning",
    "CompositeBasis",
    "FockBasis",
    "GenericBasis",
    "ManyBodyBasis",
    "PositionBasis",
    "SpinBasis",
    "Statistics",
    "SubspaceBasis",
    "bosonstates",
    "fermionstates",
    "manybody_basis",
    "manybodyoperator",
    "Ket",
    "Operator",
    "embed_operator",
    "embed_state",
    "orthonormalize",
    "project_operator",
    "project_state",
    "projector",
]
