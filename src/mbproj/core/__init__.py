from mbproj.core.errors import (
    BasisMismatchError,
    ConfigurationError,
    MBProjError,
    NumericalWarning,
)
from mbproj.core.options import AuditOptions, EigenOptions, LiftOptions

__all__ = [
    "AuditOptions",
    "BasisMismatchError",
    "ConfigurationError",
    "EigenOptions",
    "LiftOptions",
    "MBProjError",
    "NumericalWarning",
]
