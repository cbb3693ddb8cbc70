from mbproj.models.doublewell import DoubleWellModel, DoubleWellSystem, coulomb_interaction
from mbproj.models.kickedtop import KickedTopModel

__all__ = ["DoubleWellModel", "DoubleWellSystem", "KickedTopModel", "coulomb_interaction"]
