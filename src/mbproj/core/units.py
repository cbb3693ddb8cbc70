from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, cast

import numpy as np
import pint
from pint import DimensionalityError

ureg = pint.UnitRegistry()


class QuantityLike(Protocol):
    @property
    def magnitude(self) -> Any: ...
    @property
    def units(self) -> Any: ...
    def to_base_units(self) -> QuantityLike: ...
    def to(self, unit: str) -> QuantityLike: ...
    def __mul__(self, other: Any) -> QuantityLike: ...
    def __rmul__(self, other: Any) -> QuantityLike: ...
    def __truediv__(self, other: Any) -> QuantityLike: ...
    def __rtruediv__(self, other: Any) -> QuantityLike: ...
    def __pow__(self, other: Any) -> QuantityLike: ...


def Q(value: Any, units: str) -> QuantityLike:
    """Create a quantity (or cast existing) in a single registry."""
    return cast(QuantityLike, ureg.Quantity(value, units))


def as_quantity(x: Any, units: str) -> QuantityLike:
    """
    Coerce x to a pint quantity with given units and verify compatibility.
    - bare numbers: interpreted as `units`
    - pint quantities: converted to `units` (raises if incompatible)
    """
    q = x if hasattr(x, "to") else Q(float(x), units)
    try:
        return cast(QuantityLike, q.to(units))
    except DimensionalityError as e:
        raise TypeError(
            f"Incompatible units: got {getattr(q, 'units', None)}, expected {units}"
        ) from e


def magnitude(x: Any, units: str) -> float:
    """Return float magnitude in requested units (with compatibility check)."""
    q = as_quantity(x, units)
    return float(q.to(units).magnitude)


# CONSTANTS
hbar = Q(1.054571817e-34, "J*s")
e = Q(1.602176634e-19, "C")
epsilon_0 = Q(8.8541878128e-12, "F/m")
m_e = Q(9.1093837015e-31, "kg")


@dataclass(frozen=True)
class UnitSystem:
    """
    Normalization policy for lowering unitful model parameters into solver
    units.

    Convention:
    - lengths: x_solver = x_m / length_unit_m
    - energies: E_solver = E_J / energy_unit_J
    - bare numbers passed to the *_to_solver helpers are taken to be in nm
      (lengths), meV (energies) and electron masses (masses).
    """

    length_unit_m: float = 1e-9
    energy_unit_J: float = 1.602176634e-22

    def length_to_solver(self, x: Any) -> float:
        return magnitude(as_quantity(x, "nm"), "m") / self.length_unit_m

    def energy_to_solver(self, E: Any) -> float:
        return magnitude(as_quantity(E, "meV"), "J") / self.energy_unit_J

    def mass_to_kg(self, m: Any) -> float:
        if hasattr(m, "to"):
            return magnitude(m, "kg")
        return float(m) * magnitude(m_e, "kg")

    def kinetic_scale(self, mass: Any) -> float:
        """hbar^2 / (2 m L^2) in solver energy units."""
        hb = magnitude(hbar, "J*s")
        L = self.length_unit_m
        return hb * hb / (2.0 * self.mass_to_kg(mass) * L * L) / self.energy_unit_J

    def coulomb_scale(self, relative_permittivity: float = 1.0) -> float:
        """e^2 / (4 pi eps0 eps_r L) in solver energy units."""
        q = magnitude(e, "C")
        eps = magnitude(epsilon_0, "F/m") * float(relative_permittivity)
        return q * q / (4.0 * np.pi * eps * self.length_unit_m) / self.energy_unit_J
