"""
Interacting particles in a one-dimensional double well.

Workflow: grid Hamiltonian -> lowest single-particle eigenstates as a
subspace -> project the one-body Hamiltonian and the Coulomb pair
interaction onto it -> lift both onto the many-body occupation basis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import scipy.sparse as sp

from mbproj.core.basis.types import (
    CompositeBasis,
    ManyBodyBasis,
    PositionBasis,
    Statistics,
    StatisticsLike,
    SubspaceBasis,
    as_statistics,
)
from mbproj.core.errors import ConfigurationError
from mbproj.core.manybody.lift import manybodyoperator
from mbproj.core.manybody.occupations import manybody_basis
from mbproj.core.ops.algebra import add, eigenstates, scale
from mbproj.core.ops.local import kinetic, potential
from mbproj.core.ops.types import Operator
from mbproj.core.options import LiftOptions
from mbproj.core.subspace.projector import project_operator
from mbproj.core.units import UnitSystem

log = logging.getLogger(__name__)


def coulomb_interaction(
    b: PositionBasis, strength: float = 1.0
) -> Operator:
    """
    Pair interaction strength / |x1 - x2| on b (x) b, diagonal in position.

    The x1 == x2 entries, where 1/r diverges, take the value at one grid
    spacing.
    """
    x = b.points()
    r = np.abs(x[:, None] - x[None, :])
    r[r == 0.0] = b.spacing
    diag = (float(strength) / r).ravel()
    pair = CompositeBasis((b, b))
    return Operator(pair, pair, sp.diags(diag.astype(complex), format="csr"))


@dataclass(frozen=True)
class DoubleWellSystem:
    grid: PositionBasis
    H_onebody: Operator
    energies: np.ndarray
    subspace: SubspaceBasis
    H_sub: Operator
    V_sub: Operator
    manybody: ManyBodyBasis
    H: Operator


@dataclass(frozen=True)
class DoubleWellModel:
    """
    V(x) = V0 * ((x / a)^2 - 1)^2 on [-L, L].

    Lengths accept nm or pint quantities, energies meV or quantities, the
    mass electron masses or a quantity (see UnitSystem). `nstates` lowest
    single-particle states span the subspace; `interaction` switches the
    Coulomb term on.
    """

    half_width: Any = 40.0
    well_offset: Any = 15.0
    barrier: Any = 20.0
    mass: Any = 0.067
    npoints: int = 128
    nstates: int = 4
    nparticles: int = 2
    statistics: StatisticsLike = Statistics.BOSONS
    interaction: bool = True
    relative_permittivity: float = 12.9
    units: UnitSystem = field(default_factory=UnitSystem)
    lift_options: LiftOptions = field(default_factory=LiftOptions)

    def __post_init__(self) -> None:
        if int(self.nstates) < 1 or int(self.nstates) > int(self.npoints):
            raise ConfigurationError(
                f"nstates must be in [1, npoints], got {self.nstates}"
            )
        if float(self.relative_permittivity) <= 0.0:
            raise ConfigurationError("relative_permittivity must be positive")
        object.__setattr__(self, "statistics", as_statistics(self.statistics))

    def grid(self) -> PositionBasis:
        L = self.units.length_to_solver(self.half_width)
        return PositionBasis(-L, L, int(self.npoints))

    def potential_fn(self, x: np.ndarray) -> np.ndarray:
        a = self.units.length_to_solver(self.well_offset)
        V0 = self.units.energy_to_solver(self.barrier)
        return V0 * ((x / a) ** 2 - 1.0) ** 2

    def hamiltonian_onebody(self) -> Operator:
        b = self.grid()
        # kinetic(mass=1/2, hbar=1) is -d^2/dx^2
        T = scale(self.units.kinetic_scale(self.mass), kinetic(b, mass=0.5))
        return add(T, potential(b, self.potential_fn))

    def interaction_operator(self) -> Operator:
        b = self.grid()
        return coulomb_interaction(
            b, self.units.coulomb_scale(self.relative_permittivity)
        )

    def build(self) -> DoubleWellSystem:
        b = self.grid()
        H1 = self.hamiltonian_onebody()
        energies, kets = eigenstates(H1, int(self.nstates))
        sub = SubspaceBasis(b, tuple(kets))
        H_sub = project_operator(sub, H1)

        pair = CompositeBasis((sub, sub))
        if self.interaction:
            V_sub = project_operator(pair, self.interaction_operator())
        else:
            V_sub = Operator(pair, pair, sp.csr_matrix((pair.dim, pair.dim), dtype=complex))

        mb = manybody_basis(sub, int(self.nparticles), self.statistics)
        H_mb = manybodyoperator(mb, H_sub, options=self.lift_options)
        if self.interaction and int(self.nparticles) >= 2:
            # each unordered pair appears twice in the two-body sum
            V_mb = manybodyoperator(mb, scale(0.5, V_sub), options=self.lift_options)
            H_mb = add(H_mb, V_mb)

        log.debug(
            "Double well: grid=%d subspace=%d many-body dim=%d",
            b.dim,
            sub.dim,
            mb.dim,
        )
        return DoubleWellSystem(
            grid=b,
            H_onebody=H1,
            energies=energies,
            subspace=sub,
            H_sub=H_sub,
            V_sub=V_sub,
            manybody=mb,
            H=H_mb,
        )

    def ground_state_energy(self) -> float:
        system = self.build()
        vals, _ = eigenstates(system.H, 1)
        return float(vals[0])
