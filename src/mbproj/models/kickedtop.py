from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Any

import numpy as np
from scipy.linalg import expm

from mbproj.core.basis.types import SpinBasis
from mbproj.core.errors import ConfigurationError
from mbproj.core.ops.algebra import apply, basisstate, compose, expect
from mbproj.core.ops.local import jx, jy, jz
from mbproj.core.ops.types import Ket, Operator


@dataclass(frozen=True)
class KickedTopModel:
    """
    Periodically kicked top with Floquet operator

        U = exp(-i k Jz^2 / (2 j)) exp(-i p Jy)

    j: spin quantum number, k: kick strength (chaoticity), p: rotation angle
    per period.
    """

    j: Any = 10
    k: float = 3.0
    p: float = np.pi / 2

    def __post_init__(self) -> None:
        s = Fraction(self.j)
        if s <= 0 or (2 * s).denominator != 1:
            raise ConfigurationError(f"j must be a positive (half-)integer, got {self.j}")

    @property
    def basis(self) -> SpinBasis:
        return SpinBasis(Fraction(self.j))

    def floquet(self) -> Operator:
        b = self.basis
        Jz = jz(b).toarray()
        Jy = jy(b).toarray()
        j = float(b.spin)
        kick = expm(-1j * float(self.k) / (2.0 * j) * (Jz @ Jz))
        rotation = expm(-1j * float(self.p) * Jy)
        return Operator(b, b, kick @ rotation)

    def quasienergies(self) -> np.ndarray:
        """Quasienergies -arg(lambda) of the Floquet eigenvalues, in [-pi, pi) and sorted."""
        vals = np.linalg.eigvals(self.floquet().toarray())
        return np.sort(-np.angle(vals))

    def spin_coherent_state(self, theta: float, phi: float) -> Ket:
        """
        |theta, phi> = exp(i theta (Jx sin(phi) - Jy cos(phi))) |j, m=j>

        <J>/j points along (sin theta cos phi, sin theta sin phi, cos theta).
        """
        b = self.basis
        gen = np.sin(phi) * jx(b).toarray() - np.cos(phi) * jy(b).toarray()
        R = Operator(b, b, expm(1j * float(theta) * gen))
        return apply(R, basisstate(b, 0))

    def stroboscopic(self, psi0: Ket, nkicks: int) -> np.ndarray:
        """
        <Jx>/j, <Jy>/j, <Jz>/j after 0..nkicks periods, shape (nkicks + 1, 3).
        """
        if int(nkicks) < 0:
            raise ConfigurationError(f"nkicks must be >= 0, got {nkicks}")
        b = self.basis
        U = self.floquet()
        ops = (jx(b), jy(b), jz(b))
        j = float(b.spin)

        out = np.empty((int(nkicks) + 1, 3), dtype=float)
        psi = psi0
        for n in range(int(nkicks) + 1):
            if n:
                psi = apply(U, psi)
            out[n] = [expect(op, psi).real / j for op in ops]
        return out

    def floquet_power(self, n: int) -> Operator:
        """U^n"""
        if int(n) < 0:
            raise ConfigurationError(f"n must be >= 0, got {n}")
        U = self.floquet()
        out = Operator(U.basis_l, U.basis_r, np.eye(U.basis_l.dim, dtype=complex))
        for _ in range(int(n)):
            out = compose(out, U)
        return out
