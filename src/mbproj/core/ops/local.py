from __future__ import annotations

from typing import Callable, Union

import numpy as np
import scipy.sparse as sp

from mbproj.core.basis.types import FockBasis, PositionBasis, SpinBasis
from mbproj.core.errors import BasisMismatchError
from mbproj.core.ops.types import Operator

# ---- Fock ------------------------------------------------------------------


def destroy(b: FockBasis) -> Operator:
    n = np.arange(1, b.dim, dtype=float)
    data = sp.diags(np.sqrt(n), offsets=1, shape=(b.dim, b.dim), format="csr")
    return Operator(b, b, data)


def create(b: FockBasis) -> Operator:
    n = np.arange(1, b.dim, dtype=float)
    data = sp.diags(np.sqrt(n), offsets=-1, shape=(b.dim, b.dim), format="csr")
    return Operator(b, b, data)


def number(b: FockBasis) -> Operator:
    data = sp.diags(np.arange(b.dim, dtype=float), format="csr")
    return Operator(b, b, data)


# ---- Spin (ordering m = s, ..., -s) -----------------------------------------


def jz(b: SpinBasis) -> Operator:
    return Operator(b, b, sp.diags(b.m_values(), format="csr"))


def jp(b: SpinBasis) -> Operator:
    # J+ |m> = sqrt(s(s+1) - m(m+1)) |m+1>, and m+1 sits one index up
    s = float(b.spin)
    m = b.m_values()[1:]
    amp = np.sqrt(s * (s + 1.0) - m * (m + 1.0))
    return Operator(b, b, sp.diags(amp, offsets=1, shape=(b.dim, b.dim), format="csr"))


def jm(b: SpinBasis) -> Operator:
    up = jp(b)
    return Operator(b, b, up.data.conj().T)


def jx(b: SpinBasis) -> Operator:
    return Operator(b, b, 0.5 * (jp(b).data + jm(b).data))


def jy(b: SpinBasis) -> Operator:
    return Operator(b, b, -0.5j * (jp(b).data - jm(b).data))


def _check_half(b: SpinBasis) -> None:
    if b.dim != 2:
        raise BasisMismatchError(f"Pauli operators need spin 1/2, got spin {b.spin}")


def sigmax(b: SpinBasis) -> Operator:
    _check_half(b)
    return Operator(b, b, 2.0 * jx(b).data)


def sigmay(b: SpinBasis) -> Operator:
    _check_half(b)
    return Operator(b, b, 2.0 * jy(b).data)


def sigmaz(b: SpinBasis) -> Operator:
    _check_half(b)
    return Operator(b, b, 2.0 * jz(b).data)


def sigmap(b: SpinBasis) -> Operator:
    _check_half(b)
    return jp(b)


def sigmam(b: SpinBasis) -> Operator:
    _check_half(b)
    return jm(b)


# ---- Position grid ----------------------------------------------------------


def position(b: PositionBasis) -> Operator:
    return Operator(b, b, sp.diags(b.points(), format="csr"))


def potential(
    b: PositionBasis, V: Union[Callable[[np.ndarray], np.ndarray], np.ndarray]
) -> Operator:
    """Diagonal operator V(x) sampled on the grid."""
    x = b.points()
    v = V(x) if callable(V) else V
    v = np.asarray(v, dtype=complex).reshape(-1)
    if v.shape[0] != b.dim:
        raise BasisMismatchError(f"Potential has {v.shape[0]} samples, grid has {b.dim}")
    return Operator(b, b, sp.diags(v, format="csr"))


def kinetic(b: PositionBasis, *, mass: float = 1.0, hbar: float = 1.0) -> Operator:
    """
    -hbar^2/(2m) d^2/dx^2 with the three-point stencil and hard walls
    just outside the grid.
    """
    n = b.dim
    dx = b.spacing
    main = -2.0 * np.ones(n)
    off = np.ones(n - 1)
    lap = sp.diags([off, main, off], offsets=[-1, 0, 1], shape=(n, n), format="csr")
    pref = -(float(hbar) ** 2) / (2.0 * float(mass) * dx * dx)
    return Operator(b, b, pref * lap)
