"""
Second quantization of one- and two-body operators on a ManyBodyBasis.

Conventions:
- one-body:  A~ = sum_{s,t} A[s, t] c+_s c_t
- two-body:  A~ = sum_{s,k,t,l} <s k|A2|t l> c+_s c+_k c_l c_t  (no 1/2)
- fermionic sign: c+_s and c_s pick up (-1)^(number of occupied modes before s)
- bosonic factors: c_t |n> = sqrt(n_t) |n - e_t>,  c+_s |n> = sqrt(n_s + 1) |n + e_s>

Matrix elements are generated state by state: each basis state is hit with
the annihilators first and the creators after, and the resulting occupation
is looked up in the basis index. Only pairs connected by a one- (two-)
particle move are ever touched. States leaving the basis are dropped.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import scipy.sparse as sp

from mbproj.core.basis.types import (
    CompositeBasis,
    ManyBodyBasis,
    Occupation,
    Statistics,
    samebases,
)
from mbproj.core.errors import BasisMismatchError
from mbproj.core.ops.algebra import expect
from mbproj.core.ops.types import Ket, Operator
from mbproj.core.options import LiftOptions

log = logging.getLogger(__name__)

_Step = Optional[Tuple[Occupation, float]]


def _annihilate(occ: Occupation, t: int, fermions: bool) -> _Step:
    n = occ[t]
    if n == 0:
        return None
    new = occ[:t] + (n - 1,) + occ[t + 1 :]
    if fermions:
        return new, (-1.0 if sum(occ[:t]) % 2 else 1.0)
    return new, math.sqrt(n)


def _create(occ: Occupation, s: int, fermions: bool) -> _Step:
    n = occ[s]
    if fermions:
        if n:
            return None
        new = occ[:s] + (1,) + occ[s + 1 :]
        return new, (-1.0 if sum(occ[:s]) % 2 else 1.0)
    new = occ[:s] + (n + 1,) + occ[s + 1 :]
    return new, math.sqrt(n + 1)


class _Triplets:
    def __init__(self) -> None:
        self.rows: List[int] = []
        self.cols: List[int] = []
        self.vals: List[complex] = []

    def add(self, i: int, j: int, v: complex) -> None:
        self.rows.append(i)
        self.cols.append(j)
        self.vals.append(v)

    def to_operator(self, mb: ManyBodyBasis, options: LiftOptions) -> Operator:
        D = mb.dim
        mat = sp.coo_matrix(
            (
                np.asarray(self.vals, dtype=complex),
                (np.asarray(self.rows, dtype=np.int64), np.asarray(self.cols, dtype=np.int64)),
            ),
            shape=(D, D),
        ).tocsr()
        log.debug("Lifted operator: dim=%d nnz=%d", D, mat.nnz)
        if options.sparse:
            return Operator(mb, mb, mat)
        return Operator(mb, mb, mat.toarray())


def _nonzero_columns(A: np.ndarray, atol: float) -> Dict[int, List[Tuple[int, complex]]]:
    """column index -> [(row, value)] for |value| > atol"""
    out: Dict[int, List[Tuple[int, complex]]] = {}
    rows, cols = np.nonzero(np.abs(A) > atol)
    for r, c in zip(rows.tolist(), cols.tolist()):
        out.setdefault(c, []).append((r, complex(A[r, c])))
    return out


def _is_fermionic(mb: ManyBodyBasis) -> bool:
    return mb.statistics is Statistics.FERMIONS


def onebody_matrix_lift(
    mb: ManyBodyBasis, A: np.ndarray, *, options: Optional[LiftOptions] = None
) -> Operator:
    """Lift a raw (nmodes, nmodes) matrix; no basis checks beyond shape."""
    opt = options or LiftOptions()
    A = np.asarray(A, dtype=complex)
    n = mb.nmodes
    if A.shape != (n, n):
        raise BasisMismatchError(f"One-body matrix has shape {A.shape}, expected {(n, n)}")

    fermions = _is_fermionic(mb)
    by_col = _nonzero_columns(A, opt.atol)
    out = _Triplets()

    for j, occ in enumerate(mb.occupations):
        for t, entries in by_col.items():
            step1 = _annihilate(occ, t, fermions)
            if step1 is None:
                continue
            occ1, a1 = step1
            for s, A_st in entries:
                step2 = _create(occ1, s, fermions)
                if step2 is None:
                    continue
                occ2, a2 = step2
                i = mb.get(occ2)
                if i is None:
                    continue
                out.add(i, j, A_st * a1 * a2)

    return out.to_operator(mb, opt)


def twobody_matrix_lift(
    mb: ManyBodyBasis, A2: np.ndarray, *, options: Optional[LiftOptions] = None
) -> Operator:
    """
    Lift a raw (nmodes^2, nmodes^2) matrix with row index s*nmodes + k and
    column index t*nmodes + l.
    """
    opt = options or LiftOptions()
    A2 = np.asarray(A2, dtype=complex)
    n = mb.nmodes
    if A2.shape != (n * n, n * n):
        raise BasisMismatchError(
            f"Two-body matrix has shape {A2.shape}, expected {(n * n, n * n)}"
        )

    fermions = _is_fermionic(mb)
    by_col = _nonzero_columns(A2, opt.atol)
    out = _Triplets()

    for j, occ in enumerate(mb.occupations):
        for col, entries in by_col.items():
            t, l = divmod(col, n)
            step = _annihilate(occ, t, fermions)
            if step is None:
                continue
            occ1, a1 = step
            step = _annihilate(occ1, l, fermions)
            if step is None:
                continue
            occ2, a2 = step
            for row, val in entries:
                s, k = divmod(row, n)
                step = _create(occ2, k, fermions)
                if step is None:
                    continue
                occ3, a3 = step
                step = _create(occ3, s, fermions)
                if step is None:
                    continue
                occ4, a4 = step
                i = mb.get(occ4)
                if i is None:
                    continue
                out.add(i, j, val * a1 * a2 * a3 * a4)

    return out.to_operator(mb, opt)


def manybodyoperator(
    mb: ManyBodyBasis, op: Operator, *, options: Optional[LiftOptions] = None
) -> Operator:
    """
    Second-quantized form of `op` on `mb`.

    One-body lift if `op` acts on mb.onebodybasis, two-body lift if it acts on
    CompositeBasis((onebody, onebody)), nested or flattened the way `tensor`
    builds it.
    """
    ob = mb.onebodybasis
    if samebases(op.basis_l, ob) and samebases(op.basis_r, ob):
        return onebody_matrix_lift(mb, op.toarray(), options=options)

    pair = CompositeBasis((ob, ob))
    if samebases(op.basis_l, pair) and samebases(op.basis_r, pair):
        return twobody_matrix_lift(mb, op.toarray(), options=options)

    raise BasisMismatchError(
        f"Operator on ({op.basis_l!r}, {op.basis_r!r}) is neither one-body nor "
        f"two-body for one-body basis {ob!r}"
    )


def _check_mode(mb: ManyBodyBasis, i: int) -> int:
    if not 0 <= int(i) < mb.nmodes:
        raise IndexError(f"Mode {i} out of range for {mb.nmodes} modes")
    return int(i)


def _ladder(mb: ManyBodyBasis, i: int, raising: bool) -> Operator:
    i = _check_mode(mb, i)
    fermions = _is_fermionic(mb)
    out = _Triplets()
    for j, occ in enumerate(mb.occupations):
        step = _create(occ, i, fermions) if raising else _annihilate(occ, i, fermions)
        if step is None:
            continue
        new, amp = step
        k = mb.get(new)
        if k is not None:
            out.add(k, j, amp)
    return out.to_operator(mb, LiftOptions())


def create(mb: ManyBodyBasis, i: int) -> Operator:
    """c+_i restricted to mb; needs several particle-number sectors to be non-zero."""
    return _ladder(mb, i, True)


def destroy(mb: ManyBodyBasis, i: int) -> Operator:
    return _ladder(mb, i, False)


def number(mb: ManyBodyBasis, i: Optional[int] = None) -> Operator:
    """n_i, or the total particle number when i is None."""
    occ = np.asarray(mb.occupations, dtype=float)
    diag = occ.sum(axis=1) if i is None else occ[:, _check_mode(mb, i)]
    return Operator(mb, mb, sp.diags(diag, format="csr"))


def transition(mb: ManyBodyBasis, i: int, j: int) -> Operator:
    """c+_i c_j"""
    i, j = _check_mode(mb, i), _check_mode(mb, j)
    A = np.zeros((mb.nmodes, mb.nmodes), dtype=complex)
    A[i, j] = 1.0
    return onebody_matrix_lift(mb, A)


def occupation_state(mb: ManyBodyBasis, occupation: Sequence[int]) -> Ket:
    data = np.zeros(mb.dim, dtype=complex)
    data[mb.index_of(occupation)] = 1.0
    return Ket(mb, data)


def onebodyexpect(op: Operator, state: Union[Ket, Operator]) -> complex:
    """
    Expectation value of the lifted one- or two-body operator in a many-body
    state (ket or density operator).
    """
    mb = state.basis if isinstance(state, Ket) else state.basis_l
    if not isinstance(mb, ManyBodyBasis):
        raise BasisMismatchError(f"State does not live on a ManyBodyBasis: {mb!r}")
    return expect(manybodyoperator(mb, op), state)


def mode_occupations(mb: ManyBodyBasis, state: Ket) -> np.ndarray:
    """<n_i> for every mode i."""
    if not samebases(state.basis, mb):
        raise BasisMismatchError("State does not live on the given many-body basis")
    probs = np.abs(state.data) ** 2
    return probs @ np.asarray(mb.occupations, dtype=float)
