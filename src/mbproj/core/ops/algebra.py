"""
Explicit operator algebra on Ket / Operator values.

Every function returns a new value. Bases are checked before any arithmetic
and mismatches raise BasisMismatchError.
"""

from __future__ import annotations

import logging
import warnings
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import scipy.sparse as sp
from scipy.sparse.linalg import eigsh

from mbproj.core.basis.types import Basis, CompositeBasis, check_samebases, samebases
from mbproj.core.errors import ConfigurationError, NumericalWarning
from mbproj.core.ops.types import Ket, MatrixLike, Operator
from mbproj.core.options import EigenOptions

log = logging.getLogger(__name__)

# sparse operators smaller than this are diagonalized densely
_EIGSH_MIN_DIM = 64


def _composite(bases: Sequence[Basis]) -> Basis:
    flat: List[Basis] = []
    for b in bases:
        if isinstance(b, CompositeBasis):
            flat.extend(b.bases)
        else:
            flat.append(b)
    if len(flat) == 1:
        return flat[0]
    return CompositeBasis(tuple(flat))


def _kron(a: MatrixLike, b: MatrixLike) -> MatrixLike:
    if sp.issparse(a) or sp.issparse(b):
        return sp.kron(sp.csr_matrix(a), sp.csr_matrix(b), format="csr")
    return np.kron(a, b)


def _matmul(a: MatrixLike, b: MatrixLike) -> MatrixLike:
    if sp.issparse(a) and sp.issparse(b):
        return a @ b
    if sp.issparse(a):
        return np.asarray(a @ b)
    if sp.issparse(b):
        # dense @ sparse, evaluated as (b^T a^T)^T to stay on the sparse kernel
        return np.asarray(b.T @ np.asarray(a).T).T
    return np.asarray(a) @ np.asarray(b)


def _addmat(a: MatrixLike, b: MatrixLike) -> MatrixLike:
    if sp.issparse(a) and sp.issparse(b):
        return a + b
    if sp.issparse(a):
        a = a.toarray()
    if sp.issparse(b):
        b = b.toarray()
    return np.asarray(a) + np.asarray(b)


def dagger(op: Operator) -> Operator:
    return Operator(op.basis_r, op.basis_l, op.data.conj().T)


def scale(c: complex, op: Operator) -> Operator:
    return Operator(op.basis_l, op.basis_r, complex(c) * op.data)


def add(a: Operator, b: Operator) -> Operator:
    check_samebases(a.basis_l, b.basis_l, what="add (left)")
    check_samebases(a.basis_r, b.basis_r, what="add (right)")
    return Operator(a.basis_l, a.basis_r, _addmat(a.data, b.data))


def subtract(a: Operator, b: Operator) -> Operator:
    return add(a, scale(-1.0, b))


def sum_operators(ops: Sequence[Operator]) -> Operator:
    ops_t = tuple(ops)
    if not ops_t:
        raise ValueError("sum_operators requires at least one operator")
    out = ops_t[0]
    for op in ops_t[1:]:
        out = add(out, op)
    return out


def compose(a: Operator, b: Operator) -> Operator:
    """Matrix product a @ b."""
    check_samebases(a.basis_r, b.basis_l, what="compose")
    return Operator(a.basis_l, b.basis_r, _matmul(a.data, b.data))


def apply(op: Operator, ket: Ket) -> Ket:
    check_samebases(op.basis_r, ket.basis, what="apply")
    return Ket(op.basis_l, np.asarray(op.data @ ket.data).reshape(-1))


def tensor(*ops: Operator) -> Operator:
    """
    Kronecker product; the first operator acts on the slowest index.
    Nested composite bases are flattened.
    """
    if not ops:
        raise ValueError("tensor requires at least one operator")
    if len(ops) == 1:
        return ops[0]
    data = ops[0].data
    for op in ops[1:]:
        data = _kron(data, op.data)
    return Operator(
        _composite([op.basis_l for op in ops]),
        _composite([op.basis_r for op in ops]),
        data,
    )


def tensor_kets(*kets: Ket) -> Ket:
    if not kets:
        raise ValueError("tensor_kets requires at least one ket")
    data = kets[0].data
    for k in kets[1:]:
        data = np.kron(data, k.data)
    return Ket(_composite([k.basis for k in kets]), data)


def identity(basis: Basis, *, sparse: bool = True) -> Operator:
    if sparse:
        return Operator(basis, basis, sp.identity(basis.dim, dtype=complex, format="csr"))
    return Operator(basis, basis, np.eye(basis.dim, dtype=complex))


def embed(
    basis: CompositeBasis,
    indices: Union[int, Sequence[int]],
    ops: Union[Operator, Sequence[Operator]],
) -> Operator:
    """
    Place local operators on selected factors of a composite basis,
    identity elsewhere.
    """
    idx = (indices,) if isinstance(indices, int) else tuple(int(i) for i in indices)
    locs = (ops,) if isinstance(ops, Operator) else tuple(ops)
    if len(idx) != len(locs):
        raise ValueError("embed indices and operators must have same length")

    n = len(basis.bases)
    if any((i < 0 or i >= n) for i in idx):
        raise IndexError(f"embed index out of range: {idx} for n={n}")
    if len(set(idx)) != len(idx):
        raise ValueError(f"embed indices must be unique: {idx}")

    locals_by_idx = dict(zip(idx, locs))
    factors = []
    for i, b in enumerate(basis.bases):
        if i in locals_by_idx:
            op = locals_by_idx[i]
            check_samebases(op.basis_l, b, what=f"embed factor {i}")
            check_samebases(op.basis_r, b, what=f"embed factor {i}")
            factors.append(op)
        else:
            factors.append(identity(b))
    return tensor(*factors)


def basisstate(basis: Basis, index: int) -> Ket:
    if not 0 <= int(index) < basis.dim:
        raise IndexError(f"Basis index {index} out of range for dim {basis.dim}")
    data = np.zeros(basis.dim, dtype=complex)
    data[int(index)] = 1.0
    return Ket(basis, data)


def inner(bra: Ket, ket: Ket) -> complex:
    """<bra|ket>; the first argument is conjugated."""
    check_samebases(bra.basis, ket.basis, what="inner")
    return complex(np.vdot(bra.data, ket.data))


def norm(ket: Ket) -> float:
    return float(np.linalg.norm(ket.data))


def normalize(ket: Ket) -> Ket:
    n = norm(ket)
    if n == 0.0:
        raise ConfigurationError("Cannot normalize a zero vector")
    return Ket(ket.basis, ket.data / n)


def projector_onto(ket: Ket) -> Operator:
    """|ket><ket|"""
    return Operator(ket.basis, ket.basis, np.outer(ket.data, ket.data.conj()))


def trace(op: Operator) -> complex:
    check_samebases(op.basis_l, op.basis_r, what="trace")
    return complex(op.data.diagonal().sum())


def expect(op: Operator, state: Union[Ket, Operator]) -> complex:
    """
    <psi|A|psi> for a ket, Tr(A rho) for a density operator.
    """
    if isinstance(state, Ket):
        return inner(state, apply(op, state))
    return trace(compose(op, state))


def dense(op: Operator) -> Operator:
    return Operator(op.basis_l, op.basis_r, op.toarray())


def sparse(op: Operator) -> Operator:
    return Operator(op.basis_l, op.basis_r, sp.csr_matrix(op.data))


def hermitian_part(op: Operator) -> Operator:
    check_samebases(op.basis_l, op.basis_r, what="hermitian_part")
    return scale(0.5, add(op, dagger(op)))


def hermitian_error(op: Operator) -> float:
    """max |A - A^dagger|"""
    diff = _addmat(op.data, -op.data.conj().T)
    if sp.issparse(diff):
        return float(abs(diff).max()) if diff.nnz else 0.0
    return float(np.max(np.abs(diff))) if diff.size else 0.0


def is_hermitian(op: Operator, *, atol: float = 1e-10) -> bool:
    if not samebases(op.basis_l, op.basis_r):
        return False
    return hermitian_error(op) <= atol


def eigenstates(
    op: Operator,
    n: Optional[int] = None,
    *,
    options: Optional[EigenOptions] = None,
) -> Tuple[np.ndarray, List[Ket]]:
    """
    Lowest `n` (all if None) eigenvalues and eigenkets of a Hermitian operator,
    sorted ascending.

    A non-Hermitian input is replaced by (A + A^dagger)/2 and a
    NumericalWarning is emitted, unless options.symmetrize is False in which
    case ConfigurationError is raised.
    """
    opt = options or EigenOptions()
    check_samebases(op.basis_l, op.basis_r, what="eigenstates")
    D = op.basis_l.dim
    if n is not None and not 1 <= int(n) <= D:
        raise ConfigurationError(f"Requested {n} eigenstates of a {D}-dim operator")

    err = hermitian_error(op)
    if err > opt.hermitian_atol:
        if not opt.symmetrize:
            raise ConfigurationError(
                f"Operator is not Hermitian (max |A - A^dagger| = {err:.3e})"
            )
        log.warning("Symmetrizing non-Hermitian operator (max err %.3e)", err)
        warnings.warn(
            f"Operator is not Hermitian (max |A - A^dagger| = {err:.3e}); "
            "using (A + A^dagger)/2",
            NumericalWarning,
            stacklevel=2,
        )
        op = hermitian_part(op)

    if op.is_sparse and n is not None and D >= _EIGSH_MIN_DIM and int(n) < D - 1:
        vals, vecs = eigsh(op.data, k=int(n), which="SA")
    else:
        vals, vecs = np.linalg.eigh(op.toarray())
        if n is not None:
            vals, vecs = vals[: int(n)], vecs[:, : int(n)]

    order = np.argsort(vals)
    vals = np.asarray(vals[order], dtype=float)
    vecs = vecs[:, order]
    kets = [Ket(op.basis_l, vecs[:, i]) for i in range(vecs.shape[1])]
    return vals, kets
