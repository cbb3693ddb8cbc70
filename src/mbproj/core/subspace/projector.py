"""
Projection between an enveloping basis and a SubspaceBasis.

P has shape (dim(subspace), dim(parent)); its i-th row is <u_i|. States map
as P|psi> (project) and P^dagger|phi> (embed); operators as P A P^dagger and
P^dagger A P. Embedding is only the inverse of projecting when the defining
states are orthonormal (see `orthonormalize`).
"""

from __future__ import annotations

import logging
from typing import List, Union

import numpy as np

from mbproj.core.basis.types import (
    Basis,
    CompositeBasis,
    SubspaceBasis,
    factors,
    samebases,
)
from mbproj.core.errors import BasisMismatchError, ConfigurationError
from mbproj.core.ops.algebra import apply, compose, dagger, tensor
from mbproj.core.ops.types import Ket, Operator

log = logging.getLogger(__name__)

SubspaceLike = Union[SubspaceBasis, CompositeBasis]


def _projection_matrix(sub: SubspaceBasis) -> np.ndarray:
    rows = [np.conj(s.data) for s in sub.basisstates]
    return np.vstack(rows)


def _single_projector(sub: SubspaceBasis, parent: Basis) -> Operator:
    if not isinstance(sub, SubspaceBasis):
        raise BasisMismatchError(f"Expected a SubspaceBasis, got {sub!r}")
    if not samebases(sub.superbasis, parent):
        raise BasisMismatchError(
            f"Subspace is defined on {sub.superbasis!r}, not on {parent!r}"
        )
    return Operator(sub, parent, _projection_matrix(sub))


def superbasis_of(sub: SubspaceLike) -> Basis:
    """Parent basis of a subspace, factor-wise for composite subspaces."""
    if isinstance(sub, SubspaceBasis):
        return sub.superbasis
    if isinstance(sub, CompositeBasis):
        flat: List[Basis] = []
        for b in sub.bases:
            flat.extend(factors(superbasis_of(b)))
        return CompositeBasis(tuple(flat))
    raise BasisMismatchError(f"{sub!r} is not a subspace basis")


def _is_subspace_like(b: Basis) -> bool:
    if isinstance(b, SubspaceBasis):
        return True
    return isinstance(b, CompositeBasis) and all(_is_subspace_like(x) for x in b.bases)


def _group_like(sub: CompositeBasis, other: Basis) -> List[Basis]:
    """Split the flattened factors of `other` into one parent per factor of `sub`."""
    rest = list(factors(other))
    groups: List[Basis] = []
    for x in sub.bases:
        n = len(factors(superbasis_of(x)))
        if n > len(rest):
            break
        chunk, rest = rest[:n], rest[n:]
        groups.append(chunk[0] if n == 1 else CompositeBasis(tuple(chunk)))
    if rest or len(groups) != len(sub.bases):
        raise BasisMismatchError(
            f"{other!r} is not the parent of the composite subspace {sub!r}"
        )
    return groups


def projector(b1: Basis, b2: Basis) -> Operator:
    """
    Projection operator between a subspace and its parent.

    projector(sub, parent) -> P   (basis_l = sub, basis_r = parent)
    projector(parent, sub) -> P^dagger

    Composite bases made of subspace factors give the tensor product of the
    factor projectors (e.g. two-particle projections). The parent may group
    its tensor factors either way, as `tensor` flattens them.
    """
    if isinstance(b1, SubspaceBasis):
        return _single_projector(b1, b2)
    if isinstance(b2, SubspaceBasis):
        return dagger(_single_projector(b2, b1))

    if isinstance(b1, CompositeBasis) and _is_subspace_like(b1):
        pairs = zip(b1.bases, _group_like(b1, b2))
    elif isinstance(b2, CompositeBasis) and _is_subspace_like(b2):
        pairs = zip(_group_like(b2, b1), b2.bases)
    else:
        raise BasisMismatchError(
            f"Neither {b1!r} nor {b2!r} is a subspace of the other"
        )
    factor_ops: List[Operator] = [projector(x, y) for x, y in pairs]
    return tensor(*factor_ops)


def project_state(sub: SubspaceLike, ket: Ket) -> Ket:
    """P|psi>"""
    return apply(projector(sub, ket.basis), ket)


def embed_state(sub: SubspaceLike, ket: Ket) -> Ket:
    """P^dagger|phi>"""
    if not samebases(ket.basis, sub):
        raise BasisMismatchError(f"Ket lives on {ket.basis!r}, not on {sub!r}")
    return apply(projector(superbasis_of(sub), sub), ket)


def project_operator(sub: SubspaceLike, op: Operator) -> Operator:
    """P A P^dagger"""
    if not samebases(op.basis_l, op.basis_r):
        raise BasisMismatchError("project_operator needs a square operator")
    P = projector(sub, op.basis_r)
    out = compose(compose(P, op), dagger(P))
    log.debug("Projected operator of dim %d onto subspace of dim %d", op.basis_r.dim, sub.dim)
    return out


def embed_operator(sub: SubspaceLike, op: Operator) -> Operator:
    """P^dagger A P"""
    if not (samebases(op.basis_l, sub) and samebases(op.basis_r, sub)):
        raise BasisMismatchError(f"Operator does not act on {sub!r}")
    Pd = projector(superbasis_of(sub), sub)
    return compose(compose(Pd, op), dagger(Pd))


def orthonormalize(sub: SubspaceBasis, *, rtol: float = 1e-10) -> SubspaceBasis:
    """
    Modified Gram-Schmidt over the defining states, in order.

    A state whose residual norm falls below rtol times its original norm is
    treated as linearly dependent and rejected.
    """
    out: List[np.ndarray] = []
    for i, s in enumerate(sub.basisstates):
        v = np.array(s.data, dtype=complex)
        n0 = float(np.linalg.norm(v))
        for u in out:
            v = v - np.vdot(u, v) * u
        n = float(np.linalg.norm(v))
        if n0 == 0.0 or n <= rtol * n0:
            raise ConfigurationError(
                f"Subspace state {i} is linearly dependent on the previous ones"
            )
        out.append(v / n)
    kets = tuple(Ket(sub.superbasis, v) for v in out)
    return SubspaceBasis(sub.superbasis, kets)
