from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple, Union

import numpy as np
import scipy.sparse as sp

from mbproj.core.basis.types import Basis, samebases
from mbproj.core.errors import BasisMismatchError

MatrixLike = Union[np.ndarray, sp.spmatrix]


@dataclass(frozen=True, eq=False)
class Ket:
    """
    State vector: complex amplitudes indexed by `basis`.

    data is copied on construction and made read-only.
    """

    basis: Basis
    data: np.ndarray

    def __post_init__(self) -> None:
        arr = np.array(self.data, dtype=complex)
        if arr.ndim != 1 or arr.shape[0] != self.basis.dim:
            raise BasisMismatchError(
                f"Ket data shape {arr.shape} does not match basis dim {self.basis.dim}"
            )
        arr.setflags(write=False)
        object.__setattr__(self, "data", arr)

    @property
    def dim(self) -> int:
        return self.basis.dim


@dataclass(frozen=True, eq=False)
class Operator:
    """
    Linear map from `basis_r` to `basis_l`.

    data: dense (D_l, D_r) complex ndarray or a scipy.sparse matrix (stored as CSR).

    Input data is always copied. Dense data is stored read-only; the CSR
    buffers stay writable because scipy canonicalizes them in place, so treat
    `data` of a sparse operator as read-only by convention.
    """

    basis_l: Basis
    basis_r: Basis
    data: Any

    def __post_init__(self) -> None:
        if sp.issparse(self.data):
            mat: MatrixLike = sp.csr_matrix(self.data, dtype=complex, copy=True)
        else:
            mat = np.array(self.data, dtype=complex)
            if mat.ndim != 2:
                raise BasisMismatchError(f"Operator data must be 2-D, got {mat.ndim}-D")
            mat.setflags(write=False)

        expected = (self.basis_l.dim, self.basis_r.dim)
        if tuple(mat.shape) != expected:
            raise BasisMismatchError(
                f"Operator data shape {tuple(mat.shape)} does not match bases {expected}"
            )
        object.__setattr__(self, "data", mat)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.basis_l.dim, self.basis_r.dim)

    @property
    def is_sparse(self) -> bool:
        return sp.issparse(self.data)

    @property
    def is_square(self) -> bool:
        return samebases(self.basis_l, self.basis_r)

    def toarray(self) -> np.ndarray:
        if self.is_sparse:
            return np.asarray(self.data.toarray(), dtype=complex)
        return np.array(self.data, dtype=complex)
