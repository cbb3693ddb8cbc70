import numpy as np
import pytest

from mbproj.core.basis import GenericBasis, SubspaceBasis
from mbproj.core.ops import Ket, Operator


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def random_hermitian(rng, n):
    m = rng.normal(size=(n, n)) + 1j * rng.normal(size=(n, n))
    return 0.5 * (m + m.conj().T)


@pytest.fixture
def parent():
    return GenericBasis(6)


@pytest.fixture
def orthonormal_subspace(parent, rng):
    m = rng.normal(size=(6, 3)) + 1j * rng.normal(size=(6, 3))
    q, _ = np.linalg.qr(m)
    states = tuple(Ket(parent, q[:, i]) for i in range(3))
    return SubspaceBasis(parent, states)


@pytest.fixture
def hermitian_op(parent, rng):
    return Operator(parent, parent, random_hermitian(rng, parent.dim))
