import warnings

import numpy as np
import pytest
import scipy.sparse as sp

from mbproj.core.basis import CompositeBasis, FockBasis, GenericBasis, SpinBasis
from mbproj.core.errors import BasisMismatchError, ConfigurationError, NumericalWarning
from mbproj.core.ops import (
    Ket,
    Operator,
    add,
    apply,
    basisstate,
    compose,
    dagger,
    dense,
    eigenstates,
    embed,
    expect,
    hermitian_part,
    identity,
    inner,
    is_hermitian,
    normalize,
    projector_onto,
    scale,
    sparse,
    sum_operators,
    tensor,
    tensor_kets,
    trace,
)
from mbproj.core.ops.algebra import hermitian_error
from mbproj.core.ops.local import destroy, number, sigmax, sigmaz
from mbproj.core.options import EigenOptions


def test_operator_shape_is_checked():
    b = GenericBasis(2)
    with pytest.raises(BasisMismatchError):
        Operator(b, b, np.eye(3))
    with pytest.raises(BasisMismatchError):
        Ket(b, [1.0, 0.0, 0.0])


def test_values_are_immutable_copies():
    b = GenericBasis(2)
    raw = np.eye(2)
    op = Operator(b, b, raw)
    raw[0, 0] = 5.0
    assert op.data[0, 0] == 1.0
    with pytest.raises(ValueError):
        op.data[0, 0] = 2.0


def test_add_and_compose_check_bases():
    a = Operator(GenericBasis(2), GenericBasis(3), np.ones((2, 3)))
    b = Operator(GenericBasis(2), GenericBasis(2), np.eye(2))
    with pytest.raises(BasisMismatchError):
        add(a, b)
    with pytest.raises(BasisMismatchError):
        compose(a, b)
    out = compose(b, a)
    assert out.shape == (2, 3)


def test_mixed_sparse_dense_arithmetic():
    b = FockBasis(3)
    a = destroy(b)
    ad = dagger(a)
    n_dense = compose(dense(ad), a)
    n_sparse = compose(ad, a)
    np.testing.assert_allclose(n_dense.toarray(), number(b).toarray())
    np.testing.assert_allclose(n_sparse.toarray(), number(b).toarray())
    assert n_sparse.is_sparse
    mixed = add(dense(a), ad)
    np.testing.assert_allclose(mixed.toarray(), (a.toarray() + ad.toarray()))
    assert sparse(mixed).is_sparse


def test_tensor_ordering_and_embed():
    b1, b2 = GenericBasis(2), GenericBasis(3)
    A = Operator(b1, b1, [[0, 1], [1, 0]])
    B = Operator(b2, b2, np.diag([1.0, 2.0, 3.0]))
    AB = tensor(A, B)
    assert AB.basis_l == CompositeBasis((b1, b2))
    np.testing.assert_allclose(AB.toarray(), np.kron(A.toarray(), B.toarray()))

    cb = CompositeBasis((b1, b2))
    np.testing.assert_allclose(
        embed(cb, 1, B).toarray(), np.kron(np.eye(2), B.toarray())
    )
    np.testing.assert_allclose(embed(cb, [0, 1], [A, B]).toarray(), AB.toarray())
    with pytest.raises(IndexError):
        embed(cb, 2, B)
    with pytest.raises(BasisMismatchError):
        embed(cb, 0, B)


def test_tensor_flattens_nested_composites():
    b = GenericBasis(2)
    I = identity(b)
    t = tensor(tensor(I, I), I)
    assert t.basis_l == CompositeBasis((b, b, b))


def test_states_and_expectation():
    b = SpinBasis(0.5)
    up = basisstate(b, 0)
    down = basisstate(b, 1)
    assert expect(sigmaz(b), up) == pytest.approx(1.0)
    assert expect(sigmaz(b), down) == pytest.approx(-1.0)
    plus = normalize(Ket(b, up.data + down.data))
    assert expect(sigmax(b), plus) == pytest.approx(1.0)
    assert inner(up, down) == 0.0

    rho = projector_onto(plus)
    assert trace(rho) == pytest.approx(1.0)
    assert expect(sigmax(b), rho) == pytest.approx(1.0)

    flipped = apply(sigmax(b), up)
    np.testing.assert_allclose(flipped.data, down.data)

    pair = tensor_kets(up, down)
    assert pair.basis == CompositeBasis((b, b))
    np.testing.assert_allclose(pair.data, [0, 1, 0, 0])


def test_normalize_zero_vector_fails():
    with pytest.raises(ConfigurationError):
        normalize(Ket(GenericBasis(2), [0.0, 0.0]))


def test_eigenstates_sorted(hermitian_op):
    vals, kets = eigenstates(hermitian_op)
    assert np.all(np.diff(vals) >= 0)
    np.testing.assert_allclose(vals, np.linalg.eigvalsh(hermitian_op.toarray()))
    for v, k in zip(vals, kets):
        np.testing.assert_allclose(apply(hermitian_op, k).data, v * k.data, atol=1e-10)

    low, _ = eigenstates(hermitian_op, 2)
    np.testing.assert_allclose(low, vals[:2])


def test_eigenstates_sparse_path():
    b = FockBasis(99)
    H = add(number(b), scale(0.1, add(destroy(b), dagger(destroy(b)))))
    vals, kets = eigenstates(H, 3)
    ref = np.linalg.eigvalsh(H.toarray())[:3]
    np.testing.assert_allclose(vals, ref, atol=1e-8)
    assert len(kets) == 3


def test_eigenstates_symmetrizes_with_warning():
    b = GenericBasis(2)
    op = Operator(b, b, [[1.0, 1.0], [0.0, 1.0]])
    assert not is_hermitian(op)
    with pytest.warns(NumericalWarning):
        vals, _ = eigenstates(op)
    np.testing.assert_allclose(vals, np.linalg.eigvalsh(hermitian_part(op).toarray()))

    with pytest.raises(ConfigurationError):
        eigenstates(op, options=EigenOptions(symmetrize=False))


def test_eigenstates_hermitian_emits_no_warning(hermitian_op):
    with warnings.catch_warnings():
        warnings.simplefilter("error", NumericalWarning)
        eigenstates(hermitian_op)


def test_identity_formats():
    b = GenericBasis(3)
    assert identity(b).is_sparse
    assert not identity(b, sparse=False).is_sparse
    assert isinstance(identity(b).data, sp.csr_matrix)


def test_sum_operators():
    b = FockBasis(2)
    total = sum_operators([number(b), identity(b), scale(2.0, identity(b))])
    np.testing.assert_allclose(np.diag(total.toarray()).real, [3.0, 4.0, 5.0])
    with pytest.raises(ValueError):
        sum_operators([])


def test_hermitian_error_reports_max_deviation():
    b = GenericBasis(2)
    op = Operator(b, b, np.array([[1.0, 2.0], [0.5, 1.0]]))
    assert hermitian_error(op) == pytest.approx(1.5)
    assert hermitian_error(sparse(op)) == pytest.approx(1.5)


def test_operator_copies_its_data():
    b = GenericBasis(2)
    src = sp.csr_matrix(np.array([[1.0, 0.0], [0.0, 2.0]]))
    op = Operator(b, b, src)
    src.data[:] = 7.0
    np.testing.assert_allclose(op.toarray(), [[1.0, 0.0], [0.0, 2.0]])

    arr = np.eye(2)
    dense_op = Operator(b, b, arr)
    arr[0, 0] = 5.0
    assert dense_op.data[0, 0] == 1.0
    assert not dense_op.data.flags.writeable
