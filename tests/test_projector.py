import numpy as np
import pytest

from mbproj.core.basis import CompositeBasis, GenericBasis, SubspaceBasis
from mbproj.core.errors import BasisMismatchError, ConfigurationError
from mbproj.core.ops import Ket, Operator, compose, dagger, identity, tensor
from mbproj.core.subspace import (
    embed_operator,
    embed_state,
    orthonormalize,
    project_operator,
    project_state,
    projector,
    superbasis_of,
)


def test_projector_rows_are_bras(orthonormal_subspace, parent):
    P = projector(orthonormal_subspace, parent)
    assert P.basis_l == orthonormal_subspace
    assert P.basis_r == parent
    assert P.shape == (3, 6)
    for i, s in enumerate(orthonormal_subspace.basisstates):
        np.testing.assert_allclose(P.toarray()[i], s.data.conj())

    Pd = projector(parent, orthonormal_subspace)
    np.testing.assert_allclose(Pd.toarray(), P.toarray().conj().T)


def test_orthonormal_projection_is_identity_on_subspace(orthonormal_subspace, parent):
    P = projector(orthonormal_subspace, parent)
    PPd = compose(P, dagger(P)).toarray()
    np.testing.assert_allclose(PPd, np.eye(3), atol=1e-12)


def test_project_embed_project_is_stable(orthonormal_subspace, hermitian_op):
    A_sub = project_operator(orthonormal_subspace, hermitian_op)
    lifted = embed_operator(orthonormal_subspace, A_sub)
    assert lifted.basis_l == hermitian_op.basis_l
    again = project_operator(orthonormal_subspace, lifted)
    np.testing.assert_allclose(again.toarray(), A_sub.toarray(), atol=1e-12)


def test_state_round_trip(orthonormal_subspace):
    coeffs = np.array([0.6, 0.0, 0.8j])
    phi = Ket(orthonormal_subspace, coeffs)
    psi = embed_state(orthonormal_subspace, phi)
    assert psi.basis == orthonormal_subspace.superbasis
    back = project_state(orthonormal_subspace, psi)
    np.testing.assert_allclose(back.data, coeffs, atol=1e-12)


def test_non_orthonormal_subspace_and_orthonormalize():
    p = GenericBasis(3)
    s = SubspaceBasis(p, (Ket(p, [1, 0, 0]), Ket(p, [1, 1, 0])))
    P = projector(s, p)
    assert not np.allclose(compose(P, dagger(P)).toarray(), np.eye(2))

    on = orthonormalize(s)
    Pon = projector(on, p)
    np.testing.assert_allclose(compose(Pon, dagger(Pon)).toarray(), np.eye(2), atol=1e-12)
    np.testing.assert_allclose(on.basisstates[1].data, [0, 1, 0], atol=1e-12)


def test_orthonormalize_rejects_dependent_states():
    p = GenericBasis(3)
    s = SubspaceBasis(p, (Ket(p, [1, 1, 0]), Ket(p, [2, 2, 0])))
    with pytest.raises(ConfigurationError):
        orthonormalize(s)


def test_projector_basis_mismatch(orthonormal_subspace):
    with pytest.raises(BasisMismatchError):
        projector(orthonormal_subspace, GenericBasis(7))
    with pytest.raises(BasisMismatchError):
        projector(GenericBasis(6), GenericBasis(6))
    wrong = Ket(GenericBasis(7), np.ones(7))
    with pytest.raises(BasisMismatchError):
        project_state(orthonormal_subspace, wrong)
    with pytest.raises(BasisMismatchError):
        embed_state(orthonormal_subspace, Ket(GenericBasis(3), np.ones(3)))


def test_two_particle_projection_uses_tensor_projector(orthonormal_subspace, parent, rng):
    pair_parent = CompositeBasis((parent, parent))
    pair_sub = CompositeBasis((orthonormal_subspace, orthonormal_subspace))
    m = rng.normal(size=(36, 36))
    V = Operator(pair_parent, pair_parent, m + m.T)

    P = projector(orthonormal_subspace, parent)
    PP = tensor(P, P)
    expected = PP.toarray() @ V.toarray() @ PP.toarray().conj().T

    V_sub = project_operator(pair_sub, V)
    assert V_sub.basis_l == pair_sub
    np.testing.assert_allclose(V_sub.toarray(), expected, atol=1e-10)
    np.testing.assert_allclose(projector(pair_sub, pair_parent).toarray(), PP.toarray())


def test_superbasis_of_composite(parent, orthonormal_subspace):
    pair = CompositeBasis((orthonormal_subspace, orthonormal_subspace))
    assert superbasis_of(orthonormal_subspace) == parent
    assert superbasis_of(pair) == CompositeBasis((parent, parent))


def test_two_particle_projection_with_tensor_product_parent():
    parent = CompositeBasis((GenericBasis(2), GenericBasis(3)))
    e = np.eye(parent.dim)
    sub = SubspaceBasis(parent, (Ket(parent, e[0]), Ket(parent, e[4])))
    pair = CompositeBasis((sub, sub))

    flat = tensor(identity(parent), identity(parent))
    np.testing.assert_allclose(project_operator(pair, flat).toarray(), np.eye(4))

    nested_basis = CompositeBasis((parent, parent))
    nested = Operator(nested_basis, nested_basis, np.eye(parent.dim**2))
    np.testing.assert_allclose(project_operator(pair, nested).toarray(), np.eye(4))

    back = embed_operator(pair, project_operator(pair, flat))
    assert back.basis_l == superbasis_of(pair)
    assert len(superbasis_of(pair).bases) == 4


def test_composite_projector_rejects_wrong_parent():
    parent = CompositeBasis((GenericBasis(2), GenericBasis(3)))
    sub = SubspaceBasis(parent, (Ket(parent, np.eye(6)[0]),))
    with pytest.raises(BasisMismatchError):
        projector(CompositeBasis((sub, sub)), CompositeBasis((parent, GenericBasis(6))))
