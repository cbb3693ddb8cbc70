from fractions import Fraction

import numpy as np
import pytest

from mbproj.core.basis import (
    BasisProto,
    CompositeBasis,
    FockBasis,
    GenericBasis,
    ManyBodyBasis,
    PositionBasis,
    SpinBasis,
    Statistics,
    SubspaceBasis,
    as_statistics,
    check_samebases,
    factors,
    samebases,
)
from mbproj.core.errors import BasisMismatchError, ConfigurationError
from mbproj.core.ops import Ket


def test_dims_and_shapes():
    assert GenericBasis(5).dim == 5
    assert FockBasis(3).dim == 4
    assert SpinBasis(Fraction(1, 2)).dim == 2
    assert SpinBasis(3).dim == 7
    cb = CompositeBasis((GenericBasis(2), FockBasis(2)))
    assert cb.shape == (2, 3)
    assert cb.dim == 6


def test_spin_accepts_half_integer_float():
    b = SpinBasis(1.5)
    assert b.spin == Fraction(3, 2)
    np.testing.assert_allclose(b.m_values(), [1.5, 0.5, -0.5, -1.5])


@pytest.mark.parametrize("spin", [0, -1, Fraction(1, 3), 0.3])
def test_spin_rejects_invalid(spin):
    with pytest.raises(ConfigurationError):
        SpinBasis(spin)


def test_position_grid():
    b = PositionBasis(-1.0, 1.0, 5)
    np.testing.assert_allclose(b.points(), [-1.0, -0.5, 0.0, 0.5, 1.0])
    assert b.spacing == pytest.approx(0.5)
    with pytest.raises(ConfigurationError):
        PositionBasis(1.0, -1.0, 5)
    with pytest.raises(ConfigurationError):
        PositionBasis(0.0, 1.0, 1)


def test_structural_equality():
    assert GenericBasis(3) == GenericBasis(3)
    assert GenericBasis(3) != GenericBasis(4)
    assert CompositeBasis((GenericBasis(2), GenericBasis(3))) == CompositeBasis(
        (GenericBasis(2), GenericBasis(3))
    )
    check_samebases(FockBasis(2), FockBasis(2))
    with pytest.raises(BasisMismatchError):
        check_samebases(FockBasis(2), FockBasis(3))


def test_composite_needs_two_factors():
    with pytest.raises(ConfigurationError):
        CompositeBasis((GenericBasis(2),))


def test_subspace_equality_and_validation():
    p = GenericBasis(3)
    s1 = SubspaceBasis(p, (Ket(p, [1, 0, 0]), Ket(p, [0, 1, 0])))
    s2 = SubspaceBasis(p, (Ket(p, [1, 0, 0]), Ket(p, [0, 1, 0])))
    s3 = SubspaceBasis(p, (Ket(p, [1, 0, 0]), Ket(p, [0, 0, 1])))
    assert s1 == s2
    assert hash(s1) == hash(s2)
    assert s1 != s3
    assert s1.dim == 2

    with pytest.raises(BasisMismatchError):
        SubspaceBasis(p, (Ket(GenericBasis(4), [1, 0, 0, 0]),))
    with pytest.raises(ConfigurationError):
        SubspaceBasis(p, ())


def test_manybody_basis_validation():
    ob = GenericBasis(3)
    mb = ManyBodyBasis(ob, ((2, 0, 0), (1, 1, 0)), Statistics.BOSONS)
    assert mb.dim == 2
    assert mb.nparticles == 2
    assert mb.index_of((1, 1, 0)) == 1
    with pytest.raises(KeyError):
        mb.index_of((0, 0, 2))

    with pytest.raises(ConfigurationError):
        ManyBodyBasis(ob, ((1, 0),), Statistics.BOSONS)
    with pytest.raises(ConfigurationError):
        ManyBodyBasis(ob, ((2, 0, 0),), Statistics.FERMIONS)
    with pytest.raises(ConfigurationError):
        ManyBodyBasis(ob, ((1, 0, 0), (1, 0, 0)), "bosons")
    with pytest.raises(ConfigurationError):
        ManyBodyBasis(ob, ((1, 0, 0),), "anyons")


def test_manybody_mixed_sectors_have_no_single_particle_number():
    mb = ManyBodyBasis(GenericBasis(2), ((0, 0), (1, 0), (0, 1)), "fermions")
    assert mb.statistics is Statistics.FERMIONS
    assert mb.particle_numbers == (0, 1)
    with pytest.raises(ConfigurationError):
        mb.nparticles


def test_bases_satisfy_protocol():
    for b in (GenericBasis(2), FockBasis(1), SpinBasis(1), PositionBasis(0.0, 1.0, 3)):
        assert isinstance(b, BasisProto)


def test_statistics_parsing():
    assert as_statistics("Fermions") is Statistics.FERMIONS
    assert as_statistics(Statistics.BOSONS) is Statistics.BOSONS
    with pytest.raises(ConfigurationError):
        as_statistics("anyons")


def test_samebases_compares_by_value():
    assert samebases(GenericBasis(3), GenericBasis(3))
    assert not samebases(GenericBasis(3), FockBasis(2))


def test_samebases_ignores_tensor_grouping():
    a, b, c = GenericBasis(2), SpinBasis(0.5), FockBasis(3)
    flat = CompositeBasis((a, b, c))
    nested = CompositeBasis((CompositeBasis((a, b)), c))
    assert factors(nested) == (a, b, c)
    assert samebases(flat, nested)
    assert not samebases(flat, CompositeBasis((b, a, c)))

    k = Ket(flat, np.eye(flat.dim)[0])
    assert SubspaceBasis(flat, (k,)) == SubspaceBasis(nested, (Ket(nested, k.data),))
    assert hash(SubspaceBasis(flat, (k,))) == hash(SubspaceBasis(nested, (Ket(nested, k.data),)))
