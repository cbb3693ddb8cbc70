from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Dict, Mapping, Sequence, Tuple, Union

import numpy as np

from mbproj.core.errors import BasisMismatchError, ConfigurationError

if TYPE_CHECKING:
    from mbproj.core.ops.types import Ket


def _prod_int(xs: Sequence[int]) -> int:
    out = 1
    for x in xs:
        out *= int(x)
    return out


@dataclass(frozen=True)
class Basis:
    """
    Immutable, ordered, finite basis.

    Subclasses define `shape`; `dim` is the product of the shape.
    """

    @property
    def shape(self) -> Tuple[int, ...]:
        raise NotImplementedError

    @property
    def dim(self) -> int:
        return _prod_int(self.shape)


@dataclass(frozen=True)
class GenericBasis(Basis):
    n: int

    def __post_init__(self) -> None:
        if int(self.n) < 1:
            raise ConfigurationError(f"GenericBasis needs n >= 1, got {self.n}")

    @property
    def shape(self) -> Tuple[int, ...]:
        return (int(self.n),)


@dataclass(frozen=True)
class PositionBasis(Basis):
    """
    Uniform real-space grid including both end points.
    """

    xmin: float
    xmax: float
    npoints: int

    def __post_init__(self) -> None:
        if int(self.npoints) < 2:
            raise ConfigurationError(
                f"PositionBasis needs at least 2 points, got {self.npoints}"
            )
        if not float(self.xmax) > float(self.xmin):
            raise ConfigurationError(
                f"PositionBasis needs xmax > xmin, got [{self.xmin}, {self.xmax}]"
            )

    @property
    def shape(self) -> Tuple[int, ...]:
        return (int(self.npoints),)

    @property
    def spacing(self) -> float:
        return (float(self.xmax) - float(self.xmin)) / (int(self.npoints) - 1)

    def points(self) -> np.ndarray:
        return np.linspace(float(self.xmin), float(self.xmax), int(self.npoints))


@dataclass(frozen=True)
class FockBasis(Basis):
    """Single bosonic mode truncated at `cutoff` quanta."""

    cutoff: int

    def __post_init__(self) -> None:
        if int(self.cutoff) < 0:
            raise ConfigurationError(f"FockBasis cutoff must be >= 0, got {self.cutoff}")

    @property
    def shape(self) -> Tuple[int, ...]:
        return (int(self.cutoff) + 1,)


@dataclass(frozen=True)
class SpinBasis(Basis):
    """
    Spin-s basis ordered m = s, s-1, ..., -s.
    """

    spin: Fraction

    def __post_init__(self) -> None:
        s = Fraction(self.spin)
        if s <= 0 or (2 * s).denominator != 1:
            raise ConfigurationError(
                f"Spin must be a positive integer or half-integer, got {self.spin}"
            )
        object.__setattr__(self, "spin", s)

    @property
    def shape(self) -> Tuple[int, ...]:
        return (int(2 * self.spin) + 1,)

    def m_values(self) -> np.ndarray:
        s = float(self.spin)
        return s - np.arange(self.dim, dtype=float)


@dataclass(frozen=True)
class CompositeBasis(Basis):
    """
    Tensor product of factor bases. The first factor is the slowest index.
    """

    bases: Tuple[Basis, ...]

    def __post_init__(self) -> None:
        bases = tuple(self.bases)
        if len(bases) < 2:
            raise ConfigurationError("CompositeBasis needs at least two factors")
        object.__setattr__(self, "bases", bases)

    @property
    def shape(self) -> Tuple[int, ...]:
        out: Tuple[int, ...] = ()
        for b in self.bases:
            out += tuple(b.shape)
        return out


@dataclass(frozen=True, eq=False)
class SubspaceBasis(Basis):
    """
    Basis spanned by an ordered tuple of kets living on `superbasis`.

    The defining states do not have to be orthonormal (see
    mbproj.core.subspace.orthonormalize). The superbasis is kept for lookup
    only.
    """

    superbasis: Basis
    basisstates: Tuple["Ket", ...]

    def __post_init__(self) -> None:
        states = tuple(self.basisstates)
        if not states:
            raise ConfigurationError("SubspaceBasis needs at least one state")
        for i, s in enumerate(states):
            if not samebases(s.basis, self.superbasis):
                raise BasisMismatchError(
                    f"Subspace state {i} lives on {s.basis!r}, "
                    f"expected {self.superbasis!r}"
                )
        object.__setattr__(self, "basisstates", states)

    @property
    def shape(self) -> Tuple[int, ...]:
        return (len(self.basisstates),)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SubspaceBasis):
            return NotImplemented
        if self is other:
            return True
        if not samebases(self.superbasis, other.superbasis):
            return False
        if len(self.basisstates) != len(other.basisstates):
            return False
        return all(
            np.array_equal(a.data, b.data)
            for a, b in zip(self.basisstates, other.basisstates)
        )

    def __hash__(self) -> int:
        return hash((SubspaceBasis, factors(self.superbasis), len(self.basisstates)))

    def __repr__(self) -> str:
        return f"SubspaceBasis(superbasis={self.superbasis!r}, dim={self.dim})"


class Statistics(str, Enum):
    BOSONS = "bosons"
    FERMIONS = "fermions"


StatisticsLike = Union[Statistics, str]


def as_statistics(x: StatisticsLike) -> Statistics:
    try:
        return Statistics(str(getattr(x, "value", x)).lower())
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown statistics {x!r}; expected 'bosons' or 'fermions'"
        ) from e


Occupation = Tuple[int, ...]


@dataclass(frozen=True)
class ManyBodyBasis(Basis):
    """
    Occupation-number basis over the modes of `onebodybasis`.

    The position of an occupation tuple in `occupations` is its basis index.
    Several particle-number sectors may be combined.
    """

    onebodybasis: Basis
    occupations: Tuple[Occupation, ...]
    statistics: Statistics = Statistics.BOSONS

    _index: Mapping[Occupation, int] = field(
        init=False, repr=False, compare=False, hash=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        stats = as_statistics(self.statistics)
        occs = tuple(tuple(int(n) for n in occ) for occ in self.occupations)
        if not occs:
            raise ConfigurationError("ManyBodyBasis needs at least one occupation state")

        nmodes = self.onebodybasis.dim
        index: Dict[Occupation, int] = {}
        for i, occ in enumerate(occs):
            if len(occ) != nmodes:
                raise ConfigurationError(
                    f"Occupation {occ} has {len(occ)} modes, one-body basis has {nmodes}"
                )
            if any(n < 0 for n in occ):
                raise ConfigurationError(f"Negative occupation in {occ}")
            if stats is Statistics.FERMIONS and any(n > 1 for n in occ):
                raise ConfigurationError(f"Fermionic occupation {occ} exceeds 1")
            if occ in index:
                raise ConfigurationError(f"Duplicate occupation state {occ}")
            index[occ] = i

        object.__setattr__(self, "statistics", stats)
        object.__setattr__(self, "occupations", occs)
        object.__setattr__(self, "_index", index)

    @property
    def shape(self) -> Tuple[int, ...]:
        return (len(self.occupations),)

    @property
    def nmodes(self) -> int:
        return self.onebodybasis.dim

    @property
    def particle_numbers(self) -> Tuple[int, ...]:
        return tuple(sorted({sum(occ) for occ in self.occupations}))

    @property
    def nparticles(self) -> int:
        ns = self.particle_numbers
        if len(ns) != 1:
            raise ConfigurationError(
                f"Basis mixes particle-number sectors {ns}; nparticles is undefined"
            )
        return ns[0]

    def index_of(self, occupation: Sequence[int]) -> int:
        key = tuple(int(n) for n in occupation)
        try:
            return self._index[key]
        except KeyError:
            raise KeyError(f"Occupation {key} is not part of this basis") from None

    def get(self, occupation: Occupation, default: Any = None) -> Any:
        return self._index.get(occupation, default)


def factors(b: Basis) -> Tuple[Basis, ...]:
    """Tensor factors of `b` with nested composites flattened."""
    if isinstance(b, CompositeBasis):
        out: Tuple[Basis, ...] = ()
        for x in b.bases:
            out += factors(x)
        return out
    return (b,)


def samebases(a: Any, b: Any) -> bool:
    """
    Basis equality up to grouping of tensor factors: CompositeBasis((A, B, C))
    and CompositeBasis((CompositeBasis((A, B)), C)) index the same way.
    """
    if isinstance(a, Basis) and isinstance(b, Basis):
        return factors(a) == factors(b)
    return a == b


def check_samebases(a: Any, b: Any, *, what: str = "operands") -> None:
    if not samebases(a, b):
        raise BasisMismatchError(f"Incompatible bases for {what}: {a!r} vs {b!r}")
