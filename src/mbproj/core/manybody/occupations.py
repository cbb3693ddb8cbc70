from __future__ import annotations

import logging
import numbers
from itertools import combinations
from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union

from mbproj.core.basis.types import (
    Basis,
    ManyBodyBasis,
    Occupation,
    Statistics,
    StatisticsLike,
    as_statistics,
)
from mbproj.core.errors import ConfigurationError

log = logging.getLogger(__name__)

ModesLike = Union[int, Basis]
ParticlesLike = Union[int, Iterable[int]]


def _nmodes(modes: ModesLike) -> int:
    n = modes.dim if isinstance(modes, Basis) else int(modes)
    if n < 1:
        raise ConfigurationError(f"Need at least one mode, got {n}")
    return n


def _particle_numbers(nparticles: ParticlesLike) -> Tuple[int, ...]:
    if isinstance(nparticles, numbers.Integral):
        ns: Tuple[int, ...] = (int(nparticles),)
    else:
        ns = tuple(int(n) for n in nparticles)
    if not ns:
        raise ConfigurationError("No particle number given")
    if any(n < 0 for n in ns):
        raise ConfigurationError(f"Particle numbers must be >= 0, got {ns}")
    if len(set(ns)) != len(ns):
        raise ConfigurationError(f"Repeated particle numbers: {ns}")
    return ns


def _distribute_bosons(nmodes: int, n: int) -> Iterator[Occupation]:
    if nmodes == 1:
        yield (n,)
        return
    for first in range(n, -1, -1):
        for rest in _distribute_bosons(nmodes - 1, n - first):
            yield (first,) + rest


def _distribute_fermions(nmodes: int, n: int) -> Iterator[Occupation]:
    for occupied in combinations(range(nmodes), n):
        occ = [0] * nmodes
        for i in occupied:
            occ[i] = 1
        yield tuple(occ)


def bosonstates(modes: ModesLike, nparticles: ParticlesLike) -> Tuple[Occupation, ...]:
    """
    All bosonic occupation tuples over `modes` with the given particle
    number(s). Sectors follow the order given; inside a sector the order is
    descending lexicographic, (N, 0, ..., 0) first.
    """
    m = _nmodes(modes)
    out: list[Occupation] = []
    for n in _particle_numbers(nparticles):
        out.extend(_distribute_bosons(m, n))
    return tuple(out)


def fermionstates(modes: ModesLike, nparticles: ParticlesLike) -> Tuple[Occupation, ...]:
    """
    Fermionic counterpart of `bosonstates`: entries restricted to 0/1.
    A sector with more particles than modes contributes nothing.
    """
    m = _nmodes(modes)
    out: list[Occupation] = []
    for n in _particle_numbers(nparticles):
        out.extend(_distribute_fermions(m, n))
    return tuple(out)


def occupations(
    modes: ModesLike, nparticles: ParticlesLike, statistics: StatisticsLike
) -> Tuple[Occupation, ...]:
    stats = as_statistics(statistics)
    if stats is Statistics.FERMIONS:
        return fermionstates(modes, nparticles)
    return bosonstates(modes, nparticles)


def manybody_basis(
    onebodybasis: Basis,
    nparticles: ParticlesLike,
    statistics: StatisticsLike = Statistics.BOSONS,
    *,
    states: Optional[Sequence[Sequence[int]]] = None,
) -> ManyBodyBasis:
    """
    Build the occupation-number basis for `nparticles` over the modes of
    `onebodybasis`.

    If `states` is given it is used as the (ordered) occupation list instead
    of the full enumeration; every state must then carry one of the requested
    particle numbers.
    """
    stats = as_statistics(statistics)
    ns = _particle_numbers(nparticles)

    if states is None:
        occs = occupations(onebodybasis, ns, stats)
        if not occs:
            raise ConfigurationError(
                f"No {stats.value} states for N={ns} in {onebodybasis.dim} modes"
            )
    else:
        occs = tuple(tuple(int(x) for x in occ) for occ in states)
        wrong = [occ for occ in occs if sum(occ) not in ns]
        if wrong:
            raise ConfigurationError(
                f"Occupation states {wrong[:3]} do not hold N={ns} particles"
            )

    mb = ManyBodyBasis(onebodybasis, occs, stats)
    log.debug(
        "Built %s many-body basis: %d modes, N=%s, dim=%d",
        stats.value,
        mb.nmodes,
        ns,
        mb.dim,
    )
    return mb
