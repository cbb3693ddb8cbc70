from __future__ import annotations

import logging

import numpy as np

from mbproj.core.manybody import mode_occupations
from mbproj.core.ops import eigenstates
from mbproj.core.units import Q
from mbproj.models import DoubleWellModel


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    for stats in ("bosons", "fermions"):
        model = DoubleWellModel(
            half_width=Q(40.0, "nm"),
            well_offset=Q(15.0, "nm"),
            barrier=Q(30.0, "meV"),
            npoints=160,
            nstates=4,
            nparticles=2,
            statistics=stats,
        )
        system = model.build()
        vals, kets = eigenstates(system.H, 3)

        print(f"--- {stats} ---")
        print("single-particle energies [meV]:", np.round(system.energies, 3))
        print("many-body dim:", system.manybody.dim)
        print("lowest many-body energies [meV]:", np.round(vals, 3))
        print(
            "ground-state mode occupations:",
            np.round(mode_occupations(system.manybody, kets[0]), 3),
        )


if __name__ == "__main__":
    main()
