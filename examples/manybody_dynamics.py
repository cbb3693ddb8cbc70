from __future__ import annotations

import numpy as np

from mbproj.core.basis import CompositeBasis, GenericBasis
from mbproj.core.manybody import manybody_basis, manybodyoperator, number, occupation_state
from mbproj.core.ops import Operator, add
from mbproj.engine import SimulationEngine


def main() -> None:
    nsites = 4
    ob = GenericBasis(nsites)

    # nearest-neighbour hopping on an open chain
    hop = np.zeros((nsites, nsites))
    for i in range(nsites - 1):
        hop[i, i + 1] = hop[i + 1, i] = -1.0

    # on-site repulsion U n_i (n_i - 1) / 2
    U = 2.0
    pair = CompositeBasis((ob, ob))
    onsite = np.zeros((nsites * nsites, nsites * nsites))
    for i in range(nsites):
        onsite[i * nsites + i, i * nsites + i] = 0.5 * U

    mb = manybody_basis(ob, 2, "bosons")
    H = add(
        manybodyoperator(mb, Operator(ob, ob, hop)),
        manybodyoperator(mb, Operator(pair, pair, onsite)),
    )

    engine = SimulationEngine(audit=True)
    problem = engine.problem(
        H,
        occupation_state(mb, (2, 0, 0, 0)),
        tlist=np.linspace(0.0, 5.0, 51),
        e_ops={f"n{i}": number(mb, i) for i in range(nsites)},
    )
    res = engine.run(problem)
    for key, values in res.expect.items():
        print(key, np.round(np.real(values[::10]), 3))


if __name__ == "__main__":
    main()
