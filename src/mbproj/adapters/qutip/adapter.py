from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

import numpy as np

from mbproj.core.basis.types import Basis
from mbproj.core.ops.types import Ket, Operator
from mbproj.core.sim.protocols import SolverAdapterProto
from mbproj.core.sim.types import EvolutionProblem, EvolutionResult

log = logging.getLogger(__name__)


def _dims(basis: Basis) -> List[int]:
    return [int(x) for x in basis.shape]


@dataclass
class QuTiPAdapter(SolverAdapterProto):
    """
    QuTiP adapter.

    Conventions:
    - Kets become Qobj with dims [shape, [1]], operators [shape_l, shape_r].
    - sesolve is used for a ket initial state without collapse operators,
      mesolve otherwise.
    """

    # Storage preferences (QuTiP 5 data layer)
    # e.g. "csr", "dense", or None (no conversion)
    op_dtype: Optional[str] = "csr"
    # often leave states dense; set to "csr" if desired
    state_dtype: Optional[str] = None

    def to_qobj(self, x: Union[Ket, Operator]) -> Any:
        import qutip as qt  # type: ignore

        if isinstance(x, Ket):
            q = qt.Qobj(np.asarray(x.data).reshape(-1, 1), dims=[_dims(x.basis), [1]])
            dtype = self.state_dtype
        else:
            q = qt.Qobj(x.data, dims=[_dims(x.basis_l), _dims(x.basis_r)])
            dtype = self.op_dtype
        if dtype:
            q = q.to(dtype)
        return q

    def from_qobj(self, q: Any, basis: Basis) -> Union[Ket, Operator]:
        mat = np.asarray(q.full(), dtype=complex)
        if q.isket:
            return Ket(basis, mat.reshape(-1))
        return Operator(basis, basis, mat)

    def solve(
        self,
        problem: EvolutionProblem,
        *,
        options: Optional[Mapping[str, Any]] = None,
    ) -> EvolutionResult:
        import qutip as qt  # type: ignore

        tlist = problem.tlist
        H = self.to_qobj(problem.H)
        state0 = self.to_qobj(problem.initial)
        c_ops = [self.to_qobj(op) for op in problem.c_ops]
        e_ops = [self.to_qobj(op) for op in problem.e_ops]
        e_keys = problem.labels()

        solver_options: Dict[str, Any] = dict(
            options.get("qutip_options", {}) if options else {}
        )
        if options and "progress_bar" in options:
            solver_options["progress_bar"] = options["progress_bar"]

        solver_options.setdefault("store_states", False)
        solver_options.setdefault("store_final_state", True)

        if problem.psi0 is not None and not c_ops:
            log.debug("Dispatching to qutip.sesolve (dim=%d)", problem.basis.dim)
            res = qt.sesolve(H, state0, tlist, e_ops=e_ops, options=solver_options)
            backend = "qutip.sesolve"
        else:
            log.debug(
                "Dispatching to qutip.mesolve (dim=%d, %d collapse ops)",
                problem.basis.dim,
                len(c_ops),
            )
            res = qt.mesolve(H, state0, tlist, c_ops, e_ops=e_ops, options=solver_options)
            backend = "qutip.mesolve"

        expect: Dict[str, np.ndarray] = {}
        if res.expect is not None:
            for k, arr in zip(e_keys, res.expect):
                expect[k] = np.asarray(arr)

        states_out: Optional[Any] = None
        if solver_options.get("store_states") and res.states:
            states_out = tuple(self.from_qobj(s, problem.basis) for s in res.states)
        else:
            final_qobj = getattr(res, "final_state", None)
            if final_qobj is not None:
                states_out = self.from_qobj(final_qobj, problem.basis)

        return EvolutionResult(
            tlist=tlist,
            states=states_out,
            expect=expect,
            meta={
                "backend": backend,
                "op_dtype": self.op_dtype,
                "state_dtype": self.state_dtype,
            },
        )
