from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import numpy as np

from mbproj.core.audit import audit_operator
from mbproj.core.ops.types import Ket, Operator
from mbproj.core.options import AuditOptions
from mbproj.core.sim.protocols import SolverAdapterProto
from mbproj.core.sim.types import EvolutionProblem, EvolutionResult

log = logging.getLogger(__name__)


def _default_adapter() -> SolverAdapterProto:
    # Late import to avoid core depending on QuTiP
    from mbproj.adapters.qutip.adapter import QuTiPAdapter

    return QuTiPAdapter()


@dataclass
class SimulationEngine:
    adapter: Optional[SolverAdapterProto] = None
    audit: bool = False
    audit_options: Optional[AuditOptions] = None

    def problem(
        self,
        H: Operator,
        initial: Union[Ket, Operator],
        *,
        tlist: np.ndarray,
        c_ops: Sequence[Operator] = (),
        e_ops: Optional[Mapping[str, Operator]] = None,
    ) -> EvolutionProblem:
        e_ops = dict(e_ops or {})
        return EvolutionProblem(
            tlist=np.asarray(tlist, dtype=float),
            H=H,
            psi0=initial if isinstance(initial, Ket) else None,
            rho0=initial if isinstance(initial, Operator) else None,
            c_ops=tuple(c_ops),
            e_ops=tuple(e_ops.values()),
            e_labels=tuple(e_ops.keys()),
        )

    def audit_problem(self, problem: EvolutionProblem) -> Dict[str, Any]:
        report: Dict[str, Any] = {
            "H": audit_operator(problem.H, label="H", options=self.audit_options)
        }
        report["C"] = [
            audit_operator(op, label=f"C[{i}]", options=self.audit_options)
            for i, op in enumerate(problem.c_ops)
        ]
        return report

    def run(
        self,
        problem: EvolutionProblem,
        *,
        solve_options: Optional[Mapping[str, Any]] = None,
    ) -> EvolutionResult:
        if self.audit:
            report = self.audit_problem(problem)
            if not report["H"].get("is_hermitian", True):
                log.warning(
                    "Hamiltonian is not Hermitian (max err %.3e)",
                    report["H"]["hermitian_max_abs_err"],
                )

        adapter = self.adapter or _default_adapter()
        return adapter.solve(problem, options=solve_options)
