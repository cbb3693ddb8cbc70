from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from mbproj.core.sim.types import EvolutionProblem, EvolutionResult


@runtime_checkable
class SolverAdapterProto(Protocol):
    def solve(
        self, problem: EvolutionProblem, *, options: Optional[Mapping[str, Any]] = None
    ) -> EvolutionResult: ...
