from mbproj.core.sim.protocols import SolverAdapterProto
from mbproj.core.sim.types import EvolutionProblem, EvolutionResult

__all__ = ["EvolutionProblem", "EvolutionResult", "SolverAdapterProto"]
