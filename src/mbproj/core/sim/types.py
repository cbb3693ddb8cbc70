from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

import numpy as np

from mbproj.core.basis.types import Basis, samebases
from mbproj.core.errors import BasisMismatchError, ConfigurationError
from mbproj.core.ops.types import Ket, Operator


@dataclass(frozen=True)
class EvolutionProblem:
    """
    Time-evolution request handed to a solver adapter.

    Exactly one of psi0 / rho0 must be set. All operators must act on the
    Hamiltonian's basis.
    """

    tlist: np.ndarray
    H: Operator

    psi0: Optional[Ket] = None
    rho0: Optional[Operator] = None

    c_ops: Tuple[Operator, ...] = ()
    e_ops: Tuple[Operator, ...] = ()
    e_labels: Tuple[str, ...] = ()

    meta: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tlist", np.asarray(self.tlist, dtype=float))
        object.__setattr__(self, "c_ops", tuple(self.c_ops))
        object.__setattr__(self, "e_ops", tuple(self.e_ops))
        object.__setattr__(self, "e_labels", tuple(self.e_labels))

        if (self.psi0 is None) == (self.rho0 is None):
            raise ConfigurationError("Exactly one of psi0 or rho0 must be given")
        if self.e_labels and len(self.e_labels) != len(self.e_ops):
            raise ConfigurationError("e_labels must match e_ops in length")

        b = self.basis
        if not samebases(self.H.basis_r, b):
            raise BasisMismatchError("Hamiltonian must be square")
        if self.psi0 is not None and not samebases(self.psi0.basis, b):
            raise BasisMismatchError("psi0 does not live on the Hamiltonian basis")
        if self.rho0 is not None and not (
            samebases(self.rho0.basis_l, b) and samebases(self.rho0.basis_r, b)
        ):
            raise BasisMismatchError("rho0 does not live on the Hamiltonian basis")
        for kind, ops in (("c_ops", self.c_ops), ("e_ops", self.e_ops)):
            for i, op in enumerate(ops):
                if not (samebases(op.basis_l, b) and samebases(op.basis_r, b)):
                    raise BasisMismatchError(f"{kind}[{i}] does not act on the Hamiltonian basis")

    @property
    def basis(self) -> Basis:
        return self.H.basis_l

    @property
    def initial(self) -> Union[Ket, Operator]:
        return self.psi0 if self.psi0 is not None else self.rho0  # type: ignore[return-value]

    def labels(self) -> Tuple[str, ...]:
        if self.e_labels:
            return self.e_labels
        return tuple(f"E[{i}]" for i in range(len(self.e_ops)))


@dataclass(frozen=True)
class EvolutionResult:
    tlist: np.ndarray
    states: Optional[Any] = None
    expect: Mapping[str, np.ndarray] = field(default_factory=dict)
    meta: Mapping[str, Any] = field(default_factory=dict)
