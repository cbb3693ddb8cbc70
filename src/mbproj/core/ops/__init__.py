from mbproj.core.ops.types import Ket, Operator
from mbproj.core.ops.algebra import (
    add,
    apply,
    basisstate,
    compose,
    dagger,
    dense,
    eigenstates,
    embed,
    expect,
    hermitian_part,
    identity,
    inner,
    is_hermitian,
    norm,
    normalize,
    projector_onto,
    scale,
    sparse,
    subtract,
    sum_operators,
    tensor,
    tensor_kets,
    trace,
)

__all__ = [
    "Ket",
    "Operator",
    "add",
    "apply",
    "basisstate",
    "compose",
    "dagger",
    "dense",
    "eigenstates",
    "embed",
    "expect",
    "hermitian_part",
    "identity",
    "inner",
    "is_hermitian",
    "norm",
    "normalize",
    "projector_onto",
    "scale",
    "sparse",
    "subtract",
    "sum_operators",
    "tensor",
    "tensor_kets",
    "trace",
]
