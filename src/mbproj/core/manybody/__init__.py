from mbproj.core.manybody.occupations import (
    bosonstates,
    fermionstates,
    manybody_basis,
    occupations,
)
from mbproj.core.manybody.lift import (
    create,
    destroy,
    manybodyoperator,
    mode_occupations,
    number,
    occupation_state,
    onebody_matrix_lift,
    onebodyexpect,
    transition,
    twobody_matrix_lift,
)

__all__ = [
    "bosonstates",
    "fermionstates",
    "manybody_basis",
    "occupations",
    "create",
    "destroy",
    "manybodyoperator",
    "mode_occupations",
    "number",
    "occupation_state",
    "onebody_matrix_lift",
    "onebodyexpect",
    "transition",
    "twobody_matrix_lift",
]
