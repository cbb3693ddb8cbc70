from mbproj.core.subspace.projector import (
    embed_operator,
    embed_state,
    orthonormalize,
    project_operator,
    project_state,
    projector,
    superbasis_of,
)

__all__ = [
    "embed_operator",
    "embed_state",
    "orthonormalize",
    "project_operator",
    "project_state",
    "projector",
    "superbasis_of",
]
