from __future__ import annotations

from typing import Protocol, Tuple, runtime_checkable


@runtime_checkable
class BasisProto(Protocol):
    """
    What the projector and the lifter need from a basis: a fixed shape and
    structural equality. Any object satisfying this can be used as a basis.
    """

    @property
    def shape(self) -> Tuple[int, ...]:
        """
        Per-factor dimensions. A single (non-composite) basis has shape (dim,).
        """
        ...

    @property
    def dim(self) -> int: ...
