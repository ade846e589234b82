"""Enumerations for representations."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from salpeter.typing import Array


class RepresentationEnum(Enum):
    """Base enumeration for representations."""

    @classmethod
    def _missing_(cls, value: object) -> None:
        """Raise an error listing the valid values for an unknown value."""
        name = cls.__name__.lower()
        valid = [r.value for r in cls]
        raise ValueError(f"Invalid {name}: {value!r}. Valid {name}s are: {', '.join(valid)}")


class Selection(RepresentationEnum):
    """Enumeration for the selection of the dominant eigenvalue.

    The valid selections are:
    - `real`: The eigenvalue with the largest real part.
    - `magnitude`: The eigenvalue with the largest modulus.
    """

    REAL = "real"
    MAGNITUDE = "magnitude"

    def key(self, eigvals: Array) -> Array:
        """Get the quantity that is maximised by this selection."""
        if self == Selection.REAL:
            return eigvals.real
        return abs(eigvals)
