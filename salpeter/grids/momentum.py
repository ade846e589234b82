"""Momentum grids."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from salpeter.grids.grid import BaseGrid

if TYPE_CHECKING:
    from typing import Any


class MomentumGrid(BaseGrid):
    r"""Periodic momentum grid along one reciprocal lattice direction.

    The points are :math:`k_j = 2 \pi j / N_k` for :math:`j = 0, \dots, N_k - 1`. A
    :math:`D`-dimensional Brillouin zone is represented by a tuple of :math:`D` of these grids.
    """

    def __init__(self, nk: int, **kwargs: Any) -> None:  # noqa: D417
        """Initialise the grid.

        Args:
            nk: Number of momentum points.
        """
        if int(nk) < 1:
            raise ValueError(f"Momentum grid must have at least one point, got {nk}.")
        super().__init__(2.0 * np.pi * np.arange(int(nk)) / int(nk), **kwargs)

    @property
    def domain(self) -> str:
        """Get the domain of the grid.

        Returns:
            Domain of the grid.
        """
        return "momentum"

    def __repr__(self) -> str:
        """Get a string representation of the grid."""
        return f"{self.__class__.__name__}(nk={len(self)})"

    @classmethod
    def from_shape(cls, nk: int, ndim: int) -> tuple[MomentumGrid, ...]:
        """Create the grids of a hypercubic Brillouin zone.

        Args:
            nk: Number of momentum points along each direction.
            ndim: Number of dimensions.

        Returns:
            One momentum grid per dimension.
        """
        if ndim < 1:
            raise ValueError(f"Number of dimensions must be at least one, got {ndim}.")
        return tuple(cls(nk) for _ in range(ndim))


GridK = MomentumGrid
