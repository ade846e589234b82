"""Matsubara frequency grids."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from salpeter.grids.grid import BaseGrid, GridPoint

if TYPE_CHECKING:
    from typing import Any

    from salpeter.typing import Array


class MatsubaraPoint(GridPoint):
    """A point on a Matsubara grid.

    In addition to the value and the position in the grid, a Matsubara point carries its Matsubara
    number :math:`n`, from which all index arithmetic is done.
    """

    __slots__ = ()

    @property
    def n(self) -> int:
        """Get the Matsubara number of the point."""
        return int(self.grid.matsubara_numbers[self.index])

    def __repr__(self) -> str:
        """Get a string representation of the point."""
        return f"{self.__class__.__name__}(index={self.index}, n={self.n}, value={self.value})"


class BaseMatsubaraGrid(BaseGrid):
    r"""Base class for Matsubara frequency grids.

    The grid holds the contiguous, half-open range of Matsubara numbers :math:`[n_{\rm min},
    n_{\rm max})`, with values

    .. math::
        \omega_n = \frac{(2n + \zeta) \pi}{\beta},

    where :math:`\zeta = 1` for fermions and :math:`\zeta = 0` for bosons.
    """

    beta: float = 256
    _options = {"beta"}

    _zeta: int

    def __init__(self, n_min: int, n_max: int, **kwargs: Any) -> None:  # noqa: D417
        """Initialise the grid.

        Args:
            n_min: Smallest Matsubara number of the grid.
            n_max: One past the largest Matsubara number of the grid.
            beta: Inverse temperature.
        """
        if int(n_max) <= int(n_min):
            raise ValueError(f"Empty Matsubara range [{n_min}, {n_max}).")
        self._n_min = int(n_min)
        self._n_max = int(n_max)
        self.set_options(**kwargs)
        if self.beta <= 0:
            raise ValueError(f"Inverse temperature must be positive, got {self.beta}.")
        self._points = self.values_of(np.arange(self._n_min, self._n_max))
        self._points.flags.writeable = False

    @property
    def domain(self) -> str:
        """Get the domain of the grid.

        Returns:
            Domain of the grid.
        """
        return "frequency"

    @property
    def point_class(self) -> type[MatsubaraPoint]:
        """Get the class used for points of the grid."""
        return MatsubaraPoint

    @property
    def n_min(self) -> int:
        """Get the smallest Matsubara number of the grid."""
        return self._n_min

    @property
    def n_max(self) -> int:
        """Get one past the largest Matsubara number of the grid."""
        return self._n_max

    @property
    def matsubara_numbers(self) -> Array:
        """Get the Matsubara numbers of the points."""
        return np.arange(self.n_min, self.n_max)

    def values_of(self, n: int | Array) -> Array:
        """Get the frequencies corresponding to Matsubara numbers.

        Args:
            n: Matsubara number(s).

        Returns:
            Frequencies.
        """
        return (2 * np.asarray(n) + self._zeta) * np.pi / self.beta

    def number_of(self, value: float) -> int:
        """Get the Matsubara number of a frequency.

        Args:
            value: Frequency.

        Returns:
            Matsubara number, rounded to the nearest integer.
        """
        return int(np.rint((value * self.beta / np.pi - self._zeta) / 2))

    def contains(self, n: int) -> bool:
        """Check if a Matsubara number lies on the grid.

        Args:
            n: Matsubara number.

        Returns:
            Whether the Matsubara number lies within :math:`[n_{\\rm min}, n_{\\rm max})`.
        """
        return self.n_min <= n < self.n_max

    def point_of(self, n: int) -> MatsubaraPoint:
        """Get the point with a given Matsubara number.

        Args:
            n: Matsubara number.

        Returns:
            The point.

        Raises:
            IndexError: If the Matsubara number is outside of the grid.
        """
        if not self.contains(n):
            raise IndexError(
                f"Matsubara number {n} is outside of the range [{self.n_min}, {self.n_max})."
            )
        return self.point_class(self, n - self.n_min)  # type: ignore[return-value]

    def __repr__(self) -> str:
        """Get a string representation of the grid."""
        name = self.__class__.__name__
        return f"{name}(n_min={self.n_min}, n_max={self.n_max}, beta={self.beta})"

    def __hash__(self) -> int:
        """Return a hash of the grid."""
        return hash((self.__class__.__name__, self.n_min, self.n_max, self.beta))


class FermionicMatsubaraGrid(BaseMatsubaraGrid):
    """Fermionic Matsubara frequency grid."""

    _zeta = 1

    @classmethod
    def from_uniform(cls, num: int, beta: float | None = None) -> FermionicMatsubaraGrid:
        """Create a grid symmetric about zero.

        Args:
            num: Number of positive frequencies.
            beta: Inverse temperature.

        Returns:
            Grid with Matsubara numbers :math:`n \\in [-{\\rm num}, {\\rm num})`.
        """
        if beta is None:
            beta = cls.beta
        return cls(-num, num, beta=beta)


GridFM = FermionicMatsubaraGrid


class BosonicMatsubaraGrid(BaseMatsubaraGrid):
    """Bosonic Matsubara frequency grid."""

    _zeta = 0

    @classmethod
    def from_uniform(cls, num: int, beta: float | None = None) -> BosonicMatsubaraGrid:
        """Create a grid symmetric about zero.

        Args:
            num: Number of non-negative frequencies.
            beta: Inverse temperature.

        Returns:
            Grid with Matsubara numbers :math:`n \\in (-{\\rm num}, {\\rm num})`.
        """
        if beta is None:
            beta = cls.beta
        return cls(-num + 1, num, beta=beta)


GridBM = BosonicMatsubaraGrid
