"""Lattice dispersions and Green's functions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from salpeter.grids.matsubara import FermionicMatsubaraGrid
from salpeter.grids.momentum import MomentumGrid
from salpeter.representations.field import GridField

if TYPE_CHECKING:
    from typing import Sequence


class HypercubicLattice:
    r"""Nearest-neighbour tight-binding model on a hypercubic lattice.

    The dispersion is

    .. math::
        \epsilon_{\mathbf{k}} = -2 t \sum_{i=1}^{D} \cos k_i.

    Args:
        hopping: Nearest-neighbour hopping :math:`t`.
        ndim: Number of dimensions :math:`D`.
    """

    def __init__(self, hopping: float = 1.0, ndim: int = 2):
        """Initialise the object."""
        if ndim < 1:
            raise ValueError(f"Number of dimensions must be at least one, got {ndim}.")
        self._hopping = hopping
        self._ndim = ndim

    @property
    def hopping(self) -> float:
        """Get the nearest-neighbour hopping."""
        return self._hopping

    @property
    def ndim(self) -> int:
        """Get the number of dimensions."""
        return self._ndim

    def __repr__(self) -> str:
        """Get a string representation of the lattice."""
        return f"{self.__class__.__name__}(hopping={self.hopping}, ndim={self.ndim})"

    def dispersion(self, kgrids: Sequence[MomentumGrid]) -> GridField:
        """Evaluate the dispersion on a Brillouin zone.

        Args:
            kgrids: One momentum grid per dimension.

        Returns:
            Dispersion on the momentum grids.
        """
        kgrids = tuple(kgrids)
        if len(kgrids) != self.ndim:
            raise ValueError(
                f"Lattice has {self.ndim} dimensions, but {len(kgrids)} momentum grids were given."
            )
        if not all(isinstance(grid, MomentumGrid) for grid in kgrids):
            raise ValueError("Dispersion must be evaluated on momentum grids.")
        mesh = np.meshgrid(*(grid.points for grid in kgrids), indexing="ij")
        energies = -2.0 * self.hopping * sum(np.cos(k) for k in mesh)
        return GridField(kgrids, np.asarray(energies, dtype=float))


def lattice_greens_function(
    fgrid: FermionicMatsubaraGrid,
    dispersion: GridField,
    chempot: float = 0.0,
    self_energy: GridField | None = None,
) -> GridField:
    r"""Build the lattice Green's function from a dispersion.

    .. math::
        G(i\omega_n, \mathbf{k}) = \frac{1}{i\omega_n + \mu - \epsilon_{\mathbf{k}} -
        \Sigma(i\omega_n)}

    Args:
        fgrid: Fermionic Matsubara grid.
        dispersion: Dispersion on the momentum grids.
        chempot: Chemical potential.
        self_energy: Local self-energy on the fermionic grid. If `None`, the non-interacting
            Green's function is returned.

    Returns:
        Green's function on the fermionic and momentum grids.
    """
    if not isinstance(fgrid, FermionicMatsubaraGrid):
        raise ValueError("Green's function must be defined on a fermionic Matsubara grid.")
    shape = (len(fgrid),) + (1,) * dispersion.ndim
    denominator = 1.0j * fgrid.points.reshape(shape) + chempot - dispersion.array[None]
    if self_energy is not None:
        if self_energy.grids != (fgrid,):
            raise ValueError("Self-energy must be defined on the fermionic Matsubara grid.")
        denominator = denominator - self_energy.array.reshape(shape)
    return GridField((fgrid, *dispersion.grids), 1.0 / denominator)
