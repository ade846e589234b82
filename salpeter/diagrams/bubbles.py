r"""Two-particle bubbles.

The bubble at bosonic transfer frequency :math:`W` is the convolution of two lattice Green's
functions over momentum,

.. math::
    \chi_0(i\omega, \mathbf{q}; W) = -\frac{T}{N} \sum_{\mathbf{k}} G(i\omega, \mathbf{k})
    G(i\omega + W, \mathbf{q} - \mathbf{k}),

where :math:`N` is the number of momentum points. The convolution is evaluated for every fermionic
frequency at once by transforming to real space, multiplying pointwise and transforming back.
Only the frequency argument is shifted by the transfer; the momentum argument is the convolution
variable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from salpeter.grids.fourier import lattice_fft, lattice_ifft
from salpeter.grids.matsubara import BosonicMatsubaraGrid, FermionicMatsubaraGrid, MatsubaraPoint
from salpeter.grids.momentum import MomentumGrid
from salpeter.representations.field import GridField
from salpeter.util import is_float_equal

if TYPE_CHECKING:
    from typing import Sequence

    from salpeter.typing import Array


def _check_greens_function(greens_function: GridField) -> FermionicMatsubaraGrid:
    """Check that a field is a lattice Green's function and return its fermionic grid."""
    fgrid = greens_function.grids[0]
    if not isinstance(fgrid, FermionicMatsubaraGrid):
        raise ValueError("The leading grid of a Green's function must be a fermionic grid.")
    kgrids = greens_function.grids[1:]
    if not kgrids or not all(isinstance(grid, MomentumGrid) for grid in kgrids):
        raise ValueError("The trailing grids of a Green's function must be momentum grids.")
    return fgrid


def transfer_frequency(transfer: MatsubaraPoint | int, beta: float) -> tuple[float, int]:
    """Get the value and Matsubara number of a bosonic transfer frequency.

    Args:
        transfer: Point on a bosonic grid, or a bosonic Matsubara number.
        beta: Inverse temperature of the fermionic grid the transfer acts on.

    Returns:
        The frequency and the Matsubara number of the transfer.
    """
    if isinstance(transfer, MatsubaraPoint):
        if not isinstance(transfer.grid, BosonicMatsubaraGrid):
            raise ValueError("Transfer frequency must be a point on a bosonic grid.")
        if not is_float_equal(transfer.grid.beta, beta):
            raise ValueError(
                f"Transfer frequency is defined at beta={transfer.grid.beta}, but the Green's "
                f"function is defined at beta={beta}."
            )
        return transfer.value, transfer.n
    if isinstance(transfer, (int, np.integer)) and not isinstance(transfer, (bool, np.bool_)):
        return 2.0 * np.pi * int(transfer) / beta, int(transfer)
    raise TypeError(
        f"Transfer frequency must be a bosonic grid point or integer, got {type(transfer)}."
    )


def shift_frequency(greens_function: GridField, transfer: MatsubaraPoint | int) -> GridField:
    r"""Shift the frequency argument of a Green's function by a bosonic frequency.

    .. math::
        G_W(i\omega_n, \mathbf{k}) = G(i\omega_{n + m}, \mathbf{k}),

    where :math:`m` is the Matsubara number of :math:`W`. Where :math:`n + m` falls outside of the
    fermionic grid the shifted function is zero.

    Args:
        greens_function: Green's function on the fermionic and momentum grids.
        transfer: Bosonic transfer frequency.

    Returns:
        Shifted Green's function, on the same grids.
    """
    fgrid = _check_greens_function(greens_function)
    _, shift = transfer_frequency(transfer, fgrid.beta)

    shifted = greens_function.zeros_like()
    numbers = fgrid.matsubara_numbers + shift
    mask = (numbers >= fgrid.n_min) & (numbers < fgrid.n_max)
    shifted.array[mask] = greens_function.array[fgrid.indices[mask] + shift]

    return shifted


def _convolve(first: Array, second: Array, beta: float) -> Array:
    """Convolve two arrays over their trailing (momentum) axes, with the bubble prefactor."""
    axes = tuple(range(1, first.ndim))
    knorm = int(np.prod(first.shape[1:]))
    first_r = lattice_fft(first, axes)
    second_r = first_r if second is first else lattice_fft(second, axes)
    bubble = lattice_ifft(first_r * second_r, axes) / knorm

    # Momentum average and temperature factor
    return bubble / knorm / (-beta)  # type: ignore[no-any-return]


def calc_static_bubbles(greens_function: GridField) -> GridField:
    r"""Calculate the bubble at zero transfer frequency.

    .. math::
        \chi_0(i\omega, \mathbf{q}; 0) = -\frac{T}{N} \sum_{\mathbf{k}} G(i\omega, \mathbf{k})
        G(i\omega, \mathbf{q} - \mathbf{k})

    Args:
        greens_function: Green's function on the fermionic and momentum grids.

    Returns:
        Bubble on the same grids.
    """
    fgrid = _check_greens_function(greens_function)
    array = greens_function.array
    return GridField(greens_function.grids, _convolve(array, array, fgrid.beta))


def calc_bubbles(greens_function: GridField, transfer: MatsubaraPoint | int) -> GridField:
    r"""Calculate the bubble at a bosonic transfer frequency.

    .. math::
        \chi_0(i\omega, \mathbf{q}; W) = -\frac{T}{N} \sum_{\mathbf{k}} G(i\omega, \mathbf{k})
        G(i\omega + W, \mathbf{q} - \mathbf{k})

    Args:
        greens_function: Green's function on the fermionic and momentum grids.
        transfer: Bosonic transfer frequency :math:`W`, as a point on a bosonic grid or a bosonic
            Matsubara number.

    Returns:
        Bubble on the same grids.

    Notes:
        Values of :math:`G(i\omega + W)` beyond the fermionic grid are taken to be zero. For
        :math:`W = 0` the result is that of :func:`calc_static_bubbles`.
    """
    fgrid = _check_greens_function(greens_function)
    _, number = transfer_frequency(transfer, fgrid.beta)
    if number == 0:
        return calc_static_bubbles(greens_function)

    shifted = shift_frequency(greens_function, transfer)
    array = _convolve(greens_function.array, shifted.array, fgrid.beta)

    return GridField(greens_function.grids, array)


def bubble_matrix(bubble: GridField, momentum: Sequence[int] | None = None) -> Array:
    """Get the dense matrix of a bubble.

    Args:
        bubble: Bubble on the fermionic and momentum grids.
        momentum: Positions on the momentum grids. If given, the matrix is over the fermionic
            frequencies at this momentum, otherwise over the composite frequency and momentum index.

    Returns:
        The diagonal bubble matrix.
    """
    _check_greens_function(bubble)
    if momentum is None:
        return bubble.as_diagonal_matrix()
    momentum = tuple(momentum)
    if len(momentum) != bubble.ndim - 1:
        raise ValueError(
            f"Bubble has {bubble.ndim - 1} momentum grids, but {len(momentum)} positions were "
            "given."
        )
    positions = tuple(grid.position(k) for grid, k in zip(bubble.grids[1:], momentum))
    return np.diag(bubble.array[(slice(None), *positions)])
