r"""Lattice Fourier transformation.

The transforms between momentum and real space are unnormalised in both directions, such that

.. math::
    \mathcal{F}^{-1} \left[ \mathcal{F} [x] \right] = N x,

where :math:`N` is the number of momentum points transformed over. Callers are responsible for the
normalisation.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import scipy.fft

if TYPE_CHECKING:
    from typing import Sequence

    from salpeter.typing import Array

"""Number of workers used by :mod:`scipy.fft`.

Negative values wrap around from the number of CPUs, such that ``-1`` uses all of them.
"""
FFT_WORKERS: int = int(os.environ.get("SALPETER_FFT_WORKERS", "1"))


def lattice_fft(array: Array, axes: Sequence[int]) -> Array:
    """Forward lattice transform, from momentum to real space.

    Args:
        array: Array to transform.
        axes: Axes of the array to transform over. All other axes are batched.

    Returns:
        Transformed array, unnormalised.
    """
    return scipy.fft.fftn(array, axes=tuple(axes), norm="backward", workers=FFT_WORKERS)


def lattice_ifft(array: Array, axes: Sequence[int]) -> Array:
    """Backward lattice transform, from real to momentum space.

    Args:
        array: Array to transform.
        axes: Axes of the array to transform over. All other axes are batched.

    Returns:
        Transformed array, unnormalised.
    """
    return scipy.fft.ifftn(array, axes=tuple(axes), norm="forward", workers=FFT_WORKERS)
