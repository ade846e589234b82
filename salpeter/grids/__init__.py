r"""Grids for Green's functions and two-particle quantities.

Grids are one-dimensional, fixed sets of points. Each point exposes its value and its position in
the grid, and points on Matsubara grids additionally carry their Matsubara number

>>> from salpeter.grids import GridFM
>>> grid = GridFM.from_uniform(2, beta=10.0)
>>> [point.n for point in grid]
[-2, -1, 0, 1]

Multidimensional objects are indexed by tuples of grids, and a :math:`D`-dimensional Brillouin
zone is a tuple of :math:`D` momentum grids.


Submodules
----------

.. autosummary::
    :toctree:

    grid
    matsubara
    momentum
    fourier
"""

from salpeter.grids.grid import BaseGrid, GridPoint
from salpeter.grids.matsubara import FermionicMatsubaraGrid, GridFM
from salpeter.grids.matsubara import BosonicMatsubaraGrid, GridBM
from salpeter.grids.matsubara import BaseMatsubaraGrid, MatsubaraPoint
from salpeter.grids.momentum import MomentumGrid, GridK
from salpeter.grids.fourier import lattice_fft, lattice_ifft
