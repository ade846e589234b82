r"""
****************************************************************
salpeter: Bethe--Salpeter equation solvers for lattice ladders
****************************************************************

Tools in :mod:`salpeter` build two-particle quantities from lattice Green's functions on Matsubara
frequency and momentum grids. Starting from a Green's function :math:`G(i\omega, \mathbf{k})` they
provide

a) the bubble :math:`\chi_0(i\omega, \mathbf{q}; W)` at a bosonic transfer frequency,
b) the solution of the Bethe--Salpeter equation for a bubble and an irreducible vertex, and
c) the leading eigenvalues of the Bethe--Salpeter kernel, which signal two-particle
   instabilities as they approach one.

Quantities are represented in the following ways:

.. list-table::
   :header-rows: 1
   :widths: 20 80

   * - Representation
     - Description
   * - :class:`~salpeter.grids.matsubara.FermionicMatsubaraGrid`
     - Fermionic Matsubara frequencies :math:`(2n + 1) \pi / \beta`.
   * - :class:`~salpeter.grids.matsubara.BosonicMatsubaraGrid`
     - Bosonic Matsubara frequencies :math:`2n \pi / \beta`.
   * - :class:`~salpeter.grids.momentum.MomentumGrid`
     - Uniform momenta :math:`2 \pi j / N` along one direction of the Brillouin zone.
   * - :class:`~salpeter.representations.field.GridField`
     - Array of values on the product of a tuple of grids, such as a Green's function, a bubble
       or a vertex.

The available operations are:

.. list-table::
   :header-rows: 1
   :widths: 20 80

   * - Operation
     - Description
   * - :func:`~salpeter.diagrams.bubbles.calc_bubbles`
     - Bubble at a bosonic transfer frequency, evaluated for all momenta by fast Fourier
       transforms.
   * - :class:`~salpeter.solvers.bethe_salpeter.BetheSalpeter`
     - Forward or backward Bethe--Salpeter equation, by inversion or iteration.
   * - :func:`~salpeter.diagrams.eigenvalues.get_leading_eigenvalues`
     - Leading eigenvalues of the kernel for every transfer frequency and momentum.
   * - :func:`~salpeter.diagrams.ladder.calc_ladder`
     - Ladder susceptibility for every transfer frequency and momentum.


Submodules
----------

.. autosummary::
    :toctree: _autosummary

    salpeter.grids
    salpeter.representations
    salpeter.diagrams
    salpeter.solvers
    salpeter.util

"""

__version__ = "1.0.0"

import numpy
import scipy

from salpeter.printing import console, quiet
from salpeter.grids import GridFM, GridBM, GridK
from salpeter.representations import GridField, Selection
from salpeter.lattice import HypercubicLattice, lattice_greens_function
from salpeter.diagrams import (
    calc_static_bubbles,
    calc_bubbles,
    get_max_eigenvalues,
    get_leading_eigenvalues,
    calc_ladder,
)
from salpeter.solvers import BetheSalpeter
