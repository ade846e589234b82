r"""Solvers for the Bethe--Salpeter equation.

The Bethe--Salpeter equation relates the two-particle susceptibility to the bubble and the
irreducible vertex

.. math::
    \chi = \chi_0 + \chi_0 \Gamma \chi.

Solvers take dense matrices, which for quantities on grids can be obtained with
:meth:`~salpeter.solvers.bethe_salpeter.BetheSalpeter.from_fields`

>>> import numpy as np
>>> from salpeter import BetheSalpeter, quiet
>>> quiet()  # Suppress output
>>> solver = BetheSalpeter(np.array([[0.5]]), np.array([[1.0]]))
>>> solver.kernel()
array([[1.]])
>>> solver.determinant()
(0.5+0j)

The equation can be solved either by inversion of the kernel or by fixed-point iteration, as
selected by the ``eval_iterations`` option, or directly with
:meth:`~salpeter.solvers.bethe_salpeter.BetheSalpeter.solve_inversion` and
:meth:`~salpeter.solvers.bethe_salpeter.BetheSalpeter.solve_iterations`.


Submodules
----------

.. autosummary::
    :toctree:

    solver
    bethe_salpeter
"""

from salpeter.solvers.bethe_salpeter import BetheSalpeter
