r"""Two-particle diagrams on the lattice.

The central object is the bubble, the product of two Green's functions at a bosonic transfer
frequency :math:`W`, convolved over momentum

>>> from salpeter import GridFM, GridK, HypercubicLattice, lattice_greens_function, quiet
>>> from salpeter.diagrams import calc_bubbles
>>> quiet()  # Suppress output
>>> fgrid = GridFM.from_uniform(4, beta=10.0)
>>> kgrids = GridK.from_shape(8, 2)
>>> dispersion = HypercubicLattice(hopping=1.0, ndim=2).dispersion(kgrids)
>>> greens_function = lattice_greens_function(fgrid, dispersion)
>>> bubbles = calc_bubbles(greens_function, 1)
>>> bubbles.shape
(8, 8, 8)

Combined with an irreducible vertex the bubble determines the leading eigenvalues of the
Bethe--Salpeter kernel, via :func:`~salpeter.diagrams.eigenvalues.get_leading_eigenvalues`, and the
ladder susceptibility, via :func:`~salpeter.diagrams.ladder.calc_ladder`.


Submodules
----------

.. autosummary::
    :toctree:

    bubbles
    eigenvalues
    ladder
"""

from salpeter.diagrams.bubbles import (
    transfer_frequency,
    shift_frequency,
    calc_static_bubbles,
    calc_bubbles,
    bubble_matrix,
)
from salpeter.diagrams.eigenvalues import (
    max_eigenvalue,
    get_max_eigenvalues,
    get_leading_eigenvalues,
)
from salpeter.diagrams.ladder import calc_ladder
