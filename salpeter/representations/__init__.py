r"""Representations of quantities on grids.

All quantities in :mod:`salpeter` are stored as a
:class:`~salpeter.representations.field.GridField`, an array of values on the product of a fixed
tuple of grids

>>> from salpeter.grids import GridFM, GridK
>>> from salpeter.representations import GridField
>>> fgrid = GridFM.from_uniform(4, beta=10.0)
>>> kgrids = GridK.from_shape(8, 2)
>>> greens_function = GridField((fgrid, *kgrids))
>>> greens_function.shape
(8, 8, 8)

Indexing a field with a point of its leading grid returns the field on the remaining grids

>>> greens_function[fgrid[0]].shape
(8, 8)

The solvers in :mod:`~salpeter.solvers` act on dense matrices, which are obtained from fields via
:meth:`~salpeter.representations.field.GridField.as_matrix` and
:meth:`~salpeter.representations.field.GridField.as_diagonal_matrix`.


Submodules
----------

.. autosummary::
    :toctree:

    field
    enums
"""

from salpeter.representations.enums import Selection
from salpeter.representations.field import GridField
