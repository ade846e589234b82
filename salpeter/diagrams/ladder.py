r"""Ladder susceptibilities.

For every bosonic transfer frequency :math:`W` and transfer momentum :math:`\mathbf{q}`, the
Bethe--Salpeter equation is solved in the fermionic frequencies with the bubble
:math:`\chi_0(i\omega, \mathbf{q}; W)` and a momentum independent irreducible vertex
:math:`\Gamma_W(i\omega, i\omega')`. The physical susceptibility is then

.. math::
    \chi(\mathbf{q}, W) = T \sum_{\omega \omega'} \chi_{\omega \omega'}(\mathbf{q}, W).
"""

from __future__ import annotations

import numpy as np

from salpeter import printing
from salpeter.diagrams.bubbles import _check_greens_function, calc_bubbles
from salpeter.diagrams.eigenvalues import _check_vertex
from salpeter.representations.field import GridField
from salpeter.solvers.bethe_salpeter import BetheSalpeter


def calc_ladder(
    greens_function: GridField,
    vertex: GridField,
    forward: bool = True,
) -> tuple[GridField, GridField]:
    """Calculate the ladder susceptibility for every transfer frequency and momentum.

    Args:
        greens_function: Green's function on the fermionic and momentum grids.
        vertex: Irreducible vertex on the bosonic and two fermionic grids.
        forward: Whether to solve the forward or backward Bethe--Salpeter equation.

    Returns:
        The susceptibility and the determinant of the Bethe--Salpeter kernel, both on the bosonic
        grid of the vertex and the momentum grids.
    """
    fgrid = _check_greens_function(greens_function)
    bgrid = _check_vertex(vertex, fgrid)
    grids = (bgrid, *greens_function.grids[1:])
    kshape = greens_function.shape[1:]

    susceptibility = GridField(grids)
    determinant = GridField(grids)
    with printing.IterationsPrinter(len(bgrid), description="Transfer frequency") as progress:
        for transfer in bgrid:
            bubbles = calc_bubbles(greens_function, transfer)
            vertex_w = vertex[transfer]
            for momentum in np.ndindex(*kshape):
                solver = BetheSalpeter.from_fields(
                    bubbles, vertex_w, momentum=momentum, forward=forward
                )
                chi = solver.solve_inversion()
                susceptibility[(transfer, *momentum)] = np.sum(chi) / fgrid.beta
                determinant[(transfer, *momentum)] = solver.determinant()
            progress.update(transfer.index + 1)

    # Report the closest approach to an instability
    position = np.unravel_index(int(np.argmin(np.abs(determinant.array))), determinant.shape)
    det = complex(determinant.array[position])
    rating = printing.rate_margin(abs(det), BetheSalpeter.critical_threshold)
    printing.print_extremum(
        "Smallest kernel determinant", det, rating, bgrid, position, precision=6
    )

    return susceptibility, determinant
