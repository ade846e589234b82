r"""Leading eigenvalues of the Bethe--Salpeter kernel.

The ladder diverges when the largest eigenvalue :math:`\lambda` of :math:`\chi_0 \Gamma` reaches
one, which signals a magnetic, charge or pairing instability depending on the channel of the
vertex. For a momentum independent vertex :math:`\Gamma_W(i\omega, i\omega')` the kernel is block
diagonal in the transfer momentum :math:`\mathbf{q}`, and the eigenvalues are found for each
:math:`(W, \mathbf{q})` from the matrix

.. math::
    \chi_0(i\omega, \mathbf{q}; W) \, \Gamma_W(i\omega, i\omega')

in the fermionic frequencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from salpeter import printing, util
from salpeter.diagrams.bubbles import _check_greens_function, calc_bubbles
from salpeter.grids.matsubara import BosonicMatsubaraGrid, MatsubaraPoint
from salpeter.representations.enums import Selection
from salpeter.representations.field import GridField

if TYPE_CHECKING:
    from salpeter.grids.matsubara import BaseMatsubaraGrid
    from salpeter.typing import Array


def _check_vertex(vertex: GridField, fgrid: BaseMatsubaraGrid) -> BosonicMatsubaraGrid:
    """Check that a field is a vertex on a fermionic grid and return its bosonic grid."""
    if vertex.ndim != 3:
        raise ValueError(f"vertex must be defined on three grids, got {vertex.ndim}.")
    bgrid = vertex.grids[0]
    if not isinstance(bgrid, BosonicMatsubaraGrid):
        raise ValueError("The leading grid of a vertex must be a bosonic grid.")
    if vertex.grids[1] != fgrid or vertex.grids[2] != fgrid:
        raise ValueError("vertex must be defined on the fermionic grid of the Green's function.")
    return bgrid


def _transfer_position(bgrid: BosonicMatsubaraGrid, transfer: MatsubaraPoint | int) -> int:
    """Get the position of a transfer frequency on a bosonic grid."""
    if isinstance(transfer, MatsubaraPoint):
        return bgrid.position(transfer)
    return bgrid.point_of(int(transfer)).index


def max_eigenvalue(
    bubble: Array,
    vertex: Array,
    selection: Selection | str = Selection.REAL,
) -> tuple[complex, Array]:
    """Find the dominant eigenvalue of the product of a bubble and a vertex.

    Args:
        bubble: The bubble :math:`\\chi_0`, as a square matrix.
        vertex: The irreducible vertex :math:`\\Gamma`, as a square matrix of the same dimension.
        selection: Whether to select the eigenvalue with the largest real part or modulus.

    Returns:
        The dominant eigenvalue of :math:`\\chi_0 \\Gamma` and its right-hand eigenvector.
    """
    selection = Selection(selection)
    bubble = np.asarray(bubble)
    vertex = np.asarray(vertex)
    if bubble.ndim != 2 or bubble.shape != vertex.shape or bubble.shape[0] != bubble.shape[1]:
        raise ValueError(
            f"bubble and vertex must be square matrices of the same dimension, got "
            f"{bubble.shape} and {vertex.shape}."
        )

    eigvals, eigvecs = util.eig(bubble @ vertex, hermitian=False)
    index = int(np.argmax(selection.key(eigvals)))

    return complex(eigvals[index]), eigvecs[:, index]


def get_max_eigenvalues(
    bubbles: GridField,
    vertex: GridField,
    transfer: MatsubaraPoint | int,
    selection: Selection | str = Selection.REAL,
) -> GridField:
    """Find the dominant eigenvalue of the kernel for every transfer momentum.

    Args:
        bubbles: Bubble at the transfer frequency, on the fermionic and momentum grids.
        vertex: Irreducible vertex on the bosonic and two fermionic grids.
        transfer: Bosonic transfer frequency, as a point on the bosonic grid of the vertex or a
            bosonic Matsubara number.
        selection: Whether to select the eigenvalue with the largest real part or modulus.

    Returns:
        Dominant eigenvalues on the momentum grids.
    """
    selection = Selection(selection)
    fgrid = _check_greens_function(bubbles)
    bgrid = _check_vertex(vertex, fgrid)
    gamma = vertex[_transfer_position(bgrid, transfer)].as_matrix()  # type: ignore[union-attr]

    # Products for all momenta at once, the bubble being diagonal in frequency
    nf = len(fgrid)
    chi0 = bubbles.array.reshape(nf, -1).T
    eigvals = np.linalg.eigvals(util.einsum("qi,ij->qij", chi0, gamma))
    index = np.argmax(selection.key(eigvals), axis=1)
    leading = eigvals[np.arange(eigvals.shape[0]), index]

    return GridField(bubbles.grids[1:], leading.reshape(bubbles.shape[1:]).astype(complex))


def get_leading_eigenvalues(
    greens_function: GridField,
    vertex: GridField,
    selection: Selection | str = Selection.REAL,
) -> GridField:
    """Find the dominant eigenvalue of the kernel for every transfer frequency and momentum.

    Args:
        greens_function: Green's function on the fermionic and momentum grids.
        vertex: Irreducible vertex on the bosonic and two fermionic grids.
        selection: Whether to select the eigenvalue with the largest real part or modulus.

    Returns:
        Dominant eigenvalues on the bosonic grid of the vertex and the momentum grids.
    """
    selection = Selection(selection)
    fgrid = _check_greens_function(greens_function)
    bgrid = _check_vertex(vertex, fgrid)

    eigenvalues = GridField((bgrid, *greens_function.grids[1:]))
    with printing.IterationsPrinter(len(bgrid), description="Transfer frequency") as progress:
        for transfer in bgrid:
            bubbles = calc_bubbles(greens_function, transfer)
            eigenvalues[transfer] = get_max_eigenvalues(bubbles, vertex, transfer, selection)
            progress.update(transfer.index + 1)

    # Report the leading eigenvalue over all transfers
    flat = eigenvalues.array.ravel()
    position = np.unravel_index(int(np.argmax(selection.key(flat))), eigenvalues.shape)
    value = complex(eigenvalues.array[position])
    rating = printing.rate_margin(1.0 - value.real, 1e-2)
    printing.print_extremum("Leading eigenvalue", value, rating, bgrid, position)

    return eigenvalues
