"""Tests for :module:`~salpeter.diagrams.eigenvalues`.

The leading eigenvalues are compared against direct diagonalisation of the kernel at each transfer
frequency and momentum, since there are no reference values to compare against.
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

import numpy as np
import pytest

from salpeter.diagrams import (
    calc_bubbles,
    get_leading_eigenvalues,
    get_max_eigenvalues,
    max_eigenvalue,
)
from salpeter.grids import GridBM, GridFM
from salpeter.representations import GridField, Selection

if TYPE_CHECKING:
    from .conftest import Helper


def test_max_eigenvalue(helper: Helper) -> None:
    """Test the dominant eigenvalue of a product of matrices."""
    rng = np.random.default_rng(3)
    bubble = np.diag(rng.random(6) - 0.5)
    vertex = rng.random((6, 6)) + 1.0j * rng.random((6, 6))
    eigvals = np.linalg.eigvals(bubble @ vertex)

    value, vector = max_eigenvalue(bubble, vertex, Selection.REAL)
    assert np.isclose(value.real, np.max(eigvals.real))
    assert helper.are_equal_arrays(bubble @ vertex @ vector, value * vector)

    value, vector = max_eigenvalue(bubble, vertex, "magnitude")
    assert np.isclose(abs(value), np.max(np.abs(eigvals)))

    with pytest.raises(ValueError):
        max_eigenvalue(bubble, vertex[:5, :5])


def test_scalar_kernel() -> None:
    """Test that a diagonal kernel gives the largest product of the diagonals."""
    bubble = np.diag([0.1, 0.4, -0.9])
    vertex = np.eye(3)
    value, _ = max_eigenvalue(bubble, vertex, Selection.REAL)
    assert np.isclose(value, 0.4)
    value, _ = max_eigenvalue(bubble, vertex, Selection.MAGNITUDE)
    assert np.isclose(value, -0.9)


@pytest.mark.parametrize("selection", [Selection.REAL, Selection.MAGNITUDE])
def test_max_eigenvalues(
    helper: Helper,
    greens_function: GridField,
    fgrid: GridFM,
    bgrid: GridBM,
    selection: Selection,
) -> None:
    """Test the momentum resolved eigenvalues against direct diagonalisation."""
    vertex = helper.random_vertex(bgrid, fgrid, scale=2.0, seed=1)
    transfer = bgrid.point_of(-1)
    bubbles = calc_bubbles(greens_function, transfer)
    eigenvalues = get_max_eigenvalues(bubbles, vertex, transfer, selection)
    assert eigenvalues.grids == greens_function.grids[1:]

    # Transfers given by Matsubara number agree
    by_number = get_max_eigenvalues(bubbles, vertex, -1, selection)
    assert helper.are_equal_arrays(eigenvalues.array, by_number.array)

    gamma = vertex[transfer].as_matrix()  # type: ignore[union-attr]
    for momentum in itertools.product(*(range(n) for n in bubbles.shape[1:])):
        chi0 = np.diag(bubbles.array[(slice(None), *momentum)])
        value, _ = max_eigenvalue(chi0, gamma, selection)
        assert np.isclose(eigenvalues[momentum], value)


def test_leading_eigenvalues(
    helper: Helper,
    greens_function: GridField,
    fgrid: GridFM,
    bgrid: GridBM,
) -> None:
    """Test the eigenvalues over all transfer frequencies."""
    vertex = helper.random_vertex(bgrid, fgrid, scale=2.0, seed=2)
    eigenvalues = get_leading_eigenvalues(greens_function, vertex)
    assert eigenvalues.grids == (bgrid, *greens_function.grids[1:])
    for transfer in bgrid:
        bubbles = calc_bubbles(greens_function, transfer)
        expected = get_max_eigenvalues(bubbles, vertex, transfer)
        assert isinstance(eigenvalues[transfer], GridField)
        assert helper.are_equal_arrays(np.asarray(eigenvalues[transfer]), expected.array)


def test_attractive_vertex(greens_function: GridField, fgrid: GridFM) -> None:
    """Test that a constant vertex gives an eigenvalue of the summed bubble."""
    bgrid = GridBM(0, 1, beta=fgrid.beta)
    coupling = -1.5
    vertex = GridField((bgrid, fgrid, fgrid), np.full((1, len(fgrid), len(fgrid)), coupling))
    eigenvalues = get_leading_eigenvalues(greens_function, vertex, Selection.MAGNITUDE)

    # A rank one kernel has a single non-zero eigenvalue, the trace
    bubbles = calc_bubbles(greens_function, 0)
    expected = coupling * np.sum(bubbles.array, axis=0)
    assert np.allclose(eigenvalues.array[0], expected)


def test_invalid_vertex(greens_function: GridField, fgrid: GridFM, bgrid: GridBM) -> None:
    """Test the errors raised for invalid vertices."""
    with pytest.raises(ValueError):
        get_leading_eigenvalues(greens_function, GridField((bgrid, fgrid)))
    with pytest.raises(ValueError):
        get_leading_eigenvalues(greens_function, GridField((fgrid, fgrid, fgrid)))
    other = GridFM.from_uniform(2, beta=fgrid.beta)
    with pytest.raises(ValueError):
        get_leading_eigenvalues(greens_function, GridField((bgrid, other, other)))
    bubbles = calc_bubbles(greens_function, 0)
    vertex = GridField((bgrid, fgrid, fgrid))
    with pytest.raises(IndexError):
        get_max_eigenvalues(bubbles, vertex, 10)
