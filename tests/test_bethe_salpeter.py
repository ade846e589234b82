"""Tests for :module:`~salpeter.solvers.bethe_salpeter`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pytest

from salpeter import util
from salpeter.diagrams import calc_bubbles
from salpeter.solvers import BetheSalpeter

if TYPE_CHECKING:
    from salpeter.grids import GridBM, GridFM
    from salpeter.representations import GridField
    from salpeter.typing import Array

    from .conftest import Helper


def random_matrices(size: int, scale: float = 0.1, seed: int = 0) -> tuple[Array, Array]:
    """Get a random diagonal bubble and a random vertex with a convergent kernel."""
    rng = np.random.default_rng(seed)
    bubble = np.diag(rng.random(size) + 1.0j * rng.random(size))
    vertex = rng.random((size, size)) + 1.0j * rng.random((size, size))
    vertex *= scale / np.linalg.norm(bubble @ vertex, ord=2)
    return bubble, vertex


def test_scalar() -> None:
    """Test the solution for a single frequency."""
    solver = BetheSalpeter(np.array([[0.5]]), np.array([[1.0]]))
    chi = solver.solve_inversion()
    assert np.isclose(chi[0, 0], 1.0)
    assert np.isclose(solver.determinant(), 0.5)


def test_default_determinant() -> None:
    """Test the determinant before an inversion."""
    bubble, vertex = random_matrices(4)
    solver = BetheSalpeter(bubble, vertex)
    assert solver.determinant() == 1.0
    solver.solve_iterations(3)
    assert solver.determinant() == 1.0


@pytest.mark.parametrize("forward", [True, False])
def test_zero_vertex(forward: bool) -> None:
    """Test that a vanishing vertex returns the bubble."""
    bubble, _ = random_matrices(5)
    solver = BetheSalpeter(bubble, np.zeros((5, 5)), forward=forward)
    assert np.array_equal(solver.solve_inversion(), bubble)
    assert solver.determinant() == 1.0
    assert np.array_equal(solver.solve_iterations(4), bubble)


@pytest.mark.parametrize("forward", [True, False])
def test_inversion(helper: Helper, forward: bool) -> None:
    """Test that the inversion satisfies the Bethe--Salpeter equation."""
    bubble, vertex = random_matrices(6, scale=0.8)
    solver = BetheSalpeter(bubble, vertex, forward=forward)
    chi = solver.solve_inversion()
    product = bubble @ vertex if forward else vertex @ bubble
    assert helper.are_equal_arrays(chi, bubble + product @ chi)
    assert np.isclose(solver.determinant(), np.linalg.det(np.eye(6) - product))

    # Solving twice gives the same result
    assert np.array_equal(solver.solve_inversion(), chi)


def test_directions_differ() -> None:
    """Test that the directions differ for a bubble and vertex that do not commute."""
    bubble, vertex = random_matrices(4, scale=0.5)
    forward = BetheSalpeter(bubble, vertex, forward=True).solve_inversion()
    backward = BetheSalpeter(bubble, vertex, forward=False).solve_inversion()
    assert not np.allclose(forward, backward)


@pytest.mark.parametrize("forward", [True, False])
def test_iterations(helper: Helper, forward: bool) -> None:
    """Test that the iterations converge to the inversion."""
    bubble, vertex = random_matrices(6, scale=0.3)
    solver = BetheSalpeter(bubble, vertex, forward=forward)
    chi_inv = solver.solve_inversion()
    chi_iter = solver.solve_iterations(60)
    assert helper.are_equal_arrays(chi_iter, chi_inv, tol=1e-10)

    # Damped iterations converge to the same fixed point
    chi_mix = solver.solve_iterations(200, mix=0.5)
    assert helper.are_equal_arrays(chi_mix, chi_inv, tol=1e-10)


def test_iterations_monotone() -> None:
    """Test that the iterations of a contraction converge monotonically."""
    bubble, vertex = random_matrices(6, scale=0.5)
    solver = BetheSalpeter(bubble, vertex)
    chi_inv = solver.solve_inversion()
    partial_sums = [solver.solve_iterations(n_iter) for n_iter in range(21)]

    changes = [np.linalg.norm(b - a) for a, b in zip(partial_sums[:-1], partial_sums[1:])]
    assert all(b <= a for a, b in zip(changes[:-1], changes[1:]))
    assert changes[-1] < 1e-5 * changes[0]

    errors = [np.linalg.norm(chi - chi_inv) for chi in partial_sums]
    assert all(b <= a for a, b in zip(errors[:-1], errors[1:]))
    assert errors[-1] < 1e-5 * errors[0]


def test_partial_sums(helper: Helper) -> None:
    """Test that the iterations are partial sums of the ladder series."""
    bubble, vertex = random_matrices(4, scale=0.5)
    solver = BetheSalpeter(bubble, vertex)
    kernel = bubble @ vertex
    assert np.array_equal(solver.solve_iterations(0), bubble)
    expected = bubble + kernel @ bubble + kernel @ kernel @ bubble
    assert helper.are_equal_arrays(solver.solve_iterations(2), expected)

    # One mixed iteration
    chi = solver.solve_iterations(1, mix=0.25)
    assert helper.are_equal_arrays(chi, 0.25 * (bubble + kernel @ bubble) + 0.75 * bubble)


@pytest.mark.parametrize("order", [0, 1, 3])
def test_order_n(helper: Helper, order: int) -> None:
    """Test the evaluation of a single order of the ladder series."""
    bubble, vertex = random_matrices(4, scale=0.5)
    solver = BetheSalpeter(bubble, vertex, forward=False)
    chi = solver.solve_iterations(order, evaluate_only_order_n=True)
    expected = np.linalg.matrix_power(vertex @ bubble, order) @ bubble
    assert helper.are_equal_arrays(chi, expected)

    # Mixing does not apply to a single order
    chi_mix = solver.solve_iterations(order, mix=0.5, evaluate_only_order_n=True)
    assert helper.are_equal_arrays(chi_mix, expected)


def test_singular_kernel() -> None:
    """Test the fallback for a singular kernel."""
    bubble = np.eye(2)
    vertex = np.array([[1.0, 0.0], [0.0, 0.5]])
    solver = BetheSalpeter(bubble, vertex)
    with util.catch_warnings(UserWarning) as warnings:
        chi = solver.solve_inversion()
    assert any("pseudo-inverse" in str(warning.message) for warning in warnings)
    assert np.isclose(solver.determinant(), 0.0)
    assert np.all(np.isfinite(chi))


def test_invalid_input() -> None:
    """Test the errors raised for invalid input."""
    with pytest.raises(ValueError):
        BetheSalpeter(np.eye(3), np.eye(4))
    with pytest.raises(ValueError):
        BetheSalpeter(np.ones((3, 4)), np.ones((3, 4)))
    with pytest.raises(ValueError):
        BetheSalpeter(np.eye(3), np.eye(3), tolerance=1e-8)

    solver = BetheSalpeter(np.eye(3), np.zeros((3, 3)))
    with pytest.raises(ValueError):
        solver.solve_iterations(-1)
    with pytest.raises(ValueError):
        solver.solve_iterations(2, mix=0.0)
    with pytest.raises(ValueError):
        solver.solve_iterations(2, mix=1.5)


def test_input_not_modified() -> None:
    """Test that the solver does not modify its input."""
    bubble, vertex = random_matrices(4, scale=0.5)
    bubble_copy, vertex_copy = bubble.copy(), vertex.copy()
    solver = BetheSalpeter(bubble, vertex)
    solver.solve_inversion()
    solver.solve_iterations(5, mix=0.7)
    assert np.array_equal(bubble, bubble_copy)
    assert np.array_equal(vertex, vertex_copy)
    assert solver.bubble is not None
    assert solver.size == 4


@pytest.mark.parametrize("verbosity", [0, 2])
def test_kernel(helper: Helper, verbosity: int) -> None:
    """Test the kernel with inversion and iteration options."""
    bubble, vertex = random_matrices(5, scale=0.3)
    solver = BetheSalpeter(bubble, vertex, verbosity=verbosity)
    chi_inv = solver.kernel()
    assert solver.result is chi_inv

    solver = BetheSalpeter(
        bubble, vertex, verbosity=verbosity, eval_iterations=True, n_iter=60, mix=1.0
    )
    chi_iter = solver.kernel()
    assert helper.are_equal_arrays(chi_iter, chi_inv, tol=1e-10)

    solver.set_options(n_iter=2, evaluate_only_order_n=True)
    kernel = bubble @ vertex
    assert helper.are_equal_arrays(solver.kernel(), kernel @ kernel @ bubble)


def test_from_fields(
    helper: Helper,
    greens_function: GridField,
    fgrid: GridFM,
    bgrid: GridBM,
) -> None:
    """Test the construction of solvers from fields."""
    vertex = helper.random_vertex(bgrid, fgrid, scale=0.5)
    transfer = bgrid.point_of(1)
    bubbles = calc_bubbles(greens_function, transfer)
    vertex_w = vertex[transfer]

    # At a single momentum
    momentum = (2,) * (greens_function.ndim - 1)
    solver = BetheSalpeter.from_fields(bubbles, vertex_w, momentum=momentum)
    assert solver.size == len(fgrid)
    assert np.array_equal(np.diag(solver.bubble), bubbles.array[(slice(None), *momentum)])
    assert np.array_equal(solver.vertex, vertex_w.as_matrix())  # type: ignore[union-attr]

    # Over all momenta, where the kernel is block diagonal in momentum
    solver_full = BetheSalpeter.from_fields(bubbles, vertex_w)
    assert solver_full.size == bubbles.size
    chi_full = solver_full.solve_inversion()
    chi = solver.solve_inversion()
    shape = bubbles.shape
    chi_full = chi_full.reshape(shape + shape)
    block = chi_full[(slice(None), *momentum, slice(None), *momentum)]
    assert helper.are_equal_arrays(block, chi)

    with pytest.raises(ValueError):
        BetheSalpeter.from_fields(bubbles, vertex)


def test_options() -> None:
    """Test the options of the solver."""
    solver = BetheSalpeter(np.eye(2), np.zeros((2, 2)), forward=False, n_iter=3)
    assert solver.options["forward"] is False
    assert solver.options["n_iter"] == 3
    assert list(solver.options) == sorted(solver.options)
    assert repr(solver).startswith("BetheSalpeter(size=2, ")

    # Options are per instance
    assert BetheSalpeter(np.eye(2), np.zeros((2, 2))).forward is True
    with pytest.raises(ValueError):
        solver.set_options(forward=True, tolerance=1e-8)
