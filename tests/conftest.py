"""Configuration for :mod:`pytest`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pytest

from salpeter import quiet
from salpeter.grids import GridBM, GridFM, GridK
from salpeter.lattice import HypercubicLattice, lattice_greens_function
from salpeter.representations import GridField

if TYPE_CHECKING:
    from salpeter.typing import Array

quiet()

BETA = 5.0
NUM_FERMIONIC = 6
NUM_BOSONIC = 3
NUM_MOMENTA = 6


class Helper:
    """Helper class for tests."""

    @staticmethod
    def are_equal_arrays(array1: Array, array2: Array, tol: float = 1e-8) -> bool:
        """Check if two arrays are equal to within a threshold."""
        array1 = np.asarray(array1)
        array2 = np.asarray(array2)
        print(
            f"Error in {object.__repr__(array1)} and {object.__repr__(array2)}: "
            f"{np.max(np.abs(array1 - array2))}"
        )
        return np.allclose(array1, array2, atol=tol)

    @staticmethod
    def random_vertex(bgrid: GridBM, fgrid: GridFM, scale: float = 1.0, seed: int = 0) -> GridField:
        """Get a random complex vertex on a bosonic and two fermionic grids."""
        rng = np.random.default_rng(seed)
        shape = (len(bgrid), len(fgrid), len(fgrid))
        array = rng.random(shape) + 1.0j * rng.random(shape) - (0.5 + 0.5j)
        return GridField((bgrid, fgrid, fgrid), scale * array)


@pytest.fixture(scope="session")
def helper() -> Helper:
    """Fixture for the :class:`Helper` class."""
    return Helper()


@pytest.fixture(scope="session")
def fgrid() -> GridFM:
    """Fixture for a fermionic Matsubara grid."""
    return GridFM.from_uniform(NUM_FERMIONIC, beta=BETA)


@pytest.fixture(scope="session")
def bgrid() -> GridBM:
    """Fixture for a bosonic Matsubara grid."""
    return GridBM.from_uniform(NUM_BOSONIC, beta=BETA)


@pytest.fixture(scope="session", params=[1, 2], ids=["1d", "2d"])
def greens_function(request: pytest.FixtureRequest, fgrid: GridFM) -> GridField:
    """Fixture for the non-interacting Green's function of a hypercubic lattice."""
    kgrids = GridK.from_shape(NUM_MOMENTA, request.param)
    dispersion = HypercubicLattice(hopping=1.0, ndim=request.param).dispersion(kgrids)
    return lattice_greens_function(fgrid, dispersion, chempot=0.3)
