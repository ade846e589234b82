"""Linear algebra."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

import numpy as np
import scipy.linalg

if TYPE_CHECKING:
    from salpeter.typing import Array

einsum = functools.partial(np.einsum, optimize=True)

"""Flag to avoid using :func:`scipy.linalg.eig` and :func:`scipy.linalg.eigh`.

On some platforms, mixing :mod:`numpy` and :mod:`scipy` eigenvalue solvers can lead to performance
issues, likely from repeating warm-up overhead from conflicting BLAS and/or LAPACK libraries.
"""
AVOID_SCIPY_EIG: bool = True

"""Default tolerance for comparing floating point values."""
FLOAT_TOL: float = 1e-12


def is_float_equal(first: float | complex, second: float | complex, tol: float = FLOAT_TOL) -> bool:
    """Check if two floating point values are equal to within a tolerance.

    Args:
        first: The first value.
        second: The second value.
        tol: The absolute tolerance, scaled by the magnitude of the values when they exceed one.

    Returns:
        Whether the values are equal.
    """
    scale = max(1.0, abs(first), abs(second))
    return bool(abs(first - second) <= tol * scale)


def _eigval_order(eigvals: Array, decimals: int = 11) -> Array:
    """Get the order of eigenvalues by ascending real part, then imaginary part.

    Rounding before the comparison keeps complex conjugate pairs together when their real parts
    differ by numerical noise only.
    """
    real = np.round(eigvals.real, decimals=decimals)
    imag = np.round(eigvals.imag, decimals=decimals)
    return np.lexsort((eigvals.imag, eigvals.real, imag, real))


def eig(matrix: Array, hermitian: bool = False, sort: bool = True) -> tuple[Array, Array]:
    """Compute the eigenvalues and right-hand eigenvectors of a matrix.

    Args:
        matrix: The matrix to be diagonalised.
        hermitian: Whether the matrix is hermitian.
        sort: Whether to sort the eigenvalues by ascending real part.

    Returns:
        The eigenvalues and eigenvectors of the matrix. The eigenvalues are real if the matrix is
        hermitian or none of them has an imaginary part.
    """
    matrix = np.asarray(matrix)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"Matrix has invalid shape {matrix.shape} for diagonalisation.")

    if hermitian:
        solver = np.linalg.eigh if AVOID_SCIPY_EIG else scipy.linalg.eigh
    else:
        solver = np.linalg.eig if AVOID_SCIPY_EIG else scipy.linalg.eig
    eigvals, eigvecs = solver(matrix)

    if np.iscomplexobj(eigvals) and not np.any(eigvals.imag):
        eigvals = eigvals.real

    if sort:
        order = _eigval_order(eigvals)
        eigvals, eigvecs = eigvals[order], eigvecs[:, order]

    return eigvals, eigvecs
