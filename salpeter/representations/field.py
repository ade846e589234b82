"""Container for quantities indexed by a tuple of grids."""

from __future__ import annotations

import numbers
from typing import TYPE_CHECKING

import numpy as np

from salpeter.grids.grid import BaseGrid, GridPoint

if TYPE_CHECKING:
    from typing import Any, Sequence

    from salpeter.typing import Array

    Key = int | GridPoint | tuple[int | GridPoint, ...]


class GridField:
    r"""Grid-indexed field.

    A grid-indexed field is an array of (complex) values at every point of the product of a fixed
    tuple of grids. The grids are set at construction and are never resized. Typical fields are

    .. list-table::
       :header-rows: 1
       :widths: 30 70

       * - Quantity
         - Grids
       * - Lattice Green's function, bubble
         - ``(fermionic, k_1, ..., k_D)``
       * - Local Green's function
         - ``(fermionic,)``
       * - Dispersion
         - ``(k_1, ..., k_D)``
       * - Vertex
         - ``(bosonic, fermionic, fermionic)``
       * - Leading eigenvalues, susceptibility
         - ``(bosonic, k_1, ..., k_D)``

    Indexing with a position or point on the leading grid returns the field over the remaining
    grids, which shares memory with this field. Positions outside of a grid raise
    :class:`IndexError`.
    """

    def __init__(
        self,
        grids: Sequence[BaseGrid],
        array: Array | None = None,
        dtype: Any = complex,
    ):
        """Initialise the object.

        Args:
            grids: The grids on which the field is defined.
            array: The values of the field. If `None`, the field is initialised to zero.
            dtype: The data type of the field, if `array` is `None`.
        """
        self._grids = tuple(grids)
        if not self._grids:
            raise ValueError("A field must be defined on at least one grid.")
        if not all(isinstance(grid, BaseGrid) for grid in self._grids):
            raise ValueError("All grids of a field must be instances of BaseGrid.")
        if array is None:
            array = np.zeros(self.shape, dtype=dtype)
        array = np.asarray(array)
        if array.shape != self.shape:
            raise ValueError(
                f"Array must have the shape of the grids {self.shape}, but got {array.shape}."
            )
        self._array = array

    @property
    def grids(self) -> tuple[BaseGrid, ...]:
        """Get the grids on which the field is defined."""
        return self._grids

    @property
    def array(self) -> Array:
        """Get the values of the field."""
        return self._array

    @property
    def shape(self) -> tuple[int, ...]:
        """Get the shape of the field."""
        return tuple(len(grid) for grid in self.grids)

    @property
    def ndim(self) -> int:
        """Get the number of grids of the field."""
        return len(self.grids)

    @property
    def size(self) -> int:
        """Get the total number of points of the field."""
        return int(np.prod(self.shape))

    @property
    def dtype(self) -> np.dtype:
        """Get the data type of the array."""
        return self._array.dtype

    def _positions(self, key: Key) -> tuple[int, ...]:
        """Convert a key into positions on the leading grids."""
        keys = key if isinstance(key, tuple) else (key,)
        if len(keys) > self.ndim:
            raise IndexError(f"Too many indices for field with {self.ndim} grids.")
        return tuple(grid.position(k) for grid, k in zip(self.grids, keys))

    def __getitem__(self, key: Key) -> GridField | complex:
        """Get the field at a point of the leading grid(s).

        Args:
            key: Position(s) or point(s) on the leading grid(s).

        Returns:
            The field over the remaining grids, or the value if all grids are indexed.
        """
        positions = self._positions(key)
        if len(positions) == self.ndim:
            return self.array[positions]  # type: ignore[no-any-return]
        return self.__class__(self.grids[len(positions) :], self.array[positions])

    def __setitem__(self, key: Key, value: GridField | Array | complex) -> None:
        """Set the field at a point of the leading grid(s).

        Args:
            key: Position(s) or point(s) on the leading grid(s).
            value: The values to set.
        """
        positions = self._positions(key)
        if isinstance(value, GridField):
            if value.grids != self.grids[len(positions) :]:
                raise ValueError("Cannot assign a field defined on different grids.")
            value = value.array
        self._array[positions] = value

    def __repr__(self) -> str:
        """Get a string representation of the field."""
        grids = ", ".join(repr(grid) for grid in self.grids)
        return f"{self.__class__.__name__}(grids=({grids}), dtype={self.dtype})"

    def copy(self, deep: bool = True) -> GridField:
        """Return a copy of the field.

        Args:
            deep: Whether to copy the array.

        Returns:
            A new field on the same grids.
        """
        array = self.array.copy() if deep else self.array
        return self.__class__(self.grids, array)

    def zeros_like(self) -> GridField:
        """Return a field of zeros on the same grids."""
        return self.__class__(self.grids, np.zeros_like(self.array))

    def as_matrix(self) -> Array:
        """Return the field as a square matrix.

        The leading half of the grids is flattened into the row index and the trailing half into
        the column index, e.g. a field on ``(fermionic, fermionic)`` becomes a matrix in the two
        fermionic frequencies.

        Returns:
            The dense matrix.
        """
        if self.ndim % 2:
            raise ValueError(f"Cannot form a square matrix from a field with {self.ndim} grids.")
        half = self.ndim // 2
        nrow = int(np.prod(self.shape[:half]))
        ncol = int(np.prod(self.shape[half:]))
        if nrow != ncol:
            raise ValueError(f"Cannot form a square matrix from a field with shape {self.shape}.")
        return self.array.reshape(nrow, ncol)

    def as_diagonal_matrix(self) -> Array:
        """Return the field as a diagonal matrix over the flattened composite index.

        Returns:
            The dense matrix, with the values of the field on the diagonal.
        """
        return np.diag(self.array.ravel())

    def _check_same_grids(self, other: GridField, operation: str) -> None:
        """Check that another field is defined on the same grids."""
        if self.grids != other.grids:
            raise ValueError(f"Cannot {operation} fields defined on different grids.")

    def __add__(self, other: GridField) -> GridField:
        """Add two fields."""
        if not isinstance(other, GridField):
            return NotImplemented
        self._check_same_grids(other, "add")
        return self.__class__(self.grids, self.array + other.array)

    def __sub__(self, other: GridField) -> GridField:
        """Subtract two fields."""
        if not isinstance(other, GridField):
            return NotImplemented
        self._check_same_grids(other, "subtract")
        return self.__class__(self.grids, self.array - other.array)

    def __mul__(self, other: complex) -> GridField:
        """Multiply the field by a scalar."""
        if not isinstance(other, numbers.Number):
            return NotImplemented
        return self.__class__(self.grids, self.array * other)

    __rmul__ = __mul__

    def __truediv__(self, other: complex) -> GridField:
        """Divide the field by a scalar."""
        if not isinstance(other, numbers.Number):
            return NotImplemented
        return self.__class__(self.grids, self.array / other)

    def __neg__(self) -> GridField:
        """Negate the field."""
        return self.__class__(self.grids, -self.array)

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> Array:
        """Return the field as a NumPy array."""
        if dtype is None:
            return self.array
        return self.array.astype(dtype)

    def __eq__(self, other: object) -> bool:
        """Check if two fields are equal.

        Fields are equal if they are defined on equal grids and their values are identical.
        """
        if not isinstance(other, GridField):
            return NotImplemented
        if self.grids != other.grids:
            return False
        return bool(np.array_equal(self.array, other.array))

    __hash__ = None  # type: ignore[assignment]
