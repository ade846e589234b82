"""Base class for grids."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from typing import Any, Iterator

    from salpeter.typing import Array


class GridPoint:
    """A point on a grid.

    Args:
        grid: The grid the point belongs to.
        index: Position of the point in the grid.
    """

    __slots__ = ("_grid", "_index")

    def __init__(self, grid: BaseGrid, index: int):
        """Initialise the object."""
        self._grid = grid
        self._index = index

    @property
    def grid(self) -> BaseGrid:
        """Get the grid the point belongs to."""
        return self._grid

    @property
    def index(self) -> int:
        """Get the position of the point in the grid."""
        return self._index

    @property
    def value(self) -> float:
        """Get the value of the point."""
        return float(self.grid.points[self.index])

    def __index__(self) -> int:
        """Return the position of the point, so that points can index arrays."""
        return self.index

    def __float__(self) -> float:
        """Return the value of the point."""
        return self.value

    def __repr__(self) -> str:
        """Get a string representation of the point."""
        return f"{self.__class__.__name__}(index={self.index}, value={self.value})"

    def __eq__(self, other: object) -> bool:
        """Check if two points are equal."""
        if not isinstance(other, GridPoint):
            return NotImplemented
        return self.index == other.index and self.grid == other.grid

    def __hash__(self) -> int:
        """Return a hash of the point."""
        return hash((self.index, self.grid))


class BaseGrid(ABC):
    """Base class for grids.

    A grid is a fixed, one-dimensional set of points. Each point exposes its value and its integer
    position in the grid. Grids are never resized after construction.
    """

    _options: set[str] = set()

    _points: Array

    def __init__(self, points: Array, **kwargs: Any) -> None:  # noqa: D417
        """Initialise the grid.

        Args:
            points: Points of the grid.
        """
        self._points = np.asarray(points)
        self._points.flags.writeable = False
        self.set_options(**kwargs)

    def set_options(self, **kwargs: Any) -> None:
        """Set options for the grid.

        Args:
            kwargs: Keyword arguments to set as options.
        """
        for key, val in kwargs.items():
            if key not in self._options:
                raise ValueError(f"Unknown option for {self.__class__.__name__}: {key}")
            setattr(self, key, val)

    @property
    def points(self) -> Array:
        """Get the points of the grid.

        Returns:
            Points of the grid.
        """
        return self._points

    @property
    def indices(self) -> Array:
        """Get the positions of the points in the grid.

        Returns:
            Positions of the points.
        """
        return np.arange(len(self))

    def position(self, key: int | GridPoint) -> int:
        """Get the position of a point in the grid.

        Args:
            key: Position or point.

        Returns:
            Position of the point.

        Raises:
            IndexError: If the position is outside of the grid.
            TypeError: If the key is neither an integer nor a point.
        """
        if isinstance(key, GridPoint):
            if key.grid is not self and key.grid != self:
                raise IndexError(f"{key} does not belong to {self}.")
            return key.index
        if isinstance(key, (bool, np.bool_)) or not isinstance(key, (int, np.integer)):
            raise TypeError(f"Grid positions must be integers or grid points, got {type(key)}.")
        if not 0 <= key < len(self):
            raise IndexError(f"Position {key} is out of range for {self} of size {len(self)}.")
        return int(key)

    def __getitem__(self, key: int | GridPoint) -> GridPoint:
        """Get a point of the grid.

        Args:
            key: Position of the point.

        Returns:
            The point at the position.
        """
        return self.point_class(self, self.position(key))

    def __iter__(self) -> Iterator[GridPoint]:
        """Iterate over the points of the grid."""
        for index in range(len(self)):
            yield self.point_class(self, index)

    def __len__(self) -> int:
        """Get the size of the grid.

        Returns:
            Size of the grid.
        """
        return self.points.shape[0]

    @property
    def size(self) -> int:
        """Get the size of the grid."""
        return len(self)

    @property
    def point_class(self) -> type[GridPoint]:
        """Get the class used for points of the grid."""
        return GridPoint

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal.

        Grids are equal if they are of the same type with the same options and identical points.
        """
        if not isinstance(other, BaseGrid):
            return NotImplemented
        if type(self) is not type(other):
            return False
        if len(self) != len(other):
            return False
        if not all(getattr(self, attr) == getattr(other, attr) for attr in self._options):
            return False
        return bool(np.array_equal(self.points, other.points))

    def __hash__(self) -> int:
        """Return a hash of the grid."""
        return hash((self.__class__.__name__, tuple(self.points.tolist())))

    @property
    @abstractmethod
    def domain(self) -> str:
        """Get the domain of the grid."""
        pass
