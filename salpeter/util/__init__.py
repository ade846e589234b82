"""Utility functions."""

from salpeter.util.linalg import (
    einsum,
    eig,
    is_float_equal,
)
from salpeter.util.misc import catch_warnings
