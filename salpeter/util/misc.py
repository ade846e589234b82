"""Miscellaneous utility functions."""

from __future__ import annotations

import warnings
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Iterator
    from warnings import WarningMessage


@contextmanager
def catch_warnings(warning_type: type[Warning] = Warning) -> Iterator[list[WarningMessage]]:
    """Context manager to record warnings of a given category.

    Warnings of the category are always recorded, regardless of the user filters, which are
    restored on exit. Warnings of other categories are recorded according to the user filters.

    Args:
        warning_type: Category of warnings to record.

    Returns:
        A list of the recorded warnings, populated on exit.
    """
    caught: list[WarningMessage] = []
    with warnings.catch_warnings(record=True) as recorded:
        warnings.simplefilter("always", warning_type)
        yield caught
    caught.extend(w for w in recorded if issubclass(w.category, warning_type))
