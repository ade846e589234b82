"""Tests for :module:`~salpeter.printing`."""

from __future__ import annotations

import numpy as np
import pytest

from salpeter import printing
from salpeter.printing import console


def test_quiet() -> None:
    """Test that the quiet context manager restores the console state."""
    state = console.quiet
    console.quiet = False
    with printing.quiet:
        assert console.quiet
    assert not console.quiet
    console.quiet = state


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.5, "0.5000"),
        (np.float64(-1.25), "-1.2500"),
        (1.0 + 2.0j, "1.0000+2.0000i"),
        (np.complex128(1.0 - 2.0j), "1.0000-2.0000i"),
        (3.0 + 0.0j, "3.0000"),
        (None, "N/A"),
    ],
)
def test_format_float(value: float | complex | None, expected: str) -> None:
    """Test the formatting of real and complex values."""
    assert printing.format_float(value, precision=4) == expected


def test_rate_error() -> None:
    """Test the rating of errors."""
    assert printing.rate_error(1e-9, 1e-8) == "good"
    assert printing.rate_error(5e-8, 1e-8) == "okay"
    assert printing.rate_error(-1.0, 1e-8) == "bad"
    assert printing.rate_error(0.05j, 1e-2, 1e-1) == "okay"


def test_rate_margin() -> None:
    """Test the rating of distances from an instability."""
    assert printing.rate_margin(0.5, 1e-2) == "good"
    assert printing.rate_margin(0.05, 1e-2) == "okay"
    assert printing.rate_margin(1e-3, 1e-2) == "bad"
    assert printing.rate_margin(-0.2, 1e-2) == "bad"


def test_iterations_printer() -> None:
    """Test that the progress bar can be driven while the console is quiet."""
    with printing.quiet:
        with printing.IterationsPrinter(3) as progress:
            for cycle in range(1, 4):
                progress.update(cycle)
        progress.stop()
