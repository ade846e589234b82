"""Console output.

All output goes through a single :class:`rich.console.Console`, which can be silenced with the
``SALPETER_QUIET`` environment variable or with :data:`quiet`, either as a context manager or by
calling it.
"""

from __future__ import annotations

import importlib
import os
import subprocess
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.errors import LiveError
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.theme import Theme

from salpeter import __version__

if TYPE_CHECKING:
    from typing import Any, Literal, Sequence

    from rich.progress import TaskID

    from salpeter.grids.matsubara import BaseMatsubaraGrid

    Rating = Literal["good", "okay", "bad"]


theme = Theme(
    {
        "good": "green",
        "okay": "yellow",
        "bad": "red",
        "output": "cyan",
        "input": "bright_magenta",
        "method": "bold underline",
        "header": "bold",
    }
)

console = Console(
    highlight=False,
    theme=theme,
    log_path=False,
    quiet=os.environ.get("SALPETER_QUIET", "").lower() in ("1", "true"),
)

HEADER = r"""           _            _
 ___  __ _| |_ __   ___| |_ ___ _ __
/ __|/ _` | | '_ \ / _ \ __/ _ \ '__|
\__ \ (_| | | |_) |  __/ ||  __/ |
|___/\__,_|_| .__/ \___|\__\___|_|
            |_|  %s
"""

"""Packages whose versions are reported in the header."""
DEPENDENCIES: tuple[str, ...] = ("numpy", "scipy", "rich", "salpeter")

"""Environment variables reported in the header."""
ENVIRONMENT: tuple[str, ...] = ("OMP_NUM_THREADS", "SALPETER_FFT_WORKERS")

_initialised = False


def _git_hash(module_file: str | None) -> str:
    """Get the short hash of the git checkout a module was imported from, if any."""
    if module_file is None:
        return "N/A"
    git_directory = os.path.join(os.path.dirname(module_file), "..", ".git")
    cmd = ["git", f"--git-dir={git_directory}", "rev-parse", "--short", "HEAD"]
    try:
        output = subprocess.check_output(cmd, universal_newlines=True, stderr=subprocess.STDOUT)
    except (subprocess.CalledProcessError, OSError):
        return "N/A"
    return output.rstrip()


def init_console() -> None:
    """Print the header, package versions and environment, once per session."""
    global _initialised
    if _initialised:
        return

    header = "[header]" + HEADER + "[/header]"
    header %= " " * (18 - len(__version__)) + "[input]" + __version__ + "[/input]"
    console.print(header)

    table = Table(box=box.SIMPLE, show_header=True)
    table.add_column("Package")
    table.add_column("Version", style="input")
    table.add_column("Git hash", style="input")
    for name in DEPENDENCIES:
        module = importlib.import_module(name)
        version = getattr(module, "__version__", "N/A")
        table.add_row(name, version, _git_hash(getattr(module, "__file__", None)))
    console.print(table)

    for variable in ENVIRONMENT:
        console.print(f"{variable} = [input]{os.environ.get(variable, '')}[/]")

    _initialised = True


class Quiet:
    """Context manager to disable console output.

    Calling the object silences the console for the rest of the session.
    """

    def __init__(self, console: Console = console):
        """Initialise the object."""
        self._console = console
        self._memo: list[bool] = []

    def __enter__(self) -> None:
        """Enter the context manager."""
        self._memo.append(self._console.quiet)
        self._console.quiet = True

    def __exit__(self, *args: Any) -> None:
        """Exit the context manager."""
        self._console.quiet = self._memo.pop()

    def __call__(self) -> None:
        """Silence the console."""
        self._console.quiet = True


quiet = Quiet(console)


def rate_error(
    value: float | complex, threshold: float, threshold_okay: float | None = None
) -> Rating:
    """Rate an error, where smaller is better.

    Args:
        value: The error, of which the modulus is rated.
        threshold: Modulus below which the rating is ``"good"``.
        threshold_okay: Modulus below which the rating is ``"okay"``. Default is 10 times
            `threshold`.

    Returns:
        The rating.
    """
    if threshold_okay is None:
        threshold_okay = 10 * threshold
    if abs(value) < threshold:
        return "good"
    if abs(value) < threshold_okay:
        return "okay"
    return "bad"


def rate_margin(margin: float, threshold: float, threshold_okay: float | None = None) -> Rating:
    """Rate the distance from an instability, where larger is better.

    Args:
        margin: The signed distance from the instability, e.g. :math:`1 - \\lambda` for a leading
            eigenvalue :math:`\\lambda` or the modulus of the kernel determinant.
        threshold: Margin below which the rating is ``"bad"``.
        threshold_okay: Margin below which the rating is ``"okay"``. Default is 10 times
            `threshold`.

    Returns:
        The rating.
    """
    if threshold_okay is None:
        threshold_okay = 10 * threshold
    if margin < threshold:
        return "bad"
    if margin < threshold_okay:
        return "okay"
    return "good"


def format_float(
    value: float | complex | None,
    precision: int = 10,
    scientific: bool = False,
    threshold: float | None = None,
) -> str:
    """Format a real or complex number.

    Complex numbers with a negligible imaginary part are formatted as real numbers. NumPy scalars
    are accepted.

    Args:
        value: The value to format.
        precision: The number of decimal places, or significant figures if `scientific`.
        scientific: Whether to use the general format instead of a fixed number of decimals.
        threshold: If provided, the value is coloured according to :func:`rate_error`.

    Returns:
        The formatted string.
    """
    if value is None:
        return "N/A"
    if isinstance(value, complex) or getattr(value, "imag", 0.0) != 0.0:
        value = complex(value)
        real = format_float(value.real, precision, scientific, threshold)
        if abs(value.imag) < (1e-1**precision):
            return real
        sign = "+" if value.imag >= 0 else "-"
        imag = format_float(abs(value.imag), precision, scientific)
        return f"{real}{sign}{imag}i"
    value = float(value)
    out = f"{value:.{precision}g}" if scientific else f"{value:.{precision}f}"
    if threshold is not None:
        rating = rate_error(value, threshold)
        out = f"[{rating}]{out}[/]"
    return out


def print_extremum(
    name: str,
    value: complex,
    rating: Rating,
    bgrid: BaseMatsubaraGrid,
    position: Sequence[int],
    precision: int = 10,
) -> None:
    """Print a value found at a transfer frequency and momentum.

    Args:
        name: Description of the value.
        value: The value.
        rating: Rating used to colour the value.
        bgrid: Bosonic grid of the transfer frequency.
        position: Position on the bosonic grid followed by the positions on the momentum grids.
        precision: The number of decimal places of the value.
    """
    value_w = float(bgrid.points[int(position[0])])
    number_w = int(bgrid.matsubara_numbers[int(position[0])])
    momentum = tuple(int(p) for p in position[1:])
    console.print("")
    console.print(
        f"{name} [{rating}]{format_float(value, precision=precision)}[/{rating}] at "
        f"W = [output]{value_w:.6f}[/output] (n = [output]{number_w}[/output]), "
        f"q = [output]{momentum}[/output]"
    )


class ConvergencePrinter:
    """Table of quantities and their errors at each iteration.

    Args:
        quantities: Names of the quantities.
        quantity_errors: Names of the errors.
        thresholds: Thresholds used to rate each error.
        console: Console to print to.
        cycle_name: Name of the iteration column.
    """

    def __init__(
        self,
        quantities: tuple[str, ...],
        quantity_errors: tuple[str, ...],
        thresholds: tuple[float, ...],
        console: Console = console,
        cycle_name: str = "Cycle",
    ):
        """Initialise the object."""
        if len(quantity_errors) != len(thresholds):
            raise ValueError("Each error must have a threshold.")
        self._console = console
        self._thresholds = thresholds
        self._table = Table(box=box.SIMPLE)
        self._table.add_column(cycle_name, style="dim", justify="left")
        for quantity in (*quantities, *quantity_errors):
            self._table.add_column(quantity, justify="right")

    def add_row(
        self,
        cycle: int,
        quantities: tuple[float | complex | None, ...],
        quantity_errors: tuple[float | None, ...],
    ) -> None:
        """Add a row to the table."""
        errors = [
            format_float(error, precision=4, scientific=True, threshold=threshold)
            for error, threshold in zip(quantity_errors, self._thresholds)
        ]
        self._table.add_row(str(cycle), *map(format_float, quantities), *errors)

    def print(self) -> None:
        """Print the table."""
        self._console.print(self._table)


class IterationsPrinter:
    """Progress bar over a fixed number of iterations.

    The bar can be driven explicitly with :meth:`start`, :meth:`update` and :meth:`stop`, or used
    as a context manager. Nothing is shown when the console is quiet, or when another live display
    is already active.

    Args:
        max_cycle: Number of iterations.
        console: Console to print to.
        description: Label of the iterations.
    """

    def __init__(self, max_cycle: int, console: Console = console, description: str = "Iteration"):
        """Initialise the object."""
        self._max_cycle = max_cycle
        self._console = console
        self._description = description
        self._progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )
        self._task: TaskID | None = None
        self._active = False

    def __enter__(self) -> IterationsPrinter:
        """Start the progress bar."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Stop the progress bar."""
        self.stop()

    def start(self) -> None:
        """Start the progress bar."""
        if self._console.quiet:
            return
        try:
            self._progress.start()
        except LiveError:
            return
        self._task = self._progress.add_task(self._description, total=self._max_cycle)
        self._active = True

    def update(self, cycle: int) -> None:
        """Set the progress bar to a completed number of iterations."""
        if not self._active:
            return
        assert self._task is not None
        self._progress.update(self._task, completed=cycle)

    def stop(self) -> None:
        """Stop the progress bar."""
        if not self._active:
            return
        self._progress.stop()
        self._active = False
