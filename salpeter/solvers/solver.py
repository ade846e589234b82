"""Base class for two-particle solvers."""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from rich import box
from rich.table import Table

from salpeter import printing
from salpeter.printing import console

if TYPE_CHECKING:
    from typing import Any


class BaseSolver(ABC):
    """Base class for two-particle solvers.

    Subclasses declare their options as class attributes listed in :attr:`_options`, which are
    overridden per instance through keyword arguments. After :meth:`__init__` of a subclass the
    hooks :meth:`__log_init__` and :meth:`__post_init__` are called, and after :meth:`kernel` the
    hook :meth:`__post_kernel__`. Output is only printed for a non-zero :attr:`verbosity`.
    """

    verbosity: int = 0
    _options: set[str] = {"verbosity"}

    def __init_subclass__(cls, *args: Any, **kwargs: Any) -> None:
        """Initialise a subclass of :class:`BaseSolver`."""
        super().__init_subclass__(*args, **kwargs)

        init = cls.__init__
        kernel = cls.kernel

        @functools.wraps(init)
        def wrapped_init(self: BaseSolver, *args: Any, **kwargs: Any) -> None:
            init(self, *args, **kwargs)
            # Hooks run once, for the class being constructed
            if type(self).__init__ is wrapped_init:
                self.__log_init__()
                self.__post_init__()

        @functools.wraps(kernel)
        def wrapped_kernel(self: BaseSolver, *args: Any, **kwargs: Any) -> Any:
            result = kernel(self, *args, **kwargs)
            if type(self).kernel is wrapped_kernel:
                self.__post_kernel__()
            return result

        cls.__init__ = wrapped_init  # type: ignore[method-assign]
        cls.kernel = wrapped_kernel  # type: ignore[method-assign]

    def __log_init__(self) -> None:
        """Hook called after :meth:`__init__` for logging purposes."""
        if not self.verbosity:
            return
        printing.init_console()
        console.print("")
        console.print(f"[method]{self.__class__.__name__}[/method]")

        table = Table(box=box.SIMPLE)
        table.add_column("Option")
        table.add_column("Value", style="input")
        for key, value in self.options.items():
            table.add_row(key, getattr(value, "__name__", str(value)))
        console.print(table)

    def __post_init__(self) -> None:
        """Hook called after :meth:`__init__`."""
        pass

    def __post_kernel__(self) -> None:
        """Hook called after :meth:`kernel`."""
        pass

    def set_options(self, **kwargs: Any) -> None:
        """Set options for the solver.

        Args:
            kwargs: Keyword arguments to set as options.
        """
        unknown = set(kwargs) - self._options
        if unknown:
            raise ValueError(
                f"Unknown option(s) for {self.__class__.__name__}: {', '.join(sorted(unknown))}"
            )
        for key, val in kwargs.items():
            setattr(self, key, val)

    @property
    def options(self) -> dict[str, Any]:
        """Get the current values of the options, sorted by name."""
        return {key: getattr(self, key) for key in sorted(self._options)}

    def __repr__(self) -> str:
        """Get a string representation of the solver."""
        options = ", ".join(f"{key}={value!r}" for key, value in self.options.items())
        return f"{self.__class__.__name__}(size={self.size}, {options})"

    @abstractmethod
    def kernel(self) -> Any:
        """Run the solver."""
        pass

    @property
    @abstractmethod
    def size(self) -> int:
        """Get the dimension of the matrices the solver acts on."""
        pass

