r"""Bethe--Salpeter equation solver.

The Bethe--Salpeter equation relates the two-particle susceptibility :math:`\chi` to the bubble
:math:`\chi_0` and the irreducible vertex :math:`\Gamma`. In the forward direction

.. math::
    \chi = \chi_0 + \chi_0 \Gamma \chi
    \quad \Rightarrow \quad
    \chi = \left( \mathbf{I} - \chi_0 \Gamma \right)^{-1} \chi_0,

and in the backward direction

.. math::
    \chi = \chi_0 + \Gamma \chi_0 \chi
    \quad \Rightarrow \quad
    \chi = \left( \mathbf{I} - \Gamma \chi_0 \right)^{-1} \chi_0.

The two differ when :math:`\chi_0` and :math:`\Gamma` do not commute. A vanishing determinant of
the kernel :math:`\mathbf{I} - \chi_0 \Gamma` signals a divergence of the ladder, i.e. a
two-particle instability.
"""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING

import numpy as np

from salpeter import printing
from salpeter.printing import console
from salpeter.solvers.solver import BaseSolver

if TYPE_CHECKING:
    from typing import Any, Sequence

    from salpeter.representations.field import GridField
    from salpeter.typing import Array


class BetheSalpeter(BaseSolver):
    """Solve the Bethe--Salpeter equation for a bubble and an irreducible vertex.

    The matrices are held by reference and are not copied, so they must not be modified while the
    solver is in use.

    Args:
        bubble: The bubble :math:`\\chi_0`, as a square matrix.
        vertex: The irreducible vertex :math:`\\Gamma`, as a square matrix of the same dimension.
    """

    forward: bool = True
    eval_iterations: bool = False
    n_iter: int = 1
    mix: float = 1.0
    evaluate_only_order_n: bool = False
    _options: set[str] = {
        "verbosity",
        "forward",
        "eval_iterations",
        "n_iter",
        "mix",
        "evaluate_only_order_n",
    }

    """Determinant below which the kernel is reported as near-critical."""
    critical_threshold: float = 1e-2

    result: Array | None = None

    def __init__(  # noqa: D417
        self,
        bubble: Array,
        vertex: Array,
        **kwargs: Any,
    ):
        """Initialise the solver.

        Args:
            bubble: The bubble :math:`\\chi_0`, as a square matrix.
            vertex: The irreducible vertex :math:`\\Gamma`, as a square matrix of the same
                dimension.
            verbosity: Level of output. ``0`` is silent, ``1`` prints the input and a summary, and
                ``2`` additionally prints the residual at every iteration.
            forward: Whether to solve the forward (:math:`\\chi_0 \\Gamma`) or backward
                (:math:`\\Gamma \\chi_0`) equation.
            eval_iterations: Whether :meth:`kernel` solves by iteration rather than inversion.
            n_iter: Number of iterations used by :meth:`kernel`.
            mix: Mixing parameter used by :meth:`kernel`.
            evaluate_only_order_n: Whether :meth:`kernel` returns only the ``n_iter``-th order
                term when iterating.
        """
        self._bubble = np.asarray(bubble)
        self._vertex = np.asarray(vertex)
        self._det: complex = 1.0 + 0.0j
        self.set_options(**kwargs)

    def __post_init__(self) -> None:
        """Hook called after :meth:`__init__`."""
        # Check the input
        if self.bubble.ndim != 2 or self.bubble.shape[0] != self.bubble.shape[1]:
            raise ValueError(f"bubble must be a square matrix, got shape {self.bubble.shape}.")
        if self.vertex.ndim != 2 or self.vertex.shape[0] != self.vertex.shape[1]:
            raise ValueError(f"vertex must be a square matrix, got shape {self.vertex.shape}.")
        if self.bubble.shape != self.vertex.shape:
            raise ValueError(
                f"bubble and vertex must have the same dimension, got {self.bubble.shape} and "
                f"{self.vertex.shape}."
            )

        # Print the input information
        if self.verbosity:
            console.print(f"Matrix shape: [input]{self.bubble.shape}[/input]")
            console.print(f"Direction: [input]{'forward' if self.forward else 'backward'}[/input]")

    def __post_kernel__(self) -> None:
        """Hook called after :meth:`kernel`."""
        if not self.verbosity:
            return
        assert self.result is not None
        norm = printing.format_float(np.linalg.norm(self.result))
        console.print("")
        console.print(f"Norm of the susceptibility: [output]{norm}[/output]")
        if not self.eval_iterations:
            det = printing.format_float(self.determinant())
            console.print(f"Determinant of the kernel: [output]{det}[/output]")

    @classmethod
    def from_fields(
        cls,
        bubble: GridField,
        vertex: GridField,
        momentum: Sequence[int] | None = None,
        **kwargs: Any,
    ) -> BetheSalpeter:
        """Create a solver from a bubble and a vertex at a fixed transfer frequency.

        Args:
            bubble: Bubble on the fermionic and momentum grids.
            vertex: Irreducible vertex on two fermionic grids.
            momentum: Positions on the momentum grids. If given, the equation is solved in the
                fermionic frequencies at this transfer momentum. Otherwise it is solved over the
                composite frequency and momentum index, with a momentum independent vertex.
            kwargs: Additional keyword arguments for the solver.

        Returns:
            Solver instance.
        """
        from salpeter.diagrams.bubbles import bubble_matrix  # noqa: PLC0415

        if vertex.ndim != 2:
            raise ValueError("vertex must be defined on two fermionic grids.")
        if vertex.grids[0] != bubble.grids[0] or vertex.grids[1] != bubble.grids[0]:
            raise ValueError("vertex must be defined on the fermionic grid of the bubble.")
        bubble_mat = bubble_matrix(bubble, momentum=momentum)
        vertex_mat = vertex.as_matrix()
        if momentum is None:
            nk = int(np.prod(bubble.shape[1:]))
            vertex_mat = np.kron(vertex_mat, np.eye(nk))
        return cls(bubble_mat, vertex_mat, **kwargs)

    def _product(self) -> Array:
        """Get the product of the bubble and vertex in the order of the equation."""
        if self.forward:
            return self.bubble @ self.vertex  # type: ignore[no-any-return]
        return self.vertex @ self.bubble  # type: ignore[no-any-return]

    def solve_inversion(self) -> Array:
        """Solve the equation by direct inversion of the kernel.

        The determinant of the kernel is recorded, and is available from :meth:`determinant`. For a
        vanishing kernel the bubble is returned unchanged.

        Returns:
            The susceptibility :math:`\\chi`.
        """
        product = self._product()
        if not np.any(product):
            self._det = 1.0 + 0.0j
            return self.bubble.copy()  # type: ignore[no-any-return]

        kernel = np.eye(self.size) - product
        self._det = complex(np.linalg.det(kernel))
        if self.verbosity and abs(self._det) < self.critical_threshold:
            det = printing.format_float(self._det, precision=4, scientific=True)
            console.print(f"[okay]Kernel is close to singular, determinant {det}[/okay]")

        try:
            chi = np.linalg.solve(kernel, self.bubble)
        except np.linalg.LinAlgError as e:
            warnings.warn(
                f"Inversion of the Bethe-Salpeter kernel failed with error: {e}. "
                "Falling back to the pseudo-inverse.",
                UserWarning,
                stacklevel=2,
            )
            chi = np.linalg.pinv(kernel) @ self.bubble

        return chi  # type: ignore[no-any-return]

    def solve_iterations(
        self,
        n_iter: int,
        mix: float = 1.0,
        evaluate_only_order_n: bool = False,
    ) -> Array:
        """Solve the equation by fixed-point iteration.

        Starting from :math:`\\chi^{(0)} = \\chi_0`, the iteration in the forward direction is

        .. math::
            \\chi^{(k+1)} = \\chi_0 + \\chi_0 \\Gamma \\chi^{(k)},

        with the new iterate mixed with the previous one as :math:`m \\chi^{(k+1)} + (1 - m)
        \\chi^{(k)}`. Exactly ``n_iter`` iterations are performed, without a convergence check.

        Args:
            n_iter: Number of iterations.
            mix: Mixing parameter :math:`m`, in :math:`(0, 1]`.
            evaluate_only_order_n: Whether to return only the ``n_iter``-th order term of the
                series, :math:`(\\chi_0 \\Gamma)^n \\chi_0`, instead of the partial sum. Mixing is
                not applied to a single order.

        Returns:
            The susceptibility :math:`\\chi`, or its ``n_iter``-th order term.
        """
        if n_iter < 0:
            raise ValueError(f"n_iter must be non-negative, got {n_iter}.")
        if not 0.0 < mix <= 1.0:
            raise ValueError(f"mix must be in the interval (0, 1], got {mix}.")

        # Get the printing helpers
        table = printing.ConvergencePrinter(
            ("Norm",), ("Change" if not evaluate_only_order_n else "Order norm",), (1e-8,)
        )
        progress = printing.IterationsPrinter(n_iter)
        if self.verbosity:
            progress.start()

        product = self._product()
        chi = self.bubble
        for cycle in range(1, n_iter + 1):
            if evaluate_only_order_n:
                chi_next = product @ chi
                change = np.linalg.norm(chi_next)
            else:
                chi_next = self.bubble + product @ chi
                if mix != 1.0:
                    chi_next = mix * chi_next + (1.0 - mix) * chi
                change = np.linalg.norm(chi_next - chi)
            chi = chi_next

            if self.verbosity:
                progress.update(cycle)
            if self.verbosity > 1:
                table.add_row(cycle, (np.linalg.norm(chi),), (change,))

        if self.verbosity:
            progress.stop()
        if self.verbosity > 1:
            table.print()

        return chi if n_iter else chi.copy()

    def solve(
        self,
        eval_iterations: bool,
        n_iter: int = 1,
        mix: float = 1.0,
        evaluate_only_order_n: bool = False,
    ) -> Array:
        """Solve the equation.

        Args:
            eval_iterations: Whether to solve by iteration rather than inversion.
            n_iter: Number of iterations.
            mix: Mixing parameter.
            evaluate_only_order_n: Whether to return only the ``n_iter``-th order term.

        Returns:
            The susceptibility :math:`\\chi`.
        """
        if eval_iterations:
            return self.solve_iterations(n_iter, mix, evaluate_only_order_n)
        return self.solve_inversion()

    def kernel(self) -> Array:
        """Run the solver.

        Returns:
            The susceptibility :math:`\\chi`.
        """
        self.result = self.solve(
            self.eval_iterations,
            n_iter=self.n_iter,
            mix=self.mix,
            evaluate_only_order_n=self.evaluate_only_order_n,
        )
        return self.result

    def determinant(self) -> complex:
        """Get the determinant of the kernel.

        Returns:
            The determinant of :math:`\\mathbf{I} - \\chi_0 \\Gamma` (or :math:`\\mathbf{I} -
            \\Gamma \\chi_0`) from the last call to :meth:`solve_inversion`, or ``1.0`` if it has
            not been called.
        """
        return self._det

    @property
    def bubble(self) -> Array:
        """Get the bubble matrix."""
        return self._bubble

    @property
    def vertex(self) -> Array:
        """Get the irreducible vertex matrix."""
        return self._vertex

    @property
    def size(self) -> int:
        """Get the dimension of the matrices."""
        return self.bubble.shape[0]
