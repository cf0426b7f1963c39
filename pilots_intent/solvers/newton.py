"""Newton-Raphson root finding for vector equations F(x) = 0.

Each iteration solves the linear system J(x) * delta = F(x) and updates
x <- x - delta. Iteration stops when the largest residual component drops
below ``min_error`` or after ``iter_max`` updates.

Hitting the iteration cap is not an error at this layer: the last iterate is
returned with ``converged=False`` and the caller decides what to do with it.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from pilots_intent.errors import NumericalError, PreconditionError, SingularJacobianError

ResidualFn = Callable[[NDArray[np.float64]], NDArray[np.float64]]
JacobianFn = Callable[[NDArray[np.float64]], NDArray[np.float64]]


@beartype
@dataclass(frozen=True)
class NewtonOptions:
    """Newton iteration settings.

    Attributes:
        iter_max: Maximum number of Newton updates
        min_error: Convergence threshold on max |F(x)|
    """
    iter_max: int = 15
    min_error: float = 1e-10

    def __post_init__(self) -> None:
        if self.iter_max < 1:
            raise PreconditionError(f"iter_max must be >= 1, got {self.iter_max}")
        if not (math.isfinite(self.min_error) and self.min_error > 0.0):
            raise PreconditionError(f"min_error must be finite and > 0, got {self.min_error}")


@beartype
@dataclass(frozen=True)
class NewtonResult:
    """Outcome of a Newton solve.

    Attributes:
        solution: Final iterate
        history: All iterates, starting with the initial guess
        residual_norms: max |F(x)| at each iterate in history
        converged: Whether the final residual is below min_error
    """
    solution: NDArray[np.float64]
    history: tuple[NDArray[np.float64], ...]
    residual_norms: tuple[float, ...]
    converged: bool

    @property
    def iterations(self) -> int:
        """Number of Newton updates performed."""
        return len(self.history) - 1

    @property
    def residual_norm(self) -> float:
        """max |F(x)| at the solution."""
        return self.residual_norms[-1]


def _check_residual(fx: NDArray[np.float64]) -> float:
    """Max-abs norm of a residual, which must be finite."""
    if not np.all(np.isfinite(fx)):
        raise NumericalError("Newton residual is not finite")
    return float(np.max(np.abs(fx))) if fx.size else 0.0


@beartype
def newton(
    residual_fn: ResidualFn,
    jacobian_fn: JacobianFn,
    initial_guess: NDArray[np.float64],
    options: NewtonOptions | None = None,
) -> NewtonResult:
    """Solve F(x) = 0 with Newton's method.

    Args:
        residual_fn: F(x), returns vector of same length as x
        jacobian_fn: dF/dx(x), returns square matrix
        initial_guess: Starting iterate
        options: Iteration settings (defaults to NewtonOptions())

    Returns:
        NewtonResult with the solution and iterate history

    Raises:
        SingularJacobianError: If J(x) * delta = F(x) has no unique solution
        NumericalError: If the residual or update becomes NaN/inf
    """
    opts = options or NewtonOptions()

    x = np.array(initial_guess, dtype=np.float64)
    history = [x.copy()]

    fx = np.asarray(residual_fn(x), dtype=np.float64)
    if fx.shape != x.shape:
        raise PreconditionError(
            f"residual shape {fx.shape} does not match iterate shape {x.shape}"
        )
    norms = [_check_residual(fx)]

    for _ in range(opts.iter_max):
        if norms[-1] < opts.min_error:
            break

        jx = np.asarray(jacobian_fn(x), dtype=np.float64)
        if jx.shape != (x.size, x.size):
            raise PreconditionError(
                f"jacobian must have shape {(x.size, x.size)}, got {jx.shape}"
            )

        try:
            delta = np.linalg.solve(jx, fx)
        except np.linalg.LinAlgError as err:
            raise SingularJacobianError(
                "Newton: Jacobian is singular / solve failed"
            ) from err
        if not np.all(np.isfinite(delta)):
            raise NumericalError("Newton update is not finite")

        x = x - delta
        history.append(x.copy())

        fx = np.asarray(residual_fn(x), dtype=np.float64)
        norms.append(_check_residual(fx))

    converged = norms[-1] < opts.min_error

    return NewtonResult(
        solution=x,
        history=tuple(history),
        residual_norms=tuple(norms),
        converged=converged,
    )
