"""Fixed-step time integrators.

Every stepper advances one state by one time increment:

    next_state = stepper.step(model, t, state, control, dt)

and exposes its stability function R(z): the one-step amplification factor
when applied to the test equation dx/dt = lambda * x with z = lambda * dt.

Steppers:
- ForwardEuler: explicit, first order, R(z) = 1 + z
- Rk4: classic explicit Runge-Kutta, fourth order,
  R(z) = 1 + z + z^2/2 + z^3/6 + z^4/24
- BackwardEuler: implicit, first order, A-stable, R(z) = 1 / (1 - z).
  Each step is a Newton solve and needs the model's analytic Jacobian.
"""

import math
from abc import ABC, abstractmethod
from typing import ClassVar

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from pilots_intent.dynamics.base import Dynamics, LinearizableDynamics
from pilots_intent.dynamics.state import ControlVector, StateVector
from pilots_intent.errors import ConvergenceError, PreconditionError
from pilots_intent.solvers.newton import NewtonOptions, NewtonResult, newton

ComplexLike = complex | float | NDArray


def check_dt(dt: float) -> None:
    """Raise PreconditionError unless dt is finite and > 0."""
    if not (math.isfinite(dt) and dt > 0.0):
        raise PreconditionError(f"dt must be finite and > 0, got {dt}")


class Stepper(ABC):
    """Fixed-step integrator interface."""

    name: ClassVar[str]
    order: ClassVar[int]  # Global accuracy order
    implicit: ClassVar[bool] = False

    @abstractmethod
    def step(
        self,
        model: Dynamics,
        t: float,
        state: StateVector,
        control: ControlVector,
        dt: float,
    ) -> StateVector:
        """Advance ``state`` from t to t + dt."""

    @staticmethod
    @abstractmethod
    def stability(z: ComplexLike) -> ComplexLike:
        """Stability function R(z)."""

    @property
    def warnings(self) -> list[str]:
        """Marginal conditions seen since the last reset."""
        return []

    def reset_diagnostics(self) -> None:
        """Clear per-run diagnostics. Explicit steppers keep none."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# =============================================================================
# Explicit Schemes
# =============================================================================


@beartype
class ForwardEuler(Stepper):
    """Explicit (forward) Euler: x' = x + dt * f(t, x, u)."""

    name = "Forward Euler"
    order = 1

    def step(
        self,
        model: Dynamics,
        t: float,
        state: StateVector,
        control: ControlVector,
        dt: float,
    ) -> StateVector:
        check_dt(dt)
        dx = model.derivative(t, state, control)
        return state.add_scaled(dx, dt)

    @staticmethod
    def stability(z: ComplexLike) -> ComplexLike:
        """R(z) = 1 + z. Stable inside the unit disk centered at -1."""
        return 1.0 + z


@beartype
class Rk4(Stepper):
    """Classic fixed-step fourth-order Runge-Kutta."""

    name = "RK4"
    order = 4

    def step(
        self,
        model: Dynamics,
        t: float,
        state: StateVector,
        control: ControlVector,
        dt: float,
    ) -> StateVector:
        check_dt(dt)
        h = dt / 2

        # RK4 stages
        k1 = model.derivative(t, state, control)
        k2 = model.derivative(t + h, state.add_scaled(k1, h), control)
        k3 = model.derivative(t + h, state.add_scaled(k2, h), control)
        k4 = model.derivative(t + dt, state.add_scaled(k3, dt), control)

        # x' = x + dt/6 * (k1 + 2*k2 + 2*k3 + k4)
        increment = k1.add_scaled(k2, 2.0).add_scaled(k3, 2.0).add_scaled(k4, 1.0)
        return state.add_scaled(increment, dt / 6.0)

    @staticmethod
    def stability(z: ComplexLike) -> ComplexLike:
        """Fourth-order Taylor polynomial of exp(z)."""
        return 1.0 + z + z**2 / 2.0 + z**3 / 6.0 + z**4 / 24.0


# =============================================================================
# Implicit Scheme
# =============================================================================


@beartype
class BackwardEuler(Stepper):
    """Implicit (backward) Euler solved with Newton-Raphson.

    Solves F(x) = x - x_n - dt * f(t + dt, x, u) = 0 starting from x_n, with
    dF/dx = I - dt * df/dx.

    Attributes:
        newton_options: Iteration cap and tolerance for each solve
        strict: Raise ConvergenceError when a solve hits the iteration cap.
            Otherwise the last iterate is used and the miss is counted.
        last_solve: Result of the most recent Newton solve
        solve_count: Number of solves performed
        unconverged_count: Number of solves that hit the iteration cap
    """

    name = "Backward Euler"
    order = 1
    implicit = True

    def __init__(
        self,
        newton_options: NewtonOptions | None = None,
        strict: bool = False,
    ) -> None:
        self.newton_options = newton_options or NewtonOptions()
        self.strict = strict
        self.last_solve: NewtonResult | None = None
        self.solve_count = 0
        self.unconverged_count = 0
        self._first_miss_t: float | None = None
        self._worst_residual = 0.0

    @property
    def warnings(self) -> list[str]:
        """At most one summary of non-converged solves since the last reset."""
        if not self.unconverged_count:
            return []
        return [
            f"Backward Euler: {self.unconverged_count} of {self.solve_count} solves did not "
            f"converge within {self.newton_options.iter_max} iterations "
            f"(first at t={self._first_miss_t:.6g}, worst residual {self._worst_residual:.3e})"
        ]

    def step(
        self,
        model: LinearizableDynamics,
        t: float,
        state: StateVector,
        control: ControlVector,
        dt: float,
    ) -> StateVector:
        check_dt(dt)

        state_type = type(state)
        x_prev = state.to_array()
        m = x_prev.size
        t_next = t + dt

        def residual(x: NDArray[np.float64]) -> NDArray[np.float64]:
            fx = model.derivative(t_next, state_type.from_array(x), control).to_array()
            return x - x_prev - dt * fx

        def residual_jacobian(x: NDArray[np.float64]) -> NDArray[np.float64]:
            j = model.jacobian(t_next, state_type.from_array(x), control)
            if j.shape != (m, m):
                raise PreconditionError(
                    f"jacobian must be square with dimension {m}, got shape {j.shape}"
                )
            return np.eye(m) - dt * j

        result = newton(residual, residual_jacobian, x_prev, self.newton_options)

        self.last_solve = result
        self.solve_count += 1
        if not result.converged:
            self.unconverged_count += 1
            if self.strict:
                raise ConvergenceError(result.iterations, result.residual_norm)
            if self._first_miss_t is None:
                self._first_miss_t = t_next
            self._worst_residual = max(self._worst_residual, result.residual_norm)

        return state_type.from_array(result.solution)

    @staticmethod
    def stability(z: ComplexLike) -> ComplexLike:
        """R(z) = 1 / (1 - z). |R| <= 1 on the whole left half-plane."""
        return 1.0 / (1.0 - z)

    def reset_diagnostics(self) -> None:
        """Clear solve counters, warnings and the cached last result."""
        self.last_solve = None
        self.solve_count = 0
        self.unconverged_count = 0
        self._first_miss_t = None
        self._worst_residual = 0.0

    def __repr__(self) -> str:
        return f"BackwardEuler(newton_options={self.newton_options!r}, strict={self.strict})"
