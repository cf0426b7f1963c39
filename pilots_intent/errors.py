"""Exception hierarchy for trajectory prediction.

Errors fall into two families:

- PreconditionError: the caller asked for something meaningless (non-positive
  time step, zero steps, a state of the wrong shape). Subclasses ValueError so
  existing ``except ValueError`` handlers keep working.
- NumericalError: the inputs were well formed but the numerics broke down
  (singular Jacobian, NaN/inf state, Newton non-convergence). Subclasses
  ArithmeticError. A caller may recover, e.g. by retrying with a smaller dt.
"""


class PilotsIntentError(Exception):
    """Base class for all pilots_intent errors."""


class PreconditionError(PilotsIntentError, ValueError):
    """Invalid argument or configuration supplied by the caller."""


class NumericalError(PilotsIntentError, ArithmeticError):
    """Numerical failure during a step or solve."""


class SingularJacobianError(NumericalError):
    """The Newton linear system has no unique solution."""


class NonFiniteStateError(NumericalError):
    """A state component became NaN or infinite."""

    def __init__(self, component: str, value: float) -> None:
        self.component = component
        self.value = value
        super().__init__(f"{component} must be finite, got {value}")


class ConvergenceError(NumericalError):
    """Newton iteration hit its iteration cap without converging."""

    def __init__(self, iterations: int, residual_norm: float) -> None:
        self.iterations = iterations
        self.residual_norm = residual_norm
        super().__init__(
            f"Newton did not converge after {iterations} iterations "
            f"(residual {residual_norm:.3e})"
        )
