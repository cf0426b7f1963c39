"""Numerical solvers: fixed-step integrators and Newton-Raphson.

Example:
    >>> from pilots_intent.solvers import BackwardEuler, NewtonOptions
    >>>
    >>> stepper = BackwardEuler(NewtonOptions(iter_max=20, min_error=1e-12))
    >>> next_state = stepper.step(model, 0.0, state, control, dt=0.1)
"""

from pilots_intent.solvers.newton import NewtonOptions, NewtonResult, newton
from pilots_intent.solvers.steppers import (
    BackwardEuler,
    ForwardEuler,
    Rk4,
    Stepper,
    check_dt,
)

__all__ = [
    # Newton
    "NewtonOptions",
    "NewtonResult",
    "newton",
    # Steppers
    "Stepper",
    "ForwardEuler",
    "Rk4",
    "BackwardEuler",
    "check_dt",
]
