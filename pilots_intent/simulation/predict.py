"""Constant-input trajectory prediction.

The driver assumes the pilot holds the stick fixed for the whole horizon:
the control vector is derived once from the pilot input and reused for every
step. It then repeatedly calls a stepper and records every state.

Architecture:
    pilot input -> model.input_to_control -> control (held constant)
    for each step:
        model.validate_state(state)
        state = stepper.step(model, t, state, control, dt)

Example:
    >>> from pilots_intent.dynamics import PilotInput, QuadState, SimpleQuadcopter
    >>> from pilots_intent.solvers import ForwardEuler
    >>> from pilots_intent.simulation import predict
    >>>
    >>> prediction = predict(
    ...     PilotInput.from_degrees(pitch_deg=10.0),
    ...     QuadState.at_rest(),
    ...     SimpleQuadcopter(drag=0.1),
    ...     ForwardEuler(),
    ...     t0=0.0,
    ...     t_final=10.0,
    ...     steps=30_000,
    ... )
    >>> prediction.final_state.v_north
"""

import logging
import math
import time
from dataclasses import dataclass

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from pilots_intent.dynamics.base import Dynamics
from pilots_intent.dynamics.state import NUMERIC_TOWER, ControlVector, PilotInput, StateVector
from pilots_intent.errors import PreconditionError
from pilots_intent.solvers.steppers import Stepper

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================


@beartype(conf=NUMERIC_TOWER)
@dataclass(frozen=True)
class PredictionConfig:
    """Prediction horizon settings.

    Attributes:
        t_final: Horizon length [s], measured from t0
        steps: Number of fixed steps over the horizon
        t0: Start time [s]

    Times may be given as ints; they are stored as floats.
    """
    t_final: float
    steps: int
    t0: float = 0.0

    def __post_init__(self) -> None:
        """Validate horizon."""
        object.__setattr__(self, "t_final", float(self.t_final))
        object.__setattr__(self, "t0", float(self.t0))
        if self.steps <= 0:
            raise PreconditionError(f"steps must be > 0, got {self.steps}")
        if not (math.isfinite(self.t_final) and self.t_final > 0.0):
            raise PreconditionError(f"t_final must be finite and > 0, got {self.t_final}")
        if not math.isfinite(self.t0):
            raise PreconditionError(f"t0 must be finite, got {self.t0}")

    @property
    def dt(self) -> float:
        """Step size [s]."""
        return self.t_final / self.steps


# =============================================================================
# Results
# =============================================================================


@beartype
@dataclass(frozen=True)
class Prediction:
    """Recorded trajectory from one prediction run.

    Attributes:
        states: steps + 1 states; states[i] is the state at t0 + i * dt
        control: Control held constant over the horizon
        t0: Start time [s]
        t_final: Horizon length [s]
        cpu_time: Wall-clock time spent in the stepping loop [s]
        warnings: Marginal conditions reported by the stepper
    """
    states: tuple[StateVector, ...]
    control: ControlVector
    t0: float
    t_final: float
    cpu_time: float
    warnings: tuple[str, ...] = ()

    @property
    def n(self) -> int:
        """Number of steps taken."""
        return max(len(self.states) - 1, 0)

    @property
    def dt(self) -> float:
        """Step size [s]."""
        return 0.0 if self.n == 0 else self.t_final / self.n

    @property
    def cpu_seconds(self) -> float:
        """Alias for cpu_time [s]."""
        return self.cpu_time

    @property
    def initial_state(self) -> StateVector:
        return self.states[0]

    @property
    def final_state(self) -> StateVector:
        return self.states[-1]

    def t_at(self, i: int) -> float:
        """Time of states[i] [s]."""
        return self.t0 + i * self.dt

    @property
    def times(self) -> NDArray[np.float64]:
        """Time array [s], shape (n + 1,)."""
        return self.t0 + self.dt * np.arange(len(self.states), dtype=np.float64)

    @property
    def field_names(self) -> tuple[str, ...]:
        """State component names."""
        return type(self.states[0]).field_names()

    def to_array(self) -> NDArray[np.float64]:
        """State history, shape (n + 1, state_dim)."""
        return np.array([s.to_array() for s in self.states])

    def component(self, name: str) -> NDArray[np.float64]:
        """History of one state component, shape (n + 1,)."""
        names = self.field_names
        if name not in names:
            raise PreconditionError(f"Unknown state component '{name}'. Available: {list(names)}")
        return self.to_array()[:, names.index(name)]

    def to_dataframe(self):
        """Convert to Polars DataFrame with a time column and one column per component."""
        import polars as pl

        data = {"time": self.times}
        history = self.to_array()
        for i, name in enumerate(self.field_names):
            data[name] = history[:, i]
        return pl.DataFrame(data)

    def summary(self) -> dict[str, float | int | str]:
        """Scalar run summary for reports."""
        summary: dict[str, float | int | str] = {
            "steps": self.n,
            "dt": self.dt,
            "t0": self.t0,
            "t_final": self.t_final,
            "cpu_time": self.cpu_time,
            "warnings": len(self.warnings),
            "state_type": type(self.final_state).__name__,
        }
        for name, value in zip(self.field_names, self.final_state.to_array()):
            summary[f"final_{name}"] = float(value)
        return summary


# =============================================================================
# Driver
# =============================================================================


@beartype
def predict_with_config(
    pilot_input: PilotInput,
    initial_state: StateVector,
    model: Dynamics,
    stepper: Stepper,
    config: PredictionConfig,
) -> Prediction:
    """Run a fixed-step prediction described by ``config``.

    Raises:
        PreconditionError: If initial_state is not the model's state type
        NumericalError: If the model rejects a state or a solve fails
    """
    model.check_state(initial_state)

    dt = config.dt
    logger.debug(
        "Predicting %d steps of %.6g s with %s on %s",
        config.steps, dt, stepper, type(model).__name__,
    )

    stepper.reset_diagnostics()
    start = time.perf_counter()

    control = model.input_to_control(pilot_input)

    states = [initial_state]
    state = initial_state

    for i in range(config.steps):
        t = config.t0 + i * dt
        model.validate_state(state)
        state = stepper.step(model, t, state, control, dt)
        states.append(state)

    model.validate_state(state)

    cpu_time = time.perf_counter() - start
    logger.debug("Prediction finished in %.3f s", cpu_time)

    warnings = tuple(stepper.warnings)
    for warning in warnings:
        logger.warning("%s", warning)

    return Prediction(
        states=tuple(states),
        control=control,
        t0=config.t0,
        t_final=config.t_final,
        cpu_time=cpu_time,
        warnings=warnings,
    )


@beartype(conf=NUMERIC_TOWER)
def predict(
    pilot_input: PilotInput,
    initial_state: StateVector,
    model: Dynamics,
    stepper: Stepper,
    t0: float,
    t_final: float,
    steps: int,
) -> Prediction:
    """Predict future states assuming constant pilot input over the horizon.

    Args:
        pilot_input: Stick position held for the whole horizon
        initial_state: State at t0 (recorded as states[0])
        model: Dynamics model
        stepper: Integrator
        t0: Start time [s] (int or float)
        t_final: Horizon length [s] (int or float)
        steps: Number of fixed steps; dt = t_final / steps

    Returns:
        Prediction with steps + 1 states

    Raises:
        PreconditionError: If steps <= 0, t_final is not finite and > 0, or
            initial_state is not the model's state type
        NumericalError: If the model rejects a state or a solve fails
    """
    config = PredictionConfig(t_final=t_final, steps=steps, t0=t0)
    return predict_with_config(pilot_input, initial_state, model, stepper, config)
