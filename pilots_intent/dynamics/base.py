"""Dynamics model interfaces.

A dynamics model does two things:

1. Maps the pilot's stick position to a model-specific control vector
   (input_to_control). This happens once per prediction.
2. Computes the state time derivative dx/dt = f(t, x, u) (derivative).

Models that can also supply the exact analytic Jacobian df/dx implement the
narrower LinearizableDynamics interface. The implicit stepper and the
eigenvalue analysis require it in their signatures.

Hover approximation:
    A multirotor holding altitude at tilt angle theta produces a horizontal
    acceleration of g * tan(theta). Tilt is clamped to 95% of 90 degrees
    first so tan() stays bounded.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from pilots_intent.dynamics.state import ControlVector, PilotInput, StateVector
from pilots_intent.errors import PreconditionError

GRAVITY = 9.81  # Standard gravitational acceleration [m/s^2]
MAX_TILT_RAD = 0.95 * (np.pi / 2)  # Tilt clamp for the hover approximation [rad]

S = TypeVar("S", bound=StateVector)
U = TypeVar("U", bound=ControlVector)


# =============================================================================
# Shared Kinematics
# =============================================================================


@beartype
def clamp_tilt(angle: float) -> float:
    """Clamp a tilt angle to [-MAX_TILT_RAD, MAX_TILT_RAD]."""
    return float(np.clip(angle, -MAX_TILT_RAD, MAX_TILT_RAD))


@beartype
def hover_acceleration(angle: float) -> float:
    """Horizontal acceleration from tilting at constant altitude [m/s^2]."""
    return GRAVITY * float(np.tan(clamp_tilt(angle)))


@beartype
def rotate_body_to_ned(ax_body: float, ay_body: float, yaw: float) -> tuple[float, float]:
    """Rotate a body-frame planar vector into the north-east frame.

    Args:
        ax_body: Forward component
        ay_body: Right component
        yaw: Heading [rad] (0 = north, positive clockwise)

    Returns:
        (north, east) components
    """
    c = np.cos(yaw)
    s = np.sin(yaw)
    return float(ax_body * c - ay_body * s), float(ax_body * s + ay_body * c)


# =============================================================================
# Model Interfaces
# =============================================================================


class Dynamics(ABC, Generic[S, U]):
    """Continuous-time motion model driven by a constant control.

    Subclasses bind their concrete state and control classes:

        class MyModel(Dynamics[MyState, MyControl]):
            state_type = MyState
            control_type = MyControl
    """

    state_type: ClassVar[type[StateVector]]
    control_type: ClassVar[type[ControlVector]]

    @property
    def state_dim(self) -> int:
        """Length of the state vector."""
        return self.state_type.dim()

    def check_state(self, state: StateVector) -> None:
        """Verify that ``state`` is this model's state type."""
        if not isinstance(state, self.state_type):
            raise PreconditionError(
                f"{type(self).__name__} expects {self.state_type.__name__}, "
                f"got {type(state).__name__}"
            )

    @abstractmethod
    def input_to_control(self, pilot_input: PilotInput) -> U:
        """Map pilot input to this model's control vector."""

    @abstractmethod
    def derivative(self, t: float, state: S, control: U) -> S:
        """Compute dx/dt at (t, state, control)."""

    def validate_state(self, state: S) -> None:
        """Hook called by the prediction driver before each step."""


class LinearizableDynamics(Dynamics[S, U]):
    """Dynamics model that also provides an analytic Jacobian."""

    @abstractmethod
    def jacobian(self, t: float, state: S, control: U) -> NDArray[np.float64]:
        """Exact d(derivative)/d(state), shape (state_dim, state_dim)."""
