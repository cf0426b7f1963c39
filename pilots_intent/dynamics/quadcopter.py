"""Planar NED quadcopter model with yaw, hover thrust and linear drag.

Body frame: x forward, y right, z down. Yaw = 0 faces north, positive
clockwise. Heading is part of the state, so a yaw-rate command turns the
direction in which the tilt acceleration is applied.

State: [north, east, v_north, v_east, yaw]
Control: [ax_body, ay_body, yaw_rate]

Equations of motion:
    north_dot   = v_north
    east_dot    = v_east
    v_north_dot = ax*cos(yaw) - ay*sin(yaw) - drag * v_north
    v_east_dot  = ax*sin(yaw) + ay*cos(yaw) - drag * v_east
    yaw_dot     = yaw_rate

Jacobian nonzero entries (row = derivative, column = state):
    (north_dot,   v_north) = 1
    (east_dot,    v_east)  = 1
    (v_north_dot, v_north) = -drag
    (v_east_dot,  v_east)  = -drag
    (v_north_dot, yaw)     = -ax*sin(yaw) - ay*cos(yaw)
    (v_east_dot,  yaw)     =  ax*cos(yaw) - ay*sin(yaw)
"""

import math
from dataclasses import dataclass

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from pilots_intent.dynamics.base import (
    LinearizableDynamics,
    hover_acceleration,
    rotate_body_to_ned,
)
from pilots_intent.dynamics.state import ControlVector, PilotInput, StateVector
from pilots_intent.errors import PreconditionError


@beartype
@dataclass(frozen=True)
class QuadState(StateVector):
    """Quadcopter planar state.

    Attributes:
        north: North position [m]
        east: East position [m]
        v_north: North velocity [m/s]
        v_east: East velocity [m/s]
        yaw: Heading [rad] (0 = north, positive clockwise)
    """
    north: float
    east: float
    v_north: float
    v_east: float
    yaw: float

    @classmethod
    def at_rest(
        cls,
        north: float = 0.0,
        east: float = 0.0,
        yaw_deg: float = 0.0,
    ) -> "QuadState":
        """Create a hovering state with zero velocity.

        Args:
            north, east: Position [m]
            yaw_deg: Heading [degrees] (0 = north, 90 = east)
        """
        return cls(
            north=north,
            east=east,
            v_north=0.0,
            v_east=0.0,
            yaw=math.radians(yaw_deg),
        )

    @property
    def position(self) -> tuple[float, float]:
        """(north, east) position [m]."""
        return self.north, self.east

    @property
    def speed(self) -> float:
        """Ground speed [m/s]."""
        return math.hypot(self.v_north, self.v_east)

    @property
    def yaw_deg(self) -> float:
        """Heading [degrees]."""
        return math.degrees(self.yaw)


@beartype
@dataclass(frozen=True)
class QuadControl(ControlVector):
    """Constant quadcopter control.

    Attributes:
        ax_body: Forward acceleration [m/s^2]
        ay_body: Rightward acceleration [m/s^2]
        yaw_rate: Yaw rate [rad/s]
    """
    ax_body: float
    ay_body: float
    yaw_rate: float


@beartype
@dataclass(frozen=True)
class SimpleQuadcopter(LinearizableDynamics[QuadState, QuadControl]):
    """Planar quadcopter using small-tilt hover thrust and linear drag.

    Example:
        >>> model = SimpleQuadcopter(drag=0.1)
        >>> control = model.input_to_control(PilotInput.from_degrees(pitch_deg=10.0))
        >>> state_dot = model.derivative(0.0, QuadState.at_rest(), control)

    Attributes:
        drag: Linear drag coefficient [1/s]
    """
    drag: float = 0.1

    state_type = QuadState
    control_type = QuadControl

    def __post_init__(self) -> None:
        """Validate parameters."""
        if not (math.isfinite(self.drag) and self.drag >= 0.0):
            raise PreconditionError(f"drag must be finite and >= 0, got {self.drag}")

    def input_to_control(self, pilot_input: PilotInput) -> QuadControl:
        """Convert stick position to body accelerations and yaw rate."""
        return QuadControl(
            ax_body=hover_acceleration(pilot_input.pitch),
            ay_body=hover_acceleration(pilot_input.roll),
            yaw_rate=pilot_input.yaw_rate,
        )

    def derivative(self, t: float, state: QuadState, control: QuadControl) -> QuadState:
        """Compute state derivative."""
        a_north, a_east = rotate_body_to_ned(control.ax_body, control.ay_body, state.yaw)

        return QuadState(
            north=state.v_north,
            east=state.v_east,
            v_north=a_north - self.drag * state.v_north,
            v_east=a_east - self.drag * state.v_east,
            yaw=control.yaw_rate,
        )

    def validate_state(self, state: QuadState) -> None:
        """Reject NaN/inf states."""
        state.ensure_finite()

    def jacobian(
        self,
        t: float,
        state: QuadState,
        control: QuadControl,
    ) -> NDArray[np.float64]:
        """Analytic Jacobian of derivative() with respect to the state."""
        c = np.cos(state.yaw)
        s = np.sin(state.yaw)
        ax = control.ax_body
        ay = control.ay_body
        k = self.drag

        # Partials of the rotated accelerations w.r.t. yaw
        da_north_dyaw = -ax * s - ay * c
        da_east_dyaw = ax * c - ay * s

        return np.array([
            [0.0, 0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, -k, 0.0, da_north_dyaw],
            [0.0, 0.0, 0.0, -k, da_east_dyaw],
            [0.0, 0.0, 0.0, 0.0, 0.0],
        ])
