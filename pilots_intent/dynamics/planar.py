"""Minimal planar point-mass model with a fixed heading.

The vehicle tilts to accelerate in the horizontal plane and feels linear
drag. Heading is a fixed model parameter rather than a state, so the control
is two-dimensional and the yaw-rate channel of the pilot input is ignored.

State: [north, east, v_north, v_east]
Control: [ax_body, ay_body]

Equations of motion:
    north_dot   = v_north
    east_dot    = v_east
    v_north_dot = a_north - drag * v_north
    v_east_dot  = a_east  - drag * v_east

where (a_north, a_east) is the body acceleration rotated by the heading.
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
class PlanarState(StateVector):
    """Planar point-mass state.

    Attributes:
        north: North position [m]
        east: East position [m]
        v_north: North velocity [m/s]
        v_east: East velocity [m/s]
    """
    north: float
    east: float
    v_north: float
    v_east: float

    @property
    def position(self) -> tuple[float, float]:
        """(north, east) position [m]."""
        return self.north, self.east

    @property
    def speed(self) -> float:
        """Ground speed [m/s]."""
        return math.hypot(self.v_north, self.v_east)


@beartype
@dataclass(frozen=True)
class PlanarControl(ControlVector):
    """Body-frame horizontal accelerations.

    Attributes:
        ax_body: Forward acceleration [m/s^2]
        ay_body: Rightward acceleration [m/s^2]
    """
    ax_body: float
    ay_body: float


@beartype
@dataclass(frozen=True)
class SimplePlanarModel(LinearizableDynamics[PlanarState, PlanarControl]):
    """Planar drag model without yaw dynamics.

    Attributes:
        drag: Linear drag coefficient [1/s]
        heading: Fixed body heading [rad] (0 = north, positive clockwise)
    """
    drag: float = 0.1
    heading: float = 0.0

    state_type = PlanarState
    control_type = PlanarControl

    def __post_init__(self) -> None:
        """Validate parameters."""
        if not (math.isfinite(self.drag) and self.drag >= 0.0):
            raise PreconditionError(f"drag must be finite and >= 0, got {self.drag}")
        if not math.isfinite(self.heading):
            raise PreconditionError(f"heading must be finite, got {self.heading}")

    def input_to_control(self, pilot_input: PilotInput) -> PlanarControl:
        """Hover approximation: pitch drives forward, roll drives right."""
        return PlanarControl(
            ax_body=hover_acceleration(pilot_input.pitch),
            ay_body=hover_acceleration(pilot_input.roll),
        )

    def derivative(self, t: float, state: PlanarState, control: PlanarControl) -> PlanarState:
        """Compute state derivative."""
        a_north, a_east = rotate_body_to_ned(control.ax_body, control.ay_body, self.heading)

        return PlanarState(
            north=state.v_north,
            east=state.v_east,
            v_north=a_north - self.drag * state.v_north,
            v_east=a_east - self.drag * state.v_east,
        )

    def validate_state(self, state: PlanarState) -> None:
        state.ensure_finite()

    def jacobian(
        self,
        t: float,
        state: PlanarState,
        control: PlanarControl,
    ) -> NDArray[np.float64]:
        """Constant Jacobian: position/velocity coupling plus drag."""
        k = self.drag
        return np.array([
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
            [0.0, 0.0, -k, 0.0],
            [0.0, 0.0, 0.0, -k],
        ])
