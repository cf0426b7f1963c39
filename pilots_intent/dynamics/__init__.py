"""Dynamics models for planar trajectory prediction.

This module provides the state/control representations and the motion
models that turn a constant pilot input into state derivatives.

Example:
    >>> from pilots_intent.dynamics import PilotInput, QuadState, SimpleQuadcopter
    >>>
    >>> model = SimpleQuadcopter(drag=0.1)
    >>> control = model.input_to_control(PilotInput.from_degrees(pitch_deg=10.0))
    >>> state_dot = model.derivative(0.0, QuadState.at_rest(), control)
"""

from pilots_intent.dynamics.base import (
    GRAVITY,
    MAX_TILT_RAD,
    Dynamics,
    LinearizableDynamics,
    clamp_tilt,
    hover_acceleration,
    rotate_body_to_ned,
)
from pilots_intent.dynamics.planar import PlanarControl, PlanarState, SimplePlanarModel
from pilots_intent.dynamics.quadcopter import QuadControl, QuadState, SimpleQuadcopter
from pilots_intent.dynamics.state import (
    ControlVector,
    PilotInput,
    StateVector,
    VectorRecord,
)

__all__ = [
    # State
    "PilotInput",
    "VectorRecord",
    "StateVector",
    "ControlVector",
    # Interfaces
    "Dynamics",
    "LinearizableDynamics",
    "GRAVITY",
    "MAX_TILT_RAD",
    "clamp_tilt",
    "hover_acceleration",
    "rotate_body_to_ned",
    # Models
    "SimplePlanarModel",
    "PlanarState",
    "PlanarControl",
    "SimpleQuadcopter",
    "QuadState",
    "QuadControl",
]
