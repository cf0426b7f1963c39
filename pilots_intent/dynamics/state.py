"""State, control and pilot-input representations for planar prediction.

Every model owns a concrete state class and a concrete control class. Both are
frozen dataclasses whose fields are plain floats, listed in vector order:

    @beartype
    @dataclass(frozen=True)
    class MyState(StateVector):
        north: float
        east: float
        ...

The mixins below give them what the integrators need:

- add_scaled(): the affine update ``self + scale * derivative`` used by
  every stepper. A derivative is an instance of the same state class.
- to_array() / from_array(): round trip to a dense float64 vector, needed by
  the implicit stepper and by Jacobian consumers.
- ensure_finite(): raises NonFiniteStateError on NaN/inf components.

Frames:
- Navigation frame: north-east (NE) plane, x = north, y = east
- Body frame: x forward, y right, z down
- Yaw = 0 faces north, positive clockwise (toward east)
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import TypeVar

import numpy as np
from beartype import BeartypeConf, beartype
from numpy.typing import NDArray

from pilots_intent.errors import NonFiniteStateError, PreconditionError

V = TypeVar("V", bound="VectorRecord")

# Caller-facing inputs accept ints where floats are expected (PEP 484 numeric tower)
NUMERIC_TOWER = BeartypeConf(is_pep484_tower=True)


# =============================================================================
# Pilot Input
# =============================================================================


@beartype(conf=NUMERIC_TOWER)
@dataclass(frozen=True)
class PilotInput:
    """Stick position held by the pilot for the whole prediction horizon.

    Attributes:
        roll: Roll angle [rad] (positive = right wing down)
        pitch: Pitch angle [rad] (positive = nose down, accelerates forward)
        yaw_rate: Commanded yaw rate [rad/s] (positive = clockwise)
    """
    roll: float = 0.0
    pitch: float = 0.0
    yaw_rate: float = 0.0

    def __post_init__(self) -> None:
        # Fields are always float, even when built from ints
        for name in ("roll", "pitch", "yaw_rate"):
            object.__setattr__(self, name, float(getattr(self, name)))

    @classmethod
    def from_degrees(
        cls,
        roll_deg: float = 0.0,
        pitch_deg: float = 0.0,
        yaw_rate_deg: float = 0.0,
    ) -> "PilotInput":
        """Create pilot input from angles in degrees and yaw rate in deg/s."""
        return cls(
            roll=math.radians(roll_deg),
            pitch=math.radians(pitch_deg),
            yaw_rate=math.radians(yaw_rate_deg),
        )


# =============================================================================
# Vector Records
# =============================================================================


class VectorRecord:
    """Fixed-shape record of named float components."""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Component names in vector order."""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def dim(cls) -> int:
        """Number of components."""
        return len(fields(cls))

    def to_array(self) -> NDArray[np.float64]:
        """Convert to flat float64 array."""
        return np.array(
            [getattr(self, name) for name in self.field_names()],
            dtype=np.float64,
        )

    @classmethod
    def from_array(cls: type[V], arr: NDArray) -> V:
        """Create from flat array with exactly dim() elements."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.shape != (cls.dim(),):
            names = ", ".join(cls.field_names())
            raise PreconditionError(
                f"{cls.__name__} expects {cls.dim()} elements ({names}), "
                f"got shape {arr.shape}"
            )
        return cls(*(float(v) for v in arr))

    @classmethod
    def zero(cls: type[V]) -> V:
        """All components zero."""
        return cls(*([0.0] * cls.dim()))


class ControlVector(VectorRecord):
    """Base for model-specific control records."""


class StateVector(VectorRecord, ABC):
    """Base for model-specific state records.

    Derivatives share the state class: the derivative of ``north`` is stored
    in the ``north`` field, and so on.
    """

    @property
    @abstractmethod
    def position(self) -> tuple[float, float]:
        """(north, east) position [m]."""

    def add_scaled(self: V, derivative: V, scale: float) -> V:
        """Return ``self + scale * derivative``."""
        if type(derivative) is not type(self):
            raise PreconditionError(
                f"Cannot combine {type(self).__name__} with {type(derivative).__name__}"
            )
        return type(self)(*(
            getattr(self, name) + scale * getattr(derivative, name)
            for name in self.field_names()
        ))

    def ensure_finite(self) -> None:
        """Raise NonFiniteStateError if any component is NaN or infinite."""
        for name in self.field_names():
            value = getattr(self, name)
            if not math.isfinite(value):
                raise NonFiniteStateError(name, value)

    def is_finite(self) -> bool:
        """True when every component is finite."""
        return bool(np.all(np.isfinite(self.to_array())))
