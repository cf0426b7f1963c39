"""Linear stability regions of the fixed-step integrators.

Applied to the scalar test equation dx/dt = lambda * x, a one-step method
multiplies the state by R(z) each step, where z = lambda * dt. The method is
stable for that step size when |R(z)| <= 1.

Reference values:
- Forward Euler: disk of radius 1 centered at -1; unstable for real z < -2
- RK4: larger region, reaching about -2.785 on the real axis
- Backward Euler: everything outside the disk of radius 1 centered at +1,
  which includes the whole left half-plane (A-stable)
"""

from dataclasses import dataclass

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from pilots_intent.errors import PreconditionError
from pilots_intent.solvers.steppers import Stepper

StepperLike = Stepper | type[Stepper]


@beartype
def amplification(stepper: StepperLike, z: complex | float | NDArray) -> float | NDArray:
    """|R(z)| for the given stepper; inf where R has a pole."""
    with np.errstate(divide="ignore", invalid="ignore"):
        r = stepper.stability(np.asarray(z, dtype=np.complex128))
    magnitude = np.abs(r)
    magnitude = np.where(np.isnan(magnitude), np.inf, magnitude)
    return float(magnitude) if magnitude.ndim == 0 else magnitude


@beartype
def is_stable(stepper: StepperLike, z: complex | float | NDArray) -> bool | NDArray:
    """Classify z = lambda * dt as stable (|R(z)| <= 1)."""
    return amplification(stepper, z) <= 1.0


@beartype
@dataclass(frozen=True)
class StabilityRegion:
    """Stability classification of a rectangular grid in the z-plane.

    Attributes:
        stepper_name: Name of the integrator
        real: Real-axis grid points, shape (nx,)
        imag: Imaginary-axis grid points, shape (ny,)
        amplification: |R(z)| on the grid, shape (ny, nx)
    """
    stepper_name: str
    real: NDArray[np.float64]
    imag: NDArray[np.float64]
    amplification: NDArray[np.float64]

    @property
    def stable(self) -> NDArray[np.bool_]:
        """Boolean mask of stable cells, shape (ny, nx)."""
        return self.amplification <= 1.0

    @property
    def stable_fraction(self) -> float:
        """Fraction of grid cells that are stable."""
        return float(np.mean(self.stable))

    @property
    def extent(self) -> tuple[float, float, float, float]:
        """(re_min, re_max, im_min, im_max) for imshow/contour."""
        return (
            float(self.real[0]), float(self.real[-1]),
            float(self.imag[0]), float(self.imag[-1]),
        )


@beartype
def stability_region(
    stepper: StepperLike,
    real_range: tuple[float, float] = (-4.0, 2.0),
    imag_range: tuple[float, float] = (-3.0, 3.0),
    resolution: int = 401,
) -> StabilityRegion:
    """Evaluate |R(z)| on a grid covering the given rectangle.

    Args:
        stepper: Stepper instance or class
        real_range: (min, max) of Re(z)
        imag_range: (min, max) of Im(z)
        resolution: Grid points per axis

    Returns:
        StabilityRegion for plotting and classification
    """
    if resolution < 2:
        raise PreconditionError(f"resolution must be >= 2, got {resolution}")
    for label, (lo, hi) in (("real_range", real_range), ("imag_range", imag_range)):
        if not (np.isfinite(lo) and np.isfinite(hi) and lo < hi):
            raise PreconditionError(f"{label} must be finite with min < max, got {(lo, hi)}")

    real = np.linspace(real_range[0], real_range[1], resolution)
    imag = np.linspace(imag_range[0], imag_range[1], resolution)
    re_grid, im_grid = np.meshgrid(real, imag)

    return StabilityRegion(
        stepper_name=stepper.name,
        real=real,
        imag=imag,
        amplification=amplification(stepper, re_grid + 1j * im_grid),
    )
