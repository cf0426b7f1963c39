"""Jacobian-based linearization along a predicted trajectory.

Around each recorded state the dynamics behave locally like
dx/dt = J x, where J is the model Jacobian. The eigenvalues of J * dt are
the z values that the stepper's stability function sees; plotting them on
top of the stability region shows how close the run sits to the boundary.
"""

from dataclasses import dataclass

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from pilots_intent.analysis.stability import StepperLike, amplification
from pilots_intent.dynamics.base import Dynamics, LinearizableDynamics
from pilots_intent.dynamics.state import ControlVector, StateVector
from pilots_intent.errors import PreconditionError
from pilots_intent.simulation.predict import Prediction


@beartype
def finite_difference_jacobian(
    model: Dynamics,
    t: float,
    state: StateVector,
    control: ControlVector,
    epsilon: float = 1e-6,
) -> NDArray[np.float64]:
    """Central-difference approximation of d(derivative)/d(state).

    Works for any model, so it can be used to check analytic Jacobians.

    Args:
        model: Dynamics model
        t: Time [s]
        state: Linearization point
        control: Control vector
        epsilon: Perturbation size (scaled by 1 + |x_j|)

    Returns:
        Jacobian, shape (n, n)
    """
    if not epsilon > 0.0:
        raise PreconditionError(f"epsilon must be > 0, got {epsilon}")

    state_type = type(state)
    x = state.to_array()
    n = x.size
    jac = np.zeros((n, n))

    for j in range(n):
        h = epsilon * (1.0 + abs(x[j]))
        x_plus = x.copy()
        x_minus = x.copy()
        x_plus[j] += h
        x_minus[j] -= h
        f_plus = model.derivative(t, state_type.from_array(x_plus), control).to_array()
        f_minus = model.derivative(t, state_type.from_array(x_minus), control).to_array()
        jac[:, j] = (f_plus - f_minus) / (2.0 * h)

    return jac


@beartype
@dataclass(frozen=True)
class EigenvalueTrace:
    """Eigenvalues of J * dt at every recorded state.

    Attributes:
        times: Time of each state [s], shape (n + 1,)
        eigenvalues: Eigenvalues of J * dt, shape (n + 1, state_dim),
            each row sorted by real part then imaginary part
        dt: Step size [s]
    """
    times: NDArray[np.float64]
    eigenvalues: NDArray[np.complex128]
    dt: float

    @property
    def spectral_radius(self) -> NDArray[np.float64]:
        """Largest |z| per step."""
        return np.max(np.abs(self.eigenvalues), axis=1)

    def max_amplification(self, stepper: StepperLike) -> NDArray[np.float64]:
        """Largest |R(z)| over the eigenvalues of each step."""
        return np.max(amplification(stepper, self.eigenvalues), axis=1)

    def within_region(self, stepper: StepperLike) -> NDArray[np.bool_]:
        """Per step: True when every eigenvalue lies in the stability region."""
        return self.max_amplification(stepper) <= 1.0


@beartype
def jacobian_eigenvalues(
    model: LinearizableDynamics,
    t: float,
    state: StateVector,
    control: ControlVector,
    dt: float,
) -> NDArray[np.complex128]:
    """Eigenvalues of J(t, state, control) * dt, sorted.

    Raises:
        PreconditionError: If the Jacobian is not square with the state's dimension
    """
    dim = state.dim()
    jac = np.asarray(model.jacobian(t, state, control), dtype=np.float64)
    if jac.shape != (dim, dim):
        raise PreconditionError(
            f"jacobian must be square with dimension {dim}, got shape {jac.shape}"
        )
    return np.sort_complex(np.linalg.eigvals(jac * dt)).astype(np.complex128)


@beartype
def trajectory_eigenvalues(
    prediction: Prediction,
    model: LinearizableDynamics,
) -> EigenvalueTrace:
    """Linearize ``model`` at every state of ``prediction``.

    Args:
        prediction: Completed prediction (not modified)
        model: Model that produced the prediction

    Returns:
        EigenvalueTrace with one row per recorded state
    """
    if prediction.n < 1:
        raise PreconditionError("prediction must contain at least one step")

    dt = prediction.dt
    rows = []
    for i, state in enumerate(prediction.states):
        model.check_state(state)
        rows.append(jacobian_eigenvalues(model, prediction.t_at(i), state, prediction.control, dt))

    return EigenvalueTrace(
        times=prediction.times,
        eigenvalues=np.array(rows, dtype=np.complex128),
        dt=dt,
    )
