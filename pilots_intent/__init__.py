"""pilots_intent - Short-horizon trajectory prediction from pilot input.

Given a stick position held constant over a short horizon, this package
integrates a planar vehicle model forward with a fixed-step integrator and
records the predicted trajectory.

Example:
    >>> from pilots_intent import (
    ...     ForwardEuler, PilotInput, QuadState, SimpleQuadcopter, predict,
    ... )
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
    >>> print(f"v_north after 10 s: {prediction.final_state.v_north:.2f} m/s")
"""

__version__ = "0.1.0"

# Stability and linearization analysis
from pilots_intent.analysis import (
    EigenvalueTrace,
    StabilityRegion,
    finite_difference_jacobian,
    is_stable,
    stability_region,
    trajectory_eigenvalues,
)

# Dynamics models
from pilots_intent.dynamics import (
    GRAVITY,
    Dynamics,
    LinearizableDynamics,
    PilotInput,
    PlanarControl,
    PlanarState,
    QuadControl,
    QuadState,
    SimplePlanarModel,
    SimpleQuadcopter,
    StateVector,
)

# Errors
from pilots_intent.errors import (
    ConvergenceError,
    NonFiniteStateError,
    NumericalError,
    PilotsIntentError,
    PreconditionError,
    SingularJacobianError,
)

# Prediction driver
from pilots_intent.simulation import (
    Prediction,
    PredictionConfig,
    predict,
    predict_with_config,
)

# Integrators
from pilots_intent.solvers import (
    BackwardEuler,
    ForwardEuler,
    NewtonOptions,
    NewtonResult,
    Rk4,
    Stepper,
    newton,
)

__all__ = [
    "__version__",
    # Dynamics
    "GRAVITY",
    "Dynamics",
    "LinearizableDynamics",
    "PilotInput",
    "StateVector",
    "SimplePlanarModel",
    "PlanarState",
    "PlanarControl",
    "SimpleQuadcopter",
    "QuadState",
    "QuadControl",
    # Solvers
    "Stepper",
    "ForwardEuler",
    "Rk4",
    "BackwardEuler",
    "NewtonOptions",
    "NewtonResult",
    "newton",
    # Prediction
    "Prediction",
    "PredictionConfig",
    "predict",
    "predict_with_config",
    # Analysis
    "EigenvalueTrace",
    "StabilityRegion",
    "finite_difference_jacobian",
    "is_stable",
    "stability_region",
    "trajectory_eigenvalues",
    # Errors
    "PilotsIntentError",
    "PreconditionError",
    "NumericalError",
    "SingularJacobianError",
    "NonFiniteStateError",
    "ConvergenceError",
]
