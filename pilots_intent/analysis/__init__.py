"""Stability and linearization analysis for predictions.

Example:
    >>> from pilots_intent.analysis import stability_region, trajectory_eigenvalues
    >>> from pilots_intent.solvers import ForwardEuler
    >>>
    >>> region = stability_region(ForwardEuler)
    >>> trace = trajectory_eigenvalues(prediction, model)
    >>> trace.within_region(ForwardEuler).all()
"""

from pilots_intent.analysis.linearization import (
    EigenvalueTrace,
    finite_difference_jacobian,
    jacobian_eigenvalues,
    trajectory_eigenvalues,
)
from pilots_intent.analysis.stability import (
    StabilityRegion,
    amplification,
    is_stable,
    stability_region,
)

__all__ = [
    # Stability regions
    "StabilityRegion",
    "amplification",
    "is_stable",
    "stability_region",
    # Linearization
    "EigenvalueTrace",
    "finite_difference_jacobian",
    "jacobian_eigenvalues",
    "trajectory_eigenvalues",
]
