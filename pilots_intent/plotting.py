"""Visualization module for predictions.

Provides plotting functions for:
- Ground track (north-east plane)
- Individual state components vs time
- Stepper stability regions, optionally overlaid with trajectory eigenvalues
- Side-by-side stepper comparison

All plots use matplotlib with the same style and return the Figure; they
read predictions without modifying them.
"""

import matplotlib.pyplot as plt
import numpy as np
from beartype import beartype
from matplotlib.figure import Figure

from pilots_intent.analysis.linearization import EigenvalueTrace
from pilots_intent.analysis.stability import StabilityRegion
from pilots_intent.errors import PreconditionError
from pilots_intent.simulation.predict import Prediction

# =============================================================================
# Plot Style Configuration
# =============================================================================

COLORS = {
    "primary": "#2E86AB",  # Steel blue
    "secondary": "#A23B72",  # Berry
    "accent": "#F18F01",  # Orange
    "start": "#3BB273",  # Green
    "end": "#D1495B",  # Red
    "stable": "#CFE8F3",  # Pale blue fill
    "grid": "#CCCCCC",  # Grid lines
    "text": "#333333",  # Text color
}

SERIES_COLORS = [COLORS["primary"], COLORS["secondary"], COLORS["accent"], "#6C757D"]

DEFAULT_FIGSIZE = (9.0, 9.0)


def _setup_style() -> None:
    """Configure matplotlib style for consistent appearance."""
    plt.rcParams.update(
        {
            "font.family": "sans-serif",
            "font.sans-serif": ["Helvetica", "Arial", "DejaVu Sans"],
            "font.size": 11,
            "axes.titlesize": 14,
            "axes.labelsize": 12,
            "axes.linewidth": 1.2,
            "axes.edgecolor": COLORS["text"],
            "axes.labelcolor": COLORS["text"],
            "xtick.labelsize": 10,
            "ytick.labelsize": 10,
            "legend.fontsize": 10,
            "grid.alpha": 0.5,
            "grid.linewidth": 0.8,
        }
    )


def _require_states(prediction: Prediction) -> None:
    if len(prediction.states) < 2:
        raise PreconditionError(
            f"need at least 2 states to plot, got {len(prediction.states)}"
        )


def _padded_limits(values: np.ndarray, fraction: float = 0.1) -> tuple[float, float]:
    """Axis limits with padding so the line is not glued to the border."""
    lo, hi = float(np.min(values)), float(np.max(values))
    pad = max(abs(hi - lo) * fraction, 1e-3)
    return lo - pad, hi + pad


# =============================================================================
# Trajectory Plots
# =============================================================================


@beartype
def plot_trajectory_xy(
    prediction: Prediction,
    figsize: tuple[float, float] = DEFAULT_FIGSIZE,
    title: str = "Predicted Pilot Intent (North-East)",
) -> Figure:
    """Plot the predicted ground track with start and end markers.

    East is drawn on the horizontal axis and north on the vertical axis so
    the plot reads like a map.

    Args:
        prediction: Completed prediction
        figsize: Figure size (width, height) in inches
        title: Plot title

    Returns:
        matplotlib Figure object
    """
    _require_states(prediction)
    _setup_style()

    track = np.array([s.position for s in prediction.states])
    north = track[:, 0]
    east = track[:, 1]

    fig, ax = plt.subplots(figsize=figsize)

    ax.plot(east, north, color=COLORS["primary"], linewidth=2, label="Trajectory")
    ax.scatter([east[0]], [north[0]], color=COLORS["start"], s=40, zorder=3, label="Start")
    ax.scatter([east[-1]], [north[-1]], color=COLORS["end"], s=40, zorder=3, label="End")

    ax.set_xlim(*_padded_limits(east))
    ax.set_ylim(*_padded_limits(north))
    ax.set_xlabel("East (m)")
    ax.set_ylabel("North (m)")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")

    fig.tight_layout()
    return fig


@beartype
def plot_component(
    prediction: Prediction,
    name: str,
    figsize: tuple[float, float] = (10.0, 5.0),
    ylabel: str | None = None,
) -> Figure:
    """Plot one state component against time.

    Args:
        prediction: Completed prediction
        name: State component, e.g. "v_north" or "yaw"
        figsize: Figure size
        ylabel: Axis label (defaults to the component name)

    Returns:
        matplotlib Figure object
    """
    _require_states(prediction)
    _setup_style()

    values = prediction.component(name)
    times = prediction.times

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(times, values, color=COLORS["primary"], linewidth=2)
    ax.set_xlabel("Time (s)")
    ax.set_ylabel(ylabel or name)
    ax.set_title(f"{name} vs Time")
    ax.grid(True, alpha=0.3)
    ax.set_xlim(times[0], times[-1])

    fig.tight_layout()
    return fig


@beartype
def plot_comparison(
    predictions: dict[str, Prediction],
    name: str,
    figsize: tuple[float, float] = (10.0, 5.0),
) -> Figure:
    """Overlay one state component from several predictions.

    Args:
        predictions: Label -> prediction, e.g. one per stepper
        name: State component to compare

    Returns:
        matplotlib Figure object
    """
    if not predictions:
        raise PreconditionError("predictions must not be empty")
    for prediction in predictions.values():
        _require_states(prediction)

    _setup_style()
    fig, ax = plt.subplots(figsize=figsize)

    for i, (label, prediction) in enumerate(predictions.items()):
        ax.plot(
            prediction.times,
            prediction.component(name),
            color=SERIES_COLORS[i % len(SERIES_COLORS)],
            linewidth=2,
            label=label,
        )

    ax.set_xlabel("Time (s)")
    ax.set_ylabel(name)
    ax.set_title(f"{name} by Integrator")
    ax.grid(True, alpha=0.3)
    ax.legend()

    fig.tight_layout()
    return fig


# =============================================================================
# Stability Plots
# =============================================================================


@beartype
def plot_stability_region(
    region: StabilityRegion,
    trace: EigenvalueTrace | None = None,
    figsize: tuple[float, float] = (8.0, 7.0),
) -> Figure:
    """Plot a stepper's stability region in the z = lambda * dt plane.

    Args:
        region: Grid from stability_region()
        trace: Optional eigenvalues of J * dt along a trajectory to overlay

    Returns:
        matplotlib Figure object
    """
    _setup_style()

    fig, ax = plt.subplots(figsize=figsize)

    ax.contourf(
        region.real,
        region.imag,
        region.stable.astype(float),
        levels=[0.5, 1.5],
        colors=[COLORS["stable"]],
    )
    ax.contour(
        region.real,
        region.imag,
        np.ma.masked_invalid(region.amplification),
        levels=[1.0],
        colors=[COLORS["primary"]],
        linewidths=2,
    )

    if trace is not None:
        z = trace.eigenvalues.ravel()
        ax.scatter(
            z.real,
            z.imag,
            color=COLORS["accent"],
            s=12,
            alpha=0.6,
            zorder=3,
            label=f"eig(J·dt), dt = {trace.dt:.3g} s",
        )
        ax.legend(loc="upper left")

    ax.axhline(0.0, color=COLORS["text"], linewidth=0.8)
    ax.axvline(0.0, color=COLORS["text"], linewidth=0.8)
    ax.set_xlim(region.real[0], region.real[-1])
    ax.set_ylim(region.imag[0], region.imag[-1])
    ax.set_aspect("equal")
    ax.set_xlabel("Re(z)")
    ax.set_ylabel("Im(z)")
    ax.set_title(f"Stability Region: {region.stepper_name}")
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    return fig
