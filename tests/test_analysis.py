"""Tests for stability regions and trajectory linearization."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pilots_intent.analysis import (
    amplification,
    finite_difference_jacobian,
    is_stable,
    jacobian_eigenvalues,
    stability_region,
    trajectory_eigenvalues,
)
from pilots_intent.dynamics import (
    PilotInput,
    PlanarControl,
    PlanarState,
    QuadState,
    SimplePlanarModel,
    SimpleQuadcopter,
)
from pilots_intent.errors import PreconditionError
from pilots_intent.simulation import Prediction, predict
from pilots_intent.solvers import BackwardEuler, ForwardEuler, Rk4


class TruncatedJacobianModel(SimplePlanarModel):
    """Planar model whose Jacobian has the wrong dimension."""

    def jacobian(self, t, state, control):
        return np.zeros((3, 3))


# =============================================================================
# Stability Classification Tests
# =============================================================================


class TestIsStable:
    """Test |R(z)| <= 1 classification."""

    @pytest.mark.parametrize("stepper", [ForwardEuler, Rk4, BackwardEuler])
    def test_origin_is_marginal(self, stepper):
        """|R(0)| = 1, so z = 0 is stable."""
        assert_allclose(amplification(stepper, 0.0), 1.0)
        assert is_stable(stepper, 0.0)

    def test_forward_euler_real_axis(self):
        """Forward Euler is stable on [-2, 0] and unstable below -2."""
        assert is_stable(ForwardEuler, -1.0)
        assert is_stable(ForwardEuler, -2.0)
        assert not is_stable(ForwardEuler, -2.5)
        assert not is_stable(ForwardEuler, 0.1)

    def test_rk4_real_axis_boundary(self):
        """RK4 reaches about -2.785 on the real axis."""
        assert is_stable(Rk4, -2.7)
        assert not is_stable(Rk4, -2.9)

    def test_backward_euler_left_half_plane(self):
        """Backward Euler is stable everywhere with Re(z) <= 0."""
        re, im = np.meshgrid(np.linspace(-50.0, 0.0, 51), np.linspace(-50.0, 50.0, 51))
        assert np.all(is_stable(BackwardEuler, re + 1j * im))

    def test_backward_euler_unstable_near_plus_one(self):
        """Inside the disk centered at +1 the implicit method amplifies."""
        assert not is_stable(BackwardEuler, 0.5)

    def test_pole_is_infinite(self):
        """R(z) = 1 / (1 - z) has a pole at z = 1."""
        assert amplification(BackwardEuler, 1.0) == np.inf

    def test_accepts_instances(self):
        """Stepper instances classify the same as classes."""
        assert is_stable(BackwardEuler(), -10.0) == is_stable(BackwardEuler, -10.0)


# =============================================================================
# Stability Region Tests
# =============================================================================


class TestStabilityRegion:
    """Test gridded stability regions."""

    def test_grid_shapes(self):
        """Amplification grid is (ny, nx)."""
        region = stability_region(ForwardEuler, resolution=51)

        assert region.real.shape == (51,)
        assert region.imag.shape == (51,)
        assert region.amplification.shape == (51, 51)
        assert region.stepper_name == "Forward Euler"
        assert region.extent == (-4.0, 2.0, -3.0, 3.0)

    def test_forward_euler_area(self):
        """Unit disk: area pi out of a 6 x 6 window."""
        region = stability_region(ForwardEuler)
        assert_allclose(region.stable_fraction, np.pi / 36.0, atol=0.005)

    def test_backward_euler_area(self):
        """Complement of the unit disk centered at +1."""
        region = stability_region(BackwardEuler)
        assert_allclose(region.stable_fraction, 1.0 - np.pi / 36.0, atol=0.005)

    def test_rk4_larger_than_forward_euler(self):
        """RK4's region contains forward Euler's."""
        fe = stability_region(ForwardEuler, resolution=201)
        rk4 = stability_region(Rk4, resolution=201)

        assert rk4.stable_fraction > fe.stable_fraction
        assert np.all(rk4.stable[fe.stable])

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"resolution": 1},
            {"real_range": (1.0, -1.0)},
            {"imag_range": (0.0, float("inf"))},
        ],
    )
    def test_invalid_grid(self, kwargs):
        """Degenerate or non-finite windows are rejected."""
        with pytest.raises(PreconditionError):
            stability_region(ForwardEuler, **kwargs)


# =============================================================================
# Linearization Tests
# =============================================================================


class TestLinearization:
    """Test Jacobian eigenvalues along a prediction."""

    def test_planar_eigenvalues(self):
        """Planar model: two drag modes at -k dt and two integrator modes at 0."""
        model = SimplePlanarModel(drag=0.5)
        eig = jacobian_eigenvalues(
            model, 0.0, PlanarState.zero(), PlanarControl.zero(), 0.2
        )

        assert eig.dtype == np.complex128
        assert_allclose(eig, [-0.1, -0.1, 0.0, 0.0], atol=1e-10)

    def test_trace_shape(self):
        """One row of eigenvalues per recorded state."""
        model = SimpleQuadcopter(drag=0.2)
        prediction = predict(
            PilotInput(roll=0.1, pitch=0.1, yaw_rate=0.3),
            QuadState.zero(), model, Rk4(),
            t0=0.0, t_final=2.0, steps=8,
        )
        trace = trajectory_eigenvalues(prediction, model)

        assert trace.eigenvalues.shape == (9, 5)
        assert_allclose(trace.times, prediction.times)
        assert_allclose(trace.dt, 0.25)
        # Quadcopter Jacobian is block triangular: eigenvalues 0, 0, 0, -k, -k
        assert_allclose(trace.spectral_radius, 0.05, atol=1e-9)

    def test_within_region_tracks_step_size(self):
        """Forward Euler leaves its region once k * dt > 2."""
        model = SimplePlanarModel(drag=1.0)
        pilot_input = PilotInput(pitch=0.1)

        fine = predict(pilot_input, PlanarState.zero(), model, BackwardEuler(), 0.0, 10.0, 100)
        coarse = predict(pilot_input, PlanarState.zero(), model, BackwardEuler(), 0.0, 10.0, 4)

        assert np.all(trajectory_eigenvalues(fine, model).within_region(ForwardEuler))
        assert not np.any(trajectory_eigenvalues(coarse, model).within_region(ForwardEuler))
        assert np.all(trajectory_eigenvalues(coarse, model).within_region(BackwardEuler))

    def test_jacobian_dimension_mismatch(self):
        """Wrong-size Jacobian is reported as a precondition violation."""
        model = TruncatedJacobianModel()
        prediction = predict(PilotInput(), PlanarState.zero(), model, Rk4(), 0.0, 1.0, 2)

        with pytest.raises(PreconditionError, match="jacobian must be square"):
            trajectory_eigenvalues(prediction, model)

    def test_prediction_without_steps(self):
        """Linearization needs a step size."""
        prediction = Prediction(
            states=(PlanarState.zero(),),
            control=PlanarControl.zero(),
            t0=0.0,
            t_final=1.0,
            cpu_time=0.0,
        )
        with pytest.raises(PreconditionError, match="at least one step"):
            trajectory_eigenvalues(prediction, SimplePlanarModel())

    def test_finite_difference_epsilon(self):
        """Perturbation size must be positive."""
        model = SimplePlanarModel()
        with pytest.raises(PreconditionError, match="epsilon"):
            finite_difference_jacobian(
                model, 0.0, PlanarState.zero(), PlanarControl.zero(), epsilon=0.0
            )
