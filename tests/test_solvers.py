"""Unit tests for solvers - Newton-Raphson and the fixed-step integrators."""

import math

import numpy as np
import pytest
from beartype.roar import BeartypeCallHintParamViolation
from numpy.testing import assert_allclose

from pilots_intent.dynamics import (
    Dynamics,
    PilotInput,
    PlanarControl,
    PlanarState,
    QuadState,
    SimplePlanarModel,
    SimpleQuadcopter,
)
from pilots_intent.errors import (
    ConvergenceError,
    NumericalError,
    PreconditionError,
    SingularJacobianError,
)
from pilots_intent.solvers import (
    BackwardEuler,
    ForwardEuler,
    NewtonOptions,
    Rk4,
    newton,
)


class DragOnlyModel(Dynamics[PlanarState, PlanarControl]):
    """Planar drag model without an analytic Jacobian."""

    state_type = PlanarState
    control_type = PlanarControl

    def input_to_control(self, pilot_input):
        return PlanarControl.zero()

    def derivative(self, t, state, control):
        return PlanarState(
            north=state.v_north,
            east=state.v_east,
            v_north=-state.v_north,
            v_east=-state.v_east,
        )


class TruncatedJacobianModel(SimplePlanarModel):
    """Planar model whose Jacobian has the wrong dimension."""

    def jacobian(self, t, state, control):
        return np.zeros((3, 3))


def decay_error(stepper, steps: int) -> float:
    """|v(1) - exp(-1)| for dv/dt = -v, v(0) = 1."""
    model = SimplePlanarModel(drag=1.0)
    control = model.input_to_control(PilotInput())
    state = PlanarState(north=0.0, east=0.0, v_north=1.0, v_east=0.0)
    dt = 1.0 / steps
    for i in range(steps):
        state = stepper.step(model, i * dt, state, control, dt)
    return abs(state.v_north - math.exp(-1.0))


# =============================================================================
# Newton-Raphson Tests
# =============================================================================


class TestNewton:
    """Test the vector Newton solver."""

    def test_linear_root_in_one_update(self):
        """F(x) = x - c is solved exactly by the first update."""
        c = np.array([1.5, -2.0, 0.25])
        result = newton(lambda x: x - c, lambda x: np.eye(3), np.zeros(3))

        assert result.converged
        assert result.iterations == 1
        assert_allclose(result.solution, c, atol=1e-14)
        assert_allclose(result.history[0], np.zeros(3))
        assert result.residual_norm < 1e-10

    def test_quadratic_convergence_history(self):
        """x^2 - 2 = 0 from x = 1: residuals decrease monotonically."""
        result = newton(
            lambda x: x**2 - 2.0,
            lambda x: np.diag(2.0 * x),
            np.array([1.0]),
        )

        assert result.converged
        assert result.residual_norm < NewtonOptions().min_error
        # |x^2 - 2| < 1e-10 only pins x to about 1e-11 of sqrt(2)
        assert_allclose(result.solution, [np.sqrt(2.0)], rtol=1e-10)
        assert len(result.history) == len(result.residual_norms)
        assert len(result.history) >= 2
        norms = np.array(result.residual_norms)
        assert np.all(np.diff(norms) < 0.0)

    def test_already_converged_guess(self):
        """A root as initial guess needs no update."""
        result = newton(lambda x: x - 3.0, lambda x: np.eye(1), np.array([3.0]))

        assert result.converged
        assert result.iterations == 0
        assert len(result.history) == 1

    def test_iteration_cap_reports_not_converged(self):
        """Hitting iter_max returns the last iterate without raising."""
        result = newton(
            lambda x: x**2 - 2.0,
            lambda x: np.diag(2.0 * x),
            np.array([100.0]),
            NewtonOptions(iter_max=2),
        )

        assert not result.converged
        assert result.iterations == 2
        assert len(result.history) == 3
        assert result.residual_norm > 1e-10

    def test_singular_jacobian(self):
        """Zero Jacobian cannot be solved."""
        with pytest.raises(SingularJacobianError):
            newton(lambda x: x - 1.0, lambda x: np.zeros((2, 2)), np.zeros(2))

    def test_singular_jacobian_is_numerical_error(self):
        """Singular solves belong to the numerical error family."""
        with pytest.raises(NumericalError):
            newton(lambda x: x - 1.0, lambda x: np.zeros((1, 1)), np.zeros(1))

    def test_nonfinite_residual(self):
        """NaN residual is reported, not iterated on."""
        with pytest.raises(NumericalError, match="not finite"):
            newton(lambda x: x * np.nan, lambda x: np.eye(1), np.ones(1))

    def test_residual_shape_mismatch(self):
        """Residual must have the iterate's shape."""
        with pytest.raises(PreconditionError, match="residual shape"):
            newton(lambda x: np.ones(3), lambda x: np.eye(2), np.zeros(2))

    def test_jacobian_shape_mismatch(self):
        """Jacobian must be square with the iterate's dimension."""
        with pytest.raises(PreconditionError, match="jacobian must have shape"):
            newton(lambda x: x - 1.0, lambda x: np.eye(3), np.zeros(2))

    def test_options_validation(self):
        """Invalid iteration settings are rejected."""
        with pytest.raises(PreconditionError, match="iter_max"):
            NewtonOptions(iter_max=0)
        with pytest.raises(PreconditionError, match="min_error"):
            NewtonOptions(min_error=0.0)
        with pytest.raises(PreconditionError, match="min_error"):
            NewtonOptions(min_error=float("nan"))


# =============================================================================
# Explicit Stepper Tests
# =============================================================================


class TestExplicitSteppers:
    """Test forward Euler and RK4."""

    @pytest.mark.parametrize("stepper", [ForwardEuler(), Rk4(), BackwardEuler()])
    @pytest.mark.parametrize("dt", [0.0, -0.1, float("nan"), float("inf")])
    def test_invalid_dt(self, stepper, dt):
        """dt must be finite and positive."""
        model = SimplePlanarModel()
        control = model.input_to_control(PilotInput())
        with pytest.raises(PreconditionError, match="dt must be finite"):
            stepper.step(model, 0.0, PlanarState.zero(), control, dt)

    def test_forward_euler_single_step(self):
        """x' = x + dt * f(x)."""
        model = SimpleQuadcopter(drag=0.5)
        control = model.input_to_control(PilotInput(pitch=0.2, yaw_rate=0.3))
        state = QuadState(north=1.0, east=2.0, v_north=4.0, v_east=-2.0, yaw=0.0)

        result = ForwardEuler().step(model, 0.0, state, control, 0.1)

        expected = state.to_array() + 0.1 * model.derivative(0.0, state, control).to_array()
        assert isinstance(result, QuadState)
        assert_allclose(result.to_array(), expected, atol=1e-12)

    def test_rk4_exact_for_constant_acceleration(self):
        """Without drag the motion is quadratic in t, which RK4 integrates exactly."""
        model = SimpleQuadcopter(drag=0.0)
        control = model.input_to_control(PilotInput(pitch=0.1))
        state = QuadState.zero()

        result = Rk4().step(model, 0.0, state, control, 2.0)

        a = control.ax_body
        assert_allclose(result.v_north, 2.0 * a, rtol=1e-12)
        assert_allclose(result.north, 0.5 * a * 4.0, rtol=1e-12)

    def test_forward_euler_first_order(self):
        """Halving dt halves the global error."""
        ratio = decay_error(ForwardEuler(), 10) / decay_error(ForwardEuler(), 20)
        assert 1.8 < ratio < 2.2

    def test_rk4_fourth_order(self):
        """Halving dt divides the global error by about 16."""
        ratio = decay_error(Rk4(), 10) / decay_error(Rk4(), 20)
        assert 13.0 < ratio < 19.0

    def test_rk4_more_accurate_than_euler(self):
        """Same step count: RK4 error is orders of magnitude smaller."""
        assert decay_error(Rk4(), 10) < 1e-3 * decay_error(ForwardEuler(), 10)

    def test_stepper_metadata(self):
        """Names and orders are exposed for reports."""
        assert ForwardEuler.order == 1
        assert Rk4.order == 4
        assert BackwardEuler.implicit
        assert not Rk4.implicit
        assert Rk4.name == "RK4"


# =============================================================================
# Implicit Stepper Tests
# =============================================================================


class TestBackwardEuler:
    """Test the Newton-based implicit stepper."""

    def test_linear_step_matches_closed_form(self):
        """For dv/dt = a - k v the step is v' = (v + dt a) / (1 + k dt)."""
        model = SimplePlanarModel(drag=0.5)
        control = PlanarControl(ax_body=2.0, ay_body=0.0)
        state = PlanarState(north=0.0, east=0.0, v_north=1.0, v_east=0.0)
        dt = 0.4

        stepper = BackwardEuler()
        result = stepper.step(model, 0.0, state, control, dt)

        v_next = (1.0 + dt * 2.0) / (1.0 + 0.5 * dt)
        assert_allclose(result.v_north, v_next, rtol=1e-10)
        assert_allclose(result.north, dt * v_next, rtol=1e-10)
        assert stepper.last_solve is not None
        assert stepper.last_solve.converged
        assert stepper.solve_count == 1

    def test_residual_satisfied_on_quadcopter(self):
        """Converged step satisfies x' = x + dt * f(t + dt, x')."""
        model = SimpleQuadcopter(drag=0.3)
        control = model.input_to_control(PilotInput(roll=0.1, pitch=0.2, yaw_rate=0.5))
        state = QuadState(north=0.0, east=0.0, v_north=2.0, v_east=1.0, yaw=0.4)
        dt = 0.2

        result = BackwardEuler().step(model, 1.0, state, control, dt)

        implicit = state.to_array() + dt * model.derivative(1.0 + dt, result, control).to_array()
        assert_allclose(result.to_array(), implicit, atol=1e-9)
        assert_allclose(result.yaw, 0.4 + dt * 0.5, atol=1e-12)

    def test_stable_where_forward_euler_diverges(self):
        """With k * dt = 3, forward Euler grows and backward Euler decays."""
        model = SimplePlanarModel(drag=1.0)
        control = model.input_to_control(PilotInput())
        initial = PlanarState(north=0.0, east=0.0, v_north=1.0, v_east=0.0)

        explicit = implicit = initial
        fe, be = ForwardEuler(), BackwardEuler()
        for i in range(10):
            explicit = fe.step(model, 3.0 * i, explicit, control, 3.0)
            implicit = be.step(model, 3.0 * i, implicit, control, 3.0)

        assert abs(explicit.v_north) > 100.0
        assert abs(implicit.v_north) < 1e-5

    def test_strict_raises_on_iteration_cap(self):
        """Strict mode surfaces non-convergence as ConvergenceError."""
        model = SimpleQuadcopter(drag=0.1)
        control = model.input_to_control(PilotInput(roll=0.3, pitch=0.5, yaw_rate=1.0))
        stepper = BackwardEuler(NewtonOptions(iter_max=1, min_error=1e-12), strict=True)

        with pytest.raises(ConvergenceError) as exc_info:
            stepper.step(model, 0.0, QuadState.zero(), control, 1.0)

        assert exc_info.value.iterations == 1
        assert exc_info.value.residual_norm > 1e-12

    def test_lenient_keeps_last_iterate(self):
        """Default mode keeps the last iterate and counts the miss."""
        model = SimpleQuadcopter(drag=0.1)
        control = model.input_to_control(PilotInput(roll=0.3, pitch=0.5, yaw_rate=1.0))
        stepper = BackwardEuler(NewtonOptions(iter_max=1, min_error=1e-12))

        result = stepper.step(model, 0.0, QuadState.zero(), control, 1.0)

        assert isinstance(result, QuadState)
        assert stepper.unconverged_count == 1
        assert len(stepper.warnings) == 1
        assert "1 of 1 solves did not converge" in stepper.warnings[0]

        stepper.reset_diagnostics()
        assert stepper.solve_count == 0
        assert stepper.last_solve is None
        assert stepper.warnings == []

    def test_misses_summarized_once(self):
        """Many non-converged solves produce a single summary line."""
        model = SimpleQuadcopter(drag=0.1)
        control = model.input_to_control(PilotInput(roll=0.3, pitch=0.5, yaw_rate=1.0))
        stepper = BackwardEuler(NewtonOptions(iter_max=1, min_error=1e-12))

        state = QuadState.zero()
        for i in range(50):
            state = stepper.step(model, float(i), state, control, 1.0)

        assert stepper.unconverged_count == stepper.solve_count == 50
        assert len(stepper.warnings) == 1
        assert "50 of 50" in stepper.warnings[0]
        assert "first at t=1" in stepper.warnings[0]

    def test_requires_analytic_jacobian(self):
        """Models without a Jacobian are rejected at the call boundary."""
        model = DragOnlyModel()
        with pytest.raises(BeartypeCallHintParamViolation):
            BackwardEuler().step(model, 0.0, PlanarState.zero(), PlanarControl.zero(), 0.1)

    def test_jacobian_dimension_mismatch(self):
        """Wrong-size Jacobian is a precondition violation."""
        model = TruncatedJacobianModel(drag=0.1)
        state = PlanarState(north=0.0, east=0.0, v_north=1.0, v_east=0.0)
        with pytest.raises(PreconditionError, match="jacobian must be square"):
            BackwardEuler().step(model, 0.0, state, PlanarControl.zero(), 0.1)


# =============================================================================
# Stability Function Tests
# =============================================================================


class TestStabilityFunctions:
    """Test R(z) of each stepper."""

    @pytest.mark.parametrize("stepper", [ForwardEuler, Rk4, BackwardEuler])
    def test_identity_at_zero(self, stepper):
        """R(0) = 1 for every consistent method."""
        assert_allclose(stepper.stability(0.0), 1.0)

    def test_known_values(self):
        """Spot values of each polynomial or rational function."""
        assert_allclose(ForwardEuler.stability(-1.0), 0.0)
        assert_allclose(BackwardEuler.stability(-1.0), 0.5)
        assert_allclose(Rk4.stability(-1.0), 1.0 - 1.0 + 0.5 - 1.0 / 6.0 + 1.0 / 24.0)

    def test_vectorized(self):
        """Stability functions accept arrays."""
        z = np.array([-1.0 + 0.5j, 0.2 - 0.1j])
        assert_allclose(ForwardEuler.stability(z), 1.0 + z)
