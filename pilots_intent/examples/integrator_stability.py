#!/usr/bin/env python
"""Integrator stability comparison example.

Runs the same banked, turning quadcopter with all three integrators at a
coarse and a fine step size, then overlays the eigenvalues of J * dt on each
integrator's stability region.

With drag k the velocity modes have eigenvalue -k, so z = -k * dt. Forward
Euler needs k * dt < 2; backward Euler is stable for any dt.
"""

from pilots_intent import (
    BackwardEuler,
    ForwardEuler,
    PilotInput,
    QuadState,
    Rk4,
    SimpleQuadcopter,
    predict,
    stability_region,
    trajectory_eigenvalues,
)
from pilots_intent.output import OutputContext
from pilots_intent.plotting import plot_comparison, plot_stability_region, plot_trajectory_xy


def main() -> None:
    """Run the integrator comparison."""

    print("=" * 60)
    print("INTEGRATOR STABILITY COMPARISON")
    print("=" * 60)

    pilot_input = PilotInput.from_degrees(roll_deg=5.0, pitch_deg=8.0, yaw_rate_deg=20.0)
    initial_state = QuadState.at_rest()
    model = SimpleQuadcopter(drag=1.0)
    t_final = 20.0

    with OutputContext("integrator_stability") as ctx:
        for steps in (8, 400):
            dt = t_final / steps
            print(f"\ndt = {dt:.3f} s (k*dt = {model.drag * dt:.2f})")

            predictions = {}
            for stepper in (ForwardEuler(), Rk4(), BackwardEuler()):
                prediction = predict(
                    pilot_input, initial_state, model, stepper,
                    t0=0.0, t_final=t_final, steps=steps,
                )
                trace = trajectory_eigenvalues(prediction, model)
                stable = bool(trace.within_region(stepper).all())
                predictions[stepper.name] = prediction

                print(
                    f"   {stepper.name:<15} final speed {prediction.final_state.speed:8.3f} m/s"
                    f"   stable: {stable}"
                )
                for warning in prediction.warnings:
                    print(f"      ⚠ {warning}")

                region = stability_region(stepper)
                ctx.save_figure(
                    plot_stability_region(region, trace),
                    f"stability_{type(stepper).__name__.lower()}_{steps}.png",
                )

            ctx.save_figure(
                plot_comparison(predictions, "v_north"),
                f"v_north_comparison_{steps}.png",
            )
            ctx.save_figure(
                plot_trajectory_xy(predictions["RK4"]),
                f"trajectory_rk4_{steps}.png",
            )

        ctx.log(f"Outputs written to {ctx.output_dir}")


if __name__ == "__main__":
    main()
