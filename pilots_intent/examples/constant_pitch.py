#!/usr/bin/env python
"""Constant forward-pitch prediction example.

The pilot holds 10 degrees of forward pitch for 10 seconds starting from a
hover facing north. This example:
1. Assembles the pilot input and initial state
2. Predicts the trajectory with forward Euler
3. Compares the result with the closed-form drag solution
4. Saves the ground track, velocity plot and trajectory CSV

With linear drag k and constant forward acceleration a, the north velocity
follows v(t) = (a / k) * (1 - exp(-k t)).
"""

import math

from pilots_intent import ForwardEuler, PilotInput, QuadState, SimpleQuadcopter, predict
from pilots_intent.dynamics import GRAVITY
from pilots_intent.output import OutputContext
from pilots_intent.plotting import plot_component, plot_trajectory_xy


def main() -> None:
    """Run the constant pitch example."""

    print("=" * 60)
    print("CONSTANT PITCH PREDICTION")
    print("=" * 60)

    # =========================================================================
    # 1. Assemble inputs
    # =========================================================================
    print("\n1. Assembling inputs...")

    pilot_input = PilotInput.from_degrees(roll_deg=0.0, pitch_deg=10.0, yaw_rate_deg=0.0)
    initial_state = QuadState.at_rest(yaw_deg=0.0)  # Facing north
    model = SimpleQuadcopter(drag=0.1)

    t_final = 10.0
    steps = 30_000

    print(f"   Pitch:      {math.degrees(pilot_input.pitch):.1f} deg")
    print(f"   Drag:       {model.drag:.2f} 1/s")
    print(f"   Horizon:    {t_final:.1f} s in {steps} steps")

    # =========================================================================
    # 2. Predict
    # =========================================================================
    print("\n2. Predicting trajectory...")

    prediction = predict(
        pilot_input,
        initial_state,
        model,
        ForwardEuler(),
        t0=0.0,
        t_final=t_final,
        steps=steps,
    )

    final = prediction.final_state
    print(f"   Computation time: {prediction.cpu_seconds * 1000:.1f} ms")
    print(f"   Final position:   N {final.north:.2f} m, E {final.east:.2f} m")
    print(f"   Final velocity:   N {final.v_north:.3f} m/s, E {final.v_east:.3e} m/s")

    # =========================================================================
    # 3. Compare with the closed-form solution
    # =========================================================================
    print("\n3. Checking against closed form...")

    accel = GRAVITY * math.tan(pilot_input.pitch)
    v_terminal = accel / model.drag
    v_exact = v_terminal * (1.0 - math.exp(-model.drag * t_final))

    print(f"   Terminal velocity: {v_terminal:.3f} m/s")
    print(f"   Exact v_north:     {v_exact:.6f} m/s")
    print(f"   Error:             {abs(final.v_north - v_exact):.2e} m/s")

    # =========================================================================
    # 4. Save outputs
    # =========================================================================
    print("\n4. Saving outputs...")

    with OutputContext("constant_pitch") as ctx:
        ctx.add_metadata("stepper", "ForwardEuler")
        ctx.add_metadata("drag", model.drag)
        ctx.save_prediction(prediction, "trajectory.csv")
        ctx.save_figure(plot_trajectory_xy(prediction), "trajectory_xy.png")
        ctx.save_figure(plot_component(prediction, "v_north", ylabel="v_north (m/s)"), "v_north.png")
        ctx.save_summary(prediction.summary())
        ctx.log(f"Outputs written to {ctx.output_dir}")


if __name__ == "__main__":
    main()
