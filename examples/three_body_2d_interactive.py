import logging

from threebody import *
from threebody.operators.ode import *


def get_float(prompt: str, default: float) -> float:
    value = input(f"{prompt} [Default: {default}]: ").strip()
    return float(value) if value else default


logging.basicConfig(level=logging.INFO)

print("=== Three-Body Problem Simulation Setup ===")

bodies = []
for i, (mass, position, velocity) in enumerate(default_bodies()):
    print(f"\n-- Body {i + 1} --")
    x = get_float("Enter initial x-position", position[0])
    y = get_float("Enter initial y-position", position[1])
    v_x = get_float("Enter initial x-velocity", velocity[0])
    v_y = get_float("Enter initial y-velocity", velocity[1])
    mass = get_float(f"Enter mass for Body {i + 1} (kg)", mass)
    bodies.append(Body(mass, (x, y), (v_x, v_y)))

duration = get_float("\nEnter simulation duration (seconds)", DEFAULT_DURATION)

diff_eq = ThreeBodyGravitationalEquation([body.mass for body in bodies])
ic = BodiesInitialCondition(diff_eq, bodies)
ivp = InitialValueProblem(diff_eq, (0.0, duration), ic)

solver = AdaptiveRKOperator(DEFAULT_SAVEAT, atol=1e-8, rtol=1e-8)
solution = solver.solve(ivp)

for plot in solution.generate_plots(n_frames=len(solution.t_coordinates)):
    plot.save("three_body_simulation", extension="mp4", fps=30).close()

print(
    "Animation complete. The result has been saved as "
    "'three_body_simulation.mp4'."
)
