import logging

import numpy as np

from threebody import *
from threebody.operators.ode import *
from threebody.utils.time import time

logging.basicConfig(level=logging.INFO)

g = 1.0

diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0], g=g)
ic = BodiesInitialCondition(diff_eq, default_bodies())
ivp = InitialValueProblem(diff_eq, (0.0, DEFAULT_DURATION), ic)

solver = AdaptiveRKOperator(DEFAULT_SAVEAT, atol=1e-10, rtol=1e-10)
solution, _ = time("solve")(solver.solve)(ivp)

energy = solution.total_energy()
angular_momentum = solution.angular_momentum()
print(
    "relative energy drift:",
    np.abs((energy - energy[0]) / energy[0]).max(),
)
print(
    "relative angular momentum drift:",
    np.abs(
        (angular_momentum - angular_momentum[0]) / angular_momentum[0]
    ).max(),
)

for plot in solution.generate_plots():
    plot.show().close()
