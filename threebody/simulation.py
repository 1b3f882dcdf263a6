from typing import Sequence

import numpy as np

from threebody.differential_equation import (
    G,
    SOFTENING,
    ThreeBodyGravitationalEquation,
)
from threebody.exceptions import InvalidInputError
from threebody.initial_condition import DiscreteInitialCondition
from threebody.initial_value_problem import InitialValueProblem
from threebody.operators.ode.adaptive_rk_operator import AdaptiveRKOperator
from threebody.solution import Solution


def integrate(
    state0: np.ndarray,
    masses: Sequence[float],
    t_start: float,
    t_end: float,
    saveat: float,
    tol: float = 1e-8,
    g: float = G,
    softening: float = SOFTENING,
) -> Solution:
    """
    Integrates the equations of motion of the three-body system from t_start
    to t_end using the Dormand-Prince method and samples the trajectory every
    saveat time units.

    :param state0: the initial state vector with the positions of the bodies
        preceding their velocities
    :param masses: the masses of the three bodies
    :param t_start: the start of the time domain
    :param t_end: the end of the time domain
    :param saveat: the temporal distance between the samples
    :param tol: the absolute and relative tolerance of the local error
    :param g: the gravitational constant
    :param softening: the term added to the distances of the bodies
    :return: the sampled trajectory of the system
    """
    if not (np.isfinite(tol) and tol > 0.0):
        raise InvalidInputError(
            f"tolerance ({tol}) must be finite and greater than 0"
        )

    diff_eq = ThreeBodyGravitationalEquation(masses, g, softening)
    ic = DiscreteInitialCondition(diff_eq, state0)
    ivp = InitialValueProblem(diff_eq, (t_start, t_end), ic)
    return AdaptiveRKOperator(saveat, atol=tol, rtol=tol).solve(ivp)
