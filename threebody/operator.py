from abc import ABC, abstractmethod

import numpy as np

from threebody.exceptions import InvalidInputError
from threebody.initial_value_problem import (
    InitialValueProblem,
    TemporalDomainInterval,
)
from threebody.solution import Solution


class Operator(ABC):
    """
    A base class for an operator to estimate the solution of a differential
    equation over a specific time domain interval given an initial value.
    """

    def __init__(self, d_t: float):
        """
        :param d_t: the temporal distance between the samples of the solution
        """
        if not (np.isfinite(d_t) and d_t > 0.0):
            raise InvalidInputError(
                f"time step size ({d_t}) must be finite and greater than 0"
            )

        self._d_t = d_t

    @property
    def d_t(self) -> float:
        """
        The temporal distance between the samples of the solution.
        """
        return self._d_t

    @abstractmethod
    def solve(self, ivp: InitialValueProblem) -> Solution:
        """
        Returns the IVP's solution.

        :param ivp: the initial value problem to solve
        :return: the solution of the IVP
        """


def discretize_time_domain(
    t: TemporalDomainInterval, d_t: float
) -> np.ndarray:
    """
    Returns a discretization of the temporal interval using the provided
    temporal step size.

    The discretization always starts at the lower and ends at the upper
    bound of the interval. If the length of the interval is not a multiple
    of the step size, the last interval is shorter than the step size.

    :param t: the time interval to discretize
    :param d_t: the temporal step size
    :return: the array containing the discretized temporal domain
    """
    t_0, t_1 = t
    if t_0 == t_1:
        return np.array([t_0])

    steps = int(round((t_1 - t_0) / d_t))
    if steps >= 1 and np.isclose(
        t_0 + steps * d_t, t_1, rtol=1e-12, atol=1e-9 * d_t
    ):
        return np.linspace(t_0, t_1, steps + 1)

    steps = int(np.floor((t_1 - t_0) / d_t))
    return np.append(t_0 + np.arange(steps + 1) * d_t, t_1)
