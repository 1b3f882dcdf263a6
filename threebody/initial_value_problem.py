from __future__ import annotations

from typing import Callable, Optional, Tuple

import numpy as np

from threebody.differential_equation import ThreeBodyGravitationalEquation
from threebody.exceptions import InvalidInputError
from threebody.initial_condition import InitialCondition

TemporalDomainInterval = Tuple[float, float]


class InitialValueProblem:
    """
    A representation of an initial value problem of the three-body system.
    """

    def __init__(
        self,
        diff_eq: ThreeBodyGravitationalEquation,
        t_interval: TemporalDomainInterval,
        initial_condition: InitialCondition,
        exact_y: Optional[
            Callable[[InitialValueProblem, float], np.ndarray]
        ] = None,
    ):
        """
        :param diff_eq: the differential equation of the system
        :param t_interval: the bounds of the time domain of the initial value
            problem
        :param initial_condition: the initial condition of the problem
        :param exact_y: the function returning the exact solution to the
            initial value problem at time t. If it is None, the problem is
            assumed to have no analytical solution.
        """
        if not np.all(np.isfinite(t_interval)):
            raise InvalidInputError(
                f"bounds of time interval {t_interval} must be finite"
            )
        if t_interval[0] > t_interval[1]:
            raise InvalidInputError(
                f"lower bound of time interval ({t_interval[0]}) cannot be "
                f"greater than its upper bound ({t_interval[1]})"
            )

        self._diff_eq = diff_eq
        self._t_interval = (float(t_interval[0]), float(t_interval[1]))
        self._initial_condition = initial_condition
        self._exact_y = exact_y

    @property
    def differential_equation(self) -> ThreeBodyGravitationalEquation:
        """
        The differential equation of the system.
        """
        return self._diff_eq

    @property
    def t_interval(self) -> TemporalDomainInterval:
        """
        The bounds of the temporal domain of the differential equation.
        """
        return self._t_interval

    @property
    def initial_condition(self) -> InitialCondition:
        """
        The initial condition of the IVP.
        """
        return self._initial_condition

    @property
    def has_exact_solution(self) -> bool:
        """
        Whether the differential equation has an analytic solution
        """
        return self._exact_y is not None

    def exact_y(self, t: float) -> np.ndarray:
        """
        Returns the exact value of y(t).

        :param t: the point in the temporal domain
        :return: the value of y(t)
        """
        if not self.has_exact_solution:
            raise RuntimeError(
                "exact solution of initial value problem undefined"
            )

        return self._exact_y(self, t)
