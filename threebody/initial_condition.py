from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from threebody.differential_equation import ThreeBodyGravitationalEquation
from threebody.exceptions import InvalidInputError
from threebody.state import Body, compose_state, validate_state


class InitialCondition(ABC):
    """
    A base class for initial conditions.
    """

    @abstractmethod
    def y_0(self) -> np.ndarray:
        """
        Returns the initial state of the system.

        :return: a 1D array (y_dimension) of the initial value of y
        """


class DiscreteInitialCondition(InitialCondition):
    """
    An initial condition defined by a fixed state vector.
    """

    def __init__(
        self, diff_eq: ThreeBodyGravitationalEquation, y_0: np.ndarray
    ):
        """
        :param diff_eq: the differential equation to provide the initial
            condition for
        :param y_0: the initial state vector
        """
        y_0 = np.asarray(y_0, dtype=float)
        if y_0.shape != (diff_eq.y_dimension,):
            raise InvalidInputError(
                f"initial value shape {y_0.shape} must match differential "
                f"equation solution shape ({diff_eq.y_dimension},)"
            )
        validate_state(y_0)

        self._diff_eq = diff_eq
        self._y_0 = np.copy(y_0)

    def y_0(self) -> np.ndarray:
        return np.copy(self._y_0)


class BodiesInitialCondition(DiscreteInitialCondition):
    """
    An initial condition defined by the positions and velocities of the
    bodies of the system.
    """

    def __init__(
        self, diff_eq: ThreeBodyGravitationalEquation, bodies: Sequence[Body]
    ):
        """
        :param diff_eq: the differential equation to provide the initial
            condition for
        :param bodies: the bodies of the system; their masses must match the
            masses of the differential equation
        """
        y_0, masses = compose_state(bodies)
        if masses != diff_eq.masses:
            raise InvalidInputError(
                f"masses of the bodies {masses} must match the masses of the "
                f"differential equation {diff_eq.masses}"
            )

        super(BodiesInitialCondition, self).__init__(diff_eq, y_0)
