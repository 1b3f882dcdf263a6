from abc import ABC, abstractmethod
from copy import copy
from typing import Sequence, Tuple, Union

import numpy as np
from sympy import Expr, Symbol, symarray

from threebody.exceptions import InvalidInputError
from threebody.state import (
    N_BODIES,
    SPATIAL_DIMENSION,
    STATE_DIMENSION,
    positions,
    validate_masses,
    velocities,
)

G = 6.67430e-11
SOFTENING = 1e-10


class Symbols:
    """
    A class containing the symbols for expressing a system of ordinary
    differential equations with a specified number of unknown variables.
    """

    def __init__(self, y_dimension: int):
        """
        :param y_dimension: the number of unknown variables
        """
        self._t = Symbol("t")
        self._y = symarray("y", (y_dimension,))

    @property
    def t(self) -> Symbol:
        """
        A symbol denoting the temporal coordinate.
        """
        return self._t

    @property
    def y(self) -> np.ndarray:
        """
        An array of symbols denoting the elements of the solution of the
        differential equation.
        """
        return copy(self._y)


class SymbolicEquationSystem:
    """
    A system of symbolic equations defining the first time derivatives of
    the elements of the solution.
    """

    def __init__(self, rhs: Union[Sequence[Expr], np.ndarray]):
        """
        :param rhs: the right-hand side of the symbolic equation system
        """
        if len(rhs) < 1:
            raise ValueError("number of equations must be greater than 0")

        self._rhs = copy(rhs)

    @property
    def rhs(self) -> Union[Sequence[Expr], np.ndarray]:
        """
        The right-hand side of the symbolic equation system.
        """
        return copy(self._rhs)


class DifferentialEquation(ABC):
    """
    A representation of a time-dependent system of ordinary differential
    equations.
    """

    def __init__(self, y_dimension: int):
        """
        :param y_dimension: the number of unknown variables
        """
        if y_dimension < 1:
            raise ValueError(
                f"number of y dimensions ({y_dimension}) must be at least 1"
            )

        self._y_dimension = y_dimension
        self._symbols = Symbols(y_dimension)

        self._validate_equations()

    @property
    def y_dimension(self) -> int:
        """
        The dimension of the image of the differential equation's solution.
        """
        return self._y_dimension

    @property
    def symbols(self) -> Symbols:
        """
        All valid symbols that can be used to define the differential
        equation.
        """
        return self._symbols

    @property
    @abstractmethod
    def symbolic_equation_system(self) -> SymbolicEquationSystem:
        """
        A system of symbolic equations where every element of the right-hand
        side defines the first time derivative of the respective element of
        the vector-valued solution.
        """

    def _validate_equations(self):
        """
        Validates the symbolic equations defining the differential equation.
        """
        equation_system = self.symbolic_equation_system
        if len(equation_system.rhs) != self._y_dimension:
            raise ValueError(
                f"number of equations ({len(equation_system.rhs)}) must match "
                f"number of y dimensions ({self._y_dimension})"
            )

        all_symbols = set()
        all_symbols.add(self._symbols.t)
        all_symbols.update(self._symbols.y)

        for rhs_element in equation_system.rhs:
            rhs_symbols = getattr(rhs_element, "free_symbols", set())
            if not rhs_symbols.issubset(all_symbols):
                raise ValueError(
                    f"invalid symbol in right-hand side symbols "
                    f"{rhs_symbols}"
                )


def acceleration(
    position_a: np.ndarray,
    position_b: np.ndarray,
    mass_b: float,
    g: float = G,
    softening: float = SOFTENING,
) -> np.ndarray:
    """
    Returns the gravitational acceleration of a body at position a due to a
    body of the provided mass at position b.

    The softening term is added to the distance of the two bodies so that the
    acceleration remains finite even if their positions coincide.

    :param position_a: the position of the accelerated body
    :param position_b: the position of the attracting body
    :param mass_b: the mass of the attracting body
    :param g: the gravitational constant
    :param softening: the term added to the distance of the bodies
    :return: the 2D acceleration vector
    """
    displacement = position_b - position_a
    distance = np.power(np.power(displacement, 2).sum(axis=-1), 0.5)
    return (g * mass_b) * (displacement / np.power(distance + softening, 3))


def derivative(
    state: np.ndarray,
    masses: Sequence[float],
    g: float = G,
    softening: float = SOFTENING,
) -> np.ndarray:
    """
    Returns the time derivative of the state of the three-body system.

    The state may also be an array of symbols in which case the returned
    array contains the symbolic expressions of the derivative.

    :param state: the state vector with all positions preceding all
        velocities
    :param masses: the masses of the bodies
    :param g: the gravitational constant
    :param softening: the term added to the distances of the bodies
    :return: the derivative of the state vector
    """
    y = np.asarray(state)
    if y.dtype != object:
        y = y.astype(float)

    n_positions = N_BODIES * SPATIAL_DIMENSION

    d_y_over_d_t = np.empty_like(y)
    d_y_over_d_t[:n_positions] = y[n_positions:]

    body_positions = positions(y)
    for i in range(N_BODIES):
        total_acceleration = np.zeros(SPATIAL_DIMENSION, dtype=y.dtype)
        for j in range(N_BODIES):
            if i == j:
                continue

            total_acceleration = total_acceleration + acceleration(
                body_positions[i], body_positions[j], masses[j], g, softening
            )

        velocity_offset = n_positions + i * SPATIAL_DIMENSION
        d_y_over_d_t[
            velocity_offset : velocity_offset + SPATIAL_DIMENSION
        ] = total_acceleration

    return d_y_over_d_t


class ThreeBodyGravitationalEquation(DifferentialEquation):
    """
    A system of ordinary differential equations modelling the planar motion
    of three bodies under their mutual gravitational attraction.
    """

    def __init__(
        self,
        masses: Sequence[float],
        g: float = G,
        softening: float = SOFTENING,
    ):
        """
        :param masses: the masses of the three bodies; a zero mass denotes a
            test body that does not attract the others
        :param g: the gravitational constant
        :param softening: the term added to the distances of the bodies to
            keep the accelerations finite
        """
        validate_masses(masses)
        if not np.isfinite(g):
            raise InvalidInputError(
                f"gravitational constant ({g}) must be finite"
            )
        if not (np.isfinite(softening) and softening > 0.0):
            raise InvalidInputError(
                f"softening ({softening}) must be finite and greater than 0"
            )

        self._masses = tuple(float(mass) for mass in masses)
        self._g = g
        self._softening = softening

        super(ThreeBodyGravitationalEquation, self).__init__(STATE_DIMENSION)

    @property
    def masses(self) -> Tuple[float, ...]:
        """
        The masses of the bodies.
        """
        return copy(self._masses)

    @property
    def g(self) -> float:
        """
        The gravitational constant.
        """
        return self._g

    @property
    def softening(self) -> float:
        """
        The term added to the distances of the bodies.
        """
        return self._softening

    @property
    def symbolic_equation_system(self) -> SymbolicEquationSystem:
        return SymbolicEquationSystem(
            derivative(
                self._symbols.y, self._masses, self._g, self._softening
            )
        )

    def d_y_over_d_t(self, t: float, y: np.ndarray) -> np.ndarray:
        """
        Returns the time derivative of the state of the system.

        :param t: the time (the system is autonomous so it is ignored)
        :param y: the state vector
        :return: the derivative of the state vector
        """
        return derivative(y, self._masses, self._g, self._softening)

    def total_energy(self, y: np.ndarray) -> Union[float, np.ndarray]:
        """
        Returns the sum of the kinetic and the softened potential energy of
        the system.

        :param y: a state vector or an array of state vectors along the last
            axis
        :return: the total energy for each state
        """
        y = np.asarray(y, dtype=float)
        body_positions = positions(y)
        body_velocities = velocities(y)
        masses = np.asarray(self._masses)

        kinetic = 0.5 * (
            masses * np.square(body_velocities).sum(axis=-1)
        ).sum(axis=-1)

        potential = np.zeros(y.shape[:-1])
        for i in range(N_BODIES):
            for j in range(i + 1, N_BODIES):
                distance = np.linalg.norm(
                    body_positions[..., j, :] - body_positions[..., i, :],
                    axis=-1,
                )
                potential = potential - (
                    self._g * masses[i] * masses[j]
                ) / (distance + self._softening)

        return kinetic + potential

    def angular_momentum(self, y: np.ndarray) -> Union[float, np.ndarray]:
        """
        Returns the total angular momentum of the system about the origin,
        that is the component of the angular momentum vector perpendicular
        to the plane of motion.

        :param y: a state vector or an array of state vectors along the last
            axis
        :return: the angular momentum for each state
        """
        y = np.asarray(y, dtype=float)
        body_positions = positions(y)
        body_velocities = velocities(y)
        masses = np.asarray(self._masses)

        cross_products = (
            body_positions[..., 0] * body_velocities[..., 1]
            - body_positions[..., 1] * body_velocities[..., 0]
        )
        return (masses * cross_products).sum(axis=-1)
