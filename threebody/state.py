from typing import NamedTuple, Sequence, Tuple

import numpy as np

from threebody.exceptions import InvalidInputError

N_BODIES = 3
SPATIAL_DIMENSION = 2
STATE_DIMENSION = 2 * N_BODIES * SPATIAL_DIMENSION

DEFAULT_DURATION = 10.0
DEFAULT_SAVEAT = 0.01


class Body(NamedTuple):
    """
    A point body moving in the plane.
    """

    mass: float
    position: Tuple[float, float]
    velocity: Tuple[float, float]


def default_bodies() -> Tuple[Body, Body, Body]:
    """
    Returns the default configuration of two bodies circling a third one at
    rest at the origin.

    :return: the three default bodies
    """
    return (
        Body(1.0, (1.0, 0.0), (0.0, 1.0)),
        Body(1.0, (-1.0, 0.0), (0.0, -1.0)),
        Body(1.0, (0.0, 0.0), (0.0, 0.0)),
    )


def validate_state(y: np.ndarray):
    """
    Verifies that the provided array is a finite state vector of the
    three-body system.

    :param y: the state vector
    """
    y = np.asarray(y)
    if y.shape != (STATE_DIMENSION,):
        raise InvalidInputError(
            f"state shape {y.shape} must be ({STATE_DIMENSION},)"
        )
    if not np.all(np.isfinite(y)):
        raise InvalidInputError(f"all state components ({y}) must be finite")


def validate_masses(masses: Sequence[float]):
    """
    Verifies that there is a finite and non-negative mass for each body.

    :param masses: the masses of the bodies
    """
    if len(masses) != N_BODIES:
        raise InvalidInputError(
            f"number of masses ({len(masses)}) must be {N_BODIES}"
        )
    masses = np.asarray(masses, dtype=float)
    if not np.all(np.isfinite(masses)):
        raise InvalidInputError(f"all masses ({masses}) must be finite")
    if np.any(masses < 0.0):
        raise InvalidInputError(f"all masses ({masses}) must be non-negative")


def compose_state(
    bodies: Sequence[Body],
) -> Tuple[np.ndarray, Tuple[float, ...]]:
    """
    Assembles the state vector and the mass tuple of the system from its
    bodies.

    :param bodies: the three bodies of the system
    :return: the state vector with all positions preceding all velocities
        and the masses of the bodies
    """
    if len(bodies) != N_BODIES:
        raise InvalidInputError(
            f"number of bodies ({len(bodies)}) must be {N_BODIES}"
        )

    y = np.concatenate(
        [np.asarray(body.position, dtype=float) for body in bodies]
        + [np.asarray(body.velocity, dtype=float) for body in bodies]
    )
    masses = tuple(float(body.mass) for body in bodies)

    validate_state(y)
    validate_masses(masses)
    return y, masses


def decompose_state(
    y: np.ndarray, masses: Sequence[float]
) -> Tuple[Body, ...]:
    """
    Splits the state vector of the system into its bodies.

    :param y: the state vector
    :param masses: the masses of the bodies
    :return: the three bodies
    """
    validate_state(y)
    validate_masses(masses)

    return tuple(
        Body(float(mass), tuple(position), tuple(velocity))
        for mass, position, velocity in zip(
            masses, positions(y).tolist(), velocities(y).tolist()
        )
    )


def positions(y: np.ndarray) -> np.ndarray:
    """
    Returns the positions of the bodies.

    :param y: a state vector or an array of state vectors along the last
        axis
    :return: an array of shape (..., 3, 2)
    """
    y = np.asarray(y)
    n_positions = N_BODIES * SPATIAL_DIMENSION
    return y[..., :n_positions].reshape(
        y.shape[:-1] + (N_BODIES, SPATIAL_DIMENSION)
    )


def velocities(y: np.ndarray) -> np.ndarray:
    """
    Returns the velocities of the bodies.

    :param y: a state vector or an array of state vectors along the last
        axis
    :return: an array of shape (..., 3, 2)
    """
    y = np.asarray(y)
    n_positions = N_BODIES * SPATIAL_DIMENSION
    return y[..., n_positions:].reshape(
        y.shape[:-1] + (N_BODIES, SPATIAL_DIMENSION)
    )
