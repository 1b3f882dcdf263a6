from typing import Optional

import numpy as np


class InvalidInputError(ValueError):
    """
    An error raised when the inputs of a simulation are invalid and the
    integration cannot be started.
    """


class NonConvergenceError(RuntimeError):
    """
    An error raised when the step size of an adaptive integrator collapses
    below the minimum allowed value while the local error estimate still
    exceeds the tolerance.
    """

    def __init__(
        self,
        message: str,
        t: float,
        y: np.ndarray,
        step_size: float,
        partial_t_coordinates: Optional[np.ndarray] = None,
        partial_discrete_y: Optional[np.ndarray] = None,
    ):
        """
        :param message: the error message
        :param t: the time at which the integration failed
        :param y: the state at the time of the failure
        :param step_size: the last attempted step size
        :param partial_t_coordinates: the time coordinates of the samples
            recorded before the failure
        :param partial_discrete_y: the samples recorded before the failure
        """
        super(NonConvergenceError, self).__init__(message)
        self.t = t
        self.y = np.copy(y)
        self.step_size = step_size
        self.partial_t_coordinates = partial_t_coordinates
        self.partial_discrete_y = partial_discrete_y


class NumericOverflowError(NonConvergenceError):
    """
    An error raised when the step size collapses because the stage
    evaluations keep producing non-finite values.
    """
