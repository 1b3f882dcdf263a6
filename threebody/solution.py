from __future__ import annotations

from typing import Generator, List, NamedTuple, Optional, Sequence

import numpy as np

from threebody.initial_value_problem import InitialValueProblem
from threebody.plot import Plot, ThreeBodyPlot
from threebody.state import positions, velocities


class Solution:
    """
    A solution to an IVP.
    """

    def __init__(
        self,
        ivp: InitialValueProblem,
        t_coordinates: np.ndarray,
        discrete_y: np.ndarray,
        d_t: Optional[float] = None,
    ):
        """
        :param ivp: the solved initial value problem
        :param t_coordinates: the time steps at which the solution is evaluated
        :param discrete_y: the solution to the IVP at the specified time steps
        :param d_t: the temporal step size of the solution; if it is None, it
            is inferred from the `t_coordinates` (which may lead to floating
            point issues)
        """
        if t_coordinates.ndim != 1:
            raise ValueError(
                f"number of t coordinate dimensions ({t_coordinates.ndim}) "
                "must be 1"
            )
        if len(t_coordinates) == 0:
            raise ValueError("length of t coordinates must be greater than 0")
        if np.any(np.diff(t_coordinates) <= 0.0):
            raise ValueError("t coordinates must be strictly increasing")
        y_shape = (ivp.differential_equation.y_dimension,)
        if discrete_y.shape != ((len(t_coordinates),) + y_shape):
            raise ValueError(
                "expected solution shape to be "
                f"{((len(t_coordinates),) + y_shape)} but got "
                f"{discrete_y.shape}"
            )

        self._ivp = ivp
        self._t_coordinates = np.array(t_coordinates, dtype=float)
        self._discrete_y = np.array(discrete_y, dtype=float)

        self._t_coordinates.setflags(write=False)
        self._discrete_y.setflags(write=False)

        if d_t is None:
            d_t = (
                0.0
                if len(t_coordinates) == 1
                else t_coordinates[1] - t_coordinates[0]
            )
        self._d_t = d_t

    @property
    def initial_value_problem(self) -> InitialValueProblem:
        """
        The solved initial value problem.
        """
        return self._ivp

    @property
    def d_t(self) -> float:
        """
        The temporal step size of the solution.
        """
        return self._d_t

    @property
    def t_coordinates(self) -> np.ndarray:
        """
        The time coordinates at which the solution is evaluated.
        """
        return self._t_coordinates

    @property
    def final_state(self) -> np.ndarray:
        """
        The state of the system at the end of the time domain.
        """
        return np.copy(self._discrete_y[-1])

    def discrete_y(self) -> np.ndarray:
        """
        Returns the state vectors of the system at every time step.

        :return: an array of shape (n_time_steps, 12)
        """
        return np.copy(self._discrete_y)

    def body_positions(self) -> np.ndarray:
        """
        Returns the positions of the bodies at every time step.

        :return: an array of shape (n_time_steps, 3, 2)
        """
        return np.copy(positions(self._discrete_y))

    def body_velocities(self) -> np.ndarray:
        """
        Returns the velocities of the bodies at every time step.

        :return: an array of shape (n_time_steps, 3, 2)
        """
        return np.copy(velocities(self._discrete_y))

    def total_energy(self) -> np.ndarray:
        """
        Returns the total mechanical energy of the system at every time step.
        """
        return self._ivp.differential_equation.total_energy(self._discrete_y)

    def angular_momentum(self) -> np.ndarray:
        """
        Returns the total angular momentum of the system at every time step.
        """
        return self._ivp.differential_equation.angular_momentum(
            self._discrete_y
        )

    def diff(self, solutions: Sequence[Solution], atol: float = 1e-8) -> Diffs:
        """
        Calculates and returns the difference between the provided solutions
        and this solution at every matching time point across all solutions.

        :param solutions: the solutions to compare to
        :param atol: the maximum absolute difference between two time points
            considered to be matching
        :return: a `Diffs` instance containing a 1D array representing the
            matching time points and a sequence of arrays representing the
            differences between this solution and each of the provided
            solutions at the matching time points
        """
        if len(solutions) == 0:
            raise ValueError("length of solutions must be greater than 0")

        matching_time_points = []
        all_diffs: List[List[np.ndarray]] = [[] for _ in solutions]

        for i, t in enumerate(self._t_coordinates):
            indices_of_time_point = []
            for solution in solutions:
                other_t = solution.t_coordinates
                index = int(np.searchsorted(other_t, t - atol))
                if index < len(other_t) and np.isclose(
                    t, other_t[index], atol=atol, rtol=0.0
                ):
                    indices_of_time_point.append(index)
                else:
                    break

            if len(indices_of_time_point) < len(solutions):
                continue

            matching_time_points.append(t)
            for j, (solution, index) in enumerate(
                zip(solutions, indices_of_time_point)
            ):
                all_diffs[j].append(
                    solution._discrete_y[index] - self._discrete_y[i]
                )

        matching_time_point_array = np.array(matching_time_points)
        diff_arrays = [np.array(diff) for diff in all_diffs]
        return Diffs(matching_time_point_array, diff_arrays)

    def generate_plots(self, **kwargs) -> Generator[Plot, None, None]:
        """
        Returns a generator for generating all applicable plots for the
        solution.

        :param kwargs: arguments to pass onto the generated plot objects
        :return: a generator for generating all plots
        """
        yield ThreeBodyPlot(
            self._discrete_y, self._ivp.differential_equation, **kwargs
        )


class Diffs(NamedTuple):
    """
    A representation of the difference between a solution and one or more other
    solutions at time points that match across all solutions.
    """

    matching_time_points: np.ndarray
    differences: Sequence[np.ndarray]


class TrajectoryBuffer:
    """
    An append-only buffer of the samples of the state of the system recorded
    during integration.
    """

    def __init__(self, y_dimension: int):
        """
        :param y_dimension: the number of components of each sample
        """
        self._y_dimension = y_dimension
        self._t: List[float] = []
        self._y: List[np.ndarray] = []
        self._sealed = False

    def __len__(self) -> int:
        return len(self._t)

    @property
    def sealed(self) -> bool:
        """
        Whether the buffer has been turned into a solution and can no longer
        be appended to.
        """
        return self._sealed

    @property
    def t_coordinates(self) -> np.ndarray:
        """
        The time coordinates of the samples recorded so far.
        """
        return np.array(self._t, dtype=float)

    @property
    def discrete_y(self) -> np.ndarray:
        """
        The samples recorded so far as an array of shape
        (n_samples, y_dimension).
        """
        if not self._y:
            return np.empty((0, self._y_dimension))
        return np.stack(self._y)

    def append(self, t: float, y: np.ndarray):
        """
        Appends a sample to the buffer.

        :param t: the time of the sample; it must be greater than that of the
            last sample
        :param y: the state of the system at time t
        """
        if self._sealed:
            raise RuntimeError("cannot append to a sealed trajectory buffer")
        y = np.asarray(y, dtype=float)
        if y.shape != (self._y_dimension,):
            raise ValueError(
                f"sample shape {y.shape} must be ({self._y_dimension},)"
            )
        if not np.all(np.isfinite(y)):
            raise ValueError(f"all sample components ({y}) must be finite")
        if self._t and t <= self._t[-1]:
            raise ValueError(
                f"sample time ({t}) must be greater than the time of the "
                f"last sample ({self._t[-1]})"
            )

        self._t.append(float(t))
        self._y.append(np.copy(y))

    def seal(
        self, ivp: InitialValueProblem, d_t: Optional[float] = None
    ) -> Solution:
        """
        Turns the recorded samples into an immutable solution. No more
        samples can be appended afterwards.

        :param ivp: the initial value problem the samples belong to
        :param d_t: the temporal distance between the samples
        :return: the solution made up of the recorded samples
        """
        solution = Solution(ivp, self.t_coordinates, self.discrete_y, d_t)
        self._sealed = True
        return solution
