from __future__ import annotations

from typing import Callable, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.animation import FuncAnimation
from matplotlib.collections import PathCollection
from matplotlib.figure import Figure
from matplotlib.lines import Line2D

from threebody.differential_equation import ThreeBodyGravitationalEquation
from threebody.state import N_BODIES, positions


class Plot:
    """
    A base class for plots of the solutions of the three-body problem.
    """

    def __init__(self, figure: Figure):
        """
        :param figure: the figure of the plotted solution
        """
        self._figure = figure

    def show(self) -> Plot:
        """
        Displays the plot.

        If there are any other instantiated and unclosed plot objects, invoking
        this method displays those plots as well.

        Invoking the :func:`~threebody.plot.Plot.save` method after invoking
        this one results in undefined behaviour since the plot may get closed
        as a side effect of this method.

        :return: the plot object the method is invoked on
        """
        plt.show()
        return self

    def save(self, file_path: str, extension: str = "png", **kwargs) -> Plot:
        """
        Saves the plot to the file system.

        Invoking this method after invoking :func:`~threebody.plot.Plot.show`
        results in undefined behaviour.

        :param file_path: the path to save the image file to excluding any
            extensions
        :param extension: the file extension to use
        :param kwargs: any extra arguments
        :return: the plot object the method is invoked on
        """
        self._figure.savefig(f"{file_path}.{extension}", **kwargs)
        return self

    def close(self):
        """
        Closes the plot.
        """
        plt.close(self._figure)


class AnimatedPlot(Plot):
    """
    A base class for animated plots of the solutions of the three-body
    problem.
    """

    def __init__(
        self,
        figure: Figure,
        init_func: Callable[[], None],
        update_func: Callable[[int], None],
        n_time_steps: int,
        n_frames: int,
        interval: int,
    ):
        """
        :param figure: the figure of the plotted solution
        :param init_func: the animation initialization function
        :param update_func: the animation update function
        :param n_time_steps: the total number of time steps included in the
            solution
        :param n_frames: the number of frames to display
        :param interval: the number of milliseconds to pause between each frame
        """
        super(AnimatedPlot, self).__init__(figure)
        time_steps = np.linspace(0, n_time_steps - 1, n_frames, dtype=int)
        self._animation = FuncAnimation(
            figure,
            func=update_func,
            init_func=init_func,
            frames=time_steps,
            interval=interval,
        )

    def save(self, file_path: str, extension: str = "gif", **kwargs) -> Plot:
        self._animation.save(f"{file_path}.{extension}", **kwargs)
        return self


class ThreeBodyPlot(AnimatedPlot):
    """
    A 2D animated plot of the bodies of the three-body problem drawing the
    growing path of each body along with a marker at its current position.
    """

    def __init__(
        self,
        y: np.ndarray,
        diff_eq: ThreeBodyGravitationalEquation,
        n_frames: int = 100,
        interval: int = 33,
        colors: Sequence[str] = ("red", "green", "blue"),
        labels: Sequence[str] = ("Body 1", "Body 2", "Body 3"),
        marker_size: float = 10.0,
        trajectory_line_width: float = 1.0,
        span_scaling_factor: float = 0.1,
        title: str = "Three-Body Problem Simulation",
        **_,
    ):
        """
        :param y: an array representing the solution of the three-body
            gravitational differential equation
        :param diff_eq: the three-body gravitational differential equation
            solved
        :param n_frames: the number of frames to display
        :param interval: the number of milliseconds to pause between each frame
        :param colors: the colors of the bodies
        :param labels: the legend labels of the bodies
        :param marker_size: the size of the markers denoting the current
            positions of the bodies
        :param trajectory_line_width: the width of the trajectory lines
        :param span_scaling_factor: the fraction of the peak-to-peak value of
            the body positions along each axis to pad the axis limits with
        :param title: the title of the plot
        :param _: any ignored extra arguments
        """
        if y.ndim != 2:
            raise ValueError(f"number of y axes ({y.ndim}) must be 2")
        if y.shape[1] != diff_eq.y_dimension:
            raise ValueError(
                f"number of y components ({y.shape[1]}) must match "
                f"differential equation y dimension ({diff_eq.y_dimension})"
            )
        if len(colors) != N_BODIES or len(labels) != N_BODIES:
            raise ValueError(
                f"number of colors ({len(colors)}) and labels "
                f"({len(labels)}) must be {N_BODIES}"
            )

        body_positions = positions(y)
        x_coordinates = body_positions[..., 0]
        y_coordinates = body_positions[..., 1]

        x_max = x_coordinates.max()
        x_min = x_coordinates.min()
        y_max = y_coordinates.max()
        y_min = y_coordinates.min()

        x_padding = max(span_scaling_factor * (x_max - x_min), 1e-3)
        y_padding = max(span_scaling_factor * (y_max - y_min), 1e-3)

        self._scatter_plot: Optional[PathCollection] = None
        self._line_plots: Optional[List[Line2D]] = None

        fig, ax = plt.subplots()

        def init_plot():
            ax.clear()
            self._line_plots = []
            for i in range(N_BODIES):
                self._line_plots.append(
                    ax.plot(
                        x_coordinates[:1, i],
                        y_coordinates[:1, i],
                        color=colors[i],
                        linewidth=trajectory_line_width,
                        label=labels[i],
                    )[0]
                )
            self._scatter_plot = ax.scatter(
                x_coordinates[0, :],
                y_coordinates[0, :],
                s=marker_size**2,
                c=list(colors),
            )

            ax.set_title(title)
            ax.set_xlabel("x")
            ax.set_ylabel("y")
            ax.set_aspect("equal", adjustable="datalim")
            ax.set_xlim(x_min - x_padding, x_max + x_padding)
            ax.set_ylim(y_min - y_padding, y_max + y_padding)
            ax.legend(loc="upper right")

        def update_plot(time_step: int):
            self._scatter_plot.set_offsets(body_positions[time_step, ...])
            for i in range(N_BODIES):
                line_plot = self._line_plots[i]
                line_plot.set_xdata(x_coordinates[: time_step + 1, i])
                line_plot.set_ydata(y_coordinates[: time_step + 1, i])

        super(ThreeBodyPlot, self).__init__(
            fig, init_plot, update_plot, y.shape[0], n_frames, interval
        )
