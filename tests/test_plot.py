import os

import matplotlib
import numpy as np
import pytest

from threebody.differential_equation import ThreeBodyGravitationalEquation
from threebody.plot import ThreeBodyPlot

matplotlib.use("Agg")


def test_three_body_plot_with_wrong_y_rank():
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0])
    with pytest.raises(ValueError):
        ThreeBodyPlot(np.random.rand(12), diff_eq)


def test_three_body_plot_with_wrong_y_dimension():
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0])
    with pytest.raises(ValueError):
        ThreeBodyPlot(np.random.rand(5, 10), diff_eq)


def test_three_body_plot_with_wrong_number_of_colors():
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0])
    with pytest.raises(ValueError):
        ThreeBodyPlot(np.random.rand(5, 12), diff_eq, colors=("red", "blue"))


def test_three_body_plot_with_wrong_number_of_labels():
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0])
    with pytest.raises(ValueError):
        ThreeBodyPlot(
            np.random.rand(5, 12), diff_eq, labels=("A", "B", "C", "D")
        )


def test_three_body_plot():
    file_path = "three_body_plot"
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0])
    ThreeBodyPlot(np.random.rand(5, 12), diff_eq, n_frames=5).save(
        file_path
    ).close()
    os.remove(f"{file_path}.gif")


def test_three_body_plot_with_stationary_bodies():
    file_path = "stationary_three_body_plot"
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0])
    ThreeBodyPlot(
        np.zeros((5, 12)),
        diff_eq,
        n_frames=5,
        colors=("black", "orange", "purple"),
        labels=("Sun", "Earth", "Moon"),
    ).save(file_path).close()
    os.remove(f"{file_path}.gif")
