import numpy as np
import pytest

from threebody.differential_equation import ThreeBodyGravitationalEquation
from threebody.exceptions import InvalidInputError
from threebody.initial_condition import BodiesInitialCondition
from threebody.initial_value_problem import InitialValueProblem
from threebody.state import compose_state, default_bodies


def test_initial_value_problem_with_invalid_time_interval():
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0])
    ic = BodiesInitialCondition(diff_eq, default_bodies())

    with pytest.raises(InvalidInputError):
        InitialValueProblem(diff_eq, (3.0, 2.0), ic)


def test_initial_value_problem_with_non_finite_time_interval():
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0])
    ic = BodiesInitialCondition(diff_eq, default_bodies())

    with pytest.raises(InvalidInputError):
        InitialValueProblem(diff_eq, (0.0, np.inf), ic)


def test_initial_value_problem_without_exact_solution():
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0])
    ic = BodiesInitialCondition(diff_eq, default_bodies())
    ivp = InitialValueProblem(diff_eq, (0.0, 2.0), ic)

    assert not ivp.has_exact_solution

    with pytest.raises(RuntimeError):
        ivp.exact_y(2.0)


def test_initial_value_problem():
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0], g=0.0)
    ic = BodiesInitialCondition(diff_eq, default_bodies())
    y_0, _ = compose_state(default_bodies())

    def exact_y(_ivp: InitialValueProblem, t: float) -> np.ndarray:
        y = np.copy(y_0)
        y[:6] += t * y_0[6:]
        return y

    ivp = InitialValueProblem(diff_eq, (0.0, 2.0), ic, exact_y)

    assert ivp.has_exact_solution
    assert ivp.differential_equation == diff_eq
    assert ivp.t_interval == (0.0, 2.0)
    assert ivp.initial_condition == ic
    assert np.allclose(ivp.exact_y(0.0), y_0)
    assert np.allclose(
        ivp.exact_y(2.0)[:6], [1.0, 2.0, -1.0, -2.0, 0.0, 0.0]
    )
