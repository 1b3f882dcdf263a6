import logging

import numpy as np
import pytest
from scipy.integrate import solve_ivp

from threebody.differential_equation import (
    DifferentialEquation,
    SymbolicEquationSystem,
    ThreeBodyGravitationalEquation,
    derivative,
)
from threebody.exceptions import (
    InvalidInputError,
    NonConvergenceError,
    NumericOverflowError,
)
from threebody.initial_condition import (
    BodiesInitialCondition,
    DiscreteInitialCondition,
)
from threebody.initial_value_problem import InitialValueProblem
from threebody.operators.ode.adaptive_rk_operator import AdaptiveRKOperator
from threebody.operators.ode.runge_kutta import DormandPrinceMethod
from threebody.state import (
    STATE_DIMENSION,
    Body,
    compose_state,
    default_bodies,
)


def _default_ivp(t_interval=(0.0, 10.0), g=1.0):
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0], g=g)
    ic = BodiesInitialCondition(diff_eq, default_bodies())
    return InitialValueProblem(diff_eq, t_interval, ic)


def test_adaptive_rk_operator_with_invalid_tolerances():
    with pytest.raises(InvalidInputError):
        AdaptiveRKOperator(0.1, atol=0.0)
    with pytest.raises(InvalidInputError):
        AdaptiveRKOperator(0.1, rtol=-1e-3)


def test_adaptive_rk_operator_with_invalid_step_sizes():
    with pytest.raises(InvalidInputError):
        AdaptiveRKOperator(0.1, first_step=0.0)
    with pytest.raises(InvalidInputError):
        AdaptiveRKOperator(0.1, max_step=-1.0)
    with pytest.raises(InvalidInputError):
        AdaptiveRKOperator(0.1, min_step=1.0, max_step=0.5)
    with pytest.raises(InvalidInputError):
        AdaptiveRKOperator(0.1, first_step=1e-3, min_step=1e-2)


def test_adaptive_rk_operator_with_max_step_below_min_step():
    ivp = _default_ivp((0.0, 1.0))
    with pytest.raises(InvalidInputError):
        AdaptiveRKOperator(0.1, max_step=1e-11).solve(ivp)


def test_adaptive_rk_operator_with_first_step_below_min_step():
    ivp = _default_ivp((0.0, 1.0))
    solution = AdaptiveRKOperator(
        0.1, atol=1e-8, rtol=1e-8, first_step=1e-12
    ).solve(ivp)
    reference_solution = AdaptiveRKOperator(
        0.1, atol=1e-8, rtol=1e-8
    ).solve(ivp)

    assert len(solution.t_coordinates) == 11
    assert solution.t_coordinates[-1] == 1.0
    assert np.allclose(
        solution.discrete_y(),
        reference_solution.discrete_y(),
        rtol=0.0,
        atol=1e-6,
    )


def test_adaptive_rk_operator_with_time_domain_shorter_than_d_t():
    ivp = _default_ivp((0.0, 1e-12))
    solution = AdaptiveRKOperator(0.01).solve(ivp)

    y_0 = ivp.initial_condition.y_0()
    assert np.array_equal(solution.t_coordinates, [0.0, 1e-12])
    assert np.allclose(solution.final_state, y_0, rtol=0.0, atol=1e-11)


def test_adaptive_rk_operator_with_invalid_step_size_factors():
    with pytest.raises(InvalidInputError):
        AdaptiveRKOperator(0.1, safety=1.5)
    with pytest.raises(InvalidInputError):
        AdaptiveRKOperator(0.1, min_factor=1.0)
    with pytest.raises(InvalidInputError):
        AdaptiveRKOperator(0.1, max_factor=0.5)


def test_adaptive_rk_operator_uses_dormand_prince_method_by_default():
    operator = AdaptiveRKOperator(0.1)
    assert isinstance(operator.method, DormandPrinceMethod)
    assert operator.d_t == 0.1


def test_adaptive_rk_operator_with_degenerate_time_domain():
    ivp = _default_ivp((5.0, 5.0))
    solution = AdaptiveRKOperator(0.01).solve(ivp)

    assert np.array_equal(solution.t_coordinates, [5.0])
    assert np.array_equal(
        solution.discrete_y(), [ivp.initial_condition.y_0()]
    )


def test_adaptive_rk_operator_samples_at_fixed_cadence():
    ivp = _default_ivp((0.0, 10.0))
    solution = AdaptiveRKOperator(0.01, atol=1e-8, rtol=1e-8).solve(ivp)

    t = solution.t_coordinates
    assert len(t) == 1001
    assert t[0] == 0.0
    assert t[-1] == 10.0
    assert np.allclose(t, np.arange(1001) * 0.01, rtol=0.0, atol=1e-12)
    assert solution.discrete_y().shape == (1001, 12)
    assert np.all(np.isfinite(solution.discrete_y()))


def test_adaptive_rk_operator_ends_at_upper_bound_of_time_domain():
    ivp = _default_ivp((0.0, 1.05))
    solution = AdaptiveRKOperator(0.1, atol=1e-8, rtol=1e-8).solve(ivp)

    assert len(solution.t_coordinates) == 12
    assert solution.t_coordinates[-1] == 1.05


def test_adaptive_rk_operator_with_max_step():
    ivp = _default_ivp((0.0, 2.0))
    unconstrained_solution = AdaptiveRKOperator(
        0.5, atol=1e-10, rtol=1e-10
    ).solve(ivp)
    constrained_solution = AdaptiveRKOperator(
        0.5, atol=1e-10, rtol=1e-10, first_step=1e-4, max_step=1e-2
    ).solve(ivp)

    assert np.allclose(
        unconstrained_solution.discrete_y(),
        constrained_solution.discrete_y(),
        rtol=0.0,
        atol=1e-7,
    )


def test_adaptive_rk_operator_matches_reference_solver():
    ivp = _default_ivp((0.0, 5.0))
    solution = AdaptiveRKOperator(0.05, atol=1e-10, rtol=1e-10).solve(ivp)

    diff_eq = ivp.differential_equation
    reference = solve_ivp(
        lambda _t, _y: derivative(_y, diff_eq.masses, diff_eq.g),
        ivp.t_interval,
        ivp.initial_condition.y_0(),
        method="DOP853",
        t_eval=solution.t_coordinates,
        rtol=1e-12,
        atol=1e-12,
    )

    assert reference.success
    assert np.allclose(
        solution.discrete_y(), reference.y.T, rtol=0.0, atol=1e-6
    )


def test_adaptive_rk_operator_circular_two_body_orbit():
    bodies = [
        Body(1.0, (1.0, 0.0), (0.0, 0.5)),
        Body(1.0, (-1.0, 0.0), (0.0, -0.5)),
        Body(0.0, (10.0, 10.0), (0.0, 0.0)),
    ]
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 0.0], g=1.0)
    ic = BodiesInitialCondition(diff_eq, bodies)
    angular_velocity = 0.5

    def exact_y(_ivp: InitialValueProblem, t: float) -> np.ndarray:
        phase = angular_velocity * t
        position = np.array([np.cos(phase), np.sin(phase)])
        velocity = angular_velocity * np.array(
            [-np.sin(phase), np.cos(phase)]
        )
        return np.concatenate([position, -position, velocity, -velocity])

    ivp = InitialValueProblem(
        diff_eq, (0.0, 4.0 * np.pi), ic, exact_y=exact_y
    )
    solution = AdaptiveRKOperator(0.1, atol=1e-10, rtol=1e-10).solve(ivp)

    discrete_y = solution.discrete_y()
    for t, y in zip(solution.t_coordinates, discrete_y):
        expected_y = ivp.exact_y(t)
        assert np.allclose(y[:4], expected_y[:4], rtol=0.0, atol=1e-6)
        assert np.allclose(y[6:10], expected_y[4:], rtol=0.0, atol=1e-6)

    assert np.allclose(
        solution.final_state[:4], ic.y_0()[:4], rtol=0.0, atol=1e-6
    )


def test_adaptive_rk_operator_elliptic_two_body_orbit_is_closed():
    speed = 0.4
    bodies = [
        Body(1.0, (1.0, 0.0), (0.0, speed)),
        Body(1.0, (-1.0, 0.0), (0.0, -speed)),
        Body(0.0, (10.0, 10.0), (0.0, 0.0)),
    ]
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 0.0], g=1.0)
    ic = BodiesInitialCondition(diff_eq, bodies)

    mu = 2.0
    specific_energy = 0.5 * (2.0 * speed) ** 2 - mu / 2.0
    semi_major_axis = -mu / (2.0 * specific_energy)
    period = 2.0 * np.pi * np.sqrt(semi_major_axis**3 / mu)

    ivp = InitialValueProblem(diff_eq, (0.0, period), ic)
    solution = AdaptiveRKOperator(0.05, atol=1e-10, rtol=1e-10).solve(ivp)

    y_0 = ic.y_0()
    final_y = solution.final_state
    assert solution.t_coordinates[-1] == period
    assert np.allclose(final_y[:4], y_0[:4], rtol=0.0, atol=1e-6)
    assert np.allclose(final_y[6:10], y_0[6:10], rtol=0.0, atol=1e-6)

    separations = np.linalg.norm(
        solution.body_positions()[:, 0] - solution.body_positions()[:, 1],
        axis=-1,
    )
    eccentricity = 2.0 / semi_major_axis - 1.0
    assert np.isclose(separations.max(), 2.0, atol=1e-6)
    assert np.isclose(
        separations.min(),
        semi_major_axis * (1.0 - eccentricity),
        atol=1e-3,
    )


def test_adaptive_rk_operator_with_nearly_coinciding_bodies():
    y_0, _ = compose_state(
        [
            Body(1.0, (0.0, 0.0), (0.0, 0.0)),
            Body(1.0, (1e-12, 0.0), (0.0, 0.0)),
            Body(1.0, (5.0, 5.0), (0.0, 0.0)),
        ]
    )
    diff_eq = ThreeBodyGravitationalEquation([1.0, 1.0, 1.0])
    ic = DiscreteInitialCondition(diff_eq, y_0)
    ivp = InitialValueProblem(diff_eq, (0.0, 1.0), ic)

    with pytest.raises(NonConvergenceError) as error_info:
        AdaptiveRKOperator(0.1, atol=1e-8, rtol=1e-8).solve(ivp)

    error = error_info.value
    assert error.t == 0.0
    assert np.array_equal(error.y, y_0)
    assert error.step_size < 1e-10
    assert np.array_equal(error.partial_t_coordinates, [0.0])
    assert np.array_equal(error.partial_discrete_y, [y_0])


class ReciprocalEquation(DifferentialEquation):
    """
    An equation whose first element grows at the rate of its reciprocal.
    """

    def __init__(self):
        super(ReciprocalEquation, self).__init__(STATE_DIMENSION)

    @property
    def symbolic_equation_system(self) -> SymbolicEquationSystem:
        y = self.symbols.y
        return SymbolicEquationSystem([1 / y[0]] + [0] * (len(y) - 1))


def test_adaptive_rk_operator_with_non_finite_derivatives():
    y_0 = np.zeros(12)
    diff_eq = ReciprocalEquation()
    ic = DiscreteInitialCondition(diff_eq, y_0)
    ivp = InitialValueProblem(diff_eq, (0.0, 1.0), ic)

    with pytest.raises(NumericOverflowError):
        AdaptiveRKOperator(0.1).solve(ivp)


def test_adaptive_rk_operator_logs_summary(caplog):
    ivp = _default_ivp((0.0, 1.0))
    with caplog.at_level(
        logging.INFO, logger="threebody.operators.ode.adaptive_rk_operator"
    ):
        AdaptiveRKOperator(0.1).solve(ivp)

    assert "Integration completed" in caplog.text
