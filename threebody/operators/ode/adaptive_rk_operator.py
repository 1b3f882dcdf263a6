import logging
from typing import Optional

import numpy as np
import sympy as sp

from threebody.exceptions import (
    InvalidInputError,
    NonConvergenceError,
    NumericOverflowError,
)
from threebody.initial_value_problem import InitialValueProblem
from threebody.operator import Operator, discretize_time_domain
from threebody.operators.ode.runge_kutta import (
    DormandPrinceMethod,
    EmbeddedRungeKuttaMethod,
)
from threebody.solution import Solution, TrajectoryBuffer


class AdaptiveRKOperator(Operator):
    """
    An ordinary differential equation solver using an embedded Runge-Kutta
    method with automatic step size control and dense output at evenly
    spaced sample times.
    """

    def __init__(
        self,
        d_t: float,
        atol: float = 1e-6,
        rtol: float = 1e-3,
        first_step: Optional[float] = None,
        max_step: float = np.inf,
        min_step: Optional[float] = None,
        safety: float = 0.9,
        min_factor: float = 0.2,
        max_factor: float = 10.0,
        method: Optional[EmbeddedRungeKuttaMethod] = None,
    ):
        """
        :param d_t: the temporal distance between the samples of the solution
        :param atol: the absolute tolerance to use to manage local error
            estimates by controlling the time integration step size
        :param rtol: the relative tolerance to use to manage local error
            estimates by controlling the time integration step size
        :param first_step: the step size to use for the first time integration
            step; if it is None, a thousandth of the length of the time domain
            is used; it is never smaller than the minimum step size
        :param max_step: the maximum allowed time integration step size; it
            must not be smaller than the minimum step size
        :param min_step: the smallest allowed time integration step size; if
            the local error tolerance cannot be met using steps at least this
            large, the integration fails; if it is None, it is set to 1e-10
            times the length of the time domain
        :param safety: the factor by which the optimal step size estimate is
            scaled down
        :param min_factor: the smallest allowed ratio of consecutive step
            sizes
        :param max_factor: the largest allowed ratio of consecutive step
            sizes
        :param method: the embedded Runge-Kutta method to use; if it is None,
            the Dormand-Prince method is used
        """
        super(AdaptiveRKOperator, self).__init__(d_t)

        if not (np.isfinite(atol) and atol > 0.0):
            raise InvalidInputError(
                f"absolute tolerance ({atol}) must be finite and greater "
                "than 0"
            )
        if not (np.isfinite(rtol) and rtol >= 0.0):
            raise InvalidInputError(
                f"relative tolerance ({rtol}) must be finite and "
                "non-negative"
            )
        if first_step is not None and not (
            np.isfinite(first_step) and first_step > 0.0
        ):
            raise InvalidInputError(
                f"first step size ({first_step}) must be finite and greater "
                "than 0"
            )
        if not max_step > 0.0:
            raise InvalidInputError(
                f"maximum step size ({max_step}) must be greater than 0"
            )
        if min_step is not None and not (
            np.isfinite(min_step) and 0.0 < min_step <= max_step
        ):
            raise InvalidInputError(
                f"minimum step size ({min_step}) must be finite, greater "
                f"than 0 and no greater than the maximum step size "
                f"({max_step})"
            )
        if (
            min_step is not None
            and first_step is not None
            and first_step < min_step
        ):
            raise InvalidInputError(
                f"first step size ({first_step}) must be no less than the "
                f"minimum step size ({min_step})"
            )
        if not (0.0 < safety <= 1.0):
            raise InvalidInputError(
                f"safety factor ({safety}) must be in the interval (0, 1]"
            )
        if not (0.0 < min_factor < 1.0 < max_factor):
            raise InvalidInputError(
                f"minimum step size factor ({min_factor}) must be in the "
                f"interval (0, 1) and maximum step size factor "
                f"({max_factor}) must be greater than 1"
            )

        self._atol = atol
        self._rtol = rtol
        self._first_step = first_step
        self._max_step = max_step
        self._min_step = min_step
        self._safety = safety
        self._min_factor = min_factor
        self._max_factor = max_factor
        self._method = method if method is not None else DormandPrinceMethod()
        self._logger = logging.getLogger(__name__)

    @property
    def method(self) -> EmbeddedRungeKuttaMethod:
        """
        The embedded Runge-Kutta method used to advance the solution.
        """
        return self._method

    def solve(self, ivp: InitialValueProblem) -> Solution:
        diff_eq = ivp.differential_equation
        t_start, t_end = ivp.t_interval
        t_samples = discretize_time_domain(ivp.t_interval, self._d_t)

        sym = diff_eq.symbols
        rhs = diff_eq.symbolic_equation_system.rhs
        rhs_lambda = sp.lambdify([sym.t, sym.y], list(rhs), "numpy")

        def d_y_over_d_t(_t: float, _y: np.ndarray) -> np.ndarray:
            return np.asarray(rhs_lambda(_t, _y), dtype=float)

        y = ivp.initial_condition.y_0()
        buffer = TrajectoryBuffer(diff_eq.y_dimension)
        buffer.append(t_samples[0], y)
        if len(t_samples) == 1:
            return buffer.seal(ivp, self._d_t)

        method = self._method
        error_exponent = -1.0 / (method.error_estimator_order + 1)
        min_step = (
            self._min_step
            if self._min_step is not None
            else 1e-10 * (t_end - t_start)
        )

        t = t_start
        min_step = max(min_step, 10.0 * np.abs(np.spacing(t)))
        if min_step > self._max_step:
            raise InvalidInputError(
                f"minimum step size ({min_step}) cannot be greater than the "
                f"maximum step size ({self._max_step})"
            )
        d_t = min(
            max(
                self._first_step
                if self._first_step is not None
                else 1e-3 * (t_end - t_start),
                min_step,
            ),
            self._max_step,
        )

        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            f = d_y_over_d_t(t, y)
        next_sample_ind = 1
        n_accepted = 0
        n_rejected = 0
        n_evaluations = 1

        while t < t_end:
            step_rejected = False
            overflow = False

            while True:
                min_d_t = max(min_step, 10.0 * np.abs(np.spacing(t)))
                if d_t < min_d_t:
                    self._logger.warning(
                        "Step size %s fell below minimum %s at t=%s",
                        d_t,
                        min_d_t,
                        t,
                    )
                    error_type = (
                        NumericOverflowError
                        if overflow
                        else NonConvergenceError
                    )
                    raise error_type(
                        f"step size ({d_t}) fell below the minimum step size "
                        f"({min_d_t}) at t={t} without meeting the error "
                        "tolerance",
                        t,
                        y,
                        d_t,
                        buffer.t_coordinates,
                        buffer.discrete_y,
                    )

                if t + d_t >= t_end - min_d_t:
                    d_t = t_end - t
                    t_next = t_end
                else:
                    t_next = t + d_t

                with np.errstate(
                    divide="ignore", over="ignore", invalid="ignore"
                ):
                    step = method.step(y, t, d_t, f, d_y_over_d_t)
                    n_evaluations += method.n_stages
                    error_norm = np.inf
                    overflow = not (
                        np.all(np.isfinite(step.k))
                        and np.all(np.isfinite(step.y_next))
                    )
                    if not overflow:
                        scale = self._atol + self._rtol * np.maximum(
                            np.abs(y), np.abs(step.y_next)
                        )
                        error_norm = np.sqrt(
                            np.mean(np.square(step.y_error / scale))
                        )

                if error_norm <= 1.0:
                    if error_norm == 0.0:
                        factor = self._max_factor
                    else:
                        factor = min(
                            self._max_factor,
                            self._safety * error_norm**error_exponent,
                        )
                    if step_rejected:
                        factor = min(1.0, factor)
                    break

                n_rejected += 1
                if overflow or not np.isfinite(error_norm):
                    factor = self._min_factor
                else:
                    factor = max(
                        self._min_factor,
                        self._safety * error_norm**error_exponent,
                    )
                self._logger.debug(
                    "Step rejected at t=%s; step size: %s; error: %s",
                    t,
                    d_t,
                    error_norm,
                )
                d_t *= factor
                step_rejected = True

            n_accepted += 1
            while (
                next_sample_ind < len(t_samples)
                and t_samples[next_sample_ind] <= t_next
            ):
                t_sample = t_samples[next_sample_ind]
                if t_sample == t_next:
                    y_sample = step.y_next
                else:
                    y_sample = method.dense_output(
                        y, d_t, step.k, (t_sample - t) / d_t
                    )
                buffer.append(t_sample, y_sample)
                next_sample_ind += 1

            t = t_next
            y = step.y_next
            f = step.k[-1]
            d_t = min(max(d_t * factor, min_step), self._max_step)

        self._logger.info(
            "Integration completed; accepted steps: %s; rejected steps: %s; "
            "function evaluations: %s",
            n_accepted,
            n_rejected,
            n_evaluations,
        )
        return buffer.seal(ivp, self._d_t)
