from abc import ABC
from typing import Callable, NamedTuple, Union

import numpy as np


class EmbeddedStep(NamedTuple):
    """
    The result of a single step of an embedded Runge-Kutta method.
    """

    y_next: np.ndarray
    y_error: np.ndarray
    k: np.ndarray


class EmbeddedRungeKuttaMethod(ABC):
    """
    A base class for explicit embedded Runge-Kutta methods with dense output
    where the derivative at the end of an accepted step is reused as the
    first stage of the next one.
    """

    def __init__(
        self,
        c: np.ndarray,
        a: np.ndarray,
        b: np.ndarray,
        b_hat: np.ndarray,
        p: np.ndarray,
        order: int,
        error_estimator_order: int,
    ):
        """
        :param c: the nodes of the Butcher tableau (n_stages)
        :param a: the Runge-Kutta matrix (n_stages, n_stages)
        :param b: the weights of the higher order solution (n_stages)
        :param b_hat: the weights of the lower order solution including the
            weight of the derivative at the end of the step (n_stages + 1)
        :param p: the coefficients of the dense output polynomial
            (n_stages + 1, interpolant order)
        :param order: the order of the propagated solution
        :param error_estimator_order: the order of the embedded solution used
            for estimating the local error
        """
        n_stages = len(c)
        if a.shape != (n_stages, n_stages):
            raise ValueError(
                f"Runge-Kutta matrix shape {a.shape} must be "
                f"({n_stages}, {n_stages})"
            )
        if b.shape != (n_stages,):
            raise ValueError(f"weights shape {b.shape} must be ({n_stages},)")
        if b_hat.shape != (n_stages + 1,):
            raise ValueError(
                f"embedded weights shape {b_hat.shape} must be "
                f"({n_stages + 1},)"
            )
        if p.ndim != 2 or p.shape[0] != n_stages + 1:
            raise ValueError(
                f"dense output coefficients shape {p.shape} must be "
                f"({n_stages + 1}, interpolant order)"
            )

        self._c = c
        self._a = a
        self._b = b
        self._e = np.append(b, 0.0) - b_hat
        self._p = p
        self._order = order
        self._error_estimator_order = error_estimator_order

    @property
    def n_stages(self) -> int:
        """
        The number of stages of the method excluding the derivative at the
        end of the step.
        """
        return len(self._c)

    @property
    def order(self) -> int:
        """
        The order of the propagated solution.
        """
        return self._order

    @property
    def error_estimator_order(self) -> int:
        """
        The order of the embedded solution used to estimate the local error.
        """
        return self._error_estimator_order

    def step(
        self,
        y: np.ndarray,
        t: float,
        d_t: float,
        f: np.ndarray,
        d_y_over_d_t: Callable[[float, np.ndarray], np.ndarray],
    ) -> EmbeddedStep:
        """
        Performs a single step of the method.

        :param y: the value of y(t)
        :param t: the value of t
        :param d_t: the amount of increase in t
        :param f: the value of y'(t)
        :param d_y_over_d_t: a function that returns the value of y'(t) given
            t and y
        :return: the estimate of y(t + d_t), the estimate of the local error
            and the stage derivatives with the derivative at t + d_t last
        """
        k = np.empty((self.n_stages + 1, y.shape[0]))
        k[0] = f
        for s in range(1, self.n_stages):
            d_y = np.dot(k[:s].T, self._a[s, :s]) * d_t
            k[s] = d_y_over_d_t(t + self._c[s] * d_t, y + d_y)

        y_next = y + d_t * np.dot(k[:-1].T, self._b)
        k[-1] = d_y_over_d_t(t + d_t, y_next)
        y_error = d_t * np.dot(k.T, self._e)
        return EmbeddedStep(y_next, y_error, k)

    def dense_output(
        self,
        y: np.ndarray,
        d_t: float,
        k: np.ndarray,
        x: Union[float, np.ndarray],
    ) -> np.ndarray:
        """
        Evaluates the interpolant of an accepted step.

        :param y: the value of y at the start of the step
        :param d_t: the size of the step
        :param k: the stage derivatives of the step
        :param x: the fractions of the step to evaluate the interpolant at
        :return: the interpolated values of y with one row per element of x
            if x is an array
        """
        q = np.dot(k.T, self._p)
        x = np.asarray(x, dtype=float)
        powers = np.cumprod(
            np.repeat(x[..., np.newaxis], self._p.shape[1], axis=-1), axis=-1
        )
        return y + d_t * np.dot(powers, q.T)


class DormandPrinceMethod(EmbeddedRungeKuttaMethod):
    """
    The Dormand-Prince method, an explicit fifth order Runge-Kutta method with
    an embedded fourth order error estimator and a fourth order interpolant.
    """

    C = np.array([0.0, 1 / 5, 3 / 10, 4 / 5, 8 / 9, 1.0])
    A = np.array(
        [
            [0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
            [1 / 5, 0.0, 0.0, 0.0, 0.0, 0.0],
            [3 / 40, 9 / 40, 0.0, 0.0, 0.0, 0.0],
            [44 / 45, -56 / 15, 32 / 9, 0.0, 0.0, 0.0],
            [
                19372 / 6561,
                -25360 / 2187,
                64448 / 6561,
                -212 / 729,
                0.0,
                0.0,
            ],
            [
                9017 / 3168,
                -355 / 33,
                46732 / 5247,
                49 / 176,
                -5103 / 18656,
                0.0,
            ],
        ]
    )
    B = np.array([35 / 384, 0.0, 500 / 1113, 125 / 192, -2187 / 6784, 11 / 84])
    B_HAT = np.array(
        [
            5179 / 57600,
            0.0,
            7571 / 16695,
            393 / 640,
            -92097 / 339200,
            187 / 2100,
            1 / 40,
        ]
    )
    P = np.array(
        [
            [
                1.0,
                -8048581381 / 2820520608,
                8663915743 / 2820520608,
                -12715105075 / 11282082432,
            ],
            [0.0, 0.0, 0.0, 0.0],
            [
                0.0,
                131558114200 / 32700410799,
                -68118460800 / 10900136933,
                87487479700 / 32700410799,
            ],
            [
                0.0,
                -1754552775 / 470086768,
                14199869525 / 1410260304,
                -10690763975 / 1880347072,
            ],
            [
                0.0,
                127303824393 / 49829197408,
                -318862633887 / 49829197408,
                701980252875 / 199316789632,
            ],
            [
                0.0,
                -282668133 / 205662961,
                2019193451 / 616988883,
                -1453857185 / 822651844,
            ],
            [
                0.0,
                40617522 / 29380423,
                -110615467 / 29380423,
                69997945 / 29380423,
            ],
        ]
    )

    def __init__(self):
        super(DormandPrinceMethod, self).__init__(
            DormandPrinceMethod.C,
            DormandPrinceMethod.A,
            DormandPrinceMethod.B,
            DormandPrinceMethod.B_HAT,
            DormandPrinceMethod.P,
            order=5,
            error_estimator_order=4,
        )
