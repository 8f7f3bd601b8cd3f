"""Explicit Runge-Kutta IVP integration.
This module implements the classical fixed-step fourth-order Runge-Kutta method (RK4)
for a scalar first-order ODE y' = f(t, y).

There is no step-size control and no error estimate: the caller picks h and the
number of steps n, and receives the full sampled trajectory.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Integral
from typing import Callable

import numpy as np

# Define type for the scalar derivative function f(t, y) -> dy/dt
DerivativeFunction = Callable[[float, float], float]


class InvalidArgument(ValueError):
    """Raised when the integrator is called with a step count it cannot honour."""


class NonFiniteDerivative(ArithmeticError):
    """Raised by `rk4_integrate(..., check_finite=True)` when f returns NaN or +-inf."""


@dataclass(frozen=True, eq=False)
class Trajectory:
    """Sampled solution of one integration run.

    Attributes:
        t: Sample times, shape (n+1,). t[0] = t0, t[i] = t[i-1] + h.
        y: Approximate solution at each sample time, shape (n+1,).
        nfev: Number of evaluations of f (always 4n).

    Both arrays are read-only.
    """
    t: np.ndarray
    y: np.ndarray
    nfev: int

    @property
    def times(self) -> np.ndarray:
        return self.t

    @property
    def values(self) -> np.ndarray:
        return self.y

    @property
    def n_steps(self) -> int:
        return int(self.t.shape[0]) - 1

    def __len__(self) -> int:
        return int(self.t.shape[0])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Trajectory):
            return NotImplemented
        # NaN samples compare equal.
        return (
            self.nfev == other.nfev
            and np.array_equal(self.t, other.t, equal_nan=True)
            and np.array_equal(self.y, other.y, equal_nan=True)
        )

    __hash__ = None


def _checked(k: float, t: float, y: float, stage: int) -> float:
    if not math.isfinite(k):
        raise NonFiniteDerivative(f"f returned {k!r} at stage k{stage} (t={t!r}, y={y!r})")
    return k


def rk4_step(f: DerivativeFunction, t: float, y: float, h: float, *, check_finite: bool = False) -> float:
    """Take a single classical RK4 step from (t, y) with step size h.

    The method computes:

    y_{n+1} = y_n + h/6 * (k1 + 2*k2 + 2*k3 + k4)

    where
      k1 = f(t_n, y_n)
      k2 = f(t_n + h/2, y_n + h/2*k1)
      k3 = f(t_n + h/2, y_n + h/2*k2)
      k4 = f(t_n + h, y_n + h*k3)

    Find more info at https://en.wikipedia.org/wiki/Runge%E2%80%93Kutta_methods

    Parameters:
        f: Derivative function f(t, y) -> dy/dt.
        t: Current time.
        y: Current value.
        h: Step size (any sign, zero allowed).
        check_finite: Raise NonFiniteDerivative instead of propagating NaN/inf.

    Returns:
        y_next: Value at t+h.
    """
    half = h / 2
    k1 = f(t, y)
    if check_finite:
        _checked(k1, t, y, 1)
    k2 = f(t + half, y + half * k1)
    if check_finite:
        _checked(k2, t + half, y + half * k1, 2)
    k3 = f(t + half, y + half * k2)
    if check_finite:
        _checked(k3, t + half, y + half * k2, 3)
    k4 = f(t + h, y + h * k3)
    if check_finite:
        _checked(k4, t + h, y + h * k3, 4)

    return y + (h / 6) * (k1 + 2 * k2 + 2 * k3 + k4)


def rk4_integrate(
    f: DerivativeFunction,
    t0: float,
    y0: float,
    h: float,
    n: int,
    *,
    check_finite: bool = False,
) -> Trajectory:
    """Integrate y' = f(t, y) from (t0, y0) with n fixed RK4 steps of size h.

    Args:
        f: Derivative function f(t, y). Called exactly 4n times.
        t0: Initial time.
        y0: Initial value.
        h: Step size. Negative steps integrate backwards; h == 0 yields a
            constant trajectory.
        n: Number of steps, n >= 0.
        check_finite: If True, a NaN or infinite slope raises
            NonFiniteDerivative. By default such values propagate.

    Returns:
        Trajectory with n+1 samples.

    Raises:
        InvalidArgument: n is negative or not an integer.
    """
    if isinstance(n, bool) or not isinstance(n, Integral):
        raise InvalidArgument(f"n must be an integer, got {n!r}")
    if n < 0:
        raise InvalidArgument(f"n must be non-negative, got {n}")

    n = int(n)
    h = float(h)
    t = np.empty(n + 1, dtype=float)
    y = np.empty(n + 1, dtype=float)
    t[0] = t0
    y[0] = y0

    t_i = float(t[0])
    y_i = float(y[0])
    for ii in range(n):
        y_i = rk4_step(f, t_i, y_i, h, check_finite=check_finite)
        t_i = t_i + h
        t[ii + 1] = t_i
        y[ii + 1] = y_i

    t.flags.writeable = False
    y.flags.writeable = False
    return Trajectory(t=t, y=y, nfev=4 * n)
