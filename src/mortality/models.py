"""Child pneumonia mortality decay model, y' = -(c_vacc + c_decl) * y.

y is the mortality rate (deaths per 1000 children), t is in years. Two removal
processes act on the rate independently:
    c_vacc: effectiveness of vaccination coverage, in [0, 0.5]
    c_decl: natural decline (nutrition, access to care, ...), in [0, 0.2]

Both are first-order, so the combined model is a pure exponential decay with rate
c_vacc + c_decl.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .runge_kutta_integrators import DerivativeFunction

EFFECTIVENESS_BOUNDS: Tuple[float, float] = (0.0, 0.5)
DECLINE_BOUNDS: Tuple[float, float] = (0.0, 0.2)


@dataclass(frozen=True)
class DecayParams:
    """Coefficients of the decay model."""

    vaccination_effectiveness: float = 0.15
    natural_decline: float = 0.05

    @property
    def total_rate(self) -> float:
        return float(self.vaccination_effectiveness) + float(self.natural_decline)

    def validate(self) -> "DecayParams":
        """Check both coefficients against their bounds and return self."""
        _check_bounded("vaccination_effectiveness", self.vaccination_effectiveness, EFFECTIVENESS_BOUNDS)
        _check_bounded("natural_decline", self.natural_decline, DECLINE_BOUNDS)
        return self


def _check_bounded(name: str, value: float, bounds: Tuple[float, float]) -> None:
    try:
        v = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e
    lo, hi = bounds
    if not math.isfinite(v):
        raise ValueError(f"{name} must be finite, got {v}")
    if v < lo or v > hi:
        raise ValueError(f"{name} must lie in [{lo}, {hi}], got {v}")


def rhs(t: float, y: float, *, params: DecayParams | None = None) -> float:
    """Right-hand side for the ODE y' = f(t, y). Autonomous: t is unused."""
    if params is None:
        params = DecayParams()
    return -params.vaccination_effectiveness * y - params.natural_decline * y


def decay_model(params: DecayParams | None = None) -> DerivativeFunction:
    """Bind `params` into a two-argument derivative function f(t, y)."""
    if params is None:
        params = DecayParams()

    def f(t: float, y: float) -> float:
        return rhs(t, y, params=params)

    return f


def analytic_solution(t, y0: float, *, params: DecayParams | None = None, t0: float = 0.0):
    """Exact solution y(t) = y0 * exp(-(c_vacc + c_decl) * (t - t0)).

    Args:
        t: Scalar time or array of times.
        y0: Value at t0.
        params: Model coefficients.
        t0: Reference time.

    Returns:
        float for scalar t, np.ndarray otherwise.
    """
    if params is None:
        params = DecayParams()

    k = params.total_rate
    if np.ndim(t) == 0:
        return float(y0) * math.exp(-k * (float(t) - float(t0)))
    t = np.asarray(t, dtype=float)
    return float(y0) * np.exp(-k * (t - float(t0)))
