import sys
from pathlib import Path
# Go up to the parent directory (..), then down into "src"
# This adds "../src" to the python search path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import math

import numpy as np
import pytest

from mortality.models import (
    DECLINE_BOUNDS,
    EFFECTIVENESS_BOUNDS,
    DecayParams,
    analytic_solution,
    decay_model,
    rhs,
)


def test_defaults():
    p = DecayParams()
    assert p.vaccination_effectiveness == 0.15
    assert p.natural_decline == 0.05
    assert p.total_rate == pytest.approx(0.2)


def test_rhs_is_combined_linear_decay():
    p = DecayParams(vaccination_effectiveness=0.3, natural_decline=0.1)
    for y in [0.0, 1.0, 50.0, -4.0]:
        assert rhs(0.0, y, params=p) == pytest.approx(-(0.3 + 0.1) * y)


def test_rhs_ignores_time():
    p = DecayParams()
    assert rhs(0.0, 50.0, params=p) == rhs(123.0, 50.0, params=p)


def test_decay_model_binds_params():
    slow = decay_model(DecayParams(vaccination_effectiveness=0.0, natural_decline=0.01))
    fast = decay_model(DecayParams(vaccination_effectiveness=0.5, natural_decline=0.2))
    assert slow(0.0, 10.0) == pytest.approx(-0.1)
    assert fast(0.0, 10.0) == pytest.approx(-7.0)
    # Repeated calls carry no memory.
    assert slow(0.0, 10.0) == slow(5.0, 10.0)


def test_decay_model_default_params():
    assert decay_model()(0.0, 50.0) == rhs(0.0, 50.0, params=DecayParams())


@pytest.mark.parametrize("eff, decl", [
    (EFFECTIVENESS_BOUNDS[0], DECLINE_BOUNDS[0]),
    (EFFECTIVENESS_BOUNDS[1], DECLINE_BOUNDS[1]),
    (0.25, 0.1),
])
def test_validate_accepts_bounds(eff, decl):
    p = DecayParams(vaccination_effectiveness=eff, natural_decline=decl)
    assert p.validate() is p


@pytest.mark.parametrize("eff, decl", [
    (-0.01, 0.05),
    (0.51, 0.05),
    (0.15, -0.1),
    (0.15, 0.21),
    (float("nan"), 0.05),
    (0.15, float("inf")),
    ("fast", 0.05),
])
def test_validate_rejects_out_of_range(eff, decl):
    with pytest.raises(ValueError):
        DecayParams(vaccination_effectiveness=eff, natural_decline=decl).validate()


def test_analytic_solution_scalar_and_array():
    p = DecayParams(vaccination_effectiveness=0.15, natural_decline=0.05)
    assert analytic_solution(10.0, 50.0, params=p) == pytest.approx(50.0 * math.exp(-2.0))
    assert isinstance(analytic_solution(1.0, 50.0, params=p), float)

    t = np.arange(11, dtype=float)
    np.testing.assert_allclose(analytic_solution(t, 50.0, params=p), 50.0 * np.exp(-0.2 * t))


def test_analytic_solution_shifted_origin():
    p = DecayParams()
    assert analytic_solution(3.0, 7.0, params=p, t0=3.0) == 7.0
