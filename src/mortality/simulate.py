"""Simulation driver for the mortality decay model.

This module keeps scripts free of numerics:
- `simulate` runs one parameter set through the fixed-step RK4 integrator
- `simulate_all` runs an ordered collection of scenarios and collects the
  trajectories into a `ComparisonResult` for tabulation or plotting

Every call recomputes from scratch; nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

import numpy as np
import pandas as pd

from .integrators import Trajectory, rk4_integrate
from .models import DecayParams, analytic_solution, decay_model
from .scenarios import Scenario


@dataclass(frozen=True)
class SimulationConfig:
    """Initial condition and time grid shared by every scenario in a run.

    Defaults reproduce a 10-year projection from a starting rate of 50 deaths per
    1000 children, one sample per year.
    """

    y0: float = 50.0
    t0: float = 0.0
    h: float = 1.0
    n_steps: int = 10

    @property
    def t_end(self) -> float:
        return float(self.t0) + float(self.h) * int(self.n_steps)


DEFAULT_CONFIG = SimulationConfig()


def _year_label(t: float, *, precise: bool = False) -> str:
    return f"Year {float(t)!r}" if precise else f"Year {float(t):g}"


def _params_of(source: Union[DecayParams, Scenario]) -> DecayParams:
    if isinstance(source, Scenario):
        return source.params
    if isinstance(source, DecayParams):
        return source
    raise TypeError(f"Expected DecayParams or Scenario, got {type(source).__name__}")


def simulate(
    source: Union[DecayParams, Scenario],
    *,
    config: SimulationConfig | None = None,
    check_finite: bool = False,
) -> Trajectory:
    """Integrate the decay model for one parameter set.

    Args:
        source: Model coefficients, or a Scenario carrying them.
        config: Initial condition and grid (default: 50 at t=0, h=1, 10 steps).
        check_finite: Forwarded to the integrator.

    Returns:
        Trajectory with config.n_steps + 1 samples.
    """
    if config is None:
        config = DEFAULT_CONFIG

    params = _params_of(source).validate()
    return rk4_integrate(
        decay_model(params),
        float(config.t0),
        float(config.y0),
        float(config.h),
        config.n_steps,
        check_finite=check_finite,
    )


@dataclass(frozen=True)
class ScenarioRun:
    label: str
    color: str
    params: DecayParams
    trajectory: Trajectory


@dataclass(frozen=True)
class ComparisonResult:
    """Trajectories of several scenarios on one shared time grid."""

    config: SimulationConfig
    runs: Tuple[ScenarioRun, ...]

    @property
    def t(self) -> np.ndarray:
        if not self.runs:
            return np.array([], dtype=float)
        return self.runs[0].trajectory.t

    @property
    def labels(self) -> List[str]:
        return [r.label for r in self.runs]

    def time_labels(self) -> List[str]:
        """Axis labels "Year 0", "Year 1", ...

        Times are formatted like `%g` unless that would merge distinct sample
        times, in which case the full float repr is used for every label.
        """
        short = [_year_label(ti) for ti in self.t]
        if len(set(short)) == len(set(self.t.tolist())):
            return short
        return [_year_label(ti, precise=True) for ti in self.t]

    def to_frame(self) -> pd.DataFrame:
        """One row per sample time, one column per scenario label."""
        data = {r.label: np.asarray(r.trajectory.y) for r in self.runs}
        frame = pd.DataFrame(data, index=pd.Index(self.time_labels(), name="time"))
        frame.insert(0, "t", np.asarray(self.t))
        return frame

    def final_values(self) -> pd.Series:
        """Projected value at the end of the horizon, per scenario."""
        return pd.Series(
            [float(r.trajectory.y[-1]) for r in self.runs],
            index=self.labels,
            name=self.time_labels()[-1] if self.runs else _year_label(self.config.t_end),
        )

    def relative_errors(self) -> pd.Series:
        """Final-value relative error against the exact exponential, per scenario."""
        errs = []
        for r in self.runs:
            exact = analytic_solution(self.config.t_end, self.config.y0, params=r.params, t0=self.config.t0)
            errs.append(abs(float(r.trajectory.y[-1]) - exact) / abs(exact) if exact != 0.0 else float("nan"))
        return pd.Series(errs, index=self.labels, name="relative_error")


def simulate_all(
    scenarios: Iterable[Scenario],
    *,
    config: SimulationConfig | None = None,
) -> ComparisonResult:
    """Run each scenario independently and collect the results in input order.

    Labels must be unique so the tabulated comparison keeps one column per scenario.
    """
    if config is None:
        config = DEFAULT_CONFIG

    runs: List[ScenarioRun] = []
    seen = set()
    for sc in scenarios:
        label = sc.display_name
        if label in seen:
            raise ValueError(f"Duplicate scenario label '{label}'")
        seen.add(label)
        runs.append(
            ScenarioRun(
                label=label,
                color=sc.color,
                params=sc.params,
                trajectory=simulate(sc, config=config),
            )
        )

    return ComparisonResult(config=config, runs=tuple(runs))
