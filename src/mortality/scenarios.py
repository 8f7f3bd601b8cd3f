"""Named intervention scenarios, loaded from JSON or edited in memory.

This module reads scenario definitions from the repository data directory:
    data/scenario_definitions/*.json

JSON schema (minimal):
{
  "name": "baseline",
  "vaccination_effectiveness": 0.15,
  "natural_decline": 0.05,
  "color": "rgb(75, 192, 192)",
  "label": "Current coverage",
  "description": "PCV10 coverage as of programme launch"
}

Notes:
- `color`, `label` and `description` are optional (can be null).
- Missing coefficients fall back to the `DecayParams` defaults (0.15, 0.05).
- Coefficients are range-checked against the model bounds on load.

`ScenarioSet` is the editable, ordered collection used for side-by-side
comparison: at most five scenarios, never fewer than one.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .models import DecayParams

PALETTE: Tuple[str, ...] = (
    "rgb(75, 192, 192)",
    "rgb(255, 99, 132)",
    "rgb(255, 205, 86)",
    "rgb(54, 162, 235)",
    "rgb(153, 102, 255)",
)

MAX_SCENARIOS = 5


class ScenarioLimitError(RuntimeError):
    """Raised when adding a scenario to a full ScenarioSet."""


@dataclass(frozen=True)
class Scenario:
    name: str
    params: DecayParams
    color: str = PALETTE[0]
    label: str | None = None
    description: str | None = None

    @property
    def display_name(self) -> str:
        return self.label if self.label else self.name


def _repo_root() -> Path:
    # .../src/mortality/scenarios.py -> repo root is parents[2]
    return Path(__file__).resolve().parents[2]


def scenarios_dir() -> Path:
    """Return the path to the on-disk scenario JSON directory."""
    return _repo_root() / "data" / "scenario_definitions"


def list_scenarios() -> List[str]:
    """List available scenario names (derived from JSON filenames)."""
    root = scenarios_dir()
    if not root.exists():
        return []
    return sorted(p.stem for p in root.glob("*.json") if p.is_file())


def _as_coefficient(x: Any, *, name: str, default: float) -> float:
    if x is None:
        return default
    if isinstance(x, bool):
        raise ValueError(f"'{name}' must be a number or null")
    try:
        return float(x)
    except (TypeError, ValueError) as e:
        raise ValueError(f"'{name}' must be a number or null") from e


def _optional_str(x: Any) -> Optional[str]:
    return None if x is None else str(x)


def parse_scenario_dict(d: Dict[str, Any], *, fallback_name: str) -> Scenario:
    """Build a validated Scenario from a decoded JSON object."""
    if not isinstance(d, dict):
        raise ValueError("Scenario JSON must be an object")

    name = d.get("name", fallback_name)
    if not isinstance(name, str) or not name:
        raise ValueError("'name' must be a non-empty string")

    defaults = DecayParams()
    params = DecayParams(
        vaccination_effectiveness=_as_coefficient(
            d.get("vaccination_effectiveness"),
            name="vaccination_effectiveness",
            default=defaults.vaccination_effectiveness,
        ),
        natural_decline=_as_coefficient(
            d.get("natural_decline"),
            name="natural_decline",
            default=defaults.natural_decline,
        ),
    ).validate()

    color = d.get("color")
    return Scenario(
        name=name,
        params=params,
        color=PALETTE[0] if color is None else str(color),
        label=_optional_str(d.get("label")),
        description=_optional_str(d.get("description")),
    )


def load_scenario(name: str) -> Scenario:
    """Load a scenario definition from `data/scenario_definitions/{name}.json`."""
    if not isinstance(name, str) or not name:
        raise ValueError("name must be a non-empty string")

    path = scenarios_dir() / f"{name}.json"
    if not path.exists():
        available = ", ".join(list_scenarios())
        raise FileNotFoundError(
            f"Scenario '{name}' not found at {path}. Available: {available or '(none)'}"
        )

    with path.open("r", encoding="utf-8") as f:
        d = json.load(f)

    return parse_scenario_dict(d, fallback_name=path.stem)


def load_all_scenarios() -> List[Scenario]:
    """Load all scenario definitions found under `data/scenario_definitions/*.json`."""
    return [load_scenario(name) for name in list_scenarios()]


@dataclass(frozen=True)
class ScenarioEntry:
    """One row of a ScenarioSet: a stable id plus the scenario it currently holds."""

    id: int
    scenario: Scenario


class ScenarioSet:
    """Ordered, editable collection of scenarios for side-by-side comparison.

    Labels are positional ("Scenario 1", "Scenario 2", ...), so removing an entry
    relabels everything after it. Ids are never reused.
    """

    def __init__(self, scenarios: List[Scenario] | None = None) -> None:
        self._entries: List[ScenarioEntry] = []
        self._next_id = 1
        if scenarios:
            if len(scenarios) > MAX_SCENARIOS:
                raise ScenarioLimitError(
                    f"At most {MAX_SCENARIOS} scenarios can be compared, got {len(scenarios)}"
                )
            for sc in scenarios:
                self._append(sc)
        else:
            self.add()

    def _append(self, scenario: Scenario) -> int:
        entry = ScenarioEntry(id=self._next_id, scenario=scenario)
        self._next_id += 1
        self._entries.append(entry)
        return entry.id

    def _index_of(self, scenario_id: int) -> int:
        for i, e in enumerate(self._entries):
            if e.id == scenario_id:
                return i
        raise KeyError(f"No scenario with id {scenario_id}")

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Scenario]:
        return iter(self.scenarios())

    @property
    def ids(self) -> List[int]:
        return [e.id for e in self._entries]

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= MAX_SCENARIOS

    def label(self, index: int) -> str:
        return f"Scenario {index + 1}"

    def get(self, scenario_id: int) -> Scenario:
        return self._entries[self._index_of(scenario_id)].scenario

    def scenarios(self) -> List[Scenario]:
        """Scenarios in display order, each labelled by position."""
        return [replace(e.scenario, label=self.label(i)) for i, e in enumerate(self._entries)]

    def add(self, params: DecayParams | None = None) -> int:
        """Append a scenario (default coefficients unless given) and return its id."""
        if self.is_full:
            raise ScenarioLimitError(f"At most {MAX_SCENARIOS} scenarios can be compared")
        params = (params if params is not None else DecayParams()).validate()
        n = len(self._entries)
        scenario = Scenario(name=f"scenario_{self._next_id}", params=params, color=PALETTE[n % len(PALETTE)])
        return self._append(scenario)

    def update(
        self,
        scenario_id: int,
        *,
        vaccination_effectiveness: float | None = None,
        natural_decline: float | None = None,
    ) -> Scenario:
        """Replace one or both coefficients of a scenario and return the new scenario."""
        i = self._index_of(scenario_id)
        old = self._entries[i].scenario
        changes = {}
        if vaccination_effectiveness is not None:
            changes["vaccination_effectiveness"] = float(vaccination_effectiveness)
        if natural_decline is not None:
            changes["natural_decline"] = float(natural_decline)
        params = replace(old.params, **changes).validate()

        new = replace(old, params=params)
        self._entries[i] = ScenarioEntry(id=scenario_id, scenario=new)
        return new

    def remove(self, scenario_id: int) -> None:
        """Drop a scenario. The last remaining scenario cannot be removed."""
        i = self._index_of(scenario_id)
        if len(self._entries) == 1:
            raise ValueError("Cannot remove the only remaining scenario")
        del self._entries[i]
