import sys
from pathlib import Path
# Go up to the parent directory (..), then down into "src"
# This adds "../src" to the python search path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import unittest

import pytest

from mortality.models import DecayParams
from mortality.scenarios import (
    MAX_SCENARIOS,
    PALETTE,
    Scenario,
    ScenarioLimitError,
    ScenarioSet,
    list_scenarios,
    load_all_scenarios,
    load_scenario,
    parse_scenario_dict,
    scenarios_dir,
)


def test_scenarios_dir_exists():
    assert scenarios_dir().is_dir()


def test_list_scenarios_sorted():
    names = list_scenarios()
    assert names == sorted(names)
    assert {"baseline", "no_vaccination", "scale_up", "upper_bound"} <= set(names)


def test_load_baseline():
    sc = load_scenario("baseline")
    assert sc.name == "baseline"
    assert sc.params == DecayParams(vaccination_effectiveness=0.15, natural_decline=0.05)
    assert sc.color == "rgb(75, 192, 192)"
    assert sc.display_name == "Baseline"


def test_load_all_matches_listing():
    assert [sc.name for sc in load_all_scenarios()] == list_scenarios()


def test_unknown_scenario_lists_available():
    with pytest.raises(FileNotFoundError, match="baseline"):
        load_scenario("does_not_exist")


def test_empty_name_rejected():
    with pytest.raises(ValueError):
        load_scenario("")


def test_parse_defaults_missing_fields():
    sc = parse_scenario_dict({}, fallback_name="from_file")
    assert sc.name == "from_file"
    assert sc.params == DecayParams()
    assert sc.color == PALETTE[0]
    assert sc.label is None
    assert sc.display_name == "from_file"


@pytest.mark.parametrize("d", [
    [],
    {"name": ""},
    {"vaccination_effectiveness": 0.6},
    {"natural_decline": -0.01},
    {"natural_decline": "lots"},
    {"vaccination_effectiveness": True},
])
def test_parse_rejects_bad_definitions(d):
    with pytest.raises(ValueError):
        parse_scenario_dict(d, fallback_name="bad")


class TestScenarioSet(unittest.TestCase):

    def test_starts_with_one_default_scenario(self):
        s = ScenarioSet()
        self.assertEqual(len(s), 1)
        only = s.scenarios()[0]
        self.assertEqual(only.params, DecayParams())
        self.assertEqual(only.color, PALETTE[0])
        self.assertEqual(only.label, "Scenario 1")

    def test_add_cycles_palette(self):
        s = ScenarioSet()
        for _ in range(MAX_SCENARIOS - 1):
            s.add()
        self.assertEqual([sc.color for sc in s], list(PALETTE))
        self.assertEqual([sc.label for sc in s], [f"Scenario {i}" for i in range(1, 6)])
        self.assertTrue(s.is_full)

    def test_add_past_limit_raises(self):
        s = ScenarioSet()
        for _ in range(MAX_SCENARIOS - 1):
            s.add()
        with self.assertRaises(ScenarioLimitError):
            s.add()

    def test_add_with_params_validates(self):
        s = ScenarioSet()
        with self.assertRaises(ValueError):
            s.add(DecayParams(vaccination_effectiveness=0.9))
        self.assertEqual(len(s), 1)

    def test_update_replaces_coefficients(self):
        s = ScenarioSet()
        sid = s.ids[0]
        new = s.update(sid, vaccination_effectiveness=0.3)
        self.assertEqual(new.params.vaccination_effectiveness, 0.3)
        self.assertEqual(new.params.natural_decline, 0.05)
        self.assertEqual(s.get(sid).params, new.params)

    def test_update_out_of_range_keeps_old_value(self):
        s = ScenarioSet()
        sid = s.ids[0]
        with self.assertRaises(ValueError):
            s.update(sid, natural_decline=0.5)
        self.assertEqual(s.get(sid).params, DecayParams())

    def test_remove_relabels_and_never_reuses_ids(self):
        s = ScenarioSet()
        second = s.add(DecayParams(vaccination_effectiveness=0.2))
        third = s.add(DecayParams(vaccination_effectiveness=0.4))
        s.remove(second)
        self.assertEqual(s.ids, [1, third])
        self.assertEqual(s.scenarios()[1].label, "Scenario 2")
        self.assertEqual(s.scenarios()[1].params.vaccination_effectiveness, 0.4)

        fourth = s.add()
        self.assertNotIn(fourth, (1, second, third))

    def test_cannot_remove_last(self):
        s = ScenarioSet()
        with self.assertRaises(ValueError):
            s.remove(s.ids[0])

    def test_unknown_id(self):
        s = ScenarioSet()
        with self.assertRaises(KeyError):
            s.update(99, natural_decline=0.1)
        with self.assertRaises(KeyError):
            s.remove(99)

    def test_from_loaded_scenarios(self):
        loaded = [load_scenario("baseline"), load_scenario("scale_up")]
        s = ScenarioSet(loaded)
        self.assertEqual([sc.params for sc in s], [sc.params for sc in loaded])

    def test_too_many_initial_scenarios(self):
        many = [Scenario(name=f"s{i}", params=DecayParams()) for i in range(MAX_SCENARIOS + 1)]
        with self.assertRaises(ScenarioLimitError):
            ScenarioSet(many)


if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
