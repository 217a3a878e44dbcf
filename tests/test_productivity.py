"""
test_productivity.py — Unit tests for compute_metrics and the ratio helpers.

Tests cover:
  - man-hour accumulation into productive / unproductive buckets
  - machine hours counted on productive sub-steps only
  - resource summary keyed by effective role name (custom names for Other)
  - RUP and productivity rate, division-by-zero guards, no early rounding
  - inverted / zero-length sub-steps contributing nothing
"""

from dataclasses import replace

import pytest

from leanflow.calculations.productivity import (
    ActivityMetrics,
    calculate_productivity_rate,
    calculate_rup,
    compute_metrics,
)
from leanflow.models import WorkerRole


class TestReferenceScenario:
    """07:00-09:00, 4 Masons, target 10 m³."""

    def test_productive_man_hours(self, idle_scenario):
        """2 h × 4 workers = 8 Mh."""
        metrics = compute_metrics(idle_scenario)
        assert metrics.productive_man_hours == pytest.approx(8.0)
        assert metrics.unproductive_man_hours == 0.0

    def test_rup_and_rate(self, idle_scenario):
        """RUP = 8 / 10 = 0.80 Mh/m³, rate = 10 / 8 = 1.25 m³/Mh."""
        metrics = compute_metrics(idle_scenario)
        assert metrics.rup == pytest.approx(0.8)
        assert metrics.productivity_rate == pytest.approx(1.25)

    def test_display_values_are_two_decimals(self, idle_scenario):
        display = compute_metrics(idle_scenario).to_display_dict()
        assert display["rup"] == "0.80"
        assert display["productivity_rate"] == "1.25"
        assert display["productive_man_hours"] == "8.00"

    def test_resource_summary(self, idle_scenario):
        metrics = compute_metrics(idle_scenario)
        assert metrics.resource_summary == {"Mason": pytest.approx(8.0)}


class TestManHourBuckets:

    @pytest.mark.parametrize("unproductive", [False, True])
    def test_single_step_identity(self, make_activity, make_step, unproductive):
        """Duration 1.5 h, 3 workers → 4.5 Mh in exactly one bucket."""
        activity = make_activity([
            make_step("Step", "08:00", "09:30", workers=[(WorkerRole.CARPENTER, 3)],
                      unproductive=unproductive),
        ])
        metrics = compute_metrics(activity)
        if unproductive:
            assert metrics.unproductive_man_hours == pytest.approx(4.5)
            assert metrics.productive_man_hours == 0.0
        else:
            assert metrics.productive_man_hours == pytest.approx(4.5)
            assert metrics.unproductive_man_hours == 0.0

    def test_mixed_steps_and_roles(self, make_activity, make_step):
        """
        Productive 07:00-10:00: 4 Mason + 1 Operator → 12 + 3 = 15 Mh.
        Support 10:00-10:30: 2 Laborer → 1 Mh.
        Resource summary sums across both buckets.
        """
        activity = make_activity([
            make_step("Concreting", "07:00", "10:00",
                      workers=[(WorkerRole.MASON, 4), (WorkerRole.OPERATOR, 1)]),
            make_step("Cleanup", "10:00", "10:30",
                      workers=[(WorkerRole.LABORER, 2)], unproductive=True),
        ])
        metrics = compute_metrics(activity)
        assert metrics.productive_man_hours == pytest.approx(15.0)
        assert metrics.unproductive_man_hours == pytest.approx(1.0)
        assert metrics.total_man_hours == pytest.approx(16.0)
        assert metrics.resource_summary == {
            "Mason": pytest.approx(12.0),
            "Operator": pytest.approx(3.0),
            "Laborer": pytest.approx(1.0),
        }

    def test_same_role_on_several_steps_accumulates(self, make_activity, make_step):
        activity = make_activity([
            make_step("A", "07:00", "08:00", workers=[(WorkerRole.MASON, 2)]),
            make_step("B", "08:00", "09:00", workers=[(WorkerRole.MASON, 1)], unproductive=True),
            make_step("C", "09:00", "09:30", workers=[(WorkerRole.MASON, 2), (WorkerRole.MASON, 2)]),
        ])
        metrics = compute_metrics(activity)
        assert metrics.resource_summary["Mason"] == pytest.approx(2.0 + 1.0 + 2.0)


class TestMachineHours:

    def test_productive_steps_count(self, make_activity, make_step):
        """2 machines × 2.5 h = 5 machine hours."""
        activity = make_activity([
            make_step("Earthworks", "07:00", "09:30", workers=[(WorkerRole.OPERATOR, 2)], machinery=2),
        ])
        assert compute_metrics(activity).total_machine_hours == pytest.approx(5.0)

    def test_support_steps_excluded(self, make_activity, make_step):
        """Equipment on an unproductive step is not added to the machine total."""
        activity = make_activity([
            make_step("Mobilization", "07:00", "08:00", machinery=3, unproductive=True),
            make_step("Excavation", "08:00", "09:00", machinery=1),
        ])
        assert compute_metrics(activity).total_machine_hours == pytest.approx(1.0)


class TestCustomRoles:

    def test_other_uses_custom_name(self, make_activity, make_step):
        activity = make_activity([
            make_step("Scaffold", "07:00", "08:00",
                      workers=[(WorkerRole.OTHER, 2, "Scaffolder")]),
        ])
        assert compute_metrics(activity).resource_summary == {"Scaffolder": pytest.approx(2.0)}

    def test_other_without_name_uses_empty_key(self, make_activity, make_step):
        activity = make_activity([
            make_step("Scaffold", "07:00", "08:00", workers=[(WorkerRole.OTHER, 2, "")]),
        ])
        assert compute_metrics(activity).resource_summary == {"": pytest.approx(2.0)}

    def test_distinct_custom_names_stay_separate(self, make_activity, make_step):
        activity = make_activity([
            make_step("Mixed", "07:00", "08:00", workers=[
                (WorkerRole.OTHER, 1, "Scaffolder"),
                (WorkerRole.OTHER, 1, "Surveyor"),
            ]),
        ])
        summary = compute_metrics(activity).resource_summary
        assert set(summary) == {"Scaffolder", "Surveyor"}


class TestDegenerateInput:

    @pytest.mark.parametrize("start,end", [("10:00", "09:00"), ("10:00", "10:00")])
    def test_inverted_or_empty_step_adds_nothing(self, make_activity, make_step, start, end):
        activity = make_activity([
            make_step("Broken", start, end, workers=[(WorkerRole.MASON, 5)], machinery=2),
        ])
        metrics = compute_metrics(activity)
        assert metrics.productive_man_hours == 0.0
        assert metrics.total_machine_hours == 0.0
        assert metrics.resource_summary == {"Mason": 0.0}

    def test_zero_target_gives_zero_rup(self, idle_scenario):
        activity = replace(idle_scenario, target_quantity=0.0)
        metrics = compute_metrics(activity)
        assert metrics.rup == 0.0
        assert metrics.productivity_rate == 0.0

    def test_no_sub_steps(self, make_activity):
        metrics = compute_metrics(make_activity([]))
        assert metrics.productive_man_hours == 0.0
        assert metrics.rup == 0.0
        assert metrics.productivity_rate == 0.0
        assert metrics.resource_summary == {}

    def test_no_crew_gives_zero_rate(self, make_activity, make_step):
        activity = make_activity([make_step("Unstaffed", "07:00", "09:00")])
        metrics = compute_metrics(activity)
        assert metrics.productivity_rate == 0.0
        assert metrics.rup == 0.0


class TestPrecision:

    def test_rup_times_target_recovers_man_hours(self, make_activity, make_step):
        """7 workers × 1h10 = 8.1666… Mh over 3 units: rup × 3 ≈ Mh."""
        activity = make_activity([
            make_step("Formwork", "07:00", "08:10", workers=[(WorkerRole.CARPENTER, 7)]),
        ], target=3.0)
        metrics = compute_metrics(activity)
        assert metrics.rup * 3.0 == pytest.approx(metrics.productive_man_hours)
        # not rounded to two decimals internally
        assert metrics.rup != round(metrics.rup, 2)

    def test_produced_quantity_is_totalled(self, make_activity, make_step):
        activity = make_activity([
            make_step("A", "07:00", "08:00", produced=2.5),
            make_step("B", "08:00", "09:00", produced=4.0),
        ])
        assert compute_metrics(activity).total_produced == pytest.approx(6.5)


class TestPurity:

    def test_repeated_calls_are_equal(self, bottleneck_scenario):
        assert compute_metrics(bottleneck_scenario) == compute_metrics(bottleneck_scenario)

    def test_to_dict_is_a_copy(self, idle_scenario):
        metrics = compute_metrics(idle_scenario)
        data = metrics.to_dict()
        data["resource_summary"]["Mason"] = 0.0
        assert metrics.resource_summary["Mason"] == pytest.approx(8.0)

    def test_result_type(self, idle_scenario):
        assert isinstance(compute_metrics(idle_scenario), ActivityMetrics)


class TestRatioHelpers:

    def test_rup(self):
        assert calculate_rup(8.0, 10.0) == pytest.approx(0.8)

    @pytest.mark.parametrize("quantity", [0, -1.0])
    def test_rup_guard(self, quantity):
        assert calculate_rup(8.0, quantity) == 0.0

    def test_rate(self):
        assert calculate_productivity_rate(10.0, 8.0) == pytest.approx(1.25)

    def test_rate_guard(self):
        assert calculate_productivity_rate(10.0, 0.0) == 0.0
