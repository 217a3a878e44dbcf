"""
conftest.py — Shared pytest fixtures for the leanflow test suite.

All tests are pure unit tests over in-memory activities; nothing touches the
network or an activity store.

Import-path bootstrapping:
    The repository root is inserted into sys.path so that ``leanflow.*`` and
    ``app`` resolve regardless of where pytest is invoked.
"""

import os
import sys

import pytest

_ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from leanflow.models import Activity, SubStep, WorkerAssignment, WorkerRole  # noqa: E402
from leanflow.utils.formatting import parse_time_of_day  # noqa: E402


def hm(text):
    """'HH:MM' -> minutes after midnight"""
    return parse_time_of_day(text, strict=True)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

@pytest.fixture
def make_step():
    """
    Factory for SubStep objects with "HH:MM" times.

    Usage: make_step("Concreting", "09:00", "10:00", workers=[(WorkerRole.MASON, 4)])
    """
    counter = {"n": 0}

    def _make(description, start, end, workers=(), machinery=0, unproductive=False,
              produced=0.0, unit="un"):
        counter["n"] += 1
        assignments = []
        for entry in workers:
            if isinstance(entry, WorkerAssignment):
                assignments.append(entry)
            elif len(entry) == 3:
                assignments.append(WorkerAssignment(entry[0], entry[1], entry[2]))
            else:
                assignments.append(WorkerAssignment(entry[0], entry[1]))
        return SubStep(
            id=f"s{counter['n']}",
            description=description,
            start_time=hm(start),
            end_time=hm(end),
            workers=tuple(assignments),
            machinery_count=machinery,
            is_unproductive=unproductive,
            produced_quantity=produced,
            unit=unit,
        )

    return _make


@pytest.fixture
def make_activity():
    """
    Factory for Activity objects. Defaults: shift 07:00-17:00, lunch
    12:00-13:00, 30 minute windows, target 10 m³.
    """
    def _make(sub_steps=(), shift=("07:00", "17:00"), lunch=("12:00", "13:00"),
              interval=30, target=10.0, unit="m³", activity_id="act-1"):
        return Activity(
            id=activity_id,
            discipline="Obra de Arte Especial",
            service="Pier concreting",
            location="Viaduct V2",
            date="2024-05-02",
            target_quantity=target,
            unit=unit,
            shift_start=hm(shift[0]),
            shift_end=hm(shift[1]),
            lunch_start=hm(lunch[0]),
            lunch_end=hm(lunch[1]),
            analysis_interval_minutes=interval,
            sub_steps=tuple(sub_steps),
        )

    return _make


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------

@pytest.fixture
def idle_scenario(make_activity, make_step):
    """
    One productive step 07:00-09:00 with 4 Masons, target 10 m³.
    productive Mh = 2 h × 4 = 8, RUP = 0.80, rate = 1.25.
    """
    return make_activity([
        make_step("Masonry", "07:00", "09:00", workers=[(WorkerRole.MASON, 4)]),
    ])


@pytest.fixture
def bottleneck_scenario(make_activity, make_step):
    """Concreting 09:00-10:00 and Rebar 09:30-10:30, both productive."""
    return make_activity([
        make_step("Concreting", "09:00", "10:00", workers=[(WorkerRole.MASON, 2)]),
        make_step("Rebar", "09:30", "10:30", workers=[(WorkerRole.REBAR_WORKER, 2)]),
    ])


@pytest.fixture
def activity_record():
    """A stored activity record in the store's row shape."""
    return {
        "id": "row-7",
        "task_data": {
            "id": "inner-id",
            "discipline": "Drenagem",
            "service": "Culvert",
            "location": "km 12",
            "date": "2024-05-03",
            "quantity": "12.5",
            "unit": "m",
            "shiftStartTime": "07:00",
            "shiftEndTime": "16:00",
            "lunchStartTime": "11:30",
            "lunchEndTime": "12:30",
            "analysisInterval": 15,
            "subtasks": [
                {
                    "id": "b",
                    "description": "Pipe laying",
                    "startTime": "08:00",
                    "endTime": "11:00",
                    "workers": [
                        {"role": "Pedreiro", "count": 2},
                        {"role": "Outro", "customRole": "Pipe fitter", "count": 1},
                    ],
                    "machinery": 1,
                    "isUnproductive": False,
                    "producedQuantity": 12,
                    "unit": "m",
                },
                {
                    "id": "a",
                    "description": "Mobilization",
                    "startTime": "07:00",
                    "endTime": "08:00",
                    "workers": [{"role": "Servente", "count": 3}],
                    "isUnproductive": True,
                },
            ],
        },
    }
