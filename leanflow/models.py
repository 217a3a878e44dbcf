"""
Lean Activity Data Models

Value objects read by the productivity and flow engines:
- WorkerRole: closed set of crew roles, with Other + custom name as escape hatch
- WorkerAssignment: a role and head count on one sub-step
- SubStep: a timed piece of an activity with its crew and equipment
- Activity: the planned work for one day, its shift and its sub-steps

All models are frozen. Records coming from the activity store (camelCase
dicts, possibly wrapped as {"id": ..., "task_data": {...}}) are parsed
leniently: missing numbers become 0, missing lists become empty, missing
shift settings fall back to the configured defaults.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from leanflow.config import Config
from leanflow.time_windows.models import MinuteSpan
from leanflow.utils.formatting import format_minutes, parse_time_of_day

logger = logging.getLogger(__name__)


class WorkerRole(Enum):
    """Crew roles on site. OTHER carries a free-text name on the assignment."""
    LABORER = "Laborer"
    MASON = "Mason"
    CARPENTER = "Carpenter"
    REBAR_WORKER = "RebarWorker"
    FOREMAN = "Foreman"
    WELDER = "Welder"
    OPERATOR = "Operator"
    DRIVER = "Driver"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label) -> Optional['WorkerRole']:
        """
        Resolve a stored role label, case-insensitively.

        Accepts the English labels and the Portuguese labels older records
        were saved with. Returns None for anything else.
        """
        if not label:
            return None
        key = str(label).strip().lower().replace(" ", "").replace("_", "")
        return _ROLE_LOOKUP.get(key)


_LEGACY_ROLE_LABELS = {
    "servente": WorkerRole.LABORER,
    "pedreiro": WorkerRole.MASON,
    "carpinteiro": WorkerRole.CARPENTER,
    "armador": WorkerRole.REBAR_WORKER,
    "encarregado": WorkerRole.FOREMAN,
    "soldador": WorkerRole.WELDER,
    "operador": WorkerRole.OPERATOR,
    "motorista": WorkerRole.DRIVER,
    "outro": WorkerRole.OTHER,
}

_ROLE_LOOKUP = {role.value.lower(): role for role in WorkerRole}
_ROLE_LOOKUP.update(_LEGACY_ROLE_LABELS)


def _first(record: Mapping[str, Any], *keys, default=None):
    """Value of the first key present with a non-None value"""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def _as_float(value, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_int(value, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _as_bool(value, default: bool = False) -> bool:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1", "yes"):
            return True
        if text in ("false", "0", "no", ""):
            return False
        return default
    if value is None:
        return default
    return bool(value)


def _nested_records(value, what: str) -> Tuple[Mapping[str, Any], ...]:
    """Object entries of a nested list; anything else is skipped with a warning"""
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        logger.warning(f"Ignoring {what}: expected a list, got {type(value).__name__}")
        return ()

    records = []
    for index, entry in enumerate(value):
        if not isinstance(entry, Mapping):
            logger.warning(f"Skipping {what} entry {index}: not an object ({type(entry).__name__})")
            continue
        records.append(entry)
    return tuple(records)


def _config_minutes(setting: str, fallback: int) -> int:
    return parse_time_of_day(getattr(Config, setting), default=fallback)


@dataclass(frozen=True)
class WorkerAssignment:
    """Head count for one role on a sub-step"""
    role: WorkerRole
    count: int
    custom_role: str = ""

    @property
    def effective_role(self) -> str:
        """
        Name used to aggregate man-hours.

        The custom name for OTHER (an empty string if none was given),
        the role label otherwise.
        """
        if self.role is WorkerRole.OTHER:
            return (self.custom_role or "").strip()
        return self.role.value

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'WorkerAssignment':
        record = record or {}
        label = record.get("role")
        role = WorkerRole.from_label(label)
        custom_role = str(_first(record, "customRole", "custom_role", default=""))

        if role is None:
            # Unknown label: keep the name so it still shows up in the summary
            role = WorkerRole.OTHER
            if label and not custom_role:
                custom_role = str(label)

        return cls(
            role=role,
            count=_as_int(record.get("count"), 0),
            custom_role=custom_role if role is WorkerRole.OTHER else "",
        )

    def to_record(self) -> Dict[str, Any]:
        record = {"role": self.role.value, "count": self.count}
        if self.role is WorkerRole.OTHER:
            record["customRole"] = self.custom_role
        return record


@dataclass(frozen=True)
class SubStep:
    """
    A timed slice of an activity.

    start_time/end_time are minutes after midnight. end_time <= start_time is
    tolerated: the step then counts zero hours.
    """
    id: str
    description: str
    start_time: int
    end_time: int
    workers: Tuple[WorkerAssignment, ...] = ()
    machinery_count: int = 0
    is_unproductive: bool = False
    produced_quantity: float = 0.0
    unit: str = field(default_factory=lambda: Config.DEFAULT_UNIT)

    @property
    def span(self) -> MinuteSpan:
        return MinuteSpan(self.start_time, self.end_time)

    @property
    def duration_hours(self) -> float:
        """Working time in hours, 0.0 for empty or inverted ranges"""
        return self.span.duration_hours

    @property
    def crew_size(self) -> int:
        return sum(w.count for w in self.workers)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'SubStep':
        record = record or {}
        workers = tuple(
            WorkerAssignment.from_record(w)
            for w in _nested_records(record.get("workers"), "workers")
        )
        # A missing or unreadable bound takes the other one: the step counts zero hours
        start_time = parse_time_of_day(_first(record, "startTime", "start_time"))
        end_time = parse_time_of_day(_first(record, "endTime", "end_time"))
        if start_time is None:
            start_time = end_time if end_time is not None else 0
        if end_time is None:
            end_time = start_time

        return cls(
            id=str(record.get("id", "")),
            description=str(record.get("description") or ""),
            start_time=start_time,
            end_time=end_time,
            workers=workers,
            machinery_count=_as_int(_first(record, "machinery", "machineryCount", "machinery_count"), 0),
            is_unproductive=_as_bool(_first(record, "isUnproductive", "is_unproductive")),
            produced_quantity=_as_float(_first(record, "producedQuantity", "produced_quantity"), 0.0),
            unit=str(record.get("unit") or Config.DEFAULT_UNIT),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "startTime": format_minutes(self.start_time),
            "endTime": format_minutes(self.end_time),
            "workers": [w.to_record() for w in self.workers],
            "machinery": self.machinery_count,
            "isUnproductive": self.is_unproductive,
            "producedQuantity": self.produced_quantity,
            "unit": self.unit,
        }

    def __repr__(self) -> str:
        flag = " [support]" if self.is_unproductive else ""
        return (
            f"SubStep({format_minutes(self.start_time)}-{format_minutes(self.end_time)} "
            f"{self.description!r}, crew={self.crew_size}{flag})"
        )


@dataclass(frozen=True)
class Activity:
    """
    One planned activity for a day: target output, shift and sub-steps.

    Shift and lunch settings belong to the activity; the configured defaults
    only fill in values a record leaves out.
    """
    id: str
    discipline: str = ""
    service: str = ""
    location: str = ""
    date: str = ""
    target_quantity: float = 0.0
    unit: str = ""
    shift_start: int = field(default_factory=lambda: _config_minutes("DEFAULT_SHIFT_START", 420))
    shift_end: int = field(default_factory=lambda: _config_minutes("DEFAULT_SHIFT_END", 1020))
    lunch_start: int = field(default_factory=lambda: _config_minutes("DEFAULT_LUNCH_START", 720))
    lunch_end: int = field(default_factory=lambda: _config_minutes("DEFAULT_LUNCH_END", 780))
    analysis_interval_minutes: int = field(default_factory=Config.analysis_interval)
    sub_steps: Tuple[SubStep, ...] = ()
    # Stored narrative reports ({"date", "text"}), newest first; carried through untouched
    ai_suggestions: Tuple[Dict[str, Any], ...] = field(default=(), compare=False)

    def sorted_sub_steps(self) -> Tuple[SubStep, ...]:
        """Sub-steps ordered by start time; ties keep their stored order"""
        return tuple(sorted(self.sub_steps, key=lambda s: s.start_time))

    @property
    def shift_span(self) -> MinuteSpan:
        return MinuteSpan(self.shift_start, self.shift_end)

    @property
    def lunch_span(self) -> MinuteSpan:
        return MinuteSpan(self.lunch_start, self.lunch_end)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Activity':
        """
        Build an Activity from a stored record.

        Accepts either the flat activity dict or the table row shape
        {"id": ..., "task_data": {...}} where the row id wins.
        """
        record = record or {}
        if isinstance(record.get("task_data"), Mapping):
            row_id = record.get("id")
            record = dict(record["task_data"])
            if row_id is not None:
                record["id"] = row_id

        def minutes(keys, setting, fallback):
            value = _first(record, *keys)
            return parse_time_of_day(value, default=_config_minutes(setting, fallback))

        interval = _first(record, "analysisInterval", "analysisIntervalMinutes", "analysis_interval_minutes")

        sub_steps = tuple(
            SubStep.from_record(s)
            for s in _nested_records(_first(record, "subtasks", "subSteps", "sub_steps"), "sub-steps")
        )
        suggestions = _nested_records(_first(record, "aiSuggestions", "ai_suggestions"), "report history")

        return cls(
            id=str(record.get("id", "")),
            discipline=str(record.get("discipline") or ""),
            service=str(record.get("service") or ""),
            location=str(record.get("location") or ""),
            date=str(record.get("date") or ""),
            target_quantity=_as_float(_first(record, "quantity", "targetQuantity", "target_quantity"), 0.0),
            unit=str(record.get("unit") or ""),
            shift_start=minutes(("shiftStartTime", "shiftStart", "shift_start"), "DEFAULT_SHIFT_START", 420),
            shift_end=minutes(("shiftEndTime", "shiftEnd", "shift_end"), "DEFAULT_SHIFT_END", 1020),
            lunch_start=minutes(("lunchStartTime", "lunchStart", "lunch_start"), "DEFAULT_LUNCH_START", 720),
            lunch_end=minutes(("lunchEndTime", "lunchEnd", "lunch_end"), "DEFAULT_LUNCH_END", 780),
            analysis_interval_minutes=_as_int(interval, Config.analysis_interval()),
            sub_steps=sub_steps,
            ai_suggestions=tuple(dict(s) for s in suggestions),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "discipline": self.discipline,
            "service": self.service,
            "location": self.location,
            "date": self.date,
            "quantity": self.target_quantity,
            "unit": self.unit,
            "shiftStartTime": format_minutes(self.shift_start),
            "shiftEndTime": format_minutes(self.shift_end),
            "lunchStartTime": format_minutes(self.lunch_start),
            "lunchEndTime": format_minutes(self.lunch_end),
            "analysisInterval": self.analysis_interval_minutes,
            "subtasks": [s.to_record() for s in self.sub_steps],
            "aiSuggestions": [dict(s) for s in self.ai_suggestions],
        }

    def __repr__(self) -> str:
        return (
            f"Activity(id={self.id!r}, service={self.service!r}, "
            f"shift={format_minutes(self.shift_start)}-{format_minutes(self.shift_end)}, "
            f"sub_steps={len(self.sub_steps)})"
        )
