"""
Flow Analysis for Lean Construction Activities

Splits an activity's shift into fixed analysis windows, classifies each window
and merges consecutive windows with the same classification into blocks:

- Lunch:        window midpoint inside the scheduled break (always wins)
- Idle:         no sub-step running
- Unproductive: only support sub-steps running
- Bottleneck:   more than one productive sub-step running at once

A window with exactly one productive sub-step is normal work and is not
reported.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from leanflow.config import Config
from leanflow.models import Activity, SubStep
from leanflow.time_windows.filters import filter_active_sub_steps, split_by_productivity
from leanflow.time_windows.models import MinuteSpan, iter_analysis_windows
from leanflow.utils.formatting import format_minutes, format_time_range

logger = logging.getLogger(__name__)


class FlowStatus(Enum):
    LUNCH = "Lunch"
    IDLE = "Idle"
    UNPRODUCTIVE = "Unproductive"
    BOTTLENECK = "Bottleneck"


class Severity(Enum):
    """Visual priority of a block: bad > warn > neutral"""
    BAD = "bad"
    WARN = "warn"
    NEUTRAL = "neutral"


LUNCH_MESSAGE = "scheduled break"
IDLE_MESSAGE = "unplanned stoppage"
UNPRODUCTIVE_PREFIX = "support activity: "
BOTTLENECK_PREFIX = "conflict: "
DESCRIPTION_SEPARATOR = " + "

# (status, message, severity) for one window; None means normal work
WindowClass = Optional[Tuple[FlowStatus, str, Severity]]


@dataclass(frozen=True)
class FlowBlock:
    """A run of consecutive windows sharing one classification, [start_time, end_time)"""
    start_time: int
    end_time: int
    status: FlowStatus
    message: str
    severity: Severity

    @property
    def duration_minutes(self) -> int:
        return max(0, self.end_time - self.start_time)

    def to_dict(self) -> Dict[str, object]:
        """Plain, serializable view for presentation"""
        return {
            'start_time': format_minutes(self.start_time),
            'end_time': format_minutes(self.end_time),
            'time': format_time_range(self.start_time, self.end_time),
            'status': self.status.value,
            'message': self.message,
            'severity': self.severity.value,
            'duration_minutes': self.duration_minutes
        }

    def __repr__(self) -> str:
        return (
            f"FlowBlock({format_time_range(self.start_time, self.end_time)} "
            f"{self.status.value}: {self.message})"
        )


def _join_descriptions(sub_steps: Sequence[SubStep]) -> str:
    return DESCRIPTION_SEPARATOR.join(step.description for step in sub_steps)


def classify_window(
    window: MinuteSpan,
    sub_steps: Sequence[SubStep],
    lunch: MinuteSpan
) -> WindowClass:
    """
    Classify one analysis window.

    Args:
        window: The [t, t + interval) window
        sub_steps: Sub-steps sorted by start time
        lunch: Scheduled break

    Returns:
        (status, message, severity), or None when exactly one productive
        sub-step is running

    Precedence:
    - Lunch if lunch.start <= window midpoint < lunch.end
    - Idle if nothing overlaps the window
    - Unproductive if everything overlapping is a support step
    - Bottleneck if more than one productive step overlaps
    """
    if lunch.contains(window.midpoint):
        return FlowStatus.LUNCH, LUNCH_MESSAGE, Severity.NEUTRAL

    active = filter_active_sub_steps(sub_steps, window)
    if not active:
        return FlowStatus.IDLE, IDLE_MESSAGE, Severity.BAD

    productive, _ = split_by_productivity(active)

    if not productive:
        return (
            FlowStatus.UNPRODUCTIVE,
            UNPRODUCTIVE_PREFIX + _join_descriptions(active),
            Severity.WARN
        )

    if len(productive) > 1:
        return (
            FlowStatus.BOTTLENECK,
            BOTTLENECK_PREFIX + _join_descriptions(productive),
            Severity.BAD
        )

    return None


def resolve_interval(activity: Activity) -> int:
    """
    Analysis interval for an activity, falling back to the configured default
    when the stored value is not a positive whole number (60.0 counts as 60).
    """
    interval = activity.analysis_interval_minutes
    if isinstance(interval, (int, float)) and not isinstance(interval, bool):
        if interval > 0 and float(interval).is_integer():
            return int(interval)

    fallback = Config.analysis_interval()
    logger.warning(
        f"Activity {activity.id} has analysis interval {interval!r}, "
        f"using default of {fallback} minutes"
    )
    return fallback


def analyze_flow(activity: Activity) -> List[FlowBlock]:
    """
    Segment the activity's shift into anomaly blocks.

    Walks t = shift_start, shift_start + interval, ... while t < shift_end,
    classifies each [t, t + interval) window and merges runs of windows with
    equal (status, message). The last window is not clipped to shift_end.

    Args:
        activity: Activity snapshot (not modified)

    Returns:
        Chronological, non-overlapping list of FlowBlock. Empty when the
        activity has no sub-steps.

    Edge Cases:
    - No sub-steps: [] rather than one shift-long Idle block
    - shift_end <= shift_start: []
    - Lunch outside the shift: never matches, no Lunch blocks
    - Inverted sub-step ranges: overlap-tested with their raw bounds
    """
    if not activity.sub_steps:
        return []

    sub_steps = activity.sorted_sub_steps()
    interval = resolve_interval(activity)
    lunch = activity.lunch_span

    blocks: List[FlowBlock] = []
    current: Optional[FlowBlock] = None

    for window in iter_analysis_windows(activity.shift_start, activity.shift_end, interval):
        classification = classify_window(window, sub_steps, lunch)

        if classification is None:
            if current is not None:
                blocks.append(current)
                current = None
            continue

        status, message, severity = classification

        if current is not None and current.status == status and current.message == message:
            current = FlowBlock(current.start_time, window.end, status, message, severity)
        else:
            if current is not None:
                blocks.append(current)
            current = FlowBlock(window.start, window.end, status, message, severity)

    if current is not None:
        blocks.append(current)

    logger.debug(f"Flow analysis for activity {activity.id}: {len(blocks)} blocks")

    return blocks
