"""
Time Window Models

Minute-of-day spans used by the flow analysis:
- Sub-step working spans (possibly degenerate)
- Fixed-size analysis windows walked across a shift
"""

from dataclasses import dataclass
from typing import Iterator

from leanflow.utils.formatting import format_time_range


@dataclass(frozen=True)
class MinuteSpan:
    """
    A half-open [start, end) range of minutes after midnight.

    Unlike a shift, a span is allowed to be empty or inverted (end <= start);
    it then has zero duration but still takes part in overlap tests with its
    raw bounds.
    """
    start: int
    end: int

    @property
    def duration_minutes(self) -> int:
        """Span length in minutes, never negative"""
        return max(0, self.end - self.start)

    @property
    def duration_hours(self) -> float:
        """Span length in hours, never negative"""
        return self.duration_minutes / 60.0

    @property
    def midpoint(self) -> float:
        return self.start + (self.end - self.start) / 2

    def contains(self, minute: float) -> bool:
        """Check if a minute falls within [start, end)"""
        return self.start <= minute < self.end

    def overlaps_with(self, other: 'MinuteSpan') -> bool:
        """Half-open overlap test: other starts before this ends and ends after this starts"""
        return other.start < self.end and other.end > self.start

    def __repr__(self) -> str:
        return f"MinuteSpan({format_time_range(self.start, self.end)})"


def iter_analysis_windows(shift_start: int, shift_end: int, interval: int) -> Iterator[MinuteSpan]:
    """
    Walk a shift in fixed steps.

    Yields [t, t + interval) for t = shift_start, shift_start + interval, ...
    while t < shift_end. The last window is not clipped, so it runs past
    shift_end when interval doesn't divide the shift length. A shift with
    shift_end <= shift_start yields nothing.

    Args:
        shift_start: Shift start, minutes after midnight
        shift_end: Shift end, minutes after midnight
        interval: Window size in minutes (must be positive)

    Example:
        >>> [w.start for w in iter_analysis_windows(420, 540, 30)]
        [420, 450, 480, 510]
    """
    if interval <= 0:
        raise ValueError(f"Analysis interval must be positive, got {interval}")

    t = shift_start
    while t < shift_end:
        yield MinuteSpan(t, t + interval)
        t += interval
