"""
Time Window Filtering Utilities

Functions to select the sub-steps that are running inside an analysis window.
"""

from typing import List, Sequence, Tuple

from leanflow.models import SubStep
from .models import MinuteSpan


def filter_active_sub_steps(sub_steps: Sequence[SubStep], window: MinuteSpan) -> List[SubStep]:
    """
    Return the sub-steps whose span overlaps the window, in input order.

    Uses the half-open test start < window.end and end > window.start, so a
    step ending exactly when the window starts is not active. Degenerate steps
    (end <= start) are tested with their raw bounds.

    Example:
        >>> active = filter_active_sub_steps(activity.sorted_sub_steps(), MinuteSpan(570, 600))
    """
    return [step for step in sub_steps if window.overlaps_with(step.span)]


def split_by_productivity(sub_steps: Sequence[SubStep]) -> Tuple[List[SubStep], List[SubStep]]:
    """
    Split sub-steps into (productive, unproductive) lists, preserving order.
    """
    productive = []
    unproductive = []
    for step in sub_steps:
        if step.is_unproductive:
            unproductive.append(step)
        else:
            productive.append(step)
    return productive, unproductive
