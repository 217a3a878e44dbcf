"""
Productivity Calculator for Lean Construction Activities

Man-hour accounting and productivity ratios for one activity:
- Productive / unproductive man-hours: crew size × sub-step duration
- Machine hours: equipment count × duration, productive sub-steps only
- RUP = productive man-hours / target quantity  (Mh per unit, lower is better)
- Productivity rate = target quantity / productive man-hours  (units per Mh)
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Union

from leanflow.models import Activity
from leanflow.utils.formatting import format_hours, format_ratio

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityMetrics:
    """Container for productivity calculation results (full precision)"""
    productive_man_hours: float
    unproductive_man_hours: float
    total_machine_hours: float
    rup: float
    productivity_rate: float
    resource_summary: Dict[str, float] = field(default_factory=dict)
    total_produced: float = 0.0
    target_quantity: float = 0.0
    unit: str = ""

    @property
    def total_man_hours(self) -> float:
        return self.productive_man_hours + self.unproductive_man_hours

    def to_dict(self) -> Dict[str, object]:
        """Convert to plain dictionary, values unrounded"""
        return {
            'productive_man_hours': self.productive_man_hours,
            'unproductive_man_hours': self.unproductive_man_hours,
            'total_machine_hours': self.total_machine_hours,
            'rup': self.rup,
            'productivity_rate': self.productivity_rate,
            'resource_summary': dict(self.resource_summary),
            'total_produced': self.total_produced,
            'target_quantity': self.target_quantity,
            'unit': self.unit
        }

    def to_display_dict(self) -> Dict[str, object]:
        """Convert to two-decimal strings for display"""
        return {
            'productive_man_hours': format_hours(self.productive_man_hours),
            'unproductive_man_hours': format_hours(self.unproductive_man_hours),
            'total_machine_hours': format_hours(self.total_machine_hours),
            'rup': format_ratio(self.rup),
            'productivity_rate': format_ratio(self.productivity_rate),
            'resource_summary': {
                role: format_hours(hours) for role, hours in self.resource_summary.items()
            },
            'total_produced': format_ratio(self.total_produced),
            'target_quantity': format_ratio(self.target_quantity),
            'unit': self.unit
        }


def calculate_rup(
    productive_man_hours: Union[float, Decimal],
    quantity: Union[float, Decimal]
) -> float:
    """
    Calculate RUP (man-hours per unit of output).

    Args:
        productive_man_hours: Man-hours spent on productive sub-steps
        quantity: Output the man-hours are measured against

    Returns:
        RUP, or 0.0 when quantity is not positive

    Example:
        >>> calculate_rup(8.0, 10.0)
        0.8
    """
    quantity = float(quantity)
    if quantity <= 0:
        return 0.0
    return float(productive_man_hours) / quantity


def calculate_productivity_rate(
    quantity: Union[float, Decimal],
    productive_man_hours: Union[float, Decimal]
) -> float:
    """
    Calculate productivity rate (units of output per man-hour).

    Args:
        quantity: Output
        productive_man_hours: Man-hours spent on productive sub-steps

    Returns:
        Productivity rate, or 0.0 when there are no productive man-hours

    Example:
        >>> calculate_productivity_rate(10.0, 8.0)
        1.25
    """
    productive_man_hours = float(productive_man_hours)
    if productive_man_hours <= 0:
        return 0.0
    return float(quantity) / productive_man_hours


def compute_metrics(activity: Activity) -> ActivityMetrics:
    """
    Aggregate man-hours, machine hours and productivity ratios for an activity.

    For each sub-step, duration = max(0, end - start) in hours. Each worker
    assignment adds duration × count to its role in the resource summary and
    to the productive or unproductive bucket depending on the step's flag.
    Machine hours are only accumulated on productive steps; equipment sitting
    on a support step is not counted.

    Ratios are measured against the activity's target quantity and are not
    rounded here; use ActivityMetrics.to_display_dict() for display.

    Args:
        activity: Activity snapshot (not modified)

    Returns:
        ActivityMetrics

    Example:
        >>> metrics = compute_metrics(activity)
        >>> print(f"RUP: {metrics.rup:.2f} Mh/{activity.unit}")
    """
    productive_man_hours = 0.0
    unproductive_man_hours = 0.0
    total_machine_hours = 0.0
    total_produced = 0.0
    resource_summary: Dict[str, float] = {}

    for step in activity.sub_steps:
        hours = step.duration_hours

        for worker in step.workers:
            man_hours = hours * worker.count
            role_name = worker.effective_role
            resource_summary[role_name] = resource_summary.get(role_name, 0.0) + man_hours

            if step.is_unproductive:
                unproductive_man_hours += man_hours
            else:
                productive_man_hours += man_hours

        if not step.is_unproductive:
            total_machine_hours += hours * step.machinery_count

        total_produced += step.produced_quantity

    target_quantity = activity.target_quantity

    metrics = ActivityMetrics(
        productive_man_hours=productive_man_hours,
        unproductive_man_hours=unproductive_man_hours,
        total_machine_hours=total_machine_hours,
        rup=calculate_rup(productive_man_hours, target_quantity),
        productivity_rate=calculate_productivity_rate(target_quantity, productive_man_hours),
        resource_summary=resource_summary,
        total_produced=total_produced,
        target_quantity=target_quantity,
        unit=activity.unit
    )

    logger.debug(
        f"Metrics for activity {activity.id}: {productive_man_hours:.2f} productive Mh, "
        f"{unproductive_man_hours:.2f} unproductive Mh, RUP {metrics.rup:.4f}"
    )

    return metrics
