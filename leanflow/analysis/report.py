"""
Narrative Report Input

Builds the structured input handed to the external report generator: the
activity header, its metrics and the chronological sub-step flow. Everything
in the payload is a plain string, number, bool, list or dict so the generator
can be swapped without touching the engine.
"""

import logging
from typing import Any, Dict, List, Optional

from leanflow.calculations.productivity import ActivityMetrics, compute_metrics
from leanflow.models import Activity, SubStep
from leanflow.utils.formatting import format_minutes

logger = logging.getLogger(__name__)

UNPRODUCTIVE_TAG = "[UNPRODUCTIVE/SUPPORT]"


def _sub_step_entry(step: SubStep) -> Dict[str, Any]:
    return {
        'description': step.description,
        'start_time': format_minutes(step.start_time),
        'end_time': format_minutes(step.end_time),
        'crew': [
            {'role': worker.effective_role, 'count': worker.count}
            for worker in step.workers
        ],
        'is_unproductive': step.is_unproductive
    }


def build_report_payload(
    activity: Activity,
    metrics: Optional[ActivityMetrics] = None
) -> Dict[str, Any]:
    """
    Assemble the report generator's input for one activity.

    Args:
        activity: Activity snapshot
        metrics: Precomputed metrics; computed from the activity when omitted

    Returns:
        Dictionary with keys activity, metrics (full precision),
        display_metrics (two-decimal strings) and sub_steps (chronological)
    """
    if metrics is None:
        metrics = compute_metrics(activity)

    return {
        'activity': {
            'id': activity.id,
            'service': activity.service,
            'discipline': activity.discipline,
            'location': activity.location,
            'date': activity.date,
            'target_quantity': activity.target_quantity,
            'unit': activity.unit
        },
        'metrics': metrics.to_dict(),
        'display_metrics': metrics.to_display_dict(),
        'sub_steps': [_sub_step_entry(step) for step in activity.sorted_sub_steps()]
    }


def _flow_line(entry: Dict[str, Any]) -> str:
    crew = ", ".join(f"{c['count']} {c['role']}" for c in entry['crew'])
    line = f"- {entry['start_time']} to {entry['end_time']}: {entry['description']} ({crew})"
    if entry['is_unproductive']:
        line += f" {UNPRODUCTIVE_TAG}"
    return line


def render_report_prompt(payload: Dict[str, Any]) -> str:
    """
    Render the text brief sent to the report generator.

    Args:
        payload: Output of build_report_payload

    Returns:
        Multi-line Markdown text
    """
    activity = payload['activity']
    display = payload['display_metrics']
    unit = activity['unit']

    lines: List[str] = [
        "Act as a senior engineer specialised in productivity and Lean Construction.",
        "Analyse the data of this site activity and give direct, executive feedback.",
        "",
        "**Activity data:**",
        f"- Service: {activity['service']}",
        f"- Discipline: {activity['discipline']}",
        f"- Planned target: {activity['target_quantity']} {unit}",
        f"- Produced: {display['total_produced']} {unit}",
        f"- Actual RUP: {display['rup']} Mh/{unit}",
        f"- Actual productivity: {display['productivity_rate']} {unit}/Mh",
        f"- Total productive hours: {display['productive_man_hours']}h",
        f"- Unproductive/support hours: {display['unproductive_man_hours']}h",
        "",
        "**Sub-step flow:**",
    ]
    lines.extend(_flow_line(entry) for entry in payload['sub_steps'])
    lines.extend([
        "",
        "**Your analysis must contain:**",
        "1. **Quick diagnosis:** one sentence on current efficiency.",
        "2. **Attention points:** crew imbalance or bottlenecks in the schedule.",
        "3. **Recommended action:** what the engineer should do tomorrow to improve the RUP.",
        "",
        "Use Markdown with bold for emphasis. Keep a professional, technical but encouraging tone.",
    ])

    logger.debug(f"Rendered report brief for activity {activity['id']} ({len(payload['sub_steps'])} sub-steps)")

    return "\n".join(lines)
