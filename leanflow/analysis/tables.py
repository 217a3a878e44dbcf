"""
Tabular Views

pandas DataFrames over engine results, for console output and presentation.
"""

from typing import Dict, Sequence

import pandas as pd

from leanflow.analysis.flow import FlowBlock
from leanflow.calculations.productivity import ActivityMetrics
from leanflow.models import Activity
from leanflow.utils.formatting import format_minutes


FLOW_COLUMNS = ['start_time', 'end_time', 'time', 'status', 'message', 'severity', 'duration_minutes']
RESOURCE_COLUMNS = ['role', 'man_hours', 'share_percent']
SUB_STEP_COLUMNS = [
    'start_time', 'end_time', 'description', 'is_unproductive',
    'hours', 'crew_size', 'man_hours', 'machine_hours'
]


def flow_blocks_to_dataframe(blocks: Sequence[FlowBlock]) -> pd.DataFrame:
    """
    One row per flow block, in chronological order.

    Returns an empty DataFrame with the expected columns when there are no blocks.
    """
    if not blocks:
        return pd.DataFrame(columns=FLOW_COLUMNS)
    return pd.DataFrame([block.to_dict() for block in blocks], columns=FLOW_COLUMNS)


def resource_summary_to_dataframe(metrics: ActivityMetrics) -> pd.DataFrame:
    """
    Man-hours per role, largest first.

    share_percent is each role's share of total man-hours (0 when there are none).
    """
    if not metrics.resource_summary:
        return pd.DataFrame(columns=RESOURCE_COLUMNS)

    df = pd.DataFrame(
        list(metrics.resource_summary.items()),
        columns=['role', 'man_hours']
    )
    total = df['man_hours'].sum()
    df['share_percent'] = (df['man_hours'] / total * 100) if total > 0 else 0.0

    return df.sort_values('man_hours', ascending=False, kind='stable').reset_index(drop=True)


def sub_steps_to_dataframe(activity: Activity) -> pd.DataFrame:
    """Chronological sub-step table with hours and crew totals"""
    rows = []
    for step in activity.sorted_sub_steps():
        hours = step.duration_hours
        rows.append({
            'start_time': format_minutes(step.start_time),
            'end_time': format_minutes(step.end_time),
            'description': step.description,
            'is_unproductive': step.is_unproductive,
            'hours': hours,
            'crew_size': step.crew_size,
            'man_hours': hours * step.crew_size,
            'machine_hours': hours * step.machinery_count
        })

    return pd.DataFrame(rows, columns=SUB_STEP_COLUMNS)


def summarize_flow(blocks: Sequence[FlowBlock]) -> Dict[str, int]:
    """
    Minutes per flow status.

    Example:
        >>> summarize_flow(blocks)
        {'Idle': 420, 'Lunch': 60}
    """
    df = flow_blocks_to_dataframe(blocks)
    if df.empty:
        return {}

    totals = df.groupby('status', sort=True)['duration_minutes'].sum()
    return {status: int(minutes) for status, minutes in totals.items()}
