"""
Lean Construction Productivity & Flow Analytics - Main Application

Command-line entry point. Loads activity snapshots exported from the activity
store and reports, for each activity:
- Man-hours, machine hours, RUP and productivity rate
- Flow blocks: idle gaps, bottlenecks, support work and breaks
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import pandas as pd

from leanflow.analysis.flow import analyze_flow
from leanflow.analysis.report import build_report_payload, render_report_prompt
from leanflow.analysis.tables import (
    flow_blocks_to_dataframe,
    resource_summary_to_dataframe,
    summarize_flow
)
from leanflow.calculations.productivity import compute_metrics
from leanflow.data_loader import find_activity, load_activities
from leanflow.models import Activity
from leanflow.utils.config import configure_logging, load_config, validate_config
from leanflow.utils.validation import validate_activity

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_CONFIG_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='leanflow',
        description='Productivity metrics and flow analysis for lean construction activities.',
        epilog='Example: python app.py data/activities.json --show-flow --show-resources',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'activities',
        help='Path to a JSON file with one or more activity records'
    )
    parser.add_argument(
        '--activity-id',
        help='Only analyse the activity with this id'
    )
    parser.add_argument(
        '--output',
        help='Write metrics, flow blocks and report input to this JSON file'
    )
    parser.add_argument(
        '--show-flow',
        action='store_true',
        help='Print the flow block table'
    )
    parser.add_argument(
        '--show-resources',
        action='store_true',
        help='Print man-hours per role'
    )
    parser.add_argument(
        '--show-report',
        action='store_true',
        help='Print the brief handed to the narrative report generator'
    )
    parser.add_argument(
        '--validate',
        action='store_true',
        help='Print edit-boundary validation errors and warnings'
    )
    parser.add_argument(
        '--env',
        help='Path to a .env file with default settings'
    )

    return parser


def analyze_activity(activity: Activity) -> Dict[str, Any]:
    """Metrics, flow blocks and report input for one activity, as plain data."""
    metrics = compute_metrics(activity)
    blocks = analyze_flow(activity)

    return {
        'metrics': metrics.to_dict(),
        'display_metrics': metrics.to_display_dict(),
        'flow': [block.to_dict() for block in blocks],
        'flow_summary_minutes': summarize_flow(blocks),
        'report': build_report_payload(activity, metrics)
    }


def print_activity_summary(activity: Activity, args: argparse.Namespace):
    """Print the console summary for one activity."""
    metrics = compute_metrics(activity)
    blocks = analyze_flow(activity)
    display = metrics.to_display_dict()
    unit = activity.unit or '-'

    print("\n" + "=" * 70)
    print(f"{activity.service or '(no service)'} [{activity.id}] {activity.location} {activity.date}".rstrip())
    print("=" * 70)
    print(f"  Target:            {display['target_quantity']} {unit}")
    print(f"  Productive Mh:     {display['productive_man_hours']}")
    print(f"  Unproductive Mh:   {display['unproductive_man_hours']}")
    print(f"  Machine hours:     {display['total_machine_hours']}")
    print(f"  RUP:               {display['rup']} Mh/{unit}")
    print(f"  Productivity:      {display['productivity_rate']} {unit}/Mh")

    summary = summarize_flow(blocks)
    if summary:
        parts = ", ".join(f"{status} {minutes} min" for status, minutes in summary.items())
        print(f"  Flow:              {parts}")
    else:
        print("  Flow:              no anomalies")

    if args.show_resources:
        print("\n  Man-hours by role:")
        resources = resource_summary_to_dataframe(metrics)
        if resources.empty:
            print("    (no crew assigned)")
        else:
            print(resources.to_string(index=False, float_format=lambda v: f"{v:.2f}"))

    if args.show_flow:
        print("\n  Flow blocks:")
        flow_df = flow_blocks_to_dataframe(blocks)
        if flow_df.empty:
            print("    (none)")
        else:
            print(flow_df[['time', 'status', 'severity', 'message']].to_string(index=False))

    if args.validate:
        errors, warnings, is_valid = validate_activity(activity)
        print(f"\n  Validation: {'OK' if is_valid else 'FAILED'}")
        for error in errors:
            print(f"    ERROR   {error}")
        for warning in warnings:
            print(f"    WARNING {warning}")

    if args.show_report:
        print("\n  Report brief:")
        print(render_report_prompt(build_report_payload(activity, metrics)))


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    load_config(args.env)
    configure_logging()

    config_errors = validate_config()
    if config_errors:
        for error in config_errors:
            logger.error(error)
        return EXIT_CONFIG_ERROR

    try:
        activities = load_activities(args.activities)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not load activities: {e}")
        return EXIT_INPUT_ERROR

    if args.activity_id:
        activity = find_activity(activities, args.activity_id)
        if activity is None:
            logger.error(f"Activity {args.activity_id} not found in {args.activities}")
            return EXIT_INPUT_ERROR
        activities = [activity]

    pd.set_option('display.width', 120)

    for activity in activities:
        print_activity_summary(activity, args)

    if args.output:
        results = {activity.id: analyze_activity(activity) for activity in activities}
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2, ensure_ascii=False)
        logger.info(f"Wrote analysis for {len(results)} activities to {args.output}")

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
