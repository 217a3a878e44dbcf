"""
Activity Snapshot Loading

Reads activity records exported from the activity store as JSON. A file may
hold a single activity record, a list of records, or {"activities": [...]}.
Each record may be the flat activity dict or a table row
{"id": ..., "task_data": {...}}.
"""

import json
import logging
from typing import Any, List, Mapping, Optional

from leanflow.models import Activity

logger = logging.getLogger(__name__)


def parse_activities(data: Any) -> List[Activity]:
    """
    Turn decoded JSON into Activity objects.

    Entries that aren't JSON objects are skipped with a warning.

    Raises:
        ValueError: If the top-level value is neither an object nor a list
    """
    if isinstance(data, Mapping) and isinstance(data.get("activities"), list):
        records = data["activities"]
    elif isinstance(data, Mapping):
        records = [data]
    elif isinstance(data, list):
        records = data
    else:
        raise ValueError(
            f"Expected an activity object or a list of activities, got {type(data).__name__}"
        )

    activities = []
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            logger.warning(f"Skipping activity record {index}: not an object ({type(record).__name__})")
            continue
        activities.append(Activity.from_record(record))

    return activities


def load_activities(filepath: str) -> List[Activity]:
    """
    Load activity snapshots from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file isn't valid JSON or has an unexpected shape
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Activity file not found: {filepath}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in activity file {filepath}: {e}")

    activities = parse_activities(data)
    logger.info(f"Loaded {len(activities)} activities from {filepath}")
    return activities


def find_activity(activities: List[Activity], activity_id: str) -> Optional[Activity]:
    """Activity with the given id, or None"""
    for activity in activities:
        if activity.id == activity_id:
            return activity
    return None
