"""
Configuration Management
Loads and validates environment variables
"""
import os
from dotenv import load_dotenv

from leanflow.utils.formatting import parse_time_of_day

load_dotenv()


class Config:
    """Engine defaults, used when a persisted activity record omits a value"""

    # Shift Schedule Configuration
    DEFAULT_SHIFT_START = os.getenv("DEFAULT_SHIFT_START", "07:00")
    DEFAULT_SHIFT_END = os.getenv("DEFAULT_SHIFT_END", "17:00")
    DEFAULT_LUNCH_START = os.getenv("DEFAULT_LUNCH_START", "12:00")
    DEFAULT_LUNCH_END = os.getenv("DEFAULT_LUNCH_END", "13:00")

    # Flow analysis window size, in minutes
    DEFAULT_ANALYSIS_INTERVAL_MINUTES = os.getenv("DEFAULT_ANALYSIS_INTERVAL_MINUTES", "30")

    # Quantity unit for sub-steps that don't declare one
    DEFAULT_UNIT = os.getenv("DEFAULT_UNIT", "un")

    # Application Settings
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def analysis_interval(cls) -> int:
        """Default analysis interval as an int, 30 when the env value is unusable"""
        try:
            interval = int(cls.DEFAULT_ANALYSIS_INTERVAL_MINUTES)
        except (TypeError, ValueError):
            return 30
        return interval if interval > 0 else 30

    @classmethod
    def validate(cls):
        """Validate configured defaults"""
        problems = []

        for field in ('DEFAULT_SHIFT_START', 'DEFAULT_SHIFT_END',
                      'DEFAULT_LUNCH_START', 'DEFAULT_LUNCH_END'):
            if parse_time_of_day(getattr(cls, field)) is None:
                problems.append(f"{field}={getattr(cls, field)!r} is not a time of day")

        try:
            if int(cls.DEFAULT_ANALYSIS_INTERVAL_MINUTES) <= 0:
                problems.append("DEFAULT_ANALYSIS_INTERVAL_MINUTES must be positive")
        except (TypeError, ValueError):
            problems.append(
                f"DEFAULT_ANALYSIS_INTERVAL_MINUTES={cls.DEFAULT_ANALYSIS_INTERVAL_MINUTES!r} is not an integer"
            )

        if cls.LOG_LEVEL.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            problems.append(f"LOG_LEVEL={cls.LOG_LEVEL!r} is not a logging level")

        if problems:
            raise ValueError(f"Invalid configuration: {'; '.join(problems)}")

        return True
