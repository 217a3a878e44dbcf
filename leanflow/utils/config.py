"""
Configuration Management

Simple utility for loading and validating environment configuration.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from leanflow.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def load_config(env_path: Optional[str] = None) -> bool:
    """
    Load environment configuration from .env file.

    Values already read into Config at import time are refreshed, so a .env
    file passed on the command line takes effect.

    Args:
        env_path: Optional path to .env file. If None, searches in current directory.

    Returns:
        bool: True if .env file was found and loaded, False otherwise
    """
    if env_path:
        loaded = load_dotenv(env_path, override=True)
    else:
        loaded = load_dotenv()

    if loaded:
        _refresh_config()
    return loaded


def _refresh_config():
    for name in ('DEFAULT_SHIFT_START', 'DEFAULT_SHIFT_END', 'DEFAULT_LUNCH_START',
                 'DEFAULT_LUNCH_END', 'DEFAULT_ANALYSIS_INTERVAL_MINUTES',
                 'DEFAULT_UNIT', 'LOG_LEVEL'):
        value = os.getenv(name)
        if value is not None:
            setattr(Config, name, value)


def get_engine_config() -> dict:
    """
    Get engine default settings.

    Returns:
        dict: Defaults applied to activity records that omit a value
    """
    return {
        "shift_start": Config.DEFAULT_SHIFT_START,
        "shift_end": Config.DEFAULT_SHIFT_END,
        "lunch_start": Config.DEFAULT_LUNCH_START,
        "lunch_end": Config.DEFAULT_LUNCH_END,
        "analysis_interval_minutes": Config.analysis_interval(),
        "unit": Config.DEFAULT_UNIT,
        "log_level": Config.LOG_LEVEL,
    }


def validate_config() -> list:
    """
    Validate configured defaults.

    Returns:
        list: List of configuration problems (empty if all valid)
    """
    try:
        Config.validate()
    except ValueError as e:
        return [str(e)]
    return []


def configure_logging(level: Optional[str] = None):
    """Configure root logging for command-line use."""
    level_name = (level or Config.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT
    )
