"""Configuration package for runtime settings, durations and logging."""

from .durations import config_format_duration, config_parse_duration, config_parse_duration_or_default
from .log_setup import config_setup_logging
from .settings import AppSettings, SettingsLoadError, config_load_settings

__all__ = [
    "AppSettings",
    "SettingsLoadError",
    "config_format_duration",
    "config_load_settings",
    "config_parse_duration",
    "config_parse_duration_or_default",
    "config_setup_logging",
]
