"""Env configuration adapter producing a structured AppConfig."""

from __future__ import annotations

from ..config import config as env_config
from ..core.config_model import AppConfig


def load_app_config() -> AppConfig:
    return AppConfig(
        debug=env_config.DEBUG,
        notifications_enabled=env_config.NOTIFICATIONS_ENABLED,
        min_duration_seconds=env_config.MIN_RECORDING_SECONDS,
        max_duration_seconds=env_config.MAX_RECORDING_SECONDS,
        history_file=env_config.HISTORY_FILE,
        recordings_dir=env_config.RECORDINGS_DIR,
    )
