"""Core configuration model (structured view)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppConfig:
    debug: bool
    notifications_enabled: bool
    min_duration_seconds: int
    max_duration_seconds: int
    history_file: Path
    recordings_dir: Path
