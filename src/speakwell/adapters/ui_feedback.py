"""UI feedback adapter."""

from __future__ import annotations

from ..ui_feedback import notify


class UIFeedbackAdapter:
    """Prints every message and mirrors it as a desktop notification."""

    def __init__(self, notifications_enabled: bool = True):
        self._notifications_enabled = notifications_enabled

    def notify(self, title: str, message: str) -> None:
        print(f"\n{title}: {message}")
        if self._notifications_enabled:
            notify(title, message)
