"""Core orchestration for SpeakWell.

Keeps the record -> gate -> transcribe -> analyze -> store flow in one place,
decoupled from hardware and vendor implementations via ports. Every failure
ends with a user notification and the recorder back at rest.
"""

from __future__ import annotations

import logging
from typing import Callable

from .errors import SpeakWellError, TooShort
from .gate import GateDecision, RecordingGate
from .models import CapturedAudio, HistoryEntry
from .pipeline import ProcessingPipeline
from .ports import UIFeedback
from .recorder import RecorderSession

logger = logging.getLogger(__name__)


class SessionController:
    """Orchestrates recording sessions into saved history entries."""

    def __init__(
        self,
        recorder: RecorderSession,
        pipeline: ProcessingPipeline,
        ui: UIFeedback,
        gate: RecordingGate | None = None,
        on_entry: Callable[[HistoryEntry], None] | None = None,
    ):
        self._recorder = recorder
        self._pipeline = pipeline
        self._ui = ui
        self._gate = gate or RecordingGate()
        # Receives every saved entry, whichever path stopped the recording
        self.on_entry = on_entry

        # Hitting the duration ceiling behaves like the user pressing stop
        self._recorder.on_ceiling = self.stop_recording

    @property
    def is_recording(self) -> bool:
        return self._recorder.is_active

    @property
    def is_processing(self) -> bool:
        return self._pipeline.is_processing

    async def start_recording(self) -> bool:
        """Start a new recording; returns False if it could not start."""
        try:
            await self._recorder.start()
        except SpeakWellError as e:
            self._report(e)
            return False

        if not self._recorder.is_active:
            return False

        self._ui.notify(
            "🎤 Recording",
            f"Speak for at least {self._gate.min_duration_seconds} seconds",
        )
        return True

    async def stop_recording(self) -> HistoryEntry | None:
        """Stop the current recording and process it if it is long enough.

        Returns the new history entry, or None when nothing was saved.
        """
        try:
            captured = await self._recorder.stop()
        except SpeakWellError as e:
            self._report(e)
            return None

        if captured is None:
            return None
        return await self._admit(captured)

    async def toggle(self) -> HistoryEntry | None:
        if self._recorder.is_active:
            return await self.stop_recording()
        await self.start_recording()
        return None

    async def cancel_recording(self) -> None:
        """Discard the current recording without processing it."""
        await self._recorder.abort()

    async def _admit(self, captured: CapturedAudio) -> HistoryEntry | None:
        if self._gate.decide(captured.duration_seconds) is GateDecision.REJECT:
            logger.info(
                "Discarding %ss recording %s", captured.duration_seconds, captured.location
            )
            self._report(TooShort(self._gate.min_duration_seconds))
            return None

        print("⏳ Processing your recording...")
        try:
            entry = await self._pipeline.process(
                captured.location, captured.duration_seconds
            )
        except SpeakWellError as e:
            self._report(e)
            return None

        self._ui.notify("✓ Analysis ready", f"Score: {entry.analysis.score_text}/10")
        if self.on_entry is not None:
            self.on_entry(entry)
        return entry

    def _report(self, error: SpeakWellError) -> None:
        logger.warning("%s: %s", type(error).__name__, error.message)
        self._ui.notify(f"⚠ {error.title}", error.message)
