"""Recorder session: one microphone capture from permission check to teardown.

The session owns the hardware handle exclusively. While recording, the
handle and its one-second timer live together in a single private record;
stopping or aborting detaches that record synchronously, before any await,
so overlapping stop attempts find nothing left to tear down.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from .errors import CaptureIncomplete, PermissionDenied, RecordingFailed, SpeakWellError
from .gate import RecordingGate
from .models import CapturedAudio
from .ports import Microphone, MicrophonePermission, RecordingHandle
from .state_machine import RecorderEvent, RecorderState, RecorderStateMachine, StopOutcome

logger = logging.getLogger(__name__)

MAX_DURATION_SECONDS = 60


@dataclass
class _LiveRecording:
    handle: RecordingHandle
    ticker: asyncio.Task | None = None


class RecorderSession:
    """Owns the lifecycle of one hardware recording at a time."""

    def __init__(
        self,
        microphone: Microphone,
        permission: MicrophonePermission,
        gate: RecordingGate | None = None,
        *,
        max_duration_seconds: int = MAX_DURATION_SECONDS,
        tick_seconds: float = 1.0,
        on_tick: Callable[[int], None] | None = None,
    ):
        self._microphone = microphone
        self._permission = permission
        self._gate = gate or RecordingGate()
        self._max_duration = max_duration_seconds
        self._tick_seconds = tick_seconds
        self._machine = RecorderStateMachine()
        self._live: _LiveRecording | None = None
        self._teardown: asyncio.Future | None = None
        self._ceiling_task: asyncio.Future | None = None

        self.on_tick = on_tick
        # Called when the duration ceiling is hit; defaults to stop()
        self.on_ceiling: Callable[[], Awaitable[object]] | None = None
        self.elapsed_seconds = 0
        self.last_outcome: StopOutcome | None = None

    @property
    def state(self) -> RecorderState:
        return self._machine.state

    @property
    def is_active(self) -> bool:
        return self._live is not None

    @property
    def max_duration_seconds(self) -> int:
        return self._max_duration

    async def start(self) -> None:
        """Acquire the microphone and begin a new recording.

        A session that is still active, or whose hardware is still being
        released, is aborted and awaited first.

        Raises:
            PermissionDenied: The user did not grant microphone access
            RecordingFailed: The microphone could not be opened
        """
        if self._machine.state is RecorderState.REQUESTING:
            logger.warning("Start ignored: microphone request already in progress")
            return

        # A stop() still finishing keeps the state at STOPPING after its
        # teardown future is gone, so the state is checked as well
        if (
            self._live is not None
            or self._teardown is not None
            or self._machine.state is RecorderState.STOPPING
        ):
            logger.info("Previous session still open, aborting it first")
            await self.abort()

        self._machine.transition(RecorderEvent.START)

        try:
            granted = await self._permission.check()
            if not granted:
                granted = await self._permission.request()
        except Exception as e:
            logger.error("Permission check failed: %s", e)
            self._machine.transition(RecorderEvent.FAIL)
            raise RecordingFailed("Failed to start recording.") from e

        if not granted:
            logger.info("Microphone permission denied")
            self._machine.transition(RecorderEvent.DENIED)
            raise PermissionDenied()

        try:
            handle = await self._microphone.start_recording()
        except Exception as e:
            logger.error("Failed to start recording: %s", e)
            self._machine.transition(RecorderEvent.FAIL)
            raise RecordingFailed("Failed to start recording.") from e

        if self._machine.state is not RecorderState.REQUESTING:
            logger.info("Session aborted while the microphone was opening, releasing it")
            self._release(handle)
            return

        live = _LiveRecording(handle)
        self.elapsed_seconds = 0
        self._live = live
        self._machine.transition(RecorderEvent.ACQUIRED)
        live.ticker = asyncio.ensure_future(self._tick(live))
        logger.info("Recording started")

    async def stop(self) -> CapturedAudio | None:
        """Stop the active recording and return the captured audio.

        Returns None when nothing is being recorded.

        Raises:
            CaptureIncomplete: The device stopped cleanly but left no file
            RecordingFailed: The device failed to stop and nothing usable
                could be recovered
        """
        live = self._detach()
        if live is None:
            return None

        self._machine.transition(RecorderEvent.STOP)
        duration = self.elapsed_seconds
        teardown = self._release(live.handle)

        try:
            await asyncio.shield(teardown)
        except Exception as e:
            logger.warning("Could not stop recording properly: %s", e)
            return self._recover_from_stop_error(live.handle, duration, e)

        location = self._read_location(live.handle)
        if not location:
            logger.warning("Recording stopped but no audio file is available")
            self._finish(StopOutcome.INCOMPLETE)
            raise CaptureIncomplete()

        logger.info("Recording stopped after %ss: %s", duration, location)
        self._finish(StopOutcome.SUCCESS)
        return CapturedAudio(location=location, duration_seconds=duration)

    async def abort(self) -> None:
        """Discard the current session without producing any audio.

        Waits until the hardware has been released, so a following start()
        never overlaps with the previous recording.
        """
        live = self._detach()
        if self._machine.can(RecorderEvent.ABORT):
            self._machine.transition(RecorderEvent.ABORT)
        if live is not None:
            self.last_outcome = StopOutcome.ABORTED
            self._release(live.handle)

        teardown = self._teardown
        if teardown is not None:
            await asyncio.wait([teardown])
            if not teardown.cancelled() and teardown.exception() is not None:
                logger.warning(
                    "Discarded recording did not stop cleanly: %s", teardown.exception()
                )

        if self._machine.state is RecorderState.STOPPED:
            self._machine.transition(RecorderEvent.RESET)
        self.elapsed_seconds = 0

    def _recover_from_stop_error(
        self, handle: RecordingHandle, duration: int, error: Exception
    ) -> CapturedAudio:
        """Salvage a recording whose hardware stop raised.

        Some drivers fail on stop but still leave a complete, readable file.
        Such a file is kept only if it is long enough to be processed.
        """
        location = self._read_location(handle)
        if location and self._gate.admits(duration):
            logger.info("Recovered recording despite stop error: %s", location)
            self._finish(StopOutcome.RECOVERED)
            return CapturedAudio(location=location, duration_seconds=duration, recovered=True)

        self._finish(StopOutcome.FAILED)
        raise RecordingFailed() from error

    async def _tick(self, live: _LiveRecording) -> None:
        while self._live is live:
            await asyncio.sleep(self._tick_seconds)
            if self._live is not live:
                return
            if self.elapsed_seconds >= self._max_duration:
                logger.info("Maximum recording time reached, stopping...")
                self._ceiling_task = asyncio.ensure_future(self._ceiling_reached())
                return
            self.elapsed_seconds += 1
            if self.on_tick is not None:
                self.on_tick(self.elapsed_seconds)

    async def _ceiling_reached(self) -> None:
        handler = self.on_ceiling or self.stop
        try:
            await handler()
        except SpeakWellError as e:
            logger.warning("Automatic stop ended without usable audio: %s", e)

    def _detach(self) -> _LiveRecording | None:
        live = self._live
        if live is None:
            return None
        self._live = None
        if live.ticker is not None:
            live.ticker.cancel()
        return live

    def _release(self, handle: RecordingHandle) -> asyncio.Future:
        teardown = asyncio.ensure_future(handle.stop_and_unload())
        self._teardown = teardown
        teardown.add_done_callback(self._teardown_done)
        return teardown

    def _teardown_done(self, teardown: asyncio.Future) -> None:
        if self._teardown is teardown:
            self._teardown = None

    def _finish(self, outcome: StopOutcome) -> None:
        self.last_outcome = outcome
        if self._machine.can(RecorderEvent.STOP_DONE):
            self._machine.transition(RecorderEvent.STOP_DONE)

    @staticmethod
    def _read_location(handle: RecordingHandle) -> str | None:
        try:
            return handle.get_location()
        except Exception as e:
            logger.warning("Could not get recording location: %s", e)
            return None
