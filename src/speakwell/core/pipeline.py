"""Processing pipeline: transcription -> analysis -> history for one recording."""

from __future__ import annotations

import contextlib
import logging
import time
from datetime import datetime, timezone
from typing import Callable

from .analysis import analyze_transcript
from .errors import ProcessingFailed
from .models import AnalysisResult, HistoryEntry
from .ports import HistoryStore, Transcriber

logger = logging.getLogger(__name__)


class EntryIdFactory:
    """Millisecond-timestamp ids that never repeat within a process."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProcessingPipeline:
    """Turns a captured recording into a persisted history entry.

    Each step depends on the previous one's output, so they run strictly in
    sequence. A call either returns the new entry or raises ProcessingFailed;
    nothing is written to the store on failure.
    """

    def __init__(
        self,
        transcriber: Transcriber,
        store: HistoryStore,
        analyzer: Callable[[str], AnalysisResult] = analyze_transcript,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] | None = None,
        on_busy: Callable[[bool], None] | None = None,
    ):
        self._transcriber = transcriber
        self._store = store
        self._analyzer = analyzer
        self._clock = clock
        self._new_id = id_factory or EntryIdFactory()
        self._on_busy = on_busy
        self._processing = False

    @property
    def is_processing(self) -> bool:
        return self._processing

    @contextlib.contextmanager
    def _busy(self):
        self._set_busy(True)
        try:
            yield
        finally:
            self._set_busy(False)

    def _set_busy(self, value: bool) -> None:
        self._processing = value
        if self._on_busy is not None:
            self._on_busy(value)

    async def process(self, location: str, duration_seconds: int) -> HistoryEntry:
        """Transcribe, analyze and store one recording.

        There is no retry; a failed call must be repeated by the caller.

        Raises:
            ProcessingFailed: Any step failed (the cause is chained)
        """
        with self._busy():
            try:
                transcript = await self._transcriber.transcribe(location)
                analysis = self._analyzer(transcript)
                entry = HistoryEntry(
                    id=self._new_id(),
                    date=self._clock(),
                    duration=duration_seconds,
                    location=location,
                    transcript=transcript,
                    analysis=analysis,
                )
                await self._store.append(entry)
            except Exception as e:
                logger.error("Error processing recording %s: %s", location, e)
                raise ProcessingFailed() from e

        logger.info("Saved history entry %s (score %s)", entry.id, analysis.score_text)
        return entry
