"""JSON file history store."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from ..core.models import HistoryEntry

logger = logging.getLogger(__name__)


class JsonHistoryStore:
    """Most-recent-first history list persisted as one JSON array.

    Writes go to a temporary file that replaces the real one, so a crash
    mid-write never leaves a truncated history behind.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._entries: list[HistoryEntry] = []

    def list(self) -> list[HistoryEntry]:
        return list(self._entries)

    async def load(self) -> None:
        self._entries = await asyncio.to_thread(self._read)
        logger.info("Loaded %d history entries from %s", len(self._entries), self.path)

    async def save(self) -> None:
        await asyncio.to_thread(self._write, list(self._entries))

    async def append(self, entry: HistoryEntry) -> None:
        previous = self._entries
        self._entries = [entry] + previous
        try:
            await self.save()
        except Exception:
            self._entries = previous
            raise

    async def remove(self, entry_id: str) -> bool:
        previous = self._entries
        remaining = [entry for entry in previous if entry.id != entry_id]
        if len(remaining) == len(previous):
            return False
        self._entries = remaining
        try:
            await self.save()
        except Exception:
            self._entries = previous
            raise
        return True

    def _read(self) -> list[HistoryEntry]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError(f"expected a list, got {type(raw).__name__}")
            return [HistoryEntry.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error("Error loading recordings from %s: %s", self.path, e)
            return []

    def _write(self, entries: list[HistoryEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        payload = [entry.to_dict() for entry in entries]
        tmp_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)
