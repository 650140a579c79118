"""STT adapter bridging blocking providers into the async core."""

from __future__ import annotations

import asyncio


class STTAdapter:
    """Runs a blocking STT provider off the event loop."""

    def __init__(self, provider):
        self._provider = provider

    @property
    def provider_name(self) -> str:
        return self._provider.name

    async def transcribe(self, location: str) -> str:
        return await asyncio.to_thread(self._provider.transcribe, location)
