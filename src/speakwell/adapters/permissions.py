"""Microphone permission adapter.

Desktop systems have no runtime permission prompt for audio input; access is
"granted" when an input device can be found. ``request()`` probes again so a
microphone plugged in after startup is picked up.
"""

from __future__ import annotations

import asyncio
import logging

from .audio import pyaudio, suppress_stderr

logger = logging.getLogger(__name__)


class InputDevicePermission:
    def __init__(self, device: str = "auto"):
        self._device = device

    async def check(self) -> bool:
        return await asyncio.to_thread(self._probe)

    async def request(self) -> bool:
        print("🎙 Looking for a microphone...")
        granted = await asyncio.to_thread(self._probe)
        if not granted:
            print("⚠ No microphone found. Connect one and allow audio input access.")
        return granted

    def _probe(self) -> bool:
        with suppress_stderr():
            audio = pyaudio.PyAudio()
        try:
            if self._device != "auto":
                info = audio.get_device_info_by_index(int(self._device))
            else:
                info = audio.get_default_input_device_info()
            return int(info.get("maxInputChannels", 0)) > 0
        except (IOError, OSError, ValueError) as e:
            logger.debug("Microphone not available: %s", e)
            return False
        finally:
            audio.terminate()
