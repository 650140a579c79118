"""Microphone capture adapter backed by PyAudio."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import time
import wave
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)


# Suppress audio system warnings (ALSA on Linux, etc.)
@contextlib.contextmanager
def suppress_stderr():
    """Suppress stderr to hide audio system warnings."""
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        old_stderr = os.dup(2)
    except OSError:
        yield
        return
    try:
        os.dup2(devnull, 2)
        yield
    finally:
        os.dup2(old_stderr, 2)
        os.close(devnull)
        os.close(old_stderr)


with suppress_stderr():
    import pyaudio


class PyAudioRecording:
    """One live microphone stream written straight to a mono WAV file.

    The file is opened before the stream starts, so whatever was captured is
    on disk even if stopping the stream later fails.
    """

    def __init__(self, path: Path, sample_rate: int):
        self.path = path
        self.sample_rate = sample_rate
        self.level = 0
        self._audio = None
        self._stream = None
        self._wav = None

    def open(self, device_index: int | None, chunk_size: int) -> None:
        self._wav = wave.open(str(self.path), "wb")
        self._wav.setnchannels(1)
        self._wav.setsampwidth(2)
        self._wav.setframerate(self.sample_rate)

        try:
            with suppress_stderr():
                self._audio = pyaudio.PyAudio()
                self._stream = self._audio.open(
                    format=pyaudio.paInt16,
                    channels=1,
                    rate=self.sample_rate,
                    input=True,
                    input_device_index=device_index,
                    frames_per_buffer=chunk_size,
                    stream_callback=self._on_audio,
                )
        except Exception:
            self._close_file()
            if self._audio is not None:
                self._audio.terminate()
            raise

    def _on_audio(self, in_data, frame_count, time_info, status):
        self._wav.writeframes(in_data)
        samples = np.frombuffer(in_data, dtype=np.int16).astype(np.int32)
        self.level = int(np.max(np.abs(samples))) if samples.size else 0
        return (None, pyaudio.paContinue)

    async def stop_and_unload(self) -> None:
        await asyncio.to_thread(self._close)

    def _close(self) -> None:
        try:
            self._stream.stop_stream()
            self._stream.close()
        finally:
            self._close_file()
            self._audio.terminate()

    def _close_file(self) -> None:
        if self._wav is not None:
            self._wav.close()
            self._wav = None

    def get_location(self) -> str | None:
        """The WAV path, or None while the file holds no audio frames."""
        if not self.path.is_file():
            return None
        try:
            with wave.open(str(self.path), "rb") as wav:
                if wav.getnframes() == 0:
                    return None
        except (EOFError, wave.Error) as e:
            logger.warning("Unreadable recording %s: %s", self.path, e)
            return None
        return str(self.path)


class PyAudioMicrophone:
    """Opens PyAudio recordings into the recordings directory."""

    def __init__(
        self,
        recordings_dir: Path,
        sample_rate: int = 16000,
        chunk_size: int = 1024,
        device: str = "auto",
    ):
        self._recordings_dir = recordings_dir
        self._sample_rate = sample_rate
        self._chunk_size = chunk_size
        self._device_index = None if device == "auto" else int(device)
        self.current: PyAudioRecording | None = None

    async def start_recording(self) -> PyAudioRecording:
        return await asyncio.to_thread(self._open)

    def _open(self) -> PyAudioRecording:
        self._recordings_dir.mkdir(parents=True, exist_ok=True)
        millis = int(time.time() * 1000) % 1000
        name = f"recording-{time.strftime('%Y%m%d-%H%M%S')}-{millis:03d}.wav"
        path = self._recordings_dir / name
        recording = PyAudioRecording(path, self._sample_rate)
        recording.open(self._device_index, self._chunk_size)
        logger.debug("Opened microphone stream into %s", path)
        self.current = recording
        return recording

