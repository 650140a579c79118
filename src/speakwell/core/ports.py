"""Core ports (interfaces) for SpeakWell.

These protocols define the boundaries between the session core and the
hardware/vendor-specific adapters. They are intentionally small and
capability-oriented so tests can swap in in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from .models import HistoryEntry


@runtime_checkable
class RecordingHandle(Protocol):
    """A live hardware recording, owned by exactly one recorder session."""

    async def stop_and_unload(self) -> None:
        """Stop capturing and release the device."""

    def get_location(self) -> str | None:
        """Return the recorded file's location, or None if there is none."""


@runtime_checkable
class Microphone(Protocol):
    """Opens new hardware recordings."""

    async def start_recording(self) -> RecordingHandle:
        """Acquire the input device and start capturing."""


@runtime_checkable
class MicrophonePermission(Protocol):
    """Grants access to the microphone."""

    async def check(self) -> bool:
        """Return True if recording is currently allowed."""

    async def request(self) -> bool:
        """Ask for access; return True if it was granted."""


@runtime_checkable
class Transcriber(Protocol):
    """Speech-to-text transcription service."""

    async def transcribe(self, location: str) -> str:
        """Transcribe the audio file and return its text."""


@runtime_checkable
class HistoryStore(Protocol):
    """Durable most-recent-first list of processed recordings."""

    def list(self) -> list[HistoryEntry]:
        """Return entries, most recent first."""

    async def append(self, entry: HistoryEntry) -> None:
        """Add an entry at the front and persist."""

    async def remove(self, entry_id: str) -> bool:
        """Delete an entry by id; return False if it was not there."""

    async def load(self) -> None:
        """Read the persisted list."""

    async def save(self) -> None:
        """Write the list to durable storage."""


@runtime_checkable
class UIFeedback(Protocol):
    """User-visible notifications."""

    def notify(self, title: str, message: str) -> None:
        """Display a notification."""
