"""User-facing failure taxonomy for recording sessions.

Every error carries a short ``title`` and a human-readable ``message`` so the
controller can surface it without knowing which component raised it.
"""

from __future__ import annotations


class SpeakWellError(Exception):
    """Base class for failures that end a session and return to idle."""

    title = "Error"
    message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        self.message = message or type(self).message
        super().__init__(self.message)


class PermissionDenied(SpeakWellError):
    title = "Permission Required"
    message = "Audio recording permission is needed for this app to function."


class TooShort(SpeakWellError):
    title = "Recording Too Short"

    def __init__(self, min_duration_seconds: int = 30):
        self.min_duration_seconds = min_duration_seconds
        super().__init__(
            f"Recording should be at least {min_duration_seconds} seconds long. "
            "Please try again."
        )


class CaptureIncomplete(SpeakWellError):
    title = "Recording Error"
    message = "No audio was captured. Please record again."


class RecordingFailed(SpeakWellError):
    title = "Recording Error"
    message = "There was a problem with the recording. Please try again."


class TranscriptionError(SpeakWellError):
    title = "Transcription Error"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Transcription failed: {reason}")


class ProcessingFailed(SpeakWellError):
    title = "Processing Error"
    message = "Failed to process your recording. Please try again."
