"""STT Provider Abstraction for SpeakWell.

This module provides a small abstraction layer over the remote
speech-to-text services, so the provider can be switched by configuration
and a fallback used when the preferred one is not configured.

Supported providers:
- Whisper: OpenAI transcription endpoint through the openai SDK (default)
- ElevenLabs: Scribe batch transcription through the official SDK

Providers are synchronous; the async core reaches them through
``speakwell.adapters.stt.STTAdapter``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote, urlparse

from .core.errors import TranscriptionError


@dataclass
class STTProviderConfig:
    """Configuration for an STT provider.

    Attributes:
        api_key: API key for authentication
        model: Model identifier (provider-specific, e.g., "whisper-1")
        timeout: Request timeout in seconds, enforced by the HTTP layer
        language: Language code hint (None for auto-detect)
        extra: Provider-specific configuration options
    """

    api_key: str
    model: str = ""
    timeout: float = 120.0
    language: str | None = None
    extra: dict = field(default_factory=dict)


def resolve_audio_path(location: str) -> Path:
    """Turn a ``file://`` URI or plain path into a filesystem path."""
    if location.startswith("file://"):
        return Path(unquote(urlparse(location).path))
    return Path(location)


class STTProvider(ABC):
    """Abstract base class for STT providers.

    Usage:
        provider = get_stt_provider("whisper")
        if provider.is_available():
            text = provider.transcribe("/path/to/recording.wav")
    """

    def __init__(self, config: STTProviderConfig):
        self.config = config
        self._client = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name (e.g., 'Whisper', 'ElevenLabs')."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this provider is properly configured and available."""
        pass

    @abstractmethod
    def transcribe(self, location: str) -> str:
        """Transcribe the audio file at ``location``.

        Args:
            location: Path or file:// URI of the recording

        Returns:
            The transcribed text

        Raises:
            TranscriptionError: Missing file, rejected request or network failure
        """
        pass

    def _audio_path(self, location: str) -> Path:
        path = resolve_audio_path(location)
        if not path.is_file():
            raise TranscriptionError(f"Audio file does not exist: {location}")
        return path


class NullSTTProvider(STTProvider):
    """Null implementation for when no provider is configured.

    Lets the app start without an API key; every transcription attempt fails
    with a message telling the user what to configure.
    """

    def __init__(self):
        super().__init__(STTProviderConfig(api_key=""))

    @property
    def name(self) -> str:
        return "None"

    def is_available(self) -> bool:
        return False

    def transcribe(self, location: str) -> str:
        raise TranscriptionError(
            "No transcription provider configured (set OPENAI_API_KEY or ELEVENLABS_API_KEY)"
        )
