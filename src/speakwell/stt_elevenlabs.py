"""ElevenLabs STT Provider for SpeakWell.

Uses the ElevenLabs Scribe model for batch transcription of a finished
recording.

Documentation: https://elevenlabs.io/docs/developers/guides/cookbooks/speech-to-text/quickstart
SDK: https://github.com/elevenlabs/elevenlabs-python
"""

import logging

from .core.errors import TranscriptionError
from .stt_provider import STTProvider

logger = logging.getLogger(__name__)


class ElevenLabsSTTProvider(STTProvider):
    """ElevenLabs Speech-to-Text provider.

    Usage:
        config = STTProviderConfig(
            api_key="your_elevenlabs_key",
            model="scribe_v1",
            timeout=120.0
        )
        provider = ElevenLabsSTTProvider(config)
        text = provider.transcribe("/path/to/recording.wav")
    """

    @property
    def name(self) -> str:
        return "ElevenLabs"

    def is_available(self) -> bool:
        """Check if ElevenLabs is available.

        Returns:
            True if API key is set and SDK is installed
        """
        if not self.config.api_key:
            return False
        try:
            from elevenlabs.client import ElevenLabs  # noqa: F401

            return True
        except ImportError:
            return False

    def _get_client(self):
        if self._client is None:
            from elevenlabs.client import ElevenLabs

            self._client = ElevenLabs(
                api_key=self.config.api_key,
                timeout=self.config.timeout,
            )
        return self._client

    def transcribe(self, location: str) -> str:
        if not self.is_available():
            raise TranscriptionError("ElevenLabs API key not set or SDK missing")

        path = self._audio_path(location)
        model_id = self.config.model or "scribe_v1"

        try:
            client = self._get_client()
            with path.open("rb") as audio_file:
                kwargs = {"file": audio_file, "model_id": model_id}
                if self.config.language:
                    kwargs["language_code"] = self.config.language
                transcription = client.speech_to_text.convert(**kwargs)
        except Exception as e:
            logger.debug("ElevenLabs STT error: %s", e)
            status = getattr(e, "status_code", None)
            body = getattr(e, "body", None)
            if status is not None:
                raise TranscriptionError(f"API Error {status}: {body}") from e
            raise TranscriptionError(f"ElevenLabs request failed: {e}") from e

        text = transcription.text if hasattr(transcription, "text") else str(transcription)
        if text is None:
            raise TranscriptionError("ElevenLabs returned no text")
        return text
