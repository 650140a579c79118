"""OpenAI Whisper STT Provider for SpeakWell.

Uploads the recording to the OpenAI transcription endpoint and returns the
transcribed text. ``OPENAI_BASE_URL`` can point the client at any
OpenAI-compatible server.

Documentation: https://platform.openai.com/docs/api-reference/audio/createTranscription
"""

import json

from .core.errors import TranscriptionError
from .stt_provider import STTProvider


class WhisperSTTProvider(STTProvider):
    """Whisper Speech-to-Text provider.

    Usage:
        config = STTProviderConfig(api_key="sk-...", model="whisper-1", timeout=120.0)
        provider = WhisperSTTProvider(config)
        text = provider.transcribe("/path/to/recording.wav")
    """

    @property
    def name(self) -> str:
        return "Whisper"

    def is_available(self) -> bool:
        if not self.config.api_key:
            return False
        try:
            from openai import OpenAI  # noqa: F401

            return True
        except ImportError:
            return False

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(
                api_key=self.config.api_key,
                base_url=self.config.extra.get("base_url") or None,
                timeout=self.config.timeout,
                max_retries=0,
            )
        return self._client

    def transcribe(self, location: str) -> str:
        if not self.is_available():
            raise TranscriptionError("OpenAI API key not set")

        import openai

        path = self._audio_path(location)
        params = {"model": self.config.model or "whisper-1"}
        if self.config.language:
            params["language"] = self.config.language

        try:
            with path.open("rb") as audio_file:
                response = self._get_client().audio.transcriptions.create(
                    file=audio_file, **params
                )
        except openai.APIStatusError as e:
            try:
                error_data = e.response.json()
            except ValueError:
                error_data = e.message
            raise TranscriptionError(f"API Error {e.status_code}: {json.dumps(error_data)}") from e
        except openai.APIError as e:
            raise TranscriptionError(f"Network error: {e}") from e

        text = getattr(response, "text", None)
        if text is None:
            raise TranscriptionError(f"Unexpected API response: {str(response)[:200]}")
        return text
