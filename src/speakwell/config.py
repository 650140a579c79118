"""Configuration for SpeakWell"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Environment-driven configuration (.env supported)"""

    # Paths
    BASE_DIR = Path(os.getenv("SPEAKWELL_HOME", Path.home() / ".speakwell")).expanduser()
    RECORDINGS_DIR = BASE_DIR / "recordings"
    LOGS_DIR = BASE_DIR / "logs"
    HISTORY_FILE = BASE_DIR / "recordings.json"

    # Transcription: "whisper" or "elevenlabs"; the other one is the fallback
    STT_PROVIDER = os.getenv("STT_PROVIDER", "whisper")
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    WHISPER_MODEL = os.getenv("WHISPER_MODEL", "whisper-1")
    # Any OpenAI-compatible server; empty uses the official endpoint
    OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "")
    ELEVENLABS_API_KEY = os.getenv("ELEVENLABS_API_KEY", "")
    ELEVENLABS_MODEL = os.getenv("ELEVENLABS_MODEL", "scribe_v1")
    STT_TIMEOUT = float(os.getenv("STT_TIMEOUT", "120"))

    # Language: "auto" or an ISO code such as "en"
    LANGUAGE = os.getenv("LANGUAGE", "auto")

    # Session policy
    MIN_RECORDING_SECONDS = int(os.getenv("MIN_RECORDING_SECONDS", "30"))
    MAX_RECORDING_SECONDS = int(os.getenv("MAX_RECORDING_SECONDS", "60"))

    # Audio
    SAMPLE_RATE = int(os.getenv("SAMPLE_RATE", "16000"))
    CHUNK_SIZE = int(os.getenv("CHUNK_SIZE", "1024"))
    # Set to device index number to force specific mic, or "auto"
    MIC_DEVICE = os.getenv("MIC_DEVICE", "auto")

    # Hotkey
    HOTKEY_MODIFIER = os.getenv("HOTKEY_MODIFIER", "alt")
    HOTKEY_KEY = os.getenv("HOTKEY_KEY", "r")

    NOTIFICATIONS_ENABLED = _flag("NOTIFICATIONS_ENABLED", "true")
    DEBUG = _flag("DEBUG")

    @property
    def language_hint(self) -> str | None:
        return None if self.LANGUAGE == "auto" else self.LANGUAGE

    @classmethod
    def create_dirs(cls):
        cls.RECORDINGS_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOGS_DIR.mkdir(parents=True, exist_ok=True)


config = Config()
