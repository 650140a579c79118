"""SpeakWell - record, transcribe and score spoken English answers"""

__version__ = "1.0.0"
__description__ = "Record, transcribe and score spoken English answers"

__all__ = ["main", "SpeakWell", "__version__"]


def __getattr__(name: str):
    """Lazy import to avoid loading PyAudio on package import.

    This allows importing speakwell.core or speakwell.config without audio
    hardware libraries, which is needed for CI/headless environments.
    """
    if name == "SpeakWell":
        from .main import SpeakWell

        return SpeakWell
    if name == "main":
        from .main import main

        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
