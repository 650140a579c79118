"""STT Provider Factory for SpeakWell.

Provides factory functions and a fallback mechanism for STT providers.

Usage:
    # Get primary provider with automatic fallback
    provider = get_stt_provider_with_fallback()

    # Get specific provider
    whisper = get_stt_provider("whisper")

    # List available providers
    available = get_available_stt_providers()  # ["whisper", "elevenlabs"]
"""

from .config import config
from .stt_provider import NullSTTProvider, STTProvider, STTProviderConfig

PROVIDER_NAMES = ("whisper", "elevenlabs")

# Cached provider instances (singleton pattern)
_providers: dict[str, STTProvider] = {}


def _create_whisper_provider() -> STTProvider | None:
    if not config.OPENAI_API_KEY:
        return None

    from .stt_whisper import WhisperSTTProvider

    provider_config = STTProviderConfig(
        api_key=config.OPENAI_API_KEY,
        model=config.WHISPER_MODEL,
        timeout=config.STT_TIMEOUT,
        language=config.language_hint,
        extra={"base_url": config.OPENAI_BASE_URL},
    )
    return WhisperSTTProvider(provider_config)


def _create_elevenlabs_provider() -> STTProvider | None:
    if not config.ELEVENLABS_API_KEY:
        return None

    from .stt_elevenlabs import ElevenLabsSTTProvider

    provider_config = STTProviderConfig(
        api_key=config.ELEVENLABS_API_KEY,
        model=config.ELEVENLABS_MODEL,
        timeout=config.STT_TIMEOUT,
        language=config.language_hint,
    )
    return ElevenLabsSTTProvider(provider_config)


def get_stt_provider(name: str | None = None) -> STTProvider:
    """Get STT provider by name or use configured default.

    Args:
        name: Provider name ("whisper", "elevenlabs") or None for default

    Returns:
        STTProvider instance (NullSTTProvider if unavailable)
    """
    if name is None:
        name = config.STT_PROVIDER.lower()

    if name in _providers:
        return _providers[name]

    provider: STTProvider | None = None
    if name == "whisper":
        provider = _create_whisper_provider()
    elif name == "elevenlabs":
        provider = _create_elevenlabs_provider()

    if provider is None or not provider.is_available():
        provider = NullSTTProvider()

    _providers[name] = provider
    return provider


def get_stt_provider_with_fallback() -> STTProvider:
    """Get the configured STT provider, falling back to the other one.

    Returns:
        First available STTProvider, or NullSTTProvider if none available
    """
    primary = config.STT_PROVIDER.lower()
    order = [primary] + [name for name in PROVIDER_NAMES if name != primary]

    for provider_name in order:
        provider = get_stt_provider(provider_name)
        if provider.is_available():
            return provider

    return NullSTTProvider()


def get_available_stt_providers() -> list[str]:
    """Get list of provider names that are configured and usable."""
    return [name for name in PROVIDER_NAMES if get_stt_provider(name).is_available()]


def clear_stt_provider_cache():
    """Clear cached provider instances.

    Useful for testing or when configuration changes.
    """
    global _providers
    _providers = {}
