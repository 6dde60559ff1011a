"""Chat-completion and voice-synthesis backends."""
from .base import ChatProvider, VoiceSynthesizer
from .openai_provider import OpenAIChatProvider
from .voice import HttpVoiceSynthesizer, build_voice_synthesizer

__all__ = [
    "ChatProvider",
    "VoiceSynthesizer",
    "OpenAIChatProvider",
    "HttpVoiceSynthesizer",
    "build_voice_synthesizer",
]
