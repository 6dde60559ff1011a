from typing import Any, Optional, Protocol


class ChatProvider(Protocol):
    """Protocol describing a chat-completion backend."""

    def complete(self, cfg: Any, request: Any) -> str:
        ...


class VoiceSynthesizer(Protocol):
    """Protocol describing an optional text-to-speech backend."""

    def synthesize(self, text: str, speaker_id: Optional[int] = None) -> bytes:
        ...
