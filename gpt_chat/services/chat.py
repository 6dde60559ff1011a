"""ChatService: runs one /gpt command through the fetch and dispatch pipeline."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from .. import i18n
from ..composer import compose_request
from ..config import Settings
from ..errors import ErrorKind, PipelineError
from ..media import ImagePayload
from ..normalizer import normalize_input
from ..providers.base import ChatProvider, VoiceSynthesizer
from ..retry import fetch_with_retry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatReply:
    text: str
    model: Optional[str] = None
    # False when ``text`` is a prompt or an error message rather than a completion
    from_model: bool = False


@dataclass(frozen=True)
class VoiceResult:
    audio: Optional[bytes] = None
    notice: Optional[str] = None


class ChatService:
    def __init__(
        self,
        cfg: Settings,
        provider: ChatProvider,
        voice: Optional[VoiceSynthesizer] = None,
        fetch: Callable[..., Awaitable[ImagePayload]] = fetch_with_retry,
    ):
        self.cfg = cfg
        self.provider = provider
        self.voice = voice
        self.fetch = fetch

    def _text(self, key: str) -> str:
        return i18n.text(key, self.cfg.locale)

    def describe_error(self, err: PipelineError) -> str:
        """Log ``err`` and return the text the user should see instead."""
        match err.kind:
            case ErrorKind.MULTIPLE_IMAGES:
                logger.info("rejected: %s", err.message)
                return self._text("too-many-images")
            case ErrorKind.UNSUPPORTED_TYPE:
                logger.info("rejected: %s", err.message)
                return self._text("unsupported-file-type")
            case ErrorKind.TOO_LARGE:
                logger.info("rejected: %s", err.message)
                return self._text("file-too-large")
            case ErrorKind.TRANSPORT_FAILURE | ErrorKind.EXHAUSTED_RETRIES:
                logger.error("image download failed: %s (%s)", err.message, err.detail)
                return self._text("download-error")
            case ErrorKind.UPSTREAM_MODEL_ERROR:
                logger.error("error while calling the model: %s (%s)", err.message, err.detail)
                return self._text("model-error")
            case ErrorKind.VOICE_SYNTHESIS_ERROR:
                logger.error("voice synthesis failed: %s (%s)", err.message, err.detail)
                return self._text("voice-error")

    async def _load_image(self, ref: str, headers: Optional[dict]) -> ImagePayload:
        return await self.fetch(ref, headers=headers, timeout=self.cfg.fetch_timeout)

    async def reply(self, message: Optional[str], headers: Optional[dict] = None) -> ChatReply:
        if not message or not message.strip():
            return ChatReply(self._text("prompt-input"))

        image: Optional[ImagePayload] = None
        try:
            normalized = normalize_input(message)
            if normalized.image_ref:
                image = await self._load_image(normalized.image_ref, headers)
        except PipelineError as err:
            return ChatReply(self.describe_error(err))
        except Exception:
            logger.exception("unexpected error while preparing the image")
            return ChatReply(self._text("download-error"))

        if not normalized.text and image is None:
            return ChatReply(self._text("prompt-input"))

        request = compose_request(self.cfg, normalized.text, image)
        try:
            text = await asyncio.to_thread(self.provider.complete, self.cfg, request)
        except PipelineError as err:
            return ChatReply(self.describe_error(err), model=request.model)
        except Exception:
            logger.exception("unexpected error while calling the model")
            return ChatReply(self._text("model-error"), model=request.model)
        return ChatReply(text.strip(), model=request.model, from_model=True)

    def wants_voice(self, reply: ChatReply) -> bool:
        return (
            self.cfg.use_voice
            and self.voice is not None
            and reply.from_model
            and len(reply.text) <= self.cfg.voice_length_threshold
        )

    async def synthesize(self, text: str) -> VoiceResult:
        """Synthesize ``text``; failures become a notice, never an exception."""
        if self.voice is None:
            return VoiceResult()
        try:
            audio = await asyncio.to_thread(self.voice.synthesize, text, self.cfg.speaker_id)
        except PipelineError as err:
            return VoiceResult(notice=self.describe_error(err))
        except Exception:
            logger.exception("unexpected error in voice synthesis")
            return VoiceResult(notice=self._text("voice-error"))
        return VoiceResult(audio=audio)
