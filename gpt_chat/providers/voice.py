"""HTTP text-to-speech backend (VITS-style ``{input, speaker_id}`` API)."""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..config import Settings
from ..errors import ErrorKind, PipelineError
from .base import VoiceSynthesizer

logger = logging.getLogger(__name__)


class HttpVoiceSynthesizer:
    def __init__(self, url: str, timeout: float = 60, session: Optional[Any] = None):
        self.url = url
        self.timeout = timeout
        self._http = session or requests

    def synthesize(self, text: str, speaker_id: Optional[int] = None) -> bytes:
        payload: dict = {"input": text}
        if speaker_id is not None:
            payload["speaker_id"] = speaker_id
        try:
            resp = self._http.post(self.url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise PipelineError(ErrorKind.VOICE_SYNTHESIS_ERROR, "voice synthesis failed", detail=repr(e)) from e
        if not resp.content:
            raise PipelineError(ErrorKind.VOICE_SYNTHESIS_ERROR, "voice backend returned no audio")
        logger.debug("synthesized %d bytes of audio for %d chars", len(resp.content), len(text))
        return resp.content


def build_voice_synthesizer(cfg: Settings) -> Optional[VoiceSynthesizer]:
    """Return the configured voice backend, or None when there is none."""
    if not cfg.voice_url:
        return None
    return HttpVoiceSynthesizer(cfg.voice_url, timeout=cfg.timeout)
