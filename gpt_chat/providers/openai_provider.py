"""OpenAI chat-completion provider."""
from __future__ import annotations

import logging
from typing import Any, Optional

import openai
from openai import OpenAI

from ..composer import ChatRequest
from ..config import Settings
from ..errors import ErrorKind, PipelineError

logger = logging.getLogger(__name__)


class OpenAIChatProvider:
    """Provider backed by the official OpenAI SDK.

    A client can be injected to ease testing; otherwise one is built lazily
    from the settings and reused.
    """

    def __init__(self, client: Optional[Any] = None):
        self._client = client

    def _build_client(self, cfg: Settings):
        if self._client is None:
            kwargs = {"api_key": cfg.api_key}
            if cfg.base_url:
                kwargs["base_url"] = cfg.base_url
            self._client = OpenAI(**kwargs)
        return self._client

    def complete(self, cfg: Settings, request: ChatRequest) -> str:
        client = self._build_client(cfg)
        logger.info("chat completion: model=%s has_image=%s", request.model, request.has_image)
        try:
            resp = client.chat.completions.create(
                model=request.model,
                messages=request.messages,
                timeout=cfg.timeout,
            )
        except openai.OpenAIError as e:
            raise PipelineError(ErrorKind.UPSTREAM_MODEL_ERROR, "chat completion failed", detail=repr(e)) from e

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise PipelineError(ErrorKind.UPSTREAM_MODEL_ERROR, "unexpected response shape", detail=repr(e)) from e
        if content is None:
            raise PipelineError(ErrorKind.UPSTREAM_MODEL_ERROR, "empty completion")

        usage = getattr(resp, "usage", None)
        if usage is not None:
            logger.info(
                "usage: prompt_tokens=%s completion_tokens=%s total_tokens=%s",
                getattr(usage, "prompt_tokens", None),
                getattr(usage, "completion_tokens", None),
                getattr(usage, "total_tokens", None),
            )
        return content.strip()
