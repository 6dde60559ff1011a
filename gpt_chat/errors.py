"""Error kinds shared by every stage of the chat pipeline.

A single exception type carries an ``ErrorKind`` tag; callers branch on the
tag with ``match`` instead of catching a family of subclasses.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    MULTIPLE_IMAGES = "multiple-images"
    UNSUPPORTED_TYPE = "unsupported-type"
    TOO_LARGE = "too-large"
    TRANSPORT_FAILURE = "transport-failure"
    EXHAUSTED_RETRIES = "exhausted-retries"
    UPSTREAM_MODEL_ERROR = "upstream-model-error"
    VOICE_SYNTHESIS_ERROR = "voice-synthesis-error"

    @property
    def retryable(self) -> bool:
        return self is ErrorKind.TRANSPORT_FAILURE


class PipelineError(Exception):
    def __init__(self, kind: ErrorKind, message: str = "", detail: Optional[str] = None) -> None:
        self.kind = kind
        self.message = message or kind.value
        # raw cause, for logs only
        self.detail = detail
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"PipelineError({self.kind.name}, {self.message!r})"
