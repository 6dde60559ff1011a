from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .config import Settings
from .media import ImagePayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatRequest:
    model: str
    messages: List[dict]

    @property
    def has_image(self) -> bool:
        content = self.messages[-1].get("content") if self.messages else None
        return isinstance(content, list) and any(p.get("type") == "image_url" for p in content)

    def summary(self) -> List[dict]:
        """Messages with image data URLs replaced by their length, for logs."""
        out = []
        for m in self.messages:
            if isinstance(m.get("content"), list):
                parts = []
                for c in m["content"]:
                    if c.get("type") == "image_url":
                        parts.append({"type": "image_url", "len": len(c["image_url"]["url"])})
                    else:
                        parts.append({"type": c.get("type"), "text_snip": (c.get("text") or "")[:200]})
                out.append({"role": m.get("role"), "content": parts})
            else:
                out.append({"role": m.get("role"), "content": (m.get("content") or "")[:200]})
        return out


def compose_request(cfg: Settings, text: str, image: Optional[ImagePayload] = None) -> ChatRequest:
    content: List[dict] = [{"type": "text", "text": text}]
    model = cfg.text_model
    if image is not None:
        content.append({"type": "image_url", "image_url": {"url": image.data_url}})
        model = cfg.image_model

    messages = [
        {"role": "system", "content": cfg.system_content},
        {"role": "user", "content": content},
    ]
    request = ChatRequest(model=model, messages=messages)
    logger.debug("composed request: model=%s messages=%s", model, request.summary())
    return request
