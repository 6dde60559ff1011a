from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .errors import ErrorKind, PipelineError
from .markup import Element, Node, NodeTransformer, parse, render

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedInput:
    text: str
    image_ref: Optional[str] = None


class ImageExtractor(NodeTransformer):
    """Strip image elements from the tree, capturing the single image source."""

    def __init__(self) -> None:
        self.image_ref: Optional[str] = None

    def visit_img(self, node: Element) -> List[Node]:
        src = node.attrs.get("src") or node.attrs.get("url")
        if src:
            if self.image_ref is not None:
                raise PipelineError(ErrorKind.MULTIPLE_IMAGES, "only one image per message is supported")
            self.image_ref = src
        return []


def normalize_input(raw: str) -> NormalizedInput:
    tree = parse(raw or "")
    logger.debug("parsed markup: %d top-level nodes", len(tree))
    extractor = ImageExtractor()
    text = render(extractor.transform(tree)).strip()
    return NormalizedInput(text=text, image_ref=extractor.image_ref)
