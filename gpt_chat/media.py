"""Fetch a referenced image and turn it into a data URL payload.

Three kinds of references are understood: inline ``data:`` URLs, local
``file:`` URLs and remote http(s) URLs. Remote images are probed with a HEAD
request first so that oversized or non-image bodies are never transferred.
"""
from __future__ import annotations

import base64
import binascii
import io
import logging
import mimetypes
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple
from urllib.parse import unquote_to_bytes, urlparse
from urllib.request import url2pathname

import requests
from PIL import Image, UnidentifiedImageError

from .errors import ErrorKind, PipelineError

logger = logging.getLogger(__name__)

MAX_CONTENT_SIZE = 10485760  # 10 MiB
CHUNK_SIZE = 64 * 1024
DEFAULT_TIMEOUT = 30


class ImageType(str, Enum):
    JPEG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"

    @classmethod
    def from_mime(cls, value: Optional[str]) -> Optional["ImageType"]:
        mime = (value or "").split(";", 1)[0].strip().lower()
        try:
            return cls(mime)
        except ValueError:
            return None


ALLOWED_TYPES = tuple(t.value for t in ImageType)


@dataclass(frozen=True)
class ImagePayload:
    raw_bytes: bytes
    base64: str
    data_url: str
    mime_type: ImageType

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: ImageType) -> "ImagePayload":
        b64 = base64.b64encode(data).decode("ascii")
        return cls(
            raw_bytes=bytes(data),
            base64=b64,
            data_url=f"data:{mime_type.value};base64,{b64}",
            mime_type=mime_type,
        )


def _require_type(mime: Optional[str]) -> ImageType:
    image_type = ImageType.from_mime(mime)
    if image_type is None:
        raise PipelineError(ErrorKind.UNSUPPORTED_TYPE, f"unsupported file type: {mime or 'unknown'}")
    return image_type


def _too_large(size: int) -> PipelineError:
    return PipelineError(ErrorKind.TOO_LARGE, f"file is too large: {size} bytes (max {MAX_CONTENT_SIZE})")


def decode_data_url(ref: str) -> Tuple[str, bytes]:
    """Split ``data:<mime>[;base64],<payload>`` into (mime, bytes).

    Raises ValueError for malformed references.
    """
    if not ref.startswith("data:"):
        raise ValueError("not a data URL")
    header, sep, payload = ref[5:].partition(",")
    if not sep:
        raise ValueError("malformed data URL: missing ','")
    params = [p.strip().lower() for p in header.split(";")]
    mime = params[0] or "text/plain"
    if "base64" in params[1:]:
        try:
            data = base64.b64decode("".join(payload.split()), validate=True)
        except binascii.Error as e:
            raise ValueError(f"malformed data URL: {e}") from e
    else:
        data = unquote_to_bytes(payload)
    return mime, data


def sniff_mime(data: bytes, filename: str = "") -> Optional[str]:
    """Guess the MIME type from the image header, then from the file name."""
    try:
        with Image.open(io.BytesIO(data)) as im:
            fmt = im.format
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError):
        fmt = None
    if fmt and fmt in Image.MIME:
        return Image.MIME[fmt]
    return mimetypes.guess_type(filename)[0]


def _content_length(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


def _load_inline(ref: str) -> ImagePayload:
    mime, data = decode_data_url(ref)
    if len(data) > MAX_CONTENT_SIZE:
        raise _too_large(len(data))
    return ImagePayload.from_bytes(data, _require_type(mime))


def _load_file(ref: str) -> ImagePayload:
    path = url2pathname(urlparse(ref).path)
    size = os.path.getsize(path)
    if size > MAX_CONTENT_SIZE:
        raise _too_large(size)
    with open(path, "rb") as f:
        data = f.read()
    return ImagePayload.from_bytes(data, _require_type(sniff_mime(data, path)))


def _fetch_remote(url: str, headers: Optional[dict], timeout: float, http: Any) -> ImagePayload:
    try:
        head = http.head(url, headers=headers, timeout=timeout, allow_redirects=True)
        head.raise_for_status()
        declared = _content_length(head.headers.get("Content-Length"))
        if declared is not None and declared > MAX_CONTENT_SIZE:
            raise _too_large(declared)
        image_type = _require_type(head.headers.get("Content-Type"))
        logger.debug("HEAD %s: type=%s length=%s", url, image_type.value, declared)

        buf = bytearray()
        with http.get(url, headers=headers, timeout=timeout, stream=True) as resp:
            resp.raise_for_status()
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                buf.extend(chunk)
                if len(buf) > MAX_CONTENT_SIZE:
                    raise _too_large(len(buf))
    except requests.RequestException as e:
        raise PipelineError(ErrorKind.TRANSPORT_FAILURE, f"failed to download {url}", detail=repr(e)) from e
    return ImagePayload.from_bytes(bytes(buf), image_type)


def fetch_image(
    ref: str,
    headers: Optional[dict] = None,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[Any] = None,
) -> ImagePayload:
    """Resolve a media reference to an ``ImagePayload``.

    Policy failures raise ``PipelineError`` with ``UNSUPPORTED_TYPE`` or
    ``TOO_LARGE``; network failures raise ``TRANSPORT_FAILURE``.
    """
    if ref.startswith("data:"):
        return _load_inline(ref)
    if ref.startswith("file:"):
        return _load_file(ref)
    return _fetch_remote(ref, headers or {}, timeout, session or requests)
