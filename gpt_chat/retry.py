from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .errors import ErrorKind, PipelineError
from .media import DEFAULT_TIMEOUT, ImagePayload, fetch_image

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5
RETRY_DELAY = 20.0  # seconds


async def fetch_with_retry(
    ref: str,
    headers: Optional[dict] = None,
    attempts: int = MAX_ATTEMPTS,
    delay: float = RETRY_DELAY,
    timeout: float = DEFAULT_TIMEOUT,
    fetch: Callable[..., ImagePayload] = fetch_image,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> ImagePayload:
    """Run ``fetch`` in a worker thread, retrying transport failures only.

    Every attempt covers the whole fetch (probe and body). Policy errors and
    unexpected exceptions propagate on the first attempt.
    """
    last: Optional[PipelineError] = None
    for attempt in range(1, attempts + 1):
        try:
            return await asyncio.to_thread(fetch, ref, headers, timeout)
        except PipelineError as err:
            if not err.kind.retryable:
                raise
            last = err
        if attempt < attempts:
            logger.warning(
                "image download failed (%s), retry %d of %d in %.0f s",
                last.detail or last.message, attempt, attempts - 1, delay,
            )
            await sleep(delay)

    raise PipelineError(
        ErrorKind.EXHAUSTED_RETRIES,
        f"download failed after {attempts} attempts",
        detail=last.detail if last else None,
    ) from last
