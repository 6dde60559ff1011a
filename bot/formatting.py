import logging
import re
from typing import List, Optional

from aiogram.exceptions import TelegramBadRequest
from aiogram.types import BufferedInputFile, Message

from .config import MAX_MESSAGE_LEN

logger = logging.getLogger(__name__)


def simple_markdown_to_html(md: str) -> str:
    def esc(s):
        return (
            s.replace("&", "&amp;")
             .replace("<", "&lt;")
             .replace(">", "&gt;")
        )

    code_placeholders = []

    def code_repl(m):
        code_placeholders.append(m.group(1))
        return f"{{{{CODE{len(code_placeholders)-1}}}}}"

    html = esc(re.sub(r"`([^`]+?)`", code_repl, md))

    html = re.sub(r"^#{1,6} (.+)$", r"<b>\1</b>", html, flags=re.MULTILINE)
    html = re.sub(r"(?<!\w)\*\*(.+?)\*\*(?!\w)", r"<b>\1</b>", html)
    html = re.sub(r"^[*-] (.+)$", r"• \1", html, flags=re.MULTILINE)
    html = re.sub(r"\n{3,}", "\n\n", html)

    for i, code in enumerate(code_placeholders):
        html = html.replace(f"{{{{CODE{i}}}}}", f"<code>{esc(code)}</code>")
    return html


def split_text(text: str, limit: int = MAX_MESSAGE_LEN) -> List[str]:
    """Split on paragraph or line boundaries where possible."""
    chunks = []
    rest = text
    while len(rest) > limit:
        cut = rest.rfind("\n\n", 0, limit)
        if cut <= 0:
            cut = rest.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        chunks.append(rest[:cut])
        rest = rest[cut:].lstrip("\n")
    if rest:
        chunks.append(rest)
    return chunks


async def send_response(msg: Message, text: Optional[str]) -> None:
    if not text:
        await msg.answer("⚠ Empty reply.")
        return
    for chunk in split_text(text):
        try:
            await msg.answer(simple_markdown_to_html(chunk), parse_mode="HTML")
        except TelegramBadRequest as e:
            logger.warning("HTML rejected by Telegram (%s), sending plain text", e)
            await msg.answer(chunk)


async def send_audio(msg: Message, audio: bytes, filename: str = "reply.wav") -> None:
    await msg.answer_audio(BufferedInputFile(audio, filename=filename))
