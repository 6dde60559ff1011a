import base64
import io
import logging

from aiogram import Router
from aiogram.enums import ChatAction
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command, CommandObject
from aiogram.types import BotCommand, Message

from gpt_chat import i18n
from gpt_chat.errors import ErrorKind, PipelineError
from gpt_chat.media import MAX_CONTENT_SIZE
from gpt_chat.services.chat import ChatService

from .config import command_description, command_name
from .formatting import send_audio, send_response

logger = logging.getLogger(__name__)

async def attachment_markup(msg: Message) -> str:
    """Download an attached photo or image document as an inline <img> element."""
    if msg.photo:
        # the last size is the largest
        file, mime = msg.photo[-1], "image/jpeg"
    elif msg.document and (msg.document.mime_type or "").startswith("image/"):
        file, mime = msg.document, msg.document.mime_type
    else:
        return ""
    size = getattr(file, "file_size", None)
    if size and size > MAX_CONTENT_SIZE:
        raise PipelineError(ErrorKind.TOO_LARGE, f"attachment is too large: {size} bytes")
    buf = io.BytesIO()
    await msg.bot.download(file, destination=buf)
    b64 = base64.b64encode(buf.getvalue()).decode("ascii")
    return f'<img src="data:{mime};base64,{b64}"/>'


async def handle_gpt(msg: Message, command: CommandObject, chat_service: ChatService) -> None:
    text = command.args or ""
    try:
        attachment = await attachment_markup(msg)
    except PipelineError as err:
        await msg.answer(chat_service.describe_error(err))
        return
    except Exception:
        logger.exception("failed to download attachment of message %s", msg.message_id)
        await msg.answer(i18n.text("download-error", chat_service.cfg.locale))
        return
    if attachment:
        text = f"{text} {attachment}".strip()

    try:
        await msg.bot.send_chat_action(chat_id=msg.chat.id, action=ChatAction.TYPING)
    except TelegramAPIError as e:
        logger.debug("failed to send chat action: %s", e)

    reply = await chat_service.reply(text)
    await send_response(msg, reply.text)

    # the text reply is already out; voice only adds to it
    if chat_service.wants_voice(reply):
        result = await chat_service.synthesize(reply.text)
        if result.audio:
            await send_audio(msg, result.audio)
        if result.notice:
            await msg.answer(result.notice)


def build_router() -> Router:
    # the command name may come from .env, so the filter is built after load_config()
    router = Router(name="gpt")
    router.message.register(handle_gpt, Command(command_name()))
    return router


async def setup_bot_commands(bot) -> None:
    try:
        await bot.set_my_commands([BotCommand(command=command_name(), description=command_description())])
    except TelegramAPIError as e:
        logger.warning("failed to register bot commands: %s", e)
