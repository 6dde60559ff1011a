import asyncio
import logging

from aiogram import Bot, Dispatcher

from gpt_chat import load_config, setup_logging
from gpt_chat.providers import OpenAIChatProvider, build_voice_synthesizer
from gpt_chat.services.chat import ChatService

from .config import bot_token
from .handlers import build_router, setup_bot_commands

logger = logging.getLogger(__name__)


def build_chat_service(cfg=None) -> ChatService:
    """Wire settings, the OpenAI provider and the optional voice backend."""
    cfg = cfg or load_config()
    voice = build_voice_synthesizer(cfg)
    if cfg.use_voice and voice is None:
        logger.warning("USE_VOICE is on but VOICE_URL is not set; replies will be text only")
    return ChatService(cfg, OpenAIChatProvider(), voice=voice)


def build_dispatcher(service: ChatService) -> Dispatcher:
    # chat_service is injected into handlers as workflow data
    dp = Dispatcher(chat_service=service)
    dp.include_router(build_router())
    return dp


async def run() -> None:
    cfg = load_config()
    setup_logging(cfg.debug)
    service = build_chat_service(cfg)

    token = bot_token()
    if not token:
        raise RuntimeError("BOT_TOKEN is not set")

    bot = Bot(token)
    dp = build_dispatcher(service)
    await setup_bot_commands(bot)
    logger.info(
        "starting polling: text_model=%s image_model=%s voice=%s",
        service.cfg.text_model, service.cfg.image_model, service.voice is not None,
    )
    await dp.start_polling(bot)


def start() -> None:
    asyncio.run(run())
