import os

# Bot-only settings; model and pipeline settings live in gpt_chat.config.
# Read lazily: load_config() may have just loaded them from .env


def bot_token():
    return os.getenv("BOT_TOKEN")


def command_name():
    return os.getenv("BOT_COMMAND") or "gpt"


def command_description():
    return os.getenv("BOT_COMMAND_DESCRIPTION") or "Chat with GPT (text and one image)"


# Telegram rejects longer messages; leave room for HTML markup
MAX_MESSAGE_LEN = 3800
