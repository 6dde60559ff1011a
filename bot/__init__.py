"""Bot package: thin aiogram adapter around gpt_chat.ChatService."""

from .formatting import simple_markdown_to_html, send_response, send_audio, split_text
from .handlers import build_router, handle_gpt, attachment_markup, setup_bot_commands

__all__ = [
	"simple_markdown_to_html",
	"send_response",
	"send_audio",
	"split_text",
	"build_router",
	"handle_gpt",
	"attachment_markup",
	"setup_bot_commands",
]
