"""Public API for gpt_chat.

Expose a small, explicit set of helpers used by the bot and tests.
"""
from importlib.metadata import PackageNotFoundError, version

try:
	__version__ = version("gpt-chat-bot")
except PackageNotFoundError:
	__version__ = "0.0.0"

from .config import Settings, load_config, read_prompt_file, setup_logging
from .errors import ErrorKind, PipelineError
from .normalizer import NormalizedInput, normalize_input
from .media import ImagePayload, ImageType, fetch_image
from .retry import fetch_with_retry
from .composer import ChatRequest, compose_request
from .services.chat import ChatReply, ChatService, VoiceResult

__all__ = [
	"Settings",
	"load_config",
	"read_prompt_file",
	"setup_logging",
	"ErrorKind",
	"PipelineError",
	"NormalizedInput",
	"normalize_input",
	"ImagePayload",
	"ImageType",
	"fetch_image",
	"fetch_with_retry",
	"ChatRequest",
	"compose_request",
	"ChatReply",
	"ChatService",
	"VoiceResult",
	"__version__",
]
