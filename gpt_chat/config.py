from dataclasses import dataclass
from typing import Optional
import logging
import os
import sys

from dotenv import load_dotenv, find_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_CONTENT = (
    "You are Mie. Answer in the language of the question and keep replies "
    "around 100 words. Do not discuss sexual, violent or political topics."
)


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: Optional[str] = None
    timeout: int = 120
    text_model: str = "gpt-3.5-turbo"
    image_model: str = "gpt-4o"
    system_content: str = DEFAULT_SYSTEM_CONTENT
    use_voice: bool = False
    voice_length_threshold: int = 100
    speaker_id: Optional[int] = None
    voice_url: Optional[str] = None
    fetch_timeout: int = 30
    locale: str = "en"
    debug: bool = False


def setup_logging(debug: bool = False) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    # Third-party loggers are noisy at INFO
    for name in ("aiogram.event", "httpx", "urllib3", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _search_dotenv(start: str) -> Optional[str]:
    p = os.path.abspath(start)
    while True:
        cand = os.path.join(p, ".env")
        if os.path.exists(cand):
            return cand
        parent = os.path.dirname(p)
        if parent == p:
            return None
        p = parent


def _flag(value: Optional[str]) -> bool:
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


def load_config() -> Settings:
    # Try find_dotenv(); if it fails to locate a file, search parent directories
    # of the working directory, then of this package.
    _env = find_dotenv()
    if not _env:
        _env = _search_dotenv(os.getcwd()) or _search_dotenv(os.path.dirname(__file__)) or ".env"
    load_dotenv(_env)

    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY is not set")

    def _int_env(name: str, default: Optional[int]) -> Optional[int]:
        v = os.environ.get(name)
        if not v:
            return default
        try:
            return int(v.split("#", 1)[0].strip())
        except ValueError:
            logger.warning("invalid %s=%r, using default %s", name, v, default)
            return default

    system_content = os.environ.get("SYSTEM_CONTENT") or DEFAULT_SYSTEM_CONTENT
    prompt_file = os.environ.get("PROMPT_FILE")
    if prompt_file:
        system_content = read_prompt_file(prompt_file) or system_content

    return Settings(
        api_key=api_key,
        base_url=os.environ.get("OPENAI_BASE_URL") or None,
        timeout=_int_env("OPENAI_TIMEOUT", 120),
        text_model=os.environ.get("OPENAI_TEXT_MODEL") or "gpt-3.5-turbo",
        image_model=os.environ.get("OPENAI_IMAGE_MODEL") or "gpt-4o",
        system_content=system_content,
        use_voice=_flag(os.environ.get("USE_VOICE")),
        voice_length_threshold=_int_env("VOICE_LENGTH_THRESHOLD", 100),
        speaker_id=_int_env("VOICE_SPEAKER_ID", None),
        voice_url=os.environ.get("VOICE_URL") or None,
        fetch_timeout=_int_env("FETCH_TIMEOUT", 30),
        locale=(os.environ.get("BOT_LOCALE") or "en").strip().lower(),
        debug=_flag(os.environ.get("DEBUG")),
    )


def read_prompt_file(path: Optional[str]) -> str:
    if not path:
        return ""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError as e:
        logger.error("failed to read PROMPT_FILE %s: %s", path, e)
        return ""
