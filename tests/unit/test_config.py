import pytest

import gpt_chat.config as cfg_mod
from gpt_chat import load_config, read_prompt_file
from gpt_chat.config import DEFAULT_SYSTEM_CONTENT

KEYS = [
    "OPENAI_API_KEY", "OPENAI_BASE_URL", "OPENAI_TIMEOUT", "OPENAI_TEXT_MODEL",
    "OPENAI_IMAGE_MODEL", "SYSTEM_CONTENT", "PROMPT_FILE", "USE_VOICE",
    "VOICE_LENGTH_THRESHOLD", "VOICE_SPEAKER_ID", "VOICE_URL", "FETCH_TIMEOUT",
    "BOT_LOCALE", "DEBUG", "BOT_TOKEN",
]


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so teardown also removes values loaded from .env files
    for k in KEYS:
        monkeypatch.setenv(k, "")
        monkeypatch.delenv(k)


def test_defaults(clean_env, monkeypatch, tmp_path):
    monkeypatch.setattr(cfg_mod, "find_dotenv", lambda *a, **k: str(tmp_path / "missing.env"))
    monkeypatch.setenv("OPENAI_API_KEY", "x")
    cfg = load_config()
    assert cfg.api_key == "x"
    assert cfg.text_model == "gpt-3.5-turbo"
    assert cfg.image_model == "gpt-4o"
    assert cfg.system_content == DEFAULT_SYSTEM_CONTENT
    assert cfg.use_voice is False
    assert cfg.voice_length_threshold == 100
    assert cfg.speaker_id is None
    assert cfg.voice_url is None
    assert cfg.locale == "en"


def test_missing_api_key_raises(clean_env, monkeypatch, tmp_path):
    monkeypatch.setattr(cfg_mod, "find_dotenv", lambda *a, **k: str(tmp_path / "missing.env"))
    with pytest.raises(RuntimeError, match="OPENAI_API_KEY is not set"):
        load_config()


def test_load_config_reads_dotenv(clean_env, monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "OPENAI_API_KEY=dot-env-key\n"
        "OPENAI_TEXT_MODEL=text-m\n"
        "OPENAI_IMAGE_MODEL=vision-m\n"
        "USE_VOICE=true\n"
        "VOICE_LENGTH_THRESHOLD=50  # chars\n"
        "VOICE_SPEAKER_ID=3\n"
        "VOICE_URL=http://tts/say\n"
        "BOT_LOCALE=RU\n"
    )
    monkeypatch.setattr(cfg_mod, "find_dotenv", lambda *a, **k: str(env_file))

    cfg = load_config()
    assert cfg.api_key == "dot-env-key"
    assert cfg.text_model == "text-m"
    assert cfg.image_model == "vision-m"
    assert cfg.use_voice is True
    assert cfg.voice_length_threshold == 50
    assert cfg.speaker_id == 3
    assert cfg.voice_url == "http://tts/say"
    assert cfg.locale == "ru"


def test_invalid_int_falls_back(clean_env, monkeypatch, tmp_path):
    monkeypatch.setattr(cfg_mod, "find_dotenv", lambda *a, **k: str(tmp_path / "missing.env"))
    monkeypatch.setenv("OPENAI_API_KEY", "x")
    monkeypatch.setenv("VOICE_LENGTH_THRESHOLD", "lots")
    assert load_config().voice_length_threshold == 100


def test_load_config_finds_env_in_parent(clean_env, monkeypatch, tmp_path):
    root = tmp_path / "proj"
    sub = root / "a" / "b"
    sub.mkdir(parents=True)
    (root / ".env").write_text("OPENAI_API_KEY=parent-key\nBOT_TOKEN=abc123\n")

    monkeypatch.chdir(sub)
    # Ensure find_dotenv returns empty to exercise the fallback search
    monkeypatch.setattr(cfg_mod, "find_dotenv", lambda *a, **k: "")

    import os
    cfg = load_config()
    assert cfg.api_key == "parent-key"
    assert os.environ.get("BOT_TOKEN") == "abc123"


def test_prompt_file_overrides_system_content(clean_env, monkeypatch, tmp_path):
    prompt = tmp_path / "persona.txt"
    prompt.write_text("You are a pirate.\n", encoding="utf-8")
    monkeypatch.setattr(cfg_mod, "find_dotenv", lambda *a, **k: str(tmp_path / "missing.env"))
    monkeypatch.setenv("OPENAI_API_KEY", "x")
    monkeypatch.setenv("SYSTEM_CONTENT", "ignored")
    monkeypatch.setenv("PROMPT_FILE", str(prompt))
    assert load_config().system_content == "You are a pirate."


def test_read_prompt_file_missing(tmp_path):
    assert read_prompt_file(str(tmp_path / "x.txt")) == ""
    assert read_prompt_file(None) == ""
