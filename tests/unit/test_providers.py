from types import SimpleNamespace

import openai
import pytest
import requests

from conftest import FakeResponse, FakeSession
from gpt_chat.composer import compose_request
from gpt_chat.config import Settings
from gpt_chat.errors import ErrorKind, PipelineError
from gpt_chat.providers import HttpVoiceSynthesizer, OpenAIChatProvider, build_voice_synthesizer


class FakeCompletions:
    def __init__(self, result):
        self.result = result
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


def fake_client(result):
    completions = FakeCompletions(result)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)


def test_complete_returns_trimmed_first_choice(settings):
    client, completions = fake_client(completion("  hi there \n"))
    req = compose_request(settings, "hello")
    assert OpenAIChatProvider(client).complete(settings, req) == "hi there"
    assert completions.kwargs["model"] == "gpt-3.5-turbo"
    assert completions.kwargs["messages"] == req.messages
    assert completions.kwargs["timeout"] == settings.timeout


def test_sdk_errors_become_upstream_errors(settings):
    client, _ = fake_client(openai.OpenAIError("connection reset"))
    with pytest.raises(PipelineError) as ei:
        OpenAIChatProvider(client).complete(settings, compose_request(settings, "x"))
    assert ei.value.kind is ErrorKind.UPSTREAM_MODEL_ERROR


@pytest.mark.parametrize("resp", [SimpleNamespace(choices=[]), completion(None), SimpleNamespace()])
def test_malformed_responses_become_upstream_errors(settings, resp):
    client, _ = fake_client(resp)
    with pytest.raises(PipelineError) as ei:
        OpenAIChatProvider(client).complete(settings, compose_request(settings, "x"))
    assert ei.value.kind is ErrorKind.UPSTREAM_MODEL_ERROR


def test_client_is_built_from_settings(monkeypatch):
    seen = {}

    class FakeOpenAI:
        def __init__(self, **kwargs):
            seen.update(kwargs)

    monkeypatch.setattr("gpt_chat.providers.openai_provider.OpenAI", FakeOpenAI)
    p = OpenAIChatProvider()
    cfg = Settings(api_key="k", base_url="https://proxy/v1")
    assert p._build_client(cfg) is p._build_client(cfg)
    assert seen == {"api_key": "k", "base_url": "https://proxy/v1"}


def test_voice_posts_input_and_speaker():
    session = FakeSession(post=FakeResponse(body=b"RIFF"))
    audio = HttpVoiceSynthesizer("http://tts/say", session=session).synthesize("hi", speaker_id=3)
    assert audio == b"RIFF"
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("post", "http://tts/say")
    assert kwargs["json"] == {"input": "hi", "speaker_id": 3}


def test_voice_omits_missing_speaker():
    session = FakeSession(post=FakeResponse(body=b"a"))
    HttpVoiceSynthesizer("http://tts", session=session).synthesize("hi")
    assert session.calls[0][2]["json"] == {"input": "hi"}


@pytest.mark.parametrize("post", [
    requests.ConnectionError("down"),
    FakeResponse(status=500),
    FakeResponse(body=b""),
])
def test_voice_failures_are_classified(post):
    with pytest.raises(PipelineError) as ei:
        HttpVoiceSynthesizer("http://tts", session=FakeSession(post=post)).synthesize("hi")
    assert ei.value.kind is ErrorKind.VOICE_SYNTHESIS_ERROR


def test_voice_backend_is_optional():
    assert build_voice_synthesizer(Settings(api_key="k")) is None
    voice = build_voice_synthesizer(Settings(api_key="k", voice_url="http://tts"))
    assert isinstance(voice, HttpVoiceSynthesizer)
