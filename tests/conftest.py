import io
import os
import sys

import pytest
import requests
from requests.structures import CaseInsensitiveDict

# Ensure project root is importable during tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from gpt_chat.config import Settings


def make_image(fmt="PNG", size=(8, 8), color=(100, 150, 200)) -> bytes:
    from PIL import Image

    img = Image.new("RGB", size, color=color)
    b = io.BytesIO()
    img.save(b, format=fmt)
    return b.getvalue()


class FakeResponse:
    def __init__(self, status=200, headers=None, body=b"", chunk=None):
        self.status_code = status
        self.headers = CaseInsensitiveDict(headers or {})
        self.content = body
        self._chunk = chunk

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def iter_content(self, chunk_size=1):
        size = self._chunk or chunk_size
        for i in range(0, len(self.content), size):
            yield self.content[i:i + size]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    """Stands in for the `requests` module; records every call.

    Each of head/get/post takes a FakeResponse or an exception to raise.
    """

    def __init__(self, head=None, get=None, post=None):
        self.results = {"head": head, "get": get, "post": post}
        self.calls = []

    def _call(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        result = self.results[method]
        if isinstance(result, BaseException):
            raise result
        if result is None:
            raise AssertionError(f"unexpected {method.upper()} {url}")
        return result

    def head(self, url, **kwargs):
        return self._call("head", url, **kwargs)

    def get(self, url, **kwargs):
        return self._call("get", url, **kwargs)

    def post(self, url, **kwargs):
        return self._call("post", url, **kwargs)

    def methods(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def settings():
    return Settings(api_key="test-key", system_content="SYS", locale="en")
