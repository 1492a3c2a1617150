import base64
import struct
import zlib
from types import SimpleNamespace

import pytest

from dish_analyzer.config import CREDENTIAL_ENV_VARS
from dish_analyzer.errors import AdapterFailure
from dish_analyzer.models import AnalysisRequest
from dish_analyzer.providers.base import ImageAnalysisProvider

FAKE_IMAGE = b"\xff\xd8\xff\xe0fake-jpeg-bytes"
FAKE_IMAGE_B64 = base64.b64encode(FAKE_IMAGE).decode("utf-8")


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self.payload is None:
            raise ValueError("No JSON body")
        return self.payload


class FakeSession:
    """Stands in for ``requests``: hands out queued responses, records calls."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append(SimpleNamespace(url=url, **kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeProvider(ImageAnalysisProvider):
    def __init__(self, name, result=None, error=None):
        self.name = name
        self.result = result
        self.error = error
        self.calls = 0

    def analyze(self, request):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


def failing(name, reason="boom"):
    return FakeProvider(name, error=AdapterFailure(name, reason))


@pytest.fixture
def request_():
    return AnalysisRequest.from_bytes(FAKE_IMAGE)


@pytest.fixture
def no_credentials(monkeypatch):
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _png_chunk(kind, data):
    body = kind + data
    return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body) & 0xFFFFFFFF)


def oversized_png_header(width=20000, height=20000):
    """PNG whose header declares a huge canvas; Pillow refuses it as a decompression bomb."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", ihdr)
        + _png_chunk(b"IDAT", zlib.compress(b"\x00" * 16))
        + _png_chunk(b"IEND", b"")
    )
