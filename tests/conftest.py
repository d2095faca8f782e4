import pytest

from image_translator.errors import EmptyResponseFailure
from image_translator.image import UploadedImage

# Minimal valid 1x1 PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK", text=None):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Records calls to ``post`` and replays a single response or exception."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.exc is not None:
            raise self.exc
        return self.response


class ScriptedClient:
    """Inference client returning (or raising) queued results in order."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def invoke(self, prompt, image_encoded=None):
        self.calls.append((prompt, image_encoded))
        result = self.results.pop(0) if self.results else EmptyResponseFailure()
        if isinstance(result, BaseException):
            raise result
        return result


def success_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def png_image():
    return UploadedImage(PNG_BYTES, "image/png", "sign.png")
