"""
Pytest configuration and fixtures.
"""

import io
import json
import os

# Must be set before invoice_recorder configures logging on import
os.environ.setdefault("ENABLE_FILE_LOGGING", "false")

import pytest
from PIL import Image, ImageDraw

from invoice_recorder.services.ai_client import AIResponse, BaseAIClient
from invoice_recorder.services.text_extractor import DocumentParser, OcrEngine


FIXTURE_TEXT = (
    "INV-0001 ... 12/01/2024 ... Seller Corp ... Buyer Inc ... "
    "Widget x2 @ 50 = 100 ... Tax: 10 ... Total: 110"
)

FIXTURE_INVOICE = {
    "invoiceNo": "INV-0001",
    "date": "12/01/2024",
    "seller": "Seller Corp",
    "buyer": "Buyer Inc",
    "items": [
        {"name": "Widget", "quantity": 2, "unitPrice": 50, "subtotal": 100},
    ],
    "tax": 10,
    "total": 110,
}


class FakeOcrEngine(OcrEngine):
    """Records recognize() calls and returns canned text."""

    def __init__(self, text: str = FIXTURE_TEXT, error: Exception = None):
        self.text = text
        self.error = error
        self.calls = []

    def recognize(self, image_data: bytes, language: str) -> str:
        self.calls.append((image_data, language))
        if self.error:
            raise self.error
        return self.text


class FakeDocumentParser(DocumentParser):
    """Records parse() calls and returns canned text."""

    def __init__(self, text: str = FIXTURE_TEXT, error: Exception = None):
        self.text = text
        self.error = error
        self.calls = []

    def parse(self, data: bytes) -> str:
        self.calls.append(data)
        if self.error:
            raise self.error
        return self.text


class FakeAIClient(BaseAIClient):
    """Returns a fixed completion and records the requests."""

    def __init__(self, content: str):
        self.content = content
        self.requests = []

    async def generate(self, prompt, system_prompt=None, **kwargs) -> AIResponse:
        self.requests.append({"prompt": prompt, "system_prompt": system_prompt, **kwargs})
        return AIResponse(content=self.content, model="fake-model")


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Reset settings before each test."""
    from invoice_recorder.core.config import reload_settings

    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "test_token")
    monkeypatch.setenv("ENABLE_FILE_LOGGING", "false")

    reload_settings()
    yield
    reload_settings()


@pytest.fixture
def invoice_payload():
    """A fresh copy of the fixture invoice JSON object."""
    return json.loads(json.dumps(FIXTURE_INVOICE))


@pytest.fixture
def invoice_json(invoice_payload):
    """The fixture invoice serialized as a completion would return it."""
    return json.dumps(invoice_payload)


@pytest.fixture
def png_bytes():
    """A small color PNG with dark text-like marks on a light background."""
    image = Image.new("RGB", (200, 60), color=(230, 220, 200))
    draw = ImageDraw.Draw(image)
    draw.rectangle((10, 20, 190, 40), fill=(40, 40, 90))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def fake_ocr():
    """OCR engine returning the fixture invoice text."""
    return FakeOcrEngine()


@pytest.fixture
def fake_parser():
    """PDF parser returning the fixture invoice text."""
    return FakeDocumentParser()


@pytest.fixture
def make_ai_client():
    """Factory for completion clients returning fixed content."""
    return FakeAIClient


@pytest.fixture
def fixture_text():
    """Raw invoice text matching FIXTURE_INVOICE."""
    return FIXTURE_TEXT
