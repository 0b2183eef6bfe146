"""
Unit tests for the invoice pipeline.
"""

import pytest

from invoice_recorder.core.config import reload_settings
from invoice_recorder.models.invoice import LineItem
from invoice_recorder.services.interpreter import InvoiceInterpreter
from invoice_recorder.services.pipeline import InvoicePipeline, build_pipeline
from invoice_recorder.services.text_extractor import TextExtractor
from invoice_recorder.utils.errors import (
    MalformedResponseError,
    OcrEngineError,
    UnsupportedMediaType,
)


@pytest.fixture
def build(fake_ocr, fake_parser, make_ai_client):
    def _build(content):
        client = make_ai_client(content)
        pipeline = InvoicePipeline(
            TextExtractor(ocr_engine=fake_ocr, document_parser=fake_parser),
            InvoiceInterpreter(client),
        )
        return pipeline, client
    return _build


class TestProcessMedia:
    """Tests for process_media()."""

    @pytest.mark.asyncio
    async def test_image_round_trip(self, build, invoice_json, png_bytes, fixture_text):
        """Test an image invoice becomes the expected record."""
        pipeline, client = build(invoice_json)

        record = await pipeline.process_media(png_bytes, "image/jpeg")

        assert record.invoice_no == "INV-0001"
        assert record.date == "12/01/2024"
        assert record.tax == 10
        assert record.items == (
            LineItem(name="Widget", quantity=2, unit_price=50, subtotal=100),
        )
        assert fixture_text in client.requests[0]["prompt"]

    @pytest.mark.asyncio
    async def test_pdf_round_trip(self, build, invoice_json, fake_ocr):
        """Test a PDF invoice skips OCR and yields the same record."""
        pipeline, _ = build(invoice_json)

        record = await pipeline.process_media(b"%PDF-1.7", "application/pdf")

        assert record.invoice_no == "INV-0001"
        assert fake_ocr.calls == []

    @pytest.mark.asyncio
    async def test_unsupported_media_skips_completion(self, build, invoice_json):
        """Test unsupported media never reaches the completion endpoint."""
        pipeline, client = build(invoice_json)

        with pytest.raises(UnsupportedMediaType):
            await pipeline.process_media(b"hello", "text/plain")

        assert client.requests == []

    @pytest.mark.asyncio
    async def test_extraction_error_propagates_unchanged(self, build, invoice_json, fake_ocr, png_bytes):
        """Test stage errors reach the caller without wrapping."""
        pipeline, client = build(invoice_json)
        fake_ocr.error = RuntimeError("engine crashed")

        with pytest.raises(OcrEngineError):
            await pipeline.process_media(png_bytes, "image/png")

        assert client.requests == []

    @pytest.mark.asyncio
    async def test_interpretation_error_propagates(self, build, png_bytes):
        """Test a malformed completion fails the whole run."""
        pipeline, _ = build("not json")

        with pytest.raises(MalformedResponseError):
            await pipeline.process_media(png_bytes, "image/png")

    @pytest.mark.asyncio
    async def test_provider_error_not_wrapped(self, fake_ocr, fake_parser, png_bytes):
        """Test completion provider failures surface as-is."""
        class FailingClient:
            async def generate(self, *args, **kwargs):
                raise ConnectionError("provider unreachable")

        pipeline = InvoicePipeline(
            TextExtractor(fake_ocr, fake_parser),
            InvoiceInterpreter(FailingClient()),
        )

        with pytest.raises(ConnectionError):
            await pipeline.process_media(png_bytes, "image/png")

    @pytest.mark.asyncio
    async def test_progress_forwarded(self, build, invoice_json, png_bytes):
        """Test the progress observer is passed to the extractor."""
        pipeline, _ = build(invoice_json)
        events = []

        await pipeline.process_media(png_bytes, "image/png", on_progress=lambda s, p: events.append(s))

        assert "recognizing text" in events


class TestBuildPipeline:
    """Tests for build_pipeline()."""

    def test_wired_from_settings(self, monkeypatch, make_ai_client):
        """Test configuration reaches the extractor and interpreter."""
        monkeypatch.setenv("OCR_LANGUAGE", "eng")
        monkeypatch.setenv("OPENAI_TEMPERATURE", "0.1")
        settings = reload_settings()
        client = make_ai_client("{}")

        pipeline = build_pipeline(settings, client)

        assert pipeline.extractor.ocr_language == "eng"
        assert pipeline.interpreter.ai_client is client
        assert pipeline.interpreter.temperature == 0.1
        assert pipeline.interpreter.max_tokens == 2000

    def test_defaults_to_openai_client(self):
        """Test the OpenAI client is used when none is supplied."""
        from invoice_recorder.services.ai_client import OpenAIClient

        pipeline = build_pipeline()

        assert isinstance(pipeline.interpreter.ai_client, OpenAIClient)
