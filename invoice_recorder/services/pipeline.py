"""
Invoice Pipeline

Composes text extraction and interpretation into the single entry point
the chat handlers call for every media message.
"""

from typing import Optional

from invoice_recorder.core.config import Settings, get_settings
from invoice_recorder.models.invoice import InvoiceRecord
from invoice_recorder.services.ai_client import BaseAIClient, OpenAIClient
from invoice_recorder.services.interpreter import InvoiceInterpreter
from invoice_recorder.services.text_extractor import ProgressCallback, TextExtractor
from invoice_recorder.utils.logger import get_logger

logger = get_logger(__name__)


class InvoicePipeline:
    """Extract then interpret; stage errors propagate unchanged."""

    def __init__(self, extractor: TextExtractor, interpreter: InvoiceInterpreter):
        self.extractor = extractor
        self.interpreter = interpreter

    async def process_media(
        self,
        data: bytes,
        mime_type: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> InvoiceRecord:
        """
        Turn a media buffer into a validated invoice record.

        Args:
            data: Downloaded attachment bytes
            mime_type: Attachment MIME type
            on_progress: Optional OCR progress observer

        Returns:
            InvoiceRecord: The extracted invoice
        """
        logger.debug(f"Processing {len(data)} bytes of {mime_type}")
        text = await self.extractor.extract(data, mime_type, on_progress=on_progress)
        return await self.interpreter.interpret(text)


def build_pipeline(
    settings: Optional[Settings] = None,
    ai_client: Optional[BaseAIClient] = None,
) -> InvoicePipeline:
    """
    Wire the default extractor and interpreter from configuration.

    Args:
        settings: Application settings (global settings when omitted)
        ai_client: Completion client (OpenAI client when omitted)

    Returns:
        InvoicePipeline: Ready-to-use pipeline
    """
    settings = settings or get_settings()
    ai_client = ai_client or OpenAIClient(settings)

    extractor = TextExtractor(ocr_language=settings.ocr_language)
    interpreter = InvoiceInterpreter(
        ai_client,
        temperature=settings.openai_temperature,
        max_tokens=settings.openai_max_tokens,
    )
    return InvoicePipeline(extractor, interpreter)
