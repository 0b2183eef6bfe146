"""Service modules for extraction, interpretation and persistence."""

from invoice_recorder.services.ai_client import (
    AIResponse,
    BaseAIClient,
    OpenAIClient,
)
from invoice_recorder.services.image_enhancer import enhance, encode_jpeg
from invoice_recorder.services.text_extractor import (
    TextExtractor,
    OcrEngine,
    DocumentParser,
    TesseractOcrEngine,
    PdfPlumberParser,
    OCR_WHITELIST,
)
from invoice_recorder.services.interpreter import (
    InvoiceInterpreter,
    MAX_TEXT_CHARS,
    SYSTEM_PROMPT,
)
from invoice_recorder.services.pipeline import InvoicePipeline, build_pipeline
from invoice_recorder.services.sheets import SheetAppender, build_rows

__all__ = [
    "AIResponse",
    "BaseAIClient",
    "OpenAIClient",
    "enhance",
    "encode_jpeg",
    "TextExtractor",
    "OcrEngine",
    "DocumentParser",
    "TesseractOcrEngine",
    "PdfPlumberParser",
    "OCR_WHITELIST",
    "InvoiceInterpreter",
    "MAX_TEXT_CHARS",
    "SYSTEM_PROMPT",
    "InvoicePipeline",
    "build_pipeline",
    "SheetAppender",
    "build_rows",
]
