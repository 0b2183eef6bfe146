"""
Text Extractor Module

Turns a downloaded media buffer into raw invoice text. PDFs go through
structural text extraction (pdfplumber); images are enhanced, re-encoded
as JPEG and run through Tesseract OCR. All blocking library calls run in
a worker thread so that several messages can be processed concurrently.
"""

import asyncio
import io
from abc import ABC, abstractmethod
from typing import Callable, Optional

import pdfplumber
import pytesseract
from PIL import Image

from invoice_recorder.services.image_enhancer import encode_jpeg, enhance
from invoice_recorder.utils.errors import (
    DocumentParseError,
    OcrEngineError,
    UnsupportedMediaType,
)
from invoice_recorder.utils.logger import get_logger

logger = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"
IMAGE_MIME_PREFIX = "image/"
DEFAULT_OCR_LANGUAGE = "ind+eng"

# Characters Tesseract is allowed to emit
OCR_WHITELIST = (
    "0123456789"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "./:- "
)

ProgressCallback = Callable[[str, float], None]


class OcrEngine(ABC):
    """Recognizes text in an encoded image."""

    @abstractmethod
    def recognize(self, image_data: bytes, language: str) -> str:
        """Return the text found in the image."""
        pass


class DocumentParser(ABC):
    """Extracts embedded text from a document."""

    @abstractmethod
    def parse(self, data: bytes) -> str:
        """Return the document text in reading order."""
        pass


class TesseractOcrEngine(OcrEngine):
    """OCR through the Tesseract binary (pytesseract)."""

    def __init__(
        self,
        whitelist: str = OCR_WHITELIST,
        preserve_interword_spaces: bool = True,
    ):
        self.whitelist = whitelist
        self.preserve_interword_spaces = preserve_interword_spaces

    def build_config(self) -> str:
        """Build the Tesseract command-line config string."""
        # Quoted so the trailing space in the whitelist survives shlex splitting
        options = [f'-c "tessedit_char_whitelist={self.whitelist}"']
        if self.preserve_interword_spaces:
            options.append("-c preserve_interword_spaces=1")
        return " ".join(options)

    def recognize(self, image_data: bytes, language: str) -> str:
        with Image.open(io.BytesIO(image_data)) as image:
            return pytesseract.image_to_string(
                image,
                lang=language,
                config=self.build_config(),
            )


class PdfPlumberParser(DocumentParser):
    """Text extraction for PDFs that carry a text layer."""

    def parse(self, data: bytes) -> str:
        text_parts = []
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    text_parts.append(page_text)
        return "\n".join(text_parts)


def _decode_image(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def _prepare_for_ocr(image: Image.Image) -> bytes:
    return encode_jpeg(enhance(image))


class TextExtractor:
    """
    Dispatches media by MIME type to PDF parsing or OCR.

    The OCR engine and document parser are injected so that tests and
    alternative deployments can substitute their own.
    """

    def __init__(
        self,
        ocr_engine: Optional[OcrEngine] = None,
        document_parser: Optional[DocumentParser] = None,
        ocr_language: str = DEFAULT_OCR_LANGUAGE,
    ):
        self.ocr_engine = ocr_engine or TesseractOcrEngine()
        self.document_parser = document_parser or PdfPlumberParser()
        self.ocr_language = ocr_language

    @staticmethod
    def normalize_mime_type(mime_type: Optional[str]) -> str:
        """Lowercase a MIME type and drop any parameters."""
        if not mime_type:
            return ""
        return mime_type.split(";", 1)[0].strip().lower()

    def is_supported(self, mime_type: Optional[str]) -> bool:
        """Check whether a MIME type can be extracted."""
        kind = self.normalize_mime_type(mime_type)
        return kind == PDF_MIME_TYPE or kind.startswith(IMAGE_MIME_PREFIX)

    async def extract(
        self,
        data: bytes,
        mime_type: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """
        Extract raw text from a media buffer.

        Args:
            data: Media content
            mime_type: MIME type reported by the chat client
            on_progress: Optional observer for OCR status events

        Returns:
            str: Unstructured text

        Raises:
            UnsupportedMediaType: Neither a PDF nor an image
            DocumentParseError: Buffer is not a readable PDF
            OcrEngineError: Image decode or recognition failed
        """
        kind = self.normalize_mime_type(mime_type)

        if kind == PDF_MIME_TYPE:
            return await self._extract_from_pdf(data)
        if kind.startswith(IMAGE_MIME_PREFIX):
            return await self._extract_from_image(data, on_progress)

        raise UnsupportedMediaType(mime_type)

    async def _extract_from_pdf(self, data: bytes) -> str:
        try:
            text = await asyncio.to_thread(self.document_parser.parse, data)
        except Exception as e:
            logger.error(f"PDF text extraction failed: {e}")
            raise DocumentParseError(f"Failed to read PDF: {e}") from e

        logger.info(f"Extracted {len(text)} characters from PDF")
        return text

    async def _extract_from_image(
        self,
        data: bytes,
        on_progress: Optional[ProgressCallback],
    ) -> str:
        report = on_progress or self._log_progress

        report("decoding image", 0.0)
        try:
            image = await asyncio.to_thread(_decode_image, data)
        except Exception as e:
            raise OcrEngineError(f"Failed to decode image: {e}") from e

        report("enhancing image", 0.25)
        jpeg = await asyncio.to_thread(_prepare_for_ocr, image)

        report("recognizing text", 0.5)
        try:
            text = await asyncio.to_thread(
                self.ocr_engine.recognize, jpeg, self.ocr_language
            )
        except Exception as e:
            logger.error(f"OCR failed: {e}")
            raise OcrEngineError(f"Text recognition failed: {e}") from e

        report("recognized text", 1.0)
        logger.info(f"Extracted {len(text)} characters from image")
        return text

    @staticmethod
    def _log_progress(status: str, progress: float) -> None:
        logger.debug(f"OCR {status} ({progress:.0%})")
