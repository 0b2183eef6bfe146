"""Utility modules for logging and errors."""

from invoice_recorder.utils.logger import get_logger, configure_logging
from invoice_recorder.utils.errors import (
    ProcessingError,
    UnsupportedMediaType,
    DocumentParseError,
    OcrEngineError,
    MalformedResponseError,
    IncompleteInvoiceError,
    SheetAppendError,
)

__all__ = [
    "get_logger",
    "configure_logging",
    "ProcessingError",
    "UnsupportedMediaType",
    "DocumentParseError",
    "OcrEngineError",
    "MalformedResponseError",
    "IncompleteInvoiceError",
    "SheetAppendError",
]
