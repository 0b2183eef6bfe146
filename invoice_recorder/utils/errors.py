"""
Error Taxonomy

Every failure of one invoice run is raised as a ProcessingError subclass.
None of them are retried: they end the run for the current message and the
chat handler turns the message text into the user's error reply.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ProcessingError(Exception):
    """Base exception for processing errors."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)


class UnsupportedMediaType(ProcessingError):
    """Media is neither a PDF nor an image."""

    def __init__(self, mime_type: str):
        super().__init__(
            f"Unsupported file type: {mime_type or 'unknown'}",
            context={"mime_type": mime_type},
        )
        self.mime_type = mime_type


class DocumentParseError(ProcessingError):
    """The buffer could not be read as a PDF document."""
    pass


class OcrEngineError(ProcessingError):
    """Image decoding or text recognition failed."""
    pass


class MalformedResponseError(ProcessingError):
    """The completion output is not a JSON invoice object."""

    def __init__(self, message: str, raw_response: Optional[str] = None):
        super().__init__(message, context={"raw_response": raw_response})
        self.raw_response = raw_response


class IncompleteInvoiceError(ProcessingError):
    """Required invoice fields are missing from the completion output."""

    def __init__(self, missing_fields):
        self.missing_fields = list(missing_fields)
        super().__init__(
            f"Incomplete invoice data, missing: {', '.join(self.missing_fields)}",
            context={"missing_fields": self.missing_fields},
        )


class SheetAppendError(ProcessingError):
    """Appending rows to the spreadsheet failed."""
    pass
