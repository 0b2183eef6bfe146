"""Data models for the invoice recorder."""

from invoice_recorder.models.invoice import InvoiceRecord, LineItem

__all__ = [
    "InvoiceRecord",
    "LineItem",
]
