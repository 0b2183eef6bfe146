"""
Invoice Recorder
================

Chat bot that reads invoice PDFs and photos, extracts the invoice data with
OCR and a language model, and appends it to a Google Sheets spreadsheet.

Quick Start:
    from invoice_recorder.services import build_pipeline

    pipeline = build_pipeline()
    record = await pipeline.process_media(data, "application/pdf")
    print(record.invoice_no, record.total)
"""

__version__ = "1.0.0"
