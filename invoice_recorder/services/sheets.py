"""
Google Sheets Appender

Flattens an invoice record into one spreadsheet row per line item and
appends the rows in USER_ENTERED mode, so dates and numbers are typed by
Sheets as if entered by hand.
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from invoice_recorder.models.invoice import InvoiceRecord
from invoice_recorder.utils.errors import SheetAppendError
from invoice_recorder.utils.logger import get_logger

logger = get_logger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
VALUE_INPUT_OPTION = "USER_ENTERED"

COLUMNS = [
    "invoiceNo", "date", "seller", "buyer",
    "itemName", "quantity", "unitPrice", "subtotal",
    "tax", "total", "processedAt",
]


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2024-01-12T08:30:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _cell(value: Any) -> Any:
    return "" if value is None else value


def build_rows(record: InvoiceRecord, timestamp: str) -> List[List[Any]]:
    """
    Flatten a record into sheet rows, one per line item in item order.

    A record without items still produces one row, with the item columns
    left empty.
    """
    head = [record.invoice_no, record.date, record.seller, record.buyer]
    tail = [record.tax, record.total, timestamp]

    items = record.items or (None,)
    rows = []
    for item in items:
        if item is None:
            item_cells = [None, None, None, None]
        else:
            item_cells = [item.name, item.quantity, item.unit_price, item.subtotal]
        rows.append([_cell(v) for v in head + item_cells + tail])
    return rows


class SheetAppender:
    """Appends invoice rows to a Google Sheets range."""

    def __init__(self, service, spreadsheet_id: str, sheet_range: str = "Sheet1!A:A"):
        self.service = service
        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range

    @classmethod
    def from_service_account(
        cls,
        credentials_file: Path,
        spreadsheet_id: str,
        sheet_range: str = "Sheet1!A:A",
    ) -> "SheetAppender":
        """Build an appender authenticated with a service account key file."""
        from google.oauth2.service_account import Credentials
        from googleapiclient.discovery import build

        credentials = Credentials.from_service_account_file(
            str(credentials_file), scopes=SHEETS_SCOPES
        )
        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        return cls(service, spreadsheet_id, sheet_range)

    def _append_rows(self, rows: List[List[Any]]) -> dict:
        return self.service.spreadsheets().values().append(
            spreadsheetId=self.spreadsheet_id,
            range=self.sheet_range,
            valueInputOption=VALUE_INPUT_OPTION,
            body={"values": rows},
        ).execute()

    async def append(self, record: InvoiceRecord, timestamp: Optional[str] = None) -> int:
        """
        Append a record to the sheet.

        Args:
            record: Validated invoice record
            timestamp: Processing time stamped on every row (now when omitted)

        Returns:
            int: Number of rows appended

        Raises:
            SheetAppendError: The Sheets API call failed
        """
        rows = build_rows(record, timestamp or utc_timestamp())

        try:
            await asyncio.to_thread(self._append_rows, rows)
        except Exception as e:
            logger.error(f"Sheet append failed: {e}")
            raise SheetAppendError(
                f"Failed to save invoice to Google Sheets: {e}",
                context={"invoice_no": record.invoice_no},
            ) from e

        logger.info(f"Saved invoice {record.invoice_no} to Google Sheets ({len(rows)} rows)")
        return len(rows)
