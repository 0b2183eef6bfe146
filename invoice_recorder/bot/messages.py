"""
Message templates for user interactions.
All user-facing messages are centralized here for easy maintenance and localization.
"""

from typing import Optional

from invoice_recorder.models.invoice import InvoiceRecord, LineItem

CURRENCY = "Rp"

# Telegram rejects longer text messages
MAX_MESSAGE_LENGTH = 4096


def format_amount(value: Optional[float]) -> str:
    """Format a number with Indonesian grouping: 1.234.567 or 1.234,5."""
    if value is None:
        return "-"
    if float(value).is_integer():
        return f"{int(value):,}".replace(",", ".")
    text = f"{value:,.2f}".rstrip("0").rstrip(".")
    return text.translate(str.maketrans({",": ".", ".": ","}))


def _money(value: Optional[float]) -> str:
    return "-" if value is None else f"{CURRENCY} {format_amount(value)}"


def _text(value: Optional[str]) -> str:
    return value if value else "-"


def _item_line(position: int, item: LineItem) -> str:
    return (
        f"{position}. {_text(item.name)} "
        f"({format_amount(item.quantity)} x {_money(item.unit_price)}) "
        f"= {_money(item.subtotal)}"
    )


class MessageTemplates:
    """Centralized message templates for the bot."""

    # ============ WELCOME & GENERAL ============

    def welcome_message(self, first_name: str) -> str:
        """Welcome message shown at /start."""
        return f"""👋 Hello {first_name}!

Send me an invoice as a *PDF* or a *photo* and I'll read it and record it in Google Sheets.

Type /help to see what I can do."""

    def help_message(self) -> str:
        """Help message for /help command."""
        return """ℹ️ *Invoice Recorder - Help*

*Available Commands:*
/start - Show the welcome message
/help - Show this help message

*How it works:*
1. Send an invoice PDF or a photo of an invoice
2. I read the text and extract the invoice details
3. You get a summary and the invoice is added to the spreadsheet

*Supported File Types:*
- PDF documents with a text layer
- JPEG/PNG images"""

    # ============ RESULTS ============

    def invoice_summary(self, record: InvoiceRecord, max_length: int = MAX_MESSAGE_LENGTH) -> str:
        """
        Summary of an extracted invoice.

        Trailing items are replaced by a count when the full list would not
        fit in one message.
        """
        lines = [
            "✅ Invoice recorded:",
            "",
            f"📄 Number: {_text(record.invoice_no)}",
            f"📅 Date: {_text(record.date)}",
            f"🏢 Seller: {_text(record.seller)}",
            f"🧍 Buyer: {_text(record.buyer)}",
            f"🧾 Tax: {_money(record.tax)}",
            f"💰 Total: {_money(record.total)}",
            "",
            "📦 Items:",
        ]

        if not record.items:
            lines.append("(no items found)")
        item_lines = [_item_line(i, item) for i, item in enumerate(record.items, 1)]

        text = "\n".join(lines + item_lines)
        while len(text) > max_length and item_lines:
            item_lines.pop()
            hidden = len(record.items) - len(item_lines)
            text = "\n".join(lines + item_lines + [f"... and {hidden} more item(s)"])

        return text[:max_length]

    def saved_confirmation(self, row_count: int) -> str:
        """Confirmation sent after the sheet append succeeded."""
        noun = "row" if row_count == 1 else "rows"
        return f"✅ Invoice saved to Google Sheets ({row_count} {noun})."

    def processing_failed(self, error: Exception) -> str:
        """Failure notice carrying the error's message text."""
        message = getattr(error, "message", None) or str(error) or error.__class__.__name__
        return f"❌ Failed to process invoice: {message}"
