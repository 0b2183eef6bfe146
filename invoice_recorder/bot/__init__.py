"""Bot handlers and message templates."""

from invoice_recorder.bot.handlers import (
    start_command,
    help_command,
    media_handler,
    error_handler,
    PIPELINE_KEY,
    SHEET_APPENDER_KEY,
)
from invoice_recorder.bot.messages import MessageTemplates, format_amount

__all__ = [
    "start_command",
    "help_command",
    "media_handler",
    "error_handler",
    "PIPELINE_KEY",
    "SHEET_APPENDER_KEY",
    "MessageTemplates",
    "format_amount",
]
