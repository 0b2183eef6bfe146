"""
Bot Handlers Module

Telegram bot message handlers for the invoice recorder.
Every incoming document or photo runs through the extraction pipeline and
the resulting invoice is appended to the spreadsheet.
"""

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from invoice_recorder.bot.messages import MessageTemplates
from invoice_recorder.utils.logger import get_logger

logger = get_logger(__name__)
templates = MessageTemplates()

PIPELINE_KEY = "pipeline"
SHEET_APPENDER_KEY = "sheet_appender"

DEFAULT_DOCUMENT_MIME = "application/octet-stream"
PHOTO_MIME = "image/jpeg"


# ============================================================================
# Command Handlers
# ============================================================================

async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.username}) started the bot")

    await update.effective_message.reply_text(
        templates.welcome_message(user.first_name or "there"),
        parse_mode="Markdown",
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command."""
    await update.effective_message.reply_text(
        templates.help_message(),
        parse_mode="Markdown",
    )


# ============================================================================
# Media Handler
# ============================================================================

async def _download_media(message):
    """Return (bytes, mime_type) for a document or photo message."""
    if message.document:
        document = message.document
        file = await document.get_file()
        mime_type = document.mime_type or DEFAULT_DOCUMENT_MIME
    elif message.photo:
        # Largest available size
        file = await message.photo[-1].get_file()
        mime_type = PHOTO_MIME
    else:
        return None, None

    data = await file.download_as_bytearray()
    return bytes(data), mime_type


async def media_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Extract an invoice from an uploaded document or photo and record it."""
    message = update.effective_message
    sender = update.effective_user.id if update.effective_user else message.chat_id

    pipeline = context.bot_data[PIPELINE_KEY]
    appender = context.bot_data.get(SHEET_APPENDER_KEY)

    try:
        data, mime_type = await _download_media(message)
        if data is None:
            return

        logger.info(f"Processing media from {sender}", mime_type=mime_type, size=len(data))
        record = await pipeline.process_media(data, mime_type)

        row_count = None
        if appender is not None:
            row_count = await appender.append(record)
        else:
            logger.warning("No spreadsheet configured, invoice not saved")

    except Exception as e:
        logger.error(f"Failed to process media from {sender}: {e}", exc_info=True)
        await message.reply_text(templates.processing_failed(e))
        return

    try:
        await message.reply_text(templates.invoice_summary(record))
    except TelegramError as e:
        logger.error(f"Failed to send summary to {sender}: {e}", invoice_no=record.invoice_no)

    if row_count is not None:
        await message.reply_text(templates.saved_confirmation(row_count))


# ============================================================================
# Error Handler
# ============================================================================

async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log errors raised outside the media handler."""
    logger.error(f"Update {update} caused error: {context.error}", exc_info=context.error)
