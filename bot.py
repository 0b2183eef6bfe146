#!/usr/bin/env python3
"""
Invoice Recorder Bot - Main Entry Point

A Telegram bot that reads invoice PDFs and photos, extracts the invoice
data with OCR and OpenAI, and appends it to a Google Sheets spreadsheet.

Usage:
    python bot.py

Environment Variables:
    TELEGRAM_BOT_TOKEN - Required. Get from @BotFather
    OPENAI_API_KEY - Required for invoice extraction
    SPREADSHEET_ID - Target spreadsheet for extracted invoices
    GOOGLE_CREDENTIALS_FILE - Service account key (default: credentials.json)
"""

import asyncio
import signal
import sys
from typing import Optional

from telegram import Update
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CommandHandler,
    MessageHandler,
    filters,
)

from invoice_recorder.core.config import Settings, get_settings
from invoice_recorder.services.ai_client import OpenAIClient
from invoice_recorder.services.pipeline import build_pipeline
from invoice_recorder.services.sheets import SheetAppender
from invoice_recorder.utils.logger import get_logger, configure_logging
from invoice_recorder.bot.handlers import (
    PIPELINE_KEY,
    SHEET_APPENDER_KEY,
    start_command,
    help_command,
    media_handler,
    error_handler,
)

# Configure logging
configure_logging()
logger = get_logger(__name__)

# Global application instance
_application: Optional[Application] = None
_shutdown_event: Optional[asyncio.Event] = None


def initialize_services(application: Application, settings: Settings) -> OpenAIClient:
    """
    Create the pipeline and sheet appender and store them in bot_data.

    Returns:
        OpenAIClient: The completion client, closed on shutdown
    """
    logger.info("Initializing services...")

    ai_client = OpenAIClient(settings)
    if not ai_client.is_available():
        logger.warning("OPENAI_API_KEY not set - invoice extraction will fail")

    application.bot_data[PIPELINE_KEY] = build_pipeline(settings, ai_client)
    logger.info("✅ Invoice pipeline ready", model=settings.openai_model, ocr_language=settings.ocr_language)

    if settings.sheets_configured:
        application.bot_data[SHEET_APPENDER_KEY] = SheetAppender.from_service_account(
            settings.google_credentials_file,
            settings.spreadsheet_id,
            settings.sheet_range,
        )
        logger.info("✅ Google Sheets ready", range=settings.sheet_range)
    else:
        logger.warning("⚠️ SPREADSHEET_ID not set - invoices will not be saved")

    return ai_client


def setup_handlers(application: Application) -> None:
    """
    Set up all bot handlers.

    Args:
        application: The Telegram application instance
    """
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))

    # Any document or photo is treated as an invoice
    application.add_handler(
        MessageHandler(filters.Document.ALL | filters.PHOTO, media_handler)
    )

    application.add_error_handler(error_handler)

    logger.info("Bot handlers registered")


async def run_bot() -> None:
    """
    Main bot execution loop.

    Initializes services, sets up handlers, and runs the bot
    until shutdown signal is received.
    """
    global _application, _shutdown_event

    settings = get_settings()

    if not settings.telegram_bot_token:
        logger.error("TELEGRAM_BOT_TOKEN not set! Please configure your .env file.")
        sys.exit(1)

    logger.info("=" * 60)
    logger.info("Invoice Recorder Bot Starting...")
    logger.info(f"Debug mode: {settings.debug_mode}")
    logger.info("=" * 60)

    _application = (
        ApplicationBuilder()
        .token(settings.telegram_bot_token)
        .concurrent_updates(True)
        .build()
    )

    ai_client = initialize_services(_application, settings)
    setup_handlers(_application)

    _shutdown_event = asyncio.Event()

    def signal_handler(sig, frame):
        logger.info(f"Received signal {sig}, initiating shutdown...")
        _shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    await _application.initialize()
    await _application.start()
    await _application.updater.start_polling(
        drop_pending_updates=True,
        allowed_updates=Update.ALL_TYPES,
    )

    logger.info(f"🚀 Bot is running as @{_application.bot.username}! Press Ctrl+C to stop.")

    try:
        await _shutdown_event.wait()
    except asyncio.CancelledError:
        logger.info("Bot task cancelled")

    logger.info("Shutting down bot...")

    if _application.updater:
        await _application.updater.stop()

    await _application.stop()
    await _application.shutdown()
    await ai_client.close()

    logger.info("👋 Bot stopped. Goodbye!")


def main() -> None:
    """
    Entry point for the bot.

    Sets up the async event loop and runs the bot.
    """
    try:
        asyncio.run(run_bot())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
