"""Core modules for configuration."""

from invoice_recorder.core.config import get_settings, reload_settings, Settings

__all__ = [
    "get_settings",
    "reload_settings",
    "Settings",
]
