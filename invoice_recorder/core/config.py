"""
Configuration Management Module

Centralized configuration management using Pydantic Settings.
Loads configuration from environment variables and .env files.
"""

from pathlib import Path
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development,
    but should be overridden in production via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars not defined here
    )

    # =========================================================================
    # Telegram Bot Configuration
    # =========================================================================
    telegram_bot_token: Optional[str] = Field(
        default=None,
        description="Telegram bot token from @BotFather",
        alias="TELEGRAM_BOT_TOKEN"
    )

    # =========================================================================
    # Completion Provider Configuration
    # =========================================================================
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key",
        alias="OPENAI_API_KEY"
    )
    openai_model: str = Field(
        default="gpt-4-turbo",
        description="OpenAI model used for invoice extraction",
        alias="OPENAI_MODEL"
    )
    openai_max_tokens: int = Field(
        default=2000,
        description="Maximum tokens for OpenAI responses",
        alias="OPENAI_MAX_TOKENS"
    )
    openai_temperature: float = Field(
        default=0.2,
        description="Temperature for OpenAI responses (0-1)",
        alias="OPENAI_TEMPERATURE"
    )

    # =========================================================================
    # OCR Configuration
    # =========================================================================
    ocr_language: str = Field(
        default="ind+eng",
        description="Tesseract language set, joined with '+'",
        alias="OCR_LANGUAGE"
    )

    # =========================================================================
    # Google Sheets Configuration
    # =========================================================================
    spreadsheet_id: Optional[str] = Field(
        default=None,
        description="Target spreadsheet ID",
        alias="SPREADSHEET_ID"
    )
    sheet_range: str = Field(
        default="Sheet1!A:A",
        description="A1 range rows are appended to",
        alias="SHEET_RANGE"
    )
    google_credentials_file: Path = Field(
        default=Path("credentials.json"),
        description="Service account key file",
        alias="GOOGLE_CREDENTIALS_FILE"
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level",
        alias="LOG_LEVEL"
    )
    log_dir: Path = Field(
        default=Path("./data/logs"),
        description="Log directory",
        alias="LOG_DIR"
    )
    enable_file_logging: bool = Field(
        default=True,
        description="Enable file logging",
        alias="ENABLE_FILE_LOGGING"
    )
    enable_console_logging: bool = Field(
        default=True,
        description="Enable console logging",
        alias="ENABLE_CONSOLE_LOGGING"
    )

    # =========================================================================
    # Development Configuration
    # =========================================================================
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode",
        alias="DEBUG_MODE"
    )

    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator("ocr_language", mode="before")
    @classmethod
    def parse_ocr_language(cls, v: str) -> str:
        """Accept comma-separated language lists as well as 'ind+eng'."""
        if isinstance(v, str) and "," in v:
            return "+".join(x.strip() for x in v.split(",") if x.strip())
        return v

    @field_validator("log_dir", "google_credentials_file", mode="before")
    @classmethod
    def parse_paths(cls, v: str | Path) -> Path:
        """Parse string paths into Path objects."""
        if isinstance(v, str):
            return Path(v)
        return v

    # =========================================================================
    # Properties
    # =========================================================================
    @property
    def sheets_configured(self) -> bool:
        """Check if a target spreadsheet is configured."""
        return bool(self.spreadsheet_id)

    def ensure_directories(self) -> None:
        """Create all necessary directories if they don't exist."""
        if self.enable_file_logging:
            self.log_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance (lazy-loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings instance.

    Returns:
        Settings: Application settings singleton
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.ensure_directories()
    return _settings


def reload_settings() -> Settings:
    """
    Reload settings from environment (useful for testing).

    Returns:
        Settings: Fresh settings instance
    """
    global _settings
    _settings = Settings()
    _settings.ensure_directories()
    return _settings
