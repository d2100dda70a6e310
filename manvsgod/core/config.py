"""
Centralized Configuration Management for Man vs God

Provides pydantic-based configuration with:
- Environment variable loading (.env support)
- Type validation
- Default values

Usage:
    from manvsgod.core.config import get_config

    config = get_config()
    print(config.google_sheet_id)
    print(config.rules_cooldown_days)
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from manvsgod.core.storage.paths import component_db_path


# Placeholder from the sample .env file; treated as "not configured"
PLACEHOLDER_API_KEY = "your_api_key_here"


class ManVsGodConfig(BaseSettings):
    """
    Central configuration for Man vs God

    All settings can be overridden via environment variables with MANVSGOD_ prefix.
    For example: MANVSGOD_GOOGLE_SHEET_ID, MANVSGOD_LOG_LEVEL, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MANVSGOD_",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================
    # Application Configuration
    # ============================================

    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    max_logs: int = Field(
        default=100,
        ge=1,
        description="Maximum log entries kept in the in-memory log store"
    )

    # ============================================
    # Decision Store (Google Sheets + local fallback)
    # ============================================

    google_sheet_id: Optional[str] = Field(
        default=None,
        description="Spreadsheet ID holding the Decisions sheet"
    )

    google_sheets_api_key: Optional[str] = Field(
        default=None,
        description="Google Sheets API key"
    )

    sheets_range: str = Field(
        default="Decisions!A:E",
        description="A1 range decisions are appended to and read from"
    )

    sheets_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for Google Sheets API calls"
    )

    local_store_path: Path = Field(
        default_factory=lambda: component_db_path("decisions"),
        description="SQLite file used when the spreadsheet is unavailable"
    )

    # ============================================
    # Error Reporting
    # ============================================

    error_form_url: Optional[str] = Field(
        default=None,
        description="Google Form formResponse URL that receives error tracebacks"
    )

    error_form_field: str = Field(
        default="entry.1882440699",
        description="Form field ID that receives the traceback text"
    )

    # ============================================
    # Rules Engine
    # ============================================

    rules_cooldown_days: float = Field(
        default=7.0,
        ge=0,
        description="Minimum days between two evolutions of the same rule"
    )

    rules_analysis_window: int = Field(
        default=100,
        ge=1,
        description="Number of most recent decisions the pattern analyzer looks at"
    )

    # ============================================
    # Chess Puzzles
    # ============================================

    lichess_enabled: bool = Field(
        default=False,
        description="Fetch daily/random puzzles from Lichess instead of the bundled set"
    )

    # ============================================
    # WebUI
    # ============================================

    webui_host: str = Field(default="127.0.0.1", description="WebUI bind host")
    webui_port: int = Field(default=8080, description="WebUI bind port")

    # ============================================
    # Validators
    # ============================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(
                f"log_level must be one of: {', '.join(valid_levels)}"
            )
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        valid = ["development", "staging", "production", "test"]
        if v.lower() not in valid:
            raise ValueError(f"environment must be one of: {', '.join(valid)}")
        return v.lower()

    @property
    def has_sheets_credentials(self) -> bool:
        """True when both spreadsheet id and a real API key are configured"""
        return bool(
            self.google_sheet_id
            and self.google_sheets_api_key
            and self.google_sheets_api_key != PLACEHOLDER_API_KEY
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


# Global config instance
_config: Optional[ManVsGodConfig] = None


def get_config(force_reload: bool = False) -> ManVsGodConfig:
    """
    Get the global configuration instance

    Args:
        force_reload: Force reload configuration from environment

    Returns:
        ManVsGodConfig instance
    """
    global _config

    if _config is None or force_reload:
        _config = ManVsGodConfig()

    return _config
