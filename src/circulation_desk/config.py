"""Configuration management for the Circulation Desk.

Lending policy (loan period, daily fine, quotas) and process settings are
loaded from the environment with pydantic-settings:
1. Policy constants - loan period, fine rate, quota and fine cap
2. Server metadata - name and version reported over MCP
3. Development switches - log level, debug, sample data
"""

from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LibrarySettings(BaseSettings):
    """Circulation Desk configuration.

    Every value can be overridden with a ``CIRCULATION_DESK_`` prefixed
    environment variable or a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="CIRCULATION_DESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Server Metadata ===

    server_name: str = Field(
        default="circulation-desk",
        description="Name reported to MCP clients during the handshake",
        pattern=r"^[a-z0-9-]+$",
    )

    server_version: str = Field(
        default="0.1.0",
        description="Server version for capability negotiation",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
    )

    # === Lending Policy ===

    loan_period_days: int = Field(
        default=14,
        description="Days a book may be kept before the loan is overdue",
        ge=1,
        le=365,
    )

    daily_fine_rate: Decimal = Field(
        default=Decimal("500"),
        description="Fine charged per day a book is returned late",
        ge=0,
    )

    max_active_loans: int = Field(
        default=3,
        description="Maximum number of books a member may hold at once",
        ge=1,
        le=50,
    )

    max_fine: Decimal = Field(
        default=Decimal("5000"),
        description="Fine balance cap; members at the cap cannot borrow",
        gt=0,
    )

    top_books_limit: int = Field(
        default=5,
        description="Number of books listed in the most-borrowed report",
        ge=1,
        le=100,
    )

    # === Development Configuration ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    preload_sample_data: bool = Field(
        default=True,
        description="Load the sample catalog and members at startup",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lowercase level names from the environment."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("server_name")
    @classmethod
    def validate_server_name(cls, v: str) -> str:
        """Keep server names short enough for client listings."""
        if len(v) < 3:
            raise ValueError("Server name must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Server name must not exceed 50 characters")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.debug or self.log_level == "DEBUG"

    @property
    def effective_log_level(self) -> str:
        """Level handed to logging; debug forces DEBUG."""
        return "DEBUG" if self.debug else self.log_level

    @property
    def server_info(self) -> dict[str, str]:
        """Server information sent during the MCP handshake."""
        return {
            "name": self.server_name,
            "version": self.server_version,
            "transport": "stdio",
        }


class _ConfigStore:
    """Internal storage for configuration singleton."""

    _instance: LibrarySettings | None = None


def get_config() -> LibrarySettings:
    """Get or create the global configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = LibrarySettings()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]
