"""Configuration for caixa.

Pydantic Settings with environment variable support. The allocation policy
(percentages of daily revenue and the fixed payroll reserve) lives here so it
can change without touching the ledger rules.

Usage:
    from caixa.config import LedgerSettings

    settings = LedgerSettings()          # CAIXA_* environment / .env
    settings.investment_rate             # Decimal("0.20")

Environment Variables:
    CAIXA_DB_PATH: SQLite database file
    CAIXA_INVESTMENT_RATE: Share of daily revenue moved to investment
    CAIXA_DEBT_PAYOFF_RATE: Share of daily revenue moved to debt payoff
    CAIXA_PAYROLL_RESERVE_AMOUNT: Fixed daily payroll reserve in reais
    CAIXA_SETTLEMENT_MAX_ATTEMPTS: Days searched for a card settlement date
    CAIXA_STRICT_LIQUIDATION_WINDOW: Only settle yesterday's card sales
    CAIXA_LOG_LEVEL: Logging level name
    CAIXA_LOG_JSON: Emit JSON log lines instead of console output
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Ledger and allocation policy settings."""

    model_config = SettingsConfigDict(
        env_prefix="CAIXA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_path: Optional[str] = Field(
        default=None,
        description="SQLite database file (defaults to ~/.caixa/caixa.db)",
    )
    investment_rate: Decimal = Field(
        default=Decimal("0.20"),
        ge=0,
        le=1,
        description="Share of daily revenue allocated to the investment account",
    )
    debt_payoff_rate: Decimal = Field(
        default=Decimal("0.10"),
        ge=0,
        le=1,
        description="Share of daily revenue allocated to the debt payoff account",
    )
    payroll_reserve_amount: Decimal = Field(
        default=Decimal("130.00"),
        ge=0,
        description="Fixed amount moved from cash to the payroll reserve each day",
    )
    settlement_max_attempts: int = Field(
        default=30,
        gt=0,
        le=365,
        description="Maximum days to advance when looking for a settlement date",
    )
    strict_liquidation_window: bool = Field(
        default=False,
        description="Only liquidate card sales made exactly one day before the run date",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Render logs as JSON lines")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the log level is one the logging module knows."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {sorted(valid)}")
        return upper

    @model_validator(mode="after")
    def validate_rates(self) -> "LedgerSettings":
        """Allocations cannot take more than the whole day's revenue."""
        if self.investment_rate + self.debt_payoff_rate > 1:
            raise ValueError("investment_rate + debt_payoff_rate must not exceed 1")
        return self


def get_settings(**overrides) -> LedgerSettings:
    """Load settings from the environment, applying explicit overrides."""
    return LedgerSettings(**overrides)
