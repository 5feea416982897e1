"""
exactmoney — Configuration
Currency table and default currency loaded from environment variables via
pydantic-settings, and the cached process-wide registry built from them.

    EXACTMONEY_DEFAULT_CURRENCY=EUR
    EXACTMONEY_CURRENCIES='{"EUR": {"name": "Euro", "symbol": "€", "precision": 2, "reference_value": "1.17647059"}}'
    EXACTMONEY_FREEZE=true
"""

from __future__ import annotations

import logging
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .currency import CurrencyRegistry

logger = logging.getLogger(__name__)


class CurrencyConfig(BaseModel):
    """One entry of the configured currency table."""

    name: str = Field(min_length=1)
    symbol: str
    precision: int = Field(ge=0)
    reference_value: Decimal = Field(gt=0)

    @field_validator("reference_value", mode="before")
    @classmethod
    def reject_float(cls, v: Any) -> Any:
        if isinstance(v, float):
            raise ValueError(f"reference_value must be a str, int or Decimal, not a float: {v!r}")
        return v


class MoneySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EXACTMONEY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_currency: Optional[str] = None
    currencies: Dict[str, CurrencyConfig] = {}
    freeze: bool = False


@lru_cache()
def get_settings() -> MoneySettings:
    return MoneySettings()


def build_registry(settings: Optional[MoneySettings] = None) -> CurrencyRegistry:
    """
    New registry holding the built-in USD plus every configured currency.

    Raises:
        UnknownCurrency: default_currency is neither built in nor configured
    """
    settings = settings if settings is not None else get_settings()

    registry = CurrencyRegistry()
    for code, currency in settings.currencies.items():
        registry.register(
            code,
            currency.name,
            currency.symbol,
            currency.precision,
            currency.reference_value,
        )
    if settings.default_currency is not None:
        registry.set_default(settings.default_currency)
    if settings.freeze:
        registry.freeze()

    logger.debug(f"Built currency registry from settings: {registry!r}")
    return registry


@lru_cache()
def get_registry() -> CurrencyRegistry:
    """Process-wide registry used by Money when none is injected."""
    return build_registry()
