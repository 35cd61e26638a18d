"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from decimal import Decimal
from typing import NamedTuple

from loguru import logger
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from affiliate_ledger.config.business_constants import (
    ATTRIBUTION_WINDOW_DAYS,
    BUSINESS_COMMISSION_PCT,
    DEFAULT_CURRENCY,
    HOMECHEFF_BUSINESS_SHARE_PCT,
    LEDGER_PENDING_DAYS,
    MAIN_MAX_DISCOUNT_PCT,
    MAIN_MIN_COMMISSION_PCT,
    MIN_PAYOUT_AMOUNT_CENTS,
    PARENT_BUSINESS_COMMISSION_PCT,
    PARENT_USER_COMMISSION_PCT,
    REFERRAL_COOKIE_NAME,
    REFERRAL_COOKIE_TTL_DAYS,
    SUB_BUSINESS_COMMISSION_PCT,
    SUB_MAX_DISCOUNT_PCT,
    SUB_MIN_COMMISSION_PCT,
    SUB_USER_COMMISSION_PCT,
    USER_COMMISSION_PCT,
)
from commission_calculator import CommissionConfig


class LedgerPolicy(NamedTuple):
    """Time periods governing attribution and ledger lifecycle."""

    attribution_window_days: int
    pending_days: int
    cookie_ttl_days: int


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False
    database_pool_size: int = Field(
        default=10, ge=1, le=100, description="Connection pool size"
    )

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/affiliate_ledger.log"

    # Attribution / lifecycle periods
    attribution_window_days: int = Field(
        default=ATTRIBUTION_WINDOW_DAYS,
        gt=0,
        description="Days an attribution (and revenue share) stays active",
    )
    ledger_pending_days: int = Field(
        default=LEDGER_PENDING_DAYS,
        ge=0,
        description="Days a new commission stays PENDING",
    )
    referral_cookie_name: str = REFERRAL_COOKIE_NAME
    referral_cookie_ttl_days: int = Field(
        default=REFERRAL_COOKIE_TTL_DAYS,
        gt=0,
        description="Referral cookie lifetime in days",
    )
    min_payout_amount_cents: int = Field(
        default=MIN_PAYOUT_AMOUNT_CENTS,
        ge=0,
        description="Minimum AVAILABLE balance for a payout request",
    )
    currency: str = DEFAULT_CURRENCY

    # Commission rates (fractions)
    user_commission_pct: Decimal = Field(default=USER_COMMISSION_PCT, ge=0, le=1)
    sub_user_commission_pct: Decimal = Field(default=SUB_USER_COMMISSION_PCT, ge=0, le=1)
    parent_user_commission_pct: Decimal = Field(
        default=PARENT_USER_COMMISSION_PCT, ge=0, le=1
    )
    business_commission_pct: Decimal = Field(default=BUSINESS_COMMISSION_PCT, ge=0, le=1)
    sub_business_commission_pct: Decimal = Field(
        default=SUB_BUSINESS_COMMISSION_PCT, ge=0, le=1
    )
    parent_business_commission_pct: Decimal = Field(
        default=PARENT_BUSINESS_COMMISSION_PCT, ge=0, le=1
    )
    homecheff_business_share_pct: Decimal = Field(
        default=HOMECHEFF_BUSINESS_SHARE_PCT, ge=0, le=1
    )

    # Discount caps (percent of the affiliate's commission) and floors
    main_max_discount_pct: Decimal = Field(default=MAIN_MAX_DISCOUNT_PCT, ge=0, le=100)
    sub_max_discount_pct: Decimal = Field(default=SUB_MAX_DISCOUNT_PCT, ge=0, le=100)
    main_min_commission_pct: Decimal = Field(default=MAIN_MIN_COMMISSION_PCT, ge=0, le=1)
    sub_min_commission_pct: Decimal = Field(default=SUB_MIN_COMMISSION_PCT, ge=0, le=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_discount_caps(self) -> 'Settings':
        """Validate that discount caps never exceed what the floor allows."""
        for tier, cap, floor in (
            ("MAIN", self.main_max_discount_pct, self.main_min_commission_pct),
            ("SUB", self.sub_max_discount_pct, self.sub_min_commission_pct),
        ):
            if cap > 100 - floor * 100:
                raise ValueError(
                    f'{tier}_MAX_DISCOUNT_PCT ({cap}) exceeds 100 minus the '
                    f'retained commission floor ({floor * 100}%). '
                    'Lower the cap or the floor in .env file.'
                )
        return self

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            # DEBUG must be False in production
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )

            if self.database_url.startswith('sqlite'):
                raise ValueError(
                    'DATABASE_URL must point to PostgreSQL in production. '
                    'SQLite is only supported for tests.'
                )

            if self.database_echo:
                logger.warning(
                    'DATABASE_ECHO is enabled in production. '
                    'SQL statements will be written to the log.'
                )

        return self

    def commission_config(self) -> CommissionConfig:
        """Build the immutable calculator configuration."""
        return CommissionConfig(
            user_commission_pct=self.user_commission_pct,
            sub_user_commission_pct=self.sub_user_commission_pct,
            parent_user_commission_pct=self.parent_user_commission_pct,
            business_commission_pct=self.business_commission_pct,
            sub_business_commission_pct=self.sub_business_commission_pct,
            parent_business_commission_pct=self.parent_business_commission_pct,
            homecheff_business_share_pct=self.homecheff_business_share_pct,
            main_max_discount_pct=self.main_max_discount_pct,
            sub_max_discount_pct=self.sub_max_discount_pct,
            main_min_commission_pct=self.main_min_commission_pct,
            sub_min_commission_pct=self.sub_min_commission_pct,
        )

    def ledger_policy(self) -> LedgerPolicy:
        """Return attribution window, pending period and cookie TTL."""
        return LedgerPolicy(
            attribution_window_days=self.attribution_window_days,
            pending_days=self.ledger_pending_days,
            cookie_ttl_days=self.referral_cookie_ttl_days,
        )


# Global settings instance
settings = Settings()
