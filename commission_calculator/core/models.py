"""Pydantic models for the commission calculator."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from commission_calculator.constants import (
    BUSINESS_COMMISSION_PCT,
    HOMECHEFF_BUSINESS_SHARE_PCT,
    MAIN_MAX_DISCOUNT_PCT,
    MAIN_MIN_COMMISSION_PCT,
    PARENT_BUSINESS_COMMISSION_PCT,
    PARENT_USER_COMMISSION_PCT,
    SUB_BUSINESS_COMMISSION_PCT,
    SUB_MAX_DISCOUNT_PCT,
    SUB_MIN_COMMISSION_PCT,
    SUB_USER_COMMISSION_PCT,
    USER_COMMISSION_PCT,
)


class CommissionConfig(BaseModel):
    """Immutable commission configuration.

    Injected into CommissionCalculator at construction time. All values
    default to the programme constants and can be overridden per
    deployment through application settings.
    """

    model_config = ConfigDict(frozen=True)

    user_commission_pct: Decimal = Field(default=USER_COMMISSION_PCT, ge=0, le=1)
    sub_user_commission_pct: Decimal = Field(default=SUB_USER_COMMISSION_PCT, ge=0, le=1)
    parent_user_commission_pct: Decimal = Field(default=PARENT_USER_COMMISSION_PCT, ge=0, le=1)

    business_commission_pct: Decimal = Field(default=BUSINESS_COMMISSION_PCT, ge=0, le=1)
    sub_business_commission_pct: Decimal = Field(default=SUB_BUSINESS_COMMISSION_PCT, ge=0, le=1)
    parent_business_commission_pct: Decimal = Field(
        default=PARENT_BUSINESS_COMMISSION_PCT, ge=0, le=1
    )
    homecheff_business_share_pct: Decimal = Field(
        default=HOMECHEFF_BUSINESS_SHARE_PCT, ge=0, le=1
    )

    main_max_discount_pct: Decimal = Field(default=MAIN_MAX_DISCOUNT_PCT, ge=0, le=100)
    sub_max_discount_pct: Decimal = Field(default=SUB_MAX_DISCOUNT_PCT, ge=0, le=100)

    main_min_commission_pct: Decimal = Field(default=MAIN_MIN_COMMISSION_PCT, ge=0, le=1)
    sub_min_commission_pct: Decimal = Field(default=SUB_MIN_COMMISSION_PCT, ge=0, le=1)


class BusinessCommissionResult(BaseModel):
    """Split of one business subscription payment."""

    model_config = ConfigDict(frozen=True)

    subscription_fee_cents: int = Field(..., ge=0, description="Pre-discount base price")
    commission_pct: Decimal = Field(..., ge=0, description="Applied affiliate commission rate")
    applied_discount_pct: Decimal = Field(
        ..., ge=0, le=100, description="Requested discount after the tier cap"
    )
    affiliate_commission_cents: int = Field(..., ge=0, description="Nominal affiliate share")
    discount_cents: int = Field(..., ge=0, description="Discount funded by the affiliate")
    final_price_cents: int = Field(..., ge=0, description="What the business pays")
    homecheff_share_cents: int = Field(..., ge=0, description="Platform share, never discounted")
    final_affiliate_commission_cents: int = Field(
        ..., ge=0, description="Affiliate share after discount"
    )
