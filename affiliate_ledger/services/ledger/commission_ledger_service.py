"""
Commission ledger service.

Turns paid invoices, paid orders and refunds/chargebacks into signed,
idempotent ledger entries. One upstream event id yields at most one entry
per key; sub-affiliate events add a second ``<id>_parent`` entry for the
upline.

Storage failures here are never swallowed: a dropped commission entry is
a financial correctness bug, so the transaction is rolled back and
LedgerWriteError is raised to the payment-event caller.
"""

import functools
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.config.business_constants import PARENT_EVENT_SUFFIX
from affiliate_ledger.config.settings import settings
from affiliate_ledger.models.affiliate import Affiliate
from affiliate_ledger.models.enums import (
    AttributionType,
    CommissionTier,
    LedgerEventType,
    LedgerStatus,
)
from affiliate_ledger.repositories.affiliate_repository import AffiliateRepository
from affiliate_ledger.repositories.business_subscription_repository import (
    BusinessSubscriptionRepository,
)
from affiliate_ledger.repositories.commission_ledger_repository import (
    CommissionLedgerRepository,
)
from affiliate_ledger.services.attribution.attribution_service import AttributionService
from affiliate_ledger.services.base_service import BaseService
from affiliate_ledger.utils.datetime_utils import days_from, ensure_aware, utc_now
from affiliate_ledger.utils.exceptions import LedgerWriteError
from commission_calculator import CommissionCalculator, format_cents, round_cents


T = TypeVar("T")


class LedgerSkipReason(StrEnum):
    """Why a payment event produced no ledger entry."""

    DUPLICATE_EVENT = "DUPLICATE_EVENT"
    SUBSCRIPTION_NOT_FOUND = "SUBSCRIPTION_NOT_FOUND"
    NO_ATTRIBUTION = "NO_ATTRIBUTION"
    WINDOW_EXPIRED = "WINDOW_EXPIRED"
    ZERO_COMMISSION = "ZERO_COMMISSION"
    NOTHING_TO_REVERSE = "NOTHING_TO_REVERSE"


@dataclass
class LedgerResult:
    """Outcome of a ledger write."""

    recorded: bool
    entry_ids: list[int] = field(default_factory=list)
    total_cents: int = 0
    skip_reason: LedgerSkipReason | None = None

    @classmethod
    def skipped(cls, reason: LedgerSkipReason) -> "LedgerResult":
        return cls(recorded=False, skip_reason=reason)


def parent_event_id(event_id: str) -> str:
    """Idempotency key of the upline entry derived from ``event_id``."""
    return f"{event_id}{PARENT_EVENT_SUFFIX}"


def ledger_write(func: Callable[..., T]) -> Callable[..., T]:
    """
    Run a ledger write as one unit of work.

    Commits on success. On a storage error rolls back and raises
    LedgerWriteError for the event id passed as first argument.
    """
    @functools.wraps(func)
    async def wrapper(self: "CommissionLedgerService", event_id: str, *args: Any, **kwargs: Any) -> Any:
        try:
            result = await func(self, event_id, *args, **kwargs)
            await self.commit()
            return result
        except SQLAlchemyError as e:
            await self.rollback()
            self.logger.error(
                "Ledger write failed, transaction rolled back",
                extra={
                    "event_id": event_id,
                    "function": func.__name__,
                    "error": type(e).__name__,
                },
            )
            raise LedgerWriteError(event_id) from e

    return wrapper


class CommissionLedgerService(BaseService):
    """
    Commission ledger.

    Entry lifecycle: PENDING -> AVAILABLE (release sweep) and
    PENDING|AVAILABLE -> REVERSED (paired with a negative REVERSED entry).
    """

    def __init__(
        self,
        session: AsyncSession,
        calculator: CommissionCalculator | None = None,
        pending_days: int | None = None,
    ) -> None:
        super().__init__(session)
        self.ledger_repo = CommissionLedgerRepository(session)
        self.affiliate_repo = AffiliateRepository(session)
        self.subscription_repo = BusinessSubscriptionRepository(session)
        self.attribution_service = AttributionService(session)
        self.calculator = calculator or CommissionCalculator(settings.commission_config())
        self.pending_days = (
            pending_days if pending_days is not None else settings.ledger_pending_days
        )
        self.currency = settings.currency

    # === Invoice paid (business subscriptions) ===

    @ledger_write
    async def record_invoice_paid(
        self,
        invoice_id: str,
        subscription_id: str,
        amount_paid_cents: int,
        metadata: dict[str, Any] | None = None,
    ) -> LedgerResult:
        """
        Credit the affiliate behind a business subscription invoice.

        Args:
            invoice_id: Provider invoice id (idempotency key)
            subscription_id: Provider subscription id
            amount_paid_cents: Invoice amount, used as the commission base
            metadata: Extra context merged into entry meta

        Returns:
            LedgerResult

        Raises:
            LedgerWriteError: On storage failure
        """
        if await self.ledger_repo.event_exists(invoice_id):
            self.logger.info(
                "Invoice already processed",
                extra={"invoice_id": invoice_id},
            )
            return LedgerResult.skipped(LedgerSkipReason.DUPLICATE_EVENT)

        subscription = await self.subscription_repo.get_by_external_id(subscription_id)
        if subscription is None:
            self.logger.warning(
                "Business subscription not found for invoice",
                extra={"invoice_id": invoice_id, "subscription_id": subscription_id},
            )
            return LedgerResult.skipped(LedgerSkipReason.SUBSCRIPTION_NOT_FOUND)

        attribution = subscription.attribution
        if attribution is None:
            self.logger.debug(
                "Subscription has no attribution",
                extra={"invoice_id": invoice_id, "subscription_id": subscription_id},
            )
            return LedgerResult.skipped(LedgerSkipReason.NO_ATTRIBUTION)

        now = utc_now()
        if now > ensure_aware(subscription.ends_at):
            self.logger.warning(
                "Revenue share window expired",
                extra={
                    "invoice_id": invoice_id,
                    "subscription_id": subscription_id,
                    "ends_at": str(subscription.ends_at),
                },
            )
            return LedgerResult.skipped(LedgerSkipReason.WINDOW_EXPIRED)

        affiliate = await self.affiliate_repo.get_by_id(attribution.affiliate_id)
        is_sub = affiliate.is_sub_affiliate
        promo = subscription.promo_code
        discount_share_pct = promo.discount_share_pct if promo and promo.is_active else 0

        split = self.calculator.calculate_business_subscription_commission(
            amount_paid_cents,
            discount_share_pct,
            is_sub_affiliate=is_sub,
            custom_commission_pct=affiliate.custom_business_commission_pct,
        )

        base_meta = {
            "invoice_id": invoice_id,
            "subscription_id": subscription_id,
            "base_amount_cents": amount_paid_cents,
            "amount_paid_cents": amount_paid_cents,
        }
        result = LedgerResult(recorded=False)
        available_at = days_from(now, self.pending_days)

        if split.final_affiliate_commission_cents > 0:
            await self._insert_entry(
                result,
                event_id=invoice_id,
                event_type=LedgerEventType.INVOICE_PAID,
                affiliate_id=affiliate.id,
                amount_cents=split.final_affiliate_commission_cents,
                available_at=available_at,
                business_subscription_id=subscription.id,
                meta={
                    **base_meta,
                    "affiliate_commission_cents": split.affiliate_commission_cents,
                    "discount_cents": split.discount_cents,
                    "discount_share_pct": str(split.applied_discount_pct),
                    "homecheff_share_cents": split.homecheff_share_cents,
                    "promo_code_id": subscription.promo_code_id,
                    "is_sub_affiliate": is_sub,
                    "tier": CommissionTier.SUB if is_sub else CommissionTier.DIRECT,
                    **(metadata or {}),
                },
            )

        if is_sub:
            parent = await self._get_parent(affiliate)
            parent_cents = self.calculator.calculate_parent_business_commission(
                amount_paid_cents,
                parent.custom_parent_business_commission_pct if parent else None,
            )
            if parent and parent_cents > 0:
                await self._insert_entry(
                    result,
                    event_id=parent_event_id(invoice_id),
                    event_type=LedgerEventType.INVOICE_PAID,
                    affiliate_id=parent.id,
                    amount_cents=parent_cents,
                    available_at=available_at,
                    business_subscription_id=subscription.id,
                    meta={
                        **base_meta,
                        "parent_commission_cents": parent_cents,
                        "sub_affiliate_id": affiliate.id,
                        "tier": CommissionTier.PARENT,
                        **(metadata or {}),
                    },
                )

        return self._finish(result, invoice_id, "Invoice commission recorded")

    # === Order paid (user transactions) ===

    @ledger_write
    async def record_order_paid(
        self,
        order_id: str,
        homecheff_fee_cents: int,
        buyer_id: str,
        seller_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> LedgerResult:
        """
        Credit the affiliate behind a marketplace order.

        Buyer and seller attributions are resolved independently. Only one
        affiliate is credited: the buyer's when present, otherwise the
        seller's. Every attributed side counts towards the commission.

        Args:
            order_id: Order id (idempotency key)
            homecheff_fee_cents: Platform fee net of processor costs
            buyer_id: Buying user
            seller_id: Selling user
            metadata: Extra context merged into entry meta

        Returns:
            LedgerResult

        Raises:
            LedgerWriteError: On storage failure
        """
        if await self.ledger_repo.event_exists(order_id):
            self.logger.info(
                "Order already processed",
                extra={"order_id": order_id},
            )
            return LedgerResult.skipped(LedgerSkipReason.DUPLICATE_EVENT)

        now = utc_now()
        buyer_attribution = await self.attribution_service.find_active_attribution(
            buyer_id, AttributionType.USER_SIGNUP, now
        )
        seller_attribution = await self.attribution_service.find_active_attribution(
            seller_id, AttributionType.USER_SIGNUP, now
        )
        buyer_attributed = buyer_attribution is not None
        seller_attributed = seller_attribution is not None

        if not buyer_attributed and not seller_attributed:
            self.logger.debug(
                "No attribution for order",
                extra={"order_id": order_id, "buyer_id": buyer_id, "seller_id": seller_id},
            )
            return LedgerResult.skipped(LedgerSkipReason.NO_ATTRIBUTION)

        credited = buyer_attribution or seller_attribution
        affiliate = await self.affiliate_repo.get_by_id(credited.affiliate_id)
        is_sub = affiliate.is_sub_affiliate

        direct_cents = self.calculator.calculate_user_transaction_commission(
            homecheff_fee_cents,
            buyer_attributed,
            seller_attributed,
            is_sub_affiliate=is_sub,
            custom_commission_pct=affiliate.custom_user_commission_pct,
        )

        base_meta = {
            "order_id": order_id,
            "buyer_id": buyer_id,
            "seller_id": seller_id,
            "base_amount_cents": homecheff_fee_cents,
            "homecheff_fee_cents": homecheff_fee_cents,
            "buyer_attributed": buyer_attributed,
            "seller_attributed": seller_attributed,
        }
        result = LedgerResult(recorded=False)
        available_at = days_from(now, self.pending_days)

        if direct_cents > 0:
            per_side_pct = self.calculator.user_commission_pct(
                is_sub, affiliate.custom_user_commission_pct
            )
            await self._insert_entry(
                result,
                event_id=order_id,
                event_type=LedgerEventType.ORDER_PAID,
                affiliate_id=affiliate.id,
                amount_cents=direct_cents,
                available_at=available_at,
                meta={
                    **base_meta,
                    "per_side_commission_pct": str(per_side_pct),
                    "is_sub_affiliate": is_sub,
                    "tier": CommissionTier.SUB if is_sub else CommissionTier.DIRECT,
                    **(metadata or {}),
                },
            )

        if is_sub:
            parent = await self._get_parent(affiliate)
            parent_cents = self.calculator.calculate_parent_user_transaction_commission(
                homecheff_fee_cents,
                buyer_attributed,
                seller_attributed,
                parent.custom_parent_user_commission_pct if parent else None,
            )
            if parent and parent_cents > 0:
                await self._insert_entry(
                    result,
                    event_id=parent_event_id(order_id),
                    event_type=LedgerEventType.ORDER_PAID,
                    affiliate_id=parent.id,
                    amount_cents=parent_cents,
                    available_at=available_at,
                    meta={
                        **base_meta,
                        "parent_commission_cents": parent_cents,
                        "sub_affiliate_id": affiliate.id,
                        "tier": CommissionTier.PARENT,
                        **(metadata or {}),
                    },
                )

        return self._finish(result, order_id, "Order commission recorded")

    # === Refunds and chargebacks ===

    @ledger_write
    async def reverse(
        self,
        event_id: str,
        original_event_id: str,
        amount_cents: int,
        kind: LedgerEventType | str,
    ) -> LedgerResult:
        """
        Reverse commission for a refund or chargeback.

        Every non-reversed entry keyed ``original_event_id`` or its
        ``_parent`` derivative gets a proportional negative REVERSED entry
        (``event_id + "_" + entry.id``) and is itself flipped to REVERSED.
        Reversing an already reversed entry is a no-op, and so is a refund
        whose proportional share of an entry rounds to 0 cents.

        Args:
            event_id: Refund/chargeback id
            original_event_id: Invoice or order id being reversed
            amount_cents: Refunded amount, in the units of the entry's base
            kind: REFUND or CHARGEBACK

        Returns:
            LedgerResult with the reversal entries

        Raises:
            ValueError: If kind is not REFUND or CHARGEBACK
            LedgerWriteError: On storage failure
        """
        event_type = LedgerEventType(kind)
        if event_type not in (LedgerEventType.REFUND, LedgerEventType.CHARGEBACK):
            raise ValueError(f"Unsupported reversal kind: {kind}")

        originals = await self.ledger_repo.find_reversible(
            [original_event_id, parent_event_id(original_event_id)]
        )
        if not originals:
            self.logger.info(
                "Nothing to reverse",
                extra={"event_id": event_id, "original_event_id": original_event_id},
            )
            return LedgerResult.skipped(LedgerSkipReason.NOTHING_TO_REVERSE)

        result = LedgerResult(recorded=False)
        for entry in originals:
            reversal_cents = self.proportional_reversal(entry.amount_cents, entry.meta, amount_cents)
            if reversal_cents == 0:
                self.logger.info(
                    "Refund too small to claw back, entry left untouched",
                    extra={"event_id": event_id, "ledger_id": entry.id},
                )
                continue
            if not await self.ledger_repo.mark_reversed(entry.id):
                continue

            await self._insert_entry(
                result,
                event_id=f"{event_id}_{entry.id}",
                event_type=event_type,
                affiliate_id=entry.affiliate_id,
                amount_cents=-reversal_cents,
                status=LedgerStatus.REVERSED,
                available_at=None,
                business_subscription_id=entry.business_subscription_id,
                currency=entry.currency,
                meta={
                    "original_ledger_id": entry.id,
                    "original_event_id": entry.event_id,
                    "original_event_type": entry.event_type,
                    "refund_amount_cents": reversal_cents,
                    "event_type": event_type,
                    "tier": entry.tier,
                },
            )

        if not result.recorded and result.skip_reason is None:
            result.skip_reason = LedgerSkipReason.NOTHING_TO_REVERSE
        return self._finish(result, event_id, "Commission reversal recorded")

    @staticmethod
    def proportional_reversal(
        original_cents: int, meta: dict[str, Any] | None, refund_cents: int
    ) -> int:
        """
        Share of an entry to claw back for a refund.

        ``round(original * min(refund, base) / base)`` where base is the
        entry's ``base_amount_cents`` (the entry amount when absent).

        Example:
            >>> CommissionLedgerService.proportional_reversal(990, {"base_amount_cents": 9900}, 4950)
            495
        """
        original = abs(original_cents)
        base = (meta or {}).get("base_amount_cents") or original
        if base <= 0 or refund_cents <= 0:
            return 0
        refunded = min(refund_cents, base)
        return round_cents(Decimal(original) * Decimal(refunded) / Decimal(base))

    # === Helpers ===

    async def _get_parent(self, affiliate: Affiliate) -> Affiliate | None:
        if affiliate.parent_affiliate_id is None:
            return None
        return await self.affiliate_repo.get_by_id(affiliate.parent_affiliate_id)

    async def _insert_entry(self, result: LedgerResult, **data: Any) -> None:
        data.setdefault("currency", self.currency)
        data.setdefault("status", LedgerStatus.PENDING)
        entry_id = await self.ledger_repo.insert_ignore(**data)
        if entry_id is None:
            self.logger.info(
                "Ledger entry already exists",
                extra={"event_id": data["event_id"]},
            )
            if result.skip_reason is None:
                result.skip_reason = LedgerSkipReason.DUPLICATE_EVENT
            return

        result.recorded = True
        result.entry_ids.append(entry_id)
        result.total_cents += data["amount_cents"]

    def _finish(self, result: LedgerResult, event_id: str, message: str) -> LedgerResult:
        if not result.recorded:
            if result.skip_reason is None:
                result.skip_reason = LedgerSkipReason.ZERO_COMMISSION
            self.logger.info(
                "No ledger entry written",
                extra={"event_id": event_id, "reason": result.skip_reason},
            )
            return result

        result.skip_reason = None
        self.logger.info(
            message,
            extra={
                "event_id": event_id,
                "entries": len(result.entry_ids),
                "total_cents": result.total_cents,
                "total": format_cents(result.total_cents, self.currency),
            },
        )
        return result
