"""Tests for pure ledger helpers."""

import pytest

from affiliate_ledger.services.ledger import CommissionLedgerService, parent_event_id


class TestProportionalReversal:
    """Tests for proportional_reversal."""

    def test_half_refund(self) -> None:
        """Test half of the base reverses half of the entry."""
        assert CommissionLedgerService.proportional_reversal(
            990, {"base_amount_cents": 9900}, 4950
        ) == 495

    def test_full_refund(self) -> None:
        """Test full refund reverses the full entry."""
        assert CommissionLedgerService.proportional_reversal(
            990, {"base_amount_cents": 9900}, 9900
        ) == 990

    def test_refund_capped_at_base(self) -> None:
        """Test refunds above the base never reverse more than the entry."""
        assert CommissionLedgerService.proportional_reversal(
            300, {"base_amount_cents": 1200}, 5000
        ) == 300

    def test_missing_base_uses_entry_amount(self) -> None:
        """Test entries without a recorded base are reversed against their own amount."""
        assert CommissionLedgerService.proportional_reversal(400, {}, 100) == 100
        assert CommissionLedgerService.proportional_reversal(400, None, 1000) == 400

    @pytest.mark.parametrize("refund", [0, -100])
    def test_non_positive_refund(self, refund: int) -> None:
        """Test zero or negative refunds reverse nothing."""
        assert CommissionLedgerService.proportional_reversal(
            990, {"base_amount_cents": 9900}, refund
        ) == 0

    def test_rounds_half_up(self) -> None:
        """Test proportional amounts are rounded to whole cents."""
        # 60 * 1 / 8 = 7.5
        assert CommissionLedgerService.proportional_reversal(
            60, {"base_amount_cents": 8}, 1
        ) == 8


class TestParentEventId:
    """Tests for parent_event_id."""

    def test_suffix(self) -> None:
        """Test upline key derivation."""
        assert parent_event_id("in_123") == "in_123_parent"
