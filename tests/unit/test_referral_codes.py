"""Tests for referral code handling and the cookie bridge (no database)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from affiliate_ledger.services.attribution import (
    AttributionResult,
    AttributionSkipReason,
    CookieAttributionBridge,
)
from affiliate_ledger.services.attribution.cookie_bridge import parse_cookie_header
from affiliate_ledger.services.referral import normalize_code
from affiliate_ledger.services.referral.link_service import generate_referral_code


class TestNormalizeCode:
    """Tests for normalize_code."""

    def test_strips_and_uppercases(self) -> None:
        """Test whitespace and case are ignored."""
        assert normalize_code("  refabc123 ") == "REFABC123"

    @pytest.mark.parametrize("code", [None, "", "   "])
    def test_blank(self, code) -> None:
        """Test blank input yields None."""
        assert normalize_code(code) is None


class TestGenerateReferralCode:
    """Tests for generate_referral_code."""

    def test_format(self) -> None:
        """Test prefix, user part and random suffix."""
        code = generate_referral_code("ckx9a8b7c6d5")

        assert code.startswith("REFCKX9A8B7")
        assert len(code) == len("REF") + 8 + 4
        assert code == code.upper()

    def test_short_user_id(self) -> None:
        """Test short ids are used whole."""
        code = generate_referral_code("ab")

        assert code.startswith("REFAB")
        assert len(code) == len("REFAB") + 4

    def test_non_alphanumeric_dropped(self) -> None:
        """Test separators in the user id are removed."""
        code = generate_referral_code("a-b_c.d")

        assert code.startswith("REFABCD")

    def test_codes_differ(self) -> None:
        """Test random suffix makes repeated codes differ."""
        codes = {generate_referral_code("user1") for _ in range(20)}

        assert len(codes) > 1


class TestParseCookieHeader:
    """Tests for parse_cookie_header."""

    def test_parses_pairs(self) -> None:
        """Test a typical header."""
        assert parse_cookie_header("theme=dark; hc_ref=REFABC") == {
            "theme": "dark",
            "hc_ref": "REFABC",
        }

    @pytest.mark.parametrize("header", [None, ""])
    def test_empty(self, header) -> None:
        """Test missing header."""
        assert parse_cookie_header(header) == {}


class TestCookieAttributionBridge:
    """Tests for CookieAttributionBridge without a database."""

    @pytest.fixture
    def attribution_service(self) -> MagicMock:
        service = MagicMock()
        service.record_signup_attribution = AsyncMock(
            return_value=AttributionResult(recorded=True, attribution_id=1, affiliate_id=2)
        )
        return service

    def test_extract_from_mapping(self, attribution_service: MagicMock) -> None:
        """Test code is read from the configured cookie and normalised."""
        bridge = CookieAttributionBridge(attribution_service, cookie_name="hc_ref")

        assert bridge.extract_referral_code({"hc_ref": " refabc "}) == "REFABC"

    def test_extract_from_header(self, attribution_service: MagicMock) -> None:
        """Test raw Cookie header is accepted."""
        bridge = CookieAttributionBridge(attribution_service, cookie_name="hc_ref")

        assert bridge.extract_referral_code("a=1; hc_ref=refxyz") == "REFXYZ"

    def test_extract_missing(self, attribution_service: MagicMock) -> None:
        """Test absent cookie yields None."""
        bridge = CookieAttributionBridge(attribution_service, cookie_name="hc_ref")

        assert bridge.extract_referral_code({"other": "x"}) is None
        assert bridge.extract_referral_code(None) is None

    def test_referral_cookie_attributes(self, attribution_service: MagicMock) -> None:
        """Test cookie set on link visit lives for the configured TTL."""
        bridge = CookieAttributionBridge(
            attribution_service, cookie_name="hc_ref", cookie_ttl_days=30
        )

        cookie = bridge.referral_cookie("refabc")

        assert cookie["key"] == "hc_ref"
        assert cookie["value"] == "REFABC"
        assert cookie["max_age"] == 30 * 24 * 60 * 60
        assert cookie["samesite"] == "lax"

    @pytest.mark.asyncio
    async def test_attribute_signup_without_cookie(self, attribution_service: MagicMock) -> None:
        """Test signup without referral cookie is skipped without touching the store."""
        bridge = CookieAttributionBridge(attribution_service, cookie_name="hc_ref")

        result = await bridge.attribute_signup("user-1", {})

        assert not result.recorded
        assert result.skip_reason == AttributionSkipReason.NO_REFERRAL
        attribution_service.record_signup_attribution.assert_not_called()

    @pytest.mark.asyncio
    async def test_attribute_signup_forwards_code(self, attribution_service: MagicMock) -> None:
        """Test cookie code and business flag are forwarded."""
        bridge = CookieAttributionBridge(attribution_service, cookie_name="hc_ref")

        result = await bridge.attribute_signup("biz-1", "hc_ref=refabc", is_business=True)

        assert result.recorded
        attribution_service.record_signup_attribution.assert_awaited_once_with(
            "biz-1", "REFABC", True
        )
