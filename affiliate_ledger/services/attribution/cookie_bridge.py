"""
Cookie attribution bridge.

Translates inbound cookie state into a referral code at signup time and
hands it to the attribution service.
"""

from collections.abc import Mapping
from http.cookies import CookieError, SimpleCookie

from loguru import logger

from affiliate_ledger.config.settings import settings
from affiliate_ledger.services.attribution.attribution_service import (
    AttributionResult,
    AttributionService,
    AttributionSkipReason,
)
from affiliate_ledger.services.referral.resolver import normalize_code


def parse_cookie_header(cookie_header: str | None) -> dict[str, str]:
    """
    Parse a raw ``Cookie`` request header.

    Malformed headers yield an empty mapping.

    Example:
        >>> parse_cookie_header("theme=dark; hc_ref=REFABC12345678")
        {'theme': 'dark', 'hc_ref': 'REFABC12345678'}
    """
    if not cookie_header:
        return {}

    cookie = SimpleCookie()
    try:
        cookie.load(cookie_header)
    except CookieError:
        logger.debug("Ignoring malformed cookie header")
        return {}
    return {key: morsel.value for key, morsel in cookie.items()}


class CookieAttributionBridge:
    """Adapter between signup request cookies and the attribution store."""

    def __init__(
        self,
        attribution_service: AttributionService,
        cookie_name: str | None = None,
        cookie_ttl_days: int | None = None,
    ) -> None:
        self.attribution_service = attribution_service
        self.cookie_name = cookie_name or settings.referral_cookie_name
        self.cookie_ttl_days = cookie_ttl_days or settings.referral_cookie_ttl_days

    def extract_referral_code(
        self, cookies: Mapping[str, str] | str | None
    ) -> str | None:
        """
        Pull the referral code out of request cookies.

        Args:
            cookies: Parsed cookie mapping or raw ``Cookie`` header

        Returns:
            Normalised referral code or None
        """
        if isinstance(cookies, str) or cookies is None:
            cookies = parse_cookie_header(cookies)
        return normalize_code(cookies.get(self.cookie_name))

    def referral_cookie(self, code: str) -> dict[str, str | int]:
        """
        Attributes for the cookie set when a referral link is visited.

        Returns:
            Dict with ``key``, ``value``, ``max_age``, ``path`` and ``samesite``
        """
        return {
            "key": self.cookie_name,
            "value": normalize_code(code) or "",
            "max_age": self.cookie_ttl_days * 24 * 60 * 60,
            "path": "/",
            "samesite": "lax",
        }

    async def attribute_signup(
        self,
        new_user_id: str,
        cookies: Mapping[str, str] | str | None,
        is_business: bool = False,
    ) -> AttributionResult:
        """
        Record a signup attribution from request cookies.

        Never raises; see ``AttributionService.record_signup_attribution``.
        """
        code = self.extract_referral_code(cookies)
        if code is None:
            return AttributionResult.skipped(AttributionSkipReason.NO_REFERRAL)

        return await self.attribution_service.record_signup_attribution(
            new_user_id, code, is_business
        )
