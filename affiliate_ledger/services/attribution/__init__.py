"""
Attribution services.

Signup attribution store and the cookie bridge feeding it.
"""

from affiliate_ledger.services.attribution.attribution_service import (
    AttributionResult,
    AttributionService,
    AttributionSkipReason,
)
from affiliate_ledger.services.attribution.cookie_bridge import (
    CookieAttributionBridge,
    parse_cookie_header,
)


__all__ = [
    "AttributionService",
    "AttributionResult",
    "AttributionSkipReason",
    "CookieAttributionBridge",
    "parse_cookie_header",
]
