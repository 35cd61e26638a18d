"""
Affiliate ledger.

Referral attribution, commission computation and the idempotent
commission ledger.
"""

__version__ = "1.0.0"
