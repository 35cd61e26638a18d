"""
Standard type definitions for database models.

Provides consistent types for monetary and percentage fields across all models.
"""

from sqlalchemy import DECIMAL, BigInteger

# Standard money type: signed integer cents
# Suitable for: commissions, reversals, subscription prices, fees
CentsType = BigInteger()

# Fractional rate type for commission overrides
# Precision: 7 digits total, 4 after decimal point
# Suitable for: 0.2500 (25%), 0.0500 (5%)
# Range: 0.0000 to 999.9999
RateType = DECIMAL(7, 4)
