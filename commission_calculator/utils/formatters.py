"""
Formatting utilities for cents and rates.

Human-readable rendering for log lines and dashboards.
"""

from decimal import Decimal


CURRENCY_SYMBOLS = {
    "eur": "€",
    "usd": "$",
    "gbp": "£",
}


def format_cents(
    amount_cents: int,
    currency: str = "eur",
    thousands_separator: str = ",",
    decimal_separator: str = ".",
) -> str:
    """
    Format an integer cent amount as currency.

    Args:
        amount_cents: Signed amount in cents
        currency: ISO currency code (case-insensitive)
        thousands_separator: Thousands separator
        decimal_separator: Decimal separator

    Returns:
        Formatted string

    Example:
        >>> format_cents(990)
        '€9.90'
        >>> format_cents(-123456, currency="usd")
        '-$1,234.56'
        >>> format_cents(5940, currency="chf")
        '59.40 CHF'
    """
    sign = "-" if amount_cents < 0 else ""
    whole, cents = divmod(abs(amount_cents), 100)
    formatted = f"{whole:,}".replace(",", thousands_separator)
    formatted = f"{formatted}{decimal_separator}{cents:02d}"

    symbol = CURRENCY_SYMBOLS.get(currency.lower())
    if symbol:
        return f"{sign}{symbol}{formatted}"
    return f"{sign}{formatted} {currency.upper()}"


def format_rate(rate: Decimal, decimals: int = 0) -> str:
    """
    Format a fractional rate as a percentage.

    Example:
        >>> format_rate(Decimal("0.25"))
        '25%'
        >>> format_rate(Decimal("0.125"), decimals=1)
        '12.5%'
    """
    return f"{float(rate * 100):.{decimals}f}%"
