"""Tests for calculator formatting helpers."""

from decimal import Decimal

from commission_calculator import format_cents, format_rate


class TestFormatCents:
    """Tests for format_cents."""

    def test_euro(self) -> None:
        """Test default euro formatting."""
        assert format_cents(990) == "€9.90"

    def test_thousands_and_negative(self) -> None:
        """Test thousands separator and sign."""
        assert format_cents(-123456, currency="usd") == "-$1,234.56"

    def test_unknown_currency_suffix(self) -> None:
        """Test currencies without symbol are suffixed."""
        assert format_cents(5940, currency="chf") == "59.40 CHF"

    def test_custom_separators(self) -> None:
        """Test European separators."""
        assert format_cents(123456, thousands_separator=".", decimal_separator=",") == "€1.234,56"

    def test_zero(self) -> None:
        """Test zero amount."""
        assert format_cents(0) == "€0.00"


class TestFormatRate:
    """Tests for format_rate."""

    def test_whole_percent(self) -> None:
        """Test rate without decimals."""
        assert format_rate(Decimal("0.25")) == "25%"

    def test_with_decimals(self) -> None:
        """Test rate with decimals."""
        assert format_rate(Decimal("0.125"), decimals=1) == "12.5%"
