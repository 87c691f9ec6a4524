"""Tests for amount conversion."""

import pytest

from cartezcash_bridge.amounts import WEI_PER_ZATOSHI, format_units, parse_units
from cartezcash_bridge.errors import InvalidAmountError


class TestParseUnits:
    """Tests for parse_units."""

    def test_whole_and_fractional(self):
        assert parse_units("1") == 10**18
        assert parse_units("1.5") == 1_500_000_000_000_000_000
        assert parse_units("0.000000000000000001") == 1

    def test_no_float_rounding(self):
        """Test that values a float cannot represent convert exactly."""
        assert parse_units("0.1") + parse_units("0.2") == parse_units("0.3")
        assert parse_units("123456789.123456789123456789") == 123456789123456789123456789

    def test_custom_decimals(self):
        assert parse_units("1.23", decimals=8) == 123_000_000
        with pytest.raises(InvalidAmountError):
            parse_units("1.5", decimals=0)

    def test_trailing_zeros_allowed(self):
        """Test that trailing zeros do not count as extra precision."""
        assert parse_units("1.000000000000000000000") == 10**18

    def test_too_many_decimals_rejected(self):
        with pytest.raises(InvalidAmountError, match="decimal places"):
            parse_units("0.0000000000000000001")

    def test_long_amount_not_rounded(self):
        """Test that a 19th decimal is caught behind 100 significant digits."""
        with pytest.raises(InvalidAmountError, match="decimal places"):
            parse_units("1." + "0" * 99 + "1")

    def test_long_exact_amount(self):
        """Test that long amounts that are exact still convert."""
        assert parse_units("1." + "0" * 120) == 10**18
        assert parse_units("9" * 40 + ".5") == int("9" * 40 + "5" + "0" * 17)

    def test_exponent_notation(self):
        assert parse_units("1e-18") == 1
        assert parse_units("15E-1") == 1_500_000_000_000_000_000
        with pytest.raises(InvalidAmountError, match="decimal places"):
            parse_units("1e-999999999")

    def test_too_large_rejected(self):
        with pytest.raises(InvalidAmountError, match="too large"):
            parse_units("1e999999999")
        with pytest.raises(InvalidAmountError, match="too large"):
            parse_units(str(2**256), decimals=0)
        assert parse_units(str(2**256 - 1), decimals=0) == 2**256 - 1

    @pytest.mark.parametrize("amount", ["", "   ", "abc", "1,5", "NaN", "Infinity", None])
    def test_malformed_rejected(self, amount):
        with pytest.raises(InvalidAmountError):
            parse_units(amount)

    def test_negative_rejected(self):
        with pytest.raises(InvalidAmountError, match="negative"):
            parse_units("-1")

    def test_zero_is_parsed(self):
        assert parse_units("0") == 0


class TestFormatUnits:
    """Tests for format_units."""

    def test_format(self):
        assert format_units(10**18) == "1"
        assert format_units(1_500_000_000_000_000_000) == "1.5"
        assert format_units(1) == "0.000000000000000001"
        assert format_units(0) == "0"

    def test_rollup_scale(self):
        """Test that one zatoshi is 10^10 wei."""
        assert WEI_PER_ZATOSHI == 10**10
        assert format_units(WEI_PER_ZATOSHI) == "0.00000001"
