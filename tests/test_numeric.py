#
# Tagview - Numeric Text Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import math

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from tagview.numeric import (
    Radix,
    format_decimal,
    format_float,
    format_float32,
    format_integer,
    format_rational,
)


# Tests ----------------------------------------------------------------------------------------------------------------

class TestRadix:
    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(Radix.OCT, Radix.OCT, id="member"),
            pytest.param(16, Radix.HEX, id="int"),
            pytest.param("hex", Radix.HEX, id="lower_name"),
            pytest.param(" Bin ", Radix.BIN, id="padded_name"),
            pytest.param("DEC", Radix.DEC, id="upper_name"),
        ],
    )
    def test_parse(self, value, expected):
        assert Radix.parse(value) is expected

    @pytest.mark.parametrize(
        "value, exc",
        [
            pytest.param("base3", ValueError, id="bad_name"),
            pytest.param(3, ValueError, id="bad_base"),
            pytest.param(True, TypeError, id="bool"),
            pytest.param(1.5, TypeError, id="float"),
        ],
    )
    def test_parse_invalid(self, value, exc):
        with pytest.raises(exc):
            Radix.parse(value)

    def test_prefixes(self):
        assert [r.prefix for r in Radix] == ["0b", "0o", "", "0x"]


class TestFormatInteger:
    @pytest.mark.parametrize(
        "value, radix, expected",
        [
            pytest.param(0, Radix.DEC, "0", id="zero"),
            pytest.param(42, Radix.DEC, "42", id="dec"),
            pytest.param(255, Radix.HEX, "0xff", id="hex"),
            pytest.param(8, Radix.OCT, "0o10", id="oct"),
            pytest.param(5, Radix.BIN, "0b101", id="bin"),
            pytest.param(-31, Radix.HEX, "-0x1f", id="hex_negative"),
            pytest.param(-5, Radix.DEC, "-5", id="dec_negative"),
        ],
    )
    def test_format(self, value, radix, expected):
        assert format_integer(value, radix) == expected

    def test_big_values_stay_exact(self):
        assert format_decimal(2 ** 100) == "1267650600228229401496703205376"


class TestFormatRational:
    @pytest.mark.parametrize(
        "num, den, expected",
        [
            pytest.param(3, 4, "3/4", id="positive"),
            pytest.param(-3, 4, "-3/4", id="negative_numerator"),
            pytest.param(3, -4, "-3/4", id="negative_denominator"),
            pytest.param(-3, -4, "3/4", id="both_negative"),
        ],
    )
    def test_format(self, num, den, expected):
        assert format_rational(num, den) == expected


class TestFormatFloat:
    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(1.5, "1.5", id="simple"),
            pytest.param(0.1, "0.1", id="inexact"),
            pytest.param(-2.0, "-2.0", id="negative"),
            pytest.param(math.inf, "inf", id="inf"),
        ],
    )
    def test_float64(self, value, expected):
        assert format_float(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(0.1, "0.1", id="shortest"),
            pytest.param(1.5, "1.5", id="exact"),
            pytest.param(16777217.0, "16777216.0", id="rounded_to_single"),
            pytest.param(-math.inf, "-inf", id="neg_inf"),
            pytest.param(1e300, "inf", id="overflow"),
        ],
    )
    def test_float32(self, value, expected):
        assert format_float32(value) == expected

    def test_float32_nan(self):
        assert format_float32(math.nan) == "nan"
