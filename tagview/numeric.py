"""
Numeric text conversion for rendered values.

These are the integer/float/rational to text primitives used by the renderer.
Integers honor a radix and its literal prefix; floats and arbitrary-precision
values always render in decimal.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
import struct
from enum import IntEnum, unique


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Radix(IntEnum):
    """Integer radix with its literal prefix."""
    BIN = 2
    OCT = 8
    DEC = 10
    HEX = 16

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]

    @classmethod
    def parse(cls, value: "Radix | int | str") -> "Radix":
        """
        Accept a Radix, its base number, or a name such as "hex" / "Dec".

        Examples:
            >>> Radix.parse("hex")
            <Radix.HEX: 16>
            >>> Radix.parse(8)
            <Radix.OCT: 8>
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"unknown radix name: {value!r}") from None
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"radix must be a Radix, int or str, got {type(value).__name__}")
        return cls(value)


_PREFIXES = {
    Radix.BIN: "0b",
    Radix.OCT: "0o",
    Radix.DEC: "",
    Radix.HEX: "0x",
}

_DIGIT_FORMATS = {
    Radix.BIN: "b",
    Radix.OCT: "o",
    Radix.DEC: "d",
    Radix.HEX: "x",
}


# Methods --------------------------------------------------------------------------------------------------------------

def format_integer(value: int, radix: Radix = Radix.DEC) -> str:
    """
    Integer text in the given radix, with literal prefix; the sign precedes the prefix.

    Examples:
        >>> format_integer(255, Radix.HEX)
        '0xff'
        >>> format_integer(-5, Radix.BIN)
        '-0b101'
    """
    radix = Radix(radix)
    sign = "-" if value < 0 else ""
    return f"{sign}{radix.prefix}{abs(value):{_DIGIT_FORMATS[radix]}}"


def format_decimal(value: int) -> str:
    """Arbitrary-precision integer as decimal text."""
    return str(int(value))


def format_rational(numerator: int, denominator: int) -> str:
    """
    Rational as `numerator/denominator` in decimal, sign carried by the numerator.

    Examples:
        >>> format_rational(3, -4)
        '-3/4'
    """
    if denominator < 0:
        numerator, denominator = -numerator, -denominator
    return f"{format_decimal(numerator)}/{format_decimal(denominator)}"


def format_float(value: float) -> str:
    """Shortest round-trip text of a double."""
    return repr(float(value))


def format_float32(value: float) -> str:
    """
    Shortest text that round-trips through single precision.

    Examples:
        >>> format_float32(0.1)
        '0.1'
        >>> format_float32(16777217.0)
        '16777216.0'
    """
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        return repr(value)
    try:
        single = _to_float32(value)
    except OverflowError:
        return repr(math.copysign(math.inf, value))
    for digits in range(1, 10):
        text = f"{single:.{digits}g}"
        if _to_float32(float(text)) == single:
            return repr(float(text))
    return repr(single)


# Private Methods ------------------------------------------------------------------------------------------------------

def _to_float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]
