"""
Tagged word decoding for runtime values.

A runtime value is a single unsigned 64-bit word. Its low bits say what the
rest of the word means, so small values need no heap box and no separate
type field. `classify()` decodes a word once into a `Decoded` record; the rest
of the package works on that record and never tests raw bits again.

Encoding
--------
    ...xxx1   immediate number, value in bits 1..63 (two's complement)
    ...x000   heap pointer (8-aligned address), word must be non-zero
    ...x010   constant, compared against FALSE / TRUE / VOID
    ...x110   short inline value, subtag in bits 3..7, payload in bits 32..63
    ...x100   reserved, decodes as unknown (so does the zero word)

Public API
----------
classify(word)            → Decoded
encode_int(n)             → word
encode_char(ch)           → word
encode_short(kind, n)     → word
encode_pointer(address)   → word
TRUE, FALSE, VOID         constant words
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
from dataclasses import dataclass
from enum import Enum, IntEnum, unique

logger = logging.getLogger(__name__)

# Constants ------------------------------------------------------------------------------------------------------------

WORD_BITS = 64
WORD_MASK = (1 << WORD_BITS) - 1

IMMEDIATE_BITS = WORD_BITS - 1
IMMEDIATE_MIN = -(1 << (IMMEDIATE_BITS - 1))
IMMEDIATE_MAX = (1 << (IMMEDIATE_BITS - 1)) - 1

_LOW3_MASK = 0b111
_LOW3_POINTER = 0b000
_LOW3_CONSTANT = 0b010
_LOW3_SHORT = 0b110

_SHORT_SUBTAG_SHIFT = 3
_SHORT_SUBTAG_MASK = 0x1F
_SHORT_PAYLOAD_SHIFT = 32
_SHORT_PAYLOAD_MASK = 0xFFFF_FFFF

POINTER_ALIGN = 8

FALSE = 0x02
TRUE = 0x12
VOID = 0x22


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Kind(Enum):
    """Top-level classification of a tagged word."""
    IMMEDIATE = "immediate"
    CONSTANT = "constant"
    SHORT = "short"
    HEAP = "heap"
    UNKNOWN = "unknown"


@unique
class Constant(Enum):
    TRUE = "true"
    FALSE = "false"
    VOID = "void"


@unique
class ShortKind(IntEnum):
    """
    Sub-kinds of short inline values; the member value is the subtag stored in the word.

    Attributes:
        bits: Payload width in bits.
        signed: Whether the payload is two's complement.
    """
    CHAR = 0
    INT8 = 1
    INT16 = 2
    UINT8 = 3
    UINT16 = 4

    @property
    def bits(self) -> int:
        return _SHORT_WIDTHS[self][0]

    @property
    def signed(self) -> bool:
        return _SHORT_WIDTHS[self][1]


_SHORT_WIDTHS = {
    ShortKind.CHAR: (32, False),
    ShortKind.INT8: (8, True),
    ShortKind.INT16: (16, True),
    ShortKind.UINT8: (8, False),
    ShortKind.UINT16: (16, False),
}

_CONSTANTS = {
    TRUE: Constant.TRUE,
    FALSE: Constant.FALSE,
    VOID: Constant.VOID,
}


@dataclass(frozen=True)
class Decoded:
    """
    A tagged word decoded into its kind and payload.

    Attributes:
        kind: Classification of the word.
        word: The original word, kept for diagnostics.
        number: Integer payload of IMMEDIATE and SHORT words.
        address: Heap address of HEAP words.
        constant: Which constant a CONSTANT word is, None if the sentinel is unrecognized.
        short_kind: Sub-kind of a SHORT word, None if the subtag is unrecognized.
    """
    kind: Kind
    word: int
    number: int = 0
    address: int = 0
    constant: Constant | None = None
    short_kind: ShortKind | None = None


# Methods --------------------------------------------------------------------------------------------------------------

def classify(word: int) -> Decoded:
    """
    Decode a tagged word.

    Total and pure: every int maps to a Decoded value and nothing is dereferenced.
    Words outside the unsigned 64-bit range are masked first.

    Examples:
        >>> classify(encode_int(-3)).number
        -3
        >>> classify(TRUE).constant
        <Constant.TRUE: 'true'>
        >>> classify(0).kind
        <Kind.UNKNOWN: 'unknown'>
    """
    word &= WORD_MASK

    if word & 1:
        return Decoded(Kind.IMMEDIATE, word, number=_sign_extend(word >> 1, IMMEDIATE_BITS))

    low = word & _LOW3_MASK
    if low == _LOW3_POINTER:
        if word == 0:
            logger.debug("null word decoded as unknown")
            return Decoded(Kind.UNKNOWN, word)
        return Decoded(Kind.HEAP, word, address=word)

    if low == _LOW3_CONSTANT:
        constant = _CONSTANTS.get(word)
        if constant is None:
            logger.debug("unrecognized constant word %#x", word)
        return Decoded(Kind.CONSTANT, word, constant=constant)

    if low == _LOW3_SHORT:
        subtag = (word >> _SHORT_SUBTAG_SHIFT) & _SHORT_SUBTAG_MASK
        payload = (word >> _SHORT_PAYLOAD_SHIFT) & _SHORT_PAYLOAD_MASK
        try:
            short_kind = ShortKind(subtag)
        except ValueError:
            logger.debug("unrecognized short subtag %d in word %#x", subtag, word)
            return Decoded(Kind.SHORT, word, number=payload)
        payload &= (1 << short_kind.bits) - 1
        if short_kind.signed:
            payload = _sign_extend(payload, short_kind.bits)
        return Decoded(Kind.SHORT, word, number=payload, short_kind=short_kind)

    logger.debug("reserved tag pattern in word %#x", word)
    return Decoded(Kind.UNKNOWN, word)


def encode_int(n: int) -> int:
    """Encode an integer as an immediate number word."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"immediate number must be an int, got {type(n).__name__}")
    if not IMMEDIATE_MIN <= n <= IMMEDIATE_MAX:
        raise ValueError(f"immediate number out of range: {n}")
    return ((n << 1) | 1) & WORD_MASK


def encode_char(ch: str) -> int:
    """Encode a single character as a short inline word."""
    if not isinstance(ch, str) or len(ch) != 1:
        raise TypeError(f"char must be a str of length 1, got {ch!r}")
    return encode_short(ShortKind.CHAR, ord(ch))


def encode_short(kind: ShortKind, n: int) -> int:
    """
    Encode a short inline value of the given sub-kind.

    Raises:
        ValueError: If n does not fit the sub-kind's width and signedness.
    """
    kind = ShortKind(kind)
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"short payload must be an int, got {type(n).__name__}")
    if kind.signed:
        lo, hi = -(1 << (kind.bits - 1)), (1 << (kind.bits - 1)) - 1
    else:
        lo, hi = 0, (1 << kind.bits) - 1
    if kind is ShortKind.CHAR:
        hi = 0x10FFFF
    if not lo <= n <= hi:
        raise ValueError(f"{kind.name} payload out of range: {n}")
    payload = n & ((1 << kind.bits) - 1)
    return (payload << _SHORT_PAYLOAD_SHIFT) | (int(kind) << _SHORT_SUBTAG_SHIFT) | _LOW3_SHORT


def encode_pointer(address: int) -> int:
    """Encode a heap address as a pointer word."""
    if isinstance(address, bool) or not isinstance(address, int):
        raise TypeError(f"address must be an int, got {type(address).__name__}")
    if address <= 0 or address > WORD_MASK or address % POINTER_ALIGN:
        raise ValueError(f"address must be a non-zero {POINTER_ALIGN}-aligned word, got {address:#x}")
    return address


# Private Methods ------------------------------------------------------------------------------------------------------

def _sign_extend(value: int, bits: int) -> int:
    sign = 1 << (bits - 1)
    return (value & (sign - 1)) - (value & sign)
