"""
In-memory model of the host runtime heap.

A heap pointer word is the address of a `HeapObject`. The object's header tag
says how its payload is interpreted: container tags hold a tuple of value
words, string and bytes tags hold their data, boxed numbers hold a numeric
subtag and a Python number.

The `Heap` here is the host side of the contract: it allocates objects and
answers `load(word)`. It also converts plain Python data into runtime words
with `from_python()`, which is how most tests and callers build values.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from enum import IntEnum, unique
from fractions import Fraction
from typing import Any, Iterable

# Local ----------------------------------------------------------------------------------------------------------------
from .registry import (
    LIST_CONS,
    LIST_NIL,
    LIST_TYPE_HASH,
    OPTION_NONE,
    OPTION_SOME,
    OPTION_TYPE_HASH,
    RESULT_ERR,
    RESULT_OK,
    RESULT_TYPE_HASH,
)
from .sentinels import UNSET
from .words import (
    FALSE,
    IMMEDIATE_MAX,
    IMMEDIATE_MIN,
    POINTER_ALIGN,
    TRUE,
    VOID,
    WORD_MASK,
    encode_int,
    encode_pointer,
)

# Constants ------------------------------------------------------------------------------------------------------------

HEAP_BASE = 0x1000


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class HeapTag(IntEnum):
    """Header tags of heap objects."""
    STRING = 1
    BYTES = 2
    TUPLE = 3
    ARRAY = 4
    RECORD = 5
    VARIANT = 6
    NUMBER = 7
    FUNCTION = 8


@unique
class NumberTag(IntEnum):
    """Subtags of boxed numbers."""
    INT32 = 1
    UINT32 = 2
    INT64 = 3
    UINT64 = 4
    FLOAT32 = 5
    FLOAT64 = 6
    RATIONAL = 7
    BIGINT = 8


_INT_RANGES = {
    NumberTag.INT32: (-(1 << 31), (1 << 31) - 1),
    NumberTag.UINT32: (0, (1 << 32) - 1),
    NumberTag.INT64: (-(1 << 63), (1 << 63) - 1),
    NumberTag.UINT64: (0, (1 << 64) - 1),
}


@dataclass(frozen=True)
class HeapObject:
    """
    A heap-allocated runtime object.

    Attributes:
        tag: Raw header tag; values outside HeapTag are kept so they render as unknown.
        payload: Child value words of containers, records and variants.
        type_hash: Type hash of records and variants.
        variant_id: Variant id of sum-type variants.
        subtag: Raw numeric subtag of boxed numbers.
        data: str for strings, bytes for bytes, a number for boxed numbers,
            a (numerator, denominator) pair for rationals, a name for functions.
    """
    tag: int
    payload: tuple[int, ...] = ()
    type_hash: int = 0
    variant_id: int = 0
    subtag: int = 0
    data: Any = None

    @property
    def arity(self) -> int:
        """Number of payload words declared by the header."""
        return len(self.payload)


class Heap:
    """
    Address-to-object memory.

    Addresses start at HEAP_BASE and are POINTER_ALIGN aligned, so every
    allocation returns a valid heap pointer word.

    Examples:
        >>> heap = Heap()
        >>> word = heap.from_python([1, "two", (3,)])
        >>> heap.load(word).tag is HeapTag.VARIANT
        True
    """

    def __init__(self) -> None:
        self._objects: dict[int, HeapObject] = {}
        self._next = HEAP_BASE

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, word: int) -> bool:
        return word in self._objects

    def __repr__(self) -> str:
        return f"Heap(objects={len(self._objects)})"

    # ----- Access -----

    def load(self, word: int) -> HeapObject | None:
        """Return the object at a pointer word, or None for an unmapped address."""
        return self._objects.get(word)

    # ----- Allocation -----

    def alloc(self, obj: HeapObject) -> int:
        """Store an object and return its pointer word."""
        if not isinstance(obj, HeapObject):
            raise TypeError(f"expected HeapObject, got {type(obj).__name__}")
        for word in obj.payload:
            _check_word(word)
        address = self._next
        self._next += POINTER_ALIGN * (1 + max(1, len(obj.payload)))
        self._objects[address] = obj
        return encode_pointer(address)

    def alloc_string(self, text: str) -> int:
        if not isinstance(text, str):
            raise TypeError(f"string data must be str, got {type(text).__name__}")
        return self.alloc(HeapObject(HeapTag.STRING, data=text))

    def alloc_bytes(self, data: bytes | bytearray) -> int:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"bytes data must be bytes-like, got {type(data).__name__}")
        return self.alloc(HeapObject(HeapTag.BYTES, data=bytes(data)))

    def alloc_tuple(self, *items: int) -> int:
        return self.alloc(HeapObject(HeapTag.TUPLE, payload=tuple(items)))

    def alloc_array(self, items: Iterable[int]) -> int:
        return self.alloc(HeapObject(HeapTag.ARRAY, payload=tuple(items)))

    def alloc_record(self, type_hash: int, items: Iterable[int]) -> int:
        return self.alloc(HeapObject(HeapTag.RECORD, payload=tuple(items), type_hash=type_hash))

    def alloc_variant(self, type_hash: int, variant_id: int, items: Iterable[int] = ()) -> int:
        return self.alloc(
            HeapObject(HeapTag.VARIANT, payload=tuple(items), type_hash=type_hash, variant_id=variant_id)
        )

    def alloc_function(self, name: str | None = None) -> int:
        return self.alloc(HeapObject(HeapTag.FUNCTION, data=name))

    def alloc_number(self, subtag: NumberTag, value: Any) -> int:
        """
        Box a number under a numeric subtag.

        Integer subtags are range checked, FLOAT32/FLOAT64 take any real number,
        RATIONAL takes a Fraction or a (numerator, denominator) pair, BIGINT an int.

        Raises:
            ValueError: If the value is out of range for the subtag or the denominator is zero.
            TypeError: If the value type does not match the subtag.
        """
        subtag = NumberTag(subtag)
        if subtag in _INT_RANGES:
            _check_int(value, subtag.name)
            lo, hi = _INT_RANGES[subtag]
            if not lo <= value <= hi:
                raise ValueError(f"{subtag.name} value out of range: {value}")
        elif subtag in (NumberTag.FLOAT32, NumberTag.FLOAT64):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{subtag.name} value must be a real number, got {type(value).__name__}")
            value = float(value)
        elif subtag is NumberTag.RATIONAL:
            if isinstance(value, Fraction):
                value = (value.numerator, value.denominator)
            num, den = value
            _check_int(num, "RATIONAL numerator")
            _check_int(den, "RATIONAL denominator")
            if den == 0:
                raise ValueError("RATIONAL denominator must be non-zero")
            value = (num, den)
        else:
            _check_int(value, subtag.name)
        return self.alloc(HeapObject(HeapTag.NUMBER, subtag=int(subtag), data=value))

    # ----- Built-in sum types -----

    def alloc_list(self, items: Iterable[int]) -> int:
        """Build a cons list ending in Nil and return the head cell."""
        cell = self.alloc_variant(LIST_TYPE_HASH, LIST_NIL)
        for item in reversed(list(items)):
            cell = self.alloc_variant(LIST_TYPE_HASH, LIST_CONS, (item, cell))
        return cell

    def alloc_option(self, value: int = UNSET) -> int:
        """Some(value), or None when no value is given."""
        if value is UNSET:
            return self.alloc_variant(OPTION_TYPE_HASH, OPTION_NONE)
        return self.alloc_variant(OPTION_TYPE_HASH, OPTION_SOME, (value,))

    def alloc_result(self, value: int, *, error: bool = False) -> int:
        """Ok(value), or Err(value) when error is set."""
        return self.alloc_variant(RESULT_TYPE_HASH, RESULT_ERR if error else RESULT_OK, (value,))

    # ----- Conversion -----

    def from_python(self, obj: Any) -> int:
        """
        Convert plain Python data into a runtime word, allocating as needed.

        Conversion table:
            None → void, bool → true/false, int → immediate number or BigInt,
            float → Float64, Fraction → Rational, str → String,
            bytes/bytearray → Bytes, tuple → Tuple, list → List, callable → Function

        Raises:
            TypeError: For any other type.
        """
        if obj is None:
            return VOID
        if isinstance(obj, bool):
            return TRUE if obj else FALSE
        if isinstance(obj, int):
            if IMMEDIATE_MIN <= obj <= IMMEDIATE_MAX:
                return encode_int(obj)
            return self.alloc_number(NumberTag.BIGINT, obj)
        if isinstance(obj, float):
            return self.alloc_number(NumberTag.FLOAT64, obj)
        if isinstance(obj, Fraction):
            return self.alloc_number(NumberTag.RATIONAL, obj)
        if isinstance(obj, str):
            return self.alloc_string(obj)
        if isinstance(obj, (bytes, bytearray)):
            return self.alloc_bytes(obj)
        if isinstance(obj, tuple):
            return self.alloc_tuple(*(self.from_python(x) for x in obj))
        if isinstance(obj, list):
            return self.alloc_list([self.from_python(x) for x in obj])
        if callable(obj):
            return self.alloc_function(getattr(obj, "__name__", None))
        raise TypeError(f"cannot convert {type(obj).__name__} to a runtime value")


# Private Methods ------------------------------------------------------------------------------------------------------

def _check_int(value: Any, what: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} value must be an int, got {type(value).__name__}")


def _check_word(word: Any) -> None:
    if isinstance(word, bool) or not isinstance(word, int) or not 0 <= word <= WORD_MASK:
        raise TypeError(f"payload items must be 64-bit words, got {word!r}")
