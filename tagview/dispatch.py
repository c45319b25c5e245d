"""
Heap object dispatch: from a heap pointer to a concrete, resolved shape.

The dispatcher reads a heap object's header tag and, for records and variants,
asks the type registry for field and variant names. The result is one of a
closed set of shape classes that the renderer handles without further tag
tests. Anything unrecognized becomes a PlaceholderShape naming the stage that
failed.

Cons cells of the built-in List type are flattened into a ListShape before
generic variant handling, so lists render as `[a, b, c]`.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
from dataclasses import dataclass

# Local ----------------------------------------------------------------------------------------------------------------
from .heap import Heap, HeapObject, HeapTag, NumberTag
from .registry import (
    LIST_CONS,
    LIST_NIL,
    LIST_TYPE_HASH,
    TypeRegistry,
    builtin_variant_name,
    is_builtin_sum,
)
from .sentinels import NOT_FOUND, iffound
from .words import Kind, classify

logger = logging.getLogger(__name__)

UNKNOWN_HEAP = "<unknown heap value>"
UNKNOWN_NUMBER = "<unknown number>"
RECORD_PLACEHOLDER = "<record value>"
ENUM_PLACEHOLDER = "<enum value>"


# Shapes ---------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class TextShape:
    text: str


@dataclass(frozen=True)
class BytesShape:
    data: bytes


@dataclass(frozen=True)
class TupleShape:
    items: tuple[int, ...]


@dataclass(frozen=True)
class ArrayShape:
    items: tuple[int, ...]


@dataclass(frozen=True)
class ListShape:
    items: tuple[int, ...]


@dataclass(frozen=True)
class RecordShape:
    field_names: tuple[str, ...]
    items: tuple[int, ...]


@dataclass(frozen=True)
class VariantShape:
    """A resolved sum-type variant; field_names is set for inline-record payloads."""
    name: str
    items: tuple[int, ...]
    field_names: tuple[str, ...] | None = None


@dataclass(frozen=True)
class NumberShape:
    subtag: NumberTag
    value: object


@dataclass(frozen=True)
class FunctionShape:
    name: str | None = None


@dataclass(frozen=True)
class PlaceholderShape:
    """A value that could not be identified; text names the failing stage."""
    text: str


HeapShape = (
    TextShape | BytesShape | TupleShape | ArrayShape | ListShape | RecordShape
    | VariantShape | NumberShape | FunctionShape | PlaceholderShape
)


# Methods --------------------------------------------------------------------------------------------------------------

def dispatch_heap(word: int, heap: Heap, registry: TypeRegistry) -> HeapShape:
    """
    Resolve the heap object at a pointer word into a shape.

    Never raises for a malformed object or unmapped address; those resolve to
    placeholders.
    """
    obj = heap.load(word)
    if obj is None:
        logger.debug("unmapped heap address %#x", word)
        return PlaceholderShape(UNKNOWN_HEAP)

    try:
        tag = HeapTag(obj.tag)
    except ValueError:
        logger.debug("unrecognized heap tag %r at %#x", obj.tag, word)
        return PlaceholderShape(UNKNOWN_HEAP)

    if tag is HeapTag.STRING:
        if not isinstance(obj.data, str):
            return PlaceholderShape(UNKNOWN_HEAP)
        return TextShape(obj.data)
    if tag is HeapTag.BYTES:
        if not isinstance(obj.data, (bytes, bytearray)):
            return PlaceholderShape(UNKNOWN_HEAP)
        return BytesShape(bytes(obj.data))
    if tag is HeapTag.TUPLE:
        return TupleShape(obj.payload)
    if tag is HeapTag.ARRAY:
        return ArrayShape(obj.payload)
    if tag is HeapTag.RECORD:
        return _record_shape(obj, registry)
    if tag is HeapTag.VARIANT:
        if obj.type_hash == LIST_TYPE_HASH:
            return _list_shape(word, obj, heap)
        return _variant_shape(obj, registry)
    if tag is HeapTag.NUMBER:
        return _number_shape(obj)
    return FunctionShape(obj.data if isinstance(obj.data, str) else None)


# Private Methods ------------------------------------------------------------------------------------------------------

def _record_shape(obj: HeapObject, registry: TypeRegistry) -> HeapShape:
    names = iffound(registry.field_names(registry.find_type(obj.type_hash), obj.arity))
    if names is None:
        logger.debug("no record metadata for type hash %#x with arity %d", obj.type_hash, obj.arity)
        return PlaceholderShape(RECORD_PLACEHOLDER)
    return RecordShape(tuple(names), obj.payload)


def _variant_shape(obj: HeapObject, registry: TypeRegistry) -> HeapShape:
    if is_builtin_sum(obj.type_hash):
        name = builtin_variant_name(obj.type_hash, obj.variant_id)
        if name is NOT_FOUND:
            logger.debug("invalid built-in variant id %d for type hash %#x", obj.variant_id, obj.type_hash)
            return PlaceholderShape(ENUM_PLACEHOLDER)
        return VariantShape(name, obj.payload)

    info = registry.variant_info(registry.find_type(obj.type_hash), obj.variant_id)
    if info is NOT_FOUND or info.arity != obj.arity:
        logger.debug(
            "no variant metadata for type hash %#x, variant %d, arity %d",
            obj.type_hash, obj.variant_id, obj.arity,
        )
        return PlaceholderShape(ENUM_PLACEHOLDER)
    return VariantShape(info.name, obj.payload, info.field_names)


def _list_shape(word: int, obj: HeapObject, heap: Heap) -> HeapShape:
    items = []
    seen = {word}
    cell = obj
    while True:
        if cell.variant_id == LIST_NIL and cell.arity == 0:
            break
        if cell.variant_id != LIST_CONS or cell.arity != 2:
            logger.debug("malformed list cell in list at %#x", word)
            if not items:
                return PlaceholderShape(ENUM_PLACEHOLDER)
            break
        head, tail = cell.payload
        items.append(head)
        decoded = classify(tail)
        if decoded.kind is Kind.HEAP and decoded.address in seen:
            logger.debug("cyclic list at %#x, walk stopped at %#x", word, tail)
            break
        nxt = heap.load(decoded.address) if decoded.kind is Kind.HEAP else None
        if nxt is None or nxt.tag != HeapTag.VARIANT or nxt.type_hash != LIST_TYPE_HASH:
            logger.debug("list at %#x ends in a non-list tail %#x", word, tail)
            break
        seen.add(decoded.address)
        cell = nxt
    return ListShape(tuple(items))


def _number_shape(obj: HeapObject) -> HeapShape:
    try:
        subtag = NumberTag(obj.subtag)
    except ValueError:
        logger.debug("unrecognized number subtag %r", obj.subtag)
        return PlaceholderShape(UNKNOWN_NUMBER)
    value = obj.data
    if subtag is NumberTag.RATIONAL:
        ok = (isinstance(value, tuple) and len(value) == 2
              and all(isinstance(v, int) and not isinstance(v, bool) for v in value) and value[1] != 0)
    elif subtag in (NumberTag.FLOAT32, NumberTag.FLOAT64):
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    else:
        ok = isinstance(value, int) and not isinstance(value, bool)
    if not ok:
        logger.debug("malformed %s payload %r", subtag.name, value)
        return PlaceholderShape(UNKNOWN_NUMBER)
    return NumberShape(subtag, value)
