"""
Structural rendering of runtime values into text.

`render()` turns a tagged word into human-readable, optionally colorized text.
The word is classified by tagview.words, heap objects are resolved by
tagview.dispatch, and every container decides whether it fits on one line by
rendering itself into a throwaway colorless buffer first (`measure_width`).

Rendering is total: unidentified values become placeholders such as
`<unknown value>` or `<record value>` and nothing raises for any input word.

Public API
----------
render(value, settings, heap=, registry=)               → str
measure_width(value, depth, settings, heap=, registry=) → int
escape_text(text, quote)                                → str

Examples:
    >>> heap = Heap()
    >>> render(heap.from_python([1, "a\\nb", (2,)]), PrintSettings.plain(), heap=heap)
    '[1, "a\\\\nb", box(2)]'
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import sys

# Local ----------------------------------------------------------------------------------------------------------------
from .buffer import RenderBuffer
from .colors import Color
from .dispatch import (
    ArrayShape,
    BytesShape,
    FunctionShape,
    ListShape,
    NumberShape,
    RecordShape,
    TextShape,
    TupleShape,
    VariantShape,
    dispatch_heap,
)
from .heap import Heap, NumberTag
from .numeric import format_decimal, format_float, format_float32, format_integer, format_rational
from .registry import TypeRegistry
from .settings import PrintSettings, get_settings
from .words import Constant, Decoded, Kind, ShortKind, classify

logger = logging.getLogger(__name__)

ITEM_PLACEHOLDER = "<item>"
UNKNOWN_VALUE = "<unknown value>"
UNKNOWN_CONSTANT = "<unknown constant>"
UNKNOWN_SHORT = "<unknown short value>"
LAMBDA = "<lambda>"

BOX_MARKER = "box"
ARRAY_OPEN = "[>"
ELLIPSIS = "..."

_FRAMES_PER_LEVEL = 5
_STACK_RESERVE = 64

SHORT_SUFFIXES = {
    ShortKind.INT8: "s",
    ShortKind.INT16: "S",
    ShortKind.UINT8: "us",
    ShortKind.UINT16: "uS",
}

NUMBER_SUFFIXES = {
    NumberTag.INT32: "l",
    NumberTag.UINT32: "ul",
    NumberTag.INT64: "L",
    NumberTag.UINT64: "uL",
    NumberTag.FLOAT32: "f",
}

_ESCAPES = {
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
}

_CONSTANT_TEXT = {
    Constant.TRUE: "true",
    Constant.FALSE: "false",
    Constant.VOID: "void",
}


# Methods --------------------------------------------------------------------------------------------------------------

def render(
    value: int,
    settings: PrintSettings | None = None,
    *,
    heap: Heap | None = None,
    registry: TypeRegistry | None = None,
) -> str:
    """
    Render a runtime value word as text.

    Args:
        value: Tagged value word.
        settings: Rendering policy; the module default (see settings.configure) if None.
        heap: Heap that pointer words refer to. Without one, every pointer renders
              as `<unknown heap value>`.
        registry: Type metadata for records and user sum types. Without one, records
                  and user variants render as placeholders.

    Returns:
        The rendered text, ending with an ANSI reset when settings.colored is set.

    Notes:
        - Strings and chars render raw at the top level and quoted/escaped when nested.
        - Cycles are not detected; bound them with settings.max_depth. Nesting deeper
          than the interpreter stack allows renders as `<item>` as well.
    """
    settings = get_settings() if settings is None else settings
    renderer = _Renderer(settings, heap, registry)
    buf = RenderBuffer(colored=settings.colored)
    renderer.value(value, 0, 0, buf)
    buf.finish()
    return buf.getvalue()


def measure_width(
    value: int,
    depth: int = 0,
    settings: PrintSettings | None = None,
    *,
    heap: Heap | None = None,
    registry: TypeRegistry | None = None,
) -> int:
    """
    Width of a value rendered colorless and entirely on one line at `depth`.

    This is the measurement behind line wrapping: a container splits when this
    width reaches its wrap threshold. Wrap thresholds and force_newline are
    ignored inside the measured value, so one measurement is linear in its size.
    """
    settings = get_settings() if settings is None else settings
    return _Renderer(settings, heap, registry, base_depth=depth).measure(value, depth, 0)


def escape_text(text: str, quote: str) -> str:
    """
    Escape control characters, backslash and the given quote with two-character escapes.

    Examples:
        >>> escape_text('say "hi"\\n', '"')
        'say \\\\"hi\\\\"\\\\n'
    """
    out = []
    for ch in text:
        if ch == quote:
            out.append("\\" + ch)
        else:
            out.append(_ESCAPES.get(ch, ch))
    return "".join(out)


# Classes --------------------------------------------------------------------------------------------------------------

class _Renderer:
    """
    Recursive-descent renderer for one top-level call.

    Holds only read-only context (settings, heap, registry). Depth, bracket
    color index and target buffer are passed explicitly through every call.

    The deepest rendered level is the smaller of settings.max_depth and the
    nesting the remaining interpreter stack can hold, so no input reaches
    RecursionError.
    """

    def __init__(self, settings: PrintSettings, heap: Heap | None, registry: TypeRegistry | None,
                 base_depth: int = 0) -> None:
        self.settings = settings
        self.theme = settings.theme
        self.heap = Heap() if heap is None else heap
        self.registry = TypeRegistry() if registry is None else registry
        self.stack_depth_limit = base_depth + _stack_levels()
        max_depth = settings.max_depth
        if max_depth is None or max_depth > self.stack_depth_limit:
            max_depth = self.stack_depth_limit
        self.max_depth = max_depth

    # ----- Entry points -----

    def value(self, word: int, depth: int, bracket: int, buf: RenderBuffer, flat: bool = False) -> None:
        """Render a word; flat keeps it and everything inside it on one line."""
        if depth > self.max_depth:
            if depth > self.stack_depth_limit:
                logger.debug("nesting beyond %d levels rendered as %s", self.stack_depth_limit, ITEM_PLACEHOLDER)
            buf.write(ITEM_PLACEHOLDER, self.theme.default)
            return

        decoded = classify(word)
        if decoded.kind is Kind.IMMEDIATE:
            buf.write(format_integer(decoded.number, self.settings.radix), self.theme.number)
        elif decoded.kind is Kind.CONSTANT:
            self._constant(decoded, buf)
        elif decoded.kind is Kind.SHORT:
            self._short(decoded, depth, buf)
        elif decoded.kind is Kind.HEAP:
            self._heap(decoded.address, depth, bracket, buf, flat)
        else:
            buf.write(UNKNOWN_VALUE, self.theme.unknown)

    def measure(self, word: int, depth: int, bracket: int) -> int:
        scratch = RenderBuffer(colored=False)
        self.value(word, depth, bracket, scratch, flat=True)
        return len(scratch)

    # ----- Scalars -----

    def _constant(self, decoded: Decoded, buf: RenderBuffer) -> None:
        constant = decoded.constant
        if constant is None:
            buf.write(UNKNOWN_CONSTANT, self.theme.unknown)
            return
        color = {
            Constant.TRUE: self.theme.true,
            Constant.FALSE: self.theme.false,
            Constant.VOID: self.theme.void,
        }[constant]
        buf.write(_CONSTANT_TEXT[constant], color)

    def _short(self, decoded: Decoded, depth: int, buf: RenderBuffer) -> None:
        kind = decoded.short_kind
        if kind is None:
            buf.write(UNKNOWN_SHORT, self.theme.unknown)
        elif kind is ShortKind.CHAR:
            if decoded.number > 0x10FFFF:
                logger.debug("char payload %#x is not a code point", decoded.number)
                buf.write(UNKNOWN_SHORT, self.theme.unknown)
                return
            self._text(chr(decoded.number), depth, "'", self.theme.char, buf)
        else:
            text = format_integer(decoded.number, self.settings.radix)
            buf.write(self._suffixed(text, SHORT_SUFFIXES[kind]), self.theme.number)

    def _number(self, shape: NumberShape, buf: RenderBuffer) -> None:
        subtag, value = shape.subtag, shape.value
        if subtag is NumberTag.RATIONAL:
            text = format_rational(*value)
        elif subtag is NumberTag.BIGINT:
            text = format_decimal(value)
        elif subtag is NumberTag.FLOAT64:
            text = format_float(value)
        elif subtag is NumberTag.FLOAT32:
            text = self._suffixed(format_float32(value), NUMBER_SUFFIXES[subtag])
        else:
            text = self._suffixed(format_integer(value, self.settings.radix), NUMBER_SUFFIXES[subtag])
        buf.write(text, self.theme.number)

    def _suffixed(self, text: str, suffix: str) -> str:
        return text + suffix if self.settings.print_suffix else text

    def _text(self, text: str, depth: int, quote: str, color: Color, buf: RenderBuffer) -> None:
        if depth == 0:
            buf.write(text, color)
        else:
            buf.write(f"{quote}{escape_text(text, quote)}{quote}", color)

    def _bytes(self, data: bytes, buf: RenderBuffer) -> None:
        limit = self.settings.byte_limit
        groups = [f"{b:02x}" for b in data[:limit]]
        if len(data) > limit:
            groups.append(ELLIPSIS)
        buf.write(f"<bytes: {' '.join(groups)}>", self.theme.bytes)

    # ----- Heap objects -----

    def _heap(self, word: int, depth: int, bracket: int, buf: RenderBuffer, flat: bool) -> None:
        shape = dispatch_heap(word, self.heap, self.registry)

        if isinstance(shape, TextShape):
            self._text(shape.text, depth, '"', self.theme.string, buf)
        elif isinstance(shape, BytesShape):
            self._bytes(shape.data, buf)
        elif isinstance(shape, NumberShape):
            self._number(shape, buf)
        elif isinstance(shape, FunctionShape):
            buf.write(LAMBDA, self.theme.lambda_)
        elif isinstance(shape, TupleShape):
            if len(shape.items) == 1:
                self._box(shape.items[0], depth, bracket, buf, flat)
            else:
                entries = [(None, item) for item in shape.items]
                self._container(word, entries, "tuple", "(", ")", depth, bracket, buf, flat)
        elif isinstance(shape, ListShape):
            entries = [(None, item) for item in shape.items]
            self._container(word, entries, "list", "[", "]", depth, bracket, buf, flat)
        elif isinstance(shape, ArrayShape):
            entries = [(None, item) for item in shape.items]
            self._container(word, entries, "array", ARRAY_OPEN, "]", depth, bracket, buf, flat)
        elif isinstance(shape, RecordShape):
            entries = list(zip(shape.field_names, shape.items))
            self._container(word, entries, "record", "{", "}", depth, bracket, buf, flat, spaced=True)
        elif isinstance(shape, VariantShape):
            self._variant(word, shape, depth, bracket, buf, flat)
        else:
            buf.write(shape.text, self.theme.unknown)

    def _box(self, item: int, depth: int, bracket: int, buf: RenderBuffer, flat: bool) -> None:
        color = self.theme.bracket(bracket, self.settings.rainbow_bracket)
        buf.write(BOX_MARKER, self.theme.box)
        buf.write("(", color)
        self.value(item, depth + 1, bracket + 1, buf, flat)
        buf.write(")", color)

    def _variant(self, word: int, shape: VariantShape, depth: int, bracket: int,
                 buf: RenderBuffer, flat: bool) -> None:
        buf.write(shape.name, self.theme.sum_type)
        if not shape.items:
            return
        if shape.field_names is not None:
            buf.write(" ")
            entries = list(zip(shape.field_names, shape.items))
            self._container(word, entries, "record", "{", "}", depth, bracket, buf, flat, spaced=True)
        else:
            entries = [(None, item) for item in shape.items]
            self._container(word, entries, "tuple", "(", ")", depth, bracket, buf, flat,
                            keep_line=len(entries) == 1)

    def _container(self, word: int, entries: list[tuple[str | None, int]], kind: str,
                   open_: str, close: str, depth: int, bracket: int, buf: RenderBuffer,
                   flat: bool, spaced: bool = False, keep_line: bool = False) -> None:
        """
        Render bracketed entries, either on one line or one entry per indented line.

        Entries are (key, word) pairs; keys are record field names or None.
        keep_line holds this container on one line without flattening its entries.
        """
        color = self.theme.bracket(bracket, self.settings.rainbow_bracket)
        split = bool(entries) and not (flat or keep_line) and self._should_split(word, kind, depth, bracket)

        buf.write(open_, color)
        if split:
            newline = self.settings.newline
            pad = " " * (self.settings.indent_amount * (depth + 1))
            for i, (key, item) in enumerate(entries):
                if i:
                    buf.write(",", self.theme.default)
                buf.write(newline + pad)
                self._entry(key, item, depth + 1, bracket + 1, buf, flat)
            buf.write(newline + " " * (self.settings.indent_amount * depth))
        else:
            if spaced:
                buf.write(" ")
            for i, (key, item) in enumerate(entries):
                if i:
                    buf.write(", ", self.theme.default)
                self._entry(key, item, depth + 1, bracket + 1, buf, flat)
            if spaced and entries:
                buf.write(" ")
        buf.write(close, color)

    def _entry(self, key: str | None, item: int, depth: int, bracket: int, buf: RenderBuffer,
               flat: bool) -> None:
        if key is not None:
            buf.write(key, self.theme.record_key)
            buf.write(": ", self.theme.default)
        self.value(item, depth, bracket, buf, flat)

    def _should_split(self, word: int, kind: str, depth: int, bracket: int) -> bool:
        if self.settings.force_newline:
            return True
        threshold = self.settings.wrap_threshold(kind)
        if threshold is None:
            return False
        return self.measure(word, depth, bracket) >= threshold


# Private Methods ------------------------------------------------------------------------------------------------------

def _stack_levels() -> int:
    """Nesting levels that fit in the interpreter stack left above the caller."""
    used = 0
    frame = sys._getframe()
    while frame is not None:
        used += 1
        frame = frame.f_back
    return max(0, (sys.getrecursionlimit() - used - _STACK_RESERVE) // _FRAMES_PER_LEVEL)
