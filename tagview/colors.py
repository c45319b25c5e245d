"""
24-bit ANSI colors and color themes for rendered values.

Every token category (numbers, strings, record keys, ...) has its own
foreground color, written as `ESC[38;2;R;G;Bm`. Rainbow bracket coloring cycles
through the theme's `rainbow` palette. Colored output always ends with RESET.

Public API
----------
Color(r, g, b)             → escape via .escape, Color.from_hex("#rrggbb")
ColorTheme(...)            → per-category colors, ColorTheme.from_mapping(data)
strip_ansi(text)           → text with escape sequences removed
RESET                      → "\\033[0m"
"""

# Standard library -----------------------------------------------------------------------------------------------------
import re
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, NamedTuple

# Constants ------------------------------------------------------------------------------------------------------------

RESET = "\033[0m"

_ANSI_PATTERN = re.compile(r"\033\[[0-9;]*m")
_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6})$")


# Classes --------------------------------------------------------------------------------------------------------------

class Color(NamedTuple):
    """An RGB foreground color."""
    r: int
    g: int
    b: int

    @property
    def escape(self) -> str:
        """ANSI "set foreground RGB" sequence for this color."""
        return f"\033[38;2;{self.r};{self.g};{self.b}m"

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        """
        Parse "#rrggbb" or "rrggbb".

        Examples:
            >>> Color.from_hex("#ff8000")
            Color(r=255, g=128, b=0)
        """
        m = _HEX_PATTERN.match(text.strip()) if isinstance(text, str) else None
        if m is None:
            raise ValueError(f"invalid hex color: {text!r}")
        h = m.group(1)
        return cls(int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))

    @classmethod
    def coerce(cls, value: Any) -> "Color":
        """Build a Color from a Color, a hex string or an (r, g, b) sequence."""
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        try:
            r, g, b = value
        except (TypeError, ValueError):
            raise ValueError(f"color must be a hex string or an (r, g, b) triple, got {value!r}") from None
        for c in (r, g, b):
            if isinstance(c, bool) or not isinstance(c, int) or not 0 <= c <= 255:
                raise ValueError(f"color channels must be ints in 0..255, got {value!r}")
        return cls(r, g, b)


@dataclass(frozen=True)
class ColorTheme:
    """
    Foreground colors per token category.

    Attributes:
        rainbow: Palette cycled per bracket nesting level when rainbow brackets are on.
        default: Punctuation, plain brackets and the depth-limit placeholder.
    """
    number: Color = Color(181, 206, 168)
    string: Color = Color(206, 145, 120)
    char: Color = Color(215, 186, 125)
    true: Color = Color(86, 156, 214)
    false: Color = Color(197, 134, 192)
    void: Color = Color(128, 128, 128)
    lambda_: Color = Color(220, 220, 170)
    bytes: Color = Color(156, 220, 254)
    box: Color = Color(78, 201, 176)
    sum_type: Color = Color(78, 161, 201)
    record_key: Color = Color(156, 220, 254)
    unknown: Color = Color(244, 71, 71)
    default: Color = Color(212, 212, 212)
    rainbow: tuple[Color, ...] = (
        Color(255, 215, 0),
        Color(218, 112, 214),
        Color(23, 159, 255),
    )

    def __post_init__(self) -> None:
        if not self.rainbow:
            raise ValueError("ColorTheme.rainbow must hold at least one color")

    def bracket(self, index: int, rainbow: bool) -> Color:
        """Bracket color for a nesting index; the default color when rainbow is off."""
        if not rainbow:
            return self.default
        return self.rainbow[index % len(self.rainbow)]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ColorTheme":
        """
        Build a theme from plain data, e.g. a TOML table.

        Keys are category names ("lambda" is accepted for lambda_), values are
        hex strings or [r, g, b] lists. `rainbow` is a list of such colors.

        Raises:
            ValueError: On unknown keys or malformed colors.
        """
        names = {f.name for f in fields(cls)}
        overrides = {}
        for key, value in data.items():
            name = "lambda_" if key == "lambda" else key
            if name not in names:
                raise ValueError(f"unknown theme color: {key!r}")
            if name == "rainbow":
                overrides[name] = tuple(Color.coerce(c) for c in value)
            else:
                overrides[name] = Color.coerce(value)
        return replace(cls(), **overrides)


# Methods --------------------------------------------------------------------------------------------------------------

def strip_ansi(text: str) -> str:
    """Remove ANSI color sequences from text."""
    return _ANSI_PATTERN.sub("", text)
