"""
Print settings: the rendering policy consumed by tagview.render.

`PrintSettings` is an immutable per-call configuration. A module-wide default
is used whenever `render()` is called without settings; it can be changed
with `configure()` and read back with `get_settings()`. Settings can also be
loaded from TOML, either a standalone file with a `[tagview]` table or the
`[tool.tagview]` table of a pyproject.toml.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Literal, Mapping

# Third-party ----------------------------------------------------------------------------------------------------------
import toml

# Local ----------------------------------------------------------------------------------------------------------------
from .colors import ColorTheme
from .numeric import Radix

__all__ = [
    "PrintSettings",
    "Radix",
    "configure",
    "get_settings",
    "load_settings",
]

Preset = Literal["compact", "debug", "default", "plain", "rainbow"]

_WRAP_FIELDS = ("list_wrap", "array_wrap", "record_wrap", "tuple_wrap")


# Private Methods ------------------------------------------------------------------------------------------------------

def _check_count(name: str, val: Any) -> None:
    if isinstance(val, bool) or not isinstance(val, int):
        raise TypeError(f"PrintSettings.{name} must be an int, got {type(val).__name__}")
    if val < 0:
        raise ValueError(f"PrintSettings.{name} must be >=0, but got {val}")


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class PrintSettings:
    """
    Rendering policy for runtime values.

    Attributes:
        colored: Emit 24-bit ANSI color escapes and a trailing reset.
        indent_amount: Spaces per nesting level when a container splits over lines.
        max_depth: Deepest nesting level rendered; deeper values render as `<item>`.
                   None means unlimited.
        newline: Line separator used when a container splits.
        print_suffix: Append type suffixes to sized numbers (`5s`, `7uL`, `1.5f`).
        byte_limit: Maximum bytes shown for a byte sequence before ` ...`.
        rainbow_bracket: Color brackets by nesting level from the theme palette.
        radix: Radix of integers; floats, rationals and big integers stay decimal.
        force_newline: Always split non-empty containers, except single-value boxes.
        list_wrap: Split a list when its single-line width reaches this many characters.
        array_wrap: Same for arrays.
        record_wrap: Same for records and inline-record variant payloads.
        tuple_wrap: Same for tuples and positional variant payloads.
        theme: Colors per token category.

    Class Methods:
        plain(): No colors.
        compact(): No colors, never split lines.
        rainbow(): Colored with rainbow brackets.
        debug(): No colors, depth limited to 8, every container split.

    Examples:
        >>> PrintSettings().merge(radix="hex", colored=False).radix
        <Radix.HEX: 16>
    """

    colored: bool = True
    indent_amount: int = 2
    max_depth: int | None = None
    newline: str = "\n"
    print_suffix: bool = True
    byte_limit: int = 32
    rainbow_bracket: bool = False
    radix: Radix = Radix.DEC
    force_newline: bool = False

    list_wrap: int | None = 200
    array_wrap: int | None = 200
    record_wrap: int | None = 200
    tuple_wrap: int | None = 200

    theme: ColorTheme = field(default_factory=ColorTheme)

    def __post_init__(self) -> None:
        """Validate field types and ranges, normalizing the radix."""
        for name in ("colored", "print_suffix", "rainbow_bracket", "force_newline"):
            val = getattr(self, name)
            if not isinstance(val, bool):
                raise TypeError(f"PrintSettings.{name} must be a bool, got {type(val).__name__}")
        for name in ("indent_amount", "byte_limit"):
            _check_count(name, getattr(self, name))
        for name in ("max_depth",) + _WRAP_FIELDS:
            val = getattr(self, name)
            if val is not None:
                _check_count(name, val)
        if not isinstance(self.newline, str):
            raise TypeError(f"PrintSettings.newline must be a str, got {type(self.newline).__name__}")
        if not isinstance(self.theme, ColorTheme):
            raise TypeError(f"PrintSettings.theme must be a ColorTheme, got {type(self.theme).__name__}")
        object.__setattr__(self, "radix", Radix.parse(self.radix))

    # Class Methods ------------------------------------

    @classmethod
    def plain(cls) -> "PrintSettings":
        return cls(colored=False)

    @classmethod
    def compact(cls) -> "PrintSettings":
        return cls(colored=False, list_wrap=None, array_wrap=None, record_wrap=None, tuple_wrap=None)

    @classmethod
    def rainbow(cls) -> "PrintSettings":
        return cls(rainbow_bracket=True)

    @classmethod
    def debug(cls) -> "PrintSettings":
        return cls(colored=False, max_depth=8, force_newline=True)

    @classmethod
    def preset(cls, name: Preset) -> "PrintSettings":
        """Settings for a preset name."""
        factories = {
            "compact": cls.compact,
            "debug": cls.debug,
            "default": cls,
            "plain": cls.plain,
            "rainbow": cls.rainbow,
        }
        try:
            return factories[name]()
        except KeyError:
            raise ValueError(f"unknown preset {name!r}, expected one of {sorted(factories)}") from None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: "PrintSettings | None" = None) -> "PrintSettings":
        """
        Build settings from plain data such as a parsed TOML table.

        Accepts an optional "preset" key, radix names ("hex", "dec", ...), a "theme"
        sub-table (see ColorTheme.from_mapping) and `false` for wrap thresholds
        to disable them.
        """
        data = dict(data)
        preset = data.pop("preset", None)
        if base is None:
            base = cls.preset(preset) if preset is not None else cls()
        elif preset is not None:
            base = cls.preset(preset)
        if "theme" in data:
            data["theme"] = ColorTheme.from_mapping(data["theme"])
        for name in _WRAP_FIELDS:
            if data.get(name) is False:
                data[name] = None
        return base.merge(**data)

    # Methods ------------------------------------------

    def merge(self, **overrides: Any) -> "PrintSettings":
        """
        Return a copy with the given fields replaced.

        Raises:
            TypeError: On unknown field names or invalid field types.
        """
        names = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - names)
        if unknown:
            raise TypeError(f"unknown PrintSettings fields: {', '.join(unknown)}")
        return replace(self, **overrides)

    def wrap_threshold(self, kind: str) -> int | None:
        """Wrap threshold for "list", "array", "record" or "tuple"."""
        return getattr(self, f"{kind}_wrap")


# Module Configuration -------------------------------------------------------------------------------------------------

_settings = PrintSettings()


def configure(preset: Preset | None = None, **overrides: Any) -> PrintSettings:
    """
    Change the module-wide default settings.

    A preset replaces the current defaults, overrides are merged on top.
    Without a preset the overrides apply incrementally to the current defaults.

    Returns:
        The new default settings.
    """
    global _settings
    base = PrintSettings.preset(preset) if preset is not None else _settings
    _settings = base.merge(**overrides)
    return _settings


def get_settings() -> PrintSettings:
    """The module-wide default settings."""
    return _settings


def load_settings(path: str | Path, base: PrintSettings | None = None) -> PrintSettings:
    """
    Load settings from a TOML file.

    Looks for `[tool.tagview]` (pyproject.toml style), then a top-level `[tagview]`
    table, and otherwise reads the whole document as the settings table.

    Example file:
        [tagview]
        preset = "plain"
        radix = "hex"
        record_wrap = 80

        [tagview.theme]
        number = "#b5cea8"
    """
    data = toml.load(Path(path))
    table = data.get("tool", {}).get("tagview")
    if table is None:
        table = data.get("tagview", data)
    return PrintSettings.from_mapping(table, base=base)
