"""
Render buffer: accumulating text sink with color-escape economy.
"""

# Local ----------------------------------------------------------------------------------------------------------------
from .colors import RESET, Color


class RenderBuffer:
    """
    Text sink remembering the last color written.

    A color escape is emitted only when the requested color differs from the
    current one; text written without a color (whitespace) keeps the current
    color. A colorless buffer never emits escapes, which is what width
    measurement uses.

    Attributes:
        colored: Whether escapes are written at all.
        current: Last color written, None before the first colored write.

    Examples:
        >>> buf = RenderBuffer(colored=False)
        >>> buf.write("[", Color(1, 2, 3))
        >>> buf.write("]", Color(1, 2, 3))
        >>> buf.getvalue(), len(buf)
        ('[]', 2)
    """
    __slots__ = ("colored", "current", "_parts", "_length")

    def __init__(self, colored: bool = False) -> None:
        self.colored = colored
        self.current: Color | None = None
        self._parts: list[str] = []
        self._length = 0

    def __len__(self) -> int:
        """Number of text characters written, escapes excluded."""
        return self._length

    def write(self, text: str, color: Color | None = None) -> None:
        if self.colored and color is not None and color != self.current:
            self._parts.append(color.escape)
            self.current = color
        self._parts.append(text)
        self._length += len(text)

    def finish(self) -> None:
        """Append the trailing reset of a colored render."""
        if self.colored:
            self._parts.append(RESET)
            self.current = None

    def getvalue(self) -> str:
        return "".join(self._parts)
