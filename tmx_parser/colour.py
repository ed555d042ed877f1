"""Colour values as written by Tiled (#RRGGBB or #AARRGGBB)."""

import string
from typing import NamedTuple


class Colour(NamedTuple):
    red: int
    green: int
    blue: int
    alpha: int = 255

    @classmethod
    def parse(cls, text: str) -> 'Colour':
        """
        Parse a hex colour string.

        Tiled writes the alpha channel FIRST when present:
            "#ff8000"    -> Colour(255, 128, 0, 255)
            "#80ff8000"  -> Colour(255, 128, 0, 128)

        Raises ValueError for anything else.
        """
        digits = text[1:] if text.startswith('#') else text
        if len(digits) not in (6, 8) or not all(c in string.hexdigits for c in digits):
            raise ValueError(f"invalid colour: {text!r}")
        value = int(digits, 16)

        if len(digits) == 8:
            alpha = (value >> 24) & 0xFF
        else:
            alpha = 255
        return cls(
            red=(value >> 16) & 0xFF,
            green=(value >> 8) & 0xFF,
            blue=value & 0xFF,
            alpha=alpha,
        )

    def to_hex(self) -> str:
        if self.alpha == 255:
            return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"
        return f"#{self.alpha:02x}{self.red:02x}{self.green:02x}{self.blue:02x}"
