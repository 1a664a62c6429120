"""Deterministic placeholder colors for avatars without a picture."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from media_core.errors import PreconditionViolation


@dataclass(frozen=True, slots=True)
class Color:
    """8-bit RGBA color."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    @classmethod
    def from_hex_code(cls, code: int) -> Color:
        """Build a color from a ``0xAARRGGBB`` integer."""

        return cls(
            red=(code >> 16) & 0xFF,
            green=(code >> 8) & 0xFF,
            blue=code & 0xFF,
            alpha=(code >> 24) & 0xFF,
        )

    @property
    def hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    def as_tuple(self) -> tuple[int, int, int, int]:
        return self.red, self.green, self.blue, self.alpha

    def adjust_brightness(self, percentage: float = 30.0) -> Color:
        """Shift every channel by ``percentage`` of full scale, clamped."""

        delta = percentage / 100

        def _shift(channel: int) -> int:
            return round(min(1.0, max(0.0, channel / 255 + delta)) * 255)

        return Color(_shift(self.red), _shift(self.green), _shift(self.blue), self.alpha)

    def lighter(self, percentage: float = 30.0) -> Color:
        return self.adjust_brightness(abs(percentage))

    def darker(self, percentage: float = 30.0) -> Color:
        return self.adjust_brightness(-abs(percentage))


LIGHT_PALETTE: tuple[Color, ...] = tuple(
    Color.from_hex_code(code)
    for code in (
        0xFFEF9A9A,
        0xFF90CAF9,
        0xFFB0BEC5,
        0xFFB39DDB,
        0xFFFFAB91,
        0xFFA5D6A7,
        0xFFDDDDDD,
        0xFFE6EE9C,
        0xFFC5E1A5,
        0xFFFFF59D,
        0xFFF48FB1,
        0xFF9FA8DA,
        0xFFFFE082,
        0xFFBCAAA4,
        0xFF80DEEA,
        0xFFCE93D8,
    )
)

DARK_PALETTE: tuple[Color, ...] = tuple(
    Color.from_hex_code(code)
    for code in (
        0xFFC62828,
        0xFFAD1457,
        0xFF6A1B9A,
        0xFF4527A0,
        0xFF283593,
        0xFF1565C0,
        0xFF0277BD,
        0xFF00838F,
        0xFF00695C,
        0xFF2E7D32,
        0xFF558B2F,
        0xFF9E9D24,
        0xFFF9A825,
        0xFFFF8F00,
        0xFFEF6C00,
        0xFFD84315,
    )
)

DEFAULT_LIGHT_COLOR = Color.from_hex_code(0xFF9E9E9E)
DEFAULT_DARK_COLOR = Color.from_hex_code(0xFF757575)


def string_hash(identifier: str) -> int:
    """32-bit signed ``31 * h + unit`` hash over UTF-16 code units.

    Matches the string hash used by the other messenger clients, so a user
    gets the same tile color everywhere.
    """

    encoded = identifier.encode("utf-16-be", "surrogatepass")
    value = 0
    for index in range(0, len(encoded), 2):
        unit = (encoded[index] << 8) | encoded[index + 1]
        value = (31 * value + unit) & 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def color_for(identifier: str, palette: Sequence[Color], default: Color = DEFAULT_LIGHT_COLOR) -> Color:
    """Pick a stable palette entry for ``identifier``.

    A zero hash (e.g. the empty string) maps to ``default`` instead of the
    first palette entry.
    """

    if not palette:
        raise PreconditionViolation("Palette must not be empty")
    magnitude = abs(string_hash(identifier))
    if magnitude == 0:
        return default
    return palette[magnitude % len(palette)]


def letter_tile_color(uid: str, dark: bool = False) -> Color:
    """Background color for a user's letter-tile avatar."""

    if dark:
        return color_for(uid, DARK_PALETTE, DEFAULT_DARK_COLOR)
    return color_for(uid, LIGHT_PALETTE, DEFAULT_LIGHT_COLOR)
