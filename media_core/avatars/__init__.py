"""Avatar placeholder helpers."""

from .colors import DARK_PALETTE, LIGHT_PALETTE, Color, color_for, letter_tile_color, string_hash

__all__ = ["Color", "DARK_PALETTE", "LIGHT_PALETTE", "color_for", "letter_tile_color", "string_hash"]
