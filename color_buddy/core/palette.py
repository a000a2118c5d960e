"""Colour value type and hex conversion helpers."""

from __future__ import annotations

from dataclasses import dataclass

OPAQUE = 0xFF


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f'#{r:02x}{g:02x}{b:02x}'


def hex_to_rgb(hex_str: str) -> tuple[int, int, int]:
    """Parse '#rrggbb' or '#rgb' (hash optional, any case). Returns black if malformed."""
    h = hex_str.strip().lstrip('#')
    if len(h) == 3:
        h = ''.join(c * 2 for c in h)
    if len(h) != 6:
        return (0, 0, 0)
    try:
        return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))
    except ValueError:
        return (0, 0, 0)


@dataclass(frozen=True)
class Color:
    """One palette entry. Equality and hashing compare the four bytes exactly."""

    r: int
    g: int
    b: int
    a: int = OPAQUE

    def __post_init__(self) -> None:
        for channel in ('r', 'g', 'b', 'a'):
            value = getattr(self, channel)
            if not 0 <= value <= 255:
                raise ValueError(f'Channel {channel}={value} outside 0-255')

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.r, self.g, self.b)

    @classmethod
    def from_hex(cls, hex_str: str, a: int = OPAQUE) -> Color:
        r, g, b = hex_to_rgb(hex_str)
        return cls(r, g, b, a)


Palette = list[Color]


def palette_from_array(channels, alpha: int = OPAQUE) -> Palette:
    """Build a Palette from an (N, 3) integer array of r, g, b rows."""
    return [Color(int(row[0]), int(row[1]), int(row[2]), alpha) for row in channels]
