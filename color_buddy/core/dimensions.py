"""Palette height specifications and their resolution to pixel counts.

A height is either absolute pixels ("200", "200px") or a percentage of the
source image height ("50%"). For an appended strip the resolved value is the
full output height (source + band); for a standalone palette it is the
palette image height on its own.
"""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass

from color_buddy.core.errors import InvalidPaletteHeight

U32_MAX = 2**32 - 1

_PERCENT_RE = re.compile(r'([0-9]+(?:\.[0-9]*)?|\.[0-9]+)%')
_PIXELS_RE = re.compile(r'([0-9]+)(?:px)?')


class RenderMode(enum.Enum):
    APPENDED = 'appended'
    STANDALONE = 'standalone'


@dataclass(frozen=True)
class Absolute:
    pixels: int


@dataclass(frozen=True)
class Percentage:
    value: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.value <= 100.0:
            raise InvalidPaletteHeight('Percentage must be between 0 and 100')


HeightSpec = Absolute | Percentage


def _round_half_away(value: float) -> int:
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


def resolve_height(source_height: int, height: HeightSpec, mode: RenderMode) -> int:
    """Return the pixel height to allocate for the given mode.

    Percentages are not range-checked here; Percentage validates on construction.
    """
    if isinstance(height, Absolute):
        band = height.pixels
    else:
        band = _round_half_away(height.value / 100.0 * source_height)

    if mode is RenderMode.APPENDED:
        return source_height + band
    return band


def parse_palette_height(text: str) -> HeightSpec:
    """Parse a user-facing height string into a HeightSpec.

    Accepts '200', '200px' and '50%'. Only ASCII digits and a lowercase
    'px' suffix are recognised.
    """
    m = _PERCENT_RE.fullmatch(text)
    if m:
        return Percentage(float(m.group(1)))
    if text.endswith('%'):
        raise InvalidPaletteHeight('Percentage must be between 0 and 100')

    m = _PIXELS_RE.fullmatch(text)
    if m:
        pixels = int(m.group(1))
        if pixels <= U32_MAX:
            return Absolute(pixels)
    raise InvalidPaletteHeight('Pixels must be a positive integer')
