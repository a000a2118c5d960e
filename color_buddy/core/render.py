"""Composite a palette into pixel buffers.

Both layouts share one rule: each swatch is total_width // color_count
columns wide and swatches are painted left to right in palette order.
Columns past color_count * swatch_width are left as they were, so a width
that does not divide evenly leaves a strip of background on the right.

Buffers are (height, width, 3) uint8 numpy arrays. Alpha is not rendered.
"""

import numpy as np

from color_buddy.core.errors import RenderFailure
from color_buddy.core.palette import Palette


def swatch_spans(total_width: int, color_count: int) -> list[tuple[int, int]]:
    """Return the [x0, x1) column span of each swatch."""
    swatch_width = total_width // color_count
    return [(i * swatch_width, (i + 1) * swatch_width) for i in range(color_count)]


def paint_swatches(buffer: np.ndarray, palette: Palette, color_count: int, row_start: int = 0) -> None:
    """Paint swatches into buffer rows [row_start, height) in place.

    Only the first color_count palette entries are used. When the palette is
    shorter, the spans of the missing entries stay unpainted.
    """
    width = buffer.shape[1]
    for (x0, x1), color in zip(swatch_spans(width, color_count), palette[:color_count]):
        buffer[row_start:, x0:x1] = (color.r, color.g, color.b)


def _check_dimensions(width: int, height: int, color_count: int) -> None:
    if width <= 0 or height <= 0:
        raise RenderFailure(f'Cannot render a {width}x{height} palette image')
    if color_count < 1:
        raise RenderFailure(f'Cannot render {color_count} swatches')


def render_appended(source: np.ndarray, palette: Palette, total_height: int, color_count: int) -> np.ndarray:
    """Copy source into the top of a taller buffer and paint the band below it.

    total_height is source height plus band height, as resolved for
    RenderMode.APPENDED.
    """
    source_height, width = source.shape[:2]
    _check_dimensions(width, total_height, color_count)
    if total_height < source_height:
        raise RenderFailure(f'Output height {total_height} is smaller than the source height {source_height}')

    buffer = np.zeros((total_height, width, 3), dtype=np.uint8)
    buffer[:source_height] = source[:, :, :3]
    paint_swatches(buffer, palette, color_count, row_start=source_height)
    return buffer


def render_standalone(palette: Palette, width: int, height: int, color_count: int) -> np.ndarray:
    """Return a width x height buffer filled with swatches on every row."""
    _check_dimensions(width, height, color_count)
    buffer = np.zeros((height, width, 3), dtype=np.uint8)
    paint_swatches(buffer, palette, color_count)
    return buffer
