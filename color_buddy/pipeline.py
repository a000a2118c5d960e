"""Run the full palette pipeline for one image, or a batch of them.

Each image is processed start to finish (decode, quantize, render or
describe, encode) before the next one begins. Nothing is shared between
images, and a failure in one is logged without stopping the batch.
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from color_buddy import registry
from color_buddy.core.config import PaletteConfig
from color_buddy.core.dimensions import HeightSpec, RenderMode, parse_palette_height, resolve_height
from color_buddy.core.errors import ColorBuddyError, validate_color_count
from color_buddy.core.imaging import load_rgb, save_rgb
from color_buddy.core.output_path import output_file_name
from color_buddy.core.record import PaletteRecord, build_record
from color_buddy.core.render import render_appended, render_standalone
from color_buddy.core.report import format_json, format_text
from color_buddy.core.types import OutputType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Options:
    """Resolved per-run settings, shared by every image in a batch."""

    number_of_colors: int
    method: str
    output_type: OutputType
    palette_height: HeightSpec
    palette_width: int | None = None
    output: Path | None = None
    config: PaletteConfig = field(default_factory=PaletteConfig)

    @classmethod
    def from_config(cls, config: PaletteConfig, **overrides) -> 'Options':
        """Build options from a config; keyword overrides (if not None) win."""
        config = config.with_overrides(
            number_of_colors=overrides.get('number_of_colors'),
            palette_height=overrides.get('palette_height'),
            quantisation_method=overrides.get('method'),
            output_type=overrides.get('output_type'),
        )
        return cls(
            number_of_colors=validate_color_count(config.number_of_colors),
            method=registry.get(config.quantisation_method).name,
            output_type=OutputType(config.output_type),
            palette_height=parse_palette_height(str(config.palette_height)),
            palette_width=overrides.get('palette_width'),
            output=Path(overrides['output']) if overrides.get('output') else None,
            config=config,
        )


def process_image(path: str | Path, options: Options, out=None) -> PaletteRecord:
    """Run one image through the pipeline and write its output.

    Returns the palette record; for OutputType.JSON it is also printed to out
    (stdout by default).
    """
    pixels = load_rgb(path)
    height, width = pixels.shape[:2]
    n = options.number_of_colors

    palette = registry.extract_palette(pixels, n, options.method, options.config)
    record = build_record(palette, options.method, n, (width, height))
    target = output_file_name(path, options.output, options.output_type)

    if options.output_type is OutputType.ORIGINAL_IMAGE:
        total_height = resolve_height(height, options.palette_height, RenderMode.APPENDED)
        save_rgb(render_appended(pixels, palette, total_height, n), target)
        logger.info('wrote %s', target)
    elif options.output_type is OutputType.STANDALONE:
        palette_height = resolve_height(height, options.palette_height, RenderMode.STANDALONE)
        palette_width = options.palette_width or width
        save_rgb(render_standalone(palette, palette_width, palette_height, n), target)
        logger.info('wrote %s', target)
    elif options.output_type is OutputType.JSON_FILE:
        try:
            Path(target).write_text(format_json(record) + '\n', encoding='utf-8')
        except OSError as e:
            raise ColorBuddyError(f'Failed to write {target}: {e}') from e
        logger.info('wrote %s', target)
    else:
        print(format_json(record), file=out or sys.stdout)

    return record


def run_batch(paths: list[str | Path], options: Options, out=None, summary: bool = False) -> int:
    """Process every path in order. Returns the number of images that failed.

    With summary, a short text description of each palette is printed to out.
    """
    failures = 0
    for path in paths:
        try:
            record = process_image(path, options, out=out)
            if summary:
                print(format_text(record, image_path=str(path)), file=out or sys.stdout)
        except ColorBuddyError as e:
            failures += 1
            logger.error('Error processing image %s: %s', path, e)
    return failures
