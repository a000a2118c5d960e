"""Report builder — text and JSON output for palette records."""

import json

from color_buddy.core.record import PaletteRecord


def format_text(record: PaletteRecord, image_path: str = '') -> str:
    """Format a record as human-readable text, one colour per line."""
    meta = record.metadata
    dims = meta.image_dimensions
    dim = f'{dims.width}×{dims.height}'
    header = f'colorbuddy: {image_path} ({dim})' if image_path else f'colorbuddy: ({dim})'
    lines = [
        header,
        f'  {meta.quantization_method}: {meta.extracted_colors}/{meta.requested_colors} colours',
        '',
    ]
    for i, c in enumerate(record.colors):
        lines.append(f'  {i:>3}  {c.hex}  rgb({c.r}, {c.g}, {c.b})')
    return '\n'.join(lines)


def format_json(record: PaletteRecord) -> str:
    """Format a record as JSON."""
    return json.dumps(record.as_dict(), indent=2)
