"""Descriptive palette records for JSON output.

A PaletteRecord is built once per image and never mutated. as_dict() gives a
plain dict/list tree that any serializer can consume.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from color_buddy.core.palette import Palette
from color_buddy.core.types import ImageSize


@dataclass(frozen=True)
class ColorInfo:
    r: int
    g: int
    b: int
    a: int
    hex: str

    def as_dict(self) -> dict[str, Any]:
        return {'r': self.r, 'g': self.g, 'b': self.b, 'a': self.a, 'hex': self.hex}


@dataclass(frozen=True)
class PaletteMetadata:
    requested_colors: int
    extracted_colors: int
    quantization_method: str
    image_dimensions: ImageSize
    generated_at: datetime

    def as_dict(self) -> dict[str, Any]:
        return {
            'requested_colors': self.requested_colors,
            'extracted_colors': self.extracted_colors,
            'quantization_method': self.quantization_method,
            'image_dimensions': {
                'width': self.image_dimensions.width,
                'height': self.image_dimensions.height,
            },
            'generated_at': format_timestamp(self.generated_at),
        }


@dataclass(frozen=True)
class PaletteRecord:
    metadata: PaletteMetadata
    colors: tuple[ColorInfo, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            'metadata': self.metadata.as_dict(),
            'colors': [c.as_dict() for c in self.colors],
        }


def format_timestamp(moment: datetime) -> str:
    """ISO 8601 in UTC with a trailing Z, e.g. 2025-06-01T12:00:00.123456Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def build_record(
    palette: Palette,
    quantization_method: str,
    requested_colors: int,
    image_size: tuple[int, int],
    generated_at: datetime | None = None,
) -> PaletteRecord:
    width, height = image_size
    colors = tuple(ColorInfo(c.r, c.g, c.b, c.a, c.hex) for c in palette)
    metadata = PaletteMetadata(
        requested_colors=requested_colors,
        extracted_colors=len(colors),
        quantization_method=quantization_method,
        image_dimensions=ImageSize(width, height),
        generated_at=generated_at or datetime.now(timezone.utc),
    )
    return PaletteRecord(metadata=metadata, colors=colors)
