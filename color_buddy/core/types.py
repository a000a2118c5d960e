"""Shared types for colorbuddy: Quantizer, OutputType, ImageSize."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from color_buddy.core.palette import Palette

if TYPE_CHECKING:
    from color_buddy.core.config import PaletteConfig


class OutputType(str, enum.Enum):
    JSON = 'json'
    JSON_FILE = 'json-file'
    ORIGINAL_IMAGE = 'original-image'
    STANDALONE = 'standalone'

    @property
    def is_json(self) -> bool:
        return self in (OutputType.JSON, OutputType.JSON_FILE)


@dataclass(frozen=True)
class ImageSize:
    width: int
    height: int


class Quantizer:
    """A self-registering palette extraction method.

    Usage in a quantizer module:

        quantizer = Quantizer(name='k-means', help='Iterative centroid refinement')

        @quantizer.run
        def run(pixels, n, config):
            ...
    """

    def __init__(self, name: str, help: str = ''):
        self.name = name
        self.help = help
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def quantize(self, pixels: np.ndarray, n: int, config: PaletteConfig) -> Palette:
        """Reduce pixels, an (M, 3) uint8 array, to at most n colours."""
        if self._run_fn is None:
            raise RuntimeError(f'Quantizer {self.name} has no run function')
        return self._run_fn(pixels, n, config)

    def __repr__(self) -> str:
        return f'Quantizer({self.name!r})'
