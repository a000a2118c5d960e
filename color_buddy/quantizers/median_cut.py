"""Median-cut palette extraction.

Starts with one box holding every pixel and splits boxes until there are n
of them or no box holds two distinct colours. Each round picks the most
populous splittable box (earliest wins ties), finds the channel with the
widest value range (R, then G, then B on ties) and cuts at the population
median along it: values <= median go to the lower box. If that leaves the
upper box empty the cut moves to values < median.

The lower box keeps the parent's position and the upper box is inserted
right after it. Each box's colour is the population-weighted mean of its
pixels, so the palette may be shorter than n for images with few colours.

Example:
    colorbuddy -m median-cut -n 5 photo.jpg
"""

import logging
from dataclasses import dataclass

import numpy as np

from color_buddy.core.config import PaletteConfig
from color_buddy.core.errors import QuantizationFailure
from color_buddy.core.palette import Palette, palette_from_array
from color_buddy.core.types import Quantizer

logger = logging.getLogger(__name__)

quantizer = Quantizer(
    name='median-cut',
    help='Recursive population-median box splitting. May return fewer colours than requested.',
)

# Box indices are held in 16 bits
MAX_BOXES = np.iinfo(np.uint16).max


@dataclass
class Box:
    colours: np.ndarray  # (k, 3) uint8 distinct colours
    counts: np.ndarray  # (k,) pixel population per colour

    @property
    def population(self) -> int:
        return int(self.counts.sum())

    @property
    def ranges(self) -> np.ndarray:
        return self.colours.max(axis=0).astype(int) - self.colours.min(axis=0).astype(int)

    @property
    def splittable(self) -> bool:
        return len(self.colours) > 1

    def mean_colour(self) -> np.ndarray:
        weights = self.counts.astype(np.float64)
        return (self.colours.astype(np.float64) * weights[:, None]).sum(axis=0) / weights.sum()

    def split(self) -> tuple['Box', 'Box']:
        channel = int(np.argmax(self.ranges))
        values = self.colours[:, channel]
        order = np.argsort(values, kind='stable')
        cumulative = np.cumsum(self.counts[order])
        median_pos = int(np.searchsorted(cumulative, (cumulative[-1] + 1) // 2))
        median = values[order][median_pos]

        lower = values <= median
        if lower.all():
            lower = values < median
        upper = ~lower
        return Box(self.colours[lower], self.counts[lower]), Box(self.colours[upper], self.counts[upper])


def _next_box(boxes: list[Box]) -> int | None:
    best = None
    best_population = -1
    for i, box in enumerate(boxes):
        if box.splittable and box.population > best_population:
            best, best_population = i, box.population
    return best


def cut(colours: np.ndarray, counts: np.ndarray, n: int) -> list[Box]:
    if n > MAX_BOXES:
        raise QuantizationFailure(f'{n} colours exceeds the {MAX_BOXES} box limit')

    boxes = [Box(colours, counts)]
    while len(boxes) < n:
        i = _next_box(boxes)
        if i is None:
            logger.debug('median-cut: no splittable box left at %d boxes', len(boxes))
            break
        lower, upper = boxes[i].split()
        boxes[i : i + 1] = [lower, upper]
    return boxes


@quantizer.run
def run(pixels: np.ndarray, n: int, config: PaletteConfig) -> Palette:
    colours, counts = np.unique(pixels.reshape(-1, 3), axis=0, return_counts=True)
    boxes = cut(colours, counts, n)
    logger.debug('median-cut: %d distinct colours -> %d boxes (n=%d)', len(colours), len(boxes), n)
    means = np.array([box.mean_colour() for box in boxes])
    channels = np.clip(np.floor(means + 0.5), 0, 255).astype(np.uint8)
    return palette_from_array(channels, alpha=config.alpha)
