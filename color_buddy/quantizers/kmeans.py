"""K-means palette extraction over the image's colour histogram.

Builds a histogram of distinct colours (sorted by r, g, b) and clusters it
in a luma-weighted RGB space. Centroids are seeded by sampling the
histogram evenly by cumulative frequency: centroid i starts at the entry
where the running pixel count first passes (i + 0.5) * total / n. If that
entry is already taken, the seed moves to the next unused entry, wrapping
round to the start of the histogram, until every entry has a centroid.

Each round assigns every histogram entry to its nearest centroid (ties go
to the lowest index) and moves each centroid to the frequency-weighted mean
of its entries. Stops when no assignment changes or after max_iterations
rounds. A centroid that loses all its entries jumps to the entry farthest
from its own centroid (lowest index on ties), so long as there are more
distinct colours than occupied clusters; otherwise it stays where it was.

Always returns exactly n colours. An image with fewer than n distinct
colours yields duplicate centroids.

Example:
    colorbuddy -m k-means -n 8 photo.jpg
"""

import logging

import numpy as np
from sklearn.metrics import pairwise_distances_argmin

from color_buddy.core.config import PaletteConfig
from color_buddy.core.palette import Palette, palette_from_array
from color_buddy.core.types import Quantizer

logger = logging.getLogger(__name__)

quantizer = Quantizer(
    name='k-means',
    help='Iterative centroid refinement (k-means). Always returns the requested number of colours.',
)

# sqrt of Rec. 601 luma weights, so squared distances weight channels by luma
CHANNEL_SCALE = np.sqrt(np.array([0.299, 0.587, 0.114]))


def colour_histogram(pixels: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return (colours, counts) with colours sorted lexicographically by r, g, b."""
    colours, counts = np.unique(pixels.reshape(-1, 3), axis=0, return_counts=True)
    return colours, counts


def seed_indices(counts: np.ndarray, n: int) -> np.ndarray:
    """Histogram indices of the initial centroids."""
    cumulative = np.cumsum(counts)
    targets = (np.arange(n) + 0.5) * cumulative[-1] / n
    idx = np.minimum(np.searchsorted(cumulative, targets, side='right'), len(counts) - 1)

    distinct = len(counts)
    used: set[int] = set()
    seeds = []
    for i in idx.tolist():
        if len(used) < distinct:
            while i in used:
                i = (i + 1) % distinct
            used.add(i)
        seeds.append(i)
    return np.array(seeds, dtype=np.intp)


def _reseed_empty(points: np.ndarray, centroids: np.ndarray, labels: np.ndarray, occupied: np.ndarray) -> None:
    """Move each empty centroid onto the entry farthest from its own centroid."""
    spare = len(points) - int(occupied.sum())
    empty = np.flatnonzero(~occupied)[:spare]
    if len(empty) == 0:
        return
    dist = ((points - centroids[labels]) ** 2).sum(axis=1)
    for k in empty:
        j = int(np.argmax(dist))
        if dist[j] <= 0:
            break
        centroids[k] = points[j]
        dist[j] = -1.0


def _round_half_away(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def cluster(colours: np.ndarray, counts: np.ndarray, n: int, max_iterations: int) -> np.ndarray:
    """Run k-means on a histogram and return (n, 3) float centroids in RGB."""
    points = colours.astype(np.float64) * CHANNEL_SCALE
    weights = counts.astype(np.float64)
    centroids = points[seed_indices(counts, n)].copy()

    labels = None
    for iteration in range(1, max_iterations + 1):
        new_labels = pairwise_distances_argmin(points, centroids)
        if labels is not None and np.array_equal(new_labels, labels):
            logger.debug('k-means converged after %d rounds', iteration - 1)
            break
        labels = new_labels
        totals = np.bincount(labels, weights=weights, minlength=n)
        sums = np.stack(
            [np.bincount(labels, weights=weights * points[:, c], minlength=n) for c in range(3)],
            axis=1,
        )
        occupied = totals > 0
        centroids[occupied] = sums[occupied] / totals[occupied, None]
        _reseed_empty(points, centroids, labels, occupied)
    else:
        logger.debug('k-means stopped at the %d round ceiling', max_iterations)

    return centroids / CHANNEL_SCALE


@quantizer.run
def run(pixels: np.ndarray, n: int, config: PaletteConfig) -> Palette:
    colours, counts = colour_histogram(pixels)
    logger.debug('k-means: %d distinct colours, n=%d', len(colours), n)
    centroids = cluster(colours, counts, n, config.max_iterations)
    channels = np.clip(_round_half_away(centroids), 0, 255).astype(np.uint8)
    return palette_from_array(channels, alpha=config.alpha)
