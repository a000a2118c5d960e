"""Thin Pillow wrapper: decode files to RGB arrays and encode arrays back."""

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from color_buddy.core.errors import ColorBuddyError, RenderFailure

logger = logging.getLogger(__name__)


def load_rgb(path: str | Path) -> np.ndarray:
    """Open an image and return it as a (height, width, 3) uint8 array."""
    try:
        with Image.open(path) as img:
            arr = np.array(img.convert('RGB'))
    except (OSError, Image.DecompressionBombError) as e:
        raise ColorBuddyError(f'Failed to open image: {path}: {e}') from e
    logger.debug('loaded %s (%dx%d)', path, arr.shape[1], arr.shape[0])
    return arr


def save_rgb(buffer: np.ndarray, path: str | Path) -> None:
    """Encode buffer to path; the format follows the file extension."""
    try:
        Image.fromarray(np.ascontiguousarray(buffer, dtype=np.uint8)).save(path)
    except (OSError, ValueError, KeyError) as e:
        raise RenderFailure(f'Failed to save image to {path}: {e}') from e
