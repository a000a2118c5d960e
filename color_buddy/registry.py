"""Quantizer auto-discovery and palette extraction entry point.

Scans color_buddy/quantizers/ for modules that define a `quantizer` object
of type Quantizer. Collects them into a dict keyed by method name.

Handles both normal Python (pkgutil.iter_modules) and frozen PyInstaller
binaries (where iter_modules returns nothing — falls back to a known list).
"""

import importlib
import pkgutil

import numpy as np

from color_buddy.core.config import PaletteConfig
from color_buddy.core.errors import QuantizationFailure, validate_color_count
from color_buddy.core.palette import Palette
from color_buddy.core.types import Quantizer

_registry: dict[str, Quantizer] = {}

# Known quantizer module names — fallback for frozen binaries
_QUANTIZER_MODULES = [
    'kmeans',
    'median_cut',
]


def discover() -> dict[str, Quantizer]:
    """Import all quantizer modules and return the registry."""
    if _registry:
        return _registry

    import color_buddy.quantizers as pkg

    found_modules = [
        modname for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__) if not modname.startswith('_')
    ]
    if not found_modules:
        found_modules = _QUANTIZER_MODULES

    for modname in found_modules:
        module = importlib.import_module(f'color_buddy.quantizers.{modname}')
        q = getattr(module, 'quantizer', None)
        if isinstance(q, Quantizer):
            _registry[q.name] = q

    return _registry


def get(name: str) -> Quantizer:
    """Get a quantizer by method name."""
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown quantisation method: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def all_quantizers() -> dict[str, Quantizer]:
    """Return all registered quantizers."""
    return discover()


def extract_palette(pixels: np.ndarray, n: int, method: str, config: PaletteConfig | None = None) -> Palette:
    """Validate n, then reduce pixels with the named method.

    pixels is an (height, width, 3) or (count, 3) uint8 array.
    """
    validate_color_count(n)
    quantizer = get(method)
    flat = np.asarray(pixels, dtype=np.uint8)[..., :3].reshape(-1, 3)
    if len(flat) == 0:
        raise QuantizationFailure('image has no pixels')
    return quantizer.quantize(flat, n, config or PaletteConfig())
