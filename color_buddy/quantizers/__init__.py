"""Quantizer modules. Each module defines a `quantizer` object.

Explicit imports here ensure frozen binaries (PyInstaller) can find all quantizers.
"""

from color_buddy.quantizers import kmeans, median_cut

__all__ = ['kmeans', 'median_cut']
