"""color_buddy.core — Foundation layer.

Contains the colour model, height resolution, rendering, record building,
configuration and the image codec wrapper.
This module has NO dependencies on color_buddy.quantizers or color_buddy.registry.
Only stdlib, numpy, and PIL are allowed here.
"""
