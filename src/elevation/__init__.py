"""Elevation module - Terrarium decoding and neighbour gradients."""

from .decoder import (
    decode_terrarium_pixel,
    decode_terrarium_to_elevation_m,
    encode_terrarium_elevation,
)
from .gradient import (
    check_output_index,
    compute_slope_aspect,
    gradient,
    neighbour_window,
)

__all__ = [
    'check_output_index',
    'compute_slope_aspect',
    'decode_terrarium_pixel',
    'decode_terrarium_to_elevation_m',
    'encode_terrarium_elevation',
    'gradient',
    'neighbour_window',
]
