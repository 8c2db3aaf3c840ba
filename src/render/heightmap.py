"""Raw height ramp renderer - blue overlay with elevation-driven opacity."""

from __future__ import annotations

import numpy as np

from elevation.decoder import (
    decode_terrarium_pixel,
    decode_terrarium_to_elevation_m,
)
from elevation.gradient import check_output_index
from shared.constants import (
    CHANNEL_MAX,
    HEIGHT_RAMP_CEILING_M,
    HEIGHT_RAMP_COLOR,
    OUTPUT_CHANNELS,
    OUTPUT_TILE_SIZE,
    SOURCE_TILE_PADDING,
)


def height_ramp_alpha(h: float) -> int:
    """Opacity proportional to elevation, 0 at sea level and 255 from 1000 m."""
    frac = min(max(h / HEIGHT_RAMP_CEILING_M, 0.0), 1.0) * CHANNEL_MAX
    return int(frac)


def height_ramp(
    tile: np.ndarray,
    row: int,
    col: int,
    *,
    blue_fraction: bool = False,
) -> tuple[int, int, int, int]:
    """Single output pixel of the height ramp: (0, 0, 255, alpha)."""
    check_output_index(row, col)
    h = decode_terrarium_pixel(
        tile[row + SOURCE_TILE_PADDING, col + SOURCE_TILE_PADDING],
        blue_fraction=blue_fraction,
    )
    red, green, blue = HEIGHT_RAMP_COLOR
    return red, green, blue, height_ramp_alpha(h)


def render_height_ramp(
    tile: np.ndarray,
    *,
    out: np.ndarray | None = None,
    blue_fraction: bool = False,
) -> np.ndarray:
    """
    Отрисовывает синюю шкалу высот для всего тайла.

    Цвет постоянный (0, 0, 255); альфа = clamp(h / 1000, 0, 1) * 255.
    """
    if out is None:
        out = np.empty((OUTPUT_TILE_SIZE, OUTPUT_TILE_SIZE, OUTPUT_CHANNELS), np.uint8)

    pad = SOURCE_TILE_PADDING
    n = OUTPUT_TILE_SIZE
    centre = tile[pad : pad + n, pad : pad + n]
    elevation = decode_terrarium_to_elevation_m(centre, blue_fraction=blue_fraction)

    out[:, :, :3] = HEIGHT_RAMP_COLOR
    frac = np.clip(elevation / HEIGHT_RAMP_CEILING_M, 0.0, 1.0) * CHANNEL_MAX
    out[:, :, 3] = frac.astype(np.uint8)
    return out
