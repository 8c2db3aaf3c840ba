"""Slope and aspect from the four direct neighbours of a pixel."""

from __future__ import annotations

import math

import numpy as np

from elevation.decoder import decode_terrarium_pixel
from shared.constants import (
    OUTPUT_TILE_SIZE,
    SLOPE_EXAGGERATION,
    SOURCE_TILE_PADDING,
)


def check_output_index(row: int, col: int) -> None:
    """Raise IndexError if (row, col) lies outside the output tile."""
    if not (0 <= row < OUTPUT_TILE_SIZE and 0 <= col < OUTPUT_TILE_SIZE):
        msg = f'Pixel ({row}, {col}) is outside the {OUTPUT_TILE_SIZE}px output tile'
        raise IndexError(msg)


def neighbour_window(row: int, col: int) -> tuple[int, int, int, int]:
    """
    Return (row_min, row_max, col_min, col_max) of source pixels read for (row, col).

    Bounds are inclusive and expressed in source tile coordinates.
    """
    check_output_index(row, col)
    pad = SOURCE_TILE_PADDING
    return row + pad - 1, row + pad + 1, col + pad - 1, col + pad + 1


def slope_aspect_from_deltas(dzdx: float, dzdy: float) -> tuple[float, float]:
    """Slope and aspect (radians) from horizontal and vertical elevation deltas."""
    slope = math.atan(SLOPE_EXAGGERATION * math.sqrt(dzdx * dzdx + dzdy * dzdy))
    aspect = math.atan2(-dzdy, -dzdx)
    return slope, aspect


def gradient(
    tile: np.ndarray,
    row: int,
    col: int,
    *,
    blue_fraction: bool = False,
) -> tuple[float, float]:
    """
    Compute (slope, aspect) for output pixel (row, col) of a padded source tile.

    The pixel is centred on source (row + 2, col + 2); dz/dx uses the left and
    right neighbours, dz/dy the upper and lower ones.
    """
    check_output_index(row, col)
    r = row + SOURCE_TILE_PADDING
    c = col + SOURCE_TILE_PADDING

    def h(rr: int, cc: int) -> float:
        return decode_terrarium_pixel(tile[rr, cc], blue_fraction=blue_fraction)

    dzdx = h(r, c + 1) - h(r, c - 1)
    dzdy = h(r + 1, c) - h(r - 1, c)
    return slope_aspect_from_deltas(dzdx, dzdy)


def compute_slope_aspect(elevation: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Вычисляет уклон и экспозицию для всей внутренней области тайла.

    elevation — декодированная сетка высот не меньше 516x516 (используется
    левый верхний угол). Возвращает два массива 512x512 (float64, радианы).
    """
    pad = SOURCE_TILE_PADDING
    n = OUTPUT_TILE_SIZE
    rows = slice(pad, pad + n)
    cols = slice(pad, pad + n)

    dzdx = elevation[rows, pad + 1 : pad + 1 + n] - elevation[rows, pad - 1 : pad - 1 + n]
    dzdy = elevation[pad + 1 : pad + 1 + n, cols] - elevation[pad - 1 : pad - 1 + n, cols]

    slope = np.arctan(SLOPE_EXAGGERATION * np.sqrt(dzdx * dzdx + dzdy * dzdy))
    aspect = np.arctan2(-dzdy, -dzdx)
    return slope, aspect
