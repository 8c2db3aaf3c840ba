"""Dual-light hillshade renderer - warm NW light plus cool SW light."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from elevation.decoder import (
    decode_terrarium_pixel,
    decode_terrarium_to_elevation_m,
)
from elevation.gradient import compute_slope_aspect, gradient
from shared.constants import (
    ALPHA_ELEVATION_MIN_M,
    ALPHA_ELEVATION_RANGE_M,
    CHANNEL_MAX,
    HILLSHADE_AMBIENT,
    HILLSHADE_DIRECT,
    HILLSHADE_LIGHT_COOL,
    HILLSHADE_LIGHT_WARM,
    OUTPUT_CHANNELS,
    OUTPUT_TILE_SIZE,
    SOURCE_TILE_PADDING,
    SOURCE_TILE_SIZE,
    BlendMode,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

HALF_PI = math.pi / 2


def _light_terms(azimuth_deg: float, elevation_deg: float) -> tuple[float, float, float]:
    """Per-light constants: azimuth offset, sin and cos of the zenith angle."""
    elev_rad = elevation_deg * math.pi / 180
    azimuth_term = (azimuth_deg - 90) * math.pi / 180
    return azimuth_term, math.sin(HALF_PI - elev_rad), math.cos(HALF_PI - elev_rad)


def light_luminance(
    slope: float,
    aspect: float,
    azimuth_deg: float,
    elevation_deg: float,
) -> int:
    """
    Яркость точки рельефа от одного источника света, 8 бит.

    l = cos(pi/2 - aspect - (az - 90)) * sin(slope) * sin(pi/2 - elev)
        + cos(slope) * cos(pi/2 - elev)

    Отрицательная освещённость обнуляется, затем sqrt(l * 0.8 + 0.2) * 255
    усекается до целого.
    """
    azimuth_term, sin_zenith, cos_zenith = _light_terms(azimuth_deg, elevation_deg)
    lum = (
        math.cos(HALF_PI - aspect - azimuth_term) * math.sin(slope) * sin_zenith
        + math.cos(slope) * cos_zenith
    )
    lum = max(lum, 0.0)
    value = math.sqrt(lum * HILLSHADE_DIRECT + HILLSHADE_AMBIENT) * CHANNEL_MAX
    return min(int(value), CHANNEL_MAX)


def blend_colors(
    color1: Sequence[int],
    color2: Sequence[int],
    mode: BlendMode = BlendMode.WRAP,
) -> tuple[int, ...]:
    """Per-channel 8-bit sum: modulo 256 (WRAP) or capped at 255 (SATURATE)."""
    if mode == BlendMode.SATURATE:
        return tuple(min(a + b, CHANNEL_MAX) for a, b in zip(color1, color2))
    return tuple((a + b) & 0xFF for a, b in zip(color1, color2))


def elevation_alpha(h: float) -> int:
    """Transparent at or below 20 m, opaque from 120 m, linear in between."""
    value = (h - ALPHA_ELEVATION_MIN_M) / ALPHA_ELEVATION_RANGE_M * CHANNEL_MAX
    return int(min(max(value, 0.0), float(CHANNEL_MAX)))


def shade(
    tile: np.ndarray,
    row: int,
    col: int,
    *,
    blend: BlendMode = BlendMode.WRAP,
    blue_fraction: bool = False,
) -> tuple[int, int, int, int]:
    """
    Shade a single output pixel of a padded Terrarium tile.

    Returns packed (R, G, B, A). The warm light feeds red and half of green,
    the cool light feeds blue and the other half of green.
    """
    slope, aspect = gradient(tile, row, col, blue_fraction=blue_fraction)
    lum1 = light_luminance(slope, aspect, *HILLSHADE_LIGHT_WARM)
    lum2 = light_luminance(slope, aspect, *HILLSHADE_LIGHT_COOL)

    color1 = (lum1, lum1 // 2, 0)
    color2 = (0, lum2 // 2, lum2)
    red, green, blue = blend_colors(color1, color2, blend)

    h = decode_terrarium_pixel(
        tile[row + SOURCE_TILE_PADDING, col + SOURCE_TILE_PADDING],
        blue_fraction=blue_fraction,
    )
    return red, green, blue, elevation_alpha(h)


def _luminance_array(
    slope: np.ndarray,
    aspect: np.ndarray,
    light: tuple[float, float],
    sin_slope: np.ndarray,
    cos_slope: np.ndarray,
) -> np.ndarray:
    azimuth_term, sin_zenith, cos_zenith = _light_terms(*light)
    lum = np.cos(HALF_PI - aspect - azimuth_term) * sin_slope * sin_zenith
    lum += cos_slope * cos_zenith
    np.maximum(lum, 0.0, out=lum)
    value = np.sqrt(lum * HILLSHADE_DIRECT + HILLSHADE_AMBIENT) * CHANNEL_MAX
    # Значения уже неотрицательны: astype усекает к нулю
    return np.minimum(value, CHANNEL_MAX).astype(np.uint8)


def _add_channel(
    a: np.ndarray | int,
    b: np.ndarray | int,
    mode: BlendMode,
    out: np.ndarray,
) -> None:
    if mode == BlendMode.SATURATE:
        total = np.asarray(a, dtype=np.uint16) + np.asarray(b, dtype=np.uint16)
        out[...] = np.minimum(total, CHANNEL_MAX)
    else:
        # uint8 + uint8 переполняется по модулю 256
        np.add(
            np.asarray(a, dtype=np.uint8),
            np.asarray(b, dtype=np.uint8),
            out=out,
            dtype=np.uint8,
        )


def alpha_array(elevation: np.ndarray) -> np.ndarray:
    """Vectorised elevation_alpha."""
    value = (elevation - ALPHA_ELEVATION_MIN_M) / ALPHA_ELEVATION_RANGE_M * CHANNEL_MAX
    return np.clip(value, 0.0, float(CHANNEL_MAX)).astype(np.uint8)


def render_hillshade(
    tile: np.ndarray,
    *,
    out: np.ndarray | None = None,
    blend: BlendMode = BlendMode.WRAP,
    blue_fraction: bool = False,
) -> np.ndarray:
    """
    Отрисовывает hillshade для всего тайла за один проход.

    Args:
        tile: Terrarium-тайл (>=516x516, uint8, RGB или RGBA).
        out: Буфер 512x512x4 uint8 для записи результата; создаётся, если None.
        blend: Режим сложения каналов двух источников.
        blue_fraction: Дробное декодирование синего канала.

    Returns:
        Буфер out (RGBA).

    """
    if out is None:
        out = np.empty((OUTPUT_TILE_SIZE, OUTPUT_TILE_SIZE, OUTPUT_CHANNELS), np.uint8)

    # Используется только верхнее левое окно 516x516
    window = tile[:SOURCE_TILE_SIZE, :SOURCE_TILE_SIZE]
    elevation = decode_terrarium_to_elevation_m(window, blue_fraction=blue_fraction)
    slope, aspect = compute_slope_aspect(elevation)
    sin_slope = np.sin(slope)
    cos_slope = np.cos(slope)

    lum1 = _luminance_array(slope, aspect, HILLSHADE_LIGHT_WARM, sin_slope, cos_slope)
    lum2 = _luminance_array(slope, aspect, HILLSHADE_LIGHT_COOL, sin_slope, cos_slope)

    # color1 = (L1, L1/2, 0), color2 = (0, L2/2, L2)
    _add_channel(lum1, 0, blend, out[:, :, 0])
    _add_channel(lum1 // 2, lum2 // 2, blend, out[:, :, 1])
    _add_channel(0, lum2, blend, out[:, :, 2])

    pad = SOURCE_TILE_PADDING
    n = OUTPUT_TILE_SIZE
    out[:, :, 3] = alpha_array(elevation[pad : pad + n, pad : pad + n])
    return out
