"""Terrarium elevation decoding."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from shared.constants import (
    TERRARIUM_BLUE_DIVISOR,
    TERRARIUM_OFFSET_M,
    TERRARIUM_RED_SCALE,
)


def decode_terrarium_pixel(
    pixel: Sequence[int] | np.ndarray,
    *,
    blue_fraction: bool = False,
) -> float:
    """
    Декодирует один Terrarium-пиксель в высоту (метры).

    elevation = R*256 + G + B//256 - 32768

    Альфа-канал (если есть) игнорируется. Синий канал делится на 256
    целочисленно, то есть всегда даёт 0: так декодируются уже отрисованные
    тайлы. При blue_fraction=True используется дробное деление B/256.
    """
    red, green, blue = (int(v) for v in pixel[:3])
    if blue_fraction:
        blue_term = blue / TERRARIUM_BLUE_DIVISOR
    else:
        blue_term = blue // TERRARIUM_BLUE_DIVISOR
    return float(red * TERRARIUM_RED_SCALE + green + blue_term - TERRARIUM_OFFSET_M)


def decode_terrarium_to_elevation_m(
    tile: np.ndarray,
    *,
    blue_fraction: bool = False,
) -> np.ndarray:
    """
    Декодирует Terrarium-тайл (H, W, 3|4) в двумерный массив высот (метры).

    Векторизованный вариант decode_terrarium_pixel. Возвращает float64,
    чтобы разности соседних высот совпадали с поэлементным расчётом.
    """
    # Каналы uint8 -> int64, чтобы R*256 не переполнялся
    r = tile[:, :, 0].astype(np.int64)
    g = tile[:, :, 1].astype(np.int64)
    b = tile[:, :, 2].astype(np.int64)

    if blue_fraction:
        blue_term = b / float(TERRARIUM_BLUE_DIVISOR)
    else:
        blue_term = b // TERRARIUM_BLUE_DIVISOR

    elevation = r * TERRARIUM_RED_SCALE + g + blue_term - TERRARIUM_OFFSET_M
    return elevation.astype(np.float64)


def encode_terrarium_elevation(elevation_m: float) -> tuple[int, int, int]:
    """
    Кодирует высоту в Terrarium (R, G, B); обратная операция для целых метров.

    Дробная часть уходит в синий канал (B = frac * 256), значения вне
    диапазона [-32768, 32767] обрезаются.
    """
    value = min(max(elevation_m + TERRARIUM_OFFSET_M, 0.0), 65535.0 + 255 / 256)
    whole = int(value)
    red, green = divmod(whole, TERRARIUM_RED_SCALE)
    blue = int((value - whole) * TERRARIUM_BLUE_DIVISOR)
    return red, green, blue
