"""Tile processor - one padded Terrarium tile in, one shaded RGBA tile out."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import numpy as np

from domain.models import ShadeSettings
from render.heightmap import render_height_ramp
from render.hillshade import render_hillshade
from shared.constants import (
    OUTPUT_CHANNELS,
    OUTPUT_TILE_SIZE,
    SOURCE_CHANNELS,
    SOURCE_TILE_SIZE,
    RenderMode,
)
from shared.errors import TileShapeError

if TYPE_CHECKING:
    from tiles.source import TileSource

logger = logging.getLogger(__name__)


class TileRenderer(Protocol):
    def __call__(
        self, tile: np.ndarray, out: np.ndarray, settings: ShadeSettings
    ) -> np.ndarray: ...


def _hillshade(tile: np.ndarray, out: np.ndarray, settings: ShadeSettings) -> np.ndarray:
    return render_hillshade(
        tile,
        out=out,
        blend=settings.blend_mode,
        blue_fraction=settings.blue_fraction,
    )


def _height_ramp(
    tile: np.ndarray, out: np.ndarray, settings: ShadeSettings
) -> np.ndarray:
    return render_height_ramp(tile, out=out, blue_fraction=settings.blue_fraction)


RENDERERS: dict[RenderMode, TileRenderer] = {
    RenderMode.HILLSHADE: _hillshade,
    RenderMode.RAW_HEIGHT_RAMP: _height_ramp,
}


def validate_source_tile(source: np.ndarray) -> np.ndarray:
    """
    Check a source tile and return its top-left 516x516 window.

    Raises:
        TileShapeError: not a uint8 (H, W, 3|4) array with H, W >= 516.

    """
    if not isinstance(source, np.ndarray):
        msg = f'Source tile must be a numpy array, got {type(source).__name__}'
        raise TileShapeError(msg)
    if source.dtype != np.uint8:
        msg = f'Source tile must be uint8, got {source.dtype}'
        raise TileShapeError(msg)
    if source.ndim != 3 or source.shape[2] not in SOURCE_CHANNELS:
        msg = f'Source tile must have shape (H, W, 3|4), got {source.shape}'
        raise TileShapeError(msg)
    h, w = source.shape[:2]
    if h < SOURCE_TILE_SIZE or w < SOURCE_TILE_SIZE:
        msg = (
            f'Source tile must be at least {SOURCE_TILE_SIZE}x{SOURCE_TILE_SIZE}, '
            f'got {w}x{h}'
        )
        raise TileShapeError(msg)
    return source[:SOURCE_TILE_SIZE, :SOURCE_TILE_SIZE]


def process_tile(
    source: np.ndarray,
    mode: RenderMode = RenderMode.HILLSHADE,
    *,
    settings: ShadeSettings | None = None,
) -> np.ndarray:
    """
    Render one 512x512 RGBA tile from a padded Terrarium source tile.

    Args:
        source: Encoded tile, uint8 (H, W, 3|4) with H, W >= 516.
        mode: Renderer to use for every output pixel.
        settings: Blend and decoding options; defaults when None.

    Returns:
        Freshly allocated (512, 512, 4) uint8 array.

    """
    settings = settings or ShadeSettings()
    tile = validate_source_tile(source)
    renderer = RENDERERS[RenderMode(mode)]
    out = np.empty((OUTPUT_TILE_SIZE, OUTPUT_TILE_SIZE, OUTPUT_CHANNELS), np.uint8)
    return renderer(tile, out, settings)


def render_source_tile(
    source: TileSource,
    x: int,
    y: int,
    mode: RenderMode | None = None,
    *,
    settings: ShadeSettings | None = None,
) -> np.ndarray | None:
    """
    Read the padded window at (x, y) from source and render it.

    Failure to obtain a valid source tile is logged and reported as None so a
    larger batch can carry on without this tile.
    """
    settings = settings or ShadeSettings()
    mode = RenderMode(mode) if mode is not None else settings.render_mode
    try:
        raw = source.read(x, y, SOURCE_TILE_SIZE, SOURCE_TILE_SIZE)
        tile = validate_source_tile(raw)
    except Exception as e:
        logger.warning(
            'No tile produced at (%d, %d): %s', x, y, e, exc_info=True
        )
        return None

    out = process_tile(tile, mode, settings=settings)
    logger.debug('Tile rendered at (%d, %d), mode=%s', x, y, mode.value)
    return out


class TileProcessor:
    """
    Binds a tile source to settings and renders tiles on request.

    Stateless between calls apart from the source and settings it was
    created with.
    """

    def __init__(self, source: TileSource, settings: ShadeSettings | None = None):
        """
        Initialize processor.

        Args:
            source: Input collaborator providing encoded windows
            settings: Rendering options; defaults when None

        """
        self.source = source
        self.settings = settings or ShadeSettings()
        self.logger = logging.getLogger(self.__class__.__name__)

    def process(
        self, x: int, y: int, mode: RenderMode | None = None
    ) -> np.ndarray | None:
        """
        Render the tile whose padded window starts at (x, y).

        Returns:
            (512, 512, 4) uint8 array, or None if the source failed

        """
        result = render_source_tile(
            self.source, x, y, mode, settings=self.settings
        )
        if result is None:
            self.logger.info('Tile at (%d, %d) skipped', x, y)
        return result
