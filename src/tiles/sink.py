"""Output collaborator: receives shaded tiles together with their extent."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

import numpy as np
from PIL import Image
from PIL.PngImagePlugin import PngInfo

logger = logging.getLogger(__name__)


class TileSink(Protocol):
    """Raster sink accepting one (tile, extent, filter_factor) triple per tile."""

    def write(
        self, tile: np.ndarray, extent: Any, filter_factor: float
    ) -> Any: ...


def output_tile_to_image(tile: np.ndarray) -> Image.Image:
    """Wrap a packed RGBA output tile into a PIL image."""
    return Image.fromarray(np.ascontiguousarray(tile))


class PngTileSink:
    """Stores each tile as an RGBA PNG in a directory.

    Extent and filter factor are opaque here: they are written to PNG text
    chunks as given so downstream tooling can pick them up.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._counter = 0

    def write(
        self,
        tile: np.ndarray,
        extent: Any,
        filter_factor: float,
        *,
        name: str | None = None,
    ) -> Path:
        if name is None:
            name = f'tile_{self._counter:05d}'
        self._counter += 1
        path = self.directory / f'{name}.png'

        info = PngInfo()
        info.add_text('extent', repr(extent))
        info.add_text('filter_factor', repr(float(filter_factor)))

        img = output_tile_to_image(tile)
        try:
            img.save(path, format='PNG', pnginfo=info)
        finally:
            img.close()
        logger.debug('Tile written: %s extent=%s', path, extent)
        return path
