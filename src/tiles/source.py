"""Input collaborator: encoded Terrarium rasters read as padded source tiles."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import numpy as np
from PIL import Image

from shared.errors import TileSourceError

logger = logging.getLogger(__name__)


class TileSource(Protocol):
    """Anything able to return an encoded pixel window as a uint8 array."""

    def read(self, x: int, y: int, width: int, height: int) -> np.ndarray: ...


class ImageTileSource:
    """Terrarium raster backed by a Pillow image.

    The image is opened lazily on first read and kept for subsequent reads.

    Usage:
        source = ImageTileSource('terrarium_z12.png')
        tile = source.read(0, 0, 516, 516)
    """

    def __init__(self, image: Image.Image | str | Path) -> None:
        """Initialize image source.

        Args:
            image: Opened PIL image or path to an encoded raster file.
        """
        self._path: Path | None = None
        self._image: Image.Image | None = None
        if isinstance(image, Image.Image):
            self._image = image
        else:
            self._path = Path(image)

    @property
    def size(self) -> tuple[int, int]:
        """Raster (width, height) in pixels."""
        return self._open().size

    def _open(self) -> Image.Image:
        if self._image is None:
            try:
                img = Image.open(self._path)
                img.load()
            except (OSError, ValueError) as e:
                msg = f'Не удалось открыть растр {self._path}: {e}'
                raise TileSourceError(msg) from e
            self._image = img
            logger.debug('Opened raster %s: %sx%s', self._path, *img.size)
        return self._image

    def read(self, x: int, y: int, width: int, height: int) -> np.ndarray:
        """Read a (height, width, 4) RGBA window whose top-left corner is (x, y)."""
        img = self._open()
        img_w, img_h = img.size
        if x < 0 or y < 0 or x + width > img_w or y + height > img_h:
            msg = (
                f'Окно {width}x{height} at ({x}, {y}) выходит за пределы '
                f'растра {img_w}x{img_h}'
            )
            raise TileSourceError(msg)
        window = img.crop((x, y, x + width, y + height)).convert('RGBA')
        try:
            return np.asarray(window, dtype=np.uint8).copy()
        finally:
            window.close()

    def close(self) -> None:
        if self._image is not None and self._path is not None:
            self._image.close()
            self._image = None
