"""Tile processing.

This module provides:
- process_tile / render_source_tile / TileProcessor: one padded tile in, one
  shaded tile out
- ImageTileSource: Pillow-backed input collaborator
- PngTileSink: PNG-writing output collaborator
- run_tiles / render_batch: bounded concurrent batches
"""

from tiles.executor import BatchResult, render_batch, run_tiles
from tiles.processor import (
    RENDERERS,
    TileProcessor,
    process_tile,
    render_source_tile,
    validate_source_tile,
)
from tiles.sink import PngTileSink, TileSink, output_tile_to_image
from tiles.source import ImageTileSource, TileSource

__all__ = [
    'RENDERERS',
    'BatchResult',
    'ImageTileSource',
    'PngTileSink',
    'TileProcessor',
    'TileSink',
    'TileSource',
    'output_tile_to_image',
    'process_tile',
    'render_batch',
    'render_source_tile',
    'run_tiles',
    'validate_source_tile',
]
