"""Shared utilities and helpers."""
from shared.diagnostics import log_memory_usage, log_thread_status
from shared.errors import (
    ProfileError,
    TerrashadeError,
    TileShapeError,
    TileSourceError,
)

__all__ = [
    'ProfileError',
    'TerrashadeError',
    'TileShapeError',
    'TileSourceError',
    'log_memory_usage',
    'log_thread_status',
]
