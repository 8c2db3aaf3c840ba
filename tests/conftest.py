"""Pytest configuration and fixtures for terrashade tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from elevation.decoder import encode_terrarium_elevation  # noqa: E402
from shared.constants import SOURCE_TILE_SIZE  # noqa: E402


def terrarium_tile(elevation, size=SOURCE_TILE_SIZE, channels=4):
    """
    Build an encoded uint8 tile.

    elevation is either a scalar (flat tile) or a (size, size) array of whole
    metres.
    """
    tile = np.zeros((size, size, channels), dtype=np.uint8)
    if channels == 4:
        tile[:, :, 3] = 255
    if np.isscalar(elevation):
        tile[:, :, :3] = encode_terrarium_elevation(float(elevation))
        return tile
    elevation = np.asarray(elevation, dtype=np.int64)
    whole = np.clip(elevation + 32768, 0, 65535)
    tile[:, :, 0] = whole // 256
    tile[:, :, 1] = whole % 256
    return tile


@pytest.fixture
def make_tile():
    return terrarium_tile


@pytest.fixture
def flat_sea_level_tile():
    """R=128, G=0, B=0 everywhere: elevation 0."""
    return terrarium_tile(0)


@pytest.fixture
def rough_tile():
    """Deterministic random terrain between -50 and 800 m."""
    rng = np.random.default_rng(42)
    elevation = rng.integers(-50, 800, (SOURCE_TILE_SIZE, SOURCE_TILE_SIZE))
    return terrarium_tile(elevation)
