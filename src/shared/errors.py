"""Exception hierarchy shared by the tile pipeline and its adapters."""


class TerrashadeError(Exception):
    """Base class for all errors raised by this project."""


class TileShapeError(TerrashadeError, ValueError):
    """Source tile is not a padded uint8 RGB/RGBA grid of sufficient size."""


class TileSourceError(TerrashadeError, RuntimeError):
    """Input collaborator failed to produce a source tile."""


class ProfileError(TerrashadeError):
    """Settings profile exists but could not be parsed or validated."""
