"""Metatiles: aligned square blocks of tiles rendered or stored as one unit."""
import numbers
import re
from dataclasses import dataclass
from typing import Tuple

from . import paths
from .errors import InvalidCoordinate, ParseError
from .latlon import LatLon
from .projection import tile_fraction_to_lonlat
from .tile import Tile

_METATILE_RE = re.compile(r"^\s*([0-9]+)\s+([0-9]+)/([0-9]+)/([0-9]+)\s*$")


def check_scale(scale) -> int:
    """Return ``scale`` as an int, raising unless it is a positive power of two."""
    if (isinstance(scale, bool) or not isinstance(scale, numbers.Integral)
            or scale < 1 or scale & (scale - 1)):
        raise InvalidCoordinate(f"metatile scale must be a positive power of two, got {scale!r}")
    return int(scale)


@dataclass(frozen=True)
class Metatile:
    """A ``scale`` x ``scale`` block of tiles with its origin at (x, y).

    Parameters
    ----------
    scale : int
        Edge length in tiles, a positive power of two.
    zoom : int
        Zoom level of the base tiles.
    x, y : int
        Origin (north-west) tile, both multiples of ``scale``.

    Raises
    ------
    InvalidCoordinate
        On a bad scale, an unaligned origin, or an origin outside the grid.

    Notes
    -----
    When ``scale`` exceeds the grid width (``2**zoom``) the block is
    clipped to the grid, so at zoom 0 every metatile is the single tile
    ``0/0/0``.
    """

    scale: int
    zoom: int
    x: int
    y: int

    def __post_init__(self):
        scale = check_scale(self.scale)
        origin = Tile(self.zoom, self.x, self.y)
        if origin.x % scale or origin.y % scale:
            raise InvalidCoordinate(f"origin {origin} is not aligned to scale {scale}")
        object.__setattr__(self, "scale", scale)
        object.__setattr__(self, "zoom", origin.zoom)
        object.__setattr__(self, "x", origin.x)
        object.__setattr__(self, "y", origin.y)

    def __str__(self):
        return f"{self.scale} {self.zoom}/{self.x}/{self.y}"

    @classmethod
    def from_tile(cls, tile: Tile, scale: int) -> "Metatile":
        """Return the metatile of ``scale`` that contains ``tile``."""
        scale = check_scale(scale)
        return cls(scale, tile.zoom, tile.x - tile.x % scale, tile.y - tile.y % scale)

    @classmethod
    def from_str(cls, text: str) -> "Metatile":
        """Parse ``"<scale> Z/X/Y"``, e.g. ``"8 3/0/0"``."""
        if not isinstance(text, str):
            raise ParseError(f"Expected a string, got {type(text).__name__}")
        match = _METATILE_RE.match(text)
        if match is None:
            raise ParseError(f"Expected '<scale> Z/X/Y', got {text!r}")
        return cls(*(int(group) for group in match.groups()))

    @property
    def size(self) -> int:
        """Edge length in tiles after clipping to the grid."""
        return min(self.scale, 1 << self.zoom)

    def origin_tile(self) -> Tile:
        return Tile(self.zoom, self.x, self.y)

    def tile_range(self) -> Tuple[int, int, int, int]:
        """Half-open ``(x_min, y_min, x_max, y_max)`` of the base tiles."""
        return self.x, self.y, self.x + self.size, self.y + self.size

    def tiles(self) -> Tuple[Tile, ...]:
        """Return the base tiles in row-major order."""
        x_min, y_min, x_max, y_max = self.tile_range()
        return tuple(Tile(self.zoom, x, y)
                     for y in range(y_min, y_max)
                     for x in range(x_min, x_max))

    def contains(self, tile: Tile) -> bool:
        x_min, y_min, x_max, y_max = self.tile_range()
        return tile.zoom == self.zoom and x_min <= tile.x < x_max and y_min <= tile.y < y_max

    __contains__ = contains

    def bbox(self):
        """Return the extent of the whole block as a BBox."""
        from .bbox import BBox
        x_min, y_min, x_max, y_max = self.tile_range()
        nw = Tile(self.zoom, x_min, y_min).nw_corner()
        se = Tile(self.zoom, x_max - 1, y_max - 1).se_corner()
        return BBox(nw.lat, nw.lon, se.lat, se.lon)

    def centre_point(self) -> LatLon:
        """Return the middle of the block in grid space."""
        half = self.size / 2
        lon, lat = tile_fraction_to_lonlat(self.x + half, self.y + half, self.zoom)
        return LatLon(float(lat), float(lon))

    center_point = centre_point

    def zxy_path(self, ext: str = "png") -> str:
        return paths.zxy_to_zxy_path(self.zoom, self.x, self.y, paths.check_ext(ext))

    def mt_path(self, ext: str = "meta") -> str:
        """Return the mod_tile hashed path of this metatile's file."""
        return paths.zxy_to_mt_path(self.zoom, self.x, self.y, paths.check_ext(ext))
