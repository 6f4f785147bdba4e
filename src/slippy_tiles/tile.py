"""Slippy map tile coordinates.

A :class:`Tile` addresses one cell of the quadtree grid: at zoom ``z``
the world is ``2**z`` tiles wide and high, x grows eastwards from the
antimeridian and y grows southwards from the northern edge of the
Web-Mercator band.
"""
import math
import numbers
import re
from dataclasses import dataclass
from typing import Optional, Tuple

import mercantile

from . import config, paths
from .errors import InvalidCoordinate, ParseError
from .latlon import LatLon
from .projection import tile_fraction_to_lonlat, webmercator_to_lonlat

# Zooms at or above this are rejected as nonsensical input.
MAX_ZOOM = 100

_DIGITS_RE = re.compile(r"^[0-9]+$")


def _check_int(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidCoordinate(f"{name} must be an integer, got {value!r}")
    return int(value)


def _grid_point(zoom, x, y):
    lon, lat = tile_fraction_to_lonlat(x, y, zoom)
    return LatLon(float(lat), float(lon))


@dataclass(frozen=True)
class Tile:
    """A (zoom, x, y) tile address.

    Parameters
    ----------
    zoom : int
        Zoom level, ``0 <= zoom < MAX_ZOOM``.
    x : int
        Column, ``0 <= x < 2**zoom``.
    y : int
        Row, ``0 <= y < 2**zoom``.

    Raises
    ------
    InvalidCoordinate
        If any component is out of range or not an integer.

    Notes
    -----
    Tiles compare and hash on (zoom, x, y) only, so equal tiles built
    from a path, a point or explicit integers are interchangeable as
    dict keys and set members.
    """

    zoom: int
    x: int
    y: int

    def __post_init__(self):
        zoom = _check_int("zoom", self.zoom)
        x = _check_int("x", self.x)
        y = _check_int("y", self.y)
        if not 0 <= zoom < MAX_ZOOM:
            raise InvalidCoordinate(f"zoom {zoom} outside [0, {MAX_ZOOM})")
        n = 1 << zoom
        if not (0 <= x < n and 0 <= y < n):
            raise InvalidCoordinate(f"tile {zoom}/{x}/{y} outside the {n}x{n} grid")
        object.__setattr__(self, "zoom", zoom)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    def __str__(self):
        return f"{self.zoom}/{self.x}/{self.y}"

    # -------- construction --------

    @classmethod
    def from_latlon(cls, point: LatLon, zoom: int) -> "Tile":
        """Return the tile containing ``point`` at ``zoom``.

        Longitude 180 and latitudes clipped to the Mercator band fall on
        the grid edge, so they map to the last column or row.
        """
        zoom = _check_int("zoom", zoom)
        if not 0 <= zoom < MAX_ZOOM:
            raise InvalidCoordinate(f"zoom {zoom} outside [0, {MAX_ZOOM})")
        xf, yf = point.to_tile_fraction(zoom)
        last = (1 << zoom) - 1
        x = min(max(math.floor(xf), 0), last)
        y = min(max(math.floor(yf), 0), last)
        return cls(zoom, x, y)

    @classmethod
    def from_webmercator(cls, x: float, y: float, zoom: int) -> "Tile":
        """Return the tile containing EPSG:3857 coordinates (x, y) metres."""
        lon, lat = webmercator_to_lonlat(x, y)
        return cls.from_latlon(LatLon(float(lat), float(lon)), zoom)

    @classmethod
    def from_tms(cls, zoom: int, x: int, y: int) -> "Tile":
        """Build a tile from TMS numbering, where y counts from the south."""
        zoom = _check_int("zoom", zoom)
        y = _check_int("y", y)
        if not 0 <= zoom < MAX_ZOOM:
            raise InvalidCoordinate(f"zoom {zoom} outside [0, {MAX_ZOOM})")
        return cls(zoom, x, (1 << zoom) - 1 - y)

    @classmethod
    def from_str(cls, text: str) -> "Tile":
        """Parse ``Z/X/Y``, or the trailing ``Z/X/Y`` of a URL or path.

        A path qualifies when it is absolute or has a non-numeric leading
        segment, e.g. ``tiles/3/2/5.png``.

        An extension on the last segment and a query string are ignored,
        so ``https://a.tile.example/3/2/5.png?v=2`` gives ``3/2/5``.

        Raises
        ------
        ParseError
            On the wrong number of segments or non-numeric segments.
        InvalidCoordinate
            If the triple is well formed but out of range.
        """
        if not isinstance(text, str):
            raise ParseError(f"Expected a string, got {type(text).__name__}")
        path = re.split(r"[?#]", text.strip(), maxsplit=1)[0].rstrip("/")
        segments = path.split("/")
        # "1/2/3/4" is ambiguous, "tiles/3/2/5.png" is not
        has_prefix = ("://" in text or path.startswith("/")
                      or not all(_DIGITS_RE.match(s) for s in segments[:-3]))
        if len(segments) < 3 or (not has_prefix and len(segments) != 3):
            raise ParseError(f"Expected Z/X/Y, got {text!r}")
        z_str, x_str, y_str = segments[-3:]
        if "." in y_str:
            y_str, ext = y_str.split(".", 1)
            if not ext or not ext.isalnum():
                raise ParseError(f"Bad extension in {text!r}")
        for part in (z_str, x_str, y_str):
            if not _DIGITS_RE.match(part):
                raise ParseError(f"Non-numeric segment {part!r} in {text!r}")
        return cls(int(z_str), int(x_str), int(y_str))

    @classmethod
    def from_mercantile(cls, tile: mercantile.Tile) -> "Tile":
        return cls(tile.z, tile.x, tile.y)

    def as_mercantile(self) -> mercantile.Tile:
        return mercantile.Tile(self.x, self.y, self.zoom)

    @classmethod
    def all_to_zoom(cls, max_zoom: int):
        """Iterate every tile from zoom 0 to ``max_zoom`` in Z-order."""
        return cls(0, 0, 0).all_children(max_zoom)

    # -------- quadtree --------

    def parent(self) -> Optional["Tile"]:
        """Return the tile one zoom up, or None at zoom 0."""
        if self.zoom == 0:
            return None
        return Tile(self.zoom - 1, self.x // 2, self.y // 2)

    def children(self) -> Optional[Tuple["Tile", "Tile", "Tile", "Tile"]]:
        """Return the four tiles one zoom down as (NW, NE, SW, SE).

        None at the last allowed zoom.
        """
        z = self.zoom + 1
        if z >= MAX_ZOOM:
            return None
        x = 2 * self.x
        y = 2 * self.y
        return (Tile(z, x, y), Tile(z, x + 1, y), Tile(z, x, y + 1), Tile(z, x + 1, y + 1))

    subtiles = children

    def all_children(self, max_zoom: int):
        """Iterate this tile and its descendants down to ``max_zoom``.

        See :class:`slippy_tiles.iterators.AllChildrenIterator`.
        """
        from .iterators import AllChildrenIterator
        return AllChildrenIterator(self, max_zoom)

    def metatile(self, scale: int):
        """Return the metatile of ``scale`` that contains this tile."""
        from .metatile import Metatile
        return Metatile.from_tile(self, scale)

    # -------- geometry --------

    def nw_corner(self) -> LatLon:
        return _grid_point(self.zoom, self.x, self.y)

    def ne_corner(self) -> LatLon:
        return _grid_point(self.zoom, self.x + 1, self.y)

    def sw_corner(self) -> LatLon:
        return _grid_point(self.zoom, self.x, self.y + 1)

    def se_corner(self) -> LatLon:
        return _grid_point(self.zoom, self.x + 1, self.y + 1)

    def centre_point(self) -> LatLon:
        """Return the point at the middle of the tile in grid space."""
        return _grid_point(self.zoom, self.x + 0.5, self.y + 0.5)

    center_point = centre_point

    def bbox(self):
        """Return the tile's extent as a :class:`~slippy_tiles.bbox.BBox`."""
        from .bbox import BBox
        nw = self.nw_corner()
        se = self.se_corner()
        return BBox(nw.lat, nw.lon, se.lat, se.lon)

    def world_file(self, tile_size: int = None):
        """Return the georeferencing :class:`~slippy_tiles.worldfile.WorldFile`."""
        from .worldfile import WorldFile
        return WorldFile.from_tile(self, tile_size=tile_size)

    # -------- paths --------

    @property
    def tms_y(self) -> int:
        return (1 << self.zoom) - 1 - self.y

    def zxy(self) -> Tuple[int, int, int]:
        return (self.zoom, self.x, self.y)

    def zxy_path(self, ext: str = None) -> str:
        return paths.zxy_to_zxy_path(self.zoom, self.x, self.y, _ext(ext))

    def tms_path(self, ext: str = None) -> str:
        return paths.zxy_to_tms_path(self.zoom, self.x, self.y, _ext(ext))

    def tc_path(self, ext: str = None) -> str:
        return paths.zxy_to_tc_path(self.zoom, self.x, self.y, _ext(ext))

    def mp_path(self, ext: str = None) -> str:
        return paths.zxy_to_mp_path(self.zoom, self.x, self.y, _ext(ext))

    def ts_path(self, ext: str = None) -> str:
        return paths.zxy_to_ts_path(self.zoom, self.x, self.y, _ext(ext))


def _ext(ext):
    return paths.check_ext(config.get("default_ext") if ext is None else ext)
