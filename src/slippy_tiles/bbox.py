"""Geographic bounding boxes and their tile coverage."""
import logging
import math
import numbers
from dataclasses import dataclass
from typing import Optional, Tuple

from . import projection
from .errors import InvalidBoundingBox, ParseError
from .latlon import LatLon
from .tile import MAX_ZOOM, Tile

logger = logging.getLogger(__name__)

# Tolerance, in tile units, for box edges that sit on a grid line
EPSILON = 1e-9


def _valid_zoom(zoom) -> bool:
    return (not isinstance(zoom, bool) and isinstance(zoom, numbers.Integral)
            and 0 <= zoom < MAX_ZOOM)


@dataclass(frozen=True)
class BBox:
    """A latitude/longitude rectangle in top-left/bottom-right (TLBR) order.

    Parameters
    ----------
    top : float
        Northern edge latitude.
    left : float
        Western edge longitude.
    bottom : float
        Southern edge latitude, ``<= top``.
    right : float
        Eastern edge longitude, ``>= left``.

    Raises
    ------
    InvalidCoordinate
        If a value is not a valid latitude/longitude.
    InvalidBoundingBox
        If ``top < bottom`` or ``left > right``. Use :meth:`from_corners`
        to have the corners put in order instead.

    Notes
    -----
    Zero-width or zero-height boxes are allowed; they cover no tiles.
    """

    top: float
    left: float
    bottom: float
    right: float

    def __post_init__(self):
        top_left = LatLon(self.top, self.left)
        bottom_right = LatLon(self.bottom, self.right)
        if top_left.lat < bottom_right.lat:
            raise InvalidBoundingBox(
                f"top {top_left.lat} is south of bottom {bottom_right.lat}")
        if top_left.lon > bottom_right.lon:
            raise InvalidBoundingBox(
                f"left {top_left.lon} is east of right {bottom_right.lon}")
        object.__setattr__(self, "top", top_left.lat)
        object.__setattr__(self, "left", top_left.lon)
        object.__setattr__(self, "bottom", bottom_right.lat)
        object.__setattr__(self, "right", bottom_right.lon)

    def __str__(self):
        return f"{self.top!r},{self.left!r},{self.bottom!r},{self.right!r}"

    @classmethod
    def from_corners(cls, a: LatLon, b: LatLon) -> "BBox":
        """Build a box from any two opposite corners.

        Latitudes and longitudes are each sorted, so passing the
        bottom-right corner first gives the same box.
        """
        return cls(max(a.lat, b.lat), min(a.lon, b.lon),
                   min(a.lat, b.lat), max(a.lon, b.lon))

    @classmethod
    def from_str(cls, text: str) -> "BBox":
        """Parse ``"top,left,bottom,right"``.

        The order is never guessed: a string written bottom-right first
        is rejected rather than swapped.

        Raises
        ------
        ParseError
            If there are not four comma separated numbers.
        InvalidBoundingBox
            If the numbers are not in TLBR order.
        """
        if not isinstance(text, str):
            raise ParseError(f"Expected a string, got {type(text).__name__}")
        fields = text.split(",")
        if len(fields) != 4:
            raise ParseError(f"Expected top,left,bottom,right, got {text!r}")
        try:
            top, left, bottom, right = (float(f) for f in fields)
        except ValueError as err:
            raise ParseError(f"Non-numeric value in {text!r}") from err
        return cls(top, left, bottom, right)

    # -------- corners --------

    @property
    def top_left(self) -> LatLon:
        return LatLon(self.top, self.left)

    @property
    def top_right(self) -> LatLon:
        return LatLon(self.top, self.right)

    @property
    def bottom_left(self) -> LatLon:
        return LatLon(self.bottom, self.left)

    @property
    def bottom_right(self) -> LatLon:
        return LatLon(self.bottom, self.right)

    def centre_point(self) -> LatLon:
        return LatLon((self.top + self.bottom) / 2, (self.left + self.right) / 2)

    center_point = centre_point

    @property
    def is_degenerate(self) -> bool:
        return self.top == self.bottom or self.left == self.right

    # -------- predicates --------

    def contains_point(self, point: LatLon) -> bool:
        return (self.bottom <= point.lat <= self.top
                and self.left <= point.lon <= self.right)

    def contains(self, tile: Tile) -> bool:
        """True if ``tile`` is one of the tiles this box covers at its zoom."""
        limits = self.tile_range(tile.zoom)
        if limits is None:
            return False
        x_min, y_min, x_max, y_max = limits
        return x_min <= tile.x < x_max and y_min <= tile.y < y_max

    def __contains__(self, item):
        if isinstance(item, LatLon):
            return self.contains_point(item)
        if isinstance(item, Tile):
            return self.contains(item)
        raise TypeError(f"BBox cannot contain {type(item).__name__}")

    def intersects(self, other: "BBox") -> bool:
        """True if the two boxes share at least one point (edges count)."""
        return not (other.left > self.right or other.right < self.left
                    or other.top < self.bottom or other.bottom > self.top)

    def intersects_tile(self, tile: Tile) -> bool:
        """True if the tile's area overlaps the box. Touching edges do not count."""
        return self.contains(tile)

    # -------- tile coverage --------

    def tile_range(self, zoom: int) -> Optional[Tuple[int, int, int, int]]:
        """Return the tile index range this box covers at ``zoom``.

        Parameters
        ----------
        zoom : int
            Zoom level.

        Returns
        -------
        tuple of int or None
            Half-open ``(x_min, y_min, x_max, y_max)`` of the tiles whose
            area overlaps the box. None when the zoom is invalid, the box is
            degenerate, or it lies entirely outside the Web-Mercator
            latitude band.

        Notes
        -----
        The same rule holds on all four sides: a tile that only shares an
        edge with the box is not covered. Edges within ``EPSILON`` tile
        units of a grid line are treated as on it, so the box of a tile
        covers that tile alone.
        """
        if not _valid_zoom(zoom) or self.is_degenerate:
            return None
        top, bottom = projection.clip_latitude([self.top, self.bottom])
        if top == bottom:
            return None
        x0, y0 = map(float, projection.lonlat_to_tile_fraction(self.left, top, zoom))
        x1, y1 = map(float, projection.lonlat_to_tile_fraction(self.right, bottom, zoom))
        last = (1 << zoom) - 1
        x_min = min(max(math.floor(x0 + EPSILON), 0), last)
        y_min = min(max(math.floor(y0 + EPSILON), 0), last)
        # a box thinner than EPSILON still covers the tile it starts in
        x_max = max(min(math.ceil(x1 - EPSILON), last + 1), x_min + 1)
        y_max = max(min(math.ceil(y1 - EPSILON), last + 1), y_min + 1)
        return x_min, y_min, x_max, y_max

    def num_tiles_in_zoom(self, zoom: int) -> Optional[int]:
        """Count the tiles covered at ``zoom``, None when there is no coverage."""
        limits = self.tile_range(zoom)
        if limits is None:
            logger.debug(f"No tile coverage for {self} at zoom {zoom!r}")
            return None
        x_min, y_min, x_max, y_max = limits
        return (x_max - x_min) * (y_max - y_min)

    def tiles(self, min_zoom: int, max_zoom: int = None):
        """Iterate covered tiles, row-major, from ``min_zoom`` to ``max_zoom``."""
        from .iterators import BBoxTilesIterator
        return BBoxTilesIterator(self, min_zoom, max_zoom)

    def metatiles(self, scale: int, min_zoom: int, max_zoom: int = None):
        """Iterate the metatiles of ``scale`` covering this box."""
        from .iterators import BBoxMetatilesIterator
        return BBoxMetatilesIterator(self, scale, min_zoom, max_zoom)
