"""Geographic points."""
import math
import numbers
from dataclasses import dataclass
from typing import Tuple

from . import projection
from .errors import InvalidCoordinate


def _check_range(name, value, limit):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidCoordinate(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or not -limit <= value <= limit:
        raise InvalidCoordinate(f"{name} {value!r} outside [-{limit}, {limit}]")
    return float(value)


@dataclass(frozen=True)
class LatLon:
    """A latitude/longitude pair in degrees (WGS84).

    Parameters
    ----------
    lat : float
        Latitude in [-90, 90].
    lon : float
        Longitude in [-180, 180].

    Raises
    ------
    InvalidCoordinate
        If either value is out of range or not finite.
    """

    lat: float
    lon: float

    def __post_init__(self):
        object.__setattr__(self, "lat", _check_range("latitude", self.lat, 90))
        object.__setattr__(self, "lon", _check_range("longitude", self.lon, 180))

    def to_tile_fraction(self, zoom: int) -> Tuple[float, float]:
        """Project to fractional tile grid coordinates at ``zoom``.

        The latitude is clipped to the Web-Mercator band first, so points
        near the poles project onto the grid edge instead of failing.
        """
        x, y = projection.lonlat_to_tile_fraction(self.lon, self.lat, zoom)
        return float(x), float(y)

    def tile(self, zoom: int):
        """Return the tile containing this point at ``zoom``."""
        from .tile import Tile
        return Tile.from_latlon(self, zoom)

    def to_webmercator(self) -> Tuple[float, float]:
        """Return (x, y) in EPSG:3857 metres."""
        x, y = projection.lonlat_to_webmercator(self.lon, self.lat)
        return float(x), float(y)

    @classmethod
    def from_webmercator(cls, x: float, y: float) -> "LatLon":
        """Build a point from EPSG:3857 metres."""
        lon, lat = projection.webmercator_to_lonlat(x, y)
        return cls(float(lat), float(lon))
