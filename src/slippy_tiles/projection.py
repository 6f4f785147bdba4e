"""Spherical Web-Mercator projection helpers.

Forward and inverse projection between longitude/latitude and the
fractional slippy-map tile grid, plus conversion to EPSG:3857 metres.
All functions accept scalars or numpy arrays.

Latitudes beyond ``MAX_LATITUDE`` cannot be projected (the Mercator y of
the poles is infinite). They are silently clipped to the edge of the
valid band, so a point at 89° lands on the top row of tiles instead of
raising.
"""
import math
from typing import Tuple

import numpy as np
from pyproj import Transformer

# atan(sinh(pi)) in degrees, the latitude where the square world map ends
MAX_LATITUDE = 85.0511287798066
WEBMERCATOR_RADIUS = 6378137.0
WEBMERCATOR_HALF_WORLD = math.pi * WEBMERCATOR_RADIUS

_transformer_to_webmerc = Transformer.from_crs(
    "EPSG:4326", "EPSG:3857", always_xy=True
)
_transformer_from_webmerc = Transformer.from_crs(
    "EPSG:3857", "EPSG:4326", always_xy=True
)


def clip_latitude(lats):
    """Clip latitudes to the Web-Mercator band.

    Parameters
    ----------
    lats : float or numpy.ndarray
        Latitude values in degrees.

    Returns
    -------
    float or numpy.ndarray
        Latitudes limited to [-MAX_LATITUDE, MAX_LATITUDE].
    """
    return np.clip(lats, -MAX_LATITUDE, MAX_LATITUDE)


def lonlat_to_tile_fraction(lons, lats, zoom: int) -> Tuple[np.ndarray, np.ndarray]:
    """Project longitude/latitude to fractional tile grid coordinates.

    Parameters
    ----------
    lons : float or numpy.ndarray
        Longitude values in degrees.
    lats : float or numpy.ndarray
        Latitude values in degrees, clipped to the Mercator band.
    zoom : int
        Zoom level; the grid is ``2**zoom`` tiles wide.

    Returns
    -------
    tuple of numpy.ndarray
        (x, y) grid coordinates, y growing southwards.
    """
    n = 2.0 ** zoom
    lons = np.asarray(lons, dtype=np.float64)
    lat_rad = np.radians(clip_latitude(np.asarray(lats, dtype=np.float64)))
    x = (lons + 180.0) / 360.0 * n
    y = (1.0 - np.log(np.tan(lat_rad) + 1.0 / np.cos(lat_rad)) / np.pi) / 2.0 * n
    return x, y


def tile_fraction_to_lonlat(xs, ys, zoom: int) -> Tuple[np.ndarray, np.ndarray]:
    """Inverse of :func:`lonlat_to_tile_fraction`.

    Parameters
    ----------
    xs : float or numpy.ndarray
        Grid x coordinates (0 at the antimeridian, west).
    ys : float or numpy.ndarray
        Grid y coordinates (0 at the northern edge).
    zoom : int
        Zoom level.

    Returns
    -------
    tuple of numpy.ndarray
        (lon, lat) in degrees.
    """
    n = 2.0 ** zoom
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    lons = xs / n * 360.0 - 180.0
    lats = np.degrees(np.arctan(np.sinh(np.pi * (1.0 - 2.0 * ys / n))))
    return lons, lats


def lonlat_to_webmercator(lons, lats) -> Tuple[np.ndarray, np.ndarray]:
    """Transform longitude/latitude to Web Mercator coordinates.

    Parameters
    ----------
    lons : float or numpy.ndarray
        Longitude values in degrees.
    lats : float or numpy.ndarray
        Latitude values in degrees, clipped to the Mercator band.

    Returns
    -------
    tuple of numpy.ndarray
        (x, y) coordinates in Web Mercator metres.
    """
    x, y = _transformer_to_webmerc.transform(
        np.asarray(lons, dtype=np.float64), clip_latitude(np.asarray(lats, dtype=np.float64))
    )
    return np.asarray(x), np.asarray(y)


def webmercator_to_lonlat(xs, ys) -> Tuple[np.ndarray, np.ndarray]:
    """Transform Web Mercator metres back to longitude/latitude degrees."""
    lons, lats = _transformer_from_webmerc.transform(
        np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)
    )
    return np.asarray(lons), np.asarray(lats)
