"""Slippy map tile and metatile coordinate algebra.

Tiles, metatiles, geographic points and bounding boxes, conversions
between them under spherical Web-Mercator, and lazy iterators over the
tiles covering an area or a subtree.
"""

from .errors import SlippyTilesError, InvalidCoordinate, ParseError, InvalidBoundingBox
from .latlon import LatLon
from .tile import MAX_ZOOM, Tile
from .bbox import BBox
from .metatile import Metatile
from .iterators import (TileIterator, BBoxTilesIterator, BBoxMetatilesIterator,
                        AllChildrenIterator)
from .worldfile import WorldFile
from .modtile import ModTileMetatile
from .paths import cache_key

__version__ = "0.1.0"
