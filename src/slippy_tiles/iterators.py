"""Lazy iterators over the tiles and metatiles covering a query.

Every iterator here holds only a cursor, yields fresh immutable values
and never raises once built. A query that cannot be answered (invalid
zoom, degenerate box, bad metatile scale, a zoom range that ends before
it starts) simply produces nothing. Use the :class:`~slippy_tiles.tile.Tile`
and :class:`~slippy_tiles.bbox.BBox` constructors to tell a malformed
query apart from an empty one.

Instances are not thread safe; give each consumer its own iterator.
"""
import logging
import numbers
import sys
from typing import List, Tuple

from .metatile import Metatile
from .tile import MAX_ZOOM, Tile

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return not isinstance(value, bool) and isinstance(value, numbers.Integral)


def morton_decode(index: int) -> Tuple[int, int]:
    """Split a Z-order index into (dx, dy).

    Even bits of ``index`` make up dx and odd bits dy, so the indices
    0, 1, 2, 3 are the NW, NE, SW and SE quadrants at every level.
    """
    dx = dy = 0
    bit = 0
    while index:
        dx |= (index & 1) << bit
        dy |= ((index >> 1) & 1) << bit
        index >>= 2
        bit += 1
    return dx, dy


class TileIterator:
    """Common interface: iteration plus an exact count of what is left."""

    def __iter__(self):
        return self

    def __next__(self):
        raise NotImplementedError

    def size_hint(self) -> int:
        """Return the number of values still to come."""
        raise NotImplementedError

    def __length_hint__(self) -> int:
        # Counts can exceed what len()/list() can preallocate.
        return min(self.size_hint(), sys.maxsize)


class _GridIterator(TileIterator):
    """Row-major walk over a list of rectangular blocks of grid origins.

    Each block is ``(zoom, x0, y0, cols, rows, step)``; the origins are
    ``(x0 + i * step, y0 + j * step)`` for ``j`` in rows, ``i`` in cols.
    """

    def __init__(self, blocks: List[Tuple[int, int, int, int, int, int]]):
        self._blocks = [b for b in blocks if b[3] > 0 and b[4] > 0]
        self._block = 0
        self._pos = 0

    def _make(self, zoom, x, y, step):
        raise NotImplementedError

    def __next__(self):
        while self._block < len(self._blocks):
            zoom, x0, y0, cols, rows, step = self._blocks[self._block]
            if self._pos < cols * rows:
                row, col = divmod(self._pos, cols)
                self._pos += 1
                return self._make(zoom, x0 + col * step, y0 + row * step, step)
            self._block += 1
            self._pos = 0
        raise StopIteration

    def size_hint(self) -> int:
        remaining = sum(cols * rows for _, _, _, cols, rows, _ in self._blocks[self._block:])
        return remaining - self._pos


def _zoom_range(min_zoom, max_zoom) -> range:
    if max_zoom is None:
        max_zoom = min_zoom
    if not (_is_int(min_zoom) and _is_int(max_zoom)):
        return range(0)
    return range(max(min_zoom, 0), min(max_zoom, MAX_ZOOM - 1) + 1)


class BBoxTilesIterator(_GridIterator):
    """Tiles covering a bounding box, one zoom after another.

    Within a zoom the tiles come row by row (north to south), west to
    east inside a row, and only the box's own index range is visited.

    Parameters
    ----------
    bbox : BBox
        Area to cover.
    min_zoom : int
        First zoom level.
    max_zoom : int, optional
        Last zoom level (inclusive), by default ``min_zoom``.
    """

    def __init__(self, bbox, min_zoom: int, max_zoom: int = None):
        blocks = []
        for zoom in _zoom_range(min_zoom, max_zoom):
            limits = bbox.tile_range(zoom)
            if limits is None:
                continue
            x_min, y_min, x_max, y_max = limits
            blocks.append((zoom, x_min, y_min, x_max - x_min, y_max - y_min, 1))
        if not blocks:
            logger.debug(f"No tiles cover {bbox} for zooms {min_zoom!r}..{max_zoom!r}")
        super().__init__(blocks)

    def _make(self, zoom, x, y, step):
        return Tile(zoom, x, y)


class BBoxMetatilesIterator(_GridIterator):
    """Metatiles of one scale covering a bounding box.

    The box's tile range at each zoom is widened outwards to multiples
    of ``scale`` (and clipped to the grid), then the aligned origins are
    walked row-major. Because the tile range is contiguous every yielded
    metatile holds at least one of the box's tiles, and each of those
    tiles lands in exactly one yielded metatile.

    Parameters
    ----------
    bbox : BBox
        Area to cover.
    scale : int
        Metatile edge length, a positive power of two.
    min_zoom : int
        First zoom level.
    max_zoom : int, optional
        Last zoom level (inclusive), by default ``min_zoom``.
    """

    def __init__(self, bbox, scale: int, min_zoom: int, max_zoom: int = None):
        blocks = []
        if _is_int(scale) and scale >= 1 and not scale & (scale - 1):
            for zoom in _zoom_range(min_zoom, max_zoom):
                limits = bbox.tile_range(zoom)
                if limits is None:
                    continue
                x_min, y_min, x_max, y_max = limits
                x0 = x_min - x_min % scale
                y0 = y_min - y_min % scale
                cols = -(-(x_max - x0) // scale)
                rows = -(-(y_max - y0) // scale)
                blocks.append((zoom, x0, y0, cols, rows, scale))
        if not blocks:
            logger.debug(f"No metatiles of scale {scale!r} cover {bbox} "
                         f"for zooms {min_zoom!r}..{max_zoom!r}")
        super().__init__(blocks)

    def _make(self, zoom, x, y, step):
        return Metatile(step, zoom, x, y)


class AllChildrenIterator(TileIterator):
    """A tile and all its descendants down to ``max_zoom``, in Z-order.

    Levels are visited breadth first. Inside a level the tiles follow
    Morton order, so the four children of a tile are contiguous (NW, NE,
    SW, SE) and sibling groups appear in the order of their parents.
    Every tile is preceded by all of its ancestors, and the sequence for
    a smaller ``max_zoom`` is a prefix of the one for a larger.

    Parameters
    ----------
    tile : Tile
        Root of the walk, yielded first.
    max_zoom : int
        Deepest zoom to include. Empty when below ``tile.zoom`` or not a
        valid zoom.
    """

    def __init__(self, tile: Tile, max_zoom: int):
        self._root = tile
        if _is_int(max_zoom) and tile.zoom <= max_zoom < MAX_ZOOM:
            self._max_depth = int(max_zoom) - tile.zoom
        else:
            logger.debug(f"No children of {tile} down to zoom {max_zoom!r}")
            self._max_depth = -1
        self._depth = 0
        self._index = 0

    def __next__(self):
        if self._depth > self._max_depth:
            raise StopIteration
        dx, dy = morton_decode(self._index)
        depth = self._depth
        tile = Tile(self._root.zoom + depth,
                    (self._root.x << depth) + dx,
                    (self._root.y << depth) + dy)
        self._index += 1
        if self._index == 4 ** depth:
            self._depth += 1
            self._index = 0
        return tile

    def size_hint(self) -> int:
        total = (4 ** (self._max_depth + 1) - 1) // 3
        consumed = (4 ** self._depth - 1) // 3 + self._index
        return max(total - consumed, 0)
