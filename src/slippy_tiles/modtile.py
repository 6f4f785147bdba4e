"""Reader for mod_tile ``.meta`` metatile files.

Layout (all integers little-endian int32)::

    b"META" count x y z
    count x (offset, size)
    tile data ...

``x``/``y`` are the metatile origin and the tile at ``(x + i, y + j)``
is stored in entry ``i * scale + j`` (column-major), where
``scale * scale == count``.
"""
import logging
import math
import pathlib
from typing import Iterator, List, Tuple

import numpy as np

from .errors import InvalidCoordinate, ParseError
from .metatile import Metatile
from .tile import Tile

logger = logging.getLogger(__name__)

MAGIC = b"META"
HEADER_SIZE = 20
_INT32 = np.dtype("<i4")


class ModTileMetatile:
    """Decoded contents of a ``.meta`` file.

    Parameters
    ----------
    zoom, x, y : int
        Metatile origin as stored in the header.
    data : list of bytes
        One entry per index slot, in file order.
    """

    def __init__(self, zoom: int, x: int, y: int, data: List[bytes]):
        scale = math.isqrt(len(data))
        if scale * scale != len(data):
            raise ParseError(f"{len(data)} entries do not form a square metatile")
        self.metatile = Metatile(scale, zoom, x, y)
        self.data = list(data)

    def __repr__(self):
        return f"ModTileMetatile({self.metatile}, {len(self.data)} entries)"

    @property
    def scale(self) -> int:
        return self.metatile.scale

    @classmethod
    def from_bytes(cls, buf: bytes) -> "ModTileMetatile":
        """Decode a whole ``.meta`` file held in memory.

        Raises
        ------
        ParseError
            On a bad magic, a truncated header or index, entries pointing
            outside the buffer, or a header that is not a valid metatile.
        """
        if len(buf) < HEADER_SIZE or buf[:4] != MAGIC:
            raise ParseError("Not a mod_tile metatile (missing META header)")
        count, x, y, z = (int(v) for v in np.frombuffer(buf, dtype=_INT32, count=4, offset=4))
        if count <= 0 or HEADER_SIZE + 8 * count > len(buf):
            raise ParseError(f"Metatile index of {count} entries does not fit in {len(buf)} bytes")
        index = np.frombuffer(buf, dtype=_INT32, count=2 * count, offset=HEADER_SIZE).reshape(count, 2)
        offsets = index[:, 0].astype(np.int64)
        sizes = index[:, 1].astype(np.int64)
        if (offsets < 0).any() or (sizes < 0).any() or (offsets + sizes > len(buf)).any():
            raise ParseError("Metatile index entry points outside the file")
        logger.debug(f"Decoding {count} entry metatile {z}/{x}/{y}")
        data = [bytes(buf[o:o + s]) for o, s in zip(offsets.tolist(), sizes.tolist())]
        try:
            return cls(z, x, y, data)
        except InvalidCoordinate as err:
            raise ParseError(f"Metatile header {z}/{x}/{y} is invalid: {err}") from err

    @classmethod
    def read(cls, stream) -> "ModTileMetatile":
        """Decode a ``.meta`` file from a binary file object."""
        return cls.from_bytes(stream.read())

    @classmethod
    def from_file(cls, path) -> "ModTileMetatile":
        with pathlib.Path(path).open("rb") as f:
            return cls.read(f)

    def _slot(self, tile: Tile) -> int:
        return (tile.x - self.metatile.x) * self.scale + (tile.y - self.metatile.y)

    def tile_data(self, tile: Tile) -> bytes:
        """Return the stored bytes for ``tile``.

        Raises
        ------
        KeyError
            If the tile is not part of this metatile.
        """
        if not self.metatile.contains(tile):
            raise KeyError(f"{tile} is not in metatile {self.metatile}")
        return self.data[self._slot(tile)]

    def tiles(self) -> Iterator[Tuple[Tile, bytes]]:
        """Yield (tile, bytes) for each base tile, row-major.

        Slots for tiles outside the grid (small zooms) are skipped; empty
        slots inside it are yielded as ``b""``.
        """
        for tile in self.metatile.tiles():
            data = self.data[self._slot(tile)]
            if not data:
                logger.warning(f"Empty slot for {tile} in metatile {self.metatile}")
            yield tile, data
