"""World files: sidecar georeferencing for tile images.

A world file holds six numbers, one per line::

    x pixel size
    rotation about the y axis (0 for tiles)
    rotation about the x axis (0 for tiles)
    y pixel size (negative, rows go south)
    x of the centre of the upper-left pixel
    y of the centre of the upper-left pixel

For slippy tiles the coordinates are EPSG:3857 metres, the CRS the tile
image is actually drawn in.
"""
import numbers
import pathlib
from dataclasses import astuple, dataclass

from . import config
from .errors import InvalidCoordinate, ParseError
from .projection import lonlat_to_webmercator


@dataclass(frozen=True)
class WorldFile:
    x_scale: float
    y_skew: float
    x_skew: float
    y_scale: float
    x_coord: float
    y_coord: float

    @classmethod
    def from_tile(cls, tile, tile_size: int = None) -> "WorldFile":
        """Georeference a square ``tile_size`` pixel image of ``tile``.

        Parameters
        ----------
        tile : Tile
            The tile the image shows.
        tile_size : int, optional
            Image edge in pixels. If None, uses the ``tile_size`` setting.

        Returns
        -------
        WorldFile
            Transform with the pixel sizes taken from the tile's
            Web-Mercator extent.

        Raises
        ------
        InvalidCoordinate
            If ``tile_size`` is not a positive integer.
        """
        if tile_size is None:
            tile_size = config.get("tile_size")
        if (isinstance(tile_size, bool) or not isinstance(tile_size, numbers.Integral)
                or tile_size <= 0):
            raise InvalidCoordinate(f"tile_size must be a positive integer, got {tile_size!r}")
        nw = tile.nw_corner()
        se = tile.se_corner()
        (west, east), (north, south) = lonlat_to_webmercator([nw.lon, se.lon], [nw.lat, se.lat])
        x_scale = (float(east) - float(west)) / tile_size
        y_scale = (float(south) - float(north)) / tile_size
        return cls(x_scale, 0.0, 0.0, y_scale,
                   float(west) + x_scale / 2, float(north) + y_scale / 2)

    @classmethod
    def from_str(cls, text: str) -> "WorldFile":
        """Parse the six line text form.

        Raises
        ------
        ParseError
            If there are not exactly six numeric lines.
        """
        lines = [line.strip() for line in text.strip().splitlines()]
        if len(lines) != 6:
            raise ParseError(f"A world file has 6 lines, got {len(lines)}")
        try:
            return cls(*(float(line) for line in lines))
        except ValueError as err:
            raise ParseError(f"Non-numeric world file line in {text!r}") from err

    @classmethod
    def from_file(cls, path) -> "WorldFile":
        return cls.from_str(pathlib.Path(path).read_text())

    def __str__(self):
        return "".join(f"{value!r}\n" for value in astuple(self))

    def save(self, path):
        """Write the world file, e.g. ``3/2/5.pgw`` next to ``3/2/5.png``."""
        pathlib.Path(path).write_text(str(self))

    def pixel_to_coords(self, col: float, row: float):
        """Map pixel (col, row) to (x, y) in the world file's CRS."""
        x = self.x_scale * col + self.x_skew * row + self.x_coord
        y = self.y_skew * col + self.y_scale * row + self.y_coord
        return x, y
