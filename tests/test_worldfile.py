"""Tests for the slippy_tiles.worldfile module."""

from unittest.mock import MagicMock, patch

import pytest

from slippy_tiles import InvalidCoordinate, ParseError, Tile, WorldFile, config
from slippy_tiles.projection import WEBMERCATOR_HALF_WORLD

ROOT_PIXEL = 2 * WEBMERCATOR_HALF_WORLD / 256


class TestFromTile:
    """Tests for WorldFile.from_tile."""

    def test_root_tile(self):
        """0/0/0 at 256 px should have the zoom 0 resolution."""
        wf = Tile(0, 0, 0).world_file(256)
        assert wf.x_scale == pytest.approx(ROOT_PIXEL)
        assert wf.y_scale == pytest.approx(-ROOT_PIXEL)
        assert wf.x_skew == 0.0
        assert wf.y_skew == 0.0
        assert wf.x_coord == pytest.approx(-WEBMERCATOR_HALF_WORLD + ROOT_PIXEL / 2)
        assert wf.y_coord == pytest.approx(WEBMERCATOR_HALF_WORLD - ROOT_PIXEL / 2)

    def test_tile_size_scales_pixels(self):
        """Doubling the tile size should halve the pixel size."""
        tile = Tile(5, 10, 12)
        assert tile.world_file(512).x_scale == pytest.approx(tile.world_file(256).x_scale / 2)

    @patch.object(config, "settings")
    def test_default_tile_size_from_settings(self, mock_settings):
        """from_tile should read tile_size from the settings."""
        mock_settings.get = MagicMock(
            side_effect=lambda key, default=None: {"tile_size": 512}.get(key, default))
        wf = WorldFile.from_tile(Tile(0, 0, 0))
        assert wf.x_scale == pytest.approx(ROOT_PIXEL / 2)

    @pytest.mark.parametrize("tile_size", [0, -256, 256.0, "256", True])
    def test_rejects_bad_tile_size(self, tile_size):
        """from_tile should raise InvalidCoordinate unless tile_size is a positive int."""
        with pytest.raises(InvalidCoordinate):
            WorldFile.from_tile(Tile(1, 0, 0), tile_size=tile_size)

    def test_pixel_corners(self):
        """The outer pixel edges should be the tile's corners in metres."""
        tile = Tile(3, 2, 5)
        wf = tile.world_file(256)
        west, north = tile.nw_corner().to_webmercator()
        east, south = tile.se_corner().to_webmercator()
        assert wf.pixel_to_coords(-0.5, -0.5) == pytest.approx((west, north))
        assert wf.pixel_to_coords(255.5, 255.5) == pytest.approx((east, south))


class TestText:
    """Tests for the six line text form."""

    def test_six_lines(self):
        """str should give six numeric lines."""
        lines = str(Tile(3, 2, 5).world_file(256)).splitlines()
        assert len(lines) == 6
        assert lines[1] == "0.0"
        assert float(lines[3]) < 0

    def test_round_trip(self):
        """from_str(str(wf)) should give the same world file."""
        wf = Tile(7, 64, 42).world_file(256)
        assert WorldFile.from_str(str(wf)) == wf

    @pytest.mark.parametrize("text", ["1\n0\n0\n-1\n5\n", "1\n0\n0\n-1\n5\nx\n", ""])
    def test_rejects_malformed(self, text):
        """from_str should raise ParseError on malformed text."""
        with pytest.raises(ParseError):
            WorldFile.from_str(text)

    def test_save_and_load(self, temp_dir):
        """save and from_file should round-trip through disk."""
        wf = Tile(3, 2, 5).world_file(256)
        path = temp_dir / "5.pgw"
        wf.save(path)
        assert WorldFile.from_file(path) == wf
