"""Tests for the slippy_tiles.iterators module."""

import operator
import sys

import pytest

from slippy_tiles import (AllChildrenIterator, BBox, BBoxMetatilesIterator,
                          BBoxTilesIterator, Metatile, Tile, TileIterator)
from slippy_tiles.iterators import morton_decode


class TestMortonDecode:
    """Tests for the morton_decode function."""

    def test_first_level_quadrants(self):
        """0..3 should be NW, NE, SW, SE."""
        assert [morton_decode(i) for i in range(4)] == [(0, 0), (1, 0), (0, 1), (1, 1)]

    def test_higher_bits(self):
        """Higher bit pairs should select larger quadrants."""
        assert morton_decode(4) == (2, 0)
        assert morton_decode(8) == (0, 2)
        assert morton_decode(15) == (3, 3)
        assert morton_decode(63) == (7, 7)


class TestAllChildren:
    """Tests for the AllChildrenIterator."""

    def test_is_tile_iterator(self):
        """AllChildrenIterator should share the iterator interface."""
        it = Tile(0, 0, 0).all_children(1)
        assert isinstance(it, TileIterator)
        assert iter(it) is it

    def test_z_order_to_zoom_two(self):
        """Zoom 1 should come before zoom 2, in contiguous sibling groups."""
        tiles = list(AllChildrenIterator(Tile(0, 0, 0), 2))
        assert len(tiles) == 21
        assert tiles[0] == Tile(0, 0, 0)
        level_one = tiles[1:5]
        assert level_one == list(Tile(0, 0, 0).children())
        level_two = tiles[5:]
        assert all(t.zoom == 2 for t in level_two)
        assert len(set(level_two)) == 16
        for i, parent in enumerate(level_one):
            assert tuple(level_two[4 * i:4 * i + 4]) == parent.children()

    def test_ancestors_come_first(self):
        """Every tile should be preceded by its parent."""
        seen = set()
        for tile in Tile(0, 0, 0).all_children(4):
            if tile.zoom > 0:
                assert tile.parent() in seen
            seen.add(tile)
        assert len(seen) == (4 ** 5 - 1) // 3

    def test_prefix_stable(self):
        """A shallower walk should be a prefix of a deeper one."""
        assert list(Tile.all_to_zoom(2)) == list(Tile.all_to_zoom(3))[:21]

    def test_non_root_start(self):
        """A walk from an inner tile should only visit its subtree."""
        assert list(Tile(2, 1, 2).all_children(3)) == [
            Tile(2, 1, 2), Tile(3, 2, 4), Tile(3, 3, 4), Tile(3, 2, 5), Tile(3, 3, 5)]

    def test_single_level(self):
        """max_zoom equal to the tile's zoom should yield the tile only."""
        assert list(Tile(5, 3, 3).all_children(5)) == [Tile(5, 3, 3)]

    @pytest.mark.parametrize("max_zoom", [2, 100, 1000, "4", None, 3.0])
    def test_unreachable_zoom_is_empty(self, max_zoom):
        """A max_zoom above the tile or beyond the last zoom should yield nothing."""
        it = AllChildrenIterator(Tile(3, 0, 0), max_zoom)
        assert list(it) == []
        assert it.size_hint() == 0

    def test_size_hint(self):
        """size_hint should count what is left in closed form."""
        it = AllChildrenIterator(Tile(0, 0, 0), 2)
        assert it.size_hint() == 21
        assert operator.length_hint(it) == 21
        next(it)
        assert it.size_hint() == 20
        for _ in range(7):
            next(it)
        assert it.size_hint() == 13
        list(it)
        assert it.size_hint() == 0

    def test_size_hint_saturates(self):
        """length_hint should saturate where the exact count is huge."""
        it = AllChildrenIterator(Tile(0, 0, 0), 99)
        assert it.size_hint() == (4 ** 100 - 1) // 3
        assert operator.length_hint(it) == sys.maxsize

    def test_is_lazy(self):
        """A deep walk should yield its first tiles without materialising."""
        it = Tile(0, 0, 0).all_children(60)
        assert [next(it) for _ in range(3)] == [Tile(0, 0, 0), Tile(1, 0, 0), Tile(1, 1, 0)]


class TestBBoxTiles:
    """Tests for the BBoxTilesIterator."""

    def test_size_hint_counts_down(self, sample_bboxes):
        """size_hint should match the remaining tiles across zooms."""
        box = sample_bboxes["london"]
        it = BBoxTilesIterator(box, 5, 7)
        total = sum(box.num_tiles_in_zoom(z) for z in range(5, 8))
        assert it.size_hint() == total
        next(it)
        assert it.size_hint() == total - 1
        assert len(list(it)) == total - 1
        assert it.size_hint() == 0

    def test_zoom_range_clamped(self):
        """Zooms outside the valid range should be skipped."""
        world = BBox(85, -180, -85, 180)
        assert len(list(world.tiles(0, 1))) == 5
        assert len(list(world.tiles(-3, 1))) == 5

    def test_reversed_zoom_range_is_empty(self, example_bbox):
        """A zoom range ending before it starts should yield nothing."""
        assert list(BBoxTilesIterator(example_bbox, 5, 2)) == []

    def test_deep_zoom_range_is_lazy(self, sample_bboxes):
        """A range down to the last zoom should be countable without iterating."""
        it = sample_bboxes["london"].tiles(0, 1000)
        assert it.size_hint() > 2 ** 64
        assert next(it) == Tile(0, 0, 0)


class TestBBoxMetatiles:
    """Tests for the BBoxMetatilesIterator."""

    def test_example_fixture(self, example_bbox):
        """The example box at zoom 3, scale 2 should give one metatile."""
        assert list(example_bbox.metatiles(2, 3)) == [Metatile(2, 3, 2, 2)]
        assert list(BBox.from_str("10.0,0.0,5.0,5.0").metatiles(2, 3)) == [Metatile(2, 3, 4, 2)]

    @pytest.mark.parametrize("mt", [
        Metatile(8, 5, 8, 8), Metatile(8, 2, 0, 0), Metatile(2, 3, 4, 2),
        Metatile(4, 10, 512, 340), Metatile(16, 12, 2048, 1360)])
    def test_metatile_bbox_covers_only_itself(self, mt):
        """A metatile's own box should yield that metatile and no neighbour."""
        assert list(mt.bbox().metatiles(mt.scale, mt.zoom)) == [mt]
        assert set(mt.bbox().tiles(mt.zoom)) == set(mt.tiles())

    def test_scale_one_matches_tiles(self, sample_bboxes):
        """Scale 1 metatiles should be the tiles themselves."""
        box = sample_bboxes["wide"]
        assert [mt.origin_tile() for mt in box.metatiles(1, 5)] == list(box.tiles(5))

    @pytest.mark.parametrize("name", ["london", "sydney", "cape_town", "wide"])
    @pytest.mark.parametrize("scale", [2, 4, 8])
    def test_partition_of_box_tiles(self, sample_bboxes, name, scale):
        """Metatiles should hold every box tile exactly once and nothing extra."""
        box = sample_bboxes[name]
        for zoom in range(2, 9):
            tiles = set(box.tiles(zoom))
            metatiles = list(box.metatiles(scale, zoom))
            assert len(metatiles) == len(set(metatiles))
            for tile in tiles:
                assert sum(mt.contains(tile) for mt in metatiles) == 1
            for mt in metatiles:
                assert tiles.intersection(mt.tiles())

    def test_scale_wider_than_grid(self):
        """At low zoom a wide scale should give the single clipped metatile."""
        world = BBox(85, -180, -85, 180)
        assert list(world.metatiles(8, 1)) == [Metatile(8, 1, 0, 0)]
        assert list(world.metatiles(8, 0, 3)) == [
            Metatile(8, 0, 0, 0), Metatile(8, 1, 0, 0), Metatile(8, 2, 0, 0), Metatile(8, 3, 0, 0)]

    @pytest.mark.parametrize("scale", [0, 3, -4, "8", True])
    def test_bad_scale_is_empty(self, example_bbox, scale):
        """An invalid scale should yield nothing rather than raise."""
        assert list(BBoxMetatilesIterator(example_bbox, scale, 3)) == []

    def test_degenerate_box_is_empty(self):
        """A zero-area box should yield no metatiles."""
        assert list(BBox(10, 5, 10, 8).metatiles(8, 5)) == []

    def test_size_hint(self, sample_bboxes):
        """size_hint should match the number of metatiles."""
        it = sample_bboxes["wide"].metatiles(4, 6, 8)
        expected = it.size_hint()
        assert len(list(it)) == expected
        assert it.size_hint() == 0
