"""Shared pytest fixtures for slippy_tiles tests."""

import tempfile
from pathlib import Path

import numpy as np
import pytest

from slippy_tiles import BBox


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def example_bbox():
    """The 5-10N, 5W-0 box whose zoom 3 coverage is 3/3/3 alone."""
    return BBox.from_str("10.0,-5.0,5.0,0.0")


@pytest.fixture
def sample_bboxes():
    """Boxes whose edges avoid tile boundaries at the zooms used in tests."""
    return {
        "london": BBox(51.7, -0.5, 51.3, 0.3),
        "sydney": BBox(-33.7, 150.9, -34.1, 151.4),
        "cape_town": BBox(-33.8, 18.3, -34.2, 18.7),
        "wide": BBox(61.3, -11.2, 35.7, 29.9),
    }


def build_meta(zoom, x, y, slots, magic=b"META", count=None):
    """Serialise a mod_tile .meta file.

    Parameters
    ----------
    zoom, x, y : int
        Header origin.
    slots : list of bytes
        Entry payloads in file order.
    magic : bytes, optional
        Header magic, by default b"META".
    count : int, optional
        Header entry count, by default ``len(slots)``.
    """
    count = len(slots) if count is None else count
    header = magic + np.array([count, x, y, zoom], dtype="<i4").tobytes()
    offset = len(header) + 8 * len(slots)
    index = []
    for payload in slots:
        index.extend([offset, len(payload)])
        offset += len(payload)
    return header + np.array(index, dtype="<i4").tobytes() + b"".join(slots)


@pytest.fixture
def make_meta():
    """Provide the .meta builder."""
    return build_meta
