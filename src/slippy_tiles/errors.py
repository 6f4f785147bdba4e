"""Exceptions raised by the slippy_tiles package.

All of them derive from :class:`SlippyTilesError` and from ``ValueError``,
so callers can catch either the package root or the builtin.
"""


class SlippyTilesError(Exception):
    pass


class InvalidCoordinate(SlippyTilesError, ValueError):
    """Zoom, x or y out of range, or not aligned to a metatile scale."""


class ParseError(SlippyTilesError, ValueError):
    """Malformed textual input (tile path, bbox string, world file, .meta)."""


class InvalidBoundingBox(SlippyTilesError, ValueError):
    """Corners that cannot form a top-left/bottom-right box."""
