"""On-disk path schemes used by common tile caches.

Each scheme maps a (zoom, x, y) triple to a relative path:

========  ==========================================  =================
scheme    layout                                      used by
========  ==========================================  =================
``zxy``   ``Z/X/Y.ext``                               slippy map URLs
``tms``   ``Z/X/Ytms.ext`` (y counted from the south)  TMS servers
``tc``    ``Z/XXX/XXX/XXX/YYY/YYY/YYY.ext``           TileCache
``mp``    ``Z/XXXX/XXXX/YYYY/YYYY.ext``               MapProxy
``ts``    ``Z/XXX/XXX/YYY/YYY.ext``                   TileStache
``mt``    ``Z/h4/h3/h2/h1/h0.meta``                   mod_tile
========  ==========================================  =================
"""
import re
from pathlib import Path, PurePosixPath
from typing import List, Tuple

from . import config
from .errors import ParseError

SCHEMES = ("zxy", "tms", "tc", "mp", "ts", "mt")

_EXT_RE = re.compile(r"^[A-Za-z0-9]+$")


def xy_to_tc(x: int, y: int) -> List[str]:
    """Split x and y into TileCache's zero padded millions/thousands/units."""
    return [
        f"{x // 1_000_000:03d}",
        f"{(x // 1_000) % 1_000:03d}",
        f"{x % 1_000:03d}",
        f"{y // 1_000_000:03d}",
        f"{(y // 1_000) % 1_000:03d}",
        f"{y % 1_000:03d}",
    ]


def zxy_to_tc_path(z: int, x: int, y: int, ext: str) -> str:
    return "{}/{}/{}/{}/{}/{}/{}.{}".format(z, *xy_to_tc(x, y), ext)


def xy_to_mp(x: int, y: int) -> List[str]:
    """Split x and y into MapProxy's 4-digit groups."""
    return [
        f"{x // 10_000:04d}",
        f"{x % 10_000:04d}",
        f"{y // 10_000:04d}",
        f"{y % 10_000:04d}",
    ]


def zxy_to_mp_path(z: int, x: int, y: int, ext: str) -> str:
    return "{}/{}/{}/{}/{}.{}".format(z, *xy_to_mp(x, y), ext)


def xy_to_ts(x: int, y: int) -> List[str]:
    """Split x and y into TileStache's 3-digit groups."""
    return [
        f"{x // 1_000:03d}",
        f"{x % 1_000:03d}",
        f"{y // 1_000:03d}",
        f"{y % 1_000:03d}",
    ]


def zxy_to_ts_path(z: int, x: int, y: int, ext: str) -> str:
    return "{}/{}/{}/{}/{}.{}".format(z, *xy_to_ts(x, y), ext)


def zxy_to_zxy_path(z: int, x: int, y: int, ext: str) -> str:
    return f"{z}/{x}/{y}.{ext}"


def zxy_to_tms_path(z: int, x: int, y: int, ext: str) -> str:
    return f"{z}/{x}/{(1 << z) - 1 - y}.{ext}"


def xy_to_mt_hash(x: int, y: int) -> Tuple[int, int, int, int, int]:
    """Return mod_tile's five directory hash bytes, most significant first.

    Each byte packs four bits of x (high nibble) and four bits of y
    (low nibble). ``x`` and ``y`` are the metatile origin.
    """
    hashes = []
    for _ in range(5):
        hashes.append(((x & 0x0F) << 4) | (y & 0x0F))
        x >>= 4
        y >>= 4
    return tuple(reversed(hashes))


def zxy_to_mt_path(z: int, x: int, y: int, ext: str = "meta") -> str:
    return "{}/{}/{}/{}/{}/{}.{}".format(z, *xy_to_mt_hash(x, y), ext)


_FORMATTERS = {
    "zxy": zxy_to_zxy_path,
    "tms": zxy_to_tms_path,
    "tc": zxy_to_tc_path,
    "mp": zxy_to_mp_path,
    "ts": zxy_to_ts_path,
    "mt": zxy_to_mt_path,
}


def check_ext(ext: str) -> str:
    """Validate a file extension, dropping one leading dot.

    Raises
    ------
    ParseError
        If the extension is empty or contains anything but ASCII letters
        and digits (path separators, dots, ``..``).
    """
    if ext.startswith("."):
        ext = ext[1:]
    if not _EXT_RE.match(ext):
        raise ParseError(f"Unsafe file extension: {ext!r}")
    return ext


def cache_key(item, scheme: str = "zxy", ext: str = None, root=None):
    """Build a filesystem-safe cache path for a tile or metatile.

    Only the integer zoom/x/y fields of ``item`` reach the path, so the
    result never escapes ``root``.

    Parameters
    ----------
    item : Tile or Metatile
        The value to locate. A metatile is stored under its origin; a
        tile asked for with the ``mt`` scheme is stored in the metatile
        (of the configured ``default_scale``) that contains it.
    scheme : str, optional
        One of ``SCHEMES``, by default ``"zxy"``.
    ext : str, optional
        File extension. Defaults to ``"meta"`` for ``mt`` and to the
        configured ``default_ext`` otherwise.
    root : str or pathlib.Path, optional
        Cache directory to prepend.

    Returns
    -------
    pathlib.PurePosixPath or pathlib.Path
        A relative POSIX path, or ``root / path`` when ``root`` is given.
    """
    from .metatile import Metatile

    if scheme not in _FORMATTERS:
        raise ParseError(f"Unknown path scheme {scheme!r}, expected one of {SCHEMES}")
    if ext is None:
        ext = "meta" if scheme == "mt" else config.get("default_ext")
    ext = check_ext(ext)

    if scheme == "mt" and not isinstance(item, Metatile):
        item = Metatile.from_tile(item, config.get("default_scale"))
    relative = PurePosixPath(_FORMATTERS[scheme](item.zoom, item.x, item.y, ext))
    if root is None:
        return relative
    return Path(root).joinpath(*relative.parts)
