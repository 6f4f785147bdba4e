"""Command-line interface for slippy_tiles.

Small tools for looking up tiles, listing the tiles or metatiles that
cover a bounding box, and printing cache paths and world files, built
with Typer.
"""
import logging
from typing import Optional

import typer

from . import config, paths
from .bbox import BBox
from .errors import SlippyTilesError
from .latlon import LatLon
from .tile import Tile

app = typer.Typer(add_completion=False)


def _fail(err: SlippyTilesError):
    typer.echo(f"Error: {err}", err=True)
    raise typer.Exit(code=2)


@app.callback()
def callback(
    env: str = typer.Option("DEFAULT", help="Dynaconf environment to use."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages."),
):
    """
    Slippy map tile and metatile coordinate tools.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    if env != "DEFAULT":
        config.change_env(env)


@app.command()
def tile(lat: float, lon: float, zoom: int):
    """Print the Z/X/Y of the tile containing LAT LON at ZOOM."""
    try:
        typer.echo(LatLon(lat, lon).tile(zoom))
    except SlippyTilesError as err:
        _fail(err)


@app.command()
def bbox(
    bbox: str = typer.Argument(..., help="top,left,bottom,right"),
    zoom: int = typer.Option(..., "--zoom", "-z", help="Zoom level (first zoom with --max-zoom)."),
    max_zoom: Optional[int] = typer.Option(None, help="Last zoom level, inclusive."),
    count: bool = typer.Option(False, "--count", help="Only print the number of tiles."),
):
    """List the tiles covering BBOX."""
    try:
        box = BBox.from_str(bbox)
    except SlippyTilesError as err:
        _fail(err)
    tiles = box.tiles(zoom, max_zoom)
    if count:
        typer.echo(tiles.size_hint())
        return
    for t in tiles:
        typer.echo(t)


@app.command()
def metatiles(
    bbox: str = typer.Argument(..., help="top,left,bottom,right"),
    zoom: int = typer.Option(..., "--zoom", "-z", help="Zoom level (first zoom with --max-zoom)."),
    scale: Optional[int] = typer.Option(None, help="Metatile scale, defaults to the default_scale setting."),
    max_zoom: Optional[int] = typer.Option(None, help="Last zoom level, inclusive."),
):
    """List the metatiles covering BBOX."""
    try:
        box = BBox.from_str(bbox)
    except SlippyTilesError as err:
        _fail(err)
    if scale is None:
        scale = config.get("default_scale")
    for mt in box.metatiles(scale, zoom, max_zoom):
        typer.echo(mt)


@app.command()
def children(
    tile: str = typer.Argument(..., help="Z/X/Y"),
    max_zoom: int = typer.Option(..., help="Deepest zoom to list."),
):
    """List TILE and its descendants in Z-order."""
    try:
        root = Tile.from_str(tile)
    except SlippyTilesError as err:
        _fail(err)
    for t in root.all_children(max_zoom):
        typer.echo(t)


@app.command()
def worldfile(
    tile: str = typer.Argument(..., help="Z/X/Y"),
    tile_size: Optional[int] = typer.Option(None, help="Image size in pixels."),
):
    """Print the world file of TILE."""
    try:
        typer.echo(Tile.from_str(tile).world_file(tile_size), nl=False)
    except SlippyTilesError as err:
        _fail(err)


@app.command()
def path(
    tile: str = typer.Argument(..., help="Z/X/Y"),
    scheme: str = typer.Option("zxy", help=f"One of {', '.join(paths.SCHEMES)}."),
    ext: Optional[str] = typer.Option(None, help="File extension."),
):
    """Print the cache path of TILE."""
    try:
        typer.echo(paths.cache_key(Tile.from_str(tile), scheme=scheme, ext=ext))
    except SlippyTilesError as err:
        _fail(err)
