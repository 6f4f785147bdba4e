"""Configuration management for slippy_tiles.

Settings are loaded with Dynaconf from the following locations, in order
of increasing priority:

1. Global settings (/etc/slippy_tiles/)
2. User settings (~/.config/slippy_tiles/)
3. Current directory settings (./)
4. Environment variable specified file (SLIPPYTILES_SETTINGS_FILE_FOR_DYNACONF)

Single values can be overridden with ``SLIPPYTILES_<KEY>`` environment
variables, e.g. ``SLIPPYTILES_TILE_SIZE=512``.

Attributes
----------
USER_DIR : pathlib.Path
    Path to user configuration directory.
GLOB_DIR : pathlib.Path
    Path to global configuration directory.
CURR_DIR : pathlib.Path
    Path to current working directory.
DEFAULTS : dict
    Values used when no settings file provides the key.
settings : Dynaconf
    The Dynaconf settings object with loaded configuration.
"""
import os
import pathlib

from dynaconf import Dynaconf

USER_DIR = pathlib.Path("~/.config/slippy_tiles").expanduser()
GLOB_DIR = pathlib.Path("/etc/slippy_tiles/")
CURR_DIR = pathlib.Path("./").absolute()
settings_files = [
    GLOB_DIR / "settings.toml",
    GLOB_DIR / ".secrets.toml",
    USER_DIR / "settings.toml",
    USER_DIR / ".secrets.toml",
    CURR_DIR / "settings.toml",
    CURR_DIR / ".secrets.toml"
    ]
extra_file = os.getenv("SLIPPYTILES_SETTINGS_FILE_FOR_DYNACONF")
if extra_file:
    settings_files.append(pathlib.Path(extra_file).absolute())

DEFAULTS = {
    "tile_size": 256,
    "default_ext": "png",
    "default_scale": 8,
}

settings = Dynaconf(
    merge_enabled = True,
    envvar_prefix="SLIPPYTILES",
    settings_files=[str(fn) for fn in settings_files],
    environments=True,
    load_dotenv=False,
)


def get(key):
    """Return a setting, falling back to the package default.

    Parameters
    ----------
    key : str
        Setting name, e.g. ``"tile_size"``.

    Returns
    -------
    object
        The configured value, or ``DEFAULTS[key]``.
    """
    return settings.get(key, DEFAULTS[key])


def change_env(new_env):
    """Change the active Dynaconf environment.

    Parameters
    ----------
    new_env : str
        The environment name to switch to (e.g., 'development', 'production').
    """
    settings.setenv(new_env)
    settings.reload()
