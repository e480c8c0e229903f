"""Locating, parsing and creating the cirrus configuration file."""

from __future__ import annotations

import logging
import os
import tomllib
from importlib import resources
from pathlib import Path
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, ValidationError

from .exceptions import (
    ConfigAlreadyExists,
    ConfigInvalid,
    ConfigIoError,
    ConfigNotFound,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS: Sequence[Path] = tuple(
    Path(p)
    for p in (
        ".cirrus/config.toml",
        *(("/etc/cirrus/config.toml",) if os.name == "posix" else ()),
    )
)


class DatabaseConfig(BaseModel):
    """Connection settings for the user database."""

    model_config = ConfigDict(frozen=True)

    url: str


class Config(BaseModel):
    """Parsed configuration file.

    Unknown tables and keys are ignored; they belong to the server.
    """

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig


def default_config_template() -> bytes:
    """Return the contents written by :func:`create_config`."""
    return resources.files(__package__).joinpath("default_config.toml").read_bytes()


def _read_first_existing(paths: Iterable[Path]) -> Optional[tuple[Path, str]]:
    for path in paths:
        try:
            return path, path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("no configuration file at %s", path)
            continue
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigIoError(
                f"Unable to read configuration file {path}: {exc}", path
            ) from exc
    return None


def parse_config(
    path: Optional[Path] = None,
    search_paths: Optional[Iterable[Path]] = None,
) -> Config:
    """Parse the configuration file at ``path``.

    If ``path`` is ``None`` the ``search_paths`` are probed in order and the
    first existing file is parsed, even if it turns out to be invalid. The
    ``search_paths`` default to :data:`DEFAULT_CONFIG_PATHS`.

    Raises
    ------
    ConfigNotFound
        No file exists at any of the ``search_paths``.
    ConfigIoError
        The file exists but could not be read, or the explicit ``path``
        could not be read at all.
    ConfigInvalid
        The file is not valid TOML or lacks required settings.
    """
    if path is not None:
        path = Path(path)
        try:
            contents = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigIoError(
                f"Unable to read configuration file {path}: {exc}", path
            ) from exc
    else:
        if search_paths is None:
            search_paths = DEFAULT_CONFIG_PATHS
        found = _read_first_existing(search_paths)
        if found is None:
            raise ConfigNotFound("The configuration file could not be found.")
        path, contents = found

    logger.info("using configuration file %s", path)
    try:
        return Config.model_validate(tomllib.loads(contents))
    except (tomllib.TOMLDecodeError, ValidationError) as exc:
        raise ConfigInvalid(f"Invalid configuration in {path}: {exc}", path) from exc


def create_config(path: Path, overwrite: Optional[bool] = None) -> bool:
    """Write the default configuration file to ``path``.

    ``overwrite`` decides what happens when ``path`` already exists:

    - ``None``: raise :class:`ConfigAlreadyExists`.
    - ``False``: keep the existing file and return ``False``.
    - ``True``: replace the existing file.

    Returns ``True`` if the file was written.
    """
    path = Path(path)
    mode = "wb" if overwrite else "xb"
    try:
        with path.open(mode) as fh:
            fh.write(default_config_template())
    except FileExistsError as exc:
        if overwrite is False:
            logger.info("configuration file %s already exists, keeping it", path)
            return False
        raise ConfigAlreadyExists(
            f"Unable to create config file at {path}: file already exists", path
        ) from exc
    except OSError as exc:
        raise ConfigIoError(f"Unable to create config file at {path}: {exc}", path) from exc

    logger.info("created configuration file %s", path)
    return True
