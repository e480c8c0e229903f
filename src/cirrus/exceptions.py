"""Errors raised by cirrus operations.

Every error derives from :class:`CirrusError` so the command line layer can
report any failure with a single handler.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class CirrusError(Exception):
    """Base class for all cirrus failures."""


class ConfigError(CirrusError):
    """A configuration file could not be located, read, parsed or written."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigNotFound(ConfigError):
    pass


class ConfigInvalid(ConfigError):
    pass


class ConfigIoError(ConfigError):
    pass


class ConfigAlreadyExists(ConfigError):
    pass


class DatabaseConnectError(CirrusError):
    """The database could not be reached or the URL is not usable.

    ``url`` is rendered with any password masked.
    """

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class UserError(CirrusError):
    """Violation of a precondition on a user operation."""

    def __init__(self, message: str, name: str) -> None:
        super().__init__(message)
        self.name = name


class UserAlreadyExists(UserError):
    def __init__(self, name: str) -> None:
        super().__init__(f"A user with name {name} already exists.", name)


class UserNotFound(UserError):
    def __init__(self, name: str) -> None:
        super().__init__(f"No user found with the name {name}.", name)


class InvalidUserName(UserError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__("User names must not be empty.", name)


class HashError(CirrusError):
    """The password hashing primitive failed."""


class StorageQueryError(CirrusError):
    """A query against the database failed."""


class ServerNotImplemented(CirrusError):
    pass
