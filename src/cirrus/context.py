"""Per-invocation execution context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import Config, parse_config
from .database import Database


@dataclass(frozen=True)
class Context:
    """Resolved configuration plus the database connection of one command.

    Use as a context manager so the connection is released when the command
    finishes.
    """

    config: Config
    database: Database

    @classmethod
    def init(
        cls, config_path: Optional[Path] = None, database_url: Optional[str] = None
    ) -> "Context":
        config = parse_config(config_path)
        if database_url is None:
            database_url = config.database.url
        database = Database.connect(database_url)
        return cls(config=config, database=database)

    def close(self) -> None:
        self.database.close()

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
