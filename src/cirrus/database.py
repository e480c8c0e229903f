"""Database setup for the user and share tables."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, make_url, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .exceptions import DatabaseConnectError

logger = logging.getLogger(__name__)

Base = declarative_base()

UNPARSEABLE_URL = "<unparseable database url>"


def init_db(engine: Engine) -> None:
    """Create database tables if they do not exist."""
    # models register themselves on Base.metadata when imported
    from .models import share, user  # noqa: F401

    Base.metadata.create_all(bind=engine)


class Database:
    """A connection to the user database, owned by a single command."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.SessionLocal = sessionmaker(
            bind=engine, autoflush=False, autocommit=False, future=True
        )

    @classmethod
    def connect(cls, url: str) -> "Database":
        """Open the database at ``url`` and make sure the schema exists.

        Raises :class:`DatabaseConnectError` if the URL is invalid or the
        database cannot be reached.
        """
        try:
            parsed = make_url(url)
        except ArgumentError:
            # the parse error repeats the raw url, which may hold a password
            raise DatabaseConnectError(
                "Invalid database url: the url could not be parsed.", UNPARSEABLE_URL
            ) from None

        shown = parsed.render_as_string(hide_password=True)
        try:
            engine = create_engine(parsed, future=True)
        except (ArgumentError, NoSuchModuleError, ImportError) as exc:
            raise DatabaseConnectError(
                f"Invalid database url {shown}: {exc}", shown
            ) from exc

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            init_db(engine)
        except SQLAlchemyError as exc:
            engine.dispose()
            raise DatabaseConnectError(
                f"Unable to connect to database {shown}: {exc}", shown
            ) from exc

        logger.info("connected to database %s", engine.url)
        return cls(engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a session that is closed when the block exits."""
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def close(self) -> None:
        self.engine.dispose()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
