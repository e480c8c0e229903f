"""Service layer for managing user credentials."""

import getpass
import logging
from typing import Callable, List, NoReturn, Optional

from sqlalchemy import exists
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import Database
from .exceptions import (
    InvalidUserName,
    StorageQueryError,
    UserAlreadyExists,
    UserNotFound,
)
from .hashing import hash_password
from .models.user import User


logger = logging.getLogger(__name__)

PasswordPrompt = Callable[[str], str]

NEW_USER_PROMPT = "Enter a password for the new user (hidden input): "
SET_PASSWORD_PROMPT = "Enter the new password (hidden input): "


def _handle_service_error(session: Session, exc: SQLAlchemyError) -> NoReturn:
    """Rollback transaction and raise a storage error."""
    session.rollback()
    logger.exception("database query failed", exc_info=exc)
    raise StorageQueryError(f"Database error: {exc}") from exc


def _check_name(name: str) -> None:
    if not name:
        raise InvalidUserName(name)


def _resolve_password(
    password: Optional[str], prompt: PasswordPrompt, message: str
) -> str:
    if password is None:
        return prompt(message)
    return password


def user_exists(session: Session, name: str) -> bool:
    return session.query(exists().where(User.name == name)).scalar()


def create_user(
    database: Database,
    name: str,
    password: Optional[str] = None,
    prompt: PasswordPrompt = getpass.getpass,
) -> None:
    """Create a user named ``name``.

    If ``password`` is ``None`` it is obtained from ``prompt`` before the
    user is inserted. Raises :class:`UserAlreadyExists` if the name is taken.
    """
    _check_name(name)
    with database.session() as session:
        try:
            if user_exists(session, name):
                raise UserAlreadyExists(name)

            password_hash = hash_password(
                _resolve_password(password, prompt, NEW_USER_PROMPT)
            )
            session.add(User(name=name, password_hash=password_hash))
            session.commit()
        except SQLAlchemyError as exc:
            _handle_service_error(session, exc)
    logger.info("created user %s", name)


def delete_user(database: Database, name: str) -> None:
    """Delete the user named ``name``, raising :class:`UserNotFound` if absent."""
    _check_name(name)
    with database.session() as session:
        try:
            if not user_exists(session, name):
                raise UserNotFound(name)

            session.query(User).filter(User.name == name).delete(
                synchronize_session=False
            )
            session.commit()
        except SQLAlchemyError as exc:
            _handle_service_error(session, exc)
    logger.info("deleted user %s", name)


def list_users(database: Database) -> List[str]:
    """Return the names of all users."""
    with database.session() as session:
        try:
            rows = session.query(User.name).all()
        except SQLAlchemyError as exc:
            _handle_service_error(session, exc)
    return [row[0] for row in rows]


def set_password(
    database: Database,
    name: str,
    password: Optional[str] = None,
    prompt: PasswordPrompt = getpass.getpass,
) -> None:
    """Replace the password of ``name``.

    The password is prompted for if not given. Raises :class:`UserNotFound`
    when no user has that name; no user is created in that case.
    """
    _check_name(name)
    password_hash = hash_password(
        _resolve_password(password, prompt, SET_PASSWORD_PROMPT)
    )
    with database.session() as session:
        try:
            updated = (
                session.query(User)
                .filter(User.name == name)
                .update({User.password_hash: password_hash}, synchronize_session=False)
            )
            if updated == 0:
                session.rollback()
                raise UserNotFound(name)
            session.commit()
        except SQLAlchemyError as exc:
            _handle_service_error(session, exc)
    logger.info("changed password of user %s", name)
