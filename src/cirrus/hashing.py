"""Salted scrypt password hashing.

Hashes are stored as self-describing PHC strings::

    $scrypt$ln=17,r=8,p=1$<salt>$<digest>

so a password can be verified from the encoded value alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from passlib.hash import scrypt

from .exceptions import HashError


@dataclass(frozen=True)
class ScryptParams:
    """scrypt cost parameters.

    ``log_n`` is the base-2 logarithm of the CPU/memory cost ``N``; ``r`` the
    block size and ``p`` the parallelization factor.
    """

    log_n: int = 17
    r: int = 8
    p: int = 1


# ln=17 uses ~128 MB of memory per hash
SCRYPT_PARAMS = ScryptParams()

Password = Union[bytes, str]


def _hasher(params: ScryptParams):
    return scrypt.using(rounds=params.log_n, block_size=params.r, parallelism=params.p)


def hash_password(password: Password, params: ScryptParams | None = None) -> str:
    """Hash ``password`` with a fresh random salt.

    Parameters
    ----------
    password:
        Raw password. ``str`` values are encoded as UTF-8. Empty passwords are
        accepted.
    params:
        Cost parameters, defaults to :data:`SCRYPT_PARAMS`.

    Returns
    -------
    str
        The PHC encoded hash.
    """
    params = params or SCRYPT_PARAMS
    try:
        return _hasher(params).hash(password)
    except (ValueError, TypeError, MemoryError) as exc:
        raise HashError(f"Unable to hash password: {exc}") from exc


def verify_password(password: Password, encoded: str) -> bool:
    """Check ``password`` against an encoded hash.

    Returns ``False`` if the password does not match. Raises
    :class:`~cirrus.exceptions.HashError` when ``encoded`` is not a valid
    scrypt PHC string.
    """
    # passlib checks the settings field names with assert
    try:
        return scrypt.verify(password, encoded)
    except (ValueError, TypeError, AssertionError, MemoryError) as exc:
        raise HashError(f"Malformed password hash: {exc}") from exc
