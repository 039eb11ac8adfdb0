# fertiliser_dashboard/utils/auth.py
from __future__ import annotations

import logging
from typing import Union

import bcrypt

_log = logging.getLogger(__name__)

# ---- bcrypt defaults / policy ----
_BCRYPT_DEFAULT_ROUNDS = 12          # used when hashing
_BCRYPT_MIN_ACCEPTABLE_ROUNDS = 12   # rehash if lower than this
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def _parse_bcrypt_cost(hash_str: str) -> int | None:
    """
    Extract the cost from a bcrypt hash: $2b$12$...
    Returns None if not parseable.
    """
    parts = hash_str.split("$")
    # ['', '2b', '12', 'rest...']
    if len(parts) < 4:
        return None
    try:
        return int(parts[2])
    except ValueError:
        return None


def _as_text(stored_hash: Union[str, bytes, None]) -> str:
    if stored_hash is None:
        return ""
    if isinstance(stored_hash, bytes):
        try:
            stored_hash = stored_hash.decode("utf-8")
        except UnicodeDecodeError:
            return ""
    return stored_hash.strip()


# ------------------------------- Public API -------------------------------

def hash_password(password: str, *, rounds: int = _BCRYPT_DEFAULT_ROUNDS) -> str:
    """
    Hash `password` with bcrypt.

    `rounds` is clamped to a minimum of _BCRYPT_MIN_ACCEPTABLE_ROUNDS.
    """
    if not isinstance(password, str) or password == "":
        raise ValueError("Password must be a non-empty string")
    rounds = max(int(rounds), _BCRYPT_MIN_ACCEPTABLE_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, stored_hash: Union[str, bytes, None]) -> bool:
    """Verify `password` against a bcrypt `stored_hash`; unknown schemes never match."""
    if password is None:
        return False
    h = _as_text(stored_hash)
    if not h.startswith(_BCRYPT_PREFIXES):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), h.encode("utf-8"))
    except ValueError:
        _log.warning("Malformed bcrypt hash encountered during verification")
        return False


def needs_rehash(stored_hash: Union[str, bytes, None], *, min_rounds: int = _BCRYPT_MIN_ACCEPTABLE_ROUNDS) -> bool:
    """True if the stored hash is not bcrypt or its cost is below `min_rounds`."""
    h = _as_text(stored_hash)
    if not h.startswith(_BCRYPT_PREFIXES):
        return True
    cost = _parse_bcrypt_cost(h)
    return cost is None or cost < min_rounds
