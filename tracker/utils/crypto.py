"""
Password hashing with bcrypt.

Hashes live in the Users sheet ``password`` column.  Rows seeded by hand
may still carry plain text; ``is_bcrypt_hash`` lets the setup routes find
and re-hash those.
"""

import bcrypt
from flask import current_app, has_app_context

DEFAULT_ROUNDS = 12


def _rounds() -> int:
    if has_app_context():
        return int(current_app.config.get("BCRYPT_ROUNDS", DEFAULT_ROUNDS))
    return DEFAULT_ROUNDS


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password with bcrypt (BCRYPT_ROUNDS, default 12)."""
    salt = bcrypt.gensalt(rounds=_rounds())
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def is_bcrypt_hash(value: str) -> bool:
    return bool(value) and value.startswith(("$2a$", "$2b$", "$2y$"))


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a plain-text password against its bcrypt hash.

    Non-bcrypt values never verify, so an un-migrated plain-text cell
    cannot be used to log in.
    """
    if not plain_password or not is_bcrypt_hash(password_hash):
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            password_hash.encode("utf-8"),
        )
    except ValueError:
        return False
