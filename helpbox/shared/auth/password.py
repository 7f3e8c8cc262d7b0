"""
Password Hashing
================

Secure password hashing using bcrypt.
"""

from typing import Optional

import bcrypt

from helpbox.config import settings


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: Cost factor, defaults to settings.bcrypt_rounds

    Returns:
        str: Bcrypt hash of the password
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.strip().encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Both sides are trimmed first: fixed-width columns pad stored hashes and
    forms pad passwords with stray spaces.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        bool: True if password matches hash
    """
    try:
        return bcrypt.checkpw(
            plain_password.strip().encode("utf-8"),
            hashed_password.strip().encode("utf-8")
        )
    except ValueError:
        # Malformed hash or over-long password
        return False
