"""
Authentication Helpers
======================

Password hashing shared by login and account management.
"""

from helpbox.shared.auth.password import hash_password, verify_password

__all__ = [
    "hash_password",
    "verify_password",
]
