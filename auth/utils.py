"""
Utility functions for the auth module.
"""

from passlib.context import CryptContext

# pbkdf2_sha256 is implemented by passlib itself; no native backend needed.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Return a salted hash of the given password."""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plain password against a stored hash.

    Returns False (never raises) for hashes passlib does not recognize.
    """
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False
