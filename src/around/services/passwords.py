"""Password hashing helpers."""

from passlib.context import CryptContext

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plain-text password using PBKDF2-SHA256."""
    return _pwd_context.hash(password)


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a candidate password against a stored hash."""
    try:
        return _pwd_context.verify(plain_password, hashed)
    except ValueError:
        # Stored value is not a recognised hash.
        return False
