"""
Token and password helpers.
"""
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
import jwt

from app.core import config
from app.core.errors import UnauthorizedError

_PBKDF2_ITERATIONS = 260_000
_SALT_BYTES = 16


def hash_password(password: str, salt: bytes | None = None, iterations: int = _PBKDF2_ITERATIONS) -> str:
    """Derive the stored form of a local account password,
    ``pbkdf2:<iterations>:<salt hex>:<digest hex>``."""
    salt = salt if salt is not None else secrets.token_bytes(_SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations)
    return ":".join(("pbkdf2", str(iterations), salt.hex(), digest.hex()))


def verify_password(password: str, stored_hash: str | None) -> bool:
    """Check a password against a stored hash. OAuth-only users never match."""
    if not stored_hash:
        return False
    parts = stored_hash.split(":")
    if len(parts) != 4 or parts[0] != "pbkdf2":
        return False
    try:
        iterations = int(parts[1])
        salt = bytes.fromhex(parts[2])
    except ValueError:
        return False
    expected = hash_password(password, salt=salt, iterations=iterations)
    return hmac.compare_digest(expected, stored_hash)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Sign a bearer token identifying ``user_id``."""
    now = datetime.now(timezone.utc)
    expires = now + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": user_id, "iat": now, "exp": expires}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def verify_access_token(token: str) -> str:
    """
    Verify a bearer token and return the user id it carries.

    Raises:
        UnauthorizedError: If token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired", "AUTH_INVALID_TOKEN")
    except jwt.InvalidTokenError as e:
        raise UnauthorizedError(f"Invalid token: {e}", "AUTH_INVALID_TOKEN")

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid token payload", "AUTH_INVALID_TOKEN")
    return user_id
