"""
Password hashing (bcrypt) and access tokens (python-jose, HS256).

The auth service hashes explicitly before writing a user row; models never
hash on save.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from event_locator.core.config import settings

# bcrypt>=5 rejects longer input instead of ignoring the tail
BCRYPT_MAX_BYTES = 72


# ================================
# Password Hashing
# ================================

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext password against a bcrypt hash.

    Args:
        plain_password: The password the user entered
        hashed_password: The hash stored on the user row

    Returns:
        True if the password matches, False otherwise

    Example:
        >>> hashed = get_password_hash("secret1")
        >>> verify_password("secret1", hashed)
        True
        >>> verify_password("wrong", hashed)
        False
    """
    password_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    hashed_bytes = hashed_password.encode("utf-8")

    try:
        # bcrypt.checkpw handles constant-time comparison
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a plaintext password with a fresh random salt.

    Each call produces a different hash for the same password; the salt
    and cost factor are embedded in the returned string:

        $2b$12$R9h/cIPz0gi.URNNX3kh2OPST9/PgBkqquzi.Ss7KIUgO2t0jWMUW
        alg cost salt (22 chars)      hash (31 chars)

    bcrypt only uses the first 72 bytes; longer input is cut there before
    hashing (and before verifying, so both sides agree).
    """
    password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


# ================================
# JWT Tokens
# ================================

def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to include. Should contain "sub" (the user id as string).
        expires_delta: Lifetime of the token. Defaults to
                       JWT_ACCESS_TOKEN_EXPIRE_MINUTES (one day).

    Returns:
        Encoded JWT string, sent by clients as ``Authorization: Bearer <token>``

    Example:
        >>> token = create_access_token({"sub": "42"})
        >>> decode_access_token(token)["sub"]
        '42'
    """
    to_encode = data.copy()

    now = datetime.now(timezone.utc)
    if expires_delta is not None:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "iat": now})

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """
    Decode and verify a JWT access token.

    Checks structure, signature, algorithm and expiry.

    Returns:
        The claims if the token is valid, None if it is expired, tampered
        with or malformed.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
