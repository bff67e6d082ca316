"""
Security Primitives

Password hashing (bcrypt), JWT signing (python-jose) and random credential
generation. These helpers are stateless; callers supply secrets and lifetimes.
"""

import asyncio
import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"

# Compared against when the user does not exist so that response time
# does not reveal whether an email is registered.
_DUMMY_HASH = bcrypt.hashpw(b"classhub-dummy-password", bcrypt.gensalt()).decode("utf-8")


def hash_password(password: str) -> str:
    """Return a bcrypt hash of the plaintext password."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


async def hash_password_async(password: str) -> str:
    """Hash a password in a worker thread so the event loop keeps serving."""
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(password: str, password_hash: str | None) -> bool:
    """
    Verify a password in a worker thread.

    A missing hash is compared against a dummy hash and always fails.
    """
    if password_hash is None:
        await asyncio.to_thread(verify_password, password, _DUMMY_HASH)
        return False
    return await asyncio.to_thread(verify_password, password, password_hash)


def create_access_token(
    subject: str,
    *,
    secret: str,
    algorithm: str,
    expires_minutes: int,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """
    Create a signed access token.

    Args:
        subject: Token subject (user id)
        secret: Signing secret
        algorithm: JWT algorithm, e.g. HS256
        expires_minutes: Lifetime of the token
        additional_claims: Extra claims merged into the payload

    Returns:
        Encoded JWT string
    """
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": subject,
        "type": ACCESS_TOKEN_TYPE,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
    }
    if additional_claims:
        payload.update(additional_claims)
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, *, secret: str, algorithm: str) -> dict[str, Any] | None:
    """
    Decode and validate a JWT.

    Returns:
        The payload, or None if the signature is invalid or the token expired
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as e:
        logger.debug(f"JWT decode failed: {e}")
        return None


def generate_refresh_token() -> str:
    """Generate an unguessable opaque refresh token (384 bits of entropy)."""
    return secrets.token_urlsafe(48)


def generate_numeric_code(length: int = 6) -> str:
    """Generate a zero-padded numeric one-time code."""
    return f"{secrets.randbelow(10**length):0{length}d}"


def hash_token(token: str) -> str:
    """
    Hash an opaque token for storage using SHA-256.

    Only the digest is persisted so a database leak does not expose live
    refresh tokens.
    """
    return hashlib.sha256(token.encode()).hexdigest()
