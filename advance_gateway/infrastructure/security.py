"""Password hashing and JWT bearer tokens"""

import base64
import hashlib
import uuid
from datetime import datetime
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from advance_gateway.utils.date_utils import expires_at


def _pre_hash_password(password: str) -> bytes:
    """
    SHA256 + base64 the password so inputs longer than bcrypt's 72-byte
    limit still contribute every byte. The 44-byte result has no NUL bytes.
    """
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str, rounds: int = 12) -> str:
    """Salted bcrypt hash, returned as a string for storage"""
    hashed = bcrypt.hashpw(_pre_hash_password(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its stored hash"""
    try:
        return bcrypt.checkpw(_pre_hash_password(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    user_id: uuid.UUID,
    secret: str,
    algorithm: str = "HS256",
    expire_hours: int = 24,
    now: Optional[datetime] = None,
) -> str:
    """Sign a token whose only claim besides expiry is the user id"""
    payload = {"id": str(user_id), "exp": expires_at(expire_hours, now)}
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> Optional[uuid.UUID]:
    """
    Verify signature and expiry and return the user id.

    Returns None for any failure: bad signature, expired, malformed token or
    a payload without a usable id.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
        return uuid.UUID(str(payload["id"]))
    except (JWTError, KeyError, ValueError, TypeError):
        return None
