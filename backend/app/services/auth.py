"""
Auth service: password hashing and JWT creation/verification.
Uses bcrypt directly (no passlib) to avoid passlib/bcrypt version conflicts.
Tokens carry userId and role; verification failures collapse into InvalidToken.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from app.config import settings
from app.errors import InvalidToken

# Bcrypt limit is 72 bytes; use 71 so we never exceed
BCRYPT_MAX_BYTES = 71


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: str
    issued_at: datetime
    expires_at: datetime


def _truncate_to_bytes(s: str, max_bytes: int = BCRYPT_MAX_BYTES) -> bytes:
    """Truncate string to at most max_bytes UTF-8; return bytes for bcrypt."""
    if not s:
        return b""
    encoded = s.encode("utf-8")
    if len(encoded) <= max_bytes:
        return encoded
    return encoded[:max_bytes]


def hash_password(password: str) -> str:
    """Hash password for storage. Raises ValueError if password is None."""
    if password is None:
        raise ValueError("password is required")
    raw = _truncate_to_bytes(password)
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    hashed = bcrypt.hashpw(raw, salt)
    return hashed.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    raw = _truncate_to_bytes(plain)
    try:
        return bcrypt.checkpw(raw, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        # Unparseable stored hash: treat as mismatch
        return False


def create_access_token(user_id: int, role: str, now: datetime | None = None) -> str:
    issued = now or datetime.now(timezone.utc)
    expire = issued + timedelta(hours=settings.jwt_expire_hours)
    # JWT exp/iat must be numeric (Unix timestamp), sub must be a string
    payload = {
        "sub": str(user_id),
        "userId": user_id,
        "role": role,
        "iat": int(issued.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify signature and expiry and return the claims.
    Every failure (bad signature, malformed, expired, missing claims) raises the same InvalidToken.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidToken() from e
    user_id = payload.get("userId")
    role = payload.get("role")
    exp = payload.get("exp")
    iat = payload.get("iat")
    if (
        isinstance(user_id, bool) or not isinstance(user_id, int)
        or not isinstance(role, str)
        or not isinstance(exp, (int, float))
        or not isinstance(iat, (int, float))
    ):
        raise InvalidToken()
    return TokenClaims(
        user_id=user_id,
        role=role,
        issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
    )
