"""
Bearer-token helpers.

Sessions are owned by the identity provider; it signs short-lived access tokens
with the shared SECRET_KEY. ``create_access_token`` exists for the seed script
and the test-suite, the API itself only decodes.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError

from fleetfusion.core.config import settings

ACCESS_TOKEN_TYPE = "access"


@dataclass(frozen=True)
class AccessClaims:
    user_id: uuid.UUID
    organization_id: uuid.UUID
    role: str
    expires_at: datetime


def create_access_token(
    user_id: uuid.UUID | str,
    organization_id: uuid.UUID | str,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user_id),
        "org_id": str(organization_id),
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Verified raw claims. Raises ValueError for bad signatures, expiry or garbage."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise ValueError(f"Invalid token: {e}")


def decode_access_token(token: str) -> AccessClaims:
    """Like ``decode_token`` but only accepts well-formed access tokens."""
    payload = decode_token(token)
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise ValueError("Not an access token")
    try:
        return AccessClaims(
            user_id=uuid.UUID(payload["sub"]),
            organization_id=uuid.UUID(payload["org_id"]),
            role=payload["role"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed access token: {e}")
