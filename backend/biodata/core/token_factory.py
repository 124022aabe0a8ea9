"""Pure functions for issuing and decoding local access tokens.

These are the legacy password-login tokens (HS256). Identity-provider
tokens are verified separately in ``identity.py``.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

TOKEN_ISSUER = "biodata"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded token claims. Immutable."""
    sub: int
    email: str
    exp: datetime


def create_token(
    user_id: int,
    email: str,
    secret: str,
    algorithm: str = "HS256",
    expires_hours: int = 2,
) -> str:
    """Create a signed token for *user_id*.

    Args:
        user_id: Local user id, carried as the ``sub`` claim.
        email: Carried for display; never trusted for lookups.
        secret: HMAC signing key.
        algorithm: Signing algorithm.
        expires_hours: Hours until expiry.
    """
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=expires_hours)).timestamp()),
        "iss": TOKEN_ISSUER,
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Optional[TokenPayload]:
    """Decode and validate a local token.

    Returns ``None`` on any validation failure (bad signature, expired,
    wrong issuer, malformed) rather than raising; callers decide what to do
    with absence.
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm], issuer=TOKEN_ISSUER)
        return TokenPayload(
            sub=int(claims["sub"]),
            email=claims.get("email", ""),
            exp=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )
    except (JWTError, KeyError, TypeError, ValueError):
        return None
