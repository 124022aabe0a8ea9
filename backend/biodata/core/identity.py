"""Identity-provider (Okta) access-token verification.

The provider's signing keys are fetched from ``{issuer}/v1/keys`` and
cached for ``okta_jwks_cache_seconds``. A token whose ``kid`` is not in the
cached set forces one refresh, so key rotation is picked up without a
restart.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from jose import JWTError, jwt

from .config import settings
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

JWKS_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class IdentityClaims:
    """The subset of provider claims the service uses."""
    subject: str
    email: str
    name: str


class JwksCache:
    """Thread-safe, time-bounded cache of the provider's JSON Web Key Set."""

    def __init__(self, jwks_url: str, ttl_seconds: int):
        self.jwks_url = jwks_url
        self.ttl_seconds = ttl_seconds
        self._keys: List[Dict[str, Any]] = []
        self._fetched_at = 0.0
        self._lock = threading.Lock()

    def get_key(self, kid: Optional[str]) -> Dict[str, Any]:
        """Key for *kid*; refreshes once on a miss. Raises AuthenticationError if absent."""
        key = self._find(kid, refresh=False)
        if key is None:
            key = self._find(kid, refresh=True)
        if key is None:
            raise AuthenticationError("Unknown token signing key")
        return key

    def _find(self, kid: Optional[str], refresh: bool) -> Optional[Dict[str, Any]]:
        with self._lock:
            expired = time.monotonic() - self._fetched_at > self.ttl_seconds
            if refresh or expired or not self._keys:
                self._keys = self._fetch()
                self._fetched_at = time.monotonic()
            for key in self._keys:
                if kid is None or key.get("kid") == kid:
                    return key
        return None

    def _fetch(self) -> List[Dict[str, Any]]:
        try:
            response = httpx.get(self.jwks_url, timeout=JWKS_TIMEOUT_SECONDS)
            response.raise_for_status()
            keys = response.json().get("keys", [])
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to fetch signing keys from %s: %s", self.jwks_url, e)
            raise AuthenticationError("Identity provider unavailable") from e
        logger.info("Fetched identity provider signing keys", extra={"key_count": len(keys)})
        return keys


_jwks_cache: Optional[JwksCache] = None


def _get_jwks_cache() -> JwksCache:
    global _jwks_cache
    if _jwks_cache is None:
        _jwks_cache = JwksCache(
            f"{settings.okta_issuer.rstrip('/')}/v1/keys",
            settings.okta_jwks_cache_seconds,
        )
    return _jwks_cache


def verify_access_token(token: str) -> IdentityClaims:
    """Verify a provider access token and extract the caller's identity.

    Checks the RS256 signature against the provider's keys, the issuer, the
    audience, expiry, and that ``cid`` matches the configured client id.

    Raises:
        AuthenticationError: If the provider is not configured or the token
            fails any check.
    """
    if not settings.okta_enabled:
        raise AuthenticationError("Identity provider is not configured")

    try:
        header = jwt.get_unverified_header(token)
    except JWTError as e:
        raise AuthenticationError("Malformed token") from e

    key = _get_jwks_cache().get_key(header.get("kid"))
    try:
        claims = jwt.decode(
            token,
            key,
            algorithms=["RS256"],
            audience=settings.okta_audience,
            issuer=settings.okta_issuer,
        )
    except JWTError as e:
        logger.info("Identity provider token rejected: %s", e)
        raise AuthenticationError("Invalid or expired token") from e

    if settings.okta_client_id and claims.get("cid") != settings.okta_client_id:
        raise AuthenticationError("Token was issued to a different client")

    subject = str(claims.get("uid") or claims.get("sub") or "")
    email = claims.get("email") or claims.get("sub")
    if not email:
        raise AuthenticationError("Token carries no email or subject")
    return IdentityClaims(
        subject=subject,
        email=email,
        name=claims.get("name") or email,
    )
