"""Authentication module: deep module exposing the FastAPI call-context dependency.

Public interface:
    ``require_auth`` returns an AuthContext or raises 401.
    ``resolve_token`` maps a raw bearer token to a local user.

A bearer token is first read as a local (password-login) token and, failing
that, verified with the identity provider. When ``settings.auth_enabled`` is
False every request receives an anonymous context so the development
workflow is unbroken.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import settings
from .identity import verify_access_token
from .token_factory import decode_token
from ..database import get_db
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Resolved caller identity handed to every endpoint.

    ``user_id`` is None only for the anonymous development context.
    """

    user_id: Optional[int]
    email: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None


_ANONYMOUS = AuthContext(user_id=None)


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Require a valid bearer token and return the caller's AuthContext.

    When ``AUTH_ENABLED=false`` returns the anonymous context.
    """
    if not settings.auth_enabled:
        return _ANONYMOUS

    if credentials is None:
        raise AuthenticationError("Missing authentication token")

    return resolve_token(credentials.credentials, db)


def resolve_token(token: str, db: Session) -> AuthContext:
    """Authenticate *token* as a local token, then with the identity provider.

    Raises:
        AuthenticationError: If neither accepts the token or the local user
            no longer exists.
    """
    from ..models.user import User
    from ..services import auth_service

    payload = decode_token(token, settings.jwt_secret_key, settings.jwt_algorithm)
    if payload is not None:
        user = db.query(User).filter(User.id == payload.sub).first()
        if user is None:
            raise AuthenticationError("User not found")
        return AuthContext(user_id=user.id, email=user.email, name=user.name)

    if not settings.okta_enabled:
        raise AuthenticationError("Invalid or expired token")

    identity = verify_access_token(token)
    user = auth_service.find_or_create_identity_user(db, identity)
    return AuthContext(user_id=user.id, email=user.email, name=user.name)
