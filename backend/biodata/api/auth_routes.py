"""Authentication endpoints.

    POST /auth/login              -- legacy email/password login, returns a local token
    POST /auth/verify-okta-token  -- verify an identity-provider token and sync the user
    GET  /auth/profile            -- the caller's user record
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..core.config import settings
from ..core.identity import verify_access_token
from ..core.token_factory import create_token
from ..database import get_db
from ..exceptions import AuthenticationError
from ..schemas.auth import (
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    UserResponse,
    VerifyTokenRequest,
    VerifyTokenResponse,
)
from ..services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse, summary="Authenticate with email and password")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, body.email, body.password)
    token = create_token(
        user_id=user.id,
        email=user.email,
        secret=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_hours=settings.jwt_expires_hours,
    )
    logger.info("User logged in", extra={"user_id": user.id})
    return LoginResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post(
    "/verify-okta-token",
    response_model=VerifyTokenResponse,
    summary="Verify an identity-provider access token",
)
def verify_okta_token(body: VerifyTokenRequest, db: Session = Depends(get_db)):
    identity = verify_access_token(body.access_token)
    user = auth_service.find_or_create_identity_user(db, identity)
    return VerifyTokenResponse(
        success=True,
        user=UserResponse.model_validate(user),
        message="Token verified",
    )


@router.get("/profile", response_model=ProfileResponse, summary="Current user")
def get_profile(auth: AuthContext = Depends(require_auth), db: Session = Depends(get_db)):
    if auth.is_anonymous:
        return ProfileResponse(user=None, authenticated=False)
    user = auth_service.get_user_by_id(db, auth.user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return ProfileResponse(user=UserResponse.model_validate(user), authenticated=True)
