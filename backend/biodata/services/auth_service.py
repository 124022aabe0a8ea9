"""Authentication service: password login and identity-provider user sync.

Passwords are bcrypt hashes via passlib and are never stored or logged in
plaintext. Users mirrored from the identity provider carry the
``OKTA_MANAGED`` marker instead of a hash and cannot log in with a password.
"""

import logging
from typing import Optional

from passlib.hash import bcrypt
from sqlalchemy.orm import Session

from ..core.identity import IdentityClaims
from ..exceptions import AuthenticationError
from ..models.user import OKTA_MANAGED, User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hash(password)


def authenticate(db: Session, email: str, password: str) -> User:
    """Validate credentials and return the user.

    Raises AuthenticationError on unknown email, wrong password, or an
    identity-provider account.
    """
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if user is None or user.is_okta_managed:
        raise AuthenticationError("Invalid email or password")

    if not bcrypt.verify(password, user.password_hash):
        raise AuthenticationError("Invalid email or password")

    return user


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def find_or_create_identity_user(db: Session, identity: IdentityClaims) -> User:
    """Mirror a verified provider identity into the local users table.

    New users are created with the OKTA_MANAGED marker. An existing user's
    display name follows the provider.
    """
    email = identity.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if user is None:
        user = User(email=email, name=identity.name, password_hash=OKTA_MANAGED)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created user from identity provider", extra={"user_id": user.id})
        return user

    if user.name != identity.name:
        user.name = identity.name
        db.commit()
        db.refresh(user)
    return user
