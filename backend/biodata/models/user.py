"""User accounts.

A user either logs in with a local bcrypt password (legacy flow) or is
mirrored from the identity provider on first verified token, in which case
``password_hash`` holds the ``OKTA_MANAGED`` marker instead of a hash.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from ..database import Base

OKTA_MANAGED = "OKTA_MANAGED"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_okta_managed(self) -> bool:
        return self.password_hash == OKTA_MANAGED
