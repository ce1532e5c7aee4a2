"""
Credential store: persisted user records.

Methods flush but never commit; the caller's ``transaction`` scope decides.
"""
from typing import Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .errors import ConflictError, NotFoundError
from .models import User

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "The email has already been taken."

UPDATABLE_FIELDS = ("first_name", "last_name", "password")


class CredentialStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        if not email:
            return None
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def create(self, first_name: str, last_name: str, email: str, password_hash: str) -> User:
        """
        Insert a new user.

        Raises:
            ConflictError: if the email is already registered, including when
                a concurrent insert wins the race on the unique index
        """
        if self.find_by_email(email) is not None:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password_hash,
        )
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError as e:
            logger.info("[Store] Unique constraint rejected email insert: %s", e.orig)
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
        return user

    def update(self, user_id: int, **patch) -> User:
        unknown = set(patch) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update user fields: {', '.join(sorted(unknown))}")

        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError()

        for field, value in patch.items():
            setattr(user, field, value)
        self.db.flush()
        return user
