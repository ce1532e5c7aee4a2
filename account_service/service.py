"""
Account orchestration: registration, login, profile, password and logout.

Every operation validates its input before touching the store and runs as a
single unit of work inside ``transaction``; a failure at any point rolls back
everything the operation wrote. Protected operations take the bearer token
explicitly instead of reading an ambient "current user".
"""
from typing import Optional, Tuple
import logging

from sqlalchemy.orm import Session

from .auth import hash_password, verify_password
from .db import transaction
from .errors import AuthError, NotFoundError
from .models import User
from .schemas import UserView
from .store import CredentialStore
from .tokens import TokenRegistry
from .validation import (
    CHANGE_PASSWORD_RULES,
    LOGIN_RULES,
    REGISTER_RULES,
    UPDATE_PROFILE_RULES,
    validate,
)

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, db: Session):
        self.db = db
        self.users = CredentialStore(db)
        self.tokens = TokenRegistry(db)

    def register(
        self,
        first_name: Optional[str],
        last_name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> UserView:
        validate(
            {"first_name": first_name, "last_name": last_name, "email": email, "password": password},
            REGISTER_RULES,
        )

        with transaction(self.db):
            user = self.users.create(
                first_name=first_name,
                last_name=last_name,
                email=email,
                password_hash=hash_password(password),
            )

        logger.info("[Register] Account created: user_id=%s", user.id)
        return UserView.model_validate(user)

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[UserView, str]:
        """
        Check credentials and issue a new bearer token.

        Unknown email and wrong password fail with different reasons, which
        lets a caller tell whether an address is registered.
        """
        validate({"email": email, "password": password}, LOGIN_RULES)

        with transaction(self.db):
            user = self.users.find_by_email(email)
            if user is None:
                logger.info("[Login] Unknown email")
                raise AuthError(AuthError.EMAIL_NOT_FOUND)
            if not verify_password(password, user.password):
                logger.info("[Login] Incorrect password: user_id=%s", user.id)
                raise AuthError(AuthError.INCORRECT_PASSWORD)
            token = self.tokens.issue(user)

        logger.info("[Login] Successful login: user_id=%s", user.id)
        return UserView.model_validate(user), token

    def current_user(self, token: Optional[str]) -> UserView:
        with transaction(self.db):
            user = self._authenticate(token)
        return UserView.model_validate(user)

    def update_profile(
        self,
        token: Optional[str],
        first_name: Optional[str],
        last_name: Optional[str],
    ) -> UserView:
        with transaction(self.db):
            user = self._authenticate(token)
            validate({"first_name": first_name, "last_name": last_name}, UPDATE_PROFILE_RULES)
            user = self.users.update(user.id, first_name=first_name, last_name=last_name)

        logger.info("[Profile] Name updated: user_id=%s", user.id)
        return UserView.model_validate(user)

    def change_password(
        self,
        token: Optional[str],
        old_password: Optional[str],
        new_password: Optional[str],
    ) -> UserView:
        with transaction(self.db):
            user = self._authenticate(token)
            validate({"old_password": old_password, "new_password": new_password}, CHANGE_PASSWORD_RULES)
            if not verify_password(old_password, user.password):
                logger.info("[Password] Old password mismatch: user_id=%s", user.id)
                raise AuthError(AuthError.OLD_PASSWORD_MISMATCH)
            user = self.users.update(user.id, password=hash_password(new_password))

        logger.info("[Password] Password changed: user_id=%s", user.id)
        return UserView.model_validate(user)

    def logout(self, token: Optional[str]) -> int:
        """Revoke every token of the token's owner, not only ``token``."""
        with transaction(self.db):
            user_id = self.tokens.resolve(token)
            if user_id is None:
                raise AuthError(AuthError.INVALID_TOKEN)
            revoked = self.tokens.revoke_all(user_id)

        logger.info("[Logout] Revoked %s token(s): user_id=%s", revoked, user_id)
        return revoked

    def _authenticate(self, token: Optional[str]) -> User:
        user_id = self.tokens.resolve(token)
        if user_id is None:
            raise AuthError(AuthError.INVALID_TOKEN)
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError()
        return user
