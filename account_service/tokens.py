"""
Token registry: opaque bearer tokens bound to users.

A plaintext token looks like ``<id>|<secret>``. Only the SHA-256 of the
secret is stored, so a leaked table cannot be replayed. Tokens never expire;
a token stays valid until ``revoke_all`` removes every token of its user.
"""
from typing import Optional
import hmac
import logging

from sqlalchemy.orm import Session

from .auth import generate_token_secret, hash_token
from .models import AccessToken, User, utcnow

logger = logging.getLogger(__name__)

# ids are stored as signed 64-bit integers
MAX_TOKEN_ID = 2 ** 63 - 1


class TokenRegistry:
    def __init__(self, db: Session):
        self.db = db

    def issue(self, user: User) -> str:
        secret = generate_token_secret()
        record = AccessToken(
            user_id=user.id,
            name=user.email,
            token_hash=hash_token(secret),
        )
        self.db.add(record)
        self.db.flush()
        logger.debug("[Token] Issued token_id=%s user_id=%s", record.id, user.id)
        return f"{record.id}|{secret}"

    def resolve(self, token: Optional[str]) -> Optional[int]:
        """
        Return the user id bound to ``token``, or None when the token is
        empty, malformed, unknown or revoked.
        """
        record = self._find(token)
        if record is None:
            return None
        record.last_used_at = utcnow()
        self.db.flush()
        return record.user_id

    def revoke_all(self, user_id: int) -> int:
        count = (
            self.db.query(AccessToken)
            .filter(AccessToken.user_id == user_id)
            .delete()
        )
        self.db.flush()
        logger.debug("[Token] Revoked %s token(s) for user_id=%s", count, user_id)
        return count

    def _find(self, token: Optional[str]) -> Optional[AccessToken]:
        if not token:
            return None

        if "|" not in token:
            return (
                self.db.query(AccessToken)
                .filter(AccessToken.token_hash == hash_token(token))
                .first()
            )

        token_id, secret = token.split("|", 1)
        if not (token_id.isascii() and token_id.isdigit()) or not secret:
            return None
        if int(token_id) > MAX_TOKEN_ID:
            return None
        record = self.db.get(AccessToken, int(token_id))
        if record is None or not hmac.compare_digest(record.token_hash, hash_token(secret)):
            return None
        return record
