from passlib.context import CryptContext
import hashlib
import secrets

from .config import settings

TOKEN_SECRET_BYTES = 20

# pbkdf2_sha256 by default to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=settings.PASSWORD_SCHEMES, deprecated="auto")


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password must not be blank")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # unknown or malformed hash
        return False


def generate_token_secret() -> str:
    """Random secret part of a bearer token (40 hex chars)."""
    return secrets.token_hex(TOKEN_SECRET_BYTES)


def hash_token(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()
