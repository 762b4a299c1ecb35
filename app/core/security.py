import secrets
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Optional

import bcrypt
import jwt

from app.core.config import settings

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(plain_password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return bcrypt.hashpw(b"unused-password", bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def dummy_password_hash() -> str:
    """A hash at the configured cost, checked when an account does not exist."""
    return _dummy_hash(settings.BCRYPT_ROUNDS)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a JWT carrying ``data``.

    The token is handed to the frontend for display purposes; no endpoint of
    this service validates it.
    """
    to_encode = data.copy()
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"iat": now, "exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def check_admin_credentials(admin_id: str, email: str, password: str) -> bool:
    checks = [
        secrets.compare_digest(admin_id.encode("utf-8"), settings.ADMIN_ID.encode("utf-8")),
        secrets.compare_digest(email.strip().lower().encode("utf-8"), settings.ADMIN_EMAIL.lower().encode("utf-8")),
        secrets.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8")),
    ]
    return all(checks)
