import os
import logging
from datetime import datetime, timedelta, timezone

import jwt
from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.argon2 import Argon2id

from rootle.core.settings import settings
from rootle.core.errors import MissingToken, InvalidToken, ExpiredToken

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def _kdf(salt: bytes) -> Argon2id:
    return Argon2id(
        salt=salt,
        length=32,
        iterations=2,
        lanes=4,
        memory_cost=65536
    )


def hash_password(password: str) -> tuple[str, str]:
    """
    Hashes a password using Argon2id.
    Returns (hex_hash, hex_salt).
    """
    salt = os.urandom(16)
    key = _kdf(salt).derive(password.encode())
    return key.hex(), salt.hex()


def verify_password(password: str, salt_hex: str, hash_hex: str) -> bool:
    """
    Verifies a password against a stored hash and salt.
    """
    try:
        _kdf(bytes.fromhex(salt_hex)).verify(password.encode(), bytes.fromhex(hash_hex))
        return True
    except (InvalidKey, ValueError):
        return False


def create_access_token(username: str, expires_delta: timedelta | None = None) -> str:
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": username,
        "username": username,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(to_encode, settings.token_secret, algorithm=ALGORITHM)


def decode_access_token(token: str | None) -> str:
    """Returns the username embedded in a valid token."""
    if not token:
        raise MissingToken()
    try:
        payload = jwt.decode(
            token,
            settings.token_secret,
            algorithms=[ALGORITHM],
            options={"require": ["exp", "username"]},
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredToken()
    except jwt.PyJWTError as e:
        logger.info("Rejected token: %s", e)
        raise InvalidToken()

    username = payload.get("username")
    if not isinstance(username, str) or not username:
        raise InvalidToken()
    return username
