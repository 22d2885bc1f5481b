# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Password hashing and JWT helpers."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from enrolment.core.config import settings
from enrolment.core.errors import Unauthenticated
from enrolment.models.domain import Identity, Role

BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Return a salted ``$2b$`` bcrypt hash of ``password``."""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("ascii")


def verify_password(password: str, encoded: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), encoded.encode("ascii"))
    except (AttributeError, UnicodeEncodeError, ValueError):
        return False


def create_access_token(user_id: int, username: str, role: str,
                        expires_in: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expires_in = expires_in or timedelta(hours=settings.TOKEN_EXPIRY_HOURS)
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Identity:
    """Verify ``token`` and return the identity it carries."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return Identity(id=int(payload["sub"]), username=payload["username"],
                        role=Role(payload["role"]))
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Your session has expired, please log in again")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise Unauthenticated("Invalid authentication token")


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        return None
    return parts[1]
