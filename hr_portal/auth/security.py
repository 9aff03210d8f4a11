from datetime import timedelta
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from hr_portal.core.config import settings
from hr_portal.core.datetime_utils import utcnow


def hash_password(plain_password: str) -> str:
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


def create_access_token(claims: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """Sign claims into a bearer token; iat and exp are added here."""
    issued_at = utcnow()
    lifetime = timedelta(minutes=expires_minutes or settings.access_token_expire_minutes)
    return jwt.encode(
        {**claims, "iat": issued_at, "exp": issued_at + lifetime},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def token_for_user(user_id: int, role: str) -> str:
    return create_access_token({"sub": str(user_id), "role": role})


def user_id_from_token(token: str) -> Optional[int]:
    """Subject of a valid, unexpired token, or None."""
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = claims.get("sub")
    if subject is None or not str(subject).isdigit():
        return None
    return int(subject)
