import secrets
from datetime import datetime, timedelta, timezone

from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def generate_verification_code() -> str:
    """Six-digit numeric code, never starting with 0."""
    return str(100000 + secrets.randbelow(900000))


def verification_expiry(now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now + timedelta(hours=settings.verification_code_ttl_hours)
