"""
Security utilities for authentication, password hashing and share grants.
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Any
from jose import jwt, JWTError
from passlib.context import CryptContext
from .config import settings

# Password hashing (user accounts and document share passwords)
# Use pbkdf2_sha256 as a stable default to avoid environment bcrypt issues.
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

SHARE_GRANT_TOKEN_TYPE = "share_grant"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def generate_share_token() -> str:
    """64 hex characters, unguessable."""
    return secrets.token_hex(32)


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[dict[str, Any]] = None
) -> str:
    """Create a JWT access token."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode = {
        "exp": expire,
        "sub": str(subject),
        "iat": datetime.now(timezone.utc),
        "type": "auth"
    }

    if additional_claims:
        to_encode.update(additional_claims)

    encoded_jwt = jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )
    return encoded_jwt


def create_share_grant(share_id: int, email: Optional[str] = None) -> str:
    """Signed, short-lived proof that a visitor passed a share's access gate."""
    return create_access_token(
        subject=str(share_id),
        expires_delta=timedelta(minutes=settings.SHARE_GRANT_EXPIRE_MINUTES),
        additional_claims={"type": SHARE_GRANT_TOKEN_TYPE, "email": email},
    )


def decode_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
        return payload
    except JWTError:
        return None


def verify_token(token: str) -> Optional[str]:
    """Verify an auth token and return the subject (user id)."""
    payload = decode_token(token)
    if payload is None or payload.get("type") != "auth":
        return None
    return payload.get("sub")


def verify_share_grant(token: str, share_id: int) -> Optional[dict]:
    """Return the grant claims if the token was issued for this share."""
    payload = decode_token(token)
    if payload is None or payload.get("type") != SHARE_GRANT_TOKEN_TYPE:
        return None
    if payload.get("sub") != str(share_id):
        return None
    return payload
