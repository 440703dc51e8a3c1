"""
User entity operations: password hashing and the three token kinds.

Tokens are self-contained JWTs. Each kind has its own secret and carries a
`kind` claim, so a verification token can never be replayed as an auth token.
Decoding never raises; a bad token decodes to None.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from bson import ObjectId
from jose import JWTError, jwt
from passlib.context import CryptContext

import database
from config import (
    EMAIL_TOKEN_EXPIRES_MIN,
    EMAIL_TOKEN_SECRET,
    JWT_ALGORITHM,
    JWT_EXPIRES_MIN,
    JWT_SECRET,
    RESET_TOKEN_EXPIRES_MIN,
    RESET_TOKEN_SECRET,
)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

AUTH = "auth"
EMAIL_VERIFICATION = "email_verification"
PASSWORD_RESET = "password_reset"


def generate_hash(password: str) -> str:
    return pwd_context.hash(password)


def check_password(password: str, hashed_password: str) -> bool:
    if not password or not hashed_password:
        return False
    try:
        return pwd_context.verify(password, hashed_password)
    except ValueError:
        # not a hash passlib recognises
        return False


def _encode(subject: str, kind: str, secret: str, expires_minutes: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode({"sub": subject, "kind": kind, "exp": expire}, secret, algorithm=JWT_ALGORITHM)


def _decode(token: Optional[str], kind: str, secret: str) -> Optional[str]:
    if not token or not isinstance(token, str):
        return None
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None
    if payload.get("kind") != kind:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) else None


def generate_auth_token(user_id) -> str:
    return _encode(str(user_id), AUTH, JWT_SECRET, JWT_EXPIRES_MIN)


def decrypt_auth_token(token: Optional[str]) -> Optional[str]:
    """Return the user id carried by an auth token, or None."""
    return _decode(token, AUTH, JWT_SECRET)


def generate_email_verification_token(email: str) -> str:
    return _encode(email, EMAIL_VERIFICATION, EMAIL_TOKEN_SECRET, EMAIL_TOKEN_EXPIRES_MIN)


def decrypt_email_verification_token(token: Optional[str]) -> Optional[str]:
    return _decode(token, EMAIL_VERIFICATION, EMAIL_TOKEN_SECRET)


def generate_password_reset_token(email: str) -> str:
    return _encode(email, PASSWORD_RESET, RESET_TOKEN_SECRET, RESET_TOKEN_EXPIRES_MIN)


def decrypt_password_reset_token(token: Optional[str]) -> Optional[str]:
    return _decode(token, PASSWORD_RESET, RESET_TOKEN_SECRET)


def get_by_token(token: Optional[str]) -> Optional[dict]:
    """Resolve an auth token to its user document."""
    user_id = decrypt_auth_token(token)
    if user_id is None or not ObjectId.is_valid(user_id):
        return None
    return database.get_collection("user").find_one({"_id": ObjectId(user_id)})


def public_user(user: dict) -> dict:
    """User document as returned to clients: string ids, no password hash."""
    out = database.serialize_doc(user)
    out.pop("password", None)
    return out
