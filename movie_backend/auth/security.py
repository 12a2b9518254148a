"""Password hashing and bearer-token signing.

Tokens are HS256 JWTs whose ``sub`` claim is the user id; ``email`` rides
along for clients. Verification failures of any kind surface as
``jwt.InvalidTokenError`` so the auth gate has a single thing to catch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext


TOKEN_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("sub", "exp")
MAX_USER_ID = 2**63 - 1  # SQLite INTEGER range

_passwords = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass(frozen=True)
class TokenSubject:
    user_id: int
    email: str


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password_blank")
    return _passwords.hash(password)


def verify_password(password: str, stored_hash: str) -> bool:
    if not (password and stored_hash):
        return False
    try:
        return _passwords.verify(password, stored_hash)
    except (ValueError, TypeError):
        # Stored value is not a hash passlib recognizes.
        return False


def create_access_token(*, secret: str, user_id: int, email: str, expires_minutes: int) -> str:
    if not secret:
        raise ValueError("jwt_secret_blank")

    issued = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=max(1, int(expires_minutes)))
    claims: Dict[str, Any] = {
        "sub": str(int(user_id)),
        "email": email,
        "iat": issued,
        "exp": issued + lifetime,
    }
    return jwt.encode(claims, secret, algorithm=TOKEN_ALGORITHM)


def decode_access_token(*, token: str, secret: str) -> Dict[str, Any]:
    """Claims of a token whose signature and expiry check out."""
    if not secret:
        raise ValueError("jwt_secret_blank")
    if not token:
        raise jwt.InvalidTokenError("token_blank")
    return jwt.decode(token, secret, algorithms=[TOKEN_ALGORITHM], options={"require": list(REQUIRED_CLAIMS)})


def read_token_subject(*, token: str, secret: str) -> TokenSubject:
    claims = decode_access_token(token=token, secret=secret)
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        raise jwt.InvalidTokenError("sub_not_int")
    if not 0 < user_id <= MAX_USER_ID:
        raise jwt.InvalidTokenError("sub_out_of_range")
    return TokenSubject(user_id=user_id, email=str(claims.get("email") or ""))
