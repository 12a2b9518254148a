from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from movie_backend.auth import get_current_user
from movie_backend.auth.crud import create_user, normalize_email, public_user, verify_user_credentials
from movie_backend.auth.deps import get_config
from movie_backend.auth.security import create_access_token
from movie_backend.config import Config
from movie_backend.db import Database, get_db
from movie_backend.errors import InvalidCredentials, ValidationFailed


router = APIRouter(prefix="/api/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str


def _token_response(cfg: Config, user: Dict[str, Any]) -> Dict[str, Any]:
    token = create_access_token(
        secret=cfg.AUTH_JWT_SECRET,
        user_id=int(user["id"]),
        email=str(user["email"]),
        expires_minutes=int(cfg.AUTH_TOKEN_EXPIRE_MINUTES),
    )
    return {"access_token": token, "token_type": "bearer", "user": user}


@router.post("/login")
def auth_login(
    payload: LoginRequest,
    cfg: Config = Depends(get_config),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    with db.transaction() as conn:
        row = verify_user_credentials(conn, payload.email, payload.password)
    if row is None:
        raise InvalidCredentials()
    return _token_response(cfg, public_user(row))


@router.post("/register", status_code=201)
def auth_register(
    payload: RegisterRequest,
    cfg: Config = Depends(get_config),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    """Self-serve account creation; the new account is logged in right away."""
    email = normalize_email(payload.email)
    errors: List[Dict[str, str]] = []
    if "@" not in email:
        errors.append({"field": "email", "message": "A valid email is required"})
    if len(payload.password or "") < MIN_PASSWORD_LENGTH:
        errors.append(
            {"field": "password", "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}
        )
    if errors:
        raise ValidationFailed(errors)

    with db.transaction() as conn:
        user = create_user(conn, email=email, password=payload.password)
    return _token_response(cfg, user)


@router.get("/me")
def auth_me(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return {"user": user}
