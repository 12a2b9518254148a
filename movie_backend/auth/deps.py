from __future__ import annotations

from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from movie_backend.config import Config
from movie_backend.db import Database, get_db
from movie_backend.errors import InvalidToken, StoreUnavailable, Unauthenticated, UnknownSubject

from .crud import get_user_by_id
from .security import read_token_subject


_bearer = HTTPBearer(auto_error=False)


def get_config(request: Request) -> Config:
    cfg = getattr(request.app.state, "cfg", None)
    if cfg is None:
        raise StoreUnavailable("server_config_missing")
    return cfg


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    cfg: Config = Depends(get_config),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    """Authenticate a request from its ``Authorization: Bearer <jwt>`` header.

    The token subject is looked up again on every call so that deleted
    accounts lose access immediately, even while their tokens are still
    within their expiry window.
    """

    token = credentials.credentials if credentials is not None else None
    if not token:
        raise Unauthenticated()

    try:
        subject = read_token_subject(token=token, secret=cfg.AUTH_JWT_SECRET)
    except jwt.InvalidTokenError:
        # Covers ExpiredSignatureError, bad signatures, malformed tokens and bad subjects.
        raise InvalidToken()

    with db.transaction() as conn:
        row = get_user_by_id(conn, subject.user_id)
    if row is None:
        raise UnknownSubject()

    user = {"id": int(row["id"]), "email": str(row["email"])}
    request.state.user = user
    return user
