from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional

from movie_backend.config import Config
from movie_backend.db import Database
from movie_backend.errors import Conflict
from movie_backend.util.time import utcnow_iso

from .security import hash_password, verify_password


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def public_user(row: Any | Dict[str, Any]) -> Dict[str, Any]:
    d = dict(row)
    d.pop("password", None)
    return d


def get_user_by_email(conn: Any, email: str) -> Optional[Any]:
    e = normalize_email(email)
    if not e:
        return None
    return conn.execute(
        "SELECT * FROM users WHERE email=?",
        (e,),
    ).fetchone()


def get_user_by_id(conn: Any, user_id: int) -> Optional[Any]:
    return conn.execute(
        "SELECT id, email, created_at, updated_at FROM users WHERE id=?",
        (int(user_id),),
    ).fetchone()


def verify_user_credentials(conn: Any, email: str, password: str) -> Optional[Any]:
    row = get_user_by_email(conn, email)
    if row is None:
        return None
    if not verify_password(password, str(row["password"])):
        return None
    return row


def create_user(conn: Any, *, email: str, password: str) -> Dict[str, Any]:
    e = normalize_email(email)
    if not e:
        raise ValueError("email_blank")

    # Use the normalized email for uniqueness checks.
    existing = conn.execute("SELECT 1 FROM users WHERE email=?", (e,)).fetchone()
    if existing is not None:
        raise Conflict()

    now = utcnow_iso()
    try:
        cur = conn.execute(
            """
            INSERT INTO users (email, password, created_at, updated_at)
            VALUES (?,?,?,?)
            """,
            (e, hash_password(password), now, now),
        )
    except sqlite3.IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        raise Conflict()
    row = get_user_by_id(conn, int(cur.lastrowid))
    assert row is not None
    return public_user(row)


def delete_user(conn: Any, user_id: int) -> bool:
    cur = conn.execute("DELETE FROM users WHERE id=?", (int(user_id),))
    return cur.rowcount > 0


def seed_default_user_if_needed(db: Database, cfg: Config) -> Optional[Dict[str, Any]]:
    """Create the demo account unless a user with that email already exists.

    Controlled via SEED_USER_EMAIL / SEED_USER_PASSWORD; clearing either
    one disables seeding.
    """

    email = normalize_email(cfg.SEED_USER_EMAIL)
    password = cfg.SEED_USER_PASSWORD
    if not email or not password:
        return None

    with db.transaction() as conn:
        if get_user_by_email(conn, email) is not None:
            return None
        return create_user(conn, email=email, password=password)
