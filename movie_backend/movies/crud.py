from __future__ import annotations

from typing import Any, Dict, List, Optional

from movie_backend.util.time import utcnow_iso

from .validation import MovieCreate, MovieUpdate


_COLUMNS = "id, title, publishing_year, poster, created_at, updated_at"


def _row(row: Any) -> Optional[Dict[str, Any]]:
    return dict(row) if row is not None else None


def count_movies(conn: Any) -> int:
    return int(conn.execute("SELECT COUNT(*) AS total FROM movies").fetchone()["total"])


def list_movies(conn: Any, *, limit: int, offset: int) -> List[Dict[str, Any]]:
    """Newest first; ``id`` breaks ties between equal timestamps."""
    rows = conn.execute(
        f"SELECT {_COLUMNS} FROM movies ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
        (int(limit), int(offset)),
    ).fetchall()
    return [dict(r) for r in rows]


def get_movie(conn: Any, movie_id: int) -> Optional[Dict[str, Any]]:
    return _row(
        conn.execute(f"SELECT {_COLUMNS} FROM movies WHERE id=?", (int(movie_id),)).fetchone()
    )


def insert_movie(conn: Any, movie: MovieCreate) -> Dict[str, Any]:
    now = utcnow_iso()
    cur = conn.execute(
        """
        INSERT INTO movies (title, publishing_year, poster, created_at, updated_at)
        VALUES (?,?,?,?,?)
        """,
        (movie.title, int(movie.publishing_year), movie.poster, now, now),
    )
    row = get_movie(conn, int(cur.lastrowid))
    assert row is not None
    return row


def update_movie(conn: Any, movie_id: int, update: MovieUpdate) -> bool:
    """Apply the supplied fields and refresh updated_at.

    Returns False when no row has this id.
    """
    cur = conn.execute(
        """
        UPDATE movies SET
            title = COALESCE(?, title),
            publishing_year = COALESCE(?, publishing_year),
            poster = COALESCE(?, poster),
            updated_at = ?
        WHERE id=?
        """,
        (update.title, update.publishing_year, update.poster, utcnow_iso(), int(movie_id)),
    )
    return cur.rowcount > 0


def delete_movie(conn: Any, movie_id: int) -> bool:
    cur = conn.execute("DELETE FROM movies WHERE id=?", (int(movie_id),))
    return cur.rowcount > 0
