from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from starlette.datastructures import UploadFile

from movie_backend.auth.deps import get_config, get_current_user
from movie_backend.config import Config
from movie_backend.db import Database, get_db
from movie_backend.errors import ApiError, NoFieldsProvided, NotFound, ValidationFailed
from movie_backend.movies.crud import (
    count_movies,
    delete_movie,
    get_movie,
    insert_movie,
    list_movies,
    update_movie,
)
from movie_backend.movies.uploads import remove_poster, save_poster
from movie_backend.movies.validation import MoviePayload, PosterFile, validate_create, validate_update


# Every movie route sits behind the auth gate; it runs before the body is read.
router = APIRouter(prefix="/api/movies", tags=["movies"], dependencies=[Depends(get_current_user)])

_LEADING_INT_RE = re.compile(r"^\s*([-+]?\d+)")
_ID_RE = re.compile(r"^\d+$")

# Largest value SQLite can bind as an INTEGER.
SQLITE_MAX_INT = 2**63 - 1


def coerce_page_param(raw: Optional[str], default: int) -> int:
    """Lenient query-string integer.

    Uses the leading integer of the value ("3abc" -> 3). Missing,
    non-numeric, zero and negative values fall back to ``default``.
    There is no upper bound beyond SQLite's integer range.
    """
    if raw is None:
        return default
    m = _LEADING_INT_RE.match(str(raw))
    if not m:
        return default
    value = int(m.group(1))
    if value < 1:
        return default
    return min(value, SQLITE_MAX_INT)


def parse_movie_id(raw: str) -> Optional[int]:
    s = (raw or "").strip()
    if not _ID_RE.match(s):
        return None
    value = int(s)
    # Ids past the INTEGER range cannot match any row.
    if value > SQLITE_MAX_INT:
        return None
    return value


async def read_movie_payload(request: Request) -> MoviePayload:
    """Read a JSON, urlencoded or multipart body into a MoviePayload.

    Only a file sent under the ``poster`` field is kept; its bytes are read
    up to one byte past the configured limit so oversize files can be
    rejected without buffering them whole.
    """
    ctype = (request.headers.get("content-type") or "").lower()

    if ctype.startswith("application/json"):
        body = await request.body()
        if not body.strip():
            return MoviePayload()
        try:
            data = json.loads(body)
        except ValueError:
            raise ValidationFailed([{"field": "body", "message": "Malformed JSON body"}])
        if not isinstance(data, dict):
            raise ValidationFailed([{"field": "body", "message": "Expected a JSON object"}])
        return MoviePayload(fields=data)

    if ctype.startswith("multipart/form-data") or ctype.startswith("application/x-www-form-urlencoded"):
        cfg: Config = request.app.state.cfg
        form = await request.form()
        fields: Dict[str, Any] = {}
        poster: Optional[PosterFile] = None
        try:
            for key, value in form.multi_items():
                if isinstance(value, UploadFile):
                    if key == "poster" and value.filename and poster is None:
                        data = await value.read(cfg.UPLOAD_MAX_BYTES + 1)
                        poster = PosterFile(
                            filename=value.filename,
                            content_type=value.content_type or "",
                            data=data,
                        )
                    continue
                fields.setdefault(key, value)
        finally:
            await form.close()
        return MoviePayload(fields=fields, poster=poster)

    return MoviePayload()


@router.get("")
def list_movies_endpoint(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    cfg: Config = Depends(get_config),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    page_n = coerce_page_param(page, 1)
    limit_n = coerce_page_param(limit, cfg.PAGE_SIZE_DEFAULT)
    offset = min((page_n - 1) * limit_n, SQLITE_MAX_INT)

    with db.transaction() as conn:
        total = count_movies(conn)
        movies = list_movies(conn, limit=limit_n, offset=offset)

    return {
        "movies": movies,
        "pagination": {
            "currentPage": page_n,
            "totalPages": math.ceil(total / limit_n),
            "totalItems": total,
            "itemsPerPage": limit_n,
        },
    }


@router.get("/{movie_id}")
def get_movie_endpoint(movie_id: str, db: Database = Depends(get_db)) -> Dict[str, Any]:
    mid = parse_movie_id(movie_id)
    if mid is None:
        raise NotFound()
    with db.transaction() as conn:
        movie = get_movie(conn, mid)
    if movie is None:
        raise NotFound()
    return movie


@router.post("", status_code=201)
def create_movie_endpoint(
    payload: MoviePayload = Depends(read_movie_payload),
    cfg: Config = Depends(get_config),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    movie, errors = validate_create(payload, max_poster_bytes=cfg.UPLOAD_MAX_BYTES)
    if errors:
        raise ValidationFailed(errors)
    assert movie is not None

    if payload.poster is not None:
        movie.poster = save_poster(cfg.UPLOAD_DIR, payload.poster)

    try:
        with db.transaction() as conn:
            return insert_movie(conn, movie)
    except ApiError:
        remove_poster(cfg.UPLOAD_DIR, movie.poster)
        raise


@router.patch("/{movie_id}")
def update_movie_endpoint(
    movie_id: str,
    payload: MoviePayload = Depends(read_movie_payload),
    cfg: Config = Depends(get_config),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    update, errors = validate_update(payload, max_poster_bytes=cfg.UPLOAD_MAX_BYTES)
    if errors:
        raise ValidationFailed(errors)
    if update.is_empty() and payload.poster is None:
        raise NoFieldsProvided()

    mid = parse_movie_id(movie_id)
    if mid is None:
        raise NotFound()

    if payload.poster is not None:
        update.poster = save_poster(cfg.UPLOAD_DIR, payload.poster)

    try:
        with db.transaction() as conn:
            previous = get_movie(conn, mid)
            if not update_movie(conn, mid, update):
                raise NotFound()
            movie = get_movie(conn, mid)
    except ApiError:
        remove_poster(cfg.UPLOAD_DIR, update.poster)
        raise

    # The replaced poster file is no longer referenced.
    old_poster = (previous or {}).get("poster")
    if update.poster and old_poster and old_poster != update.poster:
        remove_poster(cfg.UPLOAD_DIR, old_poster)

    assert movie is not None
    return movie


@router.delete("/{movie_id}")
def delete_movie_endpoint(
    movie_id: str,
    cfg: Config = Depends(get_config),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    mid = parse_movie_id(movie_id)
    if mid is None:
        raise NotFound()

    with db.transaction() as conn:
        existing = get_movie(conn, mid)
        if not delete_movie(conn, mid):
            raise NotFound()

    if existing is not None:
        remove_poster(cfg.UPLOAD_DIR, existing.get("poster"))

    return {"message": "Movie deleted successfully"}
