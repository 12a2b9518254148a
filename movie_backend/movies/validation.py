"""Input validation for movie create/update payloads.

Validators collect every problem into a list of ``{"field", "message"}``
dicts instead of stopping at the first one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Dict, List, Optional, Tuple

from movie_backend.util.time import current_year


MIN_YEAR = 1900
YEAR_HORIZON = 10  # years past the current one that are still accepted

ALLOWED_POSTER_EXTS = (".jpeg", ".jpg", ".png", ".gif")
_ALLOWED_TYPES_RE = re.compile(r"jpeg|jpg|png|gif")
_INT_RE = re.compile(r"^[-+]?[0-9]+$")


@dataclass
class PosterFile:
    filename: str
    content_type: str
    data: bytes


@dataclass
class MoviePayload:
    """Raw request body of a create/update call, before validation."""

    fields: Dict[str, Any] = field(default_factory=dict)
    poster: Optional[PosterFile] = None

    def has_title(self) -> bool:
        return "title" in self.fields

    def has_year(self) -> bool:
        return "publishingYear" in self.fields or "publishing_year" in self.fields

    @property
    def title(self) -> Any:
        return self.fields.get("title")

    @property
    def year(self) -> Any:
        if "publishingYear" in self.fields:
            return self.fields["publishingYear"]
        return self.fields.get("publishing_year")


@dataclass
class MovieCreate:
    title: str
    publishing_year: int
    poster: Optional[str] = None


@dataclass
class MovieUpdate:
    """Fields of a partial update; ``None`` means "leave unchanged"."""

    title: Optional[str] = None
    publishing_year: Optional[int] = None
    poster: Optional[str] = None

    def is_empty(self) -> bool:
        return self.title is None and self.publishing_year is None and self.poster is None


def max_year() -> int:
    return current_year() + YEAR_HORIZON


def clean_title(value: Any) -> Optional[str]:
    """Trimmed title, or None when blank."""
    if value is None:
        return None
    t = str(value).strip()
    return t or None


def parse_year(value: Any) -> Optional[int]:
    """Integer year within [MIN_YEAR, max_year()], or None when invalid."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        year = value
    elif isinstance(value, str) and _INT_RE.match(value.strip()):
        year = int(value.strip())
    else:
        return None
    if year < MIN_YEAR or year > max_year():
        return None
    return year


def poster_problem(poster: PosterFile, *, max_bytes: int) -> Optional[str]:
    ext = PurePath(poster.filename or "").suffix.lower()
    mimetype = (poster.content_type or "").lower()
    if ext not in ALLOWED_POSTER_EXTS or not _ALLOWED_TYPES_RE.search(mimetype):
        return "Only image files are allowed"
    if len(poster.data) > max_bytes:
        return f"Poster must be at most {max_bytes} bytes"
    return None


def validate_create(payload: MoviePayload, *, max_poster_bytes: int) -> Tuple[Optional[MovieCreate], List[Dict[str, str]]]:
    errors: List[Dict[str, str]] = []

    title = clean_title(payload.title)
    if title is None:
        errors.append({"field": "title", "message": "Title is required"})

    year = parse_year(payload.year)
    if year is None:
        errors.append({"field": "publishing_year", "message": "Publishing year must be a valid year"})

    if payload.poster is not None:
        problem = poster_problem(payload.poster, max_bytes=max_poster_bytes)
        if problem:
            errors.append({"field": "poster", "message": problem})

    if errors:
        return None, errors
    assert title is not None and year is not None
    return MovieCreate(title=title, publishing_year=year), errors


def validate_update(payload: MoviePayload, *, max_poster_bytes: int) -> Tuple[MovieUpdate, List[Dict[str, str]]]:
    """Validate only the fields that are present.

    The returned MovieUpdate never carries a poster path; the caller sets
    it after the uploaded file has been stored.
    """
    errors: List[Dict[str, str]] = []
    update = MovieUpdate()

    if payload.has_title():
        update.title = clean_title(payload.title)
        if update.title is None:
            errors.append({"field": "title", "message": "Title cannot be empty"})

    if payload.has_year():
        update.publishing_year = parse_year(payload.year)
        if update.publishing_year is None:
            errors.append({"field": "publishing_year", "message": "Publishing year must be a valid year"})

    if payload.poster is not None:
        problem = poster_problem(payload.poster, max_bytes=max_poster_bytes)
        if problem:
            errors.append({"field": "poster", "message": problem})

    return update, errors
