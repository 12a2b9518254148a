from __future__ import annotations

from movie_backend.api.movies import coerce_page_param, parse_movie_id
from movie_backend.movies.uploads import poster_filename, remove_poster
from movie_backend.movies.validation import (
    MoviePayload,
    MovieUpdate,
    PosterFile,
    max_year,
    parse_year,
    validate_update,
)


def test_coerce_page_param():
    assert coerce_page_param(None, 8) == 8
    assert coerce_page_param("3", 8) == 3
    assert coerce_page_param(" 12abc", 8) == 12
    assert coerce_page_param("abc", 8) == 8
    assert coerce_page_param("0", 8) == 8
    assert coerce_page_param("-5", 8) == 8
    assert coerce_page_param("100000", 8) == 100000
    assert coerce_page_param("99999999999999999999", 8) == 2**63 - 1


def test_parse_movie_id():
    assert parse_movie_id("17") == 17
    assert parse_movie_id("17abc") is None
    assert parse_movie_id("-1") is None
    assert parse_movie_id("") is None
    assert parse_movie_id(str(2**63 - 1)) == 2**63 - 1
    assert parse_movie_id("99999999999999999999") is None


def test_parse_year():
    assert parse_year(1900) == 1900
    assert parse_year("2021") == 2021
    assert parse_year(str(max_year())) == max_year()
    assert parse_year(max_year() + 1) is None
    assert parse_year(1899) is None
    assert parse_year(True) is None
    assert parse_year(2021.0) is None
    assert parse_year("") is None
    assert parse_year(None) is None


def test_movie_update_is_empty():
    assert MovieUpdate().is_empty()
    assert not MovieUpdate(publishing_year=2000).is_empty()
    assert not MovieUpdate(poster="/uploads/x.png").is_empty()


def test_validate_update_accepts_either_year_spelling():
    update, errors = validate_update(MoviePayload(fields={"publishing_year": "1999"}), max_poster_bytes=10)
    assert errors == []
    assert update == MovieUpdate(publishing_year=1999)

    update, errors = validate_update(MoviePayload(fields={"publishingYear": 2001, "title": " X "}), max_poster_bytes=10)
    assert errors == []
    assert update == MovieUpdate(title="X", publishing_year=2001)


def test_validate_update_ignores_unknown_fields():
    update, errors = validate_update(MoviePayload(fields={"poster": "/etc/passwd", "rating": 5}), max_poster_bytes=10)
    assert errors == []
    assert update.is_empty()


def test_validate_update_checks_poster():
    payload = MoviePayload(poster=PosterFile(filename="x.exe", content_type="application/octet-stream", data=b"MZ"))
    _, errors = validate_update(payload, max_poster_bytes=10)
    assert errors == [{"field": "poster", "message": "Only image files are allowed"}]


def test_poster_filename_keeps_extension():
    name = poster_filename("Cover.JPG")
    assert name.startswith("poster-")
    assert name.endswith(".jpg")


def test_remove_poster_stays_inside_upload_dir(tmp_path):
    outside = tmp_path / "secret.png"
    outside.write_bytes(b"x")
    uploads = tmp_path / "uploads"
    uploads.mkdir()

    assert not remove_poster(str(uploads), "/uploads/../secret.png")
    assert outside.exists()
    assert not remove_poster(str(uploads), None)
    assert not remove_poster(str(uploads), "/static/x.png")
