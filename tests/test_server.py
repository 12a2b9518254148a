from __future__ import annotations

from fastapi.testclient import TestClient

from movie_backend.api.server import create_app
from movie_backend.config import load_config


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "OK"
    assert body["message"] == "Movie Backend API is running"
    assert body["timestamp"].endswith("Z")


def test_unknown_route_is_404(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json() == {"message": "Route not found"}


def test_unsupported_method_reads_as_missing_route(client, auth):
    r = client.put("/api/movies/1", headers=auth, json={"title": "x"})
    assert r.status_code == 404
    assert r.json() == {"message": "Route not found"}


def test_missing_upload_is_404(client):
    r = client.get("/uploads/poster-does-not-exist.png")
    assert r.status_code == 404


def test_cors_is_permissive(client):
    r = client.get("/api/health", headers={"Origin": "http://example.test"})
    assert r.headers.get("access-control-allow-origin") == "*"


def _app_with_failing_route(cfg):
    app = create_app(cfg)

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    return app


def test_unhandled_error_echoes_message_in_development(cfg):
    app = _app_with_failing_route(cfg)
    with TestClient(app, raise_server_exceptions=False) as c:
        r = c.get("/boom")
    assert r.status_code == 500
    assert r.json() == {"message": "Something went wrong!", "error": "kaboom"}


def test_unhandled_error_hides_message_in_production(tmp_path):
    cfg = load_config(
        DB_PATH=str(tmp_path / "prod.sqlite"),
        UPLOAD_DIR=str(tmp_path / "uploads"),
        APP_ENV="production",
    )
    app = _app_with_failing_route(cfg)
    with TestClient(app, raise_server_exceptions=False) as c:
        r = c.get("/boom")
    assert r.status_code == 500
    assert r.json() == {"message": "Something went wrong!"}


def test_startup_seeds_demo_user_once(cfg):
    from movie_backend.auth.crud import seed_default_user_if_needed

    app = create_app(cfg)
    with TestClient(app):
        db = app.state.db
        # Already created during startup.
        assert seed_default_user_if_needed(db, cfg) is None
        with db.transaction() as conn:
            n = conn.execute("SELECT COUNT(*) AS n FROM users").fetchone()["n"]
        assert n == 1


def test_database_closed_on_shutdown(app):
    with TestClient(app):
        assert app.state.db.is_open
    assert not app.state.db.is_open
