from __future__ import annotations

from typing import Dict, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from movie_backend.api.server import create_app
from movie_backend.config import Config, load_config

SEED_EMAIL = "admin@example.com"
SEED_PASSWORD = "password123"
JWT_SECRET = "test-secret"

# Smallest valid PNG (1x1 transparent pixel).
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6300010000000500010d0a2db40000000049454e44ae426082"
)


@pytest.fixture
def cfg(tmp_path) -> Config:
    return load_config(
        DB_PATH=str(tmp_path / "movies.sqlite"),
        UPLOAD_DIR=str(tmp_path / "uploads"),
        APP_ENV="development",
        AUTH_JWT_SECRET=JWT_SECRET,
        AUTH_TOKEN_EXPIRE_MINUTES=60,
        SEED_USER_EMAIL=SEED_EMAIL,
        SEED_USER_PASSWORD=SEED_PASSWORD,
        CORS_ALLOW_ORIGINS="*",
        PAGE_SIZE_DEFAULT=8,
        UPLOAD_MAX_BYTES=1024,
    )


@pytest.fixture
def app(cfg: Config) -> FastAPI:
    return create_app(cfg)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def token(client: TestClient) -> str:
    r = client.post("/api/auth/login", json={"email": SEED_EMAIL, "password": SEED_PASSWORD})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


@pytest.fixture
def auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
