import os
from dataclasses import dataclass
from typing import List, Optional

# Optional: load a local .env file if present.
try:
    from dotenv import load_dotenv

    load_dotenv()
except Exception:
    # If python-dotenv isn't installed or .env isn't present, that's fine.
    pass


def _env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Parse a boolean environment variable.

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    """

    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


def _env_int(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    return int(raw)


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    Values are read when the instance is created, so tests can tweak
    os.environ (or pass keyword overrides) before calling load_config().

    IMPORTANT: Provide secrets via environment variables or a .env file.
    """

    # -----------------
    # Server
    # -----------------
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # development | production. Outside production, 500 responses echo the
    # exception message back to the client.
    APP_ENV: str = "development"

    # -----------------
    # Storage
    # -----------------
    DB_PATH: str = "./database.sqlite"
    UPLOAD_DIR: str = "./uploads"
    UPLOAD_MAX_BYTES: int = 5 * 1024 * 1024

    # -----------------
    # Auth (JWT)
    # -----------------
    # NOTE: In dev, this defaults to a fixed string so you can get started.
    # In production, you MUST set AUTH_JWT_SECRET to a strong random value.
    AUTH_JWT_SECRET: str = "dev_change_me"
    AUTH_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours

    # Demo account created at startup when missing. Clear either value to skip.
    SEED_USER_EMAIL: str = "admin@example.com"
    SEED_USER_PASSWORD: str = "password123"

    # -----------------
    # HTTP
    # -----------------
    # Comma separated; "*" allows any origin.
    CORS_ALLOW_ORIGINS: str = "*"
    PAGE_SIZE_DEFAULT: int = 8

    @property
    def is_production(self) -> bool:
        return (self.APP_ENV or "").strip().lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in (self.CORS_ALLOW_ORIGINS or "").split(",") if o.strip()]


def load_config(**overrides) -> Config:
    env = os.environ
    values = dict(
        HOST=env.get("HOST", "0.0.0.0"),
        PORT=_env_int("PORT", 3001),
        APP_ENV=env.get("APP_ENV", "development"),
        DB_PATH=env.get("MOVIES_DB_PATH", "./database.sqlite"),
        UPLOAD_DIR=env.get("UPLOAD_DIR", "./uploads"),
        UPLOAD_MAX_BYTES=_env_int("UPLOAD_MAX_BYTES", 5 * 1024 * 1024),
        AUTH_JWT_SECRET=env.get("AUTH_JWT_SECRET") or env.get("JWT_SECRET") or "dev_change_me",
        AUTH_TOKEN_EXPIRE_MINUTES=_env_int("AUTH_TOKEN_EXPIRE_MINUTES", 1440),
        SEED_USER_EMAIL=env.get("SEED_USER_EMAIL", "admin@example.com"),
        SEED_USER_PASSWORD=env.get("SEED_USER_PASSWORD", "password123"),
        CORS_ALLOW_ORIGINS=env.get("CORS_ALLOW_ORIGINS", "*"),
        PAGE_SIZE_DEFAULT=_env_int("PAGE_SIZE_DEFAULT", 8),
    )
    if _env_bool("PRODUCTION", None) is True:
        values["APP_ENV"] = "production"
    values.update(overrides)
    return Config(**values)
