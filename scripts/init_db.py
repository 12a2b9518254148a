import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from movie_backend.auth.crud import seed_default_user_if_needed
from movie_backend.config import load_config
from movie_backend.db import Database


def main() -> None:
    cfg = load_config()
    db = Database(cfg.DB_PATH).open()
    try:
        db.init_schema()
        seeded = seed_default_user_if_needed(db, cfg)
    finally:
        db.close()

    print(f"DB initialized: {cfg.DB_PATH}")
    if seeded:
        print(f"Default user created: {seeded['email']}")


if __name__ == "__main__":
    main()
