"""Create a user in the SQLite DB.

Usage:
  python scripts/create_user.py --email alice@example.com --password '...'

NOTE: This is intended for local/dev.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from movie_backend.auth.crud import create_user
from movie_backend.config import load_config
from movie_backend.db import Database


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    args = ap.parse_args()

    cfg = load_config()
    db = Database(cfg.DB_PATH).open()
    try:
        db.init_schema()
        with db.transaction() as conn:
            u = create_user(conn, email=args.email, password=args.password)
    finally:
        db.close()

    print("Created user:")
    print(u)


if __name__ == "__main__":
    main()
