import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import uvicorn

from movie_backend.config import load_config


def main() -> None:
    cfg = load_config()
    print(f"Movie Backend API is running on http://{cfg.HOST}:{cfg.PORT}")
    print(f"Health check: http://{cfg.HOST}:{cfg.PORT}/api/health")
    uvicorn.run("movie_backend.api.server:app", host=cfg.HOST, port=cfg.PORT, reload=False)


if __name__ == "__main__":
    main()
