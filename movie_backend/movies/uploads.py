from __future__ import annotations

import random
import time
from pathlib import Path, PurePath
from typing import Optional

from .validation import PosterFile


PUBLIC_PREFIX = "/uploads/"


def _debug(msg: str) -> None:
    print(f"[uploads] {msg}")


def poster_filename(original_name: str) -> str:
    """poster-<millis>-<random><ext>, unique enough for a single process."""
    ext = PurePath(original_name or "").suffix.lower()
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9 - 1)}"
    return f"poster-{suffix}{ext}"


def save_poster(upload_dir: str, poster: PosterFile) -> str:
    """Write the poster to disk and return its public path."""
    root = Path(upload_dir)
    root.mkdir(parents=True, exist_ok=True)
    name = poster_filename(poster.filename)
    (root / name).write_bytes(poster.data)
    return PUBLIC_PREFIX + name


def remove_poster(upload_dir: str, public_path: Optional[str]) -> bool:
    """Delete a stored poster given its public path. Missing files are ignored."""
    if not public_path or not public_path.startswith(PUBLIC_PREFIX):
        return False
    name = PurePath(public_path[len(PUBLIC_PREFIX) :]).name
    if not name:
        return False
    target = Path(upload_dir) / name
    try:
        target.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        _debug(f"Could not remove {target}: {e}")
        return False
