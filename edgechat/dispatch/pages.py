"""Static HTML served at / and /index.html."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

STATIC_DIR = Path(__file__).parent / "static"


@lru_cache(maxsize=1)
def index_html() -> str:
    return (STATIC_DIR / "index.html").read_text(encoding="utf-8")
