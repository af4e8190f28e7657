"""On-disk HTTP response cache keyed by request URL with a freshness window."""
from __future__ import annotations

import hashlib
import time
from pathlib import Path
from typing import Optional

import aiofiles

from roster_crawler.common.logging_utils import get_logger

logger = get_logger(__name__)


class ResponseCache:
    """Stores response bodies as ``<sha256(url)>.html`` under ``cache_dir``.

    Entries older than ``ttl_seconds`` (by file mtime) are treated as missing.
    """

    def __init__(self, cache_dir: str | Path, ttl_seconds: float):
        self.cache_dir = Path(cache_dir)
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key_for(url: str) -> str:
        return hashlib.sha256(url.encode("utf-8")).hexdigest()

    def path_for(self, url: str) -> Path:
        return self.cache_dir / f"{self.key_for(url)}.html"

    def is_fresh(self, path: Path) -> bool:
        try:
            age = time.time() - path.stat().st_mtime
        except FileNotFoundError:
            return False
        return age < self.ttl_seconds

    async def get(self, url: str) -> Optional[str]:
        path = self.path_for(url)
        if not self.is_fresh(path):
            return None
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            body = await f.read()
        logger.debug(f"Cache hit for {url}")
        return body

    async def set(self, url: str, body: str) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path_for(url), "w", encoding="utf-8") as f:
            await f.write(body)

    def clear(self) -> int:
        removed = 0
        if not self.cache_dir.is_dir():
            return removed
        for path in self.cache_dir.glob("*.html"):
            path.unlink()
            removed += 1
        return removed
