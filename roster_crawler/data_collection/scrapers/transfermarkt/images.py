"""Player portrait resolution and download.

Candidate URLs come either from the profile page (``extract_image_url``) or
from the id-only template below, used when profile scraping is skipped. A
failed request is retried once against ``alternate_image_url``; failing that,
the player simply has no local image.
"""
from __future__ import annotations

import asyncio
import re
from typing import Optional

import aiohttp

from ....common.http import build_image_headers
from ....common.logging_utils import get_logger
from ....domain.models import Player

logger = get_logger(__name__)

MIN_IMAGE_BYTES = 1000
_EXTENSION_RE = re.compile(r"(\.[A-Za-z0-9]+)(\?.*)?$")


def construct_image_url(player_id: str, image_host: str) -> str:
    return f"{image_host}/portrait/header/{player_id}.jpg"


def alternate_image_url(url: str) -> str:
    """Insert ``-1`` before the extension.

    Heuristic for the timestamp-suffixed file names the image host sometimes
    serves (``<id>-<ts>.jpg``); not a documented contract of the site.
    """
    return _EXTENSION_RE.sub(lambda m: f"-1{m.group(1)}{m.group(2) or ''}", url, count=1)


class ImageResolver:
    """Fetches portrait bytes through a scraper's session and rate limiter."""

    def __init__(
        self,
        scraper,
        user_agent: str,
        referer: str,
        min_bytes: int = MIN_IMAGE_BYTES,
    ):
        self.scraper = scraper
        self.headers = build_image_headers(user_agent, referer)
        self.min_bytes = min_bytes

    async def _fetch_bytes(self, url: str) -> Optional[bytes]:
        try:
            status, body = await self.scraper.fetch_bytes(url, headers=self.headers)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Image request failed for {url}: {e}")
            return None
        if not 200 <= status < 300:
            logger.debug(f"Image request for {url} returned HTTP {status}")
            return None
        return body

    async def resolve(self, candidate_url: Optional[str]) -> Optional[bytes]:
        if not candidate_url:
            return None
        body = await self._fetch_bytes(candidate_url)
        if body is None:
            body = await self._fetch_bytes(alternate_image_url(candidate_url))
        if body is None:
            return None
        if len(body) < self.min_bytes:
            # placeholder / error image
            return None
        return body

    async def download(self, player: Player, storage) -> Optional[str]:
        """Resolve ``player.image_url`` and persist it; returns the local path or None."""
        data = await self.resolve(player.image_url)
        if data is None:
            return None
        return await storage.save_image(player.team_slug, player.id, data)
