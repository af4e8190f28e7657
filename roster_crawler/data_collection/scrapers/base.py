"""
Base classes and utilities for web scraping.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Generic, Optional, TypeVar

import aiohttp
from bs4 import BeautifulSoup

from ...common.cache import ResponseCache
from ...common.http import DEFAULT_UAS, build_headers
from ...common.logging_utils import get_logger
from ...common.parsing import soup_from_html

T = TypeVar("T")

# =============================================================================
# 1. SCRAPING CONFIGURATION
# =============================================================================


@dataclass
class ScrapingConfig:
    """Konfiguration für Web Scraping"""

    base_url: str
    user_agent: str = DEFAULT_UAS[0]
    headers: dict[str, str] = field(default_factory=dict)
    requests_per_second: float = 2.0
    max_retries: int = 3
    retry_initial_delay: float = 2.0
    timeout: int = 30
    cache_dir: Optional[str] = None
    cache_ttl_seconds: float = 24 * 3600


class FetchError(Exception):
    """Raised when a page could not be fetched after all retries."""

    def __init__(self, url: str, attempts: int, cause: Exception):
        super().__init__(f"Failed to fetch {url} after {attempts} attempts: {cause}")
        self.url = url
        self.attempts = attempts
        self.cause = cause


@dataclass
class ScrapeResult(Generic[T]):
    url: str
    data: T


# =============================================================================
# 2. POLITENESS & UTILITIES
# =============================================================================


class RateLimiter:
    """Spaces requests so that at most ``requests_per_second`` start per second."""

    def __init__(self, requests_per_second: float):
        self.min_interval = 1.0 / requests_per_second if requests_per_second > 0 else 0.0
        self._last_request: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        async with self._lock:
            loop = asyncio.get_running_loop()
            now = loop.time()
            if self._last_request is not None:
                remaining = self.min_interval - (now - self._last_request)
                if remaining > 0:
                    await asyncio.sleep(remaining)
                    now = loop.time()
            self._last_request = now


async def polite_delay(seconds: float) -> None:
    """Fixed pause between loop iterations; zero disables it."""
    if seconds > 0:
        await asyncio.sleep(seconds)


# =============================================================================
# 3. BASE SCRAPER
# =============================================================================


class BaseScraper(ABC):
    """Abstrakte Basisklasse für alle Scraper"""

    def __init__(self, config: ScrapingConfig, storage, name: str):
        self.config = config
        self.storage = storage
        self.name = name
        self.logger = get_logger(f"scraper.{name}")
        self.rate_limiter = RateLimiter(config.requests_per_second)
        self.cache: Optional[ResponseCache] = (
            ResponseCache(config.cache_dir, config.cache_ttl_seconds) if config.cache_dir else None
        )
        self.session: Optional[aiohttp.ClientSession] = None

    def default_headers(self) -> dict[str, str]:
        headers = build_headers(self.config.user_agent, header_randomize=False)
        headers.update(self.config.headers)
        return headers

    async def initialize(self):
        """Initialisiert den Scraper"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers=self.default_headers(),
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )

    async def cleanup(self):
        """Räumt Ressourcen auf"""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.cleanup()

    @abstractmethod
    async def scrape_data(self) -> list:
        """Hauptmethode zum Scrapen von Daten"""

    async def fetch_page(self, url: str) -> str:
        """Lädt eine Webseite herunter (Cache, Rate Limit, Retries mit Backoff)"""
        if self.cache:
            cached = await self.cache.get(url)
            if cached is not None:
                return cached

        if self.session is None:
            await self.initialize()

        attempts = max(1, self.config.max_retries)
        for attempt in range(attempts):
            try:
                await self.rate_limiter.wait()
                async with self.session.get(url) as response:
                    response.raise_for_status()
                    body = await response.text()
                if self.cache:
                    await self.cache.set(url, body)
                return body
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                self.logger.warning(f"Attempt {attempt + 1} failed: {e}", extra={"url": url})
                if attempt < attempts - 1:
                    await asyncio.sleep(self.config.retry_initial_delay * (2 ** attempt))
                else:
                    raise FetchError(url, attempts, e) from e
        raise RuntimeError("unreachable")

    async def fetch_bytes(self, url: str, headers: Optional[dict[str, str]] = None) -> tuple[int, bytes]:
        """Single binary request without retries; returns (status, body)."""
        if self.session is None:
            await self.initialize()
        await self.rate_limiter.wait()
        async with self.session.get(url, headers=headers) as response:
            body = await response.read()
            return response.status, body

    def parse_html(self, html: str) -> BeautifulSoup:
        """Parst HTML mit BeautifulSoup"""
        return soup_from_html(html)

    async def scrape(self, url: str, extract: Callable[[BeautifulSoup], T]) -> ScrapeResult[T]:
        """Fetch ``url``, parse it and run ``extract`` over the document."""
        html = await self.fetch_page(url)
        return ScrapeResult(url=url, data=extract(self.parse_html(html)))
