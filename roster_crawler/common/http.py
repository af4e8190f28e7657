import random
import time
from typing import Optional

import requests

from roster_crawler.common.logging_utils import get_logger

logger = get_logger(__name__)

# Shared defaults; the origin rejects default client identities
DEFAULT_UAS: list[str] = [
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
]
ACCEPT_LANGUAGES = [
    "en-US,en;q=0.9",
    "en-GB,en;q=0.9",
]
ACCEPT_HEADERS = [
    "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
]
ACCEPT_IMAGE = "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8"

RETRYABLE_STATUS = (429, 502, 503, 504)


def build_headers(
    user_agent: str,
    *,
    header_randomize: bool,
    accept_image: bool = False,
    referer: Optional[str] = None,
) -> dict[str, str]:
    headers = {"User-Agent": user_agent}
    if accept_image:
        headers["Accept"] = ACCEPT_IMAGE
    elif header_randomize:
        headers["Accept-Language"] = random.choice(ACCEPT_LANGUAGES)
        headers["Accept"] = random.choice(ACCEPT_HEADERS)
    else:
        headers["Accept"] = ACCEPT_HEADERS[0]
    if referer:
        headers["Referer"] = referer
    return headers


def build_image_headers(user_agent: str, referer: str) -> dict[str, str]:
    """Headers for asset requests: browser UA, image Accept, site Referer."""
    return build_headers(user_agent, header_randomize=False, accept_image=True, referer=referer)


def fetch_html(
    url: str,
    *,
    timeout: float,
    retries: int,
    backoff: float,
    user_agent: Optional[str] = None,
    header_randomize: bool = True,
) -> str:
    """Synchronous page fetch with retries, used by the one-off inspection tools."""
    session = requests.Session()
    ua = user_agent or DEFAULT_UAS[0]

    for attempt in range(1, max(1, retries) + 1):
        try:
            headers = build_headers(ua, header_randomize=header_randomize)
            logger.debug(f"GET {url} [attempt {attempt}] UA={ua[:50]}...")
            r = session.get(url, timeout=timeout, headers=headers)
            if r.status_code in RETRYABLE_STATUS:
                raise requests.HTTPError(f"HTTP {r.status_code}")
            r.raise_for_status()
            return r.text
        except (requests.Timeout, requests.ConnectionError, requests.HTTPError) as e:
            if attempt >= retries:
                raise
            sleep_s = (backoff ** (attempt - 1)) + random.uniform(0.2, 0.6)
            logger.warning(f"Attempt {attempt} failed: {e} -> sleep {sleep_s:.2f}s")
            time.sleep(sleep_s)
    raise RuntimeError("unreachable")
