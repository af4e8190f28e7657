"""
Crawl orchestration tests with page fetches served from in-memory fixtures
"""

import json
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from roster_crawler.data_collection.scrapers.base import FetchError
from roster_crawler.data_collection.scrapers.transfermarkt.scraper import TransfermarktScraper
from roster_crawler.storage.manager import StorageManager

BASE_URL = "https://www.transfermarkt.com"
SQUAD_1 = f"{BASE_URL}/club-1/kader/verein/101"
SQUAD_2 = f"{BASE_URL}/club-2/kader/verein/102"
SAKA_PROFILE = f"{BASE_URL}/bukayo-saka/profil/spieler/433177"
PORTRAIT = b"\xff\xd8" + b"x" * 2048


def page_server(pages: dict):
    """side_effect for ``fetch_page``: serves html, raises exceptions stored as values."""

    async def fetch_page(url):
        value = pages.get(url)
        if value is None:
            raise FetchError(url, 3, aiohttp.ClientConnectionError("404 Not Found"))
        if isinstance(value, Exception):
            raise value
        return value

    return fetch_page


@pytest.fixture
def pages(test_settings, build_listing, squad_html, profile_html):
    return {
        test_settings.competition_url: build_listing(unique=2),
        SQUAD_1: squad_html,
        SQUAD_2: squad_html.replace("/profil/spieler/", "/unused/"),
        f"{BASE_URL}/david-raya/profil/spieler/262749": profile_html,
        f"{BASE_URL}/william-saliba/profil/spieler/495666": profile_html,
        SAKA_PROFILE: profile_html,
    }


@pytest.fixture
def scraper(storage, test_settings):
    return TransfermarktScraper(storage, test_settings)


async def run_crawl(scraper, pages, image_response=(200, PORTRAIT)):
    with patch.object(scraper, "fetch_page", side_effect=page_server(pages)), patch.object(
        scraper, "fetch_bytes", new=AsyncMock(return_value=image_response)
    ) as fetch_bytes:
        players = await scraper.scrape_data()
    return players, fetch_bytes


@pytest.mark.asyncio
async def test_full_crawl_writes_players_and_images(scraper, pages, storage):
    players, _ = await run_crawl(scraper, pages)

    assert [p.id for p in players] == ["262749", "495666", "433177"]
    saka = players[2]
    assert saka.team == "Club 1 FC"
    assert saka.team_slug == "club-1"
    assert saka.market_value == "€75.00m"
    assert saka.citizenship == ["Sweden", "Finland"]
    assert saka.local_image_path == "public/images/players/club-1/433177.jpg"
    assert storage.image_path("club-1", "433177").read_bytes() == PORTRAIT

    combined = json.loads((storage.output_dir / "premier-league.json").read_text(encoding="utf-8"))
    assert len(combined) == 3
    assert combined[0]["profileUrl"] == f"{BASE_URL}/david-raya/profil/spieler/262749"
    assert (storage.output_dir / "club-1.json").exists()


@pytest.mark.asyncio
async def test_summary_counts(scraper, pages):
    await run_crawl(scraper, pages)

    summary = scraper.summary.as_dict()
    assert summary["teams_discovered"] == 2
    assert summary["players_discovered"] == 3
    assert summary["players_profiled"] == 3
    assert summary["images_downloaded"] == 3
    assert summary["images_failed"] == 0
    assert summary["per_team"] == {"club-1": {"players": 3, "with_images": 3}}


@pytest.mark.asyncio
async def test_listing_failure_aborts_run(scraper, pages, storage, test_settings):
    del pages[test_settings.competition_url]

    with pytest.raises(FetchError):
        await run_crawl(scraper, pages)
    assert not (storage.output_dir / "premier-league.json").exists()


@pytest.mark.asyncio
async def test_squad_failure_skips_team(scraper, pages, build_listing, test_settings):
    pages[test_settings.competition_url] = build_listing(unique=3)

    players, _ = await run_crawl(scraper, pages)

    # club-3 squad page is not served
    assert scraper.summary.team_failures == 1
    assert {p.team_slug for p in players} == {"club-1"}


@pytest.mark.asyncio
async def test_profile_failure_skips_player(scraper, pages):
    pages[SAKA_PROFILE] = FetchError(SAKA_PROFILE, 3, aiohttp.ClientConnectionError("reset"))

    players, _ = await run_crawl(scraper, pages)

    assert [p.id for p in players] == ["262749", "495666"]
    assert scraper.summary.profile_failures == 1


@pytest.mark.asyncio
async def test_image_failure_keeps_player_without_local_path(scraper, pages):
    players, fetch_bytes = await run_crawl(scraper, pages, image_response=(404, b""))

    assert len(players) == 3
    assert all(p.local_image_path is None for p in players)
    assert scraper.summary.images_failed == 3
    # original + one alternate per player
    assert fetch_bytes.await_count == 6


@pytest.mark.asyncio
async def test_skip_profiles_uses_templated_image_urls(storage, test_settings, pages):
    fast = TransfermarktScraper(storage, test_settings.model_copy(update={"scrape_profiles": False}))

    players, fetch_bytes = await run_crawl(fast, pages)

    assert [p.image_url for p in players] == [
        "https://img.a.transfermarkt.technology/portrait/header/262749.jpg",
        "https://img.a.transfermarkt.technology/portrait/header/495666.jpg",
        "https://img.a.transfermarkt.technology/portrait/header/433177.jpg",
    ]
    assert all(p.market_value is None for p in players)
    assert fast.summary.players_profiled == 0
    assert fetch_bytes.await_count == 3


@pytest.mark.asyncio
async def test_profile_without_portrait_falls_back_to_template(scraper, pages):
    pages[SAKA_PROFILE] = "<html><body><p>Date of birth/Age: 05/09/2001 (24)</p></body></html>"

    players, _ = await run_crawl(scraper, pages)

    saka = players[2]
    assert saka.image_url == "https://img.a.transfermarkt.technology/portrait/header/433177.jpg"
    assert saka.age == 24


@pytest.mark.asyncio
async def test_images_dir_outside_project_root(tmp_path, test_settings, pages):
    outside = tmp_path.parent / f"{tmp_path.name}-outside-images"
    cfg = test_settings.model_copy(update={"scrape_profiles": False, "images_dir": str(outside)})
    storage = StorageManager.from_settings(cfg)

    players, _ = await run_crawl(TransfermarktScraper(storage, cfg), pages)

    assert (storage.output_dir / "premier-league.json").exists()
    assert players[0].local_image_path == (outside / "club-1" / "262749.jpg").as_posix()
    assert (outside / "club-1" / "262749.jpg").read_bytes() == PORTRAIT


@pytest.mark.asyncio
async def test_image_write_error_is_not_fatal(scraper, pages, storage):
    with patch.object(storage, "save_image", new=AsyncMock(side_effect=PermissionError("read-only"))):
        players, _ = await run_crawl(scraper, pages)

    assert len(players) == 3
    assert all(p.local_image_path is None for p in players)
    assert scraper.summary.images_failed == 3
    assert (storage.output_dir / "premier-league.json").exists()
