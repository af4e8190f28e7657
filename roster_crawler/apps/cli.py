"""
Command-line interface for the roster crawler.
Usage examples:
  python -m roster_crawler.apps.cli crawl
  python -m roster_crawler.apps.cli crawl --skip-profiles --no-cache
  python -m roster_crawler.apps.cli profile https://www.transfermarkt.com/erling-haaland/profil/spieler/418560
  python -m roster_crawler.apps.cli inspect https://www.transfermarkt.com/premier-league/startseite/wettbewerb/GB1
  python -m roster_crawler.apps.cli summary
"""

import asyncio
import json
from typing import Optional

import click

from roster_crawler.common.cache import ResponseCache
from roster_crawler.common.http import fetch_html
from roster_crawler.common.logging_utils import configure_logging, get_logger
from roster_crawler.common.parsing import extract_entity_id, normalize_text, soup_from_html
from roster_crawler.core.config import Settings, settings
from roster_crawler.data_collection.scrapers.transfermarkt.discovery import PLAYER_KIND
from roster_crawler.data_collection.scrapers.transfermarkt.profile_parser import (
    body_text,
    extract_fields,
)
from roster_crawler.data_collection.scrapers.transfermarkt.scraper import TransfermarktScraper
from roster_crawler.domain.models import PlayerReference, Team
from roster_crawler.storage.manager import StorageManager, group_by_team

logger = get_logger(__name__)

# Candidate selectors probed by `inspect` when none are given
DEFAULT_INSPECT_SELECTORS = (
    "table.items tbody tr",
    'a[href*="/startseite/verein/"]',
    'a[href*="/profil/spieler/"]',
    "h1.data-header__headline-wrapper",
    "a.data-header__market-value-wrapper",
    ".info-table .info-table__content",
    ".data-header__profile-image",
    'img[src*="portrait"], img[data-src*="portrait"]',
)


async def cmd_crawl(cfg: Settings) -> int:
    storage = StorageManager.from_settings(cfg)
    async with TransfermarktScraper(storage, cfg) as scraper:
        try:
            await scraper.scrape_data()
        except Exception as e:
            logger.error(f"Crawl aborted: {e}", exc_info=True)
            return 1
    return 0


async def cmd_profile(url: str, cfg: Settings) -> dict:
    storage = StorageManager.from_settings(cfg)
    async with TransfermarktScraper(storage, cfg) as scraper:
        ref = PlayerReference(
            id=extract_entity_id(url, PLAYER_KIND),
            name="",
            profile_url=url,
        )
        team = Team(name="", canonical_url="", slug="", id="")
        player = await scraper.scrape_player_profile(ref, team)
    return player.to_json_dict()


@click.group()
@click.option("--log-level", default=None, help="Overrides LOG_LEVEL / settings.log_level.")
def cli(log_level: Optional[str] = None):
    """Transfermarkt roster crawler"""
    configure_logging(
        service="roster-crawler",
        level=log_level or settings.log_level,
        log_file=settings.log_file_path,
    )


@cli.command()
@click.option("--skip-profiles", is_flag=True, help="Only discover players; use templated image URLs.")
@click.option("--no-cache", is_flag=True, help="Bypass the HTTP response cache.")
@click.option("--clear-cache", is_flag=True, help="Delete cached responses before crawling.")
@click.option("--output-dir", default=None, help="Directory for the JSON artifacts.")
@click.option("--images-dir", default=None, help="Directory for downloaded portraits.")
def crawl(
    skip_profiles: bool,
    no_cache: bool,
    clear_cache: bool,
    output_dir: Optional[str],
    images_dir: Optional[str],
):
    """Crawl teams, players, profiles and images"""
    overrides = {}
    if skip_profiles:
        overrides["scrape_profiles"] = False
    if no_cache:
        overrides["cache_enabled"] = False
    if output_dir:
        overrides["output_dir"] = output_dir
    if images_dir:
        overrides["images_dir"] = images_dir
    cfg = settings.model_copy(update=overrides)
    if clear_cache:
        removed = ResponseCache(cfg.cache_dir, cfg.cache_ttl_hours * 3600).clear()
        logger.info(f"Removed {removed} cached responses from {cfg.cache_dir}")
    raise SystemExit(asyncio.run(cmd_crawl(cfg)))


@cli.command()
@click.argument("url")
def profile(url: str):
    """Scrape a single player profile and print it as JSON"""
    data = asyncio.run(cmd_profile(url, settings))
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


@cli.command()
@click.argument("url")
@click.option("--selector", "selectors", multiple=True, help="CSS selector to count (repeatable).")
@click.option("--fields", "show_fields", is_flag=True, help="Also run the profile field rules.")
def inspect(url: str, selectors: tuple[str, ...], show_fields: bool):
    """Fetch a page and report what the selectors / field rules see"""
    html = fetch_html(
        url,
        timeout=settings.scraping_timeout,
        retries=settings.scraping_max_retries,
        backoff=settings.retry_initial_delay_seconds,
        user_agent=settings.user_agent,
    )
    soup = soup_from_html(html)
    click.echo(f"Fetched {len(html)} bytes from {url}")
    for selector in selectors or DEFAULT_INSPECT_SELECTORS:
        elements = soup.select(selector)
        click.echo(f"\n{selector}: {len(elements)} elements")
        for el in elements[:5]:
            click.echo(f"  Text: {normalize_text(el.get_text())[:100]}")
    if show_fields:
        click.echo(json.dumps(extract_fields(body_text(soup)), ensure_ascii=False, indent=2))


@cli.command()
def summary():
    """Print per-team counts from the last crawl's JSON output"""
    storage = StorageManager.from_settings(settings)
    try:
        players = storage.load_players(settings.combined_output_name)
    except FileNotFoundError:
        click.echo(f"No crawl output found in {storage.output_dir}")
        raise SystemExit(1)
    click.echo(f"{len(players)} players")
    for team_slug, team_players in group_by_team(players).items():
        with_images = sum(1 for p in team_players if p.local_image_path)
        click.echo(f"  {team_slug}: {len(team_players)} players ({with_images} with images)")


def main():
    cli()


if __name__ == "__main__":
    main()
