"""
Transfermarkt Scraper
Crawls one competition: clubs -> squads -> player profiles -> portraits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ....core.config import Settings, settings as default_settings
from ....domain.models import Player, PlayerReference, Team
from ....storage.manager import StorageManager
from ..base import BaseScraper, ScrapingConfig, polite_delay
from .discovery import extract_player_refs, extract_teams, squad_url
from .images import ImageResolver, construct_image_url
from .profile_parser import parse_profile


@dataclass
class CrawlSummary:
    teams_discovered: int = 0
    team_failures: int = 0
    players_discovered: int = 0
    players_profiled: int = 0
    profile_failures: int = 0
    images_downloaded: int = 0
    images_failed: int = 0
    per_team: dict[str, dict[str, int]] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {
            "teams_discovered": self.teams_discovered,
            "team_failures": self.team_failures,
            "players_discovered": self.players_discovered,
            "players_profiled": self.players_profiled,
            "profile_failures": self.profile_failures,
            "images_downloaded": self.images_downloaded,
            "images_failed": self.images_failed,
            "per_team": self.per_team,
        }


class TransfermarktScraper(BaseScraper):
    """Scraper für Transfermarkt Kader- und Spielerprofile"""

    DESCRIPTION = "Premier League clubs, squads, player profiles and portraits from transfermarkt.com"

    def __init__(self, storage: StorageManager, settings: Optional[Settings] = None):
        cfg = settings or default_settings
        config = ScrapingConfig(
            base_url=cfg.base_url,
            user_agent=cfg.user_agent,
            requests_per_second=cfg.requests_per_second,
            max_retries=cfg.scraping_max_retries,
            retry_initial_delay=cfg.retry_initial_delay_seconds,
            timeout=cfg.scraping_timeout,
            cache_dir=cfg.cache_dir if cfg.cache_enabled else None,
            cache_ttl_seconds=cfg.cache_ttl_hours * 3600,
        )
        super().__init__(config, storage, "transfermarkt")
        self.settings = cfg
        self.images = ImageResolver(
            self,
            user_agent=cfg.user_agent,
            referer=cfg.base_url,
            min_bytes=cfg.min_image_bytes,
        )
        self.summary = CrawlSummary()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def scrape_teams(self) -> list[Team]:
        """Teams of the competition. A failure here aborts the run."""
        self.logger.info(f"Scraping teams from {self.settings.competition_url}")
        result = await self.scrape(
            self.settings.competition_url,
            lambda soup: extract_teams(soup, self.config.base_url, limit=self.settings.league_size),
        )
        teams = result.data
        self.summary.teams_discovered = len(teams)
        self.logger.info(f"Found {len(teams)} teams: {', '.join(t.name for t in teams)}")
        return teams

    async def scrape_team_players(self, team: Team) -> list[PlayerReference]:
        url = squad_url(team)
        self.logger.info(f"Scraping players from {team.name} ({url})")
        result = await self.scrape(url, lambda soup: extract_player_refs(soup, self.config.base_url))
        self.logger.info(f"Found {len(result.data)} players for {team.name}")
        return result.data

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def bare_player(self, ref: PlayerReference, team: Team) -> Player:
        """Player without profile data, pointing at the templated portrait URL."""
        player = Player.from_reference(ref, team)
        player.image_url = construct_image_url(ref.id, self.settings.image_host)
        return player

    async def scrape_player_profile(self, ref: PlayerReference, team: Team) -> Player:
        result = await self.scrape(ref.profile_url, parse_profile)
        player = Player.from_reference(ref, team, result.data)
        if not player.image_url:
            player.image_url = construct_image_url(ref.id, self.settings.image_host)
        return player

    async def collect_players(self, teams: list[Team]) -> list[Player]:
        players: list[Player] = []
        for team in teams:
            try:
                refs = await self.scrape_team_players(team)
            except Exception as e:
                self.summary.team_failures += 1
                self.logger.warning(f"Error scraping squad of {team.name}: {e}", extra={"team": team.slug})
                continue

            self.summary.players_discovered += len(refs)
            for ref in refs:
                if not self.settings.scrape_profiles:
                    players.append(self.bare_player(ref, team))
                    continue
                try:
                    player = await self.scrape_player_profile(ref, team)
                except Exception as e:
                    self.summary.profile_failures += 1
                    self.logger.warning(
                        f"Error scraping profile of {ref.name} ({team.name}): {e}",
                        extra={"team": team.slug, "player_id": ref.id},
                    )
                    continue
                self.summary.players_profiled += 1
                players.append(player)
                await polite_delay(self.settings.player_delay_seconds)

            await polite_delay(self.settings.team_delay_seconds)
        return players

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def download_images(self, players: list[Player]) -> None:
        total = len(players)
        for i, player in enumerate(players, start=1):
            self.logger.debug(f"[{i}/{total}] Downloading image for {player.name}")
            try:
                local_path = await self.images.download(player, self.storage)
            except (OSError, ValueError) as e:
                self.logger.warning(
                    f"Error saving image for {player.name}: {e}",
                    extra={"team": player.team_slug, "player_id": player.id},
                )
                local_path = None
            if local_path:
                player.local_image_path = local_path
                self.summary.images_downloaded += 1
            else:
                self.summary.images_failed += 1
            await polite_delay(self.settings.image_delay_seconds)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def scrape_data(self) -> list[Player]:
        """Full crawl: teams, players, profiles, images, JSON artifacts."""
        self.summary = CrawlSummary()
        self.storage.ensure_dirs()

        teams = await self.scrape_teams()
        players = await self.collect_players(teams)
        self.logger.info(f"Total players collected: {len(players)}")

        await self.download_images(players)

        groups = self.storage.save_players(players, self.settings.combined_output_name)
        for team_slug, team_players in groups.items():
            self.summary.per_team[team_slug] = {
                "players": len(team_players),
                "with_images": sum(1 for p in team_players if p.local_image_path),
            }
        self.log_summary()
        return players

    def log_summary(self) -> None:
        s = self.summary
        self.logger.info(
            f"Crawl finished: {s.teams_discovered} teams, {s.players_discovered} players discovered, "
            f"{s.players_profiled} profiled, {s.images_downloaded} images downloaded"
        )
        if s.team_failures or s.profile_failures:
            self.logger.warning(
                f"Skipped {s.team_failures} squads and {s.profile_failures} profiles after errors"
            )
        if s.images_failed:
            self.logger.warning(f"Failed to download {s.images_failed} images (some players have no photo)")
        for team_slug, counts in s.per_team.items():
            self.logger.info(f"  {team_slug}: {counts['players']} players ({counts['with_images']} with images)")
