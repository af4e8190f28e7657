"""
Storage Manager
JSON- und Bild-Ablage für gecrawlte Kaderdaten
"""

import json
from pathlib import Path
from typing import Iterable

import aiofiles

from roster_crawler.common.logging_utils import get_logger
from roster_crawler.core.config import Settings
from roster_crawler.domain.models import Player

IMAGE_EXTENSION = ".jpg"


def group_by_team(players: Iterable[Player]) -> dict[str, list[Player]]:
    """Group players by team slug; groups keep first-seen order, members discovery order."""
    groups: dict[str, list[Player]] = {}
    for player in players:
        groups.setdefault(player.team_slug, []).append(player)
    return groups


class StorageManager:
    """Schreibt Spieler-JSON (gesamt + je Team) und Profilbilder"""

    def __init__(self, project_root: str | Path, output_dir: str | Path, images_dir: str | Path):
        self.project_root = Path(project_root)
        self.output_dir = self.project_root / output_dir
        self.images_dir = self.project_root / images_dir
        self.logger = get_logger(__name__)

    @classmethod
    def from_settings(cls, cfg: Settings) -> "StorageManager":
        return cls(cfg.project_root, cfg.output_dir, cfg.images_dir)

    def ensure_dirs(self) -> None:
        """Legt Ausgabeverzeichnisse an (idempotent)"""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.images_dir.mkdir(parents=True, exist_ok=True)

    def _write_json(self, path: Path, players: list[Player]) -> None:
        payload = [p.to_json_dict() for p in players]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    def save_players(self, players: list[Player], combined_name: str) -> dict[str, list[Player]]:
        """Overwrite the combined file and one file per team slug.

        Returns the team grouping that was written.
        """
        self.ensure_dirs()
        combined = self.output_dir / f"{combined_name}.json"
        self._write_json(combined, players)
        self.logger.info(f"Player data saved to {combined} ({len(players)} players)")

        groups = group_by_team(players)
        for team_slug, team_players in groups.items():
            self._write_json(self.output_dir / f"{team_slug}.json", team_players)
        self.logger.info(f"Individual team data saved to {self.output_dir} ({len(groups)} teams)")
        return groups

    def image_path(self, team_slug: str, player_id: str) -> Path:
        return self.images_dir / team_slug / f"{player_id}{IMAGE_EXTENSION}"

    def display_path(self, path: Path) -> str:
        """Posix path relative to the project root, or as given when it lies outside."""
        try:
            return path.relative_to(self.project_root).as_posix()
        except ValueError:
            return path.as_posix()

    async def save_image(self, team_slug: str, player_id: str, data: bytes) -> str:
        """Write image bytes; returns the path recorded as ``localImagePath``."""
        path = self.image_path(team_slug, player_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)
        return self.display_path(path)

    def load_players(self, name: str) -> list[Player]:
        path = self.output_dir / f"{name}.json"
        with open(path, encoding="utf-8") as f:
            return [Player.model_validate(item) for item in json.load(f)]
