"""Entity discovery over Transfermarkt listing pages.

Teams come from the competition overview, players from each club's squad
(``kader``) page. Both passes walk every anchor in document order, keep the
ones whose href has the entity shape and dedupe by id, first occurrence wins.
The site renders the same entity in several places (table row, thumbnail,
"mobile" block), and the first one carries the fullest name.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern

from bs4 import BeautifulSoup

from ....common.parsing import (
    UNKNOWN_ID,
    extract_entity_id,
    extract_slug,
    normalize_text,
    strip_season_suffix,
)
from ....domain.models import PlayerReference, Team

TEAM_HREF_PATTERN = re.compile(r"^/[^/]+/startseite/verein/\d+")
PLAYER_HREF_PATTERN = re.compile(r"^/[^/]+/profil/spieler/\d+")

TEAM_KIND = "verein"
PLAYER_KIND = "spieler"

TEAM_MIN_NAME_LENGTH = 3
PLAYER_MIN_NAME_LENGTH = 2

_NUMERIC_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class DiscoveredEntity:
    id: str
    name: str
    href: str


def discover_entities(
    soup: BeautifulSoup,
    href_pattern: Pattern[str],
    kind: str,
    min_name_length: int,
) -> list[DiscoveredEntity]:
    seen: set[str] = set()
    entities: list[DiscoveredEntity] = []

    for link in soup.find_all("a"):
        href = link.get("href")
        name = normalize_text(link.get_text())
        if not href or not href_pattern.search(href):
            continue
        if len(name) < min_name_length:
            continue
        # counts and pagination badges
        if _NUMERIC_RE.match(name):
            continue

        entity_id = extract_entity_id(href, kind)
        if entity_id == UNKNOWN_ID or entity_id in seen:
            continue
        seen.add(entity_id)
        entities.append(DiscoveredEntity(id=entity_id, name=name, href=href))

    return entities


def extract_teams(soup: BeautifulSoup, base_url: str, limit: int | None = 20) -> list[Team]:
    """Teams in listing order, truncated to the league size.

    Other competitions on the page share the markup; they come after the league table.
    """
    entities = discover_entities(soup, TEAM_HREF_PATTERN, TEAM_KIND, TEAM_MIN_NAME_LENGTH)
    teams = [
        Team(
            name=e.name,
            canonical_url=f"{base_url}{strip_season_suffix(e.href)}",
            slug=extract_slug(e.href),
            id=e.id,
        )
        for e in entities
    ]
    return teams[:limit] if limit is not None else teams


def extract_player_refs(soup: BeautifulSoup, base_url: str) -> list[PlayerReference]:
    entities = discover_entities(soup, PLAYER_HREF_PATTERN, PLAYER_KIND, PLAYER_MIN_NAME_LENGTH)
    return [
        PlayerReference(id=e.id, name=e.name, profile_url=f"{base_url}{e.href}")
        for e in entities
    ]


def squad_url(team: Team) -> str:
    # kader = squad
    return team.canonical_url.replace("/startseite/", "/kader/")
