import re

from bs4 import BeautifulSoup

UNKNOWN_ID = "unknown"

# Decoded in this order, one pass each
HTML_ENTITIES: tuple[tuple[str, str], ...] = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(s: str | None) -> str:
    """Decode the common HTML entities, collapse whitespace and trim.

    Never raises; ``None`` yields an empty string.
    """
    if not s:
        return ""
    for entity, replacement in HTML_ENTITIES:
        s = s.replace(entity, replacement)
    return _WHITESPACE_RE.sub(" ", s).strip()


def parse_int(s: str | None) -> int | None:
    if not s:
        return None
    m = re.search(r"-?\d+", s.replace(".", ""))
    return int(m.group(0)) if m else None


def soup_from_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def extract_entity_id(href: str | None, kind: str) -> str:
    # Examples: /arsenal-fc/startseite/verein/11, /bukayo-saka/profil/spieler/433177
    if not href:
        return UNKNOWN_ID
    m = re.search(rf"/{re.escape(kind)}/(\d+)", href)
    return m.group(1) if m else UNKNOWN_ID


def extract_slug(href: str | None) -> str:
    if not href:
        return UNKNOWN_ID
    parts = href.split("?")[0].split("/")
    # "/slug/..." splits into ["", "slug", ...]
    if len(parts) > 1 and parts[1]:
        return parts[1]
    return UNKNOWN_ID


def strip_season_suffix(href: str) -> str:
    return href.split("/saison_id")[0]
