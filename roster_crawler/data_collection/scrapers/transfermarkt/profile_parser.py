"""Transfermarkt player profile parsing.

The info table's label/value markup moves around between page variants, so
fields are recovered from the flattened body text instead of by DOM position.
``PROFILE_RULES`` is an ordered table of (field, pattern, post-processor)
entries. For each field the first rule whose pattern matches and whose
post-processor returns a value wins; a field no rule satisfies stays ``None``.

In flattened text a run of two or more whitespace characters is the only
reliable field separator, so captures stop either at the next known label or
at such a run.

Header elements (image, market value, shirt number) have stable classes and
are read from the DOM directly.
"""
from __future__ import annotations

import re
from typing import Any, Callable, Iterable, NamedTuple, Optional, Pattern

from bs4 import BeautifulSoup

from ....common.parsing import normalize_text, parse_int
from ....domain.models import PlayerProfile

PostProcessor = Callable[["re.Match[str]"], Optional[dict[str, Any]]]


class FieldRule(NamedTuple):
    field: str
    pattern: Pattern[str]
    post: PostProcessor


# --------------------------------------------------------------------------
# Post-processors
# --------------------------------------------------------------------------

_DATE = r"(\d{2}/\d{2}/\d{4}|[A-Z][a-z]{2} \d{1,2}, \d{4})"
_NAME_CHARS = r"A-Za-zÀ-ÿ"
_COUNTRY_CHARS = _NAME_CHARS + r"'\-"
_POSITION_CONTAMINATION = re.compile(r"\s*(National|Player|agent).*$", re.I)
_AGENT_CONTAMINATION = re.compile(r"\s*(\.\.\.|verified).*$", re.I)
_SEPARATOR = re.compile(r"\s{2,}")


def _text(key: str, group: int = 1) -> PostProcessor:
    def post(m: "re.Match[str]") -> Optional[dict[str, Any]]:
        value = normalize_text(m.group(group))
        return {key: value} if value else None

    return post


def _date_and_age(m: "re.Match[str]") -> dict[str, Any]:
    age = m.group(2) if m.re.groups >= 2 else None
    return {
        "date_of_birth": normalize_text(m.group(1)),
        "age": parse_int(age),
    }


def _position(m: "re.Match[str]") -> Optional[dict[str, Any]]:
    value = _POSITION_CONTAMINATION.sub("", normalize_text(m.group(1))).strip()
    return {"position": value} if value else None


def _agent(m: "re.Match[str]") -> Optional[dict[str, Any]]:
    value = _AGENT_CONTAMINATION.sub("", normalize_text(m.group(1))).strip()
    return {"agent": value} if value else None


def _foot(m: "re.Match[str]") -> dict[str, Any]:
    return {"dominant_foot": m.group(1).lower()}


def _citizenship(m: "re.Match[str]") -> Optional[dict[str, Any]]:
    countries = [normalize_text(c) for c in _SEPARATOR.split(m.group(1).strip())]
    countries = [c for c in countries if len(c) > 1]
    return {"citizenship": countries} if countries else None


def _international(m: "re.Match[str]") -> Optional[dict[str, Any]]:
    team = normalize_text(m.group(1))
    if not team:
        return None
    values: dict[str, Any] = {"international_team": team}
    if m.re.groups >= 3:
        values["international_caps"] = parse_int(m.group(2))
        values["international_goals"] = parse_int(m.group(3))
    return values


def _caps_goals(m: "re.Match[str]") -> dict[str, Any]:
    return {"international_caps": parse_int(m.group(1)), "international_goals": parse_int(m.group(2))}


# --------------------------------------------------------------------------
# Rule table
# --------------------------------------------------------------------------

_CITIZENSHIP_END = (
    r"(?=\s*(?:Position|Height|Foot|Player agent|Agent|Current club|Joined|Contract)"
    rf"|[^{_COUNTRY_CHARS}\s]|\Z)"
)

# Labels are matched case-sensitively so "Position:" does not fire inside "Main position:"
_POSITION_END = r"(?i:\s{2,}|\s+Foot|\s+Agent|\s+Player|\s+National|$)"

PROFILE_RULES: tuple[FieldRule, ...] = (
    FieldRule("date_of_birth", re.compile(rf"Date of birth/Age:\s*{_DATE}\s*\((\d+)\)"), _date_and_age),
    FieldRule("date_of_birth", re.compile(rf"Date of birth/Age:\s*{_DATE}"), _date_and_age),
    FieldRule("date_of_birth", re.compile(rf"Date of birth:\s*{_DATE}"), _date_and_age),
    FieldRule(
        "place_of_birth",
        re.compile(
            rf"Place of birth:\s*([{_NAME_CHARS}\s\-']+?)(?:\s{{2,}}|Citizenship|Height|Position|Foot|$)",
            re.M,
        ),
        _text("place_of_birth"),
    ),
    FieldRule("height", re.compile(r"Height:\s*([\d,.]+\s*m)", re.I), _text("height")),
    FieldRule(
        "citizenship",
        re.compile(rf"Citizenship:\s*([{_COUNTRY_CHARS}\s]+?){_CITIZENSHIP_END}"),
        _citizenship,
    ),
    FieldRule(
        "position",
        re.compile(
            r"Position:\s*(?:Attack\s*-\s*|Midfield\s*-\s*|Defender\s*-\s*|Defence\s*-\s*)?"
            r"([A-Za-z\-\s]+?)" + _POSITION_END,
            re.M,
        ),
        _position,
    ),
    FieldRule(
        "position",
        re.compile(r"Main position:\s*([A-Za-z\-\s]+?)" + _POSITION_END, re.M),
        _position,
    ),
    FieldRule("dominant_foot", re.compile(r"Foot:\s*(right|left|both)", re.I), _foot),
    FieldRule(
        "agent",
        re.compile(r"Agent:\s*([A-Za-z\s.\-&]+?)(?:\s+verified|\s+Current|\s{2,}|$)", re.I | re.M),
        _agent,
    ),
    FieldRule(
        "current_club",
        re.compile(rf"Current club:\s*([{_NAME_CHARS}\s.\-&]+?)(?:\s{{2,}}|Joined|Contract|$)", re.M),
        _text("current_club"),
    ),
    FieldRule("joined_date", re.compile(rf"Joined:\s*{_DATE}", re.I), _text("joined_date")),
    FieldRule("contract_expiry", re.compile(rf"Contract expires:\s*{_DATE}", re.I), _text("contract_expiry")),
    FieldRule(
        "international",
        re.compile(
            rf"Current international:\s*([{_NAME_CHARS}\s]+?)\s*Caps/Goals:\s*(\d+)\s*/\s*(\d+)",
            re.I | re.M,
        ),
        _international,
    ),
    FieldRule(
        "international",
        re.compile(rf"Current international:\s*([{_NAME_CHARS}\s]+?)(?:\s{{2,}}|$)", re.I | re.M),
        _international,
    ),
    FieldRule("caps_goals", re.compile(r"Caps/Goals:\s*(\d+)\s*/\s*(\d+)", re.I), _caps_goals),
)


def extract_fields(body_text: str, rules: Iterable[FieldRule] = PROFILE_RULES) -> dict[str, Any]:
    """Evaluate ``rules`` in order against ``body_text``.

    Returns only the keys some rule produced; missing data is not an error.
    """
    values: dict[str, Any] = {}
    settled: set[str] = set()
    for rule in rules:
        if rule.field in settled:
            continue
        m = rule.pattern.search(body_text or "")
        if not m:
            continue
        produced = rule.post(m)
        if not produced:
            continue
        settled.add(rule.field)
        for key, value in produced.items():
            values.setdefault(key, value)
    return values


# --------------------------------------------------------------------------
# Header elements
# --------------------------------------------------------------------------

PORTRAIT_MARKER = "portrait"
_IMAGE_SIZE_RE = re.compile(r"/(small|medium|big)/")
MARKET_VALUE_SELECTOR = "a.data-header__market-value-wrapper"
_MARKET_VALUE_RE = re.compile(r"(€[\d,.]+[mk]?)", re.I)
HEADLINE_SELECTOR = "h1.data-header__headline-wrapper"


def upscale_image_url(src: str) -> str:
    return _IMAGE_SIZE_RE.sub("/header/", src)


def extract_image_url(soup: BeautifulSoup) -> Optional[str]:
    for img in soup.find_all("img"):
        src = img.get("data-src") or img.get("src")
        if src and PORTRAIT_MARKER in src:
            return upscale_image_url(src)
    return None


def parse_market_value_text(text: str | None) -> Optional[str]:
    m = _MARKET_VALUE_RE.search(text or "")
    return m.group(1) if m else None


def extract_market_value(soup: BeautifulSoup) -> Optional[str]:
    for el in soup.select(MARKET_VALUE_SELECTOR):
        text = normalize_text(el.get_text())
        if "€" in text:
            return parse_market_value_text(text)
    return None


def extract_shirt_number(soup: BeautifulSoup) -> Optional[str]:
    headline = soup.select_one(HEADLINE_SELECTOR)
    if headline is None:
        return None
    m = re.search(r"#(\d+)", normalize_text(headline.get_text()))
    return m.group(1) if m else None


def body_text(soup: BeautifulSoup) -> str:
    root = soup.body or soup
    return root.get_text()


def parse_profile(soup: BeautifulSoup) -> PlayerProfile:
    fields = extract_fields(body_text(soup))
    fields["image_url"] = extract_image_url(soup)
    fields["market_value"] = extract_market_value(soup)
    fields["shirt_number"] = extract_shirt_number(soup)
    return PlayerProfile(**fields)
