"""Global pytest fixtures.

Centralizes:
 - Project root path insertion (so individual tests don't repeat sys.path hacks)
 - HTML samples for the competition listing, a squad page and a player profile
 - Settings / storage fixtures pointed at a temporary directory
"""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from roster_crawler.core.config import Settings  # noqa: E402
from roster_crawler.storage.manager import StorageManager  # noqa: E402

def build_listing_html(unique: int, duplicates: int = 0) -> str:
    """Listing page with ``unique`` clubs, the first ``duplicates`` repeated afterwards."""
    rows = []
    for i in range(1, unique + 1):
        href = f"/club-{i}/startseite/verein/{100 + i}/saison_id/2025"
        rows.append(
            f'<tr><td><a href="{href}"><img src="/wappen/{100 + i}.png" alt=""></a></td>'
            f'<td class="hauptlink"><a href="{href}">Club {i} FC</a></td></tr>'
        )
    for i in range(1, duplicates + 1):
        rows.append(
            f'<tr><td><a href="/club-{i}/startseite/verein/{100 + i}">Club {i} (short)</a></td></tr>'
        )
    return (
        "<html><body>"
        '<a href="/premier-league/startseite/wettbewerb/GB1">Premier League</a>'
        '<a href="/club-1/startseite/verein/101">FC</a>'
        '<div class="pager"><a href="/club-2/startseite/verein/102">2</a></div>'
        f'<table class="items"><tbody>{"".join(rows)}</tbody></table>'
        "</body></html>"
    )


@pytest.fixture
def build_listing():
    return build_listing_html


@pytest.fixture
def listing_html():
    # 25 matching anchors with text, 5 of them repeat an earlier id
    return build_listing_html(unique=20, duplicates=5)


@pytest.fixture
def squad_html():
    return (
        """
        <html>
        <body>
            <table class="items">
              <tbody>
                <tr>
                    <td class="zentriert rueckennummer"><div class="rn_nummer">1</div></td>
                    <td><a href="/david-raya/profil/spieler/262749"><img data-src="https://img.a.transfermarkt.technology/portrait/medium/262749.jpg" alt="David Raya"></a></td>
                    <td class="hauptlink"><a href="/david-raya/profil/spieler/262749">David Raya</a></td>
                    <td>Goalkeeper</td>
                </tr>
                <tr>
                    <td class="zentriert rueckennummer"><div class="rn_nummer">2</div></td>
                    <td class="hauptlink"><a href="/william-saliba/profil/spieler/495666">William Saliba</a></td>
                    <td>Centre-Back</td>
                </tr>
                <tr>
                    <td class="hauptlink"><a href="/bukayo-saka/profil/spieler/433177">Bukayo Saka</a></td>
                    <td><a href="/bukayo-saka/leistungsdaten/spieler/433177">Stats</a></td>
                    <td><a href="/bukayo-saka/profil/spieler/433177">7</a></td>
                </tr>
              </tbody>
            </table>
            <div class="mobile-list">
                <a href="/william-saliba/profil/spieler/495666?tab=mobile">W. Saliba</a>
                <a href="/arsenal-fc/startseite/verein/11">Arsenal FC</a>
            </div>
        </body>
        </html>
        """
    )


@pytest.fixture
def profile_html():
    return (
        """
        <html>
        <head><title>Viktor Gyökeres - Player profile 25/26 | Transfermarkt</title></head>
        <body>
        <header class="data-header">
          <img src="https://tmssl.akamaized.net/images/wappen/small/11.png" alt="Arsenal FC">
          <h1 class="data-header__headline-wrapper">
            <span class="data-header__shirt-number">#14</span> Viktor <strong>Gyökeres</strong>
          </h1>
          <div class="data-header__profile-container">
            <img src="https://img.a.transfermarkt.technology/portrait/big/325443-1698831234.jpg?lm=1" class="data-header__profile-image" alt="Viktor Gyökeres">
          </div>
          <div class="data-header__box--small">
            <a href="/viktor-gyokeres/marktwertverlauf/spieler/325443" class="data-header__market-value-wrapper">€75.00m <p class="data-header__last-update">Last update: 09/10/2025</p></a>
          </div>
        </header>
        <div class="info-table info-table--right-space">
          <span class="info-table__content info-table__content--regular">Date of birth/Age:</span>
          <span class="info-table__content info-table__content--bold">04/06/1998 (27)</span>
          <span class="info-table__content info-table__content--regular">Place of birth:</span>
          <span class="info-table__content info-table__content--bold">Stockholm</span>
          <span class="info-table__content info-table__content--regular">Height:</span>
          <span class="info-table__content info-table__content--bold">1,87 m</span>
          <span class="info-table__content info-table__content--regular">Citizenship:</span>
          <span class="info-table__content info-table__content--bold"><img alt="Sweden" class="flaggenrahmen">&nbsp;&nbsp;Sweden<br><img alt="Finland" class="flaggenrahmen">&nbsp;&nbsp;Finland</span>
          <span class="info-table__content info-table__content--regular">Position:</span>
          <span class="info-table__content info-table__content--bold">Attack - Centre-Forward</span>
          <span class="info-table__content info-table__content--regular">Foot:</span>
          <span class="info-table__content info-table__content--bold">right</span>
          <span class="info-table__content info-table__content--regular">Player agent:</span>
          <span class="info-table__content info-table__content--bold"><a href="/hcm/beraterfirma/berater/1">HCM Sports Management</a></span>
          <span class="info-table__content info-table__content--regular">Current club:</span>
          <span class="info-table__content info-table__content--bold"><a href="/arsenal-fc/startseite/verein/11">Arsenal FC</a></span>
          <span class="info-table__content info-table__content--regular">Joined:</span>
          <span class="info-table__content info-table__content--bold">26/07/2025</span>
          <span class="info-table__content info-table__content--regular">Contract expires:</span>
          <span class="info-table__content info-table__content--bold">30/06/2030</span>
        </div>
        <div class="national-career">
          <span>Current international:</span>
          <span><a href="/schweden/startseite/verein/3557">Sweden</a></span>
          <span>Caps/Goals:</span>
          <span><a href="#">30</a> / <a href="#">15</a></span>
        </div>
        </body>
        </html>
        """
    )


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        project_root=str(tmp_path),
        cache_enabled=False,
        requests_per_second=0,
        retry_initial_delay_seconds=0,
        team_delay_seconds=0,
        player_delay_seconds=0,
        image_delay_seconds=0,
    )


@pytest.fixture
def storage(test_settings):
    return StorageManager.from_settings(test_settings)
