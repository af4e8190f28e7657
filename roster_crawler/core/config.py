"""
Zentrale Konfiguration für den Transfermarkt Roster Crawler
Basiert auf Pydantic Settings mit Environment Variable Support
"""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application Settings mit Environment Variable Support"""

    # Source site
    base_url: str = "https://www.transfermarkt.com"
    competition_path: str = "/premier-league/startseite/wettbewerb/GB1"
    image_host: str = "https://img.a.transfermarkt.technology"
    league_size: int = 20  # Premier League has 20 clubs

    # Scraping
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    requests_per_second: float = 2.0
    scraping_max_retries: int = 3
    retry_initial_delay_seconds: float = 2.0
    scraping_timeout: int = 30
    scrape_profiles: bool = True

    # Politeness delays between iterations (seconds)
    team_delay_seconds: float = 0.5
    player_delay_seconds: float = 0.5
    image_delay_seconds: float = 0.1

    # Response cache
    cache_enabled: bool = True
    cache_ttl_hours: int = 24
    cache_dir: str = "./.cache/http"

    # Images
    min_image_bytes: int = 1000

    # Output
    project_root: str = "."
    output_dir: str = "data/players"
    images_dir: str = "public/images/players"
    combined_output_name: str = "premier-league"

    # Monitoring
    log_level: str = "INFO"
    log_file_path: Optional[str] = None

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def competition_url(self) -> str:
        return f"{self.base_url}{self.competition_path}"


# Global Settings Instance
settings = Settings()
