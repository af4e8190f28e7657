"""
Transfermarkt scrapers: club/squad discovery, profile parsing, portrait download.

Import concrete classes from their modules, e.g.:

    from roster_crawler.data_collection.scrapers.transfermarkt.scraper import TransfermarktScraper
"""

__all__: list[str] = []
