"""
Data Collection Scrapers Package

Shared scraping infrastructure lives in ``base``; site scrapers live in
subpackages. Avoid importing them at package import time so that tests of
the pure parsing helpers stay lightweight. Import concrete scrapers from
their modules directly, e.g.:

    from roster_crawler.data_collection.scrapers.transfermarkt.scraper import TransfermarktScraper
"""

__all__ = []
