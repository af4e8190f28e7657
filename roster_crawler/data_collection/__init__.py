"""
Data Collection Module
Scrapers für Kader- und Spielerdaten

Note: do not import subpackages here to keep package import side-effect free.
Import needed classes directly from their modules.
"""

__all__: list[str] = []
