"""
Applications Package für den Transfermarkt Roster Crawler

Enthält die Kommandozeilen-Einstiegspunkte.
"""

__all__: list[str] = []
