"""
Domain Module
Pydantic-Modelle für Teams und Spieler
"""

from .models import Footedness, Player, PlayerProfile, PlayerReference, Team, TeamPlacement

__all__ = ["Footedness", "Player", "PlayerProfile", "PlayerReference", "Team", "TeamPlacement"]
