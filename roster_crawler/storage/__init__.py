"""
Storage Module
JSON-Artefakte und Profilbilder
"""

from .manager import StorageManager, group_by_team

__all__ = ["StorageManager", "group_by_team"]
