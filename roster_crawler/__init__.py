"""
Transfermarkt Roster Crawler
Kader-, Spielerprofil- und Bilddaten für eine Liga
"""

__version__ = "1.0.0"
__author__ = "Sports Data Team"

# NOTE:
# Avoid importing configuration at package import time to keep "import roster_crawler"
# side-effect free for unit tests that only need parsing helpers.

__all__ = []
