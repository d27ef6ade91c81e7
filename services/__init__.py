"""
Padelboard Services

The in-process boundary used by the web layer.
"""

from services.tournament_service import TournamentService

__all__ = ["TournamentService"]
