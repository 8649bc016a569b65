"""Tournament data models."""

from swissorganizer.models.tournament.match_result import Match, MatchResult
from swissorganizer.models.tournament.pairing_history import PairingHistory, pair_key
from swissorganizer.models.tournament.round_data import RoundData
from swissorganizer.models.tournament.tournament import TournamentData

__all__ = [
    "Match",
    "MatchResult",
    "PairingHistory",
    "RoundData",
    "TournamentData",
    "pair_key",
]
