"""Data models for Swiss Organizer."""

from swissorganizer.models.pairing import PairingResult
from swissorganizer.models.player import Player
from swissorganizer.models.standing import Standing
from swissorganizer.models.tournament import (
    Match,
    MatchResult,
    PairingHistory,
    RoundData,
    TournamentData,
)

__all__ = [
    "Match",
    "MatchResult",
    "PairingHistory",
    "PairingResult",
    "Player",
    "RoundData",
    "Standing",
    "TournamentData",
]
