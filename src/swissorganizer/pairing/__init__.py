"""Pairing engines for Swiss Organizer."""

from swissorganizer.pairing.swiss import (
    build_prior_matchups,
    has_played,
    pair_round,
    pair_round_detailed,
    shuffle,
)

__all__ = [
    "build_prior_matchups",
    "has_played",
    "pair_round",
    "pair_round_detailed",
    "shuffle",
]
