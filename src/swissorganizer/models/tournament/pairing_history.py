"""Pairing history data class."""

# Swiss Organizer
# Copyright (C) 2025  Swiss Organizer developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass, field
from typing import Iterable

from swissorganizer.type_hints import PairKey, PriorMatchups

from .round_data import RoundData


def pair_key(player1_id: str, player2_id: str) -> PairKey:
    """Order independent key for two players."""
    return frozenset({player1_id, player2_id})


@dataclass
class PairingHistory:
    """
    Tracks historical pairings to prevent repeat matches.

    Attributes
    ----------
    previous_matches : set of frozenset of str
        Set containing frozensets of player ID pairs representing
        matches that have already been played.
    """

    previous_matches: PriorMatchups = field(default_factory=set)

    def add_pairing(self, player1_id: str, player2_id: str) -> None:
        """Record that two players have been paired."""
        self.previous_matches.add(pair_key(player1_id, player2_id))

    def have_played(self, player1_id: str, player2_id: str) -> bool:
        """Check if two players have previously played each other."""
        return pair_key(player1_id, player2_id) in self.previous_matches

    def __len__(self) -> int:
        return len(self.previous_matches)

    @classmethod
    def from_rounds(cls, rounds: Iterable[RoundData]) -> "PairingHistory":
        """Collect every non-bye pairing of the given rounds.

        Callers pass completed rounds only; the active round is not history
        yet.
        """
        history = cls()
        for round_data in rounds:
            for match in round_data.matches:
                if not match.is_bye and match.player2_id is not None:
                    history.add_pairing(match.player1_id, match.player2_id)
        return history
