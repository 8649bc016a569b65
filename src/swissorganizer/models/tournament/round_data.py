"""Data model for tournament round."""

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
from typing import Any, Dict, List, Optional

from swissorganizer.constants import STATUS_ACTIVE, STATUS_COMPLETE

from .match_result import Match


@dataclass
class RoundData:
    """Container for all data related to a single tournament round.

    Attributes
    ----------
    round_number : int
        Round number (1-indexed).
    status : str
        "active" while results are being entered, "complete" once closed.
    matches : list of Match
        Regular matches followed by the bye match, if any.
    """

    round_number: int
    status: str = STATUS_ACTIVE
    matches: List[Match] = field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETE

    @property
    def bye_match(self) -> Optional[Match]:
        return next((m for m in self.matches if m.is_bye), None)

    @property
    def has_entered_results(self) -> bool:
        """Whether any regular (non-bye) match already has a result."""
        return any(m.result is not None and not m.is_bye for m in self.matches)

    def find_match(self, match_id: str) -> Optional[Match]:
        return next((m for m in self.matches if m.id == match_id), None)

    def find_pending_match(self, player_id: str) -> Optional[Match]:
        """The result-less regular match ``player_id`` is seated in, if any."""
        return next(
            (m for m in self.matches if m.is_pending and m.involves(player_id)),
            None,
        )

    def player_ids(self) -> List[str]:
        """Every player seated in this round, in match order."""
        seated = []
        for match in self.matches:
            seated.append(match.player1_id)
            if match.player2_id is not None:
                seated.append(match.player2_id)
        return seated

    def to_dict(self) -> Dict[str, Any]:
        """Serialize round data to dictionary."""
        return {
            "round_number": self.round_number,
            "status": self.status,
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundData":
        """Deserialize round data from dictionary."""
        if not isinstance(data, dict):
            raise TypeError(f"Round must be an object, got {type(data).__name__}")
        matches = data.get("matches", [])
        if not isinstance(matches, list):
            raise TypeError("Round matches must be a list")
        return cls(
            round_number=data["round_number"],
            status=data.get("status", STATUS_ACTIVE),
            matches=[Match.from_dict(m) for m in matches],
        )
