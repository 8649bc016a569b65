"""Tournament aggregate: players taking part, rounds and lifecycle status."""

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
from swissorganizer.utils import generate_id, today_str

from .match_result import Match
from .round_data import RoundData


@dataclass
class TournamentData:
    """A single Swiss event.

    Attributes
    ----------
    date_str : str
        Event date, ``YYYY-MM-DD``.
    id : str
        Opaque identifier.
    status : str
        "active" or "complete".
    active_players : list of str
        IDs considered for future pairings, in registration order.
    dropped_players : list of str
        IDs removed from future pairings. Their past rounds are untouched.
    rounds : list of RoundData
        Rounds in order; at most one is active.
    seating_order : list of str
        Random seating used to pair round 1.
    current_round : int
        Number of the most recently paired round, 0 before round 1.
    """

    date_str: str = field(default_factory=today_str)
    id: str = field(default_factory=generate_id)
    status: str = STATUS_ACTIVE
    active_players: List[str] = field(default_factory=list)
    dropped_players: List[str] = field(default_factory=list)
    rounds: List[RoundData] = field(default_factory=list)
    seating_order: List[str] = field(default_factory=list)
    current_round: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    @property
    def is_complete(self) -> bool:
        return self.status == STATUS_COMPLETE

    @property
    def active_round(self) -> Optional[RoundData]:
        return next((r for r in self.rounds if not r.is_completed), None)

    @property
    def completed_rounds(self) -> List[RoundData]:
        return [r for r in self.rounds if r.is_completed]

    def find_match(self, match_id: str) -> Optional[Match]:
        for round_data in self.rounds:
            match = round_data.find_match(match_id)
            if match is not None:
                return match
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize tournament to dictionary."""
        return {
            "id": self.id,
            "date_str": self.date_str,
            "status": self.status,
            "current_round": self.current_round,
            "active_players": list(self.active_players),
            "dropped_players": list(self.dropped_players),
            "rounds": [r.to_dict() for r in self.rounds],
            "seating_order": list(self.seating_order),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentData":
        """Deserialize tournament from dictionary."""
        active_players = list(data.get("active_players", []))
        return cls(
            id=data.get("id") or generate_id(),
            date_str=data.get("date_str") or today_str(),
            status=data.get("status", STATUS_ACTIVE),
            current_round=data.get("current_round", 0),
            active_players=active_players,
            dropped_players=list(data.get("dropped_players", [])),
            rounds=[RoundData.from_dict(r) for r in data.get("rounds", [])],
            seating_order=list(data.get("seating_order") or active_players),
        )
