"""Match and match result data classes."""

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
from typing import Any, Dict, Optional

from swissorganizer.constants import BYE_GAME_LOSSES, BYE_GAME_WINS
from swissorganizer.utils import generate_id


@dataclass
class MatchResult:
    """Represents the result of a single match.

    Attributes
    ----------
    player1_wins : int
        Games won by player 1.
    player2_wins : int
        Games won by player 2.
    draws : int
        Drawn games.
    submitted_at : str or None
        ISO timestamp of the first submission.
    corrected_at : str or None
        ISO timestamp of the latest correction, None until the first edit.
    """

    player1_wins: int
    player2_wins: int
    draws: int = 0
    submitted_at: Optional[str] = None
    corrected_at: Optional[str] = None

    @property
    def games_played(self) -> int:
        return self.player1_wins + self.player2_wins + self.draws

    @property
    def is_draw(self) -> bool:
        """Equal game wins make the match a draw."""
        return self.player1_wins == self.player2_wins

    @classmethod
    def bye(cls, submitted_at: Optional[str]) -> "MatchResult":
        """The synthetic 2-0 result every bye match carries."""
        return cls(
            player1_wins=BYE_GAME_WINS,
            player2_wins=BYE_GAME_LOSSES,
            draws=0,
            submitted_at=submitted_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match result to dictionary."""
        return {
            "player1_wins": self.player1_wins,
            "player2_wins": self.player2_wins,
            "draws": self.draws,
            "submitted_at": self.submitted_at,
            "corrected_at": self.corrected_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchResult":
        """Deserialize match result from dictionary."""
        return cls(
            player1_wins=int(data.get("player1_wins", 0)),
            player2_wins=int(data.get("player2_wins", 0)),
            draws=int(data.get("draws", 0)),
            submitted_at=data.get("submitted_at"),
            corrected_at=data.get("corrected_at"),
        )


@dataclass
class Match:
    """One table of a round, or a bye.

    Attributes
    ----------
    player1_id : str
        First player (the bye recipient for a bye match).
    player2_id : str or None
        Second player, None for a bye.
    is_bye : bool
        Whether this is a bye match.
    result : MatchResult or None
        None until a result has been submitted. Bye matches are created with
        their result already set.
    id : str
        Opaque match identifier.
    """

    player1_id: str
    player2_id: Optional[str] = None
    is_bye: bool = False
    result: Optional[MatchResult] = None
    id: str = field(default_factory=generate_id)

    @property
    def is_pending(self) -> bool:
        """A regular match still waiting for its result."""
        return not self.is_bye and self.result is None

    def involves(self, player_id: str) -> bool:
        return player_id in (self.player1_id, self.player2_id)

    def replace_player(self, old_id: str, new_id: str) -> None:
        """Seat ``new_id`` wherever ``old_id`` sits in this match."""
        if self.player1_id == old_id:
            self.player1_id = new_id
        if self.player2_id == old_id:
            self.player2_id = new_id

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "player1_id": self.player1_id,
            "player2_id": self.player2_id,
            "is_bye": self.is_bye,
            "result": self.result.to_dict() if self.result else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary.

        A result that is not an object is read as no result.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Match must be an object, got {type(data).__name__}")
        result_data = data.get("result")
        return cls(
            id=data.get("id") or generate_id(),
            player1_id=data["player1_id"],
            player2_id=data.get("player2_id"),
            is_bye=data.get("is_bye", False),
            result=(
                MatchResult.from_dict(result_data)
                if isinstance(result_data, dict) and result_data
                else None
            ),
        )
