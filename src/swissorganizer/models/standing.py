"""Standing data class (derived, never persisted)."""

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

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass
class Standing:
    """One row of the standings table.

    Attributes:
        player_id: Player the row belongs to
        match_points: 3 per win, 1 per draw (byes count as wins)
        matches_played: Matches counted, byes included
        match_wins / match_losses / match_draws: Match record
        games_won / games_lost / games_played: Game record
        has_bye: Whether the player received a bye
        opponents: Opponent IDs faced (byes excluded)
        mw_pct / gw_pct: Match and game win percentage, floored at 0.33
        omw_pct / ogw_pct: Opponents' average match and game win percentage
    """

    player_id: str
    match_points: int = 0
    matches_played: int = 0
    match_wins: int = 0
    match_losses: int = 0
    match_draws: int = 0
    games_won: int = 0
    games_lost: int = 0
    games_played: int = 0
    has_bye: bool = False
    opponents: List[str] = field(default_factory=list)
    mw_pct: float = 0.0
    gw_pct: float = 0.0
    omw_pct: float = 0.0
    ogw_pct: float = 0.0

    @property
    def record(self) -> str:
        """Match record as ``W-L-D``."""
        return f"{self.match_wins}-{self.match_losses}-{self.match_draws}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize standing to dictionary."""
        return asdict(self)
