"""Tournament management for Swiss Organizer.

Standings, bye selection, the round lifecycle, the roster and the round timer.
"""

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

from swissorganizer.tournament.bye_selector import select_bye_player
from swissorganizer.tournament.roster import PlayerRoster
from swissorganizer.tournament.round_timer import RoundTimer
from swissorganizer.tournament.service import TournamentService
from swissorganizer.tournament.tiebreak_calculator import (
    TiebreakCalculator,
    compute_standings,
)
from swissorganizer.tournament.tournament_state import TournamentPhase, TournamentState

__all__ = [
    "PlayerRoster",
    "RoundTimer",
    "TiebreakCalculator",
    "TournamentPhase",
    "TournamentService",
    "TournamentState",
    "compute_standings",
    "select_bye_player",
]
