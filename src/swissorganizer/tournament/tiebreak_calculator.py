"""Standings and tiebreak calculation for tournaments.

This module aggregates match and game records from completed rounds and
computes the percentage tiebreakers used to rank players.
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

import functools
from fractions import Fraction
from typing import Dict, Iterable, List, Sequence

from swissorganizer.constants import (
    BYE_GAME_LOSSES,
    BYE_GAME_WINS,
    DRAW_POINTS,
    MIN_GAME_WIN_PCT,
    MIN_MATCH_WIN_PCT,
    TIEBREAK_EPSILON,
    WIN_POINTS,
)
from swissorganizer.models.standing import Standing
from swissorganizer.models.tournament import Match, RoundData
from swissorganizer.utils import setup_logger

logger = setup_logger(__name__)


class TiebreakCalculator:
    """Calculates standings and tiebreak percentages.

    Players are ranked by:

    1. Match points (win 3, draw 1, loss 0; a bye is a win)
    2. OMW%: average match-win percentage of the opponents
    3. GW%: own game-win percentage
    4. OGW%: average game-win percentage of the opponents

    Every percentage is floored at 33%. Byes are not opponents, so they never
    enter OMW% or OGW%. Arithmetic is exact (``Fraction``) until the final
    values are stored on the :class:`Standing`.
    """

    def compute_standings(
        self, active_player_ids: Sequence[str], rounds: Iterable[RoundData]
    ) -> List[Standing]:
        """Compute sorted standings for all active players.

        Args:
            active_player_ids: IDs of players still in the event
            rounds: All rounds; only completed ones are counted

        Returns:
            One Standing per active player, best first
        """
        stats: Dict[str, Standing] = {
            pid: Standing(player_id=pid) for pid in active_player_ids
        }

        for round_data in rounds:
            if not round_data.is_completed:
                continue
            for match in round_data.matches:
                if match.is_bye:
                    self._record_bye(match, stats)
                elif match.result is not None:
                    self._record_match(match, stats)

        match_win = {pid: self._match_win_pct(s) for pid, s in stats.items()}
        game_win = {pid: self._game_win_pct(s) for pid, s in stats.items()}

        for pid, standing in stats.items():
            standing.mw_pct = float(match_win[pid])
            standing.gw_pct = float(game_win[pid])
            standing.omw_pct = float(
                self._opponent_average(standing, match_win, MIN_MATCH_WIN_PCT)
            )
            standing.ogw_pct = float(
                self._opponent_average(standing, game_win, MIN_GAME_WIN_PCT)
            )

        return sorted(stats.values(), key=functools.cmp_to_key(self.compare_standings))

    def _record_bye(self, match: Match, stats: Dict[str, Standing]) -> None:
        """A bye counts as a 2-0 match win with no opponent."""
        standing = stats.get(match.player1_id)
        if standing is None:
            return
        standing.matches_played += 1
        standing.match_wins += 1
        standing.match_points += WIN_POINTS
        standing.games_won += BYE_GAME_WINS
        standing.games_lost += BYE_GAME_LOSSES
        standing.games_played += BYE_GAME_WINS + BYE_GAME_LOSSES
        standing.has_bye = True

    def _record_match(self, match: Match, stats: Dict[str, Standing]) -> None:
        """Accumulate a played match for both players."""
        first = stats.get(match.player1_id)
        second = stats.get(match.player2_id) if match.player2_id else None
        if first is None or second is None:
            # A player who left the event takes the match out of both records
            logger.debug(
                "Skipping match %s: %s or %s is not active",
                match.id,
                match.player1_id,
                match.player2_id,
            )
            return

        result = match.result
        total_games = result.games_played

        first.matches_played += 1
        first.games_won += result.player1_wins
        first.games_lost += result.player2_wins
        first.games_played += total_games
        first.opponents.append(second.player_id)

        second.matches_played += 1
        second.games_won += result.player2_wins
        second.games_lost += result.player1_wins
        second.games_played += total_games
        second.opponents.append(first.player_id)

        if result.player1_wins > result.player2_wins:
            first.match_wins += 1
            first.match_points += WIN_POINTS
            second.match_losses += 1
        elif result.player2_wins > result.player1_wins:
            second.match_wins += 1
            second.match_points += WIN_POINTS
            first.match_losses += 1
        else:
            first.match_draws += 1
            first.match_points += DRAW_POINTS
            second.match_draws += 1
            second.match_points += DRAW_POINTS

    def _match_win_pct(self, standing: Standing) -> Fraction:
        if standing.matches_played == 0:
            return MIN_MATCH_WIN_PCT
        pct = Fraction(standing.match_points, WIN_POINTS * standing.matches_played)
        return max(pct, MIN_MATCH_WIN_PCT)

    def _game_win_pct(self, standing: Standing) -> Fraction:
        if standing.games_played == 0:
            return MIN_GAME_WIN_PCT
        return max(Fraction(standing.games_won, standing.games_played), MIN_GAME_WIN_PCT)

    def _opponent_average(
        self, standing: Standing, pct_by_id: Dict[str, Fraction], floor: Fraction
    ) -> Fraction:
        """Mean of the opponents' percentages, ``floor`` without opponents."""
        values = [pct_by_id[opp] for opp in standing.opponents if opp in pct_by_id]
        if not values:
            return floor
        return sum(values, Fraction(0)) / len(values)

    @staticmethod
    def compare_standings(first: Standing, second: Standing) -> int:
        """Compare two standings for sort order.

        Returns:
            -1 if ``first`` ranks higher, 1 if ``second`` ranks higher, 0 if tied
        """
        if first.match_points != second.match_points:
            return -1 if first.match_points > second.match_points else 1

        for attr in ("omw_pct", "gw_pct", "ogw_pct"):
            diff = getattr(first, attr) - getattr(second, attr)
            if abs(diff) > TIEBREAK_EPSILON:
                return -1 if diff > 0 else 1

        return 0


_calculator = TiebreakCalculator()


def compute_standings(
    active_player_ids: Sequence[str], rounds: Iterable[RoundData]
) -> List[Standing]:
    """Module-level shortcut for :meth:`TiebreakCalculator.compute_standings`."""
    return _calculator.compute_standings(active_player_ids, rounds)
