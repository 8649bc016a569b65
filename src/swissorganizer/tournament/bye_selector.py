"""Bye assignment for rounds with an odd number of players."""

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

from typing import Iterable, Optional, Sequence, Set

from swissorganizer.models.tournament import RoundData
from swissorganizer.utils import setup_logger

logger = setup_logger(__name__)


def prior_bye_recipients(completed_rounds: Iterable[RoundData]) -> Set[str]:
    """IDs of every player who already sat out with a bye."""
    return {
        match.player1_id
        for round_data in completed_rounds
        for match in round_data.matches
        if match.is_bye
    }


def select_bye_player(
    player_ids: Sequence[str], completed_rounds: Iterable[RoundData]
) -> Optional[str]:
    """Determine the bye player.

    Priority:
    1. Lowest ranked player who has not received a bye
    2. If everyone has had one, the lowest ranked player again

    Args:
        player_ids: Active player IDs ordered by standings, best first
        completed_rounds: Completed rounds, to find earlier byes

    Returns:
        The player ID that sits out, or None for an empty field
    """
    if not player_ids:
        return None

    recipients = prior_bye_recipients(completed_rounds)
    for player_id in reversed(player_ids):
        if player_id not in recipients:
            logger.info("Assigning bye to %s", player_id)
            return player_id

    selected = player_ids[-1]
    logger.warning(
        "All players have already received a bye. Assigning a second bye to %s",
        selected,
    )
    return selected
