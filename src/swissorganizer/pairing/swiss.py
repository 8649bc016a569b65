"""Swiss Pairing System Implementation.

Rounds after the first are paired by depth-first backtracking over the
standings order: the highest ranked unpaired player takes the nearest ranked
player it has not met yet. When every complete pairing would contain a
rematch, players are paired sequentially instead so a round is never blocked.
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

import random
from typing import Iterable, List, Optional, Sequence, Set, Tuple, TypeVar

from swissorganizer.constants import PAIRING_CLEAN, PAIRING_FALLBACK
from swissorganizer.exceptions import PairingException
from swissorganizer.models.pairing import PairingResult
from swissorganizer.models.tournament import PairingHistory, RoundData, pair_key
from swissorganizer.type_hints import PriorMatchups, RoundPairings
from swissorganizer.utils import setup_logger

logger = setup_logger(__name__)

T = TypeVar("T")


def build_prior_matchups(completed_rounds: Iterable[RoundData]) -> PriorMatchups:
    """Return the set of pairs that already met.

    Every non-bye match of every given round contributes one
    ``frozenset({player1_id, player2_id})``.
    """
    return PairingHistory.from_rounds(completed_rounds).previous_matches


def has_played(player1_id: str, player2_id: str, prior_matchups: PriorMatchups) -> bool:
    """Check if two players have already played each other."""
    return pair_key(player1_id, player2_id) in prior_matchups


def pair_round(
    player_ids: Sequence[str],
    completed_rounds: Sequence[RoundData],
    bye_player_id: Optional[str] = None,
) -> RoundPairings:
    """Generate pairings for the next round.

    Parameters
    ----------
    player_ids : sequence of str
        Active player IDs, best first. For round 1 this is the (already
        shuffled) seating order.
    completed_rounds : sequence of RoundData
        Completed rounds, used for rematch avoidance.
    bye_player_id : str, optional
        Player already holding this round's bye; excluded if present.

    Returns
    -------
    list of tuple of str
        ``(player1_id, player2_id)`` for every table.
    """
    return pair_round_detailed(player_ids, completed_rounds, bye_player_id).pairs


def pair_round_detailed(
    player_ids: Sequence[str],
    completed_rounds: Sequence[RoundData],
    bye_player_id: Optional[str] = None,
) -> PairingResult:
    """Two-phase pairing that also reports whether rematches were forced.

    Same arguments as :func:`pair_round`.

    Raises
    ------
    PairingException
        If a player ID appears more than once.
    """
    players = [pid for pid in player_ids if pid != bye_player_id]
    if len(set(players)) != len(players):
        raise PairingException(f"Duplicate player IDs in pairing input: {players}")

    # Round 1: fold pairing, seat 1 vs seat N/2+1, seat 2 vs seat N/2+2, ...
    if not completed_rounds:
        return PairingResult(
            pairs=_fold_pair(players), kind=PAIRING_CLEAN, bye_player_id=bye_player_id
        )

    prior_matchups = build_prior_matchups(completed_rounds)
    pairs = _backtrack_pair(players, prior_matchups)
    if pairs is not None:
        return PairingResult(pairs=pairs, kind=PAIRING_CLEAN, bye_player_id=bye_player_id)

    # Every complete pairing repeats a match: pair sequentially as a last resort
    pairs = _greedy_pair(players)
    rematches = sum(1 for p1, p2 in pairs if has_played(p1, p2, prior_matchups))
    logger.warning(
        "No rematch-free pairing for %s players; sequential pairing used "
        "with %s rematch(es)",
        len(players),
        rematches,
    )
    return PairingResult(
        pairs=pairs,
        kind=PAIRING_FALLBACK,
        rematch_count=rematches,
        bye_player_id=bye_player_id,
    )


def _fold_pair(players: Sequence[str]) -> RoundPairings:
    """Pair position ``i`` with position ``i + half``."""
    half = len(players) // 2
    return [(players[i], players[i + half]) for i in range(half)]


def _greedy_pair(players: Sequence[str]) -> RoundPairings:
    """Pair positions 0-1, 2-3, ... ignoring history."""
    return [(players[i], players[i + 1]) for i in range(0, len(players) - 1, 2)]


def _backtrack_pair(
    players: Sequence[str], prior_matchups: PriorMatchups
) -> Optional[RoundPairings]:
    """Find the first rematch-free complete pairing in search order.

    Remaining players are an index bitmask; the lowest set bit is the best
    ranked unpaired player and candidates are tried in ascending index order.
    Masks proven unpairable are memoised, which prunes repeated sub-searches
    without changing which pairing is found first.

    Returns
    -------
    list of tuple of str or None
        None when no rematch-free pairing exists (always for an odd count).
    """
    count = len(players)
    compatible = [
        [
            i != j and not has_played(players[i], players[j], prior_matchups)
            for j in range(count)
        ]
        for i in range(count)
    ]
    dead_ends: Set[int] = set()

    def solve(remaining: int) -> Optional[List[Tuple[int, int]]]:
        if remaining == 0:
            return []
        if remaining in dead_ends:
            return None

        first = (remaining & -remaining).bit_length() - 1
        rest = remaining & ~(1 << first)
        candidates = rest
        while candidates:
            lowest = candidates & -candidates
            candidates ^= lowest
            opponent = lowest.bit_length() - 1
            if not compatible[first][opponent]:
                continue
            tail = solve(rest & ~lowest)
            if tail is not None:
                return [(first, opponent)] + tail

        dead_ends.add(remaining)
        return None

    indices = solve((1 << count) - 1)
    if indices is None:
        return None
    return [(players[i], players[j]) for i, j in indices]


def shuffle(items: List[T], rng: Optional[random.Random] = None) -> List[T]:
    """Shuffle ``items`` in place (Fisher-Yates) and return the same list.

    Used for the random round 1 seating. Pass a seeded ``random.Random`` to
    make the order reproducible.
    """
    rng = rng or random.Random()
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items
