"""Tournament lifecycle: the transitions a front end drives.

The service owns the application state through a :class:`StateStore`. Each
transition checks its preconditions against the current state, builds the
new state on a copy and commits it in one step. Transitions that do not apply
are no-ops that return ``False`` (or ``None``) instead of raising; callers are
expected to consult the query methods or :meth:`TournamentService.get_state`
first.
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
from typing import List, Optional, Sequence, Tuple

from swissorganizer.constants import STATUS_ACTIVE, STATUS_COMPLETE
from swissorganizer.models.pairing import PairingResult
from swissorganizer.models.standing import Standing
from swissorganizer.models.tournament import (
    Match,
    MatchResult,
    RoundData,
    TournamentData,
)
from swissorganizer.pairing.swiss import pair_round_detailed, shuffle
from swissorganizer.storage.store import AppState, StateStore
from swissorganizer.tournament.bye_selector import select_bye_player
from swissorganizer.tournament.tiebreak_calculator import TiebreakCalculator
from swissorganizer.tournament.tournament_state import TournamentState
from swissorganizer.type_hints import Clock
from swissorganizer.utils import setup_logger, to_iso, today_str, utc_now
from swissorganizer.utils.validation import (
    validate_date_str_strict,
    validate_match_score_strict,
)

logger = setup_logger(__name__)


class TournamentService:
    """Coordinates pairing, results and standings for the current tournament.

    Args:
        store: State container; an in-memory store is created when omitted
        clock: Time source for result timestamps
        rng: Random source for seating shuffles
    """

    def __init__(
        self,
        store: Optional[StateStore] = None,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store if store is not None else StateStore()
        self.clock = clock
        self.rng = rng or random.Random()
        self.tiebreak_calculator = TiebreakCalculator()
        # Outcome of the most recent pairing, so callers can warn on rematches
        self.last_pairing: Optional[PairingResult] = None

    # ========== Queries ==========

    @property
    def tournament(self) -> Optional[TournamentData]:
        return self.store.get_state().tournament

    @property
    def past_tournaments(self) -> List[TournamentData]:
        return self.store.get_state().past_tournaments

    def has_unfinished_tournament(self) -> bool:
        """True if there is an active (unfinished) tournament."""
        tournament = self.tournament
        return tournament is not None and tournament.is_active

    def get_active_round(self) -> Optional[RoundData]:
        tournament = self.tournament
        return tournament.active_round if tournament else None

    def get_completed_rounds(self) -> List[RoundData]:
        tournament = self.tournament
        return tournament.completed_rounds if tournament else []

    def is_round_complete(self) -> bool:
        """True if every match of the active round has a result."""
        round_data = self.get_active_round()
        if round_data is None:
            return False
        return all(m.is_bye or m.result is not None for m in round_data.matches)

    def can_correct_result(self, match_id: str) -> bool:
        """Results can only be corrected while their round is still active."""
        round_data = self.get_active_round()
        return round_data is not None and round_data.find_match(match_id) is not None

    def get_standings(self) -> List[Standing]:
        """Current standings of the players still in the event, best first."""
        tournament = self.tournament
        if tournament is None:
            return []
        return self.tiebreak_calculator.compute_standings(
            tournament.active_players, tournament.rounds
        )

    def get_state(self) -> TournamentState:
        return TournamentState.compute(self.tournament)

    # ========== Tournament Creation ==========

    def create_tournament(
        self, player_ids: Sequence[str], date_str: Optional[str] = None
    ) -> TournamentData:
        """Start a new tournament.

        A completed tournament in the current slot is archived first.

        Args:
            player_ids: Participants in seating order
            date_str: Event date (YYYY-MM-DD), defaults to today

        Returns:
            The new tournament
        """
        date_str = validate_date_str_strict(date_str) if date_str else today_str()
        participants = list(dict.fromkeys(player_ids))
        tournament = TournamentData(
            date_str=date_str,
            active_players=participants,
            seating_order=list(participants),
        )

        current = self.tournament
        if current is not None and current.is_active:
            logger.warning("Replacing unfinished tournament %s", current.id)

        def updater(state: AppState) -> None:
            if state.tournament is not None and state.tournament.is_complete:
                state.past_tournaments.insert(0, state.tournament)
            state.tournament = tournament

        self.store.set_state(updater)
        logger.info(
            "Created tournament %s on %s with %s players",
            tournament.id,
            date_str,
            len(participants),
        )
        return self.tournament

    def reshuffle_seating(self) -> bool:
        """Re-randomise the seating. Only allowed before round 1 is paired."""
        tournament = self.tournament
        if tournament is None or tournament.rounds:
            return False

        def updater(state: AppState) -> None:
            state.tournament.seating_order = shuffle(
                list(state.tournament.active_players), self.rng
            )

        self.store.set_state(updater)
        logger.info("Reshuffled seating for tournament %s", tournament.id)
        return True

    # ========== Round Management ==========

    def pair_next_round(self) -> Optional[RoundData]:
        """Pair the next round and store it as the active round.

        Round 1 uses the seating order, later rounds the standings. Odd fields
        get a bye, recorded immediately as a 2-0 win.

        Returns:
            The new round, or None when no round can be paired
        """
        tournament = self.tournament
        if tournament is None or not tournament.is_active:
            logger.warning("Cannot pair: no active tournament")
            return None
        if tournament.active_round is not None:
            logger.warning(
                "Cannot pair: round %s is still active",
                tournament.active_round.round_number,
            )
            return None
        if len(tournament.active_players) < 2:
            logger.warning("Cannot pair: fewer than two players remain")
            return None

        new_round, pairing = self._build_next_round(tournament)

        def updater(state: AppState) -> None:
            state.tournament.rounds.append(new_round)
            state.tournament.current_round = new_round.round_number

        self._commit_pairing(updater, pairing)
        return self.get_active_round()

    def _build_next_round(
        self, tournament: TournamentData
    ) -> Tuple[RoundData, PairingResult]:
        """Pair the round after ``tournament``'s completed rounds."""
        completed = tournament.completed_rounds
        round_number = len(completed) + 1

        if not completed:
            ordered_ids = self._seating_for_round_one(tournament)
        else:
            standings = self.tiebreak_calculator.compute_standings(
                tournament.active_players, completed
            )
            ordered_ids = [s.player_id for s in standings]

        bye_player_id = None
        if len(ordered_ids) % 2 != 0:
            bye_player_id = select_bye_player(ordered_ids, completed)

        pairing = pair_round_detailed(ordered_ids, completed, bye_player_id)

        matches = [Match(player1_id=p1, player2_id=p2) for p1, p2 in pairing.pairs]
        if bye_player_id is not None:
            matches.append(
                Match(
                    player1_id=bye_player_id,
                    player2_id=None,
                    is_bye=True,
                    result=MatchResult.bye(submitted_at=to_iso(self.clock())),
                )
            )

        logger.info(
            "Paired round %s: %s matches, bye: %s",
            round_number,
            len(pairing.pairs),
            bye_player_id or "None",
        )
        return RoundData(round_number=round_number, matches=matches), pairing

    @staticmethod
    def _seating_for_round_one(tournament: TournamentData) -> List[str]:
        """Seating order restricted to active players; late arrivals go last."""
        active = set(tournament.active_players)
        seated = [pid for pid in tournament.seating_order if pid in active]
        seated_set = set(seated)
        return seated + [pid for pid in tournament.active_players if pid not in seated_set]

    def _commit_pairing(self, updater, pairing: PairingResult) -> None:
        self.store.set_state(updater)
        self.last_pairing = pairing
        if pairing.is_fallback:
            logger.warning(
                "Round paired with %s forced rematch(es)", pairing.rematch_count
            )

    def swap_players(self, player_a: str, player_b: str) -> bool:
        """Swap two players between their pending matches in the active round.

        No-op if either player is not in a result-less regular match, or if
        both sit at the same table.
        """
        round_data = self.get_active_round()
        if round_data is None:
            return False
        match_a = round_data.find_pending_match(player_a)
        match_b = round_data.find_pending_match(player_b)
        if match_a is None or match_b is None or match_a.id == match_b.id:
            logger.info("Swap of %s and %s not possible", player_a, player_b)
            return False

        def updater(state: AppState) -> None:
            draft_round = state.tournament.active_round
            draft_round.find_match(match_a.id).replace_player(player_a, player_b)
            draft_round.find_match(match_b.id).replace_player(player_b, player_a)

        self.store.set_state(updater)
        logger.info("Swapped %s and %s", player_a, player_b)
        return True

    def reassign_bye(self, new_bye_player_id: str) -> bool:
        """Give the bye to ``new_bye_player_id``.

        The previous bye recipient takes the new recipient's seat in their
        pending match.
        """
        round_data = self.get_active_round()
        if round_data is None:
            return False
        bye_match = round_data.bye_match
        if bye_match is None or bye_match.player1_id == new_bye_player_id:
            return False
        target = round_data.find_pending_match(new_bye_player_id)
        if target is None:
            logger.info("Cannot move bye to %s: no pending match", new_bye_player_id)
            return False

        old_bye_player_id = bye_match.player1_id

        def updater(state: AppState) -> None:
            draft_round = state.tournament.active_round
            draft_round.bye_match.player1_id = new_bye_player_id
            draft_round.find_match(target.id).replace_player(
                new_bye_player_id, old_bye_player_id
            )

        self.store.set_state(updater)
        logger.info("Moved bye from %s to %s", old_bye_player_id, new_bye_player_id)
        return True

    def repair_active_round(self) -> bool:
        """Discard the active round and pair it again from current standings.

        Only allowed while no regular match of that round has a result, so
        entered data is never thrown away. Useful after correcting an earlier
        result.
        """
        tournament = self.tournament
        if tournament is None or not tournament.is_active:
            return False
        active_round = tournament.active_round
        if active_round is None or active_round.has_entered_results:
            return False
        return self._replace_active_round(tournament, reshuffle=False)

    def repair_round_one(self) -> bool:
        """Reshuffle the seating and pair round 1 again before any result."""
        tournament = self.tournament
        if tournament is None or not tournament.is_active:
            return False
        active_round = tournament.active_round
        if (
            active_round is None
            or active_round.round_number != 1
            or active_round.has_entered_results
        ):
            return False
        return self._replace_active_round(tournament, reshuffle=True)

    def _replace_active_round(self, tournament: TournamentData, reshuffle: bool) -> bool:
        base = TournamentData.from_dict(tournament.to_dict())
        base.rounds = base.completed_rounds
        if reshuffle:
            base.seating_order = shuffle(list(base.active_players), self.rng)
        if len(base.active_players) < 2:
            return False

        new_round, pairing = self._build_next_round(base)

        def updater(state: AppState) -> None:
            state.tournament.seating_order = base.seating_order
            state.tournament.rounds = base.rounds + [new_round]
            state.tournament.current_round = new_round.round_number

        self._commit_pairing(updater, pairing)
        logger.info("Re-paired round %s", new_round.round_number)
        return True

    # ========== Result Submission ==========

    def submit_result(
        self, match_id: str, player1_wins: int, player2_wins: int, draws: int = 0
    ) -> bool:
        """Submit (or correct) a match result.

        The first submission stamps ``submitted_at``; later ones keep it and
        stamp ``corrected_at``. Whether a correction is allowed is the
        caller's decision (see :meth:`can_correct_result`).

        Returns:
            True if the match was found and updated

        Raises:
            InvalidResultException: If a game count is negative or not an integer
        """
        validate_match_score_strict(player1_wins, player2_wins, draws)

        tournament = self.tournament
        if tournament is None:
            return False
        match = tournament.find_match(match_id)
        if match is None:
            logger.warning("Cannot record result: match %s not found", match_id)
            return False
        if match.is_bye:
            logger.warning("Bye match %s has a fixed result", match_id)
            return False

        now = to_iso(self.clock())

        def updater(state: AppState) -> None:
            draft = state.tournament.find_match(match_id)
            previous = draft.result
            draft.result = MatchResult(
                player1_wins=player1_wins,
                player2_wins=player2_wins,
                draws=draws,
                submitted_at=previous.submitted_at if previous else now,
                corrected_at=now if previous else None,
            )

        self.store.set_state(updater)
        logger.debug(
            "Recorded %s-%s-%s for match %s", player1_wins, player2_wins, draws, match_id
        )
        return True

    def complete_current_round(self) -> bool:
        """Close the active round.

        Returns:
            False (and nothing changes) if a regular match still lacks a result
        """
        round_data = self.get_active_round()
        if round_data is None or not self.is_round_complete():
            return False

        round_number = round_data.round_number

        def updater(state: AppState) -> None:
            for draft in state.tournament.rounds:
                if draft.round_number == round_number:
                    draft.status = STATUS_COMPLETE

        self.store.set_state(updater)
        logger.info("Round %s marked as completed", round_number)
        return True

    # ========== Tournament Completion ==========

    def finish_tournament(self) -> bool:
        """Mark the tournament as finished (no more rounds)."""
        tournament = self.tournament
        if tournament is None or not tournament.is_active:
            return False

        def updater(state: AppState) -> None:
            state.tournament.status = STATUS_COMPLETE

        self.store.set_state(updater)
        logger.info("Tournament %s finished", tournament.id)
        return True

    def abandon_tournament(self) -> bool:
        """Discard the current tournament entirely."""
        tournament = self.tournament
        if tournament is None:
            return False

        def updater(state: AppState) -> None:
            state.tournament = None

        self.store.set_state(updater)
        logger.info("Tournament %s abandoned", tournament.id)
        return True

    # ========== Player Management ==========

    def add_late_arrival(self, player_id: str) -> bool:
        """Add a player to the running tournament for future rounds."""
        tournament = self.tournament
        if tournament is None or not tournament.is_active:
            return False
        if player_id in tournament.active_players:
            return False

        def updater(state: AppState) -> None:
            draft = state.tournament
            draft.active_players.append(player_id)
            draft.dropped_players = [p for p in draft.dropped_players if p != player_id]
            if not draft.rounds:
                draft.seating_order.append(player_id)

        self.store.set_state(updater)
        logger.info("Added late arrival %s", player_id)
        return True

    def drop_player(self, player_id: str) -> bool:
        """Remove a player from future pairings. Past rounds are untouched."""
        tournament = self.tournament
        if tournament is None or player_id not in tournament.active_players:
            return False

        def updater(state: AppState) -> None:
            draft = state.tournament
            draft.active_players = [p for p in draft.active_players if p != player_id]
            if player_id not in draft.dropped_players:
                draft.dropped_players.append(player_id)

        self.store.set_state(updater)
        logger.info("Dropped player %s", player_id)
        return True

    # ========== Tournament History ==========

    def reopen_current_tournament(self) -> bool:
        """Reopen the completed tournament in the current slot."""
        tournament = self.tournament
        if tournament is None or not tournament.is_complete:
            return False

        def updater(state: AppState) -> None:
            state.tournament.status = STATUS_ACTIVE

        self.store.set_state(updater)
        logger.info("Reopened tournament %s", tournament.id)
        return True

    def reopen_tournament(self, tournament_id: str) -> bool:
        """Move an archived tournament back to the current slot for corrections.

        No-op while another tournament is still active. A completed
        tournament in the current slot goes back to the history.
        """
        if self.has_unfinished_tournament():
            logger.warning("Cannot reopen %s: a tournament is active", tournament_id)
            return False
        if self.store.get_state().find_past_tournament(tournament_id) is None:
            return False

        def updater(state: AppState) -> None:
            to_reopen = state.find_past_tournament(tournament_id)
            remaining = [t for t in state.past_tournaments if t.id != tournament_id]
            if state.tournament is not None:
                remaining.insert(0, state.tournament)
            to_reopen.status = STATUS_ACTIVE
            state.tournament = to_reopen
            state.past_tournaments = remaining

        self.store.set_state(updater)
        logger.info("Reopened archived tournament %s", tournament_id)
        return True

    def delete_history_entry(self, tournament_id: str) -> bool:
        """Permanently remove a tournament from the history."""
        if self.store.get_state().find_past_tournament(tournament_id) is None:
            return False

        def updater(state: AppState) -> None:
            state.past_tournaments = [
                t for t in state.past_tournaments if t.id != tournament_id
            ]

        self.store.set_state(updater)
        logger.info("Deleted archived tournament %s", tournament_id)
        return True
