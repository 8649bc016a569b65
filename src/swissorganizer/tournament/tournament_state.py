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

"""
Tournament state snapshot.

This module derives where a tournament is in its lifecycle and which
transitions are currently allowed, so front ends can disable actions instead
of calling transitions that would be ignored.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from swissorganizer.models.tournament import TournamentData


class TournamentPhase(Enum):
    """
    Represents the current phase of a tournament.

    Used to determine which actions should be available.
    """

    NO_TOURNAMENT = auto()  # No tournament loaded
    SEATING = auto()  # Created, round 1 not paired yet
    ROUND_ACTIVE = auto()  # Pairings out, waiting for results
    BETWEEN_ROUNDS = auto()  # Last round closed, ready to pair the next
    COMPLETE = auto()  # Finished


@dataclass
class TournamentState:
    """
    Encapsulates the computed state of a tournament.

    Attributes
    ----------
    phase : TournamentPhase
        Current phase of the tournament
    rounds_paired : int
        Number of rounds that have been paired
    rounds_completed : int
        Number of closed rounds
    num_players : int
        Players still in the event
    pending_matches : int
        Regular matches of the active round without a result
    can_pair : bool
        Whether the next round can be paired
    can_complete_round : bool
        Whether the active round can be closed
    can_repair : bool
        Whether the active round can still be re-paired
    can_finish : bool
        Whether the tournament can be marked complete
    can_reopen : bool
        Whether a finished tournament can be reopened
    """

    phase: TournamentPhase
    rounds_paired: int = 0
    rounds_completed: int = 0
    num_players: int = 0
    pending_matches: int = 0
    can_pair: bool = False
    can_complete_round: bool = False
    can_repair: bool = False
    can_finish: bool = False
    can_reopen: bool = False

    @classmethod
    def compute(cls, tournament: Optional[TournamentData]) -> "TournamentState":
        """
        Compute the current tournament state.

        Parameters
        ----------
        tournament : TournamentData or None
            The current tournament, or None if no tournament is loaded

        Returns
        -------
        TournamentState
            The computed state object with all derived properties
        """
        if tournament is None:
            return cls(phase=TournamentPhase.NO_TOURNAMENT)

        active_round = tournament.active_round
        rounds_paired = len(tournament.rounds)
        rounds_completed = len(tournament.completed_rounds)
        pending = (
            sum(1 for m in active_round.matches if m.is_pending) if active_round else 0
        )

        if tournament.is_complete:
            phase = TournamentPhase.COMPLETE
        elif active_round is not None:
            phase = TournamentPhase.ROUND_ACTIVE
        elif rounds_paired == 0:
            phase = TournamentPhase.SEATING
        else:
            phase = TournamentPhase.BETWEEN_ROUNDS

        return cls(
            phase=phase,
            rounds_paired=rounds_paired,
            rounds_completed=rounds_completed,
            num_players=len(tournament.active_players),
            pending_matches=pending,
            can_pair=phase in (TournamentPhase.SEATING, TournamentPhase.BETWEEN_ROUNDS)
            and len(tournament.active_players) >= 2,
            can_complete_round=phase == TournamentPhase.ROUND_ACTIVE and pending == 0,
            can_repair=phase == TournamentPhase.ROUND_ACTIVE
            and not active_round.has_entered_results,
            can_finish=tournament.is_active,
            can_reopen=tournament.is_complete,
        )

    @property
    def display_round_number(self) -> int:
        """The round currently played, or the next one to pair (1-based)."""
        if self.phase == TournamentPhase.ROUND_ACTIVE:
            return self.rounds_paired
        return self.rounds_paired + 1

    def get_status_message(self) -> str:
        """
        Get a human-readable status message for the current state.

        Returns
        -------
        str
            A message describing what the organizer should do next
        """
        if self.phase == TournamentPhase.NO_TOURNAMENT:
            return "No tournament running. Create one to begin."
        elif self.phase == TournamentPhase.COMPLETE:
            return (
                f"Tournament complete after {self.rounds_completed} round(s). "
                "Export the results or start a new tournament."
            )
        elif self.phase == TournamentPhase.SEATING:
            return (
                f"{self.num_players} players seated. "
                "Reshuffle the seating if needed, then pair round 1."
            )
        elif self.phase == TournamentPhase.ROUND_ACTIVE:
            if self.pending_matches:
                return (
                    f"Round {self.display_round_number}: waiting for "
                    f"{self.pending_matches} result(s)."
                )
            return f"Round {self.display_round_number}: all results in, close the round."
        elif self.phase == TournamentPhase.BETWEEN_ROUNDS:
            return (
                f"Round {self.rounds_completed} complete. "
                f"Pair round {self.display_round_number} or finish the tournament."
            )
        return ""
