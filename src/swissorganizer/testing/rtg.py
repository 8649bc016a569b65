"""Random Tournament Generator (RTG) - Internal testing system for Swiss pairings.

This module plays complete seeded tournaments through :class:`TournamentService`
with simulated best-of-three results. It is used to exercise the pairing
engine on many field sizes and to collect statistics on forced rematches and
bye distribution.
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
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple

from swissorganizer.models.player import Player
from swissorganizer.models.standing import Standing
from swissorganizer.models.tournament import Match, PairingHistory, TournamentData
from swissorganizer.storage.store import StateStore
from swissorganizer.tournament.roster import PlayerRoster
from swissorganizer.tournament.service import TournamentService
from swissorganizer.utils import setup_logger

logger = setup_logger(__name__)

Score = Tuple[int, int, int]


class ResultPattern(Enum):
    """Result generation patterns for tournaments."""

    REALISTIC = "realistic"
    BALANCED = "balanced"
    DRAW_HEAVY = "draw_heavy"
    RANDOM = "random"


@dataclass
class RTGConfig:
    """Configuration for Random Tournament Generator."""

    num_players: int
    num_rounds: int
    result_pattern: ResultPattern = ResultPattern.REALISTIC
    seed: Optional[int] = None
    draw_percentage: int = 10
    drop_rate: float = 0.0
    late_arrivals: int = 0
    strength_range: Tuple[float, float] = (1.0, 3.0)


@dataclass
class TournamentStats:
    """Pairing statistics collected while a tournament is played."""

    rounds_played: int = 0
    fallback_rounds: int = 0
    rematches: int = 0
    bye_counts: Dict[str, int] = field(default_factory=dict)
    dropped: List[str] = field(default_factory=list)

    @property
    def max_byes(self) -> int:
        return max(self.bye_counts.values(), default=0)

    def to_dict(self) -> Dict:
        return {
            "rounds_played": self.rounds_played,
            "fallback_rounds": self.fallback_rounds,
            "rematches": self.rematches,
            "bye_counts": dict(self.bye_counts),
            "max_byes": self.max_byes,
            "dropped": list(self.dropped),
        }


class ResultSimulator:
    """Simulates best-of-three match results."""

    RANDOM_SCORES: List[Score] = [
        (2, 0, 0),
        (2, 1, 0),
        (1, 2, 0),
        (0, 2, 0),
        (1, 1, 0),
        (1, 0, 1),
        (0, 1, 1),
    ]

    def __init__(self, config: RTGConfig, rng: random.Random):
        self.config = config
        self.random = rng
        self.strength: Dict[str, float] = {}

    def assign_strength(self, player_id: str) -> None:
        low, high = self.config.strength_range
        self.strength[player_id] = self.random.uniform(low, high)

    def simulate(self, player1_id: str, player2_id: str) -> Score:
        """Return ``(player1_wins, player2_wins, draws)``."""
        pattern = self.config.result_pattern
        if pattern == ResultPattern.RANDOM:
            return self.random.choice(self.RANDOM_SCORES)

        draw_percentage = self.config.draw_percentage
        if pattern == ResultPattern.DRAW_HEAVY:
            draw_percentage = max(draw_percentage, 40)
        if self.random.random() * 100 < draw_percentage:
            return (1, 1, 0)

        if pattern == ResultPattern.BALANCED:
            game_win_prob = 0.5
        else:
            s1 = self.strength.get(player1_id, 1.0)
            s2 = self.strength.get(player2_id, 1.0)
            game_win_prob = s1 / (s1 + s2)
        return self._best_of_three(game_win_prob)

    def _best_of_three(self, game_win_prob: float) -> Score:
        wins = [0, 0]
        while max(wins) < 2:
            if self.random.random() < game_win_prob:
                wins[0] += 1
            else:
                wins[1] += 1
        return wins[0], wins[1], 0


class RandomTournamentGenerator:
    """Main tournament generator orchestrating roster, pairings and results."""

    def __init__(self, config: RTGConfig):
        if config.num_players < 2:
            raise ValueError("A tournament needs at least two players")
        if config.num_rounds < 1:
            raise ValueError("A tournament needs at least one round")
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )
        self.result_simulator = ResultSimulator(config, self.random)
        self._now = datetime(2026, 1, 1, 10, 0, tzinfo=timezone.utc)

        self.store = StateStore()
        self.roster = PlayerRoster(self.store)
        self.service = TournamentService(self.store, clock=self._clock, rng=self.random)

    def _clock(self) -> datetime:
        self._now += timedelta(seconds=30)
        return self._now

    def create_players(self, count: int, offset: int = 0) -> List[Player]:
        players = []
        for i in range(count):
            player = self.roster.add_player(f"Player-{offset + i + 1:03d}")
            self.result_simulator.assign_strength(player.id)
            players.append(player)
        return players

    def generate_complete_tournament(self) -> Dict:
        """Play a complete tournament.

        Returns:
            Dictionary with the finished ``tournament``, ``players``,
            final ``standings`` and pairing ``stats``
        """
        logger.info(
            "Generating tournament: %s players, %s rounds",
            self.config.num_players,
            self.config.num_rounds,
        )
        players = self.create_players(self.config.num_players)
        late = self.create_players(self.config.late_arrivals, offset=len(players))

        self.service.create_tournament([p.id for p in players], "2026-01-01")
        self.service.reshuffle_seating()

        stats = TournamentStats()
        for round_number in range(1, self.config.num_rounds + 1):
            if round_number == 2:
                for player in late:
                    self.service.add_late_arrival(player.id)

            round_data = self.service.pair_next_round()
            if round_data is None:
                logger.info("Stopping after %s round(s)", round_number - 1)
                break

            pairing = self.service.last_pairing
            if pairing is not None and pairing.is_fallback:
                stats.fallback_rounds += 1
                stats.rematches += pairing.rematch_count

            for match in round_data.matches:
                if match.is_bye:
                    stats.bye_counts[match.player1_id] = (
                        stats.bye_counts.get(match.player1_id, 0) + 1
                    )
                    continue
                self.service.submit_result(
                    match.id, *self.result_simulator.simulate(match.player1_id, match.player2_id)
                )

            self.service.complete_current_round()
            stats.rounds_played += 1
            self._simulate_drops(stats)

        self.service.finish_tournament()
        tournament = self.service.tournament
        logger.info("Tournament generation complete")
        return {
            "config": self.config,
            "players": players + late,
            "tournament": tournament,
            "standings": self.service.get_standings(),
            "stats": stats,
        }

    def _simulate_drops(self, stats: TournamentStats) -> None:
        if self.config.drop_rate <= 0:
            return
        for player_id in list(self.service.tournament.active_players):
            if len(self.service.tournament.active_players) <= 2:
                return
            if self.random.random() < self.config.drop_rate:
                self.service.drop_player(player_id)
                stats.dropped.append(player_id)


def find_violations(tournament: TournamentData) -> List[str]:
    """Check a played tournament for pairing problems.

    Reports players seated twice in one round, extra byes, byes given in an
    even field and repeated pairings. Repeated pairings are expected only in
    rounds paired by the sequential fallback.
    """
    violations = []
    history = PairingHistory()
    for round_data in tournament.rounds:
        seated = Counter(round_data.player_ids())
        for player_id, times in seated.items():
            if times > 1:
                violations.append(
                    f"Round {round_data.round_number}: {player_id} seated {times} times"
                )
        byes = [m for m in round_data.matches if m.is_bye]
        if len(byes) > 1:
            violations.append(f"Round {round_data.round_number}: {len(byes)} byes")
        if byes and len(seated) % 2 == 0:
            violations.append(
                f"Round {round_data.round_number}: bye with an even field"
            )
        for match in round_data.matches:
            if _is_rematch(match, history):
                violations.append(
                    f"Round {round_data.round_number}: rematch "
                    f"{match.player1_id} vs {match.player2_id}"
                )
        for match in round_data.matches:
            if not match.is_bye and match.player2_id is not None:
                history.add_pairing(match.player1_id, match.player2_id)
    return violations


def _is_rematch(match: Match, history: PairingHistory) -> bool:
    if match.is_bye or match.player2_id is None:
        return False
    return history.have_played(match.player1_id, match.player2_id)


def create_small_tournament(
    num_players: int = 8, seed: Optional[int] = None
) -> RandomTournamentGenerator:
    """Create small tournament for testing."""
    return RandomTournamentGenerator(
        RTGConfig(num_players=num_players, num_rounds=3, seed=seed)
    )


def create_normal_tournament(
    num_players: int = 24, seed: Optional[int] = None
) -> RandomTournamentGenerator:
    """Create a typical store-event-sized tournament."""
    return RandomTournamentGenerator(
        RTGConfig(num_players=num_players, num_rounds=5, seed=seed)
    )


def summarize(standings: List[Standing], names: Dict[str, str], top: int = 8) -> List[str]:
    """Short text lines for the top of the final standings."""
    lines = []
    for rank, standing in enumerate(standings[:top], start=1):
        lines.append(
            f"{rank:>3}. {names.get(standing.player_id, standing.player_id):<14}"
            f"{standing.match_points:>3} pts  {standing.record}  "
            f"OMW {standing.omw_pct:.3f}"
        )
    return lines
