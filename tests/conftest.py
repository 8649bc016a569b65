import random
from datetime import datetime, timedelta, timezone

import pytest

from swissorganizer.constants import STATUS_COMPLETE
from swissorganizer.models.tournament import Match, MatchResult, RoundData
from swissorganizer.storage.store import StateStore
from swissorganizer.tournament.roster import PlayerRoster
from swissorganizer.tournament.service import TournamentService


class StepClock:
    """Deterministic clock: every call is one minute after the previous one."""

    def __init__(self, start=datetime(2026, 2, 18, 18, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


def make_round(round_number, results, bye=None, status=STATUS_COMPLETE):
    """Build a round from ``(p1, p2, p1_wins, p2_wins[, draws])`` tuples.

    ``p1_wins`` may be None for a match without a result.
    """
    matches = []
    for entry in results:
        p1, p2, w1, w2 = entry[:4]
        draws = entry[4] if len(entry) > 4 else 0
        result = None if w1 is None else MatchResult(w1, w2, draws)
        matches.append(Match(player1_id=p1, player2_id=p2, result=result))
    if bye is not None:
        matches.append(
            Match(player1_id=bye, player2_id=None, is_bye=True, result=MatchResult.bye(None))
        )
    return RoundData(round_number=round_number, status=status, matches=matches)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store():
    return StateStore()


@pytest.fixture
def roster(store):
    return PlayerRoster(store)


@pytest.fixture
def service(store, clock):
    return TournamentService(store, clock=clock, rng=random.Random(7))


@pytest.fixture
def players(roster):
    """Eight roster players A..H, returned as IDs in that order."""
    return [roster.add_player(name).id for name in "ABCDEFGH"]
