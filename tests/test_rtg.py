import pytest

from swissorganizer.testing.rtg import (
    RandomTournamentGenerator,
    ResultPattern,
    RTGConfig,
    find_violations,
)


@pytest.mark.parametrize("num_players", [4, 5, 8, 13, 16])
def test_generated_tournaments_have_no_pairing_violations(num_players):
    config = RTGConfig(num_players=num_players, num_rounds=3, seed=123)
    data = RandomTournamentGenerator(config).generate_complete_tournament()

    stats = data["stats"]
    assert stats.rounds_played == 3
    assert stats.fallback_rounds == 0
    assert find_violations(data["tournament"]) == []
    assert data["tournament"].is_complete


def test_odd_field_spreads_byes():
    config = RTGConfig(
        num_players=7, num_rounds=5, seed=5, result_pattern=ResultPattern.RANDOM
    )
    stats = RandomTournamentGenerator(config).generate_complete_tournament()["stats"]
    assert sum(stats.bye_counts.values()) == 5
    assert stats.max_byes == 1


def test_four_players_need_fallback_in_round_four():
    config = RTGConfig(num_players=4, num_rounds=4, seed=1)
    data = RandomTournamentGenerator(config).generate_complete_tournament()
    stats = data["stats"]
    assert stats.fallback_rounds == 1
    assert stats.rematches == 2
    assert len(find_violations(data["tournament"])) == 2


def test_drops_and_late_arrivals():
    config = RTGConfig(
        num_players=10,
        num_rounds=4,
        seed=9,
        drop_rate=0.1,
        late_arrivals=2,
        result_pattern=ResultPattern.DRAW_HEAVY,
    )
    data = RandomTournamentGenerator(config).generate_complete_tournament()
    tournament = data["tournament"]
    assert set(tournament.dropped_players) == set(data["stats"].dropped)
    assert not set(tournament.dropped_players) & set(tournament.active_players)
    assert len(data["standings"]) == len(tournament.active_players)


def test_same_seed_same_tournament():
    config = RTGConfig(num_players=9, num_rounds=3, seed=77)
    first = RandomTournamentGenerator(config).generate_complete_tournament()
    second = RandomTournamentGenerator(config).generate_complete_tournament()
    assert first["stats"].to_dict()["rematches"] == second["stats"].to_dict()["rematches"]
    assert [s.match_points for s in first["standings"]] == [
        s.match_points for s in second["standings"]
    ]


def test_rejects_tiny_fields():
    with pytest.raises(ValueError):
        RandomTournamentGenerator(RTGConfig(num_players=1, num_rounds=3))
