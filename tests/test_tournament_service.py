import pytest

from swissorganizer.constants import STATUS_COMPLETE
from swissorganizer.exceptions import InvalidResultException, ValidationException
from swissorganizer.storage.store import StateStore
from swissorganizer.tournament.service import TournamentService


def _pairs(round_data):
    return [(m.player1_id, m.player2_id) for m in round_data.matches if not m.is_bye]


def _snapshot(service):
    return service.store.get_state().to_dict()


def _play_round(service, score=(2, 0)):
    """Pair (unless a round is active), enter ``score`` everywhere and close."""
    round_data = service.get_active_round() or service.pair_next_round()
    for match in round_data.matches:
        if not match.is_bye:
            service.submit_result(match.id, *score)
    assert service.complete_current_round()
    return round_data


# ========== Creation and Seating ==========


def test_create_tournament(service, players):
    tournament = service.create_tournament(players, "2026-02-18")
    assert tournament.date_str == "2026-02-18"
    assert tournament.active_players == players
    assert tournament.seating_order == players
    assert tournament.current_round == 0
    assert service.has_unfinished_tournament()


def test_create_tournament_rejects_bad_date(service, players):
    with pytest.raises(ValidationException):
        service.create_tournament(players, "18.02.2026")


def test_reshuffle_only_before_round_one(service, players):
    service.create_tournament(players)
    assert service.reshuffle_seating()
    assert sorted(service.tournament.seating_order) == sorted(players)
    service.pair_next_round()
    assert not service.reshuffle_seating()


# ========== Pairing ==========


def test_round_one_uses_fold_pairing_on_seating(service, players):
    a, b, c, d, e, f, g, h = players
    service.create_tournament(players)
    round_data = service.pair_next_round()
    assert round_data.round_number == 1
    assert _pairs(round_data) == [(a, e), (b, f), (c, g), (d, h)]
    assert service.tournament.current_round == 1
    assert service.last_pairing.kind == "clean"


def test_five_players_bye_goes_to_last_seat(service, players):
    a, b, c, d, e = players[:5]
    service.create_tournament(players[:5])
    round_data = service.pair_next_round()
    assert _pairs(round_data) == [(a, c), (b, d)]

    bye = round_data.matches[-1]
    assert bye.is_bye
    assert bye.player1_id == e
    assert bye.player2_id is None
    assert (bye.result.player1_wins, bye.result.player2_wins, bye.result.draws) == (2, 0, 0)
    assert bye.result.submitted_at is not None


def test_pair_is_noop_while_round_active(service, players):
    service.create_tournament(players)
    service.pair_next_round()
    before = _snapshot(service)
    assert service.pair_next_round() is None
    assert _snapshot(service) == before


def test_pair_requires_two_players(service, players):
    service.create_tournament(players[:1])
    assert service.pair_next_round() is None
    assert service.tournament.rounds == []


def test_second_round_follows_standings_without_rematches(service, players):
    service.create_tournament(players)
    first = _play_round(service)
    winners = [m.player1_id for m in first.matches]

    second = service.pair_next_round()
    played = {frozenset(p) for p in _pairs(first)}
    assert not any(frozenset(p) in played for p in _pairs(second))
    # Winners of round 1 meet each other
    top_table = set(_pairs(second)[0])
    assert top_table <= set(winners)


def test_second_bye_goes_to_someone_else(service, players):
    field = players[:5]
    service.create_tournament(field)
    first = _play_round(service)
    second = service.pair_next_round()
    assert second.bye_match.player1_id != first.bye_match.player1_id


def test_fallback_is_reported(service, players):
    service.create_tournament(players[:4])
    for _ in range(3):
        service.pair_next_round()
        _play_round(service)
    service.pair_next_round()
    assert service.last_pairing.is_fallback
    assert service.last_pairing.rematch_count == 2


# ========== Results ==========


def test_submit_and_correct_result_timestamps(service, players, clock):
    service.create_tournament(players)
    match = service.pair_next_round().matches[0]

    assert service.submit_result(match.id, 2, 1)
    result = service.tournament.find_match(match.id).result
    assert (result.player1_wins, result.player2_wins, result.draws) == (2, 1, 0)
    assert result.submitted_at is not None
    assert result.corrected_at is None
    submitted = result.submitted_at

    assert service.submit_result(match.id, 1, 2, 1)
    result = service.tournament.find_match(match.id).result
    assert result.player2_wins == 2
    assert result.submitted_at == submitted
    assert result.corrected_at is not None
    assert result.corrected_at > submitted


def test_submit_result_validates_counts(service, players):
    service.create_tournament(players)
    match = service.pair_next_round().matches[0]
    with pytest.raises(InvalidResultException):
        service.submit_result(match.id, -1, 2)
    with pytest.raises(InvalidResultException):
        service.submit_result(match.id, 1.5, 0)
    assert service.tournament.find_match(match.id).result is None


def test_submit_result_unknown_match_and_bye(service, players):
    service.create_tournament(players[:3])
    round_data = service.pair_next_round()
    assert not service.submit_result("no-such-match", 2, 0)
    assert not service.submit_result(round_data.bye_match.id, 0, 2)
    assert round_data.bye_match.result.player1_wins == 2


def test_complete_round_requires_all_results(service, players):
    service.create_tournament(players)
    round_data = service.pair_next_round()
    for match in round_data.matches[:-1]:
        service.submit_result(match.id, 2, 0)
    before = _snapshot(service)
    assert not service.is_round_complete()
    assert not service.complete_current_round()
    assert _snapshot(service) == before


def test_can_correct_result_only_in_active_round(service, players):
    service.create_tournament(players)
    first = service.pair_next_round()
    match_id = first.matches[0].id
    assert service.can_correct_result(match_id)
    _play_round(service)
    assert not service.can_correct_result(match_id)
    assert service.tournament.rounds[0].status == STATUS_COMPLETE


# ========== Round Corrections ==========


def test_swap_players_between_tables(service, players):
    a, b, c, d, e, f, g, h = players
    service.create_tournament(players)
    service.pair_next_round()
    assert service.swap_players(a, b)
    assert _pairs(service.get_active_round())[:2] == [(b, e), (a, f)]


def test_swap_rejects_same_table_and_finished_matches(service, players):
    a, b, c, d, e, f, g, h = players
    service.create_tournament(players)
    round_data = service.pair_next_round()
    before = _snapshot(service)
    assert not service.swap_players(a, e)
    assert _snapshot(service) == before
    service.submit_result(round_data.matches[0].id, 2, 0)
    before = _snapshot(service)
    assert not service.swap_players(a, b)
    assert _snapshot(service) == before


def test_reassign_bye(service, players):
    a, b, c, d, e = players[:5]
    service.create_tournament(players[:5])
    service.pair_next_round()
    assert service.reassign_bye(a)
    round_data = service.get_active_round()
    assert round_data.bye_match.player1_id == a
    assert _pairs(round_data)[0] == (e, c)
    assert not service.reassign_bye(a)


def test_reassign_bye_noops_leave_state_alone(service, players):
    a = players[0]
    service.create_tournament(players)
    round_data = service.pair_next_round()
    before = _snapshot(service)
    # Even field: there is no bye to move
    assert not service.reassign_bye(a)
    assert _snapshot(service) == before

    service.create_tournament(players[:5])
    round_data = service.pair_next_round()
    service.submit_result(round_data.matches[0].id, 2, 0)
    before = _snapshot(service)
    assert not service.reassign_bye(round_data.matches[0].player1_id)
    assert _snapshot(service) == before


def test_repair_active_round_before_results(service, players):
    service.create_tournament(players)
    _play_round(service)
    original = service.pair_next_round()
    assert service.repair_active_round()
    repaired = service.get_active_round()
    assert repaired.round_number == 2
    assert _pairs(repaired) == _pairs(original)
    assert len(service.tournament.rounds) == 2


def test_repair_active_round_is_noop_after_a_result(service, players):
    service.create_tournament(players)
    round_data = service.pair_next_round()
    service.submit_result(round_data.matches[0].id, 2, 0)
    before = _snapshot(service)
    assert not service.repair_active_round()
    assert _snapshot(service) == before


def test_repair_round_one_reshuffles(service, players):
    service.create_tournament(players)
    service.pair_next_round()
    assert service.repair_round_one()
    round_data = service.get_active_round()
    assert round_data.round_number == 1
    seating = service.tournament.seating_order
    half = len(seating) // 2
    assert _pairs(round_data) == [(seating[i], seating[i + half]) for i in range(half)]

    _play_round(service)
    service.pair_next_round()
    assert not service.repair_round_one()


# ========== Players ==========


def test_drop_player_leaves_future_pairings(service, players):
    service.create_tournament(players)
    _play_round(service)
    assert service.drop_player(players[0])
    assert not service.drop_player(players[0])
    assert service.tournament.dropped_players == [players[0]]

    round_data = service.pair_next_round()
    assert players[0] not in round_data.player_ids()
    assert round_data.bye_match is not None


def test_late_arrival_joins_next_round(service, players, roster):
    service.create_tournament(players)
    _play_round(service)
    late = roster.add_player("Late").id
    assert service.add_late_arrival(late)
    assert not service.add_late_arrival(late)
    round_data = service.pair_next_round()
    assert late in round_data.player_ids()


# ========== Completion and History ==========


def test_finish_and_archive_on_new_tournament(service, players):
    service.create_tournament(players)
    _play_round(service)
    old_id = service.tournament.id
    assert service.finish_tournament()
    assert not service.finish_tournament()
    assert not service.has_unfinished_tournament()

    service.create_tournament(players[:4])
    assert [t.id for t in service.past_tournaments] == [old_id]


def test_reopen_current_and_archived(service, players):
    service.create_tournament(players)
    first_id = service.tournament.id
    service.finish_tournament()
    assert service.reopen_current_tournament()
    assert service.has_unfinished_tournament()
    assert not service.reopen_tournament(first_id)

    service.finish_tournament()
    service.create_tournament(players[:4])
    second_id = service.tournament.id
    service.finish_tournament()

    assert service.reopen_tournament(first_id)
    assert service.tournament.id == first_id
    assert service.tournament.is_active
    assert [t.id for t in service.past_tournaments] == [second_id]


def test_delete_history_entry(service, players):
    service.create_tournament(players)
    first_id = service.tournament.id
    service.finish_tournament()
    service.create_tournament(players)
    assert service.delete_history_entry(first_id)
    assert service.past_tournaments == []
    assert not service.delete_history_entry(first_id)


def test_abandon_tournament(service, players):
    service.create_tournament(players)
    assert service.abandon_tournament()
    assert service.tournament is None
    assert not service.abandon_tournament()


# ========== Store Integration ==========


def test_noop_transitions_do_not_notify(service, players):
    calls = []
    service.store.subscribe(calls.append)
    service.create_tournament(players)
    assert len(calls) == 1
    service.complete_current_round()
    service.swap_players(players[0], players[1])
    assert len(calls) == 1


def test_state_survives_reload(tmp_path, clock, players, store):
    path = tmp_path / "state.json"
    disk_store = StateStore(path)
    disk_store.set_state(lambda state: setattr(state, "players", store.get_state().players))
    service = TournamentService(disk_store, clock=clock)
    service.create_tournament(players)
    round_data = service.pair_next_round()
    service.submit_result(round_data.matches[0].id, 2, 1)

    reloaded = StateStore(path)
    reloaded.load()
    assert reloaded.get_state().to_dict() == disk_store.get_state().to_dict()
    assert TournamentService(reloaded).get_active_round().matches[0].result.player1_wins == 2
