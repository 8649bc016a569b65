from unittest import mock

import pytest
import requests

from swissorganizer.exceptions import InvalidPlayerDataException, PlayerNotFoundException
from swissorganizer.tournament.roster import parse_players_csv

PLAYERS_CSV = """player_id,player_name,elo
1,Ann,1500
2, Bob ,1400
3,Missing Player,0
4,,0
5,ann,1200
"""


def test_add_player_trims_and_rejects_blank(roster):
    player = roster.add_player("  Ann  ")
    assert player.name == "Ann"
    assert roster.get_player(player.id) == player
    with pytest.raises(InvalidPlayerDataException):
        roster.add_player("   ")


def test_edit_player_keeps_id(roster):
    player = roster.add_player("Ann")
    assert roster.edit_player(player.id, "Annie")
    assert roster.get_player(player.id).name == "Annie"
    assert not roster.edit_player(player.id, " ")
    assert not roster.edit_player("unknown", "Zed")


def test_delete_player(roster):
    player = roster.add_player("Ann")
    assert roster.delete_player(player.id)
    assert roster.list_players() == []
    assert not roster.delete_player(player.id)


def test_find_by_name_is_case_insensitive(roster):
    player = roster.add_player("Ann")
    assert roster.find_by_name("ANN") == player
    assert roster.find_by_name(player.id) == player
    with pytest.raises(PlayerNotFoundException):
        roster.find_by_name("Zed")


def test_parse_players_csv():
    assert parse_players_csv(PLAYERS_CSV) == ["Ann", "Bob", "ann"]


def test_merge_names_skips_known_names(roster):
    roster.add_player("Ann")
    added = roster.merge_names(parse_players_csv(PLAYERS_CSV))
    assert [p.name for p in added] == ["Bob"]
    assert sorted(p.name for p in roster.list_players()) == ["Ann", "Bob"]


def test_sync_from_url_merges_remote_names(roster):
    response = mock.Mock(text=PLAYERS_CSV)
    session = mock.Mock()
    session.get.return_value = response

    added = roster.sync_from_url("https://example.test/players.csv", session=session)

    session.get.assert_called_once()
    assert [p.name for p in added] == ["Ann", "Bob"]


def test_sync_failure_leaves_roster_untouched(roster):
    roster.add_player("Ann")
    session = mock.Mock()
    session.get.side_effect = requests.ConnectionError("offline")
    assert roster.sync_from_url("https://example.test/players.csv", session=session) == []
    assert [p.name for p in roster.list_players()] == ["Ann"]
