"""The global player roster, independent of any tournament."""

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

import csv
import io
from typing import Iterable, List, Optional

import requests

from swissorganizer.constants import (
    DEFAULT_PLAYERS_CSV_URL,
    HTTP_TIMEOUT_SECONDS,
    MISSING_PLAYER_NAME,
)
from swissorganizer.exceptions import PlayerNotFoundException
from swissorganizer.models.player import Player
from swissorganizer.storage.store import AppState, StateStore
from swissorganizer.utils import setup_logger
from swissorganizer.utils.validation import validate_name, validate_name_strict

logger = setup_logger(__name__)


def parse_players_csv(text: str) -> List[str]:
    """Extract player names from the shared players CSV.

    The first row is a header; names are in the second column. Blank names
    and the "Missing Player" placeholder are skipped.
    """
    names = []
    rows = csv.reader(io.StringIO(text.strip()))
    next(rows, None)
    for row in rows:
        if len(row) < 2:
            continue
        name = row[1].strip()
        if name and name != MISSING_PLAYER_NAME:
            names.append(name)
    return names


class PlayerRoster:
    """Add, rename and remove roster players through the state store.

    Tournaments refer to players by ID only, so renaming a player mid-event
    leaves every recorded result intact.
    """

    def __init__(self, store: StateStore) -> None:
        self.store = store

    def list_players(self, include_inactive: bool = True) -> List[Player]:
        players = self.store.get_state().players
        if include_inactive:
            return list(players)
        return [p for p in players if p.active]

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.store.get_state().players if p.id == player_id), None)

    def find_by_name(self, name: str) -> Player:
        """Look a player up by name (case-insensitive) or by ID.

        Raises:
            PlayerNotFoundException: If nothing matches
        """
        wanted = name.strip().lower()
        for player in self.store.get_state().players:
            if player.id == name or player.name.lower() == wanted:
                return player
        raise PlayerNotFoundException(f"No player named {name!r}")

    def add_player(self, name: str) -> Player:
        """Add a new player to the roster.

        Raises:
            InvalidPlayerDataException: If the name is empty
        """
        player = Player(name=validate_name_strict(name))

        def updater(state: AppState) -> None:
            state.players.append(player)

        self.store.set_state(updater)
        logger.info("Added player %s (%s)", player.name, player.id)
        return player

    def edit_player(self, player_id: str, new_name: str) -> bool:
        """Rename a player. Blank names and unknown IDs are ignored."""
        result = validate_name(new_name)
        if not result or self.get_player(player_id) is None:
            return False

        def updater(state: AppState) -> None:
            for player in state.players:
                if player.id == player_id:
                    player.name = result.sanitized_value

        self.store.set_state(updater)
        logger.info("Renamed player %s to %s", player_id, result.sanitized_value)
        return True

    def delete_player(self, player_id: str) -> bool:
        """Remove a player from the roster; tournament records keep the ID."""
        if self.get_player(player_id) is None:
            return False

        def updater(state: AppState) -> None:
            state.players = [p for p in state.players if p.id != player_id]

        self.store.set_state(updater)
        logger.info("Removed player %s from the roster", player_id)
        return True

    def merge_names(self, names: Iterable[str]) -> List[Player]:
        """Add every name not already on the roster (case-insensitive).

        Existing players are never removed or renamed.

        Returns:
            The newly added players
        """
        known = {p.name.lower() for p in self.store.get_state().players}
        to_add = []
        for name in names:
            name = name.strip()
            if name and name.lower() not in known:
                known.add(name.lower())
                to_add.append(Player(name=name))

        if to_add:

            def updater(state: AppState) -> None:
                state.players.extend(to_add)

            self.store.set_state(updater)
            logger.info("Merged %s new player(s) into the roster", len(to_add))
        return to_add

    def sync_from_url(
        self,
        url: str = DEFAULT_PLAYERS_CSV_URL,
        session: Optional[requests.Session] = None,
    ) -> List[Player]:
        """Fetch the shared players CSV and merge its names.

        Network or HTTP failures are logged and leave the roster unchanged.

        Returns:
            The newly added players (empty on failure)
        """
        http = session or requests
        try:
            response = http.get(url, timeout=HTTP_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Could not fetch remote player list from %s: %s", url, e)
            return []
        return self.merge_names(parse_players_csv(response.text))
