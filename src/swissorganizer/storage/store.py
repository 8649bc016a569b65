"""Central state store: the only layer that reads or writes the data file.

The store holds the whole application document (roster, current tournament,
history). Updates are applied to a copy and committed in one step, then
persisted and announced to subscribers.
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

import copy
import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from swissorganizer.exceptions import FileSaveException
from swissorganizer.models.player import Player
from swissorganizer.models.tournament import TournamentData
from swissorganizer.utils import setup_logger

logger = setup_logger(__name__)

Subscriber = Callable[["AppState"], None]
Updater = Callable[["AppState"], Optional["AppState"]]


@dataclass
class AppState:
    """The persisted document.

    Attributes:
        players: Global roster
        tournament: Current tournament, or None
        past_tournaments: Archived tournaments, most recent first
    """

    players: List[Player] = field(default_factory=list)
    tournament: Optional[TournamentData] = None
    past_tournaments: List[TournamentData] = field(default_factory=list)

    def player_names(self) -> Dict[str, str]:
        """Map of player ID to display name."""
        return {p.id: p.name for p in self.players}

    def find_past_tournament(self, tournament_id: str) -> Optional[TournamentData]:
        return next((t for t in self.past_tournaments if t.id == tournament_id), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "players": [p.to_dict() for p in self.players],
            "tournament": self.tournament.to_dict() if self.tournament else None,
            "past_tournaments": [t.to_dict() for t in self.past_tournaments],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "AppState":
        """Rebuild state from saved data, defaulting anything malformed.

        A missing or broken roster becomes an empty list, a missing or broken
        tournament becomes None and unreadable history entries are dropped.
        """
        if not isinstance(data, dict):
            logger.warning("Saved state is not an object; starting fresh")
            return cls()

        players = []
        raw_players = data.get("players")
        if isinstance(raw_players, list):
            for entry in raw_players:
                name = entry.get("name") if isinstance(entry, dict) else None
                if isinstance(name, str) and name:
                    players.append(Player.from_dict(entry))
                else:
                    logger.warning("Dropping malformed player entry: %r", entry)

        return cls(
            players=players,
            tournament=_tournament_or_none(data.get("tournament")),
            past_tournaments=[
                t
                for t in (
                    _tournament_or_none(entry)
                    for entry in (
                        data.get("past_tournaments")
                        if isinstance(data.get("past_tournaments"), list)
                        else []
                    )
                )
                if t is not None
            ],
        )


def _tournament_or_none(data: Any) -> Optional[TournamentData]:
    if not isinstance(data, dict):
        return None
    try:
        return TournamentData.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning("Dropping unreadable tournament %r: %s", data.get("id"), e)
        return None


class StateStore:
    """Owns the application state and its JSON file.

    Args:
        path: Data file; None keeps everything in memory
    """

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path: Optional[Path] = Path(path) if path is not None else None
        self._state = AppState()
        self._subscribers: List[Subscriber] = []
        self.last_save_error: Optional[FileSaveException] = None

    # ========== Loading ==========

    def load(self) -> AppState:
        """Load state from disk, falling back to a fresh state.

        Returns:
            The loaded state
        """
        if self.path is None or not self.path.exists():
            self._state = AppState()
            return self._state

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s, starting fresh: %s", self.path, e)
            self._state = AppState()
            return self._state

        self._state = AppState.from_dict(raw)
        logger.info(
            "Loaded state: %s players, tournament: %s, %s archived",
            len(self._state.players),
            self._state.tournament.id if self._state.tournament else "none",
            len(self._state.past_tournaments),
        )
        return self._state

    # ========== Access ==========

    def get_state(self) -> AppState:
        """Return the current state (treat as read-only)."""
        return self._state

    def set_state(self, updater: Updater) -> AppState:
        """Apply ``updater`` to a copy of the state and commit it.

        The updater may mutate the copy in place and return None, or return a
        replacement state. Persistence failures are reported through
        ``last_save_error`` and the log; the committed state stays.

        Args:
            updater: Function receiving the draft state

        Returns:
            The committed state
        """
        draft = copy.deepcopy(self._state)
        replacement = updater(draft)
        self._state = replacement if replacement is not None else draft

        try:
            self.save()
        except FileSaveException as e:
            self.last_save_error = e
            logger.error("Failed to persist state: %s", e)

        for fn in list(self._subscribers):
            fn(self._state)
        return self._state

    def subscribe(self, fn: Subscriber) -> Callable[[], None]:
        """Call ``fn`` after every committed update.

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(fn)

        def unsubscribe() -> None:
            if fn in self._subscribers:
                self._subscribers.remove(fn)

        return unsubscribe

    # ========== Saving ==========

    def save(self) -> None:
        """Write the state to disk through a temporary file.

        Raises:
            FileSaveException: If the file cannot be written
        """
        if self.path is None:
            return

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(self._state.to_dict(), f, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise FileSaveException(f"Cannot write {self.path}: {e}") from e

        self.last_save_error = None
        logger.debug("Saved state to %s", self.path)
