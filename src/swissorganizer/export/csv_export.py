"""CSV export of completed match results.

Pure functions: nothing here touches the state store or the network.
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

import csv
import io
from datetime import date, datetime, timezone
from typing import Iterable, Mapping, Optional, Union

from dateutil import tz

from swissorganizer.constants import (
    CSV_FILENAME_SUFFIX,
    CSV_HEADER,
    DEFAULT_EXPORT_TIMEZONE,
)
from swissorganizer.exceptions import ExportException
from swissorganizer.models.player import Player
from swissorganizer.models.tournament import TournamentData
from swissorganizer.utils import setup_logger
from swissorganizer.utils.validation import validate_date_str

logger = setup_logger(__name__)

PlayerNames = Union[Mapping[str, str], Iterable[Player]]


def swiss_date_to_utc(date_str: str, tz_name: str = DEFAULT_EXPORT_TIMEZONE) -> str:
    """Local midnight of ``date_str`` in ``tz_name``, as a UTC ISO string.

    The UTC offset is taken at local noon so the result does not depend on
    a DST switch happening during the night. For Zurich this gives
    ``...T23:00:00Z`` of the previous day in winter and ``...T22:00:00Z`` in
    summer.

    Raises:
        ExportException: If the date or the zone is invalid
    """
    checked = validate_date_str(date_str)
    if not checked:
        raise ExportException(checked.error_message)
    zone = tz.gettz(tz_name)
    if zone is None:
        raise ExportException(f"Unknown time zone: {tz_name}")

    day = date.fromisoformat(checked.sanitized_value)
    noon_local = datetime(day.year, day.month, day.day, 12, tzinfo=zone)
    offset = noon_local.utcoffset()
    midnight_utc = datetime(day.year, day.month, day.day, tzinfo=timezone.utc) - offset
    return midnight_utc.strftime("%Y-%m-%dT%H:%M:%SZ")


def _name_map(players: PlayerNames) -> Mapping[str, str]:
    if isinstance(players, Mapping):
        return players
    return {p.id: p.name for p in players}


def generate_csv(
    tournament: TournamentData,
    players: PlayerNames,
    date_str: Optional[str] = None,
    tz_name: str = DEFAULT_EXPORT_TIMEZONE,
) -> str:
    """Build the results CSV for every completed round.

    Byes and matches without a result are left out. ``draws`` is 1 when both
    players won the same number of games. Player IDs missing from the roster
    are written as-is.

    Args:
        tournament: Tournament to export
        players: Roster (or an ID to name mapping)
        date_str: Event date, defaults to the tournament date
        tz_name: Zone used for the ``tournamentDate`` column

    Returns:
        CSV text with header, rows separated by ``\\n``, no trailing newline
    """
    names = _name_map(players)
    tournament_date = swiss_date_to_utc(date_str or tournament.date_str, tz_name)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    rows = 0
    for round_data in tournament.completed_rounds:
        for match in round_data.matches:
            if match.is_bye or match.result is None:
                continue
            result = match.result
            writer.writerow(
                [
                    1 if result.is_draw else 0,
                    names.get(match.player1_id, match.player1_id),
                    result.player1_wins,
                    names.get(match.player2_id, match.player2_id),
                    result.player2_wins,
                    round_data.round_number,
                    tournament_date,
                ]
            )
            rows += 1

    logger.debug("Exported %s match row(s) for %s", rows, tournament.date_str)
    return buffer.getvalue()[: -len("\n")]


def export_filename(date_str: str) -> str:
    """``2026-02-18`` becomes ``2026_02_18_matches.csv``."""
    return date_str.replace("-", "_") + CSV_FILENAME_SUFFIX
