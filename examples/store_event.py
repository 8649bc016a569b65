"""Example script running a small event through the Python API.

Eight players, three rounds, simulated results, final standings and the
export CSV. Nothing is written to disk.
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

from swissorganizer.export.csv_export import export_filename, generate_csv
from swissorganizer.storage.store import StateStore
from swissorganizer.tournament.roster import PlayerRoster
from swissorganizer.tournament.service import TournamentService

NAMES = ["Ann", "Bob", "Cleo", "Dan", "Eve", "Finn", "Gus", "Hana"]
SCORES = [(2, 0, 0), (2, 1, 0), (1, 2, 0), (0, 2, 0), (1, 1, 0)]


def example_full_event():
    """Example: create, pair, report and close three rounds."""

    print("\n" + "=" * 70)
    print("EXAMPLE: Three-round event")
    print("=" * 70 + "\n")

    store = StateStore()
    roster = PlayerRoster(store)
    service = TournamentService(store, rng=random.Random(2026))
    names = {}
    for name in NAMES:
        player = roster.add_player(name)
        names[player.id] = name

    service.create_tournament(list(names), "2026-02-18")
    service.reshuffle_seating()
    results = random.Random(1)

    for _ in range(3):
        round_data = service.pair_next_round()
        print(f"Round {round_data.round_number}")
        for match in round_data.matches:
            score = results.choice(SCORES)
            service.submit_result(match.id, *score)
            print(
                f"  {names[match.player1_id]:<6} {score[0]}-{score[1]}-{score[2]} "
                f"{names[match.player2_id]}"
            )
        service.complete_current_round()
        print()

    service.finish_tournament()

    print("Final standings")
    for rank, standing in enumerate(service.get_standings(), start=1):
        print(
            f"  {rank}. {names[standing.player_id]:<6} {standing.match_points:>2} pts "
            f"{standing.record}  OMW {standing.omw_pct:.2%}  GW {standing.gw_pct:.2%}"
        )

    tournament = service.tournament
    print(f"\n{export_filename(tournament.date_str)}:")
    print(generate_csv(tournament, store.get_state().players))


if __name__ == "__main__":
    example_full_event()
