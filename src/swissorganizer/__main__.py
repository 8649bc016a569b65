"""Command line front end for Swiss Organizer.

Every subcommand loads the data file, performs one action through
:class:`TournamentService` or :class:`PlayerRoster` and saves. ``shell``
starts an interactive session that keeps the state in memory between
commands.
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

import argparse
import getpass
import shlex
import sys
import time
from pathlib import Path
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from swissorganizer import __version__
from swissorganizer.config import AppConfig, load_config
from swissorganizer.exceptions import (
    SwissOrganizerException,
    TournamentStateException,
)
from swissorganizer.export.csv_export import export_filename, generate_csv
from swissorganizer.export.github import GitHubExporter, TokenStore
from swissorganizer.models.tournament import Match, RoundData, TournamentData
from swissorganizer.storage.store import StateStore
from swissorganizer.tournament.roster import PlayerRoster
from swissorganizer.tournament.round_timer import RoundTimer
from swissorganizer.tournament.service import TournamentService
from swissorganizer.utils import set_log_level, setup_logger, utc_now

logger = setup_logger(__name__)


class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


class App:
    """Everything a command needs, wired from the configuration."""

    def __init__(self, config: AppConfig, store: Optional[StateStore] = None) -> None:
        self.config = config
        self.store = store if store is not None else StateStore(config.data_file)
        if store is None:
            self.store.load()
        self.service = TournamentService(self.store)
        self.roster = PlayerRoster(self.store)

    # ========== Lookup Helpers ==========

    def name_of(self, player_id: Optional[str]) -> str:
        if player_id is None:
            return "BYE"
        return self.store.get_state().player_names().get(player_id, player_id)

    def player_id(self, reference: str) -> str:
        """Resolve a roster name (or ID) to a player ID."""
        return self.roster.find_by_name(reference).id

    def require_tournament(self) -> TournamentData:
        tournament = self.service.tournament
        if tournament is None:
            raise TournamentStateException("No tournament. Start one with 'new'.")
        return tournament

    def require_active_round(self) -> RoundData:
        round_data = self.service.get_active_round()
        if round_data is None:
            raise TournamentStateException("No round in progress. Pair one with 'pair'.")
        return round_data

    def find_table(self, reference: str) -> Match:
        """A match of the active round by table number (1-based) or match ID."""
        round_data = self.require_active_round()
        if reference.isdigit():
            index = int(reference) - 1
            if 0 <= index < len(round_data.matches):
                return round_data.matches[index]
        match = round_data.find_match(reference)
        if match is None:
            raise TournamentStateException(f"No table {reference} in this round")
        return match


# ========== Output Helpers ==========


def print_ok(message: str) -> None:
    print(f"{Colors.OKGREEN}{message}{Colors.ENDC}")


def print_fail(message: str) -> None:
    print(f"{Colors.FAIL}{message}{Colors.ENDC}")


def print_round(app: App, round_data: RoundData) -> None:
    print(f"\n{Colors.BOLD}Round {round_data.round_number}{Colors.ENDC}")
    for table, match in enumerate(round_data.matches, start=1):
        if match.is_bye:
            line = f"  {table:>2}. {app.name_of(match.player1_id)} - BYE (2-0)"
        else:
            line = (
                f"  {table:>2}. {app.name_of(match.player1_id)} vs "
                f"{app.name_of(match.player2_id)}"
            )
            if match.result is not None:
                r = match.result
                line += f"  [{r.player1_wins}-{r.player2_wins}-{r.draws}]"
        print(line)
    print()


def report(done: bool, success: str, failure: str) -> int:
    if done:
        print_ok(success)
        return 0
    print_fail(failure)
    return 1


# ========== Player Commands ==========


def cmd_players_add(app: App, args: argparse.Namespace) -> int:
    for name in args.names:
        player = app.roster.add_player(name)
        print_ok(f"Added {player.name}")
    return 0


def cmd_players_list(app: App, args: argparse.Namespace) -> int:
    players = sorted(app.roster.list_players(), key=lambda p: p.name.lower())
    if not players:
        print("The roster is empty.")
    for player in players:
        flag = "" if player.active else " (inactive)"
        print(f"  {player.name}{flag}")
    return 0


def cmd_players_rename(app: App, args: argparse.Namespace) -> int:
    done = app.roster.edit_player(app.player_id(args.player), args.new_name)
    return report(done, f"Renamed to {args.new_name}", "Name cannot be empty")


def cmd_players_remove(app: App, args: argparse.Namespace) -> int:
    done = app.roster.delete_player(app.player_id(args.player))
    return report(done, f"Removed {args.player}", f"{args.player} not found")


def cmd_players_sync(app: App, args: argparse.Namespace) -> int:
    added = app.roster.sync_from_url(args.url or app.config.players_csv_url)
    print_ok(f"{len(added)} new player(s) added")
    return 0


# ========== Tournament Commands ==========


def cmd_new(app: App, args: argparse.Namespace) -> int:
    if args.all:
        ids = [p.id for p in app.roster.list_players(include_inactive=False)]
    else:
        ids = [app.player_id(name) for name in args.players]
    if app.service.has_unfinished_tournament() and not args.force:
        print_fail("A tournament is still running. Use --force to replace it.")
        return 1
    tournament = app.service.create_tournament(ids, args.date)
    app.service.reshuffle_seating()
    print_ok(f"Tournament {tournament.date_str} created with {len(ids)} players")
    return cmd_seat(app, argparse.Namespace(shuffle=False))


def cmd_seat(app: App, args: argparse.Namespace) -> int:
    if args.shuffle and not app.service.reshuffle_seating():
        print_fail("Seating is fixed once round 1 is paired")
        return 1
    tournament = app.require_tournament()
    print(f"\n{Colors.BOLD}Seating{Colors.ENDC}")
    for seat, player_id in enumerate(tournament.seating_order, start=1):
        print(f"  {seat:>2}. {app.name_of(player_id)}")
    print()
    return 0


def cmd_pair(app: App, args: argparse.Namespace) -> int:
    round_data = app.service.pair_next_round()
    if round_data is None:
        print_fail(app.service.get_state().get_status_message())
        return 1
    pairing = app.service.last_pairing
    if pairing is not None and pairing.is_fallback:
        print(
            f"{Colors.WARNING}No rematch-free pairing exists: "
            f"{pairing.rematch_count} rematch(es){Colors.ENDC}"
        )
    print_round(app, round_data)
    return 0


def cmd_status(app: App, args: argparse.Namespace) -> int:
    print(app.service.get_state().get_status_message())
    round_data = app.service.get_active_round()
    if round_data is not None:
        print_round(app, round_data)
    return 0


def cmd_result(app: App, args: argparse.Namespace) -> int:
    match = app.find_table(args.table)
    done = app.service.submit_result(match.id, args.player1_wins, args.player2_wins, args.draws)
    return report(
        done,
        f"{app.name_of(match.player1_id)} {args.player1_wins}-{args.player2_wins}-"
        f"{args.draws} {app.name_of(match.player2_id)}",
        "Byes have a fixed result",
    )


def cmd_complete(app: App, args: argparse.Namespace) -> int:
    app.require_active_round()
    return report(
        app.service.complete_current_round(),
        "Round completed",
        "Some tables are still missing a result",
    )


def cmd_swap(app: App, args: argparse.Namespace) -> int:
    done = app.service.swap_players(app.player_id(args.first), app.player_id(args.second))
    return report(
        done,
        f"Swapped {args.first} and {args.second}",
        "Both players must sit at different tables without a result",
    )


def cmd_bye(app: App, args: argparse.Namespace) -> int:
    done = app.service.reassign_bye(app.player_id(args.player))
    return report(done, f"Bye moved to {args.player}", "Bye cannot be moved there")


def cmd_repair(app: App, args: argparse.Namespace) -> int:
    if args.round_one:
        done = app.service.repair_round_one()
    else:
        done = app.service.repair_active_round()
    if not done:
        print_fail("Only a round without entered results can be re-paired")
        return 1
    print_round(app, app.require_active_round())
    return 0


def cmd_drop(app: App, args: argparse.Namespace) -> int:
    done = app.service.drop_player(app.player_id(args.player))
    return report(done, f"{args.player} dropped", f"{args.player} is not playing")


def cmd_late(app: App, args: argparse.Namespace) -> int:
    done = app.service.add_late_arrival(app.player_id(args.player))
    return report(done, f"{args.player} joins from the next round", "Cannot add player")


def cmd_standings(app: App, args: argparse.Namespace) -> int:
    standings = app.service.get_standings()
    if not standings:
        print("No standings yet.")
        return 0
    print(
        f"\n{Colors.BOLD}{'#':>3} {'Player':<24}{'Pts':>4} {'W-L-D':>7}"
        f"{'OMW%':>8}{'GW%':>8}{'OGW%':>8}{Colors.ENDC}"
    )
    for rank, s in enumerate(standings, start=1):
        print(
            f"{rank:>3} {app.name_of(s.player_id):<24}{s.match_points:>4} "
            f"{s.record:>7}{s.omw_pct:>8.2%}{s.gw_pct:>8.2%}{s.ogw_pct:>8.2%}"
        )
    print()
    return 0


def cmd_finish(app: App, args: argparse.Namespace) -> int:
    return report(app.service.finish_tournament(), "Tournament finished", "No tournament running")


def cmd_abandon(app: App, args: argparse.Namespace) -> int:
    return report(app.service.abandon_tournament(), "Tournament discarded", "No tournament")


def cmd_reopen(app: App, args: argparse.Namespace) -> int:
    if args.tournament_id:
        done = app.service.reopen_tournament(args.tournament_id)
    else:
        done = app.service.reopen_current_tournament()
    return report(done, "Tournament reopened", "Nothing to reopen")


def cmd_history(app: App, args: argparse.Namespace) -> int:
    if args.delete:
        return report(
            app.service.delete_history_entry(args.delete),
            "History entry deleted",
            f"No archived tournament {args.delete}",
        )
    past = app.service.past_tournaments
    if not past:
        print("No archived tournaments.")
    for tournament in past:
        print(
            f"  {tournament.date_str}  {len(tournament.completed_rounds)} round(s)  "
            f"{len(tournament.active_players)} player(s)  {tournament.id}"
        )
    return 0


def cmd_export(app: App, args: argparse.Namespace) -> int:
    tournament = app.require_tournament()
    content = generate_csv(
        tournament,
        app.store.get_state().players,
        tz_name=app.config.export_timezone,
    )
    filename = export_filename(tournament.date_str)

    output_dir = Path(args.output or ".")
    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / filename).write_text(content + "\n", encoding="utf-8")
    print_ok(f"Wrote {output_dir / filename}")

    if not args.push:
        return 0

    token_store = TokenStore(app.config.token_file)
    token = args.token or token_store.get()
    if not token:
        token = getpass.getpass("GitHub token: ")
        token_store.set(token)
    exporter = GitHubExporter(
        app.config.github_owner,
        app.config.github_repo,
        app.config.github_results_dir,
        token_store=token_store,
    )
    outcome = exporter.push(filename, content, token)
    return report(outcome.ok, outcome.message, outcome.message)


def cmd_timer(app: App, args: argparse.Namespace) -> int:
    timer = RoundTimer(
        args.minutes or app.config.round_duration_minutes,
        app.config.timer_milestones_minutes,
        app.config.warning_threshold_minutes,
    )
    timer.start(utc_now())
    try:
        while True:
            now = utc_now()
            for event in timer.poll(now):
                print(f"\n{Colors.WARNING}{event.replace('_', ' ')}{Colors.ENDC}\a")
            colour = Colors.FAIL if timer.is_warning(now) else Colors.OKBLUE
            print(f"\r{colour}{timer.display(now)}{Colors.ENDC}   ", end="", flush=True)
            if timer.is_expired(now):
                print()
                return 0
            time.sleep(1)
    except KeyboardInterrupt:
        timer.stop()
        print()
        return 0


# ========== Parser ==========


def create_main_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swissorganizer",
        description="Run Swiss-system tournaments from the command line",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--config", help="Configuration file (JSON)")
    parser.add_argument("--data", help="Data file, overrides the configuration")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    add_subcommands(parser)
    return parser


def add_subcommands(parser: argparse.ArgumentParser) -> None:
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    players = subparsers.add_parser("players", help="Manage the roster")
    player_sub = players.add_subparsers(dest="players_command", metavar="<action>")
    p = player_sub.add_parser("add", help="Add players")
    p.add_argument("names", nargs="+")
    p.set_defaults(func=cmd_players_add)
    p = player_sub.add_parser("list", help="List the roster")
    p.set_defaults(func=cmd_players_list)
    p = player_sub.add_parser("rename", help="Rename a player")
    p.add_argument("player")
    p.add_argument("new_name")
    p.set_defaults(func=cmd_players_rename)
    p = player_sub.add_parser("remove", help="Remove a player from the roster")
    p.add_argument("player")
    p.set_defaults(func=cmd_players_remove)
    p = player_sub.add_parser("sync", help="Merge the shared players CSV")
    p.add_argument("--url", help="CSV location, defaults to the configured one")
    p.set_defaults(func=cmd_players_sync)

    p = subparsers.add_parser("new", help="Start a tournament")
    p.add_argument("players", nargs="*", help="Participants (roster names)")
    p.add_argument("--all", action="store_true", help="Use every active roster player")
    p.add_argument("--date", help="Event date YYYY-MM-DD (default: today)")
    p.add_argument("--force", action="store_true", help="Replace a running tournament")
    p.set_defaults(func=cmd_new)

    p = subparsers.add_parser("seat", help="Show (or reshuffle) the round 1 seating")
    p.add_argument("--shuffle", action="store_true")
    p.set_defaults(func=cmd_seat)

    p = subparsers.add_parser("pair", help="Pair the next round")
    p.set_defaults(func=cmd_pair)

    p = subparsers.add_parser("status", help="Show the tournament state")
    p.set_defaults(func=cmd_status)

    p = subparsers.add_parser("result", help="Enter or correct a result")
    p.add_argument("table", help="Table number or match ID")
    p.add_argument("player1_wins", type=int)
    p.add_argument("player2_wins", type=int)
    p.add_argument("draws", type=int, nargs="?", default=0)
    p.set_defaults(func=cmd_result)

    p = subparsers.add_parser("complete", help="Close the current round")
    p.set_defaults(func=cmd_complete)

    p = subparsers.add_parser("swap", help="Swap two players between tables")
    p.add_argument("first")
    p.add_argument("second")
    p.set_defaults(func=cmd_swap)

    p = subparsers.add_parser("bye", help="Give the bye to another player")
    p.add_argument("player")
    p.set_defaults(func=cmd_bye)

    p = subparsers.add_parser("repair", help="Re-pair the current round")
    p.add_argument("--round-one", action="store_true", help="Reshuffle seating too")
    p.set_defaults(func=cmd_repair)

    p = subparsers.add_parser("drop", help="Drop a player")
    p.add_argument("player")
    p.set_defaults(func=cmd_drop)

    p = subparsers.add_parser("late", help="Add a late arrival")
    p.add_argument("player")
    p.set_defaults(func=cmd_late)

    p = subparsers.add_parser("standings", help="Show the standings")
    p.set_defaults(func=cmd_standings)

    p = subparsers.add_parser("finish", help="Finish the tournament")
    p.set_defaults(func=cmd_finish)

    p = subparsers.add_parser("abandon", help="Discard the tournament")
    p.set_defaults(func=cmd_abandon)

    p = subparsers.add_parser("reopen", help="Reopen a finished tournament")
    p.add_argument("tournament_id", nargs="?", help="Archived tournament ID")
    p.set_defaults(func=cmd_reopen)

    p = subparsers.add_parser("history", help="List archived tournaments")
    p.add_argument("--delete", metavar="ID", help="Delete an archived tournament")
    p.set_defaults(func=cmd_history)

    p = subparsers.add_parser("export", help="Write the results CSV")
    p.add_argument("--output", help="Directory for the CSV file")
    p.add_argument("--push", action="store_true", help="Upload to GitHub")
    p.add_argument("--token", help="GitHub token (otherwise stored or prompted)")
    p.set_defaults(func=cmd_export)

    p = subparsers.add_parser("timer", help="Run the round countdown")
    p.add_argument("--minutes", type=int, help="Round length")
    p.set_defaults(func=cmd_timer)

    p = subparsers.add_parser("shell", help="Interactive mode")
    p.set_defaults(func=None)


# ========== Interactive Mode ==========

SHELL_COMMANDS = [
    "players",
    "new",
    "seat",
    "pair",
    "status",
    "result",
    "complete",
    "swap",
    "bye",
    "repair",
    "drop",
    "late",
    "standings",
    "finish",
    "abandon",
    "reopen",
    "history",
    "export",
    "timer",
    "help",
    "exit",
]


def create_completer(app: App) -> WordCompleter:
    """Complete command names and roster names."""
    names = [p.name for p in app.roster.list_players()]
    return WordCompleter(SHELL_COMMANDS + names, ignore_case=True)


def run_command(app: App, parser: argparse.ArgumentParser, argv: List[str]) -> int:
    """Parse ``argv`` and run the matching command against ``app``."""
    args = parser.parse_args(argv)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 0
    try:
        return func(app, args)
    except SwissOrganizerException as e:
        print_fail(str(e))
        logger.debug("Command failed", exc_info=True)
        return 1


def run_interactive_mode(app: App) -> int:
    print(
        f"{Colors.OKBLUE}Swiss Organizer {__version__}{Colors.ENDC}\n"
        f"Type {Colors.BOLD}help{Colors.ENDC} for commands, "
        f"{Colors.BOLD}exit{Colors.ENDC} to leave.\n"
    )
    print(app.service.get_state().get_status_message())

    parser = argparse.ArgumentParser(prog="", add_help=False)
    add_subcommands(parser)
    session = PromptSession(
        history=InMemoryHistory(),
        style=Style.from_dict({"prompt": "#00aa00 bold"}),
    )

    while True:
        try:
            user_input = session.prompt(
                "swiss> ", completer=create_completer(app)
            ).strip()
        except KeyboardInterrupt:
            print(f"{Colors.WARNING}Use 'exit' to leave{Colors.ENDC}")
            continue
        except EOFError:
            break

        if not user_input:
            continue
        if user_input in ("exit", "quit", "q"):
            break
        if user_input in ("help", "?"):
            parser.print_help()
            continue

        try:
            argv = shlex.split(user_input)
        except ValueError as e:
            print_fail(str(e))
            continue
        if argv and argv[0] == "shell":
            continue

        try:
            run_command(app, parser, argv)
        except SystemExit:
            # argparse exits on bad arguments
            continue

    print(f"{Colors.OKGREEN}Goodbye!{Colors.ENDC}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_main_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        if args.data:
            config.data_file = args.data
        if args.log_level:
            config.log_level = args.log_level
            config.validate()
    except SwissOrganizerException as e:
        print_fail(str(e))
        return 2
    set_log_level(config.log_level)

    app = App(config)
    if args.command == "shell":
        return run_interactive_mode(app)
    if getattr(args, "func", None) is None:
        parser.print_help()
        return 0
    try:
        return args.func(app, args)
    except SwissOrganizerException as e:
        print_fail(str(e))
        logger.debug("Command failed", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
