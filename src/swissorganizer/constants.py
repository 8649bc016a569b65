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

from fractions import Fraction

# --- Constants ---
SAVE_FILE_EXTENSION = ".json"
DEFAULT_DATA_DIR_NAME = ".swissorganizer"
DEFAULT_STATE_FILE = f"state{SAVE_FILE_EXTENSION}"
DEFAULT_CONFIG_FILE = f"config{SAVE_FILE_EXTENSION}"
DEFAULT_TOKEN_FILE = "github_token"

# Match points
WIN_POINTS = 3
DRAW_POINTS = 1

# A bye is recorded as a 2-0 match win
BYE_GAME_WINS = 2
BYE_GAME_LOSSES = 0

# Tiebreaker floors (a percentage never counts below 33%)
MIN_MATCH_WIN_PCT = Fraction(33, 100)
MIN_GAME_WIN_PCT = Fraction(33, 100)

# Tolerance for comparing float tiebreakers when sorting standings
TIEBREAK_EPSILON = 1e-9

# Status values
STATUS_ACTIVE = "active"
STATUS_COMPLETE = "complete"

# Pairing result kinds
PAIRING_CLEAN = "clean"
PAIRING_FALLBACK = "fallback"

# Round timer defaults (minutes)
DEFAULT_ROUND_DURATION_MINUTES = 65
DEFAULT_TIMER_MILESTONES_MINUTES = (40, 20)
DEFAULT_WARNING_THRESHOLD_MINUTES = 10
TIMER_EVENT_EXPIRED = "expired"

# Export
DEFAULT_EXPORT_TIMEZONE = "Europe/Zurich"
CSV_HEADER = (
    "draws",
    "player1",
    "player1Wins",
    "player2",
    "player2Wins",
    "round",
    "tournamentDate",
)
CSV_FILENAME_SUFFIX = "_matches.csv"
MISSING_PLAYER_NAME = "Missing Player"

# Remote stores
GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITHUB_OWNER = "DimlasZ"
DEFAULT_GITHUB_REPO = "TournamentOrganizer"
DEFAULT_GITHUB_RESULTS_DIR = "results"
DEFAULT_PLAYERS_CSV_URL = (
    "https://raw.githubusercontent.com/GuySchnidrig/ManaCore/main/"
    "data/processed/players.csv"
)
HTTP_TIMEOUT_SECONDS = 10
