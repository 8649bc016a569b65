"""Result export: CSV generation and upload to GitHub."""

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

from swissorganizer.export.csv_export import (
    export_filename,
    generate_csv,
    swiss_date_to_utc,
)
from swissorganizer.export.github import ExportOutcome, GitHubExporter, TokenStore

__all__ = [
    "ExportOutcome",
    "GitHubExporter",
    "TokenStore",
    "export_filename",
    "generate_csv",
    "swiss_date_to_utc",
]
