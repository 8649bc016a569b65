"""PairingResult data class."""

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

from dataclasses import dataclass, field
from typing import Optional

from swissorganizer.constants import PAIRING_CLEAN, PAIRING_FALLBACK
from swissorganizer.type_hints import PairingKind, RoundPairings


@dataclass
class PairingResult:
    """Result of a pairing computation for a single round.

    ``kind`` is "clean" when no pair repeats an earlier match and "fallback"
    when sequential pairing had to be used; ``rematch_count`` then says how
    many of the pairs are repeats.
    """

    pairs: RoundPairings = field(default_factory=list)
    kind: PairingKind = PAIRING_CLEAN
    rematch_count: int = 0
    bye_player_id: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.kind == PAIRING_FALLBACK


#  LocalWords:  PairingResult
