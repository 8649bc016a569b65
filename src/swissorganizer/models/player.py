"""A player in the global roster."""

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
from typing import Any, Dict

from swissorganizer.utils import generate_id


@dataclass
class Player:
    """A roster entry.

    The roster is independent of any tournament. Tournaments, rounds and
    matches only hold ``id``, so renaming a player never rewrites history.

    Attributes
    ----------
    name : str
        Display name.
    id : str
        Opaque, stable identifier.
    active : bool
        Roster flag; inactive players stay in history but are hidden from
        selection lists.
    """

    name: str
    id: str = field(default_factory=generate_id)
    active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize player to dictionary."""
        return {"id": self.id, "name": self.name, "active": self.active}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Deserialize player from dictionary."""
        return cls(
            name=data.get("name", ""),
            id=data.get("id") or generate_id(),
            active=data.get("active", True),
        )

    def __str__(self) -> str:
        return self.name
