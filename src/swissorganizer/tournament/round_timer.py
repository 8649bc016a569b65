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

"""
Round countdown timer.

The timer holds no thread of its own: the front end passes the current time
to every query and calls :meth:`RoundTimer.poll` regularly to learn which
announcements are due ("40 minutes left", "20 minutes left", time expired).
"""

import math
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Set

from swissorganizer.constants import (
    DEFAULT_ROUND_DURATION_MINUTES,
    DEFAULT_TIMER_MILESTONES_MINUTES,
    DEFAULT_WARNING_THRESHOLD_MINUTES,
    TIMER_EVENT_EXPIRED,
)
from swissorganizer.utils import setup_logger

logger = setup_logger(__name__)


def milestone_event(minutes: int) -> str:
    """Event name announced when ``minutes`` remain."""
    return f"{minutes}_min_left"


def format_seconds(total_seconds: int) -> str:
    """Format a countdown as ``H:MM:SS``, or ``M:SS`` below one hour."""
    hours, rest = divmod(max(0, total_seconds), 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


class RoundTimer:
    """Countdown for a single round.

    Parameters
    ----------
    duration_minutes : int
        Round length, 65 minutes by default.
    milestones_minutes : sequence of int
        Remaining times (in minutes) that trigger an announcement.
    warning_threshold_minutes : int
        Below this remaining time the timer is in its warning state.
    """

    def __init__(
        self,
        duration_minutes: int = DEFAULT_ROUND_DURATION_MINUTES,
        milestones_minutes: Sequence[int] = DEFAULT_TIMER_MILESTONES_MINUTES,
        warning_threshold_minutes: int = DEFAULT_WARNING_THRESHOLD_MINUTES,
    ) -> None:
        self.duration = timedelta(minutes=duration_minutes)
        self.milestones = sorted(set(milestones_minutes), reverse=True)
        self.warning_threshold = timedelta(minutes=warning_threshold_minutes)
        self._ends_at: Optional[datetime] = None
        self._announced: Set[str] = set()

    @property
    def is_running(self) -> bool:
        return self._ends_at is not None

    def start(self, now: datetime) -> None:
        """Start (or restart) the countdown from the full duration."""
        self._ends_at = now + self.duration
        self._announced = set()
        logger.info("Round timer started, ends at %s", self._ends_at.isoformat())

    def stop(self) -> None:
        """Stop and reset the countdown."""
        self._ends_at = None
        self._announced = set()

    def set_duration(self, minutes: int) -> bool:
        """Change the round length. Ignored while the timer is running."""
        if self.is_running or minutes <= 0:
            return False
        self.duration = timedelta(minutes=minutes)
        return True

    def remaining(self, now: datetime) -> timedelta:
        if self._ends_at is None:
            return self.duration
        return max(self._ends_at - now, timedelta(0))

    def is_expired(self, now: datetime) -> bool:
        return self._ends_at is not None and now >= self._ends_at

    def is_warning(self, now: datetime) -> bool:
        if self._ends_at is None or self.is_expired(now):
            return False
        return self.remaining(now) < self.warning_threshold

    def poll(self, now: datetime) -> List[str]:
        """Return the announcements that became due since the last poll.

        Each milestone fires at most once per start; ``"expired"`` is always
        the last event.
        """
        if self._ends_at is None:
            return []

        events = []
        remaining = self.remaining(now)
        for minutes in self.milestones:
            event = milestone_event(minutes)
            if event not in self._announced and remaining <= timedelta(minutes=minutes):
                self._announced.add(event)
                events.append(event)

        if self.is_expired(now) and TIMER_EVENT_EXPIRED not in self._announced:
            self._announced.add(TIMER_EVENT_EXPIRED)
            events.append(TIMER_EVENT_EXPIRED)
            logger.info("Round time expired")
        return events

    def display(self, now: datetime) -> str:
        return format_seconds(math.ceil(self.remaining(now).total_seconds()))
