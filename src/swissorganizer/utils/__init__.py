"""Shared helpers for Swiss Organizer: logging, identifiers and time."""

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

import logging
import os
import uuid
from datetime import date, datetime, timezone
from typing import Optional, Union

PACKAGE_LOGGER_NAME = "swissorganizer"
LOG_LEVEL_ENV = "SWISS_ORGANIZER_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _configure_package_logger() -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
        package_logger.setLevel(os.environ.get(LOG_LEVEL_ENV, "WARNING").upper())
    return package_logger


def setup_logger(name: str) -> logging.Logger:
    """Return a logger for ``name`` below the package logger.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Configured logger instance
    """
    _configure_package_logger()
    return logging.getLogger(name)


def set_log_level(level: Union[int, str]) -> None:
    """Change the level of every Swiss Organizer logger at once."""
    if isinstance(level, str):
        level = level.upper()
    _configure_package_logger().setLevel(level)


def generate_id() -> str:
    """Generate an opaque, unique identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Default clock: the current time in UTC."""
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Format a timestamp the way it is persisted (``...Z`` for UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def today_str(today: Optional[date] = None) -> str:
    """Return ``today`` (default: local date) as ``YYYY-MM-DD``."""
    return (today or date.today()).isoformat()
