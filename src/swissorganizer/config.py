"""Application configuration: defaults, JSON file and environment overrides."""

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

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from dateutil import tz

from swissorganizer.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_DATA_DIR_NAME,
    DEFAULT_EXPORT_TIMEZONE,
    DEFAULT_GITHUB_OWNER,
    DEFAULT_GITHUB_REPO,
    DEFAULT_GITHUB_RESULTS_DIR,
    DEFAULT_PLAYERS_CSV_URL,
    DEFAULT_ROUND_DURATION_MINUTES,
    DEFAULT_STATE_FILE,
    DEFAULT_TIMER_MILESTONES_MINUTES,
    DEFAULT_TOKEN_FILE,
    DEFAULT_WARNING_THRESHOLD_MINUTES,
)
from swissorganizer.exceptions import (
    FileLoadException,
    InvalidConfigurationException,
)
from swissorganizer.utils import LOG_LEVEL_ENV, setup_logger

logger = setup_logger(__name__)

DATA_FILE_ENV = "SWISS_ORGANIZER_DATA"
CONFIG_FILE_ENV = "SWISS_ORGANIZER_CONFIG"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_data_dir() -> Path:
    return Path.home() / DEFAULT_DATA_DIR_NAME


@dataclass
class AppConfig:
    """Settings for the command line front end.

    Attributes:
        data_file: JSON file holding roster, tournament and history
        log_level: Level name for the package logger
        round_duration_minutes: Default round length for the timer
        timer_milestones_minutes: Remaining times that trigger announcements
        warning_threshold_minutes: Remaining time below which the timer warns
        export_timezone: Zone whose local midnight stamps exported results
        github_owner / github_repo / github_results_dir: Upload target
        players_csv_url: Shared roster CSV merged by ``players sync``
        token_file: Where the GitHub token is kept
    """

    data_file: str = field(
        default_factory=lambda: str(default_data_dir() / DEFAULT_STATE_FILE)
    )
    log_level: str = "WARNING"
    round_duration_minutes: int = DEFAULT_ROUND_DURATION_MINUTES
    timer_milestones_minutes: List[int] = field(
        default_factory=lambda: list(DEFAULT_TIMER_MILESTONES_MINUTES)
    )
    warning_threshold_minutes: int = DEFAULT_WARNING_THRESHOLD_MINUTES
    export_timezone: str = DEFAULT_EXPORT_TIMEZONE
    github_owner: str = DEFAULT_GITHUB_OWNER
    github_repo: str = DEFAULT_GITHUB_REPO
    github_results_dir: str = DEFAULT_GITHUB_RESULTS_DIR
    players_csv_url: str = DEFAULT_PLAYERS_CSV_URL
    token_file: str = field(
        default_factory=lambda: str(default_data_dir() / DEFAULT_TOKEN_FILE)
    )

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            InvalidConfigurationException: On the first invalid setting
        """
        if self.log_level.upper() not in _LOG_LEVELS:
            raise InvalidConfigurationException(f"Unknown log level: {self.log_level}")
        if self.round_duration_minutes <= 0:
            raise InvalidConfigurationException(
                "round_duration_minutes must be positive"
            )
        if self.warning_threshold_minutes < 0:
            raise InvalidConfigurationException(
                "warning_threshold_minutes cannot be negative"
            )
        if any(m <= 0 for m in self.timer_milestones_minutes):
            raise InvalidConfigurationException(
                "timer_milestones_minutes must be positive"
            )
        if tz.gettz(self.export_timezone) is None:
            raise InvalidConfigurationException(
                f"Unknown time zone: {self.export_timezone}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "data_file": self.data_file,
            "log_level": self.log_level,
            "round_duration_minutes": self.round_duration_minutes,
            "timer_milestones_minutes": list(self.timer_milestones_minutes),
            "warning_threshold_minutes": self.warning_threshold_minutes,
            "export_timezone": self.export_timezone,
            "github_owner": self.github_owner,
            "github_repo": self.github_repo,
            "github_results_dir": self.github_results_dir,
            "players_csv_url": self.players_csv_url,
            "token_file": self.token_file,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppConfig":
        """Deserialize configuration from dictionary.

        Raises:
            InvalidConfigurationException: If a value has the wrong type
        """
        defaults = cls()
        try:
            return cls(
                data_file=str(data.get("data_file", defaults.data_file)),
                log_level=str(data.get("log_level", defaults.log_level)),
                round_duration_minutes=int(
                    data.get("round_duration_minutes", defaults.round_duration_minutes)
                ),
                timer_milestones_minutes=[
                    int(m)
                    for m in data.get(
                        "timer_milestones_minutes", defaults.timer_milestones_minutes
                    )
                ],
                warning_threshold_minutes=int(
                    data.get(
                        "warning_threshold_minutes", defaults.warning_threshold_minutes
                    )
                ),
                export_timezone=str(
                    data.get("export_timezone", defaults.export_timezone)
                ),
                github_owner=str(data.get("github_owner", defaults.github_owner)),
                github_repo=str(data.get("github_repo", defaults.github_repo)),
                github_results_dir=str(
                    data.get("github_results_dir", defaults.github_results_dir)
                ),
                players_csv_url=str(
                    data.get("players_csv_url", defaults.players_csv_url)
                ),
                token_file=str(data.get("token_file", defaults.token_file)),
            )
        except (TypeError, ValueError) as e:
            raise InvalidConfigurationException(f"Invalid configuration: {e}") from e


def default_config_path() -> Path:
    return Path(os.environ.get(CONFIG_FILE_ENV) or default_data_dir() / DEFAULT_CONFIG_FILE)


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load configuration from ``path`` and apply environment overrides.

    A missing file yields the defaults.

    Args:
        path: JSON config file, defaults to ``~/.swissorganizer/config.json``
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        Validated configuration

    Raises:
        FileLoadException: If the file exists but cannot be read or parsed
        InvalidConfigurationException: If a setting is invalid
    """
    environ = os.environ if environ is None else environ
    config_path = Path(path) if path is not None else default_config_path()

    data: Dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise FileLoadException(f"Cannot read config {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise InvalidConfigurationException(
                f"Config {config_path} must contain a JSON object"
            )
        logger.debug("Loaded config from %s", config_path)

    config = AppConfig.from_dict(data)
    if environ.get(DATA_FILE_ENV):
        config.data_file = environ[DATA_FILE_ENV]
    if environ.get(LOG_LEVEL_ENV):
        config.log_level = environ[LOG_LEVEL_ENV]

    config.validate()
    return config
