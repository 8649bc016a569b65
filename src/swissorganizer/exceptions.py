"""Exceptions for use in Swiss Organizer"""

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


# ========== Base Application Exception ==========


class SwissOrganizerException(Exception):
    """Base exception for all Swiss Organizer errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ========== Pairing Exceptions ==========


class PairingException(SwissOrganizerException):
    """Base exception for pairing-related errors."""

    pass


# ========== Tournament Exceptions ==========


class TournamentException(SwissOrganizerException):
    """Base exception for tournament-related errors."""

    pass


class TournamentStateException(TournamentException):
    """Raised when tournament is in an invalid state for the requested operation."""

    pass


# ========== Player Exceptions ==========


class PlayerException(SwissOrganizerException):
    """Base exception for player-related errors."""

    pass


class PlayerNotFoundException(PlayerException):
    """Raised when a requested player cannot be found."""

    pass


class InvalidPlayerDataException(PlayerException):
    """Raised when player data is invalid or incomplete."""

    pass


# ========== Result Exceptions ==========


class ResultException(SwissOrganizerException):
    """Base exception for result recording errors."""

    pass


class InvalidResultException(ResultException):
    """Raised when a result is invalid (e.g., negative game count)."""

    pass


# ========== Validation Exceptions ==========


class ValidationException(SwissOrganizerException):
    """Base exception for validation errors."""

    pass


# ========== File/Resource Exceptions ==========


class ResourceException(SwissOrganizerException):
    """Base exception for resource-related errors."""

    pass


class FileLoadException(ResourceException):
    """Raised when a file cannot be loaded."""

    pass


class FileSaveException(ResourceException):
    """Raised when a file cannot be saved."""

    pass


# ========== Export Exceptions ==========


class ExportException(SwissOrganizerException):
    """Base exception for result export errors."""

    pass


class RemoteExportException(ExportException):
    """Raised when the remote results store rejects or cannot be reached."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(SwissOrganizerException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
