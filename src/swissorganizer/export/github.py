"""Upload of result CSVs to a GitHub repository through the contents API."""

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

import base64
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests

from swissorganizer.constants import (
    DEFAULT_GITHUB_OWNER,
    DEFAULT_GITHUB_REPO,
    DEFAULT_GITHUB_RESULTS_DIR,
    GITHUB_API_URL,
    HTTP_TIMEOUT_SECONDS,
)
from swissorganizer.exceptions import FileSaveException, RemoteExportException
from swissorganizer.utils import setup_logger

logger = setup_logger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid token, cleared. Enter it again."


@dataclass
class ExportOutcome:
    """What happened to an upload, suitable for showing to the organizer."""

    ok: bool
    message: str

    def __bool__(self) -> bool:
        return self.ok


class TokenStore:
    """Keeps the GitHub personal access token in a private file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def get(self) -> Optional[str]:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not read token file %s: %s", self.path, e)
            return None
        return token or None

    def set(self, token: str) -> None:
        """Save ``token`` (trimmed), readable by the owner only.

        Raises:
            FileSaveException: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(token.strip(), encoding="utf-8")
            os.chmod(self.path, 0o600)
        except OSError as e:
            raise FileSaveException(f"Cannot write token file {self.path}: {e}") from e

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


class GitHubExporter:
    """Creates or updates ``<results_dir>/<filename>`` in a repository.

    Args:
        owner: Repository owner
        repo: Repository name
        results_dir: Folder receiving the CSV files
        session: HTTP session, mostly for tests
        token_store: Where an invalid token gets cleared, if given
    """

    def __init__(
        self,
        owner: str = DEFAULT_GITHUB_OWNER,
        repo: str = DEFAULT_GITHUB_REPO,
        results_dir: str = DEFAULT_GITHUB_RESULTS_DIR,
        session: Optional[requests.Session] = None,
        token_store: Optional[TokenStore] = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.results_dir = results_dir
        self.session = session or requests.Session()
        self.token_store = token_store

    def contents_url(self, filename: str) -> str:
        path = f"{self.results_dir}/{filename}" if self.results_dir else filename
        return f"{GITHUB_API_URL}/repos/{self.owner}/{self.repo}/contents/{path}"

    def push(self, filename: str, csv_content: str, token: Optional[str]) -> ExportOutcome:
        """Upload ``csv_content`` as ``filename``.

        Existing files are overwritten (their sha is looked up first). A 401
        clears the stored token.

        Returns:
            The outcome; failures never raise
        """
        if not token or not token.strip():
            return ExportOutcome(False, "No token provided.")
        token = token.strip()
        url = self.contents_url(filename)
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
        }

        try:
            check = self._request("GET", url, headers=headers)
        except RemoteExportException as e:
            logger.warning("Checking %s failed: %s", url, e)
            return ExportOutcome(False, "Network error while checking file.")

        sha = None
        if check.status_code == 401:
            return self._invalid_token()
        if check.ok:
            sha = _json_or_empty(check).get("sha")

        body: Dict[str, Any] = {
            "message": f"Add results {filename}",
            "content": base64.b64encode(csv_content.encode("utf-8")).decode("ascii"),
        }
        if sha:
            body["sha"] = sha

        try:
            response = self._request("PUT", url, headers=headers, json=body)
        except RemoteExportException as e:
            logger.warning("Uploading %s failed: %s", url, e)
            return ExportOutcome(False, "Network error while uploading.")

        if response.status_code == 401:
            return self._invalid_token()
        if not response.ok:
            message = _json_or_empty(response).get("message")
            logger.warning("GitHub rejected %s: %s", filename, response.status_code)
            return ExportOutcome(False, message or f"GitHub error {response.status_code}")

        logger.info("Uploaded %s to %s/%s", filename, self.owner, self.repo)
        return ExportOutcome(True, f"Saved to {self.results_dir}/{filename}")

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self.session.request(
                method, url, timeout=HTTP_TIMEOUT_SECONDS, **kwargs
            )
        except requests.RequestException as e:
            raise RemoteExportException(f"{method} {url}: {e}") from e

    def _invalid_token(self) -> ExportOutcome:
        if self.token_store is not None:
            self.token_store.clear()
        logger.warning("GitHub rejected the token")
        return ExportOutcome(False, INVALID_TOKEN_MESSAGE)


def _json_or_empty(response: requests.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
