# src/backup/gist_client.py
"""Backup channel that stores the backup document in a private GitHub gist."""
import logging
from collections.abc import Sequence

import httpx

from src.backup.codec import BackupState, dumps_backup, export_state, import_state
from src.backup.settings import BackupSettings
from src.models.errors import GistCredentialError, GistError

logger = logging.getLogger(__name__)


class GistBackupClient:
    """Push and pull backups through the GitHub gists API."""

    def __init__(
        self,
        settings: BackupSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: API url, gist file name and request timeout.
            transport: Optional httpx transport (used by tests).
        """
        self.settings = settings or BackupSettings()
        self._transport = transport

    def _headers(self, token: str) -> dict[str, str]:
        if not token or not token.strip():
            raise GistCredentialError("A GitHub token is required for gist backups")
        return {
            "Authorization": f"token {token.strip()}",
            "Accept": "application/vnd.github.v3+json",
        }

    async def _send(self, method: str, url: str, token: str, payload: dict | None = None) -> dict:
        headers = self._headers(token)
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds, transport=self._transport
            ) as http:
                response = await http.request(method, url, headers=headers, json=payload)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"Gist {method} timed out")
            raise GistError("GitHub did not respond in time") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"Gist {method} {url} failed: {status}")
            if status in (401, 403):
                raise GistCredentialError(
                    "GitHub rejected the token, check that it has the gist scope"
                ) from e
            if status == 404:
                raise GistError("Gist not found, check the gist id") from e
            raise GistError(f"GitHub request failed ({status})") from e
        except httpx.HTTPError as e:
            logger.warning(f"Gist {method} failed: {e}")
            raise GistError(f"GitHub unreachable: {e}") from e
        except ValueError as e:
            raise GistError("GitHub returned an unreadable response") from e

    async def push(self, token: str, gist_id: str | None, state: BackupState) -> str:
        """Upload the backup, creating the gist when no id is known.

        Returns:
            The id of the gist holding the backup.
        """
        content = dumps_backup(export_state(state.trades, state.setups, state.symbols))
        payload = {
            "description": self.settings.description,
            "public": False,
            "files": {self.settings.filename: {"content": content}},
        }

        base = self.settings.api_url.rstrip("/")
        if gist_id:
            result = await self._send("PATCH", f"{base}/gists/{gist_id}", token, payload)
        else:
            result = await self._send("POST", f"{base}/gists", token, payload)

        new_id = str(result.get("id") or gist_id or "")
        if not new_id:
            raise GistError("GitHub did not return a gist id")
        logger.info(f"Pushed {len(state.trades)} trades to gist {new_id}")
        return new_id

    async def pull(
        self,
        token: str,
        gist_id: str,
        current_setups: Sequence[str] = (),
        current_symbols: Sequence[str] = (),
    ) -> BackupState:
        """Download and decode the backup stored in a gist.

        Raises:
            GistCredentialError: Missing or rejected token.
            GistError: The gist or its backup file cannot be read.
            BackupFormatError: The stored document is malformed.
        """
        if not gist_id:
            raise GistError("No gist id configured")

        base = self.settings.api_url.rstrip("/")
        result = await self._send("GET", f"{base}/gists/{gist_id}", token)
        file_info = (result.get("files") or {}).get(self.settings.filename)
        if not file_info:
            raise GistError(f"Gist {gist_id} has no {self.settings.filename}")

        content = file_info.get("content") or ""
        if file_info.get("truncated") and file_info.get("raw_url"):
            content = await self._fetch_raw(file_info["raw_url"], token)

        state = import_state(content, current_setups, current_symbols)
        logger.info(f"Pulled {len(state.trades)} trades from gist {gist_id}")
        return state

    async def _fetch_raw(self, raw_url: str, token: str) -> str:
        """Large gist files are truncated in the API response."""
        headers = self._headers(token)
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds, transport=self._transport
            ) as http:
                response = await http.get(raw_url, headers=headers)
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as e:
            logger.warning(f"Raw gist download failed: {e}")
            raise GistError("Cannot download the full backup file") from e
