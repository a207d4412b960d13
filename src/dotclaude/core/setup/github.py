"""
GitHub content source for configuration assets.

Downloads files from the raw content host and walks directories through
the contents API. Every helper is best-effort: network or HTTP failures
return None, False or an empty list so a single missing asset does not
abort the whole setup.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_REPO = "Melvynx/aiblueprint-cli"
DEFAULT_BRANCH = "main"
DEFAULT_ROOT = "claude-code-config"
DEFAULT_TIMEOUT = 30.0

# Small file that always exists upstream, used to check reachability
REACHABILITY_PATH = "scripts/validate-command.js"


class GitHubSource:
    """
    Configuration assets served from a GitHub repository.

    Example:
        >>> source = GitHubSource()
        >>> source.raw_url("commands/commit.md")
        'https://raw.githubusercontent.com/Melvynx/aiblueprint-cli/main/claude-code-config/commands/commit.md'
    """

    def __init__(
        self,
        repo: str = DEFAULT_REPO,
        branch: str = DEFAULT_BRANCH,
        root: str = DEFAULT_ROOT,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.repo = repo
        self.branch = branch
        self.root = root.strip("/")
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def raw_url(self, relative_path: str) -> str:
        return (
            f"https://raw.githubusercontent.com/{self.repo}/{self.branch}/"
            f"{self.root}/{relative_path.lstrip('/')}"
        )

    def contents_url(self, dir_path: str) -> str:
        return (
            f"https://api.github.com/repos/{self.repo}/contents/"
            f"{self.root}/{dir_path.strip('/')}?ref={self.branch}"
        )

    def close(self) -> None:
        self._client.close()

    def download_file(self, relative_path: str) -> bytes | None:
        """
        Download one file.

        Returns:
            File content, or None on any failure
        """
        url = self.raw_url(relative_path)
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug("Download failed for %s: %s", url, e)
            return None
        return response.content

    def download_to(self, relative_path: str, target_path: Path) -> bool:
        """Download one file and write it to target_path."""
        content = self.download_file(relative_path)
        if content is None:
            return False
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            target_path.write_bytes(content)
        except OSError as e:
            logger.warning("Could not write %s: %s", target_path, e)
            return False
        return True

    def list_directory(self, dir_path: str) -> list[dict[str, Any]]:
        """
        List a directory through the contents API.

        Returns:
            Entries with at least ``name`` and ``type`` ("file" or "dir"),
            or an empty list on failure
        """
        url = self.contents_url(dir_path)
        try:
            response = self._client.get(url, headers={"Accept": "application/vnd.github+json"})
            response.raise_for_status()
            entries = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("Listing failed for %s: %s", url, e)
            return []
        if not isinstance(entries, list):
            return []
        return [
            entry
            for entry in entries
            if isinstance(entry, dict) and isinstance(entry.get("name"), str)
        ]

    def download_directory(self, dir_path: str, target_dir: Path) -> bool:
        """
        Recursively download a directory.

        Returns:
            False if the directory listing failed or any file failed to download
        """
        entries = self.list_directory(dir_path)
        if not entries:
            return False

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create %s: %s", target_dir, e)
            return False
        ok = True
        for entry in entries:
            name = entry["name"]
            if "/" in name or name in ("", ".", ".."):
                logger.warning("Skipping suspicious entry name %r in %s", name, dir_path)
                continue
            relative_path = f"{dir_path.strip('/')}/{name}"
            if entry.get("type") == "file":
                ok = self.download_to(relative_path, target_dir / name) and ok
            elif entry.get("type") == "dir":
                ok = self.download_directory(relative_path, target_dir / name) and ok
        return ok

    def exists(self, relative_path: str) -> bool:
        """Check that a file is reachable without downloading its body."""
        try:
            response = self._client.head(self.raw_url(relative_path))
        except httpx.HTTPError:
            return False
        return response.is_success

    def is_available(self) -> bool:
        """Check that GitHub is reachable and the repository serves assets."""
        return self.exists(REACHABILITY_PATH)
