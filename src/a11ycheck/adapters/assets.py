"""
Engine script loader for a11ycheck.

Fetches the axe-core and IBM Equal Access engine bundles so they can be
injected into audited pages. Sources are URLs (downloaded with httpx) or
local file paths, and are cached for the life of the process.
"""

from __future__ import annotations

import logging
from pathlib import Path

import anyio
import httpx

from a11ycheck.domain.exceptions import AssetError

logger = logging.getLogger(__name__)


class ScriptAssets:
    """
    Loads engine scripts by source.

    Uses httpx for async HTTP. One download per source per process.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        """
        Initialize the script loader.

        Args:
            timeout: Request timeout in seconds.
            verify_ssl: Whether to verify SSL certificates.
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._cache: dict[str, str] = {}
        self._lock = anyio.Lock()

    async def load(self, source: str) -> str:
        """
        Get the script text for ``source``.

        Args:
            source: An http(s) URL or a filesystem path.

        Returns:
            The script source code.

        Raises:
            AssetError: If the script cannot be fetched or read.
        """
        async with self._lock:
            if source not in self._cache:
                if source.startswith(("http://", "https://")):
                    self._cache[source] = await self._fetch(source)
                else:
                    self._cache[source] = self._read(source)
            return self._cache[source]

    async def _fetch(self, url: str) -> str:
        logger.info("Downloading engine script %s", url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                verify=self.verify_ssl,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as e:
            raise AssetError(f"Could not download engine script: {e}", source=url) from e

    def _read(self, path: str) -> str:
        try:
            return Path(path).expanduser().read_text(encoding="utf-8")
        except OSError as e:
            raise AssetError(f"Could not read engine script: {e}", source=path) from e

    def clear(self) -> None:
        """Forget cached scripts."""
        self._cache.clear()
