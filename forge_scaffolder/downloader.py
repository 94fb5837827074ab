"""Async downloader for the starter template archive.

Wraps ``httpx.AsyncClient`` with redirect following (GitHub archive URLs
redirect to codeload), optional timeouts and a write-then-rename so a partial
download is never left looking like a complete archive.

Typical usage::

    downloader = TemplateDownloader()
    size = await downloader.download(url, project_dir / "starter-template.zip")
"""

from __future__ import annotations

import os
from pathlib import Path

import httpx

from forge_scaffolder.errors import DownloadError

USER_AGENT = "forge-scaffolder"


class TemplateDownloader:
    """Fetches the template archive over HTTP.

    Args:
        timeout: Total timeout in seconds, or ``None`` for no limit.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our timeout and headers."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
            transport=self.transport,
        )

    async def fetch(self, url: str) -> bytes:
        """GET *url* and return the response body.

        Raises:
            DownloadError: On transport errors, non-success status, or an
                empty body.
        """
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                content = response.content
        except httpx.TimeoutException as exc:
            raise DownloadError(
                f"Download timed out after {self.timeout}s: {url}", url=url
            ) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise DownloadError(
                f"Server returned HTTP {status} for {url}", url=url, status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            raise DownloadError(f"Failed to download {url}: {exc}", url=url) from exc

        if not content:
            raise DownloadError(f"Empty response body from {url}", url=url)
        return content

    async def download(self, url: str, destination: Path) -> int:
        """Download *url* to *destination*.

        The body is written to ``<destination>.part`` first and renamed into
        place once fully written.

        Returns:
            Number of bytes written.
        """
        content = await self.fetch(url)
        destination = Path(destination)
        partial = destination.with_name(destination.name + ".part")
        try:
            partial.write_bytes(content)
            os.replace(partial, destination)
        except OSError as exc:
            partial.unlink(missing_ok=True)
            raise DownloadError(
                f"Failed to write {destination}: {exc.strerror or exc}", url=url
            ) from exc
        return len(content)
