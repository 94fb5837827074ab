"""Shared pytest fixtures for the forge scaffolder test suite.

Provides reusable fixtures for:
- A temporary base directory projects are created in
- In-memory starter-template zip archives
- httpx mock transports serving those archives
- Portable shell commands that run the current Python interpreter
- Mock subprocess helpers
"""

from __future__ import annotations

import io
import shlex
import sys
import zipfile
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from forge_scaffolder.config import Config, PostInstallCommand, TemplateConfig

TEMPLATE_URL = "https://example.test/forge-starter/archive/refs/heads/main.zip"
ARCHIVE_ROOT = "forge-starter-main"

STARTER_FILES: dict[str, str] = {
    "install.php": "<?php echo 'installing';\n",
    "forge.php": "<?php // forge console\n",
    "README.md": "# Forge Starter\n",
    ".env.example": "APP_KEY=\n",
    "app/Controllers/HomeController.php": "<?php class HomeController {}\n",
    "config/app.php": "<?php return [];\n",
}


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Directory new projects are created in (auto-cleanup)."""
    directory = tmp_path / "workspace"
    directory.mkdir()
    yield directory


# ---------------------------------------------------------------------------
# Starter archives
# ---------------------------------------------------------------------------

def build_zip(files: dict[str, str], root: str | None = ARCHIVE_ROOT) -> bytes:
    """Build a zip archive in memory, GitHub style when *root* is given."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        if root:
            archive.writestr(f"{root}/", "")
        for name, content in files.items():
            archive.writestr(f"{root}/{name}" if root else name, content)
    return buffer.getvalue()


@pytest.fixture
def make_starter_zip() -> Callable[..., bytes]:
    """Factory building starter archives from a ``{path: content}`` mapping."""

    def factory(
        files: dict[str, str] | None = None,
        root: str | None = ARCHIVE_ROOT,
    ) -> bytes:
        return build_zip(STARTER_FILES if files is None else files, root)

    return factory


@pytest.fixture
def starter_zip_bytes() -> bytes:
    """The default starter template archive."""
    return build_zip(STARTER_FILES)


# ---------------------------------------------------------------------------
# Mock HTTP
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_transport():
    """Factory for ``httpx.MockTransport`` instances serving a fixed body.

    The returned transport records every request it sees in ``.requests``.

    Usage:
        def test_download(mock_transport):
            transport = mock_transport(b"zip bytes", status_code=200)
            downloader = TemplateDownloader(transport=transport)
    """

    def factory(
        body: bytes = b"",
        status_code: int = 200,
        error: Exception | None = None,
    ) -> httpx.MockTransport:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if error is not None:
                raise error
            return httpx.Response(status_code, content=body)

        transport = httpx.MockTransport(handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return factory


# ---------------------------------------------------------------------------
# Commands & configuration
# ---------------------------------------------------------------------------

def python_command(code: str) -> str:
    """Shell command running *code* with the current interpreter."""
    return f"{shlex.quote(sys.executable)} -c {shlex.quote(code)}"


@pytest.fixture
def py_command() -> Callable[[str], str]:
    """Return ``python_command`` so tests can build portable commands."""
    return python_command


@pytest.fixture
def marker_commands() -> list[PostInstallCommand]:
    """Three commands that each drop a marker file in the working directory."""
    return [
        PostInstallCommand(
            label=label,
            command=python_command(
                f"import pathlib; pathlib.Path('{marker}').write_text('ok'); print('{label} done')"
            ),
        )
        for label, marker in (
            ("dependency install", "installed.txt"),
            ("project install", "project-installed.txt"),
            ("credential generation", "app.key"),
        )
    ]


@pytest.fixture
def make_config(base_dir: Path, marker_commands: list[PostInstallCommand]):
    """Factory for a ``Config`` rooted at ``base_dir`` with test commands."""

    def factory(**overrides: Any) -> Config:
        kwargs: dict[str, Any] = {
            "base_dir": base_dir,
            "template": TemplateConfig(url=TEMPLATE_URL),
            "commands": marker_commands,
        }
        kwargs.update(overrides)
        return Config(**kwargs)

    return factory


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_shell", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
