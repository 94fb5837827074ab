"""Error types raised by the scaffolder steps.

Every step failure is a ``ScaffoldError`` subclass carrying the name of the
step that failed, so the pipeline can report it and roll back uniformly.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""

    step: str = "scaffold"

    def __init__(self, message: str, step: str | None = None) -> None:
        if step is not None:
            self.step = step
        super().__init__(message)


class InvalidInput(ScaffoldError):
    """Raised when a project name fails validation."""

    step = "input"


class DirectoryCreateError(ScaffoldError):
    """Raised when the project directory exists or cannot be created."""

    step = "create-directory"


class DownloadError(ScaffoldError):
    """Raised when the starter template cannot be downloaded."""

    step = "download"

    def __init__(self, message: str, url: str = "", status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ExtractError(ScaffoldError):
    """Raised when the downloaded archive cannot be opened or extracted."""

    step = "extract"


class MoveError(ScaffoldError):
    """Raised when an extracted item cannot be moved to the project root."""

    step = "relocate"

    def __init__(self, message: str, item: str = "") -> None:
        self.item = item
        super().__init__(message)


class CommandError(ScaffoldError):
    """Raised when a post-install command fails to spawn or exits non-zero."""

    step = "post-install"

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: int = -1,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)
