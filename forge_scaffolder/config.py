"""Forge scaffolder configuration.

Typed configuration for a scaffolding run. All settings use Pydantic v2
models so they can be validated at construction time and serialised to/from
JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_TEMPLATE_URL = (
    "https://github.com/forge-engine/forge-starter/archive/refs/heads/main.zip"
)
DEFAULT_ARCHIVE_NAME = "starter-template.zip"


class TemplateConfig(BaseModel):
    """Where the starter template comes from and how it is stored locally."""

    url: str = Field(default=DEFAULT_TEMPLATE_URL)
    archive_name: str = Field(
        default=DEFAULT_ARCHIVE_NAME,
        description="File name of the downloaded archive inside the project directory",
    )
    archive_root: str | None = Field(
        default=None,
        description=(
            "Name of the nested root folder inside the archive. "
            "Detected from the archive entries when unset."
        ),
    )
    download_timeout: float | None = Field(
        default=None, gt=0, description="Download timeout in seconds (None = no limit)"
    )


class PostInstallCommand(BaseModel):
    """A command run inside the new project after the template is in place."""

    label: str
    command: str


def _default_commands() -> list[PostInstallCommand]:
    return [
        PostInstallCommand(label="dependency install", command="php install.php"),
        PostInstallCommand(label="project install", command="php forge.php install:project"),
        PostInstallCommand(label="credential generation", command="php forge.php key:generate"),
    ]


class Config(BaseModel):
    """Global scaffolder configuration.

    Instances are typically created once by the CLI entry point and then
    handed to ``Pipeline``.
    """

    base_dir: Path = Field(default=Path("."))
    template: TemplateConfig = Field(default_factory=TemplateConfig)
    commands: list[PostInstallCommand] = Field(default_factory=_default_commands)
    command_timeout: float | None = Field(
        default=None, gt=0, description="Per-command timeout in seconds (None = no limit)"
    )
    verbose: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def project_path(self, project_name: str) -> Path:
        """Directory the project named *project_name* is created in."""
        return self.base_dir.resolve() / project_name

    def archive_path(self, project_name: str) -> Path:
        """Where the downloaded template archive is written."""
        return self.project_path(project_name) / self.template.archive_name

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            FORGE_BASE_DIR, FORGE_TEMPLATE_URL, FORGE_ARCHIVE_ROOT,
            FORGE_DOWNLOAD_TIMEOUT, FORGE_COMMAND_TIMEOUT.
        """
        template_kwargs: dict[str, Any] = {}
        if os.environ.get("FORGE_TEMPLATE_URL"):
            template_kwargs["url"] = os.environ["FORGE_TEMPLATE_URL"]
        if os.environ.get("FORGE_ARCHIVE_ROOT"):
            template_kwargs["archive_root"] = os.environ["FORGE_ARCHIVE_ROOT"]
        if os.environ.get("FORGE_DOWNLOAD_TIMEOUT"):
            template_kwargs["download_timeout"] = float(os.environ["FORGE_DOWNLOAD_TIMEOUT"])

        kwargs: dict[str, Any] = {"template": TemplateConfig(**template_kwargs)}
        if os.environ.get("FORGE_BASE_DIR"):
            kwargs["base_dir"] = Path(os.environ["FORGE_BASE_DIR"])
        if os.environ.get("FORGE_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = float(os.environ["FORGE_COMMAND_TIMEOUT"])

        return cls(**kwargs)
