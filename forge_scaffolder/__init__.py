"""Forge scaffolder -- creates Forge Engine projects from the starter template.

Quick usage::

    from forge_scaffolder import Config, Pipeline

    pipeline = Pipeline(Config(base_dir=Path("~/projects").expanduser()))
    result = await pipeline.run("my-app")
"""

from forge_scaffolder.config import Config, PostInstallCommand, TemplateConfig
from forge_scaffolder.errors import (
    CommandError,
    DirectoryCreateError,
    DownloadError,
    ExtractError,
    InvalidInput,
    MoveError,
    ScaffoldError,
)
from forge_scaffolder.pipeline import Pipeline, PipelineResult, PipelineState

__all__ = [
    # Configuration
    "Config",
    "TemplateConfig",
    "PostInstallCommand",
    # Pipeline
    "Pipeline",
    "PipelineResult",
    "PipelineState",
    # Errors
    "ScaffoldError",
    "InvalidInput",
    "DirectoryCreateError",
    "DownloadError",
    "ExtractError",
    "MoveError",
    "CommandError",
]
