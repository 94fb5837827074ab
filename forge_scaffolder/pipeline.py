"""Forge scaffolder pipeline orchestrator.

Scaffolds a new project from the starter-template archive:

Step 1: INPUT        -- Ask for a project name until a valid one is given.
Step 2: CREATE       -- Create the project directory.
Step 3: DOWNLOAD     -- Fetch the template zip into the project directory.
Step 4: EXTRACT      -- Unzip it and delete the archive.
Step 5: RELOCATE     -- Move files out of the nested archive folder.
Step 6: POST-INSTALL -- Run the install and key-generation commands.

Any failure after the directory exists deletes the whole directory before
the run ends.

Usage::

    forge-scaffold
    forge-scaffold my-app --base-dir ~/projects
    python -m forge_scaffolder my-app --verbose
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
import traceback
from enum import Enum
from pathlib import Path
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, Field, ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from forge_scaffolder.archive import extract_archive
from forge_scaffolder.config import Config
from forge_scaffolder.downloader import TemplateDownloader
from forge_scaffolder.errors import CommandError, ExtractError, ScaffoldError
from forge_scaffolder.filesystem import create_directory, delete_recursive, move_contents
from forge_scaffolder.prompt import prompt_project_name
from forge_scaffolder.runner import run_checked
from forge_scaffolder.utils import (
    console,
    create_progress,
    format_duration,
    format_size,
    print_banner,
    print_command_output,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
)


class PipelineState(str, Enum):
    START = "start"
    DIR_CREATED = "dir-created"
    DOWNLOADED = "downloaded"
    EXTRACTED = "extracted"
    RELOCATED = "relocated"
    INSTALLED = "installed"
    KEY_GENERATED = "key-generated"
    DONE = "done"
    ROLLED_BACK = "rolled-back"
    ABORTED = "aborted"


T = TypeVar("T")

TERMINAL_STATES = frozenset({PipelineState.DONE, PipelineState.ABORTED})


async def _in_thread(func: Callable[..., T], *args: Any) -> T:
    """Run a blocking call in a worker thread.

    On cancellation it waits for the call to finish before re-raising, so
    nothing is still writing into the project directory when rollback runs.
    """
    future = asyncio.ensure_future(asyncio.to_thread(func, *args))
    try:
        return await asyncio.shield(future)
    except asyncio.CancelledError:
        await asyncio.wait({future})
        if not future.cancelled():
            future.exception()  # retrieved; the cancellation wins
        raise


class PipelineResult(BaseModel):
    """Outcome of one scaffolding run."""

    project_name: str
    project_path: Path
    success: bool = False
    state: PipelineState = PipelineState.START
    history: list[PipelineState] = Field(default_factory=list)
    failed_step: str | None = None
    error: str | None = None
    rolled_back: bool = False
    duration: str = ""


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Runs steps 2-6 for one project name.

    Each step is awaited to completion before the next starts. The first
    failure stops the run; if this run created the project directory it is
    removed again.

    Attributes:
        config: Scaffolder configuration.
        downloader: Client used for the template download.
        state: Current position in the state machine.
    """

    def __init__(self, config: Config, downloader: TemplateDownloader | None = None) -> None:
        self.config = config
        self.downloader = downloader or TemplateDownloader(
            timeout=config.template.download_timeout
        )
        self.state = PipelineState.START
        self.history: list[PipelineState] = [PipelineState.START]
        self._created_dir: Path | None = None

    def _advance(self, state: PipelineState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Pipeline already finished in state {self.state.value}")
        self.state = state
        self.history.append(state)

    async def run(self, project_name: str) -> PipelineResult:
        """Scaffold *project_name* and return the outcome.

        Step failures never propagate; they are reported through the
        returned ``PipelineResult``.
        """
        started = time.monotonic()
        project_dir = self.config.project_path(project_name)
        result = PipelineResult(project_name=project_name, project_path=project_dir)

        try:
            await self.create_project_directory(project_dir)
            await self.download_template(project_dir)
            root = await self.extract_template(project_dir)
            await self.relocate_files(project_dir, root)
            await self.post_install(project_dir)
            self._advance(PipelineState.DONE)
            result.success = True

        except ScaffoldError as exc:
            result.failed_step = exc.step
            result.error = str(exc)
            print_error(f"Error during {exc.step}: {exc}")
            result.rolled_back = self.rollback()

        except asyncio.CancelledError:
            result.failed_step = "interrupted"
            result.error = "Interrupted"
            self.rollback()
            raise

        except Exception as exc:
            result.failed_step = self.state.value
            result.error = f"Unexpected error: {exc}"
            print_error(f"Unexpected error after {self.state.value}: {exc}")
            console.print(Text(traceback.format_exc(), style="dim"))
            result.rolled_back = self.rollback()

        result.state = self.state
        result.history = list(self.history)
        result.duration = format_duration(time.monotonic() - started)
        self._print_final_summary(result)
        return result

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def create_project_directory(self, project_dir: Path) -> None:
        print_step_header(2, "create-directory", "Create project directory")
        try:
            await _in_thread(create_directory, project_dir)
        except asyncio.CancelledError:
            # The worker may have finished creating it before the cancel landed.
            if project_dir.is_dir():
                self._created_dir = project_dir
            raise
        self._created_dir = project_dir
        self._advance(PipelineState.DIR_CREATED)
        console.print(f"  Project directory created: [bold]{project_dir.name}[/bold]")

    async def download_template(self, project_dir: Path) -> None:
        print_step_header(3, "download", "Download starter template")
        url = self.config.template.url
        destination = self.config.archive_path(project_dir.name)
        console.print(f"  Source: [cyan]{escape(url)}[/cyan]")

        with create_progress() as progress:
            progress.add_task("Downloading starter template...", total=None)
            size = await self.downloader.download(url, destination)

        self._advance(PipelineState.DOWNLOADED)
        console.print(f"  Starter template downloaded ({format_size(size)}).")

    async def extract_template(self, project_dir: Path) -> str:
        """Extract the archive, delete it, and return the nested root name."""
        print_step_header(4, "extract", "Extract starter template")
        archive_path = self.config.archive_path(project_dir.name)
        extracted = await _in_thread(extract_archive, archive_path, project_dir)
        await _in_thread(archive_path.unlink)

        root = self.config.template.archive_root or extracted.root
        if not root:
            raise ExtractError(
                f"Archive has no single top-level folder: {archive_path.name}"
            )

        self._advance(PipelineState.EXTRACTED)
        console.print(f"  Extracted {extracted.entries} entries to: [bold]{escape(root)}[/bold]")
        return root

    async def relocate_files(self, project_dir: Path, root: str) -> None:
        print_step_header(5, "relocate", "Move files to project root")
        nested = project_dir / root
        moved = await _in_thread(move_contents, nested, project_dir)
        await _in_thread(delete_recursive, nested)
        self._advance(PipelineState.RELOCATED)
        console.print(f"  Moved {len(moved)} item(s) to the project root.")

    async def post_install(self, project_dir: Path) -> None:
        """Run the configured commands in order, stopping at the first failure.

        All but the last command count as installation; the last one
        generates the credentials.
        """
        print_step_header(6, "post-install", "Post-install commands")
        commands = self.config.commands
        for index, entry in enumerate(commands):
            console.print(f"  Running {entry.label}: [bold]{escape(entry.command)}[/bold]...")
            try:
                result = await run_checked(
                    entry.command, project_dir, timeout=self.config.command_timeout
                )
            except CommandError as exc:
                print_command_output(exc.stdout, exc.stderr, failed=True)
                raise CommandError(
                    f"{entry.label} failed ({exc})",
                    command=exc.command,
                    returncode=exc.returncode,
                    stdout=exc.stdout,
                    stderr=exc.stderr,
                ) from exc

            if self.config.verbose:
                print_command_output(result.stdout, result.stderr)
            print_success(f"  {entry.command} executed successfully.")

            if index == len(commands) - 1:
                self._advance(PipelineState.KEY_GENERATED)
            elif self.state is not PipelineState.INSTALLED:
                self._advance(PipelineState.INSTALLED)

    # ------------------------------------------------------------------
    # Rollback
    # ------------------------------------------------------------------

    def rollback(self) -> bool:
        """Delete the project directory if this run created it.

        Returns:
            ``True`` if a directory was removed.
        """
        removed = False
        if self._created_dir is not None:
            print_warning(f"Cleaning up project directory: {self._created_dir}")
            try:
                removed = delete_recursive(self._created_dir)
            except OSError as exc:
                print_error(
                    f"Failed to clean up {self._created_dir}: {exc}. Remove it manually."
                )
            else:
                self._created_dir = None
                self._advance(PipelineState.ROLLED_BACK)
        self._advance(PipelineState.ABORTED)
        return removed

    def _print_final_summary(self, result: PipelineResult) -> None:
        console.print()
        if result.success:
            name = result.project_name
            console.print(
                Panel(
                    f"Forge Engine project '[bold]{name}[/bold]' scaffolded successfully!\n"
                    f"Project directory: {escape(str(result.project_path))}\n"
                    f"Duration: {result.duration}\n\n"
                    "Next steps:\n"
                    f"1.  cd {name}\n"
                    "2.  Start developing your awesome Forge Engine application!",
                    title="[bold]Scaffolding Complete[/bold]",
                    border_style="bold green",
                )
            )
            return

        print_summary_table(
            {
                "Project": result.project_name,
                "Failed step": result.failed_step or "?",
                "Reason": result.error or "",
                "Cleaned up": "yes" if result.rolled_back else "nothing to clean up",
                "Duration": result.duration,
            },
            title="Scaffolding Failed",
        )
        console.print(
            Panel(
                "[bold red]Project scaffolding cancelled.[/bold red]",
                border_style="bold red",
            )
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_config(args: argparse.Namespace) -> Config:
    config = Config.load(Path(args.config)) if args.config else Config.from_env()
    if args.base_dir:
        config.base_dir = Path(args.base_dir)
    if args.template_url:
        config.template.url = args.template_url
    if args.archive_root:
        config.template.archive_root = args.archive_root
    if args.verbose:
        config.verbose = True
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``forge-scaffold`` and ``python -m forge_scaffolder``."""
    parser = argparse.ArgumentParser(
        description="Forge Engine project scaffolder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  forge-scaffold\n"
            "  forge-scaffold my-app --base-dir ~/projects\n"
            "  forge-scaffold my-app --template-url https://example.com/starter.zip\n"
        ),
    )
    parser.add_argument(
        "project_name",
        nargs="?",
        default=None,
        help="Project name (prompted for when omitted or invalid)",
    )
    parser.add_argument(
        "--base-dir",
        default=None,
        help="Directory to create the project in (default: current directory)",
    )
    parser.add_argument("--template-url", default=None, help="Starter template zip URL")
    parser.add_argument(
        "--archive-root",
        default=None,
        help="Name of the folder wrapping the archive contents (auto-detected if omitted)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration file (see Config.save)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show output of successful post-install commands",
    )

    args = parser.parse_args(argv)

    if args.config and not Path(args.config).exists():
        console.print(f"[bold red]Error:[/bold red] Config file not found: {escape(args.config)}")
        sys.exit(2)

    try:
        config = _build_config(args)
    except (ValueError, ValidationError) as exc:
        console.print("[bold red]Error:[/bold red] Invalid configuration:")
        console.print(Text(str(exc)))
        sys.exit(2)

    print_banner()
    initial = [args.project_name] if args.project_name is not None else []
    project_name = prompt_project_name(config.base_dir, initial=initial)
    if project_name is None:
        console.print("\n[bold red]Project scaffolding cancelled.[/bold red]")
        sys.exit(1)

    pipeline = Pipeline(config)
    try:
        result = asyncio.run(pipeline.run(project_name))
    except KeyboardInterrupt:
        console.print("\n[bold red]Project scaffolding cancelled.[/bold red]")
        sys.exit(1)

    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
