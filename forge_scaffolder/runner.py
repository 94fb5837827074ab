"""Post-install command execution.

Commands run through the shell inside the project directory. Both output
streams are drained concurrently by ``communicate()`` so a chatty child
cannot block on a full stderr pipe while we wait on stdout.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from forge_scaffolder.errors import CommandError


@dataclass
class CommandResult:
    """Outcome of one command."""

    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(
    command: str,
    cwd: str | Path,
    timeout: float | None = None,
) -> CommandResult:
    """Run *command* in *cwd* and capture its output.

    Does not raise; a command that cannot be spawned or times out is
    reported with a return code of ``-1``. Cancelling the caller kills the
    child before the cancellation propagates.
    """
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd),
        )
    except OSError as exc:
        return CommandResult(command, -1, "", f"Failed to execute command: {command} ({exc})")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return CommandResult(command, -1, "", f"Command timed out after {timeout}s: {command}")
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise

    return CommandResult(
        command,
        process.returncode if process.returncode is not None else -1,
        (stdout_bytes or b"").decode("utf-8", errors="replace").strip(),
        (stderr_bytes or b"").decode("utf-8", errors="replace").strip(),
    )


async def run_checked(
    command: str,
    cwd: str | Path,
    timeout: float | None = None,
) -> CommandResult:
    """Like ``run_command`` but raise ``CommandError`` unless it exits zero."""
    result = await run_command(command, cwd, timeout=timeout)
    if not result.ok:
        raise CommandError(
            f"Command failed with exit code {result.returncode}: {command}",
            command=command,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result
