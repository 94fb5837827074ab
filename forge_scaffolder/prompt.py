"""Interactive project-name input.

``validate_project_name`` holds the rules; ``prompt_project_name`` keeps
asking until a name passes them or the user cancels with EOF / Ctrl+C.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from pathlib import Path

from rich.prompt import Prompt

from forge_scaffolder.errors import InvalidInput
from forge_scaffolder.utils import console, print_error

PROJECT_NAME_PATTERN = re.compile(r"[A-Za-z0-9-]+")

PROMPT_TEXT = "Enter your project name (alphanumeric and dashes only)"


def validate_project_name(name: str, base_dir: Path) -> str:
    """Validate *name* as a new project directory under *base_dir*.

    Returns:
        The trimmed name.

    Raises:
        InvalidInput: With a message suitable for showing to the user.
    """
    name = name.strip()
    if not name:
        raise InvalidInput("Project name cannot be empty. Please try again.")
    if not PROJECT_NAME_PATTERN.fullmatch(name):
        raise InvalidInput(
            "Invalid project name. Use alphanumeric characters and dashes only."
        )
    if (Path(base_dir) / name).is_dir():
        raise InvalidInput(
            f"Directory '{name}' already exists. Please choose a different name "
            "or delete the existing directory."
        )
    return name


def _ask_with_rich() -> str:
    return Prompt.ask(PROMPT_TEXT, console=console, default="", show_default=False)


def prompt_project_name(
    base_dir: Path,
    ask: Callable[[], str] = _ask_with_rich,
    initial: Iterable[str] = (),
) -> str | None:
    """Prompt until a valid project name is entered.

    Args:
        base_dir: Directory the project will be created in.
        ask: Callable returning one line of user input.
        initial: Answers to try before asking (e.g. a name given on the
            command line).

    Returns:
        The accepted name, or ``None`` if the user cancelled.
    """
    pending = list(initial)
    while True:
        try:
            answer = pending.pop(0) if pending else ask()
        except (EOFError, KeyboardInterrupt):
            console.print()
            return None

        try:
            return validate_project_name(answer, base_dir)
        except InvalidInput as exc:
            print_error(str(exc))
