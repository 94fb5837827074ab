"""Unit tests for project-name input (forge_scaffolder.prompt)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from forge_scaffolder.errors import InvalidInput
from forge_scaffolder.prompt import prompt_project_name, validate_project_name


def _answers(*values):
    """An ``ask`` callable returning *values* in order, then raising EOFError."""
    ask = MagicMock(side_effect=[*values, EOFError()])
    return ask


# ---------------------------------------------------------------------------
# validate_project_name
# ---------------------------------------------------------------------------


class TestValidateProjectName:
    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["my-app", "MyApp2", "a", "forge-2024-demo", "-"])
    def test_accepts_alphanumeric_and_dashes(self, name: str, base_dir: Path):
        assert validate_project_name(name, base_dir) == name

    @pytest.mark.unit
    def test_trims_whitespace(self, base_dir: Path):
        assert validate_project_name("  my-app \n", base_dir) == "my-app"

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["", "   ", "\n"])
    def test_rejects_empty(self, name: str, base_dir: Path):
        with pytest.raises(InvalidInput, match="cannot be empty"):
            validate_project_name(name, base_dir)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name", ["my app", "my_app", "app!", "../escape", "a/b", "café", "app.v2"]
    )
    def test_rejects_other_characters(self, name: str, base_dir: Path):
        with pytest.raises(InvalidInput, match="alphanumeric characters and dashes only"):
            validate_project_name(name, base_dir)

    @pytest.mark.unit
    def test_rejects_existing_directory(self, base_dir: Path):
        (base_dir / "taken").mkdir()
        with pytest.raises(InvalidInput, match="already exists"):
            validate_project_name("taken", base_dir)

    @pytest.mark.unit
    def test_error_step_is_input(self, base_dir: Path):
        with pytest.raises(InvalidInput) as exc_info:
            validate_project_name("", base_dir)
        assert exc_info.value.step == "input"


# ---------------------------------------------------------------------------
# prompt_project_name
# ---------------------------------------------------------------------------


class TestPromptProjectName:
    @pytest.mark.unit
    def test_valid_first_answer_accepted(self, base_dir: Path):
        ask = _answers("my-app")
        assert prompt_project_name(base_dir, ask=ask) == "my-app"
        assert ask.call_count == 1

    @pytest.mark.unit
    def test_reprompts_until_valid(self, base_dir: Path, capsys):
        (base_dir / "taken").mkdir()
        ask = _answers("", "my app", "taken", "my-app")

        assert prompt_project_name(base_dir, ask=ask) == "my-app"
        assert ask.call_count == 4

        out = capsys.readouterr().out
        assert "cannot be empty" in out
        assert "alphanumeric" in out
        assert "already exists" in out

    @pytest.mark.unit
    def test_never_accepts_invalid_names(self, base_dir: Path):
        ask = _answers("my app", "bad!", "with space")
        assert prompt_project_name(base_dir, ask=ask) is None
        assert not any(base_dir.iterdir())

    @pytest.mark.unit
    @pytest.mark.parametrize("interrupt", [EOFError, KeyboardInterrupt])
    def test_cancel_returns_none(self, interrupt, base_dir: Path):
        ask = MagicMock(side_effect=interrupt())
        assert prompt_project_name(base_dir, ask=ask) is None

    @pytest.mark.unit
    def test_initial_answer_used_before_asking(self, base_dir: Path):
        ask = _answers()
        assert prompt_project_name(base_dir, ask=ask, initial=["cli-name"]) == "cli-name"
        ask.assert_not_called()

    @pytest.mark.unit
    def test_invalid_initial_answer_falls_back_to_prompt(self, base_dir: Path):
        ask = _answers("fixed-name")
        result = prompt_project_name(base_dir, ask=ask, initial=["bad name"])
        assert result == "fixed-name"
        assert ask.call_count == 1
