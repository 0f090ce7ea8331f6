"""Tests for CLI commands using context injection.

Commands accept a _context parameter for dependency injection, so most tests
call them directly with a mock or real AppContext. Argument parsing and exit
codes of the assembled application are checked through typer's CliRunner.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import typer
from typer.testing import CliRunner

from starter_adopt import __version__, cli
from starter_adopt.catalog import CatalogEntry
from starter_adopt.context import AppContext
from starter_adopt.errors import (
    ComponentNotFound,
    InvalidComponentName,
    NotAGitRepository,
)
from starter_adopt.tui import MenuChoice
from starter_adopt.types import InstallOutcome, InstallReport

runner = CliRunner()


def ok_report(component: str) -> InstallReport:
    report = InstallReport(component=component)
    report.add(InstallOutcome.installed("item", Path("/fake/item")))
    return report


def blocked_report(component: str) -> InstallReport:
    report = InstallReport(component=component)
    report.add(InstallOutcome.failed(component, "source directory not found"))
    return report


class TestComponentCommands:
    """Tests for the component commands."""

    def test_skills_success(self, mock_context: AppContext, capsys) -> None:
        """Test installing skills reports and finishes."""
        # Arrange
        mock_context.installer.install_component.return_value = ok_report("skills")

        # Act
        cli.skills(_context=mock_context)

        # Assert
        mock_context.installer.install_component.assert_called_once_with("skills")
        assert "Done!" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "command,component",
        [
            (cli.agents, "agents"),
            (cli.hooks, "hooks"),
            (cli.rules, "rules"),
            (cli.precommit, "precommit"),
            (cli.security, "security"),
        ],
    )
    def test_dispatches_component(
        self, mock_context: AppContext, command, component: str
    ) -> None:
        mock_context.installer.install_component.return_value = ok_report(component)

        command(_context=mock_context)

        mock_context.installer.install_component.assert_called_once_with(component)

    def test_blocked_report_exits_1(self, mock_context: AppContext) -> None:
        """Test a report with nothing but failures exits with 1."""
        mock_context.installer.install_component.return_value = blocked_report("hooks")

        with pytest.raises(typer.Exit) as exc_info:
            cli.hooks(_context=mock_context)
        assert exc_info.value.exit_code == 1

    def test_precommit_outside_repository(
        self, mock_context: AppContext, capsys
    ) -> None:
        mock_context.installer.install_component.side_effect = NotAGitRepository(
            Path("/fake/project")
        )

        with pytest.raises(typer.Exit) as exc_info:
            cli.precommit(_context=mock_context)

        assert exc_info.value.exit_code == 1
        assert "git init" in capsys.readouterr().out

    def test_security_prints_advisory(self, mock_context: AppContext, capsys) -> None:
        report = ok_report("security")
        report.note("Add these deny rules to your settings.json:")
        report.advisory = '  "deny": [\n    "Read(.env)"\n  ]'
        mock_context.installer.install_component.return_value = report

        cli.security(_context=mock_context)

        out = capsys.readouterr().out
        assert "Add these deny rules" in out
        assert '"Read(.env)"' in out


class TestStackCommand:
    """Tests for the stack command."""

    def test_stack_with_id(self, mock_context: AppContext) -> None:
        mock_context.installer.install_stack_preset.return_value = ok_report("stack:go")

        cli.stack(stack_id="go", _context=mock_context)

        mock_context.installer.install_stack_preset.assert_called_once_with("go")
        mock_context.installer.install_component.assert_not_called()

    def test_stack_without_id_prompts(self, mock_context: AppContext) -> None:
        mock_context.installer.install_component.return_value = ok_report("stack:rust")

        cli.stack(stack_id=None, _context=mock_context)

        mock_context.installer.install_component.assert_called_once_with("stack")

    def test_unknown_stack(self, mock_context: AppContext, capsys) -> None:
        mock_context.installer.install_stack_preset.side_effect = InvalidComponentName(
            "cobol", ["go"], label="stack"
        )

        with pytest.raises(typer.Exit) as exc_info:
            cli.stack(stack_id="cobol", _context=mock_context)

        assert exc_info.value.exit_code == 1
        assert "Unknown stack: cobol" in capsys.readouterr().out


class TestInstallAllCommand:
    """Tests for the all command."""

    def test_all_success(self, mock_context: AppContext, capsys) -> None:
        mock_context.installer.install_all.return_value = [
            ok_report("skills"),
            blocked_report("hooks"),
        ]

        cli.install_all(_context=mock_context)

        out = capsys.readouterr().out
        assert "Summary" in out
        assert "Done!" in out

    def test_all_blocked_exits_1(self, mock_context: AppContext) -> None:
        mock_context.installer.install_all.return_value = [
            blocked_report("skills"),
            blocked_report("hooks"),
        ]

        with pytest.raises(typer.Exit) as exc_info:
            cli.install_all(_context=mock_context)
        assert exc_info.value.exit_code == 1


class TestSingleItemCommands:
    """Tests for skill and agent commands."""

    def test_skill_success(self, mock_context: AppContext, capsys) -> None:
        mock_context.installer.install_single_item.return_value = InstallOutcome.installed(
            "review", Path("/fake/.claude/skills/review")
        )

        cli.skill(name="review", _context=mock_context)

        mock_context.installer.install_single_item.assert_called_once_with("skill", "review")
        assert "Installed skill: review" in capsys.readouterr().out

    def test_missing_name(self, mock_context: AppContext, capsys) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            cli.agent(name=None, _context=mock_context)

        assert exc_info.value.exit_code == 1
        assert "Usage: starter-adopt agent <agent-name>" in capsys.readouterr().out
        mock_context.installer.install_single_item.assert_not_called()

    def test_not_found_lists_catalog(self, mock_context: AppContext, capsys) -> None:
        mock_context.installer.install_single_item.side_effect = ComponentNotFound(
            "agent", "planner", ["researcher", "reviewer"]
        )

        with pytest.raises(typer.Exit) as exc_info:
            cli.agent(name="planner", _context=mock_context)

        out = capsys.readouterr().out
        assert exc_info.value.exit_code == 1
        assert "Agent 'planner' not found" in out
        assert "- researcher" in out
        assert "- reviewer" in out

    def test_existing_item_is_not_an_error(self, mock_context: AppContext, capsys) -> None:
        mock_context.installer.install_single_item.return_value = InstallOutcome.skipped(
            "review", Path("/fake/.claude/skills/review")
        )

        cli.skill(name="review", _context=mock_context)

        assert "already exists" in capsys.readouterr().out

    def test_traversal_rejected(self, app_context: AppContext, target_root: Path, capsys) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            cli.skill(name="../../etc", _context=app_context)

        assert exc_info.value.exit_code == 1
        assert "no paths allowed" in capsys.readouterr().out
        assert list(target_root.iterdir()) == []

    def test_real_agent_install(self, app_context: AppContext, target_root: Path) -> None:
        cli.agent(name="researcher", _context=app_context)
        assert (target_root / ".claude" / "agents" / "researcher.md").is_file()


class TestInformationCommands:
    """Tests for status and list."""

    def test_status(self, mock_context: AppContext, capsys) -> None:
        mock_context.installer.status.return_value = {"Skills": True, "Agents": False}

        cli.status(_context=mock_context)

        out = capsys.readouterr().out
        assert "Skills" in out
        assert "Agents" in out

    def test_list_kind(self, mock_context: AppContext, capsys) -> None:
        mock_context.catalog.entries.return_value = [
            CatalogEntry(
                name="review",
                kind="skill",
                path=Path("/fake/review"),
                description="Review staged changes",
            )
        ]

        cli.list_items(kind="skills", _context=mock_context)

        mock_context.catalog.entries.assert_called_once_with("skill")
        assert "review" in capsys.readouterr().out

    def test_list_all_kinds(self, mock_context: AppContext) -> None:
        mock_context.catalog.entries.return_value = []

        cli.list_items(kind=None, _context=mock_context)

        kinds = [c.args[0] for c in mock_context.catalog.entries.call_args_list]
        assert kinds == ["skill", "agent", "hook", "rule"]

    def test_list_unknown_kind(self, mock_context: AppContext) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            cli.list_items(kind="plugins", _context=mock_context)
        assert exc_info.value.exit_code == 1


class TestInteractive:
    """Tests for interactive mode."""

    @pytest.fixture
    def menu(self, monkeypatch: pytest.MonkeyPatch):
        """Replace the menu prompt with a fixed selection."""

        def select(choice: MenuChoice) -> None:
            monkeypatch.setattr(cli.tui, "show_main_menu", lambda: choice)

        return select

    def test_quit_installs_nothing(self, mock_context: AppContext, menu) -> None:
        mock_context.installer.status.return_value = {}
        menu(MenuChoice.QUIT)

        cli.interactive(_context=mock_context)

        mock_context.installer.install_component.assert_not_called()
        mock_context.installer.install_all.assert_not_called()

    def test_single_component(self, mock_context: AppContext, menu) -> None:
        mock_context.installer.status.return_value = {}
        mock_context.installer.install_component.return_value = ok_report("rules")
        menu(MenuChoice.RULES)

        cli.interactive(_context=mock_context)

        mock_context.installer.install_component.assert_called_once_with("rules")

    def test_everything_then_precommit(
        self, mock_context: AppContext, menu, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        mock_context.installer.status.return_value = {}
        mock_context.installer.install_all.return_value = [ok_report("skills")]
        mock_context.installer.install_component.return_value = ok_report("precommit")
        menu(MenuChoice.EVERYTHING)
        monkeypatch.setattr(cli.tui, "confirm", MagicMock(return_value=True))

        cli.interactive(_context=mock_context)

        mock_context.installer.install_all.assert_called_once()
        mock_context.installer.install_component.assert_called_once_with("precommit")

    def test_everything_precommit_outside_repository(
        self, mock_context: AppContext, menu, monkeypatch: pytest.MonkeyPatch, capsys
    ) -> None:
        mock_context.installer.status.return_value = {}
        mock_context.installer.install_all.return_value = [ok_report("skills")]
        mock_context.installer.install_component.side_effect = NotAGitRepository(
            Path("/fake")
        )
        menu(MenuChoice.EVERYTHING)
        monkeypatch.setattr(cli.tui, "confirm", MagicMock(return_value=True))

        cli.interactive(_context=mock_context)

        out = capsys.readouterr().out
        assert "Not a git repository" in out
        assert "Done!" in out

    def test_single_agent(
        self, mock_context: AppContext, menu, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        mock_context.installer.status.return_value = {}
        mock_context.catalog.list_agents.return_value = []
        mock_context.installer.install_single_item.return_value = InstallOutcome.installed(
            "researcher.md", Path("/fake/researcher.md")
        )
        menu(MenuChoice.SINGLE_AGENT)
        monkeypatch.setattr(cli.tui, "prompt_item_name", lambda kind, entries: "researcher")

        cli.interactive(_context=mock_context)

        mock_context.installer.install_single_item.assert_called_once_with("agent", "researcher")

    def test_failing_selection_exits_1(self, mock_context: AppContext, menu) -> None:
        mock_context.installer.status.return_value = {}
        mock_context.installer.install_component.side_effect = InvalidComponentName(
            "(none selected)", ["go"], label="stack"
        )
        menu(MenuChoice.STACK)

        with pytest.raises(typer.Exit) as exc_info:
            cli.interactive(_context=mock_context)
        assert exc_info.value.exit_code == 1


class TestApplication:
    """Tests for the assembled Typer application."""

    def test_help(self) -> None:
        for flag in ("--help", "-h"):
            result = runner.invoke(cli.app, [flag])
            assert result.exit_code == 0
            assert "skills" in result.output

    def test_help_command(self) -> None:
        result = runner.invoke(cli.app, ["help"])
        assert result.exit_code == 0
        assert "Install everything" in result.output

    def test_version(self) -> None:
        result = runner.invoke(cli.app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_unknown_command(self) -> None:
        result = runner.invoke(cli.app, ["plugins"])
        assert result.exit_code == 1
        assert "Unknown component: plugins" in result.output

    def test_skill_without_name(self) -> None:
        result = runner.invoke(cli.app, ["skill"])
        assert result.exit_code == 1
        assert "Usage: starter-adopt skill" in result.output

    def test_agents_with_roots(self, source_root: Path, target_root: Path) -> None:
        result = runner.invoke(
            cli.app, ["--source", str(source_root), "--target", str(target_root), "agents"]
        )

        assert result.exit_code == 0
        assert (target_root / ".claude" / "agents" / "reviewer.md").is_file()

    def test_roots_from_environment(self, source_root: Path, target_root: Path) -> None:
        result = runner.invoke(
            cli.app,
            ["rules"],
            env={
                "STARTER_ADOPT_SOURCE": str(source_root),
                "STARTER_ADOPT_TARGET": str(target_root),
            },
        )

        assert result.exit_code == 0
        assert (target_root / ".claude" / "rules" / "security.md").is_file()

    def test_self_adoption(self, source_root: Path) -> None:
        result = runner.invoke(
            cli.app, ["--source", str(source_root), "--target", str(source_root), "skills"]
        )

        assert result.exit_code == 1
        assert "starter distribution itself" in result.output

    def test_interactive_quit(self, source_root: Path, target_root: Path) -> None:
        result = runner.invoke(
            cli.app, ["--source", str(source_root), "--target", str(target_root)], input="q\n"
        )

        assert result.exit_code == 0
        assert "What would you like to adopt?" in result.output
        assert not (target_root / ".claude").exists()
