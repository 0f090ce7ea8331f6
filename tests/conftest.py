"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from git import Repo

from starter_adopt.catalog import Catalog
from starter_adopt.context import AppContext
from starter_adopt.gitops import GitOps
from starter_adopt.install import Installer
from starter_adopt.stacks import StackPreset

SOURCE_SETTINGS = {
    "permissions": {
        "allow": ["Bash(git status)"],
        "deny": ["Read(.env)", "Bash(sudo:*)"],
    },
    "hooks": {"PreToolUse": []},
}


def write_file(path: Path, content: str) -> Path:
    """Write content, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class ScriptedPrompter:
    """Prompter double that replays canned answers and records questions."""

    def __init__(self, answers: list[bool] | None = None, stack: str | None = None) -> None:
        self.answers = list(answers or [])
        self.stack = stack
        self.questions: list[str] = []
        self.offered: list[str] = []

    def confirm(self, message: str, default: bool = False) -> bool:
        self.questions.append(message)
        if self.answers:
            return self.answers.pop(0)
        return default

    def select_stack(self, presets: list[StackPreset]) -> StackPreset | None:
        self.offered = [p.id for p in presets]
        return next((p for p in presets if p.id == self.stack), None)


# ============================================================================
# Distribution Fixtures
# ============================================================================


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Create a starter distribution laid out like a checkout."""
    root = tmp_path / "starter"
    config = root / ".claude"

    write_file(
        config / "skills" / "review" / "SKILL.md",
        "---\nname: review\ndescription: Review staged changes\n---\n\n# Review\n",
    )
    write_file(config / "skills" / "review" / "checklist.md", "- tests pass\n")
    write_file(
        config / "skills" / "test" / "SKILL.md",
        "---\nname: test\ndescription: Write and run tests\n---\n\n# Test\n",
    )
    write_file(
        config / "agents" / "researcher.md",
        "---\nname: researcher\ndescription: Investigates the codebase\n---\n\nBody\n",
    )
    write_file(config / "agents" / "reviewer.md", "# Reviewer\n\nNo frontmatter here.\n")
    write_file(config / "hooks" / "validate-bash.sh", "#!/bin/sh\nexit 0\n")
    write_file(config / "hooks" / "format.sh", "#!/bin/sh\necho format\n")
    write_file(config / "hooks" / "pre-commit-review.sh", "#!/bin/sh\necho review\n")
    write_file(config / "rules" / "security.md", "# Security\n")
    write_file(config / "rules" / "security-model.md", "# Security model\n")
    write_file(config / "rules" / "git-workflow.md", "# Git workflow\n")
    write_file(config / "settings.json", json.dumps(SOURCE_SETTINGS, indent=2))

    write_file(root / "stacks" / "go" / "rules.md", "# Go rules\n")
    write_file(
        root / "stacks" / "go" / "settings.json",
        json.dumps({"permissions": {"allow": ["Bash(go test:*)"]}}),
    )
    write_file(root / "stacks" / "go" / "CLAUDE.md", "# Go project\n")
    write_file(root / "stacks" / "python" / "rules.md", "# Python rules\n")
    return root


@pytest.fixture
def catalog(source_root: Path) -> Catalog:
    """Catalog of the fixture distribution."""
    return Catalog.create(source_root)


@pytest.fixture
def target_root(tmp_path: Path) -> Path:
    """Create an empty project directory."""
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def git_target(target_root: Path) -> Path:
    """Turn the project directory into a git repository."""
    Repo.init(target_root)
    return target_root


@pytest.fixture
def make_prompter() -> type[ScriptedPrompter]:
    """Factory for prompters with scripted answers."""
    return ScriptedPrompter


@pytest.fixture
def prompter() -> ScriptedPrompter:
    """Prompter that declines every question."""
    return ScriptedPrompter()


@pytest.fixture
def installer(catalog: Catalog, target_root: Path, prompter: ScriptedPrompter) -> Installer:
    """Installer wired to the real filesystem and git."""
    return Installer.create(
        catalog=catalog,
        target_root=target_root,
        gitops=GitOps.create(),
        prompter=prompter,
    )


@pytest.fixture
def app_context(catalog: Catalog, target_root: Path, installer: Installer) -> AppContext:
    """AppContext backed by real services."""
    return AppContext(catalog=catalog, installer=installer, target_root=target_root)


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_filesystem() -> MagicMock:
    """Create a mock FileSystem for testing.

    The mock tracks all filesystem operations without touching real files.
    """
    fs = MagicMock()
    fs.exists.return_value = False
    fs.is_dir.return_value = False
    fs.is_file.return_value = False
    return fs


@pytest.fixture
def mock_context(target_root: Path) -> AppContext:
    """Create a mock AppContext with all dependencies."""
    return AppContext(
        catalog=MagicMock(),
        installer=MagicMock(),
        target_root=target_root,
    )
