"""Live catalog of the components shipped in a starter distribution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import yaml

from starter_adopt.stacks import STACK_PRESETS, StackPreset
from starter_adopt.validation import parse_frontmatter

logger = logging.getLogger(__name__)


class ComponentName(str, Enum):
    """Fixed enumeration of installable components."""

    SKILLS = "skills"
    AGENTS = "agents"
    HOOKS = "hooks"
    RULES = "rules"
    PRECOMMIT = "precommit"
    SECURITY = "security"
    STACK = "stack"


class ComponentKind(str, Enum):
    COLLECTION = "collection"
    SINGLE = "single"
    COMPOSITE = "composite"


@dataclass(frozen=True)
class Component:
    """A named installable unit.

    Attributes:
        name: Component identifier.
        source: Location inside the distribution.
        target: Path relative to the destination config root.
        kind: Directory of items, single file, or multi-step bundle.
    """

    name: ComponentName
    source: str
    target: str
    kind: ComponentKind


COMPONENTS: dict[ComponentName, Component] = {
    ComponentName.SKILLS: Component(
        ComponentName.SKILLS, "skills", "skills", ComponentKind.COLLECTION
    ),
    ComponentName.AGENTS: Component(
        ComponentName.AGENTS, "agents", "agents", ComponentKind.COLLECTION
    ),
    ComponentName.HOOKS: Component(ComponentName.HOOKS, "hooks", "hooks", ComponentKind.COLLECTION),
    ComponentName.RULES: Component(ComponentName.RULES, "rules", "rules", ComponentKind.COLLECTION),
    ComponentName.PRECOMMIT: Component(
        ComponentName.PRECOMMIT, "hooks/pre-commit-review.sh", "hooks", ComponentKind.SINGLE
    ),
    ComponentName.SECURITY: Component(
        ComponentName.SECURITY, "settings.json", "settings.json", ComponentKind.COMPOSITE
    ),
    ComponentName.STACK: Component(ComponentName.STACK, "stacks", "", ComponentKind.COMPOSITE),
}


@dataclass
class CatalogEntry:
    """One installable item found in the distribution."""

    name: str
    kind: str  # skill, agent, hook, rule
    path: Path
    description: str = ""

    @property
    def file_name(self) -> str:
        """Name of the file or directory as it is copied."""
        return self.path.name


class Catalog:
    """Enumerates a distribution tree on every call; nothing is cached."""

    CONFIG_DIR = ".claude"
    SKILL_PATTERN = "SKILL.md"
    SETTINGS_FILE = "settings.json"
    STACKS_DIR = "stacks"
    PRECOMMIT_HOOK = "pre-commit-review.sh"
    VALIDATE_HOOK = "validate-bash.sh"
    SECURITY_RULES = ("security.md", "security-model.md")
    KINDS = ("skill", "agent", "hook", "rule")

    def __init__(self, source_root: Path) -> None:
        """Initialize catalog.

        Args:
            source_root: Root of the starter distribution.

        Note:
            Prefer using factory method `create()` for construction.
        """
        self.source_root = source_root

    @classmethod
    def create(cls, source_root: Path) -> Catalog:
        """Create a catalog for a distribution root."""
        return cls(source_root.resolve())

    @property
    def config_dir(self) -> Path:
        """Directory holding skills/, agents/, hooks/, rules/ and settings.json.

        A starter checkout keeps them under .claude/; the bundled templates
        keep them at the root.
        """
        nested = self.source_root / self.CONFIG_DIR
        return nested if nested.is_dir() else self.source_root

    @property
    def settings_path(self) -> Path:
        return self.config_dir / self.SETTINGS_FILE

    @property
    def stacks_dir(self) -> Path:
        return self.source_root / self.STACKS_DIR

    def component_dir(self, name: ComponentName) -> Path:
        return self.config_dir / COMPONENTS[name].source

    def hook_path(self, name: str) -> Path:
        return self.component_dir(ComponentName.HOOKS) / name

    def rule_path(self, name: str) -> Path:
        return self.component_dir(ComponentName.RULES) / name

    def stack_dir(self, preset: StackPreset) -> Path:
        return self.stacks_dir / preset.id

    def list_skills(self) -> list[CatalogEntry]:
        """List skill directories, sorted by name."""
        skills_dir = self.component_dir(ComponentName.SKILLS)
        if not skills_dir.is_dir():
            return []
        return [
            self._parse_skill_dir(path)
            for path in sorted(skills_dir.iterdir())
            if path.is_dir() and not path.name.startswith(".")
        ]

    def list_agents(self) -> list[CatalogEntry]:
        """List agent files (*.md), sorted by name."""
        return self._list_files(ComponentName.AGENTS, "*.md", "agent")

    def list_hooks(self, include_precommit: bool = False) -> list[CatalogEntry]:
        """List hook scripts (*.sh).

        Args:
            include_precommit: Include the pre-commit review hook, which is
                normally installed through the precommit component.
        """
        hooks = self._list_files(ComponentName.HOOKS, "*.sh", "hook")
        if include_precommit:
            return hooks
        return [h for h in hooks if h.file_name != self.PRECOMMIT_HOOK]

    def list_rules(self) -> list[CatalogEntry]:
        """List rule documents (*.md), sorted by name."""
        return self._list_files(ComponentName.RULES, "*.md", "rule")

    def entries(self, kind: str) -> list[CatalogEntry]:
        """List entries of one kind (skill, agent, hook or rule).

        Raises:
            ValueError: If kind is unknown.
        """
        listers = {
            "skill": self.list_skills,
            "agent": self.list_agents,
            "hook": self.list_hooks,
            "rule": self.list_rules,
        }
        if kind not in listers:
            raise ValueError(f"Unknown catalog kind: {kind}")
        return listers[kind]()

    def find(self, kind: str, name: str) -> CatalogEntry | None:
        """Find an entry by item name in the live listing."""
        for entry in self.entries(kind):
            if entry.name == name:
                return entry
        return None

    def list_stacks(self) -> list[StackPreset]:
        """Presets that ship at least a rules or settings file."""
        return [
            preset
            for preset in STACK_PRESETS
            if (self.stack_dir(preset) / preset.rules_file).is_file()
            or (self.stack_dir(preset) / preset.settings_file).is_file()
        ]

    def _list_files(self, component: ComponentName, pattern: str, kind: str) -> list[CatalogEntry]:
        directory = self.component_dir(component)
        if not directory.is_dir():
            return []
        return [
            self._parse_file(path, kind)
            for path in sorted(directory.glob(pattern))
            if path.is_file() and not path.name.startswith(".")
        ]

    def _parse_file(self, path: Path, kind: str) -> CatalogEntry:
        frontmatter = self._read_frontmatter(path) if path.suffix == ".md" else {}
        return CatalogEntry(
            name=path.stem if kind == "agent" else path.name,
            kind=kind,
            path=path,
            description=str(frontmatter.get("description", "")),
        )

    def _parse_skill_dir(self, path: Path) -> CatalogEntry:
        skill_file = path / self.SKILL_PATTERN
        frontmatter = self._read_frontmatter(skill_file) if skill_file.is_file() else {}
        return CatalogEntry(
            name=path.name,
            kind="skill",
            path=path,
            description=str(frontmatter.get("description", "")),
        )

    def _read_frontmatter(self, path: Path) -> dict:
        """Parse YAML frontmatter, returning an empty dict when absent or invalid."""
        try:
            result = parse_frontmatter(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Could not read %s: %s", path, e)
            return {}
        if not result.success:
            return {}
        try:
            data = yaml.safe_load(result.data)
        except yaml.YAMLError as e:
            logger.debug("Invalid frontmatter in %s: %s", path, e)
            return {}
        return data if isinstance(data, dict) else {}
