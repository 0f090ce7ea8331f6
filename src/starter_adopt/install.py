"""Installation operations for starter components."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from starter_adopt.catalog import COMPONENTS, Catalog, CatalogEntry, ComponentName
from starter_adopt.errors import (
    AdoptError,
    ComponentNotFound,
    FilesystemError,
    InvalidComponentName,
)
from starter_adopt.filesystem import RealFileSystem
from starter_adopt.gitops import GitOps
from starter_adopt.project_settings import ProjectSettings, declares_hooks, deny_rules_snippet
from starter_adopt.protocols import FileSystem, HooksLocator, Prompter
from starter_adopt.stacks import StackPreset, get_stack
from starter_adopt.types import InstallOutcome, InstallReport
from starter_adopt.validation import validate_item_name

logger = logging.getLogger(__name__)

# Destination configuration root inside the target project
TARGET_CONFIG_DIR = ".claude"
GIT_PRECOMMIT_HOOK = "pre-commit"
BACKUP_SUFFIX = ".backup"

# Order used by install_all; precommit and stack need a decision from the user
ALL_COMPONENTS = (
    ComponentName.SKILLS,
    ComponentName.AGENTS,
    ComponentName.HOOKS,
    ComponentName.RULES,
    ComponentName.SECURITY,
)

SINGLE_ITEM_KINDS = ("skill", "agent")
NO_SELECTION = "(none selected)"


class Installer:
    """Copies starter components into a target project.

    Follows Separate Use from Creation: constructor requires all dependencies.
    Use factory method `create()` for production instantiation with defaults.
    """

    def __init__(
        self,
        catalog: Catalog,
        target_root: Path,
        gitops: HooksLocator,
        filesystem: FileSystem,
        prompter: Prompter | None,
    ) -> None:
        """Initialize installer with required dependencies.

        Args:
            catalog: Catalog of the source distribution.
            target_root: Root of the project receiving the components.
            gitops: Locator for the git hooks directory.
            filesystem: Filesystem abstraction.
            prompter: Source of confirmations; None refuses every question.
        """
        self.catalog = catalog
        self.target_root = target_root
        self.gitops = gitops
        self.fs = filesystem
        self.prompter = prompter

    @classmethod
    def create(
        cls,
        catalog: Catalog,
        target_root: Path,
        gitops: HooksLocator | None = None,
        filesystem: FileSystem | None = None,
        prompter: Prompter | None = None,
    ) -> Installer:
        """Factory method for production instantiation.

        Args:
            catalog: Catalog of the source distribution.
            target_root: Root of the project receiving the components.
            gitops: Optional hooks locator (created if not provided).
            filesystem: Optional filesystem abstraction (created if not provided).
            prompter: Optional prompter for interactive confirmations.

        Returns:
            Configured Installer instance.
        """
        return cls(
            catalog=catalog,
            target_root=target_root,
            gitops=gitops or GitOps.create(),
            filesystem=filesystem or RealFileSystem(),
            prompter=prompter,
        )

    @property
    def config_dir(self) -> Path:
        return self.target_root / TARGET_CONFIG_DIR

    @property
    def settings_path(self) -> Path:
        return self.config_dir / Catalog.SETTINGS_FILE

    def target_dir(self, name: ComponentName) -> Path:
        return self.config_dir / COMPONENTS[name].target

    # ------------------------------------------------------------------
    # Component operations
    # ------------------------------------------------------------------

    def install_component(self, name: str) -> InstallReport:
        """Install one component by name.

        Args:
            name: One of skills, agents, hooks, rules, precommit, security, stack.

        Returns:
            InstallReport with one outcome per item.

        Raises:
            InvalidComponentName: If name is not a known component.
            NotAGitRepository: If precommit is requested outside a repository.
        """
        try:
            component = ComponentName(name)
        except ValueError as e:
            raise InvalidComponentName(name, [c.value for c in ComponentName]) from e

        handlers = {
            ComponentName.SKILLS: self.install_skills,
            ComponentName.AGENTS: self.install_agents,
            ComponentName.HOOKS: self.install_hooks,
            ComponentName.RULES: self.install_rules,
            ComponentName.PRECOMMIT: self.install_precommit,
            ComponentName.SECURITY: self.install_security_bundle,
            ComponentName.STACK: self._install_selected_stack,
        }
        return handlers[component]()

    def install_skills(self) -> InstallReport:
        """Copy every skill directory into .claude/skills/."""
        return self._install_collection(ComponentName.SKILLS, self.catalog.list_skills)

    def install_agents(self) -> InstallReport:
        """Copy every agent file into .claude/agents/."""
        return self._install_collection(ComponentName.AGENTS, self.catalog.list_agents)

    def install_hooks(self) -> InstallReport:
        """Copy every hook except the pre-commit review hook into .claude/hooks/."""
        report = self._install_collection(
            ComponentName.HOOKS, self.catalog.list_hooks, executable=True
        )
        if self.fs.is_file(self.settings_path) and not self._settings_declare_hooks():
            report.note(f"Add hooks configuration to {TARGET_CONFIG_DIR}/settings.json manually")
            report.note(f"See {self.catalog.settings_path} for a hooks configuration example")
        return report

    def install_rules(self) -> InstallReport:
        """Copy every rule document into .claude/rules/."""
        return self._install_collection(ComponentName.RULES, self.catalog.list_rules)

    def install_all(self) -> list[InstallReport]:
        """Install skills, agents, hooks, rules and security in sequence.

        A failing step is recorded in its own report; later steps still run.

        Returns:
            One report per step, in order.
        """
        reports = []
        for name in ALL_COMPONENTS:
            try:
                reports.append(self.install_component(name.value))
            except (AdoptError, OSError) as e:
                logger.warning("Step %s failed: %s", name.value, e)
                report = InstallReport(component=name.value)
                report.add(InstallOutcome.failed(name.value, str(e)))
                reports.append(report)
        return reports

    # ------------------------------------------------------------------
    # Single items
    # ------------------------------------------------------------------

    def install_single_item(self, kind: str, name: str) -> InstallOutcome:
        """Install one named skill or agent.

        Args:
            kind: Either "skill" or "agent".
            name: Item name as listed in the catalog (agent names omit .md).

        Returns:
            InstallOutcome for the item.

        Raises:
            InvalidComponentName: If kind is not skill or agent.
            InvalidItemName: If name contains a path or traversal sequence.
            ComponentNotFound: If name is not in the live catalog.
        """
        if kind not in SINGLE_ITEM_KINDS:
            raise InvalidComponentName(kind, list(SINGLE_ITEM_KINDS), label="item kind")
        validate_item_name(kind, name)

        entry = self.catalog.find(kind, name)
        if entry is None:
            available = [e.name for e in self.catalog.entries(kind)]
            raise ComponentNotFound(kind, name, available)

        component = ComponentName.SKILLS if kind == "skill" else ComponentName.AGENTS
        dest_dir = self.target_dir(component)
        self._ensure_dir(dest_dir)
        return self._copy_entry(entry, dest_dir / entry.file_name)

    # ------------------------------------------------------------------
    # Composite operations
    # ------------------------------------------------------------------

    def install_precommit(self) -> InstallReport:
        """Install the review hook and register it as the git pre-commit hook.

        Raises:
            NotAGitRepository: If the target is not a repository root.
        """
        hooks_dir = self.gitops.find_hooks_dir(self.target_root)
        report = InstallReport(component=ComponentName.PRECOMMIT.value)

        source = self.catalog.hook_path(Catalog.PRECOMMIT_HOOK)
        if not self.fs.is_file(source):
            report.add(InstallOutcome.failed(Catalog.PRECOMMIT_HOOK, f"source not found: {source}"))
            return report

        try:
            self._ensure_dir(self.target_dir(ComponentName.HOOKS))
            self._ensure_dir(hooks_dir)
        except FilesystemError as e:
            report.add(InstallOutcome.failed(Catalog.PRECOMMIT_HOOK, str(e)))
            return report

        report.add(
            self._copy_file(
                source,
                self.target_dir(ComponentName.HOOKS) / Catalog.PRECOMMIT_HOOK,
                Catalog.PRECOMMIT_HOOK,
                executable=True,
            )
        )

        git_hook = hooks_dir / GIT_PRECOMMIT_HOOK
        label = f"git {GIT_PRECOMMIT_HOOK} hook"
        if self.fs.exists(git_hook):
            try:
                identical = self.fs.is_file(git_hook) and self._same_content(source, git_hook)
            except OSError as e:
                logger.exception("Could not compare %s with %s", git_hook, source)
                report.add(InstallOutcome.failed(label, f"cannot read existing hook: {e}"))
                return report
            if identical:
                report.add(InstallOutcome.skipped(label, git_hook))
                return report
            backup = self._backup_path(git_hook)
            try:
                self.fs.rename(git_hook, backup)
            except OSError as e:
                logger.exception("Could not back up %s", git_hook)
                report.add(InstallOutcome.failed(label, f"could not back up existing hook: {e}"))
                return report
            logger.warning("Existing pre-commit hook moved to %s", backup)
            report.note(f"Existing hook saved to {backup}")

        outcome = self._copy_file(source, git_hook, label, executable=True)
        report.add(outcome)
        if outcome.ok:
            report.note("Every commit will now show a review summary.")
            report.note("Skip with: SKIP_PRE_COMMIT_REVIEW=1 git commit")
        return report

    def install_security_bundle(self) -> InstallReport:
        """Install the bash validation hook, security settings and security rules.

        An existing settings.json is never modified: the deny rules it lacks
        are attached to the report as an advisory snippet instead.
        """
        report = InstallReport(component=ComponentName.SECURITY.value)
        hooks_dir = self.target_dir(ComponentName.HOOKS)
        rules_dir = self.target_dir(ComponentName.RULES)
        try:
            self._ensure_dir(hooks_dir)
            self._ensure_dir(rules_dir)
        except FilesystemError as e:
            report.add(InstallOutcome.failed(ComponentName.SECURITY.value, str(e)))
            return report

        hook_source = self.catalog.hook_path(Catalog.VALIDATE_HOOK)
        if self.fs.is_file(hook_source):
            report.add(
                self._copy_file(
                    hook_source,
                    hooks_dir / Catalog.VALIDATE_HOOK,
                    Catalog.VALIDATE_HOOK,
                    executable=True,
                )
            )
        else:
            report.add(
                InstallOutcome.failed(Catalog.VALIDATE_HOOK, f"source not found: {hook_source}")
            )

        report.add(self._install_security_settings(report))

        for rule in Catalog.SECURITY_RULES:
            rule_source = self.catalog.rule_path(rule)
            if self.fs.is_file(rule_source):
                report.add(self._copy_file(rule_source, rules_dir / rule, rule))
            else:
                logger.debug("Security rule %s not shipped, skipping", rule)
        return report

    def install_stack_preset(self, stack_id: str) -> InstallReport:
        """Install a stack's rules and settings.

        The rules file is installed under a stack-qualified name. An
        existing settings.json is replaced only after explicit confirmation.

        Args:
            stack_id: One of typescript, python, go, rust, ruby, elixir.

        Raises:
            InvalidComponentName: If stack_id is not a known stack.
        """
        preset = get_stack(stack_id)
        report = InstallReport(component=f"stack:{preset.id}")
        stack_dir = self.catalog.stack_dir(preset)
        rules_source = stack_dir / preset.rules_file
        settings_source = stack_dir / preset.settings_file

        if not self.fs.is_file(rules_source) and not self.fs.is_file(settings_source):
            report.add(
                InstallOutcome.failed(preset.id, f"stack preset not found in source: {stack_dir}")
            )
            return report

        if self.fs.is_file(rules_source):
            rules_dir = self.target_dir(ComponentName.RULES)
            try:
                self._ensure_dir(rules_dir)
                report.add(
                    self._copy_file(
                        rules_source,
                        rules_dir / preset.installed_rules_name,
                        preset.installed_rules_name,
                    )
                )
            except FilesystemError as e:
                report.add(InstallOutcome.failed(preset.installed_rules_name, str(e)))

        if self.fs.is_file(settings_source):
            report.add(self._install_stack_settings(preset, settings_source))

        if self.fs.is_file(stack_dir / preset.template_file):
            report.note(
                f"Stack template available at: {Catalog.STACKS_DIR}/{preset.id}/"
                f"{preset.template_file}"
            )
            report.note("Copy and customize it for your project.")
        return report

    def status(self) -> dict[str, bool]:
        """Report which components are already present in the target."""
        return {
            "CLAUDE.md": self.fs.is_file(self.target_root / "CLAUDE.md"),
            f"{TARGET_CONFIG_DIR}/settings.json": self.fs.is_file(self.settings_path),
            "Skills": self._has_entries(self.target_dir(ComponentName.SKILLS)),
            "Agents": self._has_entries(self.target_dir(ComponentName.AGENTS)),
            "Hooks": self._has_entries(self.target_dir(ComponentName.HOOKS)),
            "Rules": self._has_entries(self.target_dir(ComponentName.RULES)),
            "Pre-commit review": self._precommit_installed(),
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _install_selected_stack(self) -> InstallReport:
        """Ask for one of the stacks the distribution ships, then install it."""
        presets = self.catalog.list_stacks()
        choices = [p.id for p in presets]
        if self.prompter is None:
            raise InvalidComponentName(NO_SELECTION, choices, label="stack")
        preset = self.prompter.select_stack(presets)
        if preset is None or preset not in presets:
            raise InvalidComponentName(NO_SELECTION, choices, label="stack")
        return self.install_stack_preset(preset.id)

    def _install_collection(
        self,
        name: ComponentName,
        list_entries: Callable[[], list[CatalogEntry]],
        executable: bool = False,
    ) -> InstallReport:
        report = InstallReport(component=name.value)
        source_dir = self.catalog.component_dir(name)
        if not self.fs.is_dir(source_dir):
            reason = f"source directory not found: {source_dir}"
            report.add(InstallOutcome.failed(name.value, reason))
            return report

        try:
            entries = list_entries()
        except OSError as e:
            logger.exception("Could not list %s", source_dir)
            report.add(InstallOutcome.failed(name.value, f"cannot read {source_dir}: {e}"))
            return report

        dest_dir = self.target_dir(name)
        try:
            self._ensure_dir(dest_dir)
        except FilesystemError as e:
            report.add(InstallOutcome.failed(name.value, str(e)))
            return report

        if not entries:
            report.note(f"No {name.value} found in {source_dir}")
        for entry in entries:
            report.add(self._copy_entry(entry, dest_dir / entry.file_name, executable=executable))
        return report

    def _install_security_settings(self, report: InstallReport) -> InstallOutcome:
        item = Catalog.SETTINGS_FILE
        if self.fs.exists(self.settings_path):
            logger.warning("%s exists, leaving it untouched", self.settings_path)
            existing = ProjectSettings.from_file(self.settings_path)
            missing = (
                existing.missing_deny_rules()
                if existing is not None
                else ProjectSettings().missing_deny_rules()
            )
            if missing:
                report.note("settings.json exists - please merge security settings manually")
                report.note("Add these deny rules to your settings.json:")
                report.advisory = deny_rules_snippet(missing)
            else:
                report.note("settings.json already contains the recommended deny rules")
            return InstallOutcome.skipped(item, self.settings_path)

        source = self.catalog.settings_path
        if not self.fs.is_file(source):
            return InstallOutcome.failed(item, f"source not found: {source}")
        return self._copy_file(source, self.settings_path, item)

    def _install_stack_settings(self, preset: StackPreset, source: Path) -> InstallOutcome:
        item = Catalog.SETTINGS_FILE
        dest = self.settings_path
        if not self.fs.exists(dest):
            try:
                self._ensure_dir(self.config_dir)
            except FilesystemError as e:
                return InstallOutcome.failed(item, str(e))
            return self._copy_file(source, dest, item)

        question = f"Replace settings.json with {preset.id} preset?"
        if self.prompter is None or not self.prompter.confirm(question, default=False):
            return InstallOutcome.skipped(item, dest, reason="kept existing settings.json")

        try:
            self.fs.copy_file(source, dest)
        except OSError as e:
            logger.exception("Could not replace %s", dest)
            return InstallOutcome.failed(item, str(e), dest)
        logger.debug("Replaced %s with %s preset", dest, preset.id)
        return InstallOutcome.installed(item, dest)

    def _copy_entry(
        self, entry: CatalogEntry, dest: Path, executable: bool = False
    ) -> InstallOutcome:
        if entry.kind == "skill":
            return self._copy_dir(entry.path, dest, entry.name)
        return self._copy_file(entry.path, dest, entry.file_name, executable=executable)

    def _copy_file(
        self, source: Path, dest: Path, item: str, executable: bool = False
    ) -> InstallOutcome:
        """Copy a file unless dest exists. The parent of dest must exist."""
        if self.fs.exists(dest):
            logger.warning("%s already exists, skipping", dest)
            return InstallOutcome.skipped(item, dest)
        try:
            self.fs.copy_file(source, dest)
            if executable:
                self.fs.make_executable(dest)
        except OSError as e:
            logger.exception("Installation failed for %s", item)
            return InstallOutcome.failed(item, str(e), dest)
        logger.debug("Installed %s -> %s", source, dest)
        return InstallOutcome.installed(item, dest)

    def _copy_dir(self, source: Path, dest: Path, item: str) -> InstallOutcome:
        if self.fs.exists(dest):
            logger.warning("%s already exists, skipping", dest)
            return InstallOutcome.skipped(item, dest)
        try:
            self.fs.copytree(source, dest)
        except OSError as e:
            logger.exception("Installation failed for %s", item)
            return InstallOutcome.failed(item, str(e), dest)
        logger.debug("Installed %s -> %s", source, dest)
        return InstallOutcome.installed(item, dest)

    def _ensure_dir(self, path: Path) -> None:
        """Create a destination directory before anything is written into it.

        Raises:
            FilesystemError: If the directory cannot be created.
        """
        try:
            self.fs.mkdir(path, parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create directory {path}: {e}") from e

    def _backup_path(self, path: Path) -> Path:
        candidate = path.with_name(path.name + BACKUP_SUFFIX)
        counter = 1
        while self.fs.exists(candidate):
            candidate = path.with_name(f"{path.name}{BACKUP_SUFFIX}.{counter}")
            counter += 1
        return candidate

    def _same_content(self, first: Path, second: Path) -> bool:
        return self.fs.read_bytes(first) == self.fs.read_bytes(second)

    def _has_entries(self, path: Path) -> bool:
        return self.fs.is_dir(path) and any(self.fs.iterdir(path))

    def _settings_declare_hooks(self) -> bool:
        try:
            content = self.fs.read_text(self.settings_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", self.settings_path, e)
            return True
        return declares_hooks(content)

    def _precommit_installed(self) -> bool:
        try:
            hooks_dir = self.gitops.find_hooks_dir(self.target_root)
        except AdoptError as e:
            logger.debug("No pre-commit status: %s", e)
            return False
        return self.fs.exists(hooks_dir / GIT_PRECOMMIT_HOOK)
