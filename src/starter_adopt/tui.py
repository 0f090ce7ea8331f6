"""Rich TUI components for interactive adoption."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from starter_adopt.types import InstallOutcome, InstallReport, InstallStatus

if TYPE_CHECKING:
    from starter_adopt.catalog import CatalogEntry
    from starter_adopt.stacks import StackPreset


class MenuChoice(str, Enum):
    """Options offered by the interactive menu."""

    SKILLS = "1"
    AGENTS = "2"
    HOOKS = "3"
    RULES = "4"
    PRECOMMIT = "5"
    SECURITY = "6"
    STACK = "7"
    EVERYTHING = "8"
    SINGLE_SKILL = "s"
    SINGLE_AGENT = "a"
    QUIT = "q"


MENU_LINES = [
    (MenuChoice.SKILLS, "Skills", "Custom commands (review, test, explain, etc.)"),
    (MenuChoice.AGENTS, "Agents", "Specialized subagents (researcher, reviewer)"),
    (MenuChoice.HOOKS, "Hooks", "Security and auto-formatting hooks"),
    (MenuChoice.RULES, "Rules", "Reference documentation"),
    (MenuChoice.PRECOMMIT, "Pre-commit", "Review changes before every commit"),
    (MenuChoice.SECURITY, "Security", "Security configuration (permissions + hooks)"),
    (MenuChoice.STACK, "Stack preset", "Language-specific configuration"),
    (MenuChoice.EVERYTHING, "Everything", "Install all components"),
]

USAGE_ROWS = [
    ("skills", "Install custom skills"),
    ("agents", "Install specialized agents"),
    ("hooks", "Install security/formatting hooks"),
    ("rules", "Install reference documentation"),
    ("precommit", "Install pre-commit review hook"),
    ("security", "Install security configuration"),
    ("stack [STACK]", "Install stack-specific preset"),
    ("all", "Install everything"),
    ("skill <name>", "Install a specific skill"),
    ("agent <name>", "Install a specific agent"),
    ("status", "Show which components are installed"),
    ("list [KIND]", "List available skills, agents, hooks or rules"),
]


class TUI:
    """Text User Interface for starter-adopt.

    Renders reports and status lines, and asks the blocking questions of
    interactive mode. Satisfies the Prompter protocol.
    """

    def __init__(self, console: Console | None = None) -> None:
        """Initialize TUI.

        Args:
            console: Console to render to; a new one by default.
        """
        self.console = console or Console()

    def show_banner(self, target: Path) -> None:
        """Display the interactive-mode banner."""
        self.console.print(
            Panel(
                f"[bold blue]Starter Adopt[/bold blue]\n[bold]Target:[/bold] {target}",
                title="Adopt Components",
                border_style="blue",
            )
        )

    def show_status(self, status: dict[str, bool]) -> None:
        """Display which components already exist in the target.

        Args:
            status: Mapping of component label to installed flag.
        """
        self.console.print("\n[bold]Current Status:[/bold]")
        for label, installed in status.items():
            icon = "[green]✓[/green]" if installed else "[dim]○[/dim]"
            self.console.print(f"  {icon} {label}")

    def show_main_menu(self) -> MenuChoice:
        """Display the main menu and read one selection.

        Returns:
            Selected menu option.
        """
        self.console.print("\n[bold]What would you like to adopt?[/bold]\n")
        for choice, label, description in MENU_LINES:
            self.console.print(escape(f"  [{choice.value}] {label:<13} - {description}"))
        self.console.print()
        self.console.print(escape("  [s] Single skill  - Install one specific skill"))
        self.console.print(escape("  [a] Single agent  - Install one specific agent"))
        self.console.print()
        self.console.print(escape("  [q] Quit"))
        self.console.print()

        selection = Prompt.ask(
            "Select option",
            choices=[c.value for c in MenuChoice],
            default=MenuChoice.QUIT.value,
            case_sensitive=False,
            console=self.console,
        )
        return MenuChoice(selection.lower())

    def select_stack(self, presets: list[StackPreset]) -> StackPreset | None:
        """Prompt user to select a stack preset.

        Args:
            presets: Presets to choose from.

        Returns:
            Selected preset or None for an invalid choice.
        """
        if not presets:
            return None

        self.console.print("\n[bold]Available stacks:[/bold]")
        for i, preset in enumerate(presets, 1):
            self.console.print(escape(f"  [{i}] {preset.label}"))

        choice = Prompt.ask(f"Select stack [1-{len(presets)}]", console=self.console)
        try:
            idx = int(choice)
        except ValueError:
            return None
        if 1 <= idx <= len(presets):
            return presets[idx - 1]
        return None

    def prompt_item_name(self, kind: str, entries: list[CatalogEntry]) -> str:
        """List the catalog and ask for one item name.

        Args:
            kind: skill or agent.
            entries: Available items.

        Returns:
            Entered name, stripped.
        """
        self.show_catalog(kind, [e.name for e in entries])
        return Prompt.ask(f"{kind.capitalize()} name", console=self.console).strip()

    def confirm(self, message: str, default: bool = False) -> bool:
        """Show confirmation prompt.

        Args:
            message: Confirmation message.
            default: Default response.

        Returns:
            User's response.
        """
        return Confirm.ask(message, default=default, console=self.console)

    def show_catalog(self, kind: str, names: list[str]) -> None:
        """Display the names available for a kind."""
        if not names:
            self.console.print(f"[yellow]No {kind}s available[/yellow]")
            return
        self.console.print(f"Available {kind}s:")
        for name in names:
            self.console.print(f"  - {name}")

    def show_entries(self, kind: str, entries: list[CatalogEntry]) -> None:
        """Display catalog entries with descriptions as a table."""
        if not entries:
            self.console.print(f"[yellow]No {kind}s available[/yellow]")
            return

        table = Table(title=f"Available {kind}s")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        for entry in entries:
            table.add_row(entry.name, entry.description or "")
        self.console.print(table)

    def show_outcome(self, outcome: InstallOutcome, kind: str | None = None) -> None:
        """Render a single outcome as a status line.

        Args:
            outcome: Outcome to render.
            kind: Optional item kind used as a prefix (skill, agent, ...).
        """
        label = f"{kind}: {outcome.item}" if kind else outcome.item
        if outcome.status is InstallStatus.INSTALLED:
            self.show_success(f"Installed {label}")
        elif outcome.status is InstallStatus.SKIPPED:
            where = f" ({outcome.path})" if outcome.path else ""
            self.show_warning(f"'{outcome.item}' {outcome.reason}{where}, skipping")
        else:
            self.show_error(f"Failed to install {label}: {outcome.reason}")

    def show_report(self, report: InstallReport) -> None:
        """Render every outcome, note and advisory of a report."""
        self.show_info(f"Installing {report.component}...")
        for outcome in report.outcomes:
            self.show_outcome(outcome)
        for note in report.notes:
            self.show_info(note)
        if report.advisory:
            self.console.print(Text(report.advisory, style="dim"))

    def show_summary(self, reports: list[InstallReport]) -> None:
        """Display installed/skipped/failed counts per report."""
        table = Table(title="Summary")
        table.add_column("Component", style="cyan")
        table.add_column("Installed", justify="right")
        table.add_column("Skipped", justify="right")
        table.add_column("Failed", justify="right")
        for report in reports:
            table.add_row(
                report.component,
                str(len(report.installed)),
                str(len(report.skipped)),
                str(len(report.failed)),
            )
        self.console.print(table)

    def show_usage(self, program: str) -> None:
        """Print command usage."""
        self.console.print(f"Usage: {program} [OPTIONS] [COMMAND]\n")
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Command", style="cyan")
        table.add_column("Description")
        for command, description in USAGE_ROWS:
            table.add_row(command, description)
        self.console.print(table)
        self.console.print("\nWithout a command, runs interactive mode.")

    def show_success(self, message: str) -> None:
        """Show success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def show_error(self, message: str) -> None:
        """Show error message.

        Args:
            message: Error message.
        """
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def show_warning(self, message: str) -> None:
        """Show warning message.

        Args:
            message: Warning message.
        """
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def show_info(self, message: str) -> None:
        """Show info message.

        Args:
            message: Info message.
        """
        self.console.print(f"[blue]→[/blue] {escape(message)}")
