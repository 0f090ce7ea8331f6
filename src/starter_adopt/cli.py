"""CLI commands using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, NoReturn

if TYPE_CHECKING:
    import click

    from starter_adopt.context import AppContext

import typer
from typer.core import TyperGroup

from starter_adopt import __version__
from starter_adopt.catalog import Catalog
from starter_adopt.context import SOURCE_ENV_VAR, TARGET_ENV_VAR, create_context
from starter_adopt.errors import AdoptError, ComponentNotFound, InvalidComponentName
from starter_adopt.tui import TUI, MenuChoice
from starter_adopt.types import InstallReport

PROGRAM = "starter-adopt"

tui = TUI()

# Root overrides collected by the top-level callback
_options: dict[str, Path | None] = {"source": None, "target": None}


class AdoptGroup(TyperGroup):
    """Command group that reports unknown commands as invalid components."""

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        name = args[0] if args else None
        if name and not name.startswith("-") and self.get_command(ctx, name) is None:
            tui.show_error(str(InvalidComponentName(name, sorted(self.list_commands(ctx)))))
            tui.show_info(f"Run '{PROGRAM} --help' for usage")
            ctx.exit(1)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name=PROGRAM,
    help="Adopt starter skills, agents, hooks, rules and presets into a project",
    cls=AdoptGroup,
    invoke_without_command=True,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        tui.console.print(f"{PROGRAM} v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    source: Annotated[
        Path | None,
        typer.Option(
            "--source",
            "-s",
            envvar=SOURCE_ENV_VAR,
            help="Starter distribution to copy from (defaults to the bundled templates)",
        ),
    ] = None,
    target: Annotated[
        Path | None,
        typer.Option(
            "--target",
            "-t",
            envvar=TARGET_ENV_VAR,
            help="Project to install into (defaults to the current directory)",
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging")] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Adopt starter components into a project. Without a command, runs interactive mode."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    _options["source"] = source
    _options["target"] = target
    if ctx.invoked_subcommand is None:
        interactive()


# ============================================================================
# Helpers
# ============================================================================


def _fail(error: AdoptError) -> NoReturn:
    """Report an error that stops the requested operation and exit with 1."""
    tui.show_error(str(error))
    if isinstance(error, ComponentNotFound):
        tui.show_catalog(error.kind, error.available)
    raise typer.Exit(1) from error


def _load_context() -> AppContext:
    """Build the application context from the callback's options."""
    try:
        return create_context(_options["source"], _options["target"], prompter=tui)
    except AdoptError as e:
        _fail(e)


def _finish(report: InstallReport) -> None:
    """Render a report; exit with 1 when nothing in it could be processed."""
    tui.show_report(report)
    if report.blocked:
        raise typer.Exit(1)
    tui.show_success("Done!")


def _run_component(name: str, context: AppContext | None) -> None:
    ctx = context or _load_context()
    try:
        report = ctx.installer.install_component(name)
    except AdoptError as e:
        _fail(e)
    _finish(report)


def _run_all(ctx: AppContext) -> list[InstallReport]:
    reports = ctx.installer.install_all()
    for report in reports:
        tui.show_report(report)
    tui.show_summary(reports)
    return reports


def _install_single(kind: str, name: str | None, context: AppContext | None) -> None:
    """Install one named skill or agent.

    Args:
        kind: skill or agent.
        name: Item name from the command line (may be missing).
        context: Injected application context.

    Raises:
        typer.Exit: If the name is missing, invalid, unknown, or the copy failed.
    """
    if not name:
        tui.show_error(f"Usage: {PROGRAM} {kind} <{kind}-name>")
        raise typer.Exit(1)

    ctx = context or _load_context()
    try:
        outcome = ctx.installer.install_single_item(kind, name)
    except AdoptError as e:
        _fail(e)
    tui.show_outcome(outcome, kind)
    if not outcome.ok:
        raise typer.Exit(1)


# ============================================================================
# Component Commands
# ============================================================================


@app.command()
def skills(
    _context=None,
) -> None:
    """Install all skills."""
    _run_component("skills", _context)


@app.command()
def agents(
    _context=None,
) -> None:
    """Install all agents."""
    _run_component("agents", _context)


@app.command()
def hooks(
    _context=None,
) -> None:
    """Install all hooks except the pre-commit review hook."""
    _run_component("hooks", _context)


@app.command()
def rules(
    _context=None,
) -> None:
    """Install all rule documents."""
    _run_component("rules", _context)


@app.command()
def precommit(
    _context=None,
) -> None:
    """Install the pre-commit review hook into the git hooks directory."""
    _run_component("precommit", _context)


@app.command()
def security(
    _context=None,
) -> None:
    """Install the validation hook, security settings and security rules."""
    _run_component("security", _context)


@app.command()
def stack(
    stack_id: Annotated[
        str | None,
        typer.Argument(
            metavar="STACK",
            help="typescript, python, go, rust, ruby or elixir (prompts if omitted)",
        ),
    ] = None,
    _context=None,
) -> None:
    """Install a stack-specific preset."""
    if not stack_id:
        _run_component("stack", _context)
        return

    ctx = _context or _load_context()
    try:
        report = ctx.installer.install_stack_preset(stack_id)
    except AdoptError as e:
        _fail(e)
    _finish(report)


@app.command("all")
def install_all(
    _context=None,
) -> None:
    """Install skills, agents, hooks, rules and security in sequence."""
    ctx = _context or _load_context()
    reports = _run_all(ctx)
    if all(report.blocked for report in reports):
        raise typer.Exit(1)
    tui.show_success("Done!")


@app.command()
def skill(
    name: Annotated[str | None, typer.Argument(help="Skill name")] = None,
    _context=None,
) -> None:
    """Install one named skill."""
    _install_single("skill", name, _context)


@app.command()
def agent(
    name: Annotated[str | None, typer.Argument(help="Agent name (without .md)")] = None,
    _context=None,
) -> None:
    """Install one named agent."""
    _install_single("agent", name, _context)


# ============================================================================
# Information Commands
# ============================================================================


@app.command()
def status(
    _context=None,
) -> None:
    """Show which components are already installed in the target."""
    ctx = _context or _load_context()
    tui.console.print(f"[bold]Target:[/bold] {ctx.target_root}")
    tui.show_status(ctx.installer.status())


@app.command("list")
def list_items(
    kind: Annotated[
        str | None, typer.Argument(help="skill, agent, hook or rule (all if omitted)")
    ] = None,
    _context=None,
) -> None:
    """List the items available in the starter distribution."""
    ctx = _context or _load_context()
    if kind:
        normalized = kind[:-1] if kind.endswith("s") else kind
        if normalized not in Catalog.KINDS:
            _fail(InvalidComponentName(kind, list(Catalog.KINDS), label="kind"))
        kinds = [normalized]
    else:
        kinds = list(Catalog.KINDS)

    for item_kind in kinds:
        tui.show_entries(item_kind, ctx.catalog.entries(item_kind))


@app.command("help")
def show_help() -> None:
    """Show usage and exit."""
    tui.show_usage(PROGRAM)


# ============================================================================
# Interactive Mode
# ============================================================================

MENU_COMPONENTS = {
    MenuChoice.SKILLS: "skills",
    MenuChoice.AGENTS: "agents",
    MenuChoice.HOOKS: "hooks",
    MenuChoice.RULES: "rules",
    MenuChoice.PRECOMMIT: "precommit",
    MenuChoice.SECURITY: "security",
    MenuChoice.STACK: "stack",
}


def _dispatch(ctx: AppContext, choice: MenuChoice) -> None:
    """Run the operation behind one menu selection.

    Raises:
        AdoptError: If the selected operation cannot proceed.
    """
    if choice in MENU_COMPONENTS:
        _finish(ctx.installer.install_component(MENU_COMPONENTS[choice]))
    elif choice is MenuChoice.EVERYTHING:
        _run_all(ctx)
        if tui.confirm("Also install pre-commit review hook?", default=False):
            try:
                tui.show_report(ctx.installer.install_component("precommit"))
            except AdoptError as e:
                tui.show_error(str(e))
        tui.show_success("Done!")
    elif choice is MenuChoice.SINGLE_SKILL:
        name = tui.prompt_item_name("skill", ctx.catalog.list_skills())
        _install_single("skill", name, ctx)
    elif choice is MenuChoice.SINGLE_AGENT:
        name = tui.prompt_item_name("agent", ctx.catalog.list_agents())
        _install_single("agent", name, ctx)


def interactive(
    _context=None,
) -> None:
    """Show the menu, dispatch one selection, then exit."""
    ctx = _context or _load_context()

    tui.show_banner(ctx.target_root)
    tui.show_status(ctx.installer.status())
    choice = tui.show_main_menu()
    if choice is MenuChoice.QUIT:
        return

    try:
        _dispatch(ctx, choice)
    except AdoptError as e:
        _fail(e)


if __name__ == "__main__":
    app()
