"""Stack presets: language-specific rule and settings bundles."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from starter_adopt.errors import InvalidComponentName


class StackPreset(BaseModel):
    """A language/platform bundle under stacks/<id>/ in the distribution."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    rules_file: str = "rules.md"
    settings_file: str = "settings.json"
    template_file: str = "CLAUDE.md"

    @property
    def installed_rules_name(self) -> str:
        """Stack-qualified rule file name, e.g. go.md."""
        return f"{self.id}.md"


STACK_PRESETS: tuple[StackPreset, ...] = (
    StackPreset(id="typescript", label="TypeScript"),
    StackPreset(id="python", label="Python"),
    StackPreset(id="go", label="Go"),
    StackPreset(id="rust", label="Rust"),
    StackPreset(id="ruby", label="Ruby"),
    StackPreset(id="elixir", label="Elixir"),
)


def stack_ids() -> list[str]:
    return [preset.id for preset in STACK_PRESETS]


def get_stack(stack_id: str) -> StackPreset:
    """Look up a preset by id.

    Args:
        stack_id: One of the six fixed identifiers (case-insensitive).

    Returns:
        The matching StackPreset.

    Raises:
        InvalidComponentName: If the id is not a known stack.
    """
    normalized = stack_id.strip().lower()
    for preset in STACK_PRESETS:
        if preset.id == normalized:
            return preset
    raise InvalidComponentName(stack_id, stack_ids(), label="stack")
