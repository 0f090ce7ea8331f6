"""Model of a project's .claude/settings.json, read but never rewritten."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

# Deny rules every project should carry, suggested when settings.json
# already exists and cannot be replaced.
SECURITY_DENY_RULES = [
    "Read(.env)",
    "Read(.env.*)",
    "Read(**/*.pem)",
    "Read(**/*.key)",
    "Edit(.env)",
    "Write(.env)",
    "Bash(rm -rf /)",
    "Bash(sudo:*)",
]


class Permissions(BaseModel):
    """The permissions block of a settings file."""

    model_config = ConfigDict(extra="allow")

    allow: list[str] = Field(default_factory=list)
    deny: list[str] = Field(default_factory=list)


class ProjectSettings(BaseModel):
    """Fields of settings.json the installer inspects; others are preserved."""

    model_config = ConfigDict(extra="allow")

    permissions: Permissions = Field(default_factory=Permissions)

    @classmethod
    def from_file(cls, path: Path) -> ProjectSettings | None:
        """Load a settings file.

        Args:
            path: Path to settings.json.

        Returns:
            Parsed settings, or None if the file is missing or not valid.
        """
        if not path.is_file():
            return None
        try:
            return cls.model_validate(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, ValidationError) as e:
            logger.debug("Could not parse %s: %s", path, e)
            return None

    def missing_deny_rules(self, required: list[str] | None = None) -> list[str]:
        """Deny rules from required that this file does not declare."""
        rules = SECURITY_DENY_RULES if required is None else required
        present = set(self.permissions.deny)
        return [rule for rule in rules if rule not in present]


def declares_hooks(content: str) -> bool:
    """Whether settings.json content has a top-level "hooks" key.

    Content that is not valid JSON falls back to a plain search for the key.
    """
    try:
        data = json.loads(content)
    except ValueError:
        return '"hooks"' in content
    return isinstance(data, dict) and "hooks" in data


def deny_rules_snippet(rules: list[str]) -> str:
    """Render deny rules as the JSON fragment a user can paste."""
    body = json.dumps({"deny": rules}, indent=2)
    # Drop the enclosing braces so the fragment fits inside "permissions".
    return "\n".join(body.splitlines()[1:-1])
