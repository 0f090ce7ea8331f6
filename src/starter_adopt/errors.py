"""Error taxonomy for component adoption.

Every error the installer raises derives from AdoptError so the CLI can
recover at a single boundary. "Already exists" is not an error: it is
reported as a skipped outcome.
"""

from __future__ import annotations

from pathlib import Path


class AdoptError(Exception):
    """Base class for adoption errors."""

    pass


class InvalidComponentName(AdoptError):
    """Requested component or stack is not part of the fixed enumeration."""

    def __init__(
        self, name: str, choices: list[str] | None = None, label: str = "component"
    ) -> None:
        self.name = name
        self.choices = choices or []
        message = f"Unknown {label}: {name}"
        if self.choices:
            message += f" (expected one of: {', '.join(self.choices)})"
        super().__init__(message)


class InvalidItemName(AdoptError):
    """Item name contains a path separator or traversal sequence."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"Invalid {kind} name: '{name}' (no paths allowed)")


class ComponentNotFound(AdoptError):
    """Named item does not exist in the live catalog."""

    def __init__(self, kind: str, name: str, available: list[str]) -> None:
        self.kind = kind
        self.name = name
        self.available = available
        super().__init__(f"{kind.capitalize()} '{name}' not found")


class NotAGitRepository(AdoptError):
    """Target directory is not the root of a git repository."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Not a git repository: {path}. Run 'git init' first.")


class FilesystemError(AdoptError):
    """Permission or I/O failure while preparing the destination tree."""

    pass


class SelfAdoptionError(AdoptError):
    """Target directory is the distribution itself."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Cannot adopt into the starter distribution itself: {path}")
