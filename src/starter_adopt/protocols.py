"""Protocol definitions for core abstractions.

This module defines abstract interfaces (Protocols) for the services the
installer depends on. Designing to interfaces enables:
- Loose coupling between components
- Easy substitution of test doubles
- Clear contracts for implementations

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from starter_adopt.stacks import StackPreset
    from starter_adopt.types import InstallOutcome, InstallReport


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem operations.

    Abstracts filesystem access to enable testing without real I/O.
    """

    def read_text(self, path: Path) -> str:
        """Read text content from a file.

        Raises:
            FileNotFoundError: If file does not exist.
        """
        ...

    def read_bytes(self, path: Path) -> bytes:
        """Read binary content from a file."""
        ...

    def iterdir(self, path: Path) -> Iterator[Path]:
        """Iterate over the entries of a directory."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    def is_file(self, path: Path) -> bool:
        """Check if a path is a regular file."""
        ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory.

        Args:
            path: Path to create.
            parents: Create parent directories if needed.
            exist_ok: Don't raise if directory exists.
        """
        ...

    def rename(self, src: Path, dst: Path) -> None:
        """Move a file to a new name."""
        ...

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a single file, all or nothing.

        Args:
            src: Source file.
            dst: Destination file.
        """
        ...

    def copytree(self, src: Path, dst: Path) -> None:
        """Copy a directory tree, all or nothing.

        Args:
            src: Source directory.
            dst: Destination directory.
        """
        ...

    def make_executable(self, path: Path) -> None:
        """Set the executable permission bits on a file."""
        ...


@runtime_checkable
class Prompter(Protocol):
    """Protocol for the blocking questions the installer may ask.

    The interactive TUI satisfies it; tests use a scripted double.
    """

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question.

        Args:
            message: Question to display.
            default: Answer used when the user just presses enter.

        Returns:
            User's answer.
        """
        ...

    def select_stack(self, presets: list[StackPreset]) -> StackPreset | None:
        """Ask the user to pick a stack preset.

        Args:
            presets: Presets to choose from.

        Returns:
            Selected preset, or None if the choice was invalid.
        """
        ...


@runtime_checkable
class HooksLocator(Protocol):
    """Protocol for locating the version-control hooks directory."""

    def find_hooks_dir(self, project_root: Path) -> Path:
        """Get the hooks directory of the repository rooted at project_root.

        Raises:
            NotAGitRepository: If project_root is not a repository root.
        """
        ...


@runtime_checkable
class ComponentInstaller(Protocol):
    """Protocol for component installation operations.

    Implementations copy components into a target project without
    overwriting existing files.
    """

    def install_component(self, name: str) -> InstallReport:
        """Install one component by name.

        Args:
            name: skills, agents, hooks, rules, precommit, security or stack.

        Returns:
            InstallReport with one outcome per item.
        """
        ...

    def install_all(self) -> list[InstallReport]:
        """Install skills, agents, hooks, rules and security in sequence."""
        ...

    def install_single_item(self, kind: str, name: str) -> InstallOutcome:
        """Install one named skill or agent.

        Args:
            kind: Either "skill" or "agent".
            name: Item name from the catalog.
        """
        ...

    def install_stack_preset(self, stack_id: str) -> InstallReport:
        """Install the rules and settings of one stack preset."""
        ...

    def status(self) -> dict[str, bool]:
        """Report which components are already present in the target."""
        ...
