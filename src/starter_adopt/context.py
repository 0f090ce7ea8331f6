"""Application context for dependency injection.

This module separates object creation from object use, enabling testability
and reducing coupling in CLI commands.

Source and target roots are resolved once here and passed explicitly to the
services; nothing downstream reads the working directory or environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from starter_adopt.catalog import Catalog
from starter_adopt.errors import SelfAdoptionError
from starter_adopt.protocols import ComponentInstaller, Prompter

# Distribution shipped inside the package
BUNDLED_SOURCE = Path(__file__).parent / "templates"

SOURCE_ENV_VAR = "STARTER_ADOPT_SOURCE"
TARGET_ENV_VAR = "STARTER_ADOPT_TARGET"


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for all services used by CLI commands.
    """

    catalog: Catalog
    installer: ComponentInstaller
    target_root: Path


def resolve_roots(
    source_root: Path | None = None,
    target_root: Path | None = None,
) -> tuple[Path, Path]:
    """Resolve the distribution and project roots.

    Args:
        source_root: Distribution root; defaults to the bundled templates.
        target_root: Project root; defaults to the current directory.

    Returns:
        Tuple of absolute (source_root, target_root).

    Raises:
        SelfAdoptionError: If both roots are the same directory.
    """
    source = (source_root or BUNDLED_SOURCE).expanduser().resolve()
    target = (target_root or Path.cwd()).expanduser().resolve()
    if source == target:
        raise SelfAdoptionError(target)
    return source, target


def create_context(
    source_root: Path | None = None,
    target_root: Path | None = None,
    prompter: Prompter | None = None,
) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.
    For tests, construct AppContext directly with test doubles.

    Args:
        source_root: Override distribution root.
        target_root: Override project root.
        prompter: Interactive prompter used for confirmations.

    Returns:
        Configured AppContext with all dependencies.

    Raises:
        SelfAdoptionError: If the target is the distribution itself.
    """
    from starter_adopt.filesystem import RealFileSystem
    from starter_adopt.gitops import GitOps
    from starter_adopt.install import Installer

    source, target = resolve_roots(source_root, target_root)
    catalog = Catalog.create(source)
    installer = Installer.create(
        catalog=catalog,
        target_root=target,
        gitops=GitOps.create(),
        filesystem=RealFileSystem(),
        prompter=prompter,
    )

    return AppContext(
        catalog=catalog,
        installer=installer,
        target_root=target,
    )
