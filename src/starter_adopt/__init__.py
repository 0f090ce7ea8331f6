"""Adopt starter skills, agents, hooks, rules and presets into a project."""

__version__ = "0.1.0"

# Export protocol interfaces for type hints and dependency injection
from starter_adopt.protocols import (
    ComponentInstaller,
    FileSystem,
    HooksLocator,
    Prompter,
)

__all__ = [
    "__version__",
    "ComponentInstaller",
    "FileSystem",
    "HooksLocator",
    "Prompter",
]
