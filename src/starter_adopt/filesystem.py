"""Filesystem abstraction for testability.

This module provides the filesystem operations the installer relies on.
Copies are staged under a temporary sibling name and renamed into place,
so a destination either appears complete or not at all.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def _staging_path(dst: Path) -> Path:
    return dst.with_name(f".{dst.name}.partial")


class RealFileSystem:
    """Production filesystem implementation.

    Wraps standard library Path, os and shutil operations.
    Satisfies the FileSystem protocol structurally.
    """

    def read_text(self, path: Path) -> str:
        """Read text content from a file."""
        return path.read_text()

    def read_bytes(self, path: Path) -> bytes:
        """Read binary content from a file."""
        return path.read_bytes()

    def iterdir(self, path: Path) -> Iterator[Path]:
        """Iterate over the entries of a directory."""
        return path.iterdir()

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        """Check if a path is a regular file."""
        return path.is_file()

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        path.mkdir(parents=parents, exist_ok=exist_ok)

    def rename(self, src: Path, dst: Path) -> None:
        """Move a file to a new name."""
        src.rename(dst)

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a file, replacing dst in a single rename.

        Args:
            src: Source file.
            dst: Destination file. Its parent directory must exist.
        """
        staging = _staging_path(dst)
        try:
            shutil.copyfile(src, staging)
            shutil.copymode(src, staging)
            os.replace(staging, dst)
        except OSError:
            staging.unlink(missing_ok=True)
            raise

    def copytree(self, src: Path, dst: Path) -> None:
        """Copy a directory tree, publishing it under dst only when complete.

        Args:
            src: Source directory.
            dst: Destination directory. Must not exist yet.
        """
        staging = _staging_path(dst)
        if staging.exists():
            logger.debug("Removing stale staging directory %s", staging)
            shutil.rmtree(staging)
        try:
            shutil.copytree(src, staging)
            staging.rename(dst)
        except OSError:
            shutil.rmtree(staging, ignore_errors=True)
            raise

    def make_executable(self, path: Path) -> None:
        """Add the executable bit for user, group and others."""
        mode = path.stat().st_mode
        path.chmod(mode | EXECUTABLE_BITS)
