"""Validation utilities for starter-adopt.

This module holds the checks applied to user-supplied names and the
frontmatter parsing shared by catalog listings.
"""

from __future__ import annotations

from starter_adopt.errors import InvalidItemName


class FrontmatterResult:
    """Result of parsing frontmatter from content."""

    __slots__ = ("data", "errors", "success")

    def __init__(self, data: str = "", errors: list[str] | None = None) -> None:
        """Initialize frontmatter result.

        Args:
            data: The parsed frontmatter content (raw YAML string).
            errors: List of parsing errors encountered.
        """
        self.data = data
        self.errors = errors or []
        self.success = len(self.errors) == 0


def parse_frontmatter(content: str) -> FrontmatterResult:
    """Parse YAML frontmatter from markdown content.

    Extracts the frontmatter block between the opening and closing '---'
    delimiters.

    Args:
        content: The full markdown content with optional frontmatter.

    Returns:
        FrontmatterResult with data (raw YAML string) and any errors.

    Example:
        >>> result = parse_frontmatter("---\\nname: review\\n---\\nBody")
        >>> result.success
        True
        >>> result.data
        'name: review'
    """
    if not content.startswith("---"):
        return FrontmatterResult(errors=["Content must have YAML frontmatter"])

    try:
        end_idx = content.index("---", 3)
        frontmatter = content[3:end_idx].strip()
        return FrontmatterResult(data=frontmatter)
    except ValueError:
        return FrontmatterResult(errors=["Invalid frontmatter: missing closing ---"])


def is_safe_item_name(name: str) -> bool:
    """Check that a name cannot escape its catalog directory.

    Rejects empty names, path separators, parent-directory sequences and
    leading dots (hidden files, '.' and '..').
    """
    if not name:
        return False
    if "/" in name or "\\" in name:
        return False
    if ".." in name:
        return False
    return not name.startswith(".")


def validate_item_name(kind: str, name: str) -> str:
    """Validate a single-item name before any filesystem access.

    Args:
        kind: Collection kind (skill or agent), used in the error message.
        name: User-supplied item name.

    Returns:
        The name, unchanged.

    Raises:
        InvalidItemName: If the name contains a path or traversal sequence.
    """
    if not is_safe_item_name(name):
        raise InvalidItemName(kind, name)
    return name
