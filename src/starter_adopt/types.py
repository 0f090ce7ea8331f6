"""Shared data types for starter adoption."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

__all__ = ["InstallOutcome", "InstallReport", "InstallStatus"]


class InstallStatus(str, Enum):
    """Result of installing a single item."""

    INSTALLED = "installed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallOutcome:
    """Result of installing one item.

    Attributes:
        item: Display name of the item (e.g. skill name or file name).
        status: What happened to the item.
        path: Destination path (None when the item never got one).
        reason: Why the item was skipped or failed.
    """

    item: str
    status: InstallStatus
    path: Path | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.item:
            raise ValueError("item cannot be empty")
        if self.status is InstallStatus.FAILED and not self.reason:
            raise ValueError("failed outcome requires a reason")
        if self.status is InstallStatus.INSTALLED and self.reason is not None:
            raise ValueError("installed outcome cannot carry a reason")

    @classmethod
    def installed(cls, item: str, path: Path) -> InstallOutcome:
        return cls(item=item, status=InstallStatus.INSTALLED, path=path)

    @classmethod
    def skipped(cls, item: str, path: Path, reason: str = "already exists") -> InstallOutcome:
        return cls(item=item, status=InstallStatus.SKIPPED, path=path, reason=reason)

    @classmethod
    def failed(cls, item: str, reason: str, path: Path | None = None) -> InstallOutcome:
        return cls(item=item, status=InstallStatus.FAILED, path=path, reason=reason)

    @property
    def ok(self) -> bool:
        """True unless the item failed."""
        return self.status is not InstallStatus.FAILED


@dataclass
class InstallReport:
    """Outcomes of one component operation.

    Attributes:
        component: Component name (skills, agents, security, ...).
        outcomes: Per-item outcomes in processing order.
        notes: Informational lines for the user.
        advisory: Snippet the user should merge by hand, if any.
    """

    component: str
    outcomes: list[InstallOutcome] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    advisory: str | None = None

    def add(self, outcome: InstallOutcome) -> InstallOutcome:
        self.outcomes.append(outcome)
        return outcome

    def note(self, message: str) -> None:
        self.notes.append(message)

    def _with_status(self, status: InstallStatus) -> list[InstallOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def installed(self) -> list[InstallOutcome]:
        return self._with_status(InstallStatus.INSTALLED)

    @property
    def skipped(self) -> list[InstallOutcome]:
        return self._with_status(InstallStatus.SKIPPED)

    @property
    def failed(self) -> list[InstallOutcome]:
        return self._with_status(InstallStatus.FAILED)

    @property
    def blocked(self) -> bool:
        """True when there were failures and nothing else was processed."""
        return bool(self.failed) and len(self.failed) == len(self.outcomes)
