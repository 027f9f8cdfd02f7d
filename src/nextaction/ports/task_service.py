"""Task service interface."""

from typing import Protocol

from nextaction.core.models import Label, SyncResult
from nextaction.core.traversal import LabelMutation


class TaskService(Protocol):
    """Interface for the remote task-management backend."""

    def sync(self) -> SyncResult:
        """Fetch projects, items and labels changed since the last sync."""
        ...

    def add_label(self, name: str) -> Label:
        """Create a label and return it with its real id."""
        ...

    def update_item_labels(self, mutations: list[LabelMutation]) -> None:
        """Apply label mutations in order."""
        ...
