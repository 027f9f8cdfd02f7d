"""In-memory record collection merged across sync cycles."""

from .models import Item, Label, Project, SyncResult


class RecordStore:
    """
    Flat collection of projects, items and labels.

    Incremental sync payloads only carry changed records, so each payload is
    merged into what was seen before. A full sync replaces everything.
    Pure data structure - no I/O.
    """

    def __init__(self):
        self._projects: dict[int, Project] = {}
        self._items: dict[int, Item] = {}
        self._labels: dict[int, Label] = {}

    def clear(self) -> None:
        self._projects.clear()
        self._items.clear()
        self._labels.clear()

    def merge(self, result: SyncResult) -> None:
        """Merge a sync payload. Archived/deleted records are dropped."""
        if result.full_sync:
            self.clear()

        for project in result.projects:
            if project.is_archived:
                self._projects.pop(project.id, None)
            else:
                self._projects[project.id] = project

        for item in result.items:
            if item.is_deleted or item.is_archived:
                self._items.pop(item.id, None)
            else:
                self._items[item.id] = item

        for label in result.labels:
            if label.is_deleted:
                self._labels.pop(label.id, None)
            else:
                self._labels[label.id] = label

    def add_label(self, label: Label) -> None:
        self._labels[label.id] = label

    def projects(self) -> list[Project]:
        """Projects sorted by rank, tie-broken by id."""
        return sorted(self._projects.values(), key=lambda p: p.sort_key)

    def items(self) -> list[Item]:
        """Items sorted by rank, tie-broken by id."""
        return sorted(self._items.values(), key=lambda i: i.sort_key)

    def labels(self) -> list[Label]:
        return list(self._labels.values())

    def find_label(self, name: str) -> Label | None:
        return next((lb for lb in self._labels.values() if lb.name == name), None)

    def __len__(self) -> int:
        return len(self._projects) + len(self._items)
