"""Task records as delivered by the sync API - no I/O dependencies."""

from dataclasses import dataclass, field


def _flag(value) -> bool:
    """Sync payloads send flags as 0/1 or as booleans."""
    return bool(value) if value is not None else False


@dataclass
class Project:
    """A project (task list). Projects nest by indent."""

    id: int
    name: str
    item_order: int = 0
    indent: int = 1
    is_archived: bool = False

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.item_order, self.id)

    @classmethod
    def from_api(cls, data: dict) -> "Project":
        """Create Project from a sync API payload entry."""
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            item_order=data.get("item_order", 0) or 0,
            indent=data.get("indent", 1) or 1,
            is_archived=_flag(data.get("is_archived")),
        )


@dataclass
class Item:
    """A task. Items nest under their project by indent."""

    id: int
    project_id: int
    content: str
    item_order: int = 0
    indent: int = 1
    checked: bool = False
    is_deleted: bool = False
    is_archived: bool = False
    labels: list[int] = field(default_factory=list)

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.item_order, self.id)

    def has_label(self, label_id: int) -> bool:
        return label_id in self.labels

    @classmethod
    def from_api(cls, data: dict) -> "Item":
        """Create Item from a sync API payload entry."""
        return cls(
            id=data["id"],
            project_id=data["project_id"],
            content=data.get("content", ""),
            item_order=data.get("item_order", 0) or 0,
            indent=data.get("indent", 1) or 1,
            checked=_flag(data.get("checked")),
            is_deleted=_flag(data.get("is_deleted")),
            is_archived=_flag(data.get("is_archived")),
            labels=list(data.get("labels") or []),
        )


@dataclass
class Label:
    """A label that can be attached to items."""

    id: int
    name: str
    is_deleted: bool = False

    @classmethod
    def from_api(cls, data: dict) -> "Label":
        return cls(
            id=data["id"],
            name=data["name"],
            is_deleted=_flag(data.get("is_deleted")),
        )


@dataclass
class SyncResult:
    """One deserialized sync response."""

    projects: list[Project] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)
    sync_token: str = "*"
    full_sync: bool = True

    @classmethod
    def from_api(cls, data: dict) -> "SyncResult":
        """Create SyncResult from a sync API response body."""
        return cls(
            projects=[Project.from_api(p) for p in data.get("projects") or []],
            items=[Item.from_api(i) for i in data.get("items") or []],
            labels=[Label.from_api(lb) for lb in data.get("labels") or []],
            sync_token=data.get("sync_token", "*"),
            full_sync=bool(data.get("full_sync", True)),
        )
