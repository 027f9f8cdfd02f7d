"""Rebuild the project/item hierarchy from flat, indent-annotated records.

Pure logic - no I/O. The tree is rebuilt from scratch every sync cycle.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator

from .models import Item, Project

logger = logging.getLogger(__name__)


class NextActionError(Exception):
    """Base error for nextaction core logic."""

    pass


class MissingParentError(NextActionError):
    """Raised when an item references a project that is not in the tree."""

    def __init__(self, project_id: int):
        self.project_id = project_id
        super().__init__(f"Project {project_id} not found in tree")


@dataclass
class Node:
    """A project or an item, plus its ordered children."""

    entity: Project | Item
    children: list["Node"] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.entity.id

    @property
    def name(self) -> str:
        match self.entity:
            case Project(name=name):
                return name
            case Item(content=content):
                return content
        raise TypeError(f"Unexpected node entity: {self.entity!r}")

    @property
    def checked(self) -> bool:
        """Projects are never checked."""
        match self.entity:
            case Item(checked=checked):
                return checked
            case _:
                return False

    @property
    def is_project(self) -> bool:
        return isinstance(self.entity, Project)

    @property
    def is_item(self) -> bool:
        return isinstance(self.entity, Item)

    def search(self, pred: Callable[["Node"], bool]) -> "Node | None":
        """Depth-first search of this subtree, self first."""
        if pred(self):
            return self
        for child in self.children:
            found = child.search(pred)
            if found is not None:
                return found
        return None


@dataclass
class TaskTree:
    """Ordered root nodes. Roots are always top-level projects."""

    roots: list[Node] = field(default_factory=list)

    def search(self, pred: Callable[[Node], bool]) -> Node | None:
        for root in self.roots:
            found = root.search(pred)
            if found is not None:
                return found
        return None

    def find_project(self, project_id: int) -> Node | None:
        return self.search(lambda n: n.is_project and n.id == project_id)

    def find_item(self, item_id: int) -> Node | None:
        return self.search(lambda n: n.is_item and n.id == item_id)

    def walk(self) -> Iterator[tuple[int, Node]]:
        """Pre-order walk yielding (depth, node), roots at depth 1."""
        stack = [(1, root) for root in reversed(self.roots)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            stack.extend((depth + 1, child) for child in reversed(node.children))

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())


def push_level(siblings: list[Node], node: Node, level: int) -> None:
    """
    Append node at the given 1-based level below siblings.

    Level N attaches to the last node at level N-1 on the chain of last
    children. If the chain is shorter than that, the node goes under the
    deepest node on it.
    """
    target = siblings
    for depth in range(1, level):
        if not target:
            logger.warning(
                f"Indent {level} of {node.name!r} skips a level, attaching at level {depth}"
            )
            break
        target = target[-1].children
    target.append(node)


def build_tree(projects: list[Project], items: list[Item]) -> TaskTree:
    """
    Build the task tree from rank-sorted projects and items.

    Input order is kept as sibling order; nothing is re-sorted. Item indents
    are counted from the shallowest item indent of their project, so those
    items become the project's direct children.

    Raises MissingParentError if an item's project is not in the tree. The
    partially built tree must then be discarded.
    """
    tree = TaskTree()

    for project in projects:
        push_level(tree.roots, Node(project), max(project.indent, 1))

    base_indent: dict[int, int] = {}
    for item in items:
        current = base_indent.get(item.project_id)
        if current is None or item.indent < current:
            base_indent[item.project_id] = item.indent

    for item in items:
        parent = tree.find_project(item.project_id)
        if parent is None:
            raise MissingParentError(item.project_id)
        level = item.indent - base_indent[item.project_id] + 1
        push_level(parent.children, Node(item), max(level, 1))

    logger.debug(f"Built tree with {len(tree.roots)} root projects")
    return tree
