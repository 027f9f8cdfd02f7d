"""Decide next-action/someday labels for every item in a task tree.

Task names carry ordering hints through their last character:

    "Renovate kitchen:"   sequential - children become actionable one by one
    "Errands-"            parallel   - all children are actionable together
    "Areas"               unmarked   - a plain folder, children start fresh

Pure function of the tree and the two label ids - no I/O.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum

from .models import Item
from .tree import Node, TaskTree

logger = logging.getLogger(__name__)

PARALLEL = "-"
SEQUENTIAL = ":"


class TraversalState(Enum):
    """Activity constraint handed down from a node to its children."""

    UNCONSTRAINED = "unconstrained"
    ACTIVE = "active"
    SUPPRESSED = "suppressed"

    def substate(self) -> "TraversalState":
        """State given to children of a parallel or sequential container."""
        if self is TraversalState.SUPPRESSED:
            return TraversalState.SUPPRESSED
        return TraversalState.ACTIVE


@dataclass(frozen=True)
class LabelMutation:
    """Replace the full label list of an item."""

    item_id: int
    labels: tuple[int, ...]


def is_parallel(name: str) -> bool:
    return name.endswith(PARALLEL)


def is_sequential(name: str) -> bool:
    return name.endswith(SEQUENTIAL)


def _is_actionable(node: Node, item: Item, state: TraversalState, someday_id: int) -> bool:
    if state is not TraversalState.ACTIVE:
        return False
    if item.has_label(someday_id):
        return False
    # Unmarked items count as actionable even with open children.
    marked = is_parallel(item.content) or is_sequential(item.content)
    return not node.children or all(c.checked for c in node.children) or not marked


def _label_item(
    node: Node,
    item: Item,
    state: TraversalState,
    next_action_id: int,
    someday_id: int,
) -> LabelMutation | None:
    if item.checked:
        if item.has_label(next_action_id) or item.has_label(someday_id):
            kept = tuple(lb for lb in item.labels if lb not in (next_action_id, someday_id))
            return LabelMutation(item.id, kept)
        return None

    if _is_actionable(node, item, state, someday_id):
        if not item.has_label(next_action_id):
            return LabelMutation(item.id, (next_action_id, *item.labels))
        return None

    if item.has_label(next_action_id):
        return LabelMutation(item.id, tuple(lb for lb in item.labels if lb != next_action_id))
    return None


def visit(
    node: Node,
    state: TraversalState,
    next_action_id: int,
    someday_id: int,
    out: list[LabelMutation],
) -> None:
    """Label node and its subtree, appending mutations to out."""
    if isinstance(node.entity, Item):
        mutation = _label_item(node, node.entity, state, next_action_id, someday_id)
        if mutation is not None:
            logger.debug(f"{node.name!r} ({node.id}): labels -> {list(mutation.labels)}")
            out.append(mutation)

    name = node.name
    if is_parallel(name):
        substate = state.substate()
        for child in node.children:
            visit(child, substate, next_action_id, someday_id, out)
    elif is_sequential(name):
        substate = state.substate()
        for child in node.children:
            visit(child, substate, next_action_id, someday_id, out)
            if child.is_project or not child.checked:
                substate = TraversalState.SUPPRESSED
    else:
        for child in node.children:
            visit(child, TraversalState.UNCONSTRAINED, next_action_id, someday_id, out)


def traverse(tree: TaskTree, next_action_id: int, someday_id: int) -> list[LabelMutation]:
    """
    Walk the tree and return label mutations in visiting order.

    Each item is visited once, so there is at most one mutation per item.
    Running again after the mutations are applied yields nothing.
    """
    mutations: list[LabelMutation] = []
    for root in tree.roots:
        visit(root, TraversalState.UNCONSTRAINED, next_action_id, someday_id, mutations)
    return mutations


def apply_mutations(items: list[Item], mutations: list[LabelMutation]) -> list[Item]:
    """Return copies of items with mutations applied, later ones winning."""
    new_labels = {m.item_id: list(m.labels) for m in mutations}
    return [
        replace(item, labels=new_labels[item.id]) if item.id in new_labels else item
        for item in items
    ]
