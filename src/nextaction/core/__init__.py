"""Functional core - pure business logic with no I/O."""

from .models import Item, Label, Project, SyncResult
from .store import RecordStore
from .tree import MissingParentError, NextActionError, Node, TaskTree, build_tree
from .traversal import (
    PARALLEL,
    SEQUENTIAL,
    LabelMutation,
    TraversalState,
    apply_mutations,
    traverse,
)

__all__ = [
    # Records
    "Project",
    "Item",
    "Label",
    "SyncResult",
    "RecordStore",
    # Tree
    "Node",
    "TaskTree",
    "build_tree",
    "NextActionError",
    "MissingParentError",
    # Traversal
    "PARALLEL",
    "SEQUENTIAL",
    "TraversalState",
    "LabelMutation",
    "traverse",
    "apply_mutations",
]
