"""Sync cycle shared by the CLI commands.

A cycle syncs records, rebuilds the task tree, computes label mutations
and pushes them back to the task service.
"""

import logging
import time
from typing import Callable

import requests

from .config import Config, load_config
from .core.store import RecordStore
from .core.traversal import LabelMutation, traverse
from .core.tree import TaskTree, build_tree
from .ports.task_service import TaskService

logger = logging.getLogger(__name__)


class NextActionRunner:
    """Keeps the record store and resolved label ids between cycles."""

    def __init__(self, service: TaskService, config: Config | None = None):
        self.service = service
        self.config = config or load_config()
        self.store = RecordStore()
        self.nextaction_id: int | None = None
        self.someday_id: int | None = None

    def _resolve_label(self, name: str) -> int:
        """Find a label id by name, creating the label if it is missing."""
        label = self.store.find_label(name)
        if label is None:
            label = self.service.add_label(name)
            self.store.add_label(label)
        return label.id

    def sync(self) -> None:
        """Merge the latest changes and resolve both label ids."""
        result = self.service.sync()
        self.store.merge(result)
        self.nextaction_id = self._resolve_label(self.config.nextaction_name)
        self.someday_id = self._resolve_label(self.config.someday_name)

    def build_tree(self) -> TaskTree:
        return build_tree(self.store.projects(), self.store.items())

    def run_cycle(self, dry_run: bool = False) -> list[LabelMutation]:
        """Run one full cycle. Nothing is pushed if the tree cannot be built."""
        logger.info("Starting sync cycle")
        self.sync()
        tree = self.build_tree()
        mutations = traverse(tree, self.nextaction_id, self.someday_id)
        if dry_run:
            logger.info(f"Dry run: {len(mutations)} label mutation(s) not applied")
        elif mutations:
            self.service.update_item_labels(mutations)
            logger.info(f"Applied {len(mutations)} label mutation(s)")
        else:
            logger.info("Labels already up to date")
        return mutations

    def run_forever(
        self,
        interval: int,
        max_cycles: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Run cycles every `interval` seconds.

        Network errors are logged and the loop goes on; anything else
        is logged and re-raised.
        """
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            cycles += 1
            try:
                self.run_cycle()
            except requests.RequestException as e:
                logger.warning(f"Network issue '{e}', continuing the loop")
            except Exception as e:
                logger.error(f"Unexpected error: '{e}', exiting...")
                raise
            logger.info(f"Cycle finished, sleeping for {interval} sec")
            if max_cycles is None or cycles < max_cycles:
                sleep(interval)
