"""Todoist sync API adapter - HTTP client for syncing and label updates."""

import json
import logging
import uuid

import requests

from nextaction.config import Config, load_config
from nextaction.core.models import Label, SyncResult
from nextaction.core.traversal import LabelMutation

logger = logging.getLogger(__name__)

API_URL = "https://todoist.com/API/v7/sync"
RESOURCE_TYPES = ["projects", "items", "labels"]
MAX_COMMANDS = 100


class AuthenticationError(Exception):
    """Raised when no API token is available."""

    pass


class CommandError(Exception):
    """Raised when the server rejects one or more commands of a batch."""

    def __init__(self, failures: dict[str, object]):
        self.failures = failures
        super().__init__(f"{len(failures)} command(s) failed: {failures}")


class TodoistAdapter:
    """
    Todoist sync API adapter.

    Implements TaskService protocol. Keeps the incremental sync token and
    batches commands. No business logic - just I/O.
    """

    def __init__(
        self,
        config: Config | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config or load_config()
        self.api_url = self.config.api_url or API_URL
        self.batch_size = max(1, min(self.config.batch_size, MAX_COMMANDS))
        self.sync_token = "*"
        self._session = session or requests.Session()

    def _post(self, data: dict) -> dict:
        """Make authenticated POST to the sync endpoint."""
        if not self.config.token:
            raise AuthenticationError(
                "No API token. Set NXTT_TOKEN or TOKEN in the config file."
            )
        resp = self._session.post(
            self.api_url,
            data={"token": self.config.token, **data},
        )
        resp.raise_for_status()
        return resp.json()

    def _run_commands(self, commands: list[dict]) -> dict:
        """Send one batch of commands and check every sync_status entry."""
        result = self._post({"commands": json.dumps(commands)})
        status = result.get("sync_status", {})
        failures = {
            cmd["uuid"]: status.get(cmd["uuid"], "missing")
            for cmd in commands
            if status.get(cmd["uuid"]) != "ok"
        }
        if failures:
            raise CommandError(failures)
        return result

    def sync(self) -> SyncResult:
        """Fetch changes since the last sync and advance the sync token."""
        data = self._post(
            {
                "sync_token": self.sync_token,
                "resource_types": json.dumps(RESOURCE_TYPES),
            }
        )
        result = SyncResult.from_api(data)
        self.sync_token = result.sync_token
        logger.debug(
            f"Synced {len(result.projects)} projects, {len(result.items)} items, "
            f"{len(result.labels)} labels (full_sync={result.full_sync})"
        )
        return result

    def reset(self) -> None:
        """Force the next sync to be a full sync."""
        self.sync_token = "*"

    def add_label(self, name: str) -> Label:
        """Create a label and resolve its id through temp_id_mapping."""
        temp_id = str(uuid.uuid4())
        command = {
            "type": "label_add",
            "temp_id": temp_id,
            "uuid": str(uuid.uuid4()),
            "args": {"name": name},
        }
        result = self._run_commands([command])
        label_id = result.get("temp_id_mapping", {}).get(temp_id)
        if label_id is None:
            raise CommandError({command["uuid"]: "no temp_id mapping"})
        logger.info(f"Created label {name!r} ({label_id})")
        return Label(id=label_id, name=name)

    def update_item_labels(self, mutations: list[LabelMutation]) -> None:
        """Send item_update commands in batches, keeping mutation order."""
        commands = [
            {
                "type": "item_update",
                "uuid": str(uuid.uuid4()),
                "args": {"id": m.item_id, "labels": list(m.labels)},
            }
            for m in mutations
        ]
        for start in range(0, len(commands), self.batch_size):
            batch = commands[start : start + self.batch_size]
            self._run_commands(batch)
            logger.debug(f"Flushed {len(batch)} item_update command(s)")
