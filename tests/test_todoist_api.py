"""Tests for the Todoist sync API adapter."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from nextaction.adapters.todoist_api import (
    API_URL,
    AuthenticationError,
    CommandError,
    TodoistAdapter,
)
from nextaction.config import Config
from nextaction.core.traversal import LabelMutation


def response(body: dict) -> MagicMock:
    resp = MagicMock()
    resp.json.return_value = body
    resp.raise_for_status.return_value = None
    return resp


def all_ok(*args, **kwargs):
    """Answer every command with ok."""
    commands = json.loads(kwargs["data"]["commands"])
    return response({"sync_status": {c["uuid"]: "ok" for c in commands}})


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def adapter(session):
    return TodoistAdapter(Config(token="secret"), session=session)


class TestSync:
    def test_posts_token_and_sync_token(self, adapter, session):
        session.post.return_value = response({"sync_token": "next", "full_sync": True})

        adapter.sync()

        url = session.post.call_args[0][0]
        data = session.post.call_args[1]["data"]
        assert url == API_URL
        assert data["token"] == "secret"
        assert data["sync_token"] == "*"
        assert json.loads(data["resource_types"]) == ["projects", "items", "labels"]

    def test_advances_sync_token(self, adapter, session):
        session.post.return_value = response({"sync_token": "next", "full_sync": False})

        adapter.sync()
        adapter.sync()

        assert session.post.call_args[1]["data"]["sync_token"] == "next"

    def test_reset_forces_full_sync(self, adapter, session):
        session.post.return_value = response({"sync_token": "next"})
        adapter.sync()
        adapter.reset()
        adapter.sync()
        assert session.post.call_args[1]["data"]["sync_token"] == "*"

    def test_parses_records(self, adapter, session):
        session.post.return_value = response(
            {
                "sync_token": "next",
                "full_sync": True,
                "projects": [{"id": 1, "name": "Home", "item_order": 1, "indent": 1}],
                "items": [{"id": 10, "project_id": 1, "content": "Shelf", "labels": [5]}],
                "labels": [{"id": 5, "name": "nextaction"}],
            }
        )

        result = adapter.sync()

        assert result.projects[0].name == "Home"
        assert result.items[0].labels == [5]
        assert result.labels[0].id == 5

    def test_http_error_propagates(self, adapter, session):
        resp = MagicMock()
        resp.raise_for_status.side_effect = requests.HTTPError("503")
        session.post.return_value = resp

        with pytest.raises(requests.HTTPError):
            adapter.sync()

    def test_missing_token(self, session):
        adapter = TodoistAdapter(Config(token=""), session=session)
        with pytest.raises(AuthenticationError):
            adapter.sync()
        session.post.assert_not_called()

    def test_custom_api_url(self, session):
        adapter = TodoistAdapter(Config(token="t", api_url="http://localhost/sync"), session=session)
        session.post.return_value = response({"sync_token": "x"})
        adapter.sync()
        assert session.post.call_args[0][0] == "http://localhost/sync"


class TestAddLabel:
    def test_resolves_temp_id(self, adapter, session):
        def reply(*args, **kwargs):
            command = json.loads(kwargs["data"]["commands"])[0]
            assert command["type"] == "label_add"
            assert command["args"] == {"name": "someday"}
            return response(
                {
                    "sync_status": {command["uuid"]: "ok"},
                    "temp_id_mapping": {command["temp_id"]: 77},
                }
            )

        session.post.side_effect = reply

        label = adapter.add_label("someday")

        assert label.id == 77
        assert label.name == "someday"

    def test_failed_command(self, adapter, session):
        def reply(*args, **kwargs):
            command = json.loads(kwargs["data"]["commands"])[0]
            return response({"sync_status": {command["uuid"]: {"error": "nope"}}})

        session.post.side_effect = reply

        with pytest.raises(CommandError) as exc:
            adapter.add_label("someday")
        assert list(exc.value.failures.values()) == [{"error": "nope"}]


class TestUpdateItemLabels:
    def test_sends_item_updates_in_order(self, adapter, session):
        session.post.side_effect = all_ok

        adapter.update_item_labels([LabelMutation(10, (1, 2)), LabelMutation(11, ())])

        commands = json.loads(session.post.call_args[1]["data"]["commands"])
        assert [c["type"] for c in commands] == ["item_update", "item_update"]
        assert [c["args"] for c in commands] == [
            {"id": 10, "labels": [1, 2]},
            {"id": 11, "labels": []},
        ]
        assert len({c["uuid"] for c in commands}) == 2

    def test_empty_sends_nothing(self, adapter, session):
        adapter.update_item_labels([])
        session.post.assert_not_called()

    def test_batches(self, session):
        adapter = TodoistAdapter(Config(token="t", batch_size=2), session=session)
        session.post.side_effect = all_ok

        adapter.update_item_labels([LabelMutation(i, (1,)) for i in range(5)])

        assert session.post.call_count == 3
        sent = [
            c["args"]["id"]
            for call in session.post.call_args_list
            for c in json.loads(call[1]["data"]["commands"])
        ]
        assert sent == [0, 1, 2, 3, 4]

    def test_batch_size_capped(self, session):
        adapter = TodoistAdapter(Config(token="t", batch_size=1000), session=session)
        assert adapter.batch_size == 100

    def test_partial_failure_raises(self, adapter, session):
        def reply(*args, **kwargs):
            commands = json.loads(kwargs["data"]["commands"])
            status = {c["uuid"]: "ok" for c in commands}
            status[commands[1]["uuid"]] = {"error_code": 22, "error": "Item not found"}
            return response({"sync_status": status})

        session.post.side_effect = reply

        with pytest.raises(CommandError) as exc:
            adapter.update_item_labels([LabelMutation(10, (1,)), LabelMutation(11, (1,))])
        assert len(exc.value.failures) == 1
