"""Tests for the click CLI."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from nextaction.adapters.todoist_api import AuthenticationError
from nextaction.cli import main
from nextaction.config import Config
from nextaction.core.models import Item, Label, Project, SyncResult
from nextaction.workflows import NextActionRunner


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def service():
    service = MagicMock()
    service.sync.return_value = SyncResult(
        projects=[Project(id=1, name="Errands-", item_order=1, indent=1)],
        items=[
            Item(id=10, project_id=1, content="Milk", item_order=1),
            Item(id=11, project_id=1, content="Bread", item_order=2, checked=True),
        ],
        labels=[Label(id=5, name="nextaction"), Label(id=6, name="someday")],
    )
    return service


@pytest.fixture
def fake_runner(service):
    with patch("nextaction.cli._runner") as mock_runner:
        mock_runner.return_value = NextActionRunner(service, Config(token="t"))
        yield mock_runner


class TestOnce:
    def test_prints_mutations(self, cli_runner, fake_runner, service):
        result = cli_runner.invoke(main, ["once"])
        assert result.exit_code == 0
        assert "Updated item 10: labels [5]" in result.output
        service.update_item_labels.assert_called_once()

    def test_dry_run(self, cli_runner, fake_runner, service):
        result = cli_runner.invoke(main, ["once", "--dry-run"])
        assert result.exit_code == 0
        assert "Would update item 10" in result.output
        service.update_item_labels.assert_not_called()

    def test_json(self, cli_runner, fake_runner):
        result = cli_runner.invoke(main, ["once", "--dry-run", "--json"])
        assert result.exit_code == 0
        assert '"item_id": 10' in result.output

    def test_error_exits(self, cli_runner, fake_runner, service):
        service.sync.side_effect = AuthenticationError("No API token")
        result = cli_runner.invoke(main, ["once"])
        assert result.exit_code == 1
        assert "No API token" in result.output


class TestTree:
    def test_prints_tree(self, cli_runner, fake_runner):
        result = cli_runner.invoke(main, ["tree"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "# Errands- (par)"
        assert lines[1] == "  [ ] Milk"
        assert lines[2] == "  [x] Bread"

    def test_json(self, cli_runner, fake_runner):
        result = cli_runner.invoke(main, ["tree", "--json"])
        assert result.exit_code == 0
        assert '"depth": 2' in result.output


class TestRun:
    def test_runs_loop_with_interval(self, cli_runner):
        runner = MagicMock()
        runner.config = Config(interval=10)
        with patch("nextaction.cli._runner", return_value=runner):
            result = cli_runner.invoke(main, ["run", "--interval", "3"])
        assert result.exit_code == 0
        runner.run_forever.assert_called_once_with(3)

    def test_uses_config_interval(self, cli_runner):
        runner = MagicMock()
        runner.config = Config(interval=42)
        with patch("nextaction.cli._runner", return_value=runner):
            cli_runner.invoke(main, ["run"])
        runner.run_forever.assert_called_once_with(42)
