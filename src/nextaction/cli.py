"""nextaction CLI - label the next actions of a Todoist task tree."""

import json
import logging
import sys

import click

from .adapters.todoist_api import AuthenticationError, CommandError, TodoistAdapter
from .config import load_config
from .core.traversal import PARALLEL, SEQUENTIAL
from .core.tree import NextActionError
from .workflows import NextActionRunner

ERRORS = (AuthenticationError, CommandError, NextActionError)


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )


def _runner(token: str | None = None) -> NextActionRunner:
    config = load_config()
    if token:
        config.token = token
    return NextActionRunner(TodoistAdapter(config), config)


@click.group()
@click.version_option(package_name="nextaction")
def main():
    """nextaction - next-action labels for Todoist."""
    pass


@main.command()
@click.option("--interval", "-i", type=int, default=None, help="Seconds between cycles")
@click.option("--token", default=None, help="Todoist API token")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def run(interval: int | None, token: str | None, debug: bool):
    """Sync and relabel in a loop."""
    _setup_logging(debug)
    runner = _runner(token)
    interval = interval if interval is not None else runner.config.interval

    click.echo(f"Syncing every {interval}s. Press Ctrl+C to stop")
    try:
        runner.run_forever(interval)
    except ERRORS as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("Stopped.")


@main.command()
@click.option("--dry-run", is_flag=True, help="Compute mutations without applying them")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def once(dry_run: bool, as_json: bool, debug: bool):
    """Run a single sync cycle."""
    _setup_logging(debug)
    runner = _runner()
    try:
        mutations = runner.run_cycle(dry_run=dry_run)
    except ERRORS as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                [{"item_id": m.item_id, "labels": list(m.labels)} for m in mutations],
                indent=2,
            )
        )
        return

    if not mutations:
        click.echo("Labels already up to date.")
        return

    verb = "Would update" if dry_run else "Updated"
    for m in mutations:
        click.echo(f"{verb} item {m.item_id}: labels {list(m.labels)}")


def _marker(name: str) -> str:
    if name.endswith(SEQUENTIAL):
        return "seq"
    if name.endswith(PARALLEL):
        return "par"
    return ""


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def tree(as_json: bool):
    """Show the reconstructed task tree."""
    runner = _runner()
    try:
        runner.sync()
        task_tree = runner.build_tree()
    except ERRORS as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": node.id,
                        "name": node.name,
                        "depth": depth,
                        "project": node.is_project,
                        "checked": node.checked,
                    }
                    for depth, node in task_tree.walk()
                ],
                indent=2,
            )
        )
        return

    if not task_tree.roots:
        click.echo("No projects.")
        return

    for depth, node in task_tree.walk():
        indent = "  " * (depth - 1)
        if node.is_project:
            box = "#"
        else:
            box = "[x]" if node.checked else "[ ]"
        flags = []
        if node.is_item:
            if node.entity.has_label(runner.nextaction_id):
                flags.append("next")
            if node.entity.has_label(runner.someday_id):
                flags.append("someday")
        marker = _marker(node.name)
        if marker:
            flags.append(marker)
        suffix = f" ({', '.join(flags)})" if flags else ""
        click.echo(f"{indent}{box} {node.name}{suffix}")


if __name__ == "__main__":
    main()
