"""Adapters - I/O implementations of ports."""

from .todoist_api import AuthenticationError, CommandError, TodoistAdapter

__all__ = [
    "TodoistAdapter",
    "AuthenticationError",
    "CommandError",
]
