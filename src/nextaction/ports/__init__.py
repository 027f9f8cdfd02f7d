"""Ports - interfaces/protocols for external dependencies."""

from .task_service import TaskService

__all__ = [
    "TaskService",
]
