"""nextaction - keeps next-action labels in sync with a Todoist task tree."""

__version__ = "0.3.0"
