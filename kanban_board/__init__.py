"""Kanban board with realtime sync and undoable deletes."""

__version__ = "0.3.0"
