"""User-facing strings."""

MESSAGES = {
    "card.deleted": "Card “{title}” archived",
    "card.restored": "Card “{title}” restored",
    "card.delete_title": "Delete card",
    "card.delete_confirm": "Delete “{title}”? You can undo for a few seconds.",
    "card.add_prompt": "Card title:",
    "list.deleted": "List “{title}” removed",
    "list.restored": "List “{title}” restored",
    "list.delete_title": "Delete list",
    "list.delete_confirm": "Delete list “{title}” and all of its cards?",
    "list.add_prompt": "List title:",
    "undo.nothing": "Nothing to undo",
    "undo.action": "Undo",
    "sync.failed_title": "Sync failed",
    "sync.failed": "Your change could not be saved. It may be lost after a reload.",
    "batch.success_title": "Cards added",
    "batch.success": "Added {success} cards",
    "batch.partial_title": "Some cards were not added",
    "batch.partial": "Added {success}, failed {failed}",
    "success.title": "Done",
    "error.title": "Something went wrong",
    "info.title": "Notice",
    "warning.title": "Heads up",
}


def message(key: str, **values: object) -> str:
    return MESSAGES[key].format(**values)
