"""Hook event definitions and categories.

Adding new events is allowed, but removing or renaming events is a
breaking change for registered callbacks.
"""


class HookCategory:
    """Categories for organizing hooks."""

    COLLECTION_LIFECYCLE = "collection_lifecycle"
    DOCUMENT_OPERATIONS = "document_operations"


class HookEvent:
    """Hook event names.

    - before_* events can modify data or abort the operation
    - after_* events are called after successful completion
    """

    # Collection Lifecycle Events
    ON_COLLECTION_BEFORE_INIT = "on_collection_before_init"
    ON_COLLECTION_AFTER_INIT = "on_collection_after_init"

    # Document Operations
    ON_DOCUMENT_BEFORE_UPSERT = "on_document_before_upsert"
    ON_DOCUMENT_AFTER_UPSERT = "on_document_after_upsert"
    ON_DOCUMENT_AFTER_REMOVE = "on_document_after_remove"


EVENT_CATEGORIES: dict[str, str] = {
    HookEvent.ON_COLLECTION_BEFORE_INIT: HookCategory.COLLECTION_LIFECYCLE,
    HookEvent.ON_COLLECTION_AFTER_INIT: HookCategory.COLLECTION_LIFECYCLE,
    HookEvent.ON_DOCUMENT_BEFORE_UPSERT: HookCategory.DOCUMENT_OPERATIONS,
    HookEvent.ON_DOCUMENT_AFTER_UPSERT: HookCategory.DOCUMENT_OPERATIONS,
    HookEvent.ON_DOCUMENT_AFTER_REMOVE: HookCategory.DOCUMENT_OPERATIONS,
}


def get_all_events() -> list[str]:
    """Get all available hook event names."""
    return [
        value
        for name, value in vars(HookEvent).items()
        if not name.startswith("_") and isinstance(value, str)
    ]


def is_before_event(event: str) -> bool:
    """Check if an event is a 'before' event (can modify data/abort)."""
    return "before" in event.lower()
