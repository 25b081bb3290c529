"""Hook system core module.

Hooks let applications observe or adjust collection behaviour by event,
optionally filtered by collection type.

Example usage:
    from typedstore.core.hooks import HookEvent

    async def audit(event, data, context):
        logger.info("document saved", collection=context.collection_type)

    ctx.hooks.register(
        HookEvent.ON_DOCUMENT_AFTER_UPSERT,
        audit,
        collection="Users",
    )
"""

from typedstore.core.hooks.hook_events import (
    EVENT_CATEGORIES,
    HookCategory,
    HookEvent,
    get_all_events,
    is_before_event,
)
from typedstore.core.hooks.hook_registry import HookRegistry, RegisteredHook

__all__ = [
    "HookRegistry",
    "RegisteredHook",
    "HookCategory",
    "HookEvent",
    "EVENT_CATEGORIES",
    "get_all_events",
    "is_before_event",
]
