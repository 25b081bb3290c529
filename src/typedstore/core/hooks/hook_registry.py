"""Hook registry for collection events.

Hooks are callbacks ``(event, data, context)`` attached to an event and
optionally scoped to one collection type. Before-hooks may return a new
document to continue with, or raise AbortHookException to cancel the write.
"""

import inspect
import itertools
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional

from typedstore.core.logging import get_logger
from typedstore.domain.entities.hook_context import (
    AbortHookException,
    HookContext,
    HookResult,
)

logger = get_logger(__name__)

HookCallback = Callable[[str, Optional[dict[str, Any]], Optional[HookContext]], Any]


@dataclass
class RegisteredHook:
    """A hook attached to one event.

    Attributes:
        id: Registration handle returned by ``register``.
        event: Event name.
        callback: Sync or async callable.
        collection: Collection type this hook is limited to, or None for all.
        priority: Higher runs first; equal priorities run in registration order.
        stop_on_error: Abort the remaining hooks if this one fails.
        sequence: Registration order.
    """

    id: str
    event: str
    callback: HookCallback
    collection: Optional[str] = None
    priority: int = 0
    stop_on_error: bool = False
    sequence: int = 0

    def applies_to(self, collection_type: Optional[str]) -> bool:
        return self.collection is None or self.collection == collection_type


class HookRegistry:
    """Registers hooks and runs them when collections trigger events.

    Example:
        hooks = HookRegistry()

        async def stamp_owner(event, data, context):
            return {**data, "owner": "system"}

        hooks.register(HookEvent.ON_DOCUMENT_BEFORE_UPSERT, stamp_owner, collection="Users")
    """

    def __init__(self) -> None:
        self._by_id: dict[str, RegisteredHook] = {}
        self._sequence = itertools.count(1)

    def register(
        self,
        event: str,
        callback: HookCallback,
        *,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> str:
        """Attach ``callback`` to ``event``.

        Args:
            event: Event name from HookEvent.
            callback: Callable receiving (event, data, context).
            collection: Only run for this collection type.
            priority: Higher priority hooks run first.
            stop_on_error: Stop the chain when this hook raises.

        Returns:
            Hook id for ``unregister``.
        """
        hook = RegisteredHook(
            id=f"hook_{uuid.uuid4().hex[:12]}",
            event=event,
            callback=callback,
            collection=collection,
            priority=priority,
            stop_on_error=stop_on_error,
            sequence=next(self._sequence),
        )
        self._by_id[hook.id] = hook

        logger.debug(
            "Hook registered",
            hook_id=hook.id,
            hook_event=event,
            collection=collection,
            priority=priority,
        )
        return hook.id

    def unregister(self, hook_id: str) -> bool:
        """Detach a hook. Returns False if the id is unknown."""
        hook = self._by_id.pop(hook_id, None)
        if hook is None:
            logger.warning("Hook not found for unregister", hook_id=hook_id)
            return False
        logger.debug("Hook unregistered", hook_id=hook_id, hook_event=hook.event)
        return True

    def hooks_for(self, event: str, collection_type: Optional[str] = None) -> list[RegisteredHook]:
        """Hooks that would run for ``event``, in execution order.

        With no ``collection_type`` every hook for the event is returned.
        """
        hooks = [
            h
            for h in self._by_id.values()
            if h.event == event and (collection_type is None or h.applies_to(collection_type))
        ]
        return sorted(hooks, key=lambda h: (-h.priority, h.sequence))

    def get_hook(self, hook_id: str) -> Optional[RegisteredHook]:
        return self._by_id.get(hook_id)

    async def trigger(
        self,
        event: str,
        data: Optional[dict[str, Any]] = None,
        context: Optional[HookContext] = None,
    ) -> HookResult:
        """Run the hooks for ``event`` scoped to ``context.collection_type``.

        A hook returning a dict replaces the data passed to later hooks and
        reported in the result. Failures are logged and collected; only
        AbortHookException or a ``stop_on_error`` hook ends the chain.
        """
        result = HookResult(data=data)
        hooks = self.hooks_for(event, context.collection_type if context else None)
        if not hooks:
            return result

        logger.debug("Triggering hooks", hook_event=event, hook_count=len(hooks))

        for hook in hooks:
            try:
                returned = hook.callback(event, result.data, context)
                if inspect.isawaitable(returned):
                    returned = await returned
            except AbortHookException as e:
                logger.info("Hook aborted operation", hook_id=hook.id, hook_event=event, message=e.message)
                result.success = False
                result.aborted = True
                result.abort_message = e.message
                return result
            except Exception as e:
                logger.error("Hook execution failed", hook_id=hook.id, hook_event=event, error=str(e))
                result.errors.append(f"Hook {hook.id} failed: {e}")
                if hook.stop_on_error:
                    result.success = False
                    return result
                continue

            if isinstance(returned, dict):
                result.data = returned

        return result

    def clear(self) -> int:
        """Remove every hook and return how many were registered."""
        count = len(self._by_id)
        self._by_id.clear()
        return count
