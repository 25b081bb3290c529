"""Values exchanged between collections and hook callbacks."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional


class AbortHookException(Exception):
    """Raise from a before-upsert hook to cancel the write.

    Example:
        def require_name(event, data, context):
            if not data.get("name"):
                raise AbortHookException("name is required")
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass
class HookContext:
    """Describes the collection that triggered an event.

    ``operation_id`` correlates the log entries of one trigger.
    """

    collection_type: str
    database: str
    operation_id: str = ""

    def __post_init__(self) -> None:
        self.operation_id = self.operation_id or f"op_{uuid.uuid4().hex[:12]}"


@dataclass
class HookResult:
    """Outcome of running the hooks for one event.

    ``data`` is the document after every hook that returned a replacement;
    ``errors`` holds one message per hook that raised.
    """

    success: bool = True
    aborted: bool = False
    abort_message: Optional[str] = None
    errors: list[str] = field(default_factory=list)
    data: Optional[dict[str, Any]] = None
