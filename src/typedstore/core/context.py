"""Store context management using ContextVars.

A StoreContext bundles what collections share: settings, the database
registry, the default validator and the hook registry. Collections take one
explicitly or use the context bound to the current task, falling back to a
process default created on first use.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

from typedstore.core.config import Settings, get_settings
from typedstore.core.hooks import HookRegistry

if TYPE_CHECKING:
    from typedstore.domain.services.document_validator import Validator
    from typedstore.infrastructure.persistence.database import DatabaseRegistry


def _default_registry(settings: Settings) -> "DatabaseRegistry":
    from typedstore.infrastructure.persistence.database import DatabaseRegistry

    return DatabaseRegistry(settings)


@dataclass
class StoreContext:
    """Shared services for a group of collections.

    Attributes:
        settings: Settings read by collections at call time.
        registry: Database registry handing out store handles.
        validator: Default validator for collections without their own.
        hooks: Hook registry triggered by collection operations.
    """

    settings: Settings = field(default_factory=get_settings)
    registry: Optional["DatabaseRegistry"] = None
    validator: Optional["Validator"] = None
    hooks: HookRegistry = field(default_factory=HookRegistry)

    def __post_init__(self) -> None:
        if self.registry is None:
            self.registry = _default_registry(self.settings)


_current_context: ContextVar[Optional[StoreContext]] = ContextVar(
    "current_store_context", default=None
)
_default_context: Optional[StoreContext] = None


def get_current_context() -> StoreContext:
    """Get the bound store context, or the process default."""
    global _default_context
    context = _current_context.get()
    if context is not None:
        return context
    if _default_context is None:
        _default_context = StoreContext()
    return _default_context


def set_current_context(context: Optional[StoreContext]) -> None:
    """Bind a store context to the current task (None unbinds it)."""
    _current_context.set(context)


@contextmanager
def use_context(context: StoreContext) -> Iterator[StoreContext]:
    """Bind ``context`` for the duration of a ``with`` block.

    Example:
        with use_context(StoreContext(settings=Settings(log_operations=True))):
            users = DocumentCollection(":memory:", "Users")
    """
    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)
