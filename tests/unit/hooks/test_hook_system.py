"""Unit tests for the hook system infrastructure.

Tests cover:
- Hook registration and unregistration
- Priority ordering
- Collection scoping
- AbortHookException handling
- Error handling
"""

import pytest

from typedstore.core.hooks import (
    EVENT_CATEGORIES,
    HookCategory,
    HookEvent,
    HookRegistry,
    get_all_events,
    is_before_event,
)
from typedstore.domain.entities.hook_context import (
    AbortHookException,
    HookContext,
    HookResult,
)


class TestHookRegistry:
    """Tests for the HookRegistry class."""

    def test_register_returns_unique_id(self) -> None:
        """Test that register() returns a unique hook ID."""
        registry = HookRegistry()

        async def my_hook(event, data, context):
            return data

        hook_ids = [
            registry.register(HookEvent.ON_DOCUMENT_AFTER_UPSERT, my_hook)
            for _ in range(10)
        ]

        assert all(hook_id.startswith("hook_") for hook_id in hook_ids)
        assert len(set(hook_ids)) == 10

    def test_register_with_collection(self) -> None:
        """Test that hooks keep their collection scope."""
        registry = HookRegistry()

        hook_id = registry.register(
            event=HookEvent.ON_DOCUMENT_AFTER_UPSERT,
            callback=lambda event, data, context: None,
            collection="Users",
        )

        hook = registry.get_hook(hook_id)
        assert hook is not None
        assert hook.collection == "Users"

    def test_unregister(self) -> None:
        """Test that unregister removes the hook once."""
        registry = HookRegistry()
        hook_id = registry.register(HookEvent.ON_DOCUMENT_AFTER_REMOVE, lambda e, d, c: None)

        assert registry.unregister(hook_id) is True
        assert registry.unregister(hook_id) is False
        assert registry.hooks_for(HookEvent.ON_DOCUMENT_AFTER_REMOVE) == []

    def test_clear_returns_count(self) -> None:
        registry = HookRegistry()
        registry.register(HookEvent.ON_COLLECTION_BEFORE_INIT, lambda e, d, c: None)
        registry.register(HookEvent.ON_COLLECTION_AFTER_INIT, lambda e, d, c: None)

        assert registry.clear() == 2
        assert registry.clear() == 0

    @pytest.mark.asyncio
    async def test_trigger_without_hooks(self) -> None:
        """Test that triggering an event with no hooks passes data through."""
        registry = HookRegistry()

        result = await registry.trigger(HookEvent.ON_DOCUMENT_BEFORE_UPSERT, {"a": 1})

        assert isinstance(result, HookResult)
        assert result.success is True
        assert result.data == {"a": 1}

    @pytest.mark.asyncio
    async def test_priority_order(self) -> None:
        """Test that higher priority hooks run first, FIFO within a priority."""
        registry = HookRegistry()
        calls = []

        registry.register(HookEvent.ON_DOCUMENT_AFTER_UPSERT, lambda e, d, c: calls.append("low"))
        registry.register(
            HookEvent.ON_DOCUMENT_AFTER_UPSERT, lambda e, d, c: calls.append("high"), priority=10
        )
        registry.register(HookEvent.ON_DOCUMENT_AFTER_UPSERT, lambda e, d, c: calls.append("low2"))

        await registry.trigger(HookEvent.ON_DOCUMENT_AFTER_UPSERT, {})

        assert calls == ["high", "low", "low2"]

    @pytest.mark.asyncio
    async def test_before_hook_can_modify_data(self) -> None:
        registry = HookRegistry()

        async def add_owner(event, data, context):
            return {**data, "owner": "system"}

        registry.register(HookEvent.ON_DOCUMENT_BEFORE_UPSERT, add_owner)

        result = await registry.trigger(HookEvent.ON_DOCUMENT_BEFORE_UPSERT, {"name": "Ann"})

        assert result.data == {"name": "Ann", "owner": "system"}

    @pytest.mark.asyncio
    async def test_collection_scope(self) -> None:
        """Test that scoped hooks only fire for their collection."""
        registry = HookRegistry()
        calls = []

        registry.register(
            HookEvent.ON_DOCUMENT_AFTER_UPSERT,
            lambda e, d, c: calls.append(c.collection_type),
            collection="Users",
        )
        registry.register(
            HookEvent.ON_DOCUMENT_AFTER_UPSERT,
            lambda e, d, c: calls.append("any"),
        )

        for collection in ("Users", "Orders"):
            await registry.trigger(
                HookEvent.ON_DOCUMENT_AFTER_UPSERT,
                {},
                context=HookContext(collection_type=collection, database="app"),
            )

        assert calls == ["Users", "any", "any"]

    @pytest.mark.asyncio
    async def test_abort_stops_chain(self) -> None:
        registry = HookRegistry()
        calls = []

        def abort(event, data, context):
            raise AbortHookException("name is required")

        registry.register(HookEvent.ON_DOCUMENT_BEFORE_UPSERT, abort, priority=1)
        registry.register(HookEvent.ON_DOCUMENT_BEFORE_UPSERT, lambda e, d, c: calls.append(1))

        result = await registry.trigger(HookEvent.ON_DOCUMENT_BEFORE_UPSERT, {})

        assert result.aborted is True
        assert result.success is False
        assert result.abort_message == "name is required"
        assert calls == []

    @pytest.mark.asyncio
    async def test_errors_are_collected(self) -> None:
        """Test that a failing hook does not stop the chain by default."""
        registry = HookRegistry()
        calls = []

        def broken(event, data, context):
            raise RuntimeError("boom")

        registry.register(HookEvent.ON_DOCUMENT_AFTER_UPSERT, broken, priority=1)
        registry.register(HookEvent.ON_DOCUMENT_AFTER_UPSERT, lambda e, d, c: calls.append(1))

        result = await registry.trigger(HookEvent.ON_DOCUMENT_AFTER_UPSERT, {})

        assert result.success is True
        assert len(result.errors) == 1
        assert "boom" in result.errors[0]
        assert calls == [1]

    @pytest.mark.asyncio
    async def test_stop_on_error(self) -> None:
        registry = HookRegistry()
        calls = []

        def broken(event, data, context):
            raise RuntimeError("boom")

        registry.register(HookEvent.ON_DOCUMENT_AFTER_UPSERT, broken, priority=1, stop_on_error=True)
        registry.register(HookEvent.ON_DOCUMENT_AFTER_UPSERT, lambda e, d, c: calls.append(1))

        result = await registry.trigger(HookEvent.ON_DOCUMENT_AFTER_UPSERT, {})

        assert result.success is False
        assert calls == []


class TestHookEvents:
    """Tests for event helpers."""

    def test_all_events_are_categorized(self) -> None:
        events = get_all_events()

        assert set(events) == set(EVENT_CATEGORIES)
        assert EVENT_CATEGORIES[HookEvent.ON_COLLECTION_AFTER_INIT] == HookCategory.COLLECTION_LIFECYCLE

    def test_is_before_event(self) -> None:
        assert is_before_event(HookEvent.ON_DOCUMENT_BEFORE_UPSERT) is True
        assert is_before_event(HookEvent.ON_DOCUMENT_AFTER_UPSERT) is False


class TestHookContext:
    def test_operation_id_generated(self) -> None:
        context = HookContext(collection_type="Users", database="app")

        assert context.operation_id.startswith("op_")
