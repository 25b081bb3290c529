"""One-time asynchronous initialization of a collection.

A collection moves NEW -> INITIALIZING -> READY. The first caller to find
the collection NEW runs the initializer; callers arriving while it runs
poll for READY a bounded number of times and never initialize themselves.
If the initializer fails, the state returns to NEW so the next call can
retry, and the failure is raised to the caller that ran it.

Code running inside the initializer, and tasks it spawns, pass through
``ensure_ready`` without waiting, so init hooks can query and write.
"""

import asyncio
from contextvars import ContextVar
from typing import Awaitable, Callable

from typedstore.core.exceptions import UninitializedCollectionError
from typedstore.core.logging import get_logger
from typedstore.domain.entities.document import CollectionState

logger = get_logger(__name__)

DEFAULT_WAIT_ATTEMPTS = 3
DEFAULT_WAIT_DELAY = 2.0

# Lifecycles whose initializer is running in the current context
_initializing: ContextVar[frozenset] = ContextVar("typedstore_initializing", default=frozenset())


class CollectionLifecycle:
    """State machine guarding a collection's initialization.

    Attributes:
        name: Collection type, used in log entries and errors.
        state: Current CollectionState.
    """

    def __init__(
        self,
        name: str,
        initializer: Callable[[], Awaitable[None]],
        wait_attempts: int = DEFAULT_WAIT_ATTEMPTS,
        wait_delay: float = DEFAULT_WAIT_DELAY,
    ) -> None:
        self.name = name
        self._initializer = initializer
        self._wait_attempts = wait_attempts
        self._wait_delay = wait_delay
        self._state = CollectionState.NEW

    @property
    def state(self) -> CollectionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is CollectionState.READY

    async def ensure_ready(
        self,
        wait_attempts: int | None = None,
        wait_delay: float | None = None,
    ) -> None:
        """Make sure initialization has completed.

        Args:
            wait_attempts: Poll count while another caller initializes.
            wait_delay: Seconds between polls.

        Raises:
            UninitializedCollectionError: If another caller's initialization
                does not finish within the wait window, or fails.
        """
        if self._state is CollectionState.READY:
            return
        if self in _initializing.get():
            return

        if self._state is CollectionState.NEW:
            await self._run_init()
            return

        await self._wait_until_ready(
            wait_attempts if wait_attempts is not None else self._wait_attempts,
            wait_delay if wait_delay is not None else self._wait_delay,
        )

    async def _run_init(self) -> None:
        # Set before the first await so concurrent callers see INITIALIZING
        self._state = CollectionState.INITIALIZING
        logger.debug("Initializing collection", collection=self.name)

        token = _initializing.set(_initializing.get() | {self})
        try:
            await self._initializer()
        except Exception as e:
            self._state = CollectionState.NEW
            logger.error(
                "Collection initialization failed",
                collection=self.name,
                error=str(e),
            )
            raise
        finally:
            _initializing.reset(token)

        self._state = CollectionState.READY
        logger.debug("Collection ready", collection=self.name)

    async def _wait_until_ready(self, attempts: int, delay: float) -> None:
        for attempt in range(1, attempts + 1):
            logger.info(
                "Waiting for collection initialization",
                collection=self.name,
                attempt=attempt,
            )
            await asyncio.sleep(delay)

            if self._state is CollectionState.READY:
                return
            if self._state is CollectionState.NEW:
                # The initializing caller failed and reverted the state
                break

        raise UninitializedCollectionError(self.name)
