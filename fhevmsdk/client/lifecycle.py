"""
Client lifecycle management

ClientLifecycle owns at most one client construction attempt at a time,
memoizes the result and broadcasts state transitions to observers.

States::

    EMPTY --acquire--> CONSTRUCTING --ok--> READY
                                    \\-err--> ERRORED
    READY / ERRORED / CONSTRUCTING --reset--> EMPTY --> CONSTRUCTING

Only the coroutine running an attempt moves the state out of CONSTRUCTING.
A reset bumps the generation counter so that an attempt superseded by the
reset never writes its result.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

from fhevmsdk.common.logging_config import LoggedOperation
from fhevmsdk.client.factory import ClientFacade, ClientFactory, ClientOptions, get_factory

logger = logging.getLogger(__name__)


class LifecycleState(Enum):
    """Lifecycle states"""
    EMPTY = "empty"
    CONSTRUCTING = "constructing"
    READY = "ready"
    ERRORED = "errored"


@dataclass(frozen=True)
class LifecycleSnapshot:
    """State seen by an observer at notification time"""
    state: LifecycleState
    client: Optional[ClientFacade]
    error: Optional[BaseException]

    @property
    def is_ready(self) -> bool:
        return self.state is LifecycleState.READY and self.client is not None


Observer = Callable[[LifecycleSnapshot], Any]
ClientBuilder = Callable[[ClientOptions], Awaitable[ClientFacade]]


class ClientLifecycle:
    """Single-flight, memoizing holder of the client"""

    def __init__(
        self,
        factory: Optional[Any] = None,
        options: Optional[ClientOptions] = None
    ):
        """
        Args:
            factory: ClientFactory, or any coroutine function taking
                ClientOptions and returning a ClientFacade
            options: Default options for construction attempts
        """
        if factory is None:
            factory = get_factory()
        self._build: ClientBuilder = factory.create if isinstance(factory, ClientFactory) else factory
        self.options = options or ClientOptions()

        self._state = LifecycleState.EMPTY
        self._client: Optional[ClientFacade] = None
        self._error: Optional[BaseException] = None
        self._task: Optional[asyncio.Future] = None
        self._generation = 0
        self._observers: List[Observer] = []

    # ------------------------------------------------------------------
    # State inspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def client(self) -> Optional[ClientFacade]:
        return self._client

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def is_ready(self) -> bool:
        return self.snapshot().is_ready

    def snapshot(self) -> LifecycleSnapshot:
        return LifecycleSnapshot(state=self._state, client=self._client, error=self._error)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it"""
        if observer not in self._observers:
            self._observers.append(observer)
        return lambda: self.unsubscribe(observer)

    def unsubscribe(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self) -> None:
        snapshot = self.snapshot()
        # Iterate a copy; observers may (un)subscribe while being notified
        for observer in list(self._observers):
            if observer not in self._observers:
                continue
            try:
                observer(snapshot)
            except Exception:
                logger.exception("Lifecycle observer failed", extra={"state": snapshot.state.value})

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def acquire(self, options: Optional[ClientOptions] = None) -> ClientFacade:
        """Return the client, constructing it if needed

        Concurrent callers while a construction is in flight all wait on that
        same attempt. After a failure the retained error is raised again
        until reset() is called.
        """
        if self._state is LifecycleState.READY and self._client is not None:
            return self._client
        if self._state is LifecycleState.ERRORED and self._error is not None:
            # Drop frames from earlier re-raises
            raise self._error.with_traceback(None)
        if self._task is None:
            self._start(options)
        # Shielded: one caller giving up must not cancel the shared attempt
        return await asyncio.shield(self._task)

    def reset(self, options: Optional[ClientOptions] = None) -> asyncio.Future:
        """Discard all state and immediately start a fresh attempt

        Must be called with a running event loop. The returned future
        resolves with the new client; awaiting it is optional.
        """
        self._generation += 1
        self._state = LifecycleState.EMPTY
        self._client = None
        self._error = None
        self._task = None
        logger.info("Client lifecycle reset", extra={"generation": self._generation})
        self._notify()
        return self._start(options)

    def _start(self, options: Optional[ClientOptions]) -> asyncio.Future:
        self._state = LifecycleState.CONSTRUCTING
        generation = self._generation
        task = asyncio.ensure_future(self._construct(options or self.options, generation))
        # The outcome is kept in state; mark it retrieved for unawaited resets
        task.add_done_callback(lambda t: t.cancelled() or t.exception())
        self._task = task
        self._notify()
        return task

    async def _construct(self, options: ClientOptions, generation: int) -> ClientFacade:
        try:
            with LoggedOperation(logger, "client_construction", generation=generation):
                client = await self._build(options)
        except BaseException as e:
            if generation == self._generation:
                self._state = LifecycleState.ERRORED
                self._error = e
                self._task = None
                self._notify()
            raise

        if generation == self._generation:
            self._state = LifecycleState.READY
            self._client = client
            self._task = None
            self._notify()
        return client


_lifecycle: Optional[ClientLifecycle] = None


def get_lifecycle() -> ClientLifecycle:
    """Get or create the process-wide lifecycle, configured from settings"""
    global _lifecycle
    if _lifecycle is None:
        _lifecycle = ClientLifecycle(options=ClientOptions.from_settings())
    return _lifecycle


def set_lifecycle(lifecycle: Optional[ClientLifecycle]) -> None:
    """Install (or clear, with None) the process-wide lifecycle"""
    global _lifecycle
    _lifecycle = lifecycle
