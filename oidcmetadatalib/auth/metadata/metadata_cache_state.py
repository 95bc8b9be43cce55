import asyncio
from enum import Enum
from typing import Any, Callable, Coroutine, Dict


class MetadataCacheStatus(Enum):
    EMPTY = "empty"
    IN_FLIGHT = "in_flight"
    SETTLED = "settled"


class MetadataCacheState:
    """Single-slot cache of the discovery document fetch.

    The slot holds one shared ``asyncio.Task``:
    - EMPTY: no fetch started yet.
    - IN_FLIGHT: the task is running; every caller awaits the same task.
    - SETTLED: the task finished; its outcome (document or exception) is replayed to
      every later caller.

    Only ``get_or_start`` moves EMPTY -> IN_FLIGHT. It contains no ``await``, so on a
    single event loop exactly one caller can perform that transition.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task[Dict[str, Any]] | None = None

    @property
    def status(self) -> MetadataCacheStatus:
        if self._task is None:
            return MetadataCacheStatus.EMPTY
        if not self._task.done():
            return MetadataCacheStatus.IN_FLIGHT
        return MetadataCacheStatus.SETTLED

    @property
    def failed(self) -> bool:
        """True when the settled fetch ended with an exception."""
        if self._task is None or not self._task.done():
            return False
        return self._task.cancelled() or self._task.exception() is not None

    def get_or_start(
        self,
        fetch: Callable[[], Coroutine[Any, Any, Dict[str, Any]]],
    ) -> asyncio.Task[Dict[str, Any]]:
        if self._task is None:
            self._task = asyncio.create_task(fetch())
        return self._task

    async def wait_async(self) -> Dict[str, Any]:
        if self._task is None:
            raise RuntimeError("No metadata fetch has been started")
        # shield: a cancelled waiter must not cancel the fetch shared with other callers
        return await asyncio.shield(self._task)

    def reset(self) -> None:
        self._task = None
