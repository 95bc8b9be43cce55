"""Runtime primitives (timers, storage, location, network) behind one explicit object.

Components that need any of these receive an ``AbstractRuntimeEnvironment`` instance
at construction time. Production code uses ``DefaultRuntimeEnvironment``; tests pass a
``NullRuntimeEnvironment`` where every primitive is absent.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, MutableMapping, override

import httpx

from oidcmetadatalib.utilities.logger.log_levels import SRC_LOG_LEVELS

logger = logging.getLogger(__name__)
logger.setLevel(SRC_LOG_LEVELS["INITIALIZATION"])


class AbstractRuntimeEnvironment(ABC):
    @abstractmethod
    def set_timeout(
        self, callback: Callable[[], None], delay_seconds: float
    ) -> asyncio.TimerHandle | None:
        """Schedule ``callback`` after ``delay_seconds``; returns a handle for clear_timeout."""

    @abstractmethod
    def clear_timeout(self, handle: asyncio.TimerHandle | None) -> None: ...

    @property
    @abstractmethod
    def local_storage(self) -> MutableMapping[str, str] | None: ...

    @property
    @abstractmethod
    def session_storage(self) -> MutableMapping[str, str] | None: ...

    @property
    @abstractmethod
    def location(self) -> str | None: ...

    @abstractmethod
    def create_http_client(self) -> httpx.AsyncClient | None:
        """Return a new HTTP client; the caller owns it and must close it."""


class DefaultRuntimeEnvironment(AbstractRuntimeEnvironment):
    """
    Real primitives: asyncio timers on the running loop, in-process storage mappings,
    the configured application location and ``httpx.AsyncClient`` for network access.

    ``local_storage`` lives as long as this object; ``session_storage`` is emptied by
    ``end_session()``.
    """

    def __init__(
        self, *, location: str | None = None, http_timeout_seconds: float = 10.0
    ) -> None:
        self._location: str | None = location
        self._http_timeout_seconds: float = http_timeout_seconds
        self._local_storage: dict[str, str] = {}
        self._session_storage: dict[str, str] = {}

    @override
    def set_timeout(
        self, callback: Callable[[], None], delay_seconds: float
    ) -> asyncio.TimerHandle | None:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay_seconds, callback)

    @override
    def clear_timeout(self, handle: asyncio.TimerHandle | None) -> None:
        if handle is not None:
            handle.cancel()

    @property
    @override
    def local_storage(self) -> MutableMapping[str, str] | None:
        return self._local_storage

    @property
    @override
    def session_storage(self) -> MutableMapping[str, str] | None:
        return self._session_storage

    @property
    @override
    def location(self) -> str | None:
        return self._location

    @override
    def create_http_client(self) -> httpx.AsyncClient | None:
        return httpx.AsyncClient(timeout=self._http_timeout_seconds)

    def end_session(self) -> None:
        logger.debug(
            f"Clearing session storage ({len(self._session_storage)} entries)"
        )
        self._session_storage.clear()


class NullRuntimeEnvironment(AbstractRuntimeEnvironment):
    """Test double: no timers fire, no storage, no location and no network."""

    @override
    def set_timeout(
        self, callback: Callable[[], None], delay_seconds: float
    ) -> asyncio.TimerHandle | None:
        return None

    @override
    def clear_timeout(self, handle: asyncio.TimerHandle | None) -> None:
        return None

    @property
    @override
    def local_storage(self) -> MutableMapping[str, str] | None:
        return None

    @property
    @override
    def session_storage(self) -> MutableMapping[str, str] | None:
        return None

    @property
    @override
    def location(self) -> str | None:
        return None

    @override
    def create_http_client(self) -> httpx.AsyncClient | None:
        return None
