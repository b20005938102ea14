"""Abstract protocols (interfaces) for klaudkod components."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

from klaudkod.bus.handler_slot import Subscription

EventHandler = Callable[[dict[str, Any]], None]
StatusListener = Callable[[bool], None]


# ── Transport ──────────────────────────────────────────────────────────────


class Transport(ABC):
    """Connection to the backend that outlives physical disconnects."""

    @abstractmethod
    def connect(self, endpoint: str) -> None:
        ...

    @abstractmethod
    async def send(self, event: dict[str, Any]) -> bool:
        ...

    @abstractmethod
    def subscribe(self, handler: EventHandler) -> Subscription:
        ...

    @abstractmethod
    def watch_status(self, listener: StatusListener) -> Subscription:
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...
