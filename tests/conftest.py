"""Shared fakes: an in-memory WebSocket, its connector, and a transport double."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from klaudkod.bus.handler_slot import HandlerSlot
from klaudkod.protocols import Transport

_CLOSE = object()


class FakeWebSocket:
    """Async-iterable socket fed from the test."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()

    def feed(self, raw: str | bytes) -> None:
        self._inbox.put_nowait(raw)

    def drop(self) -> None:
        """Simulate the remote end going away."""
        self._inbox.put_nowait(_CLOSE)

    async def send(self, data: str) -> None:
        if self.closed:
            raise RuntimeError("socket closed")
        self.sent.append(data)

    async def close(self) -> None:
        self.closed = True
        self._inbox.put_nowait(_CLOSE)

    def __aiter__(self) -> FakeWebSocket:
        return self

    async def __anext__(self) -> Any:
        item = await self._inbox.get()
        if item is _CLOSE:
            self.closed = True
            raise StopAsyncIteration
        return item


class FakeConnector:
    """Stands in for websockets.connect."""

    def __init__(self) -> None:
        self.sockets: list[FakeWebSocket] = []
        self.urls: list[str] = []
        self.fail_next = 0
        self.block = False
        self.blocked = asyncio.Event()

    @property
    def attempts(self) -> int:
        return len(self.urls)

    @property
    def current(self) -> FakeWebSocket:
        return self.sockets[-1]

    async def __call__(self, url: str, **kwargs: Any) -> FakeWebSocket:
        self.urls.append(url)
        if self.block:
            self.blocked.set()
            await asyncio.Event().wait()
        if self.fail_next:
            self.fail_next -= 1
            raise OSError("connection refused")
        ws = FakeWebSocket()
        self.sockets.append(ws)
        return ws


class FakeTransport(Transport):
    """Records sends; events are injected with emit()."""

    def __init__(self, connected: bool = True) -> None:
        self.sent: list[dict[str, Any]] = []
        self.connected = connected
        self.endpoint = ""
        self.closed = False
        self._events: HandlerSlot[dict[str, Any]] = HandlerSlot("fake.events")
        self._status: HandlerSlot[bool] = HandlerSlot("fake.status")

    def connect(self, endpoint: str) -> None:
        self.endpoint = endpoint

    async def send(self, event: dict[str, Any]) -> bool:
        if not self.connected:
            return False
        self.sent.append(event)
        return True

    def subscribe(self, handler):
        return self._events.subscribe(handler)

    def watch_status(self, listener):
        return self._status.subscribe(listener)

    def is_connected(self) -> bool:
        return self.connected

    async def close(self) -> None:
        self.closed = True

    def emit(self, envelope: dict[str, Any]) -> None:
        self._events.dispatch(envelope)

    def set_connected(self, connected: bool) -> None:
        self.connected = connected
        self._status.dispatch(connected)


async def _wait_until(predicate, timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def wait_until():
    return _wait_until
