"""Reconnecting WebSocket transport to the assistant backend."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable

import websockets
from websockets.exceptions import ConnectionClosed

from klaudkod.bus.handler_slot import HandlerSlot, Subscription
from klaudkod.errors import TransportStateError
from klaudkod.protocols import EventHandler, StatusListener, Transport
from klaudkod.transport.codec import decode_frame, encode_frame

logger = logging.getLogger(__name__)

DEFAULT_RECONNECT_DELAY = 2.0  # seconds
DEFAULT_OPEN_TIMEOUT = 10.0

Connector = Callable[..., Awaitable[Any]]


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class ReconnectingTransport(Transport):
    """One logical connection slot that survives physical disconnects.

    State machine: DISCONNECTED -> CONNECTING -> CONNECTED, and on any loss
    back to DISCONNECTED with exactly one reconnect scheduled after
    ``reconnect_delay``. CLOSED is terminal.

    All callbacks run on the asyncio loop that called connect(). Inbound
    envelopes are dispatched synchronously from the read loop, so each one
    is fully handled before the next frame is read.
    """

    def __init__(
        self,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        open_timeout: float = DEFAULT_OPEN_TIMEOUT,
        connector: Connector | None = None,
    ):
        self._reconnect_delay = reconnect_delay
        self._open_timeout = open_timeout
        self._connector: Connector = connector or websockets.connect
        self._url = ""
        self._state = ConnectionState.DISCONNECTED
        self._ws: Any = None
        self._task: asyncio.Task[None] | None = None
        self._reconnect_handle: asyncio.TimerHandle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._events: HandlerSlot[dict[str, Any]] = HandlerSlot("transport.events")
        self._status: HandlerSlot[bool] = HandlerSlot("transport.status")
        self._attempts = 0

    # ── Public API ──────────────────────────────────────────────────────

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def url(self) -> str:
        return self._url

    @property
    def attempts(self) -> int:
        """Number of connection attempts started so far."""
        return self._attempts

    def connect(self, endpoint: str) -> None:
        if self._state is ConnectionState.CLOSED:
            raise TransportStateError("transport is closed")
        if self._loop is not None:
            raise TransportStateError("transport already started")

        self._loop = asyncio.get_running_loop()
        self._url = endpoint
        logger.info("Connecting to %s", endpoint)
        self._open()

    async def send(self, event: dict[str, Any]) -> bool:
        ws = self._ws
        if self._state is not ConnectionState.CONNECTED or ws is None:
            logger.debug("Not connected, dropping %s event", event.get("type"))
            return False

        try:
            await ws.send(encode_frame(event))
        except ConnectionClosed:
            logger.warning("Connection closed while sending %s event", event.get("type"))
            return False
        except Exception:
            logger.exception("Failed to send %s event", event.get("type"))
            return False
        return True

    def subscribe(self, handler: EventHandler) -> Subscription:
        return self._events.subscribe(handler)

    def watch_status(self, listener: StatusListener) -> Subscription:
        return self._status.subscribe(listener)

    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    async def close(self) -> None:
        if self._state is ConnectionState.CLOSED:
            return

        was_connected = self.is_connected()
        self._state = ConnectionState.CLOSED
        self._cancel_reconnect()

        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        ws, self._ws = self._ws, None
        if ws is not None:
            try:
                await ws.close()
            except Exception:
                logger.exception("Error closing backend connection")

        if was_connected:
            self._status.dispatch(False)
        logger.info("Transport closed")

    # ── State machine ───────────────────────────────────────────────────

    def _open(self) -> None:
        self._reconnect_handle = None
        if self._state is ConnectionState.CLOSED:
            return
        if self._loop is None:
            raise TransportStateError("transport not started, call connect() first")
        self._set_state(ConnectionState.CONNECTING)
        self._attempts += 1
        self._task = self._loop.create_task(self._run())

    async def _run(self) -> None:
        try:
            ws = await self._connector(self._url, open_timeout=self._open_timeout)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Connection to %s failed: %s", self._url, exc)
            self._on_lost()
            return

        if self._state is ConnectionState.CLOSED:
            await ws.close()
            return

        self._ws = ws
        self._set_state(ConnectionState.CONNECTED)
        logger.info("Connected to %s", self._url)

        try:
            async for raw in ws:
                envelope = decode_frame(raw)
                if envelope is None:
                    continue
                self._events.dispatch(envelope)
        except asyncio.CancelledError:
            raise
        except ConnectionClosed as exc:
            logger.warning("Connection to %s lost: %s", self._url, exc)
        except Exception:
            logger.exception("Read error on %s", self._url)

        if self._ws is ws:
            self._ws = None
        self._on_lost()

    def _on_lost(self) -> None:
        if self._state is ConnectionState.CLOSED:
            return
        self._set_state(ConnectionState.DISCONNECTED)
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if self._state is ConnectionState.CLOSED or self._loop is None:
            return
        # Only one timer may be outstanding.
        self._cancel_reconnect()
        logger.info("Reconnecting in %.1fs", self._reconnect_delay)
        self._reconnect_handle = self._loop.call_later(self._reconnect_delay, self._open)

    def _cancel_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

    def _set_state(self, state: ConnectionState) -> None:
        if self._state is ConnectionState.CLOSED:
            return
        was_connected = self.is_connected()
        self._state = state
        if self.is_connected() != was_connected:
            self._status.dispatch(self.is_connected())
