"""Session controller — routes protocol events into conversation state."""

from __future__ import annotations

import logging
from typing import Any, Callable

from pydantic import ValidationError

from klaudkod.bus.handler_slot import HandlerSlot, Subscription
from klaudkod.errors import DuplicateToolCallError
from klaudkod.models import (
    INBOUND_EVENT_TYPES,
    ChunkEvent,
    DoneEvent,
    ErrorEvent,
    PromptEvent,
    SessionSnapshot,
    ToolCallEvent,
    ToolResultEvent,
    parse_event,
)
from klaudkod.protocols import Transport
from klaudkod.session.state import ConversationState

logger = logging.getLogger(__name__)

SnapshotObserver = Callable[[SessionSnapshot], None]


class SessionController:
    """Only writer of ConversationState and only reader of transport events.

    The rendering layer observes snapshots through on_change(); one is
    published after every processed event, connectivity change and submit.
    """

    def __init__(self, transport: Transport, state: ConversationState | None = None):
        self._transport = transport
        self._state = state or ConversationState()
        self._observer: HandlerSlot[SessionSnapshot] = HandlerSlot("session.observer")
        self._subscriptions: list[Subscription] = []

    @property
    def state(self) -> ConversationState:
        return self._state

    def start(self, endpoint: str) -> None:
        self.attach()
        self._transport.connect(endpoint)

    def attach(self) -> None:
        """Subscribe to transport events without opening a connection."""
        self.detach()
        self._subscriptions = [
            self._transport.subscribe(self.handle_event),
            self._transport.watch_status(self._on_status),
        ]

    def detach(self) -> None:
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions = []

    async def close(self) -> None:
        self.detach()
        await self._transport.close()

    def on_change(self, observer: SnapshotObserver) -> Subscription:
        return self._observer.subscribe(observer)

    def snapshot(self) -> SessionSnapshot:
        return self._state.snapshot(connected=self._transport.is_connected())

    # ── Outbound ────────────────────────────────────────────────────────

    async def submit(self, text: str) -> bool:
        """Record a user prompt and send it. Blank input is ignored."""
        text = text.strip()
        if not text:
            return False

        self._state.append_user_message(text)
        self._notify()
        sent = await self._transport.send(PromptEvent(content=text).model_dump())
        if not sent:
            logger.warning("Prompt not delivered, backend is not connected")
        return True

    def reset(self) -> None:
        """Start a new conversation."""
        self._state.reset()
        self._notify()

    # ── Inbound ─────────────────────────────────────────────────────────

    def handle_event(self, envelope: dict[str, Any]) -> None:
        event_type = envelope.get("type")
        if not isinstance(event_type, str) or event_type not in INBOUND_EVENT_TYPES:
            logger.debug("Ignoring unknown event type %r", event_type)
            return

        try:
            event = parse_event(envelope)
        except ValidationError as exc:
            logger.warning("Ignoring malformed %s event: %s", event_type, exc.errors()[:1])
            return

        if isinstance(event, ChunkEvent):
            if event.is_first:
                self._state.begin_assistant_message()
            self._state.append_to_last(event.content)
        elif isinstance(event, ToolCallEvent):
            tc = event.tool_call
            try:
                self._state.begin_tool_call(tc.id, tc.name, tc.arguments)
            except DuplicateToolCallError:
                logger.warning("Backend reused active tool call id %s, ignoring", tc.id)
                return
        elif isinstance(event, ToolResultEvent):
            if not self._state.record_tool_result(event.tool_result):
                return
        elif isinstance(event, DoneEvent):
            self._state.clear_active_tool_calls()
        elif isinstance(event, ErrorEvent):
            logger.info("Backend reported error: %s", event.message)
            self._state.append_system_message(f"Error: {event.message}")

        self._notify()

    def _on_status(self, connected: bool) -> None:
        logger.debug("Connectivity changed: %s", "connected" if connected else "disconnected")
        self._notify()

    def _notify(self) -> None:
        if self._observer.has_handler():
            self._observer.dispatch(self.snapshot())
