"""Handler slot — holds at most one active consumer."""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Handle returned by HandlerSlot.subscribe; cancel() detaches the handler."""

    def __init__(self, slot: HandlerSlot, token: int):
        self._slot = slot
        self._token = token

    @property
    def active(self) -> bool:
        return self._slot._token == self._token and self._slot._handler is not None

    def cancel(self) -> None:
        self._slot._release(self._token)


class HandlerSlot(Generic[T]):
    """Single-consumer channel.

    Subscribing replaces the previous handler; the replaced subscription
    becomes inert, so cancelling it later never detaches the newer one.
    Handler exceptions are logged and absorbed.
    """

    def __init__(self, name: str = "slot"):
        self._name = name
        self._handler: Callable[[T], None] | None = None
        self._token = 0

    def subscribe(self, handler: Callable[[T], None]) -> Subscription:
        if self._handler is not None:
            logger.debug("%s: replacing active handler", self._name)
        self._token += 1
        self._handler = handler
        return Subscription(self, self._token)

    def has_handler(self) -> bool:
        return self._handler is not None

    def dispatch(self, item: T) -> bool:
        """Deliver ``item`` to the active handler. Returns False if none."""
        handler = self._handler
        if handler is None:
            return False
        try:
            handler(item)
        except Exception:
            logger.exception("%s: handler failed", self._name)
        return True

    def clear(self) -> None:
        self._handler = None

    def _release(self, token: int) -> None:
        if token == self._token:
            self._handler = None
