"""Backend transport."""

from klaudkod.transport.websocket import (
    DEFAULT_RECONNECT_DELAY,
    ConnectionState,
    ReconnectingTransport,
)

__all__ = ["DEFAULT_RECONNECT_DELAY", "ConnectionState", "ReconnectingTransport"]
