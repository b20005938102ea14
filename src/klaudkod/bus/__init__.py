"""Single-consumer dispatch primitives."""

from klaudkod.bus.handler_slot import HandlerSlot, Subscription

__all__ = ["HandlerSlot", "Subscription"]
