"""Conversation session: state container and controller."""

from klaudkod.session.controller import SessionController
from klaudkod.session.state import ConversationState

__all__ = ["ConversationState", "SessionController"]
