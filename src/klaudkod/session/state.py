"""Conversation state — ordered messages plus in-flight tool calls."""

from __future__ import annotations

import logging

from klaudkod.errors import DuplicateToolCallError
from klaudkod.models import (
    Message,
    Role,
    SessionSnapshot,
    ToolCall,
    ToolCallStatus,
    ToolResult,
)

logger = logging.getLogger(__name__)


class ConversationState:
    """Single-writer container for one conversation.

    Only the last message is ever mutated, and only by append; appending a
    new message freezes everything before it. Active tool calls are keyed by
    id, and an id may appear at most once until clear_active_tool_calls().
    Accessors hand out copies so readers never observe a mutation in progress.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._active: dict[str, ToolCall] = {}
        self._results: dict[str, ToolResult] = {}

    # ── Messages ────────────────────────────────────────────────────────

    def append_user_message(self, text: str) -> None:
        self._append(Message(role=Role.USER, content=text))

    def begin_assistant_message(self) -> None:
        self._append(Message(role=Role.ASSISTANT))

    def append_system_message(self, text: str) -> None:
        self._append(Message(role=Role.SYSTEM, content=text))

    def append_to_last(self, delta: str) -> None:
        if not self._messages:
            logger.debug("append_to_last with no messages, ignoring %d chars", len(delta))
            return
        last = self._messages[-1]
        last.content += delta

    # ── Tool calls ──────────────────────────────────────────────────────

    def begin_tool_call(
        self,
        tool_call_id: str,
        name: str,
        arguments: str,
        status: ToolCallStatus = ToolCallStatus.EXECUTING,
    ) -> ToolCall:
        """Register a backend tool invocation.

        Calls start executing unless announced as pending. The last message
        keeps a copy of the call as announced when it is an assistant reply,
        which is what lets its result bind back to the turn; later status
        changes live only in the active set. No message is created here.
        """
        if status not in (ToolCallStatus.PENDING, ToolCallStatus.EXECUTING):
            raise ValueError(f"tool call cannot start as {status.value}")
        if tool_call_id in self._active:
            raise DuplicateToolCallError(tool_call_id)

        call = ToolCall(id=tool_call_id, name=name, arguments=arguments, status=status)
        self._active[tool_call_id] = call

        last = self._last()
        if last is not None and last.role is Role.ASSISTANT:
            last.tool_calls.append(call.model_copy())
        return call.model_copy()

    def set_tool_status(self, tool_call_id: str, status: ToolCallStatus) -> bool:
        """Move an active call forward. Regressions are refused."""
        call = self._active.get(tool_call_id)
        if call is None:
            return False
        if not call.can_advance_to(status):
            logger.debug(
                "Ignoring %s -> %s for tool call %s", call.status.value, status.value, tool_call_id
            )
            return False
        call.status = status
        return True

    def record_tool_result(self, result: ToolResult) -> bool:
        """Attach a result to its active call.

        Returns False when the result is dropped: the id is not active, or a
        result for it was already recorded. The call is marked completed
        regardless of ``result.is_error``. A result message is appended only
        if the last message references the call.
        """
        call_id = result.tool_call_id
        if call_id not in self._active:
            logger.debug("Dropping result for inactive tool call %s", call_id)
            return False
        if call_id in self._results:
            logger.debug("Dropping repeated result for tool call %s", call_id)
            return False

        self.set_tool_status(call_id, ToolCallStatus.COMPLETED)
        self._results[call_id] = result

        last = self._last()
        if last is not None and last.references(call_id):
            self._append(Message(role=Role.ASSISTANT, tool_result=result))
        return True

    def clear_active_tool_calls(self) -> None:
        self._active.clear()
        self._results.clear()

    def reset(self) -> None:
        self._messages.clear()
        self.clear_active_tool_calls()

    # ── Read access ─────────────────────────────────────────────────────

    @property
    def last_message(self) -> Message | None:
        last = self._last()
        return last.model_copy(deep=True) if last is not None else None

    @property
    def messages(self) -> list[Message]:
        return [m.model_copy(deep=True) for m in self._messages]

    @property
    def active_tool_calls(self) -> list[ToolCall]:
        return [tc.model_copy() for tc in self._active.values()]

    @property
    def tool_results(self) -> dict[str, ToolResult]:
        return {k: v.model_copy() for k, v in self._results.items()}

    def get_tool_call(self, tool_call_id: str) -> ToolCall | None:
        call = self._active.get(tool_call_id)
        return call.model_copy() if call else None

    def snapshot(self, connected: bool = False) -> SessionSnapshot:
        return SessionSnapshot(
            messages=self.messages,
            active_tool_calls=self.active_tool_calls,
            tool_results=self.tool_results,
            connected=connected,
        )

    def __len__(self) -> int:
        return len(self._messages)

    def _append(self, message: Message) -> None:
        self._messages.append(message)

    def _last(self) -> Message | None:
        return self._messages[-1] if self._messages else None
