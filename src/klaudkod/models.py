"""Core data models for klaudkod."""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, field_validator


# ── Conversation ───────────────────────────────────────────────────────────


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ToolCallStatus(str, Enum):
    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED = "completed"
    ERROR = "error"


# Forward-only ranks; completed and error are both terminal.
_STATUS_RANK = {
    ToolCallStatus.PENDING: 0,
    ToolCallStatus.EXECUTING: 1,
    ToolCallStatus.COMPLETED: 2,
    ToolCallStatus.ERROR: 2,
}


class ToolCall(BaseModel):
    id: str
    name: str = ""
    arguments: str = ""  # raw payload, usually a JSON string
    status: ToolCallStatus = ToolCallStatus.EXECUTING

    @field_validator("arguments", mode="before")
    @classmethod
    def _stringify_arguments(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value

    @property
    def is_terminal(self) -> bool:
        return _STATUS_RANK[self.status] == 2

    def can_advance_to(self, status: ToolCallStatus) -> bool:
        """Whether moving to ``status`` keeps the lifecycle moving forward."""
        return _STATUS_RANK[status] > _STATUS_RANK[self.status]


class ToolResult(BaseModel):
    tool_call_id: str = Field(validation_alias=AliasChoices("toolCallId", "tool_call_id"))
    content: str = ""
    is_error: bool = Field(default=False, validation_alias=AliasChoices("isError", "is_error"))


class Message(BaseModel):
    role: Role
    content: str = ""
    tool_calls: list[ToolCall] = Field(default_factory=list)
    tool_result: ToolResult | None = None

    def references(self, tool_call_id: str) -> bool:
        return any(tc.id == tool_call_id for tc in self.tool_calls)


class SessionSnapshot(BaseModel):
    """Read-only view handed to the rendering layer."""

    messages: list[Message] = Field(default_factory=list)
    active_tool_calls: list[ToolCall] = Field(default_factory=list)
    tool_results: dict[str, ToolResult] = Field(default_factory=dict)
    connected: bool = False


# ── Wire events (backend → client) ─────────────────────────────────────────


class ChunkEvent(BaseModel):
    type: Literal["chunk"] = "chunk"
    content: str = ""
    is_first: bool = Field(default=False, validation_alias=AliasChoices("isFirst", "is_first"))


class ToolCallEvent(BaseModel):
    type: Literal["tool_call"] = "tool_call"
    tool_call: ToolCall


class ToolResultEvent(BaseModel):
    type: Literal["tool_result"] = "tool_result"
    tool_result: ToolResult


class DoneEvent(BaseModel):
    type: Literal["done"] = "done"


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str = Field(default="", validation_alias=AliasChoices("message", "error"))


InboundEvent = Annotated[
    Union[ChunkEvent, ToolCallEvent, ToolResultEvent, DoneEvent, ErrorEvent],
    Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)

INBOUND_EVENT_TYPES = frozenset({"chunk", "tool_call", "tool_result", "done", "error"})


def parse_event(envelope: dict[str, Any]) -> InboundEvent:
    """Validate a decoded envelope into a typed inbound event.

    Raises pydantic.ValidationError for unknown types or malformed payloads.
    """
    return _inbound_adapter.validate_python(envelope)


# ── Wire events (client → backend) ─────────────────────────────────────────


class PromptEvent(BaseModel):
    type: Literal["prompt"] = "prompt"
    content: str
