"""Tests for core data models and wire events."""

import pytest
from pydantic import ValidationError

from klaudkod.models import (
    ChunkEvent,
    DoneEvent,
    ErrorEvent,
    Message,
    PromptEvent,
    Role,
    ToolCall,
    ToolCallEvent,
    ToolCallStatus,
    ToolResult,
    ToolResultEvent,
    parse_event,
)


def test_message_creation():
    msg = Message(role=Role.USER, content="hello")
    assert msg.role == "user"
    assert msg.tool_calls == []
    assert msg.tool_result is None


def test_tool_call_defaults_to_executing():
    tc = ToolCall(id="t1", name="read", arguments='{"path": "a.txt"}')
    assert tc.status is ToolCallStatus.EXECUTING
    assert not tc.is_terminal


def test_tool_call_object_arguments_are_serialised():
    tc = ToolCall(id="t1", name="read", arguments={"path": "a.txt"})
    assert tc.arguments == '{"path": "a.txt"}'


def test_tool_call_status_only_moves_forward():
    tc = ToolCall(id="t1", status=ToolCallStatus.PENDING)
    assert tc.can_advance_to(ToolCallStatus.EXECUTING)
    assert tc.can_advance_to(ToolCallStatus.ERROR)
    tc.status = ToolCallStatus.COMPLETED
    assert tc.is_terminal
    assert not tc.can_advance_to(ToolCallStatus.EXECUTING)
    assert not tc.can_advance_to(ToolCallStatus.ERROR)


def test_tool_result_accepts_camel_and_snake_case():
    camel = ToolResult.model_validate({"toolCallId": "t1", "content": "ok", "isError": True})
    snake = ToolResult.model_validate({"tool_call_id": "t1", "content": "ok", "is_error": True})
    assert camel == snake
    assert camel.is_error is True


def test_parse_chunk():
    event = parse_event({"type": "chunk", "content": "Hel", "isFirst": True})
    assert isinstance(event, ChunkEvent)
    assert event.is_first is True


def test_parse_chunk_is_first_defaults_false():
    event = parse_event({"type": "chunk", "content": "lo"})
    assert event.is_first is False


def test_parse_tool_call():
    event = parse_event(
        {"type": "tool_call", "tool_call": {"id": "t1", "name": "bash", "arguments": "{}"}}
    )
    assert isinstance(event, ToolCallEvent)
    assert event.tool_call.name == "bash"


def test_parse_tool_result():
    event = parse_event(
        {"type": "tool_result", "tool_result": {"toolCallId": "t1", "content": "ok", "isError": False}}
    )
    assert isinstance(event, ToolResultEvent)
    assert event.tool_result.tool_call_id == "t1"


def test_parse_done_and_error():
    assert isinstance(parse_event({"type": "done"}), DoneEvent)
    err = parse_event({"type": "error", "message": "boom"})
    assert isinstance(err, ErrorEvent)
    assert err.message == "boom"


def test_parse_error_field_fallback():
    assert parse_event({"type": "error", "error": "Invalid message format"}).message == (
        "Invalid message format"
    )


def test_parse_unknown_type_rejected():
    with pytest.raises(ValidationError):
        parse_event({"type": "telemetry"})


def test_parse_tool_call_without_id_rejected():
    with pytest.raises(ValidationError):
        parse_event({"type": "tool_call", "tool_call": {"name": "bash"}})


def test_prompt_event_dump():
    assert PromptEvent(content="hi").model_dump() == {"type": "prompt", "content": "hi"}
