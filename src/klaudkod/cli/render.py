"""Incremental terminal rendering of session snapshots."""

from __future__ import annotations

import json
import logging

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from klaudkod.models import Message, Role, SessionSnapshot, ToolCall, ToolCallStatus, ToolResult

logger = logging.getLogger(__name__)

STATUS_INDICATORS: dict[ToolCallStatus, tuple[str, str]] = {
    ToolCallStatus.PENDING: ("[ ]", "yellow"),
    ToolCallStatus.EXECUTING: ("[*]", "blue"),
    ToolCallStatus.COMPLETED: ("[+]", "green"),
    ToolCallStatus.ERROR: ("[x]", "red"),
}


def format_arguments(arguments: str) -> str:
    """Show a JSON object as ``key=value`` pairs; anything else verbatim."""
    try:
        parsed = json.loads(arguments)
    except (json.JSONDecodeError, TypeError):
        return arguments
    if isinstance(parsed, dict):
        return " ".join(f"{key}={value}" for key, value in parsed.items())
    return arguments


def truncate(text: str, limit: int = 500) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit] + "..."


def status_text(connected: bool) -> Text:
    if connected:
        return Text("● Connected", style="green")
    return Text("○ Disconnected", style="red")


class TranscriptRenderer:
    """Prints only what changed since the previous snapshot.

    Streamed text of the open message is written without a trailing
    newline; block output (tool lines, status) closes the line first.
    User messages are not echoed since the prompt already shows them.
    """

    def __init__(
        self,
        console: Console,
        max_result_chars: int = 500,
        show_tool_arguments: bool = True,
    ):
        self._console = console
        self._max_result_chars = max_result_chars
        self._show_tool_arguments = show_tool_arguments
        self._rendered = 0
        self._chars = 0
        self._header_done = False
        self._line_open = False
        self._seen_calls: set[str] = set()
        self._seen_results: set[str] = set()
        self._connected: bool | None = None

    def render(self, snapshot: SessionSnapshot) -> None:
        if snapshot.connected != self._connected:
            self._connected = snapshot.connected
            self._block(status_text(snapshot.connected))

        messages = snapshot.messages
        if len(messages) < self._rendered:
            self._restart()

        if self._rendered:
            self._render_delta(messages[self._rendered - 1])
        for message in messages[self._rendered:]:
            self._rendered += 1
            self._chars = 0
            self._header_done = False
            self._close_line()
            self._render_delta(message)

        for call in snapshot.active_tool_calls:
            if call.id not in self._seen_calls:
                self._seen_calls.add(call.id)
                self._block(self._tool_call_line(call))

        for call_id, result in snapshot.tool_results.items():
            if call_id not in self._seen_results:
                self._seen_results.add(call_id)
                self._block(self._tool_result_text(result))

        if not snapshot.active_tool_calls:
            self._seen_calls.clear()
            self._seen_results.clear()

    def _render_delta(self, message: Message) -> None:
        if message.role is Role.USER:
            self._chars = len(message.content)
            return

        delta = message.content[self._chars:]
        if not delta:
            return
        self._chars = len(message.content)

        if not self._header_done:
            self._header_done = True
            if message.role is Role.SYSTEM:
                self._block(Text(message.content, style="red"))
                return
            self._close_line()
            self._console.print(Text("Assistant", style="bold green"))

        self._console.print(delta, end="", markup=False, highlight=False)
        self._line_open = not delta.endswith("\n")

    def _tool_call_line(self, call: ToolCall) -> Text:
        indicator, color = STATUS_INDICATORS[call.status]
        line = Text.assemble((indicator, color), " ", (call.name, "bold cyan"))
        if self._show_tool_arguments and call.arguments:
            line.append("  ")
            line.append(format_arguments(call.arguments), style="grey50")
        return line

    def _tool_result_text(self, result: ToolResult) -> Text:
        indicator, color = STATUS_INDICATORS[
            ToolCallStatus.ERROR if result.is_error else ToolCallStatus.COMPLETED
        ]
        body = truncate(result.content, self._max_result_chars)
        return Text.assemble((indicator, color), " ", (body, "red" if result.is_error else ""))

    def _restart(self) -> None:
        self._close_line()
        self._console.print(Rule("new conversation", style="grey50"))
        self._rendered = 0
        self._chars = 0
        self._header_done = False
        self._seen_calls.clear()
        self._seen_results.clear()

    def _block(self, renderable: Text) -> None:
        self._close_line()
        self._console.print(renderable)

    def _close_line(self) -> None:
        if self._line_open:
            self._console.print()
            self._line_open = False
