"""Chat command — interactive session against the backend."""

from __future__ import annotations

import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console

from klaudkod import __version__
from klaudkod.cli.render import TranscriptRenderer, status_text
from klaudkod.config import Config
from klaudkod.session.controller import SessionController
from klaudkod.transport.websocket import ReconnectingTransport
from klaudkod.utils.logging import setup_logging

logger = logging.getLogger(__name__)
console = Console()


async def run_chat(
    cfg: Config,
    url_override: str | None = None,
) -> None:
    """Run the interactive chat loop until the user exits."""
    setup_logging(cfg.logging)

    url = url_override or cfg.transport.url
    transport = ReconnectingTransport(
        reconnect_delay=cfg.transport.reconnect_delay,
        open_timeout=cfg.transport.open_timeout,
    )
    controller = SessionController(transport)
    renderer = TranscriptRenderer(
        console,
        max_result_chars=cfg.ui.max_result_chars,
        show_tool_arguments=cfg.ui.show_tool_arguments,
    )
    controller.on_change(renderer.render)

    console.print(f"[bold]klaudkod[/bold] v{__version__} ({url})")
    console.print("Type your message. Use Ctrl+D or /exit to quit, /help for commands.\n")

    history_path = cfg.history_path
    history_path.parent.mkdir(parents=True, exist_ok=True)
    session: PromptSession[str] = PromptSession(history=FileHistory(str(history_path)))

    controller.start(url)
    try:
        with patch_stdout():
            while True:
                try:
                    user_input = await session.prompt_async("> ")
                except (EOFError, KeyboardInterrupt):
                    console.print("\nGoodbye!")
                    break

                user_input = user_input.strip()
                if not user_input:
                    continue
                if user_input.startswith("/"):
                    if not _handle_slash(user_input, controller, url):
                        console.print("Goodbye!")
                        break
                    continue

                await controller.submit(user_input)
    finally:
        await controller.close()


def _handle_slash(command: str, controller: SessionController, url: str) -> bool:
    """Handle in-chat slash commands. Returns False when the user asked to quit."""
    parts = command.split(maxsplit=1)
    cmd = parts[0].lower()

    if cmd == "/help":
        console.print("Available commands:")
        console.print("  /help     - Show this help")
        console.print("  /status   - Show connection status")
        console.print("  /clear    - Start a new conversation")
        console.print("  /exit     - Exit")
    elif cmd == "/status":
        snap = controller.snapshot()
        console.print(status_text(snap.connected))
        console.print(f"  Endpoint: {url}")
        console.print(f"  Messages: {len(snap.messages)}")
        console.print(f"  Active tools: {len(snap.active_tool_calls)}")
    elif cmd == "/clear":
        controller.reset()
        console.print("Conversation cleared.")
    elif cmd in ("/exit", "/quit"):
        return False
    else:
        console.print(f"Unknown command: {cmd}")
    return True
