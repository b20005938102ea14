"""klaudkod CLI — main entry point."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from klaudkod import __version__
from klaudkod.config import Config, load_config
from klaudkod.errors import ConfigError

app = typer.Typer(
    name="klaudkod",
    help="Terminal client for a streaming assistant backend",
    no_args_is_help=True,
)
console = Console()


def _load_config_or_exit(config: str | None) -> Config:
    try:
        return load_config(config)
    except (FileNotFoundError, ConfigError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)


@app.command()
def chat(
    config: str = typer.Option(None, "--config", "-c", help="Path to config file"),
    url: str = typer.Option(
        None, "--url", "-u", envvar="KLAUDKOD_URL", help="Backend WebSocket URL"
    ),
) -> None:
    """Interactive chat with the backend assistant."""
    from klaudkod.cli.chat_cmd import run_chat

    cfg = _load_config_or_exit(config)
    asyncio.run(run_chat(cfg, url_override=url))


@app.command()
def status(
    config: str = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Show klaudkod configuration info."""
    cfg = _load_config_or_exit(config)

    console.print(f"[bold]klaudkod[/bold] v{__version__}")
    console.print(f"  Backend: {cfg.transport.url}")
    console.print(f"  Reconnect delay: {cfg.transport.reconnect_delay}s")
    console.print(f"  Log level: {cfg.logging.level}")
    console.print(f"  History: {cfg.history_path}")


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"klaudkod v{__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
