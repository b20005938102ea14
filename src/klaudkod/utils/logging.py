"""Logging configuration."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from klaudkod.config.models import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the root logger.

    Logs go to stderr unless a file is configured, which keeps them out of
    the streamed transcript.
    """
    if config is None:
        config = LoggingConfig()

    level = getattr(logging, config.level.upper(), logging.WARNING)
    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=level,
        format=config.format,
        datefmt=config.date_format,
        handlers=[handler],
        force=True,  # Override any existing configuration
    )

    # The client library is chatty at DEBUG
    logging.getLogger("websockets").setLevel(max(level, logging.WARNING))
