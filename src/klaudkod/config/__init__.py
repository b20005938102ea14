"""Configuration system for klaudkod."""

from klaudkod.config.models import (
    Config,
    LoggingConfig,
    TransportConfig,
    UIConfig,
)
from klaudkod.config.loader import load_config, save_config

__all__ = [
    "Config",
    "LoggingConfig",
    "TransportConfig",
    "UIConfig",
    "load_config",
    "save_config",
]
