"""Configuration loading for klaudkod."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from klaudkod.config.models import Config
from klaudkod.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".klaudkod"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"


def load_config(path: Path | str | None = None) -> Config:
    """Load config from ``path``, else the first file found in ~/.klaudkod, else defaults."""
    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return _load_from_file(config_path)

    for candidate in [
        DEFAULT_CONFIG_DIR / "config.yaml",
        DEFAULT_CONFIG_DIR / "config.yml",
        DEFAULT_CONFIG_DIR / "config.json",
    ]:
        if candidate.exists():
            logger.info("Loading config from %s", candidate)
            return _load_from_file(candidate)

    logger.info("No config file found, using defaults")
    return Config()


def _load_from_file(path: Path) -> Config:
    raw = path.read_text(encoding="utf-8")

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(raw) or {}
        elif path.suffix == ".json":
            data = json.loads(raw)
        else:
            raise ConfigError(f"unsupported config format {path.suffix!r}", path=str(path))
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"cannot parse: {exc}", path=str(path)) from exc

    try:
        return Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc), path=str(path)) from exc


def save_config(config: Config, path: Path | None = None) -> None:
    """Save configuration to a YAML file."""
    target = path or DEFAULT_CONFIG_FILE
    target.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(exclude_defaults=True)
    target.write_text(yaml.dump(data, default_flow_style=False), encoding="utf-8")
    logger.info("Config saved to %s", target)
