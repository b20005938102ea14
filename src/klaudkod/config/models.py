"""Configuration data models for klaudkod."""

from pathlib import Path

from pydantic import BaseModel, Field


class TransportConfig(BaseModel):
    url: str = "ws://localhost:8080/ws"
    reconnect_delay: float = Field(default=2.0, gt=0)  # seconds
    open_timeout: float = Field(default=10.0, gt=0)


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file: str = ""  # empty = stderr


class UIConfig(BaseModel):
    history_file: str = "~/.klaudkod/history"
    max_result_chars: int = 500
    show_tool_arguments: bool = True


class Config(BaseModel):
    """Root configuration model for klaudkod."""

    transport: TransportConfig = Field(default_factory=TransportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    ui: UIConfig = Field(default_factory=UIConfig)

    @property
    def config_dir(self) -> Path:
        return Path.home() / ".klaudkod"

    @property
    def history_path(self) -> Path:
        return Path(self.ui.history_file).expanduser()
