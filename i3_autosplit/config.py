"""Configuration loader for the i3 autosplit daemon.

Configuration is optional. When the JSON file is absent the built-in defaults
apply; command-line flags override whatever the file provides. The result is
frozen and loaded exactly once at startup.
"""

import json
import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError
from .split_heuristic import TERMINAL_NAMES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path.home() / ".config" / "i3" / "autosplit.json"
DEFAULT_QUEUE_SIZE = 10


class AutosplitConfig(BaseModel):
    """Daemon configuration.

    Example file:
        {
            "terminal_names": ["Alacritty", "foot"],
            "queue_size": 10,
            "socket_path": "/run/user/1000/sway-ipc.sock"
        }
    """

    terminal_names: FrozenSet[str] = Field(
        default=TERMINAL_NAMES, description="Window names treated as terminals"
    )
    queue_size: int = Field(
        DEFAULT_QUEUE_SIZE, ge=1, le=1000, description="Command queue capacity"
    )
    socket_path: Optional[str] = Field(
        None, description="i3/Sway IPC socket (default: discovered by i3ipc)"
    )

    @field_validator("terminal_names")
    @classmethod
    def validate_terminal_names(cls, v: FrozenSet[str]) -> FrozenSet[str]:
        """Terminal names must be non-empty strings, and at least one is required."""
        if not v:
            raise ValueError("terminal_names cannot be empty")
        if any(not name.strip() for name in v):
            raise ValueError("terminal_names cannot contain blank names")
        return v

    def with_overrides(
        self,
        terminal_names: Optional[Iterable[str]] = None,
        queue_size: Optional[int] = None,
        socket_path: Optional[str] = None,
    ) -> "AutosplitConfig":
        """Return a copy with command-line overrides applied (None means keep)."""
        data = self.model_dump()
        if terminal_names:
            data["terminal_names"] = frozenset(terminal_names)
        if queue_size is not None:
            data["queue_size"] = queue_size
        if socket_path is not None:
            data["socket_path"] = socket_path

        try:
            return AutosplitConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid command-line override: {e}", invalid=True) from e

    class Config:
        frozen = True


def load_config(config_file: Path = DEFAULT_CONFIG_FILE) -> AutosplitConfig:
    """Load daemon configuration from a JSON file.

    Args:
        config_file: Path to autosplit.json

    Returns:
        AutosplitConfig (defaults if the file does not exist)

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON, or fails validation
    """
    if not config_file.exists():
        logger.debug(f"Config file not found, using defaults: {config_file}")
        return AutosplitConfig()

    try:
        with open(config_file) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load config: {e}", path=str(config_file)) from e

    if not isinstance(data, dict):
        raise ConfigError(
            "Config root must be a JSON object", path=str(config_file), invalid=True
        )

    try:
        config = AutosplitConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config: {e}", path=str(config_file), invalid=True) from e

    logger.info(f"Loaded config from {config_file}")
    return config
