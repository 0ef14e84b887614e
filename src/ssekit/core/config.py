"""Session configuration.

Loads from ~/.ssekit/config.yaml with environment variable overrides.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigurationError

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class SessionConfig:
    """Per-session options shared by every connection of a server."""

    heartbeat_interval_ms: int = 5000
    retry_interval_ms: int = 5000
    connect_event_name: str = "sse-connect"
    transform_event_name: str = "sse-data"
    with_message_id: bool = True
    initial_message_id: int = 0  # Resumption seed, usually Last-Event-ID + 1

    CONFIG_FILE: Path = field(
        default_factory=lambda: Path.home() / ".ssekit" / "config.yaml",
        repr=False,
    )

    @classmethod
    def load(cls, config_path: Path | None = None) -> SessionConfig:
        """Load config from file and environment variables.

        Priority (highest wins):
          1. Environment variables (SSEKIT_HEARTBEAT_INTERVAL_MS, etc.)
          2. Config file (~/.ssekit/config.yaml or custom path)
          3. Defaults

        Args:
            config_path: Optional path to a YAML config file.

        Returns:
            Populated SessionConfig instance.
        """
        config = cls()
        file_path = config_path or config.CONFIG_FILE

        if file_path.exists():
            try:
                with open(file_path) as f:
                    data = yaml.safe_load(f) or {}

                config.heartbeat_interval_ms = int(
                    data.get("heartbeat_interval_ms", config.heartbeat_interval_ms)
                )
                config.retry_interval_ms = int(
                    data.get("retry_interval_ms", config.retry_interval_ms)
                )
                config.connect_event_name = str(
                    data.get("connect_event_name", config.connect_event_name)
                )
                config.transform_event_name = str(
                    data.get("transform_event_name", config.transform_event_name)
                )
                config.with_message_id = bool(data.get("with_message_id", config.with_message_id))
            except (yaml.YAMLError, OSError, ValueError, AttributeError):
                pass

        if env_heartbeat := os.environ.get("SSEKIT_HEARTBEAT_INTERVAL_MS"):
            config.heartbeat_interval_ms = int(env_heartbeat)
        if env_retry := os.environ.get("SSEKIT_RETRY_INTERVAL_MS"):
            config.retry_interval_ms = int(env_retry)
        config.connect_event_name = os.environ.get(
            "SSEKIT_CONNECT_EVENT_NAME", config.connect_event_name
        )
        config.transform_event_name = os.environ.get(
            "SSEKIT_TRANSFORM_EVENT_NAME", config.transform_event_name
        )
        if env_with_id := os.environ.get("SSEKIT_WITH_MESSAGE_ID"):
            config.with_message_id = env_with_id.lower() in _TRUE_VALUES

        return config

    def validate(self) -> None:
        """Raise ConfigurationError if any option is out of range."""
        if self.heartbeat_interval_ms <= 0:
            raise ConfigurationError(
                f"heartbeat_interval_ms must be positive, got {self.heartbeat_interval_ms}"
            )
        if self.retry_interval_ms < 0:
            raise ConfigurationError(
                f"retry_interval_ms must not be negative, got {self.retry_interval_ms}"
            )
        if self.initial_message_id < 0:
            raise ConfigurationError(
                f"initial_message_id must not be negative, got {self.initial_message_id}"
            )
        if not self.connect_event_name or not self.transform_event_name:
            raise ConfigurationError("Event names must not be empty")

    def to_dict(self) -> dict:
        data = asdict(self)
        data.pop("CONFIG_FILE")
        return data
