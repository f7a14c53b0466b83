"""
Runtime Configuration

Central configuration for receipt building and library logging.
Wire constants (separator, version marker, field widths) are not
configurable; see poker_receipts.schemas.versioning.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from poker_receipts.schemas.errors import ConfigError

load_dotenv()

LIBRARY_LOGGER = "poker_receipts"


@dataclass
class CodecConfig:
    """Limits and clock settings applied by the receipt builder."""
    # Replaces the wall clock for self-stamped receipts; not read from the environment
    fixed_timestamp: Optional[int] = None
    # None leaves only the wire field width as the bound
    max_message_bytes: Optional[int] = None
    max_data_bytes: Optional[int] = None

    def __post_init__(self):
        if self.fixed_timestamp is not None and self.fixed_timestamp < 0:
            raise ConfigError("fixed_timestamp must be non-negative", key="fixed_timestamp")
        for key in ("max_message_bytes", "max_data_bytes"):
            value = getattr(self, key)
            if value is not None and value <= 0:
                raise ConfigError(f"{key} must be positive", key=key)


@dataclass
class LoggingConfig:
    """Configuration for the library logger."""
    level: str = "WARNING"
    debug: bool = False

    def __post_init__(self):
        if not isinstance(self.level, str):
            raise ConfigError(f"Log level must be a name, got {self.level!r}", key="level")
        self.level = self.level.upper()
        if not isinstance(logging.getLevelName(self.level), int):
            raise ConfigError(f"Unknown log level: {self.level}", key="level")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the receipt codec.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    codec: CodecConfig = field(default_factory=CodecConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - POKER_RECEIPTS_MAX_MESSAGE_BYTES: Max UTF-8 size of a message receipt
        - POKER_RECEIPTS_MAX_DATA_BYTES: Max size of forwarded call data
        - POKER_RECEIPTS_LOG_LEVEL: Library log level name
        - POKER_RECEIPTS_DEBUG: Enable debug logging (true/false)
        """
        overrides: dict[str, Any] = {}

        for env_var, key in (
            ("POKER_RECEIPTS_MAX_MESSAGE_BYTES", "max_message_bytes"),
            ("POKER_RECEIPTS_MAX_DATA_BYTES", "max_data_bytes"),
        ):
            raw = os.getenv(env_var)
            if raw:
                try:
                    overrides.setdefault("codec", {})[key] = int(raw)
                except ValueError as e:
                    raise ConfigError(f"{env_var} must be an integer, got {raw!r}", key=env_var) from e

        if os.getenv("POKER_RECEIPTS_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("POKER_RECEIPTS_LOG_LEVEL")
        if os.getenv("POKER_RECEIPTS_DEBUG"):
            overrides.setdefault("logging", {})["debug"] = (
                os.getenv("POKER_RECEIPTS_DEBUG", "false").lower() == "true"
            )

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        codec_data = data.get("codec", {})
        logging_data = data.get("logging", {})
        try:
            codec = CodecConfig(**codec_data) if codec_data else CodecConfig()
            log = LoggingConfig(**logging_data) if logging_data else LoggingConfig()
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        return cls(codec=codec, logging=log)

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)

        if "codec" in overrides:
            for key, value in overrides["codec"].items():
                setattr(new_config.codec, key, value)
            new_config.codec.__post_init__()

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)
            new_config.logging.__post_init__()

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "codec": {
                "fixed_timestamp": self.codec.fixed_timestamp,
                "max_message_bytes": self.codec.max_message_bytes,
                "max_data_bytes": self.codec.max_data_bytes,
            },
            "logging": {
                "level": self.logging.level,
                "debug": self.logging.debug,
            },
        }

    def apply_logging(self) -> logging.Logger:
        """Set the library logger level from this configuration."""
        logger = logging.getLogger(LIBRARY_LOGGER)
        logger.setLevel(logging.DEBUG if self.logging.debug else self.logging.level)
        return logger


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set the default runtime configuration (None resets to env-derived defaults)."""
    global _default_config
    _default_config = config
