"""
Runtime Configuration Module

Provides configuration loading and management for the receipt codec.
"""

from .runtime import (
    CodecConfig,
    LoggingConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "CodecConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
