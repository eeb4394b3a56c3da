"""Converter configuration loading and validation."""

from wpi2svg.configs.loader import (
    ConfigError,
    ConverterConfig,
    DecodeConfig,
    LoggingConfig,
    OutputConfig,
    load_config,
)

__all__ = [
    "ConfigError",
    "ConverterConfig",
    "DecodeConfig",
    "LoggingConfig",
    "OutputConfig",
    "load_config",
]
