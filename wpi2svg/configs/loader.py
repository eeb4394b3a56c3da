"""Configuration loader for the converter.

Loads and validates ``converter.yaml`` into a frozen pydantic model.
The config covers the ambient behaviour of a run (logging, how much of
the file header to skip, whether a partially decoded document is still
written, output naming).  Rendering constants are fixed in
``wpi2svg.svg`` and not part of this file.

Usage::

    from wpi2svg.configs.loader import load_config
    cfg = load_config()                          # default path
    cfg = load_config("/custom/converter.yaml")  # explicit path
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wpi2svg.utils.fs import load_yaml
from wpi2svg.wpi.blocks import HEADER_LENGTH
from wpi2svg.wpi.decoder import READ_BUFFER_BYTES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "converter.yaml"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Models -- mirror the YAML structure
# ---------------------------------------------------------------------------


class LoggingConfig(BaseModel):
    """Console / file logging settings (passed to ``setup_logging``)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = Field(None, description="Log file path; null disables file logging")
    json_format: bool = Field(False, alias="json", description="JSON lines in the log file")
    color: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class DecodeConfig(BaseModel):
    """Stream decoding settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    header_length: int = Field(HEADER_LENGTH, ge=0, description="Opaque header bytes to skip")
    render_partial: bool = Field(
        True, description="Write output even when decoding stopped on an error"
    )
    read_buffer_bytes: int = Field(READ_BUFFER_BYTES, ge=1, description="Input read buffer size")


class OutputConfig(BaseModel):
    """Output naming."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    suffix: str = ".svg"

    @field_validator("suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2 or "/" in v:
            raise ValueError(f"suffix must look like '.svg', got {v!r}")
        return v


class ConverterConfig(BaseModel):
    """Top-level converter configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    logging: LoggingConfig = LoggingConfig()
    decode: DecodeConfig = DecodeConfig()
    output: OutputConfig = OutputConfig()

    def logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``setup_logging``."""
        return {
            "log_level": self.logging.level,
            "log_file": self.logging.file,
            "json": self.logging.json_format,
            "color": self.logging.color,
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> ConverterConfig:
    """Load and validate converter configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``converter.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    ConverterConfig
        Validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If the file is empty, not a mapping, or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.debug("Loading configuration from %s", path)

    try:
        data = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Unreadable configuration file {path}: {exc}") from exc

    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration root must be a mapping, got {type(data).__name__}: {path}"
        )

    try:
        return ConverterConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}:\n{exc}") from exc
