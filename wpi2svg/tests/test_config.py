"""Tests for the converter config loader.

Validates that:
    - converter.yaml shipped with the package loads
    - Partial files fall back to defaults per section
    - Invalid values, unknown keys and malformed files raise ConfigError
    - logging_kwargs() maps onto setup_logging() parameters
"""

from __future__ import annotations

from pathlib import Path

import pytest

from wpi2svg.configs.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    ConverterConfig,
    load_config,
)
from wpi2svg.wpi.blocks import HEADER_LENGTH


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> ConverterConfig:
    """Load the default converter.yaml shipped with the package."""
    return load_config()


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "converter.yaml"
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Default config
# ---------------------------------------------------------------------------


class TestDefaultConfig:
    def test_default_file_exists(self) -> None:
        assert DEFAULT_CONFIG_PATH.is_file()

    def test_header_length(self, config: ConverterConfig) -> None:
        assert config.decode.header_length == HEADER_LENGTH

    def test_partial_rendering_enabled(self, config: ConverterConfig) -> None:
        assert config.decode.render_partial is True

    def test_output_suffix(self, config: ConverterConfig) -> None:
        assert config.output.suffix == ".svg"

    def test_frozen(self, config: ConverterConfig) -> None:
        with pytest.raises(Exception):
            config.output = None  # type: ignore[misc]

    def test_logging_kwargs(self, config: ConverterConfig) -> None:
        kwargs = config.logging_kwargs()
        assert kwargs == {
            "log_level": "INFO",
            "log_file": None,
            "json": False,
            "color": True,
        }


# ---------------------------------------------------------------------------
# Custom files
# ---------------------------------------------------------------------------


class TestCustomConfig:
    def test_sections_default_when_omitted(self, tmp_path: Path) -> None:
        cfg = load_config(_write(tmp_path, "decode:\n  render_partial: false\n"))
        assert cfg.decode.render_partial is False
        assert cfg.decode.header_length == HEADER_LENGTH
        assert cfg.logging.level == "INFO"

    def test_level_is_case_insensitive(self, tmp_path: Path) -> None:
        cfg = load_config(_write(tmp_path, "logging:\n  level: debug\n  json: true\n"))
        assert cfg.logging.level == "DEBUG"
        assert cfg.logging.json_format is True

    def test_explicit_path_as_str(self, tmp_path: Path) -> None:
        cfg = load_config(str(_write(tmp_path, "output:\n  suffix: .xml\n")))
        assert cfg.output.suffix == ".xml"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestConfigErrors:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Empty configuration"):
            load_config(_write(tmp_path, ""))

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(_write(tmp_path, "- a\n- b\n"))

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Unreadable"):
            load_config(_write(tmp_path, "decode: [unclosed\n"))

    def test_unknown_level(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="level"):
            load_config(_write(tmp_path, "logging:\n  level: LOUD\n"))

    def test_negative_header_length(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="header_length"):
            load_config(_write(tmp_path, "decode:\n  header_length: -1\n"))

    def test_bad_suffix(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="suffix"):
            load_config(_write(tmp_path, "output:\n  suffix: svg\n"))

    def test_unknown_key(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="stroke_smoothing"):
            load_config(_write(tmp_path, "stroke_smoothing: 3\n"))
